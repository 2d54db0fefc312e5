import logging
from typing import Dict, List, Optional

from sqlalchemy import desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mathprep.core.exceptions import StorageError
from mathprep.db.models import Question

logger = logging.getLogger(__name__)


def _build_question(question_data: dict) -> Question:
    return Question(
        topic=question_data["topic"],
        question=question_data["question"],
        correct_answer=question_data.get("correct_answer"),
        wrong_options=list(question_data.get("wrong_options") or []),
        difficulty=question_data.get("difficulty") or "medium",
        question_type=question_data.get("question_type") or "mcq",
        pattern=question_data.get("pattern"),
    )


def create_questions(db: Session, questions_data: List[dict]) -> List[Question]:
    """Insert a batch in one commit; either every row lands or none does."""
    questions = [_build_question(q) for q in questions_data]
    try:
        db.add_all(questions)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("Failed to store questions in database", details=str(e)) from e

    for question in questions:
        db.refresh(question)
    logger.info("Stored %d question(s): ids=%s", len(questions), [q.id for q in questions])
    return questions


def create_question(db: Session, question_data: dict) -> Question:
    return create_questions(db, [question_data])[0]


def get_question(db: Session, question_id: int) -> Optional[Question]:
    return db.get(Question, question_id)


def get_random_questions(
    db: Session, topic: str, limit: int, difficulty: Optional[str] = None
) -> List[Question]:
    query = db.query(Question).filter(Question.topic == topic)
    if difficulty:
        query = query.filter(Question.difficulty == difficulty)
    return query.order_by(func.random()).limit(limit).all()


def get_questions_by_topic(db: Session, topic: str) -> List[Question]:
    return (
        db.query(Question)
        .filter(Question.topic == topic)
        .order_by(desc(Question.created_at), desc(Question.id))
        .all()
    )


def get_topics(db: Session) -> List[str]:
    rows = db.query(Question.topic).distinct().order_by(Question.topic).all()
    return [topic for (topic,) in rows]


def get_topic_stats(db: Session) -> List[Dict]:
    rows = (
        db.query(Question.topic, Question.difficulty, func.count(Question.id))
        .group_by(Question.topic, Question.difficulty)
        .order_by(Question.topic)
        .all()
    )

    stats: Dict[str, Dict] = {}
    for topic, difficulty, count in rows:
        entry = stats.setdefault(topic, {"topic": topic, "question_count": 0, "difficulties": []})
        entry["question_count"] += count
        if difficulty and difficulty not in entry["difficulties"]:
            entry["difficulties"].append(difficulty)
    return list(stats.values())
