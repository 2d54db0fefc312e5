from typing import Dict, Iterable, List, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mathprep.core.exceptions import StorageError
from mathprep.db.models import Question, UserProgress


def record_attempts(db: Session, question_ids: Iterable[Optional[int]], correct: bool) -> List[UserProgress]:
    attempts = [UserProgress(question_id=qid, correct=correct) for qid in question_ids]
    if not attempts:
        return []
    try:
        db.add_all(attempts)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("Failed to record attempt", details=str(e)) from e
    return attempts


def record_attempt(db: Session, question_id: int, correct: bool) -> UserProgress:
    return record_attempts(db, [question_id], correct)[0]


def get_performance_stats(db: Session) -> List[Dict]:
    correct_count = func.sum(case((UserProgress.correct.is_(True), 1), else_=0))
    rows = (
        db.query(Question.topic, func.count(UserProgress.id), correct_count)
        .select_from(UserProgress)
        .join(Question, UserProgress.question_id == Question.id)
        .group_by(Question.topic)
        .order_by(Question.topic)
        .all()
    )
    return [
        {
            "topic": topic,
            "attempts": attempts,
            "correct": int(correct or 0),
            "accuracy": round((correct or 0) / attempts * 100, 2) if attempts else 0.0,
        }
        for topic, attempts, correct in rows
    ]
