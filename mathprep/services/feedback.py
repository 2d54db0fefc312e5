from typing import Dict, List

from sqlalchemy.orm import Session

from mathprep.core.exceptions import InvalidInputError
from mathprep.crud import crud_progress

UNKNOWN_TOPIC = "Unknown"


def rank_topics(breakdown: Dict[str, int]) -> List[str]:
    # sorted() is stable, so ties keep first-seen order
    return [topic for topic, _ in sorted(breakdown.items(), key=lambda kv: kv[1], reverse=True)]


def _check_item(index: int, q: dict) -> None:
    for key in ("topic", "pattern"):
        if q.get(key) is not None and not isinstance(q[key], str):
            raise InvalidInputError(f"wrongQuestions[{index}].{key} must be a string")
    qid = q.get("id")
    # bool is an int subclass
    if qid is not None and (isinstance(qid, bool) or not isinstance(qid, int)):
        raise InvalidInputError(f"wrongQuestions[{index}].id must be an integer")


def analyze_wrong_questions(db: Session, wrong_questions) -> dict:
    if not isinstance(wrong_questions, list):
        raise InvalidInputError("Wrong questions must be an array")
    if not all(isinstance(q, dict) for q in wrong_questions):
        raise InvalidInputError("Each wrong question must be an object")
    for index, q in enumerate(wrong_questions):
        _check_item(index, q)

    topic_breakdown: Dict[str, int] = {}
    pattern_breakdown: Dict[str, int] = {}
    for q in wrong_questions:
        topic = q.get("topic") or UNKNOWN_TOPIC
        topic_breakdown[topic] = topic_breakdown.get(topic, 0) + 1
        if q.get("pattern"):
            pattern_breakdown[q["pattern"]] = pattern_breakdown.get(q["pattern"], 0) + 1

    crud_progress.record_attempts(
        db, [q["id"] for q in wrong_questions if q.get("id") is not None], correct=False
    )

    return {
        "totalQuestions": len(wrong_questions),
        "topicBreakdown": topic_breakdown,
        "patternBreakdown": pattern_breakdown,
        "recommendedTopics": rank_topics(topic_breakdown),
    }


def performance_stats(db: Session) -> List[dict]:
    return crud_progress.get_performance_stats(db)
