import logging
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from mathprep.core.exceptions import InvalidInputError
from mathprep.crud import crud_question
from mathprep.db.models import Question
from mathprep.schemas.question import normalize_difficulty
from mathprep.services.quiz_generator import GeneratedQuestion, QuestionGenerator

logger = logging.getLogger(__name__)

DATABASE = "database"
GENERATOR = "generator"
AUTO = "auto"

MODE_ALIASES = {
    "database": DATABASE,
    "db": DATABASE,
    "generator": GENERATOR,
    "gemini": GENERATOR,
    "auto": AUTO,
}

MAX_QUESTIONS = 50


def resolve_mode(mode: Optional[str]) -> str:
    key = (mode or AUTO).strip().lower()
    if key not in MODE_ALIASES:
        raise InvalidInputError(f"Unknown mode: {mode!r}. Use database, generator or auto")
    return MODE_ALIASES[key]


def to_question_row(generated: GeneratedQuestion, topic: str, difficulty: Optional[str]) -> dict:
    return {
        "topic": topic,
        "question": generated.question,
        "correct_answer": generated.correct_answer,
        "wrong_options": generated.wrong_options,
        "difficulty": difficulty or "medium",
        "pattern": generated.pattern,
    }


def select_questions(
    db: Session,
    generator: QuestionGenerator,
    topic: Optional[str],
    count: int = 5,
    difficulty: Union[int, str, None] = None,
    mode: Optional[str] = AUTO,
) -> List[Question]:
    """
    Serve stored questions, freshly generated ones, or both.

    database  -> stored only, never calls the generator
    generator -> `count` generated questions, persisted
    auto      -> stored first, the shortfall generated and persisted
    """
    topic = (topic or "").strip()
    if not topic:
        raise InvalidInputError("Topic is required")
    if not 1 <= count <= MAX_QUESTIONS:
        raise InvalidInputError(f"numQuestions must be between 1 and {MAX_QUESTIONS}")
    mode = resolve_mode(mode)
    difficulty = normalize_difficulty(difficulty)

    stored: List[Question] = []
    if mode in (DATABASE, AUTO):
        stored = crud_question.get_random_questions(db, topic, count, difficulty)
        logger.info("Found %d stored question(s) for %r (mode=%s)", len(stored), topic, mode)
    if mode == DATABASE:
        return stored

    needed = count - len(stored)
    if needed <= 0:
        return stored

    generated = generator.generate_questions(topic, needed, difficulty or "medium")[:needed]
    if len(generated) < needed:
        logger.warning("Generator returned %d of %d question(s) for %r", len(generated), needed, topic)
    saved = crud_question.create_questions(
        db, [to_question_row(g, topic, difficulty) for g in generated]
    )
    return stored + saved
