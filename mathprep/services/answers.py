import logging
from typing import Optional

from sqlalchemy.orm import Session

from mathprep.core.exceptions import InvalidInputError, QuestionNotFoundError
from mathprep.crud import crud_progress, crud_question
from mathprep.schemas.question import QuestionResponse
from mathprep.services.options import answers_match
from mathprep.services.quiz_generator import QuestionGenerator

logger = logging.getLogger(__name__)


def submit_answer(
    db: Session,
    generator: QuestionGenerator,
    question_id: int,
    user_answer: Optional[str] = None,
    is_correct: Optional[bool] = None,
    similar_on_wrong: bool = True,
) -> dict:
    """Log the attempt; a wrong answer earns one persisted paraphrase."""
    question = crud_question.get_question(db, question_id)
    if question is None:
        raise QuestionNotFoundError(f"Question {question_id} not found")

    if is_correct is None:
        if user_answer is None:
            raise InvalidInputError("userAnswer or isCorrect is required")
        is_correct = answers_match(user_answer, question.correct_answer)

    crud_progress.record_attempt(db, question.id, is_correct)

    if is_correct or not similar_on_wrong:
        return {"isCorrect": is_correct}

    similar = generator.generate_similar(question.question, question.topic, question.difficulty)
    saved = crud_question.create_question(
        db,
        {
            "topic": question.topic,
            "question": similar.question,
            "correct_answer": similar.correct_answer,
            "wrong_options": similar.wrong_options,
            "difficulty": question.difficulty,
            "pattern": similar.pattern or question.pattern,
        },
    )
    logger.info("Question %s missed; served similar question %s", question.id, saved.id)
    return {
        "isCorrect": False,
        "similarQuestion": QuestionResponse.from_model(saved).model_dump(mode="json"),
    }
