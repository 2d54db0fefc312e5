from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from mathprep.api.deps import get_db, get_generator, get_settings
from mathprep.core.config import Settings
from mathprep.schemas.question import QuestionResponse
from mathprep.schemas.quiz import GenerateQuizRequest
from mathprep.schemas.user_answer import SubmitAnswerRequest
from mathprep.services import answers, question_source
from mathprep.services.quiz_generator import QuestionGenerator

router = APIRouter(tags=["Quiz"])


@router.post("/generate-quiz", response_model=List[QuestionResponse])
def generate_quiz(
    payload: GenerateQuizRequest,
    db: Session = Depends(get_db),
    generator: QuestionGenerator = Depends(get_generator),
):
    if not payload.topic or not payload.topic.strip():
        raise HTTPException(status_code=400, detail="Topic is required")

    questions = question_source.select_questions(
        db,
        generator,
        topic=payload.topic,
        count=payload.num_questions,
        difficulty=payload.difficulty,
        mode=payload.selected_mode,
    )
    return [QuestionResponse.from_model(q) for q in questions]


@router.post("/submit-answer")
def submit_answer(
    payload: SubmitAnswerRequest,
    db: Session = Depends(get_db),
    generator: QuestionGenerator = Depends(get_generator),
    settings: Settings = Depends(get_settings),
):
    return answers.submit_answer(
        db,
        generator,
        question_id=payload.question_id,
        user_answer=payload.user_answer,
        is_correct=payload.is_correct,
        similar_on_wrong=settings.SIMILAR_ON_WRONG,
    )
