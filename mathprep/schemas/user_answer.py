from typing import Optional

from pydantic import BaseModel, Field


class SubmitAnswerRequest(BaseModel):
    question_id: int = Field(..., alias="questionId")
    user_answer: Optional[str] = Field(None, alias="userAnswer")
    is_correct: Optional[bool] = Field(None, alias="isCorrect")

    class Config:
        populate_by_name = True
