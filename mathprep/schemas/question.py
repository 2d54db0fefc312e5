from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel

from mathprep.core.exceptions import InvalidInputError
from mathprep.services.options import build_options

DIFFICULTIES = ("easy", "medium", "hard")
DIFFICULTY_LEVELS = {1: "easy", 2: "medium", 3: "hard"}


def normalize_difficulty(value: Union[int, str, None]) -> Optional[str]:
    """Map 1/2/3 or easy/medium/hard (any case) to the stored label."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid difficulty: {value!r}")
    if isinstance(value, int) or (isinstance(value, str) and value.strip().isdigit()):
        level = int(value)
        if level not in DIFFICULTY_LEVELS:
            raise InvalidInputError(f"Invalid difficulty level: {level}")
        return DIFFICULTY_LEVELS[level]
    label = str(value).strip().lower()
    if label not in DIFFICULTIES:
        raise InvalidInputError(f"Difficulty must be one of: {', '.join(DIFFICULTIES)}")
    return label


class QuestionBase(BaseModel):
    topic: str
    question: str
    correct_answer: str | None = None
    wrong_options: List[str] = []
    difficulty: str | None = None
    question_type: str | None = None
    pattern: str | None = None


class QuestionResponse(QuestionBase):
    id: int
    created_at: datetime | None = None
    options: List[str] = []

    class Config:
        from_attributes = True

    @classmethod
    def from_model(cls, question) -> "QuestionResponse":
        response = cls.model_validate(question)
        response.options = build_options(response.correct_answer, response.wrong_options)
        return response


class UploadResponse(BaseModel):
    id: int
    message: str


class TopicStats(BaseModel):
    topic: str
    question_count: int
    difficulties: List[str]
