from typing import Optional, Union

from pydantic import BaseModel, Field


class GenerateQuizRequest(BaseModel):
    topic: Optional[str] = None
    num_questions: int = Field(5, alias="numQuestions")
    difficulty: Optional[Union[int, str]] = None
    # older clients send "source" instead of "mode"
    mode: Optional[str] = None
    source: Optional[str] = None

    class Config:
        populate_by_name = True

    @property
    def selected_mode(self) -> str:
        return self.mode or self.source or "auto"
