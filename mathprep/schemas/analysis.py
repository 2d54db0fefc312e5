from typing import Any, Dict, List

from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    # validated by hand so a non-array answers 400 like the other input errors
    wrong_questions: Any = Field(None, alias="wrongQuestions")

    class Config:
        populate_by_name = True


class AnalysisResponse(BaseModel):
    totalQuestions: int
    topicBreakdown: Dict[str, int]
    patternBreakdown: Dict[str, int]
    recommendedTopics: List[str]


class TopicPerformance(BaseModel):
    topic: str
    attempts: int
    correct: int
    accuracy: float
