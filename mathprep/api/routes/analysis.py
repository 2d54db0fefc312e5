from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mathprep.api.deps import get_db
from mathprep.schemas.analysis import AnalysisResponse, AnalyzeRequest, TopicPerformance
from mathprep.services import feedback

router = APIRouter(tags=["Analysis"])


@router.post("/analyze", response_model=AnalysisResponse)
def analyze(payload: AnalyzeRequest, db: Session = Depends(get_db)):
    return feedback.analyze_wrong_questions(db, payload.wrong_questions)


@router.get("/performance-stats", response_model=List[TopicPerformance])
def performance_stats(db: Session = Depends(get_db)):
    return feedback.performance_stats(db)
