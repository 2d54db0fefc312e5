from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mathprep.api.deps import get_db
from mathprep.crud import crud_question
from mathprep.schemas.question import TopicStats

router = APIRouter(tags=["Topics"])


@router.get("/topics", response_model=List[str])
def list_topics(db: Session = Depends(get_db)):
    return crud_question.get_topics(db)


@router.get("/topic-stats", response_model=List[TopicStats])
def topic_stats(db: Session = Depends(get_db)):
    return crud_question.get_topic_stats(db)
