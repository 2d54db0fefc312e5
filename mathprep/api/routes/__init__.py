from fastapi import APIRouter

from .analysis import router as analysis
from .questions import router as questions
from .quiz import router as quiz
from .topics import router as topics

api_router = APIRouter()

api_router.include_router(topics)
api_router.include_router(questions)
api_router.include_router(quiz)
api_router.include_router(analysis)
