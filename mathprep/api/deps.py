from functools import partial

from fastapi import Request

from mathprep.core.config import Settings
from mathprep.db.session import get_db  # noqa: F401  (re-exported for routers)
from mathprep.services import ocr
from mathprep.services.quiz_generator import QuestionGenerator


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_generator(request: Request) -> QuestionGenerator:
    return request.app.state.generator


def get_text_extractor(request: Request):
    return partial(ocr.extract_text, language=request.app.state.settings.OCR_LANGUAGE)
