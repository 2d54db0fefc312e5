import logging
import os
import time
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from mathprep.api.deps import get_db, get_generator, get_settings, get_text_extractor
from mathprep.core.config import Settings
from mathprep.crud import crud_question
from mathprep.schemas.question import QuestionResponse, UploadResponse, normalize_difficulty
from mathprep.services.quiz_generator import QuestionGenerator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Questions"])


def _save_upload(image: UploadFile, settings: Settings) -> Path:
    if image.content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail="Invalid file type")

    data = image.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="Image too large")

    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / f"{int(time.time() * 1000)}-{os.path.basename(image.filename or 'upload')}"
    path.write_bytes(data)
    return path


@router.post("/upload", response_model=UploadResponse)
def upload_question(
    topic: Optional[str] = Form(None),
    question: Optional[str] = Form(None),
    difficulty: Optional[str] = Form(None),
    generate_options: bool = Form(True),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    generator: QuestionGenerator = Depends(get_generator),
    settings: Settings = Depends(get_settings),
    extract_text=Depends(get_text_extractor),
):
    """Store a question typed in or OCRed from an image."""
    topic = (topic or "").strip()
    if not topic:
        raise HTTPException(status_code=400, detail="Question text and topic are required")
    difficulty = normalize_difficulty(difficulty)

    question_text = question
    if image is not None and image.filename:
        path = _save_upload(image, settings)
        try:
            question_text = extract_text(str(path)) or question
        finally:
            path.unlink(missing_ok=True)

    question_text = (question_text or "").strip()
    if not question_text:
        raise HTTPException(status_code=400, detail="Question text and topic are required")

    row = {
        "topic": topic,
        "question": question_text,
        "difficulty": difficulty,
    }
    if generate_options:
        completed = generator.complete_question(question_text, topic)
        row.update(
            correct_answer=completed.correct_answer,
            wrong_options=completed.wrong_options,
            pattern=completed.pattern,
        )

    saved = crud_question.create_question(db, row)
    return UploadResponse(id=saved.id, message="Question uploaded successfully")


@router.get("/questions/{topic}", response_model=List[QuestionResponse])
def questions_by_topic(topic: str, db: Session = Depends(get_db)):
    return [QuestionResponse.from_model(q) for q in crud_question.get_questions_by_topic(db, topic)]
