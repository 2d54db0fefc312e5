import logging

import pytesseract
from PIL import Image

from mathprep.core.exceptions import QuizAppError

logger = logging.getLogger(__name__)


def extract_text(path: str, language: str = "eng") -> str:
    """OCR an image file and return its trimmed text."""
    try:
        with Image.open(path) as image:
            text = pytesseract.image_to_string(image, lang=language)
    except (OSError, pytesseract.TesseractError) as e:
        logger.error("OCR failed for %s: %s", path, e)
        raise QuizAppError("Failed to read text from image", details=str(e)) from e

    logger.info("OCR extracted %d chars from %s", len(text.strip()), path)
    return text.strip()
