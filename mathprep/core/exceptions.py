from typing import Any, Optional


class QuizAppError(Exception):
    """Base error; the app-level handler turns it into a JSON body."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class InvalidInputError(QuizAppError):
    status_code = 400


class QuestionNotFoundError(QuizAppError):
    status_code = 404


class GeneratorError(QuizAppError):
    """Gemini call failed or its reply could not be parsed."""


class StorageError(QuizAppError):
    pass


class SessionStateError(QuizAppError):
    status_code = 409
