import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from mathprep.api.routes import api_router
from mathprep.core.config import Settings, get_settings
from mathprep.core.exceptions import QuizAppError
from mathprep.core.logging import setup_logging
from mathprep.db.session import build_engine, build_session_factory, init_db
from mathprep.services.gemini import GeminiClient
from mathprep.services.quiz_generator import QuestionGenerator

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    generator: Optional[QuestionGenerator] = None,
    engine: Optional[Engine] = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    engine = engine or build_engine(settings.DATABASE_URL)
    init_db(engine)

    if generator is None:
        generator = QuestionGenerator(
            GeminiClient(settings.GEMINI_API_KEY, settings.GEMINI_MODEL, settings.GEMINI_TEMPERATURE)
        )

    app = FastAPI(title="MathPrep Quiz API", version="1.0.0")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.generator = generator

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(QuizAppError)
    async def quiz_app_error_handler(request: Request, exc: QuizAppError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        body = {"error": exc.message}
        if exc.details is not None and not settings.is_production:
            body["details"] = exc.details
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning("%s %s rejected: invalid request", request.method, request.url.path)
        body = {"error": "Invalid request"}
        if not settings.is_production:
            body["details"] = [
                {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
                for err in exc.errors()
            ]
        return JSONResponse(status_code=400, content=body)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        body = {"error": "Database error"}
        if not settings.is_production:
            body["details"] = str(exc)
        return JSONResponse(status_code=500, content=body)

    app.include_router(api_router)

    @app.get("/")
    def root():
        return {"message": "Welcome to the MathPrep Quiz API"}

    @app.get("/health")
    def health():
        with app.state.session_factory() as s:
            s.execute(text("SELECT 1"))
        return {"ok": True}

    logger.info("MathPrep API ready (environment=%s, cors=%s)", settings.ENVIRONMENT, settings.FRONTEND_URL)
    return app


def run() -> None:
    """Console entry point; refuses to start without GEMINI_API_KEY."""
    try:
        settings = get_settings()
    except ValidationError as e:
        setup_logging()
        logger.critical("Invalid configuration, is GEMINI_API_KEY set?\n%s", e)
        sys.exit(1)

    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
