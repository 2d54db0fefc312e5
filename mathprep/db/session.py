import logging

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mathprep.db.base import Base

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """Create the engine for DATABASE_URL; SQLite gets thread-sharing enabled."""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # in-memory databases vanish per connection unless the pool keeps one
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, future=True, **kwargs)

    return create_engine(database_url, future=True, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


def init_db(engine: Engine) -> None:
    """Ping the database, then create tables if missing."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))

    import mathprep.db.models  # noqa: F401  (register tables)

    Base.metadata.create_all(bind=engine)
    logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
