from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from complaint_desk.core.config import settings
from complaint_desk.db.base import Base

# Created on first use so importing the app never opens a connection
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        db_url = settings.DATABASE_URL
        if db_url.startswith("sqlite"):
            _engine = create_engine(
                db_url,
                echo=settings.DB_ECHO,
                connect_args={"check_same_thread": False},
            )
        else:
            _engine = create_engine(
                db_url,
                echo=settings.DB_ECHO,
                pool_pre_ping=True,
            )
    return _engine


def SessionLocal() -> Session:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), autocommit=False, autoflush=False)
    return _session_factory()


def get_db() -> Generator[Session, None, None]:
    """One session per request, always closed"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Optional[Engine] = None) -> None:
    """Create all tables directly (development and tests; use alembic elsewhere)"""
    import complaint_desk.models  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())
