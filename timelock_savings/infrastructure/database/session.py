"""Database engine, session factory and schema bootstrap for the storage table"""

from typing import Any, Dict, Generator
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from timelock_savings.config import settings
from timelock_savings.infrastructure.database.models import Base


def engine_options(database_url: str) -> Dict[str, Any]:
    """Pooling for server databases; SQLite files are shared across request threads"""
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": 10,
        "max_overflow": 10,
        "pool_recycle": 3600,
    }


engine = create_engine(settings.database_url, **engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create the storage table if it does not exist yet"""
    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """One session per request; the lifecycle controller commits or rolls it back"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
