"""
Database configuration and session management for SQLAlchemy.
"""

from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from mindlog.core.config import DATABASE_URL

# Engine & Session
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=_connect_args)
SessionLocal = sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
)

# Declarative Base
Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware default for timestamp columns."""
    return datetime.now(timezone.utc)


# Import all models to register them with the Base metadata
import mindlog.auth.models  # noqa: F401,E402
import mindlog.goals.models  # noqa: F401,E402
import mindlog.journals.models  # noqa: F401,E402
import mindlog.suggestions.models  # noqa: F401,E402


# Dependency for FastAPI Routes
def get_db():
    """
    Yields a database session for use in FastAPI dependency injection.
    Ensures the session is closed after the request lifecycle.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
