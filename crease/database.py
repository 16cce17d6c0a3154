from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from crease.config import settings

DATABASE_URL = f"sqlite:///{settings.DATABASE_PATH}"

engine = create_engine(DATABASE_URL, echo=False)
SessionLocal = sessionmaker(bind=engine)


class Base(DeclarativeBase):
    pass


def init_db():
    """Create all tables"""
    from crease.models import match  # noqa
    Base.metadata.create_all(bind=engine)


def get_session():
    """Get a database session - for direct use (caller must close)"""
    return SessionLocal()


def get_db():
    """FastAPI dependency - yields session and closes after request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
