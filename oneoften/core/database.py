from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from oneoften.core.config import settings

_engine_kwargs = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # Sync routes run in FastAPI's threadpool, so connections cross threads.
    _engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(settings.DATABASE_URL, **_engine_kwargs)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db():
    """One session per request; the ledger store commits inside it."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
