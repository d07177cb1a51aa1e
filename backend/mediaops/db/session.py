# backend/mediaops/db/session.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from mediaops.core.config import settings

engine = create_engine(settings.database_url, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    FastAPI dependency.
    Do not wrap with `@contextmanager`; FastAPI drives the generator itself.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
