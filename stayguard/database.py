"""
Database connection and session.

Schema source of truth: stayguard.models. On startup, Base.metadata.create_all(bind=engine)
creates the tables. The compliance engine only reads stay records; writes belong to
the record-keeping service that owns the data.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from stayguard.config import get_settings

settings = get_settings()
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
