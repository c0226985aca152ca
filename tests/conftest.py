import os

# Settings are cached on first use; point them at SQLite and keep the scheduler off before any import.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("COMPLIANCE_CRON_ENABLED", "false")

from datetime import date, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from stayguard.database import Base
from stayguard.models import StayRecordRow  # noqa: F401
from stayguard.services.intervals import StayRecord


def rec(rid, country, entry, exit=None, **kw) -> StayRecord:
    return StayRecord(id=str(rid), country=country, entry_date=entry, exit_date=exit, **kw)


def days(n: int) -> timedelta:
    return timedelta(days=n)


REF = date(2024, 6, 1)


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = Session()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()
