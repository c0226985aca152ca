"""Stored stay records (read by the compliance engine, one row per stay or visa entry)."""
from sqlalchemy import Column, Integer, String, Date, DateTime, Text
from sqlalchemy.sql import func
from stayguard.database import Base


class StayRecordRow(Base):
    __tablename__ = "stay_records"

    id = Column(Integer, primary_key=True, index=True)
    traveler_id = Column(String(64), nullable=False, index=True)

    country = Column(String(2), nullable=False)  # ISO-3166 alpha-2
    entry_date = Column(Date, nullable=False)
    exit_date = Column(Date, nullable=True)  # NULL = still in country

    visa_type = Column(String(64), nullable=True)
    max_stay_days = Column(Integer, nullable=True)
    expiry_date = Column(Date, nullable=True)  # document (visa/permit) expiry
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
