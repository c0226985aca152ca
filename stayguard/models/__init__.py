"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table.
"""
from stayguard.models.stay_record import StayRecordRow

__all__ = [
    "StayRecordRow",
]
