"""Jurisdiction reference table schemas."""
from pydantic import BaseModel


class JurisdictionResponse(BaseModel):
    code: str
    name: str
    version: str
    members: list[str]

    class Config:
        from_attributes = True
