"""Shared dependencies: DB session, rule constants, jurisdiction table."""
from fastapi import Depends, HTTPException

from stayguard.config import Settings, get_settings
from stayguard.services.errors import ValidationError
from stayguard.services.jurisdictions import JurisdictionTable
from stayguard.services.rules import ComplianceRules


def get_rules(settings: Settings = Depends(get_settings)) -> ComplianceRules:
    try:
        return ComplianceRules.from_settings(settings)
    except ValueError as e:
        raise HTTPException(status_code=500, detail=f"Invalid rule configuration: {e}")


def get_jurisdiction_table(settings: Settings = Depends(get_settings)) -> JurisdictionTable:
    """Reference table for pooled jurisdictions. Override this dependency to inject another version."""
    try:
        return JurisdictionTable.default(settings.schengen_version or None)
    except ValidationError as e:
        raise HTTPException(status_code=500, detail=e.message)
