"""Pooled jurisdictions (read-only reference table)."""
from fastapi import APIRouter, Depends

from stayguard.dependencies import get_jurisdiction_table
from stayguard.routers.errors import engine_errors
from stayguard.schemas.jurisdiction import JurisdictionResponse
from stayguard.services.jurisdictions import Jurisdiction, JurisdictionTable

router = APIRouter(prefix="/jurisdictions", tags=["jurisdictions"])


def _response(j: Jurisdiction) -> JurisdictionResponse:
    return JurisdictionResponse(code=j.code, name=j.name, version=j.version, members=sorted(j.members))


@router.get("/", response_model=list[JurisdictionResponse])
def list_jurisdictions(table: JurisdictionTable = Depends(get_jurisdiction_table)):
    return [_response(j) for j in table]


@router.get("/{code}", response_model=JurisdictionResponse)
def get_jurisdiction(code: str, table: JurisdictionTable = Depends(get_jurisdiction_table)):
    with engine_errors():
        return _response(table.get(code))
