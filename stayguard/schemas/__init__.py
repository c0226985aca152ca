from stayguard.schemas.stay import StayRecordIn
from stayguard.schemas.compliance import (
    ComplianceRequest, ComplianceResultResponse, FutureTripRequest, FutureTripResponse,
    OverstayRequest, OverstayWarningResponse, OverstaySummaryResponse, OverstayReportResponse,
    TripOverstayRequest, TripOverstayPredictionResponse, AlertsRequest, AlertResponse,
)
from stayguard.schemas.jurisdiction import JurisdictionResponse
