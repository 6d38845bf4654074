"""Geolocation router - location tracking and jurisdiction checks."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from securebond.core.deps import get_current_session, get_db, require_csrf_header, resolve_client_scope
from securebond.db.enums import CheckInSource
from securebond.schemas.auth import UserSession
from securebond.services import check_in_service, client_service, geolocation_service

router = APIRouter(prefix="/api/geolocation", tags=["geolocation"])


# =============================================================================
# Schemas
# =============================================================================

class TrackRequest(BaseModel):
    """
    A GPS fix (latitude/longitude) or a cell tower (mcc/mnc/lac/cid).
    """
    client_id: UUID | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    mcc: int | None = Field(None, ge=0)
    mnc: int | None = Field(None, ge=0)
    lac: int | None = Field(None, ge=0)
    cid: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def check_source(self):
        has_gps = self.latitude is not None and self.longitude is not None
        has_cell = None not in (self.mcc, self.mnc, self.lac, self.cid)
        if not has_gps and not has_cell:
            raise ValueError("Provide latitude and longitude, or mcc, mnc, lac and cid")
        return self


class TrackingResult(BaseModel):
    client_id: UUID
    latitude: float
    longitude: float
    accuracy: float | None
    address: str
    timestamp: datetime
    within_jurisdiction: bool
    source: CheckInSource


class ValidateRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class ValidateResult(BaseModel):
    latitude: float
    longitude: float
    within_jurisdiction: bool
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float


def _record_position(db: Session, client, location) -> dict:
    bounds = geolocation_service.get_jurisdiction_bounds(db)
    result = geolocation_service.build_tracking_result(client.id, location, bounds)
    if not result["within_jurisdiction"]:
        check_in_service.flag_jurisdiction_violation(db, client, location.latitude, location.longitude)
    return result


# =============================================================================
# Endpoints
# =============================================================================

@router.post(
    "/track",
    response_model=TrackingResult,
    dependencies=[Depends(require_csrf_header)],
)
async def track_location(
    data: TrackRequest,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """
    Resolve a client's position and check it against the jurisdiction.

    A position outside the bounding box raises a jurisdiction alert.
    """
    client_id = resolve_client_scope(session, data.client_id)
    client = await run_in_threadpool(client_service.get_client, db, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")

    if data.latitude is not None and data.longitude is not None:
        location = geolocation_service.location_from_gps(data.latitude, data.longitude)
    else:
        try:
            location = await geolocation_service.lookup_cell_tower(data.mcc, data.mnc, data.lac, data.cid)
        except geolocation_service.GeolocationError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)

    return await run_in_threadpool(_record_position, db, client, location)


@router.post("/validate", response_model=ValidateResult)
def validate_location(
    data: ValidateRequest,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Check coordinates against the jurisdiction without recording anything."""
    bounds = geolocation_service.get_jurisdiction_bounds(db)
    return ValidateResult(
        latitude=data.latitude,
        longitude=data.longitude,
        within_jurisdiction=bounds.contains(data.latitude, data.longitude),
        min_latitude=bounds.min_latitude,
        max_latitude=bounds.max_latitude,
        min_longitude=bounds.min_longitude,
        max_longitude=bounds.max_longitude,
    )
