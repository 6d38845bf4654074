"""
Geolocation and jurisdiction checks.

Cell-tower positions come from the RapidAPI cell-id service; GPS
positions are taken as reported. Jurisdiction is an inclusive
latitude/longitude bounding box.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

import httpx
from sqlalchemy.orm import Session

from securebond.core.config import settings
from securebond.db.enums import CheckInSource
from securebond.services import company_service
from securebond.services.http_service import request_with_retries

logger = logging.getLogger(__name__)

# Reported accuracy (meters) for device GPS fixes
GPS_ACCURACY_METERS = 10.0


class GeolocationError(Exception):
    """Lookup failure, carrying the HTTP status the API should answer with."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class JurisdictionBounds:
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    def contains(self, latitude: float, longitude: float) -> bool:
        return (
            self.min_latitude <= latitude <= self.max_latitude
            and self.min_longitude <= longitude <= self.max_longitude
        )


@dataclass
class LocationResult:
    latitude: float
    longitude: float
    accuracy: float | None
    address: str
    source: CheckInSource


DEFAULT_BOUNDS = JurisdictionBounds(
    min_latitude=settings.JURISDICTION_MIN_LATITUDE,
    max_latitude=settings.JURISDICTION_MAX_LATITUDE,
    min_longitude=settings.JURISDICTION_MIN_LONGITUDE,
    max_longitude=settings.JURISDICTION_MAX_LONGITUDE,
)


def get_jurisdiction_bounds(db: Session | None = None) -> JurisdictionBounds:
    """Company-configured bounds when fully set, otherwise the defaults."""
    if db is None:
        return DEFAULT_BOUNDS
    config = company_service.get_configuration(db)
    if not config:
        return DEFAULT_BOUNDS
    values = (
        config.jurisdiction_min_latitude,
        config.jurisdiction_max_latitude,
        config.jurisdiction_min_longitude,
        config.jurisdiction_max_longitude,
    )
    if any(v is None for v in values):
        return DEFAULT_BOUNDS
    return JurisdictionBounds(*values)


def is_within_jurisdiction(
    latitude: float,
    longitude: float,
    bounds: JurisdictionBounds | None = None,
) -> bool:
    return (bounds or DEFAULT_BOUNDS).contains(latitude, longitude)


def location_from_gps(latitude: float, longitude: float) -> LocationResult:
    return LocationResult(
        latitude=latitude,
        longitude=longitude,
        accuracy=GPS_ACCURACY_METERS,
        address=f"{latitude}, {longitude}",
        source=CheckInSource.GPS,
    )


async def lookup_cell_tower(
    mcc: int,
    mnc: int,
    lac: int,
    cid: int,
    http_client: httpx.AsyncClient | None = None,
) -> LocationResult:
    """
    Resolve a cell tower to coordinates.

    Raises:
        GeolocationError: 503 when no API key is configured, 502 when the
            provider rejects the request or returns unusable data.
    """
    if not settings.geolocation_configured:
        raise GeolocationError("Geolocation service is not configured", status_code=503)

    params = {"mcc": mcc, "mnc": mnc, "lac": lac, "cid": cid}
    headers = {
        "x-rapidapi-host": settings.GEOLOCATION_HOST,
        "x-rapidapi-key": settings.GEOLOCATION_API_KEY,
    }
    url = f"{settings.GEOLOCATION_BASE_URL}/query"

    owns_client = http_client is None
    client = http_client or httpx.AsyncClient(timeout=settings.GEOLOCATION_TIMEOUT_SECONDS)
    try:
        response = await request_with_retries(
            lambda: client.get(url, params=params, headers=headers),
        )
    except httpx.RequestError as exc:
        logger.warning("Cell tower lookup failed: %s", exc.__class__.__name__)
        raise GeolocationError("Geolocation provider unreachable") from exc
    finally:
        if owns_client:
            await client.aclose()

    if response.status_code >= 400:
        if "not subscribed" in response.text.lower():
            raise GeolocationError("Geolocation API subscription required")
        raise GeolocationError(f"Geolocation API request failed: {response.status_code}")

    try:
        data = response.json()
        latitude = float(data["latitude"])
        longitude = float(data["longitude"])
    except (ValueError, KeyError, TypeError):
        raise GeolocationError("Invalid location data received")

    accuracy = data.get("accuracy")
    return LocationResult(
        latitude=latitude,
        longitude=longitude,
        accuracy=float(accuracy) if accuracy is not None else None,
        address=data.get("address") or f"{latitude}, {longitude}",
        source=CheckInSource.CELL_TOWER,
    )


def build_tracking_result(
    client_id: UUID,
    location: LocationResult,
    bounds: JurisdictionBounds,
) -> dict:
    """Tracking payload returned by /api/geolocation/track."""
    return {
        "client_id": client_id,
        "latitude": location.latitude,
        "longitude": location.longitude,
        "accuracy": location.accuracy,
        "address": location.address,
        "timestamp": datetime.now(timezone.utc),
        "within_jurisdiction": bounds.contains(location.latitude, location.longitude),
        "source": location.source,
    }
