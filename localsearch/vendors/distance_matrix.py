"""Client for the Google Distance Matrix API."""

import logging
from typing import Any, Dict, List, Sequence

from localsearch.vendors.session import build_session

logger = logging.getLogger(__name__)
_SESSION = build_session()
_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"

# Google rejects more than 25 destinations per request.
MAX_DESTINATIONS = 25
METERS_PER_MILE = 1609.344


class DistanceMatrixError(RuntimeError):
    """Raised when the Distance Matrix API returns a non-successful response."""


def _coords(point: Dict[str, Any]) -> str:
    return f"{point['latitude']},{point['longitude']}"


def _request_batch(origin: Dict[str, Any], batch: Sequence[Dict[str, Any]], api_key: str) -> List[Dict[str, Any]]:
    params = {
        "origins": _coords(origin),
        "destinations": "|".join(_coords(dest) for dest in batch),
        "units": "imperial",
        "mode": "driving",
        "key": api_key,
    }
    response = _SESSION.get(_URL, params=params, timeout=10)
    response.raise_for_status()
    payload = response.json()
    status = payload.get("status")
    if status != "OK":
        logger.error("distance matrix failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise DistanceMatrixError(payload.get("error_message") or status)
    rows = payload.get("rows") or [{}]
    return rows[0].get("elements") or []


def compute_distances(
    origin: Dict[str, Any], destinations: Sequence[Dict[str, Any]], api_key: str
) -> List[Dict[str, Any]]:
    """Return driving distance (miles) and duration (minutes) per business.

    Destinations whose element is not OK are left out, so callers treat
    their distance as unknown.
    """
    results: List[Dict[str, Any]] = []
    for start in range(0, len(destinations), MAX_DESTINATIONS):
        batch = destinations[start:start + MAX_DESTINATIONS]
        elements = _request_batch(origin, batch, api_key)
        for dest, element in zip(batch, elements):
            if not element or element.get("status") != "OK":
                logger.warning("Distance calculation failed for business %s", dest.get("businessId"))
                continue
            distance = element.get("distance") or {}
            duration = element.get("duration") or {}
            results.append(
                {
                    "businessId": dest.get("businessId"),
                    "distance": round(distance.get("value", 0) / METERS_PER_MILE, 1),
                    "duration": round(duration.get("value", 0) / 60),
                    "distanceText": distance.get("text"),
                    "durationText": duration.get("text"),
                }
            )
    logger.info("Distance calculations completed for %d of %d destinations", len(results), len(destinations))
    return results
