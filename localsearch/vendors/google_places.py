"""Client utilities for the Google Places API."""

import logging
from typing import Any, Dict, Optional

from localsearch.vendors.session import build_session

logger = logging.getLogger(__name__)
_SESSION = build_session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""


def text_search(
    query: str,
    api_key: str,
    *,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    radius_meters: Optional[int] = None,
) -> Dict[str, Any]:
    params = {"query": query, "key": api_key, "type": "establishment"}
    if latitude is not None and longitude is not None:
        params["location"] = f"{latitude},{longitude}"
    if radius_meters:
        params["radius"] = radius_meters
    response = _SESSION.get(f"{_BASE_URL}/textsearch/json", params=params, timeout=5)
    response.raise_for_status()
    payload = response.json()
    status = payload.get("status")
    if status not in {"OK", "ZERO_RESULTS"}:
        logger.error("text_search failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise GooglePlacesError(payload.get("error_message") or status)
    return payload


def place_phone_number(place_id: str, api_key: str) -> Optional[str]:
    fields = "formatted_phone_number,international_phone_number"
    params = {"place_id": place_id, "key": api_key, "fields": fields}
    response = _SESSION.get(f"{_BASE_URL}/details/json", params=params, timeout=3)
    response.raise_for_status()
    payload = response.json()
    status = payload.get("status")
    if status not in {"OK", "ZERO_RESULTS"}:
        logger.error("place_details failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise GooglePlacesError(payload.get("error_message") or status)
    result = payload.get("result", {})
    return result.get("formatted_phone_number") or result.get("international_phone_number")
