"""HTTP client for the batched distance service."""

import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from localsearch.core.config import get_settings
from localsearch.core.errors import EnrichmentFailure

logger = logging.getLogger(__name__)
_SESSION = requests.Session()

DISTANCE_TIMEOUT_SECONDS = 15


def fetch_distances(
    origin: Dict[str, float],
    destinations: Sequence[Dict[str, Any]],
    url: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """POST one batch of destinations and return ``[{businessId, distance, duration}]``."""
    url = url or get_settings().distance_service_url
    try:
        response = _SESSION.post(
            url,
            json={"origin": origin, "destinations": list(destinations)},
            timeout=DISTANCE_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        raise EnrichmentFailure(f"distance service call failed: {exc}") from exc

    if not isinstance(payload, dict):
        raise EnrichmentFailure(f"distance service returned an unexpected payload: {type(payload).__name__}")
    if not payload.get("success"):
        raise EnrichmentFailure(f"distance service reported failure: {payload.get('message') or payload.get('error')}")
    results = payload.get("results") or []
    if not isinstance(results, list):
        raise EnrichmentFailure("distance service returned malformed results")
    return results
