"""Distance enrichment and radius filtering for keyword results."""

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Sequence

from localsearch.core.errors import EnrichmentFailure
from localsearch.core.models import ScoredResult
from localsearch.vendors import distance_service

logger = logging.getLogger(__name__)

SEARCH_RADIUS_MILES = 15.0

DistanceClient = Callable[[Dict[str, float], Sequence[Dict[str, Any]]], List[Dict[str, Any]]]


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def build_destinations(results: Sequence[ScoredResult]) -> List[Dict[str, Any]]:
    """One destination per business that has coordinates."""
    destinations: Dict[str, Dict[str, Any]] = {}
    for result in results:
        candidate = result.candidate
        if not candidate.has_coordinates or candidate.business_id in destinations:
            continue
        destinations[candidate.business_id] = {
            "latitude": candidate.latitude,
            "longitude": candidate.longitude,
            "businessId": candidate.business_id,
        }
    return list(destinations.values())


def enrich_distances(
    results: Sequence[ScoredResult],
    origin: Optional[Dict[str, float]],
    client: Optional[DistanceClient] = None,
) -> int:
    """Attach travel distance and duration in place; returns how many results were updated.

    A failing distance service leaves the distances unknown.
    """
    if not origin or not results:
        return 0

    destinations = build_destinations(results)
    if not destinations:
        logger.info("No results with coordinates; skipping distance lookup")
        return 0

    client = client or distance_service.fetch_distances
    logger.info("Calculating distances for %d businesses", len(destinations))
    try:
        distances = client(origin, destinations)
    except EnrichmentFailure as exc:
        logger.warning("Distance calculation failed: %s", exc)
        return 0

    by_business = {
        str(entry["businessId"]): entry
        for entry in distances
        if isinstance(entry, dict) and entry.get("businessId") is not None
    }
    updated = 0
    for result in results:
        entry = by_business.get(result.candidate.business_id)
        if entry is None:
            continue
        miles = _as_number(entry.get("distance"))
        if miles is None:
            logger.debug("Unusable distance for business %s: %r", result.candidate.business_id, entry.get("distance"))
            continue
        result.candidate.distance = miles
        minutes = _as_number(entry.get("duration"))
        if minutes is not None:
            result.candidate.duration = minutes
        updated += 1
    return updated


def filter_by_radius(results: Sequence[ScoredResult], radius: float = SEARCH_RADIUS_MILES) -> List[ScoredResult]:
    """Drop results known to be farther than ``radius`` miles; unknown distances stay."""
    kept = [
        result
        for result in results
        if not result.candidate.has_known_distance or result.candidate.distance <= radius
    ]
    logger.info("Results within %s miles: %d of %d", radius, len(kept), len(results))
    return kept
