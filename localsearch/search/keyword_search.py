"""Keyword search over platform offerings.

Pipeline: extract keywords, fetch a broad OR-matched candidate pool, score
each candidate, keep the best non-empty keyword tier, attach travel distances,
drop far-away results, sort and truncate.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from localsearch.core import db
from localsearch.core.errors import InvalidParameter
from localsearch.core.models import SearchQuery
from localsearch.etl.transform import to_candidate
from localsearch.search.distance import DistanceClient, enrich_distances, filter_by_radius
from localsearch.search.keywords import extract_keywords, normalize_query
from localsearch.search.matcher import score_candidates, select_tier
from localsearch.search.ranking import sort_results

logger = logging.getLogger(__name__)

DEFAULT_MATCH_COUNT = 10

CandidateFetcher = Callable[[Sequence[str], int], List[Dict[str, Any]]]


def _optional_float(payload: Dict[str, Any], name: str) -> Optional[float]:
    value = payload.get(name)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidParameter(f"{name} must be numeric")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidParameter(f"{name} must be numeric") from None
    if not math.isfinite(number):
        raise InvalidParameter(f"{name} must be finite")
    return number


def parse_search_request(payload: Dict[str, Any]) -> SearchQuery:
    """Validate a JSON request body into a SearchQuery."""
    text = normalize_query(payload.get("query"))
    latitude = _optional_float(payload, "latitude")
    longitude = _optional_float(payload, "longitude")

    match_count_raw = payload.get("matchCount")
    match_count = DEFAULT_MATCH_COUNT
    if match_count_raw is not None:
        if isinstance(match_count_raw, bool):
            raise InvalidParameter("matchCount must be numeric")
        try:
            match_count = int(match_count_raw)
        except (TypeError, ValueError, OverflowError):
            raise InvalidParameter("matchCount must be numeric") from None
        if match_count <= 0:
            raise InvalidParameter("matchCount must be positive")

    return SearchQuery(text=text, latitude=latitude, longitude=longitude, match_count=match_count)


def _summary(count: int, used_tier: int, total_keywords: int) -> str:
    if count == 0:
        return "No offerings matched your search. Try different keywords."
    noun = "offering" if count == 1 else "offerings"
    if used_tier == total_keywords:
        keyword_noun = "keyword" if total_keywords == 1 else "keywords"
        return f"Found {count} {noun} matching all {total_keywords} {keyword_noun}"
    return f"Found {count} {noun} matching {used_tier} of {total_keywords} keywords"


def run_keyword_search(
    query: SearchQuery,
    *,
    fetch_candidates: Optional[CandidateFetcher] = None,
    distance_client: Optional[DistanceClient] = None,
) -> Dict[str, Any]:
    """Run the full keyword pipeline and return the response payload."""
    keywords = extract_keywords(query.text)
    logger.info(
        "Keyword search query=%r keywords=%s origin=%s match_count=%d",
        query.text,
        keywords,
        query.origin,
        query.match_count,
    )

    fetch_candidates = fetch_candidates or db.fetch_keyword_candidates
    rows = fetch_candidates(keywords, db.CANDIDATE_LIMIT)
    candidates = [to_candidate(row) for row in rows]

    selection = select_tier(score_candidates(candidates, keywords), keywords)
    results = selection.results

    if query.has_origin:
        enrich_distances(results, query.origin, client=distance_client)
        results = filter_by_radius(results)

    limited = sort_results(results)[: query.match_count]
    for index, result in enumerate(limited, start=1):
        logger.debug(
            "%d. %r at %r score=%d distance=%s",
            index,
            result.candidate.title,
            result.candidate.business_name,
            result.keyword_score,
            result.candidate.distance,
        )
    logger.info("Keyword search returning %d results (tier %d)", len(limited), selection.used_tier)

    return {
        "success": True,
        "results": [result.to_dict() for result in limited],
        "query": query.text,
        "mainKeywords": keywords,
        "usedKeywordTier": selection.used_tier,
        "matchCount": len(limited),
        "message": _summary(len(limited), selection.used_tier, len(keywords)),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
