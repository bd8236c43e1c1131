"""Server-side ordering of keyword results."""

from typing import List, Sequence, Tuple

from localsearch.core.models import UNKNOWN_DISTANCE, ScoredResult


def _sort_key(result: ScoredResult) -> Tuple[int, float, float]:
    candidate = result.candidate
    distance = candidate.distance if candidate.distance is not None else UNKNOWN_DISTANCE
    created = candidate.created_at.timestamp() if candidate.created_at else float("-inf")
    return (-result.keyword_score, distance, -created)


def sort_results(results: Sequence[ScoredResult]) -> List[ScoredResult]:
    """Keyword score desc, then distance asc, then newest first."""
    return sorted(results, key=_sort_key)
