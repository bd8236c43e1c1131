from datetime import datetime, timezone

from localsearch.core.models import UNKNOWN_DISTANCE, CandidateResult, ScoredResult
from localsearch.search.ranking import sort_results


def make_result(offering_id, score, dist=UNKNOWN_DISTANCE, created_at=None):
    candidate = CandidateResult(id=offering_id, business_id="b", distance=dist, created_at=created_at)
    return ScoredResult(candidate=candidate, keyword_score=score, matched_keywords=1)


def ids(results):
    return [r.candidate.id for r in results]


def test_sorts_by_keyword_score_first():
    results = [make_result("low", 1, dist=0.5), make_result("high", 3, dist=9.0)]
    assert ids(sort_results(results)) == ["high", "low"]


def test_ties_broken_by_distance_with_unknown_last():
    results = [
        make_result("unknown", 2),
        make_result("far", 2, dist=12.0),
        make_result("near", 2, dist=1.5),
    ]
    assert ids(sort_results(results)) == ["near", "far", "unknown"]


def test_remaining_ties_prefer_newest():
    older = datetime(2025, 7, 1, tzinfo=timezone.utc)
    newer = datetime(2025, 8, 1, tzinfo=timezone.utc)
    results = [
        make_result("undated", 2, dist=3.0),
        make_result("older", 2, dist=3.0, created_at=older),
        make_result("newer", 2, dist=3.0, created_at=newer),
    ]
    assert ids(sort_results(results)) == ["newer", "older", "undated"]
