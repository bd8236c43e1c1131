"""Keyword scoring and tiered fallback over a pool of candidates."""

import logging
from typing import Dict, Iterable, List, Sequence

from localsearch.core.models import CandidateResult, ScoredResult, TierSelection

logger = logging.getLogger(__name__)

TITLE_WEIGHT = 3
BUSINESS_NAME_WEIGHT = 2
DESCRIPTION_WEIGHT = 1


def score_candidate(candidate: CandidateResult, keywords: Sequence[str]) -> ScoredResult:
    """Score a candidate against the keyword set.

    Every keyword found in the searchable text counts once towards
    ``matched_keywords`` and adds exactly one weight: title first, then
    business name, otherwise description.
    """
    searchable_text = candidate.searchable_text
    title = (candidate.title or "").lower()
    business_name = (candidate.business_name or "").lower()

    scored = ScoredResult(candidate=candidate)
    for keyword in dict.fromkeys(keywords):
        if keyword not in searchable_text:
            continue
        scored.matched_keywords += 1
        scored.found_keywords.append(keyword)
        if keyword in title:
            scored.keyword_score += TITLE_WEIGHT
        elif keyword in business_name:
            scored.keyword_score += BUSINESS_NAME_WEIGHT
        else:
            scored.keyword_score += DESCRIPTION_WEIGHT
    return scored


def score_candidates(candidates: Iterable[CandidateResult], keywords: Sequence[str]) -> List[ScoredResult]:
    return [score_candidate(candidate, keywords) for candidate in candidates]


def partition_by_tier(scored: Iterable[ScoredResult]) -> Dict[int, List[ScoredResult]]:
    tiers: Dict[int, List[ScoredResult]] = {}
    for result in scored:
        if result.matched_keywords > 0:
            tiers.setdefault(result.matched_keywords, []).append(result)
    return tiers


def select_tier(scored: Iterable[ScoredResult], keywords: Sequence[str]) -> TierSelection:
    """Pick the results matching the most keywords, falling back one tier at a time."""
    tiers = partition_by_tier(scored)
    for tier in range(len(keywords), 0, -1):
        members = tiers.get(tier)
        if members:
            logger.info("Using keyword tier %d/%d with %d results", tier, len(keywords), len(members))
            return TierSelection(results=list(members), used_tier=tier)

    logger.info("No candidates matched any of %d keywords", len(keywords))
    return TierSelection()
