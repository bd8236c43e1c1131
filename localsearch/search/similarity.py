"""Similarity normalisation and composite scoring for merged results.

Raw similarity from the embedding search is roughly centred on zero, so it is
clamped to [-0.5, 0.5] and mapped linearly onto a 0-100 match percentage:

    -0.5 or lower -> 0%
     0.0          -> 50%
     0.5 or more  -> 100%
"""

import math
from typing import Any, Dict, Optional, Sequence

SIMILARITY_WEIGHT = 0.45
PLATFORM_WEIGHT = 0.25
OPEN_WEIGHT = 0.20
DISTANCE_WEIGHT = 0.10

MAX_SCORED_DISTANCE_MILES = 10.0


def match_percentage(similarity: Optional[float]) -> int:
    if similarity is None:
        return 0
    clamped = max(-0.5, min(0.5, similarity))
    return round((clamped + 0.5) * 100)


def normalized_similarity(similarity: Optional[float]) -> float:
    return match_percentage(similarity) / 100


def normalized_distance(distance: Optional[float]) -> float:
    """Closer is higher: 0 miles -> 1.0, 10 miles or more (or unknown) -> 0.0."""
    if distance is None:
        distance = MAX_SCORED_DISTANCE_MILES
    clamped = max(0.0, min(MAX_SCORED_DISTANCE_MILES, float(distance)))
    return 1 - clamped / MAX_SCORED_DISTANCE_MILES


def composite_score(item: Dict[str, Any]) -> float:
    score = (
        SIMILARITY_WEIGHT * normalized_similarity(item.get("similarity"))
        + PLATFORM_WEIGHT * (1 if item.get("isPlatformBusiness") else 0)
        + OPEN_WEIGHT * (1 if item.get("isOpen") else 0)
        + DISTANCE_WEIGHT * normalized_distance(item.get("distance"))
    )
    return round(score, 3)


def meets_display_threshold(similarity: Optional[float], threshold: float = 0.0) -> bool:
    if similarity is None:
        return False
    return abs(similarity) >= threshold


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    if len(vec_a) != len(vec_b):
        raise ValueError("Vectors must have the same length")
    dot = sum(a * b for a, b in zip(vec_a, vec_b))
    norm_a = math.sqrt(sum(a * a for a in vec_a))
    norm_b = math.sqrt(sum(b * b for b in vec_b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)
