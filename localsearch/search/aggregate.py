"""Merge and rank results coming from the platform, semantic and AI backends."""

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from localsearch.core.models import SearchQuery
from localsearch.search.similarity import composite_score

logger = logging.getLogger(__name__)

AI_FALLBACK_FLOOR = 10

Backend = Callable[[SearchQuery], List[Dict[str, Any]]]
AIBackend = Callable[[SearchQuery, int], List[Dict[str, Any]]]

_executor = ThreadPoolExecutor(max_workers=4)


def merge_results(
    platform: Iterable[Dict[str, Any]] = (),
    semantic: Iterable[Dict[str, Any]] = (),
    ai_generated: Iterable[Dict[str, Any]] = (),
) -> Dict[str, Dict[str, Any]]:
    """Deduplicate by id; platform beats semantic beats AI-generated."""
    merged: Dict[str, Dict[str, Any]] = {}
    for source in (ai_generated, semantic, platform):
        for item in source or []:
            item_id = item.get("id")
            if item_id is None:
                logger.debug("Dropping result without id: %s", item.get("name") or item.get("title"))
                continue
            merged[str(item_id)] = item
    return merged


def is_platform(item: Dict[str, Any]) -> bool:
    return bool(item.get("isPlatformBusiness")) or item.get("source") == "offering"


def rank_results(items: Iterable[Dict[str, Any]], limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Platform results first, then composite score descending within each group."""
    scored = [{**item, "compositeScore": composite_score(item)} for item in items]
    scored.sort(key=lambda item: (0 if is_platform(item) else 1, -item["compositeScore"]))
    return scored[:limit] if limit is not None else scored


class SearchAggregator:
    """Runs the search backends for one query and produces the display list."""

    def __init__(
        self,
        platform_search: Backend,
        semantic_search: Optional[Backend] = None,
        ai_search: Optional[AIBackend] = None,
        fallback_floor: int = AI_FALLBACK_FLOOR,
    ) -> None:
        self._platform_search = platform_search
        self._semantic_search = semantic_search
        self._ai_search = ai_search
        self._fallback_floor = fallback_floor

    @staticmethod
    def _call(name: str, backend: Optional[Callable[..., List[Dict[str, Any]]]], *args: Any) -> List[Dict[str, Any]]:
        if backend is None:
            return []
        try:
            results = backend(*args) or []
        except Exception as exc:  # noqa: BLE001
            logger.warning("%s search failed: %s", name, exc)
            return []
        logger.info("%s search returned %d results", name, len(results))
        return results

    def search(self, query: SearchQuery) -> Dict[str, Any]:
        platform_future = _executor.submit(self._call, "Platform", self._platform_search, query)
        semantic_future = _executor.submit(self._call, "Semantic", self._semantic_search, query)
        platform = platform_future.result()
        semantic = semantic_future.result()

        merged = merge_results(platform=platform, semantic=semantic)

        ai_generated: List[Dict[str, Any]] = []
        used_ai = False
        if self._ai_search is not None and len(merged) < self._fallback_floor:
            slots = max(query.match_count - len(merged), 1)
            logger.info("Only %d merged results; asking AI search for %d more", len(merged), slots)
            ai_generated = self._call("AI", self._ai_search, query, slots)
            used_ai = True
            merged = merge_results(platform=platform, semantic=semantic, ai_generated=ai_generated)

        ranked = rank_results(merged.values(), limit=query.match_count)
        sources = Counter(item.get("source") or "unknown" for item in ranked)

        return {
            "success": True,
            "results": ranked,
            "query": query.text,
            "matchCount": len(ranked),
            "searchSources": dict(sources),
            "usedAIFallback": used_ai,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
