"""Database helpers for the search services."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence, Tuple

import psycopg2
from psycopg2 import extras, pool

from localsearch.core.config import get_settings
from localsearch.core.errors import BackendConfigurationMissing, UpstreamQueryFailure

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.SimpleConnectionPool] = None

CANDIDATE_LIMIT = 100

_KEYWORD_FIELDS = (
    "o.title",
    "o.description",
    "b.name",
    "b.description",
    "b.short_description",
)

_CANDIDATE_SELECT = """
SELECT
    o.id,
    o.title,
    o.description,
    o.service_type,
    o.price_cents,
    o.currency,
    o.tags,
    o.created_at,
    b.id AS business_id,
    b.name AS business_name,
    b.category AS business_category,
    b.description AS business_description,
    b.short_description AS business_short_description,
    b.address,
    b.location,
    b.latitude,
    b.longitude,
    b.phone_number,
    b.website_url,
    b.social_media,
    b.hours,
    b.days_closed,
    b.price_range,
    b.service_area,
    b.is_verified,
    b.is_mobile_business,
    b.is_virtual,
    b.thumbs_up,
    b.thumbs_down,
    b.sentiment_score,
    b.image_url AS business_image_url,
    b.gallery_urls,
    COALESCE(
        (
            SELECT json_agg(
                json_build_object(
                    'url', i.url,
                    'source', i.source,
                    'is_primary', i.is_primary,
                    'approved', i.approved
                )
            )
            FROM offering_images i
            WHERE i.offering_id = o.id
        ),
        '[]'::json
    ) AS offering_images
FROM offerings o
JOIN businesses b ON b.id = o.business_id
WHERE o.status = 'active'
  AND b.is_visible_on_platform = TRUE
  AND ({predicate})
ORDER BY o.created_at DESC
LIMIT %(limit)s
"""

_VIBE_SEARCH = """
SELECT *
FROM search_offerings_by_vibe(%(embedding)s::vector, %(threshold)s, %(match_count)s)
"""


def init_pool(minconn: int = 1, maxconn: int = 5) -> pool.SimpleConnectionPool:
    """Initialise and return the shared connection pool."""
    global _connection_pool
    if _connection_pool is None:
        settings = get_settings()
        if not settings.database_url:
            raise BackendConfigurationMissing("Please set DATABASE_URL")
        _connection_pool = pool.SimpleConnectionPool(
            minconn,
            maxconn,
            dsn=settings.database_url,
            connect_timeout=10,
        )
        logger.info("Database connection pool initialised")
    return _connection_pool


@contextmanager
def get_connection():
    """Context manager yielding a pooled connection."""
    pg_pool = init_pool()
    conn = pg_pool.getconn()
    try:
        yield conn
    finally:
        pg_pool.putconn(conn)


def _escape_like(keyword: str) -> str:
    return keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_keyword_predicate(keywords: Sequence[str]) -> Tuple[str, Dict[str, Any]]:
    """Build an OR-of-ILIKEs predicate covering every keyword and searchable field."""
    if not keywords:
        raise ValueError("at least one keyword is required")

    clauses: List[str] = []
    params: Dict[str, Any] = {}
    for index, keyword in enumerate(keywords):
        name = f"kw{index}"
        params[name] = f"%{_escape_like(keyword)}%"
        clauses.extend(f"{column} ILIKE %({name})s" for column in _KEYWORD_FIELDS)
    return " OR ".join(clauses), params


def _run_query(sql: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
    with get_connection() as conn:
        try:
            with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                cur.execute(sql, params)
                rows = cur.fetchall()
        except psycopg2.Error as exc:
            conn.rollback()
            logger.error("Query failed: %s", exc)
            raise UpstreamQueryFailure(f"Keyword search failed: {exc}") from exc
    return [dict(row) for row in rows]


def fetch_keyword_candidates(keywords: Sequence[str], limit: int = CANDIDATE_LIMIT) -> List[Dict[str, Any]]:
    """Fetch active offerings matching any keyword in any searchable field."""
    predicate, params = build_keyword_predicate(keywords)
    params["limit"] = limit
    rows = _run_query(_CANDIDATE_SELECT.format(predicate=predicate), params)
    logger.info("Fetched %d keyword candidates for %s", len(rows), list(keywords))
    return rows


def fetch_vibe_matches(embedding: Sequence[float], threshold: float, match_count: int) -> List[Dict[str, Any]]:
    """Call the embedding similarity function stored in the database."""
    params = {
        "embedding": "[" + ",".join(str(value) for value in embedding) + "]",
        "threshold": threshold,
        "match_count": match_count,
    }
    rows = _run_query(_VIBE_SEARCH, params)
    logger.info("Fetched %d vibe matches", len(rows))
    return rows
