"""Embedding ("vibe") search over platform offerings."""

import logging
from typing import Any, Dict, List, Optional

from localsearch.core import db
from localsearch.core.models import SearchQuery
from localsearch.etl.transform import vibe_row_to_result
from localsearch.vendors.openai_client import OpenAIClient

logger = logging.getLogger(__name__)

VIBE_MATCH_THRESHOLD = 0.1
VIBE_MATCH_COUNT = 30


def search_by_vibe(query: SearchQuery, client: Optional[OpenAIClient] = None) -> List[Dict[str, Any]]:
    client = client or OpenAIClient()
    embedding = client.embed(query.text)
    logger.info("Generated query embedding with %d dimensions", len(embedding))

    rows = db.fetch_vibe_matches(embedding, VIBE_MATCH_THRESHOLD, VIBE_MATCH_COUNT)
    return [vibe_row_to_result(row) for row in rows]
