"""AI-assisted discovery of businesses that are not on the platform yet."""

import logging
from typing import Any, Dict, List, Optional

import requests

from localsearch.core.config import Settings, get_settings
from localsearch.core.errors import BackendConfigurationMissing
from localsearch.core.models import SearchQuery
from localsearch.etl.transform import place_to_ai_result
from localsearch.search.similarity import cosine_similarity
from localsearch.vendors import google_places
from localsearch.vendors.openai_client import OpenAIClient

logger = logging.getLogger(__name__)

DEFAULT_LATITUDE = 37.7749
DEFAULT_LONGITUDE = -122.4194
SEARCH_RADIUS_METERS = 16093
MIN_AI_SIMILARITY = 0.3


def _describe_place(place: Dict[str, Any], query: str, search_query: str) -> str:
    parts = [
        place.get("name"),
        search_query,
        f"serves {query}",
        f"offers {query}",
        " ".join(place.get("types") or []),
        f"{place.get('rating')} star rating",
    ]
    return " ".join(part for part in parts if part)


def search_generated(
    query: SearchQuery,
    slots: int,
    *,
    client: Optional[OpenAIClient] = None,
    settings: Optional[Settings] = None,
) -> List[Dict[str, Any]]:
    """Find up to ``slots`` Google Places businesses related to the query."""
    settings = settings or get_settings()
    if not settings.google_api_key:
        raise BackendConfigurationMissing("Please set GOOGLE_API_KEY")
    client = client or OpenAIClient(settings)

    search_queries = client.generate_search_queries(query.text, slots)
    logger.info("Generated %d Places queries for %r: %s", len(search_queries), query.text, search_queries)
    if not search_queries:
        return []

    query_embedding = client.embed(query.text)
    latitude = query.latitude if query.has_origin else DEFAULT_LATITUDE
    longitude = query.longitude if query.has_origin else DEFAULT_LONGITUDE

    results: List[Dict[str, Any]] = []
    seen = set()
    for search_query in search_queries:
        try:
            payload = google_places.text_search(
                search_query,
                settings.google_api_key,
                latitude=latitude,
                longitude=longitude,
                radius_meters=SEARCH_RADIUS_METERS,
            )
        except (google_places.GooglePlacesError, requests.RequestException) as exc:
            logger.warning("Places search failed for %r: %s", search_query, exc)
            continue

        place = next((p for p in payload.get("results", []) if p.get("rating")), None)
        if place is None or place.get("place_id") in seen:
            continue
        seen.add(place.get("place_id"))

        similarity = cosine_similarity(query_embedding, client.embed(_describe_place(place, query.text, search_query)))
        if similarity < MIN_AI_SIMILARITY:
            logger.debug("Dropping %r with similarity %.3f", place.get("name"), similarity)
            continue

        phone_number = None
        try:
            phone_number = google_places.place_phone_number(place["place_id"], settings.google_api_key)
        except (google_places.GooglePlacesError, requests.RequestException) as exc:
            logger.warning("Failed to fetch phone number for %s: %s", place.get("name"), exc)

        results.append(
            place_to_ai_result(
                place,
                query=query.text,
                search_query=search_query,
                similarity=similarity,
                phone_number=phone_number,
            )
        )
    return results
