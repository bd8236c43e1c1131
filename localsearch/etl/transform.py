"""Utilities for transforming database rows and Places payloads into search results."""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from localsearch.core.models import PLACEHOLDER_IMAGE, UNKNOWN_DISTANCE, CandidateResult

logger = logging.getLogger(__name__)


def resolve_image_url(images: Iterable[Dict[str, Any]], business_image_url: Optional[str]) -> str:
    """Primary approved image, then any approved image, then the business image, then the placeholder."""
    images = [image for image in images or [] if image and image.get("url")]
    for image in images:
        if image.get("is_primary") and image.get("approved"):
            return image["url"]
    for image in images:
        if image.get("approved"):
            return image["url"]
    return business_image_url or PLACEHOLDER_IMAGE


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable timestamp %r", value)
        return None


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return [value]
    return list(value) if isinstance(value, (list, tuple)) else [value]


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def to_candidate(row: Dict[str, Any]) -> CandidateResult:
    """Build a CandidateResult from a row of the keyword candidate query."""
    images = _as_list(row.get("offering_images"))
    return CandidateResult(
        id=str(row["id"]),
        business_id=str(row["business_id"]),
        title=row.get("title"),
        description=row.get("description"),
        service_type=row.get("service_type"),
        price_cents=row.get("price_cents"),
        currency=row.get("currency"),
        tags=_as_list(row.get("tags")),
        created_at=_parse_timestamp(row.get("created_at")),
        business_name=row.get("business_name"),
        business_category=row.get("business_category"),
        business_description=row.get("business_description"),
        business_short_description=row.get("business_short_description"),
        address=row.get("address"),
        location=row.get("location"),
        latitude=_safe_float(row.get("latitude")),
        longitude=_safe_float(row.get("longitude")),
        phone_number=row.get("phone_number"),
        website_url=row.get("website_url"),
        social_media=_as_list(row.get("social_media")),
        hours=row.get("hours"),
        days_closed=row.get("days_closed"),
        price_range=row.get("price_range"),
        service_area=row.get("service_area"),
        is_verified=bool(row.get("is_verified")),
        is_mobile_business=bool(row.get("is_mobile_business")),
        is_virtual=bool(row.get("is_virtual")),
        thumbs_up=row.get("thumbs_up") or 0,
        thumbs_down=row.get("thumbs_down") or 0,
        sentiment_score=row.get("sentiment_score") or 0,
        image_url=resolve_image_url(images, row.get("business_image_url")),
        gallery_urls=_as_list(row.get("gallery_urls")),
        offering_images=images,
    )


def vibe_row_to_result(row: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a row of the vibe similarity function into a semantic result."""
    candidate = CandidateResult(
        id=str(row["id"]),
        business_id=str(row["business_id"]),
        title=row.get("title"),
        description=row.get("description"),
        service_type=row.get("service_type"),
        price_cents=row.get("price_cents"),
        currency=row.get("currency"),
        tags=_as_list(row.get("tags")),
        created_at=_parse_timestamp(row.get("created_at")),
        business_name=row.get("business_name"),
        business_category=row.get("business_category"),
        business_description=row.get("business_description"),
        business_short_description=row.get("business_short_description"),
        address=row.get("business_address"),
        location=row.get("business_location"),
        latitude=_safe_float(row.get("business_latitude")),
        longitude=_safe_float(row.get("business_longitude")),
        phone_number=row.get("business_phone_number"),
        website_url=row.get("business_website_url"),
        social_media=_as_list(row.get("business_social_media")),
        hours=row.get("business_hours"),
        days_closed=row.get("business_days_closed"),
        price_range=row.get("business_price_range"),
        service_area=row.get("business_service_area"),
        is_verified=bool(row.get("business_is_verified")),
        is_mobile_business=bool(row.get("business_is_mobile")),
        is_virtual=bool(row.get("business_is_virtual")),
        thumbs_up=row.get("business_thumbs_up") or 0,
        thumbs_down=row.get("business_thumbs_down") or 0,
        sentiment_score=row.get("business_sentiment_score") or 0,
        image_url=row.get("business_image_url") or PLACEHOLDER_IMAGE,
        gallery_urls=_as_list(row.get("business_gallery_urls")),
    )
    result = candidate.to_dict()
    result["similarity"] = _safe_float(row.get("similarity"))
    result["source"] = "semantic"
    return result


def place_to_ai_result(
    place: Dict[str, Any],
    *,
    query: str,
    search_query: str,
    similarity: float,
    phone_number: Optional[str] = None,
) -> Dict[str, Any]:
    """Shape a Google Places text search hit into an AI-generated result."""
    place_id = place.get("place_id")
    name = place.get("name")
    location = place.get("geometry", {}).get("location", {})
    opening_hours = place.get("opening_hours") or {}
    weekday_text = opening_hours.get("weekday_text") or []
    address = place.get("formatted_address")

    return {
        "id": f"ai-{place_id}",
        "business_id": f"ai-{place_id}",
        "offering_id": None,
        "title": query,
        "description": f"{query} at {name}. Found through intelligent search for businesses that offer what you're looking for.",
        "business_name": name,
        "business_category": search_query,
        "business_description": f"Business that serves {query} according to Google Places data",
        "business_short_description": f"Serves {query}",
        "address": address,
        "location": place.get("vicinity") or address,
        "latitude": _safe_float(location.get("lat")),
        "longitude": _safe_float(location.get("lng")),
        "phone_number": phone_number,
        "hours": weekday_text[0] if weekday_text else "Hours not available",
        "is_verified": False,
        "thumbs_up": 0,
        "thumbs_down": 0,
        "sentiment_score": 0,
        "image_url": None,
        "gallery_urls": [],
        "distance": UNKNOWN_DISTANCE,
        "duration": UNKNOWN_DISTANCE,
        "similarity": similarity,
        "source": "ai_generated",
        "isAIGenerated": True,
        "isPlatformBusiness": False,
        "isOpen": opening_hours.get("open_now") is not False,
        "placeId": place_id,
        "rating": place.get("rating"),
        "name": name,
        "image": None,
        "category": search_query,
        "short_description": f"Serves {query} - found through AI search",
    }
