import json
from datetime import datetime, timezone

from localsearch.core.models import PLACEHOLDER_IMAGE, UNKNOWN_DISTANCE
from localsearch.etl import transform


def test_resolve_image_url_fallback_chain():
    primary = {"url": "primary.png", "is_primary": True, "approved": True}
    unapproved_primary = {"url": "pending.png", "is_primary": True, "approved": False}
    approved = {"url": "approved.png", "is_primary": False, "approved": True}

    assert transform.resolve_image_url([approved, primary], "biz.png") == "primary.png"
    assert transform.resolve_image_url([unapproved_primary, approved], "biz.png") == "approved.png"
    assert transform.resolve_image_url([unapproved_primary], "biz.png") == "biz.png"
    assert transform.resolve_image_url([], None) == PLACEHOLDER_IMAGE


def test_to_candidate_maps_business_fields():
    row = {
        "id": 7,
        "business_id": 3,
        "title": "Pad Thai",
        "business_name": "Thai Spice",
        "latitude": "30.25",
        "longitude": -97.75,
        "thumbs_up": None,
        "tags": ["noodles"],
        "created_at": "2025-08-01T12:00:00Z",
        "offering_images": json.dumps([{"url": "dish.png", "is_primary": True, "approved": True}]),
        "business_image_url": "biz.png",
    }

    candidate = transform.to_candidate(row)

    assert candidate.id == "7"
    assert candidate.business_id == "3"
    assert candidate.latitude == 30.25
    assert candidate.thumbs_up == 0
    assert candidate.image_url == "dish.png"
    assert candidate.created_at == datetime(2025, 8, 1, 12, 0, tzinfo=timezone.utc)
    assert candidate.distance == UNKNOWN_DISTANCE
    assert candidate.searchable_text == "pad thai  thai spice  "


def test_to_candidate_tolerates_missing_values():
    candidate = transform.to_candidate({"id": "o", "business_id": "b", "created_at": "yesterday", "latitude": "n/a"})

    assert candidate.created_at is None
    assert candidate.latitude is None
    assert candidate.has_coordinates is False
    assert candidate.image_url == PLACEHOLDER_IMAGE


def test_place_to_ai_result_shape():
    place = {
        "place_id": "abc",
        "name": "Green Cafe",
        "formatted_address": "1 Main St",
        "geometry": {"location": {"lat": 37.7, "lng": -122.4}},
        "opening_hours": {"open_now": False, "weekday_text": ["Monday: 8 AM - 3 PM"]},
        "rating": 4.6,
    }

    result = transform.place_to_ai_result(place, query="vegan pancakes", search_query="vegan cafe", similarity=0.61)

    assert result["id"] == "ai-abc"
    assert result["business_id"] == "ai-abc"
    assert result["isOpen"] is False
    assert result["hours"] == "Monday: 8 AM - 3 PM"
    assert result["latitude"] == 37.7
    assert result["distance"] == UNKNOWN_DISTANCE
    assert result["name"] == result["business_name"] == "Green Cafe"
