"""Core data models shared by the search pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

UNKNOWN_DISTANCE = 999999
PLACEHOLDER_IMAGE = "/verified and reviewed logo-coral copy copy.png"


@dataclass(slots=True)
class SearchQuery:
    """A single search request as received from a caller."""

    text: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    match_count: int = 10

    @property
    def has_origin(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def origin(self) -> Optional[Dict[str, float]]:
        if not self.has_origin:
            return None
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(slots=True)
class CandidateResult:
    """Denormalized snapshot of an active offering joined with its business."""

    id: str
    business_id: str
    title: Optional[str] = None
    description: Optional[str] = None
    service_type: Optional[str] = None
    price_cents: Optional[int] = None
    currency: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    business_name: Optional[str] = None
    business_category: Optional[str] = None
    business_description: Optional[str] = None
    business_short_description: Optional[str] = None
    address: Optional[str] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone_number: Optional[str] = None
    website_url: Optional[str] = None
    social_media: List[str] = field(default_factory=list)
    hours: Optional[str] = None
    days_closed: Optional[str] = None
    price_range: Optional[str] = None
    service_area: Optional[str] = None
    is_verified: bool = False
    is_mobile_business: bool = False
    is_virtual: bool = False
    thumbs_up: int = 0
    thumbs_down: int = 0
    sentiment_score: int = 0
    image_url: str = PLACEHOLDER_IMAGE
    gallery_urls: List[str] = field(default_factory=list)
    offering_images: List[Dict[str, Any]] = field(default_factory=list, repr=False)
    distance: float = UNKNOWN_DISTANCE
    duration: float = UNKNOWN_DISTANCE

    @property
    def searchable_text(self) -> str:
        parts = [
            self.title or "",
            self.description or "",
            self.business_name or "",
            self.business_description or "",
            self.business_short_description or "",
        ]
        return " ".join(parts).lower()

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def has_known_distance(self) -> bool:
        return self.distance is not None and self.distance != UNKNOWN_DISTANCE

    def to_dict(self) -> Dict[str, Any]:
        """Serialize into the wire shape consumed by the result cards."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "price_cents": self.price_cents,
            "currency": self.currency,
            "service_type": self.service_type,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "business_id": self.business_id,
            "business_name": self.business_name,
            "business_category": self.business_category,
            "business_description": self.business_description,
            "business_short_description": self.business_short_description,
            "address": self.address,
            "location": self.location,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "phone_number": self.phone_number,
            "website_url": self.website_url,
            "social_media": list(self.social_media),
            "hours": self.hours,
            "days_closed": self.days_closed,
            "price_range": self.price_range,
            "service_area": self.service_area,
            "is_verified": self.is_verified,
            "is_mobile_business": self.is_mobile_business,
            "is_virtual": self.is_virtual,
            "thumbs_up": self.thumbs_up,
            "thumbs_down": self.thumbs_down,
            "sentiment_score": self.sentiment_score,
            "image_url": self.image_url,
            "gallery_urls": list(self.gallery_urls),
            "offering_images": list(self.offering_images),
            "distance": self.distance,
            "duration": self.duration,
            "isPlatformBusiness": True,
            "isOpen": True,
            "source": "offering",
            # Aliases read by the older card components.
            "name": self.business_name,
            "image": self.image_url,
            "category": self.business_category,
            "short_description": self.business_short_description,
            "offeringId": self.id,
            "offeringTitle": self.title,
            "offeringDescription": self.description,
            "serviceType": self.service_type,
            "priceCents": self.price_cents,
        }


@dataclass(slots=True)
class ScoredResult:
    """A candidate together with its keyword relevance."""

    candidate: CandidateResult
    keyword_score: int = 0
    matched_keywords: int = 0
    found_keywords: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        entry = self.candidate.to_dict()
        entry["keywordScore"] = self.keyword_score
        entry["matchedKeywords"] = self.matched_keywords
        entry["foundKeywords"] = list(self.found_keywords)
        return entry


@dataclass(slots=True)
class TierSelection:
    """The results of the best non-empty keyword tier."""

    results: List[ScoredResult] = field(default_factory=list)
    used_tier: int = 0
