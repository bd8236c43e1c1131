"""HTTP entrypoint for the search functions (Cloud Run / Netlify proxy friendly)."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict

import requests
from flask import Flask, jsonify, request
from flask_cors import CORS

from localsearch.core.config import get_settings
from localsearch.core.errors import SearchError
from localsearch.search.aggregate import SearchAggregator
from localsearch.search.ai_search import search_generated
from localsearch.search.keyword_search import parse_search_request, run_keyword_search
from localsearch.search.semantic import search_by_vibe
from localsearch.vendors.distance_matrix import DistanceMatrixError, compute_distances

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)
CORS(app, send_wildcard=True)

# ---------- Routes ----------


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _error_response(exc: SearchError) -> Any:
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.error, exc)
    else:
        logger.info("Rejected request: %s", exc)
    body = {"error": exc.error, "message": str(exc), "timestamp": _timestamp()}
    return jsonify(body), exc.status_code


@app.get("/")
def root() -> Any:
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint that does not touch the database."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "database_configured": bool(settings.database_url),
                "google_configured": bool(settings.google_api_key),
                "openai_configured": bool(settings.openai_api_key),
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.post("/keyword-search")
def keyword_search() -> Any:
    """
    Keyword search over active platform offerings.
    Required JSON fields: query
    Optional: latitude, longitude (numbers), matchCount (positive int, default 10)
    """
    payload = _json_body()
    try:
        query = parse_search_request(payload)
        response = run_keyword_search(query)
    except SearchError as exc:
        return _error_response(exc)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Keyword search failed: %s", exc)
        return jsonify({"error": "Keyword search failed", "message": str(exc), "timestamp": _timestamp()}), 500

    return jsonify(response), 200


@app.post("/search")
def unified_search() -> Any:
    """Merged platform, semantic and AI-generated search."""
    payload = _json_body()
    try:
        query = parse_search_request(payload)
        response = build_aggregator().search(query)
    except SearchError as exc:
        return _error_response(exc)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unified search failed: %s", exc)
        return jsonify({"error": "Unified search failed", "message": str(exc), "timestamp": _timestamp()}), 500

    return jsonify(response), 200


@app.post("/distances")
def distances() -> Any:
    """
    Batched driving distances from one origin.
    Required JSON fields: origin {latitude, longitude}, destinations [{latitude, longitude, businessId}]
    """
    payload = _json_body()
    origin = payload.get("origin")
    destinations = payload.get("destinations")

    if not _is_point(origin) or not isinstance(destinations, list) or not all(_is_point(d) for d in destinations):
        return jsonify({"error": "Invalid request parameters"}), 400

    settings = get_settings()
    if not settings.google_api_key:
        logger.error("Google Distance Matrix API key not configured")
        return (
            jsonify(
                {
                    "error": "Google Distance Matrix API key not configured",
                    "message": "Please set GOOGLE_API_KEY in your environment variables",
                }
            ),
            500,
        )

    try:
        results = compute_distances(origin, destinations, settings.google_api_key) if destinations else []
    except (DistanceMatrixError, requests.RequestException) as exc:
        logger.error("Distance calculation error: %s", exc)
        return (
            jsonify({"error": "Failed to calculate distances", "message": str(exc), "timestamp": _timestamp()}),
            500,
        )

    return (
        jsonify(
            {
                "success": True,
                "results": results,
                "origin": origin,
                "destinationCount": len(destinations),
            }
        ),
        200,
    )


# ---------- Internals ----------


def _is_point(value: Any) -> bool:
    if not isinstance(value, dict):
        return False
    for key in ("latitude", "longitude"):
        coord = value.get(key)
        if isinstance(coord, bool) or not isinstance(coord, (int, float)):
            return False
    return True


def _platform_search(query):
    return run_keyword_search(query)["results"]


def build_aggregator() -> SearchAggregator:
    settings = get_settings()
    has_openai = bool(settings.openai_api_key)
    return SearchAggregator(
        platform_search=_platform_search,
        semantic_search=search_by_vibe if has_openai else None,
        ai_search=search_generated if has_openai and settings.google_api_key else None,
    )


def main() -> None:
    port = get_settings().port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
