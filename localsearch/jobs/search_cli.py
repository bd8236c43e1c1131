"""CLI job to run a search in-process and print the JSON response."""

import argparse
import json
import logging
from typing import Any, Dict, List, Optional

from localsearch.core.errors import SearchError
from localsearch.search.keyword_search import DEFAULT_MATCH_COUNT, parse_search_request, run_keyword_search

logger = logging.getLogger(__name__)


def run_search_job(
    *,
    query: str,
    latitude: Optional[float],
    longitude: Optional[float],
    match_count: int,
    unified: bool = False,
) -> Dict[str, Any]:
    search_query = parse_search_request(
        {"query": query, "latitude": latitude, "longitude": longitude, "matchCount": match_count}
    )
    if unified:
        # Imported lazily so the keyword path does not build the Flask app.
        from localsearch.jobs.server import build_aggregator

        return build_aggregator().search(search_query)
    return run_keyword_search(search_query)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search local offerings")
    parser.add_argument("query", help="Free-text query, e.g. 'vegan tacos'")
    parser.add_argument("--lat", dest="latitude", type=float, help="Origin latitude")
    parser.add_argument("--lng", dest="longitude", type=float, help="Origin longitude")
    parser.add_argument(
        "--count",
        dest="match_count",
        type=int,
        default=DEFAULT_MATCH_COUNT,
        help="Maximum number of results to return",
    )
    parser.add_argument(
        "--unified",
        action="store_true",
        help="Merge keyword, semantic and AI-generated results",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        response = run_search_job(
            query=args.query,
            latitude=args.latitude,
            longitude=args.longitude,
            match_count=args.match_count,
            unified=args.unified,
        )
    except SearchError as exc:
        logger.error("%s: %s", exc.error, exc)
        raise SystemExit(2 if exc.status_code < 500 else 1) from exc

    print(json.dumps(response, indent=2, default=str))


if __name__ == "__main__":
    main()
