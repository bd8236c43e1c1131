import pytest

from localsearch.core.errors import InvalidParameter, InvalidQuery, NoMeaningfulKeywords
from localsearch.core.models import UNKNOWN_DISTANCE, SearchQuery
from localsearch.search import keyword_search


def make_row(offering_id, business_id, **overrides):
    row = {
        "id": offering_id,
        "business_id": business_id,
        "title": None,
        "description": None,
        "business_name": None,
        "business_description": None,
        "business_short_description": None,
        "created_at": "2025-08-01T12:00:00Z",
        "offering_images": [],
    }
    row.update(overrides)
    return row


class FakeFetcher:
    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    def __call__(self, keywords, limit):
        self.calls.append((list(keywords), limit))
        return self.rows


def test_scenario_pizza_in_business_description():
    fetcher = FakeFetcher([make_row("o1", "b1", title="Margherita", business_description="Best pizza in town")])

    response = keyword_search.run_keyword_search(
        SearchQuery(text="the best pizza near me"), fetch_candidates=fetcher
    )

    assert fetcher.calls == [(["pizza"], 100)]
    assert response["success"] is True
    assert response["mainKeywords"] == ["pizza"]
    assert response["usedKeywordTier"] == 1
    result = response["results"][0]
    assert result["keywordScore"] == 1
    assert result["matchedKeywords"] == 1
    assert result["foundKeywords"] == ["pizza"]


def test_scenario_higher_tier_excludes_partial_matches():
    fetcher = FakeFetcher(
        [
            make_row("x", "b1", title="Vegan burrito plate", description="with two tacos"),
            make_row("y", "b2", business_name="Tacos Locos"),
        ]
    )

    response = keyword_search.run_keyword_search(SearchQuery(text="vegan tacos"), fetch_candidates=fetcher)

    assert response["usedKeywordTier"] == 2
    assert [r["id"] for r in response["results"]] == ["x"]
    assert response["results"][0]["keywordScore"] == 4
    assert response["results"][0]["matchedKeywords"] == 2
    assert response["message"] == "Found 1 offering matching all 2 keywords"


def test_no_matches_is_a_valid_empty_response():
    fetcher = FakeFetcher([])

    response = keyword_search.run_keyword_search(SearchQuery(text="sushi"), fetch_candidates=fetcher)

    assert response["success"] is True
    assert response["results"] == []
    assert response["usedKeywordTier"] == 0
    assert response["matchCount"] == 0
    assert response["message"].startswith("No offerings matched")


@pytest.mark.parametrize("text", ["", "   "])
def test_blank_query_fails_before_fetching(text):
    fetcher = FakeFetcher([])

    with pytest.raises(InvalidQuery):
        keyword_search.run_keyword_search(SearchQuery(text=text), fetch_candidates=fetcher)

    assert fetcher.calls == []


def test_vague_query_fails_before_fetching():
    fetcher = FakeFetcher([])

    with pytest.raises(NoMeaningfulKeywords):
        keyword_search.run_keyword_search(SearchQuery(text="the best near me"), fetch_candidates=fetcher)

    assert fetcher.calls == []


def test_origin_enriches_filters_and_sorts():
    fetcher = FakeFetcher(
        [
            make_row("near", "b1", title="Pizza", latitude=30.1, longitude=-97.1),
            make_row("far", "b2", title="Pizza", latitude=31.0, longitude=-98.0),
            make_row("nocoords", "b3", title="Pizza"),
            make_row("closer", "b4", title="Pizza", latitude=30.2, longitude=-97.2),
        ]
    )
    distance_calls = []

    def distance_client(origin, destinations):
        distance_calls.append(destinations)
        return [
            {"businessId": "b1", "distance": 4.0, "duration": 10},
            {"businessId": "b2", "distance": 40.0, "duration": 55},
            {"businessId": "b4", "distance": 1.2, "duration": 4},
        ]

    response = keyword_search.run_keyword_search(
        SearchQuery(text="pizza", latitude=30.0, longitude=-97.0, match_count=10),
        fetch_candidates=fetcher,
        distance_client=distance_client,
    )

    assert len(distance_calls) == 1
    assert [r["id"] for r in response["results"]] == ["closer", "near", "nocoords"]
    assert response["results"][2]["distance"] == UNKNOWN_DISTANCE


def test_without_origin_distance_is_never_requested():
    fetcher = FakeFetcher([make_row("o1", "b1", title="Pizza", latitude=30.1, longitude=-97.1)])

    def distance_client(origin, destinations):
        raise AssertionError("distance lookup should not run without an origin")

    response = keyword_search.run_keyword_search(
        SearchQuery(text="pizza"), fetch_candidates=fetcher, distance_client=distance_client
    )

    assert response["results"][0]["distance"] == UNKNOWN_DISTANCE


def test_results_are_truncated_to_match_count():
    fetcher = FakeFetcher([make_row(f"o{i}", f"b{i}", title="Pizza") for i in range(5)])

    response = keyword_search.run_keyword_search(SearchQuery(text="pizza", match_count=2), fetch_candidates=fetcher)

    assert response["matchCount"] == 2
    assert len(response["results"]) == 2


def test_results_carry_compatibility_aliases():
    fetcher = FakeFetcher(
        [
            make_row(
                "o1",
                "b1",
                title="Pizza",
                business_name="Luigi's",
                business_category="Restaurant",
                business_image_url="https://cdn.example.com/luigi.png",
            )
        ]
    )

    result = keyword_search.run_keyword_search(SearchQuery(text="pizza"), fetch_candidates=fetcher)["results"][0]

    assert result["source"] == "offering"
    assert result["name"] == "Luigi's"
    assert result["category"] == "Restaurant"
    assert result["image"] == result["image_url"] == "https://cdn.example.com/luigi.png"
    assert result["isPlatformBusiness"] is True


def test_parse_search_request_defaults():
    query = keyword_search.parse_search_request({"query": "  vegan tacos "})

    assert query.text == "vegan tacos"
    assert query.match_count == 10
    assert query.has_origin is False


def test_parse_search_request_reads_coordinates():
    query = keyword_search.parse_search_request(
        {"query": "pizza", "latitude": "30.5", "longitude": -97.7, "matchCount": 5}
    )

    assert query.origin == {"latitude": 30.5, "longitude": -97.7}
    assert query.match_count == 5


@pytest.mark.parametrize(
    "payload",
    [
        {"query": "pizza", "latitude": "north"},
        {"query": "pizza", "matchCount": 0},
        {"query": "pizza", "matchCount": "lots"},
        {"query": "pizza", "longitude": True},
        {"query": "pizza", "matchCount": float("inf")},
        {"query": "pizza", "matchCount": float("nan")},
        {"query": "pizza", "latitude": float("nan"), "longitude": -97.7},
        {"query": "pizza", "latitude": 30.2, "longitude": float("-inf")},
    ],
)
def test_parse_search_request_rejects_bad_parameters(payload):
    with pytest.raises(InvalidParameter):
        keyword_search.parse_search_request(payload)


def test_parse_search_request_rejects_missing_query():
    with pytest.raises(InvalidQuery):
        keyword_search.parse_search_request({})
