import pytest

from localsearch.core.errors import InvalidQuery, NoMeaningfulKeywords
from localsearch.search import keywords


def test_extract_keywords_strips_stop_words_and_short_tokens():
    assert keywords.extract_keywords("the best pizza near me") == ["pizza"]


def test_extract_keywords_lowercases_and_keeps_order():
    assert keywords.extract_keywords("  Vegan   TACOS ") == ["vegan", "tacos"]


def test_extract_keywords_keeps_duplicates():
    assert keywords.extract_keywords("pizza pizza") == ["pizza", "pizza"]


@pytest.mark.parametrize("raw", ["", "   ", None, 42])
def test_extract_keywords_rejects_blank_queries(raw):
    with pytest.raises(InvalidQuery):
        keywords.extract_keywords(raw)


@pytest.mark.parametrize("raw", ["the best", "a an of to", "top good near me", "is it ok"])
def test_extract_keywords_rejects_vague_queries(raw):
    with pytest.raises(NoMeaningfulKeywords):
        keywords.extract_keywords(raw)


def test_vague_query_error_is_distinct_from_invalid_query():
    assert not issubclass(NoMeaningfulKeywords, InvalidQuery)


def test_stop_words_are_lowercase_and_cover_filler_words():
    assert all(word == word.lower() for word in keywords.STOP_WORDS)
    assert {"best", "good", "top", "the", "near"} <= keywords.STOP_WORDS
