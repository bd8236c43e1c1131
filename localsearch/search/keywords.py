"""Turn free-text queries into the keyword set used for matching."""

import logging
from typing import Any, List

from localsearch.core.errors import InvalidQuery, NoMeaningfulKeywords

logger = logging.getLogger(__name__)

MIN_KEYWORD_LENGTH = 3

STOP_WORDS = frozenset(
    {
        # articles, conjunctions
        "the", "and", "but", "nor", "for", "yet", "also",
        # prepositions
        "about", "above", "across", "after", "along", "among", "around", "at", "before",
        "behind", "below", "beside", "between", "by", "down", "during", "from", "into",
        "near", "nearby", "off", "onto", "out", "over", "through", "toward", "towards",
        "under", "until", "upon", "with", "within", "without",
        # pronouns and determiners
        "all", "any", "each", "every", "her", "his", "its", "me", "mine", "our", "ours",
        "she", "some", "that", "their", "them", "these", "they", "this", "those", "you",
        "your", "what", "where", "which", "who", "whom", "whose",
        # auxiliaries and filler verbs
        "are", "can", "could", "did", "does", "find", "get", "had", "has", "have", "looking",
        "need", "should", "want", "was", "were", "will", "would",
        # filler adjectives and adverbs
        "best", "better", "cool", "good", "great", "here", "just", "local", "more", "most",
        "nice", "now", "open", "please", "place", "places", "really", "spot", "spots",
        "there", "today", "tonight", "top", "very",
    }
)


def normalize_query(raw: Any) -> str:
    """Return the trimmed query text or raise InvalidQuery."""
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidQuery("Please provide a valid search query")
    return raw.strip()


def extract_keywords(raw: Any) -> List[str]:
    """Lowercase, split and filter a query into searchable keywords.

    Order is preserved and duplicates are kept. Tokens shorter than
    MIN_KEYWORD_LENGTH or present in STOP_WORDS are dropped.
    """
    text = normalize_query(raw)
    tokens = text.lower().split()
    keywords = [
        token for token in tokens if len(token) >= MIN_KEYWORD_LENGTH and token not in STOP_WORDS
    ]
    logger.debug("Extracted keywords %s from tokens %s", keywords, tokens)

    if not keywords:
        raise NoMeaningfulKeywords("Please provide a more specific search query")
    return keywords
