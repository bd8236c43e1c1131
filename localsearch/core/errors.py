"""Error taxonomy shared by the search services and HTTP handlers."""


class SearchError(Exception):
    """Base class for errors that map onto an HTTP response."""

    error = "Search failed"
    status_code = 500


class InvalidQuery(SearchError):
    """Raised when the query is missing or blank."""

    error = "Query is required"
    status_code = 400


class NoMeaningfulKeywords(SearchError):
    """Raised when a query has words but none of them are searchable."""

    error = "No valid keywords found"
    status_code = 400


class InvalidParameter(SearchError):
    error = "Invalid request parameters"
    status_code = 400


class BackendConfigurationMissing(SearchError):
    """Raised when credentials required by a backend are not configured."""

    error = "Missing required environment variables"
    status_code = 500


class UpstreamQueryFailure(SearchError):
    """Raised when the data store rejects or fails a query."""

    error = "Keyword search failed"
    status_code = 500


class EnrichmentFailure(RuntimeError):
    """Raised by the distance client; callers log it and carry on without distances."""
