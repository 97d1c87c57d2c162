"""Errors raised while reading input and talking to the search service."""


class FtxIndexError(Exception):
    """Root of every error raised by ftxindex.

    Configuration problems, bad input records and search service failures
    all derive from it.
    """

    pass


class ConfigError(FtxIndexError):
    """A run cannot start because a setting or argument is unusable.

    Covers a missing ``MEILISEARCH_KEY``, an unreadable input file and a
    delete request without a document id. Always raised before the search
    service is contacted.

    Attributes:
        field: Setting or option at fault (``MEILISEARCH_KEY``, ``file``, ``doc-id``)
        message: What is wrong with it
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"Configuration error in '{field}': {message}")


class RecordParseError(FtxIndexError):
    """Exception raised when a single input record cannot be parsed.

    Parse errors are recovered locally: the offending record is skipped and
    the error is collected into the ingest report.

    Attributes:
        source: Where the record came from (e.g. ``"line 3"`` or ``"record 0"``)
        message: Description of the parse failure
    """

    def __init__(self, source: str, message: str) -> None:
        """Create a parse error for one record."""
        self.source = source
        self.message = message
        super().__init__(f"Invalid record at {source}: {message}")


class SearchServiceError(FtxIndexError):
    """Base exception for failures talking to the search service."""

    pass


class SearchServiceConnectionError(SearchServiceError):
    """Error raised when the search service is unreachable.

    Attributes:
        base_url: The service URL that failed
        original_error: The transport exception that caused the failure
    """

    def __init__(self, base_url: str, original_error: Exception | None = None) -> None:
        """Initialize with the service URL and optional underlying cause.

        Args:
            base_url: The search service base URL
            original_error: The underlying transport exception
        """
        self.base_url = base_url
        self.original_error = original_error
        message = f"Failed to connect to search service at {base_url}."
        if original_error:
            message += f" Original error: {original_error}"
        super().__init__(message)


class SearchServiceAPIError(SearchServiceError):
    """Error raised when the search service answers with a non-success status.

    Attributes:
        url: Request URL
        status_code: HTTP status code returned by the service
        detail: ``message`` field of the error payload, when present
    """

    def __init__(self, url: str, status_code: int, detail: str | None = None) -> None:
        """Create an API error from a failed response."""
        self.url = url
        self.status_code = status_code
        self.detail = detail
        message = f"Search service returned HTTP {status_code} for {url}"
        if detail:
            message += f": {detail}"
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        """Whether the error means the target index or record does not exist."""
        if self.status_code == 404:
            return True
        return bool(self.detail) and "not found" in self.detail.lower()
