"""Custom exceptions for the newsletter feed scripts."""


class SanityAPIError(Exception):
    """Raised when the Sanity query API cannot be read."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class FeedWriteError(Exception):
    """Raised when the RSS feed cannot be written to disk."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        self.original_error = original_error
        super().__init__(message)
