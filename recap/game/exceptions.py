"""Custom exceptions for replay summary errors."""

from typing import Optional


class ReplayError(Exception):
    """Base class for failures that abort a summary.

    str(exc) is the single human-readable message surfaced to the caller.
    """


class ReplayValidationError(ReplayError):
    """Raised when the replay address or the fetched payload is unusable.

    Covers a blank address and a payload without a log body.
    """


class ReplayFetchError(ReplayError):
    """Exception raised when the replay document cannot be retrieved.

    Attributes:
        url: The address that was requested
        status_code: HTTP status of a non-success response, if there was one
    """

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        """Initialize the ReplayFetchError.

        Args:
            message: Human-readable failure description
            url: The address that was requested
            status_code: HTTP status of a non-success response
        """
        self.url = url
        self.status_code = status_code
        super().__init__(message)
