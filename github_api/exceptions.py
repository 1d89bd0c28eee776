"""
Exceptions raised by the GitHub API client.

Every remote failure carries the HTTP status and the error body (parsed JSON
when the server declared JSON, raw text otherwise) so callers can tell
authentication failures, rate limiting and missing resources apart from
transient server errors.
"""

from typing import Any, Optional


class GitHubAPIError(Exception):
    """Base class for failed GitHub API operations."""

    def __init__(self, error: Any = "", status: Optional[int] = None):
        self.error = error
        self.status = status
        super().__init__(f"GitHub API request failed (status {status}): {error}")


class NotFound(GitHubAPIError):
    """Raised when a required resource does not exist (404)."""

    pass


class Conflict(GitHubAPIError):
    """Raised on a rejected non-fast-forward ref update or a changed path."""

    pass


class RemoteError(GitHubAPIError):
    """Raised for any other non-2xx response or a network failure."""

    pass


class DecodeError(GitHubAPIError):
    """Raised when an error body declared as JSON cannot be parsed."""

    pass


class PreconditionMissing(GitHubAPIError):
    """Raised when an operation needs an identity or hash that was never established."""

    def __init__(self, message: str):
        super().__init__(error=message, status=None)


def _mentions_fast_forward(error: Any) -> bool:
    if isinstance(error, dict):
        error = error.get("message", "")
    return isinstance(error, str) and "fast forward" in error.lower()


def error_from_response(status: Optional[int], error: Any) -> GitHubAPIError:
    """Map a failed response onto the exception taxonomy.

    Args:
        status: HTTP status code
        error: Parsed JSON error body, raw text, or empty string

    Returns:
        Exception instance to raise
    """
    if status == 404:
        return NotFound(error, status)
    if status == 409 or (status == 422 and _mentions_fast_forward(error)):
        return Conflict(error, status)
    return RemoteError(error, status)
