"""Custom exception types for ghprod."""

from __future__ import annotations

from typing import Optional


class GhProdError(Exception):
    """Base exception for all recoverable ghprod errors."""

    exit_code = 1


class ConfigurationError(GhProdError):
    """Raised when runtime configuration values are missing or invalid."""

    exit_code = 2


class RateLimitError(GhProdError):
    """Raised when the GitHub API reports that the request quota is exhausted."""

    exit_code = 3

    def __init__(self, message: str, reset_at: Optional[int] = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class NetworkError(GhProdError):
    """Raised when a request to the GitHub API cannot be completed."""

    exit_code = 4


class HttpStatusError(NetworkError):
    """Raised when the GitHub API answers with a non rate-limit error status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(GhProdError):
    """Raised when a GitHub API response does not have the expected shape."""

    exit_code = 5


class NoMatchingPullRequestsError(GhProdError):
    """Raised when no pull request is eligible for a metric computation."""

    exit_code = 6
