"""GitHub REST API client for pull request data retrieval."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .config import Config
from .errors import HttpStatusError, NetworkError, ParseError, RateLimitError
from .models import RawPage

logger = logging.getLogger(__name__)


class GitHubClient:
    """Small, typed client issuing single GET requests against the GitHub REST API.

    The client performs exactly one round trip per call and never retries;
    pacing between pages is the caller's concern.
    """

    _API_VERSION = "2022-11-28"
    _PULL_REQUEST_PAGE_SIZE = 100
    _LOW_QUOTA_WARNING_THRESHOLD = 5

    def __init__(self, config: Config) -> None:
        """Initialize a GitHub API client.

        Args:
            config: Validated runtime configuration. When ``config.token`` is set,
                every request carries a bearer ``Authorization`` header.
        """
        self._config = config
        self._timeout_seconds = config.timeout_seconds

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": self._API_VERSION,
            }
        )
        if config.token:
            self._session.headers["Authorization"] = f"Bearer {config.token}"

    def pull_requests_url(self) -> str:
        """Return the pull request listing endpoint for the configured repository."""
        return f"{self._config.api_url}/repos/{self._config.owner}/{self._config.repo}/pulls"

    def pull_requests_params(self) -> Dict[str, Any]:
        """Return the query parameters for the first pull request listing page."""
        return {"state": "all", "per_page": self._PULL_REQUEST_PAGE_SIZE}

    def _remaining_quota(self, response: requests.Response) -> Optional[int]:
        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining is None:
            return None
        try:
            return int(remaining)
        except ValueError:
            return None

    def _reset_at(self, response: requests.Response) -> Optional[int]:
        reset = response.headers.get("X-RateLimit-Reset")
        if reset is None:
            return None
        try:
            return int(reset)
        except ValueError:
            return None

    def _is_rate_limited(self, response: requests.Response) -> bool:
        """Detect an exhausted quota from the status code, headers or body."""
        if response.status_code == 429:
            return True
        if response.status_code != 403:
            return False
        if self._remaining_quota(response) == 0:
            return True
        return "rate limit" in (response.text or "").lower()

    def fetch(self, url: str, params: Optional[Dict[str, Any]] = None) -> RawPage:
        """Execute a single GET request and decode one page of records.

        Args:
            url: Absolute URL of the page to fetch. Continuation URLs from the
                ``Link`` header already carry their query string.
            params: Optional query parameters for the request.

        Returns:
            The page records together with the next-page URL, if any.

        Raises:
            NetworkError: If the transport fails.
            RateLimitError: If the API signals an exhausted request quota.
            HttpStatusError: If the API returns any other HTTP status >= 400.
            ParseError: If the body is not a JSON list of records.
        """
        try:
            response = self._session.get(url, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise NetworkError(f"GitHub request failed: GET {url}: {exc}") from exc

        status_code = response.status_code

        if self._is_rate_limited(response):
            reset_at = self._reset_at(response)
            hint = "" if self._config.token else " Supply an API token to raise the limit."
            raise RateLimitError(
                f"GitHub API rate limit exceeded: GET {url} returned {status_code}.{hint}",
                reset_at=reset_at,
            )

        if status_code >= 400:
            raise HttpStatusError(
                f"GitHub API request failed: GET {url} returned {status_code} - {response.text}",
                status_code=status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ParseError(f"GitHub API returned invalid JSON: GET {url}") from exc

        if not isinstance(payload, list):
            raise ParseError(f"GitHub API returned unexpected payload shape: GET {url}")

        remaining = self._remaining_quota(response)
        if remaining is not None and remaining <= self._LOW_QUOTA_WARNING_THRESHOLD:
            logger.warning(
                "Approaching GitHub API rate limit: %d requests remaining, resets at %s",
                remaining,
                self._reset_at(response),
                extra={"remaining": remaining, "reset_at": self._reset_at(response)},
            )

        next_url = (response.links or {}).get("next", {}).get("url")

        return RawPage(records=payload, next_url=next_url, rate_limit_remaining=remaining)
