"""Configuration parsing and validation for ghprod."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError
from .models import TerminatingState

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TERMINATING_STATE = TerminatingState.MERGED

# Unauthenticated callers get 60 requests per hour, authenticated ones 5000.
UNAUTHENTICATED_PAGE_DELAY_SECONDS = 60.0
AUTHENTICATED_PAGE_DELAY_SECONDS = 1.0


@dataclass(frozen=True)
class Config:
    """Validated runtime settings for a single metric invocation."""

    owner: str
    repo: str
    token: Optional[str]
    terminating_state: TerminatingState
    page_delay_seconds: float
    api_url: str = DEFAULT_API_URL
    timeout_seconds: int = 30


def load_config(
    owner: str,
    repo: str,
    api_secret: Optional[str] = None,
    terminating_state: Optional[TerminatingState] = None,
    page_delay_seconds: Optional[float] = None,
) -> Config:
    """Build and validate application configuration.

    Args:
        owner: Repository owner (user or organization login).
        repo: Repository name.
        api_secret: GitHub token. Falls back to ``GITHUB_TOKEN`` when omitted.
        terminating_state: State marking a PR as completed. Defaults to MERGED.
        page_delay_seconds: Sleep between page requests. Defaults depend on
            whether a token is available.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If owner/repo are blank or the page delay is negative.
    """
    owner = owner.strip()
    repo = repo.strip()
    if not owner or not repo:
        raise ConfigurationError("Both an owner and a repository name are required.")

    token = (api_secret or os.getenv("GITHUB_TOKEN", "")).strip() or None

    if page_delay_seconds is None:
        page_delay_seconds = (
            AUTHENTICATED_PAGE_DELAY_SECONDS if token else UNAUTHENTICATED_PAGE_DELAY_SECONDS
        )
    elif page_delay_seconds < 0:
        raise ConfigurationError(
            "Invalid value for 'page delay': expected a number greater than or equal to 0."
        )

    api_url = os.getenv("GITHUB_API_URL", "").strip() or DEFAULT_API_URL

    return Config(
        owner=owner,
        repo=repo,
        token=token,
        terminating_state=terminating_state or DEFAULT_TERMINATING_STATE,
        page_delay_seconds=page_delay_seconds,
        api_url=api_url.rstrip("/"),
    )
