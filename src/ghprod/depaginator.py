"""Sequential depagination of GitHub pull request listings.

All pull requests are fetched up front so that every metric works on
already-retrieved data, keeping the number of requests to a minimum.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .errors import ParseError
from .github_client import GitHubClient
from .models import PullRequest, PullRequestState

logger = logging.getLogger(__name__)


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse GitHub ISO8601 timestamps into timezone-aware datetimes."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ParseError(f"GitHub API returned a non-string timestamp: {value!r}")

    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(normalized)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"GitHub API returned an invalid timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def decode_pull_request(item: Dict[str, Any]) -> PullRequest:
    """Decode one pull request record of the listing endpoint.

    Raises:
        ParseError: If required fields are missing or malformed.
    """
    if not isinstance(item, dict):
        raise ParseError(f"GitHub pull request record is not an object: {item!r}")

    pr_id = item.get("id")
    number = item.get("number")
    user = item.get("user") or {}
    login = user.get("login") if isinstance(user, dict) else None
    created_at = parse_datetime(item.get("created_at"))
    closed_at = parse_datetime(item.get("closed_at"))
    merged_at = parse_datetime(item.get("merged_at"))

    if pr_id is None or number is None or not login or created_at is None:
        raise ParseError(
            "GitHub pull request payload is missing required fields: "
            f"id={pr_id}, number={number}, user={login}, created_at={item.get('created_at')}"
        )

    if merged_at is not None:
        state = PullRequestState.MERGED
    elif item.get("state") == "closed":
        state = PullRequestState.CLOSED
    else:
        state = PullRequestState.OPEN

    try:
        return PullRequest(
            id=int(pr_id),
            number=int(number),
            author=str(login),
            created_at=created_at,
            closed_at=closed_at,
            merged_at=merged_at,
            state=state,
        )
    except (TypeError, ValueError) as exc:
        raise ParseError(f"GitHub pull request payload has a malformed id: {item!r}") from exc


def fetch_all_pull_requests(
    client: GitHubClient,
    url: str,
    sleep_seconds: float,
    params: Optional[Dict[str, Any]] = None,
) -> List[PullRequest]:
    """Fetch every page of a pull request listing and return all records.

    Pages are requested one at a time, following the ``Link`` header until no
    next page remains. Between two requests the thread sleeps for
    ``sleep_seconds`` to stay below the API rate limit; no sleep happens after
    the last page. Records keep the API ordering, concatenated in fetch order.

    Errors raised by the client, including ``RateLimitError``, propagate
    immediately without further requests.

    Args:
        client: Client used for each individual page request.
        url: URL of the first page.
        sleep_seconds: Delay inserted between consecutive page requests.
        params: Query parameters for the first page only.

    Returns:
        All pull requests across all pages.
    """
    pull_requests: List[PullRequest] = []
    page_number = 0
    next_url: Optional[str] = url
    next_params = params

    while next_url is not None:
        page_number += 1
        logger.info("Fetching page %d from %s...", page_number, next_url, extra={"url": next_url})

        page = client.fetch(next_url, params=next_params)
        logger.info(
            "Page %d returned %d records (rate limit remaining: %s)",
            page_number,
            len(page.records),
            "unknown" if page.rate_limit_remaining is None else page.rate_limit_remaining,
        )
        if not page.records:
            logger.warning("Received empty page %d", page_number, extra={"page": page_number})

        pull_requests.extend(decode_pull_request(item) for item in page.records)

        next_url = page.next_url
        next_params = None

        if next_url is not None:
            logger.debug("Sleeping for %s seconds...", sleep_seconds)
            time.sleep(sleep_seconds)

    logger.info(
        "Retrieved %d PRs across %d pages",
        len(pull_requests),
        page_number,
        extra={"pages": page_number},
    )

    return pull_requests
