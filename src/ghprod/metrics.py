"""Metric computation over already-retrieved pull requests.

This module computes per-PR durations in fractional days and reduces them for
one developer:
- mean PR duration (creation to termination)
- median PR duration (creation to termination)
- total number of PRs authored
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from .errors import NoMatchingPullRequestsError
from .models import Metric, PullRequest, TerminatingState
from .stats import mean, median

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 60 * 60 * 24


def terminating_timestamp(
    pr: PullRequest,
    terminating_state: TerminatingState,
) -> Optional[datetime]:
    """Return the timestamp marking termination of ``pr`` for ``terminating_state``."""
    if terminating_state is TerminatingState.MERGED:
        return pr.merged_at
    return pr.closed_at


def pull_request_terminated(pr: PullRequest, terminating_state: TerminatingState) -> bool:
    """Determine whether ``pr`` has terminated in ``terminating_state``.

    The PR state must match the terminating state and the matching timestamp
    must be present. A merged PR therefore never counts as CLOSED.
    """
    if pr.state.value != terminating_state.value:
        return False
    return terminating_timestamp(pr, terminating_state) is not None


def pull_requests_by_author(author: str, prs: List[PullRequest]) -> List[PullRequest]:
    """Return the subset of ``prs`` authored by ``author`` (exact login match)."""
    return [pr for pr in prs if pr.author == author]


def terminated_pull_requests(
    prs: List[PullRequest],
    terminating_state: TerminatingState,
) -> List[PullRequest]:
    """Return the subset of ``prs`` that have terminated."""
    return [pr for pr in prs if pull_request_terminated(pr, terminating_state)]


def total_pull_requests(author: str, prs: List[PullRequest]) -> int:
    """Return the number of PRs in ``prs`` authored by ``author``."""
    return len(pull_requests_by_author(author, prs))


def pull_request_duration_days(
    pr: PullRequest,
    terminating_state: TerminatingState,
) -> Optional[float]:
    """Compute the time from creation until termination in fractional days.

    A day is a fixed 86400 seconds. Returns ``None`` when ``pr`` has not
    terminated in ``terminating_state``.
    """
    if not pull_request_terminated(pr, terminating_state):
        return None

    ended_at = terminating_timestamp(pr, terminating_state)
    return (ended_at - pr.created_at).total_seconds() / SECONDS_PER_DAY


def pull_request_durations(
    prs: List[PullRequest],
    author: str,
    terminating_state: TerminatingState,
) -> List[float]:
    """Collect the durations in days of all eligible PRs by ``author``."""
    durations: List[float] = []
    for pr in pull_requests_by_author(author, prs):
        duration = pull_request_duration_days(pr, terminating_state)
        if duration is not None:
            durations.append(duration)

    logger.debug(
        "Collected PR durations",
        extra={
            "author": author,
            "terminating_state": terminating_state.value,
            "samples": len(durations),
        },
    )
    return durations


def compute_metric(
    prs: List[PullRequest],
    author: str,
    terminating_state: TerminatingState,
    metric: Metric,
) -> float:
    """Compute a duration metric in days for one developer.

    Business logic:
    - Only PRs authored by ``author`` are considered.
    - Only PRs whose state equals ``terminating_state`` and which carry the
      corresponding timestamp are eligible. Open PRs never contribute.
    - ``MEAN_PR_DURATION`` averages the eligible durations,
      ``MEDIAN_PR_DURATION`` takes their median.

    Raises:
        NoMatchingPullRequestsError: If no PR is eligible.
        ValueError: If ``metric`` is not a duration metric.
    """
    if metric not in (Metric.MEAN_PR_DURATION, Metric.MEDIAN_PR_DURATION):
        raise ValueError(f"Metric '{metric.value}' is not a duration metric.")

    durations = pull_request_durations(prs, author, terminating_state)
    if not durations:
        raise NoMatchingPullRequestsError(
            f"No {terminating_state.value} pull requests authored by '{author}' were found."
        )

    if metric is Metric.MEAN_PR_DURATION:
        return mean(durations)
    return median(durations)
