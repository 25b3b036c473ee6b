"""Domain models for GitHub pull request metric computation.

These dataclasses intentionally model only the subset of API payload fields that
are required for the productivity metrics.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional


class PullRequestState(enum.Enum):
    """Lifecycle state of a pull request."""

    OPEN = "open"
    CLOSED = "closed"
    MERGED = "merged"


class TerminatingState(enum.Enum):
    """State a pull request is in once it counts as completed.

    Some projects never merge successful pull requests through GitHub but close
    them instead (for example when a merge bot pushes the change), so either
    state may mark completion.
    """

    CLOSED = "closed"
    MERGED = "merged"


class Metric(enum.Enum):
    """Statistic that can be requested for a single developer."""

    MEAN_PR_DURATION = "mean_pr_duration"
    MEDIAN_PR_DURATION = "median_pr_duration"
    TOTAL_NUM_PRS = "total_num_prs"


@dataclass(frozen=True, slots=True)
class PullRequest:
    """Represents the minimal pull request data required for metric calculations."""

    id: int
    number: int
    author: str
    created_at: datetime
    closed_at: Optional[datetime]
    merged_at: Optional[datetime]
    state: PullRequestState


@dataclass(slots=True)
class RawPage:
    """Represents one decoded page of a paginated GitHub API listing."""

    records: List[Dict[str, Any]]
    next_url: Optional[str]
    rate_limit_remaining: Optional[int] = None
