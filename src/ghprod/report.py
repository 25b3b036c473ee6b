"""Human-readable contribution summary for a single developer."""

from __future__ import annotations

from typing import List

from .errors import NoMatchingPullRequestsError
from .metrics import compute_metric, pull_requests_by_author, terminated_pull_requests
from .models import Metric, PullRequest, TerminatingState


def generate_summary(
    owner: str,
    repo: str,
    author: str,
    prs: List[PullRequest],
    terminating_state: TerminatingState,
) -> str:
    """Generate a contribution summary for ``author`` in ``owner/repo``.

    The summary includes the number of PRs, how many of them are completed, and
    the mean and median completion time in days.

    Args:
        owner: Repository owner shown in the header.
        repo: Repository name shown in the header.
        author: GitHub login of the developer.
        prs: All pull requests of the repository.
        terminating_state: State marking a PR as completed.

    Returns:
        Formatted multi-line text report.
    """
    lines = [f"=== {author}'s contributions to {owner}/{repo} ==="]

    authored = pull_requests_by_author(author, prs)
    if not authored:
        lines.append("There's not much here...")
        return "\n".join(lines)

    done = len(terminated_pull_requests(authored, terminating_state))
    if done == len(authored):
        lines.append(f"{author} has {len(authored)} PRs in total (all of which are completed)")
    else:
        lines.append(f"{author} has {len(authored)} PRs in total ({done} of these are completed)")

    try:
        mean_days = compute_metric(authored, author, terminating_state, Metric.MEAN_PR_DURATION)
        median_days = compute_metric(authored, author, terminating_state, Metric.MEDIAN_PR_DURATION)
    except NoMatchingPullRequestsError:
        lines.append(f"None of {author}'s PRs are {terminating_state.value} yet")
    else:
        lines.append(f"{author}'s PRs take {mean_days:.2f} days to complete on average")
        lines.append(f"{author}'s median PR takes {median_days:.2f} days to complete")

    return "\n".join(lines)
