"""Command-line argument parsing for ghprod."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .models import Metric, TerminatingState

_TERMINATING_STATE_ALIASES = {
    "merged": TerminatingState.MERGED,
    "merge": TerminatingState.MERGED,
    "m": TerminatingState.MERGED,
    "closed": TerminatingState.CLOSED,
    "close": TerminatingState.CLOSED,
    "c": TerminatingState.CLOSED,
}


def _terminating_state(value: str) -> TerminatingState:
    """Parse a terminating state, accepting short aliases in any case.

    Raises:
        argparse.ArgumentTypeError: If value names no known state.
    """
    state = _TERMINATING_STATE_ALIASES.get(value.strip().lower())
    if state is None:
        raise argparse.ArgumentTypeError(
            f"unknown terminating state '{value}' (expected 'merged' or 'closed')"
        )
    return state


def _metric(value: str) -> Metric:
    try:
        return Metric(value)
    except ValueError as exc:
        choices = ", ".join(metric.value for metric in Metric)
        raise argparse.ArgumentTypeError(f"unknown metric '{value}' (choose from {choices})") from exc


def _non_negative_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a number") from exc

    if parsed < 0:
        raise argparse.ArgumentTypeError("must be greater than or equal to 0")

    return parsed


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for metric computation.

    Returns:
        Parsed CLI arguments containing owner, repository, the ``solo``
        subcommand's developer and optional metric, the optional API token and
        terminating state.
    """
    parser = argparse.ArgumentParser(
        prog="ghprod",
        description="Compute productivity metrics for a developer from GitHub pull requests.",
    )

    parser.add_argument("owner", help="Repository owner (user or organization).")
    parser.add_argument("repo", help="Repository name.")
    parser.add_argument(
        "-a",
        "--api-secret",
        default=None,
        help="GitHub API token (default: the GITHUB_TOKEN environment variable, if set).",
    )
    parser.add_argument(
        "-p",
        "--pull-request-terminating-state",
        type=_terminating_state,
        default=None,
        help="State in which a pull request counts as completed: merged or closed (default: merged).",
    )
    parser.add_argument(
        "--page-delay",
        type=_non_negative_float,
        default=None,
        help=(
            "Seconds to sleep between page requests "
            "(default: 60 without a token, 1 with a token)."
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress on standard error (-v for INFO, -vv for DEBUG).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    solo = subparsers.add_parser("solo", help="Report metrics for a single developer.")
    solo.add_argument("user", help="GitHub login of the developer.")
    solo.add_argument(
        "metric",
        nargs="?",
        type=_metric,
        default=None,
        help=(
            "Metric to print: mean_pr_duration, median_pr_duration or total_num_prs "
            "(default: print a summary)."
        ),
    )

    return parser.parse_args(argv)
