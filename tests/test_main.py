"""Tests for application orchestration in the main module."""

import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ghprod.errors import NetworkError, ParseError, RateLimitError
from ghprod.main import orchestrate_metric_report
from ghprod.models import PullRequest, PullRequestState, RawPage, TerminatingState

_CREATED = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _merged_pr(number: int, author: str, days: float) -> PullRequest:
    merged_at = _CREATED + timedelta(days=days)
    return PullRequest(
        id=number,
        number=number,
        author=author,
        created_at=_CREATED,
        closed_at=merged_at,
        merged_at=merged_at,
        state=PullRequestState.MERGED,
    )


_PRS = [
    _merged_pr(1, "alice", 1.0),
    _merged_pr(2, "alice", 2.0),
    _merged_pr(3, "alice", 3.0),
    _merged_pr(4, "alice", 10.0),
    _merged_pr(5, "bob", 100.0),
]


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_API_URL", raising=False)


def test_orchestrate_mean_pr_duration_prints_result(capsys):
    """Verify the pipeline wires client, depaginator and calculator and prints the mean."""
    client = Mock()
    client.pull_requests_url.return_value = "https://api.github.com/repos/octo/widgets/pulls"
    client.pull_requests_params.return_value = {"state": "all", "per_page": 100}

    with patch("ghprod.main.GitHubClient", return_value=client) as client_ctor_mock, patch(
        "ghprod.main.fetch_all_pull_requests", return_value=_PRS
    ) as fetch_mock:
        exit_code = orchestrate_metric_report(
            ["--api-secret", "gh-token", "octo", "widgets", "solo", "alice", "mean_pr_duration"]
        )

    assert exit_code == 0
    config = client_ctor_mock.call_args.kwargs["config"]
    assert config.owner == "octo"
    assert config.repo == "widgets"
    assert config.token == "gh-token"
    assert config.terminating_state is TerminatingState.MERGED
    fetch_mock.assert_called_once_with(
        client=client,
        url="https://api.github.com/repos/octo/widgets/pulls",
        sleep_seconds=1.0,
        params={"state": "all", "per_page": 100},
    )
    assert capsys.readouterr().out == "4.0\n"


def test_orchestrate_median_pr_duration_prints_result(capsys):
    """Verify the median metric is printed as a decimal number."""
    with patch("ghprod.main.GitHubClient"), patch(
        "ghprod.main.fetch_all_pull_requests", return_value=_PRS
    ):
        exit_code = orchestrate_metric_report(
            ["--page-delay", "0", "octo", "widgets", "solo", "alice", "median_pr_duration"]
        )

    assert exit_code == 0
    assert capsys.readouterr().out == "2.5\n"


def test_orchestrate_total_num_prs_prints_count(capsys):
    """Verify the PR total metric prints an integer count."""
    with patch("ghprod.main.GitHubClient"), patch(
        "ghprod.main.fetch_all_pull_requests", return_value=_PRS
    ):
        exit_code = orchestrate_metric_report(["octo", "widgets", "solo", "bob", "total_num_prs"])

    assert exit_code == 0
    assert capsys.readouterr().out == "1\n"


def test_orchestrate_without_metric_prints_summary(capsys):
    """Verify omitting the metric prints the developer summary report."""
    with patch("ghprod.main.GitHubClient"), patch(
        "ghprod.main.fetch_all_pull_requests", return_value=_PRS
    ):
        exit_code = orchestrate_metric_report(["octo", "widgets", "solo", "alice"])

    assert exit_code == 0
    assert "=== alice's contributions to octo/widgets ===" in capsys.readouterr().out


def test_orchestrate_no_matching_prs_returns_distinct_exit_code(capsys):
    """Verify an empty eligible set reports an error instead of printing a number."""
    with patch("ghprod.main.GitHubClient"), patch(
        "ghprod.main.fetch_all_pull_requests", return_value=_PRS
    ):
        exit_code = orchestrate_metric_report(
            ["-p", "closed", "octo", "widgets", "solo", "alice", "mean_pr_duration"]
        )

    captured = capsys.readouterr()
    assert exit_code == 6
    assert captured.out == ""
    assert captured.err.startswith("ERROR: No closed pull requests authored by 'alice'")


@pytest.mark.parametrize(
    "error, expected_exit_code",
    [
        (RateLimitError("GitHub API rate limit exceeded"), 3),
        (NetworkError("GitHub request failed"), 4),
        (ParseError("GitHub API returned invalid JSON"), 5),
    ],
)
def test_orchestrate_fetch_errors_map_to_exit_codes(capsys, error, expected_exit_code):
    """Verify each failure kind prints one diagnostic line and its own exit code."""
    with patch("ghprod.main.GitHubClient"), patch(
        "ghprod.main.fetch_all_pull_requests", side_effect=error
    ):
        exit_code = orchestrate_metric_report(
            ["octo", "widgets", "solo", "alice", "mean_pr_duration"]
        )

    captured = capsys.readouterr()
    assert exit_code == expected_exit_code
    assert captured.out == ""
    assert captured.err == f"ERROR: {error}\n"


def test_orchestrate_configuration_error_returns_configuration_exit_code(capsys):
    """Verify invalid configuration fails before any request is made."""
    with patch("ghprod.main.fetch_all_pull_requests") as fetch_mock:
        exit_code = orchestrate_metric_report([" ", "widgets", "solo", "alice"])

    assert exit_code == 2
    fetch_mock.assert_not_called()
    assert capsys.readouterr().err.startswith("ERROR:")


def test_orchestrate_unexpected_error_returns_generic_exit_code(capsys):
    """Verify unexpected exceptions are mapped to the generic non-zero exit code."""
    with patch("ghprod.main.parse_args", side_effect=RuntimeError("boom")):
        exit_code = orchestrate_metric_report()

    assert exit_code == 1
    assert "boom" not in capsys.readouterr().err


def test_orchestrate_malformed_timestamp_returns_parse_exit_code(capsys):
    """Verify a page with a numeric timestamp surfaces as a parse failure."""
    client = Mock()
    client.pull_requests_url.return_value = "https://api.github.com/repos/octo/widgets/pulls"
    client.pull_requests_params.return_value = {"state": "all", "per_page": 100}
    client.fetch.return_value = RawPage(
        records=[
            {
                "id": 1,
                "number": 1,
                "user": {"login": "alice"},
                "state": "closed",
                "created_at": 1767225600,
                "closed_at": "2026-01-02T00:00:00Z",
                "merged_at": "2026-01-02T00:00:00Z",
            }
        ],
        next_url=None,
    )

    with patch("ghprod.main.GitHubClient", return_value=client):
        exit_code = orchestrate_metric_report(
            ["octo", "widgets", "solo", "alice", "mean_pr_duration"]
        )

    assert exit_code == 5
    assert capsys.readouterr().err.startswith("ERROR: GitHub API returned a non-string timestamp")


@pytest.mark.parametrize(
    "flags, expected_level",
    [
        ([], logging.WARNING),
        (["-v"], logging.INFO),
        (["-vv"], logging.DEBUG),
        (["--verbose", "--verbose"], logging.DEBUG),
    ],
)
def test_orchestrate_verbosity_selects_log_level(flags, expected_level):
    """Verify repeated verbose flags step the log level from WARNING to INFO to DEBUG."""
    with patch("ghprod.main.logging.basicConfig") as basic_config_mock, patch(
        "ghprod.main.GitHubClient"
    ), patch("ghprod.main.fetch_all_pull_requests", return_value=_PRS):
        exit_code = orchestrate_metric_report(
            flags + ["octo", "widgets", "solo", "alice", "total_num_prs"]
        )

    assert exit_code == 0
    assert basic_config_mock.call_args.kwargs["level"] == expected_level
