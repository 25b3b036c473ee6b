"""Application entrypoint and orchestration for ghprod."""

from __future__ import annotations

import logging
import sys
from typing import List, Optional, Sequence

from .cli import parse_args
from .config import Config, load_config
from .depaginator import fetch_all_pull_requests
from .errors import GhProdError
from .github_client import GitHubClient
from .metrics import compute_metric, total_pull_requests
from .models import Metric, PullRequest
from .report import generate_summary

logger = logging.getLogger(__name__)

_EXIT_SUCCESS = 0
_EXIT_UNEXPECTED_ERROR = 1


def _log_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def _configure_logging(verbosity: int) -> None:
    logging.basicConfig(
        level=_log_level(verbosity),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _fetch_pull_requests(config: Config) -> List[PullRequest]:
    client = GitHubClient(config=config)
    return fetch_all_pull_requests(
        client=client,
        url=client.pull_requests_url(),
        sleep_seconds=config.page_delay_seconds,
        params=client.pull_requests_params(),
    )


def orchestrate_metric_report(argv: Optional[Sequence[str]] = None) -> int:
    """Run the end-to-end metric pipeline for one invocation.

    Returns:
        Process exit code. ``0`` on success; known failures map to the
        ``exit_code`` of their ``GhProdError`` subclass; anything else is ``1``.
    """
    try:
        args = parse_args(argv)
        _configure_logging(args.verbose)

        config = load_config(
            owner=args.owner,
            repo=args.repo,
            api_secret=args.api_secret,
            terminating_state=args.pull_request_terminating_state,
            page_delay_seconds=args.page_delay,
        )
        logger.info(
            "Fetching all PRs for repository %s/%s",
            config.owner,
            config.repo,
            extra={
                "owner": config.owner,
                "repo": config.repo,
                "authenticated": config.token is not None,
            },
        )

        prs = _fetch_pull_requests(config)

        if args.metric is None:
            print(
                generate_summary(
                    owner=config.owner,
                    repo=config.repo,
                    author=args.user,
                    prs=prs,
                    terminating_state=config.terminating_state,
                )
            )
        elif args.metric is Metric.TOTAL_NUM_PRS:
            print(total_pull_requests(args.user, prs))
        else:
            print(compute_metric(prs, args.user, config.terminating_state, args.metric))

        return _EXIT_SUCCESS
    except GhProdError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return exc.exit_code
    except Exception:
        logger.debug("Unexpected failure", exc_info=True)
        print("ERROR: Unexpected failure while computing metrics.", file=sys.stderr)
        return _EXIT_UNEXPECTED_ERROR


def main() -> None:
    """Console-script entrypoint."""
    raise SystemExit(orchestrate_metric_report())


if __name__ == "__main__":
    main()
