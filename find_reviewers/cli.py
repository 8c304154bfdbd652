"""
Command-line interface for find-reviewers.

This module is responsible for argument parsing and delegating to the
orchestration in the engine module.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

from .config import SUPPORTED_VCS, Config
from .engine import run
from .errors import FindReviewersError
from .logging_utils import configure_logging

STRIP_DOMAIN_ENV = "FIND_REVIEWERS_STRIP_DOMAIN"


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="find-reviewers",
        description=(
            "Suggest reviewers for uncommitted changes by ranking the authors "
            "who last touched the lines being modified."
        ),
    )

    parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="Files to analyze (default: all modified or deleted files).",
    )
    parser.add_argument(
        "-r",
        "--revision",
        help="Base revision to diff and annotate against (default: HEAD for git, . for hg).",
    )
    parser.add_argument(
        "-n",
        "--num-reviewers",
        type=int,
        default=3,
        help="Number of reviewers to list per report (default: 3).",
    )
    parser.add_argument(
        "-w",
        "--whole-file",
        action="store_true",
        help="Attribute every line of each file instead of only the changed lines.",
    )
    parser.add_argument(
        "-f",
        "--output-per-file",
        dest="per_file",
        action="store_true",
        help="Print one ranking per file instead of a single combined ranking.",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        dest="ignore_revisions",
        action="append",
        default=[],
        metavar="REV",
        help="Revision whose changes are skipped when annotating (can be repeated).",
    )
    parser.add_argument(
        "--vcs",
        choices=SUPPORTED_VCS,
        help="Version control system to use (default: detect from the working directory).",
    )
    parser.add_argument(
        "--strip-domain",
        default=os.environ.get(STRIP_DOMAIN_ENV) or None,
        metavar="DOMAIN",
        help=f"Hide @DOMAIN when printing author addresses (default: ${STRIP_DOMAIN_ENV}).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Abort if a single version-control command runs longer than this many seconds.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be specified multiple times).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    config = Config(
        files=args.files,
        revision=args.revision,
        num_reviewers=args.num_reviewers,
        whole_file=args.whole_file,
        per_file=args.per_file,
        ignore_revisions=args.ignore_revisions,
        vcs=args.vcs,
        strip_domain=args.strip_domain,
        timeout=args.timeout,
        verbosity=args.verbose,
    )

    configure_logging(verbosity=config.verbosity)

    try:
        run(config)
    except KeyboardInterrupt:
        # Graceful shutdown on Ctrl+C
        return 130
    except FindReviewersError as exc:
        print(f"find-reviewers: error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
