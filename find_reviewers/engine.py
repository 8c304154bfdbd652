"""
High-level orchestration for find-reviewers.

The engine is responsible for:
  - choosing a version-control backend,
  - collecting the lines to attribute (changed lines, or whole files),
  - annotating those files at the base revision,
  - tallying authors, and
  - rendering the ranked report.
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

from .aggregate import tally_authors
from .annotations import resolve_annotations
from .backends import get_backend
from .backends.base import VersionControlBackend
from .config import Config
from .domain import FileLineSet
from .report import render_report

LOG = logging.getLogger(__name__)


def find_reviewers(config: Config, backend: Optional[VersionControlBackend] = None) -> str:
    """
    Run the attribution pipeline and return the report text.

    Nothing is written anywhere; an empty string means no attributable
    lines were found.
    """

    config.validate()
    if backend is None:
        backend = get_backend(config.vcs, timeout=config.timeout)

    revision = config.revision or backend.default_revision
    files = _target_files(config, backend, revision)

    line_set = _collect_lines(config, backend, files, revision)
    LOG.info(
        "Attributing %d line(s) across %d file(s)",
        sum(len(lines) for lines in line_set.values()),
        len(line_set),
    )

    annotations = resolve_annotations(backend, line_set, revision, config.ignore_revisions)
    tallies = tally_authors(line_set, annotations, per_file=config.per_file)

    return render_report(
        tallies,
        config.num_reviewers,
        per_file=config.per_file,
        strip_domain=config.strip_domain,
    )


def _target_files(config: Config, backend: VersionControlBackend, revision: str) -> List[str]:
    if config.files:
        return backend.absolute_paths(config.files)

    files = backend.changed_files(revision)
    LOG.info("Using %d file(s) changed since %s", len(files), revision)
    return files


def _collect_lines(
    config: Config,
    backend: VersionControlBackend,
    files: List[str],
    revision: str,
) -> FileLineSet:
    if config.whole_file:
        return backend.whole_file_lines(files, revision)
    return backend.modified_lines(files, revision)


def run(config: Config) -> None:
    """
    Entry point for the main CLI command; writes the report to stdout.
    """

    LOG.debug("Starting find-reviewers with config: %s", config)

    report = find_reviewers(config)
    if not report:
        LOG.warning("no changed lines with a prior author were found")
    sys.stdout.write(report)
