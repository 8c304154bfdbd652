"""
Mercurial backend for find-reviewers.

Commands run from the repository root with HGPLAIN set, so user
configuration (aliases, relative-path settings, pagers) cannot change
the output being parsed.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import List, Sequence

from ..annotations import parse_annotate_json
from ..diff_parser import count_lines, parse_modified_lines, whole_file_line_set
from ..domain import AnnotationTable, FileLineSet
from .base import VersionControlBackend, run_command

LOG = logging.getLogger(__name__)

_HG_ENV = {"HGPLAIN": "1"}


class MercurialBackend(VersionControlBackend):
    """
    VersionControlBackend implemented with the hg CLI.
    """

    default_revision = "."

    def _hg(self, args: List[str]) -> subprocess.CompletedProcess[str]:
        return run_command(["hg", *args], cwd=self.root(), timeout=self.timeout, env=_HG_ENV)

    def _find_root(self) -> str:
        completed = run_command(["hg", "root"], cwd=self.cwd, timeout=self.timeout, env=_HG_ENV)
        return completed.stdout.strip()

    def _status(self, revision: str, rel_paths: Sequence[str] = ()) -> List[str]:
        """
        Return root-relative paths modified or removed since revision.
        """

        args = ["status", "--modified", "--removed", "--no-status", "--print0", "--rev", revision]
        if rel_paths:
            args.extend(["--", *rel_paths])
        out = self._hg(args).stdout
        return [name for name in out.split("\0") if name]

    def changed_files(self, revision: str) -> List[str]:
        return [os.path.join(self.root(), name) for name in self._status(revision)]

    def whole_file_lines(self, files: Sequence[str], revision: str) -> FileLineSet:
        line_counts = {}
        for path in self.absolute_paths(files):
            content = self._hg(["cat", "--rev", revision, "--", self.relative_path(path)]).stdout
            line_counts[path] = count_lines(content)
        return whole_file_line_set(line_counts)

    def modified_lines(self, files: Sequence[str], revision: str) -> FileLineSet:
        if not files:
            return {}

        rel_paths = [self.relative_path(p) for p in self.absolute_paths(files)]
        # hg diff has no --diff-filter; restrict it to what status reports.
        changed = self._status(revision, rel_paths)
        if not changed:
            return {}

        raw_diff = self._hg(["diff", "-U0", "--nodates", "--rev", revision, "--", *changed]).stdout
        return parse_modified_lines(raw_diff, self.root())

    def annotate(
        self,
        paths: Sequence[str],
        revision: str,
        ignore_revisions: Sequence[str] = (),
    ) -> AnnotationTable:
        if not paths:
            return {}

        args = ["annotate", "-Tjson", "--user", "--rev", revision]
        for rev in ignore_revisions:
            args.extend(["--skip", rev])
        args.append("--")
        args.extend(self.relative_path(p) for p in self.absolute_paths(paths))

        LOG.debug("Annotating %d file(s) with hg", len(paths))
        return parse_annotate_json(self._hg(args).stdout, self.root())
