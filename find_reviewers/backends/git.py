"""
Git backend for find-reviewers.

Every command runs from the repository root with paths relative to it,
so file headers in diff output can be joined straight onto the root.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import List, Sequence

from ..annotations import parse_line_porcelain
from ..diff_parser import count_lines, parse_modified_lines, whole_file_line_set
from ..domain import AnnotationTable, FileLineSet
from .base import VersionControlBackend, run_command

LOG = logging.getLogger(__name__)


class GitBackend(VersionControlBackend):
    """
    VersionControlBackend implemented with the git CLI.
    """

    default_revision = "HEAD"

    def _git(self, args: List[str]) -> subprocess.CompletedProcess[str]:
        cmd = ["git", "-c", "core.quotePath=false", *args]
        return run_command(cmd, cwd=self.root(), timeout=self.timeout)

    def _find_root(self) -> str:
        completed = run_command(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=self.cwd,
            timeout=self.timeout,
        )
        return completed.stdout.strip()

    def changed_files(self, revision: str) -> List[str]:
        out = self._git(
            [
                "diff",
                "--name-only",
                "-z",
                "--no-renames",
                "--ignore-submodules=all",
                "--diff-filter=MD",
                revision,
                "--",
            ]
        ).stdout
        return [os.path.join(self.root(), name) for name in out.split("\0") if name]

    def whole_file_lines(self, files: Sequence[str], revision: str) -> FileLineSet:
        line_counts = {}
        for path in self.absolute_paths(files):
            blob = self._git(["show", f"{revision}:{self.relative_path(path)}"]).stdout
            line_counts[path] = count_lines(blob)
        return whole_file_line_set(line_counts)

    def modified_lines(self, files: Sequence[str], revision: str) -> FileLineSet:
        if not files:
            return {}

        rel_paths = [self.relative_path(p) for p in self.absolute_paths(files)]
        raw_diff = self._git(
            [
                "diff",
                "-U0",
                "--no-color",
                "--no-ext-diff",
                "--no-renames",
                # Submodule pointers have no lines to blame.
                "--ignore-submodules=all",
                "--diff-filter=MD",
                "--src-prefix=a/",
                "--dst-prefix=b/",
                revision,
                "--",
                *rel_paths,
            ]
        ).stdout
        return parse_modified_lines(raw_diff, self.root())

    def annotate(
        self,
        paths: Sequence[str],
        revision: str,
        ignore_revisions: Sequence[str] = (),
    ) -> AnnotationTable:
        ignore_args: List[str] = []
        for rev in ignore_revisions:
            ignore_args.extend(["--ignore-rev", rev])

        table: AnnotationTable = {}
        for path in self.absolute_paths(paths):
            LOG.debug("Blaming %s", path)
            raw = self._git(
                ["blame", "--line-porcelain", *ignore_args, revision, "--", self.relative_path(path)]
            ).stdout
            table[path] = parse_line_porcelain(raw)
        return table
