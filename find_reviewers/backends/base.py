"""
Abstract interface for version-control backends.

The rest of the pipeline is written only against VersionControlBackend,
so git and Mercurial can be swapped without touching aggregation or
ranking. Every operation shells out to the VCS and never writes to the
repository.
"""

from __future__ import annotations

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from typing import Iterable, List, Mapping, Optional, Sequence

from ..domain import AnnotationTable, FileLineSet
from ..errors import BackendInvocationError

LOG = logging.getLogger(__name__)


def run_command(
    cmd: Sequence[str],
    cwd: Optional[str] = None,
    timeout: Optional[float] = None,
    env: Optional[Mapping[str, str]] = None,
) -> subprocess.CompletedProcess[str]:
    """
    Run an external command and return the completed process.

    All backend invocations go through here so that error handling and
    logging are centralized.
    """

    LOG.debug("Running command: %s", " ".join(cmd))
    try:
        completed = subprocess.run(
            list(cmd),
            cwd=cwd,
            check=False,
            text=True,
            encoding="utf-8",
            errors="replace",
            capture_output=True,
            timeout=timeout,
            env=dict(os.environ, **env) if env else None,
        )
    except subprocess.TimeoutExpired as exc:
        raise BackendInvocationError(
            f"command timed out after {timeout}s: {' '.join(cmd)}"
        ) from exc
    except OSError as exc:  # noqa: BLE001
        raise BackendInvocationError(f"failed to execute {cmd[0]}: {exc}") from exc

    if completed.returncode != 0:
        LOG.debug("%s stderr: %s", cmd[0], completed.stderr)
        details = completed.stderr.strip()
        message = f"command failed: {' '.join(cmd)}"
        if details:
            message = f"{message}\n{details}"
        raise BackendInvocationError(message)

    return completed


class VersionControlBackend(ABC):
    """
    Capability interface over one version-control system.

    Paths going in may be absolute or relative to the process working
    directory; paths coming out are always absolute.
    """

    #: Revision used when the caller does not name one.
    default_revision: str = ""

    def __init__(self, cwd: Optional[str] = None, timeout: Optional[float] = None):
        self.cwd = os.path.realpath(cwd or os.getcwd())
        self.timeout = timeout
        self._root: Optional[str] = None

    def root(self) -> str:
        """
        Return the absolute path of the repository root.
        """

        if self._root is None:
            self._root = os.path.realpath(self._find_root())
            LOG.debug("Repository root: %s", self._root)
        return self._root

    def absolute_paths(self, files: Iterable[str]) -> List[str]:
        return [os.path.normpath(os.path.join(self.cwd, f)) for f in files]

    def relative_path(self, path: str) -> str:
        """
        Return path relative to the repository root, with `/` separators.
        """

        rel = os.path.relpath(os.path.join(self.cwd, path), self.root())
        if rel == os.pardir or rel.startswith(os.pardir + os.sep):
            raise BackendInvocationError(f"{path} is outside repository {self.root()}")
        return rel.replace(os.sep, "/")

    @abstractmethod
    def _find_root(self) -> str:
        """Ask the VCS for the repository root."""

    @abstractmethod
    def changed_files(self, revision: str) -> List[str]:
        """
        Return absolute paths of files modified or deleted in the working
        tree relative to revision.
        """

    @abstractmethod
    def whole_file_lines(self, files: Sequence[str], revision: str) -> FileLineSet:
        """
        Return {1..N} for each file, N being its line count at revision.
        """

    @abstractmethod
    def modified_lines(self, files: Sequence[str], revision: str) -> FileLineSet:
        """
        Return the base-revision lines touched by working-tree changes.

        Only modified or deleted files are considered; newly added files
        have no prior author and are left out.
        """

    @abstractmethod
    def annotate(
        self,
        paths: Sequence[str],
        revision: str,
        ignore_revisions: Sequence[str] = (),
    ) -> AnnotationTable:
        """
        Return the author of every line of each path as of revision.

        Changes made in ignore_revisions are attributed to the revision
        that last touched the line before them.
        """
