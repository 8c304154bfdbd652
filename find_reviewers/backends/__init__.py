"""
Version-control backends for find-reviewers.

The engine picks one backend per run, either by name or by looking for
the nearest `.git` or `.hg` directory above the working directory.
"""

from __future__ import annotations

import os
from typing import Dict, Optional, Type

from ..errors import ConfigurationError
from .base import VersionControlBackend
from .git import GitBackend
from .mercurial import MercurialBackend

BACKENDS: Dict[str, Type[VersionControlBackend]] = {
    "git": GitBackend,
    "hg": MercurialBackend,
}

_MARKERS = ((".git", "git"), (".hg", "hg"))


def detect_vcs(cwd: str) -> str:
    """
    Return the name of the VCS owning cwd, checking parents upwards.
    """

    current = os.path.realpath(cwd)
    while True:
        for marker, name in _MARKERS:
            if os.path.exists(os.path.join(current, marker)):
                return name
        parent = os.path.dirname(current)
        if parent == current:
            raise ConfigurationError(f"{cwd} is not inside a git or Mercurial repository")
        current = parent


def get_backend(
    vcs: Optional[str] = None,
    cwd: Optional[str] = None,
    timeout: Optional[float] = None,
) -> VersionControlBackend:
    cwd = cwd or os.getcwd()
    name = vcs or detect_vcs(cwd)
    try:
        backend_cls = BACKENDS[name]
    except KeyError:
        raise ConfigurationError(f"unsupported version control system {name!r}") from None
    return backend_cls(cwd=cwd, timeout=timeout)
