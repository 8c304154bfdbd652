"""
Per-line authorship for find-reviewers.

This module resolves an AnnotationTable for the files of a FileLineSet
and holds the parsers that turn blame output into that table. Nothing
downstream of here looks at blame text.
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import TYPE_CHECKING, List, Optional, Sequence

from .domain import AnnotationTable, FileLineSet
from .errors import BackendInvocationError

if TYPE_CHECKING:
    from .backends.base import VersionControlBackend

LOG = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"<(?P<email>[^>]*)>")


def resolve_annotations(
    backend: "VersionControlBackend",
    line_set: FileLineSet,
    revision: str,
    ignore_revisions: Sequence[str] = (),
) -> AnnotationTable:
    """
    Annotate exactly the files in line_set at revision.

    Blame cost grows with file size, so this is a single batched call per
    run rather than one call per changed line.
    """

    paths = sorted(line_set)
    if not paths:
        return {}

    LOG.info("Annotating %d file(s) at %s", len(paths), revision)
    table = backend.annotate(paths, revision, ignore_revisions)

    missing = sorted(set(paths) - set(table))
    if missing:
        # e.g. hg skips binary files; their lines are tallied as unknown.
        LOG.warning("no annotation for %s; counting its lines as unknown", ", ".join(missing))
    return {path: table[path] for path in paths if path in table}


def parse_line_porcelain(raw: str) -> List[Optional[str]]:
    """
    Parse `git blame --line-porcelain` output for one file.

    Each line of the file is reported as a block of `key value` headers
    followed by the content prefixed with a tab; the author is the
    `author-mail` header with its angle brackets removed.
    """

    authors: List[Optional[str]] = [None]
    current: Optional[str] = None

    for line in raw.split("\n"):
        if line.startswith("\t"):
            authors.append(current)
            current = None
        elif line.startswith("author-mail "):
            current = user_email(line[len("author-mail "):]) or None

    return authors


def parse_annotate_json(raw: str, root: str) -> AnnotationTable:
    """
    Parse `hg annotate -Tjson --user` output run from the repository root.
    """

    try:
        entries = json.loads(raw or "[]")
    except ValueError as exc:
        raise BackendInvocationError(f"unreadable annotate output: {exc}") from exc

    table: AnnotationTable = {}
    for entry in entries:
        rel = entry.get("abspath") or entry["path"]
        path = os.path.normpath(os.path.join(root, rel))
        authors: List[Optional[str]] = [None]
        authors.extend(user_email(line.get("user", "")) or None for line in entry["lines"])
        table[path] = authors
    return table


def user_email(user: str) -> str:
    """
    Reduce `Name <email>` (or `<email>`) to the bare address.

    A user string without an address is returned stripped.
    """

    match = _EMAIL_RE.search(user)
    if match:
        return match.group("email").strip()
    return user.strip()
