"""
Unified diff parsing for find-reviewers.

The parser turns zero-context diff output (`git diff -U0`, `hg diff -U0`)
into the set of base-revision line numbers touched in each file. Only
two kinds of lines matter: the `--- <path>` file header and the
`@@ -<start>[,<count>] ...` hunk header. Everything else is body text
and is skipped.
"""

from __future__ import annotations

import os
import re
from typing import Mapping, Optional

from .domain import FileLineSet
from .errors import MalformedDiffProtocol

_FILE_HEADER_RE = re.compile(r"^--- (?P<path>[^\t]+)")

# Only the old-side range is needed; the new side is not inspected.
_HUNK_HEADER_RE = re.compile(r"^@@ -(?P<old_start>\d+)(?:,(?P<old_count>\d+))?")


def parse_modified_lines(raw_diff: str, root: str) -> FileLineSet:
    """
    Parse a zero-context unified diff into a FileLineSet.

    Paths in file headers are taken relative to root; an `a/` prefix, if
    present, is removed first. A hunk header that appears before any
    file header raises MalformedDiffProtocol.
    """

    line_set: FileLineSet = {}
    current: Optional[str] = None
    # Removed lines still owed by the current hunk; one of them may read
    # "--- ..." and must not be taken for a file header.
    pending_removed = 0

    for lineno, line in enumerate(raw_diff.split("\n"), start=1):
        if pending_removed and line.startswith("-"):
            pending_removed -= 1
            continue

        header = _FILE_HEADER_RE.match(line)
        if header:
            current = _absolute_path(header.group("path"), root)
            line_set[current] = set()
            continue

        hunk = _HUNK_HEADER_RE.match(line)
        if hunk is None:
            continue

        if current is None:
            raise MalformedDiffProtocol(
                f"hunk header on diff line {lineno} precedes any file header: {line!r}"
            )

        start = int(hunk.group("old_start"))
        count_text = hunk.group("old_count")
        count = int(count_text) if count_text is not None else 1
        # count == 0 is a pure insertion after `start`; no base line changed.
        line_set[current].update(range(start, start + count))
        pending_removed = count

    return line_set


def whole_file_line_set(line_counts: Mapping[str, int]) -> FileLineSet:
    """
    Return {1..N} for every file, where N is its line count.
    """

    return {path: set(range(1, count + 1)) for path, count in line_counts.items()}


def _absolute_path(header_path: str, root: str) -> str:
    path = header_path.rstrip()
    if path.startswith('"') and path.endswith('"') and len(path) > 1:
        path = _unquote_c_path(path[1:-1])
    if path.startswith("a/"):
        path = path[2:]
    return os.path.normpath(os.path.join(root, path))


_C_ESCAPES = {"a": 7, "b": 8, "t": 9, "n": 10, "v": 11, "f": 12, "r": 13, '"': 34, "\\": 92}


def _unquote_c_path(quoted: str) -> str:
    """
    Undo git's C-style quoting of a path (the text between the quotes).

    Octal escapes are raw bytes of a UTF-8 name.
    """

    out = bytearray()
    i = 0
    while i < len(quoted):
        char = quoted[i]
        if char != "\\" or i + 1 == len(quoted):
            out.extend(char.encode("utf-8"))
            i += 1
            continue

        nxt = quoted[i + 1]
        octal = quoted[i + 1 : i + 4]
        if len(octal) == 3 and all(c in "01234567" for c in octal):
            out.append(int(octal, 8))
            i += 4
        elif nxt in _C_ESCAPES:
            out.append(_C_ESCAPES[nxt])
            i += 2
        else:
            out.extend(("\\" + nxt).encode("utf-8"))
            i += 2
    return out.decode("utf-8", errors="replace")


def count_lines(text: str) -> int:
    """
    Count lines the way blame does: a missing final newline still
    terminates the last line.
    """

    if not text:
        return 0
    return text.count("\n") + (0 if text.endswith("\n") else 1)

