"""
Joining changed lines with annotations into author tallies.

The functions here operate purely on the domain types and do not
interact with any version-control system.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, Optional, Union

from .domain import UNKNOWN_AUTHOR, AnnotationTable, AuthorTally, FileLineSet


def tally_authors(
    line_set: FileLineSet,
    annotations: AnnotationTable,
    per_file: bool = False,
) -> Union[AuthorTally, Dict[str, AuthorTally]]:
    """
    Count how many of the lines in line_set each author last touched.

    In global mode a single Counter is returned. In per-file mode the
    same attribution rule fills one Counter per file path. Lines with no
    recorded author are counted under UNKNOWN_AUTHOR, so the counts in
    every tally add up to the number of lines it covers.
    """

    if per_file:
        return {
            path: _tally_file(lines, annotations.get(path), Counter())
            for path, lines in line_set.items()
        }

    tally: AuthorTally = Counter()
    for path, lines in line_set.items():
        _tally_file(lines, annotations.get(path), tally)
    return tally


def _tally_file(
    lines: Iterable[int],
    authors: Optional[list],
    tally: AuthorTally,
) -> AuthorTally:
    authors = authors or [None]
    for lineno in lines:
        author = authors[lineno] if 0 < lineno < len(authors) else None
        tally[author or UNKNOWN_AUTHOR] += 1
    return tally
