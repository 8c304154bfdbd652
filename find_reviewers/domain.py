"""
Core data types for find-reviewers.

These describe changed lines, per-line authorship and author tallies.
They carry no git or Mercurial details so the aggregation and ranking
code never sees raw command output.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

# Absolute file path -> 1-based line numbers in the base revision.
FileLineSet = Dict[str, Set[int]]

# Absolute file path -> author of each line; index 0 is always None.
AnnotationTable = Dict[str, List[Optional[str]]]

AuthorTally = Counter

UNKNOWN_AUTHOR = "unknown"


@dataclass(frozen=True)
class RankedAuthor:
    """
    One row of a ranked report.

    percent is relative to every line in the tally, not only to the
    rows that survived truncation.
    """

    author: str
    count: int
    percent: float
