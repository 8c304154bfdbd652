"""
Ranking and rendering of author tallies.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from .domain import AuthorTally, RankedAuthor
from .errors import ConfigurationError


def rank_authors(tally: AuthorTally, count: int) -> List[RankedAuthor]:
    """
    Return the top `count` authors of a tally.

    Authors are ordered by line count, highest first; equal counts are
    ordered by author identifier so output never depends on dict order.
    """

    if count < 1:
        raise ConfigurationError(f"number of reviewers must be at least 1, got {count}")

    total = sum(tally.values())
    ordered = sorted(tally.items(), key=lambda item: (-item[1], item[0]))
    return [
        RankedAuthor(author=author, count=lines, percent=100.0 * lines / total)
        for author, lines in ordered[:count]
    ]


def display_author(author: str, strip_domain: Optional[str] = None) -> str:
    """
    Shorten an author for display by dropping `@<strip_domain>`.

    Only used when rendering; tallies always key on the full identifier.
    """

    if strip_domain:
        suffix = "@" + strip_domain.lstrip("@")
        if author.lower().endswith(suffix.lower()):
            return author[: -len(suffix)]
    return author


def render_tally(
    tally: AuthorTally,
    count: int,
    strip_domain: Optional[str] = None,
) -> List[str]:
    return [
        f"{display_author(row.author, strip_domain)}: {row.count} lines ({row.percent:.1f}%)"
        for row in rank_authors(tally, count)
    ]


def render_report(
    tallies: Union[AuthorTally, Dict[str, AuthorTally]],
    count: int,
    per_file: bool = False,
    strip_domain: Optional[str] = None,
) -> str:
    """
    Render a global tally, or per-file tallies, as report text.

    In per-file mode each file's block is introduced by a `--- <path>`
    line; files come in path order and files with no lines are skipped.
    """

    output: List[str] = []
    if per_file:
        for path in sorted(tallies):
            tally = tallies[path]
            if not tally:
                continue
            output.append(f"--- {path}")
            output.extend(render_tally(tally, count, strip_domain))
    else:
        output.extend(render_tally(tallies, count, strip_domain))

    if not output:
        return ""
    return "\n".join(output) + "\n"
