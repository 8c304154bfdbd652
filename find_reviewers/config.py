"""
Configuration model for find-reviewers.

The CLI constructs a Config instance and passes it down into the engine
so behavior can be adjusted without relying on global state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .errors import ConfigurationError

SUPPORTED_VCS = ("git", "hg")


@dataclass
class Config:
    """
    Top-level configuration for a find-reviewers run.

    revision and vcs default to None, meaning "let the backend decide"
    and "detect from the working directory" respectively.
    """

    files: List[str] = field(default_factory=list)
    revision: Optional[str] = None
    num_reviewers: int = 3
    whole_file: bool = False
    per_file: bool = False
    ignore_revisions: List[str] = field(default_factory=list)
    vcs: Optional[str] = None
    strip_domain: Optional[str] = None
    timeout: Optional[float] = None
    verbosity: int = 0

    def validate(self) -> None:
        if self.num_reviewers < 1:
            raise ConfigurationError(
                f"--num-reviewers must be at least 1, got {self.num_reviewers}"
            )
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"--timeout must be positive, got {self.timeout}")
        if self.vcs is not None and self.vcs not in SUPPORTED_VCS:
            raise ConfigurationError(
                f"unsupported version control system {self.vcs!r}; "
                f"expected one of {', '.join(SUPPORTED_VCS)}"
            )
