"""
Custom exception types used across find-reviewers.

Defining explicit error classes makes it easier for the CLI and higher
layers to distinguish between user-facing failures and unexpected bugs.
"""

from __future__ import annotations


class FindReviewersError(Exception):
    """Base class for all find-reviewers specific errors."""


class BackendInvocationError(FindReviewersError):
    """Raised when a version-control command fails or cannot be run."""


class MalformedDiffProtocol(FindReviewersError):
    """Raised when diff output does not have the expected structure."""


class ConfigurationError(FindReviewersError):
    """Raised when the requested options are invalid."""
