"""
find-reviewers: suggest reviewers for a change from blame data.

The package diffs the working tree against a base revision, annotates
the touched lines, and ranks their last authors.
"""
