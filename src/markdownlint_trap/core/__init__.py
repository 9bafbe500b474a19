"""Core modules for markdown linting."""
from .linter import (
    LintReport,
    NeedsReviewReporter,
    Tier,
    Violation,
    lint_content,
    lint_file,
    lint_paths,
)

__all__ = [
    "LintReport",
    "NeedsReviewReporter",
    "Tier",
    "Violation",
    "lint_content",
    "lint_file",
    "lint_paths",
]
