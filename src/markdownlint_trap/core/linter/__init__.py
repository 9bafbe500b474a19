"""Markdown prose linter with confidence-gated autofixes."""
from .engine import apply_fixes, lint_content, lint_file, lint_paths
from .models import FixInfo, LintReport, Tier, Violation
from .reporter import NeedsReviewReporter

__all__ = [
    "lint_file", "lint_content", "lint_paths", "apply_fixes",
    "FixInfo", "LintReport", "Tier", "Violation", "NeedsReviewReporter",
]
