"""Data models for the linter."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Tier(Enum):
    """Autofix safety tiers for a candidate fix."""
    AUTO_FIX = "auto-fix"          # Safe to fix automatically
    NEEDS_REVIEW = "needs-review"  # Reported, fix withheld for a human
    SKIP = "skip"                  # Too uncertain to fix


class Category(Enum):
    """Code-like categories recognised by the classifiers."""
    URL = "url"
    ABSOLUTE_PATH = "absolute-path"
    FILE_PATH = "file-path"
    FILENAME = "filename"
    FUNCTION_CALL = "function-call"
    DOTFILE = "dotfile"
    ENV_VAR = "env-var"
    CLI_FLAG = "cli-flag"
    COMMAND = "command"
    IMPORT = "import"
    NETWORK_ADDRESS = "network-address"
    KEY_COMBO = "key-combo"
    ASSIGNMENT = "assignment"
    SHELL_VARIABLE = "shell-variable"
    SNAKE_CASE = "snake-case"
    CAMEL_CASE = "camel-case"
    PASCAL_CASE = "pascal-case"


@dataclass(frozen=True)
class Span:
    """A sub-range of one source line. ``start`` and ``end`` are 0-based, end exclusive."""
    line: int
    start: int
    end: int
    text: str

    def __len__(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Span") -> bool:
        return self.start < other.end and other.start < self.end

    def contains(self, other: "Span") -> bool:
        return self.start <= other.start and other.end <= self.end


@dataclass(frozen=True)
class ClassificationVerdict:
    """One classifier's opinion about a span."""
    category: Category
    matched: bool
    confidence: float
    reason: str
    span: Span
    priority: int = 0


@dataclass(frozen=True)
class FixInfo:
    """
    A minimal, position-exact edit on one line.

    ``edit_column`` is 1-based. A ``delete_count`` of -1 removes the whole line.
    """
    edit_column: int
    delete_count: int
    insert_text: str = ""

    @property
    def deletes_line(self) -> bool:
        return self.delete_count == -1

    def apply(self, line: str) -> Optional[str]:
        """Return the edited line, or None when the fix deletes the line."""
        if self.deletes_line:
            return None
        start = self.edit_column - 1
        return line[:start] + self.insert_text + line[start + self.delete_count:]

    def to_dict(self) -> dict:
        return {
            "editColumn": self.edit_column,
            "deleteCount": self.delete_count,
            "insertText": self.insert_text,
        }


@dataclass
class Violation:
    """A single violation found in the document."""
    rule: str
    line: int
    message: str
    column: int = 1
    fix: Optional[FixInfo] = None
    tier: Optional[Tier] = None    # None when no fix was proposed
    confidence: Optional[float] = None
    context: str = ""
    original: str = ""
    suggestion: Optional[str] = None
    reason: str = ""
    ambiguity: Optional[dict] = None

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.line, self.column)

    def to_dict(self) -> dict:
        return {
            "rule": self.rule,
            "line": self.line,
            "column": self.column,
            "message": self.message,
            "tier": self.tier.value if self.tier else None,
            "confidence": self.confidence,
            "context": self.context,
            "has_fix": self.fix is not None,
            "fix": self.fix.to_dict() if self.fix else None,
        }


@dataclass
class LintReport:
    """Complete lint report for a document."""
    path: str
    total_violations: int = 0
    auto_fixable: int = 0
    needs_review: int = 0
    skipped: int = 0
    violations: list[Violation] = field(default_factory=list)
    config_errors: list[dict] = field(default_factory=list)
    fixed: list[str] = field(default_factory=list)
    applied: list[Violation] = field(default_factory=list)

    def add_violation(self, violation: Violation) -> None:
        """Add a violation to the report and update counts."""
        self.violations.append(violation)
        self.total_violations += 1

        if violation.tier == Tier.AUTO_FIX and violation.fix is not None:
            self.auto_fixable += 1
        elif violation.tier == Tier.NEEDS_REVIEW:
            self.needs_review += 1
        elif violation.tier == Tier.SKIP:
            self.skipped += 1

    @property
    def remaining(self) -> list[Violation]:
        """Violations whose fixes were not applied."""
        return [v for v in self.violations if not any(v is a for a in self.applied)]

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "total_violations": self.total_violations,
            "auto_fixable": self.auto_fixable,
            "needs_review": self.needs_review,
            "skipped": self.skipped,
            "violations": [v.to_dict() for v in self.violations],
            "config_errors": self.config_errors,
            "fixed": self.fixed,
        }
