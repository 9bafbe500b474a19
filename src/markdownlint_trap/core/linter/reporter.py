"""Collect and format fixes that were withheld for human review."""
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import Tier, Violation

logger = logging.getLogger(__name__)

REPORT_INSTRUCTIONS = {
    "description": (
        "Items below require manual review. The autofix system was not "
        "confident enough to apply these changes automatically."
    ),
    "actions": [
        "For each item, read the surrounding context in the source file",
        "Determine if the suggested fix is appropriate based on context",
        'If APPLY: Edit the file to replace "original" with "suggested"',
        "If REJECT: The original text is correct (e.g., proper noun), no change needed",
    ],
    "decisionCriteria": {
        "applyFix": [
            'Term is used as a common noun (e.g., "a word about...")',
            'Term is used as a verb (e.g., "go to settings")',
            "Context clearly indicates generic/lowercase usage",
        ],
        "rejectFix": [
            "Term refers to a product/brand (e.g., Microsoft Word)",
            "Term refers to a programming language (e.g., Go, Swift, Rust)",
            "Term is part of a proper noun phrase",
            "Context indicates the capitalization is intentional",
        ],
    },
}


@dataclass
class NeedsReviewItem:
    """A candidate fix waiting for a human decision."""
    file: str
    line: int
    rule: str
    original: str
    suggested: str
    confidence: float
    reason: str = ""
    context: str = ""
    ambiguity: Optional[dict] = None
    heuristics: dict[str, Any] = field(default_factory=dict)

    @property
    def explanation(self) -> str:
        if self.ambiguity and self.ambiguity.get("reason"):
            return self.ambiguity["reason"]
        return self.reason

    def to_dict(self) -> dict:
        ambiguity = self.ambiguity or {}
        return {
            "file": self.file,
            "line": self.line,
            "rule": self.rule,
            "original": self.original,
            "suggested": self.suggested,
            "confidence": self.confidence,
            "ambiguityType": ambiguity.get("type"),
            "term": ambiguity.get("term"),
            "reason": self.explanation,
            "context": self.context,
            "heuristics": self.heuristics,
            "action": {
                "required": "REVIEW_AND_DECIDE",
                "options": ["APPLY", "REJECT"],
                "howToApply": (
                    f'In {self.file}, line {self.line}: replace '
                    f'"{self.original}" with "{self.suggested}"'
                ),
                "howToReject": "No file changes needed; original text is correct",
            },
        }


def _plural(count: int) -> str:
    return "item" if count == 1 else "items"


class NeedsReviewReporter:
    """
    Aggregates needs-review items across one or more lint runs.

    The reporter keeps its own copies; violations handed to
    ``add_violation`` are never modified.
    """

    def __init__(self, format: str = "text"):
        self.format = format
        self.items: list[NeedsReviewItem] = []

    def add_item(self, item: NeedsReviewItem) -> None:
        self.items.append(item)

    def add_violation(self, path: str, violation: Violation,
                      ambiguity: Optional[dict] = None,
                      heuristics: Optional[dict] = None) -> None:
        """Record a needs-review violation; other tiers are ignored."""
        if violation.tier != Tier.NEEDS_REVIEW:
            return
        self.add_item(NeedsReviewItem(
            file=path,
            line=violation.line,
            rule=violation.rule,
            original=violation.original,
            suggested=violation.suggestion or "",
            confidence=violation.confidence if violation.confidence is not None else 0.0,
            reason=violation.reason,
            context=violation.context,
            ambiguity=dict(ambiguity or violation.ambiguity or {}) or None,
            heuristics=dict(heuristics or {}),
        ))

    def items_by_rule(self) -> dict[str, list[NeedsReviewItem]]:
        grouped: dict[str, list[NeedsReviewItem]] = {}
        for item in self.items:
            grouped.setdefault(item.rule, []).append(item)
        return grouped

    def items_by_file(self) -> dict[str, list[NeedsReviewItem]]:
        grouped: dict[str, list[NeedsReviewItem]] = {}
        for item in self.items:
            grouped.setdefault(item.file, []).append(item)
        return grouped

    def summary(self) -> dict:
        total = len(self.items)
        average = sum(i.confidence for i in self.items) / total if total else 0.0
        return {
            "totalItems": total,
            "uniqueFiles": len({i.file for i in self.items}),
            "uniqueRules": len({i.rule for i in self.items}),
            "averageConfidence": average,
        }

    def generate_report(self, format: Optional[str] = None) -> str:
        """Render the report as ``text`` or ``json`` (default: the reporter's format)."""
        if (format or self.format) == "json":
            return self._json_report()
        return self._text_report()

    def _text_report(self) -> str:
        total = len(self.items)
        out = [f"\n=== NEEDS REVIEW ({total} {_plural(total)}) ===\n"]

        if not total:
            out.append("\nNo items require review.\n")
            return "".join(out)

        out.append(
            "\nACTION REQUIRED: Review each item below and decide whether to:\n"
            "  1. APPLY the suggested fix (if the suggestion is correct)\n"
            "  2. REJECT the fix (if the original is correct, e.g., proper noun)\n"
            "\n"
            "For each item, read the surrounding context in the file to determine\n"
            "whether the term is a proper noun (keep as-is) or common noun (apply fix).\n"
            "\n"
        )

        for rule, items in self.items_by_rule().items():
            out.append(f"{rule} ({len(items)} {_plural(len(items))}):\n")
            for item in items:
                out.append(f'  {item.file}:{item.line} - "{item.original}"\n')
                out.append(f'    -> Suggested: "{item.suggested}"\n')
                if item.explanation:
                    out.append(f"    -> Reason: {item.explanation}\n")
                if item.context:
                    out.append(f"    -> Context: {item.context}\n")
                out.append(f"    -> Confidence: {item.confidence * 100:.0f}%\n")
                out.append(
                    f"    -> Action: Read {item.file} around line {item.line}, then APPLY or REJECT\n\n"
                )

        return "".join(out)

    def _json_report(self) -> str:
        report = {
            "instructions": REPORT_INSTRUCTIONS,
            "needsReview": [item.to_dict() for item in self.items],
            "byRule": {
                rule: [item.to_dict() for item in items]
                for rule, items in self.items_by_rule().items()
            },
            "summary": self.summary(),
        }
        return json.dumps(report, indent=2)

    def render(self, console: Optional[Console] = None) -> None:
        """Print the report as a rich table."""
        console = console or Console()
        total = len(self.items)
        header = Panel(
            Text(f"NEEDS REVIEW ({total} {_plural(total)})", justify="left"),
            style="bold #5f8787",
        )
        console.print(header)

        if not total:
            console.print("No items require review.", style="dim")
            return

        table = Table(show_lines=False)
        table.add_column("Location", style="bold")
        table.add_column("Rule")
        table.add_column("Original")
        table.add_column("Suggested", style="#ddeecc")
        table.add_column("Confidence", justify="right")
        table.add_column("Reason", style="dim")

        for item in self.items:
            table.add_row(
                Text(f"{item.file}:{item.line}"),
                item.rule,
                Text(item.original),
                Text(item.suggested),
                f"{item.confidence * 100:.0f}%",
                Text(item.explanation),
            )
        console.print(table)

    def clear(self) -> None:
        self.items.clear()
