"""Tests for the needs-review reporter."""
import io
import json

from rich.console import Console

from markdownlint_trap.core.linter.models import Tier, Violation
from markdownlint_trap.core.linter.reporter import NeedsReviewItem, NeedsReviewReporter


def _review(line: int = 3, rule: str = "sentence-case-heading") -> Violation:
    return Violation(
        rule=rule,
        line=line,
        message="test",
        tier=Tier.NEEDS_REVIEW,
        confidence=0.55,
        context="## Learn Go basics",
        original="Learn Go basics",
        suggestion="Learn go basics",
        reason="Sentence case confidence: 0.55",
        ambiguity={
            "term": "go",
            "type": "programming-language",
            "reason": 'Could be verb "go" OR Go programming language',
            "properForm": "Go",
        },
    )


def test_only_needs_review_is_collected():
    reporter = NeedsReviewReporter()
    reporter.add_violation("a.md", _review())
    reporter.add_violation("a.md", Violation(rule="x", line=1, message="m", tier=Tier.AUTO_FIX))
    reporter.add_violation("a.md", Violation(rule="x", line=1, message="m"))

    assert len(reporter.items) == 1


def test_violation_is_not_modified():
    """The reporter keeps copies of what it is given."""
    violation = _review()
    reporter = NeedsReviewReporter()
    reporter.add_violation("a.md", violation)
    reporter.items[0].ambiguity["term"] = "changed"

    assert violation.ambiguity["term"] == "go"


def test_text_report():
    reporter = NeedsReviewReporter()
    reporter.add_violation("docs/a.md", _review())
    text = reporter.generate_report()

    assert "=== NEEDS REVIEW (1 item) ===" in text
    assert "sentence-case-heading (1 item):" in text
    assert '  docs/a.md:3 - "Learn Go basics"' in text
    assert '    -> Suggested: "Learn go basics"' in text
    assert '    -> Reason: Could be verb "go" OR Go programming language' in text
    assert "    -> Confidence: 55%" in text


def test_empty_text_report():
    text = NeedsReviewReporter().generate_report("text")
    assert "=== NEEDS REVIEW (0 items) ===" in text
    assert "No items require review." in text


def test_json_report():
    reporter = NeedsReviewReporter(format="json")
    reporter.add_violation("a.md", _review(line=3))
    reporter.add_violation("b.md", _review(line=7))
    data = json.loads(reporter.generate_report())

    assert data["summary"] == {
        "totalItems": 2,
        "uniqueFiles": 2,
        "uniqueRules": 1,
        "averageConfidence": 0.55,
    }
    item = data["needsReview"][0]
    assert item["ambiguityType"] == "programming-language"
    assert item["term"] == "go"
    assert item["action"]["options"] == ["APPLY", "REJECT"]
    assert item["action"]["howToApply"] == 'In a.md, line 3: replace "Learn Go basics" with "Learn go basics"'
    assert list(data["byRule"]) == ["sentence-case-heading"]
    assert "instructions" in data


def test_explanation_falls_back_to_reason():
    item = NeedsReviewItem(
        file="a.md", line=1, rule="backtick-code-elements",
        original="foo", suggested="`foo`", confidence=0.4, reason="Backtick confidence: 0.40",
    )
    assert item.explanation == "Backtick confidence: 0.40"


def test_render_table():
    buffer = io.StringIO()
    reporter = NeedsReviewReporter()
    reporter.add_violation("a.md", _review())
    reporter.render(Console(file=buffer, width=200))

    output = buffer.getvalue()
    assert "NEEDS REVIEW (1 item)" in output
    assert "a.md:3" in output


def test_render_shows_brackets_literally():
    buffer = io.StringIO()
    reporter = NeedsReviewReporter()
    reporter.add_item(NeedsReviewItem(
        file="a.md", line=2, rule="backtick-code-elements",
        original="[/x] then [bold]", suggested="`[/x]` then `[bold]`",
        confidence=0.5, reason="Looks like [red]markup[/red]",
    ))
    reporter.render(Console(file=buffer, width=200))

    output = buffer.getvalue()
    assert "[/x] then [bold]" in output
    assert "`[/x]` then `[bold]`" in output
    assert "Looks like [red]markup[/red]" in output


def test_clear():
    reporter = NeedsReviewReporter()
    reporter.add_violation("a.md", _review())
    reporter.clear()
    assert reporter.summary()["totalItems"] == 0
