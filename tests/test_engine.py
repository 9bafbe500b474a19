"""Tests for the lint engine: rule selection, config errors and fix application."""
import asyncio
import logging

from markdownlint_trap.core.linter import (
    FixInfo,
    LintReport,
    NeedsReviewReporter,
    Tier,
    Violation,
    apply_fixes,
    lint_content,
    lint_file,
    lint_paths,
)
from markdownlint_trap.core.linter.engine import (
    _extract_frontmatter,
    _rules_to_run,
    build_rule_config,
    get_available_rules,
)
from markdownlint_trap.core.linter.rules import RULES


def _run(coro):
    """Run async coroutine synchronously (avoids pytest-asyncio dep)."""
    return asyncio.run(coro)


def _auto(rule: str, line: int, fix: FixInfo) -> Violation:
    return Violation(rule=rule, line=line, message="test", fix=fix, tier=Tier.AUTO_FIX)


# ---------------------------------------------------------------------------
# Front matter
# ---------------------------------------------------------------------------


def test_extract_frontmatter():
    content = "---\ntitle: Test\n---\n# Heading\n"
    body, lines = _extract_frontmatter(content)

    assert body == "# Heading\n"
    assert lines == 3


def test_no_frontmatter():
    assert _extract_frontmatter("# Heading\n") == ("# Heading\n", 0)
    assert _extract_frontmatter("---\nnever closed\n") == ("---\nnever closed\n", 0)


def test_line_numbers_include_frontmatter():
    """Reported lines refer to the original file, front matter included."""
    content = "---\ntitle: Test\n---\n# This Is Wrong\n"
    report = _run(lint_content(content, rules=["sentence-case-heading"]))

    assert report.violations[0].line == 4

    fixed, _ = apply_fixes(content, report.violations)
    assert fixed == "---\ntitle: Test\n---\n# This is wrong\n"


# ---------------------------------------------------------------------------
# Rule selection
# ---------------------------------------------------------------------------


def test_all_rules_run_by_default():
    assert _rules_to_run(None, {}) == list(RULES)


def test_rules_disabled_in_settings():
    settings = {"no-bare-urls": False, "BCE001": False}
    selected = _rules_to_run(None, settings)

    assert "no-bare-urls" not in selected
    assert "backtick-code-elements" not in selected
    assert "no-literal-ampersand" in selected


def test_default_false_enables_only_listed_rules():
    settings = {"default": False, "no-literal-ampersand": True, "DL001": {}}
    assert _rules_to_run(None, settings) == ["no-dead-internal-links", "no-literal-ampersand"]


def test_unknown_rule_is_logged(caplog):
    with caplog.at_level(logging.WARNING):
        selected = _rules_to_run(["nope", "NLA001", "no-literal-ampersand"], {})

    assert selected == ["no-literal-ampersand"]
    assert "Unknown rule: nope" in caplog.text


def test_get_available_rules():
    rules = get_available_rules()

    assert set(rules) == set(RULES)
    assert rules["no-literal-ampersand"] == 'Use "and" instead of a standalone ampersand.'


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def test_invalid_option_becomes_violation():
    """Bad options are reported and the rule still runs with defaults."""
    settings = {"no-literal-ampersand": {"skipCodeBlocks": "yes"}}
    report = _run(lint_content("Dogs & cats\n", rules=["no-literal-ampersand"], settings=settings))

    messages = [v.message for v in report.violations]
    assert messages[0] == (
        "Configuration error: skipCodeBlocks: skipCodeBlocks must be a boolean (true or false)"
    )
    assert messages[1] == 'Use "and" instead of literal ampersand (&)'
    assert report.violations[0].tier == Tier.SKIP
    assert report.config_errors[0]["rule"] == "no-literal-ampersand"
    assert report.config_errors[0]["field"] == "skipCodeBlocks"


def test_safety_merge_order():
    """Rule autofixSafety overrides the global block, which overrides defaults."""
    settings = {
        "autofix": {"safety": {"confidenceThreshold": 0.8, "safeWords": ["a"]}},
        "backtick-code-elements": {"autofixSafety": {"confidenceThreshold": 0.9, "safeWords": ["b"]}},
    }
    config, errors = build_rule_config(
        "backtick-code-elements", settings, settings["autofix"]["safety"]
    )

    assert errors == []
    assert config.safety.confidence_threshold == 0.9
    assert config.safety.safe_words[-2:] == ["a", "b"]


def test_invalid_global_safety_is_reported():
    settings = {"autofix": {"safety": {"reviewThreshold": 7}}}
    report = _run(lint_content("Plain text.\n", rules=["no-literal-ampersand"], settings=settings))

    assert report.config_errors[0]["rule"] == "autofix"
    assert report.config_errors[0]["field"] == "reviewThreshold"


def test_failing_rule_is_logged(monkeypatch, caplog):
    """One broken rule does not stop the others."""
    def broken(doc, config):
        raise RuntimeError("boom")
        yield

    monkeypatch.setitem(RULES, "no-bare-urls", broken)
    with caplog.at_level(logging.ERROR):
        report = _run(lint_content("Dogs & cats\n", rules=["no-bare-urls", "no-literal-ampersand"]))

    assert "Rule no-bare-urls failed: boom" in caplog.text
    assert report.total_violations == 1


# ---------------------------------------------------------------------------
# Fixes
# ---------------------------------------------------------------------------


def test_fixes_apply_right_to_left():
    content = "a & b & c"
    violations = [
        _auto("no-literal-ampersand", 1, FixInfo(3, 1, "and")),
        _auto("no-literal-ampersand", 1, FixInfo(7, 1, "and")),
    ]
    fixed, applied = apply_fixes(content, violations)

    assert fixed == "a and b and c"
    assert applied == violations


def test_overlapping_fix_is_dropped(caplog):
    content = "see foo_bar now"
    violations = [
        _auto("backtick-code-elements", 1, FixInfo(5, 7, "`foo_bar`")),
        _auto("backtick-code-elements", 1, FixInfo(5, 3, "`foo`")),
    ]
    with caplog.at_level(logging.WARNING):
        fixed, applied = apply_fixes(content, violations)

    assert len(applied) == 1
    assert fixed in ("see `foo_bar` now", "see `foo`_bar now")
    assert fixed.count("`") == 2
    assert "Dropping overlapping" in caplog.text


def test_dropped_fix_is_still_remaining():
    content = "see foo_bar now"
    kept = _auto("backtick-code-elements", 1, FixInfo(5, 7, "`foo_bar`"))
    dropped = _auto("backtick-code-elements", 1, FixInfo(5, 3, "`foo`"))
    report = LintReport(path="x.md")
    report.add_violation(kept)
    report.add_violation(dropped)

    fixed, report.applied = apply_fixes(content, report.violations)

    assert fixed == "see `foo_bar` now"
    assert report.remaining == [dropped]
    assert report.remaining[0] is dropped


def test_only_auto_tier_is_applied():
    content = "a & b"
    review = Violation(
        rule="no-literal-ampersand", line=1, message="test",
        fix=FixInfo(3, 1, "and"), tier=Tier.NEEDS_REVIEW,
    )
    dead_link = _auto("no-dead-internal-links", 1, FixInfo(1, 1, "x"))

    assert apply_fixes(content, [review, dead_link]) == (content, [])


def test_lint_file_writes_fixes(tmp_path):
    path = tmp_path / "pets.md"
    path.write_text("Dogs & cats are pets\n")

    report = _run(lint_file(path, fix=True, rules=["no-literal-ampersand"]))

    assert report.fixed == ["no-literal-ampersand"]
    assert path.read_text() == "Dogs and cats are pets\n"


def test_lint_file_without_fix_leaves_file(tmp_path):
    path = tmp_path / "pets.md"
    path.write_text("Dogs & cats are pets\n")

    report = _run(lint_file(path, rules=["no-literal-ampersand"]))

    assert report.auto_fixable == 1
    assert path.read_text() == "Dogs & cats are pets\n"


def test_lint_paths(tmp_path):
    first = tmp_path / "a.md"
    second = tmp_path / "b.md"
    first.write_text("Dogs & cats\n")
    second.write_text("Fine text.\n")

    reports = _run(lint_paths([first, second], rules=["no-literal-ampersand"]))

    assert [r.total_violations for r in reports] == [1, 0]


# ---------------------------------------------------------------------------
# Reporter wiring
# ---------------------------------------------------------------------------


def test_reporter_collects_needs_review():
    reporter = NeedsReviewReporter()
    settings = {"no-literal-ampersand": {"autofixSafety": {"alwaysReview": ["&"]}}}

    report = _run(lint_content(
        "Dogs & cats\n", "pets.md", rules=["no-literal-ampersand"],
        settings=settings, reporter=reporter,
    ))

    assert report.needs_review == 1
    assert len(reporter.items) == 1
    item = reporter.items[0]
    assert item.file == "pets.md"
    assert item.original == "&"
    assert item.suggested == "and"
    assert item.confidence == 0.69
