"""Lint engine - runs rules and applies fixes."""
import asyncio
import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from .document import Document
from .link_cache import LinkTargetCache
from .models import LintReport, Tier, Violation
from .reporter import NeedsReviewReporter
from .rules import DEFAULT_AUTO_FIX, RULE_ALIASES, RULES, RuleConfig, resolve_rule_name
from .safety import merge_safety_config
from .validation import (
    ValidationError,
    format_validation_errors,
    sanitize_config,
    validate_rule_config,
    validate_safety_config,
)

logger = logging.getLogger(__name__)


async def lint_file(
    path: Path,
    fix: bool = False,
    rules: Optional[list[str]] = None,
    settings: Optional[dict] = None,
    link_cache: Optional[LinkTargetCache] = None,
    reporter: Optional[NeedsReviewReporter] = None,
) -> LintReport:
    """
    Lint a markdown file.

    Args:
        path: Path to the .md file
        fix: If True, apply auto-fixes and write back
        rules: Specific rules to run, by name or alias (default: all enabled)
        settings: markdownlint-style config mapping
        link_cache: Shared cache for dead-link lookups
        reporter: Collects needs-review items when given

    Returns:
        LintReport with all violations found
    """
    content = path.read_text(encoding='utf-8')

    report = await lint_content(
        content, str(path), rules=rules, settings=settings,
        link_cache=link_cache, reporter=reporter,
    )

    if fix and report.auto_fixable > 0:
        fixed_content, report.applied = apply_fixes(content, report.violations)
        report.fixed = sorted({v.rule for v in report.applied})

        if fixed_content != content:
            path.write_text(fixed_content, encoding='utf-8')
            logger.info(f"Wrote {len(report.applied)} fixes to {path}")

    return report


async def lint_content(
    content: str,
    source_path: str = "<string>",
    rules: Optional[list[str]] = None,
    settings: Optional[dict] = None,
    link_cache: Optional[LinkTargetCache] = None,
    reporter: Optional[NeedsReviewReporter] = None,
) -> LintReport:
    """
    Lint markdown content.

    Args:
        content: The markdown content to lint
        source_path: Path for reporting; in-memory sources skip file checks
        rules: Specific rules to run, by name or alias (default: all enabled)
        settings: markdownlint-style config mapping
        link_cache: Shared cache for dead-link lookups
        reporter: Collects needs-review items when given

    Returns:
        LintReport with all violations found
    """
    settings = settings or {}
    report = LintReport(path=source_path)

    # Skip frontmatter when linting
    content_without_frontmatter, frontmatter_lines = _extract_frontmatter(content)
    doc = Document.parse(content_without_frontmatter, source_path,
                         front_matter_lines=frontmatter_lines)

    global_safety, global_errors = _global_safety(settings)
    for error in global_errors:
        report.config_errors.append({"rule": "autofix", **error.to_dict()})

    for rule_name in _rules_to_run(rules, settings):
        rule_func = RULES[rule_name]
        rule_config, errors = build_rule_config(rule_name, settings, global_safety, link_cache)

        if errors:
            report.config_errors.extend({"rule": rule_name, **e.to_dict()} for e in errors)
            report.add_violation(_config_violation(rule_name, errors))

        try:
            for violation in rule_func(doc, rule_config):
                # Adjust line numbers to account for frontmatter
                violation.line += frontmatter_lines
                report.add_violation(violation)
        except Exception as e:
            logger.error(f"Rule {rule_name} failed: {e}")

    # Sort violations by position; sort is stable for equal positions
    report.violations.sort(key=lambda v: v.sort_key)

    if reporter is not None:
        for violation in report.violations:
            reporter.add_violation(source_path, violation)

    return report


async def lint_paths(
    paths: Iterable[Path],
    fix: bool = False,
    rules: Optional[list[str]] = None,
    settings: Optional[dict] = None,
    link_cache: Optional[LinkTargetCache] = None,
    reporter: Optional[NeedsReviewReporter] = None,
) -> list[LintReport]:
    """Lint several files concurrently, sharing one link cache."""
    link_cache = link_cache or LinkTargetCache()
    return list(await asyncio.gather(*(
        lint_file(Path(p), fix=fix, rules=rules, settings=settings,
                  link_cache=link_cache, reporter=reporter)
        for p in paths
    )))


# ============================================================================
# Configuration
# ============================================================================

def rule_setting(settings: dict, rule_name: str):
    """The raw setting for a rule, looked up by name and then by alias."""
    if rule_name in settings:
        return settings[rule_name]
    for alias, target in RULE_ALIASES.items():
        if target == rule_name and alias in settings:
            return settings[alias]
    return None


def _rules_to_run(rules: Optional[list[str]], settings: dict) -> list[str]:
    if rules:
        selected = []
        for name in rules:
            resolved = resolve_rule_name(name)
            if resolved is None:
                logger.warning(f"Unknown rule: {name}")
            elif resolved not in selected:
                selected.append(resolved)
        return selected

    default = settings.get("default", True) is not False
    enabled = []
    for name in RULES:
        setting = rule_setting(settings, name)
        if setting is False or (setting is None and not default):
            continue
        enabled.append(name)
    return enabled


def _global_safety(settings: dict) -> tuple[dict, list[ValidationError]]:
    autofix = settings.get("autofix")
    safety = autofix.get("safety") if isinstance(autofix, dict) else None
    if not isinstance(safety, dict):
        return {}, []

    result = validate_safety_config(safety)
    if result.is_valid:
        return safety, []

    logger.warning(format_validation_errors("autofix.safety", result.errors))
    return sanitize_config(safety, result.errors), result.errors


def build_rule_config(
    rule_name: str,
    settings: dict,
    global_safety: Optional[dict] = None,
    link_cache: Optional[LinkTargetCache] = None,
) -> tuple[RuleConfig, list[ValidationError]]:
    """
    Validate one rule's options and build its RuleConfig.

    Invalid fields are dropped so the rule runs with its defaults for them.
    Safety settings merge defaults, then ``autofix.safety``, then the rule's
    own ``autofixSafety``.
    """
    setting = rule_setting(settings, rule_name)
    options = setting if isinstance(setting, dict) else {}

    result = validate_rule_config(rule_name, options)
    errors = result.errors
    if errors:
        logger.warning(format_validation_errors(rule_name, errors))
        options = sanitize_config(options, errors)

    rule_safety = options.get("autofixSafety") if isinstance(options.get("autofixSafety"), dict) else None
    safety = merge_safety_config(global_safety or {}, rule_safety or {})

    return RuleConfig(options=options, safety=safety, link_cache=link_cache), errors


def _config_violation(rule_name: str, errors: list[ValidationError]) -> Violation:
    details = "; ".join(f"{e.field}: {e.message}" for e in errors)
    return Violation(
        rule=rule_name,
        line=1,
        message=f"Configuration error: {details}",
        tier=Tier.SKIP,
        context=details,
    )


# ============================================================================
# Fixes
# ============================================================================

def apply_fixes(content: str, violations: list[Violation]) -> tuple[str, list[Violation]]:
    """
    Apply auto-fixes to content.

    Only violations in the auto-fix tier with a fix are applied. Fixes on
    the same line are applied right to left; a fix overlapping one already
    applied on that line is dropped.

    Args:
        content: Original content, front matter included
        violations: Violations from linting

    Returns:
        Tuple of (fixed_content, violations whose fixes were applied)
    """
    fixable = [
        v for v in violations
        if v.tier == Tier.AUTO_FIX and v.fix is not None and v.rule in DEFAULT_AUTO_FIX
    ]

    if not fixable:
        return content, []

    applied: list[Violation] = []
    lines = content.split('\n')
    deleted: set[int] = set()

    by_line: dict[int, list[Violation]] = {}
    for violation in fixable:
        by_line.setdefault(violation.line, []).append(violation)

    for line_num, line_violations in by_line.items():
        idx = line_num - 1
        if not 0 <= idx < len(lines):
            continue

        deletion = next((v for v in line_violations if v.fix.deletes_line), None)
        if deletion is not None:
            deleted.add(idx)
            applied.append(deletion)
            continue

        # Right to left so earlier columns stay valid
        line = lines[idx]
        claimed: list[tuple[int, int]] = []
        for violation in sorted(line_violations, key=lambda v: v.fix.edit_column, reverse=True):
            fix = violation.fix
            start = fix.edit_column - 1
            end = start + max(fix.delete_count, 0)
            if any(start < c_end and c_start < end or start == c_start for c_start, c_end in claimed):
                logger.warning(
                    f"Dropping overlapping {violation.rule} fix on line {line_num}, column {fix.edit_column}"
                )
                continue
            line = fix.apply(line)
            claimed.append((start, end))
            applied.append(violation)
        lines[idx] = line

    content = '\n'.join(line for i, line in enumerate(lines) if i not in deleted)
    return content, sorted(applied, key=lambda v: v.sort_key)


def _extract_frontmatter(content: str) -> tuple[str, int]:
    """
    Extract YAML frontmatter from content.

    Returns:
        Tuple of (content_without_frontmatter, num_frontmatter_lines)
    """
    if not content.startswith('---'):
        return content, 0

    # Find the closing ---
    match = re.match(r'^---\s*\n.*?\n---\s*\n', content, re.DOTALL)
    if not match:
        return content, 0

    frontmatter = match.group()
    frontmatter_lines = frontmatter.count('\n')

    return content[len(frontmatter):], frontmatter_lines


def get_available_rules() -> dict[str, str]:
    """
    Get list of available rules with descriptions.

    Returns:
        Dict mapping rule name to the first line of its docstring
    """
    return {
        name: (func.__doc__ or "No description").strip().split('\n')[0]
        for name, func in RULES.items()
    }
