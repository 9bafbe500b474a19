"""CLI for markdownlint-trap.

Lints markdown files from the terminal, applies safe fixes, and prints
the fixes that need a human decision.
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from rich.console import Console

from markdownlint_trap import __version__
from markdownlint_trap.config import REVIEW_FORMATS, Config, ConfigError
from markdownlint_trap.core.linter import NeedsReviewReporter, engine
from markdownlint_trap.core.linter.link_cache import LinkTargetCache
from markdownlint_trap.core.linter.rules import aliases_for
from markdownlint_trap.core.linter.validation import ValidationError, format_validation_errors


def main(argv: list[str] | None = None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="markdownlint-trap",
        description="Lint markdown prose, code formatting and links"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log per-span decisions to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # lint command
    lint = subparsers.add_parser("lint", help="Lint markdown files")
    lint.add_argument("paths", type=Path, nargs="+", help="Markdown files or directories")
    lint.add_argument("--fix", action="store_true", help="Apply auto-fix tier fixes in place")
    lint.add_argument("--rules", help="Comma-separated rule names or aliases (default: all enabled)")
    lint.add_argument("--config", type=Path, help="Config file (default: .markdownlint-trap.yaml)")
    lint.add_argument(
        "--format", choices=["text", "json"], default="text",
        help="Violation output format (default: text)"
    )
    lint.add_argument(
        "--review-format", choices=list(REVIEW_FORMATS),
        help="Needs-review report format (default: from config, else text)"
    )
    lint.add_argument("--review-output", type=Path, help="Write the needs-review report to a file")

    # rules command
    subparsers.add_parser("rules", help="List available rules")

    # validate-config command
    v = subparsers.add_parser("validate-config", help="Validate a config file")
    v.add_argument("--config", type=Path, help="Config file (default: .markdownlint-trap.yaml)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    if args.command == "lint":
        sys.exit(asyncio.run(lint_command(args)))
    elif args.command == "rules":
        rules_command()
    elif args.command == "validate-config":
        sys.exit(validate_config_command(args))


def _load_config(path: Path | None) -> Config:
    try:
        return Config.load(path)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


def collect_markdown_files(paths: list[Path]) -> list[Path]:
    """Expand directories to the markdown files below them."""
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob("*") if p.suffix in (".md", ".markdown")))
        else:
            files.append(path)
    return files


async def lint_command(args) -> int:
    """Execute the lint command. Returns the exit code."""
    config = _load_config(args.config)

    files = collect_markdown_files(args.paths)
    missing = [p for p in files if not p.is_file()]
    for path in missing:
        print(f"Error: File not found: {path}", file=sys.stderr)
    files = [p for p in files if p.is_file()]
    if not files:
        return 2

    rules = [r.strip() for r in args.rules.split(",")] if args.rules else config.rules
    reporter = NeedsReviewReporter(format=args.review_format or config.review_format)

    reports = await engine.lint_paths(
        files, fix=args.fix, rules=rules, settings=config.settings,
        link_cache=LinkTargetCache(), reporter=reporter,
    )

    remaining = 0
    if args.format == "json":
        print(json.dumps([r.to_dict() for r in reports], indent=2))
    for report in reports:
        for violation in report.remaining:
            remaining += 1
            if args.format == "text":
                tier = f" [{violation.tier.value}]" if violation.tier else ""
                print(f"{report.path}:{violation.line}:{violation.column} "
                      f"{violation.rule} {violation.message}{tier}")
        if report.fixed and args.format == "text":
            print(f"{report.path}: fixed {', '.join(report.fixed)}")

    if reporter.items:
        if args.review_output:
            args.review_output.write_text(reporter.generate_report(), encoding="utf-8")
            print(f"Needs-review report: {args.review_output}", file=sys.stderr)
        elif sys.stdout.isatty() and reporter.format == "text":
            reporter.render(Console())
        elif args.format == "text":
            print(reporter.generate_report())

    return 1 if remaining else 0


def rules_command():
    """Execute the rules command."""
    print(f"markdownlint-trap v{__version__}")
    print("=" * 40)
    for name, description in engine.get_available_rules().items():
        aliases = ", ".join(aliases_for(name))
        print(f"  {name} ({aliases})")
        print(f"      {description}")


def validate_config_command(args) -> int:
    """Execute the validate-config command. Returns the exit code."""
    config = _load_config(args.config)
    if config.config_path is None:
        print("No config file found; defaults are in effect")
        return 0

    errors = config.validate()
    if not errors:
        print(f"{config.config_path}: OK")
        return 0

    by_rule: dict[str, list[ValidationError]] = {}
    for error in errors:
        by_rule.setdefault(error["rule"] or "config", []).append(ValidationError(
            field=error["field"],
            message=error["message"],
            value=error["value"],
            expected=error["expected"],
        ))
    for rule_name, rule_errors in by_rule.items():
        print(format_validation_errors(rule_name, rule_errors), file=sys.stderr)
        print(file=sys.stderr)
    return 1


if __name__ == "__main__":
    main()
