"""lint_markdown tool implementation."""
import logging
from pathlib import Path

from markdownlint_trap.config import REVIEW_FORMATS, Config
from markdownlint_trap.core.linter import NeedsReviewReporter, engine
from markdownlint_trap.core.linter.link_cache import LinkTargetCache

logger = logging.getLogger(__name__)


def _resolve(path_str: str) -> Path | str:
    """Resolve a tool path argument, or return an error message."""
    path = Path(path_str).expanduser()
    if not path.exists():
        return f"File not found: {path}"
    if path.suffix not in (".md", ".markdown"):
        return f"Expected .md file, got: {path.suffix}"
    return path


def register(mcp, config: Config):
    """Register lint tools with MCP server."""
    link_cache = LinkTargetCache()

    @mcp.tool()
    async def lint_markdown(
        path: str,
        fix: bool = False,
        rules: list[str] | None = None
    ) -> dict:
        """
        Lint a markdown file for prose, code formatting and link problems.

        Rules:
        - sentence-case-heading (SC001): headings and bold labels in sentence case
        - backtick-code-elements (BCE001): code-like text outside backticks
        - no-bare-urls (wt/no-bare-urls): URLs not wrapped in <> or a link
        - no-literal-ampersand (NLA001): standalone & in prose
        - no-dead-internal-links (DL001): relative links to missing files or headings
        - no-empty-list-items (ELI001): list items with no content

        Every candidate fix is scored by the safety engine. Only the auto-fix
        tier is applied; needs-review items are listed for a human decision.

        Args:
            path: Path to the .md file
            fix: Apply auto-fix tier fixes and write back to file (default: False)
            rules: Specific rules to run, by name or alias (default: all enabled)

        Returns:
            Dictionary with:
            - path (str): Path that was linted
            - total_violations (int): Total violations found
            - auto_fixable (int): Violations with an auto-fix tier fix
            - needs_review (int): Fixes withheld for review
            - skipped (int): Candidates too uncertain to fix
            - violations (list): Individual violations with line and column
            - config_errors (list): Problems in the rule configuration
            - fixed (list): Rules whose fixes were applied (if fix=True)
        """
        resolved = _resolve(path)
        if isinstance(resolved, str):
            return {"error": resolved}

        logger.info(f"Linting {resolved} (fix={fix}, rules={rules})")

        try:
            report = await engine.lint_file(
                resolved, fix=fix, rules=rules or config.rules,
                settings=config.settings, link_cache=link_cache,
            )

            logger.info(
                f"Lint complete: {report.total_violations} violations "
                f"({report.auto_fixable} auto-fixable, {report.needs_review} need review)"
            )

            if fix and report.fixed:
                logger.info(f"Auto-fixed: {', '.join(report.fixed)}")

            return report.to_dict()

        except Exception as e:
            logger.error(f"Lint failed: {e}", exc_info=True)
            return {"error": str(e)}

    @mcp.tool()
    async def generate_needs_review_report(
        path: str,
        format: str = "text",
        output_path: str | None = None
    ) -> dict:
        """
        Report the fixes that were withheld for human review.

        Lints the file without fixing and collects every needs-review item:
        the original text, the suggested replacement, the confidence and why
        the fix could not be applied automatically (for example "Go" as a
        verb or as the programming language).

        Args:
            path: Path to the .md file to lint
            format: "text" or "json" (default: "text")
            output_path: Optional file to write the report to

        Returns:
            Dictionary with:
            - report (str): The rendered report (omitted when written to a file)
            - report_path (str): Where the report was written, if output_path was given
            - summary (dict): totalItems, uniqueFiles, uniqueRules, averageConfidence
        """
        if format not in REVIEW_FORMATS:
            return {"error": f"Unknown format: {format} (expected one of {', '.join(REVIEW_FORMATS)})"}

        resolved = _resolve(path)
        if isinstance(resolved, str):
            return {"error": resolved}

        reporter = NeedsReviewReporter(format=format)
        await engine.lint_file(
            resolved, fix=False, settings=config.settings,
            link_cache=link_cache, reporter=reporter,
        )
        text = reporter.generate_report()

        if output_path:
            out_path = Path(output_path).expanduser()
            out_path.write_text(text, encoding="utf-8")
            logger.info(f"Needs-review report written to {out_path}")
            return {"report_path": str(out_path), "summary": reporter.summary()}

        return {"report": text, "summary": reporter.summary()}

    @mcp.tool()
    async def get_lint_rules() -> dict:
        """
        Get list of available lint rules with descriptions.

        Returns:
            Dictionary mapping rule names to their descriptions.

        Example response:
            {
                "rules": {
                    "no-literal-ampersand": "Use \"and\" instead of a standalone ampersand.",
                    ...
                }
            }
        """
        return {"rules": engine.get_available_rules()}

    @mcp.tool()
    async def clear_link_cache() -> dict:
        """
        Forget cached link targets and heading anchors.

        Call after moving or renaming files so dead-link checks see the change.

        Returns:
            Dictionary with the number of entries removed and the cache stats
            before clearing.
        """
        stats = link_cache.stats()
        cleared = link_cache.clear()
        return {"cleared": cleared, "stats": stats}
