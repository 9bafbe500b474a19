"""Tests for the MCP tool layer."""
import asyncio

import pytest

from markdownlint_trap.config import Config
from markdownlint_trap.tools import lint


def _run(coro):
    """Run async coroutine synchronously (avoids pytest-asyncio dep)."""
    return asyncio.run(coro)


class FakeMCP:
    """Collects functions registered with ``@mcp.tool()``."""

    def __init__(self):
        self.tools = {}

    def tool(self):
        def decorator(func):
            self.tools[func.__name__] = func
            return func
        return decorator


@pytest.fixture
def tools():
    mcp = FakeMCP()
    lint.register(mcp, Config())
    return mcp.tools


def test_all_tools_registered(tools):
    assert set(tools) == {
        "lint_markdown",
        "generate_needs_review_report",
        "get_lint_rules",
        "clear_link_cache",
    }


def test_lint_markdown_reports(tools, tmp_path):
    path = tmp_path / "pets.md"
    path.write_text("Dogs & cats are pets\n")

    result = _run(tools["lint_markdown"](str(path), rules=["no-literal-ampersand"]))

    assert result["total_violations"] == 1
    assert result["violations"][0]["tier"] == "auto-fix"
    assert result["violations"][0]["fix"] == {"editColumn": 6, "deleteCount": 1, "insertText": "and"}


def test_lint_markdown_fix(tools, tmp_path):
    path = tmp_path / "pets.md"
    path.write_text("Dogs & cats are pets\n")

    result = _run(tools["lint_markdown"](str(path), fix=True, rules=["NLA001"]))

    assert result["fixed"] == ["no-literal-ampersand"]
    assert path.read_text() == "Dogs and cats are pets\n"


def test_lint_markdown_bad_paths(tools, tmp_path):
    other = tmp_path / "notes.txt"
    other.write_text("text")

    assert "File not found" in _run(tools["lint_markdown"](str(tmp_path / "missing.md")))["error"]
    assert "Expected .md file" in _run(tools["lint_markdown"](str(other)))["error"]


def test_needs_review_report_to_file(tmp_path):
    mcp = FakeMCP()
    settings = {"no-literal-ampersand": {"autofixSafety": {"alwaysReview": ["&"]}}}
    lint.register(mcp, Config(settings=settings))
    path = tmp_path / "pets.md"
    path.write_text("Dogs & cats are pets\n")
    out = tmp_path / "review.json"

    result = _run(mcp.tools["generate_needs_review_report"](str(path), "json", str(out)))

    assert result["report_path"] == str(out)
    assert result["summary"]["totalItems"] == 1
    assert '"needsReview"' in out.read_text()


def test_needs_review_report_rejects_format(tools, tmp_path):
    path = tmp_path / "a.md"
    path.write_text("# Title\n")
    result = _run(tools["generate_needs_review_report"](str(path), "xml"))
    assert result["error"].startswith("Unknown format: xml")


def test_get_lint_rules(tools):
    rules = _run(tools["get_lint_rules"]())["rules"]
    assert "no-dead-internal-links" in rules


def test_clear_link_cache(tools, tmp_path):
    (tmp_path / "setup.md").write_text("# Setup\n")
    path = tmp_path / "guide.md"
    path.write_text("[s](setup.md)\n")
    _run(tools["lint_markdown"](str(path), rules=["DL001"]))

    result = _run(tools["clear_link_cache"]())

    assert result["cleared"] == 1
    assert result["stats"]["paths"] == 1
