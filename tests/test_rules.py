"""Tests for the backtick, ampersand, bare URL, dead link and list rules."""
import asyncio

import pytest

from markdownlint_trap.core.linter import Tier, apply_fixes, lint_content
from markdownlint_trap.core.linter.link_cache import LinkTargetCache
from markdownlint_trap.core.linter.rules.backtick import describe
from markdownlint_trap.core.linter.rules.dead_links import heading_anchors, heading_slug
from markdownlint_trap.core.linter.document import Document


def _run(coro):
    """Run async coroutine synchronously (avoids pytest-asyncio dep)."""
    return asyncio.run(coro)


def _lint(content: str, rule: str, path: str = "<string>", settings: dict = None):
    return _run(lint_content(content, path, rules=[rule], settings=settings))


# ---------------------------------------------------------------------------
# backtick-code-elements
# ---------------------------------------------------------------------------

BACKTICK = "backtick-code-elements"


def test_backtick_flags_command():
    content = "Install dependencies with npm install.\n"
    report = _lint(content, BACKTICK)

    assert report.total_violations == 1
    violation = report.violations[0]
    assert violation.column == 27
    assert violation.message == (
        "Command 'npm install' should be wrapped in backticks "
        "to distinguish it from regular text"
    )

    fixed, _ = apply_fixes(content, report.violations)
    assert fixed == "Install dependencies with `npm install`.\n"


def test_backtick_ignores_prose():
    """Apertures, abbreviations and existing code spans are left alone."""
    content = (
        "Use f/2.8 aperture for bokeh.\n"
        "\n"
        "Bring snacks, e.g. fruit.\n"
        "\n"
        "Run `npm install` first.\n"
    )
    assert _lint(content, BACKTICK).total_violations == 0


def test_backtick_skips_code_and_math_blocks():
    content = (
        "```\n"
        "npm install\n"
        "```\n"
        "\n"
        "$$\n"
        "x = foo_bar\n"
        "$$\n"
    )
    assert _lint(content, BACKTICK).total_violations == 0


def test_backtick_skips_headings_and_links():
    content = (
        "# Run npm install\n"
        "\n"
        "See [src/index.js](src/index.js) for details.\n"
    )
    assert _lint(content, BACKTICK).total_violations == 0


def test_backtick_ignored_terms_option():
    content = "Install dependencies with npm install.\n"
    settings = {BACKTICK: {"ignoredTerms": ["npm install"]}}
    assert _lint(content, BACKTICK, settings=settings).total_violations == 0


def test_backtick_never_flag_suppresses():
    content = "Install dependencies with npm install.\n"
    settings = {BACKTICK: {"autofixSafety": {"neverFlag": ["npm"]}}}
    assert _lint(content, BACKTICK, settings=settings).total_violations == 0


def test_describe_messages():
    assert describe("src/app.js").startswith("File path 'src/app.js'")
    assert describe("NODE_ENV").startswith("Environment variable 'NODE_ENV'")
    assert describe("--verbose").startswith("Command flag '--verbose'")
    assert describe("localhost:8080").startswith("Network address 'localhost:8080'")
    assert describe("???").startswith("Code-like element '???'")


def test_backtick_flags_config_and_variables():
    """Dotfiles, environment variables and shell variables are code."""
    content = (
        "Edit your .bashrc file.\n"
        "\n"
        "Set NODE_ENV before starting.\n"
        "\n"
        "Expand $HOME in the script.\n"
    )
    report = _lint(content, BACKTICK)

    assert [v.original for v in report.violations] == [".bashrc", "NODE_ENV", "$HOME"]
    assert report.violations[2].message.startswith("Shell variable '$HOME'")


def test_backtick_ignores_abbreviations_in_full_lint():
    assert _lint("Trade between the U.S. and U.K. grew.\n", BACKTICK).total_violations == 0


@pytest.mark.parametrize("content", [
    "Install dependencies with npm install.\n",
    "Edit your .bashrc file.\n",
    "Set NODE_ENV before starting.\n",
    "Expand $HOME in the script.\n",
    "Open src/app.js and config.yaml today.\n",
    "Pass --verbose to the tool.\n",
    "Call getUserName before saving.\n",
])
def test_backtick_fix_is_not_flagged_again(content):
    """Wrapped spans are inline code and are not reported on the next run."""
    settings = {"autofix": {"safety": {"enabled": False}}}
    report = _lint(content, BACKTICK, settings=settings)
    assert report.total_violations >= 1

    fixed, _ = apply_fixes(content, report.violations)

    assert fixed.count("`") == 2 * report.total_violations
    assert _lint(fixed, BACKTICK, settings=settings).violations == []


# ---------------------------------------------------------------------------
# no-literal-ampersand
# ---------------------------------------------------------------------------

AMPERSAND = "no-literal-ampersand"


def test_ampersand_replaced_with_and():
    content = "Dogs & cats are pets\n"
    report = _lint(content, AMPERSAND)

    violation = report.violations[0]
    assert violation.message == 'Use "and" instead of literal ampersand (&)'
    assert violation.column == 6
    assert violation.tier == Tier.AUTO_FIX
    assert violation.confidence == 0.85

    fixed, _ = apply_fixes(content, report.violations)
    assert fixed == "Dogs and cats are pets\n"


def test_ampersand_exemptions():
    """Headings, brands, code, entities and links keep their ampersands."""
    content = (
        "# Cats & dogs\n"
        "\n"
        "Our R&D team met Barnes & Noble.\n"
        "\n"
        "Use `a & b` in code and &amp; in HTML.\n"
        "\n"
        "Read [cats & dogs](pets.md) today.\n"
        "\n"
        "```\n"
        "a & b\n"
        "```\n"
    )
    assert _lint(content, AMPERSAND).total_violations == 0


def test_ampersand_custom_exceptions():
    content = "Meet Tom & Jerry here\n"
    settings = {AMPERSAND: {"exceptions": ["Tom & Jerry"]}}

    assert _lint(content, AMPERSAND).total_violations == 1
    assert _lint(content, AMPERSAND, settings=settings).total_violations == 0


def test_ampersand_inline_code_option():
    content = "Use `a & b` here\n"
    settings = {AMPERSAND: {"skipInlineCode": False}}
    assert _lint(content, AMPERSAND, settings=settings).total_violations == 1


# ---------------------------------------------------------------------------
# no-bare-urls
# ---------------------------------------------------------------------------

BARE_URLS = "no-bare-urls"


def test_bare_url_wrapped():
    content = "Visit https://example.com for details.\n"
    report = _lint(content, BARE_URLS)

    violation = report.violations[0]
    assert violation.message == "Bare URL used."
    assert violation.column == 7
    assert violation.fix.insert_text == "<https://example.com>"

    fixed, _ = apply_fixes(content, report.violations)
    assert fixed == "Visit <https://example.com> for details.\n"


def test_bare_url_skips_links_and_code():
    content = (
        "See <https://example.com> and [docs](https://example.com/docs).\n"
        "\n"
        "Run `curl https://example.com` now.\n"
    )
    assert _lint(content, BARE_URLS).total_violations == 0


def test_bare_url_allowed_domains():
    content = "Visit https://example.com for details.\n"
    settings = {BARE_URLS: {"allowedDomains": ["example.com"]}}
    assert _lint(content, BARE_URLS, settings=settings).total_violations == 0


def test_markdown_filename_is_not_a_url():
    """README.md looks like a Moldovan domain to linkify."""
    assert _lint("See README.md for more.\n", BARE_URLS).total_violations == 0


def test_bare_url_alias():
    """wt/no-bare-urls selects the same rule."""
    report = _run(lint_content("Go to https://example.com now\n", rules=["wt/no-bare-urls"]))
    assert report.violations[0].rule == BARE_URLS


# ---------------------------------------------------------------------------
# no-dead-internal-links
# ---------------------------------------------------------------------------

DEAD_LINKS = "no-dead-internal-links"


def test_heading_slug():
    assert heading_slug("Getting Started") == "getting-started"
    assert heading_slug("What's New?") == "whats-new"
    assert heading_slug("Café `v2` notes") == "café-v2-notes"
    assert heading_slug("See [the docs](x.md)") == "see-the-docs"


def test_duplicate_heading_anchors():
    doc = Document.parse("# Setup\n\n## Install\n\n## Install\n")
    assert heading_anchors(doc.headings) == {"setup", "install", "install-1"}


def test_missing_file(tmp_path):
    (tmp_path / "setup.md").write_text("# Setup\n")
    guide = tmp_path / "guide.md"
    content = "See [setup](setup.md) and [missing](missing.md).\n"

    report = _lint(content, DEAD_LINKS, path=str(guide))

    assert report.total_violations == 1
    violation = report.violations[0]
    assert violation.message == 'Link target "missing.md" does not exist'
    assert violation.column == 27
    assert violation.tier is None


def test_extension_is_optional(tmp_path):
    (tmp_path / "setup.md").write_text("# Setup\n")
    report = _lint("Read [setup](setup).\n", DEAD_LINKS, path=str(tmp_path / "guide.md"))
    assert report.total_violations == 0


def test_anchor_in_other_file(tmp_path):
    (tmp_path / "setup.md").write_text("# Setup\n\n## Install steps\n\n## Install steps\n")
    content = (
        "[ok](setup.md#install-steps-1)\n"
        "\n"
        "[bad](setup.md#missing)\n"
    )
    report = _lint(content, DEAD_LINKS, path=str(tmp_path / "guide.md"))

    assert [v.message for v in report.violations] == [
        'Heading anchor "#missing" not found in "setup.md"',
    ]
    assert report.violations[0].line == 3


def test_same_file_anchor_in_memory():
    """In-memory sources still check anchors to their own headings."""
    content = "# Intro\n\nSee [intro](#intro) and [below](#details).\n"
    report = _lint(content, DEAD_LINKS)

    assert [v.message for v in report.violations] == [
        'Heading anchor "#details" not found in current file',
    ]


def test_placeholders_and_external_links(tmp_path):
    content = "[later](TODO) and [site](https://example.com/nope) and [tpl]({{ url }})\n"
    path = str(tmp_path / "guide.md")

    assert _lint(content, DEAD_LINKS, path=path).total_violations == 0

    settings = {DEAD_LINKS: {"allowPlaceholders": False}}
    report = _lint("[later](TODO)\n", DEAD_LINKS, path=path, settings=settings)
    assert report.violations[0].message == 'Link target "TODO" does not exist'


def test_ignored_paths(tmp_path):
    settings = {DEAD_LINKS: {"ignoredPaths": ["generated/"]}}
    report = _lint("[api](generated/api.md)\n", DEAD_LINKS,
                   path=str(tmp_path / "guide.md"), settings=settings)
    assert report.total_violations == 0


def test_shared_link_cache(tmp_path):
    """A shared cache answers repeated lookups without touching the disk."""
    (tmp_path / "setup.md").write_text("# Setup\n")
    cache = LinkTargetCache()
    path = str(tmp_path / "guide.md")

    for _ in range(2):
        _run(lint_content("[s](setup.md#setup)\n", path, rules=[DEAD_LINKS], link_cache=cache))

    stats = cache.stats()
    assert stats["paths"] == 1
    assert stats["anchor_files"] == 1
    assert stats["hits"] == 2
    assert cache.clear() == 2


# ---------------------------------------------------------------------------
# no-empty-list-items
# ---------------------------------------------------------------------------

EMPTY_ITEMS = "no-empty-list-items"


def test_empty_list_item_removed():
    content = "- one\n-\n- three\n"
    report = _lint(content, EMPTY_ITEMS)

    assert report.total_violations == 1
    violation = report.violations[0]
    assert violation.line == 2
    assert violation.message == "Empty list item found"
    assert violation.tier == Tier.AUTO_FIX

    fixed, applied = apply_fixes(content, report.violations)
    assert fixed == "- one\n- three\n"
    assert applied == report.violations


def test_full_list_items_pass():
    assert _lint("- one\n- two\n", EMPTY_ITEMS).total_violations == 0
