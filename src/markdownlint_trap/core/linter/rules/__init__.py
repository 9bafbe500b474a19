"""Lint rules for markdown prose and structure."""
from typing import Optional

from . import ampersand, backtick, bare_urls, dead_links, lists, sentence_case
from .helpers import RuleConfig

# Registry of all available rules
RULES = {
    # Casing and code formatting
    "sentence-case-heading": sentence_case.sentence_case_heading,
    "backtick-code-elements": backtick.backtick_code_elements,

    # Links
    "no-bare-urls": bare_urls.no_bare_urls,
    "no-dead-internal-links": dead_links.no_dead_internal_links,

    # Prose and structure
    "no-literal-ampersand": ampersand.no_literal_ampersand,
    "no-empty-list-items": lists.no_empty_list_items,
}

# Short names accepted wherever a rule name is
RULE_ALIASES = {
    "SC001": "sentence-case-heading",
    "BCE001": "backtick-code-elements",
    "NLA001": "no-literal-ampersand",
    "DL001": "no-dead-internal-links",
    "ELI001": "no-empty-list-items",
    "wt/no-bare-urls": "no-bare-urls",
}

# Rules whose fixes may be applied without review
DEFAULT_AUTO_FIX = {
    "sentence-case-heading",
    "backtick-code-elements",
    "no-bare-urls",
    "no-literal-ampersand",
    "no-empty-list-items",
}


def resolve_rule_name(name: str) -> Optional[str]:
    """Canonical rule name for a name or alias, or None if unknown."""
    if name in RULES:
        return name
    return RULE_ALIASES.get(name)


def aliases_for(rule_name: str) -> list[str]:
    return [alias for alias, target in RULE_ALIASES.items() if target == rule_name]


__all__ = [
    "RULES", "RULE_ALIASES", "DEFAULT_AUTO_FIX", "RuleConfig",
    "resolve_rule_name", "aliases_for",
    "ampersand", "backtick", "bare_urls", "dead_links", "lists", "sentence_case",
]
