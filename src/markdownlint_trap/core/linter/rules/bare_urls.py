"""no-bare-urls: URLs that markdown-it had to linkify on its own."""
import logging
import re
from typing import Generator, Iterator
from urllib.parse import urlparse

from markdown_it.token import Token

from ..document import Document
from ..models import FixInfo, Violation
from .helpers import RuleConfig, safe_violation

logger = logging.getLogger(__name__)

RULE_NAME = "no-bare-urls"

_SCHEME_RE = re.compile(r'^[a-z][a-z0-9+.-]*://', re.I)
_MARKDOWN_FILE_RE = re.compile(r'^[\w./-]+\.(?:md|markdown)$', re.I)


def _linkified(tokens: list[Token]) -> Iterator[tuple[Token, str, str]]:
    """Yield (inline token, href, visible text) for every linkify-generated link."""
    for token in tokens:
        if token.type != "inline" or not token.children:
            continue
        children = token.children
        for i, child in enumerate(children):
            if child.type != "link_open" or child.markup != "linkify":
                continue
            text = children[i + 1].content if i + 1 < len(children) else ""
            yield token, str(child.attrGet("href") or ""), text


def _hostname(href: str) -> str:
    try:
        return urlparse(href).hostname or ""
    except ValueError:
        return ""


def no_bare_urls(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    URLs should be wrapped in angle brackets or written as links.

    Code spans and existing links are never linkified by markdown-it, so
    they are skipped for free.
    """
    allowed = {d.lower() for d in config.get("allowedDomains", [])}
    # next search offset per line, so repeated URLs map to distinct columns
    cursor: dict[int, int] = {}

    for inline, href, text in _linkified(doc.tokens):
        if not text:
            continue
        has_scheme = bool(_SCHEME_RE.match(text))
        if not has_scheme and _MARKDOWN_FILE_RE.match(text):
            continue
        if allowed and _hostname(href).lower() in allowed:
            logger.debug(f"Allowed domain: {href}")
            continue

        start, end = inline.map if inline.map else (0, len(doc.lines))
        number, column = start + 1, -1
        for n in range(start + 1, end + 1):
            column = doc.line(n).find(text, cursor.get(n, 0))
            if column != -1:
                number = n
                cursor[n] = column + len(text)
                break
        if column == -1:
            continue

        line = doc.line(number)
        wrapped = f"<{text}>"
        fix = FixInfo(edit_column=column + 1, delete_count=len(text), insert_text=wrapped) if has_scheme else None

        violation = safe_violation(
            RULE_NAME,
            number,
            "Bare URL used.",
            rule_type="no-bare-url",
            original=text,
            fixed=wrapped if has_scheme else "",
            fix=fix,
            config=config,
            column=column + 1,
            context=text,
            line_text=line,
        )
        if violation is not None:
            yield violation
