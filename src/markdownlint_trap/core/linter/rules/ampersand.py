"""no-literal-ampersand: standalone ``&`` in prose."""
import re
from typing import Generator

from ..context import is_in_inline_code
from ..document import Document
from ..models import FixInfo, Violation
from ..terms import AMPERSAND_BRAND_PHRASES, AMPERSAND_DEFAULT_EXCEPTIONS
from .helpers import RuleConfig, safe_violation

RULE_NAME = "no-literal-ampersand"

_ENTITY_RE = re.compile(r'^[a-zA-Z0-9#]+;')
_TAG_START_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9]*(\s|$)')
_HEADING_RE = re.compile(r'^\s*#{1,6}\s')


def in_special_context(line: str, position: int, skip_inline_code: bool = True) -> bool:
    """True when the ``&`` at ``position`` is code, markup or part of a link."""
    if skip_inline_code and is_in_inline_code(line, position):
        return True

    before = line[:position]
    if _ENTITY_RE.match(line[position + 1:]):
        return True

    open_tag = before.rfind('<')
    if open_tag > before.rfind('>') and _TAG_START_RE.match(line[open_tag + 1:position]):
        return True

    open_bracket, close_bracket = before.rfind('['), before.rfind(']')
    if open_bracket > close_bracket:
        return True
    return before.rfind('(') > before.rfind(')') and close_bracket > open_bracket


def _line_exempt(line: str, exceptions: list[str]) -> bool:
    if _HEADING_RE.match(line):
        return True
    lower = line.lower()
    if any(brand.lower() in lower for brand in AMPERSAND_BRAND_PHRASES):
        return True
    return any(exception.lower() in lower for exception in exceptions if exception)


def _is_standalone(line: str, position: int) -> bool:
    before = line[position - 1] if position > 0 else ''
    after = line[position + 1] if position < len(line) - 1 else ''
    return (not before or before.isspace()) and (not after or after.isspace())


def no_literal_ampersand(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """Use "and" instead of a standalone ampersand."""
    exceptions = list(AMPERSAND_DEFAULT_EXCEPTIONS) + list(config.get("exceptions", []))
    skip_code_blocks = config.get("skipCodeBlocks", True)
    skip_inline_code = config.get("skipInlineCode", True)

    for number, line in enumerate(doc.lines, 1):
        if '&' not in line or not line.strip():
            continue
        if skip_code_blocks and number in doc.code_block_lines:
            continue
        if _line_exempt(line, exceptions):
            continue

        for position, char in enumerate(line):
            if char != '&' or not _is_standalone(line, position):
                continue
            if in_special_context(line, position, skip_inline_code):
                continue

            violation = safe_violation(
                RULE_NAME,
                number,
                'Use "and" instead of literal ampersand (&)',
                rule_type="no-literal-ampersand",
                original="&",
                fixed="and",
                fix=FixInfo(edit_column=position + 1, delete_count=1, insert_text="and"),
                config=config,
                column=position + 1,
                context=f'"{line.strip()}"',
                line_text=line,
            )
            if violation is not None:
                yield violation
