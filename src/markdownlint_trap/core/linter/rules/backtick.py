"""backtick-code-elements: code-like text outside backticks."""
import logging
import re
from typing import Generator, Optional

from ..classifiers import classify_line, is_sentence_boundary
from ..context import excluded_ranges
from ..disambiguation import resolve_overlaps
from ..document import Document
from ..models import ClassificationVerdict, FixInfo, Violation
from .helpers import RuleConfig, safe_violation

logger = logging.getLogger(__name__)

RULE_NAME = "backtick-code-elements"

_FENCE_RE = re.compile(r'^(`{3,}|~{3,})')
_LINK_REFERENCE_RE = re.compile(r'^\s*\[[^\]]+\]:\s*\S')
_MATH_SHELL_RE = re.compile(r'(?:grep\s+\$\w+|export\s+(?:\w+=)?\$\w+)')

_COMMAND_NAMES = (
    'git|npm|pip|yarn|docker|brew|cargo|pnpm|curl|wget|ssh|scp|rsync|grep|sed|awk|'
    'find|ls|cd|mkdir|rm|cp|mv|chmod|chown|sudo|su|ps|top|htop|kill|killall|systemctl|'
    'service|crontab|tar|gzip|zip|unzip|cat|head|tail|less|more|vim|nano|emacs|code|'
    'ping|traceroute|nslookup|dig|netstat|ss'
)
_ENV_VAR_RE = re.compile(r'^[A-Z][A-Z0-9]*_[A-Z0-9_]+$')
_KNOWN_ENV_RE = re.compile(r'^(?:PATH|HOME|USER|SHELL|PWD|LANG|TERM|EDITOR|TMPDIR|HOSTNAME)$')


def _network_address(text: str) -> bool:
    if not re.match(r'^[A-Za-z0-9.-]+:\d+$', text):
        return False
    if re.match(r'^\d+(\.\d+)?:1$', text):
        return False
    return not re.search(r'(AM|PM)?-\d{1,2}:\d{2}$', text, re.I)


# (predicate(text, line), message template) checked in order; first match wins
MESSAGE_PATTERNS = (
    (lambda t, l: bool(re.match(rf'^({_COMMAND_NAMES})\s', t)),
     "Command '{}' should be wrapped in backticks to distinguish it from regular text"),
    (lambda t, l: '$' in t and bool(re.search(r'\b(grep|export|set)\b', t)),
     "Shell command '{}' should be wrapped in backticks to show it's a code example"),
    (lambda t, l: '/' in t and bool(re.search(r'\.[a-zA-Z0-9]+$', t)),
     "File path '{}' should be wrapped in backticks for clarity and to distinguish it from regular text"),
    (lambda t, l: '/' in t and t.endswith('/'),
     "Directory path '{}' should be wrapped in backticks to show it's a file system location"),
    (lambda t, l: '/' in t,
     "Path '{}' should be wrapped in backticks to indicate it's a file system reference"),
    (lambda t, l: bool(re.match(r'^[a-zA-Z0-9._-]+\.[a-zA-Z0-9]{1,5}$', t)) and not is_sentence_boundary(t, l),
     "Filename '{}' should be wrapped in backticks to distinguish it from regular text"),
    (lambda t, l: bool(re.match(r'^\.[a-zA-Z]', t)),
     "Configuration file '{}' should be wrapped in backticks to show it's a filename"),
    (lambda t, l: bool(_ENV_VAR_RE.match(t) or _KNOWN_ENV_RE.match(t)),
     "Environment variable '{}' should be wrapped in backticks to indicate it's a system variable"),
    (lambda t, l: t.startswith('$'),
     "Shell variable '{}' should be wrapped in backticks to show it's a variable reference"),
    (lambda t, l: bool(re.match(r'^--?[a-zA-Z]', t)),
     "Command flag '{}' should be wrapped in backticks to show it's a command option"),
    (lambda t, l: bool(re.search(r'\([^)]*\)$', t)) and not re.match(r'^\w+\([a-z]\)$', t),
     "Function call '{}' should be wrapped in backticks to show it's code"),
    (lambda t, l: bool(re.match(r'^import\s+', t)),
     "Import statement '{}' should be wrapped in backticks to show it's code"),
    (lambda t, l: bool(re.match(r'^[A-Z]+\+[A-Z]+$', t)),
     "Key combination '{}' should be wrapped in backticks to distinguish it from regular text"),
    (lambda t, l: _network_address(t),
     "Network address '{}' should be wrapped in backticks to show it's a technical reference"),
    (lambda t, l: bool(re.match(r'^(?:export|set)\s+', t)),
     "Variable assignment '{}' should be wrapped in backticks to show it's a shell command"),
    (lambda t, l: bool(re.match(r'^_?[a-z][a-z0-9]*(?:_[a-z0-9]+)+$|^[a-z][a-z0-9]*[A-Z]\w*$', t)),
     "Identifier '{}' should be wrapped in backticks to indicate it's a code variable or function name"),
    (lambda t, l: bool(re.match(r'^[A-Z][a-z0-9]+[A-Z]\w*$', t)),
     "Identifier '{}' should be wrapped in backticks to indicate it's a code class or type name"),
)
FALLBACK_MESSAGE = "Code-like element '{}' should be wrapped in backticks for better readability"


def describe(text: str, line: str = "") -> str:
    """Human-readable message for a code-like span."""
    for matches, template in MESSAGE_PATTERNS:
        if matches(text, line):
            return template.format(text)
    return FALLBACK_MESSAGE.format(text)


def _span_violation(verdict: ClassificationVerdict, line: str, config: RuleConfig) -> Optional[Violation]:
    span = verdict.span
    wrapped = f"`{span.text}`"
    return safe_violation(
        RULE_NAME,
        span.line,
        describe(span.text, line),
        rule_type="backtick",
        original=span.text,
        fixed=wrapped,
        fix=FixInfo(edit_column=span.start + 1, delete_count=len(span), insert_text=wrapped),
        config=config,
        column=span.start + 1,
        context=line,
        line_text=line,
    )


def backtick_code_elements(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    Code-like text (paths, commands, identifiers) should be in backticks.

    Spans already inside code, links, comments or math are never flagged.
    Overlapping candidates are resolved to the longest match.
    """
    skip_code_blocks = config.get("skipCodeBlocks", True)
    skip_math_blocks = config.get("skipMathBlocks", True)
    in_math_block = False

    for number, line in enumerate(doc.lines, 1):
        stripped = line.strip()
        in_code = number in doc.code_block_lines

        if in_code and _FENCE_RE.match(stripped):
            continue
        if not in_code and stripped.count('$$') == 1:
            in_math_block = not in_math_block
            continue
        if in_code and skip_code_blocks:
            continue
        if re.match(r'^\s*#', line) or _LINK_REFERENCE_RE.match(line):
            continue
        if in_math_block and skip_math_blocks and not _MATH_SHELL_RE.search(line):
            continue

        candidates = classify_line(line, excluded_ranges(line), config.options, number)
        for verdict in resolve_overlaps(candidates):
            try:
                violation = _span_violation(verdict, line, config)
            except Exception as e:
                logger.warning(f"Skipping '{verdict.span.text}' on line {number}: {e}")
                continue
            if violation is not None:
                logger.debug(f"Line {number}: '{verdict.span.text}' is {verdict.category.value}")
                yield violation
