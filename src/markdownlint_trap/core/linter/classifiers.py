"""
Code-like span classifiers.

``PATTERN_TABLE`` is an ordered list of declarative classifiers. Each one
pairs a category with a regex, a base confidence and an optional exemption
predicate. ``classify_line`` runs the whole table over one line and returns
every surviving candidate; overlapping candidates are resolved later by
``disambiguation.resolve_overlaps``.
"""
import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from .context import excluded_ranges, has_latex_commands, overlaps
from .disambiguation import is_abbreviation, trim_url
from .models import Category, ClassificationVerdict, Span
from .terms import (
    BACKTICK_IGNORED_TERMS,
    CAMEL_CASE_EXEMPTIONS,
    COMMON_CONCEPTUAL_WORDS,
    KNOWN_DIRECTORY_PREFIXES,
    MC_MAC_NAME_PATTERN,
    OPTION_PAIRS,
    PROSE_LIST_WORDS,
    SNAKE_CASE_EXEMPTIONS,
)

logger = logging.getLogger(__name__)

# exempt(text, line, start, end) -> True when the match is prose
Exemption = Callable[[str, str, int, int], bool]


@dataclass(frozen=True)
class PatternClassifier:
    """One row of the classifier table."""
    category: Category
    pattern: re.Pattern
    confidence: float
    reason: str
    exempt: Optional[Exemption] = None
    trim: Optional[Callable[[str], str]] = None
    option: Optional[str] = None     # config flag that must be true to enable the row


# ============================================================================
# Prose heuristics
# ============================================================================

SENTENCE_STARTERS = frozenset({
    'The', 'A', 'An', 'This', 'That', 'These', 'Those',
    'It', 'They', 'We', 'You', 'He', 'She',
    'New', 'Go', 'Then', 'Next', 'First', 'Second', 'Finally',
    'However', 'Therefore', 'Additionally', 'Furthermore',
    'In', 'On', 'At', 'For', 'With', 'From', 'To',
    'Some', 'Many', 'Most', 'All', 'Few', 'Several',
})

PROSE_TLDS = (
    'com', 'org', 'net', 'edu', 'gov', 'mil', 'int', 'io', 'dev', 'app', 'co',
    'ai', 'us', 'uk', 'de', 'fr', 'jp', 'cn', 'ca', 'au', 'info', 'biz', 'me',
    'tv', 'cloud', 'tech', 'xyz', 'site', 'online', 'store', 'blog',
)
DOMAIN_RE = re.compile(
    r'^(?:[a-z0-9][a-z0-9-]*\.)+(?:' + '|'.join(PROSE_TLDS) + r')$', re.I
)

TIME_RE = re.compile(r'^(?:AM|PM|am|pm)?-?\d+-?\d*:\d+$')
TIME_RANGE_RE = re.compile(r'^\d+-\d+:\d+$')
VERSION_RE = re.compile(r'^v?\d+(\.\d+)*(\+|\.\d+)*$')
NAMED_VERSION_RE = re.compile(r'^[A-Za-z]+\s+\d+(\.\d+)*(\+)?$')

_EXTENSION_RE = re.compile(r'\.[^/]+$')


def is_sentence_boundary(match: str, line: str) -> bool:
    """
    True when ``match`` looks like two sentences glued together.

    ``computer.New`` after a full stop, or followed by lowercase prose, is a
    missing space rather than a filename.
    """
    if not re.match(r'^[a-z]+\.[A-Z][a-z]*$', match):
        return False

    index = line.find(match)
    if index == -1:
        return False

    before = line[:index]
    if not re.search(r'[.!?]\s+$', before) and before.strip():
        return False

    after_period = match.split('.')[1]
    if after_period in SENTENCE_STARTERS:
        return True

    return bool(re.match(r'^\s+[a-z]', line[index + len(match):]))


def is_likely_file_path(text: str) -> bool:
    """
    Decide whether a slash-separated token is a path or prose.

    Rejects option pairs (``read/write``), enumerations (``Heavy/Moderate/Light``),
    BDD keyword sets, numeric ratios and slash lists of common words.
    """
    if '/' not in text or re.search(r'\s', text):
        return False

    segments = text.split('/')

    if all(s == '' or s.isdigit() for s in segments):
        return False

    if text.lower() in OPTION_PAIRS:
        return False

    if len(segments) >= 2:
        all_capitalized = all(re.match(r'^[A-Z]', s) for s in segments)
        multi_word = any('-' in s for s in segments)
        all_short = all(len(s) <= 8 for s in segments)
        if all_capitalized and (len(segments) >= 3 or multi_word or all_short):
            return False

        if all(re.match(r'^[A-Z]+$', s) for s in segments):
            return False

    if len(segments) == 2 and not _EXTENSION_RE.search(segments[1]):
        if len(segments[0]) <= 2 or len(segments[1]) <= 2:
            return False

        first, second = (s.lower() for s in segments)
        if first in COMMON_CONCEPTUAL_WORDS and second in COMMON_CONCEPTUAL_WORDS:
            return False

        has_prefix = first in KNOWN_DIRECTORY_PREFIXES
        has_anchor = bool(re.match(r'^(?:\.\.?/|/|~/)', text))
        if not has_prefix and not has_anchor:
            return False

    prose = sum(1 for s in segments if s.lower() in PROSE_LIST_WORDS)
    if prose == len(segments):
        return False
    if prose >= len(segments) - 1 and not _EXTENSION_RE.search(segments[-1]):
        return False

    return bool(re.search(r'[a-zA-Z]', text))


def is_domain_in_prose(text: str, line: str, start: int) -> bool:
    """A bare domain (``Outlook.com``, ``support@example.com``) is prose, not code."""
    if '://' in text:
        return False
    if start > 0 and line[start - 1] == '@':
        return True
    host = text.split('/', 1)[0]
    return bool(DOMAIN_RE.match(host))


# ============================================================================
# Exemptions
# ============================================================================

def _not_a_path(text: str, line: str, start: int, end: int) -> bool:
    if re.match(r'^f/\d+(\.\d+)?$', text, re.I):
        return True
    return not is_likely_file_path(text)


def _sentence_boundary(text: str, line: str, start: int, end: int) -> bool:
    return is_sentence_boundary(text, line)


def _pluralization(text: str, line: str, start: int, end: int) -> bool:
    return bool(re.match(r'^\w+\([a-z]\)$', text))


_DOCUMENT_EXTENSION_RE = re.compile(r'^\.(docx?|pdf|xlsx?|pptx?|odt|ods|odp|rtf|txt|csv)$', re.I)


def _document_extension(text: str, line: str, start: int, end: int) -> bool:
    """``Template .docx`` names a document type, not a dotfile."""
    return (
        start > 0
        and bool(re.search(r'\w\s+$', line[:start]))
        and bool(_DOCUMENT_EXTENSION_RE.match(text))
    )


_ENGLISH_SUFFIXES = frozenset({
    'ism', 'ist', 'like', 'based', 'gate', 'ness', 'ful', 'less', 'able', 'ible',
    'tion', 'sion', 'wise', 'ward', 'phobia', 'ish', 'ment', 'ship', 'hood', 'dom',
    'esque',
})


def _english_suffix(text: str, line: str, start: int, end: int) -> bool:
    return not text.startswith('--') and text[1:].lower() in _ENGLISH_SUFFIXES


def _ratio_or_time(text: str, line: str, start: int, end: int) -> bool:
    return (
        bool(re.match(r'^\d+(\.\d+)?:1$', text))
        or bool(re.search(r'(AM|PM)?-\d{1,2}:\d{2}$', text, re.I))
    )


def _prose_identifier(text: str, line: str, start: int, end: int) -> bool:
    """Locale codes, brand names, surnames, dates and email local parts."""
    if text in SNAKE_CASE_EXEMPTIONS or text in CAMEL_CASE_EXEMPTIONS:
        return True
    if MC_MAC_NAME_PATTERN.match(text):
        return True
    if re.match(r'^\d{4}_\d{2}_\d{2}$', text) or re.search(r'_\d{4}_\d{2}_\d{2}$', text):
        return True
    if end < len(line) and line[end] == '@':
        return True
    if start > 0 and line[start - 1] == '<' and '@' in line[end:]:
        return True
    return False


# ============================================================================
# Pattern table
# ============================================================================

_IMPORT_PROSE_WORDS = (
    'the', 'a', 'an', 'your', 'my', 'our', 'their', 'its', 'some', 'all', 'any',
    'this', 'that', 'these', 'those', 'from', 'into', 'to', 'new', 'old', 'more',
    'them', 'it', 'something', 'everything', 'anything', 'nothing', 'system',
    'systems', 'updates', 'path', 'paths', 'is', 'are', 'was', 'were', 'will', 'be',
    'data', 'files', 'modules', 'packages', 'settings', 'config', 'options', 'rules',
    'code', 'process', 'other', 'changes', 'and', 'or', 'statements', 'functions',
    'classes', 'types', 'errors', 'values', 'items', 'records', 'content', 'text',
    'names', 'custom', 'external', 'internal', 'local', 'global', 'default',
    'specific', 'relevant', 'existing', 'additional', 'required', 'necessary',
    'important', 'direct', 'proper',
)

_COMMAND_RE = re.compile(
    r'\b(?:'
    r'(?:npm|yarn|pnpm)\s+(?:install|i|run|start|test|build|init|publish|link|unlink|update|add|remove|exec|create|ci|audit|outdated|ls|list|version|pack|cache|config|set|get)'
    r'|git\s+(?:clone|commit|push|pull|fetch|checkout|branch|merge|rebase|status|log|diff|add|rm|mv|reset|stash|tag|remote|init|config|show|blame|bisect|cherry-pick|revert|clean|gc|prune|reflog)'
    r'|(?:pip|pip3)\s+(?:install|uninstall|freeze|list|show|search|download|wheel|hash|check|config|cache|debug)'
    r'|docker\s+(?:run|build|push|pull|exec|ps|images|logs|stop|start|rm|rmi|compose|network|volume|system|inspect|tag|login|logout)'
    r'|brew\s+(?:install|uninstall|update|upgrade|search|list|info|doctor|cleanup|tap|untap|services|cask)'
    r'|cargo\s+(?:build|run|test|bench|check|clean|doc|new|init|add|remove|update|publish|install|uninstall|search|tree|fmt|clippy)'
    r')\b'
)

PATTERN_TABLE: list[PatternClassifier] = [
    PatternClassifier(
        Category.URL,
        re.compile(r"\b(?:https?|ftp|ftps|file)://[\w\-._~:/?#\[\]@!$&'()*+,;=%]+"),
        0.95, "full URL with protocol",
        trim=trim_url,
    ),
    PatternClassifier(
        Category.ABSOLUTE_PATH,
        re.compile(r'(?:^|(?<=\s))/(?:[\w.-]+/)*[\w.-]+(?=\s|$)'),
        0.85, "absolute path",
        exempt=_not_a_path,
    ),
    PatternClassifier(
        Category.FILE_PATH,
        re.compile(r'\b(?:\.?/?[\w.-]+/)+[\w.-]+\b'),
        0.8, "directory or file path",
        exempt=_not_a_path,
    ),
    PatternClassifier(
        Category.FILENAME,
        re.compile(r'\b(?=[^\d\s])[\w.-]*[a-zA-Z][\w.-]*\.[a-zA-Z0-9]{1,5}\b'),
        0.75, "filename with extension",
        exempt=_sentence_boundary,
    ),
    PatternClassifier(
        Category.FUNCTION_CALL,
        re.compile(r'\b[a-zA-Z][\w.-]*\([^)]*\)'),
        0.75, "function call",
        exempt=_pluralization,
    ),
    PatternClassifier(
        Category.DOTFILE,
        re.compile(r'\B\.[\w.-]+\b(?!/)'),
        0.7, "dotfile",
        exempt=_document_extension,
    ),
    PatternClassifier(
        Category.ENV_VAR,
        re.compile(r'\b[A-Z][A-Z0-9]*_[A-Z0-9_]+\b'),
        0.7, "environment variable",
    ),
    PatternClassifier(
        Category.ENV_VAR,
        re.compile(r'\b(?:PATH|HOME|TEMP|TMPDIR|USER|SHELL|PORT|HOST)\b'),
        0.6, "well-known environment variable",
    ),
    PatternClassifier(
        Category.CLI_FLAG,
        re.compile(r'\B--?[a-zA-Z][\w-]*\b'),
        0.7, "command-line flag",
        exempt=_english_suffix,
    ),
    PatternClassifier(
        Category.COMMAND,
        _COMMAND_RE,
        0.9, "shell command with subcommand",
    ),
    PatternClassifier(
        Category.IMPORT,
        re.compile(r'\bimport\s+(?!(?:' + '|'.join(_IMPORT_PROSE_WORDS) + r')\b)\w+'),
        0.8, "import statement",
    ),
    PatternClassifier(
        Category.NETWORK_ADDRESS,
        re.compile(r'\b(?!\d+:\d+\b)(?<!\d\.)[\w.-]+:(?!1\b)\d+\b'),
        0.7, "host:port address",
        exempt=_ratio_or_time,
    ),
    PatternClassifier(
        Category.KEY_COMBO,
        re.compile(r'\b[A-Z]+\+[A-Z]\b'),
        0.7, "key combination",
    ),
    PatternClassifier(
        Category.ASSIGNMENT,
        re.compile(r'\b(?:export|set)\s+[A-Za-z_][\w.-]*=\$?[\w.-]+\b'),
        0.85, "shell variable assignment",
    ),
    PatternClassifier(
        Category.SHELL_VARIABLE,
        re.compile(r'(?<![\w$])\$(?:\{[A-Za-z_]\w*\}|[A-Za-z_]\w*)'),
        0.6, "shell variable reference",
    ),
    PatternClassifier(
        Category.SNAKE_CASE,
        re.compile(r'\b_?[a-z][a-z0-9]*(?:_[a-z0-9]+)+\b'),
        0.65, "snake_case identifier",
        exempt=_prose_identifier,
    ),
    PatternClassifier(
        Category.CAMEL_CASE,
        re.compile(r'\b[a-z][a-z0-9]*[A-Z][a-zA-Z0-9]*\b'),
        0.6, "camelCase identifier",
        exempt=_prose_identifier,
    ),
    PatternClassifier(
        Category.PASCAL_CASE,
        re.compile(r'\b[A-Z](?=[a-zA-Z0-9]*[A-Z])[a-zA-Z0-9]*[a-z][a-zA-Z0-9]*\b'),
        0.5, "PascalCase identifier",
        exempt=_prose_identifier,
        option="detectPascalCase",
    ),
]


def _is_time(text: str) -> bool:
    return bool(TIME_RE.match(text) or TIME_RANGE_RE.match(text))


def _is_version_in_parens(text: str, line: str, start: int, end: int) -> bool:
    if start == 0 or end >= len(line):
        return False
    if line[start - 1] != '(' or line[end] != ')':
        return False
    return bool(VERSION_RE.match(text) or NAMED_VERSION_RE.match(text))


def classify_line(
    line: str,
    excluded: Optional[list[tuple[int, int]]] = None,
    options: Optional[dict] = None,
    line_number: int = 1,
) -> list[ClassificationVerdict]:
    """
    Run every classifier over one line.

    Args:
        line: Source line
        excluded: Ranges to ignore (default: ``context.excluded_ranges(line)``)
        options: Rule options; ``ignoredTerms`` and ``detectPascalCase`` are read
        line_number: 1-based line number recorded on each span

    Returns:
        Every candidate verdict, possibly overlapping
    """
    options = options or {}
    if has_latex_commands(line):
        return []

    if excluded is None:
        excluded = excluded_ranges(line)
    ignored = BACKTICK_IGNORED_TERMS | frozenset(options.get("ignoredTerms") or [])

    verdicts: list[ClassificationVerdict] = []
    for priority, classifier in enumerate(PATTERN_TABLE):
        if classifier.option and not options.get(classifier.option, False):
            continue

        for match in classifier.pattern.finditer(line):
            text = match.group(0)
            start = match.start()
            if classifier.trim:
                text = classifier.trim(text)
            end = start + len(text)
            if not text:
                continue

            if overlaps(start, end, excluded):
                continue
            if text in ignored or is_abbreviation(text) or _is_time(text):
                continue
            if _is_version_in_parens(text, line, start, end):
                continue
            if classifier.exempt and classifier.exempt(text, line, start, end):
                continue
            if classifier.category != Category.URL and is_domain_in_prose(text, line, start):
                continue

            verdicts.append(ClassificationVerdict(
                category=classifier.category,
                matched=True,
                confidence=classifier.confidence,
                reason=classifier.reason,
                span=Span(line_number, start, end, text),
                priority=priority,
            ))

    return verdicts
