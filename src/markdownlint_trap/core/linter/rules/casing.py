"""
Sentence-case classification and fix building.

Pure functions shared by the sentence-case-heading rule: they decide
whether heading or bold text is in sentence case and compute the
rewritten text. Nothing here reports violations.
"""
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from ..models import FixInfo
from ..terms import CAMEL_CASE_EXEMPTIONS, MC_MAC_NAME_PATTERN

# Emoji blocks, skin tones, ZWJ and VS16
_EMOJI_CHARS = (
    '\U0001F1E0-\U0001F1FF'
    '\U0001F300-\U0001F5FF'
    '\U0001F600-\U0001F64F'
    '\U0001F680-\U0001F6FF'
    '\U0001F700-\U0001F77F'
    '\U0001F780-\U0001F7FF'
    '\U0001F800-\U0001F8FF'
    '☀-⛿'
    '✀-➿'
    '\U0001F900-\U0001F9FF'
    '\U0001FA00-\U0001FA6F'
    '\U0001FA70-\U0001FAFF'
    '\U0001F000-\U0001F02F'
    '\U0001F0A0-\U0001F0FF'
    '\U0001F100-\U0001F1FF'
    '\U0001F3FB-\U0001F3FF'
    '‍'
    '️'
)
EMOJI_RE = re.compile(f'[{_EMOJI_CHARS}]')
LEADING_EMOJI_RE = re.compile(f'^[{_EMOJI_CHARS}]+')

_CODE_EXTENSIONS = (
    'js|mjs|cjs|ts|tsx|jsx|py|sh|bash|zsh|json|yaml|yml|md|txt|html|css|scss|less|xml|'
    'toml|ini|cfg|conf|env|sql|rb|go|rs|java|kt|swift|c|cpp|h|hpp|php|pl|r|lua|vim|el|'
    'ex|exs|erl|hs|scala|clj|groovy|gradle|make|cmake|dockerfile|gitignore|gitattributes|'
    'editorconfig|prettierrc|eslintrc|babelrc|nvmrc|npmrc'
)
FILENAME_RE = re.compile(rf'^[a-zA-Z][-a-zA-Z0-9_.]*\.({_CODE_EXTENSIONS})$', re.I)
FILE_PATH_RE = re.compile(rf'^[a-zA-Z_.~][-a-zA-Z0-9_./]*\.({_CODE_EXTENSIONS})$', re.I)
ALL_CAPS_FILENAME_RE = re.compile(r'^[A-Z][A-Z0-9_-]*\.[a-zA-Z]+$')

CAMEL_CASE_RE = re.compile(r'^[a-z][a-z0-9]*[A-Z][a-zA-Z0-9]*$')
PASCAL_CASE_RE = re.compile(r'^[A-Z](?=[a-zA-Z0-9]*[A-Z])[a-zA-Z0-9]*[a-z][a-zA-Z0-9]*$')
SNAKE_CASE_RE = re.compile(r'^_?[a-z][a-z0-9]*(?:_[a-z0-9]+)+$')

ACRONYM_PREFIX_RE = re.compile(r'^([A-Z]{2,4}(?:/[A-Z][a-z]+)?(?:/[A-Z]{2,})*)(-[a-z].*)$')
_WORD_CORE_RE = re.compile(r"^(\W*)(.*?)(\W*)$")

BOLD_ALLOWED_CAPITALIZED = frozenset({
    'Background', 'Context', 'Overview', 'Summary', 'Introduction', 'Conclusion',
    'Step', 'Part', 'Section', 'Appendix', 'Chapter', 'Notes', 'References',
})

CONVENTIONAL_COMMIT_TYPES = frozenset({
    'feat', 'fix', 'docs', 'style', 'refactor', 'perf', 'test',
    'build', 'ci', 'chore', 'revert', 'wip', 'release',
})

_BOLD_PROBLEM_WORDS = (
    re.compile(r'\b(CODE|LINK|ITALIC|BOLD)\b'),
    re.compile(r'\bTest\b'),
    re.compile(r'\bDate\b'),
    re.compile(r'\bVersion\b'),
)

PRESERVED_PREFIX = '__PRESERVED_'
_WORD_SEPARATORS_RE = re.compile(r'[#*~!+={}|:;"<>,.?\\]')
_NUMERIC_RE = re.compile(r'^[-\d.,/]+$')
_FIX_PRESERVE_RE = re.compile(
    r"`[^`]+`|\[[^\]]+\]\([^)]+\)|\[[^\]]+\]"
    r"|\b(v?\d+\.\d+(?:\.\d+)?(?:-[a-zA-Z0-9.]+)?)\b"
    r"|\b(\d{4}-\d{2}-\d{2})\b"
    r"|(\*\*|__)(.*?)\3|(\*|_)(.*?)\5"
    r"|\"[^\"]+\"|'[^']+'"
)


@dataclass
class CaseResult:
    """Outcome of a sentence-case check."""
    is_valid: bool
    message: str = ""
    cleaned_text: str = ""


_VALID = CaseResult(True)


# ============================================================================
# Small predicates
# ============================================================================

def is_acronym(word: str) -> bool:
    """Short all-uppercase word such as API, HTTP or I."""
    return bool(word) and len(word) <= 4 and word.isalpha() and word.isupper()


def is_brand_name(word: str) -> bool:
    """Brand with internal capitals such as iPhone or macOS; its casing is kept as written."""
    return word in CAMEL_CASE_EXEMPTIONS


def is_code_identifier(word: str) -> bool:
    if word in CAMEL_CASE_EXEMPTIONS or MC_MAC_NAME_PATTERN.match(word):
        return False
    return bool(
        CAMEL_CASE_RE.match(word)
        or PASCAL_CASE_RE.match(word)
        or SNAKE_CASE_RE.match(word)
    )


def _sentence_cased(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def _is_preserved(word: str) -> bool:
    return word.startswith(PRESERVED_PREFIX) and word.endswith('__')


def strip_leading_symbols(text: str) -> str:
    """Remove leading emoji sequences (flags, ZWJ sequences, skin tones)."""
    return LEADING_EMOJI_RE.sub('', text.strip()).strip()


def truncate_at_emoji(text: str) -> str:
    """Cut ``text`` at the first emoji that is not inside a code span."""
    code = [m.span() for m in re.finditer(r'`[^`]+`', text)]
    for match in EMOJI_RE.finditer(text):
        pos = match.start()
        if any(start <= pos < end for start, end in code):
            continue
        return text[:pos].rstrip()
    return text


def preserve_segments(text: str) -> tuple[str, list[str]]:
    """
    Replace code spans, links, versions, dates, bold and italic runs with
    ``__PRESERVED_n__`` placeholders.

    Returns:
        (processed text, preserved segments in placeholder order)
    """
    segments: list[str] = []

    def keep(match: re.Match) -> str:
        segments.append(match.group(0))
        # NUL-delimited so later passes cannot match inside a placeholder
        return f'\x00P{len(segments) - 1}E\x00'

    processed = re.sub(r'`([^`]+)`', keep, text)
    processed = re.sub(r'\[[^\]]+\]\([^)]+\)|\[[^\]]+\]', keep, processed)
    processed = re.sub(r'\b(v?\d+\.\d+(?:\.\d+)?(?:-[a-zA-Z0-9.]+)?)\b', keep, processed)
    processed = re.sub(r'\b(\d{4}-\d{2}-\d{2})\b', keep, processed)
    processed = re.sub(r'(\*\*|__)(.*?)\1', keep, processed)
    processed = re.sub(r'(\*|_)(.*?)\1', keep, processed)

    processed = re.sub(r'\x00P(\d+)E\x00', lambda m: f'{PRESERVED_PREFIX}{m.group(1)}__', processed)
    return processed, segments


# ============================================================================
# Preparation
# ============================================================================

def should_exempt(heading_text: str, text_without_markup: str) -> bool:
    """Headings that are not prose: bracketed, filenames, code-heavy, numbered."""
    trimmed = heading_text.strip()
    if not trimmed:
        return True
    if trimmed.startswith('[') and trimmed.endswith(']'):
        return True
    if re.match(r'''^["'][^"']+["']\s+[a-z]''', trimmed):
        return True
    if not any(c.isalpha() for c in text_without_markup):
        return True
    if FILENAME_RE.match(trimmed) or FILE_PATH_RE.match(trimmed):
        return True

    first_word = trimmed.split()[0]
    if ALL_CAPS_FILENAME_RE.match(first_word):
        return True

    code_length = sum(len(m.group(0)) for m in re.finditer(r'`[^`]+`|\([A-Z0-9]+\)', heading_text))
    if code_length and code_length / len(heading_text) > 0.4:
        return True
    if first_word.startswith('`') and first_word.endswith('`'):
        return True

    cleaned = strip_leading_symbols(heading_text)
    if cleaned != trimmed and re.match(r'^\d+\.\s', cleaned):
        return True

    return bool(re.match(r'^\w+\s*\((required|optional|deprecated|readonly|read-only)\)$', trimmed, re.I))


@dataclass
class _Prepared:
    cleaned_text: str
    words: list[str]
    had_leading_emoji: bool


def _first_validation_index(words: list[str]) -> int:
    for i, word in enumerate(words):
        if not _is_preserved(word) and not _NUMERIC_RE.match(word):
            return i
    return -1


def _prepare(text: str) -> Optional[_Prepared]:
    without_html = re.sub(r'<[^>]+>', '', text).strip()
    without_markup = re.sub(r'\[([^\]]+)\]', r'\1', re.sub(r'`[^`]+`', '', without_html))

    if should_exempt(without_html, without_markup):
        return None

    cleaned = strip_leading_symbols(without_html)
    if not cleaned:
        return None

    processed, _ = preserve_segments(cleaned)
    clean = _WORD_SEPARATORS_RE.sub(' ', processed).strip()
    if not clean or re.match(r'^\d+[\d./-]*$', clean):
        return None

    words = clean.split()
    if all(_is_preserved(w) for w in words) or _first_validation_index(words) == -1:
        return None

    return _Prepared(cleaned, words, cleaned != without_html)


def _phrase_indices(words: list[str], terms: Mapping[str, str]) -> set[int]:
    """Word indices covered by multi-word special terms."""
    indices: set[int] = set()
    lower = [w.lower() for w in words]
    for key in terms:
        if ' ' not in key:
            continue
        parts = key.split(' ')
        for i in range(len(lower) - len(parts) + 1):
            if lower[i:i + len(parts)] == parts:
                indices.update(range(i, i + len(parts)))
    return indices


def _check_phrases(text: str, terms: Mapping[str, str]) -> Optional[CaseResult]:
    for phrase, expected in terms.items():
        if ' ' not in phrase:
            continue
        match = re.search(rf'\b{re.escape(phrase)}\b', text, re.I)
        if match and match.group(0) != expected:
            return CaseResult(False, f'Phrase "{match.group(0)}" should be "{expected}".', text)
    return None


def is_all_caps(words: list[str]) -> bool:
    relevant = [w for w in words if len(w) > 1 and not _is_preserved(w)]
    return (
        len(relevant) > 1
        and all(w == w.upper() for w in relevant)
        and not any(c.isdigit() for c in ''.join(relevant))
    )


def _lookup(word: str, terms: Mapping[str, str]) -> Optional[str]:
    return terms.get(word.lower()) or terms.get(re.sub(r'[^a-zA-Z0-9]', '', word).lower())


def _is_ambiguous(word: str, ambiguous: Mapping[str, dict]) -> bool:
    return word.lower() in ambiguous or re.sub(r'[^a-zA-Z0-9]', '', word).lower() in ambiguous


# ============================================================================
# Heading validation
# ============================================================================

def _validate_first_word(word: str, index: int, phrase_ignore: set[int], terms: Mapping[str, str],
                         text: str, had_emoji: bool, ambiguous: Mapping[str, dict]) -> CaseResult:
    lower = word.lower()
    expected = terms.get(lower)

    if _is_ambiguous(word, ambiguous):
        return _VALID
    if word[:1].isdigit() or re.match(r'^\d{4}(?:\D|$)', text):
        return _VALID
    if re.match(r'^\d+[.)]\s*[a-z]\b', text) and len(word) == 1:
        return _VALID
    if index in phrase_ignore or word.startswith(PRESERVED_PREFIX):
        return _VALID

    if expected:
        if word != expected and word.replace('(', '').replace(')', '') != expected:
            return CaseResult(False, f'First word "{word}" should be "{expected}".')
        return _VALID

    if is_brand_name(word):
        return _VALID

    if had_emoji:
        if word != _sentence_cased(word) and not is_acronym(word) and not is_code_identifier(word):
            return CaseResult(False, f'First word "{word}" should be "{_sentence_cased(word)}".')
        return _VALID

    if '/' in word and '://' not in word:
        parts = word.split('/')
        if all(p.lower() in terms for p in parts):
            fixed = '/'.join(terms[p.lower()] for p in parts)
            if fixed != word:
                return CaseResult(False, f'First word "{word}" should be "{fixed}".')
            return _VALID

    hyphen_expected = terms.get(lower.split('-')[0]) if '-' in word else None
    if hyphen_expected:
        fixed = hyphen_expected + word[len(hyphen_expected):]
        if word != fixed:
            return CaseResult(False, f'First word "{word}" should be "{fixed}".')
        return _VALID

    if ACRONYM_PREFIX_RE.match(word):
        return _VALID

    if word != _sentence_cased(word) and not is_acronym(word) and not is_code_identifier(word):
        return CaseResult(False, "Heading's first word should be capitalized.")
    return _VALID


def _capital_allowed_after(marker: str, word: str, word_pos: int, text: str,
                           expected: Optional[str]) -> bool:
    """First word after a colon, em-dash or ampersand may be capitalized."""
    marker_pos = text.find(marker)
    if marker_pos == -1 or word_pos <= marker_pos:
        return False
    if not text[marker_pos + 1:].lstrip().startswith(word):
        return False
    correctly_cased = word == _sentence_cased(word) or is_acronym(word) or word == expected
    return correctly_cased and not (expected and word != expected)


def _in_parentheses(word: str, text: str) -> bool:
    if f'({word})' in text:
        return True
    if '(' in text and ')' in text:
        return word in text[text.find('('):text.find(')') + 1]
    return False


def _validate_subsequent_words(words: list[str], start: int, phrase_ignore: set[int],
                               terms: Mapping[str, str], text: str,
                               ambiguous: Mapping[str, dict]) -> CaseResult:
    offenders: list[str] = []

    for i in range(start + 1, len(words)):
        if i in phrase_ignore:
            continue
        word = words[i]
        expected = _lookup(word, terms)

        if _is_ambiguous(word, ambiguous):
            continue
        if PRESERVED_PREFIX in word:
            continue
        if word.endswith("'s") or word.endswith("’s"):
            continue

        word_pos = text.find(word)
        if any(_capital_allowed_after(m, word, word_pos, text, expected) for m in (':', '—', '&')):
            continue
        if _in_parentheses(word, text):
            continue

        if expected:
            bare = word.replace('(', '').replace(')', '')
            if word != expected and bare != expected and not (expected == 'Markdown' and word.lower() == 'markdown'):
                return CaseResult(False, f'Word "{word}" should be "{expected}".')

        if '-' in word:
            if ACRONYM_PREFIX_RE.match(word):
                continue
            parts = word.split('-')
            first_expected = terms.get(parts[0].lower())
            if first_expected and parts[0] == first_expected and all(p == p.lower() for p in parts[1:]):
                continue
            if parts[1] != parts[1].lower():
                return CaseResult(False, f'Word "{parts[1]}" in heading should be lowercase.')

        if word == word.upper() and len(word) > 1:
            if re.search(rf'\b{re.escape(word)}\.[a-zA-Z]+\b', text):
                continue

        if (
            word != word.lower()
            and not is_acronym(word)
            and word != 'I'
            and not expected
            and not is_code_identifier(word)
            and not is_brand_name(word)
        ):
            offenders.append(word)

    if len(offenders) == 1:
        return CaseResult(False, f'Word "{offenders[0]}" in heading should be lowercase.')
    if offenders:
        quoted = ', '.join(f'"{w}"' for w in offenders)
        return CaseResult(False, f'Words {quoted} in heading should be lowercase.')
    return _VALID


def validate_heading(text: str, terms: Mapping[str, str],
                     ambiguous: Optional[Mapping[str, dict]] = None) -> CaseResult:
    """
    Check heading text for sentence case.

    Args:
        text: Heading text without the ``#`` markers
        terms: lowercase term -> required casing
        ambiguous: terms that may legitimately be either case

    Returns:
        CaseResult; ``cleaned_text`` is the text with leading emoji removed
    """
    ambiguous = ambiguous or {}
    prepared = _prepare(text)
    if prepared is None:
        return _VALID

    cleaned, words = prepared.cleaned_text, prepared.words
    phrase_result = _check_phrases(cleaned, terms)
    if phrase_result:
        return phrase_result

    phrase_ignore = _phrase_indices(words, terms)
    first = _first_validation_index(words)
    result = _validate_first_word(words[first], first, phrase_ignore, terms, cleaned,
                                  prepared.had_leading_emoji, ambiguous)
    if not result.is_valid:
        return CaseResult(False, result.message, cleaned)

    if is_all_caps(words):
        return CaseResult(False, 'Heading should not be in all caps.', cleaned)

    result = _validate_subsequent_words(words, first, phrase_ignore, terms, cleaned, ambiguous)
    return CaseResult(result.is_valid, result.message, cleaned)


# ============================================================================
# Bold text validation
# ============================================================================

def validate_bold_text(text: str, terms: Mapping[str, str],
                       ambiguous: Optional[Mapping[str, dict]] = None) -> CaseResult:
    """Stricter sentence-case check for ``**bold**`` labels in list items."""
    ambiguous = ambiguous or {}
    trimmed = text.strip()
    if not trimmed:
        return _VALID
    if trimmed.lower() in CONVENTIONAL_COMMIT_TYPES:
        return _VALID
    if re.match(r'^[A-Z]{2,}$', trimmed):
        return _VALID
    if re.match(r'^[a-z][a-z0-9]*(-[a-z0-9]+)+$', trimmed):
        return _VALID
    if re.match(r'^[a-zA-Z][-a-zA-Z0-9_.]*/\**$', trimmed):
        return _VALID
    if FILENAME_RE.match(trimmed):
        return _VALID

    for raw in text.split()[1:]:
        word = re.sub(r'[^a-zA-Z]', '', raw)
        if len(word) == 1:
            continue
        if any(p.search(word) for p in _BOLD_PROBLEM_WORDS):
            return CaseResult(False, f'Word "{word}" in bold text should be lowercase.', trimmed)

    prepared = _prepare(text)
    if prepared is None:
        return _VALID

    cleaned, words = prepared.cleaned_text, prepared.words
    phrase_result = _check_phrases(cleaned, terms)
    if phrase_result:
        return phrase_result

    first = _first_validation_index(words)
    phrase_ignore = _phrase_indices(words, terms)
    starts_with_number = first > 0 and words[0][:1].isdigit()

    if not starts_with_number:
        result = _validate_first_word(words[first], first, phrase_ignore, terms, cleaned,
                                      prepared.had_leading_emoji, ambiguous)
        if not result.is_valid:
            return CaseResult(False, result.message, cleaned)

    if is_all_caps(words):
        return CaseResult(False, 'Bold text should not be in all caps.', cleaned)

    for i in range(first + 1, len(words)):
        if i in phrase_ignore:
            continue
        word = words[i]
        if _is_ambiguous(word, ambiguous) or PRESERVED_PREFIX in word:
            continue
        if word.endswith("'s") or word.endswith("’s") or len(word) == 1:
            continue

        expected = _lookup(word, terms)
        if expected:
            if word != expected and word.replace('(', '').replace(')', '') != expected:
                return CaseResult(False, f'Word "{word}" should be "{expected}".', cleaned)
        elif (
            word != 'I'
            and not is_acronym(word)
            and word not in BOLD_ALLOWED_CAPITALIZED
            and not is_brand_name(word)
        ):
            if word == word.upper() and any(c.isupper() for c in word):
                return CaseResult(False, f'Word "{word}" in bold text should not be in all caps.', cleaned)
            if word != word.lower():
                return CaseResult(False, f'Word "{word}" in bold text should be lowercase.', cleaned)

        if '-' in word:
            parts = word.split('-')
            if parts[1] != parts[1].lower():
                return CaseResult(False, f'Word "{parts[1]}" in bold text should be lowercase.', cleaned)

    return CaseResult(True, "", cleaned)


# ============================================================================
# Fixes
# ============================================================================

def _fix_first_word(word: str, terms: Mapping[str, str]) -> str:
    """Leading word cased the way ``_validate_first_word`` accepts it."""
    lower = word.lower()
    if '/' in word and '://' not in word:
        parts = lower.split('/')
        if all(p in terms for p in parts):
            return '/'.join(terms[p] for p in parts)
    if '-' in word and (prefix := terms.get(lower.split('-')[0])):
        return prefix + word[len(prefix):]
    if ACRONYM_PREFIX_RE.match(word):
        return word
    return _sentence_cased(word)


def to_sentence_case(text: str, terms: Mapping[str, str],
                     ambiguous: Optional[Mapping[str, dict]] = None) -> Optional[str]:
    """
    Rewrite ``text`` in sentence case.

    Code spans, links, versions, dates, emphasis and quoted text are kept
    verbatim. Multi-word special terms are matched before single words.

    Returns:
        The rewritten text, or None when nothing would change
    """
    ambiguous = ambiguous or {}
    preserved: list[str] = []

    def keep(value: str) -> str:
        preserved.append(value)
        return f'__P_{len(preserved) - 1}__'

    processed = _FIX_PRESERVE_RE.sub(lambda m: keep(m.group(0)), text)
    for phrase, correct in terms.items():
        if ' ' in phrase:
            processed = re.sub(rf'\b{re.escape(phrase)}\b', lambda m, c=correct: keep(c), processed, flags=re.I)

    words = processed.split()
    if all(w.startswith('__P_') for w in words):
        return None

    first_done = False
    fixed_words = []
    for word in words:
        lead, core, trail = _WORD_CORE_RE.match(word).groups()
        lower = core.lower()
        if core.startswith("__P_") or not any(c.isalpha() for c in core):
            fixed_words.append(word)
            continue
        if lower in ambiguous:
            if not first_done:
                core = _sentence_cased(core)
            elif not re.match(r'^[A-Z][a-z]', core):
                core = lower
        elif lower in terms:
            core = terms[lower]
        elif is_brand_name(core):
            pass
        elif not first_done:
            core = _fix_first_word(core, terms)
        else:
            core = lower
        first_done = True
        fixed_words.append(lead + core + trail)

    fixed = re.sub(r'__P_(\d+)__', lambda m: preserved[int(m.group(1))], ' '.join(fixed_words))
    return None if fixed == text else fixed


def build_heading_fix(line: str, text: str, terms: Mapping[str, str],
                      ambiguous: Optional[Mapping[str, dict]] = None) -> Optional[tuple[FixInfo, str]]:
    """
    Fix for an ATX heading line.

    Returns:
        (FixInfo, fixed text), or None when the line has no fixable heading text
    """
    match = re.match(r'^(#{1,6})(\s+)(.*)$', line)
    if not match:
        return None
    fixed = to_sentence_case(text, terms, ambiguous)
    if not fixed:
        return None
    prefix = len(match.group(1)) + len(match.group(2))
    return FixInfo(edit_column=prefix + 1, delete_count=len(text), insert_text=fixed), fixed


def build_bold_fix(line: str, original: str, fixed: str) -> Optional[FixInfo]:
    """Fix for the first bold run on ``line`` that starts with ``original``."""
    index = line.find(f"**{original}")
    if index == -1:
        return None
    return FixInfo(edit_column=index + 3, delete_count=len(original), insert_text=fixed)
