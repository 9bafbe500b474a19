"""Line-level context detection.

Given one source line, find the regions that rules must leave alone:
inline code spans, markdown and wiki links, angle-bracket autolinks,
HTML comments and inline math. Ranges are ``(start, end)`` offsets,
0-based with an exclusive end.
"""
import re

Range = tuple[int, int]

LINK_RE = re.compile(r'!?\[[^\]]*\]\([^)]*\)')
WIKI_LINK_RE = re.compile(r'!?\[\[[^\]]+\]\]')
HTML_COMMENT_RE = re.compile(r'<!--.*?-->')
AUTOLINK_RE = re.compile(r'<(?:https?|ftps?|file|mailto):[^>\s]+>')
INLINE_MATH_RE = re.compile(r'\$([^$]+?)\$')
BLOCK_MATH_RE = re.compile(r'\$\$(?:[^$]|\$[^$])*\$\$')
LATEX_COMMAND_RE = re.compile(
    r'\\(?:sum|frac|int|lim|sqrt|sin|cos|log|alpha|beta|gamma|delta|theta|pi|sigma)\b'
)
PRICE_RE = re.compile(r'^\d+(\.\d+)?$')


def inline_code_spans(line: str) -> list[Range]:
    """
    Find inline code spans, backtick delimiters included.

    A span opened by a run of N backticks closes at the next run of exactly
    N backticks. An unmatched run is literal text.
    """
    spans: list[Range] = []
    if '`' not in line:
        return spans

    i = 0
    length = len(line)
    while i < length:
        start = line.find('`', i)
        if start == -1:
            break
        run_end = start
        while run_end < length and line[run_end] == '`':
            run_end += 1
        fence = line[start:run_end]

        close = _find_backtick_run(line, run_end, len(fence))
        if close == -1:
            i = run_end
            continue

        spans.append((start, close + len(fence)))
        i = close + len(fence)

    return spans


def _find_backtick_run(line: str, pos: int, size: int) -> int:
    """Position of the next backtick run of exactly ``size`` ticks, or -1."""
    length = len(line)
    while pos < length:
        found = line.find('`', pos)
        if found == -1:
            return -1
        end = found
        while end < length and line[end] == '`':
            end += 1
        if end - found == size:
            return found
        pos = end
    return -1


def is_in_inline_code(line: str, position: int) -> bool:
    """Check whether a character offset falls inside an inline code span."""
    return any(start <= position < end for start, end in inline_code_spans(line))


def link_ranges(line: str) -> list[Range]:
    """Inline markdown links and images, text and destination together."""
    return [m.span() for m in LINK_RE.finditer(line)]


def math_ranges(line: str) -> list[Range]:
    """
    Inline ``$...$`` and single-line ``$$...$$`` math.

    Dollar pairs around a bare number are prices, not math.
    """
    ranges = []
    for m in INLINE_MATH_RE.finditer(line):
        content = m.group(1)
        math_like = (
            re.search(r'[\\{}^_]', content)
            or re.search(r'[a-zA-Z][+\-*/=<> ]', content)
            or re.search(r' [+\-*/=] ', content)
            or not PRICE_RE.match(content.strip())
        )
        if math_like:
            ranges.append(m.span())
    ranges.extend(m.span() for m in BLOCK_MATH_RE.finditer(line))
    return ranges


def has_latex_commands(line: str) -> bool:
    """A line using LaTeX math commands is math prose throughout."""
    return bool(LATEX_COMMAND_RE.search(line))


def excluded_ranges(line: str) -> list[Range]:
    """
    All regions of a line that classification must skip.

    Computed once per line, before any category-specific logic.
    """
    ranges = inline_code_spans(line)
    ranges.extend(link_ranges(line))
    ranges.extend(m.span() for m in WIKI_LINK_RE.finditer(line))
    ranges.extend(m.span() for m in HTML_COMMENT_RE.finditer(line))
    ranges.extend(m.span() for m in AUTOLINK_RE.finditer(line))
    ranges.extend(math_ranges(line))
    return sorted(ranges)


def within(start: int, end: int, ranges: list[Range]) -> bool:
    """True when ``[start, end)`` lies entirely inside one of ``ranges``."""
    return any(r_start <= start and end <= r_end for r_start, r_end in ranges)


def overlaps(start: int, end: int, ranges: list[Range]) -> bool:
    """True when ``[start, end)`` shares at least one character with ``ranges``."""
    return any(start < r_end and r_start < end for r_start, r_end in ranges)
