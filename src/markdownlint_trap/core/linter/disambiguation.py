"""Overlap resolution and match boundary helpers for classifier verdicts."""
import re
from typing import Iterable

from .models import ClassificationVerdict

ABBREVIATION_RE = re.compile(r'^[a-z]\.[a-z]\.?$', re.I)
KNOWN_ABBREVIATIONS = frozenset({
    'e.g', 'e.g.', 'i.e', 'i.e.', 'etc.', 'vs.', 'cf.', 'viz.', 'et al.', 'al.',
})

_TRAILING_PUNCTUATION = '.,:;!?*_'


def trim_url(url: str) -> str:
    """
    Strip trailing sentence punctuation from a URL match.

    Closing parentheses are only stripped while they are unbalanced, so
    ``https://en.wikipedia.org/wiki/Foo_(bar)`` keeps its final ``)``.
    """
    opened = url.count('(')
    closed = url.count(')')
    trimmed = url
    while trimmed:
        last = trimmed[-1]
        if last in _TRAILING_PUNCTUATION:
            trimmed = trimmed[:-1]
        elif last == ')' and closed > opened:
            trimmed = trimmed[:-1]
            closed -= 1
        else:
            break
    return trimmed


def is_abbreviation(text: str) -> bool:
    """True for ``e.g.``, ``U.S`` and friends."""
    return bool(ABBREVIATION_RE.match(text)) or text.lower() in KNOWN_ABBREVIATIONS


def _rank(verdict: ClassificationVerdict) -> tuple:
    return (-len(verdict.span), -verdict.confidence, verdict.priority, verdict.span.start)


def resolve_overlaps(verdicts: Iterable[ClassificationVerdict]) -> list[ClassificationVerdict]:
    """
    Reduce candidate verdicts to a non-overlapping set.

    Candidates are ranked by span length (longest first), then confidence,
    then pattern-table priority, then start offset. Each candidate is kept
    unless it overlaps one already kept, so a protocol URL swallows the
    paths and filenames inside it.

    Returns:
        Accepted verdicts ordered by start offset
    """
    accepted: list[ClassificationVerdict] = []
    for verdict in sorted((v for v in verdicts if v.matched), key=_rank):
        if any(verdict.span.overlaps(kept.span) for kept in accepted):
            continue
        accepted.append(verdict)
    return sorted(accepted, key=lambda v: v.span.start)
