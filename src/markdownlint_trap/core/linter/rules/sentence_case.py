"""sentence-case-heading: headings and bold list labels in sentence case."""
import logging
import re
from pathlib import Path
from typing import Generator, Optional

from ..document import Document
from ..models import Violation
from ..terms import AMBIGUOUS_TERMS, CASING_TERMS
from .casing import (
    CaseResult,
    build_bold_fix,
    build_heading_fix,
    to_sentence_case,
    truncate_at_emoji,
    validate_bold_text,
    validate_heading,
)
from .helpers import RuleConfig, safe_violation

logger = logging.getLogger(__name__)

RULE_NAME = "sentence-case-heading"

_BOLD_RE = re.compile(r'\*\*([^*]+?)\*\*')
_CODE_SPAN_RE = re.compile(r'`[^`]*`')
_COMMENT_RE = re.compile(r'<!--.*-->')


def build_terms(config: RuleConfig) -> tuple[dict[str, str], dict[str, dict]]:
    """
    Merge the built-in casing terms with user terms.

    ``technicalTerms`` and ``properNouns`` are deprecated aliases of
    ``specialTerms``. A term the user configures explicitly is no longer
    treated as ambiguous.
    """
    user_terms: list[str] = list(config.get("specialTerms", []))
    for deprecated in ("technicalTerms", "properNouns"):
        values = config.get(deprecated, [])
        if values:
            logger.warning(f'"{deprecated}" is deprecated. Please use "specialTerms" instead.')
            user_terms.extend(values)

    terms = dict(CASING_TERMS)
    configured = set()
    for term in user_terms:
        if isinstance(term, str) and term:
            terms[term.lower()] = term
            configured.add(term.lower())

    ambiguous = {k: v for k, v in AMBIGUOUS_TERMS.items() if k not in configured}
    return terms, ambiguous


def heading_text(line: str) -> str:
    """Heading text of an ATX line, without markers or trailing comments."""
    return _COMMENT_RE.sub('', re.sub(r'^#+\s*', '', line)).strip()


def _is_readme_title(doc: Document, line_number: int) -> bool:
    return (
        doc.is_file
        and Path(doc.path).name.lower() == "readme.md"
        and line_number + doc.front_matter_lines == 1
    )


def _heading_violation(number: int, line: str, result: CaseResult,
                       text: str, terms: dict, ambiguous: dict,
                       config: RuleConfig) -> Optional[Violation]:
    fix_text = re.sub(r'^#+\s*', '', line.split('<!--')[0].rstrip())
    if text != heading_text(line):
        # emoji truncation: only the validated prefix is rewritten
        fix_text = text

    built = build_heading_fix(line, fix_text, terms, ambiguous)
    fix, fixed = built if built else (None, "")

    return safe_violation(
        RULE_NAME,
        number,
        result.message,
        rule_type="sentence-case",
        original=fix_text,
        fixed=fixed,
        fix=fix,
        config=config,
        column=1,
        context=line,
        line_text=line,
    )


def _bold_violations(number: int, line: str, terms: dict, ambiguous: dict,
                     config: RuleConfig) -> Generator[Violation, None, None]:
    code = [m.span() for m in _CODE_SPAN_RE.finditer(line)]

    for match in _BOLD_RE.finditer(line):
        if any(start <= match.start() < end for start, end in code):
            continue

        label = match.group(1).split(':')[0]
        result = validate_bold_text(label, terms, ambiguous)
        if result.is_valid:
            continue

        fixed = to_sentence_case(label, terms, ambiguous) or ""
        fix = build_bold_fix(line, label, fixed) if fixed else None
        violation = safe_violation(
            RULE_NAME,
            number,
            result.message,
            rule_type="sentence-case",
            original=label,
            fixed=fixed,
            fix=fix,
            config=config,
            column=match.start() + 1,
            context=line,
            line_text=line,
        )
        if violation is not None:
            yield violation
        # one violation per line keeps fixes from overlapping
        return


def sentence_case_heading(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    Headings and bold list labels should use sentence case.

    Only ATX headings are checked. Fixes rewrite the heading text and are
    gated by the safety engine, so ambiguous words land in needs-review.
    """
    terms, ambiguous = build_terms(config)
    ignore_after_emoji = config.get("ignoreAfterEmoji", False)

    for heading in doc.headings:
        if heading.setext or _is_readme_title(doc, heading.line):
            continue

        line = doc.line(heading.line)
        if not line.startswith("#"):
            continue
        text = heading_text(line)
        if ignore_after_emoji:
            text = truncate_at_emoji(text)
        if not text:
            continue

        result = validate_heading(text, terms, ambiguous)
        if result.is_valid:
            continue

        logger.debug(f"Heading on line {heading.line} fails sentence case: {result.message}")
        violation = _heading_violation(heading.line, line, result, text, terms, ambiguous, config)
        if violation is not None:
            yield violation

    for number, line in enumerate(doc.lines, 1):
        if number in doc.code_block_lines:
            continue
        if not line.strip().startswith('-') or '**' not in line:
            continue
        yield from _bold_violations(number, line, terms, ambiguous, config)
