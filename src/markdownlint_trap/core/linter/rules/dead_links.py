"""no-dead-internal-links: relative links and anchors that resolve to nothing."""
import logging
import re
from pathlib import Path
from typing import Generator, Iterable, Optional
from urllib.parse import unquote

from ..context import is_in_inline_code
from ..document import Document, Heading
from ..link_cache import LinkTargetCache
from ..models import Violation
from .helpers import RuleConfig

logger = logging.getLogger(__name__)

RULE_NAME = "no-dead-internal-links"

LINK_RE = re.compile(r'\[([^\]]+)\]\(([^)]+)\)')
_SCHEME_RE = re.compile(r'^[a-z][a-z0-9+.-]*:', re.I)
_TITLED_TARGET_RE = re.compile(r'''^(\S+)\s+(?:"[^"]*"|'[^']*'|\([^)]*\))$''')

DEFAULT_PLACEHOLDER_PATTERNS = (
    r'^(?:URL|link|TODO|PLACEHOLDER|XXX)$',
    r'^\{\{.*\}\}$',
    r'^\{.*\}$',
    r'^<.*>$',
    r'^\$\{.*\}$',
)


# =============================================================================
# Anchors
# =============================================================================

def heading_slug(text: str) -> str:
    """GitHub-style anchor for a heading.

    Examples:
        "Getting Started" -> "getting-started"
        "Café `v2` notes" -> "café-v2-notes"
    """
    text = re.sub(r'!?\[([^\]]*)\]\([^)]*\)', r'\1', text)
    text = re.sub(r'<[^>]+>', '', text)
    text = re.sub(r'[*`\[\]]', '', text)
    text = text.strip().lower()

    # Unicode word characters survive, punctuation is dropped
    text = re.sub(r'[^\w\- ]', '', text)
    return text.replace(' ', '-')


def heading_anchors(headings: Iterable[Heading]) -> frozenset[str]:
    """Anchors for a document's headings, with -1, -2 suffixes for duplicates."""
    anchors: set[str] = set()
    seen: dict[str, int] = {}
    for heading in headings:
        if heading.setext and heading.underline_length < 2:
            continue
        slug = heading_slug(heading.text)
        if slug in seen:
            seen[slug] += 1
            anchors.add(f"{slug}-{seen[slug]}")
        else:
            seen[slug] = 0
            anchors.add(slug)
    return frozenset(anchors)


def load_anchors(path: Path) -> frozenset[str]:
    """Parse a markdown file and return its heading anchors."""
    doc = Document.parse(path.read_text(encoding='utf-8'), str(path))
    return heading_anchors(doc.headings)


# =============================================================================
# Targets
# =============================================================================

def _placeholder_matchers(config: RuleConfig) -> list[re.Pattern]:
    matchers = []
    for pattern in list(DEFAULT_PLACEHOLDER_PATTERNS) + list(config.get("placeholderPatterns", [])):
        try:
            matchers.append(re.compile(pattern, re.I))
        except re.error as e:
            logger.warning(f"Invalid placeholder pattern {pattern!r} ({e}); matching it literally")
            matchers.append(re.compile(f'^{re.escape(pattern)}$', re.I))
    return matchers


def _clean_target(raw: str) -> str:
    target = raw.strip()
    if target.startswith('<') and '>' in target:
        return target[1:target.index('>')]
    # drop an optional link title: [x](path "title")
    titled = _TITLED_TARGET_RE.match(target)
    return titled.group(1) if titled else target


def _resolve(base: Path, file_part: str, extensions: list[str],
             cache: LinkTargetCache) -> Optional[Path]:
    """Existing path for ``file_part``, trying ``extensions`` when it has none."""
    resolved = (base / unquote(file_part)).resolve()
    if cache.exists(resolved):
        return resolved
    if file_part.endswith('/') or Path(file_part).suffix:
        return None
    for ext in extensions:
        candidate = resolved.with_name(resolved.name + ext)
        if cache.exists(candidate):
            return candidate
    return None


def _violation(number: int, column: int, message: str, context: str) -> Violation:
    return Violation(
        rule=RULE_NAME,
        line=number,
        column=column,
        message=message,
        context=context,
        original=context,
    )


def no_dead_internal_links(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    Internal links should point at files and headings that exist.

    Scheme links are ignored. In-memory sources only check same-file anchors.
    """
    check_anchors = config.get("checkAnchors", True)
    extensions = config.get("allowedExtensions", [".md", ".markdown"])
    ignored_paths = config.get("ignoredPaths", [])
    placeholders = _placeholder_matchers(config) if config.get("allowPlaceholders", True) else []
    cache = config.link_cache or LinkTargetCache()

    own_anchors = heading_anchors(doc.headings)
    base = Path(doc.path).resolve().parent if doc.is_file else None

    for number, line in enumerate(doc.lines, 1):
        if number in doc.code_block_lines or '](' not in line:
            continue

        for match in LINK_RE.finditer(line):
            if is_in_inline_code(line, match.start()):
                continue
            target = _clean_target(match.group(2))
            if not target or _SCHEME_RE.match(target):
                continue
            if any(p.match(target) for p in placeholders):
                logger.debug(f"Placeholder link target on line {number}: {target}")
                continue

            column = match.start() + 1
            file_part, _, anchor = target.partition('#')

            if not file_part:
                if check_anchors and anchor and anchor not in own_anchors:
                    yield _violation(number, column,
                                     f'Heading anchor "#{anchor}" not found in current file',
                                     match.group(0))
                continue

            if base is None or any(ignored in file_part for ignored in ignored_paths):
                continue

            resolved = _resolve(base, file_part, extensions, cache)
            if resolved is None:
                yield _violation(number, column, f'Link target "{file_part}" does not exist', match.group(0))
                continue

            if not (anchor and check_anchors) or resolved.is_dir():
                continue
            anchors = cache.anchors(resolved, load_anchors)
            if anchors is not None and anchor not in anchors:
                yield _violation(number, column,
                                 f'Heading anchor "#{anchor}" not found in "{file_part}"',
                                 match.group(0))
