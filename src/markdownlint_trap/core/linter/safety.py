"""Autofix safety engine.

Every candidate fix gets a confidence score, and the score picks one of
three tiers:

    auto-fix      confidence >= confidence_threshold (default 0.7)
    needs-review  confidence >= review_threshold (default 0.3)
    skip          anything lower

Only auto-fix candidates keep their FixInfo. Needs-review candidates are
still reported and end up in the needs-review report.
"""
import logging
import re
from dataclasses import dataclass, field, fields, replace
from typing import Any, Optional

from .models import FixInfo, Tier
from .terms import AMBIGUOUS_TERMS

logger = logging.getLogger(__name__)

THREE_TIER_THRESHOLDS = {
    "auto_fix": 0.7,
    "needs_review": 0.3,
}

SAFE_WORD_BOOST = 0.2
UNSAFE_WORD_PENALTY = 0.3
AMBIGUITY_PENALTY = 0.25


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class SafetyConfig:
    """Confidence thresholds and word lists for one rule."""
    enabled: bool = True
    confidence_threshold: float = THREE_TIER_THRESHOLDS["auto_fix"]
    review_threshold: float = THREE_TIER_THRESHOLDS["needs_review"]
    safe_words: list[str] = field(default_factory=lambda: [
        'npm', 'api', 'url', 'html', 'css', 'json', 'xml', 'http', 'https',
    ])
    unsafe_words: list[str] = field(default_factory=lambda: [
        'i', 'a', 'an', 'the', 'and', 'or', 'but', 'in', 'on', 'at', 'to',
        'for', 'of', 'with', 'by',
    ])
    require_manual_review: bool = False
    always_review: list[str] = field(default_factory=list)
    never_flag: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "SafetyConfig":
        """Build a config from camelCase keys, ignoring keys it does not know."""
        return merge_safety_config(data)

    def to_dict(self) -> dict:
        return {
            CONFIG_KEYS[f.name]: (list(value) if isinstance(value, list) else value)
            for f in fields(self)
            for value in (getattr(self, f.name),)
        }


# camelCase config key for each SafetyConfig field
CONFIG_KEYS = {
    "enabled": "enabled",
    "confidence_threshold": "confidenceThreshold",
    "review_threshold": "reviewThreshold",
    "safe_words": "safeWords",
    "unsafe_words": "unsafeWords",
    "require_manual_review": "requireManualReview",
    "always_review": "alwaysReview",
    "never_flag": "neverFlag",
}
_FIELD_FOR_KEY = {key: name for name, key in CONFIG_KEYS.items()}
_LIST_FIELDS = {"safe_words", "unsafe_words", "always_review", "never_flag"}

DEFAULT_SAFETY_CONFIG = SafetyConfig()


def merge_safety_config(*overrides: Optional[dict],
                        base: Optional[SafetyConfig] = None) -> SafetyConfig:
    """
    Merge user overrides onto the defaults.

    List fields (safeWords, unsafeWords, alwaysReview, neverFlag) are
    concatenated onto the base lists without duplicates. Scalar fields
    (enabled, thresholds, requireManualReview) replace the base value.

    Args:
        *overrides: camelCase config dicts, applied left to right
        base: Starting config (default: DEFAULT_SAFETY_CONFIG)

    Returns:
        A new SafetyConfig; the inputs are not modified
    """
    merged = replace(
        base or DEFAULT_SAFETY_CONFIG,
        **{name: list(getattr(base or DEFAULT_SAFETY_CONFIG, name)) for name in _LIST_FIELDS},
    )

    for override in overrides:
        if not override:
            continue
        for key, value in override.items():
            name = _FIELD_FOR_KEY.get(key)
            if name is None or value is None:
                continue
            if name in _LIST_FIELDS:
                current = getattr(merged, name)
                current.extend(v for v in value if v not in current)
            else:
                setattr(merged, name, value)

    return merged


# ============================================================================
# Keyword tables
# ============================================================================

COMMAND_KEYWORDS = frozenset({
    'npm', 'yarn', 'git', 'docker', 'kubectl', 'curl', 'wget', 'ssh', 'scp', 'rsync',
    'grep', 'sed', 'awk', 'find', 'ls', 'cd', 'mkdir', 'rm', 'cp', 'mv', 'chmod',
    'chown', 'sudo', 'su', 'ps', 'top', 'htop', 'kill', 'killall', 'systemctl',
    'service', 'crontab', 'tar', 'gzip', 'zip', 'unzip', 'cat', 'head', 'tail',
    'less', 'more', 'vim', 'nano', 'emacs', 'code', 'open', 'explorer', 'ping',
    'traceroute', 'nslookup', 'dig', 'netstat', 'ss', 'iptables', 'ufw', 'tcpdump',
    'nmap', 'pip', 'pip3', 'pnpm', 'brew', 'cargo', 'python', 'node',
})

FILE_EXTENSION_KEYWORDS = frozenset({
    'js', 'ts', 'jsx', 'tsx', 'py', 'java', 'c', 'cpp', 'cs', 'go', 'rs', 'rb',
    'php', 'pl', 'sh', 'bash', 'zsh', 'fish', 'ps1', 'bat', 'cmd', 'sql', 'html',
    'css', 'scss', 'sass', 'less', 'xml', 'json', 'yaml', 'yml', 'toml', 'ini',
    'cfg', 'conf', 'config', 'env', 'gitignore', 'dockerignore', 'editorconfig',
    'prettierrc', 'eslintrc', 'babelrc', 'lock', 'log', 'md', 'txt', 'mod',
})

COMMON_WORDS = frozenset({
    'i', 'a', 'an', 'the', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of', 'with', 'by',
    'is', 'are', 'was', 'were', 'be', 'been', 'being', 'have', 'has', 'had', 'do', 'does', 'did',
    'will', 'would', 'could', 'should', 'may', 'might', 'can', 'must', 'shall',
    'this', 'that', 'these', 'those', 'here', 'there', 'where', 'when', 'why', 'how',
    'all', 'any', 'some', 'many', 'much', 'few', 'little', 'most', 'more', 'less',
    'one', 'two', 'three', 'first', 'last', 'next', 'previous', 'before', 'after',
})

NATURAL_LANGUAGE_PHRASES = frozenset({
    'read/write', 'pass/fail', 'on/off', 'in/out', 'up/down', 'left/right', 'true/false',
    'yes/no', 'black/white', 'day/night', 'hot/cold', 'big/small', 'fast/slow', 'high/low',
    'old/new', 'start/stop', 'begin/end', 'open/close', 'save/load', 'push/pull',
    'give/take', 'buy/sell', 'win/lose', 'good/bad', 'right/wrong', 'early/late', 'easy/hard',
})

PROBLEMATIC_PATTERNS = (
    re.compile(r'^[a-z]{1,3}$'),
    re.compile(r'^(go|do|be|if|it|my|we|he|she|you|us|me|him|her|our|his|its|who|what|why|how|when|where)$', re.I),
    re.compile(r'^(one|two|three|four|five|six|seven|eight|nine|ten)$', re.I),
    re.compile(r'^(red|blue|green|yellow|orange|purple|pink|brown|black|white|gray|grey)$', re.I),
    re.compile(r'^(big|small|large|tiny|huge|mini|max|min)$', re.I),
    re.compile(r'^(new|old|fresh|stale|young|ancient|modern|classic)$', re.I),
    re.compile(r'^(good|bad|nice|cool|hot|cold|warm|best|worst|better|worse)$', re.I),
    re.compile(r'^(quick|slow|fast|rapid|swift|delayed|instant)$', re.I),
    re.compile(r'^(easy|hard|simple|complex|basic|advanced|tough|difficult)$', re.I),
)

NATURAL_LANGUAGE_INDICATORS = (
    'is a', 'are a', 'was a', 'were a', 'this is', 'that is', 'it is', 'he is', 'she is',
    'would be', 'could be', 'should be', 'might be', 'must be',
    'i think', 'i believe', 'in my opinion', 'personally', 'generally',
    'for example', 'such as', 'like this', 'as follows', 'namely',
    'however', 'therefore', 'moreover', 'furthermore', 'nevertheless',
    'note that', 'remember that', 'keep in mind', 'be aware', 'make sure',
)

TECHNICAL_INDICATORS = (
    'install', 'configure', 'setup', 'deploy', 'build', 'compile', 'run', 'execute',
    'command', 'script', 'function', 'method', 'class', 'variable', 'parameter',
    'api', 'endpoint', 'request', 'response', 'server', 'client', 'database',
    'repository', 'branch', 'commit', 'merge', 'push', 'pull', 'clone', 'fork',
)

CODE_DIRECTORY_PREFIXES = frozenset({
    'src', 'lib', 'bin', 'dist', 'build', 'out', 'output', 'target',
    'tests', 'test', 'spec', 'specs', '__tests__', '__mocks__',
    'docs', 'doc', 'documentation', 'config', 'configs', 'conf', 'settings',
    'scripts', 'tools', 'utils', 'helpers', 'common',
    'components', 'modules', 'packages', 'plugins',
    'assets', 'static', 'public', 'resources', 'images', 'icons',
    'styles', 'css', 'scss', 'less', 'node_modules', 'vendor', 'third_party', 'external',
    'api', 'routes', 'controllers', 'models', 'views', 'services',
    'app', 'apps', 'pages', 'layouts', 'templates',
    '.github', '.gitlab', '.circleci', '.vscode',
})

_TECHNICAL_TERMS = (
    'API', 'URL', 'HTML', 'CSS', 'JSON', 'XML', 'HTTP', 'HTTPS', 'SDK', 'CLI', 'GUI', 'UI',
    'UX', 'SQL', 'NoSQL', 'REST', 'GraphQL', 'JWT', 'OAuth', 'CSRF', 'XSS', 'CORS', 'DNS',
    'CDN', 'VPN', 'SSL', 'TLS', 'SSH', 'FTP', 'SMTP', 'IMAP', 'TCP', 'UDP', 'IP', 'IPv4',
    'IPv6', 'LAN', 'WAN', 'WiFi', 'Bluetooth', 'USB', 'HDMI', 'GPU', 'CPU', 'RAM', 'SSD',
    'OS', 'iOS', 'Android', 'Windows', 'Linux', 'macOS', 'Unix', 'AWS', 'Azure', 'GCP',
    'Docker', 'Kubernetes', 'Git', 'GitHub', 'GitLab', 'npm', 'yarn', 'pip', 'conda',
    'Maven', 'Gradle', 'Webpack', 'Rollup', 'Vite', 'React', 'Vue', 'Angular', 'Next',
    'Nuxt', 'Express', 'Django', 'Flask', 'Rails', 'Laravel', 'Spring', 'MongoDB',
    'PostgreSQL', 'MySQL', 'Redis', 'Elasticsearch', 'Kafka', 'RabbitMQ', 'Jenkins',
    'CircleCI', 'GitHub Actions', 'Travis', 'Terraform', 'Ansible', 'Puppet', 'Chef',
    'Vagrant', 'VMware', 'VirtualBox', r'Node\.js', 'Python', 'Java', 'JavaScript',
    'TypeScript', r'C\+\+', 'C#', 'Go', 'Rust', 'Swift', 'Kotlin', 'Scala', 'Ruby', 'PHP',
    'Perl', 'MATLAB', 'Excel', 'Word', 'PowerPoint', 'Outlook', 'Teams', 'Slack', 'Zoom',
    'Firefox', 'Chrome', 'Safari', 'Edge', 'RBAC', 'ABAC', 'Single sign-on',
)
TECHNICAL_TERM_RE = re.compile(r'\b(?:' + '|'.join(_TECHNICAL_TERMS) + r')\b', re.I)

_NOT_CODE_PATTERNS = (
    re.compile(r'^(a|an|the|and|or|but|if|then|else|when|where|why|how|who|what|which|that|this|these|those|here|there|now|today|yesterday|tomorrow)$', re.I),
    re.compile(r'^(i|you|he|she|it|we|they|me|him|her|us|them|my|your|his|its|our|their)$', re.I),
    re.compile(r'^(is|are|was|were|be|been|being|have|has|had|do|does|did|will|would|could|should|may|might|can|must|shall)$', re.I),
    re.compile(r'^(good|bad|big|small|new|old|first|last|next|previous|best|worst|better|worse|more|less|most|least)$', re.I),
    re.compile(r'^(one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve|twenty|thirty|hundred|thousand)$', re.I),
)

_STRONG_CODE_PATTERNS = (
    re.compile(r'\.(?:' + '|'.join(sorted(map(re.escape, FILE_EXTENSION_KEYWORDS))) + r')$', re.I),
    re.compile(r'^[A-Z_][A-Z0-9_]*$'),
    re.compile(r'^(?:' + '|'.join(sorted(COMMAND_KEYWORDS)) + r')\s'),
    re.compile(r'\(.*\)$'),
    re.compile(r'^import\s+'),
    re.compile(r'^from\s+.*import'),
    re.compile(r'^\$[A-Z_]+$'),
    re.compile(r'^--[a-z-]+$'),
    re.compile(r'/.*/'),
    re.compile(r'^\.[a-zA-Z]'),
)

_MODERATE_CODE_PATTERNS = (
    re.compile(r'[A-Z]{2,}'),
    re.compile(r'_'),
    re.compile(r'\d'),
    re.compile(r'^[a-z]+[A-Z]'),
    re.compile(r'^[A-Z][a-z]+[A-Z]'),
    re.compile(r'^[a-z-]{4,}$'),
)

_SNAKE_RE = re.compile(r'^_?[a-z][a-z0-9]*(?:_[a-z0-9]+)+$')
_CAMEL_RE = re.compile(r'^[a-z][a-z0-9]*[A-Z][a-zA-Z0-9]*$')
_PASCAL_RE = re.compile(r'^[A-Z](?=[a-zA-Z0-9]*[A-Z])[a-zA-Z0-9]*[a-z][a-zA-Z0-9]*$')
_STANDALONE_FILENAME_RE = re.compile(
    r'^[a-zA-Z0-9._-]+\.(json|js|ts|py|md|txt|yml|yaml|xml|html|css|scss|sh|sql|env|cfg|conf|ini|toml|lock|log)$',
    re.I,
)


# ============================================================================
# Decisions
# ============================================================================

@dataclass(frozen=True)
class AmbiguityInfo:
    """Why a term cannot be fixed mechanically."""
    term: str
    type: str
    reason: str
    proper_form: str

    def to_dict(self) -> dict:
        return {
            "term": self.term,
            "type": self.type,
            "reason": self.reason,
            "properForm": self.proper_form,
        }


@dataclass
class SafetyDecision:
    """Result of a safety check for one candidate fix."""
    safe: bool
    confidence: float
    tier: Tier
    reason: str = ""
    heuristics: dict[str, Any] = field(default_factory=dict)
    requires_review: bool = False
    ambiguity: Optional[AmbiguityInfo] = None
    suggested_fix: Optional[str] = None
    suppressed: bool = False     # matched neverFlag; never reported


def _clamp(value: float) -> float:
    return round(max(0.0, min(1.0, value)), 4)


def calculate_sentence_case_confidence(original: str, fixed: str) -> tuple[float, dict]:
    """
    Score a sentence-case rewrite.

    Simple case-only changes that capitalize the first word score high;
    changes that alter word count or touch most of the words score low.
    """
    heuristics = {
        "base_confidence": 0.5,
        "first_word_capitalization": 0.0,
        "case_changes_only": 0.0,
        "structural_changes": 0.0,
        "many_words_changed": 0.0,
        "technical_terms": 0.0,
    }
    if not original or not fixed or original == fixed:
        return 0.0, heuristics

    confidence = 0.5
    original_words = original.split()
    fixed_words = fixed.split()

    if original_words:
        first = original_words[0]
        expected = first[:1].upper() + first[1:].lower()
        if fixed.startswith(expected):
            heuristics["first_word_capitalization"] = 0.3
            confidence += 0.3

    if original.lower() == fixed.lower():
        heuristics["case_changes_only"] = 0.2
        confidence += 0.2

    if len(original_words) != len(fixed_words):
        heuristics["structural_changes"] = -0.2
        confidence -= 0.2

    changed = sum(
        1 for a, b in zip(original_words, fixed_words) if a.lower() != b.lower()
    )
    if changed > len(original_words) * 0.5:
        heuristics["many_words_changed"] = -0.3
        confidence -= 0.3

    technical = len(TECHNICAL_TERM_RE.findall(original))
    if technical:
        boost = 0.1 * min(technical, 3)
        heuristics["technical_terms"] = boost
        confidence += boost

    return _clamp(confidence), heuristics


def _file_path_confidence(text: str) -> float:
    if '/' not in text:
        return 0.0
    if re.search(r'\.[a-zA-Z0-9]+$', text):
        return 0.4
    segments = text.split('/')
    if segments[0].lower() in CODE_DIRECTORY_PREFIXES:
        return 0.3
    if len(segments) > 2:
        return 0.3
    return 0.15


def _file_extension(text: str) -> str:
    match = re.search(r'\.([^.]+)$', text)
    return match.group(1).lower() if match else ''


def _command_confidence(text: str) -> float:
    confidence = 0.0
    if _STANDALONE_FILENAME_RE.match(text):
        confidence += 0.3
    if re.match(r'^import\s+\w+', text):
        confidence += 0.2
    first = text.split()[0].lower() if text.split() else ''
    if first in COMMAND_KEYWORDS:
        confidence += 0.3
    if re.match(r'^[A-Z_][A-Z0-9_]*$', text) and len(text) > 2:
        confidence += 0.2
    if _file_extension(text) in FILE_EXTENSION_KEYWORDS:
        confidence += 0.2
    if _SNAKE_RE.match(text):
        confidence += 0.25
    if _CAMEL_RE.match(text):
        confidence += 0.25
    if _PASCAL_RE.match(text):
        confidence += 0.2
    return min(confidence, 0.4)


def _natural_language_penalty(text: str) -> float:
    lower = text.lower()
    if lower in COMMON_WORDS:
        return 0.7
    if lower in NATURAL_LANGUAGE_PHRASES:
        return 0.9
    if any(p.search(text) for p in PROBLEMATIC_PATTERNS):
        return 0.5

    penalty = 0.0
    if len(text) <= 2:
        penalty += 0.3
    if text.isascii() and text.isalpha() and len(text) < 5:
        penalty += 0.2
    return penalty


def _context_adjustment(text: str, line: str) -> float:
    if not line:
        return 0.0
    lower = line.lower()
    adjustment = 0.0
    if any(indicator in lower for indicator in NATURAL_LANGUAGE_INDICATORS):
        adjustment -= 0.3
    occurrences = re.findall(r'\b' + re.escape(text) + r'\b', line, re.I)
    if len(occurrences) > 1:
        adjustment -= 0.2
    if any(indicator in lower for indicator in TECHNICAL_INDICATORS):
        adjustment += 0.2
    return adjustment


def calculate_backtick_confidence(original: str, line: str = "") -> tuple[float, dict]:
    """Score wrapping ``original`` in backticks, given the surrounding line."""
    heuristics = {
        "base_confidence": 0.5,
        "file_path_pattern": 0.0,
        "command_pattern": 0.0,
        "natural_language_penalty": 0.0,
        "context_adjustment": 0.0,
    }
    if not original:
        return 0.0, heuristics

    heuristics["file_path_pattern"] = _file_path_confidence(original)
    heuristics["command_pattern"] = _command_confidence(original)
    heuristics["natural_language_penalty"] = -_natural_language_penalty(original)
    heuristics["context_adjustment"] = _context_adjustment(original, line)

    confidence = 0.5 + sum(
        heuristics[k] for k in (
            "file_path_pattern", "command_pattern",
            "natural_language_penalty", "context_adjustment",
        )
    )
    return _clamp(confidence), heuristics


def analyze_code_vs_natural_language(text: str, line: str = "") -> float:
    """
    Second opinion for backtick fixes: how code-like is ``text``?

    Returns a score where < 0.3 means "almost certainly prose".
    """
    if any(p.match(text) for p in _NOT_CODE_PATTERNS):
        return 0.1

    confidence = 0.5
    if any(p.search(text) for p in _STRONG_CODE_PATTERNS):
        confidence += 0.4
    confidence += 0.1 * sum(1 for p in _MODERATE_CODE_PATTERNS if p.search(text))

    if line:
        lower = line.lower()
        if re.search(r'command|execute|run|install|configure|setup|deploy|build|compile', lower):
            confidence += 0.2
        if re.search(r'example|like|such as|for instance|namely', lower):
            confidence -= 0.3

    return round(confidence, 4)


def detect_ambiguity(text: str) -> Optional[AmbiguityInfo]:
    """Return info for the first ambiguous term in ``text``, if any."""
    for word in text.lower().split():
        clean = re.sub(r'[^a-z]', '', word)
        info = AMBIGUOUS_TERMS.get(clean)
        if info:
            return AmbiguityInfo(
                term=clean,
                type=info['type'],
                reason=info['reason'],
                proper_form=info['proper_form'],
            )
    return None


def classify_tier(confidence: float, auto_fix_threshold: float, review_threshold: float) -> Tier:
    """Map a confidence score onto a tier."""
    if confidence >= auto_fix_threshold:
        return Tier.AUTO_FIX
    if confidence >= review_threshold:
        return Tier.NEEDS_REVIEW
    return Tier.SKIP


def _word_list_adjustment(original: str, config: SafetyConfig) -> float:
    needle = original.strip().lower()
    adjustment = 0.0
    if needle in {w.lower() for w in config.safe_words}:
        adjustment += SAFE_WORD_BOOST
    if needle in {w.lower() for w in config.unsafe_words}:
        adjustment -= UNSAFE_WORD_PENALTY
    return adjustment


def should_apply_autofix(
    rule_type: str,
    original: str,
    fixed: str = "",
    context: Optional[dict] = None,
    config: Optional[SafetyConfig] = None,
) -> SafetyDecision:
    """
    Decide whether a candidate fix is safe to apply.

    Args:
        rule_type: 'sentence-case', 'backtick', 'no-bare-url' or 'no-literal-ampersand'
        original: Text the fix would replace
        fixed: Replacement text
        context: Extra context; ``line`` holds the full source line
        config: Safety config (default: DEFAULT_SAFETY_CONFIG)

    Returns:
        SafetyDecision with confidence, tier and the heuristic breakdown
    """
    config = config or DEFAULT_SAFETY_CONFIG
    context = context or {}
    original = original if isinstance(original, str) else str(original or "")

    if not config.enabled:
        return SafetyDecision(
            safe=True,
            confidence=1.0,
            tier=Tier.AUTO_FIX,
            reason="Safety checks disabled",
        )

    lower = original.lower()
    for term in config.never_flag:
        if term and term.lower() in lower:
            return SafetyDecision(
                safe=False,
                confidence=0.0,
                tier=Tier.SKIP,
                reason=f'Term "{term}" is in neverFlag list',
                suppressed=True,
            )

    review_term = next(
        (term for term in config.always_review if term and term.lower() in lower),
        None,
    )

    line = context.get("line", "")
    if rule_type == "sentence-case":
        confidence, heuristics = calculate_sentence_case_confidence(original, fixed)
        reason = f"Sentence case confidence: {confidence:.2f}"
    elif rule_type == "backtick":
        confidence, heuristics = calculate_backtick_confidence(original, line)
        reason = f"Backtick confidence: {confidence:.2f}"
    elif rule_type == "no-bare-url":
        confidence, heuristics = 0.9, {"base_confidence": 0.9, "url_pattern": True}
        reason = "URL autofix confidence: 0.90 (bare URL wrapping is safe)"
    elif rule_type == "no-literal-ampersand":
        confidence, heuristics = 0.85, {"base_confidence": 0.85, "ampersand_replacement": True}
        reason = "Ampersand replacement confidence: 0.85 (simple substitution)"
    else:
        confidence, heuristics = 0.5, {}
        reason = "Unknown rule type"

    adjustment = _word_list_adjustment(original, config)
    if adjustment:
        heuristics["word_list_adjustment"] = adjustment
        confidence = _clamp(confidence + adjustment)

    ambiguity = detect_ambiguity(original)
    if ambiguity:
        confidence = _clamp(confidence - AMBIGUITY_PENALTY)
        heuristics["ambiguity_penalty"] = -AMBIGUITY_PENALTY
        heuristics["ambiguous_term"] = ambiguity.term
        reason += f" (ambiguous term: {ambiguity.term})"

    if review_term is not None:
        return SafetyDecision(
            safe=False,
            confidence=_clamp(min(confidence, config.confidence_threshold - 0.01)),
            tier=Tier.NEEDS_REVIEW,
            reason=f'Term "{review_term}" is in alwaysReview list',
            heuristics=heuristics,
            requires_review=True,
            ambiguity=ambiguity,
            suggested_fix=fixed or None,
        )

    tier = classify_tier(confidence, config.confidence_threshold, config.review_threshold)
    safe = tier == Tier.AUTO_FIX
    return SafetyDecision(
        safe=safe,
        confidence=confidence,
        tier=tier,
        reason=reason,
        heuristics=heuristics,
        requires_review=tier == Tier.NEEDS_REVIEW or (config.require_manual_review and not safe),
        ambiguity=ambiguity,
        suggested_fix=(fixed or None) if tier == Tier.NEEDS_REVIEW else None,
    )


def create_safe_fix(
    fix: Optional[FixInfo],
    rule_type: str,
    original: str,
    fixed: str,
    context: Optional[dict] = None,
    config: Optional[SafetyConfig] = None,
) -> tuple[Optional[FixInfo], SafetyDecision]:
    """
    Run the safety check for a proposed fix.

    Returns the fix only when it lands in the auto-fix tier, together with
    the decision so callers can report the tier and confidence.
    """
    context = context or {}
    config = config or DEFAULT_SAFETY_CONFIG
    decision = should_apply_autofix(rule_type, original, fixed, context, config)

    if rule_type == "backtick" and config.enabled and decision.tier != Tier.SKIP:
        code_score = analyze_code_vs_natural_language(original, context.get("line", ""))
        decision.heuristics["code_analysis"] = code_score
        if code_score < 0.3:
            logger.debug(f"Skipping backtick fix for '{original}': reads as prose ({code_score:.2f})")
            decision = replace(
                decision,
                safe=False,
                tier=Tier.SKIP,
                reason="Advanced analysis indicates not code (confidence < 0.3)",
                requires_review=config.require_manual_review,
                suggested_fix=None,
            )

    if fix is None or decision.tier != Tier.AUTO_FIX:
        return None, decision
    return fix, decision
