"""Shared plumbing for rule adapters."""
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ..link_cache import LinkTargetCache
from ..models import FixInfo, Tier, Violation
from ..safety import SafetyConfig, create_safe_fix

logger = logging.getLogger(__name__)


@dataclass
class RuleConfig:
    """
    Everything a rule needs besides the document.

    ``options`` holds the validated camelCase options for this rule;
    ``safety`` is the merged SafetyConfig for this rule.
    """
    options: dict[str, Any] = field(default_factory=dict)
    safety: SafetyConfig = field(default_factory=SafetyConfig)
    link_cache: Optional[LinkTargetCache] = None

    def get(self, key: str, default: Any = None) -> Any:
        """Option value, falling back to ``default`` when missing or the wrong type."""
        value = self.options.get(key)
        if value is None:
            return default
        if default is not None and not isinstance(value, type(default)):
            return default
        return value

    @property
    def report_skipped(self) -> bool:
        return self.get("reportSkipped", True)


def safe_violation(
    rule: str,
    line: int,
    message: str,
    *,
    rule_type: str,
    original: str,
    fixed: str,
    fix: Optional[FixInfo],
    config: RuleConfig,
    column: int = 1,
    context: str = "",
    line_text: str = "",
) -> Optional[Violation]:
    """
    Run a candidate fix through the safety engine and build the violation.

    Returns None when the candidate must not be reported at all: a
    ``neverFlag`` match, or a skip-tier result with ``reportSkipped`` off.
    A violation with no candidate fix carries no tier.
    """
    safe_fix, decision = create_safe_fix(
        fix, rule_type, original, fixed, {"line": line_text}, config.safety
    )
    proposed = fix is not None

    if decision.suppressed:
        logger.debug(f"{rule}: suppressed '{original}' on line {line} ({decision.reason})")
        return None
    if proposed and decision.tier == Tier.SKIP and not config.report_skipped:
        logger.debug(f"{rule}: skipped '{original}' on line {line} ({decision.reason})")
        return None

    return Violation(
        rule=rule,
        line=line,
        column=column,
        message=message,
        fix=safe_fix,
        tier=decision.tier if proposed else None,
        confidence=decision.confidence if proposed else None,
        context=context,
        original=original,
        suggestion=fixed or None,
        reason=decision.reason,
        ambiguity=decision.ambiguity.to_dict() if decision.ambiguity else None,
    )
