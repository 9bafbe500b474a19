"""Tests for the autofix safety engine."""
from markdownlint_trap.core.linter.models import FixInfo, Tier
from markdownlint_trap.core.linter.safety import (
    DEFAULT_SAFETY_CONFIG,
    SafetyConfig,
    calculate_sentence_case_confidence,
    classify_tier,
    create_safe_fix,
    detect_ambiguity,
    merge_safety_config,
    should_apply_autofix,
)
from markdownlint_trap.core.linter.rules.helpers import RuleConfig


# ---------------------------------------------------------------------------
# Config merging
# ---------------------------------------------------------------------------


def test_merge_empty_override_is_default():
    """Merging nothing yields the defaults."""
    assert merge_safety_config({}) == DEFAULT_SAFETY_CONFIG
    assert merge_safety_config() == DEFAULT_SAFETY_CONFIG


def test_merge_concatenates_lists_and_replaces_scalars():
    """List fields extend without duplicates; scalar fields replace."""
    merged = merge_safety_config(
        {"safeWords": ["npm", "kubectl"], "confidenceThreshold": 0.9},
        {"safeWords": ["kubectl", "helm"], "enabled": False},
    )

    assert merged.confidence_threshold == 0.9
    assert merged.enabled is False
    assert merged.safe_words.count("npm") == 1
    assert merged.safe_words[-2:] == ["kubectl", "helm"]


def test_merge_does_not_mutate_defaults():
    """The shared default config is never modified."""
    before = list(DEFAULT_SAFETY_CONFIG.safe_words)
    merge_safety_config({"safeWords": ["extra"]})
    assert DEFAULT_SAFETY_CONFIG.safe_words == before


def test_rule_configs_do_not_share_safety():
    """Each default RuleConfig gets its own SafetyConfig and word lists."""
    first = RuleConfig()
    second = RuleConfig()

    assert first.safety is not second.safety
    assert first.safety is not DEFAULT_SAFETY_CONFIG
    first.safety.safe_words.append("kubectl")
    assert "kubectl" not in second.safety.safe_words


def test_config_round_trips_camel_case():
    """to_dict uses the camelCase keys from_dict accepts."""
    config = SafetyConfig.from_dict({"reviewThreshold": 0.4, "neverFlag": ["Foo"]})
    data = config.to_dict()

    assert data["reviewThreshold"] == 0.4
    assert data["neverFlag"] == ["Foo"]
    assert SafetyConfig.from_dict(data) == config


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------


def test_disabled_safety_always_applies():
    """enabled: false means safe with full confidence."""
    config = merge_safety_config({"enabled": False})
    decision = should_apply_autofix("backtick", "the", "`the`", config=config)

    assert decision.safe is True
    assert decision.confidence == 1.0
    assert decision.tier == Tier.AUTO_FIX


def test_classify_tier_thresholds():
    """Confidence maps onto the three tiers."""
    assert classify_tier(0.7, 0.7, 0.3) == Tier.AUTO_FIX
    assert classify_tier(0.5, 0.7, 0.3) == Tier.NEEDS_REVIEW
    assert classify_tier(0.29, 0.7, 0.3) == Tier.SKIP


def test_safe_words_never_lower_confidence():
    """Adding a word to safeWords can only raise its confidence."""
    line = "Set foo_bar before starting"
    base = should_apply_autofix("backtick", "foo_bar", "`foo_bar`", {"line": line})
    boosted = should_apply_autofix(
        "backtick", "foo_bar", "`foo_bar`", {"line": line},
        merge_safety_config({"safeWords": ["foo_bar"]}),
    )
    assert boosted.confidence >= base.confidence


def test_unsafe_words_never_raise_confidence():
    """Adding a word to unsafeWords can only lower its confidence."""
    line = "Set foo_bar before starting"
    base = should_apply_autofix("backtick", "foo_bar", "`foo_bar`", {"line": line})
    penalized = should_apply_autofix(
        "backtick", "foo_bar", "`foo_bar`", {"line": line},
        merge_safety_config({"unsafeWords": ["foo_bar"]}),
    )
    assert penalized.confidence <= base.confidence


def test_never_flag_suppresses():
    """neverFlag terms are suppressed entirely."""
    config = merge_safety_config({"neverFlag": ["config.json"]})
    decision = should_apply_autofix("backtick", "config.json", "`config.json`", config=config)

    assert decision.suppressed is True
    assert decision.tier == Tier.SKIP


def test_always_review_forces_needs_review():
    """alwaysReview terms land in needs-review even with high confidence."""
    config = merge_safety_config({"alwaysReview": ["npm"]})
    decision = should_apply_autofix(
        "backtick", "npm install", "`npm install`",
        {"line": "Run npm install first"}, config,
    )

    assert decision.tier == Tier.NEEDS_REVIEW
    assert decision.requires_review is True
    assert decision.confidence < config.confidence_threshold


def test_ampersand_confidence():
    """Ampersand replacement is a fixed, safe substitution."""
    decision = should_apply_autofix("no-literal-ampersand", "&", "and")
    assert decision.confidence == 0.85
    assert decision.tier == Tier.AUTO_FIX


def test_detect_ambiguity():
    """Ambiguous terms are recognised regardless of case."""
    info = detect_ambiguity("Learn Go today")
    assert info is not None
    assert info.term == "go"
    assert info.proper_form == "Go"
    assert detect_ambiguity("Getting started") is None


def test_ambiguity_lowers_confidence():
    """An ambiguous term costs confidence and is recorded on the decision."""
    plain = should_apply_autofix("sentence-case", "Write Better Code", "Write better code")
    ambiguous = should_apply_autofix("sentence-case", "Write Better Go Code", "Write better Go code")

    assert ambiguous.ambiguity is not None
    assert ambiguous.heuristics["ambiguity_penalty"] < 0
    assert ambiguous.confidence < plain.confidence + 0.1


def test_sentence_case_confidence_case_only_change():
    """A case-only rewrite that keeps the first word capitalized scores high."""
    confidence, heuristics = calculate_sentence_case_confidence(
        "This Is Not Correct", "This is not correct"
    )
    assert confidence >= 0.7
    assert heuristics["case_changes_only"] == 0.2


def test_sentence_case_confidence_unchanged_text():
    """Nothing to fix means no confidence."""
    confidence, _ = calculate_sentence_case_confidence("Same", "Same")
    assert confidence == 0.0


# ---------------------------------------------------------------------------
# create_safe_fix
# ---------------------------------------------------------------------------


def test_create_safe_fix_keeps_confident_fix():
    """High-confidence fixes are returned unchanged."""
    fix = FixInfo(edit_column=30, delete_count=11, insert_text="`npm install`")
    line = "Install dependencies with npm install."
    safe_fix, decision = create_safe_fix(fix, "backtick", "npm install", "`npm install`", {"line": line})

    assert safe_fix == fix
    assert decision.tier == Tier.AUTO_FIX


def test_create_safe_fix_drops_prose():
    """Common words are never wrapped in backticks."""
    fix = FixInfo(edit_column=1, delete_count=3, insert_text="`the`")
    safe_fix, decision = create_safe_fix(fix, "backtick", "the", "`the`", {"line": "the end"})

    assert safe_fix is None
    assert decision.tier == Tier.SKIP
