"""Tests for declarative config validation."""
from markdownlint_trap.core.linter.validation import (
    ValidationError,
    format_validation_errors,
    number_in_range,
    sanitize_config,
    validate_boolean,
    validate_config,
    validate_non_negative_number,
    validate_rule_config,
    validate_safety_config,
    validate_string_array,
)


def test_string_array_accepts_missing_and_valid():
    """A missing value and a list of strings are both fine."""
    assert validate_string_array(None, "terms") == []
    assert validate_string_array(["a", "b"], "terms") == []


def test_string_array_rejects_bad_values():
    """Non-lists, non-strings and blank strings are reported."""
    assert validate_string_array("npm", "terms")[0].expected == "array of strings"

    errors = validate_string_array(["ok", 3, "  "], "terms")
    assert len(errors) == 2
    assert "terms[1]" in errors[0].message
    assert errors[1].expected == "non-empty string"


def test_boolean_and_numbers():
    """Booleans are not numbers and numbers are not booleans."""
    assert validate_boolean(True, "flag") == []
    assert validate_boolean("yes", "flag")[0].field == "flag"
    assert validate_non_negative_number(True, "n")[0].message == "n must be a number"
    assert validate_non_negative_number(-1, "n")[0].expected == "non-negative number"
    assert validate_non_negative_number(0, "n") == []


def test_number_in_range():
    validate = number_in_range(0, 1)
    assert validate(0.5, "threshold") == []
    assert validate(1.5, "threshold")[0].message == "threshold must be between 0 and 1"


def test_validate_config_reports_unknown_keys():
    """Keys outside the schema are errors too."""
    result = validate_config({"flag": True, "bogus": 1}, {"flag": validate_boolean}, "my-rule")

    assert not result.is_valid
    assert len(result.errors) == 1
    assert result.errors[0].field == "bogus"
    assert 'rule "my-rule"' in result.errors[0].message


def test_empty_config_is_valid():
    assert validate_config({}, {"flag": validate_boolean}, "my-rule").is_valid
    assert validate_config(None, {"flag": validate_boolean}, "my-rule").is_valid


def test_safety_config_word_conflict():
    """A word in both safeWords and unsafeWords is a conflict."""
    result = validate_safety_config({"safeWords": ["API"], "unsafeWords": ["api"]})

    assert not result.is_valid
    assert result.errors[0].field == "safeWords/unsafeWords"
    assert "conflict" in result.errors[0].message


def test_rule_config_nested_safety_errors():
    """Errors inside autofixSafety are prefixed with the block name."""
    result = validate_rule_config(
        "backtick-code-elements",
        {"ignoredTerms": ["foo"], "autofixSafety": {"confidenceThreshold": 2}},
    )

    assert not result.is_valid
    assert result.errors[0].field == "autofixSafety.confidenceThreshold"


def test_unknown_rule_is_valid():
    """Rules without a schema are not validated."""
    assert validate_rule_config("not-a-rule", {"anything": 1}).is_valid


def test_format_validation_errors():
    errors = [ValidationError(field="skipCodeBlocks", message="skipCodeBlocks must be a boolean")]
    text = format_validation_errors("no-literal-ampersand", errors)

    assert text.startswith('Configuration validation failed for rule "no-literal-ampersand"')
    assert "  - skipCodeBlocks: skipCodeBlocks must be a boolean" in text
    assert format_validation_errors("x", []) == ""


def test_sanitize_config_drops_invalid_fields():
    """Invalid fields are dropped; valid ones survive; input is untouched."""
    config = {
        "exceptions": "R&D",
        "skipInlineCode": False,
        "autofixSafety": {"confidenceThreshold": 5, "safeWords": ["x"]},
    }
    result = validate_rule_config("no-literal-ampersand", config)
    clean = sanitize_config(config, result.errors)

    assert "exceptions" not in clean
    assert clean["skipInlineCode"] is False
    assert clean["autofixSafety"] == {"safeWords": ["x"]}
    assert config["exceptions"] == "R&D"
