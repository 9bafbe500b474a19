"""Declarative validation for rule and safety configuration."""
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass
class ValidationError:
    """One problem found in a config block."""
    field: str
    message: str
    value: Any = None
    expected: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: list[ValidationError] = field(default_factory=list)


Validator = Callable[[Any, str], list[ValidationError]]


# ============================================================================
# Field validators
# ============================================================================

def validate_string_array(value: Any, field_name: str) -> list[ValidationError]:
    """Accept a list of non-blank strings. A missing value is valid."""
    if value is None:
        return []
    if not isinstance(value, list):
        return [ValidationError(
            field=field_name,
            message=f"{field_name} must be an array of strings",
            value=value,
            expected="array of strings",
        )]

    errors = []
    for i, item in enumerate(value):
        if not isinstance(item, str):
            errors.append(ValidationError(
                field=field_name,
                message=f"{field_name}[{i}] must be a string, got {type(item).__name__}",
                value=item,
                expected="string",
            ))
        elif not item.strip():
            errors.append(ValidationError(
                field=field_name,
                message=f"{field_name}[{i}] cannot be empty or whitespace-only",
                value=item,
                expected="non-empty string",
            ))
    return errors


def validate_boolean(value: Any, field_name: str) -> list[ValidationError]:
    if value is None or isinstance(value, bool):
        return []
    return [ValidationError(
        field=field_name,
        message=f"{field_name} must be a boolean (true or false)",
        value=value,
        expected="boolean",
    )]


def _is_number(value: Any) -> bool:
    # bool is an int subclass; NaN never compares equal to itself
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == value


def validate_non_negative_number(value: Any, field_name: str) -> list[ValidationError]:
    if value is None:
        return []
    if not _is_number(value):
        return [ValidationError(
            field=field_name,
            message=f"{field_name} must be a number",
            value=value,
            expected="number",
        )]
    if value < 0:
        return [ValidationError(
            field=field_name,
            message=f"{field_name} must be non-negative",
            value=value,
            expected="non-negative number",
        )]
    return []


def number_in_range(lo: float, hi: float) -> Validator:
    """Build a validator for a number within ``[lo, hi]``."""
    expected = f"number between {lo} and {hi}"

    def validate(value: Any, field_name: str) -> list[ValidationError]:
        if value is None:
            return []
        if not _is_number(value):
            return [ValidationError(
                field=field_name,
                message=f"{field_name} must be a number",
                value=value,
                expected=expected,
            )]
        if value < lo or value > hi:
            return [ValidationError(
                field=field_name,
                message=f"{field_name} must be between {lo} and {hi}",
                value=value,
                expected=expected,
            )]
        return []

    return validate


# ============================================================================
# Schemas
# ============================================================================

SAFETY_SCHEMA: dict[str, Validator] = {
    "enabled": validate_boolean,
    "confidenceThreshold": number_in_range(0, 1),
    "reviewThreshold": number_in_range(0, 1),
    "safeWords": validate_string_array,
    "unsafeWords": validate_string_array,
    "requireManualReview": validate_boolean,
    "alwaysReview": validate_string_array,
    "neverFlag": validate_string_array,
}


def validate_config(config: Any, schema: dict[str, Validator], rule_name: str) -> ValidationResult:
    """
    Validate a config mapping against a field -> validator schema.

    An empty or missing config is valid. Keys the schema does not know are
    reported as errors too.
    """
    if not config or not isinstance(config, dict):
        return ValidationResult()

    errors: list[ValidationError] = []
    for field_name, validator in schema.items():
        errors.extend(validator(config.get(field_name), field_name))

    known = ", ".join(schema)
    for field_name, value in config.items():
        if field_name not in schema:
            errors.append(ValidationError(
                field=field_name,
                message=f'Unknown configuration option "{field_name}" for rule "{rule_name}"',
                value=value,
                expected=f"one of: {known}",
            ))

    return ValidationResult(is_valid=not errors, errors=errors)


def validate_safety_config(config: Any) -> ValidationResult:
    """Validate an autofix safety block, including safe/unsafe word conflicts."""
    if not config or not isinstance(config, dict):
        return ValidationResult()

    result = validate_config(config, SAFETY_SCHEMA, "autofix-safety")

    safe_words = config.get("safeWords")
    unsafe_words = config.get("unsafeWords")
    if isinstance(safe_words, list) and isinstance(unsafe_words, list):
        safe = {w.lower() for w in safe_words if isinstance(w, str)}
        for word in unsafe_words:
            if isinstance(word, str) and word.lower() in safe:
                result.errors.append(ValidationError(
                    field="safeWords/unsafeWords",
                    message=f'Word "{word}" appears in both safeWords and unsafeWords (conflict)',
                    value=word,
                    expected="no overlap between safeWords and unsafeWords",
                ))
                result.is_valid = False

    return result


def validate_safety_block(value: Any, field_name: str) -> list[ValidationError]:
    """Schema validator for a nested ``autofixSafety`` mapping."""
    if value is None:
        return []
    if not isinstance(value, dict):
        return [ValidationError(
            field=field_name,
            message=f"{field_name} must be an object",
            value=value,
            expected="object",
        )]
    return [
        ValidationError(
            field=f"{field_name}.{error.field}",
            message=error.message,
            value=error.value,
            expected=error.expected,
        )
        for error in validate_safety_config(value).errors
    ]


_COMMON_SCHEMA: dict[str, Validator] = {
    "reportSkipped": validate_boolean,
    "autofixSafety": validate_safety_block,
}

RULE_SCHEMAS: dict[str, dict[str, Validator]] = {
    "sentence-case-heading": {
        "specialTerms": validate_string_array,
        "technicalTerms": validate_string_array,
        "properNouns": validate_string_array,
        "ignoreAfterEmoji": validate_boolean,
        **_COMMON_SCHEMA,
    },
    "backtick-code-elements": {
        "ignoredTerms": validate_string_array,
        "skipCodeBlocks": validate_boolean,
        "skipMathBlocks": validate_boolean,
        "detectPascalCase": validate_boolean,
        **_COMMON_SCHEMA,
    },
    "no-bare-urls": {
        "allowedDomains": validate_string_array,
        **_COMMON_SCHEMA,
    },
    "no-literal-ampersand": {
        "exceptions": validate_string_array,
        "skipCodeBlocks": validate_boolean,
        "skipInlineCode": validate_boolean,
        **_COMMON_SCHEMA,
    },
    "no-dead-internal-links": {
        "ignoredPaths": validate_string_array,
        "checkAnchors": validate_boolean,
        "allowedExtensions": validate_string_array,
        "allowPlaceholders": validate_boolean,
        "placeholderPatterns": validate_string_array,
        **_COMMON_SCHEMA,
    },
    "no-empty-list-items": {
        **_COMMON_SCHEMA,
    },
}


def validate_rule_config(rule_name: str, config: Any) -> ValidationResult:
    """Validate one rule's options against its registered schema."""
    schema = RULE_SCHEMAS.get(rule_name)
    if schema is None:
        return ValidationResult()
    return validate_config(config, schema, rule_name)


def format_validation_errors(rule_name: str, errors: list[ValidationError]) -> str:
    if not errors:
        return ""
    lines = "\n".join(f"  - {e.field}: {e.message}" for e in errors)
    return (
        f'Configuration validation failed for rule "{rule_name}":\n{lines}\n\n'
        f"Please check your .markdownlint-trap.yaml configuration file."
    )


def sanitize_config(config: Any, errors: list[ValidationError]) -> dict:
    """
    Drop the fields named in ``errors`` so the rule falls back to defaults.

    Errors on nested ``autofixSafety.*`` fields drop only the nested field.
    Returns a new dict; ``config`` is not modified.
    """
    if not isinstance(config, dict):
        return {}

    clean = dict(config)
    safety = dict(clean["autofixSafety"]) if isinstance(clean.get("autofixSafety"), dict) else None

    for error in errors:
        if error.field.startswith("autofixSafety.") and safety is not None:
            nested = error.field.split(".", 1)[1]
            if nested == "safeWords/unsafeWords":
                safety.pop("unsafeWords", None)
            else:
                safety.pop(nested, None)
        elif error.field == "safeWords/unsafeWords":
            clean.pop("unsafeWords", None)
        else:
            clean.pop(error.field, None)

    if safety is not None and "autofixSafety" in clean:
        clean["autofixSafety"] = safety

    if errors:
        logger.debug(f"Dropped {len(errors)} invalid config field(s): {sorted(config.keys() - clean.keys())}")
    return clean
