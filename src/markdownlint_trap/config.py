"""Configuration management with environment variable overrides."""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from markdownlint_trap import __version__
from markdownlint_trap.core.linter.rules import RULE_ALIASES, RULES, resolve_rule_name
from markdownlint_trap.core.linter.validation import (
    validate_rule_config,
    validate_safety_config,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".markdownlint-trap.yaml", ".markdownlint-trap.yml")
GLOBAL_KEYS = {"default", "autofix"}
REVIEW_FORMATS = ("text", "json")


class ConfigError(Exception):
    """The configuration file cannot be read or is not valid YAML."""


@dataclass
class Config:
    """Configuration for markdownlint-trap."""

    # markdownlint-style mapping: rule name/alias -> bool | options, plus default/autofix
    settings: dict = field(default_factory=dict)

    # Where settings came from (None when no file was found)
    config_path: Path | None = None

    # Rules selected by MARKDOWNLINT_TRAP_RULES (None: all enabled rules)
    rules: list[str] | None = None

    # Needs-review report format: "text" or "json"
    review_format: str = "text"

    # Structured problems found while loading (unknown keys)
    errors: list[dict] = field(default_factory=list)

    version: str = __version__

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """
        Load config from YAML with environment variable overrides.

        Args:
            path: Config file (default: MARKDOWNLINT_TRAP_CONFIG, then
                  .markdownlint-trap.yaml/.yml in the current directory)

        Raises:
            ConfigError: If the file cannot be read or is not valid YAML
        """
        config = cls()

        if path is None and (val := os.environ.get("MARKDOWNLINT_TRAP_CONFIG")):
            path = Path(val).expanduser()
        if path is None:
            path = next((Path(name) for name in CONFIG_FILENAMES if Path(name).is_file()), None)

        if path is not None:
            config.config_path = path
            config.settings = _read_settings(path)
            config.errors = _check_top_level(config.settings)

        # Override selected rules from env
        if val := os.environ.get("MARKDOWNLINT_TRAP_RULES"):
            config.rules = [r.strip() for r in val.split(",") if r.strip()]

        # Override safety settings from env
        if val := os.environ.get("MARKDOWNLINT_TRAP_SAFETY_ENABLED"):
            config.safety["enabled"] = val.lower() in ("true", "1", "yes")
        if val := os.environ.get("MARKDOWNLINT_TRAP_CONFIDENCE_THRESHOLD"):
            try:
                config.safety["confidenceThreshold"] = float(val)
            except ValueError:
                raise ConfigError(f"MARKDOWNLINT_TRAP_CONFIDENCE_THRESHOLD must be a number, got {val!r}")

        # Override review format from env
        if val := os.environ.get("MARKDOWNLINT_TRAP_REVIEW_FORMAT"):
            if val in REVIEW_FORMATS:
                config.review_format = val

        return config

    @property
    def safety(self) -> dict:
        """The global ``autofix.safety`` block, created on first access."""
        autofix = self.settings.get("autofix")
        if not isinstance(autofix, dict):
            autofix = self.settings["autofix"] = {}
        safety = autofix.get("safety")
        if not isinstance(safety, dict):
            safety = autofix["safety"] = {}
        return safety

    def validate(self) -> list[dict]:
        """
        Every problem in the loaded settings.

        Returns:
            Structured errors, each with ``rule``, ``field``, ``message``,
            ``value`` and ``expected``
        """
        errors = list(self.errors)

        autofix = self.settings.get("autofix")
        if isinstance(autofix, dict) and isinstance(autofix.get("safety"), dict):
            for error in validate_safety_config(autofix["safety"]).errors:
                errors.append({"rule": "autofix", **error.to_dict()})

        for key, value in self.settings.items():
            rule_name = resolve_rule_name(key)
            if rule_name is None:
                continue
            if not isinstance(value, (bool, dict)):
                errors.append({
                    "rule": rule_name,
                    "field": key,
                    "message": f'Setting for "{key}" must be true, false or an options mapping',
                    "value": value,
                    "expected": "boolean or object",
                })
                continue
            if isinstance(value, dict):
                for error in validate_rule_config(rule_name, value).errors:
                    errors.append({"rule": rule_name, **error.to_dict()})

        return errors


def _read_settings(path: Path) -> dict:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

    logger.debug(f"Loaded config from {path}")
    return data


def _check_top_level(settings: dict) -> list[dict]:
    errors = []
    known = ", ".join([*GLOBAL_KEYS, *RULES, *RULE_ALIASES])
    for key, value in settings.items():
        if key in GLOBAL_KEYS or resolve_rule_name(str(key)) is not None:
            continue
        logger.warning(f'Unknown configuration key "{key}"')
        errors.append({
            "rule": None,
            "field": str(key),
            "message": f'Unknown configuration key "{key}"',
            "value": value,
            "expected": f"one of: {known}",
        })
    return errors
