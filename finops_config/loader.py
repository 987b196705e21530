"""
Configuration loader (``finops_config.loader``).

Responsibility
--------------
Loads a YAML file and parses it into the frozen ``finops_config.schema``
dataclasses.  The single public entry point for runtime configuration is
``finops_config.get_active_config()``; this module is its tooling.

Invariants enforced
-------------------
* Unknown sections or keys are rejected, never ignored.
* Values must have the declared type: ``true`` is not a string and
  ``"false"`` is not a boolean.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown key or wrong type  -> ``ConfigValidationError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from finops_config.schema import (
    AdminConfig,
    DatabaseConfig,
    LoggingConfig,
    PlatformConfig,
    PolicyConfig,
)

_SECTIONS: dict[str, type] = {
    "database": DatabaseConfig,
    "admin": AdminConfig,
    "policy": PolicyConfig,
    "logging": LoggingConfig,
}

# Annotations are strings under postponed evaluation.
_FIELD_TYPES: dict[str, type] = {"str": str, "bool": bool}

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class ConfigValidationError(ValueError):
    """Configuration content does not match the schema."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(
            "Configuration validation failed:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigValidationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigValidationError([f"{path}: top level must be a mapping"])
    return data


def _check_value(section: str, key: str, value: Any, expected: type) -> str | None:
    # bool is an int subclass; YAML gives real bools, so compare exactly
    if type(value) is not expected:
        return (
            f"{section}.{key}: expected {expected.__name__}, "
            f"got {type(value).__name__} ({value!r})"
        )
    return None


def _parse_section(section: str, data: Any, errors: list[str]) -> Any:
    cls = _SECTIONS[section]
    if data is None:
        return cls()
    if not isinstance(data, dict):
        errors.append(f"{section}: expected a mapping, got {type(data).__name__}")
        return cls()

    declared = {f.name: _FIELD_TYPES[f.type] for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key not in declared:
            errors.append(f"{section}.{key}: unknown key")
            continue
        problem = _check_value(section, key, value, declared[key])
        if problem:
            errors.append(problem)
            continue
        kwargs[key] = value
    return cls(**kwargs)


def parse_config(data: dict[str, Any], source: str | None = None) -> PlatformConfig:
    """
    Parse and validate a configuration mapping.

    Missing sections and keys take their schema defaults.

    Raises:
        ConfigValidationError: listing every problem found.
    """
    errors: list[str] = []

    for section in data:
        if section not in _SECTIONS:
            errors.append(f"{section}: unknown section")

    parsed = {
        section: _parse_section(section, data.get(section), errors)
        for section in _SECTIONS
    }

    level = parsed["logging"].level.upper()
    if level not in _LOG_LEVELS:
        errors.append(f"logging.level: unknown level {parsed['logging'].level!r}")
    else:
        parsed["logging"] = LoggingConfig(level=level)

    if errors:
        raise ConfigValidationError(errors)

    return PlatformConfig(
        **parsed,
        checksum=compute_checksum(config_to_dict(parsed)),
        source=source,
    )


def config_to_dict(sections: dict[str, Any] | PlatformConfig) -> dict[str, Any]:
    """Plain nested dict of the four sections, suitable for hashing."""
    if isinstance(sections, PlatformConfig):
        sections = {name: getattr(sections, name) for name in _SECTIONS}
    return {
        name: {f.name: getattr(value, f.name) for f in fields(value)}
        for name, value in sections.items()
    }


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Postconditions:
        - Returns a hex-encoded SHA-256 hash string.
        - Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
