"""
finops_config -- single public entrypoint for platform configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Returns a frozen ``PlatformConfig``.

Architecture position:
    Configuration sits beside ``finops_kernel``.  The kernel only touches
    it from ``FinancialPlatform.from_config``.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``ConfigValidationError`` (a ``ValueError``) -- unknown keys or
      wrongly typed values.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``FINOPS_CONFIG_TRACE`` log entry carrying the source file and the
    checksum of the parsed content.
"""

from __future__ import annotations

import logging
from pathlib import Path

from finops_config.loader import (
    ConfigValidationError,
    compute_checksum,
    load_yaml_file,
    parse_config,
)
from finops_config.schema import (
    AdminConfig,
    DatabaseConfig,
    LoggingConfig,
    PlatformConfig,
    PolicyConfig,
)

_logger = logging.getLogger("finops_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(config_path: Path | str | None = None) -> PlatformConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: YAML file to load.  Defaults to the packaged
            ``defaults.yaml``.

    Returns:
        PlatformConfig -- validated and frozen.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        ConfigValidationError: If validation fails.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = parse_config(load_yaml_file(path), source=str(path))

    _logger.info(
        "FINOPS_CONFIG_TRACE",
        extra={
            "trace_type": "FINOPS_CONFIG_TRACE",
            "config_source": config.source,
            "checksum": config.checksum,
            "database_dialect": config.database.url.split(":", 1)[0],
            "require_registered_recipient": config.policy.require_registered_recipient,
        },
    )
    return config


__all__ = [
    "get_active_config",
    "ConfigValidationError",
    "compute_checksum",
    "PlatformConfig",
    "DatabaseConfig",
    "AdminConfig",
    "PolicyConfig",
    "LoggingConfig",
    "DEFAULT_CONFIG_PATH",
]
