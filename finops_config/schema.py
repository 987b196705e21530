"""
Platform configuration schema.

Frozen dataclasses produced by ``finops_config.loader``.  Every field has a
default, so a configuration file only needs to name what it overrides.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DatabaseConfig:
    """Relational store the platform owns."""

    url: str = "sqlite://"
    echo: bool = False


@dataclass(frozen=True)
class AdminConfig:
    """Profile of the bootstrap Admin.  The identity is supplied at startup."""

    name: str = "Platform Admin"
    email: str = "admin@platform.local"


@dataclass(frozen=True)
class PolicyConfig:
    require_registered_recipient: bool = False


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class PlatformConfig:
    """
    Complete runtime configuration.

    ``checksum`` identifies the parsed content (see ``compute_checksum``);
    ``source`` is the file it was read from, if any.
    """

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    admin: AdminConfig = field(default_factory=AdminConfig)
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    checksum: str = ""
    source: str | None = None
