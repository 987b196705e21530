"""
Tests for finops_config.

Covers:
- Packaged defaults
- Partial override files
- Validation of unknown keys and wrong types
- Checksums and the FINOPS_CONFIG_TRACE audit line
- Building a platform from configuration
"""

from dataclasses import FrozenInstanceError

import pytest
import yaml

from finops_config import (
    ConfigValidationError,
    PlatformConfig,
    compute_checksum,
    get_active_config,
)
from finops_config.loader import config_to_dict, parse_config
from finops_kernel.domain.roles import Role
from finops_kernel.exceptions import InvalidRecipientError
from finops_kernel.platform import FinancialPlatform

ADMIN = "0x00000000000000000000000000000000000000a1"
ALICE = "0x00000000000000000000000000000000000000c1"
STRANGER = "0x00000000000000000000000000000000000000f1"


@pytest.fixture
def write_config(tmp_path):
    def _write(data) -> str:
        path = tmp_path / "platform.yaml"
        path.write_text(yaml.safe_dump(data) if not isinstance(data, str) else data)
        return str(path)

    return _write


class TestDefaults:

    def test_packaged_defaults(self):
        config = get_active_config()

        assert config.database.url == "sqlite://"
        assert config.database.echo is False
        assert config.admin.name == "Platform Admin"
        assert config.admin.email == "admin@platform.local"
        assert config.policy.require_registered_recipient is False
        assert config.logging.level == "INFO"
        assert config.source.endswith("defaults.yaml")

    def test_defaults_match_schema_defaults(self):
        """The packaged file and the dataclass defaults agree."""
        assert get_active_config().checksum == parse_config({}).checksum

    def test_config_is_frozen(self):
        config = get_active_config()
        with pytest.raises(FrozenInstanceError):
            config.database = None


class TestOverrides:

    def test_partial_file(self, write_config):
        path = write_config({"policy": {"require_registered_recipient": True}})
        config = get_active_config(path)

        assert config.policy.require_registered_recipient is True
        assert config.database.url == "sqlite://"

    def test_empty_file(self, write_config):
        config = get_active_config(write_config(""))
        assert config == PlatformConfig(checksum=config.checksum, source=config.source)

    def test_log_level_normalised(self, write_config):
        config = get_active_config(write_config({"logging": {"level": "debug"}}))
        assert config.logging.level == "DEBUG"


class TestValidation:

    def test_unknown_section(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            parse_config({"network": {"chain_id": 1}})
        assert "network: unknown section" in exc_info.value.errors

    def test_unknown_key(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            parse_config({"database": {"uri": "sqlite://"}})
        assert "database.uri: unknown key" in exc_info.value.errors

    def test_wrong_type(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            parse_config({"policy": {"require_registered_recipient": "yes"}})
        assert exc_info.value.errors[0].startswith("policy.require_registered_recipient")

    def test_every_error_reported(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            parse_config({"database": {"echo": 1}, "logging": {"level": "LOUD"}})
        assert len(exc_info.value.errors) == 2

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_config({"admin": "nobody"})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, write_config):
        with pytest.raises(yaml.YAMLError):
            get_active_config(write_config("database: [unclosed"))

    def test_non_mapping_document(self, write_config):
        with pytest.raises(ConfigValidationError):
            get_active_config(write_config("- just\n- a list\n"))


class TestChecksum:

    def test_deterministic(self):
        data = {"b": 1, "a": {"y": 2, "x": 3}}
        assert compute_checksum(data) == compute_checksum({"a": {"x": 3, "y": 2}, "b": 1})

    def test_changes_with_content(self):
        assert parse_config({}).checksum != parse_config(
            {"admin": {"name": "Root"}}
        ).checksum

    def test_checksum_covers_sections(self):
        config = parse_config({})
        assert config.checksum == compute_checksum(config_to_dict(config))

    def test_trace_logged(self, captured_logs):
        config = get_active_config()

        traces = [r for r in captured_logs() if r["message"] == "FINOPS_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["checksum"] == config.checksum
        assert traces[0]["trace_type"] == "FINOPS_CONFIG_TRACE"


class TestFromConfig:

    def test_default_config(self, deterministic_clock):
        with FinancialPlatform.from_config(ADMIN, clock=deterministic_clock) as platform:
            admin = platform.get_user(ADMIN)
            assert admin.role == Role.ADMIN
            assert admin.name == "Platform Admin"

    def test_admin_profile_and_policy(self, write_config, deterministic_clock):
        path = write_config({
            "admin": {"name": "Root", "email": "root@example.com"},
            "policy": {"require_registered_recipient": True},
        })
        config = get_active_config(path)

        with FinancialPlatform.from_config(ADMIN, config, clock=deterministic_clock) as platform:
            assert platform.get_user(ADMIN).email == "root@example.com"
            platform.register_user(ADMIN, ALICE, "Alice", "alice@company.com", Role.REGULAR)
            with pytest.raises(InvalidRecipientError):
                platform.create_transaction(ALICE, STRANGER, 10, "x")
