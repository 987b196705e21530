"""
Pytest fixtures for the FinOps kernel test suite.

Provides:
- Structured logging for the whole run, plus a ``captured_logs`` helper
- A fresh in-memory SQLite database per test (``session`` for service
  tests, ``platform`` for end-to-end tests)
- The named participant roster used throughout the suite
"""

import json
import logging
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from finops_kernel.db.engine import (
    build_engine,
    build_session_factory,
    create_tables,
    drop_tables,
)
from finops_kernel.domain.clock import DeterministicClock
from finops_kernel.domain.roles import Role
from finops_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from finops_kernel.platform import FinancialPlatform
from finops_kernel.services.access_control import AccessControl
from finops_kernel.services.approval_workflow import ApprovalWorkflow
from finops_kernel.services.event_recorder import EventRecorder
from finops_kernel.services.sequence_service import SequenceService
from finops_kernel.services.transaction_ledger import TransactionLedger
from finops_kernel.services.user_registry import UserRegistry


# Participant roster.  Identities are opaque strings; address-shaped values
# keep the null-identity checks honest.
ADMIN = "0x00000000000000000000000000000000000000a1"
MANAGER = "0x00000000000000000000000000000000000000b1"
APPROVER = "0x00000000000000000000000000000000000000b2"
ALICE = "0x00000000000000000000000000000000000000c1"
BOB = "0x00000000000000000000000000000000000000c2"
OUTSIDER = "0x00000000000000000000000000000000000000d1"

ONE_ETHER = 10**18


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture finops_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, platform):
            platform.register_user(...)
            logs = captured_logs()
            assert any(r["message"] == "user_registered" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("finops_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Clock fixed at 2024-01-01 12:00 UTC."""
    return DeterministicClock()


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    create_tables(engine)
    yield engine
    drop_tables(engine)
    engine.dispose()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    """
    Session for service-level tests.

    Services only flush, so the test owns the transaction; it is rolled
    back on teardown.
    """
    factory = build_session_factory(engine)
    session = factory()
    SequenceService(session).initialize_sequences()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def access_control(session) -> AccessControl:
    return AccessControl(session)


@pytest.fixture
def event_recorder(session, deterministic_clock) -> EventRecorder:
    return EventRecorder(session, deterministic_clock)


@pytest.fixture
def user_registry(session, access_control, event_recorder, deterministic_clock) -> UserRegistry:
    return UserRegistry(session, access_control, event_recorder, deterministic_clock)


@pytest.fixture
def transaction_ledger(session, event_recorder, deterministic_clock) -> TransactionLedger:
    return TransactionLedger(session, event_recorder, deterministic_clock)


@pytest.fixture
def approval_workflow(
    session, access_control, transaction_ledger, event_recorder, deterministic_clock
) -> ApprovalWorkflow:
    return ApprovalWorkflow(
        session, access_control, transaction_ledger, event_recorder, deterministic_clock
    )


@pytest.fixture
def roster(user_registry):
    """
    Bootstrap the Admin and register the standard roster at service level.

    Returns the UserInfo of every participant keyed by short name.
    """
    users = {"admin": user_registry.bootstrap_admin(ADMIN, "Platform Admin", "admin@platform.local")}
    for key, identity, name, role in (
        ("manager", MANAGER, "John Manager", Role.MANAGER),
        ("alice", ALICE, "Alice User", Role.REGULAR),
        ("bob", BOB, "Bob User", Role.REGULAR),
        ("approver", APPROVER, "Sarah Approver", Role.MANAGER),
    ):
        users[key] = user_registry.register_user(
            ADMIN, identity, name, f"{key}@company.com", role
        )
    return users


# =============================================================================
# Platform fixtures
# =============================================================================


@pytest.fixture
def admin() -> str:
    return ADMIN


@pytest.fixture
def manager() -> str:
    return MANAGER


@pytest.fixture
def approver() -> str:
    return APPROVER


@pytest.fixture
def alice() -> str:
    return ALICE


@pytest.fixture
def bob() -> str:
    return BOB


@pytest.fixture
def outsider() -> str:
    return OUTSIDER


@pytest.fixture
def platform(deterministic_clock) -> Generator[FinancialPlatform, None, None]:
    """Fresh in-memory platform with only the bootstrap Admin."""
    platform = FinancialPlatform(ADMIN, clock=deterministic_clock)
    yield platform
    platform.close()


@pytest.fixture
def populated_platform(platform) -> FinancialPlatform:
    """Platform with Manager, Alice, Bob and a second approver registered."""
    platform.register_user(ADMIN, MANAGER, "John Manager", "john.manager@company.com", Role.MANAGER)
    platform.register_user(ADMIN, ALICE, "Alice User", "alice.user@company.com", Role.REGULAR)
    platform.register_user(ADMIN, BOB, "Bob User", "bob.user@company.com", Role.REGULAR)
    platform.register_user(ADMIN, APPROVER, "Sarah Approver", "sarah.approver@company.com", Role.MANAGER)
    return platform
