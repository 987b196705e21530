"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Provides the common constructor and session-handling contract for
    every service in the kernel layer.  All concrete services receive a
    SQLAlchemy ``Session`` and use ``session.flush()`` -- never
    ``session.commit()``.

Invariants enforced:
    Transaction boundaries: services flush within the caller's transaction
    and never commit or rollback themselves.  FinancialPlatform owns
    commit/rollback through ``session_scope``, which is what makes every
    command all-or-nothing.
"""

from abc import ABC

from sqlalchemy.orm import Session

from finops_kernel.domain.clock import Clock, SystemClock


class BaseService(ABC):
    """
    Abstract base class for all kernel services.

    Guarantees:
        - The service never calls ``session.commit()`` or
          ``session.rollback()``.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        """
        Args:
            session: SQLAlchemy session for database operations.
            clock: Clock for timestamps. Defaults to SystemClock.
        """
        self.session = session
        self._clock = clock or SystemClock()
