"""
FinancialPlatform -- the single public entry point of the kernel.

Responsibility:
    Owns the relational store for one platform instance and exposes every
    command and query.  Each command runs as one database transaction under
    a process-wide writer lock, so mutations are totally ordered and either
    fully applied or not applied at all.

Architecture position:
    Kernel > Platform.  Composes AccessControl, UserRegistry,
    TransactionLedger, ApprovalWorkflow and EventRecorder per unit of work.

Invariants enforced:
    - Root of trust: the identity given at construction is registered as
      the first Admin before any other command can run.
    - Atomicity: a refused command commits nothing, including its
      notifications.
    - Observers see events only after the transaction that produced them
      has committed, in the order they were recorded.
    - Reads never observe a half-applied command.

Usage:
    platform = FinancialPlatform("0xadmin")
    platform.register_user("0xadmin", "0xalice", "Alice", "alice@example.com", Role.REGULAR)
    tx_id = platform.create_transaction("0xalice", "0xbob", 1000, "invoice 17")
"""

from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Generator

from sqlalchemy.orm import Session

from finops_kernel.db.engine import (
    build_engine,
    build_session_factory,
    create_tables,
    is_in_memory_url,
    read_scope,
    session_scope,
)
from finops_kernel.db.types import is_null_identity
from finops_kernel.domain.clock import Clock, SystemClock
from finops_kernel.domain.dtos import ApprovalInfo, EventInfo, TransactionInfo, UserInfo
from finops_kernel.domain.events import PlatformEvent
from finops_kernel.domain.roles import Role
from finops_kernel.exceptions import InvalidIdentityError, UnauthorizedError
from finops_kernel.logging_config import LogContext, configure_logging, get_logger
from finops_kernel.selectors.approval_selector import ApprovalSelector
from finops_kernel.selectors.event_selector import EventSelector
from finops_kernel.selectors.ledger_selector import LedgerSelector
from finops_kernel.selectors.user_selector import UserSelector
from finops_kernel.services.access_control import AccessControl
from finops_kernel.services.approval_workflow import ApprovalWorkflow
from finops_kernel.services.event_recorder import EventRecorder
from finops_kernel.services.sequence_service import SequenceService
from finops_kernel.services.transaction_ledger import TransactionLedger
from finops_kernel.services.user_registry import UserRegistry

if TYPE_CHECKING:
    from finops_config.schema import PlatformConfig

logger = get_logger("platform")

Subscriber = Callable[[PlatformEvent], None]


@dataclass
class _UnitOfWork:
    """Services bound to one session."""

    session: Session
    access: AccessControl
    events: EventRecorder
    users: UserRegistry
    ledger: TransactionLedger
    approvals: ApprovalWorkflow


class FinancialPlatform:
    """
    Permissioned ledger over one relational store.

    Args:
        admin_identity: Identity registered as the root-of-trust Admin.
        database_url: SQLAlchemy URL.  Defaults to a private in-memory
            SQLite database.
        admin_name: Display name of the bootstrap Admin.
        admin_email: Contact of the bootstrap Admin.
        require_registered_recipient: Refuse transactions whose recipient
            is not a registered user.
        clock: Timestamp source.  Defaults to SystemClock.
        echo: Log every SQL statement.

    Reopening a persistent store that already has users skips the
    bootstrap and keeps the stored state; the reopening identity must be
    an active Admin of that store.

    Raises:
        InvalidIdentityError: If ``admin_identity`` is the null identity.
        UnauthorizedError: If reopening under an identity that is not an
            active Admin.
    """

    def __init__(
        self,
        admin_identity: str,
        database_url: str = "sqlite://",
        *,
        admin_name: str = "Platform Admin",
        admin_email: str = "admin@platform.local",
        require_registered_recipient: bool = False,
        clock: Clock | None = None,
        echo: bool = False,
    ):
        if is_null_identity(admin_identity):
            raise InvalidIdentityError(admin_identity)

        self._admin_identity = admin_identity
        self._clock = clock or SystemClock()
        self._require_registered_recipient = require_registered_recipient
        self._lock = threading.RLock()
        self._subscribers: list[Subscriber] = []
        # single shared connection: reads must not interleave with a command
        self._serialize_reads = is_in_memory_url(database_url)

        self._engine = build_engine(database_url, echo=echo)
        self._factory = build_session_factory(self._engine)
        create_tables(self._engine)
        try:
            self._bootstrap(admin_name, admin_email)
        except Exception:
            self._engine.dispose()
            raise

    @classmethod
    def from_config(
        cls,
        admin_identity: str,
        config: PlatformConfig | None = None,
        *,
        clock: Clock | None = None,
    ) -> FinancialPlatform:
        """
        Build a platform from a PlatformConfig.

        With no ``config``, loads the active configuration through
        ``finops_config.get_active_config()``.  Also configures kernel
        logging at the configured level.
        """
        if config is None:
            from finops_config import get_active_config

            config = get_active_config()

        configure_logging(level=config.logging.level)
        return cls(
            admin_identity,
            config.database.url,
            admin_name=config.admin.name,
            admin_email=config.admin.email,
            require_registered_recipient=config.policy.require_registered_recipient,
            clock=clock,
            echo=config.database.echo,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _bootstrap(self, admin_name: str, admin_email: str) -> None:
        """
        Initialize an empty store, or reopen an initialized one.

        Raises:
            UnauthorizedError: If the store already has users and
                ``admin_identity`` is not an active Admin among them.
        """
        with self._command("bootstrap", self._admin_identity) as uow:
            SequenceService(uow.session).initialize_sequences()
            if UserSelector(uow.session).count() == 0:
                uow.users.bootstrap_admin(self._admin_identity, admin_name, admin_email)
                logger.info("platform_initialized", extra={"admin": self._admin_identity})
                return

            if not uow.access.is_admin(self._admin_identity):
                logger.warning(
                    "reopen_refused",
                    extra={"caller": self._admin_identity},
                )
                raise UnauthorizedError(self._admin_identity, "admin")
            logger.info("platform_reopened", extra={"admin": self._admin_identity})

    def close(self) -> None:
        """Release every pooled connection.  In-memory state is discarded."""
        self._engine.dispose()
        logger.info("platform_closed")

    def __enter__(self) -> FinancialPlatform:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def admin_identity(self) -> str:
        return self._admin_identity

    # ------------------------------------------------------------------
    # Units of work
    # ------------------------------------------------------------------

    def _services(self, session: Session) -> _UnitOfWork:
        access = AccessControl(session)
        events = EventRecorder(session, self._clock)
        ledger = TransactionLedger(
            session,
            events,
            self._clock,
            require_registered_recipient=self._require_registered_recipient,
        )
        return _UnitOfWork(
            session=session,
            access=access,
            events=events,
            users=UserRegistry(session, access, events, self._clock),
            ledger=ledger,
            approvals=ApprovalWorkflow(session, access, ledger, events, self._clock),
        )

    @contextmanager
    def _command(
        self, operation: str, caller: str | None, **context: object
    ) -> Generator[_UnitOfWork, None, None]:
        """
        Run one command: lock, one transaction, then notify observers.

        Every log line of the command carries a fresh ``correlation_id``.
        Exceptions raised inside the block roll the transaction back and
        propagate; observers are not notified.
        """
        with self._lock, LogContext.bind(
            correlation_id=uuid.uuid4().hex,
            actor_id=caller,
            operation=operation,
            **context,
        ):
            with session_scope(self._factory) as session:
                uow = self._services(session)
                yield uow
            self._dispatch(uow.events.emitted)

    @contextmanager
    def _query(self) -> Generator[Session, None, None]:
        guard = self._lock if self._serialize_reads else nullcontext()
        with guard, read_scope(self._factory) as session:
            yield session

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, subscriber: Subscriber) -> Subscriber:
        """
        Register ``subscriber`` for every committed event.

        Returns the subscriber so it can be used as a decorator.
        """
        with self._lock:
            self._subscribers.append(subscriber)
        return subscriber

    def unsubscribe(self, subscriber: Subscriber) -> None:
        with self._lock:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

    def _dispatch(self, events: list[PlatformEvent]) -> None:
        for event in events:
            for subscriber in list(self._subscribers):
                try:
                    subscriber(event)
                except Exception:
                    logger.exception(
                        "subscriber_failed",
                        extra={"event_type": event.event_type},
                    )

    # ------------------------------------------------------------------
    # User registry
    # ------------------------------------------------------------------

    def register_user(
        self,
        caller: str,
        identity: str,
        name: str,
        email: str,
        role: Role | str = Role.REGULAR,
    ) -> UserInfo:
        with self._command("register_user", caller) as uow:
            return uow.users.register_user(caller, identity, name, email, role)

    def update_user_role(self, caller: str, identity: str, new_role: Role | str) -> UserInfo:
        with self._command("update_user_role", caller) as uow:
            return uow.users.update_user_role(caller, identity, new_role)

    def get_user(self, identity: str) -> UserInfo:
        with self._query() as session:
            return UserSelector(session).get(identity)

    def get_user_count(self) -> int:
        with self._query() as session:
            return UserSelector(session).count()

    def has_role(self, identity: str, role: Role | str) -> bool:
        with self._query() as session:
            return AccessControl(session).has_role(identity, role)

    def is_admin(self, identity: str) -> bool:
        return self.has_role(identity, Role.ADMIN)

    def is_approver(self, identity: str) -> bool:
        return self.has_role(identity, Role.MANAGER)

    # ------------------------------------------------------------------
    # Transaction ledger
    # ------------------------------------------------------------------

    def create_transaction(
        self,
        caller: str,
        to: str,
        amount: int,
        description: str = "",
    ) -> int:
        with self._command("create_transaction", caller) as uow:
            return uow.ledger.create_transaction(caller, to, amount, description)

    def complete_transaction(self, caller: str, transaction_id: int) -> TransactionInfo:
        with self._command(
            "complete_transaction", caller, transaction_id=transaction_id
        ) as uow:
            return uow.ledger.complete_transaction(caller, transaction_id)

    def get_transaction(self, transaction_id: int) -> TransactionInfo:
        with self._query() as session:
            return LedgerSelector(session).get_transaction(transaction_id)

    def get_user_transactions(self, identity: str) -> list[int]:
        with self._query() as session:
            return LedgerSelector(session).user_transaction_ids(identity)

    def get_transaction_count(self) -> int:
        with self._query() as session:
            return LedgerSelector(session).transaction_count()

    # ------------------------------------------------------------------
    # Approval workflow
    # ------------------------------------------------------------------

    def request_approval(self, caller: str, transaction_id: int, reason: str = "") -> int:
        with self._command(
            "request_approval", caller, transaction_id=transaction_id
        ) as uow:
            return uow.approvals.request_approval(caller, transaction_id, reason)

    def process_approval(
        self,
        caller: str,
        approval_id: int,
        approve: bool,
        note: str = "",
    ) -> ApprovalInfo:
        with self._command("process_approval", caller, approval_id=approval_id) as uow:
            return uow.approvals.process_approval(caller, approval_id, approve, note)

    def get_approval(self, approval_id: int) -> ApprovalInfo:
        with self._query() as session:
            return ApprovalSelector(session).get(approval_id)

    def get_pending_approvals(self) -> list[ApprovalInfo]:
        with self._query() as session:
            return ApprovalSelector(session).pending()

    def get_transaction_approvals(self, transaction_id: int) -> list[ApprovalInfo]:
        """Every approval ever requested for ``transaction_id``, ascending id."""
        with self._query() as session:
            return ApprovalSelector(session).for_transaction(transaction_id)

    # ------------------------------------------------------------------
    # Notification log
    # ------------------------------------------------------------------

    def get_events(self, since_seq: int = 0, event_type: str | None = None) -> list[EventInfo]:
        with self._query() as session:
            return EventSelector(session).since(since_seq, event_type)

    def verify_event_chain(self) -> bool:
        """
        Raises:
            EventChainBrokenError: If any stored entry was altered.
        """
        with self._query() as session:
            return EventRecorder(session, self._clock).validate_chain()
