"""
SequenceService -- monotonic id allocation via counter rows.

Responsibility:
    Provides strictly increasing integers, starting at 1, for transaction
    ids, approval ids, index entries and notification log sequence numbers.
    Each named sequence is one counter row.

Invariants enforced:
    - Sequences are strictly monotonic.  The aggregate-max-plus-one pattern
      is never used; the counter row is the sole source of truth.
    - Transactional: an increment is only visible after the caller's
      transaction commits.  A refused command rolls back and its id is
      reused by the next successful command, so ids stay gap-free.

Failure modes:
    - IntegrityError if two writers race to create the same counter row.
      FinancialPlatform's writer lock prevents this; ``SELECT ... FOR
      UPDATE`` covers server databases shared by several processes.
"""

from sqlalchemy import BigInteger, String, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from finops_kernel.db.base import Base
from finops_kernel.logging_config import get_logger

logger = get_logger("services.sequence")


class SequenceCounter(Base):
    """
    Sequence counter table.

    Each row represents a named sequence with its current value.
    """

    __tablename__ = "sequence_counters"

    name: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
    )

    current_value: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
    )


class SequenceService:
    """
    Service for generating transactional sequence numbers.

    Usage:
        with session_scope(factory) as session:
            tx_id = SequenceService(session).next_value(SequenceService.TRANSACTION)
    """

    # Well-known sequence names
    TRANSACTION = "transaction"
    APPROVAL = "approval"
    USER_TRANSACTION_INDEX = "user_transaction_index"
    PLATFORM_EVENT = "platform_event"

    _WELL_KNOWN = (TRANSACTION, APPROVAL, USER_TRANSACTION_INDEX, PLATFORM_EVENT)

    def __init__(self, session: Session):
        self._session = session

    def _locked_counter(self, sequence_name: str) -> SequenceCounter | None:
        return self._session.execute(
            select(SequenceCounter)
            .where(SequenceCounter.name == sequence_name)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def next_value(self, sequence_name: str) -> int:
        """
        Get the next value for a named sequence.

        Postconditions:
            - Returns an integer > 0 strictly greater than any value
              previously committed for this sequence name.
        """
        counter = self._locked_counter(sequence_name)

        if counter is None:
            counter = SequenceCounter(name=sequence_name, current_value=0)
            self._session.add(counter)

        counter.current_value += 1
        self._session.flush()
        logger.debug(
            "sequence_allocated",
            extra={"sequence_name": sequence_name, "value": counter.current_value},
        )
        return counter.current_value

    def current_value(self, sequence_name: str) -> int:
        """Current value without incrementing; 0 if the sequence is unused."""
        counter = self._session.execute(
            select(SequenceCounter)
            .where(SequenceCounter.name == sequence_name)
        ).scalar_one_or_none()

        return counter.current_value if counter else 0

    def initialize_sequences(self) -> None:
        """
        Create every well-known counter at zero if missing.

        Called during platform bootstrap.
        """
        for name in self._WELL_KNOWN:
            existing = self._session.get(SequenceCounter, name)
            if existing is None:
                self._session.add(SequenceCounter(name=name, current_value=0))

        self._session.flush()
