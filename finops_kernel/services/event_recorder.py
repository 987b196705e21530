"""
EventRecorder -- hash-chained notification log.

Responsibility:
    Persists every notification (TransactionCreated, ApprovalRequested,
    ApprovalProcessed, ...) in the same database transaction as the
    mutation it describes, and validates the chain on demand.

Invariants enforced:
    - Sequence monotonicity via SequenceService.
    - Chain integrity: ``hash = H(seq, event_type, payload_hash, prev_hash)``.
    - Append-only: entries are never updated or deleted by the kernel.

Failure modes:
    - EventChainBrokenError from ``validate_chain()`` when a stored hash
      or link does not match its recomputed value.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from finops_kernel.domain.clock import Clock
from finops_kernel.domain.events import PlatformEvent
from finops_kernel.exceptions import EventChainBrokenError
from finops_kernel.logging_config import get_logger
from finops_kernel.models.platform_event import PlatformEventRecord
from finops_kernel.services.base import BaseService
from finops_kernel.services.sequence_service import SequenceService
from finops_kernel.utils.hashing import hash_payload, hash_platform_event

logger = get_logger("services.event_recorder")


class EventRecorder(BaseService):
    """
    Appends notifications to the persisted log.

    Events recorded in this session are kept in ``emitted``, in order, so
    the caller can hand them to observers once the transaction commits.

    Non-goals:
        - Does NOT deliver events to observers.  FinancialPlatform does
          that after the enclosing transaction commits.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session, clock)
        self._sequence_service = SequenceService(session)
        self.emitted: list[PlatformEvent] = []

    def _get_last_hash(self) -> str | None:
        last = self.session.execute(
            select(PlatformEventRecord)
            .order_by(PlatformEventRecord.seq.desc())
            .limit(1)
        ).scalar_one_or_none()

        return last.hash if last else None

    def record(self, event: PlatformEvent, actor: str | None = None) -> PlatformEventRecord:
        """
        Append ``event`` to the log with chain linkage.

        Postconditions:
            - A new row is flushed with the next ``seq`` and a valid link
              to its predecessor.
        """
        seq = self._sequence_service.next_value(SequenceService.PLATFORM_EVENT)
        prev_hash = self._get_last_hash()

        payload = event.to_payload()
        payload_hash = hash_payload(payload)
        event_hash = hash_platform_event(
            seq=seq,
            event_type=event.event_type,
            payload_hash=payload_hash,
            prev_hash=prev_hash,
        )

        record = PlatformEventRecord(
            seq=seq,
            event_type=event.event_type,
            payload=payload,
            actor=actor,
            occurred_at=self._clock.now(),
            payload_hash=payload_hash,
            prev_hash=prev_hash,
            hash=event_hash,
        )
        self.session.add(record)
        self.session.flush()
        self.emitted.append(event)

        logger.info(
            "platform_event_recorded",
            extra={"event_type": event.event_type, "seq": seq},
        )
        return record

    def validate_chain(self) -> bool:
        """
        Validate the entire notification log.

        Returns:
            True when every stored hash and link matches.

        Raises:
            EventChainBrokenError: at the first mismatch.
        """
        records = self.session.execute(
            select(PlatformEventRecord).order_by(PlatformEventRecord.seq)
        ).scalars().all()

        prev_hash: str | None = None
        for record in records:
            if record.prev_hash != prev_hash:
                logger.critical(
                    "event_chain_broken",
                    extra={"seq": record.seq, "check": "link"},
                )
                raise EventChainBrokenError(record.seq, str(prev_hash), record.prev_hash)

            expected = hash_platform_event(
                seq=record.seq,
                event_type=record.event_type,
                payload_hash=hash_payload(record.payload),
                prev_hash=record.prev_hash,
            )
            if record.hash != expected:
                logger.critical(
                    "event_chain_broken",
                    extra={"seq": record.seq, "check": "hash"},
                )
                raise EventChainBrokenError(record.seq, expected, record.hash)

            prev_hash = record.hash

        return True
