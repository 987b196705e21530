"""Read access to the notification log."""

from sqlalchemy import select

from finops_kernel.domain.dtos import EventInfo
from finops_kernel.models.platform_event import PlatformEventRecord
from finops_kernel.selectors.base import BaseSelector


class EventSelector(BaseSelector):
    """Queries over ``platform_events``."""

    def since(self, since_seq: int = 0, event_type: str | None = None) -> list[EventInfo]:
        """Events with ``seq > since_seq`` in log order, optionally one type."""
        stmt = (
            select(PlatformEventRecord)
            .where(PlatformEventRecord.seq > since_seq)
            .order_by(PlatformEventRecord.seq)
        )
        if event_type is not None:
            stmt = stmt.where(PlatformEventRecord.event_type == event_type)

        return [
            EventInfo(
                seq=r.seq,
                event_type=r.event_type,
                payload=dict(r.payload),
                occurred_at=r.occurred_at,
                hash=r.hash,
                prev_hash=r.prev_hash,
            )
            for r in self.session.execute(stmt).scalars()
        ]
