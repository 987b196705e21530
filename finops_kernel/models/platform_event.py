"""
Module: finops_kernel.models.platform_event
Responsibility: Append-only, hash-chained notification log.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - seq is unique and monotonically increasing.
    - hash = H(seq | event_type | payload_hash | prev_hash); prev_hash is
      None only for the first event.
    - Rows are written in the same database transaction as the mutation
      they describe, so a refused command leaves no event behind.
"""

from datetime import datetime

from sqlalchemy import JSON, BigInteger, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from finops_kernel.db.base import Base
from finops_kernel.db.types import UTCDateTime


class PlatformEventRecord(Base):
    """Persisted notification."""

    __tablename__ = "platform_events"

    __table_args__ = (
        Index("idx_platform_event_type", "event_type"),
    )

    seq: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
    )

    event_type: Mapped[str] = mapped_column(String(50), nullable=False)

    payload: Mapped[dict] = mapped_column(JSON, nullable=False)

    actor: Mapped[str | None] = mapped_column(String(128), nullable=True)

    occurred_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False,
    )

    payload_hash: Mapped[str] = mapped_column(String(64), nullable=False)

    prev_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)

    hash: Mapped[str] = mapped_column(String(64), nullable=False)

    @property
    def is_genesis(self) -> bool:
        return self.prev_hash is None

    def __repr__(self) -> str:
        return f"<PlatformEventRecord {self.seq}: {self.event_type}>"
