"""
Module: finops_kernel.models.approval
Responsibility: ORM persistence for approval requests and their disposition.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - id is allocated by SequenceService("approval"), starting at 1, and is
      independent of transaction ids.
    - Status values limited by ck_approvals_valid_status; the service layer
      enforces the one-way PENDING -> APPROVED/REJECTED transition.
    - ``reason`` holds the request reason until processing, then the
      approver's note (overwritten, not appended).
"""

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from finops_kernel.db.base import Base
from finops_kernel.db.types import UTCDateTime
from finops_kernel.domain.lifecycle import ApprovalStatus


class Approval(Base):
    """Approval request for one transaction."""

    __tablename__ = "approvals"

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_approvals_valid_status",
        ),
        Index("idx_approval_status_id", "status", "id"),
        Index("idx_approval_transaction", "transaction_id", "status"),
    )

    id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
    )

    transaction_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("transactions.id"),
        nullable=False,
    )

    requester: Mapped[str] = mapped_column(String(128), nullable=False)

    approver: Mapped[str | None] = mapped_column(String(128), nullable=True)

    status: Mapped[ApprovalStatus] = mapped_column(
        String(20),
        nullable=False,
        default=ApprovalStatus.PENDING,
    )

    reason: Mapped[str] = mapped_column(String(4000), nullable=False, default="")

    requested_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False,
    )

    processed_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime(), nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<Approval {self.id} for transaction {self.transaction_id} "
            f"({ApprovalStatus(self.status).value})>"
        )
