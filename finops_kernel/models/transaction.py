"""
Module: finops_kernel.models.transaction
Responsibility: ORM persistence for recorded transactions and the per-user
    transaction index.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - id is allocated by SequenceService("transaction"), starting at 1.
    - sender, recipient, amount and description are write-once; the
      service layer only ever assigns ``status`` and ``updated_at``.
    - amount > 0 (ck_transactions_positive_amount guards the stored string).
    - The index holds one row per (transaction, party role): a self-transfer
      produces two rows for the same identity.
"""

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from finops_kernel.db.base import Base, TrackedBase
from finops_kernel.db.types import UInt256
from finops_kernel.domain.lifecycle import TxStatus


class Transaction(TrackedBase):
    """
    Recorded value transfer between two identities.

    Contract:
        Created PENDING by its sender.  Moves to ACTIVE or REJECTED only via
        the approval workflow and from ACTIVE to COMPLETED only by its
        sender.  COMPLETED and REJECTED are terminal.
    """

    __tablename__ = "transactions"

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'active', 'completed', 'rejected')",
            name="ck_transactions_valid_status",
        ),
        CheckConstraint(
            "amount <> '" + "0" * 78 + "'",
            name="ck_transactions_positive_amount",
        ),
        Index("idx_transaction_sender", "sender"),
        Index("idx_transaction_status", "status"),
    )

    id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
    )

    sender: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
    )

    recipient: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
    )

    amount: Mapped[int] = mapped_column(
        UInt256(),
        nullable=False,
    )

    description: Mapped[str] = mapped_column(
        String(4000),
        nullable=False,
        default="",
    )

    status: Mapped[TxStatus] = mapped_column(
        String(20),
        nullable=False,
        default=TxStatus.PENDING,
    )

    def __repr__(self) -> str:
        return (
            f"<Transaction {self.id}: {self.sender} -> {self.recipient} "
            f"{self.amount} ({TxStatus(self.status).value})>"
        )


class UserTransactionIndex(Base):
    """
    Per-user, insertion-ordered transaction index.

    ``seq`` comes from SequenceService("user_transaction_index") so ordering
    is global insertion order; filtering by identity yields each user's
    list in the order entries were appended.
    """

    __tablename__ = "user_transaction_index"

    __table_args__ = (
        Index("idx_user_tx_identity_seq", "identity", "seq"),
    )

    seq: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
    )

    identity: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
    )

    transaction_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("transactions.id"),
        nullable=False,
    )

    # "sender" or "recipient"
    party_role: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )
