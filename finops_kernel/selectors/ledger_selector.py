"""
Module: finops_kernel.selectors.ledger_selector
Responsibility: Read access to recorded transactions and the per-user index.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - ``user_transaction_ids`` preserves insertion order and does NOT
      deduplicate: a self-transfer is listed once as sender and once as
      recipient.
"""

from sqlalchemy import func, select

from finops_kernel.domain.dtos import TransactionInfo
from finops_kernel.domain.lifecycle import TxStatus
from finops_kernel.exceptions import TransactionNotFoundError
from finops_kernel.models.transaction import Transaction, UserTransactionIndex
from finops_kernel.selectors.base import BaseSelector


def transaction_to_dto(tx: Transaction) -> TransactionInfo:
    return TransactionInfo(
        id=tx.id,
        sender=tx.sender,
        recipient=tx.recipient,
        amount=tx.amount,
        description=tx.description,
        status=TxStatus(tx.status),
        created_at=tx.created_at,
        updated_at=tx.updated_at,
    )


class LedgerSelector(BaseSelector):
    """Queries over ``transactions`` and ``user_transaction_index``."""

    def get_transaction(self, transaction_id: int) -> TransactionInfo:
        """
        Raises:
            TransactionNotFoundError: If the id is unknown.
        """
        tx = self.session.get(Transaction, transaction_id)
        if tx is None:
            raise TransactionNotFoundError(transaction_id)
        return transaction_to_dto(tx)

    def transaction_count(self) -> int:
        return self.session.execute(
            select(func.count()).select_from(Transaction)
        ).scalar_one()

    def user_transaction_ids(self, identity: str) -> list[int]:
        """Transaction ids touching ``identity``, in insertion order."""
        stmt = (
            select(UserTransactionIndex.transaction_id)
            .where(UserTransactionIndex.identity == identity)
            .order_by(UserTransactionIndex.seq)
        )
        return list(self.session.execute(stmt).scalars())

