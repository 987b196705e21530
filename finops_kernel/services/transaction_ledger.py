"""
TransactionLedger -- recorded value transfers and the per-user index.

Responsibility:
    Creates transactions on behalf of registered senders, indexes them for
    both parties, and lets the owner complete an approved transaction.
    Status changes go through ``transition()``, which consults the
    transaction state machine in ``domain.lifecycle``.

Architecture position:
    Kernel > Services.  Used by ApprovalWorkflow for PENDING -> ACTIVE /
    REJECTED transitions.

Invariants enforced:
    - Ids are allocated by SequenceService only after every check passes,
      so a refused request consumes nothing.
    - sender, recipient, amount and description are never rewritten.
    - Index rows are appended sender first, then recipient.

Failure modes:
    - UserNotRegisteredError / UserInactiveError for the caller.
    - InvalidAmountError for zero, negative, non-integer or > 2**256 - 1.
    - InvalidRecipientError for the null identity, and for unregistered
      recipients when ``require_registered_recipient`` is set.
    - TransactionNotFoundError, NotOwnerError, TransactionNotActiveError
      from ``complete_transaction``.
"""

from sqlalchemy.orm import Session

from finops_kernel.db.types import is_null_identity
from finops_kernel.domain.clock import Clock
from finops_kernel.domain.dtos import TransactionInfo
from finops_kernel.domain.events import TransactionCompleted, TransactionCreated
from finops_kernel.domain.lifecycle import TxStatus, can_transition_transaction
from finops_kernel.domain.values import is_valid_amount
from finops_kernel.exceptions import (
    InvalidAmountError,
    InvalidRecipientError,
    InvalidTransactionTransitionError,
    NotOwnerError,
    TransactionNotActiveError,
    TransactionNotFoundError,
    UserInactiveError,
    UserNotRegisteredError,
)
from finops_kernel.logging_config import get_logger
from finops_kernel.models.transaction import Transaction, UserTransactionIndex
from finops_kernel.models.user import User
from finops_kernel.selectors.ledger_selector import LedgerSelector, transaction_to_dto
from finops_kernel.services.base import BaseService
from finops_kernel.services.event_recorder import EventRecorder
from finops_kernel.services.sequence_service import SequenceService

logger = get_logger("services.transaction_ledger")


class TransactionLedger(BaseService):
    """
    Service for recording and completing transactions.

    All public methods return DTOs or ids, not ORM Transaction entities.
    ``transition()`` and ``get_for_update()`` are for collaborating
    services inside the same unit of work.
    """

    def __init__(
        self,
        session: Session,
        events: EventRecorder,
        clock: Clock | None = None,
        require_registered_recipient: bool = False,
    ):
        super().__init__(session, clock)
        self._events = events
        self._sequence_service = SequenceService(session)
        self._selector = LedgerSelector(session)
        self._require_registered_recipient = require_registered_recipient

    def get_for_update(self, transaction_id: int) -> Transaction:
        """
        Get transaction by id, raising if not found.

        Raises:
            TransactionNotFoundError: If the id is unknown.
        """
        tx = self.session.get(Transaction, transaction_id)
        if tx is None:
            raise TransactionNotFoundError(transaction_id)
        return tx

    def transition(self, tx: Transaction, target: TxStatus) -> None:
        """
        Move ``tx`` to ``target`` if the state machine allows it.

        Raises:
            InvalidTransactionTransitionError: If the edge does not exist.
        """
        current = TxStatus(tx.status)
        if not can_transition_transaction(current, target):
            raise InvalidTransactionTransitionError(tx.id, current.value, TxStatus(target).value)

        tx.status = TxStatus(target).value
        tx.updated_at = self._clock.now()
        self.session.flush()

        logger.info(
            "transaction_status_changed",
            extra={
                "transaction_id": tx.id,
                "from_status": current.value,
                "to_status": TxStatus(target).value,
            },
        )

    def _require_active_sender(self, caller: str) -> None:
        user = None if is_null_identity(caller) else self.session.get(User, caller)
        if user is None:
            raise UserNotRegisteredError(caller)
        if not user.is_active:
            raise UserInactiveError(caller)

    def _check_recipient(self, to: str | None) -> None:
        if is_null_identity(to):
            raise InvalidRecipientError(to)
        if self._require_registered_recipient and self.session.get(User, to) is None:
            raise InvalidRecipientError(to, "recipient not registered")

    def _append_index(self, identity: str, transaction_id: int, party_role: str) -> None:
        seq = self._sequence_service.next_value(SequenceService.USER_TRANSACTION_INDEX)
        self.session.add(
            UserTransactionIndex(
                seq=seq,
                identity=identity,
                transaction_id=transaction_id,
                party_role=party_role,
            )
        )

    def create_transaction(
        self,
        caller: str,
        to: str,
        amount: int,
        description: str = "",
    ) -> int:
        """
        Record a PENDING transfer from ``caller`` to ``to``.

        Args:
            caller: Sender; becomes the transaction owner.
            to: Recipient identity.
            amount: Positive integer no larger than 2**256 - 1.
            description: Free text.

        Returns:
            The new transaction id.

        Raises:
            UserNotRegisteredError: If caller is unknown.
            UserInactiveError: If caller is deactivated.
            InvalidAmountError: If amount is out of range.
            InvalidRecipientError: If ``to`` is not acceptable.
        """
        self._require_active_sender(caller)
        if not is_valid_amount(amount):
            raise InvalidAmountError(amount)
        self._check_recipient(to)

        tx_id = self._sequence_service.next_value(SequenceService.TRANSACTION)
        now = self._clock.now()

        tx = Transaction(
            id=tx_id,
            sender=caller,
            recipient=to,
            amount=amount,
            description=description or "",
            status=TxStatus.PENDING.value,
            created_at=now,
            updated_at=now,
            created_by=caller,
        )
        self.session.add(tx)
        self.session.flush()

        self._append_index(caller, tx_id, "sender")
        self._append_index(to, tx_id, "recipient")
        self.session.flush()

        self._events.record(
            TransactionCreated(
                transaction_id=tx_id,
                sender=caller,
                recipient=to,
                amount=amount,
            ),
            actor=caller,
        )
        logger.info(
            "transaction_created",
            extra={"transaction_id": tx_id, "sender": caller, "recipient": to},
        )
        return tx_id

    def complete_transaction(self, caller: str, transaction_id: int) -> TransactionInfo:
        """
        Mark an ACTIVE transaction COMPLETED.

        Raises:
            TransactionNotFoundError: If the id is unknown.
            NotOwnerError: If caller is not the sender.
            TransactionNotActiveError: If the transaction is not ACTIVE.
        """
        tx = self.get_for_update(transaction_id)

        if tx.sender != caller:
            raise NotOwnerError(transaction_id, caller)
        if TxStatus(tx.status) != TxStatus.ACTIVE:
            raise TransactionNotActiveError(transaction_id, TxStatus(tx.status).value)

        self.transition(tx, TxStatus.COMPLETED)
        self._events.record(
            TransactionCompleted(transaction_id=transaction_id, sender=caller),
            actor=caller,
        )
        logger.info("transaction_completed", extra={"transaction_id": transaction_id})
        return transaction_to_dto(tx)

    def get_transaction(self, transaction_id: int) -> TransactionInfo:
        return self._selector.get_transaction(transaction_id)

    def get_user_transactions(self, identity: str) -> list[int]:
        return self._selector.user_transaction_ids(identity)

    def get_transaction_count(self) -> int:
        return self._selector.transaction_count()
