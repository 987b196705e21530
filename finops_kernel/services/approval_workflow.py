"""
ApprovalWorkflow -- approval requests and their resolution.

Responsibility:
    Lets a transaction's owner request approval and lets an approver
    (Manager or Admin) resolve the request, which in turn activates or
    rejects the transaction.

Architecture position:
    Kernel > Services.  Depends on AccessControl for the approver check
    and on TransactionLedger for transaction state changes.

Invariants enforced:
    - An approval moves PENDING -> APPROVED / REJECTED exactly once.
    - Resolving an approval and transitioning its transaction happen in
      the same unit of work.
    - At most one PENDING approval per transaction, and only while the
      transaction itself is PENDING.

Failure modes:
    - TransactionNotFoundError, NotOwnerError, TransactionNotPendingError,
      DuplicateApprovalRequestError from ``request_approval``.
    - ApprovalNotFoundError, UnauthorizedError,
      ApprovalAlreadyProcessedError from ``process_approval``.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from finops_kernel.domain.clock import Clock
from finops_kernel.domain.dtos import ApprovalInfo
from finops_kernel.domain.events import ApprovalProcessed, ApprovalRequested
from finops_kernel.domain.lifecycle import (
    ApprovalStatus,
    TxStatus,
    approval_status_for_decision,
    can_transition_approval,
    transaction_status_for_decision,
)
from finops_kernel.exceptions import (
    ApprovalAlreadyProcessedError,
    ApprovalNotFoundError,
    DuplicateApprovalRequestError,
    NotOwnerError,
    TransactionNotPendingError,
    UnauthorizedError,
)
from finops_kernel.logging_config import get_logger
from finops_kernel.models.approval import Approval
from finops_kernel.selectors.approval_selector import ApprovalSelector, approval_to_dto
from finops_kernel.services.access_control import AccessControl
from finops_kernel.services.base import BaseService
from finops_kernel.services.event_recorder import EventRecorder
from finops_kernel.services.sequence_service import SequenceService
from finops_kernel.services.transaction_ledger import TransactionLedger

logger = get_logger("services.approval_workflow")


class ApprovalWorkflow(BaseService):
    """
    Service for the approval request lifecycle.

    All public methods return DTOs or ids, not ORM Approval entities.
    """

    def __init__(
        self,
        session: Session,
        access_control: AccessControl,
        ledger: TransactionLedger,
        events: EventRecorder,
        clock: Clock | None = None,
    ):
        super().__init__(session, clock)
        self._access = access_control
        self._ledger = ledger
        self._events = events
        self._sequence_service = SequenceService(session)
        self._selector = ApprovalSelector(session)

    def _get_by_id(self, approval_id: int) -> Approval:
        """Get approval by id, raising if not found."""
        approval = self.session.get(Approval, approval_id)
        if approval is None:
            raise ApprovalNotFoundError(approval_id)
        return approval

    def _pending_for_transaction(self, transaction_id: int) -> Approval | None:
        return self.session.execute(
            select(Approval)
            .where(Approval.transaction_id == transaction_id)
            .where(Approval.status == ApprovalStatus.PENDING.value)
            .order_by(Approval.id)
            .limit(1)
        ).scalar_one_or_none()

    def request_approval(self, caller: str, transaction_id: int, reason: str = "") -> int:
        """
        Open an approval request for a PENDING transaction.

        Args:
            caller: Must be the transaction's sender.
            transaction_id: Transaction to approve.
            reason: Free text shown to approvers.

        Returns:
            The new approval id.

        Raises:
            TransactionNotFoundError: If the transaction is unknown.
            NotOwnerError: If caller is not the sender.
            TransactionNotPendingError: If the transaction left PENDING.
            DuplicateApprovalRequestError: If a request is already open.
        """
        tx = self._ledger.get_for_update(transaction_id)
        if tx.sender != caller:
            raise NotOwnerError(transaction_id, caller)
        if TxStatus(tx.status) != TxStatus.PENDING:
            raise TransactionNotPendingError(transaction_id, TxStatus(tx.status).value)

        existing = self._pending_for_transaction(transaction_id)
        if existing is not None:
            raise DuplicateApprovalRequestError(transaction_id, existing.id)

        approval_id = self._sequence_service.next_value(SequenceService.APPROVAL)
        approval = Approval(
            id=approval_id,
            transaction_id=transaction_id,
            requester=caller,
            approver=None,
            status=ApprovalStatus.PENDING.value,
            reason=reason or "",
            requested_at=self._clock.now(),
        )
        self.session.add(approval)
        self.session.flush()

        self._events.record(
            ApprovalRequested(
                approval_id=approval_id,
                transaction_id=transaction_id,
                requester=caller,
            ),
            actor=caller,
        )
        logger.info(
            "approval_requested",
            extra={"approval_id": approval_id, "transaction_id": transaction_id},
        )
        return approval_id

    def process_approval(
        self,
        caller: str,
        approval_id: int,
        approve: bool,
        note: str = "",
    ) -> ApprovalInfo:
        """
        Resolve a PENDING approval and transition its transaction.

        ``note`` replaces the original request reason.

        Raises:
            ApprovalNotFoundError: If the approval is unknown.
            UnauthorizedError: If caller is not a Manager or Admin.
            ApprovalAlreadyProcessedError: If the approval is resolved.
        """
        approval = self._get_by_id(approval_id)

        if not self._access.is_approver(caller):
            logger.warning(
                "approver_check_failed",
                extra={"caller": caller, "approval_id": approval_id},
            )
            raise UnauthorizedError(caller, "approver")

        current = ApprovalStatus(approval.status)
        target = approval_status_for_decision(approve)
        if not can_transition_approval(current, target):
            raise ApprovalAlreadyProcessedError(approval_id, current.value)

        approval.approver = caller
        approval.status = target.value
        approval.reason = note or ""
        approval.processed_at = self._clock.now()
        self.session.flush()

        tx = self._ledger.get_for_update(approval.transaction_id)
        self._ledger.transition(tx, transaction_status_for_decision(approve))

        self._events.record(
            ApprovalProcessed(
                approval_id=approval_id,
                transaction_id=approval.transaction_id,
                approver=caller,
            ),
            actor=caller,
        )
        logger.info(
            "approval_processed",
            extra={
                "approval_id": approval_id,
                "transaction_id": approval.transaction_id,
                "decision": target.value,
            },
        )
        return approval_to_dto(approval)

    def get_approval(self, approval_id: int) -> ApprovalInfo:
        return self._selector.get(approval_id)

    def get_pending_approvals(self) -> list[ApprovalInfo]:
        return self._selector.pending()
