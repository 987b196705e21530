"""Read access to approval requests."""

from sqlalchemy import select

from finops_kernel.domain.dtos import ApprovalInfo
from finops_kernel.domain.lifecycle import ApprovalStatus
from finops_kernel.exceptions import ApprovalNotFoundError
from finops_kernel.models.approval import Approval
from finops_kernel.selectors.base import BaseSelector


def approval_to_dto(approval: Approval) -> ApprovalInfo:
    return ApprovalInfo(
        id=approval.id,
        transaction_id=approval.transaction_id,
        requester=approval.requester,
        approver=approval.approver,
        status=ApprovalStatus(approval.status),
        reason=approval.reason,
        requested_at=approval.requested_at,
        processed_at=approval.processed_at,
    )


class ApprovalSelector(BaseSelector):
    """Queries over the ``approvals`` table."""

    def get(self, approval_id: int) -> ApprovalInfo:
        """
        Raises:
            ApprovalNotFoundError: If the id is unknown.
        """
        approval = self.session.get(Approval, approval_id)
        if approval is None:
            raise ApprovalNotFoundError(approval_id)
        return approval_to_dto(approval)

    def pending(self) -> list[ApprovalInfo]:
        """Every PENDING approval, ascending id."""
        stmt = (
            select(Approval)
            .where(Approval.status == ApprovalStatus.PENDING.value)
            .order_by(Approval.id)
        )
        return [approval_to_dto(a) for a in self.session.execute(stmt).scalars()]

    def for_transaction(self, transaction_id: int) -> list[ApprovalInfo]:
        """Full approval history of one transaction, ascending id."""
        stmt = (
            select(Approval)
            .where(Approval.transaction_id == transaction_id)
            .order_by(Approval.id)
        )
        return [approval_to_dto(a) for a in self.session.execute(stmt).scalars()]
