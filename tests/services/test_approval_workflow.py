"""
Tests for ApprovalWorkflow.

Covers:
- Requesting approval (ownership, pending-only, one open request)
- Processing approval (approver role, one-shot resolution)
- Transaction transitions driven by the decision
- Pending queue ordering
"""

import pytest

from finops_kernel.domain.lifecycle import ApprovalStatus, TxStatus
from finops_kernel.exceptions import (
    ApprovalAlreadyProcessedError,
    ApprovalNotFoundError,
    DuplicateApprovalRequestError,
    NotOwnerError,
    TransactionNotFoundError,
    TransactionNotPendingError,
    UnauthorizedError,
)


@pytest.fixture
def ids(roster):
    return {key: info.identity for key, info in roster.items()}


@pytest.fixture
def pending_tx(ids, transaction_ledger):
    """Alice -> Bob, PENDING."""
    return transaction_ledger.create_transaction(ids["alice"], ids["bob"], 1000, "Test transaction")


@pytest.fixture
def requested(ids, pending_tx, approval_workflow):
    """Approval id for ``pending_tx``."""
    return approval_workflow.request_approval(ids["alice"], pending_tx, "Need approval")


class TestRequestApproval:

    def test_request_creates_pending(self, ids, pending_tx, requested, approval_workflow):
        approval = approval_workflow.get_approval(requested)

        assert requested == 1
        assert approval.transaction_id == pending_tx
        assert approval.requester == ids["alice"]
        assert approval.approver is None
        assert approval.status == ApprovalStatus.PENDING
        assert approval.reason == "Need approval"
        assert approval.processed_at is None

    def test_only_owner_may_request(self, ids, pending_tx, approval_workflow):
        with pytest.raises(NotOwnerError) as exc_info:
            approval_workflow.request_approval(ids["bob"], pending_tx, "Not my transaction")
        assert "Not transaction owner" in str(exc_info.value)
        assert approval_workflow.get_pending_approvals() == []

    def test_unknown_transaction(self, ids, approval_workflow):
        with pytest.raises(TransactionNotFoundError):
            approval_workflow.request_approval(ids["alice"], 42, "x")

    def test_second_open_request_refused(self, ids, pending_tx, requested, approval_workflow):
        with pytest.raises(DuplicateApprovalRequestError) as exc_info:
            approval_workflow.request_approval(ids["alice"], pending_tx, "again")
        assert exc_info.value.existing_approval_id == requested

    def test_resolved_transaction_refused(self, ids, pending_tx, requested, approval_workflow):
        """Once approved the transaction is ACTIVE and cannot be re-requested."""
        approval_workflow.process_approval(ids["manager"], requested, True, "ok")
        with pytest.raises(TransactionNotPendingError):
            approval_workflow.request_approval(ids["alice"], pending_tx, "again")

    def test_approval_ids_independent_of_transactions(
        self, ids, transaction_ledger, approval_workflow
    ):
        transaction_ledger.create_transaction(ids["alice"], ids["bob"], 1, "1")
        second = transaction_ledger.create_transaction(ids["alice"], ids["bob"], 2, "2")
        assert approval_workflow.request_approval(ids["alice"], second, "x") == 1

    def test_request_recorded(self, ids, pending_tx, requested, event_recorder):
        event = event_recorder.emitted[-1]
        assert event.event_type == "ApprovalRequested"
        assert (event.approval_id, event.transaction_id, event.requester) == (
            requested, pending_tx, ids["alice"],
        )


class TestProcessApproval:

    def test_approve_activates_transaction(
        self, ids, pending_tx, requested, approval_workflow, transaction_ledger
    ):
        approval = approval_workflow.process_approval(ids["approver"], requested, True, "Approved")

        assert approval.status == ApprovalStatus.APPROVED
        assert approval.approver == ids["approver"]
        assert approval.reason == "Approved"
        assert approval.processed_at is not None
        assert transaction_ledger.get_transaction(pending_tx).status == TxStatus.ACTIVE

    def test_reject_rejects_transaction(
        self, ids, pending_tx, requested, approval_workflow, transaction_ledger
    ):
        approval = approval_workflow.process_approval(ids["approver"], requested, False, "Rejected")

        assert approval.status == ApprovalStatus.REJECTED
        assert transaction_ledger.get_transaction(pending_tx).status == TxStatus.REJECTED

    def test_admin_may_approve(self, ids, requested, approval_workflow):
        approval = approval_workflow.process_approval(ids["admin"], requested, True, "ok")
        assert approval.approver == ids["admin"]

    def test_regular_user_refused(self, ids, pending_tx, requested, approval_workflow, transaction_ledger):
        with pytest.raises(UnauthorizedError) as exc_info:
            approval_workflow.process_approval(ids["bob"], requested, True, "Not authorized")

        assert "Not authorized" in str(exc_info.value)
        assert approval_workflow.get_approval(requested).status == ApprovalStatus.PENDING
        assert transaction_ledger.get_transaction(pending_tx).status == TxStatus.PENDING

    def test_requester_cannot_self_approve(self, ids, requested, approval_workflow):
        with pytest.raises(UnauthorizedError):
            approval_workflow.process_approval(ids["alice"], requested, True, "mine")

    @pytest.mark.parametrize("second_decision", [True, False])
    def test_already_processed(
        self, ids, pending_tx, requested, approval_workflow, transaction_ledger, second_decision
    ):
        """A resolved approval stays resolved whatever the second decision."""
        approval_workflow.process_approval(ids["approver"], requested, True, "Approved")

        with pytest.raises(ApprovalAlreadyProcessedError) as exc_info:
            approval_workflow.process_approval(ids["manager"], requested, second_decision, "again")

        assert "Approval already processed" in str(exc_info.value)
        approval = approval_workflow.get_approval(requested)
        assert approval.approver == ids["approver"]
        assert approval.reason == "Approved"
        assert transaction_ledger.get_transaction(pending_tx).status == TxStatus.ACTIVE

    def test_unknown_approval(self, ids, approval_workflow):
        with pytest.raises(ApprovalNotFoundError):
            approval_workflow.process_approval(ids["manager"], 7, True, "x")

    def test_processing_recorded(self, ids, pending_tx, requested, approval_workflow, event_recorder):
        approval_workflow.process_approval(ids["approver"], requested, True, "Approved")

        event = event_recorder.emitted[-1]
        assert event.event_type == "ApprovalProcessed"
        assert (event.approval_id, event.transaction_id, event.approver) == (
            requested, pending_tx, ids["approver"],
        )


class TestPendingApprovals:

    def test_only_pending_in_ascending_order(self, ids, transaction_ledger, approval_workflow):
        t1 = transaction_ledger.create_transaction(ids["alice"], ids["bob"], 1000, "1")
        t2 = transaction_ledger.create_transaction(ids["bob"], ids["alice"], 500, "2")
        t3 = transaction_ledger.create_transaction(ids["alice"], ids["bob"], 300, "3")
        a1 = approval_workflow.request_approval(ids["alice"], t1, "Approval 1")
        a2 = approval_workflow.request_approval(ids["bob"], t2, "Approval 2")
        a3 = approval_workflow.request_approval(ids["alice"], t3, "Approval 3")

        approval_workflow.process_approval(ids["approver"], a1, True, "Approved")

        assert [a.id for a in approval_workflow.get_pending_approvals()] == [a2, a3]

    def test_empty_queue(self, roster, approval_workflow):
        assert approval_workflow.get_pending_approvals() == []
