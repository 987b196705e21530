"""
Lifecycle state machines (``finops_kernel.domain.lifecycle``).

Responsibility
--------------
Status enums and transition tables for transactions and approvals.
Services consult these tables before persisting any status change.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Transaction::

    PENDING --(approval approved)--> ACTIVE --(owner completes)--> COMPLETED
    PENDING --(approval rejected)--> REJECTED

Approval::

    PENDING --> APPROVED
    PENDING --> REJECTED

Terminal states have no outgoing edges.
"""

from __future__ import annotations

from enum import Enum


class TxStatus(str, Enum):
    """Transaction lifecycle states."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    REJECTED = "rejected"


class ApprovalStatus(str, Enum):
    """Approval request lifecycle states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


TRANSACTION_TRANSITIONS: dict[TxStatus, frozenset[TxStatus]] = {
    TxStatus.PENDING: frozenset({TxStatus.ACTIVE, TxStatus.REJECTED}),
    TxStatus.ACTIVE: frozenset({TxStatus.COMPLETED}),
    TxStatus.COMPLETED: frozenset(),
    TxStatus.REJECTED: frozenset(),
}

APPROVAL_TRANSITIONS: dict[ApprovalStatus, frozenset[ApprovalStatus]] = {
    ApprovalStatus.PENDING: frozenset({
        ApprovalStatus.APPROVED,
        ApprovalStatus.REJECTED,
    }),
    ApprovalStatus.APPROVED: frozenset(),
    ApprovalStatus.REJECTED: frozenset(),
}

TERMINAL_TX_STATUSES: frozenset[TxStatus] = frozenset({
    TxStatus.COMPLETED,
    TxStatus.REJECTED,
})

TERMINAL_APPROVAL_STATUSES: frozenset[ApprovalStatus] = frozenset({
    ApprovalStatus.APPROVED,
    ApprovalStatus.REJECTED,
})


def can_transition_transaction(current: TxStatus | str, target: TxStatus | str) -> bool:
    return TxStatus(target) in TRANSACTION_TRANSITIONS[TxStatus(current)]


def can_transition_approval(
    current: ApprovalStatus | str, target: ApprovalStatus | str
) -> bool:
    return ApprovalStatus(target) in APPROVAL_TRANSITIONS[ApprovalStatus(current)]


def transaction_status_for_decision(approve: bool) -> TxStatus:
    """Transaction status that follows an approval decision."""
    return TxStatus.ACTIVE if approve else TxStatus.REJECTED


def approval_status_for_decision(approve: bool) -> ApprovalStatus:
    return ApprovalStatus.APPROVED if approve else ApprovalStatus.REJECTED
