"""Pure domain layer: roles, lifecycles, DTOs, events, clock.  No I/O."""

from finops_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from finops_kernel.domain.dtos import ApprovalInfo, EventInfo, TransactionInfo, UserInfo
from finops_kernel.domain.events import (
    ApprovalProcessed,
    ApprovalRequested,
    PlatformEvent,
    TransactionCompleted,
    TransactionCreated,
    UserRegistered,
    UserRoleUpdated,
)
from finops_kernel.domain.lifecycle import (
    APPROVAL_TRANSITIONS,
    TRANSACTION_TRANSITIONS,
    ApprovalStatus,
    TxStatus,
)
from finops_kernel.domain.roles import Role, is_admin, is_approver

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "UserInfo",
    "TransactionInfo",
    "ApprovalInfo",
    "EventInfo",
    "PlatformEvent",
    "UserRegistered",
    "UserRoleUpdated",
    "TransactionCreated",
    "TransactionCompleted",
    "ApprovalRequested",
    "ApprovalProcessed",
    "TxStatus",
    "ApprovalStatus",
    "TRANSACTION_TRANSITIONS",
    "APPROVAL_TRANSITIONS",
    "Role",
    "is_admin",
    "is_approver",
]
