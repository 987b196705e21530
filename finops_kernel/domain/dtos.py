"""
Read DTOs (``finops_kernel.domain.dtos``).

Immutable views returned by every public read.  Callers never receive ORM
instances, so nothing outside the kernel can mutate shared records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from finops_kernel.domain.lifecycle import ApprovalStatus, TxStatus
from finops_kernel.domain.roles import Role, is_admin, is_approver


@dataclass(frozen=True)
class UserInfo:
    """Registered participant."""

    identity: str
    name: str
    email: str
    role: Role
    is_active: bool
    created_at: datetime | None = None

    @property
    def is_approver(self) -> bool:
        return is_approver(self.role)

    @property
    def is_admin(self) -> bool:
        return is_admin(self.role)


@dataclass(frozen=True)
class TransactionInfo:
    """
    Recorded value transfer.

    ``sender`` is the owner (the ``from`` party); ``recipient`` is ``to``.
    """

    id: int
    sender: str
    recipient: str
    amount: int
    description: str
    status: TxStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (TxStatus.COMPLETED, TxStatus.REJECTED)


@dataclass(frozen=True)
class ApprovalInfo:
    """Approval request and, once processed, its disposition."""

    id: int
    transaction_id: int
    requester: str
    approver: str | None
    status: ApprovalStatus
    reason: str
    requested_at: datetime | None = None
    processed_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == ApprovalStatus.PENDING


@dataclass(frozen=True)
class EventInfo:
    """One entry of the persisted notification log."""

    seq: int
    event_type: str
    payload: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime | None = None
    hash: str = ""
    prev_hash: str | None = None
