"""
Notification events (``finops_kernel.domain.events``).

Frozen records emitted on successful mutation.  Observers consume them; the
kernel's correctness never depends on them being observed.

Each event knows its ``event_type`` name and how to render itself as a JSON
payload for the persisted log, and can be rebuilt from that payload.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar


@dataclass(frozen=True)
class PlatformEvent:
    """Base class for notification events."""

    event_type: ClassVar[str] = "PlatformEvent"

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class UserRegistered(PlatformEvent):
    event_type: ClassVar[str] = "UserRegistered"

    identity: str
    role: str


@dataclass(frozen=True)
class UserRoleUpdated(PlatformEvent):
    event_type: ClassVar[str] = "UserRoleUpdated"

    identity: str
    old_role: str
    new_role: str


@dataclass(frozen=True)
class TransactionCreated(PlatformEvent):
    event_type: ClassVar[str] = "TransactionCreated"

    transaction_id: int
    sender: str
    recipient: str
    amount: int

    def to_payload(self) -> dict[str, Any]:
        # JSON numbers lose precision above 2**53
        payload = asdict(self)
        payload["amount"] = str(self.amount)
        return payload


@dataclass(frozen=True)
class TransactionCompleted(PlatformEvent):
    event_type: ClassVar[str] = "TransactionCompleted"

    transaction_id: int
    sender: str


@dataclass(frozen=True)
class ApprovalRequested(PlatformEvent):
    event_type: ClassVar[str] = "ApprovalRequested"

    approval_id: int
    transaction_id: int
    requester: str


@dataclass(frozen=True)
class ApprovalProcessed(PlatformEvent):
    event_type: ClassVar[str] = "ApprovalProcessed"

    approval_id: int
    transaction_id: int
    approver: str


EVENT_TYPES: dict[str, type[PlatformEvent]] = {
    cls.event_type: cls
    for cls in (
        UserRegistered,
        UserRoleUpdated,
        TransactionCreated,
        TransactionCompleted,
        ApprovalRequested,
        ApprovalProcessed,
    )
}


def event_from_payload(event_type: str, payload: dict[str, Any]) -> PlatformEvent:
    """Rebuild a typed event from a persisted log payload."""
    cls = EVENT_TYPES[event_type]
    data = dict(payload)
    if cls is TransactionCreated:
        data["amount"] = int(data["amount"])
    return cls(**data)
