"""Read-only query selectors."""

from finops_kernel.selectors.approval_selector import ApprovalSelector
from finops_kernel.selectors.base import BaseSelector
from finops_kernel.selectors.event_selector import EventSelector
from finops_kernel.selectors.ledger_selector import LedgerSelector
from finops_kernel.selectors.user_selector import UserSelector

__all__ = [
    "BaseSelector",
    "UserSelector",
    "LedgerSelector",
    "ApprovalSelector",
    "EventSelector",
]
