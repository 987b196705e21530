"""ORM models for the FinOps kernel."""

from finops_kernel.models.approval import Approval
from finops_kernel.models.platform_event import PlatformEventRecord
from finops_kernel.models.transaction import Transaction, UserTransactionIndex
from finops_kernel.models.user import User

__all__ = [
    "User",
    "Transaction",
    "UserTransactionIndex",
    "Approval",
    "PlatformEventRecord",
]
