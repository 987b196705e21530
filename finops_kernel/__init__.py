"""
FinOps Kernel - permissioned financial-operations ledger.

A role-constrained ledger with:
- A participant registry with Regular / Manager / Admin roles
- Transactions that record (never move) value between participants
- An approval workflow gating Pending -> Active / Rejected
- Atomic, serialized mutations over a single relational store
- A hash-chained notification log for auditability
"""

__version__ = "0.1.0"

from finops_kernel.domain.dtos import ApprovalInfo, EventInfo, TransactionInfo, UserInfo
from finops_kernel.domain.lifecycle import ApprovalStatus, TxStatus
from finops_kernel.domain.roles import Role
from finops_kernel.platform import FinancialPlatform

__all__ = [
    "FinancialPlatform",
    "Role",
    "TxStatus",
    "ApprovalStatus",
    "UserInfo",
    "TransactionInfo",
    "ApprovalInfo",
    "EventInfo",
]
