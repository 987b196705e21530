"""Kernel services.  Services flush; FinancialPlatform commits."""

from finops_kernel.services.access_control import AccessControl
from finops_kernel.services.approval_workflow import ApprovalWorkflow
from finops_kernel.services.base import BaseService
from finops_kernel.services.event_recorder import EventRecorder
from finops_kernel.services.sequence_service import SequenceService
from finops_kernel.services.transaction_ledger import TransactionLedger
from finops_kernel.services.user_registry import UserRegistry

__all__ = [
    "BaseService",
    "AccessControl",
    "EventRecorder",
    "SequenceService",
    "UserRegistry",
    "TransactionLedger",
    "ApprovalWorkflow",
]
