"""
Value validation (``finops_kernel.domain.values``).

Pure checks applied before any state is touched, so a rejected command
never allocates an id or writes a row.
"""

from __future__ import annotations

from finops_kernel.db.types import UINT256_MAX


def is_valid_amount(amount: object) -> bool:
    """
    Amounts are recorded values, not funds: a positive integer that fits
    in 256 bits.  ``bool`` is rejected even though it subclasses ``int``.
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        return False
    return 0 < amount <= UINT256_MAX
