"""
Roles and capability predicates (``finops_kernel.domain.roles``).

Responsibility
--------------
Defines the participant roles and the two capabilities the kernel gates on:
*approver* (may process approvals) and *admin* (may register users and
change roles).

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Capabilities are explicit set membership.  Role values are strings, so
reordering or adding roles can never silently widen a capability.
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Participant capability tier."""

    REGULAR = "regular"
    MANAGER = "manager"
    ADMIN = "admin"


APPROVER_ROLES: frozenset[Role] = frozenset({Role.MANAGER, Role.ADMIN})
ADMIN_ROLES: frozenset[Role] = frozenset({Role.ADMIN})


def is_approver(role: Role | str) -> bool:
    """Manager and Admin may approve; Regular may not."""
    return Role(role) in APPROVER_ROLES


def is_admin(role: Role | str) -> bool:
    """Only Admin may register users and reassign roles."""
    return Role(role) in ADMIN_ROLES


def satisfies(held: Role | str, required: Role | str) -> bool:
    """
    Whether a held role satisfies a requested capability.

    ADMIN requires an exact match, MANAGER is the approver capability, and
    REGULAR is satisfied by any role.
    """
    held = Role(held)
    required = Role(required)
    if required is Role.ADMIN:
        return is_admin(held)
    if required is Role.MANAGER:
        return is_approver(held)
    return True
