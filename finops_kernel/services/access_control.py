"""
AccessControl -- role-membership checks over the participant registry.

Responsibility:
    Answers "does identity X hold capability R" for every mutating command.
    Pure reads: never raises, never mutates.  Callers decide which error
    to surface when a check fails.

Architecture position:
    Kernel > Services.  Leaf component: depends only on the users table
    and the pure predicates in ``domain.roles``.
"""

from sqlalchemy.orm import Session

from finops_kernel.db.types import is_null_identity
from finops_kernel.domain.roles import Role, satisfies
from finops_kernel.models.user import User


class AccessControl:
    """
    Capability checks.

    Guarantees:
        - Unknown or null identities hold no role.
        - Unknown role values are held by nobody.
        - Inactive users hold no role.
        - ADMIN is matched exactly; MANAGER means "approver" (Manager or
          Admin); REGULAR is held by every registered active user.
    """

    def __init__(self, session: Session):
        self._session = session

    def role_of(self, identity: str | None) -> Role | None:
        """Current role of an active user, or None."""
        if is_null_identity(identity):
            return None
        user = self._session.get(User, identity)
        if user is None or not user.is_active:
            return None
        return Role(user.role)

    def has_role(self, identity: str | None, role: Role | str) -> bool:
        """False for unknown role values as well as missing capabilities."""
        try:
            required = Role(role)
        except ValueError:
            return False
        held = self.role_of(identity)
        if held is None:
            return False
        return satisfies(held, required)

    def is_admin(self, identity: str | None) -> bool:
        return self.has_role(identity, Role.ADMIN)

    def is_approver(self, identity: str | None) -> bool:
        return self.has_role(identity, Role.MANAGER)
