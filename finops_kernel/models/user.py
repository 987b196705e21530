"""
Module: finops_kernel.models.user
Responsibility: ORM persistence for registered participants.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - identity is the primary key: a second registration for the same
      identity violates the key even if a service check were bypassed.
    - Users are never deleted.  Only ``role`` changes after registration.

Failure modes:
    - IntegrityError on duplicate identity (pk_users).
"""

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from finops_kernel.db.base import TrackedBase
from finops_kernel.domain.roles import Role


class User(TrackedBase):
    """
    Registered participant.

    Guarantees:
        - identity is globally unique.
        - role is one of Role's values, stored as its string value.
        - is_active starts True; no public operation clears it.
    """

    __tablename__ = "users"

    __table_args__ = (
        Index("idx_user_role", "role"),
    )

    identity: Mapped[str] = mapped_column(
        String(128),
        primary_key=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    role: Mapped[Role] = mapped_column(
        String(20),
        nullable=False,
        default=Role.REGULAR,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    def __repr__(self) -> str:
        return f"<User {self.identity}: {self.name} ({Role(self.role).value})>"
