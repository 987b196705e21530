"""Read access to the participant registry."""

from sqlalchemy import func, select

from finops_kernel.domain.dtos import UserInfo
from finops_kernel.domain.roles import Role
from finops_kernel.exceptions import UserNotFoundError
from finops_kernel.models.user import User
from finops_kernel.selectors.base import BaseSelector


def user_to_dto(user: User) -> UserInfo:
    return UserInfo(
        identity=user.identity,
        name=user.name,
        email=user.email,
        role=Role(user.role),
        is_active=user.is_active,
        created_at=user.created_at,
    )


class UserSelector(BaseSelector):
    """Queries over the ``users`` table."""

    def find(self, identity: str | None) -> UserInfo | None:
        """User for ``identity``, or None if unregistered."""
        if identity is None:
            return None
        user = self.session.get(User, identity)
        return user_to_dto(user) if user else None

    def get(self, identity: str) -> UserInfo:
        """
        Raises:
            UserNotFoundError: If the identity is not registered.
        """
        user = self.find(identity)
        if user is None:
            raise UserNotFoundError(identity)
        return user

    def count(self) -> int:
        return self.session.execute(
            select(func.count()).select_from(User)
        ).scalar_one()

