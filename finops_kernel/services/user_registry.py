"""
UserRegistry -- participant identity and role bookkeeping.

Responsibility:
    Registers participants, reassigns roles, and performs the root-of-trust
    bootstrap that makes the initializing identity the first Admin.

Architecture position:
    Kernel > Services.  Depends on AccessControl for the Admin check and on
    EventRecorder for notifications.

Invariants enforced:
    - Identity uniqueness (service check plus the users primary key).
    - Registration and role changes are Admin-only.
    - Users are never deleted; only ``role`` changes after registration.

Failure modes:
    - UnauthorizedError if the caller is not an active Admin.
    - UserAlreadyRegisteredError on a duplicate identity.
    - InvalidIdentityError when registering the null identity.
    - InvalidRoleError when a role value is not a known Role.
    - UserNotFoundError when updating or reading an unknown identity.
"""

from sqlalchemy.orm import Session

from finops_kernel.db.types import is_null_identity
from finops_kernel.domain.clock import Clock
from finops_kernel.domain.dtos import UserInfo
from finops_kernel.domain.events import UserRegistered, UserRoleUpdated
from finops_kernel.domain.roles import Role
from finops_kernel.exceptions import (
    InvalidIdentityError,
    InvalidRoleError,
    UnauthorizedError,
    UserAlreadyRegisteredError,
    UserNotFoundError,
)
from finops_kernel.logging_config import get_logger
from finops_kernel.models.user import User
from finops_kernel.selectors.user_selector import UserSelector, user_to_dto
from finops_kernel.services.access_control import AccessControl
from finops_kernel.services.base import BaseService
from finops_kernel.services.event_recorder import EventRecorder

logger = get_logger("services.user_registry")


class UserRegistry(BaseService):
    """
    Service for registering participants and managing their roles.

    All public methods return UserInfo DTOs, not ORM User entities.
    """

    def __init__(
        self,
        session: Session,
        access_control: AccessControl,
        events: EventRecorder,
        clock: Clock | None = None,
    ):
        super().__init__(session, clock)
        self._access = access_control
        self._events = events
        self._selector = UserSelector(session)

    def _get_user(self, identity: str) -> User:
        """Get user by identity, raising if not found."""
        user = self.session.get(User, identity)
        if user is None:
            raise UserNotFoundError(identity)
        return user

    def _require_admin(self, caller: str) -> None:
        if not self._access.is_admin(caller):
            logger.warning(
                "admin_check_failed",
                extra={"caller": caller},
            )
            raise UnauthorizedError(caller, "admin")

    @staticmethod
    def _coerce_role(role: Role | str) -> Role:
        try:
            return Role(role)
        except ValueError:
            raise InvalidRoleError(role) from None

    def _insert(
        self,
        identity: str,
        name: str,
        email: str,
        role: Role,
        created_by: str,
    ) -> User:
        if is_null_identity(identity):
            raise InvalidIdentityError(identity)
        if self.session.get(User, identity) is not None:
            raise UserAlreadyRegisteredError(identity)

        now = self._clock.now()
        user = User(
            identity=identity,
            name=name,
            email=email,
            role=role.value,
            is_active=True,
            created_at=now,
            updated_at=now,
            created_by=created_by,
        )
        self.session.add(user)
        self.session.flush()

        self._events.record(
            UserRegistered(identity=identity, role=role.value),
            actor=created_by,
        )
        logger.info(
            "user_registered",
            extra={"identity": identity, "role": role.value},
        )
        return user

    def bootstrap_admin(self, identity: str, name: str, email: str) -> UserInfo:
        """
        Register the root-of-trust Admin.

        The only registration path without a caller check; run once by
        FinancialPlatform when it initializes an empty store.

        Raises:
            UserAlreadyRegisteredError: If ``identity`` is already present.
            InvalidIdentityError: If ``identity`` is the null identity.
        """
        user = self._insert(identity, name, email, Role.ADMIN, created_by=identity)
        logger.info("admin_bootstrapped", extra={"identity": identity})
        return user_to_dto(user)

    def register_user(
        self,
        caller: str,
        identity: str,
        name: str,
        email: str,
        role: Role | str = Role.REGULAR,
    ) -> UserInfo:
        """
        Register a new participant as active.

        Raises:
            UnauthorizedError: If caller is not an Admin.
            UserAlreadyRegisteredError: If the identity is already present.
            InvalidIdentityError: If ``identity`` is the null identity.
            InvalidRoleError: If ``role`` is not a known Role.
        """
        self._require_admin(caller)
        role = self._coerce_role(role)
        user = self._insert(identity, name, email, role, created_by=caller)
        return user_to_dto(user)

    def update_user_role(self, caller: str, identity: str, new_role: Role | str) -> UserInfo:
        """
        Overwrite a user's role.

        Raises:
            UnauthorizedError: If caller is not an Admin.
            UserNotFoundError: If ``identity`` is not registered.
            InvalidRoleError: If ``new_role`` is not a known Role.
        """
        self._require_admin(caller)
        user = self._get_user(identity)
        new_role = self._coerce_role(new_role)

        old_role = Role(user.role)
        user.role = new_role.value
        user.updated_at = self._clock.now()
        self.session.flush()

        self._events.record(
            UserRoleUpdated(
                identity=identity,
                old_role=old_role.value,
                new_role=new_role.value,
            ),
            actor=caller,
        )
        logger.info(
            "user_role_updated",
            extra={
                "identity": identity,
                "old_role": old_role.value,
                "new_role": new_role.value,
            },
        )
        return user_to_dto(user)

    def get_user(self, identity: str) -> UserInfo:
        """
        Raises:
            UserNotFoundError: If ``identity`` is not registered.
        """
        return self._selector.get(identity)

    def get_user_count(self) -> int:
        """Registered users, including the bootstrap Admin."""
        return self._selector.count()
