"""Tests for roles and capability predicates."""

import pytest

from finops_kernel.domain.roles import Role, is_admin, is_approver, satisfies


class TestCapabilityPredicates:
    """is_approver / is_admin are set membership, not ordering."""

    @pytest.mark.parametrize(
        "role, expected",
        [(Role.REGULAR, False), (Role.MANAGER, True), (Role.ADMIN, True)],
    )
    def test_is_approver(self, role, expected):
        assert is_approver(role) is expected

    @pytest.mark.parametrize(
        "role, expected",
        [(Role.REGULAR, False), (Role.MANAGER, False), (Role.ADMIN, True)],
    )
    def test_is_admin(self, role, expected):
        assert is_admin(role) is expected

    def test_accepts_string_values(self):
        """Stored role strings work without conversion."""
        assert is_approver("manager") is True
        assert is_admin("regular") is False

    def test_unknown_role_rejected(self):
        with pytest.raises(ValueError):
            is_admin("superuser")


class TestSatisfies:
    """Role-membership semantics used by AccessControl.has_role."""

    def test_admin_requires_exact_match(self):
        assert satisfies(Role.ADMIN, Role.ADMIN)
        assert not satisfies(Role.MANAGER, Role.ADMIN)

    def test_manager_means_approver(self):
        assert satisfies(Role.MANAGER, Role.MANAGER)
        assert satisfies(Role.ADMIN, Role.MANAGER)
        assert not satisfies(Role.REGULAR, Role.MANAGER)

    @pytest.mark.parametrize("held", list(Role))
    def test_regular_held_by_everyone(self, held):
        assert satisfies(held, Role.REGULAR)
