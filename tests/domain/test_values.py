"""Tests for amount validation and the null identity."""

import pytest

from finops_kernel.db.types import NULL_IDENTITY, UINT256_MAX, is_null_identity
from finops_kernel.domain.values import is_valid_amount


class TestIsValidAmount:

    @pytest.mark.parametrize("amount", [1, 1000, 10**18, UINT256_MAX])
    def test_accepts_positive_uint256(self, amount):
        assert is_valid_amount(amount)

    @pytest.mark.parametrize("amount", [0, -1, UINT256_MAX + 1])
    def test_rejects_out_of_range(self, amount):
        assert not is_valid_amount(amount)

    @pytest.mark.parametrize("amount", [True, 1.5, "1000", None])
    def test_rejects_non_integers(self, amount):
        """bool, float, numeric strings and None are not amounts."""
        assert not is_valid_amount(amount)


class TestNullIdentity:

    @pytest.mark.parametrize("identity", [None, "", NULL_IDENTITY])
    def test_null_forms(self, identity):
        assert is_null_identity(identity)

    def test_regular_identity_is_not_null(self):
        assert not is_null_identity("0x00000000000000000000000000000000000000c1")
