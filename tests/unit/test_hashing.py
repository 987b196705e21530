"""Tests for deterministic hashing."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from finops_kernel.domain.events import TransactionCreated
from finops_kernel.domain.lifecycle import TxStatus
from finops_kernel.utils.hashing import canonicalize_json, hash_payload, hash_platform_event


class TestCanonicalJson:

    def test_key_order_does_not_matter(self):
        assert canonicalize_json({"b": 1, "a": 2}) == canonicalize_json({"a": 2, "b": 1})

    def test_enum_and_datetime(self):
        text = canonicalize_json({
            "status": TxStatus.ACTIVE,
            "at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        })
        assert text == '{"at":"2024-01-01T00:00:00+00:00","status":"active"}'

    def test_unsupported_type_raises(self):
        with pytest.raises(TypeError):
            canonicalize_json({"amount": Decimal("10.5")})

    def test_event_payload_is_canonical(self):
        event = TransactionCreated(
            transaction_id=1,
            sender="0xa",
            recipient="0xb",
            amount=2**255,
        )
        text = canonicalize_json(event.to_payload())
        assert f'"amount":"{2**255}"' in text


class TestEventHash:

    def test_payload_hash_is_stable(self):
        assert hash_payload({"x": 1}) == hash_payload({"x": 1})
        assert len(hash_payload({"x": 1})) == 64

    def test_genesis_and_chained_differ(self):
        payload_hash = hash_payload({"x": 1})
        genesis = hash_platform_event(1, "UserRegistered", payload_hash, None)
        chained = hash_platform_event(1, "UserRegistered", payload_hash, genesis)
        assert genesis != chained

    def test_every_component_contributes(self):
        base = hash_platform_event(2, "A", "p", "prev")
        assert base != hash_platform_event(3, "A", "p", "prev")
        assert base != hash_platform_event(2, "B", "p", "prev")
        assert base != hash_platform_event(2, "A", "q", "prev")
        assert base != hash_platform_event(2, "A", "p", "other")
