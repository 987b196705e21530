"""Tests for SequenceService counter allocation."""

from finops_kernel.services.sequence_service import SequenceService


class TestSequenceService:

    def test_starts_at_one(self, session):
        seq = SequenceService(session)
        assert seq.next_value(SequenceService.TRANSACTION) == 1
        assert seq.next_value(SequenceService.TRANSACTION) == 2

    def test_sequences_are_independent(self, session):
        seq = SequenceService(session)
        seq.next_value(SequenceService.TRANSACTION)
        seq.next_value(SequenceService.TRANSACTION)
        assert seq.next_value(SequenceService.APPROVAL) == 1

    def test_current_value_does_not_increment(self, session):
        seq = SequenceService(session)
        seq.next_value(SequenceService.APPROVAL)
        assert seq.current_value(SequenceService.APPROVAL) == 1
        assert seq.current_value(SequenceService.APPROVAL) == 1

    def test_unknown_sequence_created_on_demand(self, session):
        seq = SequenceService(session)
        assert seq.current_value("ad_hoc") == 0
        assert seq.next_value("ad_hoc") == 1

    def test_initialize_is_idempotent(self, session):
        seq = SequenceService(session)
        seq.next_value(SequenceService.PLATFORM_EVENT)
        seq.initialize_sequences()
        assert seq.current_value(SequenceService.PLATFORM_EVENT) == 1
