"""Tests for copyparse.approval module."""
from copyparse.approval import (
    AFFIRMATIVE_PHRASES,
    NEGATION_PHRASES,
    approval_signals,
    is_approval,
)


class TestIsApproval:
    def test_plain_approvals(self) -> None:
        assert is_approval("Approved!")
        assert is_approval("looks good, let's proceed")
        assert is_approval("  YES  ")
        assert is_approval("Perfect, go ahead and generate the emails")

    def test_negation_wins(self) -> None:
        assert not is_approval("looks good but please change the CTA")
        assert not is_approval("Yes, but wait until I check with my team")
        assert not is_approval("don't proceed yet")
        assert not is_approval("Great. Can you adjust the timing?")

    def test_no_affirmative_phrase(self) -> None:
        assert not is_approval("Can you add a fourth email?")

    def test_typographic_apostrophe(self) -> None:
        assert is_approval("Let’s proceed")
        assert not is_approval("I don’t like email 2")

    def test_null_and_empty(self) -> None:
        assert not is_approval(None)
        assert not is_approval("")
        assert not is_approval("   ")


class TestApprovalSignals:
    def test_hits_are_reported(self) -> None:
        signals = approval_signals("Looks good but please change the CTA")
        assert [h.phrase for h in signals.affirmative] == ["looks good"]
        assert [h.phrase for h in signals.negations] == ["change"]
        assert signals.approved is False

    def test_hits_ordered_by_offset(self) -> None:
        signals = approval_signals("yes, approved")
        phrases = [h.phrase for h in signals.affirmative]
        assert phrases[0] == "yes"
        assert set(phrases) == {"yes", "approved", "approve"}
        assert signals.approved is True

    def test_phrase_lists_are_lowercase(self) -> None:
        for phrase in (*AFFIRMATIVE_PHRASES, *NEGATION_PHRASES):
            assert phrase == phrase.lower()
