"""Tests for copyparse.textmatch module."""
from copyparse.textmatch import (
    PhraseHit,
    keyword_role,
    phrase_hits,
)


class TestPhraseHit:
    def test_frozen(self) -> None:
        hit = PhraseHit(phrase="test", char_offset=10)
        assert hit.phrase == "test"
        assert hit.char_offset == 10


class TestPhraseHits:
    def test_no_phrases(self) -> None:
        assert phrase_hits("some text", []) == []

    def test_first_occurrence_only(self) -> None:
        hits = phrase_hits("yes yes yes", ["yes"])
        assert hits == [PhraseHit("yes", 0)]

    def test_sorted_by_offset(self) -> None:
        hits = phrase_hits("go ahead, looks good", ["looks good", "go ahead"])
        assert [h.phrase for h in hits] == ["go ahead", "looks good"]
        assert hits[1].char_offset == 10

    def test_missing_phrase(self) -> None:
        assert phrase_hits("hello", ["bye"]) == []


class TestKeywordRole:
    ROLES = (
        ("sequence", ("#", "seq")),
        ("cta", ("cta", "call to action")),
    )

    def test_case_insensitive(self) -> None:
        assert keyword_role("CTA", self.ROLES) == "cta"

    def test_whitespace_collapsed(self) -> None:
        assert keyword_role("Callto Action", self.ROLES) == "cta"

    def test_priority(self) -> None:
        assert keyword_role("# CTA", self.ROLES) == "sequence"

    def test_blank_cell(self) -> None:
        assert keyword_role("   ", self.ROLES) is None

    def test_no_match(self) -> None:
        assert keyword_role("Owner", self.ROLES) is None
