"""Tests for copyparse.labels module."""
from pathlib import Path

import pytest

from copyparse.labels import (
    DEFAULT_VOCABULARY,
    RoleVocabulary,
    field_role,
    is_accent_field,
    is_body_field,
    is_cta_field,
    is_headline_field,
    is_subhead_field,
    normalize_label,
)


class TestNormalizeLabel:
    def test_collapses_punctuation_and_case(self) -> None:
        assert normalize_label("One-liner") == "oneliner"
        assert normalize_label("One liner") == "oneliner"
        assert normalize_label("ONELINER") == "oneliner"

    def test_keeps_digits(self) -> None:
        assert normalize_label("H1") == "h1"

    def test_strips_non_ascii_letters(self) -> None:
        assert normalize_label("Café Title") == "caftitle"

    def test_empty_and_none(self) -> None:
        assert normalize_label("") == ""
        assert normalize_label(None) == ""

    def test_only_punctuation(self) -> None:
        assert normalize_label("--- : ---") == ""


class TestRolePredicates:
    def test_headline(self) -> None:
        assert is_headline_field("Headline")
        assert is_headline_field("Main Title")
        assert is_headline_field("H1")
        assert not is_headline_field("Subhead")

    def test_subhead(self) -> None:
        assert is_subhead_field("Sub-headline")
        assert is_subhead_field("One-liner")
        assert is_subhead_field("TAGLINE")
        assert not is_subhead_field("Headline")

    def test_body(self) -> None:
        assert is_body_field("Body")
        assert is_body_field("description")
        assert not is_body_field("CTA")

    def test_cta(self) -> None:
        assert is_cta_field("CTA")
        assert is_cta_field("Call to Action")
        assert is_cta_field("Button Text")
        assert not is_cta_field("Body")

    def test_accent(self) -> None:
        assert is_accent_field("Eyebrow")
        assert is_accent_field("Pre-headline")
        assert not is_accent_field("Headline")

    def test_none_label(self) -> None:
        assert not is_headline_field(None)
        assert not is_cta_field("")


class TestFieldRole:
    def test_resolves_roles(self) -> None:
        assert field_role("Headline") == "headline"
        assert field_role("Subtitle") == "subhead"
        assert field_role("Copy") == "body"
        assert field_role("Button") == "cta"
        assert field_role("Kicker") == "accent"

    def test_unknown_label(self) -> None:
        assert field_role("Price") is None
        assert field_role("") is None


class TestRoleVocabulary:
    def test_defaults_are_normalized(self) -> None:
        for role in ("headline", "subhead", "body", "cta", "accent"):
            for word in DEFAULT_VOCABULARY.synonyms(role):
                assert word == normalize_label(word)

    def test_extended_adds_synonyms(self) -> None:
        vocab = DEFAULT_VOCABULARY.extended({"headline": ["Big Line"]})
        assert is_headline_field("big-line", vocabulary=vocab)
        assert is_headline_field("Headline", vocabulary=vocab)
        assert not is_headline_field("big-line")

    def test_extended_rejects_unknown_role(self) -> None:
        with pytest.raises(ValueError, match="unknown field role"):
            DEFAULT_VOCABULARY.extended({"footer": ["legal"]})

    def test_from_json_extends(self, tmp_path: Path) -> None:
        path = tmp_path / "vocab.json"
        path.write_text('{"cta": ["Shop Link"], "body": ["Story"]}')
        vocab = RoleVocabulary.from_json(path)
        assert field_role("shop link", vocabulary=vocab) == "cta"
        assert field_role("STORY", vocabulary=vocab) == "body"
        assert field_role("CTA", vocabulary=vocab) == "cta"

    def test_from_json_replaces(self, tmp_path: Path) -> None:
        path = tmp_path / "vocab.json"
        path.write_text('{"cta": ["Shop Link"]}')
        vocab = RoleVocabulary.from_json(path, extend=False)
        assert is_cta_field("Shop Link", vocabulary=vocab)
        assert not is_cta_field("CTA", vocabulary=vocab)
        assert is_headline_field("Headline", vocabulary=vocab)

    def test_from_json_rejects_bad_shape(self, tmp_path: Path) -> None:
        path = tmp_path / "vocab.json"
        path.write_text('{"cta": "Shop Link"}')
        with pytest.raises(ValueError, match="list of strings"):
            RoleVocabulary.from_json(path)

    def test_from_json_rejects_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "vocab.json"
        path.write_text('["cta"]')
        with pytest.raises(ValueError, match="JSON object"):
            RoleVocabulary.from_json(path)
