"""Label normalization and field-role classification.

Model-written field labels vary freely in case and punctuation
("One-liner", "One liner", "ONELINER"). Every semantic decision about a
label goes through ``normalize_label`` and the role predicates below;
callers never switch on raw label text, so adding a synonym is a one-line
change to a vocabulary set.

Roles:
    headline, subhead, body, cta : drive rendering
    accent                       : informational only (eyebrow/kicker text)
"""
from __future__ import annotations

import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Literal, TypeAlias

from copyparse.io_utils import load_json

FieldRole: TypeAlias = Literal["headline", "subhead", "body", "cta", "accent"]

# Resolution order for field_role(); a label in two sets takes the first.
ROLE_ORDER: tuple[FieldRole, ...] = ("headline", "subhead", "body", "cta", "accent")

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def normalize_label(label: str | None) -> str:
    """Lowercase ``label`` and drop every character outside ``[a-z0-9]``.

    Total: ``None`` and ``""`` both normalize to ``""``.
    """
    if not label:
        return ""
    return _NON_ALNUM_RE.sub("", label.lower())


# ---------------------------------------------------------------------------
# Vocabulary (configurable synonym sets)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RoleVocabulary:
    """Synonym sets per role, stored in normalized form.

    Extending a role means adding an entry here (or in a vocabulary JSON
    file), never touching the callers.
    """

    headline: frozenset[str]
    subhead: frozenset[str]
    body: frozenset[str]
    cta: frozenset[str]
    accent: frozenset[str]

    def synonyms(self, role: FieldRole) -> frozenset[str]:
        return getattr(self, role)

    def extended(self, extra: dict[str, list[str]]) -> RoleVocabulary:
        """Return a copy with ``extra`` synonyms merged into each role."""
        _check_roles(extra)
        updates = {
            role: self.synonyms(role) | _normalized_set(words)
            for role, words in extra.items()
        }
        return replace(self, **updates)

    @classmethod
    def from_json(cls, path: Path, *, extend: bool = True) -> RoleVocabulary:
        """Load a vocabulary file: ``{"headline": ["big line", ...], ...}``.

        With ``extend=True`` (default) the file's synonyms are merged into
        ``DEFAULT_VOCABULARY``; otherwise roles named in the file replace
        the defaults outright and unnamed roles keep the defaults.

        Raises:
            ValueError: if the file is not an object of role -> list[str].
        """
        data = load_json(path)
        if not isinstance(data, dict):
            raise ValueError(f"vocabulary file {path} must hold a JSON object")
        extra: dict[str, list[str]] = {}
        for role, words in data.items():
            if not isinstance(words, list) or not all(isinstance(w, str) for w in words):
                raise ValueError(
                    f"vocabulary role {role!r} in {path} must map to a list of strings"
                )
            extra[str(role)] = words
        if extend:
            return DEFAULT_VOCABULARY.extended(extra)
        _check_roles(extra)
        return replace(
            DEFAULT_VOCABULARY,
            **{role: _normalized_set(words) for role, words in extra.items()},
        )


def _normalized_set(words: list[str]) -> frozenset[str]:
    return frozenset(n for n in (normalize_label(w) for w in words) if n)


def _check_roles(extra: dict[str, list[str]]) -> None:
    unknown = sorted(set(extra) - set(ROLE_ORDER))
    if unknown:
        raise ValueError(
            f"unknown field role(s) {unknown}; expected one of {list(ROLE_ORDER)}"
        )


DEFAULT_VOCABULARY = RoleVocabulary(
    headline=frozenset({"headline", "title", "header", "heading", "h1", "maintitle"}),
    subhead=frozenset({
        "subhead", "subheadline", "subtitle", "tagline", "oneliner",
        "supporting", "subheading", "h2",
    }),
    body=frozenset({
        "body", "copy", "content", "text", "description", "paragraph", "message",
    }),
    cta=frozenset({"cta", "calltoaction", "button", "action", "link", "buttontext"}),
    accent=frozenset({"accent", "eyebrow", "kicker", "preheadline", "label", "tag"}),
)


# ---------------------------------------------------------------------------
# Role predicates
# ---------------------------------------------------------------------------


def _has_role(
    label: str | None, role: FieldRole, vocabulary: RoleVocabulary,
) -> bool:
    return normalize_label(label) in vocabulary.synonyms(role)


def is_headline_field(
    label: str | None, *, vocabulary: RoleVocabulary = DEFAULT_VOCABULARY,
) -> bool:
    return _has_role(label, "headline", vocabulary)


def is_subhead_field(
    label: str | None, *, vocabulary: RoleVocabulary = DEFAULT_VOCABULARY,
) -> bool:
    return _has_role(label, "subhead", vocabulary)


def is_body_field(
    label: str | None, *, vocabulary: RoleVocabulary = DEFAULT_VOCABULARY,
) -> bool:
    return _has_role(label, "body", vocabulary)


def is_cta_field(
    label: str | None, *, vocabulary: RoleVocabulary = DEFAULT_VOCABULARY,
) -> bool:
    return _has_role(label, "cta", vocabulary)


def is_accent_field(
    label: str | None, *, vocabulary: RoleVocabulary = DEFAULT_VOCABULARY,
) -> bool:
    """Accent labels are informational; renderers may show them as eyebrows."""
    return _has_role(label, "accent", vocabulary)


def field_role(
    label: str | None, *, vocabulary: RoleVocabulary = DEFAULT_VOCABULARY,
) -> FieldRole | None:
    """Canonical role for ``label``, or None when no vocabulary set matches."""
    key = normalize_label(label)
    if not key:
        return None
    for role in ROLE_ORDER:
        if key in vocabulary.synonyms(role):
            return role
    return None
