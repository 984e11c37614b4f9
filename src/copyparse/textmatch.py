"""Reusable phrase-matching primitives.

Pure text operations with zero domain dependencies. Used by the approval
detector (phrase membership) and the outline parser (header keywords).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True, slots=True)
class PhraseHit:
    """A phrase match at a specific offset. Domain-neutral primitive."""

    phrase: str
    char_offset: int


def phrase_hits(text_lower: str, phrases: Iterable[str]) -> list[PhraseHit]:
    """Find the first occurrence of each phrase in ``text_lower``.

    Args:
        text_lower: Pre-lowercased text to search.
        phrases: Lowercase phrases, matched as plain substrings.

    Returns:
        One PhraseHit per phrase found, ordered by char_offset.
    """
    hits: list[PhraseHit] = []
    for phrase in phrases:
        pos = text_lower.find(phrase)
        if pos >= 0:
            hits.append(PhraseHit(phrase, pos))
    hits.sort(key=lambda h: h.char_offset)
    return hits


def keyword_role(
    cell: str,
    role_keywords: Iterable[tuple[str, tuple[str, ...]]],
) -> str | None:
    """Map a table header cell to the first role whose keyword it contains.

    Matching is case-insensitive substring containment, also tried with
    whitespace collapsed so "Callto Action" still hits "call to action".

    Args:
        cell: Raw header cell text.
        role_keywords: (role, keywords) pairs in priority order.

    Returns:
        The matched role, or None.
    """
    c = cell.strip().lower()
    if not c:
        return None
    c_nospace = c.replace(" ", "")
    for role, keywords in role_keywords:
        for kw in keywords:
            if kw in c or kw.replace(" ", "") in c_nospace:
                return role
    return None
