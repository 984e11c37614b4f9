"""Section/field parser for model-authored email copy.

Turns a draft such as::

    **Approach:** Lead with the founder story.

    [HERO]
    Headline: Welcome to the family
    CTA: Shop Now

    [PRODUCT CARD]
    - Organic cotton
    • Ships free

    ---
    Design notes: Keep the palette warm.

into a ParsedEmailDocument (preamble / sections / postamble).

2-pass approach:
    1. Locate every section marker (``[HERO]``, ``[PRODUCT CARD]``) and
       record its offsets and name, in order.
    2. Slice the text between markers and classify each slice line by line
       into fields, bullets, and unlabeled content.

No byte of section content is dropped: a line that matches no known shape
is kept in ``unlabeled_content`` and the whole slice is kept verbatim in
``raw_content``. The only discarded text is a bare trailing ``---``.

Every public function is total: ``None``, empty, and truncated (still
streaming) input produce False / None / partial results, never an exception.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from copyparse.copy_types import (
    EmailField,
    EmailHeader,
    EmailSection,
    ParsedEmailDocument,
    ProductEntry,
)


@dataclass(frozen=True, slots=True)
class SectionMarker:
    """A section marker occurrence; offsets index the fence-stripped text."""

    name: str
    start: int          # Offset of "["
    end: int            # Offset just past "]"


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# Section marker: "[HERO]", "[PRODUCT CARD]", "[CUSTOM_SECTION]", "[NEW-TYPE]".
# Case-sensitive on purpose: mixed-case placeholders inside values ("[Price]",
# "[Name]") are content, not structure.
_MARKER_RE = re.compile(r"\[([A-Z][A-Z0-9 _\-]*)\]")

_BULLET_RE = re.compile(r"^[-•*]\s+(.+)")

# Label may not contain ":", so only the first colon ends it.
_FIELD_RE = re.compile(r"^([A-Za-z][A-Za-z0-9 _\-]*):\s*(.*)$")

# "---" line that separates the last section from trailing notes.
_POSTAMBLE_RE = re.compile(r"\n---[ \t]*(?:\n|$)")

_SEPARATOR_LINE_RE = re.compile(r"^-{3,}$")

_FENCE_OPEN_RE = re.compile(r"^\s*```[^\n]*(?:\n|$)")
_FENCE_CLOSE_RE = re.compile(r"\n?```\s*$")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def is_structured_document(text: str | None) -> bool:
    """True iff ``text`` contains at least one section marker."""
    if not text:
        return False
    return _MARKER_RE.search(text) is not None


def parse_document(text: str | None) -> ParsedEmailDocument | None:
    """Parse an email draft into preamble, sections, and postamble.

    Args:
        text: Model output, complete or a still-growing streamed prefix.

    Returns:
        ParsedEmailDocument, or None when the text has no section marker
        (the caller renders it as plain text).
    """
    if not text or not is_structured_document(text):
        return None

    body = strip_code_fence(text)

    # Pass 1: marker offsets
    markers = find_markers(body)
    if not markers:
        return None

    preamble = body[:markers[0].start].strip()

    # Pass 2: per-section classification
    postamble = ""
    sections: list[EmailSection] = []
    for i, marker in enumerate(markers):
        if i + 1 < len(markers):
            raw = body[marker.end:markers[i + 1].start]
        else:
            raw, postamble = _split_postamble(body[marker.end:])
        fields, bullets, unlabeled = classify_lines(raw)
        sections.append(EmailSection(
            name=marker.name,
            fields=fields,
            bullets=bullets,
            unlabeled_content=unlabeled,
            raw_content=raw,
        ))

    if not sections:
        return None

    return ParsedEmailDocument(
        preamble=preamble,
        sections=tuple(sections),
        postamble=postamble,
        original_text=text,
    )


def find_markers(text: str | None) -> list[SectionMarker]:
    """Pass 1: every section marker in ``text``, in document order."""
    if not text:
        return []
    return [
        SectionMarker(name=m.group(1), start=m.start(), end=m.end())
        for m in _MARKER_RE.finditer(text)
    ]


def strip_code_fence(text: str) -> str:
    """Remove a ``` fence wrapping the whole text.

    A wrapper is a generation artifact, not content. An opening fence with
    no closing fence yet (mid-stream) is still removed.
    """
    if not text.lstrip().startswith("```"):
        return text
    inner = _FENCE_OPEN_RE.sub("", text, count=1)
    return _FENCE_CLOSE_RE.sub("", inner, count=1)


def classify_lines(
    raw: str,
) -> tuple[tuple[EmailField, ...], tuple[str, ...], tuple[str, ...]]:
    """Classify a section body into (fields, bullets, unlabeled_content).

    Priority per line: blank (skip), separator (skip), bullet, field,
    indented continuation of an empty-valued field, else unlabeled.
    """
    fields: list[EmailField] = []
    bullets: list[str] = []
    unlabeled: list[str] = []

    # (label, value parts) of a field opened with an empty value; indented
    # lines directly below it are folded into its value.
    pending: tuple[str, list[str]] | None = None

    def flush() -> None:
        nonlocal pending
        if pending is not None:
            label, parts = pending
            fields[-1] = EmailField(label=label, value=" ".join(parts))
            pending = None

    for line in raw.split("\n"):
        stripped = line.strip()
        if not stripped or _SEPARATOR_LINE_RE.match(stripped):
            flush()
            continue

        bullet = _BULLET_RE.match(stripped)
        if bullet:
            flush()
            bullets.append(bullet.group(1).strip())
            continue

        fm = _FIELD_RE.match(stripped)
        if fm:
            flush()
            label, value = fm.group(1).strip(), fm.group(2).strip()
            fields.append(EmailField(label=label, value=value))
            if not value:
                pending = (label, [])
            continue

        if pending is not None and line[:1].isspace():
            pending[1].append(stripped)
            continue

        flush()
        unlabeled.append(stripped)

    flush()
    return tuple(fields), tuple(bullets), tuple(unlabeled)


# ---------------------------------------------------------------------------
# Internal: postamble split (last section only)
# ---------------------------------------------------------------------------


def _split_postamble(raw: str) -> tuple[str, str]:
    """Split the last section body at its final ``---`` separator line.

    Earlier separators stay in the section and are skipped by
    ``classify_lines``. Returns (section_raw, postamble). A separator with
    nothing after it is dropped and the postamble is "".
    """
    matches = list(_POSTAMBLE_RE.finditer(raw))
    if not matches:
        return raw, ""
    m = matches[-1]
    return raw[:m.start()], raw[m.end():].strip()


# ---------------------------------------------------------------------------
# Section kinds and display labels
# ---------------------------------------------------------------------------

_SECTION_KINDS: dict[str, str] = {
    "HERO": "hero",
    "TEXT": "text", "BODY": "text", "COPY": "text",
    "BULLETS": "bullets", "FEATURES": "bullets", "BENEFITS": "bullets", "LIST": "bullets",
    "PRODUCT_CARD": "product_card",
    "PRODUCT_GRID": "product_grid", "PRODUCTS": "product_grid", "PRODUCT": "product_grid",
    "CTA_BLOCK": "cta_block", "CTA": "cta_block", "CALL_TO_ACTION": "cta_block",
    "SOCIAL_PROOF": "social_proof", "REVIEWS": "social_proof",
    "TESTIMONIAL": "testimonial", "QUOTE": "testimonial",
    "DISCOUNT_BAR": "discount_bar", "DISCOUNT": "discount_bar",
}


def section_kind(name: str | None) -> str:
    """Canonical block kind for a marker name; "generic" when unknown.

    "PRODUCT GRID", "PRODUCT-GRID", and "product_grid" all map alike.
    """
    if not name:
        return "generic"
    key = re.sub(r"[\s\-]+", "_", name.strip().upper())
    return _SECTION_KINDS.get(key, "generic")


def format_section_label(name: str) -> str:
    """Title-case a marker name for display: "CUSTOM_SECTION" -> "Custom Section"."""
    words = re.sub(r"[_\-]+", " ", name).lower().split()
    return " ".join(w[:1].upper() + w[1:] for w in words)


# ---------------------------------------------------------------------------
# Preamble / postamble details
# ---------------------------------------------------------------------------

_SUBJECT_RE = re.compile(
    r"^\s*(?:\*\*)?subject(?:\s+line)?:(?:\*\*)?[ \t]*(.+?)[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)
_PREVIEW_RE = re.compile(
    r"^\s*(?:\*\*)?preview(?:\s+text)?:(?:\*\*)?[ \t]*(.+?)[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)
_APPROACH_RE = re.compile(
    r"^\s*(?:\*\*)?(?:approach|strategy):(?:\*\*)?[ \t]*(.+?)[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)
_DESIGN_NOTES_RE = re.compile(r"^\s*(?:\*\*)?design notes:(?:\*\*)?\s*", re.IGNORECASE)


def _strip_bold(s: str) -> str:
    return s.replace("**", "").strip()


def parse_header(preamble: str | None) -> EmailHeader:
    """Pull subject line, preview text, and approach note out of a preamble."""
    if not preamble:
        return EmailHeader(subject_line="", preview_text="", approach="")
    subject = _SUBJECT_RE.search(preamble)
    preview = _PREVIEW_RE.search(preamble)
    approach = _APPROACH_RE.search(preamble)
    return EmailHeader(
        subject_line=_strip_bold(subject.group(1)) if subject else "",
        preview_text=_strip_bold(preview.group(1)) if preview else "",
        approach=_strip_bold(approach.group(1)) if approach else "",
    )


def design_notes(postamble: str | None) -> str:
    """Postamble text with a leading "Design notes:" label removed."""
    if not postamble:
        return ""
    return _DESIGN_NOTES_RE.sub("", postamble, count=1).strip()


# ---------------------------------------------------------------------------
# Product lines
# ---------------------------------------------------------------------------


def product_entries(section: EmailSection) -> tuple[ProductEntry, ...]:
    """Read ``Name | $Price | Description`` lines from a section.

    Looks at bullets and unlabeled lines; lines without a "|" are ignored.
    """
    entries: list[ProductEntry] = []
    for line in (*section.bullets, *section.unlabeled_content):
        if "|" not in line:
            continue
        cells = [_strip_bold(c) for c in line.split("|")]
        name = cells[0]
        if not name:
            continue
        rest = cells[1:]
        price = ""
        if rest and rest[0].startswith("$"):
            price = rest.pop(0)
        description = " | ".join(c for c in rest if c)
        entries.append(ProductEntry(name=name, price=price, description=description))
    return tuple(entries)
