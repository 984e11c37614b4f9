"""Core value types for the copy parsers.

Every parser call builds these fresh; nothing here is persisted or mutated.
All dataclasses are frozen with slots=True, and every sequence member is a
tuple so two parses of the same text compare (and hash) equal.

Type hierarchy:
  EmailField         : One ``Label: value`` line inside a section
  EmailSection       : A bracket-delimited block (``[HERO]``) and its lines
  ParsedEmailDocument: Preamble + sections + postamble of one email draft
  EmailHeader        : Subject line / preview text / approach from a preamble
  ProductEntry       : One ``Name | $Price | Description`` product line
  FlowOutlineStep    : One email step of a proposed flow
  FlowOutline        : A flow outline awaiting approval
  OutlineValidation  : Completeness report for a FlowOutline

``to_dict()`` emits camelCase keys, the shape the rendering layer consumes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias

from copyparse.labels import normalize_label

EmailKind: TypeAlias = Literal["design", "letter"]


# ---------------------------------------------------------------------------
# Email copy document
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EmailField:
    """A ``Label: value`` line.

    ``label`` keeps the author's casing for display; ``label_normalized`` is
    derived once here and is the only form used for semantic matching.
    """

    label: str
    value: str
    label_normalized: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "label_normalized", normalize_label(self.label))

    def to_dict(self) -> dict[str, str]:
        return {
            "label": self.label,
            "value": self.value,
            "labelNormalized": self.label_normalized,
        }


@dataclass(frozen=True, slots=True)
class EmailSection:
    """A section opened by a marker such as ``[HERO]`` or ``[PRODUCT CARD]``.

    Invariant: ``raw_content`` holds the section body verbatim. Classified
    lines land in exactly one of fields / bullets / unlabeled_content, but
    ``raw_content`` is the fallback rendering source and is never trimmed
    of content.
    """

    name: str                          # Verbatim marker text, e.g. "PRODUCT CARD"
    fields: tuple[EmailField, ...]
    bullets: tuple[str, ...]
    unlabeled_content: tuple[str, ...]
    raw_content: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
            "bullets": list(self.bullets),
            "unlabeledContent": list(self.unlabeled_content),
            "rawContent": self.raw_content,
        }


@dataclass(frozen=True, slots=True)
class ParsedEmailDocument:
    """A structured email draft.

    ``original_text`` is kept untouched so callers can always fall back to a
    plain rendering regardless of how well the parse went.
    """

    preamble: str                      # Text before the first marker (trimmed)
    sections: tuple[EmailSection, ...]
    postamble: str                     # Text after a trailing "---" separator
    original_text: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "preamble": self.preamble,
            "sections": [s.to_dict() for s in self.sections],
            "postamble": self.postamble,
            "originalText": self.original_text,
        }


@dataclass(frozen=True, slots=True)
class EmailHeader:
    """Envelope details that models write ahead of the first section."""

    subject_line: str
    preview_text: str
    approach: str

    def to_dict(self) -> dict[str, str]:
        return {
            "subjectLine": self.subject_line,
            "previewText": self.preview_text,
            "approach": self.approach,
        }


@dataclass(frozen=True, slots=True)
class ProductEntry:
    """A product line from a product grid/card section."""

    name: str
    price: str          # "" when no "$"-prefixed cell is present
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "price": self.price, "description": self.description}


# ---------------------------------------------------------------------------
# Flow outline
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FlowOutlineStep:
    """One email in a multi-step flow. ``sequence`` is 1-based and the sort key."""

    sequence: int
    title: str
    timing: str
    purpose: str
    email_kind: EmailKind
    call_to_action: str
    key_points: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "sequence": self.sequence,
            "title": self.title,
            "timing": self.timing,
            "purpose": self.purpose,
            "emailKind": self.email_kind,
            "callToAction": self.call_to_action,
            "keyPoints": list(self.key_points),
        }


@dataclass(frozen=True, slots=True)
class FlowOutline:
    """A proposed flow. Parsers never return one with empty ``steps``."""

    flow_kind: str
    flow_name: str
    goal: str
    target_audience: str
    steps: tuple[FlowOutlineStep, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "flowKind": self.flow_kind,
            "flowName": self.flow_name,
            "goal": self.goal,
            "targetAudience": self.target_audience,
            "steps": [s.to_dict() for s in self.steps],
        }


@dataclass(frozen=True, slots=True)
class OutlineValidation:
    """Result of ``validate_outline``: ``valid`` iff ``errors`` is empty."""

    valid: bool
    errors: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors)}
