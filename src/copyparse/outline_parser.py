"""Table-outline parser for model-proposed email flows.

Primary grammar -- a pipe table plus metadata and a Key Points section::

    ## Welcome Series Flow Outline

    **Goal:** Turn new subscribers into first-time buyers
    **Target Audience:** New newsletter subscribers

    | # | Email Title | Timing | Purpose | Type | CTA |
    |---|-------------|--------|---------|------|-----|
    | 1 | Welcome     | Day 0  | Greet   | design | Shop Now |
    | 2 | Our Story   | Day 2  | Trust   | letter | Read More |

    ### Key Points
    **Email 1: Welcome**
    - Thank them for joining

Columns are mapped by header keyword, not position, so a table whose
columns arrive in a different order parses to the same steps.

Fallback grammar (legacy) -- one ``### Email N: Title`` heading per step
with bold ``Email Type`` / ``Timing`` / ``Purpose`` / ``Key Points`` /
``Call-to-Action`` fields. It is only tried when the table grammar yields
nothing.

Bad rows are dropped one at a time; the whole outline is None only when no
step at all can be extracted. Nothing here raises on any input.
"""
from __future__ import annotations

import logging
import re

from copyparse.copy_types import (
    EmailKind,
    FlowOutline,
    FlowOutlineStep,
    OutlineValidation,
)
from copyparse.labels import normalize_label
from copyparse.textmatch import keyword_role

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Column roles
# ---------------------------------------------------------------------------

# Priority order matters: a cell takes the first role whose keyword it holds.
_COLUMN_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("sequence", ("#", "seq", "sequence")),
    ("title", ("title", "name")),
    ("timing", ("timing", "when", "delay")),
    ("purpose", ("purpose", "goal")),
    ("kind", ("type",)),
    ("cta", ("cta", "call to action", "action")),
)

# Column index assumed for a role the header does not name.
_DEFAULT_COLUMNS: dict[str, int] = {
    "sequence": 0,
    "title": 1,
    "timing": 2,
    "purpose": 3,
    "kind": 4,
    "cta": 5,
}


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

_HEADER_MARKER = "Email Title"

# "## Welcome Series Flow Outline", "## ABANDONED CART OUTLINE"
_FLOW_NAME_RE = re.compile(
    r"^\s*#{1,4}\s*(?:\*\*)?(.+?)\s+outline\s*(?:\*\*)?[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)
_TRAILING_FLOW_RE = re.compile(r"\s+flow$", re.IGNORECASE)

_GOAL_RE = re.compile(
    r"^\s*(?:\*\*)?(?:Flow\s+)?Goal:(?:\*\*)?[ \t]*(.*?)[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)
_AUDIENCE_RE = re.compile(
    r"^\s*(?:\*\*)?Target\s+Audience:(?:\*\*)?[ \t]*(.*?)[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)

_SEPARATOR_ROW_RE = re.compile(r"^[\s|:\-]+$")
# Sequence cell: "2", "**2**", "#2". Other prefixes mean a non-numeric cell.
_LEADING_INT_RE = re.compile(r"^[#*\s]*(\d+)")

_BULLET_RE = re.compile(r"^\s*[-•*]\s+(.+?)\s*$")

# Key Points subsection heading: "**Email 1: Welcome**", "### 2. Our Story",
# "#3 - Last Call". A bare "2. Our Story" only counts when the text after the
# number is the title of step 2.
_KEY_POINT_HEADING_RE = re.compile(
    r"^\s*(?P<hashes>#{1,4}\s*)?(?P<bold>\*\*)?\s*(?P<email>Email\s*)?(?P<pound>#)?(?P<seq>\d+)\s*[:.)\-–—]\s*(?P<title>.*?)\s*(?:\*\*)?[ \t]*$",
    re.IGNORECASE,
)

_LEGACY_HEADING_RE = re.compile(
    r"^\s*#{2,4}\s*Email\s*(\d+)\s*[:.\-–—]\s*(.+?)[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)
_LEGACY_BLOCK_END_RE = re.compile(r"^\s*#{1,4}\s", re.MULTILINE)


def _legacy_field_re(label: str) -> re.Pattern[str]:
    return re.compile(
        rf"^\s*(?:\*\*)?{label}:(?:\*\*)?[ \t]*(.*?)[ \t]*$",
        re.IGNORECASE | re.MULTILINE,
    )


_LEGACY_TYPE_RE = _legacy_field_re(r"Email\s+Type")
_LEGACY_TIMING_RE = _legacy_field_re(r"Timing")
_LEGACY_PURPOSE_RE = _legacy_field_re(r"Purpose")
_LEGACY_KEY_POINTS_RE = _legacy_field_re(r"Key\s+Points")
_LEGACY_CTA_RE = _legacy_field_re(r"Call[\s\-]*to[\s\-]*Action")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_outline(text: str | None, flow_kind: str) -> FlowOutline | None:
    """Parse a flow outline from model output.

    Tries the table grammar first, then the legacy heading grammar.

    Args:
        text: Model output, complete or a streamed prefix.
        flow_kind: Caller's flow identifier (e.g. "welcome_series"); also
            the fallback flow name when the text carries no outline heading.

    Returns:
        FlowOutline with steps sorted by sequence, or None when no step can
        be extracted.
    """
    if not text:
        return None

    if has_outline_table(text):
        steps = _parse_table_steps(text)
        if steps:
            return _build_outline(text, flow_kind, steps)
        log.debug("outline table yielded no steps; trying legacy grammar")

    return parse_legacy_outline(text, flow_kind)


def has_outline_table(text: str | None) -> bool:
    """True iff some line has both "|" and the "Email Title" header cell."""
    if not text:
        return False
    return any(
        "|" in line and _HEADER_MARKER in line for line in text.split("\n")
    )


def build_column_map(header_cells: list[str]) -> dict[str, int]:
    """Map column roles to cell indexes by header keyword.

    The first cell matching a role wins; each cell holds at most one role.
    Roles absent from the header are absent from the map.
    """
    columns: dict[str, int] = {}
    for idx, cell in enumerate(header_cells):
        remaining = [(r, kws) for r, kws in _COLUMN_KEYWORDS if r not in columns]
        role = keyword_role(cell, remaining)
        if role is not None:
            columns[role] = idx
    return columns


# ---------------------------------------------------------------------------
# Internal: table grammar
# ---------------------------------------------------------------------------


def _split_row(line: str) -> list[str]:
    """Split a pipe row into trimmed cells, dropping the outer border cells."""
    cells = [c.strip() for c in line.strip().split("|")]
    if cells and cells[0] == "":
        cells = cells[1:]
    if cells and cells[-1] == "":
        cells = cells[:-1]
    return cells


def _parse_table_steps(text: str) -> list[FlowOutlineStep]:
    lines = text.split("\n")
    header_idx = next(
        (i for i, line in enumerate(lines) if "|" in line and _HEADER_MARKER in line),
        None,
    )
    if header_idx is None:
        return []
    sep_idx = header_idx + 1
    if sep_idx >= len(lines) or not _is_separator_row(lines[sep_idx]):
        log.debug("outline table header has no separator row")
        return []

    columns = build_column_map(_split_row(lines[header_idx]))

    rows: list[tuple[int, dict[str, str]]] = []
    end_idx = len(lines)
    for i in range(sep_idx + 1, len(lines)):
        line = lines[i]
        if not line.strip() or "Key Points" in line or "**Email" in line or "|" not in line:
            end_idx = i
            break
        cells = _split_row(line)
        row = {
            role: _cell(cells, columns.get(role, default_idx))
            for role, default_idx in _DEFAULT_COLUMNS.items()
        }
        sequence = _parse_sequence(row["sequence"])
        title = row["title"].replace("**", "").strip()
        if sequence is None or not title:
            log.debug("skipping outline row %d: %r", i + 1, line)
            continue
        row["title"] = title
        rows.append((sequence, row))

    if not rows:
        return []

    titles = {sequence: row["title"] for sequence, row in rows}
    key_points = _parse_key_points("\n".join(lines[end_idx:]), titles)

    steps = [
        FlowOutlineStep(
            sequence=sequence,
            title=row["title"],
            timing=row["timing"],
            purpose=row["purpose"],
            email_kind=_email_kind(row["kind"]),
            call_to_action=row["cta"],
            key_points=key_points.get(sequence)
            or _default_key_points(row["purpose"], row["cta"], row["title"]),
        )
        for sequence, row in rows
    ]
    return steps


def _is_separator_row(line: str) -> bool:
    return "|" in line and "-" in line and _SEPARATOR_ROW_RE.match(line) is not None


def _cell(cells: list[str], idx: int) -> str:
    return cells[idx] if 0 <= idx < len(cells) else ""


def _parse_sequence(cell: str) -> int | None:
    m = _LEADING_INT_RE.match(cell.strip())
    if m is None:
        return None
    return int(m.group(1))


def _email_kind(cell: str) -> EmailKind:
    c = cell.lower()
    if "letter" in c:
        return "letter"
    return "design"


def _parse_key_points(
    tail: str, titles: dict[int, str],
) -> dict[int, tuple[str, ...]]:
    """Collect bullets under per-step headings of a Key Points section.

    A numbered line that is not a heading is a point of the current step.
    """
    start = tail.find("Key Points")
    if start < 0:
        start = tail.lower().find("key points")
    if start < 0:
        return {}

    points: dict[int, list[str]] = {}
    current: int | None = None
    for line in tail[start:].split("\n")[1:]:
        bullet = _BULLET_RE.match(line)
        if bullet:
            if current is not None:
                points[current].append(bullet.group(1))
            continue
        heading = _KEY_POINT_HEADING_RE.match(line)
        if heading is None:
            continue
        if _is_step_heading(heading, titles):
            current = int(heading.group("seq"))
            points.setdefault(current, [])
        elif current is not None and heading.group("title"):
            points[current].append(heading.group("title"))
    return {seq: tuple(p) for seq, p in points.items() if p}


def _is_step_heading(heading: re.Match[str], titles: dict[int, str]) -> bool:
    if any(heading.group(g) for g in ("hashes", "bold", "email", "pound")):
        return True
    title = titles.get(int(heading.group("seq")))
    if title is None:
        return False
    return normalize_label(heading.group("title")) == normalize_label(title)


def _default_key_points(purpose: str, cta: str, title: str) -> tuple[str, ...]:
    defaults = [p for p in (purpose, f"Call to action: {cta}" if cta else "") if p]
    return tuple(defaults) if defaults else (title,)


# ---------------------------------------------------------------------------
# Internal: metadata
# ---------------------------------------------------------------------------


def _build_outline(
    text: str, flow_kind: str, steps: list[FlowOutlineStep],
) -> FlowOutline:
    return FlowOutline(
        flow_kind=flow_kind,
        flow_name=_flow_name(text, flow_kind),
        goal=_metadata(_GOAL_RE, text),
        target_audience=_metadata(_AUDIENCE_RE, text),
        steps=tuple(sorted(steps, key=lambda s: s.sequence)),
    )


def _flow_name(text: str, flow_kind: str) -> str:
    m = _FLOW_NAME_RE.search(text)
    if m:
        name = _TRAILING_FLOW_RE.sub("", m.group(1).replace("**", "").strip())
        if name:
            return name
    return flow_kind.replace("_", " ")


def _metadata(pattern: re.Pattern[str], text: str) -> str:
    m = pattern.search(text)
    if m is None:
        return ""
    return m.group(1).replace("**", "").strip()


# ---------------------------------------------------------------------------
# Legacy heading grammar
# ---------------------------------------------------------------------------


def parse_legacy_outline(text: str | None, flow_kind: str) -> FlowOutline | None:
    """Parse the older ``### Email N: Title`` outline format.

    A step is emitted only when its block carries all five fields (Email
    Type, Timing, Purpose, Key Points with at least one bullet, and
    Call-to-Action); incomplete blocks are skipped individually.
    """
    if not text:
        return None
    if _GOAL_RE.search(text) is None or _AUDIENCE_RE.search(text) is None:
        return None

    headings = list(_LEGACY_HEADING_RE.finditer(text))
    steps: list[FlowOutlineStep] = []
    for m in headings:
        end_match = _LEGACY_BLOCK_END_RE.search(text, m.end())
        block = text[m.end():end_match.start() if end_match else len(text)]
        step = _legacy_step(int(m.group(1)), m.group(2).replace("**", "").strip(), block)
        if step is None:
            log.debug("skipping incomplete legacy outline step %s", m.group(1))
            continue
        steps.append(step)

    if not steps:
        return None
    return _build_outline(text, flow_kind, steps)


def _legacy_step(sequence: int, title: str, block: str) -> FlowOutlineStep | None:
    kind = _LEGACY_TYPE_RE.search(block)
    timing = _LEGACY_TIMING_RE.search(block)
    purpose = _LEGACY_PURPOSE_RE.search(block)
    key_points_label = _LEGACY_KEY_POINTS_RE.search(block)
    cta = _LEGACY_CTA_RE.search(block)
    if not (kind and timing and purpose and key_points_label and cta) or not title:
        return None

    key_points: list[str] = []
    for line in block[key_points_label.end():].split("\n")[1:]:
        bullet = _BULLET_RE.match(line)
        if bullet:
            key_points.append(bullet.group(1))
        elif line.strip():
            break
    if not key_points:
        return None

    return FlowOutlineStep(
        sequence=sequence,
        title=title,
        timing=timing.group(1).strip(),
        purpose=purpose.group(1).strip(),
        email_kind=_email_kind(kind.group(1)),
        call_to_action=cta.group(1).strip(),
        key_points=tuple(key_points),
    )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_outline(outline: FlowOutline) -> OutlineValidation:
    """Check an outline for the details generation needs.

    Steps must be numbered 1..N in order; every step needs a title,
    purpose, timing, at least one key point, and a CTA.
    """
    errors: list[str] = []
    if not outline.flow_name:
        errors.append("Flow name is required")
    if not outline.goal:
        errors.append("Flow goal is required")
    if not outline.target_audience:
        errors.append("Target audience is required")
    if not outline.steps:
        errors.append("At least one email is required")

    for index, step in enumerate(outline.steps):
        if step.sequence != index + 1:
            errors.append(f"Email {index + 1} has incorrect sequence number")
        if not step.title:
            errors.append(f"Email {step.sequence} is missing a title")
        if not step.purpose:
            errors.append(f"Email {step.sequence} is missing a purpose")
        if not step.timing:
            errors.append(f"Email {step.sequence} is missing timing information")
        if not step.key_points:
            errors.append(f"Email {step.sequence} is missing key points")
        if not step.call_to_action:
            errors.append(f"Email {step.sequence} is missing a CTA")

    return OutlineValidation(valid=not errors, errors=tuple(errors))
