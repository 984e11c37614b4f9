#!/usr/bin/env python3
"""Run the copy parsers on a saved model response and print the result.

Handy for checking how a draft, outline, or user reply is read before it
reaches the renderer or the approval workflow.

Usage:
    python3 scripts/parse_copy.py --mode document --input draft.txt
    python3 scripts/parse_copy.py --mode outline --flow-kind welcome_series < outline.md
    python3 scripts/parse_copy.py --mode approval --input reply.txt
    python3 scripts/parse_copy.py --mode document --input draft.txt \
      --vocabulary config/vocabulary.json --verbose
    python3 scripts/parse_copy.py --mode outline --input outline.md --output out/outline.json

Structured JSON output goes to stdout; human messages go to stderr.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from copyparse.approval import approval_signals
from copyparse.io_utils import dumps_json, read_text, save_json
from copyparse.labels import DEFAULT_VOCABULARY, RoleVocabulary, field_role
from copyparse.outline_parser import parse_outline, validate_outline
from copyparse.section_parser import (
    design_notes,
    format_section_label,
    parse_document,
    parse_header,
    product_entries,
    section_kind,
)

log = logging.getLogger("parse_copy")

MODES = ("document", "outline", "approval")


def dump_json(obj: Any) -> None:
    sys.stdout.buffer.write(dumps_json(obj))
    sys.stdout.buffer.write(b"\n")


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


def document_report(
    text: str, vocabulary: RoleVocabulary = DEFAULT_VOCABULARY,
) -> dict[str, Any]:
    doc = parse_document(text)
    if doc is None:
        return {"status": "unparsed"}

    sections: list[dict[str, Any]] = []
    for section in doc.sections:
        entry = section.to_dict()
        entry["kind"] = section_kind(section.name)
        entry["displayLabel"] = format_section_label(section.name)
        entry["fieldRoles"] = [
            field_role(f.label, vocabulary=vocabulary) for f in section.fields
        ]
        products = product_entries(section)
        if products:
            entry["products"] = [p.to_dict() for p in products]
        sections.append(entry)

    report = doc.to_dict()
    report["sections"] = sections
    report["header"] = parse_header(doc.preamble).to_dict()
    report["designNotes"] = design_notes(doc.postamble)
    report["status"] = "parsed"
    return report


def outline_report(text: str, flow_kind: str) -> dict[str, Any]:
    outline = parse_outline(text, flow_kind)
    if outline is None:
        return {"status": "unparsed"}
    report = outline.to_dict()
    report["validation"] = validate_outline(outline).to_dict()
    report["status"] = "parsed"
    return report


def approval_report(text: str) -> dict[str, Any]:
    signals = approval_signals(text)
    return {
        "approved": signals.approved,
        "affirmative": [h.phrase for h in signals.affirmative],
        "negations": [h.phrase for h in signals.negations],
    }


def run(
    mode: str,
    text: str,
    *,
    flow_kind: str = "custom",
    vocabulary: RoleVocabulary = DEFAULT_VOCABULARY,
) -> dict[str, Any]:
    """Build the JSON report for one mode."""
    if mode == "document":
        return document_report(text, vocabulary)
    if mode == "outline":
        return outline_report(text, flow_kind)
    if mode == "approval":
        return approval_report(text)
    raise ValueError(f"unknown mode {mode!r}; expected one of {list(MODES)}")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Parse a model response with the copy parsers.",
    )
    parser.add_argument("--mode", choices=MODES, required=True)
    parser.add_argument(
        "--input", type=Path, default=None,
        help="Text file to parse (default: stdin)",
    )
    parser.add_argument(
        "--flow-kind", default="custom",
        help="Flow identifier for outline mode (default: custom)",
    )
    parser.add_argument(
        "--vocabulary", type=Path, default=None,
        help="JSON file of extra field-role synonyms",
    )
    parser.add_argument(
        "--output", type=Path, default=None,
        help="Also save the JSON report to this path",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )

    try:
        vocabulary = (
            RoleVocabulary.from_json(args.vocabulary)
            if args.vocabulary is not None
            else DEFAULT_VOCABULARY
        )
        text = read_text(args.input)
    except (OSError, ValueError) as exc:
        log.error("%s", exc)
        return 1

    report = run(args.mode, text, flow_kind=args.flow_kind, vocabulary=vocabulary)
    if report.get("status") == "unparsed":
        log.info("no %s structure found; render as plain text", args.mode)
    if args.output is not None:
        try:
            save_json(report, args.output)
        except OSError as exc:
            log.error("%s", exc)
            return 1
        log.info("wrote %s", args.output)
    dump_json(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
