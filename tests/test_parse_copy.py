"""Tests for scripts/parse_copy.py."""
from __future__ import annotations

import importlib.util
from pathlib import Path
from typing import Any

import orjson
import pytest


def _load_script() -> Any:
    root = Path(__file__).resolve().parents[1]
    script_path = root / "scripts" / "parse_copy.py"
    spec = importlib.util.spec_from_file_location("parse_copy", script_path)
    assert spec is not None
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None
    spec.loader.exec_module(module)
    return module


DRAFT = """Subject Line: Hello there

[HERO]
Eyebrow: New arrivals
Headline: Meet the collection
Button: Shop Now

[PRODUCT GRID]
- Tote | $40 | Canvas tote

---
Design notes: Warm tones.
"""

OUTLINE = """## Winback Flow Outline
**Goal:** Win back lapsed buyers
**Target Audience:** Customers inactive for 90 days

| # | Email Title | Timing | Purpose | Type | CTA |
|---|---|---|---|---|---|
| 1 | We Miss You | Day 0 | Reconnect | letter | Come Back |
"""


class TestRun:
    def test_document_report(self) -> None:
        mod = _load_script()
        report = mod.run("document", DRAFT)
        assert report["status"] == "parsed"
        assert report["header"]["subjectLine"] == "Hello there"
        assert report["designNotes"] == "Warm tones."
        hero, grid = report["sections"]
        assert hero["kind"] == "hero"
        assert hero["fieldRoles"] == ["accent", "headline", "cta"]
        assert grid["displayLabel"] == "Product Grid"
        assert grid["products"] == [
            {"name": "Tote", "price": "$40", "description": "Canvas tote"},
        ]

    def test_document_unparsed(self) -> None:
        mod = _load_script()
        assert mod.run("document", "plain words") == {"status": "unparsed"}

    def test_outline_report(self) -> None:
        mod = _load_script()
        report = mod.run("outline", OUTLINE, flow_kind="winback")
        assert report["status"] == "parsed"
        assert report["flowName"] == "Winback"
        assert report["steps"][0]["emailKind"] == "letter"
        assert report["validation"]["valid"] is True

    def test_approval_report(self) -> None:
        mod = _load_script()
        report = mod.run("approval", "Looks good, go ahead")
        assert report == {
            "approved": True,
            "affirmative": ["looks good", "go ahead"],
            "negations": [],
        }

    def test_unknown_mode(self) -> None:
        mod = _load_script()
        with pytest.raises(ValueError, match="unknown mode"):
            mod.run("html", "x")


class TestMain:
    def test_writes_json_to_stdout(
        self, tmp_path: Path, capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        mod = _load_script()
        draft = tmp_path / "draft.txt"
        draft.write_text(DRAFT, encoding="utf-8")
        assert mod.main(["--mode", "document", "--input", str(draft)]) == 0
        out = orjson.loads(capsysbinary.readouterr().out)
        assert [s["name"] for s in out["sections"]] == ["HERO", "PRODUCT GRID"]

    def test_vocabulary_file(
        self, tmp_path: Path, capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        mod = _load_script()
        draft = tmp_path / "draft.txt"
        draft.write_text("[HERO]\nBig Line: Hello\n", encoding="utf-8")
        vocab = tmp_path / "vocab.json"
        vocab.write_text('{"headline": ["Big Line"]}', encoding="utf-8")
        args = ["--mode", "document", "--input", str(draft), "--vocabulary", str(vocab)]
        assert mod.main(args) == 0
        out = orjson.loads(capsysbinary.readouterr().out)
        assert out["sections"][0]["fieldRoles"] == ["headline"]

    def test_output_file(
        self, tmp_path: Path, capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        mod = _load_script()
        reply = tmp_path / "reply.txt"
        reply.write_text("Looks good, go ahead", encoding="utf-8")
        target = tmp_path / "reports" / "approval.json"
        args = ["--mode", "approval", "--input", str(reply), "--output", str(target)]
        assert mod.main(args) == 0
        saved = orjson.loads(target.read_bytes())
        assert saved["approved"] is True
        assert saved == orjson.loads(capsysbinary.readouterr().out)

    def test_missing_input_file(self, tmp_path: Path) -> None:
        mod = _load_script()
        assert mod.main(["--mode", "approval", "--input", str(tmp_path / "nope.txt")]) == 1

    def test_bad_vocabulary(self, tmp_path: Path) -> None:
        mod = _load_script()
        vocab = tmp_path / "vocab.json"
        vocab.write_text('{"footer": ["legal"]}', encoding="utf-8")
        args = ["--mode", "approval", "--vocabulary", str(vocab)]
        assert mod.main(args) == 1
