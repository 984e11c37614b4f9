"""I/O utilities for JSON and text files.

orjson handles encoding; parse results are frozen dataclasses, which
orjson serializes natively, but callers normally pass ``to_dict()`` output
so the camelCase keys are used.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import orjson


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def dumps_json(obj: Any, *, pretty: bool = True) -> bytes:
    """Encode ``obj`` as JSON bytes (indented, sorted keys when ``pretty``)."""
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    return orjson.dumps(obj, option=opts)


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dumps_json(obj, pretty=pretty))


def read_text(path: Path | None) -> str:
    """Read a UTF-8 text file; ``None`` reads standard input."""
    if path is None:
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")
