"""JSON line output of command results and progress."""

from __future__ import annotations

import json
import sys
from typing import Any, TextIO


def _emit(kind: str, code: int, message: str | None, data: Any, stream: TextIO | None) -> None:
    out = sys.stdout if stream is None else stream
    document = {"type": kind, "payload": {"code": code, "message": message, "data": data}}
    out.write(json.dumps(document, separators=(",", ":"), ensure_ascii=False) + "\n")
    out.flush()


def jprint_error(function_name: str | None, detail: str | None = None, stream: TextIO | None = None) -> None:
    """Report a failed step; a missing detail is written as an empty string."""
    _emit("lpa", -1, function_name, "" if detail is None else detail, stream)


def jprint_progress(function_name: str | None, detail: str | None = None, stream: TextIO | None = None) -> None:
    """Report a step in progress with a text detail."""
    _emit("progress", 0, function_name, detail, stream)


def jprint_progress_obj(function_name: str | None, data: Any = None, stream: TextIO | None = None) -> None:
    """Report a step in progress with structured data."""
    _emit("progress", 0, function_name, data, stream)


def jprint_success(data: Any = None, stream: TextIO | None = None) -> None:
    """Report the final result of a command."""
    _emit("lpa", 0, "success", data, stream)