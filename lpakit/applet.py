"""Sub-command dispatch."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TextIO


@dataclass(frozen=True)
class Applet:
    """A named sub-command; ``main`` gets the argument list starting with its own name."""

    name: str
    main: Callable[[list[str]], int]


def _usage(selfname: str, entries: Sequence[Applet], out: TextIO) -> None:
    names = "|".join(entry.name for entry in entries)
    out.write(f"Usage: {selfname} <{names}>\n")


def applet_entry(argv: Sequence[str], entries: Sequence[Applet], stream: TextIO | None = None) -> int:
    """Run the entry named by ``argv[1]`` and return its result, or -1."""
    out = sys.stdout if stream is None else stream
    entries = list(entries)
    selfname = argv[0] if argv else ""

    if len(argv) < 2:
        _usage(selfname, entries, out)
        return -1

    for entry in entries:
        if entry.name == argv[1]:
            return entry.main(list(argv[1:]))

    out.write(f"Unknown command: {argv[1]}\n")
    _usage(selfname, entries, out)
    return -1