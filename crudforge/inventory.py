"""Scan the output tree for artifacts a previous run already generated.

Each generated file starts with a header line recording its intent.  The
planner compares those intents with the ones it is about to write to decide
whether an existing file can be reused, overwritten, or is a conflict.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

from crudforge.planner import UNKNOWN_INTENT

_HEADER_RE = re.compile(r'^// <auto-generated by="crudforge" intent="([^"]+)" />')


def read_intent(path: Path) -> str:
    """Return the intent recorded in *path*'s header, or ``UNKNOWN_INTENT``."""
    with path.open("r", encoding="utf-8", errors="replace") as handle:
        first_line = handle.readline()
    match = _HEADER_RE.match(first_line.lstrip("\ufeff"))
    return match.group(1) if match else UNKNOWN_INTENT


def read_existing_intents(root: Path, relative_paths: Iterable[str]) -> dict[str, str]:
    """Map each of *relative_paths* that exists under *root* to its intent.

    Paths that do not exist are omitted.
    """
    found: dict[str, str] = {}
    for relative in relative_paths:
        candidate = Path(root) / relative
        if candidate.is_file():
            found[relative] = read_intent(candidate)
    return found
