"""Internal parsing helpers for the `.p8` codec.

Private module for parsing logic; public API is in `p8.py`.
"""
from __future__ import annotations

import re

from picoeater.core.errors import MalformedCartError
from picoeater.core.model import MARKER_NAME_RE, SIGNATURE

_MARKER_RE = re.compile(r"^__(.+)__$")

TAB_DIVIDER = "-->8"


def _split_lines_keepends(text: str) -> list[str]:
    """Split on `\\n` only, keeping line endings.

    `str.splitlines()` also breaks on form feeds and unicode separators, which
    can legitimately appear inside Lua strings.
    """
    parts = text.split("\n")
    lines = [p + "\n" for p in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _match_marker(line: str) -> str | None:
    m = _MARKER_RE.match(line.rstrip())
    if m and MARKER_NAME_RE.match(m.group(1)):
        return m.group(1)
    return None


def _split_sections(text: str) -> tuple[str, list[tuple[str, str]]]:
    """Split cartridge text into (preamble, [(marker_name, payload), ...]).

    Payloads are exact: everything after the marker line up to the next marker
    line (or EOF), line endings included.

    Raises:
        MalformedCartError: missing signature line or a repeated marker.
    """
    lines = _split_lines_keepends(text)
    if not lines or lines[0].rstrip() != SIGNATURE:
        first = lines[0].rstrip() if lines else ""
        raise MalformedCartError(f"line 1: expected signature {SIGNATURE!r}, got {first!r}")

    preamble: list[str] = []
    blocks: list[tuple[str, str]] = []
    seen: dict[str, int] = {}

    current: str | None = None
    body: list[str] = []

    for lineno, line in enumerate(lines[1:], start=2):
        name = _match_marker(line)
        if name is None:
            if current is None:
                preamble.append(line)
            else:
                body.append(line)
            continue

        if name in seen:
            raise MalformedCartError(
                f"line {lineno}: section marker __{name}__ repeats the one on line {seen[name]}"
            )
        seen[name] = lineno

        # flush previous
        if current is not None:
            blocks.append((current, "".join(body)))
        current = name
        body = []

    if current is not None:
        blocks.append((current, "".join(body)))

    return "".join(preamble), blocks


def _split_tabs(payload: str) -> list[str]:
    """Split the `__lua__` payload into tab chunks on `-->8` divider lines.

    Always returns at least one chunk; divider lines are dropped.
    """
    chunks: list[str] = []
    current: list[str] = []
    for line in _split_lines_keepends(payload):
        if line.rstrip() == TAB_DIVIDER:
            chunks.append("".join(current))
            current = []
        else:
            current.append(line)
    chunks.append("".join(current))
    return chunks
