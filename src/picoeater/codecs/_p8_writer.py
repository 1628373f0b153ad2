"""Internal writer helpers for the `.p8` codec.

This is a private module; public API is in `p8.py`.
"""

from __future__ import annotations

from typing import Sequence

from picoeater.codecs._p8_parser import TAB_DIVIDER


def _terminate(out: list[str], newline: str = "\n") -> None:
    """Make sure the accumulated text ends on a line boundary."""
    for chunk in reversed(out):
        if chunk:
            if not chunk.endswith("\n"):
                out.append(newline)
            return


def _emit_line(out: list[str], line: str, newline: str = "\n") -> None:
    _terminate(out, newline)
    out.append(line + newline)


def _join_tabs(out: list[str], chunks: Sequence[str], newline: str = "\n") -> None:
    """Append tab chunks separated by `-->8` divider lines."""
    for i, chunk in enumerate(chunks):
        if i:
            _emit_line(out, TAB_DIVIDER, newline)
        out.append(chunk)


def _require_permutation(order: Sequence[int], n: int) -> list[int]:
    idx = [int(i) for i in order]
    if sorted(idx) != list(range(n)):
        raise ValueError(f"tab_order: expected a permutation of 0..{n - 1}, got {idx}")
    return idx
