"""Component filename convention.

Bidirectional mapping between sections and on-disk filenames:

- script tab      <-> `<name>.lua`
- resource/other  <-> `__<marker name>__.txt`   (e.g. `__gfx__.txt`, `__meta%3Atitle__.txt`)
- preamble        <-> `header.txt`

Characters that are unsafe in filenames on common filesystems (and `%` itself)
are `%XX`-escaped, so decoding with `urllib.parse.unquote` is exact.

The tab order file (`tab_order.txt`) is metadata, not a component file.
"""

from __future__ import annotations

import re
from urllib.parse import unquote

from picoeater.core.model import MARKER_NAME_RE

TAB_SUFFIX = ".lua"
HEADER_FILENAME = "header.txt"
ORDER_FILENAME = "tab_order.txt"

_UNSAFE_RE = re.compile(r'[\x00-\x1f\x7f/\\:*?"<>|%]')
_SECTION_FILE_RE = re.compile(r"^__(.+)__\.txt$")


def quote_component(s: str) -> str:
    return _UNSAFE_RE.sub(lambda m: "%%%02X" % ord(m.group(0)), s)


def unquote_component(s: str) -> str:
    return unquote(s)


def tab_filename(name: str) -> str:
    if not name:
        raise ValueError("tab_filename: tab name must be non-empty")
    return quote_component(name) + TAB_SUFFIX


def is_tab_filename(filename: str) -> bool:
    return filename.endswith(TAB_SUFFIX) and len(filename) > len(TAB_SUFFIX)


def tab_name_from_filename(filename: str) -> str:
    if not is_tab_filename(filename):
        raise ValueError(f"{filename!r}: not a tab filename (expected *{TAB_SUFFIX})")
    return unquote_component(filename[: -len(TAB_SUFFIX)])


def section_filename(marker_name: str) -> str:
    if not MARKER_NAME_RE.match(marker_name):
        raise ValueError(f"section_filename: invalid marker name {marker_name!r}")
    return f"__{quote_component(marker_name)}__.txt"


def marker_name_from_filename(filename: str) -> str | None:
    """Return the marker name encoded in a section filename, or None."""
    m = _SECTION_FILE_RE.match(filename)
    if not m:
        return None
    name = unquote_component(m.group(1))
    return name if MARKER_NAME_RE.match(name) else None


def is_component_filename(filename: str) -> bool:
    """True for any filename a dump could produce (excluding the order file)."""
    return (
        filename == HEADER_FILENAME
        or is_tab_filename(filename)
        or marker_name_from_filename(filename) is not None
    )
