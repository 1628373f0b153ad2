"""PICO-8 `.p8` text cartridge codec (parse + serialize).

Format:

    pico-8 cartridge // http://www.pico-8.com
    version 41
    __lua__
    -- main
    ...
    -->8
    -- enemies
    ...
    __gfx__
    ...

- The first line is a fixed signature; whatever follows it up to the first
  marker (usually `version N`) is kept verbatim as the preamble.
- `__lua__` holds every script tab; tabs are separated by `-->8` lines.
- Resource sections (`__gfx__`, `__label__`, `__gff__`, `__map__`, `__sfx__`,
  `__music__`) and any other `__name__` marker are opaque text payloads.

Export writes the script region first, then resources in a fixed canonical
order, then other sections sorted by marker name. A section is omitted only
when it was absent; an empty section still emits its marker.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from picoeater.codecs._p8_parser import _split_sections, _split_tabs
from picoeater.codecs._p8_writer import _emit_line, _join_tabs, _require_permutation
from picoeater.core.errors import MalformedCartError
from picoeater.core.model import (
    KNOWN_MARKER_NAMES,
    RESOURCE_ORDER,
    SIGNATURE,
    CartridgeDocument,
    Section,
    SectionKind,
    detect_newline,
    marker_line,
)

logger = logging.getLogger(__name__)


# ----------------------------
# Public API
# ----------------------------


def parse_cart_text(text: str) -> CartridgeDocument:
    """Parse `.p8` text into a `CartridgeDocument`.

    Sections keep cartridge encounter order; the `__lua__` region is expanded
    in place into one SCRIPT_TAB section per tab.

    Raises:
        MalformedCartError: missing signature or duplicate section marker.
    """
    if not isinstance(text, str):
        raise TypeError(f"parse_cart_text: expected str, got {type(text).__name__}")

    preamble, blocks = _split_sections(text)

    sections: list[Section] = []
    for name, payload in blocks:
        kind = KNOWN_MARKER_NAMES.get(name)
        if kind is SectionKind.SCRIPT_TAB:
            for i, chunk in enumerate(_split_tabs(payload)):
                sections.append(Section(SectionKind.SCRIPT_TAB, chunk, index=i))
        elif kind is not None:
            sections.append(Section(kind, payload))
        else:
            sections.append(Section(SectionKind.OTHER, payload, name=name))

    newline = detect_newline(text) or "\n"
    doc = CartridgeDocument(preamble=preamble, sections=tuple(sections), newline=newline)
    logger.debug("parsed cartridge: %d tabs, %d sections", len(doc.tabs), len(doc.sections))
    return doc


def read_cart(path: str | Path) -> CartridgeDocument:
    """Read a `.p8` file from disk (UTF-8, no newline translation) and parse."""
    p = Path(path)
    with p.open("r", encoding="utf-8", newline="") as f:
        text = f.read()
    try:
        return parse_cart_text(text)
    except MalformedCartError as e:
        raise MalformedCartError(f"{p}: {e}") from e


def format_cart(doc: CartridgeDocument, *, tab_order: Sequence[int] | None = None) -> str:
    """Serialize a document to `.p8` text.

    Args:
        doc: The document to serialize.
        tab_order: Resolved order of tab indices. Defaults to cartridge order.
            Must be a permutation of the document's tab indices.

    Identical inputs always produce identical text.
    """
    tabs = doc.tabs
    order = _require_permutation(tab_order, len(tabs)) if tab_order is not None else list(range(len(tabs)))

    nl = doc.newline
    out: list[str] = [SIGNATURE + nl, doc.preamble]

    if tabs:
        _emit_line(out, marker_line(SectionKind.SCRIPT_TAB.value), nl)
        _join_tabs(out, [tabs[i].payload for i in order], nl)

    # ---- resources (fixed order) ----
    for kind in RESOURCE_ORDER:
        section = doc.resource(kind)
        if section is None:
            continue
        _emit_line(out, section.marker, nl)
        out.append(section.payload)

    # ---- other sections (sorted by marker name) ----
    for section in sorted(doc.others, key=lambda s: str(s.name)):
        _emit_line(out, section.marker, nl)
        out.append(section.payload)

    return "".join(out)


def write_cart(
    path: str | Path,
    doc: CartridgeDocument,
    *,
    tab_order: Sequence[int] | None = None,
) -> None:
    """Write a `.p8` file. Use newline="" to prevent newline translation."""
    out_text = format_cart(doc, tab_order=tab_order)
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="") as f:
        f.write(out_text)
