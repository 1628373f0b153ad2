"""Cartridge document model.

A parsed `.p8` cartridge is an ordered sequence of typed sections with exact
text payloads. Presence is structural: a section missing from the source is
simply not in `CartridgeDocument.sections`, while an empty-but-present section
carries `payload == ""`.

This module must not import codecs/bundle/cli.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

SIGNATURE = "pico-8 cartridge // http://www.pico-8.com"

# Marker names: `lua`, `gfx`, ..., `meta:title`.
MARKER_NAME_RE = re.compile(r"^[a-z][a-z0-9]*(?::[A-Za-z0-9_.-]+)?$")


class SectionKind(str, Enum):
    """Closed set of section kinds; the value is the marker name."""

    SCRIPT_TAB = "lua"
    SPRITE = "gfx"
    LABEL = "label"
    FLAGS = "gff"
    MAP = "map"
    SFX = "sfx"
    MUSIC = "music"
    OTHER = "other"


# Canonical emission order for resource sections (OTHER follows, by name).
RESOURCE_ORDER: tuple[SectionKind, ...] = (
    SectionKind.SPRITE,
    SectionKind.LABEL,
    SectionKind.FLAGS,
    SectionKind.MAP,
    SectionKind.SFX,
    SectionKind.MUSIC,
)

KNOWN_MARKER_NAMES: dict[str, SectionKind] = {
    k.value: k for k in SectionKind if k is not SectionKind.OTHER
}


NEWLINES = ("\n", "\r\n")


def marker_line(name: str) -> str:
    """Return the marker line text for a marker name (no newline)."""
    return f"__{name}__"


def detect_newline(text: str) -> str | None:
    """Terminator of the first line of `text`, or None when it has none."""
    head, sep, _ = text.partition("\n")
    if not sep:
        return None
    return "\r\n" if head.endswith("\r") else "\n"


@dataclass(frozen=True)
class Section:
    kind: SectionKind
    payload: str
    index: int | None = None  # SCRIPT_TAB only
    name: str | None = None  # OTHER only

    def __post_init__(self) -> None:
        if not isinstance(self.payload, str):
            raise TypeError(f"Section.payload: expected str, got {type(self.payload).__name__}")
        if self.kind is SectionKind.SCRIPT_TAB:
            if self.index is None or self.index < 0:
                raise ValueError("Section: script tabs require a non-negative index")
        elif self.index is not None:
            raise ValueError(f"Section: index is only valid for script tabs, not {self.kind.value}")
        if self.kind is SectionKind.OTHER:
            if not self.name or self.name in KNOWN_MARKER_NAMES or not MARKER_NAME_RE.match(self.name):
                raise ValueError(f"Section: invalid name for an other section: {self.name!r}")
        elif self.name is not None:
            raise ValueError(f"Section: name is only valid for other sections, not {self.kind.value}")

    @property
    def marker_name(self) -> str:
        if self.kind is SectionKind.OTHER:
            return str(self.name)
        return self.kind.value

    @property
    def marker(self) -> str:
        return marker_line(self.marker_name)


@dataclass(frozen=True)
class CartridgeDocument:
    """In-memory cartridge: preamble text plus sections in cartridge order.

    `newline` is the cartridge's line terminator (taken from the signature
    line); the serializer uses it for every line it writes itself.
    """

    preamble: str = ""
    sections: tuple[Section, ...] = ()
    newline: str = "\n"

    def __post_init__(self) -> None:
        object.__setattr__(self, "sections", tuple(self.sections))
        if self.newline not in NEWLINES:
            raise ValueError(f"CartridgeDocument.newline: expected one of {NEWLINES}, got {self.newline!r}")
        _check_sections(self.sections)

    @property
    def tabs(self) -> tuple[Section, ...]:
        return tuple(s for s in self.sections if s.kind is SectionKind.SCRIPT_TAB)

    @property
    def others(self) -> tuple[Section, ...]:
        return tuple(s for s in self.sections if s.kind is SectionKind.OTHER)

    def resource(self, kind: SectionKind) -> Section | None:
        """Return the section of a resource kind, or None when absent."""
        if kind in (SectionKind.SCRIPT_TAB, SectionKind.OTHER):
            raise ValueError(f"resource: {kind.value} is not a single-instance resource kind")
        for s in self.sections:
            if s.kind is kind:
                return s
        return None

    def has(self, kind: SectionKind) -> bool:
        return any(s.kind is kind for s in self.sections)


def _check_sections(sections: Iterable[Section]) -> None:
    seen: set[str] = set()
    tab_indices: list[int] = []
    for s in sections:
        if not isinstance(s, Section):
            raise TypeError(f"CartridgeDocument.sections: expected Section, got {type(s).__name__}")
        if s.kind is SectionKind.SCRIPT_TAB:
            tab_indices.append(int(s.index))  # type: ignore[arg-type]
            continue
        if s.marker_name in seen:
            raise ValueError(f"CartridgeDocument: section {s.marker} appears more than once")
        seen.add(s.marker_name)
    if tab_indices != list(range(len(tab_indices))):
        raise ValueError(f"CartridgeDocument: tab indices must be 0..N-1 in order, got {tab_indices}")
