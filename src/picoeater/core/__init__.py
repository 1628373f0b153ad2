"""picoeater core: cartridge document model and error taxonomy.

This package is intentionally standalone and must not import CLI/codecs/bundle
to avoid circular dependencies.
"""

from __future__ import annotations

from .errors import (
    AmbiguousCartridgeError,
    AmbiguousTabOrderWarning,
    CartWarning,
    ExtraFileWarning,
    MalformedCartError,
    MissingTabFileError,
    PicoEaterError,
    TabOrderError,
    UnlistedTabFileError,
)
from .model import (
    KNOWN_MARKER_NAMES,
    MARKER_NAME_RE,
    NEWLINES,
    RESOURCE_ORDER,
    SIGNATURE,
    CartridgeDocument,
    Section,
    SectionKind,
    detect_newline,
    marker_line,
)

__all__ = [
    "SIGNATURE",
    "RESOURCE_ORDER",
    "KNOWN_MARKER_NAMES",
    "MARKER_NAME_RE",
    "SectionKind",
    "Section",
    "CartridgeDocument",
    "NEWLINES",
    "detect_newline",
    "marker_line",
    "PicoEaterError",
    "MalformedCartError",
    "AmbiguousCartridgeError",
    "TabOrderError",
    "MissingTabFileError",
    "UnlistedTabFileError",
    "CartWarning",
    "ExtraFileWarning",
    "AmbiguousTabOrderWarning",
]
