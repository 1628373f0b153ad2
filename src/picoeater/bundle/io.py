"""Dump a cartridge into component files and build it back.

A component directory contains:
- header.txt            (text between the signature line and `__lua__`)
- <tab name>.lua        (one per script tab)
- __<marker>__.txt      (one per resource / other section that was present)
- tab_order.txt         (tab filenames in cartridge order)

Dump overwrites its own files unconditionally and never touches other files,
except that `purge=True` deletes component-shaped files the dump did not
produce ("extra files") and that a file spelled differently only in case
from one the dump writes is renamed when the filesystem ignores case. Build reads everything before writing the cartridge,
so a failed build leaves the target file as it was.

This module intentionally avoids any dependency on the CLI.
"""

from __future__ import annotations

import errno
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from picoeater.bundle.naming import (
    HEADER_FILENAME,
    ORDER_FILENAME,
    is_component_filename,
    marker_name_from_filename,
    section_filename,
    tab_name_from_filename,
)
from picoeater.bundle.order import write_tab_order
from picoeater.bundle.tabs import TabEntry, TabOrder, adopt_tab_name, register_tabs, resolve_tab_order
from picoeater.codecs.p8 import format_cart
from picoeater.core.errors import AmbiguousCartridgeError, CartWarning, ExtraFileWarning
from picoeater.core.model import (
    KNOWN_MARKER_NAMES,
    RESOURCE_ORDER,
    CartridgeDocument,
    Section,
    SectionKind,
    detect_newline,
)

logger = logging.getLogger(__name__)

CART_SUFFIX = ".p8"


@dataclass(frozen=True)
class DumpResult:
    root: Path
    tabs: tuple[TabEntry, ...]
    written: tuple[Path, ...]
    extra_files: tuple[Path, ...]
    purged: tuple[Path, ...]
    warnings: tuple[CartWarning, ...]


@dataclass(frozen=True)
class CollectedCart:
    document: CartridgeDocument
    tab_order: tuple[int, ...]  # indices into document.tabs
    order: TabOrder


@dataclass(frozen=True)
class BuildResult:
    cart_path: Path
    tab_files: tuple[str, ...]
    warnings: tuple[CartWarning, ...]


def _write_text_exact(path: Path, text: str) -> None:
    # newline="" prevents Python from translating newlines on write
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(text)


def _read_text_exact(path: Path) -> str:
    with path.open("r", encoding="utf-8", newline="") as f:
        return f.read()


def _require_dir(root: Path) -> None:
    if not root.is_dir():
        raise FileNotFoundError(errno.ENOENT, "component directory not found", str(root))


# ----------------------------
# Cartridge discovery
# ----------------------------


def find_cartridge(directory: Path) -> Path:
    """Return the single `*.p8` file in `directory`.

    Raises:
        AmbiguousCartridgeError: zero or several candidates.
    """
    directory = Path(directory)
    _require_dir(directory)
    candidates = sorted(p for p in directory.glob(f"*{CART_SUFFIX}") if p.is_file())
    if len(candidates) != 1:
        raise AmbiguousCartridgeError(directory, candidates)
    return candidates[0]


# ----------------------------
# Dump (projection)
# ----------------------------


def plan_components(doc: CartridgeDocument, tabs: Iterable[TabEntry]) -> dict[str, str]:
    """Map every component filename this dump writes to its content.

    Insertion order is write order: header, tabs, resources, other sections.
    """
    planned: dict[str, str] = {HEADER_FILENAME: doc.preamble}
    for entry in tabs:
        planned[entry.filename] = entry.content
    for kind in RESOURCE_ORDER:
        section = doc.resource(kind)
        if section is not None:
            planned[section_filename(section.marker_name)] = section.payload
    for section in sorted(doc.others, key=lambda s: str(s.name)):
        planned[section_filename(section.marker_name)] = section.payload
    return planned


def list_component_files(root: Path) -> set[str]:
    """Component-shaped filenames currently present in `root`."""
    root = Path(root)
    if not root.is_dir():
        return set()
    return {p.name for p in root.iterdir() if p.is_file() and is_component_filename(p.name)}


def find_extra_files(existing: Iterable[str], expected: Iterable[str]) -> list[str]:
    """Component-shaped files present on disk that the dump will not write.

    Names are compared exactly; case-only variants of an expected file that
    are the same file on disk must be renamed first (`rename_case_variants`).
    """
    return sorted(set(existing) - set(expected))


def _same_file(a: Path, b: Path) -> bool:
    return a.exists() and b.exists() and a.samefile(b)


def rename_case_variants(root: Path, existing: set[str], expected: Iterable[str]) -> set[str]:
    """Give existing files the exact case of the expected names they alias.

    On a case-insensitive filesystem `Enemies.lua` and `enemies.lua` are one
    file: writing `enemies.lua` would keep the old spelling, which would then
    look like an extra file. Such files are renamed in place. On a
    case-sensitive filesystem they are distinct files and nothing happens.

    Returns the updated set of existing filenames.
    """
    root = Path(root)
    existing = set(existing)
    expected = list(expected)
    for filename in expected:
        if filename in existing:
            continue
        for other in sorted(existing):
            if other in expected or other.casefold() != filename.casefold():
                continue
            if not _same_file(root / other, root / filename):
                continue
            (root / other).rename(root / filename)
            logger.info("renamed %s to %s", root / other, root / filename)
            existing.discard(other)
            existing.add(filename)
            break
    return existing


def dump_cart(doc: CartridgeDocument, root: Path, *, purge: bool = False) -> DumpResult:
    """Project a document into component files under `root`.

    Existing files that alias a planned name up to case are renamed to it
    first. Extra files are reported as `ExtraFileWarning` and left alone, or
    deleted after the dump's own writes when `purge=True`.
    """
    root = Path(root)
    root.mkdir(parents=True, exist_ok=True)

    tabs = register_tabs(doc)
    planned = plan_components(doc, tabs)

    # Extra files are computed before anything is written.
    existing = rename_case_variants(root, list_component_files(root), planned)
    extras = find_extra_files(existing, planned)

    written: list[Path] = []
    for filename, text in planned.items():
        path = root / filename
        _write_text_exact(path, text)
        logger.debug("wrote %s", path)
        written.append(path)

    order_path = root / ORDER_FILENAME
    write_tab_order(order_path, [t.filename for t in tabs])
    written.append(order_path)

    purged: list[Path] = []
    warnings: list[CartWarning] = []
    for filename in extras:
        path = root / filename
        if purge:
            path.unlink()
            logger.info("purged extra file %s", path)
            purged.append(path)
        else:
            w = ExtraFileWarning(path)
            logger.warning("%s", w)
            warnings.append(w)

    logger.info(
        "dumped %d tabs and %d sections into %s",
        len(tabs),
        len(planned) - len(tabs) - 1,
        root,
    )
    return DumpResult(
        root=root,
        tabs=tuple(tabs),
        written=tuple(written),
        extra_files=tuple(root / fn for fn in extras),
        purged=tuple(purged),
        warnings=tuple(warnings),
    )


# ----------------------------
# Build (collection)
# ----------------------------


def _document_newline(texts: Iterable[str]) -> str:
    """Line terminator of the first text that contains a line break."""
    for text in texts:
        newline = detect_newline(text)
        if newline is not None:
            return newline
    return "\n"


def collect_cart(root: Path) -> CollectedCart:
    """Reconstruct a document from the component files under `root`.

    Missing resource files mean absent sections. Tab files are read in
    lexical filename order; the resolved order is returned separately. The
    document's line terminator is taken from the header, falling back to the
    first tab or section file that has a line break.

    Raises:
        MissingTabFileError / UnlistedTabFileError / TabOrderError
        FileNotFoundError: `root` does not exist.
    """
    root = Path(root)
    _require_dir(root)

    order = resolve_tab_order(root)

    header_path = root / HEADER_FILENAME
    preamble = _read_text_exact(header_path) if header_path.is_file() else ""

    on_disk = sorted(order.filenames)
    tab_texts = [_read_text_exact(root / filename) for filename in on_disk]

    resources: list[Section] = []
    for kind in RESOURCE_ORDER:
        path = root / section_filename(kind.value)
        if path.is_file():
            resources.append(Section(kind, _read_text_exact(path)))

    for filename in sorted(list_component_files(root)):
        name = marker_name_from_filename(filename)
        if name is None or name in KNOWN_MARKER_NAMES:
            continue
        resources.append(Section(SectionKind.OTHER, _read_text_exact(root / filename), name=name))

    newline = _document_newline([preamble, *tab_texts, *(s.payload for s in resources)])

    sections: list[Section] = []
    for i, (filename, content) in enumerate(zip(on_disk, tab_texts)):
        adopted = adopt_tab_name(tab_name_from_filename(filename), content, newline)
        if adopted != content:
            logger.info("%s: writing tab name comment into the cartridge", root / filename)
        sections.append(Section(SectionKind.SCRIPT_TAB, adopted, index=i))
    sections.extend(resources)

    doc = CartridgeDocument(preamble=preamble, sections=tuple(sections), newline=newline)
    tab_order = tuple(on_disk.index(fn) for fn in order.filenames)
    return CollectedCart(document=doc, tab_order=tab_order, order=order)


def build_cart(root: Path, cart_path: Path) -> BuildResult:
    """Build `cart_path` from the component files under `root`.

    Nothing is written unless collection succeeds. The order file is then
    rewritten with the resolved order: this pins a lexical fallback and
    normalizes a hand-edited file (blank lines, whitespace, filename case).
    """
    root = Path(root)
    cart_path = Path(cart_path)

    collected = collect_cart(root)
    text = format_cart(collected.document, tab_order=collected.tab_order)

    _write_text_exact(cart_path, text)
    logger.info("built %s from %d tabs", cart_path, len(collected.order.filenames))

    write_tab_order(root / ORDER_FILENAME, list(collected.order.filenames))

    return BuildResult(
        cart_path=cart_path,
        tab_files=collected.order.filenames,
        warnings=collected.order.warnings,
    )
