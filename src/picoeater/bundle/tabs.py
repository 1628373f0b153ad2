"""Tab registry: tab names, filenames and tab order.

PICO-8 shows the first line of a tab as its name when that line is a Lua
comment (`-- enemies`). Dump reads that name and uses it for the tab's
filename; build derives the name back from the filename and makes sure the
tab's first line carries it. Renaming a tab file therefore renames the tab on
the next build.

Tabs without a name comment get a synthesized name (`tab<index>`). The tab is
"pending adoption": on the next build the synthesized name is written as the
tab's first line unless the user renamed the file first.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from picoeater.bundle.naming import (
    ORDER_FILENAME,
    is_tab_filename,
    tab_filename,
)
from picoeater.bundle.order import read_tab_order
from picoeater.core.errors import (
    AmbiguousTabOrderWarning,
    CartWarning,
    MissingTabFileError,
    TabOrderError,
    UnlistedTabFileError,
)
from picoeater.core.model import CartridgeDocument

logger = logging.getLogger(__name__)

_NAME_COMMENT_RE = re.compile(r"^--\s*(.*?)\s*$")
# `--[[ ... ]]` / `--[==[ ... ]==]` open a block comment; never a tab name.
_LONG_COMMENT_RE = re.compile(r"^--\[=*\[")


class NameState(str, Enum):
    COMMENTED = "commented"
    SYNTHESIZED = "synthesized"


@dataclass(frozen=True)
class TabEntry:
    index: int
    name: str
    filename: str
    state: NameState
    content: str

    @property
    def pending(self) -> bool:
        return self.state is NameState.SYNTHESIZED


@dataclass(frozen=True)
class TabOrder:
    """Resolved tab order for a build."""

    filenames: tuple[str, ...]
    from_file: bool
    warnings: tuple[CartWarning, ...] = ()


# ----------------------------
# Name comments
# ----------------------------


def parse_name_comment(line: str) -> str | None:
    """Return the tab name carried by a first line, or None."""
    line = line.rstrip("\r\n")
    if _LONG_COMMENT_RE.match(line):
        return None
    m = _NAME_COMMENT_RE.match(line)
    if not m or not m.group(1):
        return None
    return m.group(1)


def name_comment(name: str) -> str:
    return f"-- {name}"


def fallback_tab_name(index: int) -> str:
    return f"tab{index}"


def first_line(content: str) -> str:
    return content.split("\n", 1)[0]


def adopt_tab_name(name: str, content: str, newline: str = "\n") -> str:
    """Return `content` with `-- <name>` as its first line.

    - first line already names `name`: unchanged
    - first line names another tab: that line is replaced
    - otherwise: the name comment is prepended

    A prepended line ends like the content's own first line, or with
    `newline` when the content has no line break yet.
    """
    line, sep, rest = content.partition("\n")
    current = parse_name_comment(line)
    if current == name:
        return content
    if current is not None:
        eol = "\r" if line.endswith("\r") else ""
        return name_comment(name) + eol + sep + rest
    if sep:
        newline = "\r\n" if line.endswith("\r") else "\n"
    return name_comment(name) + newline + content


# ----------------------------
# Dump side
# ----------------------------


def register_tabs(doc: CartridgeDocument) -> list[TabEntry]:
    """Assign a name and a unique filename to every tab, in cartridge order.

    Names colliding (case-insensitively) with an earlier tab get a `~<n>`
    suffix; that suffixed name is adopted as the tab's comment on next build.
    """
    entries: list[TabEntry] = []
    used: set[str] = set()
    for tab in doc.tabs:
        index = int(tab.index)  # type: ignore[arg-type]
        name = parse_name_comment(first_line(tab.payload))
        state = NameState.COMMENTED
        if name is None:
            name = fallback_tab_name(index)
            state = NameState.SYNTHESIZED
            logger.info("tab %d has no name comment; using %r", index, name)

        candidate = name
        n = 2
        while tab_filename(candidate).casefold() in used:
            candidate = f"{name}~{n}"
            n += 1
        if candidate != name:
            logger.warning("tab %d: name %r is already taken; using %r", index, name, candidate)

        filename = tab_filename(candidate)
        used.add(filename.casefold())
        entries.append(
            TabEntry(index=index, name=candidate, filename=filename, state=state, content=tab.payload)
        )
    return entries


# ----------------------------
# Build side
# ----------------------------


def list_tab_files(root: Path) -> list[str]:
    """Tab filenames present in `root`, in lexical order."""
    return sorted(p.name for p in Path(root).iterdir() if p.is_file() and is_tab_filename(p.name))


def resolve_tab_order(root: Path) -> TabOrder:
    """Resolve the build order of tab files in `root`.

    With an order file: it must list exactly the tab files on disk. Entries
    match an on-disk filename exactly or, failing that, case-insensitively;
    the returned filenames are always the on-disk ones.
    Without one: lexical filename order (warned about when ambiguous).

    Raises:
        MissingTabFileError: a listed file does not exist.
        UnlistedTabFileError: a tab file on disk is not listed.
        TabOrderError: an entry is not a tab filename, is listed twice, or
            matches several files that differ only by case.
    """
    root = Path(root)
    on_disk = list_tab_files(root)
    order_path = root / ORDER_FILENAME
    listed = read_tab_order(order_path)

    if listed is None:
        warnings: tuple[CartWarning, ...] = ()
        if len(on_disk) > 1:
            w = AmbiguousTabOrderWarning(order_path, on_disk)
            logger.warning("%s", w)
            warnings = (w,)
        return TabOrder(filenames=tuple(on_disk), from_file=False, warnings=warnings)

    resolved: list[str] = []
    for fn in listed:
        if Path(fn).name != fn or not is_tab_filename(fn):
            raise TabOrderError(f"{order_path}: {fn!r} is not a tab filename (expected a *.lua name)")
        actual = _match_tab_file(fn, on_disk, order_path)
        if actual is None:
            raise MissingTabFileError(root / fn)
        if actual in resolved:
            raise TabOrderError(f"{order_path}: {fn!r} is listed more than once")
        if actual != fn:
            logger.debug("%s: %r matches %r on disk", order_path, fn, actual)
        resolved.append(actual)

    for fn in on_disk:
        if fn not in resolved:
            raise UnlistedTabFileError(root / fn)

    return TabOrder(filenames=tuple(resolved), from_file=True)


def _match_tab_file(fn: str, on_disk: list[str], order_path: Path) -> str | None:
    if fn in on_disk:
        return fn
    matches = [d for d in on_disk if d.casefold() == fn.casefold()]
    if len(matches) > 1:
        raise TabOrderError(f"{order_path}: {fn!r} matches several files: {', '.join(matches)}")
    return matches[0] if matches else None
