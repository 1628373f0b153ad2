"""Tab order file (`tab_order.txt`) read/write.

Plain text, one tab filename per line, in cartridge order. The file is created
on dump, may be hand-edited, and is the single source of truth for tab order
on build. Blank lines and surrounding whitespace are ignored on read.
"""

from __future__ import annotations

from pathlib import Path


def read_tab_order(path: Path) -> list[str] | None:
    """Return the listed filenames, or None when the file does not exist."""
    p = Path(path)
    if not p.exists():
        return None
    # utf-8-sig: tolerate a BOM from hand editing.
    text = p.read_text(encoding="utf-8-sig")
    return [line.strip() for line in text.splitlines() if line.strip()]


def write_tab_order(path: Path, filenames: list[str]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    text = "".join(f"{fn}\n" for fn in filenames)
    with p.open("w", encoding="utf-8", newline="") as f:
        f.write(text)
