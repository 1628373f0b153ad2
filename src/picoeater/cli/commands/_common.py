"""Helpers shared by CLI commands: cartridge resolution and error reporting."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from picoeater.bundle.io import find_cartridge

DIR_ENVVAR = "PICOEATER_DIR"


def resolve_cartridge(cart: Optional[str], directory: Path) -> Path:
    """Explicit cartridge path, or the only `*.p8` in `directory`."""
    if cart:
        return Path(cart)
    return find_cartridge(directory)


def report_error(e: Exception) -> None:
    """Print `error: <Kind>: <message>` on stderr."""
    if isinstance(e, OSError) and e.filename is not None:
        msg = f"{e.filename}: {e.strerror or e}"
    else:
        msg = str(e)
    typer.echo(f"error: {type(e).__name__}: {msg}", err=True)
