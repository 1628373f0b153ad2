"""`picoeater dump` command.

Splits a `.p8` cartridge into component files:
- one `<tab name>.lua` per script tab
- one `__<marker>__.txt` per resource section
- `header.txt` and `tab_order.txt`

Component-shaped files that this dump does not produce are reported as extra
files and left alone, or deleted with `--purge`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from picoeater.bundle.io import dump_cart
from picoeater.cli.commands._common import DIR_ENVVAR, report_error, resolve_cartridge
from picoeater.codecs.p8 import read_cart
from picoeater.core.errors import PicoEaterError


def register(app: typer.Typer) -> None:
    @app.command("dump")
    def dump(
        cart: Optional[str] = typer.Argument(
            None, help="Path to the .p8 cartridge (default: the only *.p8 in --dir)."
        ),
        directory: str = typer.Option(
            ".", "--dir", envvar=DIR_ENVVAR, help="Directory for the component files."
        ),
        purge: bool = typer.Option(
            False, "--purge", help="Delete component files this dump does not produce."
        ),
    ) -> None:
        """Split a cartridge into component files."""
        root = Path(directory)
        try:
            cart_path = resolve_cartridge(cart, root)
            doc = read_cart(cart_path)
            result = dump_cart(doc, root, purge=purge)
        except (PicoEaterError, OSError, UnicodeDecodeError) as e:
            report_error(e)
            raise typer.Exit(code=1) from e

        for path in result.purged:
            typer.echo(f"purged {path}")
        typer.echo(str(result.root))
