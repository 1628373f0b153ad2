"""`picoeater build` command.

Rebuilds a `.p8` cartridge from the component files in `--dir`, in the order
given by `tab_order.txt`. A failed build never touches the cartridge.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from picoeater.bundle.io import build_cart
from picoeater.cli.commands._common import DIR_ENVVAR, report_error, resolve_cartridge
from picoeater.core.errors import PicoEaterError


def register(app: typer.Typer) -> None:
    @app.command("build")
    def build(
        cart: Optional[str] = typer.Argument(
            None, help="Path to the .p8 cartridge to write (default: the only *.p8 in --dir)."
        ),
        directory: str = typer.Option(
            ".", "--dir", envvar=DIR_ENVVAR, help="Directory holding the component files."
        ),
    ) -> None:
        """Build a cartridge from component files."""
        root = Path(directory)
        try:
            cart_path = resolve_cartridge(cart, root)
            result = build_cart(root, cart_path)
        except (PicoEaterError, OSError, UnicodeDecodeError) as e:
            report_error(e)
            raise typer.Exit(code=1) from e

        typer.echo(str(result.cart_path))
