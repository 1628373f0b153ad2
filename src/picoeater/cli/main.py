"""picoeater CLI entrypoint.

Commands are registered from `picoeater.cli.commands.*` modules; each module
exposes `register(app)`.
"""

from __future__ import annotations

import logging

import typer

app = typer.Typer(
    name="picoeater",
    add_completion=False,
    no_args_is_help=True,
    help="Split a PICO-8 .p8 cartridge into component files and build it back.",
)

LOG_FORMAT = "%(levelname)s %(name)s - %(message)s"


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    if verbose and quiet:
        raise typer.BadParameter("--verbose and --quiet are mutually exclusive")
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    # No-op when the root logger already has handlers (e.g. under pytest).
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("picoeater").setLevel(level)


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every file read and written."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors."),
) -> None:
    """picoeater CLI."""
    _configure_logging(verbose=verbose, quiet=quiet)


@app.command("version")
def version() -> None:
    """Print the installed picoeater version."""
    from picoeater import __version__

    typer.echo(__version__)


def _register_commands() -> None:
    """Register CLI subcommands."""
    from picoeater.cli.commands import build as build_cmd
    from picoeater.cli.commands import dump as dump_cmd

    dump_cmd.register(app)
    build_cmd.register(app)


_register_commands()
