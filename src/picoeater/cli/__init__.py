"""picoeater command line interface (Typer)."""
