"""Component directory format (dump/build).

- one file per script tab and per present section
- `tab_order.txt` with tab filenames in cartridge order
- extra-file detection as a set difference against the files a dump writes
"""

from __future__ import annotations

from .io import BuildResult, DumpResult, build_cart, collect_cart, dump_cart, find_cartridge

__all__ = [
    "DumpResult",
    "BuildResult",
    "dump_cart",
    "collect_cart",
    "build_cart",
    "find_cartridge",
]
