"""picoeater — split PICO-8 `.p8` cartridges into component files and back.

`dump` writes each script tab and each resource section to its own file;
`build` reassembles the cartridge from those files.
"""

from __future__ import annotations

from picoeater.codecs import parse_cart_text, read_cart
from picoeater.core import CartridgeDocument

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CartridgeDocument",
    "parse_cart_text",
    "read_cart",
]
