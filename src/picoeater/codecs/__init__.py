"""Codecs for reading/writing cartridge file formats.

Only the PICO-8 `.p8` text format is supported; `.p8.png` cartridges are out
of scope.
"""

from __future__ import annotations

from .p8 import format_cart, parse_cart_text, read_cart, write_cart

__all__ = [
    "parse_cart_text",
    "read_cart",
    "format_cart",
    "write_cart",
]
