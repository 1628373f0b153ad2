"""Pytest configuration.

This repo follows the `src/` layout. Some environments may invoke a `pytest`
entrypoint from a different Python install than the one used for
`python -m pip install -e ...`, which can cause `import picoeater` to fail.

To keep the suite robust, we ensure `src/` is on `sys.path` during tests.
"""

from __future__ import annotations

import sys
from pathlib import Path


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    sys.path.insert(0, str(src_dir))


# =============================================================================
# Shared cartridge fixtures
# =============================================================================

SIGNATURE_LINE = "pico-8 cartridge // http://www.pico-8.com"


def make_cart_text(
    tabs: list[str] | None = None,
    *,
    version: str = "41",
    sections: list[tuple[str, str]] | None = None,
) -> str:
    """Build canonical `.p8` text.

    `tabs` are full tab bodies (each ending with a newline); `sections` are
    (marker name, payload) pairs emitted in the given order after `__lua__`.
    """
    parts = [SIGNATURE_LINE + "\n", f"version {version}\n"]
    if tabs is not None:
        parts.append("__lua__\n")
        parts.append("-->8\n".join(tabs))
    for name, payload in sections or []:
        parts.append(f"__{name}__\n")
        parts.append(payload)
    return "".join(parts)


def demo_cart_text() -> str:
    """Three named tabs plus every known resource section, canonical order."""
    return make_cart_text(
        [
            "-- main\nfunction _init()\n cls()\nend\n",
            "-- enemies\nfoes={}\n",
            "-- splash screen\nfunction splash() print(\"hi\") end\n",
        ],
        sections=[
            ("gfx", "00000000\n00700700\n"),
            ("label", "11111111\n"),
            ("gff", "0001020304\n"),
            ("map", "0102030405\n"),
            ("sfx", "000100001805018050\n"),
            ("music", "00 41424344\n"),
        ],
    )
