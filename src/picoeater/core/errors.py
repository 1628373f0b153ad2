"""Error and warning taxonomy.

Errors are fatal for a single CLI invocation; warnings are non-fatal and are
returned to the caller (and logged) instead of raised.
"""

from __future__ import annotations

from pathlib import Path


class PicoEaterError(Exception):
    """Base class for all picoeater errors."""


class MalformedCartError(PicoEaterError, ValueError):
    """Cartridge text is missing its signature or repeats a section marker."""


class AmbiguousCartridgeError(PicoEaterError):
    """Zero or several cartridge candidates were found in a directory."""

    def __init__(self, directory: Path, candidates: list[Path]):
        self.directory = Path(directory)
        self.candidates = list(candidates)
        if not self.candidates:
            msg = f"{self.directory}: no .p8 cartridge found; pass the cartridge path explicitly"
        else:
            names = ", ".join(p.name for p in self.candidates)
            msg = f"{self.directory}: several .p8 cartridges found ({names}); pass the cartridge path explicitly"
        super().__init__(msg)


class TabOrderError(PicoEaterError, ValueError):
    """The tab order file does not describe the tab files on disk."""


class MissingTabFileError(TabOrderError):
    """The tab order file references a tab file that does not exist."""

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(f"{self.path}: listed in the tab order file but missing on disk")


class UnlistedTabFileError(TabOrderError):
    """A tab file exists on disk but is not listed in the tab order file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(f"{self.path}: tab file is not listed in the tab order file")


class CartWarning(UserWarning):
    """Non-fatal condition tied to one path."""

    def __init__(self, path: Path, message: str):
        self.path = Path(path)
        super().__init__(message)


class ExtraFileWarning(CartWarning):
    """A component-shaped file on disk that the current dump does not produce."""

    def __init__(self, path: Path):
        super().__init__(path, f"{Path(path)}: extra component file (not produced by this dump)")


class AmbiguousTabOrderWarning(CartWarning):
    """No tab order file; several tab files were ordered by filename."""

    def __init__(self, path: Path, filenames: list[str]):
        self.filenames = list(filenames)
        super().__init__(
            path,
            f"{Path(path)}: missing; ordering {len(self.filenames)} tab files by filename",
        )
