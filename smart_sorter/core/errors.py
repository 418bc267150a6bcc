# smart_sorter/core/errors.py

"""
The small exception hierarchy shared by every part of the application.

Library code raises these; the CLI and the GUI worker are the only places
that catch them and turn them into user-facing messages.
"""
from pathlib import Path


class SorterError(Exception):
    """Base class for every error raised by Smart Image Sorter."""


class InvalidArgumentError(SorterError, ValueError):
    """A required argument is missing or has an unsupported type or combination."""


class ImageReadError(SorterError):
    """A file could not be resolved as an image or its metadata could not be read."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot read image '{path}': {reason}")
        self.path = path
        self.reason = reason


class OrganizeError(SorterError):
    """Raised by a strict organize run when a single file could not be processed."""

    def __init__(self, source: Path, reason: str):
        super().__init__(f"Failed to organize '{source}': {reason}")
        self.source = source
        self.reason = reason


class UnsafeDestinationError(SorterError, ValueError):
    """A folder name derived from metadata would place a file outside its base folder."""

    def __init__(self, folder: str, reason: str):
        super().__init__(f"Unsafe folder name {folder!r}: {reason}")
        self.folder = folder
        self.reason = reason
