# smart_sorter/core/file_operations.py

import logging
import shutil
from enum import Enum, auto
from pathlib import Path

# The main application configures the handlers; this module only emits records.
logger = logging.getLogger(__name__)


class DuplicateStrategy(Enum):
    """What to do when the destination file already exists."""
    REPLACE = auto()
    SKIP = auto()
    APPEND_NUMBER = auto()


def _get_unique_path(destination_path: Path) -> Path:
    """
    Generates a unique path if the destination already exists by appending a number.

    Example:
        If 'image.jpg' exists, it will return 'image_1.jpg'.
        If 'image_1.jpg' also exists, it will return 'image_2.jpg'.
    """
    if not destination_path.exists():
        return destination_path

    parent = destination_path.parent
    stem = destination_path.stem
    suffix = destination_path.suffix
    counter = 1

    while True:
        new_path = parent.joinpath(f"{stem}_{counter}{suffix}")
        if not new_path.exists():
            logger.debug(f"Found unique path for '{destination_path}': '{new_path}'")
            return new_path
        counter += 1


def ensure_directory(directory: Path) -> Path:
    """Creates a directory and any missing parents. Existing directories are left alone."""
    if not directory.is_dir():
        logger.debug(f"Creating folder '{directory}'")
        directory.mkdir(parents=True, exist_ok=True)
    return directory


def safe_copy(
        source_path: Path,
        destination_dir: Path,
        duplicate_strategy: DuplicateStrategy = DuplicateStrategy.REPLACE,
) -> tuple[str, Path]:
    """
    Copies a file into a destination directory, creating the directory if needed.

    The default strategy overwrites an existing file of the same name, which
    is plain copy semantics. Errors (permissions, disk full, vanished source)
    are raised to the caller, which decides whether a batch should continue.

    Args:
        source_path: The file to copy.
        destination_dir: The folder the file should end up in.
        duplicate_strategy: How to handle a file that already exists at the destination.

    Returns:
        A tuple of the status ('COPIED' or 'SKIPPED') and the destination file path.
    """
    if not source_path.is_file():
        raise FileNotFoundError(f"Source path is not a valid file: {source_path}")

    ensure_directory(destination_dir)
    destination_path = destination_dir.joinpath(source_path.name)

    if destination_path.exists():
        if duplicate_strategy == DuplicateStrategy.SKIP:
            logger.info(f"Skipping '{source_path.name}' as it already exists in destination.")
            return "SKIPPED", destination_path

        elif duplicate_strategy == DuplicateStrategy.REPLACE:
            logger.debug(f"Replacing existing file at '{destination_path}'.")

        elif duplicate_strategy == DuplicateStrategy.APPEND_NUMBER:
            destination_path = _get_unique_path(destination_path)

    # copy2 keeps timestamps, so date-based re-runs see the same file dates.
    logger.debug(f"Copying '{source_path}' to '{destination_path}'")
    shutil.copy2(source_path, destination_path)
    return "COPIED", destination_path
