# smart_sorter/core/organizer.py

"""
Copies images into folders named after their own metadata.

A run walks the requested paths, reads every file as an image, derives a
folder name from either a list of metadata property names or a list of
classifier callables, and copies the file into '<base>/<folder name>/'.
Nothing about a single bad file stops the run: every file ends up as one
FileResult in the returned OrganizeSummary.
"""

import datetime
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PureWindowsPath
from typing import Any, Callable, Iterable, List, Sequence, Union

from .errors import ImageReadError, InvalidArgumentError, OrganizeError, UnsafeDestinationError
from .file_enumerator import enumerate_files
from .file_operations import DuplicateStrategy, safe_copy
from .image_metadata import ImageFile, read_image

logger = logging.getLogger(__name__)

PROGRESS_STEP = 5
PROGRESS_LIMIT = 100

ProgressCallback = Callable[[int, Path, Path], None]
Classifier = Callable[[ImageFile], Any]


def to_text(value: Any) -> str:
    """Converts a metadata value or classifier result to the text used in folder names."""
    if value is None:
        return ""
    if isinstance(value, datetime.datetime):
        return value.strftime("%Y-%m-%d %H.%M.%S")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _join_parts(parts: Iterable[str]) -> str:
    return " ".join(parts).strip()


@dataclass(frozen=True)
class ByProperty:
    """Folder names are built from the values of these metadata properties, in order."""
    names: Sequence[str]

    def __post_init__(self):
        names = (self.names,) if isinstance(self.names, str) else tuple(self.names)
        if not names:
            raise InvalidArgumentError("At least one property name is required.")
        if not all(isinstance(name, str) and name.strip() for name in names):
            raise InvalidArgumentError(f"Property names must be non-empty strings: {names!r}")
        object.__setattr__(self, "names", names)

    def folder_name(self, image: ImageFile) -> str:
        return _join_parts(to_text(image.get(name)) for name in self.names)


@dataclass(frozen=True)
class ByClassifier:
    """Folder names are built from the results of these callables, each called with the image."""
    blocks: Sequence[Classifier]

    def __post_init__(self):
        blocks = (self.blocks,) if callable(self.blocks) else tuple(self.blocks)
        if not blocks:
            raise InvalidArgumentError("At least one classifier is required.")
        if not all(callable(block) for block in blocks):
            raise InvalidArgumentError("Every classifier must be callable.")
        object.__setattr__(self, "blocks", blocks)

    def folder_name(self, image: ImageFile) -> str:
        return _join_parts(to_text(block(image)) for block in self.blocks)


Classification = Union[ByProperty, ByClassifier]


@dataclass
class ProgressCounter:
    """
    Percentage shown while a run is copying files.

    It is not a real percentage: it moves up by a fixed step per copied file
    and starts again from 0 as soon as it passes the limit. One counter
    belongs to one run unless the caller deliberately shares it.
    """
    step: int = PROGRESS_STEP
    limit: int = PROGRESS_LIMIT
    value: int = 0

    def advance(self) -> int:
        self.value += self.step
        if self.value > self.limit:
            self.value = 0
        return self.value


class FileStatus(str, Enum):
    COPIED = "COPIED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class FileResult:
    source: Path
    status: FileStatus
    destination: Path | None = None
    reason: str = ""


@dataclass
class OrganizeSummary:
    """Everything that happened during one organize run, in processing order."""
    results: List[FileResult] = field(default_factory=list)
    counter: ProgressCounter = field(default_factory=ProgressCounter)

    def _count(self, status: FileStatus) -> int:
        return sum(1 for result in self.results if result.status == status)

    @property
    def copied(self) -> int:
        return self._count(FileStatus.COPIED)

    @property
    def skipped(self) -> int:
        return self._count(FileStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(FileStatus.FAILED)

    @property
    def progress(self) -> int:
        return self.counter.value

    def by_status(self, status: FileStatus) -> List[FileResult]:
        return [result for result in self.results if result.status == status]


def destination_folder(base: Path, folder: str) -> Path | None:
    """
    Joins a folder name below 'base', treating both '/' and '\\' as separators.

    Every segment becomes a subfolder, so '2024/05' yields 'base/2024/05'.
    Leading separators and drive letters are dropped. Returns None when
    nothing but separators is left.

    Raises:
        UnsafeDestinationError: if the name holds a NUL byte or a '..'
            segment, or if the joined path resolves outside 'base'
            (e.g. through a symlinked folder).
    """
    if "\x00" in folder:
        raise UnsafeDestinationError(folder, "contains a NUL byte")

    windows_path = PureWindowsPath(folder)
    relative = folder[len(windows_path.drive):].replace("\\", "/")
    parts = [part.strip() for part in relative.split("/")]
    parts = [part for part in parts if part not in ("", ".")]
    if ".." in parts:
        raise UnsafeDestinationError(folder, "'..' is not allowed in a folder name")
    if not parts:
        return None

    base = Path(base)
    destination = base.joinpath(*parts)
    if not destination.resolve().is_relative_to(base.resolve()):
        raise UnsafeDestinationError(folder, f"resolves outside '{base}'")
    return destination


def plan_destination(image: ImageFile, classification: Classification, base: Path) -> Path | None:
    """
    Returns the folder an image would be copied into, or None when every
    classifier produced empty text. Classifier exceptions and
    UnsafeDestinationError propagate.
    """
    folder = classification.folder_name(image)
    if not folder:
        return None
    return destination_folder(base, folder)


def organize(
        path: str | Path | Iterable[str | Path],
        classification: Classification,
        name_filter: str | None = None,
        include: Sequence[str] | None = None,
        exclude: Sequence[str] | None = None,
        recurse: bool = False,
        hide_progress: bool = False,
        progress_callback: ProgressCallback | None = None,
        stop_on_error: bool = False,
        duplicate_strategy: DuplicateStrategy = DuplicateStrategy.REPLACE,
        counter: ProgressCounter | None = None,
) -> OrganizeSummary:
    """
    Copies every image found under 'path' into a folder named after its metadata.

    Args:
        path: A directory, file or wildcard pattern, or a list of them.
        classification: ByProperty or ByClassifier; decides the folder names.
        name_filter: Wildcard applied to leaf names while enumerating.
        include: Wildcards a leaf name must match to be processed.
        exclude: Wildcards that remove matching leaf names.
        recurse: Descend into subdirectories.
        hide_progress: Do not advance or report the progress counter.
        progress_callback: Called as (percent, source, destination) after each copy attempt.
        stop_on_error: Raise OrganizeError on the first failed file instead of recording it.
        duplicate_strategy: What to do when the destination file exists (default: overwrite).
        counter: An existing ProgressCounter to continue from. A fresh one is used otherwise.

    Returns:
        An OrganizeSummary with one FileResult per enumerated file.
    """
    if not isinstance(classification, (ByProperty, ByClassifier)):
        raise InvalidArgumentError("classification must be a ByProperty or ByClassifier instance.")

    summary = OrganizeSummary(counter=counter if counter is not None else ProgressCounter())

    def record(result: FileResult):
        summary.results.append(result)
        logger.debug(f"[{result.status.value}] '{result.source}' -> '{result.destination}' {result.reason}")

    for base, source in enumerate_files(path, name_filter, include, exclude, recurse):
        try:
            image = read_image(source)
        except ImageReadError as e:
            record(FileResult(source, FileStatus.SKIPPED, reason=e.reason))
            continue

        try:
            folder = classification.folder_name(image)
        except Exception as e:
            record(FileResult(source, FileStatus.FAILED, reason=f"classifier failed: {e}"))
            if stop_on_error:
                raise OrganizeError(source, f"classifier failed: {e}") from e
            continue

        try:
            destination_dir = destination_folder(base, folder) if folder else None
        except UnsafeDestinationError as e:
            record(FileResult(source, FileStatus.FAILED, reason=str(e)))
            if stop_on_error:
                raise OrganizeError(source, str(e)) from e
            continue

        if destination_dir is None:
            record(FileResult(source, FileStatus.SKIPPED, reason="no classification"))
            continue

        destination = destination_dir / source.name
        try:
            status, destination = safe_copy(source, destination_dir, duplicate_strategy)
            record(FileResult(source, FileStatus(status), destination,
                              reason="already exists" if status == "SKIPPED" else ""))
        except (OSError, ValueError) as e:
            # ValueError covers names the OS rejects outright, such as overlong ones.
            record(FileResult(source, FileStatus.FAILED, destination, reason=str(e)))
            if stop_on_error:
                raise OrganizeError(source, str(e)) from e

        if not hide_progress:
            percent = summary.counter.advance()
            if progress_callback:
                progress_callback(percent, source, destination)

    logger.info(
        f"Organize finished: {summary.copied} copied, {summary.skipped} skipped, {summary.failed} failed.")
    return summary
