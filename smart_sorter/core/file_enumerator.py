# smart_sorter/core/file_enumerator.py

import fnmatch
import glob
import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Tuple

logger = logging.getLogger(__name__)

# System-generated files that are never worth handing to the image reader.
IGNORED_FILE_NAMES = ['thumbs.db', '.ds_store', 'desktop.ini']


def _as_path_list(paths: str | Path | Iterable[str | Path]) -> List[Path]:
    if isinstance(paths, (str, Path)):
        return [Path(paths)]
    return [Path(p) for p in paths]


def _matches_any(name: str, patterns: Sequence[str]) -> bool:
    """Case-insensitive wildcard match of a leaf name against a list of patterns."""
    lowered = name.lower()
    return any(fnmatch.fnmatch(lowered, pattern.lower()) for pattern in patterns)


def _literal_base(pattern: Path) -> Path:
    """Returns the deepest leading part of a wildcard path that has no wildcards in it."""
    parts = []
    for part in pattern.parts:
        if glob.has_magic(part):
            break
        parts.append(part)
    return Path(*parts) if parts else Path('.')


def _walk(root: Path, name_filter: str | None, recurse: bool) -> Iterator[Path]:
    """
    Yields the files below a directory in a stable, sorted order.
    The filter is applied here, while walking, so non-matching names are
    never turned into Path objects.
    """
    for current, dirs, filenames in os.walk(root):
        dirs.sort()
        if not recurse:
            dirs[:] = []  # Stop os.walk from going any deeper.

        for filename in sorted(filenames):
            if filename.lower() in IGNORED_FILE_NAMES:
                logger.debug(f"Ignoring system file: {filename}")
                continue
            if name_filter and not _matches_any(filename, [name_filter]):
                continue
            yield Path(current) / filename


def enumerate_files(
        paths: str | Path | Iterable[str | Path],
        name_filter: str | None = None,
        include: Sequence[str] | None = None,
        exclude: Sequence[str] | None = None,
        recurse: bool = False,
) -> Iterator[Tuple[Path, Path]]:
    """
    Enumerates the files selected by one or more path arguments.

    Each path may be a directory (its files are listed), a single file, or a
    wildcard pattern such as 'photos/*.jpg'. Matching directories are expanded
    like a plain directory argument.

    Args:
        paths: One path or a list of paths.
        name_filter: A single wildcard pattern applied to leaf names during enumeration.
        include: Wildcard patterns; when given, only leaf names matching one of them are kept.
        exclude: Wildcard patterns; leaf names matching any of them are dropped.
        recurse: Descend into subdirectories.

    Yields:
        (base, file) tuples. 'base' is the directory the file was found
        from: the directory argument itself, or the parent folder of a file
        or wildcard argument.
    """
    include = list(include or [])
    exclude = list(exclude or [])

    def selected(file_path: Path) -> bool:
        if include and not _matches_any(file_path.name, include):
            return False
        if exclude and _matches_any(file_path.name, exclude):
            return False
        return True

    for path in _as_path_list(paths):
        if glob.has_magic(str(path)):
            base = _literal_base(path)
            candidates = []
            for match in sorted(glob.glob(str(path))):
                match_path = Path(match)
                if match_path.is_dir():
                    candidates.extend(_walk(match_path, name_filter, recurse))
                elif match_path.is_file() and (not name_filter or _matches_any(match_path.name, [name_filter])):
                    candidates.append(match_path)
        elif path.is_dir():
            base = path
            candidates = _walk(path, name_filter, recurse)
        elif path.is_file():
            base = path.parent
            candidates = [path] if not name_filter or _matches_any(path.name, [name_filter]) else []
        else:
            logger.warning(f"Cannot find path '{path}' because it does not exist.")
            continue

        logger.info(f"Scanning '{path}' (recurse={recurse}).")
        for file_path in candidates:
            if selected(file_path):
                yield base, file_path
