# smart_sorter/core/image_metadata.py

import datetime
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping

from PIL import ExifTags, Image, UnidentifiedImageError
from PIL.TiffImagePlugin import IFDRational

from .errors import ImageReadError

logger = logging.getLogger(__name__)

EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"

# Friendly property names used by the classic Windows image scripts, mapped to
# the EXIF tag names Pillow reports. The first tag that has a value wins.
PROPERTY_ALIASES: Dict[str, tuple[str, ...]] = {
    "EquipMake": ("Make",),
    "EquipModel": ("Model",),
    "DateTaken": ("DateTimeOriginal", "DateTimeDigitized", "DateTime"),
    "ISOSpeed": ("ISOSpeedRatings", "PhotographicSensitivity"),
    "HorizontalResolution": ("XResolution",),
    "VerticalResolution": ("YResolution",),
    "Author": ("Artist",),
    "Title": ("ImageDescription",),
    "LensModel": ("LensModel",),
}


@dataclass(frozen=True)
class ImageFile:
    """
    A file on disk together with the metadata that was extracted from it.

    Property lookups are case-insensitive, so a classifier may ask for
    'equipmake' as well as 'EquipMake'. Missing properties read as None.
    """
    path: Path
    properties: Mapping[str, Any]
    _index: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))
        object.__setattr__(self, "_index", {key.lower(): key for key in self.properties})

    @property
    def name(self) -> str:
        return self.path.name

    def get(self, name: str, default: Any = None) -> Any:
        if name in self.properties:
            return self.properties[name]
        key = self._index.get(name.lower())
        return self.properties[key] if key is not None else default

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._index


def _clean_value(value: Any) -> Any:
    """Turns raw EXIF values into plain scalars that convert to readable text."""
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        return value.replace("\x00", "").strip()
    if isinstance(value, IFDRational):
        # A zero denominator means the camera left the field unset.
        return float(value) if value.denominator else None
    return value


def _parse_exif_date(value: Any) -> datetime.datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.datetime.strptime(value, EXIF_DATE_FORMAT)
    except ValueError:
        return None


def _read_exif(img: Image.Image) -> Dict[str, Any]:
    """Collects the base IFD and the Exif sub-IFD into one name -> value mapping."""
    tags: Dict[str, Any] = {}
    exif = img.getexif()
    if not exif:
        return tags

    for tag_id, value in exif.items():
        tags[ExifTags.TAGS.get(tag_id, str(tag_id))] = _clean_value(value)

    # DateTimeOriginal, ISO and exposure settings live in the Exif sub-IFD.
    for tag_id, value in exif.get_ifd(ExifTags.IFD.Exif).items():
        tags.setdefault(ExifTags.TAGS.get(tag_id, str(tag_id)), _clean_value(value))

    return tags


def read_image(path: Path) -> ImageFile:
    """
    Resolves a file as an image and extracts its metadata mapping.

    The mapping contains every named EXIF tag Pillow can decode, the image
    basics (Width, Height, Format, Mode), the file basics (Name, Extension,
    Length, LastWriteTime) and the friendly aliases from PROPERTY_ALIASES.
    Year, Month and Day come from DateTaken and fall back to the file's
    modification time when the image carries no usable date.

    Raises:
        ImageReadError: if the file is not an image or cannot be read.
    """
    path = Path(path)
    try:
        stat = path.stat()
        with Image.open(path) as img:
            try:
                properties: Dict[str, Any] = _read_exif(img)
            except Exception as e:
                # Pillow parses EXIF lazily; a damaged block can fail with almost anything.
                raise ImageReadError(path, f"unreadable EXIF data: {e!r}") from e
            properties.update({
                "Width": img.width,
                "Height": img.height,
                "Format": img.format,
                "Mode": img.mode,
            })
    except UnidentifiedImageError:
        raise ImageReadError(path, "not a recognised image format") from None
    except Image.DecompressionBombError as e:
        raise ImageReadError(path, f"too large to open safely ({e})") from e
    except (OSError, ValueError, SyntaxError) as e:
        raise ImageReadError(path, str(e)) from e

    for alias, tag_names in PROPERTY_ALIASES.items():
        for tag_name in tag_names:
            value = properties.get(tag_name)
            if value not in (None, ""):
                properties.setdefault(alias, value)
                break

    taken = _parse_exif_date(properties.get("DateTaken"))
    if taken is not None:
        properties["DateTaken"] = taken

    last_write = datetime.datetime.fromtimestamp(stat.st_mtime)
    properties.update({
        "Name": path.name,
        "Extension": path.suffix,
        "Length": stat.st_size,
        "LastWriteTime": last_write,
    })

    dated = taken or last_write
    properties.setdefault("Year", dated.year)
    properties.setdefault("Month", f"{dated.month:02d}")
    properties.setdefault("Day", f"{dated.day:02d}")

    logger.debug(f"Read {len(properties)} metadata properties from '{path.name}'.")
    return ImageFile(path=path, properties=properties)
