# smart_sorter/gui/resources.py

import logging
import sys
from pathlib import Path

from PySide6.QtCore import QSize
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import QApplication, QStyle

from smart_sorter.core.config_manager import DEFAULT_SETTINGS, load_settings, save_settings

logger = logging.getLogger(__name__)

# Frozen builds unpack next to sys._MEIPASS; source checkouts keep assets in the project root.
PROJECT_ROOT = Path(getattr(sys, "_MEIPASS", Path(__file__).resolve().parents[2]))
ASSETS_PATH = PROJECT_ROOT / "assets"
THEMES_PATH = ASSETS_PATH / "styles" / "themes"
ICONS_PATH = ASSETS_PATH / "icons"

# Menu label -> stylesheet file in THEMES_PATH.
THEMES = {
    "Dark Theme": "dark_theme.qss",
    "Light Theme": "light_theme.qss",
}

# Icons the GUI asks for, and the built-in Qt icon shown when no SVG is shipped.
STANDARD_ICONS = {
    "app_icon": QStyle.StandardPixmap.SP_DirIcon,
    "folder-open": QStyle.StandardPixmap.SP_DirOpenIcon,
    "image": QStyle.StandardPixmap.SP_FileIcon,
    "preview": QStyle.StandardPixmap.SP_FileDialogContentsView,
    "start": QStyle.StandardPixmap.SP_MediaPlay,
    "cancel": QStyle.StandardPixmap.SP_DialogCancelButton,
    "success": QStyle.StandardPixmap.SP_DialogApplyButton,
    "skip": QStyle.StandardPixmap.SP_ArrowRight,
    "error": QStyle.StandardPixmap.SP_MessageBoxCritical,
    "info": QStyle.StandardPixmap.SP_MessageBoxInformation,
}
ICON_SIZE = QSize(20, 20)

_icon_cache: dict[str, QIcon] = {}


def validate_assets() -> bool:
    """Checks that every theme the menu offers exists. Missing SVG icons only lose their custom look."""
    missing = [name for name in THEMES.values() if not (THEMES_PATH / name).is_file()]
    for name in missing:
        logger.warning(f"Theme file not found: {THEMES_PATH / name}")

    custom_icons = [name for name in STANDARD_ICONS if (ICONS_PATH / f"{name}.svg").is_file()]
    logger.debug(f"{len(custom_icons)}/{len(STANDARD_ICONS)} icons have a custom SVG.")
    return not missing


def get_current_theme() -> str:
    theme = load_settings().get("theme")
    if theme not in THEMES.values():
        return DEFAULT_SETTINGS["theme"]
    return theme


def set_current_theme(theme_file: str) -> bool:
    settings = load_settings()
    settings["theme"] = theme_file
    return save_settings(settings)


def load_stylesheet() -> str:
    """Returns the current theme's stylesheet, or an empty string for Qt's default look."""
    theme_path = THEMES_PATH / get_current_theme()
    try:
        stylesheet = theme_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to load theme '{theme_path}': {e}")
        return ""
    logger.info(f"Loaded theme: {theme_path.name}")
    return stylesheet


def get_icon(name: str) -> QIcon:
    """
    Returns the icon for a name, preferring assets/icons/<name>.svg.

    Without a custom SVG the matching QStyle standard icon is used, so the
    GUI never shows blank buttons. Icons are cached after the first lookup.
    """
    if name in _icon_cache:
        return _icon_cache[name]

    icon_path = ICONS_PATH / f"{name}.svg"
    if icon_path.is_file():
        icon = QIcon(str(icon_path))
    elif name in STANDARD_ICONS and QApplication.instance() is not None:
        icon = QApplication.style().standardIcon(STANDARD_ICONS[name])
    else:
        logger.debug(f"No icon available for '{name}'.")
        return QIcon()

    _icon_cache[name] = icon
    return icon
