# smart_sorter/gui/tabs/inspector_tab.py

import logging
from pathlib import Path

from PySide6.QtCore import Slot
from PySide6.QtWidgets import (
    QAbstractItemView, QFileDialog, QHBoxLayout, QHeaderView, QLabel, QPushButton, QTableWidget,
    QTableWidgetItem, QVBoxLayout, QWidget
)

from smart_sorter.core.errors import ImageReadError
from smart_sorter.core.image_metadata import read_image
from smart_sorter.core.organizer import to_text
from ..composition import attach_children
from ..resources import ICON_SIZE, get_icon

logger = logging.getLogger(__name__)

IMAGE_FILE_FILTER = "Images (*.jpg *.jpeg *.png *.tif *.tiff *.webp *.bmp *.gif);;All Files (*)"


class InspectorTab(QWidget):
    """Shows every metadata property of one image, so users can pick property names."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Image Inspector")

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(15, 15, 15, 15)

        self.open_button = QPushButton(" Open Image...")
        self.open_button.setIcon(get_icon("folder-open"))
        self.open_button.setIconSize(ICON_SIZE)
        self.file_label = QLabel("No image selected.")
        self.file_label.setWordWrap(True)

        header_layout = QHBoxLayout()
        attach_children(header_layout, [self.open_button, self.file_label])

        self.table = QTableWidget(0, 2)
        self.table.setHorizontalHeaderLabels(["Property", "Value"])
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.Stretch)
        self.table.verticalHeader().hide()

        attach_children(main_layout, [header_layout, self.table])

        self.open_button.clicked.connect(self.choose_image)

    @Slot()
    def choose_image(self):
        file_path, _ = QFileDialog.getOpenFileName(self, "Select Image", "", IMAGE_FILE_FILTER)
        if file_path:
            self.show_image(Path(file_path))

    def show_image(self, path: Path) -> bool:
        """Fills the table with the image's properties. Returns False if it is not an image."""
        self.table.setRowCount(0)
        try:
            image = read_image(path)
        except ImageReadError as e:
            logger.warning(str(e))
            self.file_label.setText(f"Not an image: {path.name} ({e.reason})")
            return False

        self.file_label.setText(str(path))
        for name in sorted(image.properties, key=str.lower):
            row = self.table.rowCount()
            self.table.insertRow(row)
            self.table.setItem(row, 0, QTableWidgetItem(name))
            self.table.setItem(row, 1, QTableWidgetItem(to_text(image.properties[name])))
        return True
