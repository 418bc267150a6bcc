# smart_sorter/gui/widgets.py

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtWidgets import (
    QAbstractItemView, QFileDialog, QHBoxLayout, QLabel, QLineEdit, QListWidget, QPushButton,
    QSizePolicy, QVBoxLayout, QWidget
)

from .composition import attach_child, attach_children
from .resources import ICON_SIZE, get_icon


class DirectorySelector(QWidget):
    """
    A compound widget for choosing a directory: a label, a line edit and a
    browse button that opens the native folder dialog.
    """

    def __init__(self, label_text: str, parent=None):
        super().__init__(parent)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.label = QLabel(label_text)
        self.path_edit = QLineEdit()
        self.browse_button = QPushButton(" Browse...")
        self.browse_button.setIcon(get_icon("folder-open"))
        self.browse_button.setIconSize(ICON_SIZE)

        # Keeps stacked selectors aligned with each other.
        self.label.setMinimumWidth(120)

        attach_children(layout, [self.label, self.path_edit, self.browse_button])

        self.browse_button.clicked.connect(self._select_directory)

    @Slot()
    def _select_directory(self):
        dir_path = QFileDialog.getExistingDirectory(self, f"Select {self.label.text()}")
        if dir_path:
            self.path_edit.setText(dir_path)

    def path(self) -> str:
        return self.path_edit.text()

    def setPath(self, path: str):
        self.path_edit.setText(path)


class StatusWidget(QWidget):
    """Displays the current status line; long messages wrap instead of being clipped."""

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(10, 5, 10, 5)

        self.status_label = QLabel("Status:")
        self.status_label.setObjectName("StatusLabel")
        self.status_message = QLabel("Idle. Ready to start.")
        self.status_message.setWordWrap(True)

        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Minimum)

        attach_children(layout, [self.status_label, self.status_message])
        layout.addStretch()

    def set_status(self, message: str, is_error: bool = False):
        self.status_message.setText(message)
        if is_error:
            self.status_message.setStyleSheet("color: #BF616A;")  # Nord Red
        else:
            self.status_message.setStyleSheet("")


class TextListEditor(QWidget):
    """
    An ordered list of short strings with an entry box, used for property
    names and wildcard patterns. The order of the list is the order in which
    property values are joined into a folder name.
    """
    itemsChanged = Signal()

    def __init__(self, label_text: str, placeholder: str = "", parent=None):
        super().__init__(parent)

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)

        self.label = QLabel(label_text)
        self.list_widget = QListWidget()
        self.list_widget.setSelectionMode(QAbstractItemView.ExtendedSelection)
        self.list_widget.setMaximumHeight(110)

        self.entry_edit = QLineEdit()
        self.entry_edit.setPlaceholderText(placeholder)
        self.add_button = QPushButton("Add")
        self.remove_button = QPushButton("Remove Selected")
        self.remove_button.setIcon(get_icon("cancel"))

        entry_layout = QHBoxLayout()
        attach_children(entry_layout, [self.entry_edit, self.add_button, self.remove_button])
        attach_children(main_layout, [self.label, self.list_widget, entry_layout])

        self.add_button.clicked.connect(self._add_entry)
        self.entry_edit.returnPressed.connect(self._add_entry)
        self.remove_button.clicked.connect(self._remove_selected)

    @Slot()
    def _add_entry(self):
        text = self.entry_edit.text().strip()
        if text and not self.list_widget.findItems(text, Qt.MatchExactly):
            self.list_widget.addItem(text)
            self.itemsChanged.emit()
        self.entry_edit.clear()

    @Slot()
    def _remove_selected(self):
        for item in self.list_widget.selectedItems():
            self.list_widget.takeItem(self.list_widget.row(item))
        self.itemsChanged.emit()

    def items(self) -> list[str]:
        return [self.list_widget.item(i).text() for i in range(self.list_widget.count())]

    def setItems(self, items: list[str]):
        self.list_widget.clear()
        self.list_widget.addItems(list(items))
        self.itemsChanged.emit()


def labeled_row(label_text: str, field: QWidget) -> QHBoxLayout:
    """Builds a 'label: field' row; used as a builder by the tabs."""
    row = QHBoxLayout()
    label = QLabel(label_text)
    label.setMinimumWidth(120)
    attach_child(row, control=label)
    attach_child(row, control=field)
    return row
