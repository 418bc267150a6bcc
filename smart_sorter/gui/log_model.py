# smart_sorter/gui/log_model.py

import datetime
from collections import Counter
from dataclasses import dataclass

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt
from PySide6.QtGui import QColor

from smart_sorter.core.organizer import FileStatus
from .resources import get_icon

# Rows the organizer did not produce itself: run totals and preview plans.
DONE = "DONE"
INFO = "INFO"

STATUS_ROLE = Qt.UserRole

_STATUS_ICON_NAMES = {
    FileStatus.COPIED.value: "success",
    FileStatus.SKIPPED.value: "skip",
    FileStatus.FAILED.value: "error",
    DONE: "success",
    INFO: "info",
}


@dataclass(frozen=True)
class LogEntry:
    status: str
    message: str
    time: str


class LogModel(QAbstractTableModel):
    """
    Rows of the operation log: one per file result, preview plan or run total.

    Column 0 shows the status icon, column 1 the message and column 2 the
    wall-clock time. The raw status string is exposed under STATUS_ROLE so a
    proxy model can filter on it.
    """
    HEADERS = ("", "Message", "Time")

    def __init__(self, parent=None):
        super().__init__(parent)
        self._entries: list[LogEntry] = []

    def rowCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self._entries)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):
        if not index.isValid():
            return None
        entry = self._entries[index.row()]
        column = index.column()

        if role == STATUS_ROLE:
            return entry.status
        if role == Qt.DisplayRole and column == 1:
            return entry.message
        if role == Qt.DisplayRole and column == 2:
            return entry.time
        if role == Qt.DecorationRole and column == 0:
            return get_icon(_STATUS_ICON_NAMES.get(entry.status, "info"))
        if role == Qt.ForegroundRole and entry.status == FileStatus.FAILED.value:
            return QColor("#BF616A")  # Nord Red
        if role == Qt.ToolTipRole:
            return f"{entry.status}: {entry.message}"
        return None

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole):
        if role == Qt.DisplayRole and orientation == Qt.Horizontal:
            return self.HEADERS[section]
        return None

    def add_entry(self, status: str, message: str):
        row = len(self._entries)
        self.beginInsertRows(QModelIndex(), row, row)
        self._entries.append(LogEntry(status.upper(), message, datetime.datetime.now().strftime("%H:%M:%S")))
        self.endInsertRows()

    def entry(self, row: int) -> LogEntry:
        return self._entries[row]

    def counts(self) -> Counter:
        """Number of rows per status, e.g. counts()['FAILED']."""
        return Counter(entry.status for entry in self._entries)

    def clear(self):
        self.beginResetModel()
        self._entries = []
        self.endResetModel()
