# smart_sorter/gui/log_viewer.py

from PySide6.QtCore import QRegularExpression, QSortFilterProxyModel
from PySide6.QtWidgets import QAbstractItemView, QHeaderView, QTableView

from smart_sorter.core.organizer import FileStatus
from .log_model import STATUS_ROLE, LogModel

# Everything except successfully copied files.
PROBLEMS_PATTERN = QRegularExpression(f"^(?!{FileStatus.COPIED.value}$)")


class LogViewer(QTableView):
    """Read-only view of the operation log that can hide the COPIED rows of a large run."""

    def __init__(self, parent=None):
        super().__init__(parent)

        self._model = LogModel(self)
        self._proxy = QSortFilterProxyModel(self)
        self._proxy.setSourceModel(self._model)
        self._proxy.setFilterRole(STATUS_ROLE)
        self._proxy.setFilterKeyColumn(0)
        self.setModel(self._proxy)

        self.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setWordWrap(False)
        self.setShowGrid(False)
        self.verticalHeader().hide()

        header = self.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(1, QHeaderView.Stretch)
        header.setSectionResizeMode(2, QHeaderView.ResizeToContents)

    def add_log_entry(self, status: str, message: str):
        self._model.add_entry(status, message)
        self.scrollToBottom()

    def clear_logs(self):
        self._model.clear()

    def set_problems_only(self, enabled: bool):
        self._proxy.setFilterRegularExpression(PROBLEMS_PATTERN if enabled else QRegularExpression())

    def visible_row_count(self) -> int:
        return self._proxy.rowCount()

    def log_model(self) -> LogModel:
        return self._model
