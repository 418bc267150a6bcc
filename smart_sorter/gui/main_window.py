# smart_sorter/gui/main_window.py

import sys

from PySide6.QtCore import Slot
from PySide6.QtGui import QAction, QActionGroup, QKeySequence
from PySide6.QtWidgets import QApplication, QMainWindow, QMessageBox, QTabWidget

from smart_sorter.utils.logger import setup_logging
from .action_controller import ActionController
from .composition import BuilderSpec, attach_children
from .resources import THEMES, get_current_theme, get_icon, load_stylesheet, set_current_theme, validate_assets
from .tabs.inspector_tab import InspectorTab
from .tabs.organizer_tab import OrganizerTab

WINDOW_TITLE = " Smart Image Sorter"


class MainWindow(QMainWindow):
    """Menu bar plus one tab per tool. Long-running work lives in the ActionController."""

    def __init__(self):
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.setWindowIcon(get_icon("app_icon"))
        self.resize(900, 750)

        self.action_controller = ActionController(self)

        self.tab_widget = QTabWidget()
        self.organizer_tab, self.inspector_tab = attach_children(self.tab_widget, [
            BuilderSpec(OrganizerTab, {"controller": self.action_controller}),
            BuilderSpec(InspectorTab),
        ], passthrough=True)
        self.setCentralWidget(self.tab_widget)

        self._create_menus()
        self.action_controller.show_message_box.connect(self._show_message_box)
        self.action_controller.status_updated.connect(lambda message, _: self.statusBar().showMessage(message))

    def _create_menus(self):
        file_menu = self.menuBar().addMenu("&File")
        inspect_action = QAction(get_icon("image"), "&Inspect Image...", self)
        inspect_action.setShortcut(QKeySequence.Open)
        inspect_action.triggered.connect(self._open_inspector)
        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(inspect_action)
        file_menu.addSeparator()
        file_menu.addAction(quit_action)

        theme_menu = self.menuBar().addMenu("&Settings").addMenu("Theme")
        self.theme_group = QActionGroup(self)
        current_theme = get_current_theme()
        for label, theme_file in THEMES.items():
            action = QAction(label, self, checkable=True)
            action.setChecked(theme_file == current_theme)
            action.triggered.connect(lambda checked=False, name=theme_file: self._handle_theme_change(name))
            self.theme_group.addAction(action)
            theme_menu.addAction(action)

    @Slot()
    def _open_inspector(self):
        self.tab_widget.setCurrentWidget(self.inspector_tab)
        self.inspector_tab.choose_image()

    def _handle_theme_change(self, theme_file: str):
        if set_current_theme(theme_file):
            QApplication.instance().setStyleSheet(load_stylesheet())
        else:
            QMessageBox.critical(self, "Error", "Could not save theme setting.")

    @Slot(str, str, str)
    def _show_message_box(self, msg_type, title, message):
        if msg_type == "critical":
            QMessageBox.critical(self, title, message)
        else:
            QMessageBox.information(self, title, message)

    def closeEvent(self, event):
        if not self.action_controller.is_idle():
            reply = QMessageBox.question(self, 'Operation in Progress',
                                         "Images are still being copied. Quit anyway?",
                                         QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
            if reply != QMessageBox.Yes:
                event.ignore()
                return
        event.accept()


def run_gui():
    """Entry point for the graphical interface."""
    setup_logging()

    app = QApplication.instance() or QApplication(sys.argv)
    validate_assets()
    app.setStyleSheet(load_stylesheet())

    window = MainWindow()
    window.show()

    sys.exit(app.exec())
