# smart_sorter/gui/tabs/organizer_tab.py

from PySide6.QtCore import QTimer, Slot
from PySide6.QtWidgets import (
    QCheckBox, QComboBox, QGroupBox, QHBoxLayout, QLabel, QLineEdit, QProgressBar,
    QPushButton, QVBoxLayout, QWidget
)

from smart_sorter.core.config_manager import load_settings
from ..action_controller import ActionController, OrganizeRequest
from ..composition import BuilderSpec, attach_children
from ..log_viewer import LogViewer
from ..resources import ICON_SIZE, get_icon
from ..widgets import DirectorySelector, StatusWidget, TextListEditor, labeled_row

MODE_PROPERTIES = "By Property"
MODE_EXPRESSIONS = "By Expression"


def _split_patterns(text: str) -> list[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


class OrganizerTab(QWidget):
    """
    The view for the image organizer. It only collects input and shows
    results; everything that touches the disk goes through the ActionController.
    """

    def __init__(self, controller: ActionController, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Organizer")
        self.controller = controller
        self._init_ui()
        self._load_defaults()
        self._connect_signals()
        self._connect_controller_signals()
        self.status_flash_timer = QTimer(self)
        self.status_flash_timer.setSingleShot(True)
        self.status_flash_timer.timeout.connect(self._clear_flash_status)
        self._update_button_states("IDLE")

    def _init_ui(self):
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(15, 15, 15, 15)
        main_layout.setSpacing(10)

        self.source_selector = DirectorySelector("Source Directory:")

        self.mode_combo = QComboBox()
        self.mode_combo.addItems([MODE_PROPERTIES, MODE_EXPRESSIONS])
        self.classifier_editor = TextListEditor("Folder Name Parts (in order):", "e.g. EquipMake")

        self.filter_edit = QLineEdit()
        self.filter_edit.setPlaceholderText("e.g. *.jpg")
        self.include_edit = QLineEdit()
        self.include_edit.setPlaceholderText("comma separated, e.g. *.jpg, *.png")
        self.exclude_edit = QLineEdit()
        self.exclude_edit.setPlaceholderText("comma separated, e.g. *_thumb.*")
        self.recurse_check = QCheckBox("Include subfolders")
        self.hide_progress_check = QCheckBox("Hide progress")

        self.options_group = QGroupBox("Options")
        attach_children(self.options_group, [
            BuilderSpec(labeled_row, {"label_text": "Naming Mode:", "field": self.mode_combo}),
            self.classifier_editor,
            BuilderSpec(labeled_row, {"label_text": "Filter:", "field": self.filter_edit}),
            BuilderSpec(labeled_row, {"label_text": "Include:", "field": self.include_edit}),
            BuilderSpec(labeled_row, {"label_text": "Exclude:", "field": self.exclude_edit}),
            BuilderSpec(self._build_flag_row),
        ])

        self.start_button = QPushButton(" Start")
        self.start_button.setIcon(get_icon("start"))
        self.preview_button = QPushButton(" Preview")
        self.preview_button.setIcon(get_icon("preview"))
        for button in (self.start_button, self.preview_button):
            button.setIconSize(ICON_SIZE)
        action_layout = QHBoxLayout()
        attach_children(action_layout, [self.start_button, self.preview_button])
        action_layout.addStretch()

        self.status_widget = StatusWidget()
        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.timer_label = QLabel("00:00")
        self.timer_label.setObjectName("TimerLabel")
        progress_layout = QHBoxLayout()
        attach_children(progress_layout, [self.progress_bar, self.timer_label])

        self.log_view = LogViewer()
        self.problems_only_check = QCheckBox("Only show skipped and failed files")
        log_header = QHBoxLayout()
        attach_children(log_header, [QLabel("Operation Log:")])
        log_header.addStretch()
        attach_children(log_header, [self.problems_only_check])

        attach_children(main_layout, [
            self.source_selector,
            self.options_group,
            action_layout,
            self.status_widget,
            progress_layout,
            log_header,
            self.log_view,
        ])

    def _build_flag_row(self) -> QHBoxLayout:
        row = QHBoxLayout()
        attach_children(row, [self.recurse_check, self.hide_progress_check])
        row.addStretch()
        return row

    def _load_defaults(self):
        """Pre-fills the form with the options the user last ran with."""
        defaults = load_settings()["organizer"]
        self.classifier_editor.setItems(defaults.get("properties") or [])
        self.filter_edit.setText(defaults.get("filter") or "")
        self.include_edit.setText(", ".join(defaults.get("include") or []))
        self.exclude_edit.setText(", ".join(defaults.get("exclude") or []))
        self.recurse_check.setChecked(bool(defaults.get("recurse")))
        self.hide_progress_check.setChecked(bool(defaults.get("hide_progress")))

    def _connect_signals(self):
        self.start_button.clicked.connect(self._on_start_clicked)
        self.preview_button.clicked.connect(self._on_preview_clicked)
        self.mode_combo.currentTextChanged.connect(self._on_mode_changed)
        self.source_selector.path_edit.textChanged.connect(self._check_input_validity)
        self.classifier_editor.itemsChanged.connect(self._check_input_validity)
        self.problems_only_check.toggled.connect(self.log_view.set_problems_only)

    def _connect_controller_signals(self):
        self.controller.progress_percentage_updated.connect(self.progress_bar.setValue)
        self.controller.log_entry_created.connect(self._handle_log_entry)
        self.controller.state_changed.connect(self._update_button_states)
        self.controller.status_updated.connect(self.status_widget.set_status)
        self.controller.timer_tick.connect(self._update_timer_display)

    def build_request(self) -> OrganizeRequest:
        """Collects the current form values into an OrganizeRequest."""
        return OrganizeRequest(
            paths=[self.source_selector.path().strip()],
            entries=self.classifier_editor.items(),
            use_expressions=self.mode_combo.currentText() == MODE_EXPRESSIONS,
            name_filter=self.filter_edit.text().strip() or None,
            include=_split_patterns(self.include_edit.text()),
            exclude=_split_patterns(self.exclude_edit.text()),
            recurse=self.recurse_check.isChecked(),
            hide_progress=self.hide_progress_check.isChecked(),
        )

    def _inputs_are_valid(self) -> bool:
        return bool(self.source_selector.path().strip() and self.classifier_editor.items())

    def _flash_status_message(self, message: str):
        self.status_widget.set_status(message, is_error=True)
        self.status_flash_timer.start(3500)

    @Slot()
    def _clear_flash_status(self):
        if self.controller.is_idle():
            self.status_widget.set_status("Idle. Ready to start.", is_error=False)

    @Slot()
    def _on_start_clicked(self):
        if not self._inputs_are_valid():
            self._flash_status_message("A source directory and at least one folder name part are required.")
            return
        self.log_view.clear_logs()
        self.progress_bar.setValue(0)
        self.controller.start_organize(self.build_request())

    @Slot()
    def _on_preview_clicked(self):
        if not self._inputs_are_valid():
            self._flash_status_message("A source directory and at least one folder name part are required.")
            return
        self.log_view.clear_logs()
        self.controller.start_preview(self.build_request())

    @Slot(str)
    def _on_mode_changed(self, mode: str):
        if mode == MODE_EXPRESSIONS:
            self.classifier_editor.label.setText("Classifier Expressions (in order):")
            self.classifier_editor.entry_edit.setPlaceholderText("e.g. props.get('Year')")
        else:
            self.classifier_editor.label.setText("Folder Name Parts (in order):")
            self.classifier_editor.entry_edit.setPlaceholderText("e.g. EquipMake")

    @Slot(dict)
    def _handle_log_entry(self, entry: dict):
        self.log_view.add_log_entry(entry["status"], entry["message"])

    @Slot(str)
    def _update_button_states(self, state: str):
        is_idle = state == "IDLE"
        can_start = is_idle and self._inputs_are_valid()
        self.start_button.setEnabled(can_start)
        self.preview_button.setEnabled(can_start)
        self.source_selector.setEnabled(is_idle)
        self.options_group.setEnabled(is_idle)

    @Slot()
    def _check_input_validity(self):
        if self.controller.is_idle():
            self._update_button_states("IDLE")

    @Slot(int)
    def _update_timer_display(self, elapsed_time: int):
        minutes, seconds = divmod(elapsed_time, 60)
        self.timer_label.setText(f"{minutes:02d}:{seconds:02d}")
