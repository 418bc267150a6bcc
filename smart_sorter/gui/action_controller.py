# smart_sorter/gui/action_controller.py

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from PySide6.QtCore import QObject, QThread, QTimer, Signal, Slot
from PySide6.QtWidgets import QWidget

from smart_sorter.core.config_manager import update_organizer_defaults
from smart_sorter.core.errors import ImageReadError, SorterError
from smart_sorter.core.expressions import compile_classifiers
from smart_sorter.core.file_enumerator import enumerate_files
from smart_sorter.core.image_metadata import read_image
from smart_sorter.core.organizer import (
    ByClassifier, ByProperty, Classification, FileResult, OrganizeSummary, organize, plan_destination
)

logger = logging.getLogger(__name__)

PREVIEW_LIMIT = 100


@dataclass
class OrganizeRequest:
    """Everything the organizer tab collected from its widgets."""
    paths: List[str]
    entries: List[str]
    use_expressions: bool = False
    name_filter: str | None = None
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    recurse: bool = False
    hide_progress: bool = False

    def classification(self) -> Classification:
        if self.use_expressions:
            return ByClassifier(compile_classifiers(self.entries))
        return ByProperty(self.entries)


class OrganizeWorker(QObject):
    """Runs one organize call in a background thread and reports every file."""
    progress_percentage_updated = Signal(int)
    log_entry_created = Signal(dict)
    summary_ready = Signal(object)
    finished = Signal()
    error_occurred = Signal(str)

    def __init__(self, request: OrganizeRequest):
        super().__init__()
        self.request = request

    @Slot()
    def run(self):
        try:
            summary = organize(
                self.request.paths,
                self.request.classification(),
                name_filter=self.request.name_filter,
                include=self.request.include,
                exclude=self.request.exclude,
                recurse=self.request.recurse,
                hide_progress=self.request.hide_progress,
                progress_callback=self._handle_progress,
            )
            for result in summary.results:
                self.log_entry_created.emit(_log_entry(result))
            self.summary_ready.emit(summary)
        except SorterError as e:
            logger.error(f"Organize worker error: {e}")
            self.error_occurred.emit(str(e))
        except Exception as e:
            logger.critical(f"Organize worker thread error: {e}", exc_info=True)
            self.error_occurred.emit(str(e))
        finally:
            self.finished.emit()

    def _handle_progress(self, percentage: int, source: Path, destination: Path):
        self.progress_percentage_updated.emit(percentage)


class PreviewWorker(QObject):
    """Computes where every file would go, without creating folders or copying."""
    log_entry_created = Signal(dict)
    status_updated = Signal(str, bool)
    finished = Signal()

    def __init__(self, request: OrganizeRequest):
        super().__init__()
        self.request = request

    @Slot()
    def run(self):
        try:
            self.status_updated.emit("Building preview...", False)
            classification = self.request.classification()
            planned = 0
            for base, source in enumerate_files(self.request.paths, self.request.name_filter,
                                                self.request.include, self.request.exclude,
                                                self.request.recurse):
                try:
                    destination = plan_destination(read_image(source), classification, base)
                except ImageReadError as e:
                    self.log_entry_created.emit({"status": "SKIPPED", "message": f"'{source.name}': {e.reason}"})
                    continue
                except Exception as e:
                    self.log_entry_created.emit({"status": "FAILED", "message": f"'{source.name}': {e}"})
                    continue

                if destination is None:
                    self.log_entry_created.emit(
                        {"status": "SKIPPED", "message": f"'{source.name}': no classification"})
                    continue

                planned += 1
                if planned <= PREVIEW_LIMIT:
                    self.log_entry_created.emit(
                        {"status": "INFO", "message": f"[PLAN] '{source.name}' -> '{destination}'"})

            if planned > PREVIEW_LIMIT:
                self.log_entry_created.emit({"status": "INFO", "message": f"...and {planned - PREVIEW_LIMIT} more."})
            self.status_updated.emit(f"Preview complete: {planned} file(s) would be copied.", False)
        except SorterError as e:
            self.status_updated.emit(f"Preview failed: {e}", True)
        except Exception as e:
            logger.error(f"Preview worker error: {e}", exc_info=True)
            self.status_updated.emit(f"Preview failed: {e}", True)
        finally:
            self.finished.emit()


def _log_entry(result: FileResult) -> dict:
    if result.status.value == "COPIED":
        message = f"'{result.source.name}' -> '{result.destination}'"
    else:
        message = f"'{result.source.name}': {result.reason}"
    return {"status": result.status.value, "message": message}


class ActionController(QObject):
    """
    The non-visual side of the GUI: owns the worker thread, the operation
    timer and the IDLE / RUNNING state, and talks to the views through signals.
    """
    progress_percentage_updated = Signal(int)
    log_entry_created = Signal(dict)
    state_changed = Signal(str)
    status_updated = Signal(str, bool)
    show_message_box = Signal(str, str, str)
    timer_tick = Signal(int)

    def __init__(self, parent_widget: QWidget | None = None):
        super().__init__()
        self.parent_widget = parent_widget
        self.active_thread = None
        self.active_worker = None
        self.last_summary: OrganizeSummary | None = None
        self.elapsed_time = 0
        self.operation_timer = QTimer(self)
        self.operation_timer.setInterval(1000)
        self.operation_timer.timeout.connect(self._on_timer_tick)

    def is_idle(self) -> bool:
        return self.active_thread is None

    def _start_worker(self, worker: QObject):
        self.active_thread = QThread()
        self.active_worker = worker
        self.active_worker.moveToThread(self.active_thread)
        self.active_worker.finished.connect(self._on_operation_finished)
        self.active_thread.started.connect(self.active_worker.run)
        self.active_thread.start()

    def start_organize(self, request: OrganizeRequest):
        """Starts an organize run in a background thread."""
        if not self.is_idle():
            return
        self.last_summary = None
        self.elapsed_time = 0
        self.timer_tick.emit(self.elapsed_time)
        self.operation_timer.start()
        self.state_changed.emit("RUNNING")
        self.status_updated.emit("Organizing images...", False)

        worker = OrganizeWorker(request)
        worker.progress_percentage_updated.connect(self.progress_percentage_updated)
        worker.log_entry_created.connect(self.log_entry_created)
        worker.summary_ready.connect(self._on_summary_ready)
        worker.error_occurred.connect(self._handle_error)
        self._start_worker(worker)

        if not request.use_expressions:
            update_organizer_defaults({
                "properties": request.entries,
                "filter": request.name_filter,
                "include": request.include,
                "exclude": request.exclude,
                "recurse": request.recurse,
                "hide_progress": request.hide_progress,
            })

    def start_preview(self, request: OrganizeRequest):
        """Starts a preview run that only reports planned destinations."""
        if not self.is_idle():
            return
        self.state_changed.emit("RUNNING")

        worker = PreviewWorker(request)
        worker.log_entry_created.connect(self.log_entry_created)
        worker.status_updated.connect(self.status_updated)
        self._start_worker(worker)

    @Slot(object)
    def _on_summary_ready(self, summary: OrganizeSummary):
        self.last_summary = summary
        message = f"Done: {summary.copied} copied, {summary.skipped} skipped, {summary.failed} failed."
        self.log_entry_created.emit({"status": "DONE", "message": message})
        self.status_updated.emit(message, summary.failed > 0)

    @Slot()
    def _on_operation_finished(self):
        """Stops the timer and waits for the worker thread to exit before going idle."""
        self.operation_timer.stop()
        if self.active_thread:
            self.active_thread.quit()
            self.active_thread.wait()

        self.active_thread = None
        self.active_worker = None
        self.state_changed.emit("IDLE")

    @Slot(str)
    def _handle_error(self, error_message: str):
        self.status_updated.emit(f"Error: {error_message}", True)
        self.show_message_box.emit("critical", "Operation Failed", f"An error occurred: {error_message}")

    @Slot()
    def _on_timer_tick(self):
        self.elapsed_time += 1
        self.timer_tick.emit(self.elapsed_time)
