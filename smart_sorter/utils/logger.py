# smart_sorter/utils/logger.py

import logging
import logging.handlers
from pathlib import Path

from rich.logging import RichHandler

LOG_DIR = Path(__file__).resolve().parents[2] / "logs"
LOG_FILE_NAME = "smart_sorter.log"

# Libraries that log every probe they make at DEBUG.
NOISY_LOGGERS = ("PIL",)


class LoggerManager:
    """
    Configures the root logger once per process.

    The console gets short, colored records through rich at INFO (DEBUG with
    --verbose). The rotating log file always gets DEBUG, which is where every
    per-file organize outcome ends up.
    """

    def __init__(self, log_dir: Path = LOG_DIR, console_level: int = logging.INFO,
                 max_bytes: int = 5 * 1024 * 1024, backup_count: int = 5):
        self.log_file_path = Path(log_dir) / LOG_FILE_NAME
        self.console_level = console_level
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.root_logger = logging.getLogger()

    def setup(self) -> bool:
        """Returns False when logging was already configured by someone else."""
        if self.root_logger.hasHandlers():
            return False

        self.root_logger.setLevel(logging.DEBUG)
        self.root_logger.addHandler(self._create_console_handler())
        file_handler = self._create_file_handler()
        if file_handler is not None:
            self.root_logger.addHandler(file_handler)

        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.INFO)
        return True

    def _create_console_handler(self) -> logging.Handler:
        handler = RichHandler(show_path=False, rich_tracebacks=True, log_time_format="%H:%M:%S")
        handler.setLevel(self.console_level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    def _create_file_handler(self) -> logging.Handler | None:
        try:
            self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.handlers.RotatingFileHandler(
                self.log_file_path, maxBytes=self.max_bytes, backupCount=self.backup_count, encoding="utf-8"
            )
        except OSError as e:
            # Read-only installs still get console logging.
            logging.getLogger(__name__).warning(f"Cannot write log file '{self.log_file_path}': {e}")
            return None
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - [%(levelname)s] - %(filename)s:%(lineno)d - %(message)s"
        ))
        return handler


def setup_logging(verbose: bool = False) -> bool:
    manager = LoggerManager(console_level=logging.DEBUG if verbose else logging.INFO)
    configured = manager.setup()
    if configured:
        logging.getLogger(__name__).debug(f"Logging to {manager.log_file_path}")
    return configured
