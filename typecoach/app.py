"""Application entry point and setup for typecoach."""

import logging
import sys

from PySide6.QtWidgets import QApplication

from typecoach.core.modes import ModeRepository
from typecoach.core.progress import JsonFileStore, ProgressRepository
from typecoach.core.recorder import PracticeRecorder
from typecoach.core.texts import TextRepository
from typecoach.ui.main_window import MainWindow


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Load data and progress, then start the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("typecoach")
    app.setApplicationDisplayName("typecoach")

    modes = ModeRepository()
    texts = TextRepository()
    store = JsonFileStore()
    logging.info("Using progress file %s", store.file_path)
    recorder = PracticeRecorder(ProgressRepository(store))

    window = MainWindow(modes=modes, texts=texts, recorder=recorder)
    window.resize(900, 600)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
