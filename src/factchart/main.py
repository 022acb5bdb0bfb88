"""
Application Initialization
==========================
Loads the chart data, renders the thumbnails and starts the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Loads the static chart data (the only input of the application).
2. Builds the shape registry shared by the thumbnail compositor and the viewer.
3. Renders all thumbnails once, yielding to Qt between batches.
4. Passes everything to the Main Window.
"""
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from factchart import config
from factchart.controller.thumbnails import ThumbnailCompositor
from factchart.logging_config import setup_logging
from factchart.model.io import index_entries, load_chart_entries
from factchart.shapes import default_registry
from factchart.view.dialogs.modal_viewer import ModalViewer
from factchart.view.main_window import MainWindow

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> None:
    argv = sys.argv if argv is None else argv

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.INFO)

    # 2. Create the Qt Application
    app = QApplication(argv)
    app.setApplicationName("FACT Chart")

    # 3. Load data (optional path as the first argument)
    data_path = argv[1] if len(argv) > 1 else config.DEFAULT_DATA_PATH
    entries = load_chart_entries(data_path)

    # 4. Thumbnails (strictly sequential, cooperative)
    registry = default_registry()
    compositor = ThumbnailCompositor(registry=registry)
    thumbnails = compositor.generate(entries, on_yield=app.processEvents)

    # 5. Initialize the Main Window
    viewer = ModalViewer(registry=registry)
    window = MainWindow(index_entries(entries), thumbnails, viewer=viewer)
    window.show()

    # 6. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
