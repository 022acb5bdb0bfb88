"""
Modal 3D Viewer
===============
Interactive side-by-side view of one chart entry's freedom and constraint spaces.

Why is this file needed?
------------------------
Thumbnails are static. Clicking a chart cell opens this dialog where the user
can orbit the two scenes. Both canvases share one camera and only the freedom
canvas takes mouse input, so the two views always show the same viewpoint.

The dialog, its scenes, plotters and camera are built once and reused; showing
another entry clears and repopulates the scenes.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QDialog, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget
from pyvistaqt import QtInteractor

from factchart import config
from factchart.controller.scene_assembler import Scene, SceneAssembler
from factchart.model.entries import ChartEntry
from factchart.shapes import ShapeRegistry
from factchart.view.scene_renderer import SceneRenderer, configure_camera
from factchart.view.widgets.render_loop import RenderLoop

logger = logging.getLogger(__name__)


class ModalViewer(QDialog):
    def __init__(self, registry: Optional[ShapeRegistry] = None, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("FACT Entry")
        self.setModal(True)
        self.resize(1000, 560)

        self.assembler = SceneAssembler(registry)
        self.freedom_scene = Scene(name="freedom", background=config.MODAL_BACKGROUND)
        self.constraint_scene = Scene(name="constraint", background=config.MODAL_BACKGROUND)
        self._entry: Optional[ChartEntry] = None

        self._init_ui()
        self._init_plotters()
        self.render_loop = RenderLoop(self)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def show_entry(self, entry: ChartEntry) -> None:
        """Repopulates both scenes from `entry` and (re)starts the frame loop."""
        logger.info(f"Opening entry '{entry.id}'.")
        self._entry = entry
        self.title_label.setText(entry.id)

        self.assembler.populate(self.freedom_scene, entry.freedom_space)
        self.assembler.populate(self.constraint_scene, entry.constraint_space)
        SceneRenderer.draw(self.freedom_plotter, self.freedom_scene)
        SceneRenderer.draw(self.constraint_plotter, self.constraint_scene)

        self.render_loop.start(self._render_frame)
        self.show()

    def close_viewer(self) -> None:
        """Stops the frame loop and hides the dialog."""
        self.render_loop.stop()
        self.hide()

    # ------------------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------------------

    def _init_ui(self) -> None:
        layout = QVBoxLayout(self)

        header = QHBoxLayout()
        self.title_label = QLabel("")
        self.title_label.setStyleSheet("font-weight: bold;")
        header.addWidget(self.title_label)
        header.addStretch(1)
        self.btn_close = QPushButton("Close")
        self.btn_close.clicked.connect(self.close_viewer)
        header.addWidget(self.btn_close)
        layout.addLayout(header)

        views = QHBoxLayout()
        self.freedom_plotter: QtInteractor = QtInteractor(self)
        self.constraint_plotter: QtInteractor = QtInteractor(self)
        for title, plotter in (("Freedom space", self.freedom_plotter), ("Constraint space", self.constraint_plotter)):
            column = QVBoxLayout()
            label = QLabel(title)
            label.setAlignment(Qt.AlignCenter)
            column.addWidget(label)
            column.addWidget(plotter)
            views.addLayout(column)
        layout.addLayout(views)

    def _init_plotters(self) -> None:
        # Shared camera, driven by the freedom canvas only
        camera = self.freedom_plotter.camera
        configure_camera(camera, config.MODAL_CAMERA_POSITION)
        self.constraint_plotter.camera = camera
        self.freedom_plotter.enable_trackball_style()
        self.constraint_plotter.disable()

    def _render_frame(self) -> None:
        self.freedom_plotter.render()
        self.constraint_plotter.render()

    def reject(self) -> None:
        # Escape key / window close button
        self.render_loop.stop()
        super().reject()

    def closeEvent(self, event: QCloseEvent) -> None:
        self.render_loop.stop()
        super().closeEvent(event)

    def shutdown(self) -> None:
        """Releases the VTK resources; call once when the application exits."""
        self.render_loop.stop()
        self.freedom_plotter.close()
        self.constraint_plotter.close()
