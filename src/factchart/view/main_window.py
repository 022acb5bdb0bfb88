"""
Main Application Window
=======================
The FACT chart: one grid cell per chart slot, with thumbnails for the slots
that have data.

Why is this file needed?
------------------------
1. Layout: It places the 50 slots produced by the chart layout on a grid.
2. Routing: Clicking a populated cell opens the modal 3D viewer for its entry.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from PySide6.QtCore import Qt, QSize
from PySide6.QtGui import QPixmap, QIcon
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QGridLayout, QVBoxLayout, QToolButton, QLabel, QScrollArea, QSizePolicy
)

from factchart import config
from factchart.controller.thumbnails import decode_data_url
from factchart.model.chart_layout import ChartSlot, generate_chart_layout, group_by_grid_cell
from factchart.model.entries import ChartEntry
from factchart.view.dialogs.modal_viewer import ModalViewer

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "FACT Chart"

CELL_STYLE = """
    QToolButton { border: 1px solid #999; background: white; }
    QToolButton[parallel="true"] { border: 2px solid #3a6ea5; }
    QToolButton:hover { background: #eef4ff; }
    QLabel[empty="true"] { border: 1px dashed #bbb; color: #888; background: #fafafa; }
"""


class MainWindow(QMainWindow):
    def __init__(
        self,
        entries: Dict[str, ChartEntry],
        thumbnails: Dict[str, str],
        viewer: Optional[ModalViewer] = None
    ) -> None:
        super().__init__()
        self.entries = entries
        self.thumbnails = thumbnails
        self.viewer = viewer or ModalViewer(parent=self)

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1500, 1000)
        self.setStyleSheet(CELL_STYLE)

        grid_host = QWidget()
        self.grid = QGridLayout(grid_host)
        self.grid.setSpacing(4)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(grid_host)
        self.setCentralWidget(scroll)

        self._build_chart()

    def _build_chart(self) -> None:
        slots = generate_chart_layout()
        placed = 0
        for cell, group in group_by_grid_cell(slots).items():
            self.grid.addWidget(self._make_cell(group), cell.row, cell.column)
            placed += len(group)
        logger.info(f"Chart built: {placed} slots, {sum(s.id in self.entries for s in slots)} with data.")

    def _make_cell(self, group: List[ChartSlot]) -> QWidget:
        """One widget per grid cell; slots sharing a cell are stacked vertically."""
        if len(group) == 1:
            return self._make_slot_widget(group[0])

        stack = QWidget()
        layout = QVBoxLayout(stack)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)
        for slot in group:
            layout.addWidget(self._make_slot_widget(slot))
        return stack

    def _make_slot_widget(self, slot: ChartSlot) -> QWidget:
        size = QSize(config.THUMB_WIDTH * 2, config.THUMB_HEIGHT)
        entry = self.entries.get(slot.id)

        if entry is None:
            # No data for this slot: placeholder, not an error
            label = QLabel(slot.id)
            label.setObjectName(slot.id)
            label.setProperty("empty", True)
            label.setAlignment(Qt.AlignCenter)
            label.setMinimumSize(size)
            return label

        button = QToolButton()
        button.setObjectName(slot.id)
        button.setProperty("parallel", slot.is_parallel_pyramid)
        button.setToolTip(slot.id)
        button.setMinimumSize(size)
        button.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

        url = self.thumbnails.get(slot.id)
        if url:
            pixmap = QPixmap()
            if pixmap.loadFromData(decode_data_url(url), "PNG"):
                button.setIcon(QIcon(pixmap))
                button.setIconSize(size)
        else:
            button.setText(slot.id)

        button.clicked.connect(lambda _=False, e=entry: self.viewer.show_entry(e))
        return button

    def closeEvent(self, event) -> None:
        self.viewer.shutdown()
        super().closeEvent(event)
