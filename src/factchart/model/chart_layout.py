"""
FACT Chart Layout (Slot Template)
=================================
Static structure of the chart: 50 slots addressed by DOF column and row, and
their placement on the display grid.

The main body is a pyramid: column `dof + 2`, rows counted upward from the
base. Column 3 (dof=3) has 22 rows; rows 11-22 do not fit the pyramid and are
placed in two "ears" at fixed side columns.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Dict, List, Tuple

COLUMN_COUNTS: Tuple[int, ...] = (1, 3, 10, 22, 10, 3, 1)
# Highest row number inside the parallel pyramid, per DOF column
PARALLEL_PYRAMID_LIMITS: Tuple[int, ...] = (1, 3, 9, 9, 3, 1, 0)
# Visual pyramid height (in grid rows)
MAX_PYRAMID_HEIGHT: int = 10

EAR_DOF: int = 3
LEFT_EAR_ROWS: range = range(11, 17)
RIGHT_EAR_ROWS: range = range(17, 23)
LEFT_EAR_COLUMN: int = 2
LEFT_EAR_GRID_ROW: int = 0
RIGHT_EAR_COLUMN: int = 8
RIGHT_EAR_ROW_OFFSET: int = 16


# ------------------------------------------------------------------------------
# Enums
# ------------------------------------------------------------------------------
class SlotRegion(StrEnum):
    DEFAULT = "default"
    LEFT_EAR = "left-ear"
    RIGHT_EAR = "right-ear"


# ------------------------------------------------------------------------------
# Data Structures
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class GridCell:
    column: int
    row: int


@dataclass(frozen=True)
class ChartSlot:
    """One addressable (dof, row) position of the chart."""
    id: str
    dof: int
    row: int
    is_parallel_pyramid: bool
    region: SlotRegion
    grid: GridCell


def slot_id(dof: int, row: int) -> str:
    return f"{dof}-DOF-{row}"


def classify_region(dof: int, row: int) -> SlotRegion:
    if dof == EAR_DOF:
        if row in LEFT_EAR_ROWS:
            return SlotRegion.LEFT_EAR
        if row in RIGHT_EAR_ROWS:
            return SlotRegion.RIGHT_EAR
    return SlotRegion.DEFAULT


def grid_position(dof: int, row: int, region: SlotRegion) -> GridCell:
    """
    Grid cell for a slot.

    Default slots invert the data order so that row 1 sits at the pyramid base.
    All left-ear slots share one fixed cell; the consuming layer decides how to
    show several slots in one cell.
    """
    match region:
        case SlotRegion.LEFT_EAR:
            return GridCell(column=LEFT_EAR_COLUMN, row=LEFT_EAR_GRID_ROW)
        case SlotRegion.RIGHT_EAR:
            return GridCell(column=RIGHT_EAR_COLUMN, row=row - RIGHT_EAR_ROW_OFFSET)
        case _:
            return GridCell(column=dof + 2, row=MAX_PYRAMID_HEIGHT - row + 1)


def generate_chart_layout() -> List[ChartSlot]:
    """
    Generates the 50 chart slots in DOF-major, row-minor order.

    Pure and deterministic: every call returns an equal list.
    """
    slots: List[ChartSlot] = []

    for dof, row_count in enumerate(COLUMN_COUNTS):
        for row in range(1, row_count + 1):
            region = classify_region(dof, row)
            slots.append(ChartSlot(
                id=slot_id(dof, row),
                dof=dof,
                row=row,
                is_parallel_pyramid=row <= PARALLEL_PYRAMID_LIMITS[dof],
                region=region,
                grid=grid_position(dof, row, region),
            ))

    return slots


def group_by_grid_cell(slots: List[ChartSlot]) -> Dict[GridCell, List[ChartSlot]]:
    """Groups slots sharing a grid cell, keeping layout order inside each group."""
    groups: Dict[GridCell, List[ChartSlot]] = {}
    for slot in slots:
        groups.setdefault(slot.grid, []).append(slot)
    return groups
