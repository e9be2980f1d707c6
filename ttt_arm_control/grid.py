#!/usr/bin/env python3
"""
Board cell → physical pose.

Cells are numbered row-major from 0. Row 0 is nearest the robot and rows
advance along +x; columns advance along +y. The middle cell of an odd-sized
board sits exactly on the configured center.
"""

from numbers import Integral
from typing import Sequence

from .errors import InvalidCellIndexError
from .pose import DOWNWARD_QUAT, Pose


def cell_row_col(cell_index: int, rows: int = 3, cols: int = 3) -> tuple[int, int]:
    num_cells = rows * cols
    # bool is an Integral but never a cell
    if (isinstance(cell_index, bool) or not isinstance(cell_index, Integral)
            or not 0 <= cell_index < num_cells):
        raise InvalidCellIndexError(cell_index, num_cells)
    return int(cell_index) // cols, int(cell_index) % cols


def cell_pose(
        cell_index: int,
        center_x: float,
        center_y: float,
        cell_side: float,
        z: float = 0.0,
        orientation: Sequence[float] = DOWNWARD_QUAT,
        rows: int = 3,
        cols: int = 3,
) -> Pose:
    """Pose of the center of `cell_index` at height `z` with a fixed orientation."""
    row, col = cell_row_col(cell_index, rows, cols)
    x = center_x + (row - (rows - 1) / 2.0) * cell_side
    y = center_y + (col - (cols - 1) / 2.0) * cell_side
    return Pose((x, y, z), tuple(orientation))
