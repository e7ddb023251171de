"""
Per-iteration trajectory step.

Moves particles by one displacement and decides whether each one occupies
the cell it landed in.
"""

import numpy as np
from typing import NamedTuple


class StepResult(NamedTuple):
    x: np.ndarray
    y: np.ndarray
    hit: np.ndarray
    rows: np.ndarray
    cols: np.ndarray


def trajectory_step(x, y, dx, dy, grid_size: int, radius: float) -> StepResult:
    """
    Advance particles by one displacement and classify the new positions.

    Works on scalars or on equally shaped arrays of particles. All arithmetic
    is single precision.

    The fractional offset from the cell corner uses truncation toward zero
    while the cell index uses floor. The two differ for negative
    coordinates; such positions are outside the grid anyway.

    Args:
        x, y: Current positions
        dx, dy: Displacements for this iteration
        grid_size: Extent G of the square grid
        radius: Occupancy radius around the lower-left cell corner

    Returns:
        StepResult with the new positions, the occupancy mask and the
        (row, column) cell of every particle. Cells are only meaningful
        where the mask is set.
    """
    x = np.asarray(x, dtype=np.float32) + np.asarray(dx, dtype=np.float32)
    y = np.asarray(y, dtype=np.float32) + np.asarray(dy, dtype=np.float32)

    frac_x = x - np.trunc(x)
    frac_y = y - np.trunc(y)

    cols = np.floor(x).astype(np.int64)
    rows = np.floor(y).astype(np.int64)

    in_grid = (x < grid_size) & (y < grid_size) & (x >= 0) & (y >= 0)

    r = np.float32(radius)
    hit = in_grid & (frac_x * frac_x + frac_y * frac_y <= r * r)

    return StepResult(x, y, hit, rows, cols)
