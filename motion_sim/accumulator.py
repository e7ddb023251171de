"""
Per-particle occupancy counters and their reduction.

Every particle counts its occupancy events in a private grid, so particles
advanced concurrently never write to the same memory. The private grids are
summed into one shared grid after all particles have finished.
"""

import numpy as np
from typing import Iterable, Optional


class PerParticleAccumulator:
    """
    One (grid_size, grid_size) counter grid per particle.

    The buffer has shape (n_particles, grid_size, grid_size), indexed
    (particle, row, column).
    """

    def __init__(self, n_particles: int, grid_size: int):
        self.n_particles = n_particles
        self.grid_size = grid_size
        self.counts = np.zeros((n_particles, grid_size, grid_size), dtype=np.int64)

    def record(self, particles: np.ndarray, rows: np.ndarray, cols: np.ndarray):
        """
        Count one occupancy event for each listed particle.

        Args:
            particles: Particle indices, each at most once per call
            rows: Cell rows (floor of y)
            cols: Cell columns (floor of x)
        """
        self.counts[particles, rows, cols] += 1

    def view(self, particle: int) -> np.ndarray:
        """Return the private grid of one particle."""
        return self.counts[particle]

    def freeze(self):
        """Make the counters read-only once the simulation phase is over."""
        self.counts.setflags(write=False)

    @property
    def frozen(self) -> bool:
        return not self.counts.flags.writeable


def reduce_occupancy(
    accumulator: PerParticleAccumulator,
    order: Optional[Iterable[int]] = None,
    nonzero_only: bool = True
) -> np.ndarray:
    """
    Sum the private grids of all particles into one occupancy grid.

    Args:
        accumulator: Per-particle counters of a finished simulation
        order: Order in which particles are merged (default: by index)
        nonzero_only: Only visit cells with a nonzero private count

    Returns:
        int64 array of shape (grid_size, grid_size)
    """
    size = accumulator.grid_size
    grid = np.zeros((size, size), dtype=np.int64)

    if order is None:
        order = range(accumulator.n_particles)

    for particle in order:
        counts = accumulator.view(particle)
        if nonzero_only:
            rows, cols = np.nonzero(counts)
            grid[rows, cols] += counts[rows, cols]
        else:
            grid += counts

    return grid
