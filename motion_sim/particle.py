"""
Particle module for the diffusion simulation.

Defines individual particles and the particle cloud holding their positions.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass
class Particle:
    """Snapshot of a single particle."""

    index: int
    x: float
    y: float

    @property
    def cell(self) -> Tuple[int, int]:
        """(row, column) of the grid cell the particle is in."""
        return int(np.floor(self.y)), int(np.floor(self.x))


class ParticleCloud:
    """
    Manages the continuous positions of all particles.

    Positions are kept as two float32 arrays so a range of particles can be
    advanced in place without copying.
    """

    def __init__(self, x: np.ndarray, y: np.ndarray):
        self.x = np.asarray(x, dtype=np.float32).copy()
        self.y = np.asarray(y, dtype=np.float32).copy()
        if self.x.shape != self.y.shape or self.x.ndim != 1:
            raise ValueError("x and y must be one-dimensional arrays of equal length")

    @classmethod
    def create_particles(
        cls,
        num_particles: int,
        start_position: Tuple[float, float] = (10.0, 10.0),
        positions: Optional[Sequence[Tuple[float, float]]] = None
    ) -> "ParticleCloud":
        """
        Create a cloud of particles.

        Args:
            num_particles: Number of particles to create
            start_position: Common (x, y) start of every particle
            positions: Optional per-particle (x, y) starts, overriding start_position

        Returns:
            New ParticleCloud
        """
        if positions is not None:
            positions = np.asarray(positions, dtype=np.float32).reshape(-1, 2)
            if len(positions) != num_particles:
                raise ValueError(
                    f"expected {num_particles} start positions, got {len(positions)}"
                )
            return cls(positions[:, 0], positions[:, 1])

        x0, y0 = start_position
        return cls(
            np.full(num_particles, x0, dtype=np.float32),
            np.full(num_particles, y0, dtype=np.float32),
        )

    def __len__(self):
        return len(self.x)

    def particle(self, index: int) -> Particle:
        return Particle(index=index, x=float(self.x[index]), y=float(self.y[index]))

    def get_positions(self) -> np.ndarray:
        """
        Get positions of all particles.

        Returns:
            Array of shape (n, 2) with [x, y]
        """
        return np.column_stack([self.x, self.y])
