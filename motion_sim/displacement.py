"""
Displacement table for the random walk.

All randomness of the simulation lives here: the table is drawn once, before
any particle moves, and is read-only afterwards.
"""

import numpy as np
from typing import Optional, Union

# Offset subtracted from the scaled draws. Raw draws 0 and 99 map to
# -0.0495 and +0.0495 up to float32 rounding.
DISPLACEMENT_OFFSET = 0.0495
DISPLACEMENT_DIVISOR = np.float32(1000.0)


def raw_to_displacement(raw: np.ndarray) -> np.ndarray:
    """
    Map raw integer draws to single-precision displacements.

    The division happens in single precision and the offset is subtracted in
    double precision before rounding back to float32.

    Args:
        raw: Array of integer draws

    Returns:
        float32 array of the same shape
    """
    scaled = np.asarray(raw).astype(np.float32) / DISPLACEMENT_DIVISOR
    return (scaled.astype(np.float64) - DISPLACEMENT_OFFSET).astype(np.float32)


class DisplacementTable:
    """
    Per-iteration, per-particle (dx, dy) displacements.

    Values are stored in an array of shape (iterations, particles, 2).
    """

    def __init__(self, values: np.ndarray):
        values = np.array(values, dtype=np.float32)
        if values.ndim != 3 or values.shape[2] != 2:
            raise ValueError(
                f"displacements must have shape (iterations, particles, 2), got {values.shape}"
            )
        values.setflags(write=False)
        self.values = values

    @classmethod
    def from_raw(cls, raw: np.ndarray) -> "DisplacementTable":
        """Build a table from an (iterations, particles, 2) array of integer draws."""
        return cls(raw_to_displacement(raw))

    @classmethod
    def generate(
        cls,
        n_particles: int,
        n_iterations: int,
        rng: Optional[Union[np.random.Generator, int]] = None,
        scale: int = 100
    ) -> "DisplacementTable":
        """
        Draw a complete table from a seeded generator.

        Draws are made in iteration-major, then particle-major order, with the
        x draw before the y draw of each particle.

        Args:
            n_particles: Number of particles
            n_iterations: Number of iterations
            rng: numpy Generator, or a seed to build one from
            scale: Raw draws are integers in [0, scale)

        Returns:
            DisplacementTable of shape (n_iterations, n_particles, 2)
        """
        if n_particles < 0 or n_iterations < 0:
            raise ValueError("particle and iteration counts must be non-negative")
        if not isinstance(rng, np.random.Generator):
            rng = np.random.default_rng(rng)

        raw = rng.integers(0, scale, size=(n_iterations, n_particles, 2))
        return cls.from_raw(raw)

    @classmethod
    def zeros(cls, n_particles: int, n_iterations: int) -> "DisplacementTable":
        """Table of stationary steps."""
        return cls(np.zeros((n_iterations, n_particles, 2), dtype=np.float32))

    @property
    def n_iterations(self) -> int:
        return self.values.shape[0]

    @property
    def n_particles(self) -> int:
        return self.values.shape[1]

    def for_particles(self, start: int, stop: int) -> np.ndarray:
        """Return the read-only (iterations, stop - start, 2) slice of a particle range."""
        return self.values[:, start:stop, :]

    def __getitem__(self, key):
        return self.values[key]

    def __len__(self):
        return self.values.size
