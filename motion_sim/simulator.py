"""
Main simulator module integrating all components.

Implements the Monte Carlo simulation of particles diffusing over a grid.
"""

import numpy as np
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from .accumulator import PerParticleAccumulator, reduce_occupancy
from .config import SimulationConfig
from .displacement import DisplacementTable
from .particle import ParticleCloud
from .trajectory import trajectory_step


@dataclass
class SimulationResult:
    """Output of one simulation run."""

    grid: np.ndarray
    iterations: int
    n_particles: int
    positions: np.ndarray
    accumulator: PerParticleAccumulator


class MotionSimulator:
    """
    Random-walk diffusion simulator.

    Each particle walks independently using its own column of a shared,
    precomputed displacement table and counts occupancy events in its own
    private grid. Once every particle has finished, the private grids are
    summed into the occupancy grid.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        positions: Optional[np.ndarray] = None
    ):
        """
        Initialize simulator.

        Args:
            config: Simulation constants (defaults to SimulationConfig())
            positions: Optional (n_particles, 2) start positions overriding
                config.start_position
        """
        self.config = (config or SimulationConfig()).validate()
        self.start_positions = positions
        self.state = "init"

        self.particle_cloud: Optional[ParticleCloud] = None
        self.accumulator: Optional[PerParticleAccumulator] = None
        self.displacements: Optional[DisplacementTable] = None

    def make_displacements(self, iterations: int) -> DisplacementTable:
        """Draw the displacement table for a run from the configured seed."""
        rng = np.random.default_rng(self.config.seed)
        return DisplacementTable.generate(
            self.config.n_particles, iterations, rng=rng, scale=self.config.scale
        )

    def run(
        self,
        iterations: int,
        workers: int = 1,
        displacements: Optional[DisplacementTable] = None
    ) -> SimulationResult:
        """
        Run the simulation to completion.

        Args:
            iterations: Number of random-walk steps per particle
            workers: Number of threads advancing particles
            displacements: Precomputed table; drawn from the seed if None

        Returns:
            SimulationResult with the occupancy grid
        """
        if isinstance(iterations, bool) or int(iterations) != iterations:
            raise TypeError(f"iterations must be an integer, got {iterations!r}")
        if iterations < 0:
            raise ValueError(f"iterations must be non-negative, got {iterations}")
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        iterations = int(iterations)

        cfg = self.config
        if displacements is None:
            displacements = self.make_displacements(iterations)
        elif (displacements.n_iterations, displacements.n_particles) != (iterations, cfg.n_particles):
            raise ValueError(
                f"displacement table has shape {displacements.values.shape}, "
                f"expected ({iterations}, {cfg.n_particles}, 2)"
            )

        self.displacements = displacements
        self.particle_cloud = ParticleCloud.create_particles(
            cfg.n_particles, cfg.start_position, positions=self.start_positions
        )
        self.accumulator = PerParticleAccumulator(cfg.n_particles, cfg.grid_size)
        self.state = "init"

        chunks = [c for c in np.array_split(np.arange(cfg.n_particles), workers) if len(c)]
        if len(chunks) == 1:
            self._advance(chunks[0][0], chunks[0][-1] + 1)
        else:
            with ThreadPoolExecutor(max_workers=len(chunks)) as executor:
                futures = [
                    executor.submit(self._advance, c[0], c[-1] + 1) for c in chunks
                ]
                for future in futures:
                    future.result()

        # All trajectories are done; counters are read-only from here on.
        self.state = "done"
        self.accumulator.freeze()
        grid = reduce_occupancy(self.accumulator)
        self.state = "reduced"

        return SimulationResult(
            grid=grid,
            iterations=iterations,
            n_particles=cfg.n_particles,
            positions=self.particle_cloud.get_positions(),
            accumulator=self.accumulator,
        )

    def _advance(self, start: int, stop: int):
        """Walk particles [start, stop) through every iteration."""
        cloud = self.particle_cloud
        table = self.displacements.for_particles(start, stop)
        index = np.arange(start, stop)
        x = cloud.x[start:stop]
        y = cloud.y[start:stop]

        for step in table:
            result = trajectory_step(
                x, y, step[:, 0], step[:, 1], self.config.grid_size, self.config.radius
            )
            x[:] = result.x
            y[:] = result.y
            hit = result.hit
            if hit.any():
                self.accumulator.record(index[hit], result.rows[hit], result.cols[hit])

    def get_statistics(self) -> dict:
        """
        Get simulation statistics.

        Returns:
            Dictionary with statistics
        """
        cfg = self.config
        iterations = 0 if self.displacements is None else self.displacements.n_iterations
        occupancy_events = 0 if self.accumulator is None else int(self.accumulator.counts.sum())
        possible = cfg.n_particles * iterations

        return {
            "total_particles": cfg.n_particles,
            "iterations": iterations,
            "state": self.state,
            "occupancy_events": occupancy_events,
            "fraction_occupied": occupancy_events / possible if possible else 0.0,
        }


def simulate(
    iterations: int,
    config: Optional[SimulationConfig] = None,
    workers: int = 1
) -> SimulationResult:
    """Run one simulation with the given configuration and return its result."""
    return MotionSimulator(config).run(iterations, workers=workers)
