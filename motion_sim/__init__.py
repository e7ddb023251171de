"""
Motion Simulator - A Monte Carlo simulation of particle diffusion on a grid.

This package simulates independent random walks over a square lattice and
counts, per cell, how often particles occupy the neighborhood of its corner.
"""

__version__ = "0.1.0"
__author__ = "motion_sim contributors"

from .simulator import MotionSimulator, SimulationResult, simulate
from .particle import Particle, ParticleCloud
from .displacement import DisplacementTable
from .trajectory import trajectory_step
from .accumulator import PerParticleAccumulator, reduce_occupancy
from .config import SimulationConfig, load_config
from .output import OccupancyOutput

__all__ = [
    "MotionSimulator",
    "SimulationResult",
    "simulate",
    "Particle",
    "ParticleCloud",
    "DisplacementTable",
    "trajectory_step",
    "PerParticleAccumulator",
    "reduce_occupancy",
    "SimulationConfig",
    "load_config",
    "OccupancyOutput",
]
