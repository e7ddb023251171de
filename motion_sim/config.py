"""
Simulation configuration.

Holds the fixed constants of the diffusion simulation and loads overrides
from JSON files.
"""

import json
from dataclasses import dataclass, fields, asdict
from typing import Tuple


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class SimulationConfig:
    """Constants consumed by the simulation core."""

    grid_size: int = 21          # size of the square grid
    n_particles: int = 20        # number of particles
    radius: float = 0.5          # cell radius = 0.5 * (grid spacing)
    seed: int = 17               # seed for the displacement generator
    start_position: Tuple[float, float] = (10.0, 10.0)
    scale: int = 100             # raw draws are integers in [0, scale)
    display_limit: int = 64      # grids up to this size are printed

    def __post_init__(self):
        self.start_position = tuple(float(v) for v in self.start_position)

    def validate(self) -> "SimulationConfig":
        """
        Check the configuration for values the simulation cannot use.

        Returns:
            The configuration itself, for chaining

        Raises:
            ValueError: If any value is out of range
        """
        if not _is_int(self.grid_size) or self.grid_size <= 0:
            raise ValueError(f"grid_size must be a positive integer, got {self.grid_size!r}")
        if not _is_int(self.n_particles) or self.n_particles <= 0:
            raise ValueError(f"n_particles must be a positive integer, got {self.n_particles!r}")
        if isinstance(self.radius, bool) or not isinstance(self.radius, (int, float)) or self.radius < 0:
            raise ValueError(f"radius must be non-negative, got {self.radius!r}")
        if not _is_int(self.seed) or self.seed < 0:
            raise ValueError(f"seed must be a non-negative integer, got {self.seed!r}")
        if not _is_int(self.scale) or self.scale <= 0:
            raise ValueError(f"scale must be a positive integer, got {self.scale!r}")
        if len(self.start_position) != 2:
            raise ValueError(f"start_position must be an (x, y) pair, got {self.start_position!r}")
        return self

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(config_file: str) -> SimulationConfig:
    """
    Load a simulation configuration from a JSON file.

    Keys missing from the file keep their defaults.

    Args:
        config_file: Path to a JSON object with SimulationConfig fields

    Returns:
        Validated SimulationConfig

    Raises:
        ValueError: On unknown keys or invalid values
    """
    with open(config_file, 'r') as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{config_file}: expected a JSON object")

    known = {f.name for f in fields(SimulationConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"{config_file}: unknown configuration keys {unknown}")

    return SimulationConfig(**data).validate()
