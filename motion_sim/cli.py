"""
Command-line interface for the motion simulator.
"""

import argparse
import logging
import os
import platform
import sys
import time
from typing import List, Optional

from .config import SimulationConfig, load_config
from .output import OccupancyOutput
from .simulator import MotionSimulator

# Largest count a 32-bit signed int holds
MAX_ITERATIONS = 2**31 - 1


def usage(program_name: str):
    """Print correct usage and parameters."""
    print(" Incorrect number of parameters ")
    print(f" Usage: {program_name} <Number of Iterations> ")
    print()


def parse_iterations(value: Optional[str]) -> Optional[int]:
    """Return the iteration count, or None if it is missing, not plain decimal digits, or too large."""
    if value is None or not (value.isascii() and value.isdigit()):
        return None
    iterations = int(value)
    return iterations if iterations <= MAX_ITERATIONS else None


def report_backend(config: SimulationConfig, iterations: int, workers: int):
    """Print where and how the simulation runs."""
    print(f" Running on:: {platform.processor() or platform.machine()} (numpy, {os.cpu_count()} CPUs)")
    print(f" The max number of workers is : {workers}")
    print(f" The number of iterations is : {iterations}")
    print(f" The number of particles is : {config.n_particles}")


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Monte Carlo simulation of particle diffusion on a grid",
        add_help=True
    )

    parser.add_argument(
        "iterations",
        nargs="?",
        help="Number of iterations"
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Configuration file (JSON)"
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of threads advancing particles (default: 1)"
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Write the occupancy grid to <OUTPUT>.png"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (default: WARNING)"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "motion-sim"
    parser = build_parser(prog)
    args, extra = parser.parse_known_args(argv)

    iterations = parse_iterations(args.iterations)
    if iterations is None or extra:
        usage(prog)
        return 1

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s | %(levelname)s | %(message)s"
    )

    try:
        config = load_config(args.config) if args.config else SimulationConfig().validate()
    except (OSError, ValueError, TypeError) as e:
        logging.error("Invalid configuration: %s", e)
        return 1

    if args.workers < 1:
        logging.error("--workers must be at least 1, got %d", args.workers)
        return 1

    logging.info("Configuration: %s", config.to_dict())
    logging.debug("Advancing %d particles on %d worker(s)", config.n_particles, args.workers)

    report_backend(config, iterations, args.workers)

    simulator = MotionSimulator(config)

    start = time.perf_counter()
    result = simulator.run(iterations, workers=args.workers)
    elapsed_ms = int((time.perf_counter() - start) * 1000)

    print()
    print(f"Time: {elapsed_ms}")
    print()

    output = OccupancyOutput(result.grid)

    # Only small grids are printed
    if config.grid_size <= config.display_limit:
        print("\n ********************** OUTPUT GRID: ")
        print()
        print(output.format_grid())

    if args.output:
        path = output.save_png(args.output)
        logging.info("Wrote %s", path)

    stats = simulator.get_statistics()
    logging.info("Occupancy events: %d (%.1f%% of particle steps)",
                 stats["occupancy_events"], stats["fraction_occupied"] * 100)

    return 0


if __name__ == "__main__":
    sys.exit(main())
