"""
Example script demonstrating the Python API.
"""

from motion_sim import MotionSimulator, OccupancyOutput, SimulationConfig


def main():
    """Run example simulation."""
    print("Configuring simulation...")
    config = SimulationConfig(
        grid_size=41,
        n_particles=500,
        start_position=(20.0, 20.0)
    )

    print("Initializing simulator...")
    simulator = MotionSimulator(config)

    print("Running simulation...")
    result = simulator.run(iterations=2000, workers=4)

    print("\nGenerating output...")
    output = OccupancyOutput(result.grid)
    output.save_png("example_api_output")

    print("\nSimulation statistics:")
    for key, value in simulator.get_statistics().items():
        print(f"  {key}: {value}")

    print("\nGrid statistics:")
    for key, value in output.get_grid_statistics().items():
        print(f"  {key}: {value}")

    print("\nDone! Check example_api_output.png")


if __name__ == "__main__":
    main()
