"""
Basic tests for the motion simulator.
"""

import numpy as np
import pytest
from motion_sim import (
    DisplacementTable,
    MotionSimulator,
    ParticleCloud,
    PerParticleAccumulator,
    SimulationConfig,
    reduce_occupancy,
    simulate,
)


def forced_table(steps):
    """Displacement table for one particle from a list of (dx, dy) steps."""
    values = np.asarray(steps, dtype=np.float32).reshape(len(steps), 1, 2)
    return DisplacementTable(values)


def test_particle_cloud():
    """Test particle cloud creation."""
    cloud = ParticleCloud.create_particles(num_particles=4, start_position=(10.0, 10.0))

    assert len(cloud) == 4
    assert cloud.get_positions().shape == (4, 2)
    assert cloud.particle(3).cell == (10, 10)

    cloud = ParticleCloud.create_particles(2, positions=[(1.5, 2.5), (3.0, 0.2)])
    assert cloud.particle(1).x == 3.0
    assert cloud.particle(0).cell == (2, 1)

    with pytest.raises(ValueError):
        ParticleCloud.create_particles(3, positions=[(1.0, 1.0)])


def test_zero_iterations():
    """Test that a run without iterations leaves the grid empty."""
    for n_particles in (1, 20):
        result = simulate(0, SimulationConfig(n_particles=n_particles))
        assert result.grid.shape == (21, 21)
        assert not result.grid.any()


def test_single_particle_no_iterations():
    """Test one particle starting at (10, 10) with no iterations."""
    sim = MotionSimulator(SimulationConfig(grid_size=21, n_particles=1))
    result = sim.run(0)

    assert np.array_equal(result.grid, np.zeros((21, 21), dtype=np.int64))
    assert np.allclose(result.positions, [[10.0, 10.0]])


def test_single_stationary_step():
    """Test a single zero displacement marks exactly the start cell."""
    sim = MotionSimulator(SimulationConfig(grid_size=21, n_particles=1, radius=0.5))
    result = sim.run(1, displacements=forced_table([(0.0, 0.0)]))

    expected = np.zeros((21, 21), dtype=np.int64)
    expected[10, 10] = 1
    assert np.array_equal(result.grid, expected)


def test_stationary_particles_count_every_iteration():
    """Test stationary particles on an integer coordinate count once per iteration."""
    config = SimulationConfig(n_particles=3)
    sim = MotionSimulator(config)
    result = sim.run(7, displacements=DisplacementTable.zeros(3, 7))

    for p in range(3):
        assert result.accumulator.view(p)[10, 10] == 7
        assert result.accumulator.view(p).sum() == 7
    assert result.grid[10, 10] == 21
    assert result.grid.sum() == 21


def test_upper_boundary_is_exclusive():
    """Test a particle landing exactly on grid_size on either axis is not counted."""
    config = SimulationConfig(grid_size=21, n_particles=1)
    sim = MotionSimulator(config, positions=[(20.5, 10.0)])
    result = sim.run(1, displacements=forced_table([(0.5, 0.0)]))

    assert result.positions[0, 0] == 21.0
    assert not result.grid.any()

    # Last in-grid column is still counted
    sim = MotionSimulator(config, positions=[(20.0, 10.0)])
    result = sim.run(1, displacements=forced_table([(0.0, 0.0)]))
    assert result.grid[10, 20] == 1

    # Same on the y axis
    sim = MotionSimulator(config, positions=[(10.0, 20.5)])
    result = sim.run(1, displacements=forced_table([(0.0, 0.5)]))
    assert result.positions[0, 1] == 21.0
    assert not result.grid.any()


def test_out_of_bounds_exclusion():
    """Test a particle outside the grid contributes nothing until it returns."""
    config = SimulationConfig(grid_size=21, n_particles=1)
    sim = MotionSimulator(config, positions=[(0.0, 5.0)])
    steps = [(-0.5, 0.0), (0.0, 0.0), (0.5, 0.0)]
    result = sim.run(3, displacements=forced_table(steps))

    assert result.grid.sum() == 1
    assert result.grid[5, 0] == 1


def test_radius_exclusion():
    """Test positions farther than the radius from the cell corner are skipped."""
    steps = [(0.0, 0.0)] * 4

    narrow = MotionSimulator(SimulationConfig(n_particles=1, radius=0.5), positions=[(10.4, 10.4)])
    assert narrow.run(4, displacements=forced_table(steps)).grid.sum() == 0

    wide = MotionSimulator(SimulationConfig(n_particles=1, radius=0.6), positions=[(10.4, 10.4)])
    result = wide.run(4, displacements=forced_table(steps))
    assert result.grid[10, 10] == 4


def test_determinism():
    """Test identical configurations give identical results."""
    config = SimulationConfig(n_particles=15, seed=3)

    first = MotionSimulator(config)
    second = MotionSimulator(config)
    result_a = first.run(250)
    result_b = second.run(250)

    assert np.array_equal(first.displacements.values, second.displacements.values)
    assert np.array_equal(result_a.grid, result_b.grid)
    assert np.array_equal(result_a.positions, result_b.positions)


def test_conservation_bounds():
    """Test no cell exceeds the number of particle steps."""
    iterations = 400
    config = SimulationConfig(n_particles=20)
    result = simulate(iterations, config)

    assert result.grid.min() >= 0
    assert result.grid.max() <= config.n_particles * iterations
    assert result.grid.sum() <= config.n_particles * iterations
    assert result.accumulator.counts.max() <= iterations
    assert np.array_equal(result.grid, result.accumulator.counts.sum(axis=0))


def test_workers_do_not_change_result():
    """Test the result is independent of the number of worker threads."""
    config = SimulationConfig(n_particles=37, seed=11)
    reference = simulate(300, config, workers=1)

    for workers in (2, 3, 8, 64):
        result = simulate(300, config, workers=workers)
        assert np.array_equal(result.grid, reference.grid)
        assert np.array_equal(result.positions, reference.positions)


def test_reduction_order_independent():
    """Test merging per-particle grids in any order gives the same grid."""
    result = simulate(500, SimulationConfig(n_particles=12, seed=5))
    accumulator = result.accumulator

    rng = np.random.default_rng(0)
    shuffled = rng.permutation(accumulator.n_particles)

    assert np.array_equal(reduce_occupancy(accumulator, order=reversed(range(12))), result.grid)
    assert np.array_equal(reduce_occupancy(accumulator, order=shuffled), result.grid)
    assert np.array_equal(reduce_occupancy(accumulator, nonzero_only=False), result.grid)


def test_accumulator_frozen_after_run():
    """Test per-particle counters are read-only after the simulation phase."""
    sim = MotionSimulator(SimulationConfig(n_particles=2))
    result = sim.run(3)

    assert sim.state == "reduced"
    assert result.accumulator.frozen
    with pytest.raises(ValueError):
        result.accumulator.counts[0, 0, 0] = 1


def test_accumulator_record():
    """Test recording touches only the listed particles' grids."""
    acc = PerParticleAccumulator(n_particles=3, grid_size=4)
    acc.record(np.array([0, 2]), np.array([1, 3]), np.array([2, 0]))
    acc.record(np.array([2]), np.array([3]), np.array([0]))

    assert acc.view(0)[1, 2] == 1
    assert acc.view(1).sum() == 0
    assert acc.view(2)[3, 0] == 2


def test_invalid_arguments():
    """Test invalid run arguments are rejected."""
    sim = MotionSimulator(SimulationConfig(n_particles=2))

    with pytest.raises(ValueError):
        sim.run(-1)
    with pytest.raises(ValueError):
        sim.run(5, workers=0)
    with pytest.raises(ValueError):
        sim.run(5, displacements=DisplacementTable.zeros(3, 5))


def test_statistics():
    """Test simulation statistics."""
    sim = MotionSimulator(SimulationConfig(n_particles=4))
    assert sim.get_statistics()["state"] == "init"

    sim.run(6, displacements=DisplacementTable.zeros(4, 6))
    stats = sim.get_statistics()

    assert stats["total_particles"] == 4
    assert stats["iterations"] == 6
    assert stats["occupancy_events"] == 24
    assert stats["fraction_occupied"] == 1.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
