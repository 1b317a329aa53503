import math

import numpy as np
import pytest

from pointer import InputTracker
from simulation import Simulation, eased_force, fade_factor
from viewport import DimensionManager


@pytest.fixture
def world(rng):
    dimensions = DimensionManager(rng)
    dimensions.resize(800, 600)
    tracker = InputTracker()
    return dimensions, tracker, Simulation(dimensions, tracker)


def test_eased_force_values():
    assert eased_force(300.0) == 0.0
    assert eased_force(450.0) == 0.0
    assert eased_force(150.0) == pytest.approx(0.125)
    assert eased_force(0.0) == pytest.approx(1.0)


def test_fade_factor_is_linear_between_kill_and_fade_radius():
    assert fade_factor(5.0) == 0.0
    assert fade_factor(15.0) == pytest.approx(0.5)
    assert fade_factor(25.0) == 1.0


def test_drift_moves_particles_by_their_velocity(world, make_pool):
    dimensions, _, sim = world
    dimensions.pool = make_pool([(100, 100)], velocities=[(0.25, -0.1)])

    sim.step()

    np.testing.assert_allclose(dimensions.pool.positions[0], [100.25, 99.9])


def test_wrap_teleports_to_the_opposite_edge(world, make_pool):
    dimensions, _, sim = world
    dimensions.pool = make_pool(
        [(-9.9, 300), (809.9, 300), (400, -9.9), (400, 609.9)],
        velocities=[(-0.25, 0), (0.25, 0), (0, -0.25), (0, 0.25)],
    )

    sim.step()

    np.testing.assert_allclose(
        dimensions.pool.positions,
        [(810, 300), (-10, 300), (400, 610), (400, -10)],
    )


def test_positions_stay_within_wrap_margin_without_pointer(world):
    dimensions, _, sim = world

    for frame in range(3000):
        sim.step()
        if frame % 250 == 0:
            pos = dimensions.pool.positions
            assert np.all(pos[:, 0] >= -10) and np.all(pos[:, 0] <= 810)
            assert np.all(pos[:, 1] >= -10) and np.all(pos[:, 1] <= 610)

    assert dimensions.pool.particle_count == 56


def test_twinkle_advances_phase_and_clamps_alpha(world, make_pool):
    dimensions, _, sim = world
    dimensions.pool = make_pool(
        [(100, 100), (200, 200)],
        base_alphas=[0.4, 0.1],
        phases=[0.0, 3 * math.pi / 2 - 0.05],
    )

    sim.step()

    pool = dimensions.pool
    np.testing.assert_allclose(pool.phases, [0.05, 3 * math.pi / 2])
    assert pool.alphas[0] == pytest.approx(0.4 + math.sin(0.05) * 0.15)
    # 0.1 - 0.15 would be negative
    assert pool.alphas[1] == 0.0


def test_particle_at_pointer_is_removed_in_one_step(world, make_pool):
    dimensions, tracker, sim = world
    dimensions.pool = make_pool([(300, 300), (700, 100)])
    tracker.x, tracker.y = 300.0, 300.0

    removed = sim.step()

    assert removed == 1
    assert dimensions.pool.particle_count == 1
    np.testing.assert_allclose(dimensions.pool.positions[0], [700, 100])


def test_simultaneous_removals_are_exact_and_keep_order(world, make_pool):
    dimensions, tracker, sim = world
    tracker.x, tracker.y = 400.0, 300.0
    markers = [0.21, 0.22, 0.23, 0.24, 0.25, 0.26, 0.27, 0.28]
    dimensions.pool = make_pool(
        [
            (400, 300),     # kill
            (10, 10),       # survive
            (403, 300),     # kill
            (400, 296),     # kill
            (790, 590),     # survive
            (402, 302),     # kill
            (50, 550),      # survive
            (404.9, 300),   # kill
        ],
        base_alphas=markers,
    )

    removed = sim.step()

    assert removed == 5
    assert sim.total_removed == 5
    np.testing.assert_allclose(dimensions.pool.base_alphas, [0.22, 0.25, 0.27])
    np.testing.assert_allclose(
        dimensions.pool.positions, [(10, 10), (790, 590), (50, 550)]
    )


def test_attraction_pulls_towards_pointer_and_boosts_alpha(world, make_pool):
    dimensions, tracker, sim = world
    tracker.x, tracker.y = 500.0, 300.0
    dimensions.pool = make_pool([(650, 300)], base_alphas=[0.4])

    sim.step()

    pool = dimensions.pool
    # easedForce(150) = 0.125, pull = 1.5 * 0.125
    np.testing.assert_allclose(pool.positions[0], [650 - 0.1875, 300])
    assert pool.draw_alphas[0] == pytest.approx(0.4 + 0.125 * 0.2)
    assert pool.draw_sizes[0] == pytest.approx(2.0)
    assert pool.alphas[0] == pytest.approx(0.4)


def test_boosted_alpha_never_exceeds_one(world, make_pool):
    dimensions, tracker, sim = world
    tracker.x, tracker.y = 500.0, 300.0
    dimensions.pool = make_pool([(530, 300)], base_alphas=[0.99], phases=[math.pi / 2 - 0.05])

    sim.step()

    assert dimensions.pool.draw_alphas[0] == 1.0


def test_fade_band_only_changes_rendered_values(world, make_pool):
    dimensions, tracker, sim = world
    tracker.x, tracker.y = 500.0, 300.0
    dimensions.pool = make_pool([(515, 300)], sizes=[2.0], base_alphas=[0.4])

    sim.step()

    pool = dimensions.pool
    assert pool.particle_count == 1
    # t = (15 - 5) / 20
    assert pool.draw_alphas[0] == pytest.approx(0.4 * 0.5)
    assert pool.draw_sizes[0] == pytest.approx(2.0 * (0.4 + 0.6 * 0.5))
    assert pool.alphas[0] == pytest.approx(0.4)
    assert pool.sizes[0] == 2.0
    assert pool.positions[0, 0] < 515


def test_rendered_values_recover_after_pointer_leaves(world, make_pool):
    dimensions, tracker, sim = world
    tracker.x, tracker.y = 500.0, 300.0
    dimensions.pool = make_pool([(515, 300)], sizes=[2.5])
    sim.step()
    assert dimensions.pool.draw_sizes[0] < 2.5

    tracker.reset()
    sim.step()

    assert dimensions.pool.draw_sizes[0] == 2.5
    assert dimensions.pool.draw_alphas[0] == dimensions.pool.alphas[0]


def test_rendered_values_are_finite_and_non_negative(world):
    dimensions, tracker, sim = world
    tracker.x, tracker.y = 400.0, 300.0

    for _ in range(400):
        sim.step()
        pool = dimensions.pool
        for values in (pool.alphas, pool.draw_alphas, pool.draw_sizes):
            assert np.all(np.isfinite(values))
            assert np.all(values >= 0.0)
        assert np.all(pool.draw_alphas <= 1.0)


def test_pool_only_shrinks_under_a_steady_pointer(world):
    dimensions, tracker, sim = world
    tracker.x, tracker.y = 400.0, 300.0

    counts = []
    for _ in range(1500):
        sim.step()
        counts.append(dimensions.pool.particle_count)

    assert all(a >= b for a, b in zip(counts, counts[1:]))
    assert counts[-1] < 56
    assert sim.total_removed == 56 - counts[-1]


def test_step_on_empty_pool_is_a_no_op(world, make_pool):
    dimensions, tracker, sim = world
    dimensions.pool = make_pool(np.zeros((0, 2)))

    assert sim.step() == 0
    assert dimensions.pool.particle_count == 0
