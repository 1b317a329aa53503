import pygame
import pytest

import visualization
from constants import PARTICLE_TINT
from visualization import Renderer


@pytest.fixture
def renderer():
    return Renderer(100, 100)


def test_bright_particle_is_drawn_in_tint_with_glow(renderer, make_pool):
    pool = make_pool([(50, 50)], sizes=[3.0])
    pool.draw_alphas[0] = 1.0

    assert renderer.draw(pool) == 1
    assert renderer.last_glow_count == 1
    assert tuple(renderer.layer.get_at((50, 50)))[:3] == PARTICLE_TINT
    # The halo reaches beyond the core radius.
    assert tuple(renderer.layer.get_at((50, 45)))[:3] != (0, 0, 0)
    assert tuple(renderer.layer.get_at((5, 5)))[:3] == (0, 0, 0)


def test_small_or_dim_particles_get_no_glow(renderer, make_pool):
    pool = make_pool([(20, 20), (70, 70)], sizes=[1.5, 2.8])
    pool.draw_alphas[:] = [0.5, 0.15]

    assert renderer.draw(pool) == 2
    assert renderer.last_glow_count == 0


def test_invisible_particles_are_skipped(renderer, make_pool):
    pool = make_pool([(50, 50)], sizes=[3.0])
    pool.draw_alphas[0] = 0.005

    assert renderer.draw(pool) == 0
    assert tuple(renderer.layer.get_at((50, 50)))[:3] == (0, 0, 0)


def test_draw_clears_previous_frame(renderer, make_pool):
    pool = make_pool([(50, 50)], sizes=[2.0])
    pool.draw_alphas[0] = 0.5
    renderer.draw(pool)

    pool.positions[0] = (10, 10)
    renderer.draw(pool)

    assert tuple(renderer.layer.get_at((50, 50)))[:3] == (0, 0, 0)


def test_draw_does_not_touch_pool_state(renderer, rng):
    from particle import seed_pool
    pool = seed_pool(100, 100, rng)
    before = pool.positions.copy()

    renderer.draw(pool)

    assert (pool.positions == before).all()


def test_composite_scales_by_opacity(renderer, make_pool):
    pool = make_pool([(50, 50)], sizes=[2.0])
    pool.draw_alphas[0] = 1.0
    renderer.draw(pool)

    hidden = pygame.Surface((100, 100))
    renderer.composite(hidden, 0.0)
    assert tuple(hidden.get_at((50, 50)))[:3] == (0, 0, 0)

    full = pygame.Surface((100, 100))
    renderer.composite(full, 1.0)
    assert tuple(full.get_at((50, 50)))[:3] == PARTICLE_TINT

    half = pygame.Surface((100, 100))
    renderer.composite(half, 0.5)
    red = half.get_at((50, 50))[0]
    assert 100 <= red <= 120


def test_composite_adds_onto_page_content(renderer, make_pool):
    pool = make_pool([(50, 50)], sizes=[2.0])
    pool.draw_alphas[0] = 0.5
    renderer.draw(pool)

    page = pygame.Surface((100, 100))
    page.fill((20, 20, 20))
    renderer.composite(page, 1.0)

    assert tuple(page.get_at((50, 50)))[:3] == (130, 135, 147)
    assert tuple(page.get_at((5, 5)))[:3] == (20, 20, 20)


def test_resize_reallocates_layer(renderer):
    renderer.resize(320, 200)
    assert renderer.layer.get_size() == (320, 200)


def test_zero_size_surface_degrades_to_no_op(make_pool):
    renderer = Renderer(0, 0)
    assert not renderer.enabled

    pool = make_pool([(0, 0)], sizes=[3.0])
    assert renderer.draw(pool) == 0
    renderer.composite(pygame.Surface((10, 10)), 1.0)


def test_surface_failure_degrades_to_no_op(monkeypatch, make_pool):
    def broken_surface(*args, **kwargs):
        raise pygame.error("no video memory")

    monkeypatch.setattr(visualization.pygame, "Surface", broken_surface)
    renderer = Renderer(100, 100)

    assert not renderer.enabled
    assert renderer.draw(make_pool([(50, 50)])) == 0


def test_sub_pixel_particle_still_lights_its_centre(renderer, make_pool):
    pool = make_pool([(50, 50)], sizes=[1.5])
    pool.draw_alphas[0] = 0.3
    pool.draw_sizes[0] = 0.8

    assert renderer.draw(pool) == 1
    assert tuple(renderer.layer.get_at((50, 50)))[:3] != (0, 0, 0)


def test_sub_pixel_particle_is_dimmed_by_coverage(renderer, make_pool):
    pool = make_pool([(20, 20), (70, 70)])
    pool.draw_alphas[:] = [1.0, 1.0]
    pool.draw_sizes[:] = [0.4, 0.8]

    renderer.draw(pool)

    faint = renderer.layer.get_at((20, 20))[0]
    full = renderer.layer.get_at((70, 70))[0]
    assert 0 < faint < full == PARTICLE_TINT[0]


def test_sub_pixel_particle_off_surface_is_ignored(renderer, make_pool):
    pool = make_pool([(-5, 120)])
    pool.draw_alphas[0] = 0.5
    pool.draw_sizes[0] = 0.6

    assert renderer.draw(pool) == 1
