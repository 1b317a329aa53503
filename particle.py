# particle.py
"""
Manages the state of all particles in the star-dust field.

This module defines the ParticlePool class, which stores particle data
(position, drift velocity, size, opacity and twinkle phase) column-wise in
NumPy arrays, and the seeding function that fills a pool for a given
viewport area.
"""
import logging
import numpy as np
from typing import Optional

from constants import (
    DENSITY_DIVISOR, MIN_PARTICLES, MAX_PARTICLES, DRIFT_SPEED,
    SIZE_MIN, SIZE_MAX, BASE_ALPHA_MIN, BASE_ALPHA_MAX, TWO_PI
)

# --- Data Contracts ---
#
# particle_count_for_area(width: int, height: int) -> int:
#   - Outputs: clamp(floor(width * height / DENSITY_DIVISOR),
#     MIN_PARTICLES, MAX_PARTICLES).
#
# seed_pool(width: int, height: int, rng: np.random.Generator) -> ParticlePool:
#   - Inputs: viewport size in pixels and the engine's master RNG.
#   - Outputs: a freshly seeded ParticlePool.
#   - Invariants:
#     - positions is float64 of shape (N, 2), inside [0, width) x [0, height).
#     - velocities is float64 of shape (N, 2), each component in [-0.25, 0.25].
#     - sizes in [1, 3), base_alphas in [0.2, 0.6), phases in [0, 2*pi).
#     - alphas == base_alphas, draw_alphas == alphas, draw_sizes == sizes.
#
# class ParticlePool:
#   - truncate(self, count: int) -> None:
#     - Side Effects: keeps only the first `count` particles. Never grows.


def particle_count_for_area(width: int, height: int) -> int:
    """Returns the clamped particle count for a viewport of the given size."""
    area = max(width, 0) * max(height, 0)
    calculated = int(area // DENSITY_DIVISOR)
    return min(max(calculated, MIN_PARTICLES), MAX_PARTICLES)


class ParticlePool:
    """
    An ordered container of particles backed by parallel NumPy arrays.

    The pool only ever shrinks (annihilated particles are compacted away by
    the simulation step). A larger pool is obtained by reseeding, which
    replaces the whole pool.
    """
    def __init__(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        sizes: np.ndarray,
        base_alphas: np.ndarray,
        phases: np.ndarray,
        alphas: Optional[np.ndarray] = None,
    ):
        count = positions.shape[0]
        if not (velocities.shape[0] == sizes.shape[0] == base_alphas.shape[0]
                == phases.shape[0] == count):
            raise ValueError("All particle arrays must have the same length.")

        self.positions = np.ascontiguousarray(positions, dtype=np.float64)
        self.velocities = np.ascontiguousarray(velocities, dtype=np.float64)
        self.sizes = np.ascontiguousarray(sizes, dtype=np.float64)
        self.base_alphas = np.ascontiguousarray(base_alphas, dtype=np.float64)
        self.phases = np.ascontiguousarray(phases, dtype=np.float64)
        if alphas is None:
            alphas = self.base_alphas
        self.alphas = np.array(alphas, dtype=np.float64)

        # Rendered values for the current frame. The simulation step fills
        # these; until the first step they mirror the stored values.
        self.draw_alphas = self.alphas.copy()
        self.draw_sizes = self.sizes.copy()

    @property
    def particle_count(self) -> int:
        return self.positions.shape[0]

    def __len__(self) -> int:
        return self.particle_count

    def truncate(self, count: int) -> None:
        """
        Drops every particle at index >= count.

        Slicing keeps views onto the original buffers, so no reallocation
        happens when particles are annihilated.
        """
        if count >= self.particle_count:
            return
        count = max(count, 0)
        self.positions = self.positions[:count]
        self.velocities = self.velocities[:count]
        self.sizes = self.sizes[:count]
        self.base_alphas = self.base_alphas[:count]
        self.alphas = self.alphas[:count]
        self.phases = self.phases[:count]
        self.draw_alphas = self.draw_alphas[:count]
        self.draw_sizes = self.draw_sizes[:count]


def seed_pool(width: int, height: int, rng: np.random.Generator) -> ParticlePool:
    """
    Creates a new pool sized by the viewport's area.

    Args:
        width (int): The width of the drawing surface.
        height (int): The height of the drawing surface.
        rng (np.random.Generator): Source of all randomness for the pool.

    Returns:
        ParticlePool: The freshly seeded pool.
    """
    count = particle_count_for_area(width, height)

    positions = rng.uniform(
        low=[0, 0],
        high=[max(width, 0), max(height, 0)],
        size=(count, 2)
    )
    velocities = rng.uniform(-DRIFT_SPEED, DRIFT_SPEED, size=(count, 2))
    sizes = rng.uniform(SIZE_MIN, SIZE_MAX, size=count)
    base_alphas = rng.uniform(BASE_ALPHA_MIN, BASE_ALPHA_MAX, size=count)
    phases = rng.uniform(0.0, TWO_PI, size=count)

    pool = ParticlePool(positions, velocities, sizes, base_alphas, phases)
    logging.debug(
        f"Seeded {count} particles for a {width}x{height} surface. "
        f"Positions shape: {pool.positions.shape}"
    )
    return pool
