# simulation.py
"""
Handles the per-frame simulation of the star-dust field.

This module defines the Simulation class, which advances every particle by
one frame: drift, toroidal wrap, twinkle, and the pointer interaction that
pulls particles in and annihilates them at the centre. The hot loop runs in
a Numba-jitted kernel that compacts survivors in place.
"""
import logging
import math
import numpy as np
from numba import jit

from constants import (
    WRAP_MARGIN, TWINKLE_STEP, TWINKLE_AMPLITUDE, ATTRACTION_RADIUS,
    KILL_RADIUS, FADE_RADIUS, SUCTION_SPEED, ATTRACTION_ALPHA_BOOST,
    FADE_MIN_SIZE_RATIO
)
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from pointer import InputTracker
    from viewport import DimensionManager

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, dimensions: DimensionManager, tracker: InputTracker):
#     - Side Effects: Stores references. The pool is read from `dimensions`
#       on every step so a reseed takes effect on the next frame.
#
#   - step(self) -> int:
#     - Outputs: number of particles annihilated this frame.
#     - Side Effects: Mutates positions, phases, alphas, draw_alphas and
#       draw_sizes of the current pool and truncates it to the survivors.
#     - Invariants: Pool size never grows. Survivors keep their relative
#       order. alphas, draw_alphas and draw_sizes are finite and >= 0.


@jit(nopython=True)
def eased_force(distance):
    """Cubic ease-in of the attraction strength; zero at and beyond the radius."""
    if distance >= ATTRACTION_RADIUS:
        return 0.0
    force = (ATTRACTION_RADIUS - distance) / ATTRACTION_RADIUS
    return force * force * force


@jit(nopython=True)
def fade_factor(distance):
    """Linear 0..1 ramp between the kill and fade radii."""
    t = (distance - KILL_RADIUS) / (FADE_RADIUS - KILL_RADIUS)
    if t < 0.0:
        return 0.0
    if t > 1.0:
        return 1.0
    return t


@jit(nopython=True)
def _step_numba(
    positions, velocities, sizes, base_alphas, alphas, phases,
    draw_alphas, draw_sizes, pointer_x, pointer_y, width, height
):
    """
    Numba-jitted function advancing every particle by one frame.

    Survivors are written back at a cursor that never overtakes the read
    index, so each particle is processed exactly once and annihilated
    particles are compacted away without reallocation. Returns the number
    of survivors.
    """
    particle_count = positions.shape[0]
    write = 0

    for i in range(particle_count):
        # 1. Natural drift
        x = positions[i, 0] + velocities[i, 0]
        y = positions[i, 1] + velocities[i, 1]

        # 2. Toroidal wrap with a margin so particles leave the screen fully
        if x < -WRAP_MARGIN:
            x = width + WRAP_MARGIN
        if x > width + WRAP_MARGIN:
            x = -WRAP_MARGIN
        if y < -WRAP_MARGIN:
            y = height + WRAP_MARGIN
        if y > height + WRAP_MARGIN:
            y = -WRAP_MARGIN

        # 3. Twinkle
        phase = phases[i] + TWINKLE_STEP
        alpha = base_alphas[i] + math.sin(phase) * TWINKLE_AMPLITUDE
        if alpha < 0.0:
            alpha = 0.0

        size = sizes[i]
        draw_alpha = alpha
        draw_size = size

        # 4. Pointer interaction
        dx = pointer_x - x
        dy = pointer_y - y
        dist = math.sqrt(dx * dx + dy * dy)

        if dist < KILL_RADIUS:
            # Annihilated: not written back
            continue
        elif dist < ATTRACTION_RADIUS:
            ease = eased_force(dist)
            angle = math.atan2(dy, dx)
            suction = SUCTION_SPEED * ease
            x += math.cos(angle) * suction
            y += math.sin(angle) * suction

            if dist < FADE_RADIUS:
                # Visual only: stored alpha and size are left as they are
                t = fade_factor(dist)
                draw_alpha = alpha * t
                draw_size = size * (FADE_MIN_SIZE_RATIO + (1.0 - FADE_MIN_SIZE_RATIO) * t)
            else:
                draw_alpha = min(1.0, alpha + ease * ATTRACTION_ALPHA_BOOST)

        positions[write, 0] = x
        positions[write, 1] = y
        velocities[write, 0] = velocities[i, 0]
        velocities[write, 1] = velocities[i, 1]
        sizes[write] = size
        base_alphas[write] = base_alphas[i]
        alphas[write] = alpha
        phases[write] = phase
        draw_alphas[write] = draw_alpha
        draw_sizes[write] = draw_size
        write += 1

    return write


class Simulation:
    """
    Advances the particle pool owned by the DimensionManager, reading the
    pointer from the InputTracker.
    """
    def __init__(self, dimensions: "DimensionManager", tracker: "InputTracker"):
        self.dimensions = dimensions
        self.tracker = tracker
        self.total_removed = 0
        logging.info("Simulation logic initialized.")

    def step(self) -> int:
        """
        Executes one frame of the simulation.

        Returns:
            int: How many particles were annihilated this frame.
        """
        pool = self.dimensions.pool
        if pool is None or pool.particle_count == 0:
            return 0

        pointer_x, pointer_y = self.tracker.position
        before = pool.particle_count
        survivors = _step_numba(
            pool.positions, pool.velocities, pool.sizes, pool.base_alphas,
            pool.alphas, pool.phases, pool.draw_alphas, pool.draw_sizes,
            np.float64(pointer_x), np.float64(pointer_y),
            np.float64(self.dimensions.width), np.float64(self.dimensions.height)
        )
        pool.truncate(survivors)

        removed = before - survivors
        self.total_removed += removed
        return removed
