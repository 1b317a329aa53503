# viewport.py
"""
Viewport state: the authoritative surface size, the particle pool that is
reseeded whenever that size changes, and the scroll-driven fade of the
whole layer.
"""
import logging
import math
import numbers
import numpy as np
from typing import Optional

from constants import FADE_START_RATIO, FADE_END_RATIO, OPACITY_TRANSITION_MS
from particle import ParticlePool, seed_pool

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from visualization import Renderer

# --- Data Contracts ---
#
# class DimensionManager:
#   - resize(self, width: int, height: int) -> ParticlePool:
#     - Side Effects: Resizes the renderer's surface, replaces the pool.
#     - Invariants: width, height and pool always describe the same
#       viewport. A new pool is fully built before any field changes.
#
# scroll_fade(scroll_y: float, viewport_height: float) -> float:
#   - Outputs: clamp((scroll_y - 0.2H) / (0.8H - 0.2H), 0, 1).


def scroll_fade(scroll_y: float, viewport_height: float) -> float:
    """Maps the page scroll offset to the particle layer's opacity."""
    if viewport_height <= 0 or not math.isfinite(scroll_y):
        return 0.0
    start_fade = viewport_height * FADE_START_RATIO
    end_fade = viewport_height * FADE_END_RATIO
    opacity = (scroll_y - start_fade) / (end_fade - start_fade)
    return min(max(opacity, 0.0), 1.0)


def _is_size(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


class DimensionManager:
    """
    Owns the viewport size and the particle pool. Every size change resizes
    the drawing surface and triggers a full reseed.
    """
    def __init__(self, rng: np.random.Generator, renderer: Optional["Renderer"] = None):
        self.rng = rng
        self.renderer = renderer
        self.width = 0
        self.height = 0
        self.pool: Optional[ParticlePool] = None
        self.reseed_count = 0

    def resize(self, width: int, height: int) -> Optional[ParticlePool]:
        if not (_is_size(width) and _is_size(height)):
            logging.debug(f"Ignoring malformed viewport size ({width!r}, {height!r}).")
            return self.pool
        width = max(int(width), 0)
        height = max(int(height), 0)

        # Build first, then swap: a frame between two rapid resizes sees
        # either the old viewport or the new one, never a mix.
        pool = seed_pool(width, height, self.rng)
        if self.renderer is not None:
            self.renderer.resize(width, height)
        self.width, self.height, self.pool = width, height, pool
        self.reseed_count += 1

        logging.info(
            f"Viewport resized to {width}x{height}; "
            f"reseeded with {pool.particle_count} particles."
        )
        return pool


def _ease_out(progress: float) -> float:
    return 1.0 - (1.0 - progress) ** 2


class OpacityTransition:
    """
    Eases the displayed layer opacity towards a target over a fixed duration.

    The scroll fade gives the target; the displayed value follows it with an
    ease-out curve so jumps in scroll position never pop the layer in.
    """
    def __init__(self, duration_ms: float = OPACITY_TRANSITION_MS, initial: float = 0.0):
        self.duration_ms = duration_ms
        self._start_value = initial
        self._target = initial
        self._start_ms = 0.0
        self._value = initial

    @property
    def target(self) -> float:
        return self._target

    @property
    def value(self) -> float:
        return self._value

    def set_target(self, target: float, now_ms: float) -> None:
        if target == self._target:
            return
        self._start_value = self.sample(now_ms)
        self._start_ms = now_ms
        self._target = target

    def sample(self, now_ms: float) -> float:
        if self.duration_ms <= 0:
            self._value = self._target
            return self._value
        progress = (now_ms - self._start_ms) / self.duration_ms
        progress = min(max(progress, 0.0), 1.0)
        self._value = self._start_value + (self._target - self._start_value) * _ease_out(progress)
        return self._value
