# visualization.py
"""
Handles drawing the star-dust field using Pygame.
"""
import logging
import math
import pygame
from typing import Optional, Tuple

from constants import (
    PARTICLE_TINT, GLOW_COLOR, DRAW_ALPHA_THRESHOLD, GLOW_SIZE_THRESHOLD,
    GLOW_ALPHA_THRESHOLD, GLOW_BLUR_SCALE, GLOW_INTENSITY, GLOW_RINGS
)
from particle import ParticlePool

# --- Data Contracts ---
#
# class Renderer:
#   - __init__(self, width: int, height: int):
#     - Side Effects: Allocates an off-screen layer. If Pygame cannot
#       provide one the renderer is disabled and every call is a no-op.
#
#   - draw(self, pool: ParticlePool) -> int:
#     - Outputs: number of particles drawn this frame.
#     - Side Effects: Clears and repaints the layer. Never mutates the pool.
#
#   - composite(self, target: pygame.Surface, opacity: float) -> None:
#     - Side Effects: Adds the layer, scaled by opacity, onto target.


def _scale(color: Tuple[int, int, int], factor: float) -> Tuple[int, int, int]:
    """Premultiplies a colour by an intensity in [0, 1]."""
    factor = min(max(factor, 0.0), 1.0)
    return (int(color[0] * factor), int(color[1] * factor), int(color[2] * factor))


class Renderer:
    """
    Paints particles onto a black off-screen layer.

    The layer holds premultiplied colour on black, so compositing it with
    an additive blend gives the "screen"-like glow over page content.
    """
    def __init__(self, width: int, height: int):
        self.layer: Optional[pygame.Surface] = None
        self.width = 0
        self.height = 0
        self.last_drawn = 0
        self.last_glow_count = 0
        self.resize(width, height)

    @property
    def enabled(self) -> bool:
        return self.layer is not None

    def resize(self, width: int, height: int) -> None:
        """Reallocates the layer for a new viewport size."""
        self.width, self.height = width, height
        if width <= 0 or height <= 0:
            logging.warning(f"Cannot create a {width}x{height} drawing surface. Rendering disabled.")
            self.layer = None
            return
        try:
            self.layer = pygame.Surface((width, height))
        except pygame.error as e:
            logging.warning(f"Could not acquire a drawing surface ({e}). Rendering disabled.")
            self.layer = None
            return
        self.layer.fill((0, 0, 0))
        logging.debug(f"Drawing surface allocated ({width}x{height}).")

    def _draw_glow(self, center: Tuple[float, float], size: float, alpha: float) -> None:
        """
        Approximates a blurred halo with concentric rings fading outwards.

        Drawn before the core circle; inner rings overwrite outer ones.
        """
        blur = GLOW_BLUR_SCALE * alpha
        peak = GLOW_INTENSITY * alpha
        for ring in range(GLOW_RINGS, 0, -1):
            falloff = 1.0 - (ring - 1) / GLOW_RINGS
            radius = size + blur * ring / GLOW_RINGS
            pygame.draw.circle(self.layer, _scale(GLOW_COLOR, peak * falloff), center, radius)

    def _draw_subpixel(self, center: Tuple[float, float], size: float, alpha: float) -> None:
        """
        pygame.draw.circle paints nothing below a radius of 1, so a shrinking
        particle is drawn as its centre pixel, dimmed by the circle's coverage.
        """
        coverage = min(math.pi * size * size, 1.0)
        pixel = (int(center[0]), int(center[1]))
        self.layer.set_at(pixel, _scale(PARTICLE_TINT, alpha * coverage))

    def draw(self, pool: ParticlePool) -> int:
        """
        Clears the layer and draws every visible particle.

        Returns:
            int: The number of particles drawn.
        """
        self.last_drawn = 0
        self.last_glow_count = 0
        if self.layer is None or pool is None:
            return 0

        self.layer.fill((0, 0, 0))

        positions = pool.positions
        draw_alphas = pool.draw_alphas
        draw_sizes = pool.draw_sizes
        drawn = 0
        glows = 0

        for i in range(pool.particle_count):
            alpha = float(draw_alphas[i])
            if alpha <= DRAW_ALPHA_THRESHOLD:
                continue
            size = float(draw_sizes[i])
            center = (float(positions[i, 0]), float(positions[i, 1]))

            if size > GLOW_SIZE_THRESHOLD and alpha > GLOW_ALPHA_THRESHOLD:
                self._draw_glow(center, size, alpha)
                glows += 1

            if size < 1.0:
                self._draw_subpixel(center, size, alpha)
            else:
                pygame.draw.circle(self.layer, _scale(PARTICLE_TINT, alpha), center, size)
            drawn += 1

        self.last_drawn = drawn
        self.last_glow_count = glows
        return drawn

    def composite(self, target: pygame.Surface, opacity: float) -> None:
        """Blends the layer onto target additively, scaled by the layer opacity."""
        if self.layer is None or opacity <= 0.0:
            return
        if opacity >= 1.0:
            target.blit(self.layer, (0, 0), special_flags=pygame.BLEND_RGB_ADD)
            return
        faded = self.layer.copy()
        level = int(round(255 * opacity))
        faded.fill((level, level, level), special_flags=pygame.BLEND_RGB_MULT)
        target.blit(faded, (0, 0), special_flags=pygame.BLEND_RGB_ADD)
