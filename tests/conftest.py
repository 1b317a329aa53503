import os

# Headless SDL so Pygame surfaces work without a display.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pytest

from events import EventHost
from particle import ParticlePool
from scheduler import FrameScheduler


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def scheduler():
    return FrameScheduler()


@pytest.fixture
def host():
    return EventHost()


@pytest.fixture
def make_pool():
    """Builds a pool from explicit positions; drift is zero unless given."""
    def _make(positions, velocities=None, sizes=None, base_alphas=None, phases=None):
        positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
        count = positions.shape[0]
        if velocities is None:
            velocities = np.zeros((count, 2))
        if sizes is None:
            sizes = np.full(count, 2.0)
        if base_alphas is None:
            base_alphas = np.full(count, 0.4)
        if phases is None:
            # One twinkle step later the phase is 0, so alpha == base_alpha.
            phases = np.full(count, -0.05)
        return ParticlePool(
            positions,
            np.array(velocities, dtype=np.float64).reshape(-1, 2),
            np.array(sizes, dtype=np.float64),
            np.array(base_alphas, dtype=np.float64),
            np.array(phases, dtype=np.float64),
        )
    return _make
