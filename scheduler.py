# scheduler.py
"""
Frame scheduling.

The engine never loops on its own. It asks a FrameScheduler for "the next
frame", like a browser's requestAnimationFrame, and re-arms itself from
inside the callback. The base class is stepped by hand (tests advance it
frame by frame); PygameFrameScheduler paces it with a Pygame clock.
"""
import itertools
import logging
import pygame
from typing import Callable, Dict

from constants import DEFAULT_FPS

FrameCallback = Callable[[float], None]

# --- Data Contracts ---
#
# class FrameScheduler:
#   - request_frame(self, callback: FrameCallback) -> int:
#     - Outputs: a handle for cancel_frame. The callback runs once, on the
#       next frame, with that frame's timestamp in milliseconds.
#   - cancel_frame(self, handle: int) -> bool:
#     - Outputs: True if a pending callback was cancelled.
#   - advance(self, frames: int = 1) -> int:
#     - Outputs: number of callbacks invoked.
#     - Invariants: callbacks requested during a frame run on the next one.
#       A callback cancelled before its turn does not run.


class FrameScheduler:
    """A manually advanced frame clock with requestAnimationFrame semantics."""

    def __init__(self, frame_interval_ms: float = 1000.0 / DEFAULT_FPS):
        self.frame_interval_ms = frame_interval_ms
        self.frame_count = 0
        self._now_ms = 0.0
        self._handles = itertools.count(1)
        self._pending: Dict[int, FrameCallback] = {}

    @property
    def now_ms(self) -> float:
        return self._now_ms

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> bool:
        return self._pending.pop(handle, None) is not None

    def pending_count(self) -> int:
        return len(self._pending)

    def _next_timestamp(self) -> float:
        return self._now_ms + self.frame_interval_ms

    def advance(self, frames: int = 1) -> int:
        invoked = 0
        for _ in range(frames):
            self._now_ms = self._next_timestamp()
            self.frame_count += 1
            for handle in list(self._pending):
                callback = self._pending.pop(handle, None)
                if callback is None:
                    continue
                callback(self._now_ms)
                invoked += 1
        return invoked


class PygameFrameScheduler(FrameScheduler):
    """
    Paces frames with a pygame.time.Clock and stamps them with the
    milliseconds since pygame.init().
    """
    def __init__(self, fps: int = DEFAULT_FPS):
        super().__init__(frame_interval_ms=1000.0 / fps)
        self.fps = fps
        self.clock = pygame.time.Clock()
        logging.info(f"Frame scheduler running at up to {fps} FPS.")

    def _next_timestamp(self) -> float:
        return float(pygame.time.get_ticks())

    def tick(self) -> int:
        """Waits for the next display frame, then runs its callbacks."""
        self.clock.tick(self.fps)
        return self.advance(1)

    @property
    def measured_fps(self) -> float:
        return self.clock.get_fps()
