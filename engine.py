# engine.py
"""
The star-dust engine: one context object that owns the pointer, the
viewport and the particle pool, wires itself to a host's events on mount,
and tears every registration down again on unmount.
"""
import logging
import numpy as np
from typing import List, Optional, Tuple

from events import (
    EventHost, RESIZE, POINTER_MOVE, TOUCH_MOVE, POINTER_LEAVE, SCROLL,
    ResizeEvent, ScrollEvent
)
from pointer import InputTracker
from scheduler import FrameScheduler
from simulation import Simulation
from viewport import DimensionManager, OpacityTransition, scroll_fade
from visualization import Renderer

# --- Data Contracts ---
#
# class StarDustEngine:
#   - __init__(self, host, scheduler, renderer, width, height, seed=None,
#              log_throttle_frames=300):
#     - Inputs:
#       - host: EventHost the engine registers its listeners on.
#       - scheduler: FrameScheduler driving the frame loop.
#       - renderer: Optional Renderer. None runs the simulation headless.
#       - seed: Master RNG seed. None draws fresh OS entropy.
#
#   - mount(self) -> None:
#     - Side Effects: Seeds the pool for (width, height), or for the last
#       viewport size seen before an unmount, registers the resize,
#       pointermove, touchmove, pointerleave and scroll listeners, computes
#       the scroll fade once and requests the first frame.
#
#   - unmount(self) -> None:
#     - Side Effects: Cancels the pending frame and removes exactly the
#       listeners added by mount.
#     - Invariants: Afterwards the engine has no pending frame and no
#       registered listener. A tick already running does not re-arm.


class StarDustEngine:
    """
    Drives one simulation step and one render pass per frame for as long as
    it is mounted.
    """
    def __init__(
        self,
        host: EventHost,
        scheduler: FrameScheduler,
        renderer: Optional[Renderer],
        width: int,
        height: int,
        seed: Optional[int] = None,
        scroll_y: float = 0.0,
        log_throttle_frames: int = 300,
    ):
        self.host = host
        self.scheduler = scheduler
        self.renderer = renderer
        self.initial_size = (width, height)
        self.scroll_y = scroll_y
        self.log_throttle_frames = max(int(log_throttle_frames), 1)

        # Rule 12: All randomness is controlled by a single master seed.
        self.rng = np.random.default_rng(seed)

        self.tracker = InputTracker()
        self.dimensions = DimensionManager(self.rng, renderer)
        self.simulation = Simulation(self.dimensions, self.tracker)
        self.transition = OpacityTransition()
        self.opacity = 0.0

        self.frame_count = 0
        self._mounted = False
        self._frame_handle: Optional[int] = None
        self._listeners: List[Tuple[str, object]] = []

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def pool(self):
        return self.dimensions.pool

    @property
    def particle_count(self) -> int:
        return self.pool.particle_count if self.pool is not None else 0

    @property
    def display_opacity(self) -> float:
        return self.transition.value

    # --- Lifecycle ---

    def mount(self) -> None:
        if self._mounted:
            logging.warning("StarDustEngine.mount() called on a mounted engine; ignoring.")
            return
        self._mounted = True

        # A remount keeps the last viewport the host reported.
        if self.dimensions.reseed_count:
            size = (self.dimensions.width, self.dimensions.height)
        else:
            size = self.initial_size
        self.dimensions.resize(*size)

        self._listen(RESIZE, self._on_resize)
        self._listen(POINTER_MOVE, self.tracker.on_pointer_move)
        self._listen(TOUCH_MOVE, self.tracker.on_touch_move)
        self._listen(POINTER_LEAVE, self.tracker.on_pointer_leave)
        self._listen(SCROLL, self._on_scroll)

        # Eager check so the layer has a defined opacity before any scroll.
        self._update_opacity()

        self._frame_handle = self.scheduler.request_frame(self._tick)
        logging.info(
            f"StarDustEngine mounted with {self.particle_count} particles "
            f"({len(self._listeners)} listeners)."
        )

    def unmount(self) -> None:
        if not self._mounted:
            return
        self._mounted = False

        if self._frame_handle is not None:
            self.scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None

        for event_type, handler in self._listeners:
            self.host.remove_listener(event_type, handler)
        removed = len(self._listeners)
        self._listeners = []

        logging.info(
            f"StarDustEngine unmounted after {self.frame_count} frames "
            f"({removed} listeners removed, "
            f"{self.simulation.total_removed} particles annihilated)."
        )

    def _listen(self, event_type: str, handler) -> None:
        self.host.add_listener(event_type, handler)
        self._listeners.append((event_type, handler))

    # --- Event handlers ---

    def _on_resize(self, event: ResizeEvent) -> None:
        self.dimensions.resize(event.width, event.height)
        # The fade band is relative to the viewport height.
        self._update_opacity()

    def _on_scroll(self, event: ScrollEvent) -> None:
        self.scroll_y = event.scroll_y
        self._update_opacity()

    def _update_opacity(self) -> None:
        self.opacity = scroll_fade(self.scroll_y, self.dimensions.height)
        self.transition.set_target(self.opacity, self.scheduler.now_ms)

    # --- Frame loop ---

    def _tick(self, timestamp_ms: float) -> None:
        self._frame_handle = None

        removed = self.simulation.step()
        if self.renderer is not None:
            self.renderer.draw(self.pool)
        self.transition.sample(timestamp_ms)
        self.frame_count += 1

        # Rule 2.4: Hot loops must throttle logs
        if self.frame_count % self.log_throttle_frames == 0:
            logging.info(f"Frame {self.frame_count}")
            logging.debug(
                f"Frame {self.frame_count} | Particles: {self.particle_count} | "
                f"Removed this frame: {removed} | Opacity: {self.display_opacity:.2f}"
            )

        if self._mounted:
            self._frame_handle = self.scheduler.request_frame(self._tick)

