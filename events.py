# events.py
"""
Host-side event plumbing.

The engine never talks to Pygame's event queue directly. It registers
handlers on an EventHost (the equivalent of a browser window's listener
registry) and the PygameEventBridge translates raw Pygame events into
typed dispatches on that host.
"""
import logging
import pygame
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

# Event types understood by the host.
RESIZE = "resize"
POINTER_MOVE = "pointermove"
TOUCH_MOVE = "touchmove"
POINTER_LEAVE = "pointerleave"
SCROLL = "scroll"

Handler = Callable[[object], None]

# --- Data Contracts ---
#
# class EventHost:
#   - add_listener(event_type: str, handler: Handler) -> None
#   - remove_listener(event_type: str, handler: Handler) -> bool
#     - Outputs: True if that exact handler was registered and removed.
#   - dispatch(event_type: str, event: object) -> int
#     - Outputs: number of handlers invoked.
#   - listener_count(event_type: Optional[str] = None) -> int
#
# class PygameEventBridge:
#   - pump(self, events: Optional[list] = None) -> bool:
#     - Outputs: False if the user asked to quit (QUIT or ESC), True otherwise.
#     - Side Effects: Dispatches resize / pointermove / touchmove /
#       pointerleave / scroll events on the host.


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


@dataclass(frozen=True)
class PointerEvent:
    x: float
    y: float


@dataclass(frozen=True)
class TouchEvent:
    # Active touch points in order of first contact.
    touches: Tuple[Tuple[float, float], ...] = ()


@dataclass(frozen=True)
class LeaveEvent:
    pass


@dataclass(frozen=True)
class ScrollEvent:
    scroll_y: float


class EventHost:
    """A per-instance listener registry with add/remove/dispatch semantics."""

    def __init__(self):
        self._listeners: Dict[str, List[Handler]] = {}

    def add_listener(self, event_type: str, handler: Handler) -> None:
        self._listeners.setdefault(event_type, []).append(handler)

    def remove_listener(self, event_type: str, handler: Handler) -> bool:
        handlers = self._listeners.get(event_type, [])
        try:
            handlers.remove(handler)
        except ValueError:
            logging.warning(f"Tried to remove an unregistered '{event_type}' listener.")
            return False
        if not handlers:
            del self._listeners[event_type]
        return True

    def dispatch(self, event_type: str, event: object) -> int:
        # Snapshot so handlers may unregister themselves while running.
        handlers = list(self._listeners.get(event_type, []))
        for handler in handlers:
            handler(event)
        return len(handlers)

    def listener_count(self, event_type: Optional[str] = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(handlers) for handlers in self._listeners.values())


@dataclass
class _ScrollState:
    scroll_y: float = 0.0
    page_height: float = 0.0
    locked_until_ms: int = 0


class PygameEventBridge:
    """
    Translates Pygame events into host dispatches.

    Pygame windows have no document to scroll, so the bridge keeps a
    virtual page `page_height_ratio` viewports tall and turns mouse wheel
    notches into a clamped scroll offset. Scrolling is ignored until
    `scroll_lock_ms` have passed since the bridge was created.
    """
    def __init__(
        self,
        host: EventHost,
        width: int,
        height: int,
        page_height_ratio: float = 3.0,
        scroll_step: float = 80.0,
        scroll_lock_ms: int = 1000,
    ):
        self.host = host
        self.width = width
        self.height = height
        self.page_height_ratio = page_height_ratio
        self.scroll_step = scroll_step
        self.scroll = _ScrollState(
            page_height=height * page_height_ratio,
            locked_until_ms=pygame.time.get_ticks() + scroll_lock_ms,
        )
        self._fingers: Dict[int, Tuple[float, float]] = {}
        logging.info(
            f"Event bridge ready ({width}x{height}, virtual page "
            f"{self.scroll.page_height:.0f}px, scroll locked for {scroll_lock_ms}ms)."
        )

    @property
    def scroll_y(self) -> float:
        return self.scroll.scroll_y

    def _max_scroll(self) -> float:
        return max(self.scroll.page_height - self.height, 0.0)

    def _resize(self, width: int, height: int) -> None:
        if (width, height) == (self.width, self.height):
            return
        self.width, self.height = width, height
        self.scroll.page_height = height * self.page_height_ratio
        self.scroll.scroll_y = min(self.scroll.scroll_y, self._max_scroll())
        self.host.dispatch(RESIZE, ResizeEvent(width, height))

    def _scroll_by(self, notches: float) -> None:
        if pygame.time.get_ticks() < self.scroll.locked_until_ms:
            return
        # Wheel up (positive y) scrolls back towards the top of the page.
        new_y = self.scroll.scroll_y - notches * self.scroll_step
        new_y = min(max(new_y, 0.0), self._max_scroll())
        if new_y == self.scroll.scroll_y:
            return
        self.scroll.scroll_y = new_y
        self.host.dispatch(SCROLL, ScrollEvent(new_y))

    def _touches(self) -> TouchEvent:
        return TouchEvent(tuple(self._fingers.values()))

    def pump(self, events: Optional[list] = None) -> bool:
        """
        Processes pending events.

        Returns:
            bool: False if the application should exit, True otherwise.
        """
        if events is None:
            events = pygame.event.get()

        for event in events:
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down event bridge.")
                return False

            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down event bridge.")
                return False

            if event.type == pygame.VIDEORESIZE:
                self._resize(event.w, event.h)
            elif event.type == pygame.WINDOWSIZECHANGED:
                self._resize(event.x, event.y)
            elif event.type == pygame.MOUSEMOTION:
                x, y = event.pos
                self.host.dispatch(POINTER_MOVE, PointerEvent(x, y))
            elif event.type == pygame.WINDOWLEAVE:
                self.host.dispatch(POINTER_LEAVE, LeaveEvent())
            elif event.type == pygame.MOUSEWHEEL:
                self._scroll_by(event.y)
            elif event.type in (pygame.FINGERDOWN, pygame.FINGERMOTION):
                # Finger coordinates are normalised to 0..1.
                self._fingers[event.finger_id] = (event.x * self.width, event.y * self.height)
                if event.type == pygame.FINGERMOTION:
                    self.host.dispatch(TOUCH_MOVE, self._touches())
            elif event.type == pygame.FINGERUP:
                self._fingers.pop(event.finger_id, None)

        return True
