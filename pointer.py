# pointer.py
"""
Tracks the single pointer/touch coordinate the particles react to.
"""
import logging
import math
import numbers
from typing import Tuple

from constants import POINTER_SENTINEL
from events import PointerEvent, TouchEvent, LeaveEvent


def _is_coordinate(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


class InputTracker:
    """
    Holds the latest pointer position. There is no smoothing or prediction:
    the last reported coordinate is used as-is by the next simulation step.
    """
    def __init__(self):
        self.x, self.y = POINTER_SENTINEL

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    @property
    def active(self) -> bool:
        return (self.x, self.y) != POINTER_SENTINEL

    def _set(self, x, y) -> None:
        if not (_is_coordinate(x) and _is_coordinate(y)):
            logging.debug(f"Ignoring malformed pointer coordinate ({x!r}, {y!r}).")
            return
        self.x = float(x)
        self.y = float(y)

    def on_pointer_move(self, event: PointerEvent) -> None:
        self._set(getattr(event, 'x', None), getattr(event, 'y', None))

    def on_touch_move(self, event: TouchEvent) -> None:
        # Only the first touch point drives the field.
        touches = getattr(event, 'touches', None)
        if not touches:
            return
        try:
            x, y = touches[0]
        except (TypeError, ValueError):
            logging.debug(f"Ignoring malformed touch point {touches[0]!r}.")
            return
        self._set(x, y)

    def on_pointer_leave(self, event: LeaveEvent = None) -> None:
        self.reset()

    def reset(self) -> None:
        self.x, self.y = POINTER_SENTINEL
