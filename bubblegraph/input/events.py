# bubblegraph/input/events.py
"""
Normalized input events.

The host translates platform callbacks (mouse, wheel, touch, resize) into
``InputEvent`` values before they reach the gesture controller. All
positions are screen space, in pixels relative to the drawing surface.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple
from enum import Enum, auto

from ..core.math2d import ScreenPoint


# =============================================================================
# Event Types
# =============================================================================

class EventType(Enum):
    POINTER_DOWN = auto()
    POINTER_MOVE = auto()
    POINTER_UP = auto()
    WHEEL = auto()
    TOUCH_START = auto()
    TOUCH_MOVE = auto()
    TOUCH_END = auto()


class Cursor(Enum):
    """Pointer feedback requested by the gesture controller."""
    GRAB = auto()
    GRABBING = auto()


@dataclass(frozen=True)
class TouchPoint:
    """One active touch, screen space."""
    id: int
    x: float
    y: float

    @property
    def pos(self) -> ScreenPoint:
        return ScreenPoint(self.x, self.y)


@dataclass
class InputEvent:
    """Input event in surface-local screen coordinates."""
    type: EventType
    x: float = 0.0
    y: float = 0.0
    button: int = 1  # Mouse button (1=left, 2=right, 3=middle)
    delta_y: float = 0.0  # Wheel delta, negative = away from user (zoom in)
    touches: Tuple[TouchPoint, ...] = ()  # Touches still active after the event
    timestamp: float = 0.0  # Seconds, monotonic

    _prevented: bool = field(default=False, repr=False)

    @property
    def pos(self) -> ScreenPoint:
        return ScreenPoint(self.x, self.y)

    def prevent_default(self):
        """Ask the host to suppress the platform's default handling."""
        self._prevented = True

    @property
    def prevented(self) -> bool:
        return self._prevented


# =============================================================================
# Constructors
# =============================================================================

def pointer_down(x: float, y: float, timestamp: float, button: int = 1) -> InputEvent:
    """Press at (x, y). ``timestamp`` is in seconds; double taps compare it."""
    return InputEvent(EventType.POINTER_DOWN, x, y, button=button, timestamp=timestamp)


def pointer_move(x: float, y: float, timestamp: float = 0.0) -> InputEvent:
    return InputEvent(EventType.POINTER_MOVE, x, y, timestamp=timestamp)


def pointer_up(x: float, y: float, timestamp: float = 0.0, button: int = 1) -> InputEvent:
    return InputEvent(EventType.POINTER_UP, x, y, button=button, timestamp=timestamp)


def wheel(x: float, y: float, delta_y: float, timestamp: float = 0.0) -> InputEvent:
    return InputEvent(EventType.WHEEL, x, y, delta_y=delta_y, timestamp=timestamp)


def touch(kind: EventType, touches, timestamp: float) -> InputEvent:
    """
    Build a touch event from ``(x, y)`` pairs or ``TouchPoint`` values.

    Bare pairs get ids by position in the sequence. ``timestamp`` is in
    seconds; a touch start counts as a tap for double-tap detection.
    """
    points = tuple(
        t if isinstance(t, TouchPoint) else TouchPoint(i, float(t[0]), float(t[1]))
        for i, t in enumerate(touches)
    )
    x, y = (points[0].x, points[0].y) if points else (0.0, 0.0)
    return InputEvent(kind, x, y, touches=points, timestamp=timestamp)
