# bubblegraph/input/gesture.py
"""
Gesture State Machine - Pointer and touch input to camera/node mutations.

Exactly one mode is active at a time:

    Idle
    PanningCamera(pointer_anchor_screen, camera_offset_at_start)
    DraggingNode(node_id, grab_offset_world)
    Pinching(last_distance)

Transitions happen only on down/up events and touch-count changes. Moves
inside a mode recompute absolute positions from the live pointer rather
than accumulating deltas:

- pan:  offset = pointer - (anchor - offset_at_start)
- drag: node   = screen_to_world(pointer) - grab_offset

Wheel and pinch share ``Camera.zoom_at`` so both keep the anchor fixed.

A down event that follows the previous one within
``double_tap_interval`` seconds on a node asks the label editor for a new
label. There is no lockout: three quick taps produce two requests.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

from ..core.math2d import ScreenPoint, WorldPoint
from ..core.signal import (
    SignalBridge, SignalEmitter,
    SIGNAL_DIRTY, SIGNAL_CURSOR, SIGNAL_GESTURE_CHANGED,
    SIGNAL_LABEL_CHANGED, SIGNAL_EDIT_STARTED, SIGNAL_EDIT_FINISHED,
)
from ..graph.scene import Node, Scene
from ..labels import LabelEditor, accepted_label
from ..view.camera import Camera
from .events import Cursor, EventType, InputEvent, TouchPoint

logger = logging.getLogger(__name__)


# =============================================================================
# Gesture States
# =============================================================================

@dataclass(frozen=True)
class Idle:
    """No button or touch held."""


@dataclass(frozen=True)
class PanningCamera:
    """Background grabbed; the camera follows the pointer."""
    pointer_anchor_screen: ScreenPoint
    camera_offset_at_start: ScreenPoint

    @property
    def drag_anchor_offset(self) -> ScreenPoint:
        """Pointer position relative to the camera offset at grab time."""
        return self.pointer_anchor_screen - self.camera_offset_at_start


@dataclass(frozen=True)
class DraggingNode:
    """A node grabbed; ``grab_offset_world`` is pointer minus node centre."""
    node_id: int
    grab_offset_world: WorldPoint


@dataclass(frozen=True)
class Pinching:
    """Two touches active; distance between them at the last event."""
    last_distance: float


GestureState = Union[Idle, PanningCamera, DraggingNode, Pinching]

IDLE = Idle()


@dataclass(frozen=True)
class GestureConfig:
    double_tap_interval: float = 0.3  # Seconds between two down events


# =============================================================================
# Controller
# =============================================================================

class GestureController(SignalEmitter):
    """
    Consumes ``InputEvent`` values and mutates camera and scene.

    Each handled event that changes what is on screen produces exactly one
    ``SIGNAL_DIRTY``. Label results arriving after the event that requested
    them produce their own.
    """

    def __init__(
        self,
        camera: Camera,
        scene: Scene,
        label_editor: LabelEditor = None,
        bridge: SignalBridge = None,
        config: GestureConfig = None,
    ):
        self.camera = camera
        self.scene = scene
        self.label_editor = label_editor
        self.config = config or GestureConfig()

        self._state: GestureState = IDLE
        self._cursor = Cursor.GRAB
        self._last_down_time: Optional[float] = None

        # Render requests raised while an event is being handled
        self._in_event = False
        self._pending_render: Optional[str] = None

        self._handlers: Dict[EventType, Callable[[InputEvent], GestureState]] = {
            EventType.POINTER_DOWN: self._on_pointer_down,
            EventType.POINTER_MOVE: self._on_pointer_move,
            EventType.POINTER_UP: self._on_release,
            EventType.WHEEL: self._on_wheel,
            EventType.TOUCH_START: self._on_touch_start,
            EventType.TOUCH_MOVE: self._on_touch_move,
            EventType.TOUCH_END: self._on_release,
        }

        if bridge is not None:
            self.bind_bridge(bridge)

    # -------------------------------------------------------------------------
    # Public
    # -------------------------------------------------------------------------

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    def handle(self, event: InputEvent) -> GestureState:
        """Process one event to completion and return the resulting state."""
        handler = self._handlers.get(event.type)
        if handler is None:
            return self._state

        self._in_event = True
        try:
            new_state = handler(event)
            self._set_state(new_state)
        finally:
            self._in_event = False

        if self._pending_render is not None:
            reason = self._pending_render
            self._pending_render = None
            self.emit(SIGNAL_DIRTY, reason)

        return self._state

    def cancel(self) -> GestureState:
        """Drop any in-progress pan/drag/pinch."""
        self._set_state(IDLE)
        self._set_cursor(Cursor.GRAB)
        return self._state

    # -------------------------------------------------------------------------
    # Pointer path
    # -------------------------------------------------------------------------

    def _on_pointer_down(self, event: InputEvent) -> GestureState:
        if isinstance(self._state, Pinching):
            return self._state
        return self._begin_single(event.pos, event.timestamp)

    def _on_pointer_move(self, event: InputEvent) -> GestureState:
        self._track(event.pos)
        return self._state

    def _on_release(self, event: InputEvent) -> GestureState:
        self._set_cursor(Cursor.GRAB)
        return IDLE

    def _on_wheel(self, event: InputEvent) -> GestureState:
        event.prevent_default()
        self.camera.zoom_at(event.pos, self.camera.wheel_factor(event.delta_y))
        self._request_render('zoom')
        return self._state

    # -------------------------------------------------------------------------
    # Touch path
    # -------------------------------------------------------------------------

    def _on_touch_start(self, event: InputEvent) -> GestureState:
        touches = event.touches
        if len(touches) == 1:
            return self._begin_single(touches[0].pos, event.timestamp)
        if len(touches) >= 2:
            return Pinching(_touch_distance(touches[0], touches[1]))
        return self._state

    def _on_touch_move(self, event: InputEvent) -> GestureState:
        event.prevent_default()
        touches = event.touches

        if len(touches) == 1:
            self._track(touches[0].pos)
            return self._state

        if len(touches) >= 2:
            a, b = touches[0], touches[1]
            distance = _touch_distance(a, b)
            state = self._state
            if isinstance(state, Pinching) and state.last_distance > 0:
                self.camera.zoom_at(a.pos.midpoint(b.pos), distance / state.last_distance)
                self._request_render('pinch')
            return Pinching(distance)

        return self._state

    # -------------------------------------------------------------------------
    # Shared
    # -------------------------------------------------------------------------

    def _begin_single(self, screen: ScreenPoint, timestamp: float) -> GestureState:
        """Grab the node under ``screen`` (screen space) or the background."""
        world = self.camera.screen_to_world(screen)
        node = self.scene.node_at(world)

        if node is not None:
            new_state = DraggingNode(node.id, world - node.position)
        else:
            new_state = PanningCamera(
                ScreenPoint(screen.x, screen.y),
                ScreenPoint(self.camera.offset.x, self.camera.offset.y),
            )
        self._set_cursor(Cursor.GRABBING)

        is_double = (
            self._last_down_time is not None
            and timestamp - self._last_down_time < self.config.double_tap_interval
        )
        self._last_down_time = timestamp

        if is_double and node is not None:
            self._set_state(new_state)
            self._request_label_edit(node)

        return new_state

    def _track(self, screen: ScreenPoint):
        """Follow the pointer (screen space) in the current single-pointer mode."""
        state = self._state

        if isinstance(state, DraggingNode):
            world = self.camera.screen_to_world(screen)
            self.scene.move_node(state.node_id, world - state.grab_offset_world)
            self._request_render('drag')

        elif isinstance(state, PanningCamera):
            self.camera.pan_to(screen - state.drag_anchor_offset)
            self._request_render('pan')

    def _set_state(self, new_state: GestureState):
        old_state = self._state
        self._state = new_state
        if type(old_state) is not type(new_state):
            logger.debug(f"Gesture {type(old_state).__name__} -> {type(new_state).__name__}")
            self.emit(SIGNAL_GESTURE_CHANGED, old_state, new_state)

    def _set_cursor(self, cursor: Cursor):
        if cursor != self._cursor:
            self._cursor = cursor
            self.emit(SIGNAL_CURSOR, cursor)

    def _request_render(self, reason: str):
        if self._in_event:
            self._pending_render = reason
        else:
            self.emit(SIGNAL_DIRTY, reason)

    # -------------------------------------------------------------------------
    # Label editing
    # -------------------------------------------------------------------------

    def _request_label_edit(self, node: Node):
        if self.label_editor is None:
            return

        node_id = node.id
        logger.debug(f"Requesting label edit for node {node_id}")
        self.emit(SIGNAL_EDIT_STARTED, node_id, node.label)
        self.label_editor.request_edit(
            node_id, node.label, lambda result: self._apply_label(node_id, result)
        )

    def _apply_label(self, node_id: int, result: Optional[str]):
        """Apply an editor answer; label change and render happen together."""
        self.emit(SIGNAL_EDIT_FINISHED, node_id, result)

        label = accepted_label(result)
        if label is None:
            logger.debug(f"Label edit for node {node_id} cancelled or blank")
            return

        old_label = self.scene.node(node_id).label
        self.scene.set_label(node_id, label)
        logger.info(f"Node {node_id} relabelled {old_label!r} -> {label!r}")
        self.emit(SIGNAL_LABEL_CHANGED, node_id, old_label, label)
        self._request_render('label')


def _touch_distance(a: TouchPoint, b: TouchPoint) -> float:
    return a.pos.distance_to(b.pos)
