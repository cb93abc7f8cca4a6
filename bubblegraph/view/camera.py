# bubblegraph/view/camera.py
"""
Camera - Pan/zoom view transformation for the diagram surface.

Mapping (component-wise):

    world  = (screen - offset) / scale
    screen = world * scale + offset

``offset`` is the screen position of the world origin, in pixels.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import math

from ..core.math2d import ScreenPoint, WorldPoint, Mat3, clamp
from ..core.signal import (
    SignalBridge, SignalEmitter,
    SIGNAL_VIEW_CHANGED, SIGNAL_ZOOM_CHANGED,
)


@dataclass(frozen=True)
class CameraConfig:
    min_scale: float = 0.3
    max_scale: float = 3.0
    wheel_zoom_factor: float = 1.1


@dataclass(frozen=True)
class CameraSnapshot:
    """Immutable camera state handed to the render sink."""
    offset_x: float
    offset_y: float
    scale: float


@dataclass
class Camera(SignalEmitter):
    """View transformation between screen pixels and world units."""

    offset: ScreenPoint = field(default_factory=lambda: ScreenPoint(0.0, 0.0))
    scale: float = 1.0
    config: CameraConfig = field(default_factory=CameraConfig)

    _bridge: SignalBridge = None

    def __post_init__(self):
        self.scale = clamp(self.scale, self.config.min_scale, self.config.max_scale)

    # -------------------------------------------------------------------------
    # Coordinate mapping
    # -------------------------------------------------------------------------

    def screen_to_world(self, p: ScreenPoint) -> WorldPoint:
        """Map a screen-space pixel position to world space."""
        return WorldPoint(
            (p.x - self.offset.x) / self.scale,
            (p.y - self.offset.y) / self.scale,
        )

    def world_to_screen(self, p: WorldPoint) -> ScreenPoint:
        """Map a world-space position to screen-space pixels."""
        return ScreenPoint(
            p.x * self.scale + self.offset.x,
            p.y * self.scale + self.offset.y,
        )

    def world_length_to_screen(self, length: float) -> float:
        return length * self.scale

    def transform_matrix(self) -> Mat3:
        """World-to-screen affine: translate(offset) @ scale(scale)."""
        return Mat3.translate(self.offset.x, self.offset.y) @ Mat3.scale(self.scale, self.scale)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def zoom_at(self, anchor: ScreenPoint, factor: float):
        """
        Zoom by ``factor`` keeping the world point under ``anchor`` fixed.

        The offset correction is computed from the scale actually applied
        after clamping, so the anchor stays put even when the clamp shrinks
        the requested factor.

        Args:
            anchor: Screen-space point to keep stationary
            factor: Zoom multiplier (>1 zooms in)
        """
        if not math.isfinite(factor) or factor <= 0.0:
            return

        world_before = self.screen_to_world(anchor)

        old_scale = self.scale
        self.scale = clamp(self.scale * factor, self.config.min_scale, self.config.max_scale)

        world_after = self.screen_to_world(anchor)
        self.offset = self.offset + ScreenPoint(
            (world_after.x - world_before.x) * self.scale,
            (world_after.y - world_before.y) * self.scale,
        )

        self._emit_view_changed()
        if self.scale != old_scale:
            self.emit(SIGNAL_ZOOM_CHANGED, self.scale)

    def wheel_factor(self, delta_y: float) -> float:
        """Zoom factor for a wheel step; negative delta (scroll up) zooms in."""
        step = self.config.wheel_zoom_factor
        return step if delta_y < 0 else 1.0 / step

    def pan_to(self, offset: ScreenPoint):
        """Place the world origin at ``offset`` (screen pixels)."""
        self.offset = ScreenPoint(offset.x, offset.y)
        self._emit_view_changed()

    def snapshot(self) -> CameraSnapshot:
        return CameraSnapshot(self.offset.x, self.offset.y, self.scale)

    def bind(self, bridge: SignalBridge):
        self.bind_bridge(bridge)

    def _emit_view_changed(self):
        self.emit(SIGNAL_VIEW_CHANGED, self)
