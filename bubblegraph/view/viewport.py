# bubblegraph/view/viewport.py
"""
Viewport - Drawing surface size and first-layout centering.
"""

from __future__ import annotations
import logging
from typing import Tuple

from ..core.math2d import WorldPoint
from ..core.signal import SignalBridge, SignalEmitter, SIGNAL_DIRTY, SIGNAL_RESIZE
from ..graph.scene import Scene

logger = logging.getLogger(__name__)


class Viewport(SignalEmitter):
    """
    Tracks the drawable area and re-renders on every resize.

    While the root node still sits exactly at the authoring origin, a resize
    shifts the whole scene so the origin lands on the viewport centre. In
    practice that is the first layout: the shift moves the root off
    ``(0, 0)``, so later resizes leave node positions alone. There is no
    separate "already centred" flag.
    """

    def __init__(self, scene: Scene, bridge: SignalBridge = None):
        self.scene = scene
        self.width = 0
        self.height = 0
        if bridge is not None:
            self.bind_bridge(bridge)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def center(self) -> WorldPoint:
        """Viewport centre as a world offset (camera is identity at startup)."""
        return WorldPoint(self.width / 2, self.height / 2)

    def resize(self, width: int, height: int):
        self.width, self.height = width, height

        if self._root_at_origin():
            logger.info(f"Centering scene on {width}x{height} viewport")
            self.scene.translate_all(self.center)

        self.emit(SIGNAL_RESIZE, width, height)
        self.emit(SIGNAL_DIRTY, 'resize')

    def _root_at_origin(self) -> bool:
        root = self.scene.root
        return root is not None and root.position.x == 0 and root.position.y == 0
