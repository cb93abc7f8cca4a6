# bubblegraph/__init__.py
"""
Bubble Graph - Pan/zoom viewer for bubble (mind-map) diagrams.

Key components:

- Camera: screen <-> world mapping, anchored zoom
- Scene: nodes, edges, hit testing
- GestureController: pointer/touch/wheel input as a state machine
- Painter: camera + scene -> Frame of screen-space draw items
- ViewerApp: moderngl-window host (``bubblegraph.app``)

Example usage:

    from bubblegraph import Camera, GestureController, default_scene
    from bubblegraph.input.events import pointer_down, pointer_move, pointer_up

    scene = default_scene()
    camera = Camera()
    gestures = GestureController(camera, scene)

    gestures.handle(pointer_down(0, 0, timestamp=0.0))
    gestures.handle(pointer_move(40, 10))
    gestures.handle(pointer_up(40, 10))
"""

from bubblegraph.core.math2d import Vec2, ScreenPoint, WorldPoint, Mat3
from bubblegraph.core.signal import SignalBridge
from bubblegraph.view.camera import Camera, CameraConfig
from bubblegraph.view.viewport import Viewport
from bubblegraph.graph.scene import Node, Edge, Scene, SceneError, default_scene
from bubblegraph.graph.style import Color, StyleTokens, DARK_THEME, LIGHT_THEME
from bubblegraph.input.gesture import (
    GestureController,
    GestureConfig,
    Idle,
    PanningCamera,
    DraggingNode,
    Pinching,
)
from bubblegraph.labels import LabelEditor, PromptLabelEditor, InlineLabelEditor
from bubblegraph.render.painter import Painter, Frame

__version__ = '0.1.0'
