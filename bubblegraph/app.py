# bubblegraph/app.py
"""
Bubble Graph Viewer - moderngl-window host.

Translates window callbacks into ``InputEvent`` values for the gesture
controller and redraws whenever something emits ``SIGNAL_DIRTY``.

Run with:
    bubblegraph [--scene diagram.json] [--theme light] [--editor console]
    python -m bubblegraph

Controls:
    drag background   pan
    drag bubble       move bubble
    wheel             zoom around the pointer
    double-click      rename bubble (Enter commits, Escape cancels)
"""

from __future__ import annotations
import logging
import time
from typing import Optional

import moderngl
import moderngl_window as mglw

from .core.signal import (
    SignalBridge, SignalDebugger,
    SIGNAL_DIRTY, SIGNAL_CURSOR, SIGNAL_EDIT_STARTED,
)
from .graph.scene import Scene, SceneError, default_scene
from .graph.style import THEMES
from .input import events
from .input.events import Cursor
from .input.gesture import GestureController
from .labels import InlineLabelEditor, LabelEditor, PromptLabelEditor
from .render.painter import Frame, Painter
from .render.renderer import BubbleRenderer
from .render.text import FontAtlas
from .view.camera import Camera
from .view.viewport import Viewport

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'


def console_prompt(node_id: int, current_label: str) -> Optional[str]:
    """Blocking terminal prompt; EOF or Ctrl+C counts as cancel."""
    try:
        return input(f"Label for node {node_id} [{current_label}]: ")
    except (EOFError, KeyboardInterrupt):
        return None


class ViewerApp(mglw.WindowConfig):
    """Interactive bubble diagram window."""

    gl_version = (4, 3)  # SSBO
    title = "Bubble Graph"
    window_size = (1280, 800)
    aspect_ratio = None
    resizable = True
    vsync = True

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument('--scene', default=None, help="Scene JSON file (default: built-in diagram)")
        parser.add_argument('--theme', default='dark', choices=sorted(THEMES))
        parser.add_argument('--editor', default='inline', choices=['inline', 'console'],
                            help="Where double-click label edits happen")
        parser.add_argument('--log-level', default='INFO',
                            choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
        parser.add_argument('--debug-signals', action='store_true', help="Log every signal")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        opts = self.argv
        logging.basicConfig(level=getattr(logging, opts.log_level), format=LOG_FORMAT)

        self.ctx.enable(moderngl.BLEND)
        self.ctx.blend_func = moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA

        # Escape belongs to the label editor
        self.wnd.exit_key = None

        self.bridge = SignalBridge()
        self._signal_debugger = None
        if opts.debug_signals:
            self._signal_debugger = SignalDebugger(self.bridge)
            self._signal_debugger.watch_all()

        self.scene = self._load_scene(opts.scene)
        self.camera = Camera()
        self.camera.bind(self.bridge)

        self.inline_editor: Optional[InlineLabelEditor] = None
        editor: LabelEditor
        if opts.editor == 'console':
            editor = PromptLabelEditor(console_prompt)
        else:
            editor = self.inline_editor = InlineLabelEditor()

        self.controller = GestureController(self.camera, self.scene, editor, bridge=self.bridge)
        self.viewport = Viewport(self.scene, bridge=self.bridge)

        style = THEMES[opts.theme]
        self.painter = Painter(style)
        self.renderer = BubbleRenderer(self.ctx, FontAtlas(bold=style.label_bold))
        self._frame: Optional[Frame] = None
        self._last_mouse = (0, 0)

        self.bridge.connect(SIGNAL_DIRTY, self._on_dirty)
        self.bridge.connect(SIGNAL_CURSOR, self._on_cursor)
        self.bridge.connect(SIGNAL_EDIT_STARTED, self._on_edit_started)

        self.viewport.resize(*self.wnd.size)

    def _load_scene(self, path: Optional[str]) -> Scene:
        if path is None:
            return default_scene()
        try:
            return Scene.load(path)
        except SceneError as e:
            logger.error(f"{e}; falling back to the built-in diagram")
            return default_scene()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _on_dirty(self, reason: str):
        logger.debug(f"Repaint ({reason})")
        self._frame = None

    def _build_frame(self) -> Frame:
        editing = None
        if self.inline_editor is not None and self.inline_editor.active:
            editing = (self.inline_editor.node_id, self.inline_editor.text)
        return self.painter.paint(self.camera, self.scene.nodes, self.scene.edges, editing=editing)

    def on_render(self, t: float, frame_time: float):
        if self._frame is None:
            self._frame = self._build_frame()
        frame = self._frame

        self.ctx.screen.use()
        self.ctx.viewport = (0, 0, *self.wnd.buffer_size)
        self.ctx.clear(*frame.background)
        frame.submit(self.renderer, *self.wnd.size)

    def on_resize(self, width: int, height: int):
        self.viewport.resize(width, height)

    # -------------------------------------------------------------------------
    # Pointer input
    # -------------------------------------------------------------------------

    def on_mouse_press_event(self, x: int, y: int, button: int):
        self._last_mouse = (x, y)
        self.controller.handle(events.pointer_down(x, y, time.perf_counter(), button=button))

    def on_mouse_drag_event(self, x: int, y: int, dx: int, dy: int):
        self._last_mouse = (x, y)
        self.controller.handle(events.pointer_move(x, y, time.perf_counter()))

    def on_mouse_position_event(self, x: int, y: int, dx: int, dy: int):
        self._last_mouse = (x, y)
        self.controller.handle(events.pointer_move(x, y, time.perf_counter()))

    def on_mouse_release_event(self, x: int, y: int, button: int):
        self._last_mouse = (x, y)
        self.controller.handle(events.pointer_up(x, y, time.perf_counter(), button=button))

    def on_mouse_scroll_event(self, x_offset: float, y_offset: float):
        x, y = self._last_mouse
        # Window scroll is positive away from the user; wheel deltas use the opposite sign
        self.controller.handle(events.wheel(x, y, -y_offset, time.perf_counter()))

    def _on_cursor(self, cursor: Cursor):
        # moderngl-window only exposes cursor visibility, not cursor shapes
        logger.debug(f"Cursor -> {cursor.name}")

    # -------------------------------------------------------------------------
    # Keyboard input (inline label editor)
    # -------------------------------------------------------------------------

    def _on_edit_started(self, node_id: int, current_label: str):
        if self.inline_editor is not None:
            logger.info(f"Editing label of node {node_id}: Enter to commit, Escape to cancel")
            self._on_dirty('edit')

    def on_key_event(self, key, action, modifiers):
        editor = self.inline_editor
        if editor is None or not editor.active:
            return
        if action != self.wnd.keys.ACTION_PRESS:
            return

        keys = self.wnd.keys
        if key == keys.ENTER:
            editor.commit()
        elif key == keys.ESCAPE:
            editor.cancel()
        elif key == keys.BACKSPACE:
            editor.backspace()
        else:
            return
        self._on_dirty('edit')

    def on_unicode_char_entered(self, char: str):
        editor = self.inline_editor
        if editor is None or not editor.active or not char.isprintable():
            return
        editor.insert_text(char)
        self._on_dirty('edit')


def main():
    mglw.run_window_config(ViewerApp)


if __name__ == "__main__":
    main()
