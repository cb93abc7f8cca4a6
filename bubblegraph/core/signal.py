# bubblegraph/core/signal.py
"""
SignalBridge - Observer pattern hub for routing events between components.

The gesture controller, camera and viewport never call the host directly;
they emit signals and the host decides what to do (redraw, change cursor).
"""

from __future__ import annotations
from typing import Callable, Dict, List, Optional
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

# =============================================================================
# Signal Types
# =============================================================================

SIGNAL_DIRTY = 'dirty'                      # (reason,) - scene or camera changed, render needed
SIGNAL_RESIZE = 'resize'                    # (width, height)
SIGNAL_VIEW_CHANGED = 'view_changed'        # (camera,)
SIGNAL_ZOOM_CHANGED = 'zoom_changed'        # (scale,)
SIGNAL_CURSOR = 'cursor'                    # (Cursor,)
SIGNAL_GESTURE_CHANGED = 'gesture_changed'  # (old_state, new_state)
SIGNAL_LABEL_CHANGED = 'label_changed'      # (node_id, old_label, new_label)
SIGNAL_EDIT_STARTED = 'edit_started'        # (node_id, current_label)
SIGNAL_EDIT_FINISHED = 'edit_finished'      # (node_id, result_or_None)


# =============================================================================
# Connection Handle
# =============================================================================

@dataclass
class Connection:
    """Handle to a signal connection."""
    signal: str
    callback_id: int
    bridge: SignalBridge = None

    def disconnect(self):
        if self.bridge:
            self.bridge._remove_connection(self.signal, self.callback_id)
            self.bridge = None


# =============================================================================
# Signal Bridge
# =============================================================================

class SignalBridge:
    """Central hub for signal routing."""

    def __init__(self):
        self._connections: Dict[str, Dict[int, Callable]] = {}
        self._next_id: int = 0
        self._emit_depth: int = 0
        self._pending_removes: List[tuple] = []

    def connect(self, signal: str, handler: Callable) -> Connection:
        if signal not in self._connections:
            self._connections[signal] = {}

        callback_id = self._next_id
        self._next_id += 1

        self._connections[signal][callback_id] = handler

        return Connection(signal=signal, callback_id=callback_id, bridge=self)

    def emit(self, signal: str, *args, **kwargs):
        handlers = self._connections.get(signal, {})
        if not handlers:
            return

        self._emit_depth += 1

        try:
            for callback_id, handler in list(handlers.items()):
                try:
                    handler(*args, **kwargs)
                except Exception as e:
                    logger.error(f"Signal handler error [{signal}]: {e}")
        finally:
            self._emit_depth -= 1

            if self._emit_depth == 0 and self._pending_removes:
                for sig, cid in self._pending_removes:
                    self._do_remove(sig, cid)
                self._pending_removes.clear()

    def is_connected(self, signal: str) -> bool:
        return bool(self._connections.get(signal))

    def _remove_connection(self, signal: str, callback_id: int):
        if self._emit_depth > 0:
            self._pending_removes.append((signal, callback_id))
        else:
            self._do_remove(signal, callback_id)

    def _do_remove(self, signal: str, callback_id: int):
        if signal in self._connections:
            self._connections[signal].pop(callback_id, None)


# =============================================================================
# Signal Debugger
# =============================================================================

class SignalDebugger:
    """Debug wrapper that logs all signal activity."""

    def __init__(self, bridge: SignalBridge):
        self.bridge = bridge
        self._original_emit = bridge.emit
        self._watched: set = set()
        self._watch_all: bool = False
        bridge.emit = self._debug_emit

    def watch(self, signal: str):
        self._watched.add(signal)

    def watch_all(self, enabled: bool = True):
        self._watch_all = enabled

    def _debug_emit(self, signal: str, *args, **kwargs):
        if self._watch_all or signal in self._watched:
            args_str = ', '.join(repr(a) for a in args)
            kwargs_str = ', '.join(f"{k}={v!r}" for k, v in kwargs.items())
            all_args = ', '.join(filter(None, [args_str, kwargs_str]))
            logger.debug(f"SIGNAL: {signal}({all_args})")

        self._original_emit(signal, *args, **kwargs)


# =============================================================================
# Convenience
# =============================================================================

class SignalEmitter:
    """Mixin class for objects that emit signals."""

    _bridge: Optional[SignalBridge] = None

    def bind_bridge(self, bridge: SignalBridge):
        self._bridge = bridge

    def emit(self, signal: str, *args, **kwargs):
        if self._bridge:
            self._bridge.emit(signal, *args, **kwargs)
