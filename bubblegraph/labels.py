# bubblegraph/labels.py
"""
Label Editors - Collaborators that ask the user for a replacement label.

Contract:

    editor.request_edit(node_id, current_label, on_result)

``on_result(text)`` is called exactly once, with the entered text or
``None`` for cancellation. It may be called before ``request_edit``
returns (synchronous editors) or from a later event (the in-window
editor). Whoever receives the result applies ``accepted_label`` to it.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ResultCallback = Callable[[Optional[str]], None]
PromptFn = Callable[[int, str], Optional[str]]


def accepted_label(result: Optional[str]) -> Optional[str]:
    """Trimmed label, or None when the result is a cancel or blank."""
    if result is None:
        return None
    text = result.strip()
    return text or None


class LabelEditor(ABC):
    """Asks for a replacement label for one node."""

    @abstractmethod
    def request_edit(self, node_id: int, current_label: str, on_result: ResultCallback):
        pass


class PromptLabelEditor(LabelEditor):
    """Synchronous editor around a blocking prompt function."""

    def __init__(self, prompt: PromptFn):
        self._prompt = prompt

    def request_edit(self, node_id: int, current_label: str, on_result: ResultCallback):
        on_result(self._prompt(node_id, current_label))


# =============================================================================
# In-window editor
# =============================================================================

@dataclass
class EditSession:
    node_id: int
    original: str
    text: str
    on_result: ResultCallback


class InlineLabelEditor(LabelEditor):
    """
    Edits the label in place, fed by the host's keyboard events.

    The buffer starts with the current label. Enter commits, Escape
    cancels. A new request while a session is open cancels the old one.
    """

    def __init__(self):
        self._session: Optional[EditSession] = None

    @property
    def active(self) -> bool:
        return self._session is not None

    @property
    def node_id(self) -> Optional[int]:
        return self._session.node_id if self._session else None

    @property
    def text(self) -> str:
        return self._session.text if self._session else ''

    def request_edit(self, node_id: int, current_label: str, on_result: ResultCallback):
        if self._session is not None:
            logger.debug(f"Edit of node {self._session.node_id} superseded by node {node_id}")
            self.cancel()
        self._session = EditSession(node_id, current_label, current_label, on_result)

    def insert_text(self, chars: str):
        if self._session is None:
            return
        self._session.text += chars

    def backspace(self):
        if self._session is None:
            return
        self._session.text = self._session.text[:-1]

    def commit(self):
        self._finish(self._session.text if self._session else None)

    def cancel(self):
        self._finish(None)

    def _finish(self, result: Optional[str]):
        session = self._session
        if session is None:
            return
        # Closed before calling out, so the callback may open a new session.
        self._session = None
        session.on_result(result)
