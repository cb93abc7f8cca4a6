# bubblegraph/graph/scene.py
"""
Scene Model - Bubbles and the directed links between them.

Nodes keep their insertion order; that order is both the draw order and
the hit-test priority (first match wins when bubbles overlap).

Scene data is static input: either the built-in default scene or a JSON
file of the form

    {
      "root": 1,
      "nodes": [{"id": 1, "label": "Idea", "x": 0, "y": 0,
                 "radius": 60, "color": "#00AAEF"}],
      "edges": [{"from": 1, "to": 2}]
    }
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from ..core.math2d import WorldPoint
from .style import Color, DARK_THEME

logger = logging.getLogger(__name__)


class SceneError(ValueError):
    """Scene data is inconsistent or unreadable."""


# =============================================================================
# Data
# =============================================================================

@dataclass
class Node:
    """
    A circular bubble.

    Attributes:
        id: Unique, never reassigned after creation
        label: Text drawn at the centre
        position: Centre in world space
        radius: World-space radius (> 0)
        color: Fill/glow colour
    """
    id: int
    label: str
    position: WorldPoint
    radius: float = DARK_THEME.node_radius
    color: Color = field(default_factory=Color)

    def contains(self, p: WorldPoint) -> bool:
        """True when ``p`` (world space) is inside or on the rim."""
        return self.position.distance_to(p) <= self.radius


@dataclass(frozen=True)
class Edge:
    """Directed link ``source -> target`` by node id."""
    source: int
    target: int


# =============================================================================
# Scene
# =============================================================================

class Scene:
    """Ordered nodes plus the edges between them."""

    def __init__(self, nodes: List[Node], edges: List[Edge] = None, root_id: Optional[int] = None):
        self.nodes: List[Node] = list(nodes)
        self.edges: List[Edge] = list(edges or [])
        self._by_id: Dict[int, Node] = {}

        for node in self.nodes:
            if node.id in self._by_id:
                raise SceneError(f"Duplicate node id: {node.id}")
            if not node.radius > 0:
                raise SceneError(f"Node {node.id} has non-positive radius {node.radius}")
            self._by_id[node.id] = node

        for edge in self.edges:
            for end in (edge.source, edge.target):
                if end not in self._by_id:
                    raise SceneError(f"Edge {edge.source}->{edge.target} references unknown node {end}")

        if root_id is None and self.nodes:
            root_id = self.nodes[0].id
        if root_id is not None and root_id not in self._by_id:
            raise SceneError(f"Root node {root_id} does not exist")
        self.root_id = root_id

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def node(self, node_id: int) -> Node:
        """Get a node by id (KeyError if missing)."""
        return self._by_id[node_id]

    @property
    def root(self) -> Optional[Node]:
        if self.root_id is None:
            return None
        return self._by_id[self.root_id]

    def node_at(self, p: WorldPoint) -> Optional[Node]:
        """
        First node (in list order) whose centre is within ``radius`` of ``p``.

        Args:
            p: World-space point

        Returns:
            The node, or None for background
        """
        for node in self.nodes:
            if node.contains(p):
                return node
        return None

    def iter_links(self) -> Iterator[Tuple[Node, Node]]:
        """Yield (source, target) node pairs in edge order."""
        for edge in self.edges:
            yield self._by_id[edge.source], self._by_id[edge.target]

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def move_node(self, node_id: int, position: WorldPoint):
        self._by_id[node_id].position = WorldPoint(position.x, position.y)

    def set_label(self, node_id: int, label: str):
        self._by_id[node_id].label = label

    def translate_all(self, delta: WorldPoint):
        """Shift every node by ``delta`` (world units)."""
        for node in self.nodes:
            node.position = node.position + delta

    def __len__(self) -> int:
        return len(self.nodes)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict) -> Scene:
        """Build a scene from plain JSON-style data."""
        if not isinstance(data, dict):
            raise SceneError("Scene data must be an object")

        nodes = []
        try:
            for raw in data.get('nodes', []):
                nodes.append(Node(
                    id=int(raw['id']),
                    label=str(raw.get('label', '')),
                    position=WorldPoint(float(raw.get('x', 0.0)), float(raw.get('y', 0.0))),
                    radius=float(raw.get('radius', DARK_THEME.node_radius)),
                    color=Color.from_hex(raw.get('color', '#00ffcc')),
                ))
            edges = [Edge(int(raw['from']), int(raw['to'])) for raw in data.get('edges', [])]
            root = data.get('root')
            root_id = int(root) if root is not None else None
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SceneError(f"Malformed scene data: {e}") from e

        return cls(nodes, edges, root_id=root_id)

    @classmethod
    def load(cls, path: Union[str, Path]) -> Scene:
        """Read a scene from a JSON file."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError) as e:
            raise SceneError(f"Cannot read scene {path}: {e}") from e

        scene = cls.from_dict(data)
        logger.info(f"Loaded scene {path} ({len(scene.nodes)} nodes, {len(scene.edges)} edges)")
        return scene


# =============================================================================
# Default Scene
# =============================================================================

ROOT_COLOR = Color.from_hex('#00AAEF')
BRANCH_COLOR = Color.from_hex('#00ffcc')


def default_scene() -> Scene:
    """One central idea with three branches, authored around the origin."""
    nodes = [
        Node(1, 'My Big Idea', WorldPoint(0.0, 0.0), color=ROOT_COLOR),
        Node(2, 'Market Research', WorldPoint(-150.0, 150.0), color=BRANCH_COLOR),
        Node(3, 'UI/UX Design', WorldPoint(150.0, 150.0), color=BRANCH_COLOR),
        Node(4, 'Monetization', WorldPoint(0.0, -180.0), color=BRANCH_COLOR),
    ]
    edges = [Edge(1, 2), Edge(1, 3), Edge(1, 4)]
    return Scene(nodes, edges, root_id=1)
