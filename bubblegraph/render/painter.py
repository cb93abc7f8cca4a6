# bubblegraph/render/painter.py
"""
Painter - The render sink's pure half.

``Painter.paint(camera, nodes, edges)`` applies the camera's world-to-screen
affine and returns a ``Frame`` of screen-space draw items: the links, then
one layer per node holding its glow, its overlay and its label.
``Frame.submit`` draws the links first and then each layer in node order,
so a node's label sits above its own bubble but below the bubbles of later
nodes. Building a frame touches no GL state, so the same inputs always
produce the same frame.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING

from ..graph.scene import Edge, Node
from ..graph.style import RGBA, StyleTokens, DARK_THEME
from ..view.camera import Camera, CameraSnapshot

if TYPE_CHECKING:
    from .renderer import BubbleRenderer


# =============================================================================
# Draw Items (screen space)
# =============================================================================

@dataclass(frozen=True)
class LinkItem:
    """Line segment, colour interpolated from start to end."""
    x0: float
    y0: float
    x1: float
    y1: float
    color0: RGBA
    color1: RGBA
    width: float


@dataclass(frozen=True)
class BubbleItem:
    """Filled circle with an optional soft halo."""
    cx: float
    cy: float
    radius: float
    fill: RGBA
    glow: float = 0.0  # Halo width in pixels


@dataclass(frozen=True)
class LabelItem:
    """Text centred on (x, y)."""
    text: str
    x: float
    y: float
    size: float
    color: RGBA


@dataclass(frozen=True)
class NodeLayer:
    """One node's bubbles and label, drawn together."""
    node_id: int
    bubbles: Tuple[BubbleItem, ...]
    label: Optional[LabelItem] = None


@dataclass
class Frame:
    """Everything needed to draw one picture of the diagram."""
    camera: CameraSnapshot
    background: RGBA
    links: List[LinkItem] = field(default_factory=list)
    nodes: List[NodeLayer] = field(default_factory=list)

    @property
    def bubbles(self) -> List[BubbleItem]:
        return [bubble for layer in self.nodes for bubble in layer.bubbles]

    @property
    def labels(self) -> List[LabelItem]:
        return [layer.label for layer in self.nodes if layer.label is not None]

    def submit(self, renderer: BubbleRenderer, width: int, height: int):
        """Draw the frame with a GPU backend, one render round per layer."""
        renderer.begin_frame()
        for link in self.links:
            renderer.add_segment(
                link.x0, link.y0, link.x1, link.y1,
                color0=link.color0, color1=link.color1, width=link.width,
            )
        renderer.render(width, height)

        # A later node covers an earlier node's label
        for layer in self.nodes:
            for bubble in layer.bubbles:
                renderer.add_circle(bubble.cx, bubble.cy, bubble.radius, fill=bubble.fill, glow=bubble.glow)
            if layer.label is not None:
                label = layer.label
                renderer.add_text(label.text, label.x, label.y, size=label.size, color=label.color)
            renderer.render(width, height)
        renderer.end_frame()


# =============================================================================
# Painter
# =============================================================================

class Painter:
    """Turns camera + scene into a ``Frame``."""

    def __init__(self, style: StyleTokens = DARK_THEME):
        self.style = style

    def paint(
        self,
        camera: Camera,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        editing: Optional[Tuple[int, str]] = None,
    ) -> Frame:
        """
        Build a frame.

        Args:
            camera: View transform to apply
            nodes: Bubbles in draw order
            edges: Links; both ends must be in ``nodes``
            editing: (node_id, text) shown instead of that node's label
        """
        style = self.style
        m = camera.transform_matrix()
        scale = camera.scale
        frame = Frame(camera=camera.snapshot(), background=style.bg_app)

        by_id: Dict[int, Node] = {node.id: node for node in nodes}
        centers = {node.id: m.apply(node.position.x, node.position.y) for node in nodes}

        for edge in edges:
            a, b = by_id[edge.source], by_id[edge.target]
            (x0, y0), (x1, y1) = centers[a.id], centers[b.id]
            frame.links.append(LinkItem(
                x0, y0, x1, y1,
                color0=a.color.with_alpha(style.edge_alpha),
                color1=b.color.with_alpha(style.edge_alpha),
                width=style.edge_width * scale,
            ))

        for node in nodes:
            cx, cy = centers[node.id]
            radius = camera.world_length_to_screen(node.radius)
            glow = BubbleItem(
                cx, cy, radius,
                fill=node.color.with_alpha(style.glow_alpha),
                glow=style.glow_blur * scale,
            )
            overlay = BubbleItem(
                cx, cy, radius,
                fill=node.color.with_alpha(style.overlay_alpha),
            )

            text, color = node.label, style.label_color
            if editing is not None and editing[0] == node.id:
                text, color = editing[1] + style.editor_caret, style.editor_color
            label = None
            if text:
                label = LabelItem(text, cx, cy, size=style.label_size * scale, color=color)

            frame.nodes.append(NodeLayer(node.id, (glow, overlay), label))

        return frame
