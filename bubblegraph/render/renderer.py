# bubblegraph/render/renderer.py
"""
Bubble Renderer - GPU-accelerated drawing of a ``Frame``.

Renders shapes as instanced quads with procedural fragment shaders.
Each kind (segment, circle) has its own program; batches draw in kind
order, then text. Each ``render`` call drains the queues, so callers
layer the picture by rendering in several rounds.

Pipeline:
1. Collect draw calls into batches by kind
2. Pack instance data into SSBO (geometry, colors, params)
3. Draw instanced quads - vertex shader expands to the shape's bounds
4. Fragment shader draws analytically with smoothstep AA

Instance Layout (5 x vec4 = 20 floats per instance):
    [0] geom:    circle: x, y, w, h of bounds    segment: x0, y0, x1, y1
    [1] color1:  r, g, b, a (fill / start colour)
    [2] color2:  r, g, b, a (unused / end colour)
    [3] params0: circle: radius, glow, _, _      segment: width, _, _, _
    [4] params1: reserved
"""

from __future__ import annotations
import numpy as np
from dataclasses import dataclass
from typing import List, Dict, Tuple, TYPE_CHECKING
from enum import Enum, auto

if TYPE_CHECKING:
    import moderngl

from .text import FontAtlas, TextRenderer


# =============================================================================
# Shape Kinds
# =============================================================================

class ShapeKind(Enum):
    SEGMENT = auto()   # Gradient line between two points
    CIRCLE = auto()    # Filled disc with optional halo


# =============================================================================
# Instance Data
# =============================================================================

STRIDE_FLOATS = 20  # 5 vec4 per instance


@dataclass
class ShapeInstance:
    """Instance data for one shape."""
    kind: ShapeKind
    geom: Tuple[float, float, float, float]
    color1: Tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)
    color2: Tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)
    params0: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
    params1: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)


def pack_instances(instances: List[ShapeInstance]) -> np.ndarray:
    """Pack instances into a flat float32 array for GPU upload."""
    if not instances:
        return np.array([], dtype=np.float32)

    out = np.zeros((len(instances), STRIDE_FLOATS), dtype=np.float32)
    for i, inst in enumerate(instances):
        out[i, 0:4] = inst.geom
        out[i, 4:8] = inst.color1
        out[i, 8:12] = inst.color2
        out[i, 12:16] = inst.params0
        out[i, 16:20] = inst.params1
    return out.ravel()


def circle_instance(
    cx: float, cy: float, radius: float,
    fill: Tuple[float, ...],
    glow: float = 0.0
) -> ShapeInstance:
    """Circle whose quad covers the disc plus its halo."""
    extent = radius + max(glow, 0.0) + 1.0
    return ShapeInstance(
        kind=ShapeKind.CIRCLE,
        geom=(cx - extent, cy - extent, extent * 2, extent * 2),
        color1=tuple(fill),
        params0=(radius, glow, 0.0, 0.0),
    )


def segment_instance(
    x0: float, y0: float, x1: float, y1: float,
    color0: Tuple[float, ...],
    color1: Tuple[float, ...],
    width: float
) -> ShapeInstance:
    return ShapeInstance(
        kind=ShapeKind.SEGMENT,
        geom=(x0, y0, x1, y1),
        color1=tuple(color0),
        color2=tuple(color1),
        params0=(width, 0.0, 0.0, 0.0),
    )


# =============================================================================
# Shaders
# =============================================================================

VERTEX_RECT = """
#version 430

in vec2 in_vert;  // Unit quad vertex position [0,1]

uniform vec2 u_resolution;

layout(std430, binding = 0) buffer Instances {
    vec4 data[];
};

out vec2 v_uv;
flat out int v_instance;

void main() {
    v_uv = in_vert;
    v_instance = gl_InstanceID;

    vec4 rect = data[v_instance * 5 + 0];
    vec2 px = rect.xy + in_vert * rect.zw;

    vec2 ndc = (px / u_resolution) * 2.0 - 1.0;
    ndc.y *= -1.0;  // Top-left origin

    gl_Position = vec4(ndc, 0.0, 1.0);
}
"""

VERTEX_SEGMENT = """
#version 430

in vec2 in_vert;  // x: along segment [0,1], y: across [0,1]

uniform vec2 u_resolution;

layout(std430, binding = 0) buffer Instances {
    vec4 data[];
};

out vec2 v_uv;
out float v_across;  // Signed pixel distance from the centre line
flat out int v_instance;

void main() {
    v_instance = gl_InstanceID;
    int base = v_instance * 5;

    vec4 ends = data[base + 0];
    float width = data[base + 3].x;

    vec2 p0 = ends.xy;
    vec2 p1 = ends.zw;
    vec2 dir = p1 - p0;
    float len = length(dir);
    dir = len > 0.0 ? dir / len : vec2(1.0, 0.0);
    vec2 normal = vec2(-dir.y, dir.x);

    float half_w = width * 0.5 + 1.0;  // One pixel of AA fringe
    v_across = (in_vert.y * 2.0 - 1.0) * half_w;
    v_uv = in_vert;

    vec2 px = p0 + dir * (in_vert.x * len) + normal * v_across;

    vec2 ndc = (px / u_resolution) * 2.0 - 1.0;
    ndc.y *= -1.0;

    gl_Position = vec4(ndc, 0.0, 1.0);
}
"""

FRAG_CIRCLE = """
#version 430

layout(std430, binding = 0) buffer Instances {
    vec4 data[];
};

in vec2 v_uv;
flat in int v_instance;
out vec4 fragColor;

void main() {
    int base = v_instance * 5;
    vec4 rect = data[base + 0];
    vec4 fill = data[base + 1];
    vec4 params = data[base + 3];

    float radius = params.x;
    float glow = params.y;

    // Pixel distance from centre
    vec2 p = (v_uv - 0.5) * rect.zw;
    float d = length(p) - radius;

    float fill_mask = 1.0 - smoothstep(-1.0, 0.0, d);

    // Soft halo fading out over `glow` pixels
    float glow_mask = 0.0;
    if (glow > 0.0) {
        float t = clamp(d / glow, 0.0, 1.0);
        glow_mask = (1.0 - t) * (1.0 - t) * step(0.0, d) * 0.6;
    }

    float alpha = max(fill_mask, glow_mask) * fill.a;
    if (alpha <= 0.0) discard;
    fragColor = vec4(fill.rgb, alpha);
}
"""

FRAG_SEGMENT = """
#version 430

layout(std430, binding = 0) buffer Instances {
    vec4 data[];
};

in vec2 v_uv;
in float v_across;
flat in int v_instance;
out vec4 fragColor;

void main() {
    int base = v_instance * 5;
    vec4 c0 = data[base + 1];
    vec4 c1 = data[base + 2];
    float width = data[base + 3].x;

    float mask = 1.0 - smoothstep(width * 0.5 - 0.5, width * 0.5 + 0.5, abs(v_across));
    vec4 color = mix(c0, c1, v_uv.x);

    fragColor = vec4(color.rgb, color.a * mask);
}
"""

PROGRAMS = {
    ShapeKind.SEGMENT: (VERTEX_SEGMENT, FRAG_SEGMENT),
    ShapeKind.CIRCLE: (VERTEX_RECT, FRAG_CIRCLE),
}


# =============================================================================
# Bubble Renderer
# =============================================================================

class BubbleRenderer:
    """
    GPU renderer for bubble diagrams.

    Uses instanced quad rendering with an SSBO for instance data.
    Call order per frame: begin_frame, then one or more rounds of add_*
    followed by render, then end_frame.
    """

    def __init__(self, ctx: moderngl.Context, font: FontAtlas = None):
        self.ctx = ctx

        quad_data = np.array([
            0.0, 0.0,
            1.0, 0.0,
            1.0, 1.0,
            0.0, 0.0,
            1.0, 1.0,
            0.0, 1.0,
        ], dtype='f4')
        self._quad_vbo = ctx.buffer(quad_data.tobytes())

        self._instance_capacity = 256
        self._instance_buffer = ctx.buffer(reserve=STRIDE_FLOATS * 4 * self._instance_capacity)

        self._programs: Dict[ShapeKind, moderngl.Program] = {}
        self._vaos: Dict[ShapeKind, moderngl.VertexArray] = {}
        for kind, (vert_src, frag_src) in PROGRAMS.items():
            self._compile_program(kind, vert_src, frag_src)

        self._batches: Dict[ShapeKind, List[ShapeInstance]] = {k: [] for k in ShapeKind}

        self._text_renderer = TextRenderer(ctx, font)

    def _compile_program(self, kind: ShapeKind, vert_src: str, frag_src: str):
        prog = self.ctx.program(vertex_shader=vert_src, fragment_shader=frag_src)
        self._programs[kind] = prog
        self._vaos[kind] = self.ctx.vertex_array(
            prog,
            [(self._quad_vbo, '2f', 'in_vert')]
        )

    def begin_frame(self):
        """Clear batches for new frame."""
        for batch in self._batches.values():
            batch.clear()
        self._text_renderer.begin_frame()

    def add_circle(
        self,
        cx: float, cy: float, radius: float,
        fill: Tuple[float, ...] = (1.0, 1.0, 1.0, 1.0),
        glow: float = 0.0
    ):
        self._batches[ShapeKind.CIRCLE].append(circle_instance(cx, cy, radius, fill, glow))

    def add_segment(
        self,
        x0: float, y0: float, x1: float, y1: float,
        color0: Tuple[float, ...] = (1.0, 1.0, 1.0, 1.0),
        color1: Tuple[float, ...] = (1.0, 1.0, 1.0, 1.0),
        width: float = 1.0
    ):
        self._batches[ShapeKind.SEGMENT].append(
            segment_instance(x0, y0, x1, y1, color0, color1, width)
        )

    def add_text(
        self,
        text: str,
        x: float,
        y: float,
        size: float = None,
        color: Tuple[float, ...] = (1.0, 1.0, 1.0, 1.0)
    ):
        """Queue a label centred on (x, y)."""
        self._text_renderer.draw_text(text, x, y, size=size, color=color)

    def render(self, width: int, height: int):
        """Render the queued shapes, then queued text on top, and clear the queues."""
        for kind in ShapeKind:
            batch = self._batches[kind]
            if batch:
                self._render_batch(kind, batch, width, height)
                batch.clear()

        self._text_renderer.render(width, height)

    def _render_batch(
        self,
        kind: ShapeKind,
        instances: List[ShapeInstance],
        width: int,
        height: int
    ):
        if len(instances) > self._instance_capacity:
            self._instance_capacity = max(len(instances), self._instance_capacity * 2)
            self._instance_buffer = self.ctx.buffer(reserve=self._instance_capacity * STRIDE_FLOATS * 4)

        packed = pack_instances(instances)
        self._instance_buffer.write(packed.tobytes())
        self._instance_buffer.bind_to_storage_buffer(binding=0)

        prog = self._programs[kind]
        if 'u_resolution' in prog:
            prog['u_resolution'].value = (width, height)

        self._vaos[kind].render(instances=len(instances))

    def end_frame(self):
        self._text_renderer.end_frame()
