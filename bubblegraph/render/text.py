# bubblegraph/render/text.py
"""
Text Rendering - Font atlas and label layout.

Uses Pillow for font loading and glyph rasterization, then renders
labels via instanced quads sampling from a font atlas texture.

The atlas is rasterized once at a fixed pixel size. Labels at other
sizes (the camera zooms them along with the bubbles) scale the glyph
quads instead of re-rasterizing.

Architecture:
- FontAtlas: Packs glyphs into an image, uploads it on first use
- layout_text: Converts a string to positioned glyph quads
- TextRenderer: GPU resources and rendering
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple, Optional, TYPE_CHECKING
from pathlib import Path

import numpy as np
from PIL import Image, ImageFont, ImageDraw

if TYPE_CHECKING:
    import moderngl

logger = logging.getLogger(__name__)


# =============================================================================
# Glyph Data
# =============================================================================

@dataclass
class GlyphMetrics:
    """Metrics for a single glyph."""
    char: str
    width: int          # Glyph width in pixels
    height: int         # Glyph height in pixels
    bearing_x: int      # Offset from cursor to left edge
    bearing_y: int      # Offset from line top to glyph top
    advance: int        # Cursor advance after this glyph

    uv_x0: float = 0.0
    uv_y0: float = 0.0
    uv_x1: float = 0.0
    uv_y1: float = 0.0


# =============================================================================
# Font Atlas
# =============================================================================

SYSTEM_FONTS = {
    True: [
        "C:/Windows/Fonts/arialbd.ttf",
        "C:/Windows/Fonts/segoeuib.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
        "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    ],
    False: [
        "C:/Windows/Fonts/arial.ttf",
        "C:/Windows/Fonts/segoeui.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/TTF/DejaVuSans.ttf",
        "/System/Library/Fonts/Supplemental/Arial.ttf",
    ],
}


class FontAtlas:
    """
    Glyph atlas for labels.

    Rasterizes ASCII printable characters plus common symbols into one
    single-channel image. The GPU texture is created by ``texture(ctx)``.
    """

    DEFAULT_CHARS = (
        " !\"#$%&'()*+,-./0123456789:;<=>?@"
        "ABCDEFGHIJKLMNOPQRSTUVWXYZ[\\]^_`"
        "abcdefghijklmnopqrstuvwxyz{|}~"
        "°±×÷–—•…"
    )

    ATLAS_WIDTH = 1024

    def __init__(
        self,
        font_path: str = None,
        size: int = 32,
        bold: bool = True,
        chars: str = None,
        padding: int = 2
    ):
        """
        Args:
            font_path: Path to TTF/OTF font file (None = first system font found)
            size: Rasterization size in pixels
            bold: Prefer a bold system font when ``font_path`` is not given
            chars: Characters to include (None = DEFAULT_CHARS)
            padding: Padding between glyphs in atlas
        """
        self.size = size
        self.padding = padding
        self._chars = chars or self.DEFAULT_CHARS
        self._font = self._load_font(font_path, size, bold)

        self._glyphs: Dict[str, GlyphMetrics] = {}
        self._image: Optional[Image.Image] = None
        self._texture: Optional[moderngl.Texture] = None

        self._build_atlas()

    def _load_font(self, font_path: str, size: int, bold: bool):
        if font_path:
            if Path(font_path).exists():
                return ImageFont.truetype(font_path, size)
            logger.warning(f"Font not found: {font_path}, using system font")

        for path in SYSTEM_FONTS[bold] + SYSTEM_FONTS[not bold]:
            if Path(path).exists():
                logger.debug(f"Using font {path}")
                return ImageFont.truetype(path, size)

        logger.warning("No system font found, using Pillow default font")
        return ImageFont.load_default(size)

    def _build_atlas(self):
        """Render all glyphs and pack them row by row."""
        glyph_images = {}
        max_height = 0

        for char in self._chars:
            left, top, right, bottom = self._font.getbbox(char)
            width = right - left
            height = bottom - top

            if width <= 0 or height <= 0:
                # Space or zero-width character
                width = max(width, 1)
                height = max(height, 1)

            img = Image.new('L', (width + 4, height + 4), 0)
            draw = ImageDraw.Draw(img)
            draw.text((-left + 2, -top + 2), char, font=self._font, fill=255)

            glyph_images[char] = img
            self._glyphs[char] = GlyphMetrics(
                char=char,
                width=width,
                height=height,
                bearing_x=left,
                bearing_y=top,
                advance=int(round(self._font.getlength(char))),
            )
            max_height = max(max_height, height + 4)

        row_height = max_height + self.padding
        num_rows = 1
        row_width = 0
        for img in glyph_images.values():
            if row_width + img.width + self.padding > self.ATLAS_WIDTH:
                row_width = 0
                num_rows += 1
            row_width += img.width + self.padding

        atlas_w = self.ATLAS_WIDTH
        atlas_h = _next_pow2(num_rows * row_height + self.padding)
        atlas = Image.new('L', (atlas_w, atlas_h), 0)

        x, y = self.padding, self.padding
        for char, img in glyph_images.items():
            if x + img.width + self.padding > atlas_w:
                x = self.padding
                y += row_height

            atlas.paste(img, (x, y))

            glyph = self._glyphs[char]
            glyph.uv_x0 = x / atlas_w
            glyph.uv_y0 = y / atlas_h
            glyph.uv_x1 = (x + img.width) / atlas_w
            glyph.uv_y1 = (y + img.height) / atlas_h

            x += img.width + self.padding

        self._image = atlas

    @property
    def image(self) -> Image.Image:
        return self._image

    def texture(self, ctx: moderngl.Context) -> moderngl.Texture:
        """Upload the atlas on first use and return the texture."""
        if self._texture is None:
            self._texture = ctx.texture(self._image.size, 1, self._image.tobytes())
            self._texture.filter = (ctx.LINEAR, ctx.LINEAR)
        return self._texture

    def get_glyph(self, char: str) -> Optional[GlyphMetrics]:
        return self._glyphs.get(char)

    @property
    def line_height(self) -> int:
        return int(self.size * 1.2)

    def measure_text(self, text: str, scale: float = 1.0) -> Tuple[float, float]:
        """Width and line height of ``text`` at ``scale`` times the atlas size."""
        width = 0
        for char in text:
            glyph = self._glyphs.get(char) or self._glyphs.get('?')
            if glyph:
                width += glyph.advance
        return (width * scale, self.line_height * scale)


def _next_pow2(n: int) -> int:
    return 1 << (n - 1).bit_length()


# =============================================================================
# Text Layout
# =============================================================================

@dataclass
class GlyphQuad:
    """A positioned glyph for rendering."""
    x: float
    y: float
    width: float
    height: float
    uv_x0: float
    uv_y0: float
    uv_x1: float
    uv_y1: float


class TextAlign:
    LEFT = 'left'
    CENTER = 'center'
    RIGHT = 'right'


class TextBaseline:
    TOP = 'top'
    MIDDLE = 'middle'
    BOTTOM = 'bottom'


def layout_text(
    text: str,
    x: float,
    y: float,
    font: FontAtlas,
    size: float = None,
    align: str = TextAlign.CENTER,
    baseline: str = TextBaseline.MIDDLE,
) -> List[GlyphQuad]:
    """
    Convert text to positioned glyph quads.

    Args:
        text: Text to lay out; '\\n' starts a new line
        x, y: Anchor point (screen pixels)
        font: Atlas to take glyphs from
        size: Target pixel size (None = atlas size)
        align: Horizontal placement relative to x
        baseline: Vertical placement relative to y

    Returns:
        Glyph quads in screen pixels
    """
    scale = (size / font.size) if size else 1.0
    lines = text.split('\n')
    line_height = font.line_height * scale
    total_height = len(lines) * line_height

    if baseline == TextBaseline.TOP:
        current_y = y
    elif baseline == TextBaseline.BOTTOM:
        current_y = y - total_height
    else:
        current_y = y - total_height / 2

    # Pillow bboxes are relative to the line top; centre the glyph box in the line
    line_pad = (font.line_height - font.size) * scale / 2

    quads = []
    for line in lines:
        line_width = font.measure_text(line, scale)[0]
        if align == TextAlign.CENTER:
            current_x = x - line_width / 2
        elif align == TextAlign.RIGHT:
            current_x = x - line_width
        else:
            current_x = x

        for char in line:
            glyph = font.get_glyph(char) or font.get_glyph('?')
            if glyph is None:
                continue

            if char != ' ':
                quads.append(GlyphQuad(
                    x=current_x + (glyph.bearing_x - 2) * scale,
                    y=current_y + line_pad + (glyph.bearing_y - 2) * scale,
                    width=(glyph.width + 4) * scale,  # Include padding
                    height=(glyph.height + 4) * scale,
                    uv_x0=glyph.uv_x0,
                    uv_y0=glyph.uv_y0,
                    uv_x1=glyph.uv_x1,
                    uv_y1=glyph.uv_y1,
                ))

            current_x += glyph.advance * scale

        current_y += line_height

    return quads


# =============================================================================
# Text Shader
# =============================================================================

TEXT_VERTEX_SHADER = """
#version 430

in vec2 in_vert;

uniform vec2 u_resolution;

layout(std430, binding = 0) buffer Instances {
    vec4 data[];  // 3 vec4 per glyph: rect, uv, color
};

out vec2 v_uv;
flat out int v_instance;

void main() {
    v_instance = gl_InstanceID;

    vec4 rect = data[v_instance * 3 + 0];
    vec4 uv_rect = data[v_instance * 3 + 1];

    v_uv = mix(uv_rect.xy, uv_rect.zw, in_vert);

    vec2 px = rect.xy + in_vert * rect.zw;
    vec2 ndc = (px / u_resolution) * 2.0 - 1.0;
    ndc.y *= -1.0;

    gl_Position = vec4(ndc, 0.0, 1.0);
}
"""

TEXT_FRAGMENT_SHADER = """
#version 430

uniform sampler2D u_atlas;

layout(std430, binding = 0) buffer Instances {
    vec4 data[];
};

in vec2 v_uv;
flat in int v_instance;

out vec4 fragColor;

void main() {
    vec4 color = data[v_instance * 3 + 2];
    float alpha = texture(u_atlas, v_uv).r;
    fragColor = vec4(color.rgb, alpha * color.a);
}
"""


# =============================================================================
# Text Renderer
# =============================================================================

class TextRenderer:
    """
    GPU text renderer using one font atlas.

    Renders text as instanced quads, one quad per glyph.
    """

    STRIDE_FLOATS = 12  # 3 vec4 per glyph

    def __init__(self, ctx: moderngl.Context, font: FontAtlas = None):
        self.ctx = ctx
        self.font = font or FontAtlas()

        quad_data = np.array([
            0.0, 0.0,
            1.0, 0.0,
            1.0, 1.0,
            0.0, 0.0,
            1.0, 1.0,
            0.0, 1.0,
        ], dtype='f4')
        self._quad_vbo = ctx.buffer(quad_data.tobytes())

        self._instance_capacity = 1024
        self._instance_buffer = ctx.buffer(reserve=self.STRIDE_FLOATS * 4 * self._instance_capacity)

        self._program = ctx.program(
            vertex_shader=TEXT_VERTEX_SHADER,
            fragment_shader=TEXT_FRAGMENT_SHADER
        )
        self._vao = ctx.vertex_array(
            self._program,
            [(self._quad_vbo, '2f', 'in_vert')]
        )

        self._rows: List[Tuple[float, ...]] = []

    def begin_frame(self):
        self._rows.clear()

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        size: float = None,
        color: Tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0),
        align: str = TextAlign.CENTER,
        baseline: str = TextBaseline.MIDDLE,
    ):
        """Queue ``text`` anchored at (x, y)."""
        if not text:
            return

        for quad in layout_text(text, x, y, self.font, size=size, align=align, baseline=baseline):
            self._rows.append((
                quad.x, quad.y, quad.width, quad.height,
                quad.uv_x0, quad.uv_y0, quad.uv_x1, quad.uv_y1,
                *color,
            ))

    def render(self, width: int, height: int):
        """Render all queued glyphs and empty the queue."""
        if not self._rows:
            return

        count = len(self._rows)
        if count > self._instance_capacity:
            self._instance_capacity = max(count, self._instance_capacity * 2)
            self._instance_buffer = self.ctx.buffer(reserve=self._instance_capacity * self.STRIDE_FLOATS * 4)

        packed = np.array(self._rows, dtype=np.float32)
        self._instance_buffer.write(packed.tobytes())

        self._instance_buffer.bind_to_storage_buffer(binding=0)
        self.font.texture(self.ctx).use(location=0)

        self._program['u_resolution'].value = (width, height)
        if 'u_atlas' in self._program:
            self._program['u_atlas'].value = 0

        self._vao.render(instances=count)
        self._rows.clear()

    def end_frame(self):
        pass
