# bubblegraph/graph/style.py
"""
Style Tokens - Visual vocabulary for bubbles and links.

Tokens are semantic (label colour, glow size, link alpha) rather than
per-node; per-node colour lives on the node itself. Sizes are in world
units and scale with the camera.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple, Dict, Any

# Type alias for RGBA color (0-1 range)
RGBA = Tuple[float, float, float, float]


# =============================================================================
# Color
# =============================================================================

@dataclass(frozen=True)
class Color:
    """RGB color with 0-1 range components."""
    r: float = 1.0
    g: float = 1.0
    b: float = 1.0

    def with_alpha(self, alpha: float) -> RGBA:
        return (self.r, self.g, self.b, alpha)

    @staticmethod
    def from_hex(hex_str: str) -> Color:
        """Parse hex color like '#00AAEF' or '00aaef'."""
        digits = hex_str.lstrip('#')
        if len(digits) != 6:
            raise ValueError(f"Invalid hex color: {hex_str}")
        try:
            r = int(digits[0:2], 16) / 255.0
            g = int(digits[2:4], 16) / 255.0
            b = int(digits[4:6], 16) / 255.0
        except ValueError:
            raise ValueError(f"Invalid hex color: {hex_str}") from None
        return Color(r, g, b)


# =============================================================================
# Style Tokens
# =============================================================================

@dataclass(frozen=True)
class StyleTokens:
    """
    Immutable style token set.

    Colors are RGBA tuples in 0-1 range; lengths are world units.
    """
    # Background
    bg_app: RGBA = (0.04, 0.04, 0.06, 1.0)

    # Labels
    label_color: RGBA = (1.0, 1.0, 1.0, 1.0)
    label_size: float = 14.0
    label_bold: bool = True

    # Bubbles
    node_radius: float = 60.0
    glow_blur: float = 30.0         # Halo width beyond the rim
    glow_alpha: float = 1.0         # Opaque core under the glow
    overlay_alpha: float = 0.5      # Translucent second pass

    # Links
    edge_alpha: float = 0.6
    edge_width: float = 3.0

    # Inline editor
    editor_caret: str = '|'
    editor_color: RGBA = (1.0, 0.85, 0.24, 1.0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {k: getattr(self, k) for k in self.__dataclass_fields__}

    def with_overrides(self, **kwargs) -> StyleTokens:
        """Create new tokens with overridden values."""
        data = self.to_dict()
        data.update(kwargs)
        return StyleTokens(**data)


# =============================================================================
# Themes
# =============================================================================

DARK_THEME = StyleTokens()

LIGHT_THEME = StyleTokens(
    bg_app=(0.94, 0.94, 0.92, 1.0),
    label_color=(0.08, 0.08, 0.10, 1.0),
    overlay_alpha=0.35,
    editor_color=(0.75, 0.20, 0.20, 1.0),
)

THEMES = {
    'dark': DARK_THEME,
    'light': LIGHT_THEME,
}
