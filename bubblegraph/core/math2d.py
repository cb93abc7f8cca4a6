# bubblegraph/core/math2d.py
"""
Core math types for the 2D diagram surface.

Two coordinate spaces share the same vector shape:

- Screen space: pixels on the viewport, top-left origin, after the camera
  transform has been applied.
- World space: the fixed space node positions are authored in, independent
  of pan and zoom.

``ScreenPoint`` and ``WorldPoint`` are distinct ``Vec2`` subclasses so that
a missing transform shows up as a type mismatch instead of a drifting node.
Adding, subtracting or averaging points from different spaces raises
``TypeError``; scaling keeps the point's space.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Tuple, TypeVar

V = TypeVar('V', bound='Vec2')


# =============================================================================
# Vector Types
# =============================================================================

@dataclass
class Vec2:
    """2D vector with no coordinate space attached."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self: V, other: V) -> V:
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(self.x + other.x, self.y + other.y)

    def __sub__(self: V, other: V) -> V:
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(self.x - other.x, self.y - other.y)

    def __mul__(self: V, scalar: float) -> V:
        return type(self)(self.x * scalar, self.y * scalar)

    def __rmul__(self: V, scalar: float) -> V:
        return self.__mul__(scalar)

    def __truediv__(self: V, scalar: float) -> V:
        return type(self)(self.x / scalar, self.y / scalar)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def distance_to(self, other: Vec2) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)

    def midpoint(self: V, other: V) -> V:
        if type(other) is not type(self):
            raise TypeError(f"Cannot average {type(self).__name__} with {type(other).__name__}")
        return type(self)((self.x + other.x) / 2, (self.y + other.y) / 2)

    def is_close(self, other: Vec2, tol: float = 1e-9) -> bool:
        return abs(self.x - other.x) <= tol and abs(self.y - other.y) <= tol


class ScreenPoint(Vec2):
    """A point (or displacement) in viewport pixels."""


class WorldPoint(Vec2):
    """A point (or displacement) in diagram world units."""


# =============================================================================
# Matrix Types
# =============================================================================

class Mat3:
    """3x3 row-major matrix for 2D affine transforms."""

    __slots__ = ('m',)

    def __init__(self, values: Tuple[float, ...] = None):
        """Initialize with row-major values or identity."""
        if values is None:
            self.m = (
                1.0, 0.0, 0.0,
                0.0, 1.0, 0.0,
                0.0, 0.0, 1.0
            )
        else:
            if len(values) != 9:
                raise ValueError(f"Mat3 needs 9 values, got {len(values)}")
            self.m = tuple(values)

    def __getitem__(self, idx: Tuple[int, int]) -> float:
        row, col = idx
        return self.m[row * 3 + col]

    def __matmul__(self, other: Mat3) -> Mat3:
        if not isinstance(other, Mat3):
            raise TypeError(f"Cannot multiply Mat3 by {type(other)}")
        result = []
        for row in range(3):
            for col in range(3):
                result.append(sum(self[row, k] * other[k, col] for k in range(3)))
        return Mat3(tuple(result))

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        """Transform a point (implicit w=1)."""
        return (
            self[0, 0] * x + self[0, 1] * y + self[0, 2],
            self[1, 0] * x + self[1, 1] * y + self[1, 2],
        )

    @staticmethod
    def scale(sx: float, sy: float) -> Mat3:
        return Mat3((
            sx,  0.0, 0.0,
            0.0, sy,  0.0,
            0.0, 0.0, 1.0
        ))

    @staticmethod
    def translate(tx: float, ty: float) -> Mat3:
        return Mat3((
            1.0, 0.0, tx,
            0.0, 1.0, ty,
            0.0, 0.0, 1.0
        ))


# =============================================================================
# Utility Functions
# =============================================================================

def clamp(value: float, min_val: float, max_val: float) -> float:
    return max(min_val, min(value, max_val))

