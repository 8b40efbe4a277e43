"""
Integer plane geometry for H-tree construction.

This module defines the immutable value types used throughout the
generator: integer points and the ordered line segments between them,
along with the slope, length and centered-construction helpers that the
growth rule relies on and a Bresenham walk for rasterization.
"""

import math
from dataclasses import dataclass
from typing import Iterator

import pybresenham as bres


def round_half_away(value: float) -> int:
    """
    Round to the nearest integer, with halves rounded away from zero.

    The built-in ``round`` uses banker's rounding, which would shift some
    endpoints by a pixel compared to the reference frames.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(frozen=True)
class Point:
    """Integer 2D coordinate."""
    x: int
    y: int

    def is_inside(self, minimum: int, maximum: int) -> bool:
        """True if both coordinates lie in ``[minimum, maximum)``."""
        return minimum <= self.x < maximum and minimum <= self.y < maximum

    def __repr__(self) -> str:
        return f"({self.x},{self.y})"


@dataclass(frozen=True)
class Line:
    """
    Segment from ``p`` to ``q``.

    Endpoint order matters: ``Line(a, b)`` and ``Line(b, a)`` are distinct
    values and hash differently.
    """
    p: Point
    q: Point

    @classmethod
    def centered_at(cls, center: Point, gradient: float, length: float) -> 'Line':
        """
        Build a line with the given midpoint, slope and approximate length.

        Args:
            center: Midpoint of the new line
            gradient: Slope of the new line; infinite means vertical
            length: Target length before rounding

        Returns:
            Line whose endpoints are rounded independently per coordinate
        """
        # nan only comes from zero-length parents, whose children have no extent
        if math.isinf(gradient) or math.isnan(gradient):
            half = round_half_away(length) // 2
            return cls(Point(center.x, center.y - half),
                       Point(center.x, center.y + half))

        half_length = length / 2.0
        dx = half_length / math.hypot(1.0, gradient)
        dy = gradient * dx

        return cls(
            Point(round_half_away(center.x + dx), round_half_away(center.y + dy)),
            Point(round_half_away(center.x - dx), round_half_away(center.y - dy)),
        )

    @property
    def gradient(self) -> float:
        """Slope of the line; ``±inf`` when vertical, ``nan`` when degenerate."""
        rise = float(self.q.y - self.p.y)
        run = float(self.q.x - self.p.x)
        if run == 0.0:
            if rise == 0.0:
                return math.nan
            return math.copysign(math.inf, rise)
        return rise / run

    @property
    def length(self) -> int:
        """Euclidean length rounded to the nearest integer."""
        return round_half_away(math.hypot(self.q.x - self.p.x, self.q.y - self.p.y))

    def points_along(self) -> Iterator[Point]:
        """
        Walk the integer pixels from ``p`` to ``q`` with pybresenham.

        Both endpoints are included. Each call returns a fresh generator.
        """
        return (Point(x, y) for x, y in bres.line(self.p.x, self.p.y, self.q.x, self.q.y))

    def __repr__(self) -> str:
        return f"{self.p!r}-{self.q!r}"
