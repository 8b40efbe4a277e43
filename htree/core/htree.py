"""
H-tree growth engine.

The tree is tracked as two disjoint sets of lines: ``older`` lines that were
already part of the structure at the previous level, and ``newer`` lines
forming the frontier grown at the most recent level. Each growth step only
sprouts children from the frontier.
"""

import math
import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Tuple, TYPE_CHECKING

from .geometry import Line, Point

if TYPE_CHECKING:
    import numpy as np

logger = logging.getLogger(__name__)

SQRT_2 = math.sqrt(2.0)


@dataclass(frozen=True)
class HTree:
    """Immutable H-tree state at one growth level."""

    older: FrozenSet[Line] = field(default_factory=frozenset)
    newer: FrozenSet[Line] = field(default_factory=frozenset)
    gradient_change: float = 0.0

    def __post_init__(self):
        """Validate the frontier invariant."""
        if self.older & self.newer:
            raise ValueError("older and newer line sets must be disjoint")

    @classmethod
    def new(cls, seed_center: Point, seed_length: int, gradient_change: float) -> 'HTree':
        """
        Create a tree whose seed line has slope ``gradient_change``.

        Args:
            seed_center: Midpoint of the seed line
            seed_length: Length of the seed line
            gradient_change: Rotation term applied at every level

        Returns:
            Level-zero tree with the seed line as its frontier
        """
        seed = Line.centered_at(seed_center, gradient_change, float(seed_length))
        return cls.from_line(seed, gradient_change)

    @classmethod
    def from_line(cls, seed: Line, gradient_change: float) -> 'HTree':
        """Create a tree from an explicit seed line."""
        return cls(older=frozenset(), newer=frozenset([seed]),
                   gradient_change=float(gradient_change))

    @property
    def lines(self) -> FrozenSet[Line]:
        """Every line in the structure."""
        return self.older | self.newer

    def sprout(self, line: Line) -> Tuple[Line, Line]:
        """
        Derive the two children of ``line``.

        Each child is centered on one endpoint of the parent, is shorter by
        a factor of sqrt(2), and has the parent's perpendicular slope shifted
        by ``gradient_change``.
        """
        gradient = line.gradient
        # A horizontal parent gives vertical children
        inverse = math.inf if gradient == 0.0 else 1.0 / gradient
        new_gradient = self.gradient_change - inverse
        new_length = line.length / SQRT_2

        return (
            Line.centered_at(line.p, new_gradient, new_length),
            Line.centered_at(line.q, new_gradient, new_length),
        )

    def advance(self, levels: int) -> 'HTree':
        """
        Grow the tree by ``levels`` levels.

        Args:
            levels: Number of growth steps (0 returns an equal tree)

        Returns:
            New tree state; this one is left untouched
        """
        if levels < 0:
            raise ValueError("levels must be non-negative")

        older = self.older
        newer = self.newer

        for level in range(levels):
            older = older | newer
            children = set()
            for line in newer:
                children.update(self.sprout(line))
            # Children that coincide with settled lines were already grown
            newer = frozenset(children - older)

            logger.debug(f"Level {level + 1}/{levels}: {len(older)} older, {len(newer)} newer")

        return HTree(older=older, newer=newer, gradient_change=self.gradient_change)

    def render(self, canvas_width: int, num_workers: int = 1,
               use_threads: bool = True) -> 'np.ndarray':
        """Rasterize this tree; see :func:`htree.rendering.rasterizer.render`."""
        from ..rendering.rasterizer import render
        return render(self, canvas_width, num_workers=num_workers, use_threads=use_threads)
