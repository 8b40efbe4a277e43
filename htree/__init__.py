"""
H-tree fractal generation library.

This library grows H-tree fractals level by level and rasterizes each
level into a flat bitmap suitable for frame-by-frame animation.

Key Features:
- Immutable growth states with an incremental frontier
- Rotating (spiralling) trees via a per-level gradient change
- Parallel fork-join rasterization with threads or processes
- Animated GIF and PNG export

Example usage:
    >>> from htree import HTree, Point, render
    >>> tree = HTree.new(Point(128, 128), 128, 0.1).advance(8)
    >>> canvas = render(tree, 256)
"""

__version__ = "1.0.0"
__author__ = "H-Tree Generator Team"

from htree.core.geometry import Point, Line
from htree.core.htree import HTree
from htree.rendering.rasterizer import render
from htree.rendering.image_output import GifExporter, FramePalette, ColorRGB

# Main API classes
from htree.api import HTreeAnimator, AnimationConfig

__all__ = [
    "HTreeAnimator",
    "AnimationConfig",
    "HTree",
    "Point",
    "Line",
    "render",
    "GifExporter",
    "FramePalette",
    "ColorRGB",
]
