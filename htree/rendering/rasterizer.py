"""
Rasterization of H-tree states into flat bitmaps.

A canvas is a one-dimensional ``uint8`` array of ``width * width`` cells in
row-major order, 1 where a line passes and 0 elsewhere.
"""

import logging

import numpy as np

from ..core.htree import HTree
from ..acceleration.multiprocessing import ParallelRasterizer, rasterize_partition

logger = logging.getLogger(__name__)


def blank_canvas(canvas_width: int) -> np.ndarray:
    """Create an all-zero canvas."""
    if canvas_width <= 0:
        raise ValueError("canvas_width must be positive")
    return np.zeros(canvas_width * canvas_width, dtype=np.uint8)


def render(state: HTree, canvas_width: int, num_workers: int = 1,
           use_threads: bool = True) -> np.ndarray:
    """
    Render every line of a tree onto a fresh canvas.

    Points outside the canvas are dropped. Several lines covering the same
    pixel still produce a single 1.

    Args:
        state: Tree to draw
        canvas_width: Width and height of the square canvas
        num_workers: Workers for the index-gathering phase (1 runs inline)
        use_threads: Use threads rather than processes when ``num_workers > 1``

    Returns:
        Flat uint8 array of length ``canvas_width ** 2``
    """
    canvas = blank_canvas(canvas_width)
    lines = state.lines

    if num_workers == 1:
        indices = rasterize_partition((list(lines), canvas_width))
    else:
        indices = ParallelRasterizer(num_workers, use_threads).pixel_indices(lines, canvas_width)

    if indices:
        canvas[np.fromiter(indices, dtype=np.int64, count=len(indices))] = 1

    logger.debug(f"Rendered {len(lines)} lines to {len(indices)} pixels at {canvas_width}x{canvas_width}")
    return canvas
