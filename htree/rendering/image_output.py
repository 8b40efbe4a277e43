"""
Image export for rendered H-tree canvases.

This module turns flat 0/1 canvases into two-colour indexed images and
writes them as looping animated GIFs or single PNG stills using Pillow.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Union

import numpy as np

try:
    from PIL import Image
    PIL_AVAILABLE = True
except ImportError:
    PIL_AVAILABLE = False
    logging.warning("Pillow not available - image export disabled")

logger = logging.getLogger(__name__)


@dataclass
class ColorRGB:
    """8-bit RGB color."""
    r: int
    g: int
    b: int

    def __post_init__(self):
        """Validate RGB values."""
        for component in [self.r, self.g, self.b]:
            if not 0 <= component <= 255:
                raise ValueError("RGB components must be between 0 and 255")

    def to_tuple(self) -> Tuple[int, int, int]:
        """Convert to RGB tuple."""
        return (self.r, self.g, self.b)

    @classmethod
    def from_hex(cls, value: str) -> 'ColorRGB':
        """Parse ``#RRGGBB`` or ``RRGGBB``."""
        value = value.lstrip('#')
        if len(value) != 6:
            raise ValueError(f"Invalid hex color '{value}'")
        return cls(int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))


@dataclass
class FramePalette:
    """Background and foreground colours for canvas index 0 and 1."""
    background: ColorRGB = field(default_factory=lambda: ColorRGB(0xFF, 0xFF, 0xFF))
    foreground: ColorRGB = field(default_factory=lambda: ColorRGB(0xFF, 0xAA, 0x00))

    def to_pillow(self) -> List[int]:
        """Flat palette list as expected by ``Image.putpalette``."""
        return [*self.background.to_tuple(), *self.foreground.to_tuple()]


def canvas_to_image(canvas: np.ndarray, width: int,
                    palette: FramePalette = None) -> 'Image.Image':
    """
    Convert a flat canvas into a palette-mode image.

    Args:
        canvas: Flat array of 0/1 values, length ``width ** 2``
        width: Image width and height
        palette: Colours for 0 and 1 (defaults to white and orange)

    Returns:
        PIL image in mode ``P``
    """
    if not PIL_AVAILABLE:
        raise RuntimeError("Pillow required for image export")

    canvas = np.asarray(canvas)
    if canvas.size != width * width:
        raise ValueError(f"Expected canvas of {width * width} pixels, got {canvas.size}")

    palette = palette or FramePalette()
    image = Image.frombytes('P', (width, width), canvas.astype(np.uint8).tobytes())
    image.putpalette(palette.to_pillow())
    return image


class GifExporter:
    """Accumulates frames and writes a looping animated GIF."""

    def __init__(self, size: int, delay_ms: int = 100, palette: FramePalette = None):
        """
        Initialize GIF exporter.

        Args:
            size: Width and height of every frame
            delay_ms: Display time per frame in milliseconds
            palette: Frame colours
        """
        if not PIL_AVAILABLE:
            raise RuntimeError("Pillow required for image export")
        if size <= 0:
            raise ValueError("size must be positive")
        if delay_ms < 0:
            raise ValueError("delay_ms must be non-negative")

        self.size = size
        self.delay_ms = delay_ms
        self.palette = palette or FramePalette()
        self.frames: List[Image.Image] = []

    def add_frame(self, canvas: np.ndarray) -> None:
        """Append one rendered canvas."""
        self.frames.append(canvas_to_image(canvas, self.size, self.palette))

    def save(self, filepath: Union[str, Path]) -> Path:
        """
        Write all frames to ``filepath``.

        Returns:
            Path of the written file
        """
        if not self.frames:
            raise ValueError("No frames to save")

        filepath = Path(filepath)
        first, rest = self.frames[0], self.frames[1:]

        try:
            first.save(filepath, format='GIF', save_all=True, append_images=rest,
                       duration=self.delay_ms, loop=0, optimize=False)
        except OSError as e:
            logger.error(f"Could not write {filepath}: {e}")
            raise

        logger.info(f"Saved animation: {filepath} ({len(self.frames)} frames, "
                    f"{self.size}x{self.size})")
        return filepath


def save_png(canvas: np.ndarray, width: int, filepath: Union[str, Path],
             palette: FramePalette = None) -> Path:
    """Save a single canvas as PNG."""
    filepath = Path(filepath)
    image = canvas_to_image(canvas, width, palette)

    try:
        image.save(filepath, format='PNG')
    except OSError as e:
        logger.error(f"Could not write {filepath}: {e}")
        raise

    logger.info(f"Saved image: {filepath} ({width}x{width})")
    return filepath
