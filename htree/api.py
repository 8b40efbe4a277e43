"""
Main API classes for H-tree animation.

This module provides the high-level interface that ties the growth engine,
the rasterizer and the GIF exporter together into frame sequences.
"""

import json
import logging
import time
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, Union

import numpy as np

from .core.geometry import Point
from .core.htree import HTree
from .rendering.rasterizer import render
from .rendering.image_output import ColorRGB, FramePalette, GifExporter, save_png

logger = logging.getLogger(__name__)

MODES = ('rotate', 'grow')


def _require_int(name: str, value: Any):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")


@dataclass
class AnimationConfig:
    """Configuration for H-tree animation."""

    # Canvas
    size: int = 256

    # Growth
    frames: int = 60
    levels: int = 10
    turn_speed: float = 0.05
    initial_gradient: float = 0.0
    seed_length: Optional[int] = None
    seed_center: Optional[Tuple[int, int]] = None
    mode: str = 'rotate'  # 'rotate' or 'grow'

    # Output
    delay_ms: int = 100
    background: Tuple[int, int, int] = (0xFF, 0xFF, 0xFF)
    foreground: Tuple[int, int, int] = (0xFF, 0xAA, 0x00)

    # Performance
    num_workers: Optional[int] = 1
    use_threads: bool = True

    def validate(self):
        """Validate configuration parameters."""
        self._validate_types()

        if self.size <= 0:
            raise ValueError("size must be positive")

        if self.frames <= 0:
            raise ValueError("frames must be positive")

        if self.levels < 0:
            raise ValueError("levels must be non-negative")

        if self.seed_length is not None and self.seed_length < 0:
            raise ValueError("seed_length must be non-negative")

        if self.seed_center is not None and len(self.seed_center) != 2:
            raise ValueError("seed_center must be (x, y)")

        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {', '.join(MODES)}")

        if self.delay_ms < 0:
            raise ValueError("delay_ms must be non-negative")

        if self.num_workers is not None and self.num_workers < 1:
            raise ValueError("num_workers must be >= 1")

        # Raises on out-of-range components
        self.palette()

    def _validate_types(self):
        """Reject values of the wrong type, e.g. strings read from a config file."""
        for name in ('size', 'frames', 'levels', 'delay_ms'):
            _require_int(name, getattr(self, name))

        for name in ('seed_length', 'num_workers'):
            if getattr(self, name) is not None:
                _require_int(name, getattr(self, name))

        for name in ('turn_speed', 'initial_gradient'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")

        if not isinstance(self.mode, str):
            raise ValueError(f"mode must be a string, got {self.mode!r}")

        if not isinstance(self.use_threads, bool):
            raise ValueError(f"use_threads must be true or false, got {self.use_threads!r}")

        if self.seed_center is not None:
            if not isinstance(self.seed_center, (tuple, list)):
                raise ValueError(f"seed_center must be (x, y), got {self.seed_center!r}")
            for value in self.seed_center:
                _require_int('seed_center', value)

        for name in ('background', 'foreground'):
            color = getattr(self, name)
            if not isinstance(color, (tuple, list)) or len(color) != 3:
                raise ValueError(f"{name} must be (r, g, b), got {color!r}")
            for value in color:
                _require_int(name, value)

    @property
    def center(self) -> Point:
        """Seed center, defaulting to the middle of the canvas."""
        if self.seed_center is None:
            return Point(self.size // 2, self.size // 2)
        return Point(int(self.seed_center[0]), int(self.seed_center[1]))

    @property
    def length(self) -> int:
        """Seed length, defaulting to half the canvas."""
        if self.seed_length is None:
            return self.size // 2
        return self.seed_length

    def palette(self) -> FramePalette:
        """Frame palette built from the configured colours."""
        return FramePalette(ColorRGB(*self.background), ColorRGB(*self.foreground))

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnimationConfig':
        """Create configuration from dictionary."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        values = dict(data)
        for key in ('seed_center', 'background', 'foreground'):
            if isinstance(values.get(key), list):
                values[key] = tuple(values[key])

        config = cls(**values)
        config.validate()
        return config

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> 'AnimationConfig':
        """Load configuration from a JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)


class HTreeAnimator:
    """Drives the growth engine and rasterizer to produce animation frames."""

    def __init__(self, config: Optional[AnimationConfig] = None):
        """
        Initialize animator.

        Args:
            config: Animation configuration (uses defaults if None)
        """
        self.config = config or AnimationConfig()
        self.config.validate()

        logger.info(f"HTreeAnimator initialized: {self.config.size}x{self.config.size}, "
                    f"{self.config.frames} frames, mode={self.config.mode}")

    def seed_state(self, gradient_change: float) -> HTree:
        """Level-zero tree for the configured seed."""
        return HTree.new(self.config.center, self.config.length, gradient_change)

    def render_frame(self, state: HTree) -> np.ndarray:
        """Rasterize one tree state at the configured size."""
        return render(state, self.config.size,
                      num_workers=self.config.num_workers,
                      use_threads=self.config.use_threads)

    def iter_frames(self) -> Iterator[np.ndarray]:
        """
        Yield one canvas per frame.

        In ``rotate`` mode frame ``i`` is a fresh tree with gradient change
        ``initial_gradient + i * turn_speed`` grown ``levels`` levels. In
        ``grow`` mode frame ``i`` is the initial tree grown ``i`` levels.
        """
        cfg = self.config

        if cfg.mode == 'grow':
            state = self.seed_state(cfg.initial_gradient)
            for frame in range(cfg.frames):
                if frame > 0:
                    state = state.advance(1)
                yield self.render_frame(state)
        else:
            for frame in range(cfg.frames):
                gradient_change = cfg.initial_gradient + frame * cfg.turn_speed
                state = self.seed_state(gradient_change).advance(cfg.levels)
                yield self.render_frame(state)

    def create_animation(self, output_path: Union[str, Path],
                         progress_callback: Optional[Callable[[int, int], None]] = None) -> Path:
        """
        Render every frame and write an animated GIF.

        Args:
            output_path: Destination GIF path
            progress_callback: Called with (completed_frames, total_frames)

        Returns:
            Path of the written file
        """
        start_time = time.time()
        exporter = GifExporter(self.config.size, self.config.delay_ms, self.config.palette())

        for i, canvas in enumerate(self.iter_frames(), start=1):
            exporter.add_frame(canvas)
            if progress_callback:
                progress_callback(i, self.config.frames)

        path = exporter.save(output_path)
        logger.info(f"Animation complete: {time.time() - start_time:.2f}s")
        return path

    def render_still(self, output_path: Union[str, Path], levels: Optional[int] = None,
                     gradient_change: Optional[float] = None) -> Path:
        """
        Write a PNG of the seed tree grown ``levels`` levels.

        Args:
            output_path: Destination PNG path
            levels: Growth levels (config value if None)
            gradient_change: Rotation term (config ``initial_gradient`` if None)

        Returns:
            Path of the written file
        """
        levels = self.config.levels if levels is None else levels
        if gradient_change is None:
            gradient_change = self.config.initial_gradient

        state = self.seed_state(gradient_change).advance(levels)
        canvas = self.render_frame(state)
        return save_png(canvas, self.config.size, output_path, self.config.palette())
