import json

import numpy as np
import pytest
from PIL import Image

from htree.api import AnimationConfig, HTreeAnimator
from htree.core.geometry import Point
from htree.core.htree import HTree
from htree.rendering.rasterizer import render


class TestAnimationConfig:
    def test_defaults(self) -> None:
        config = AnimationConfig()
        config.validate()
        assert config.center == Point(128, 128)
        assert config.length == 128

    def test_explicit_seed(self) -> None:
        config = AnimationConfig(size=100, seed_center=(10, 20), seed_length=30)
        assert config.center == Point(10, 20)
        assert config.length == 30

    @pytest.mark.parametrize("overrides", [
        {"size": 0},
        {"frames": 0},
        {"levels": -1},
        {"seed_length": -5},
        {"mode": "zoom"},
        {"delay_ms": -10},
        {"num_workers": 0},
        {"foreground": (300, 0, 0)},
    ])
    def test_invalid_values(self, overrides: dict) -> None:
        with pytest.raises(ValueError):
            AnimationConfig(**overrides).validate()

    def test_from_dict(self) -> None:
        config = AnimationConfig.from_dict({"size": 64, "seed_center": [5, 6], "mode": "grow"})
        assert config.size == 64
        assert config.seed_center == (5, 6)
        assert config.mode == "grow"

    @pytest.mark.parametrize("data", [
        {"size": "64"},
        {"frames": 2.5},
        {"levels": None},
        {"turn_speed": "fast"},
        {"seed_center": 5},
        {"seed_center": ["a", "b"]},
        {"foreground": "orange"},
        {"use_threads": "yes"},
        {"num_workers": True},
        {"mode": 3},
    ])
    def test_wrong_types_rejected(self, data: dict) -> None:
        with pytest.raises(ValueError):
            AnimationConfig.from_dict(data)

    def test_unknown_keys_rejected(self) -> None:
        with pytest.raises(ValueError):
            AnimationConfig.from_dict({"colour": "red"})

    def test_from_file(self, tmp_path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"size": 32, "frames": 4, "turn_speed": 0.2}))
        config = AnimationConfig.from_file(path)
        assert (config.size, config.frames, config.turn_speed) == (32, 4, 0.2)

    def test_dict_round_trip(self) -> None:
        config = AnimationConfig(size=48, seed_center=(1, 2))
        assert AnimationConfig.from_dict(config.to_dict()) == config


class TestHTreeAnimator:
    def test_rotate_frames(self) -> None:
        config = AnimationConfig(size=64, frames=3, levels=4, turn_speed=0.3)
        frames = list(HTreeAnimator(config).iter_frames())

        assert len(frames) == 3
        for i, frame in enumerate(frames):
            expected = render(HTree.new(Point(32, 32), 32, i * 0.3).advance(4), 64)
            np.testing.assert_array_equal(frame, expected)

    def test_grow_frames_accumulate(self) -> None:
        config = AnimationConfig(size=64, frames=5, mode="grow", initial_gradient=0.1)
        frames = list(HTreeAnimator(config).iter_frames())

        assert len(frames) == 5
        np.testing.assert_array_equal(frames[0], render(HTree.new(Point(32, 32), 32, 0.1), 64))
        for before, after in zip(frames, frames[1:]):
            assert np.all(before <= after)

    def test_parallel_config_matches_serial(self) -> None:
        serial = AnimationConfig(size=64, frames=2, levels=5)
        parallel = AnimationConfig(size=64, frames=2, levels=5, num_workers=3)
        for a, b in zip(HTreeAnimator(serial).iter_frames(), HTreeAnimator(parallel).iter_frames()):
            np.testing.assert_array_equal(a, b)

    def test_create_animation(self, tmp_path) -> None:
        progress = []
        config = AnimationConfig(size=32, frames=3, levels=3, turn_speed=0.5)
        path = HTreeAnimator(config).create_animation(
            tmp_path / "htree.gif", lambda done, total: progress.append((done, total)))

        assert progress == [(1, 3), (2, 3), (3, 3)]
        with Image.open(path) as image:
            assert image.size == (32, 32)
            assert image.n_frames == 3

    def test_render_still(self, tmp_path) -> None:
        path = HTreeAnimator(AnimationConfig(size=32)).render_still(tmp_path / "still.png", levels=2)
        with Image.open(path) as image:
            assert image.size == (32, 32)

    def test_invalid_config_rejected(self) -> None:
        with pytest.raises(ValueError):
            HTreeAnimator(AnimationConfig(frames=-1))
