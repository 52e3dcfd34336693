"""Tests for render settings, logging setup and the command line."""

import logging

import pytest

from pathtracer.config import QUALITY_LEVELS, RenderSettings, setup_logging
from pathtracer.main import build_settings, main, parse_args


class TestRenderSettings:
    """Settings and presets."""

    def test_height_from_aspect_ratio(self):
        s = RenderSettings(width=400, aspect_ratio=2.0, workers=1)
        assert s.height == 200

    def test_explicit_height(self):
        assert RenderSettings(width=10, height=7, workers=1).height == 7

    def test_from_quality(self):
        s = RenderSettings.from_quality("preview", width=64, samples_per_pixel=None)
        assert s.width == 64
        assert s.samples_per_pixel == QUALITY_LEVELS["preview"]["samples"]
        assert s.max_depth == QUALITY_LEVELS["preview"]["max_depth"]
        assert s.workers >= 1

    def test_unknown_quality(self):
        with pytest.raises(ValueError):
            RenderSettings.from_quality("ultra")

    @pytest.mark.parametrize("kwargs", [
        {"width": 0},
        {"samples_per_pixel": 0},
        {"max_depth": 0},
        {"workers": -2},
        {"aspect_ratio": 0.0, "height": 10},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            RenderSettings(**kwargs)


class TestLogging:
    """Package logger configuration."""

    def test_single_handler(self):
        setup_logging(logging.DEBUG)
        setup_logging(logging.INFO)
        logger = logging.getLogger("pathtracer")
        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO


class TestCli:
    """Argument parsing and full runs."""

    def test_defaults(self):
        args = parse_args([])
        assert args.scene == "random_spheres"
        assert args.quality == "balanced"
        assert args.width is None
        assert not args.no_progress

    def test_overrides_apply_on_top_of_preset(self):
        args = parse_args(["--quality", "final", "--samples", "3", "--width", "32", "--workers", "2"])
        s = build_settings(args)
        assert s.samples_per_pixel == 3
        assert s.width == 32
        assert s.workers == 2
        assert s.max_depth == QUALITY_LEVELS["final"]["max_depth"]

    def test_unknown_scene_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["--scene", "nope"])

    def test_render_to_ppm(self, tmp_path):
        out = tmp_path / "tri.ppm"
        code = main(["--scene", "triangle_test", "--width", "8", "--samples", "2",
                     "--max-depth", "3", "--workers", "2", "--seed", "1",
                     "--output", str(out), "--no-progress"])
        assert code == 0
        lines = out.read_text().splitlines()
        assert lines[:3] == ["P3", "8 4", "255"]
        assert len(lines) == 3 + 8 * 4

    def test_render_obj(self, tmp_path):
        obj = tmp_path / "tri.obj"
        obj.write_text("v -1 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n")
        out = tmp_path / "obj.png"
        code = main(["--obj", str(obj), "--width", "4", "--samples", "1", "--max-depth", "2",
                     "--workers", "1", "--output", str(out), "--no-progress"])
        assert code == 0
        assert out.exists()

    def test_invalid_settings_exit_nonzero(self, tmp_path):
        code = main(["--samples", "0", "--output", str(tmp_path / "x.ppm"), "--no-progress"])
        assert code == 1

    def test_missing_obj_exit_nonzero(self, tmp_path):
        code = main(["--obj", str(tmp_path / "missing.obj"), "--width", "4", "--samples", "1",
                     "--output", str(tmp_path / "x.ppm"), "--no-progress"])
        assert code == 1
