"""Tests for the threaded renderer and its shared accumulation buffer."""

import random
import threading

import numpy as np
import pytest

from pathtracer.camera.camera import Camera
from pathtracer.core.vector import Color, Point3, Vector3
from pathtracer.geometry.hittable import Hittable
from pathtracer.geometry.rect import Rect, RectAxes
from pathtracer.geometry.world import HittableList
from pathtracer.materials.diffuse_light import DiffuseLight
from pathtracer.renderer.raytracer import (
    Renderer,
    RenderResult,
    RenderWorkerError,
    SceneData,
    SharedPixelBuffer,
    split_samples,
)
from pathtracer.scenes import light_test


def front_camera(aspect_ratio=1.0):
    return Camera(Point3(0.0, 0.0, 0.0), Point3(0.0, 0.0, -1.0), Vector3(0.0, 1.0, 0.0), 90.0, aspect_ratio)


def empty_scene(background):
    return SceneData(HittableList(), background, front_camera())


class Exploding(Hittable):
    def hit(self, ray, t_min, t_max):
        raise RuntimeError("boom")

    def bounding_box(self):
        return None


class TestSplitSamples:
    """Static division of the sample budget."""

    def test_remainder_goes_to_first_workers(self):
        assert split_samples(10, 3) == [4, 3, 3]
        assert split_samples(2, 4) == [1, 1, 0, 0]
        assert split_samples(8, 4) == [2, 2, 2, 2]

    def test_total_preserved(self):
        for total in range(0, 30):
            for workers in range(1, 9):
                assert sum(split_samples(total, workers)) == total

    def test_needs_a_worker(self):
        with pytest.raises(ValueError):
            split_samples(10, 0)


class TestSharedPixelBuffer:
    """Merging and progress reporting."""

    def test_merge_is_order_independent(self):
        gen = np.random.default_rng(4)
        a = gen.random((3, 4, 3))
        b = gen.random((3, 4, 3))

        first = SharedPixelBuffer(4, 3, 2)
        first.merge(a, 1)
        first.merge(b, 1)
        second = SharedPixelBuffer(4, 3, 2)
        second.merge(b, 1)
        second.merge(a, 1)

        assert np.array_equal(first.pixels, second.pixels)
        assert first.samples_done == second.samples_done == 2

    def test_progress_reported_on_percentage_crossings(self):
        seen = []
        buf = SharedPixelBuffer(1, 1, 300, on_progress=seen.append)
        local = np.zeros((1, 1, 3))
        assert buf.merge(local, 1) is None
        assert buf.merge(local, 2) == 1
        assert buf.merge(local, 297) == 100
        assert seen == [1, 100]

    def test_concurrent_merges_sum_every_sample(self):
        seen = []
        buf = SharedPixelBuffer(2, 2, 400, on_progress=seen.append)
        ones = np.ones((2, 2, 3))

        def worker():
            for _ in range(100):
                buf.merge(ones, 1)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert buf.samples_done == 400
        assert np.all(buf.pixels == 400.0)
        assert seen == sorted(seen)
        assert seen[-1] == 100
        assert len(set(seen)) == len(seen)

    def test_snapshot_is_a_copy(self):
        buf = SharedPixelBuffer(1, 1, 2)
        buf.merge(np.ones((1, 1, 3)), 1)
        pixels, samples = buf.snapshot()
        pixels += 5
        assert samples == 1
        assert np.all(buf.pixels == 1.0)


class TestRenderer:
    """End-to-end renders of tiny images."""

    def test_background_only(self):
        renderer = Renderer(empty_scene(Color(0.25, 0.25, 0.25)), 4, 3, 2, max_depth=5, workers=2)
        result = renderer.render()
        assert isinstance(result, RenderResult)
        assert (result.height, result.width) == (3, 4)
        assert result.samples == 2
        assert np.allclose(result.pixels, 0.5)
        assert np.all(result.to_rgb8() == 128)

    def test_rows_run_top_to_bottom(self):
        # Light panel covering the upper half of the view
        panel = Rect(RectAxes.XY, -10.0, 10.0, 0.001, 10.0, -1.0, DiffuseLight(Color(1.0, 1.0, 1.0)))
        scene = SceneData(HittableList([panel]), Color(0.0, 0.0, 0.0), front_camera())
        rgb = Renderer(scene, 4, 4, 3, max_depth=3, workers=1, seed=5).render().to_rgb8()
        assert np.all(rgb[0] == 255)
        assert np.all(rgb[1] == 255)
        assert np.all(rgb[3] == 0)

    def test_progress_is_monotonic_and_complete(self):
        seen = []
        renderer = Renderer(empty_scene(Color(1.0, 1.0, 1.0)), 2, 2, 10, workers=3, progress=seen.append)
        renderer.render()
        assert seen == sorted(seen)
        assert len(set(seen)) == len(seen)
        assert seen[-1] == 100

    def test_more_workers_than_samples(self):
        renderer = Renderer(empty_scene(Color(1.0, 0.0, 0.0)), 2, 2, 2, workers=8)
        result = renderer.render()
        assert result.samples == 2
        assert np.allclose(result.pixels[..., 0], 2.0)

    def test_samples_per_pass(self):
        seen = []
        renderer = Renderer(empty_scene(Color(1.0, 1.0, 1.0)), 2, 2, 6, workers=1,
                            samples_per_pass=4, progress=seen.append)
        result = renderer.render()
        assert seen == [66, 100]
        assert np.allclose(result.pixels, 6.0)

    def test_seeded_single_worker_is_reproducible(self):
        scene = light_test(1.0, random.Random(0))
        first = Renderer(scene, 6, 6, 2, max_depth=4, workers=1, seed=42).render()
        second = Renderer(scene, 6, 6, 2, max_depth=4, workers=1, seed=42).render()
        assert np.array_equal(first.pixels, second.pixels)

    def test_worker_failure_surfaces_after_join(self):
        scene = SceneData(Exploding(), Color(0.0, 0.0, 0.0), front_camera())
        with pytest.raises(RenderWorkerError) as excinfo:
            Renderer(scene, 2, 2, 4, workers=2).render()
        failures = excinfo.value.failures
        assert [index for index, _ in failures] == [0, 1]
        assert all(isinstance(e, RuntimeError) for _, e in failures)

    @pytest.mark.parametrize("kwargs", [
        {"width": 0},
        {"height": -1},
        {"samples_per_pixel": 0},
        {"workers": 0},
        {"samples_per_pass": 0},
        {"max_depth": -1},
    ])
    def test_invalid_settings(self, kwargs):
        params = {"width": 2, "height": 2, "samples_per_pixel": 1}
        params.update(kwargs)
        with pytest.raises(ValueError):
            Renderer(empty_scene(Color(0.0, 0.0, 0.0)), **params)
