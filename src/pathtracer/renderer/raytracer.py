# renderer/raytracer.py
import logging
import math
import os
import random
import threading
import time
from typing import Callable, List, Optional, Tuple

import numpy as np

from pathtracer.camera.camera import Camera
from pathtracer.config import DEFAULT_MAX_DEPTH, T_MIN
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Color
from pathtracer.geometry.hittable import Absorbed, Hittable, Scattered
from pathtracer.renderer.tone_mapping import to_rgb8

logger = logging.getLogger(__name__)

BLACK = Color(0.0, 0.0, 0.0)

ProgressCallback = Callable[[int], None]


class SceneData:
    """What the renderer needs: the (usually BVH-backed) world, the colour
    returned by rays that escape it, and the camera."""
    def __init__(self, world: Hittable, background: Color, camera: Camera):
        self.world = world
        self.background = background
        self.camera = camera


def ray_color(ray: Ray, background: Color, world: Hittable, depth: int,
              rng: random.Random) -> Color:
    """
    Radiance carried back along `ray`, following at most `depth` bounces.

    Emission and attenuation of every surface on the path are folded into the
    trace result, so the recursion ends either when a surface absorbs the ray,
    when the ray escapes to the background, or when the bounce budget is spent.
    """
    if depth <= 0:
        return BLACK

    result = world.trace(ray, T_MIN, math.inf, rng)
    if isinstance(result, Scattered):
        return result.attenuation * ray_color(result.scattered, background, world, depth - 1, rng)
    if isinstance(result, Absorbed):
        return result.emitted
    return background


def split_samples(total: int, workers: int) -> List[int]:
    """
    Divide `total` samples between `workers` as evenly as possible. The first
    `total % workers` workers take one extra sample.
    """
    if workers <= 0:
        raise ValueError(f"worker count must be positive, got {workers}")
    base, remainder = divmod(total, workers)
    return [base + 1 if i < remainder else base for i in range(workers)]


class RenderWorkerError(RuntimeError):
    """One or more render workers raised. `failures` holds (worker index, exception) pairs."""
    def __init__(self, failures: List[Tuple[int, BaseException]]):
        self.failures = failures
        index, first = failures[0]
        super().__init__(f"{len(failures)} render worker(s) failed; worker {index}: {first!r}")


class SharedPixelBuffer:
    """
    Sum of every finished sample for every pixel, shared between workers.

    Workers fill private buffers and fold them in with merge(), which is the
    only place the lock is taken. Progress is reported from inside the lock,
    so listeners see strictly increasing percentages.
    """
    def __init__(self, width: int, height: int, total_samples: int,
                 on_progress: Optional[ProgressCallback] = None):
        self.width = width
        self.height = height
        self.total_samples = total_samples
        self.on_progress = on_progress
        self.pixels = np.zeros((height, width, 3), dtype=np.float64)
        self.samples_done = 0
        self.percent = 0
        self._lock = threading.Lock()

    def merge(self, local: np.ndarray, samples: int) -> Optional[int]:
        """
        Add a worker's partial sums covering `samples` samples per pixel.
        Returns the new completion percentage if a percentage point was crossed.
        """
        with self._lock:
            self.pixels += local
            self.samples_done += samples
            percent = self.samples_done * 100 // self.total_samples
            if percent <= self.percent:
                return None
            self.percent = percent
            logger.debug("Render progress: %d%%", percent)
            if self.on_progress is not None:
                self.on_progress(percent)
            return percent

    def snapshot(self) -> Tuple[np.ndarray, int]:
        """Copy of the sums so far, with the number of samples they cover."""
        with self._lock:
            return self.pixels.copy(), self.samples_done


class RenderResult:
    def __init__(self, pixels: np.ndarray, samples: int, elapsed: float):
        self.pixels = pixels      # Summed radiance, (height, width, 3)
        self.samples = samples    # Samples per pixel in the sums
        self.elapsed = elapsed    # Wall-clock seconds

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def to_rgb8(self) -> np.ndarray:
        return to_rgb8(self.pixels, self.samples)


class Renderer:
    """
    Renders a scene by splitting the per-pixel sample budget across threads.

    Every worker walks the full image for each of its samples, using its own
    random generator and accumulation buffer, and merges into the shared
    buffer after each pass of `samples_per_pass` samples. The calling thread
    renders the first share itself before joining the others.
    """
    def __init__(self, scene: SceneData, width: int, height: int, samples_per_pixel: int,
                 max_depth: int = DEFAULT_MAX_DEPTH, workers: Optional[int] = None,
                 samples_per_pass: int = 1, seed: Optional[int] = None,
                 progress: Optional[ProgressCallback] = None):
        if width <= 0 or height <= 0:
            raise ValueError(f"image size must be positive, got {width}x{height}")
        if samples_per_pixel <= 0:
            raise ValueError(f"samples per pixel must be positive, got {samples_per_pixel}")
        if samples_per_pass <= 0:
            raise ValueError(f"samples per pass must be positive, got {samples_per_pass}")
        if max_depth < 0:
            raise ValueError(f"max depth must not be negative, got {max_depth}")
        if workers is None:
            workers = os.cpu_count() or 1
        if workers <= 0:
            raise ValueError(f"worker count must be positive, got {workers}")

        self.scene = scene
        self.width = width
        self.height = height
        self.samples_per_pixel = samples_per_pixel
        self.max_depth = max_depth
        self.workers = workers
        self.samples_per_pass = samples_per_pass
        self.seed = seed
        self.progress = progress

    def _make_rngs(self, count: int) -> List[random.Random]:
        # Independent child streams; fresh entropy when no seed is given
        children = np.random.SeedSequence(self.seed).spawn(count)
        return [random.Random(int(child.generate_state(1, dtype=np.uint64)[0])) for child in children]

    def render_sample(self, local: np.ndarray, rng: random.Random):
        """Add one jittered sample for every pixel to `local`. Row 0 is the top of the image."""
        width, height = self.width, self.height
        camera = self.scene.camera
        world = self.scene.world
        background = self.scene.background
        u_scale = 1.0 / max(width - 1, 1)
        v_scale = 1.0 / max(height - 1, 1)

        for j in range(height):
            row = []
            image_y = height - 1 - j
            for i in range(width):
                u = (i + rng.random()) * u_scale
                v = (image_y + rng.random()) * v_scale
                color = ray_color(camera.get_ray(u, v, rng), background, world, self.max_depth, rng)
                row.extend((color.x, color.y, color.z))
            local[j] += np.asarray(row, dtype=np.float64).reshape(width, 3)

    def _render_share(self, samples: int, rng: random.Random, buffer: SharedPixelBuffer):
        done = 0
        while done < samples:
            batch = min(self.samples_per_pass, samples - done)
            local = np.zeros((self.height, self.width, 3), dtype=np.float64)
            for _ in range(batch):
                self.render_sample(local, rng)
            buffer.merge(local, batch)
            done += batch

    def _run_worker(self, index: int, samples: int, rng: random.Random,
                    buffer: SharedPixelBuffer, failures: list):
        try:
            self._render_share(samples, rng, buffer)
        except Exception as e:
            logger.exception("Render worker %d failed", index)
            failures.append((index, e))

    def render(self) -> RenderResult:
        shares = [s for s in split_samples(self.samples_per_pixel, self.workers) if s > 0]
        rngs = self._make_rngs(len(shares))
        buffer = SharedPixelBuffer(self.width, self.height, self.samples_per_pixel, self.progress)
        failures: List[Tuple[int, BaseException]] = []

        logger.info("Rendering %dx%d at %d spp on %d worker(s): %s",
                    self.width, self.height, self.samples_per_pixel, len(shares), shares)
        start = time.perf_counter()

        threads = []
        for index in range(1, len(shares)):
            thread = threading.Thread(
                target=self._run_worker,
                args=(index, shares[index], rngs[index], buffer, failures),
                name=f"render-worker-{index}",
            )
            thread.start()
            threads.append(thread)

        self._run_worker(0, shares[0], rngs[0], buffer, failures)
        for thread in threads:
            thread.join()

        elapsed = time.perf_counter() - start
        if failures:
            failures.sort(key=lambda failure: failure[0])
            raise RenderWorkerError(failures) from failures[0][1]

        logger.info("Rendered %d samples per pixel in %.2fs", buffer.samples_done, elapsed)
        return RenderResult(buffer.pixels, buffer.samples_done, elapsed)
