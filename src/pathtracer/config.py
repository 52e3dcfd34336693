# config.py
import logging
import os
from typing import Optional

# Closest distance along a ray that still counts as a hit. Keeps bounced rays
# from re-hitting the surface they just left.
T_MIN = 0.001
DEFAULT_MAX_DEPTH = 50
DEFAULT_ASPECT_RATIO = 16.0 / 9.0

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Named presets, overridable from the command line
QUALITY_LEVELS = {
    "preview": {"width": 200, "samples": 8, "max_depth": 8},
    "balanced": {"width": 400, "samples": 50, "max_depth": 25},
    "final": {"width": 1200, "samples": 500, "max_depth": DEFAULT_MAX_DEPTH},
}


class RenderSettings:
    """
    Everything needed to render one image.

    Height is derived from the width and aspect ratio unless given.
    """
    def __init__(self, width: int = 400, aspect_ratio: float = DEFAULT_ASPECT_RATIO,
                 height: Optional[int] = None, samples_per_pixel: int = 50,
                 max_depth: int = DEFAULT_MAX_DEPTH, workers: Optional[int] = None,
                 samples_per_pass: int = 1, seed: Optional[int] = None,
                 scene: str = "random_spheres", output: str = "image.ppm"):
        self.width = width
        self.aspect_ratio = aspect_ratio
        self.height = height if height is not None else max(1, int(width / aspect_ratio))
        self.samples_per_pixel = samples_per_pixel
        self.max_depth = max_depth
        self.workers = workers if workers is not None else (os.cpu_count() or 1)
        self.samples_per_pass = samples_per_pass
        self.seed = seed
        self.scene = scene
        self.output = output
        self.validate()

    @classmethod
    def from_quality(cls, level: str, **overrides) -> "RenderSettings":
        """
        Builds settings from a named quality preset. Overrides that are None
        keep the preset value.
        """
        if level not in QUALITY_LEVELS:
            raise ValueError(f"unknown quality level {level!r}, choose from {sorted(QUALITY_LEVELS)}")
        preset = QUALITY_LEVELS[level]
        params = {
            "width": preset["width"],
            "samples_per_pixel": preset["samples"],
            "max_depth": preset["max_depth"],
        }
        params.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**params)

    def validate(self):
        for name in ("width", "height", "samples_per_pixel", "max_depth", "workers", "samples_per_pass"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.aspect_ratio <= 0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")

    def __repr__(self) -> str:
        return (f"RenderSettings(scene={self.scene!r}, {self.width}x{self.height}, "
                f"spp={self.samples_per_pixel}, max_depth={self.max_depth}, "
                f"workers={self.workers}, seed={self.seed})")


def setup_logging(level: int = logging.INFO):
    """Route package log records to stderr with a single handler."""
    root = logging.getLogger("pathtracer")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    else:
        for handler in root.handlers:
            handler.setLevel(level)
