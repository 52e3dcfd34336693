# camera/camera.py
import math
import random
from typing import Optional

from pathtracer.core.ray import Ray
from pathtracer.core.utils import degrees_to_radians, random_in_unit_disk
from pathtracer.core.vector import Point3, Vector3


class Camera:
    """
    Pinhole (or thin-lens, when aperture > 0) camera.

    (u, v) in [0, 1] map across the viewport from its lower-left corner, so
    u grows to the right and v grows upwards.
    """
    def __init__(self, look_from: Point3, look_at: Point3, v_up: Vector3,
                 v_fov_degrees: float, aspect_ratio: float,
                 aperture: float = 0.0, focus_dist: Optional[float] = None):
        if aspect_ratio <= 0:
            raise ValueError(f"aspect ratio must be positive, got {aspect_ratio}")
        if not 0 < v_fov_degrees < 180:
            raise ValueError(f"vertical field of view must be in (0, 180), got {v_fov_degrees}")

        self.look_from = look_from
        self.look_at = look_at
        self.v_up = v_up
        self.v_fov = v_fov_degrees
        self.aspect_ratio = aspect_ratio
        self.aperture = aperture
        self.lens_radius = aperture / 2.0
        self.focus_dist = focus_dist if focus_dist is not None else 1.0
        self.update_camera()

    def update_camera(self):
        """Recomputes the basis vectors and viewport from the current settings."""
        theta = degrees_to_radians(self.v_fov)
        viewport_height = 2.0 * math.tan(theta / 2)
        viewport_width = self.aspect_ratio * viewport_height

        self.w = (self.look_from - self.look_at).normalize()
        self.u = self.v_up.cross(self.w).normalize()
        self.v = self.w.cross(self.u)
        if self.u.near_zero():
            raise ValueError("view up vector must not be parallel to the viewing direction")

        self.origin = self.look_from
        self.horizontal = self.u * (viewport_width * self.focus_dist)
        self.vertical = self.v * (viewport_height * self.focus_dist)
        self.lower_left_corner = (self.origin
                                  - self.horizontal * 0.5
                                  - self.vertical * 0.5
                                  - self.w * self.focus_dist)

    def get_ray(self, u: float, v: float, rng: Optional[random.Random] = None) -> Ray:
        target = self.lower_left_corner + self.horizontal * u + self.vertical * v
        if self.lens_radius <= 0:
            return Ray(self.origin, target - self.origin)

        if rng is None:
            raise ValueError("a camera with an aperture needs a random generator to sample the lens")
        rd = random_in_unit_disk(rng) * self.lens_radius
        offset = self.u * rd.x + self.v * rd.y
        ray_origin = self.origin + offset
        return Ray(ray_origin, target - ray_origin)
