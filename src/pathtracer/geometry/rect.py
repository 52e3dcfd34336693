# geometry/rect.py
from enum import Enum
from typing import Optional, Tuple

from pathtracer.core.aabb import AABB, PADDING
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import HitRecord, Hittable


class RectAxes(Enum):
    """
    The pair of axes a rectangle spans; it sits at a fixed coordinate on the third.
    """
    XY = (0, 1, 2)
    XZ = (0, 2, 1)
    YZ = (1, 2, 0)

    @property
    def in_plane(self) -> Tuple[int, int]:
        return self.value[0], self.value[1]

    @property
    def fixed(self) -> int:
        return self.value[2]


class Rect(Hittable):
    """
    Axis-aligned rectangle [axis1_min, axis1_max] x [axis2_min, axis2_max]
    lying on the plane where the remaining axis equals k.
    """
    def __init__(self, axes: RectAxes, axis1_min: float, axis1_max: float,
                 axis2_min: float, axis2_max: float, k: float, material):
        self.axes = axes
        self.corners = (axis1_min, axis1_max, axis2_min, axis2_max)
        self.k = k
        self.material = material

    def outward_normal(self) -> Vector3:
        n = [0.0, 0.0, 0.0]
        n[self.axes.fixed] = 1.0
        return Vector3(*n)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        a1, a2 = self.axes.in_plane
        fixed = self.axes.fixed

        d = ray.direction[fixed]
        if d == 0.0:
            # Parallel to the plane, including rays running along it.
            return None
        t = (self.k - ray.origin[fixed]) / d
        if t < t_min or t > t_max:
            return None

        x = ray.origin[a1] + t * ray.direction[a1]
        y = ray.origin[a2] + t * ray.direction[a2]
        x0, x1, y0, y1 = self.corners
        if x < x0 or x > x1 or y < y0 or y > y1:
            return None

        rec = HitRecord()
        rec.t = t
        rec.p = ray.at(t)
        rec.set_face_normal(ray, self.outward_normal())
        rec.material = self.material
        return rec

    def bounding_box(self) -> AABB:
        # The box must have non-zero width along the fixed axis too.
        a1, a2 = self.axes.in_plane
        x0, x1, y0, y1 = self.corners
        lo = [0.0, 0.0, 0.0]
        hi = [0.0, 0.0, 0.0]
        lo[a1], hi[a1] = x0, x1
        lo[a2], hi[a2] = y0, y1
        lo[self.axes.fixed] = self.k - PADDING
        hi[self.axes.fixed] = self.k + PADDING
        return AABB(Vector3(*lo), Vector3(*hi))

    def __repr__(self) -> str:
        return f"Rect({self.axes.name}, {self.corners}, k={self.k})"
