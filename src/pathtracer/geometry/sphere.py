# geometry/sphere.py
import math
from typing import Optional

from pathtracer.core.aabb import AABB
from pathtracer.core.ray import Ray
from pathtracer.core.utils import gamma
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import HitRecord, Hittable


class Sphere(Hittable):
    """
    Sphere given by center, radius and material.

    A negative radius keeps the same surface but turns the outward normal
    inwards, which is how hollow glass shells are built.
    """
    def __init__(self, center: Vector3, radius: float, material):
        self.center = center
        self.radius = radius
        self.material = material

    def _nearest_root(self, ray: Ray, t_min: float, t_max: float) -> Optional[float]:
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0:
            return None
        sqrt_disc = math.sqrt(discriminant)

        for root in ((-half_b - sqrt_disc) / a, (-half_b + sqrt_disc) / a):
            if t_min <= root <= t_max:
                return root
        return None

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        t = self._nearest_root(ray, t_min, t_max)
        if t is None:
            return None

        # Snap the point back onto the surface; what is left is bounded by p_err
        offset = ray.at(t) - self.center
        offset = offset * (abs(self.radius) / offset.length())

        rec = HitRecord()
        rec.t = t
        rec.p = self.center + offset
        rec.p_err = offset.abs() * gamma(5)
        rec.set_face_normal(ray, offset / self.radius)
        rec.material = self.material
        return rec

    def bounding_box(self) -> AABB:
        r = abs(self.radius)
        extent = Vector3(r, r, r)
        return AABB(self.center - extent, self.center + extent)

    def __repr__(self) -> str:
        return f"Sphere({self.center!r}, {self.radius})"
