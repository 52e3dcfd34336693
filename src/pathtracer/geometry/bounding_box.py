# geometry/bounding_box.py
from typing import Optional

from pathtracer.core.aabb import AABB
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Color
from pathtracer.geometry.hittable import HitRecord, Hittable
from pathtracer.materials.lambertian import Lambertian


class BoundingBox(Hittable):
    """
    Debug primitive that renders another primitive's AABB as a solid block.
    """
    def __init__(self, box: AABB, material=None):
        self.box = box
        self.material = material if material is not None else Lambertian(Color(0.5, 0.5, 0.5))

    @classmethod
    def around(cls, primitive: Hittable, material=None) -> "BoundingBox":
        box = primitive.bounding_box()
        if box is None:
            raise ValueError(f"{primitive!r} has no bounding box to visualise")
        return cls(box, material)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        interval = self.box.hit_interval(ray, t_min, t_max)
        if interval is None:
            return None
        t = interval[0]
        rec = HitRecord()
        rec.t = t
        rec.p = ray.at(t)
        rec.set_face_normal(ray, -ray.direction.normalize())
        rec.material = self.material
        return rec

    def bounding_box(self) -> AABB:
        return self.box

    def __repr__(self) -> str:
        return f"BoundingBox({self.box!r})"
