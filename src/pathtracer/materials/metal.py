# materials/metal.py
import random
from typing import Optional, Tuple

from pathtracer.core.ray import Ray
from pathtracer.core.utils import offset_ray_origin, random_in_unit_sphere, reflect
from pathtracer.core.vector import Color
from pathtracer.geometry.hittable import HitRecord
from pathtracer.materials.material import Material


class Metal(Material):
    """
    Metal material with reflective properties. fuzz in [0, 1] blurs the reflection.
    """
    def __init__(self, albedo: Color, fuzz: float = 0.0):
        self.albedo = albedo
        self.fuzz = min(max(fuzz, 0.0), 1.0)

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: random.Random) -> Optional[Tuple[Ray, Color]]:
        reflected = reflect(ray_in.direction.normalize(), rec.normal)
        direction = reflected + random_in_unit_sphere(rng) * self.fuzz

        if direction.dot(rec.normal) > 0:
            origin = offset_ray_origin(rec.p, rec.p_err, rec.normal, direction)
            return Ray(origin, direction), self.albedo

        return None  # Absorb the ray if it does not scatter forward

    def __repr__(self) -> str:
        return f"Metal({self.albedo!r}, fuzz={self.fuzz})"
