# materials/lambertian.py
import random
from typing import Tuple

from pathtracer.core.ray import Ray
from pathtracer.core.utils import offset_ray_origin, random_in_unit_sphere
from pathtracer.core.vector import Color
from pathtracer.geometry.hittable import HitRecord
from pathtracer.materials.material import Material


class Lambertian(Material):
    """
    Ideal diffuse material.
    """
    def __init__(self, albedo: Color):
        self.albedo = albedo

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: random.Random) -> Tuple[Ray, Color]:
        """
        Scatter a ray according to a Lambertian reflection model.
        Returns (scattered_ray, attenuation); diffuse surfaces never absorb.
        """
        # Offsetting the normal by a point in the unit sphere approximates a cosine lobe.
        scatter_direction = rec.normal + random_in_unit_sphere(rng)

        # If scatter_direction is degenerate (very small), just use the normal.
        if scatter_direction.near_zero():
            scatter_direction = rec.normal

        origin = offset_ray_origin(rec.p, rec.p_err, rec.normal, scatter_direction)
        return Ray(origin, scatter_direction), self.albedo

    def __repr__(self) -> str:
        return f"Lambertian({self.albedo!r})"
