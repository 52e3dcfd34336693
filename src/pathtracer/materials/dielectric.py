# materials/dielectric.py
import math
import random
from typing import Tuple

from pathtracer.core.ray import Ray
from pathtracer.core.utils import offset_ray_origin, reflect, refract, schlick
from pathtracer.core.vector import Color
from pathtracer.geometry.hittable import HitRecord
from pathtracer.materials.material import Material

WHITE = Color(1.0, 1.0, 1.0)


class Dielectric(Material):
    """
    Clear refractive material such as glass or water.
    """
    def __init__(self, ref_idx: float):
        self.ref_idx = ref_idx

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: random.Random) -> Tuple[Ray, Color]:
        # Glass doesn't absorb light, and always scatters
        attenuation = WHITE

        # Determine if we're entering or exiting the material
        refraction_ratio = 1.0 / self.ref_idx if rec.front_face else self.ref_idx

        unit_direction = ray_in.direction.normalize()
        cos_theta = min(-unit_direction.dot(rec.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        # Total internal reflection, or a Fresnel reflection picked at random
        cannot_refract = refraction_ratio * sin_theta > 1.0
        if cannot_refract or schlick(cos_theta, refraction_ratio) > rng.random():
            direction = reflect(unit_direction, rec.normal)
        else:
            direction = refract(unit_direction, rec.normal, refraction_ratio)

        origin = offset_ray_origin(rec.p, rec.p_err, rec.normal, direction)
        return Ray(origin, direction), attenuation

    def __repr__(self) -> str:
        return f"Dielectric({self.ref_idx})"
