# geometry/hittable.py
import random
from typing import Optional

from pathtracer.core.aabb import AABB
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Color, Vector3


class HitRecord:
    """
    Records details of a ray-object intersection.
    """
    def __init__(self, p: Vector3 = None, normal: Vector3 = None,
                 t: float = 0, front_face: bool = True, material=None,
                 p_err: Vector3 = None):
        self.p = p              # Intersection point
        self.normal = normal    # Surface normal, always facing against the ray
        self.t = t              # Ray parameter at intersection
        self.front_face = front_face  # Whether the hit was on the outward side
        self.material = material
        self.p_err = p_err if p_err is not None else Vector3(0.0, 0.0, 0.0)  # Error bound on p

    def set_face_normal(self, ray: Ray, outward_normal: Vector3):
        """
        Ensures that the normal always points against the ray.
        Grazing hits (dot product of zero) count as front-facing.
        """
        self.front_face = ray.direction.dot(outward_normal) <= 0
        self.normal = outward_normal if self.front_face else -outward_normal

    def __repr__(self) -> str:
        return (f"HitRecord(t={self.t}, p={self.p!r}, normal={self.normal!r}, "
                f"front_face={self.front_face})")


class TraceResult:
    """
    Outcome of tracing one ray segment against the world.
    """
    __slots__ = ()


class Missed(TraceResult):
    __slots__ = ()

    def __repr__(self) -> str:
        return "Missed()"


class Absorbed(TraceResult):
    """The ray ended on a surface; `emitted` is the light that surface gives off."""
    __slots__ = ("emitted",)

    def __init__(self, emitted: Color):
        self.emitted = emitted

    def __repr__(self) -> str:
        return f"Absorbed({self.emitted!r})"


class Scattered(TraceResult):
    """The ray continues as `scattered`, weighted by `attenuation` (emission included)."""
    __slots__ = ("attenuation", "scattered")

    def __init__(self, attenuation: Color, scattered: Ray):
        self.attenuation = attenuation
        self.scattered = scattered

    def __repr__(self) -> str:
        return f"Scattered({self.attenuation!r}, {self.scattered!r})"


MISSED = Missed()


class Hittable:
    """
    Abstract class for objects that can be hit by a ray.
    """
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        raise NotImplementedError("hit() must be implemented by subclasses.")

    def bounding_box(self) -> Optional[AABB]:
        raise NotImplementedError("bounding_box() must be implemented by subclasses.")

    def trace(self, ray: Ray, t_min: float, t_max: float, rng: random.Random) -> TraceResult:
        """
        Hit-tests the ray and lets the material at the closest hit decide
        whether it scatters or absorbs.
        """
        rec = self.hit(ray, t_min, t_max)
        if rec is None:
            return MISSED
        material = rec.material
        result = material.scatter(ray, rec, rng)
        if result is None:
            return Absorbed(material.emitted())
        scattered, attenuation = result
        return Scattered(material.emitted() + attenuation, scattered)
