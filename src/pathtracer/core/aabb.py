# core/aabb.py
from typing import Optional, Tuple

from pathtracer.core.vector import Vector3

# Minimum thickness of a box along any axis. Flat primitives (rects,
# axis-aligned triangles) would otherwise give zero-volume boxes.
PADDING = 1e-4


class AABB:
    """
    Axis-aligned bounding box given by its minimum and maximum corners.
    """
    def __init__(self, minimum: Vector3, maximum: Vector3):
        lo = [minimum.x, minimum.y, minimum.z]
        hi = [maximum.x, maximum.y, maximum.z]
        for a in range(3):
            if hi[a] < lo[a]:
                lo[a], hi[a] = hi[a], lo[a]
            if hi[a] - lo[a] < PADDING:
                lo[a] -= PADDING
                hi[a] += PADDING
        self.minimum = Vector3(*lo)
        self.maximum = Vector3(*hi)

    def hit_interval(self, ray, t_min: float, t_max: float) -> Optional[Tuple[float, float]]:
        """
        Slab test. Returns the parametric interval the ray spends inside the box,
        clipped to [t_min, t_max], or None if that interval is empty.

        A zero direction component never divides: the ray is parallel to that
        slab, so it either lies between the two planes (no constraint) or
        misses the box outright.
        """
        for a in range(3):
            d = ray.direction[a]
            o = ray.origin[a]
            lo = self.minimum[a]
            hi = self.maximum[a]
            if d == 0.0:
                if o < lo or o > hi:
                    return None
                continue
            inv_d = 1.0 / d
            t0 = (lo - o) * inv_d
            t1 = (hi - o) * inv_d
            if inv_d < 0:
                t0, t1 = t1, t0
            t_min = t0 if t0 > t_min else t_min
            t_max = t1 if t1 < t_max else t_max
            if t_max <= t_min:
                return None
        return t_min, t_max

    def hit(self, ray, t_min: float, t_max: float) -> bool:
        return self.hit_interval(ray, t_min, t_max) is not None

    def centroid(self) -> Vector3:
        return (self.minimum + self.maximum) * 0.5

    def surface_area(self) -> float:
        d = self.maximum - self.minimum
        return 2 * (d.x * d.y + d.x * d.z + d.y * d.z)

    def __eq__(self, other) -> bool:
        if not isinstance(other, AABB):
            return NotImplemented
        return self.minimum == other.minimum and self.maximum == other.maximum

    def __repr__(self) -> str:
        return f"AABB({self.minimum!r}, {self.maximum!r})"

    @staticmethod
    def surrounding_box(box0: "AABB", box1: "AABB") -> "AABB":
        small = Vector3(
            min(box0.minimum.x, box1.minimum.x),
            min(box0.minimum.y, box1.minimum.y),
            min(box0.minimum.z, box1.minimum.z)
        )
        big = Vector3(
            max(box0.maximum.x, box1.maximum.x),
            max(box0.maximum.y, box1.maximum.y),
            max(box0.maximum.z, box1.maximum.z)
        )
        return AABB(small, big)
