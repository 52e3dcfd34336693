# geometry/triangle.py
from typing import Optional, Sequence

from pathtracer.core.aabb import AABB
from pathtracer.core.ray import Ray
from pathtracer.core.utils import gamma
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import HitRecord, Hittable


def edge_function(x0: float, y0: float, x1: float, y1: float) -> float:
    """
    Signed area term telling which side of the line p0 -> p1 the origin lies on.
    Negative: left of the line, positive: right, zero: on it.
    """
    return x0 * y1 - y0 * x1


class Triangle(Hittable):
    """
    A single triangle with per-vertex shading normals.

    Intersection uses the watertight formulation: the triangle is moved into
    a frame where the ray starts at the origin and travels along +z, so the
    inside test reduces to three 2D edge functions that never leave gaps
    between triangles sharing an edge.
    """
    def __init__(self, v0: Vector3, v1: Vector3, v2: Vector3, material,
                 normals: Optional[Sequence[Vector3]] = None):
        self.v0 = v0
        self.v1 = v1
        self.v2 = v2
        self.material = material

        if normals is None:
            face_normal = (v1 - v0).cross(v2 - v0).normalize()
            self.n0 = self.n1 = self.n2 = face_normal
        else:
            self.n0, self.n1, self.n2 = normals

    def get_normal(self, b0: float, b1: float, b2: float) -> Vector3:
        """Interpolate the shading normal at the given barycentric weights."""
        return (self.n0 * b0 + self.n1 * b1 + self.n2 * b2).normalize()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        o = ray.origin
        d = ray.direction

        # Translate vertices into the ray's frame
        p0 = self.v0 - o
        p1 = self.v1 - o
        p2 = self.v2 - o

        # Permute so the dominant direction component becomes z
        kz = d.max_dim()
        if kz < 2:
            p0 = p0.permute(kz, 2)
            p1 = p1.permute(kz, 2)
            p2 = p2.permute(kz, 2)
            d = d.permute(kz, 2)
        if d.z == 0.0:
            return None

        # Shear x/y so the ray runs along +z; z is sheared only once we know we hit
        sx = -d.x / d.z
        sy = -d.y / d.z
        sz = 1.0 / d.z
        p0x, p0y = p0.x + sx * p0.z, p0.y + sy * p0.z
        p1x, p1y = p1.x + sx * p1.z, p1.y + sy * p1.z
        p2x, p2y = p2.x + sx * p2.z, p2.y + sy * p2.z

        e0 = edge_function(p1x, p1y, p2x, p2y)
        e1 = edge_function(p2x, p2y, p0x, p0y)
        e2 = edge_function(p0x, p0y, p1x, p1y)

        if (e0 < 0 or e1 < 0 or e2 < 0) and (e0 > 0 or e1 > 0 or e2 > 0):
            return None
        det = e0 + e1 + e2
        if det == 0:
            return None

        # Scaled hit distance, compared against the range without dividing by det
        t_scaled = e0 * (p0.z * sz) + e1 * (p1.z * sz) + e2 * (p2.z * sz)
        if det < 0 and (t_scaled >= t_min * det or t_scaled < t_max * det):
            return None
        if det > 0 and (t_scaled <= t_min * det or t_scaled > t_max * det):
            return None

        inv_det = 1.0 / det
        b0 = e0 * inv_det
        b1 = e1 * inv_det
        b2 = e2 * inv_det
        t = t_scaled * inv_det

        v0, v1, v2 = self.v0, self.v1, self.v2
        x_err = abs(b0 * v0.x) + abs(b1 * v1.x) + abs(b2 * v2.x)
        y_err = abs(b0 * v0.y) + abs(b1 * v1.y) + abs(b2 * v2.y)
        z_err = abs(b0 * v0.z) + abs(b1 * v1.z) + abs(b2 * v2.z)

        rec = HitRecord()
        rec.t = t
        rec.p = v0 * b0 + v1 * b1 + v2 * b2
        rec.p_err = Vector3(x_err, y_err, z_err) * gamma(7)
        rec.set_face_normal(ray, self.get_normal(b0, b1, b2))
        rec.material = self.material
        return rec

    def bounding_box(self) -> AABB:
        """Compute the bounding box for the triangle."""
        min_x = min(self.v0.x, self.v1.x, self.v2.x)
        min_y = min(self.v0.y, self.v1.y, self.v2.y)
        min_z = min(self.v0.z, self.v1.z, self.v2.z)
        max_x = max(self.v0.x, self.v1.x, self.v2.x)
        max_y = max(self.v0.y, self.v1.y, self.v2.y)
        max_z = max(self.v0.z, self.v1.z, self.v2.z)
        return AABB(Vector3(min_x, min_y, min_z), Vector3(max_x, max_y, max_z))

    def __repr__(self) -> str:
        return f"Triangle({self.v0!r}, {self.v1!r}, {self.v2!r})"
