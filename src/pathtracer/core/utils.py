# core/utils.py
import math
import random

import numpy as np

from pathtracer.core.vector import Vector3

# Half of the float32 unit roundoff, used for conservative error bounds.
MACHINE_EPSILON = float(np.finfo(np.float32).eps) * 0.5


def degrees_to_radians(degrees: float) -> float:
    return degrees * math.pi / 180.0


def clamp(x: float, minimum: float, maximum: float) -> float:
    if x < minimum:
        return minimum
    if x > maximum:
        return maximum
    return x


def gamma(n: int) -> float:
    """
    Bound on the relative error accumulated by n floating point operations.
    """
    return (n * MACHINE_EPSILON) / (1.0 - n * MACHINE_EPSILON)


def random_double(rng: random.Random, minimum: float = 0.0, maximum: float = 1.0) -> float:
    """
    Uniform sample in [minimum, maximum).
    """
    return minimum + (maximum - minimum) * rng.random()


def random_vector(rng: random.Random, minimum: float = 0.0, maximum: float = 1.0) -> Vector3:
    return Vector3(random_double(rng, minimum, maximum),
                   random_double(rng, minimum, maximum),
                   random_double(rng, minimum, maximum))


def random_in_unit_sphere(rng: random.Random) -> Vector3:
    """
    Returns a random point inside a unit sphere.
    """
    while True:
        p = Vector3(rng.uniform(-1, 1),
                    rng.uniform(-1, 1),
                    rng.uniform(-1, 1))
        if p.dot(p) < 1.0:
            return p


def random_unit_vector(rng: random.Random) -> Vector3:
    """
    Returns a random unit vector (uniformly distributed over the sphere).
    """
    return random_in_unit_sphere(rng).normalize()


def random_in_unit_disk(rng: random.Random) -> Vector3:
    """
    Returns a random point inside the unit disk in the xy-plane.
    """
    while True:
        p = Vector3(rng.uniform(-1, 1), rng.uniform(-1, 1), 0)
        if p.dot(p) < 1.0:
            return p


def reflect(v: Vector3, n: Vector3) -> Vector3:
    """
    Reflects vector v about the normal n.
    """
    return v - n * 2 * v.dot(n)


def refract(uv: Vector3, n: Vector3, etai_over_etat: float) -> Vector3:
    """
    Refracts the unit vector uv through a surface with unit normal n.
    """
    cos_theta = min(-uv.dot(n), 1.0)
    r_out_perp = (uv + n * cos_theta) * etai_over_etat
    r_out_parallel = n * -math.sqrt(abs(1.0 - r_out_perp.length_squared()))
    return r_out_perp + r_out_parallel


def schlick(cosine: float, ref_idx: float) -> float:
    """
    Schlick's approximation of Fresnel reflectance.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * math.pow((1.0 - cosine), 5)


def offset_ray_origin(p: Vector3, p_err: Vector3, normal: Vector3, direction: Vector3) -> Vector3:
    """
    Pushes a surface point along the normal by its error bound, onto the side
    the outgoing direction leaves through, so the next ray cannot re-hit the
    surface it starts on.
    """
    d = normal.abs().dot(p_err)
    offset = normal * d
    if direction.dot(normal) < 0:
        offset = -offset
    return p + offset
