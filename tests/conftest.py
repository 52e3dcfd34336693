"""Shared fixtures for the pathtracer test suite."""

import random

import pytest

from pathtracer.core.vector import Color, Point3, Vector3
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials.lambertian import Lambertian


@pytest.fixture
def rng():
    """Seeded generator so sampled directions are reproducible."""
    return random.Random(1234)


@pytest.fixture
def gray():
    return Lambertian(Color(0.5, 0.5, 0.5))


@pytest.fixture
def random_spheres(gray):
    """Forty non-degenerate spheres scattered through a 20-unit cube."""
    gen = random.Random(99)
    spheres = []
    for _ in range(40):
        center = Point3(gen.uniform(-10, 10), gen.uniform(-10, 10), gen.uniform(-10, 10))
        spheres.append(Sphere(center, gen.uniform(0.3, 2.0), gray))
    return spheres


def assert_vec_close(actual: Vector3, expected: Vector3, tol: float = 1e-9):
    assert abs(actual.x - expected.x) <= tol, (actual, expected)
    assert abs(actual.y - expected.y) <= tol, (actual, expected)
    assert abs(actual.z - expected.z) <= tol, (actual, expected)
