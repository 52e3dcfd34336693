"""Tests for the axis-aligned bounding box."""

import random

from pathtracer.core.aabb import AABB, PADDING
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Point3, Vector3


def unit_box():
    return AABB(Point3(-10.0, -10.0, -10.0), Point3(10.0, 10.0, 10.0))


class TestConstruction:
    """Corner handling."""

    def test_corners_kept(self):
        box = AABB(Point3(0.0, -2.0, 1.0), Point3(10.0, 3.0, 4.0))
        assert box.minimum == Point3(0.0, -2.0, 1.0)
        assert box.maximum == Point3(10.0, 3.0, 4.0)

    def test_flat_axis_is_padded(self):
        box = AABB(Point3(0.0, 0.0, 5.0), Point3(1.0, 1.0, 5.0))
        assert box.minimum.z == 5.0 - PADDING
        assert box.maximum.z == 5.0 + PADDING
        assert box.minimum.x == 0.0

    def test_swapped_corners_are_ordered(self):
        box = AABB(Point3(1.0, 1.0, 1.0), Point3(0.0, 0.0, 0.0))
        assert box.minimum == Point3(0.0, 0.0, 0.0)
        assert box.maximum == Point3(1.0, 1.0, 1.0)

    def test_surrounding_box(self):
        a = AABB(Point3(0.0, 0.0, 0.0), Point3(10.0, 10.0, 10.0))
        b = AABB(Point3(-1.0, 3.0, -2.0), Point3(9.0, 16.0, 10.0))
        sb = AABB.surrounding_box(a, b)
        assert sb.minimum == Point3(-1.0, 0.0, -2.0)
        assert sb.maximum == Point3(10.0, 16.0, 10.0)

    def test_centroid_and_area(self):
        box = AABB(Point3(0.0, 0.0, 0.0), Point3(2.0, 2.0, 2.0))
        assert box.centroid() == Point3(1.0, 1.0, 1.0)
        assert box.surface_area() == 24.0


class TestSlabHit:
    """Ray/box overlap."""

    def test_hit(self):
        r = Ray(Vector3(20.0, 5.0, 5.0), Vector3(-1.0, 0.4, -0.2))
        assert unit_box().hit(r, 0.0, 100.0)

    def test_miss_due_to_range(self):
        r = Ray(Vector3(20.0, 5.0, 5.0), Vector3(-1.0, 0.4, -0.2))
        assert not unit_box().hit(r, 0.0, 9.99)

    def test_axis_parallel_ray_outside_slab_misses(self):
        r = Ray(Vector3(-10.0, 10.01, 5.0), Vector3(1.0, 0.0, 0.0))
        assert not unit_box().hit(r, 0.0, 100.0)

    def test_axis_parallel_ray_inside_slab_hits(self):
        r = Ray(Vector3(-20.0, 9.99, 5.0), Vector3(1.0, 0.0, 0.0))
        assert unit_box().hit_interval(r, 0.0, 100.0) == (10.0, 30.0)

    def test_negative_direction(self):
        r = Ray(Vector3(0.0, 0.0, 30.0), Vector3(0.0, 0.0, -2.0))
        assert unit_box().hit_interval(r, 0.0, 100.0) == (10.0, 20.0)

    def test_box_behind_ray_misses(self):
        r = Ray(Vector3(20.0, 0.0, 0.0), Vector3(1.0, 0.0, 0.0))
        assert not unit_box().hit(r, 0.0, 100.0)

    def test_origin_inside_box(self):
        r = Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.3, -0.2, 0.9))
        assert unit_box().hit(r, 0.001, float("inf"))

    def test_segments_through_interior_always_hit(self):
        """A ray aimed at a random interior point always reports a hit."""
        gen = random.Random(5)
        box = unit_box()
        for _ in range(200):
            origin = Point3(gen.uniform(-50, 50), gen.uniform(-50, 50), gen.uniform(-50, 50))
            target = Point3(gen.uniform(-9, 9), gen.uniform(-9, 9), gen.uniform(-9, 9))
            r = Ray(origin, target - origin)
            assert box.hit(r, 0.0, 1.0)
