# scenes.py
import logging
import random
from typing import Callable, Dict, Optional

from pathtracer.camera.camera import Camera
from pathtracer.core.utils import random_double, random_vector
from pathtracer.core.vector import Color, Point3, Vector3
from pathtracer.geometry.mesh import load_obj
from pathtracer.geometry.rect import Rect, RectAxes
from pathtracer.geometry.sphere import Sphere
from pathtracer.geometry.triangle import Triangle
from pathtracer.geometry.world import HittableList
from pathtracer.materials.diffuse_light import DiffuseLight
from pathtracer.materials.lambertian import Lambertian
from pathtracer.materials.metal import Metal
from pathtracer.materials.presets import ColorPresets, DielectricPresets, LightPresets, MetalPresets
from pathtracer.renderer.raytracer import SceneData

logger = logging.getLogger(__name__)

SKY = Color(0.7, 0.8, 1.0)
LIGHT_GRAY = Color(0.9, 0.9, 0.9)
V_UP = Vector3(0.0, 1.0, 0.0)


def _ground(albedo: Color) -> Sphere:
    return Sphere(Point3(0.0, -1000.0, 0.0), 1000.0, Lambertian(albedo))


def random_spheres(aspect_ratio: float, rng: random.Random) -> SceneData:
    """A field of small random spheres around three large ones."""
    world = HittableList()
    world.add(_ground(ColorPresets.GRAY))

    for a in range(-11, 12):
        for b in range(-11, 12):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())

            if choose_mat < 0.6:
                # diffuse
                albedo = random_vector(rng) * random_vector(rng)
                material = Lambertian(albedo)
            elif choose_mat < 0.9:
                # metal
                albedo = random_vector(rng, 0.5, 1.0)
                material = Metal(albedo, random_double(rng, 0.0, 0.5))
            else:
                material = DielectricPresets.glass()
            world.add(Sphere(center, 0.2, material))

    world.add(Sphere(Point3(0.0, 1.0, 0.0), 1.0, DielectricPresets.glass()))
    world.add(Sphere(Point3(-4.0, 1.0, 0.0), 1.0, Lambertian(ColorPresets.BROWN)))
    world.add(Sphere(Point3(4.0, 1.0, 0.0), 1.0, MetalPresets.mirror()))

    camera = Camera(Point3(13.0, 2.0, 3.0), Point3(0.0, 0.0, 0.0), V_UP, 20.0, aspect_ratio)
    return SceneData(world.build_bvh(), SKY, camera)


def light_test(aspect_ratio: float, rng: random.Random) -> SceneData:
    """A diffuse sphere lit by an emissive rectangle."""
    world = HittableList()
    world.add(_ground(ColorPresets.BROWN))
    world.add(Sphere(Point3(0.0, 2.0, 0.0), 2.0, Lambertian(Color(0.8, 0.8, 0.8))))
    world.add(Rect(RectAxes.XY, -1.0, 2.0, 1.0, 3.0, 4.0, DiffuseLight(Color(4.0, 4.0, 4.0))))

    camera = Camera(Point3(26.0, 3.0, 6.0), Point3(0.0, 2.0, 0.0), V_UP, 20.0, aspect_ratio)
    return SceneData(world.build_bvh(), LIGHT_GRAY, camera)


def triangle_test(aspect_ratio: float, rng: random.Random) -> SceneData:
    world = HittableList()
    facing = Vector3(0.0, 0.0, 1.0)
    world.add(Triangle(Point3(-2.0, 0.1, 0.0), Point3(2.0, 0.1, 0.0), Point3(0.0, 2.1, 0.0),
                       Lambertian(Color(0.8, 0.8, 0.8)), (facing, facing, facing)))

    camera = Camera(Point3(0.0, 2.0, 26.0), Point3(0.0, 0.0, 0.0), V_UP, 20.0, aspect_ratio)
    return SceneData(world.build_bvh(), LIGHT_GRAY, camera)


def mesh_test(aspect_ratio: float, rng: random.Random) -> SceneData:
    """Three stacked strips of three triangles each."""
    world = HittableList()
    material = Lambertian(Color(0.8, 0.8, 0.8))
    facing = Vector3(0.0, 0.0, 1.0)
    for row in range(3):
        y = float(row)
        for x0 in (-2.0, 0.0, 2.0):
            world.add(Triangle(Point3(x0, y, 0.0), Point3(x0 + 2.0, y, 0.0), Point3(x0 + 1.0, y + 1.0, 0.0),
                               material, (facing, facing, facing)))

    camera = Camera(Point3(26.0, 10.0, 10.0), Point3(0.0, 0.0, 0.0), V_UP, 20.0, aspect_ratio)
    return SceneData(world.build_bvh(), LIGHT_GRAY, camera)


def cornell_box(aspect_ratio: float, rng: random.Random) -> SceneData:
    """Closed box lit only by a ceiling panel."""
    world = HittableList()
    red = Lambertian(ColorPresets.RED)
    white = Lambertian(ColorPresets.WHITE)
    green = Lambertian(ColorPresets.GREEN)

    world.add(Rect(RectAxes.YZ, 0.0, 555.0, 0.0, 555.0, 555.0, green))
    world.add(Rect(RectAxes.YZ, 0.0, 555.0, 0.0, 555.0, 0.0, red))
    world.add(Rect(RectAxes.XZ, 213.0, 343.0, 227.0, 332.0, 554.0, LightPresets.daylight(15.0)))
    world.add(Rect(RectAxes.XZ, 0.0, 555.0, 0.0, 555.0, 0.0, white))
    world.add(Rect(RectAxes.XZ, 0.0, 555.0, 0.0, 555.0, 555.0, white))
    world.add(Rect(RectAxes.XY, 0.0, 555.0, 0.0, 555.0, 555.0, white))
    world.add(Sphere(Point3(190.0, 90.0, 190.0), 90.0, DielectricPresets.glass()))
    world.add(Sphere(Point3(380.0, 120.0, 380.0), 120.0, MetalPresets.silver()))

    camera = Camera(Point3(278.0, 278.0, -800.0), Point3(278.0, 278.0, 0.0), V_UP, 40.0, aspect_ratio)
    return SceneData(world.build_bvh(), Color(0.0, 0.0, 0.0), camera)


def obj_scene(path: str, aspect_ratio: float) -> SceneData:
    """A Wavefront OBJ model on a ground sphere, lit by a rectangle."""
    world = HittableList()
    world.extend(load_obj(path, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(_ground(ColorPresets.GRAY))
    world.add(Rect(RectAxes.XY, -4.0, -2.0, 1.0, 8.0, 4.0, DiffuseLight(Color(4.0, 4.0, 4.0))))

    camera = Camera(Point3(-20.0, 5.0, 20.0), Point3(0.0, 0.0, 0.0), V_UP, 20.0, aspect_ratio)
    return SceneData(world.build_bvh(), LIGHT_GRAY, camera)


SceneBuilder = Callable[[float, random.Random], SceneData]

SCENES: Dict[str, SceneBuilder] = {
    "random_spheres": random_spheres,
    "light_test": light_test,
    "triangle_test": triangle_test,
    "mesh_test": mesh_test,
    "cornell_box": cornell_box,
}


def build_scene(name: str, aspect_ratio: float, seed: Optional[int] = None) -> SceneData:
    """Build a registered scene. Raises ValueError for unknown names."""
    if name not in SCENES:
        raise ValueError(f"unknown scene {name!r}, choose from {sorted(SCENES)}")
    logger.info("Building scene %s", name)
    return SCENES[name](aspect_ratio, random.Random(seed))
