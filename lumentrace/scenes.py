"""Built-in scenes and matching cameras."""

from __future__ import annotations
from typing import Optional

import numpy as np

from .vec3 import Vec3, Color, Point3
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Lambertian, Metal, Dielectric


def basic_scene() -> HittableList:
    """Three spheres on a large ground sphere, the glass one hollow."""
    world = HittableList()

    world.add(Sphere(Point3(0, 0, -1), 0.5, Lambertian(Color(0.8, 0.3, 0.3))))
    world.add(Sphere(Point3(0, -100.5, -1), 100, Lambertian(Color(0.8, 0.8, 0.0))))
    world.add(Sphere(Point3(1, 0, -1), 0.5, Metal(Color(0.8, 0.6, 0.2), 1.0)))

    # Glass bubble: the inner sphere has a negative radius so its normals
    # point inward, making a thin shell
    glass = Dielectric(1.5)
    world.add(Sphere(Point3(-1, 0, -1), 0.5, glass))
    world.add(Sphere(Point3(-1, 0, -1), -0.45, glass))

    return world


def basic_camera(aspect_ratio: float) -> Camera:
    look_from = Point3(8, 2, 2.5)
    look_at = Point3(0, 0, -1)
    return Camera(
        look_from=look_from,
        look_at=look_at,
        vup=Vec3(0, 1, 0),
        vfov=35,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=(look_from - look_at).length()
    )


def random_scene(rng: Optional[np.random.Generator] = None) -> HittableList:
    """A field of small random spheres around three large ones.

    Args:
        rng: Generator used for placement and materials (fresh if None)
    """
    rng = rng if rng is not None else np.random.default_rng()
    world = HittableList()

    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(Color(0.5, 0.5, 0.5))))

    glass = Dielectric(1.5)
    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())
            if (center - Point3(4, 0.2, 0)).length() <= 0.9:
                continue

            if choose_mat < 0.8:
                # Diffuse
                albedo = Color.from_array(rng.random(3) * rng.random(3))
                world.add(Sphere(center, 0.2, Lambertian(albedo)))
            elif choose_mat < 0.95:
                # Metal
                albedo = Color.from_array(0.5 * (1.0 + rng.random(3)))
                world.add(Sphere(center, 0.2, Metal(albedo, 0.5 * rng.random())))
            else:
                world.add(Sphere(center, 0.2, glass))

    world.add(Sphere(Point3(0, 1, 0), 1.0, glass))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    return world


def random_camera(aspect_ratio: float) -> Camera:
    return Camera(
        look_from=Point3(13, 2, 3),
        look_at=Point3(0, 0, 0),
        vup=Vec3(0, 1, 0),
        vfov=20,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=10.0
    )


SCENES = {
    'basic': (basic_scene, basic_camera),
    'random': (random_scene, random_camera),
}
