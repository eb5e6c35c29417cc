"""
lumentrace - A Python Monte Carlo Path Tracer

Renders spheres with diffuse, metal and glass materials:
- Recursive path tracing with a fixed bounce limit
- Thin-lens depth of field
- Jittered antialiasing
- Row-band parallel rendering with per-band random streams
- PNG output
"""

__version__ = "0.1.0"
__author__ = "lumentrace Team"

from .vec3 import Vec3, Point3, Color, Axis, Channel
from .ray import Ray
from .shapes import Sphere, HittableList, HitRecord, Hittable
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric, reflect, refract, schlick
from .camera import Camera
from .integrator import PathIntegrator, sky_color
from .renderer import Renderer, RenderSettings, RowBand, partition_rows, render_band, quantize
from .sampling import default_rng, seed_thread, spawn_generators
from .scenes import basic_scene, basic_camera, random_scene, random_camera
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
