"""
Materials system.

Implements:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction and Schlick reflectance)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import math

import numpy as np

from .vec3 import Vec3, Color
from .ray import Ray
from .sampling import default_rng

if TYPE_CHECKING:
    from .shapes import HitRecord


@dataclass(frozen=True)
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color

    def __iter__(self):
        return iter((self.scattered_ray, self.attenuation))


def reflect(v: Vec3, n: Vec3) -> Vec3:
    """Mirror v about n: v - 2(v·n)n."""
    return v.reflect(n)


def refract(v: Vec3, n: Vec3, ni_over_nt: float) -> Optional[Vec3]:
    """Bend v through a surface with normal n using Snell's law.

    Args:
        v: Incoming direction (any length)
        n: Unit normal on the side the ray arrives from
        ni_over_nt: Ratio of refractive indices, incident over transmitted

    Returns:
        Refracted direction, or None on total internal reflection
    """
    uv = v.normalize()
    dt = uv.dot(n)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)
    if discriminant > 0:
        return (uv - n * dt) * ni_over_nt - n * math.sqrt(discriminant)
    return None


def schlick(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation for Fresnel reflectance."""
    r0 = (1 - ref_idx) / (1 + ref_idx)
    r0 = r0 * r0
    return r0 + (1 - r0) * pow(1 - cosine, 5)


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(self, ray_in: Ray, hit: HitRecord,
                rng: Optional[np.random.Generator] = None) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            hit: The intersection being shaded
            rng: Random generator of the calling worker

        Returns:
            ScatterResult if ray scatters, None if absorbed
        """
        pass


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Color):
        """Create a Lambertian material.

        Args:
            albedo: The base color (RGB, each component 0-1)
        """
        self.albedo = albedo

    def scatter(self, ray_in: Ray, hit: HitRecord,
                rng: Optional[np.random.Generator] = None) -> Optional[ScatterResult]:
        # Unnormalized offset biases directions toward the normal
        direction = hit.normal + Vec3.random_in_unit_sphere(rng)
        return ScatterResult(
            scattered_ray=Ray(hit.point, direction),
            attenuation=self.albedo
        )

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo})"


class Metal(Material):
    """Metallic material with specular reflection."""

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Reflection perturbation, clamped to [0, 1] (0 = mirror)
        """
        self.albedo = albedo
        self.fuzz = max(0.0, min(fuzz, 1.0))

    def scatter(self, ray_in: Ray, hit: HitRecord,
                rng: Optional[np.random.Generator] = None) -> Optional[ScatterResult]:
        # Unit incoming direction keeps fuzz independent of ray length
        direction = reflect(ray_in.direction.normalize(), hit.normal)
        if self.fuzz > 0:
            direction = direction + Vec3.random_in_unit_sphere(rng) * self.fuzz

        # Directions into the surface are absorbed
        if direction.dot(hit.normal) > 0:
            return ScatterResult(
                scattered_ray=Ray(hit.point, direction),
                attenuation=self.albedo
            )
        return None

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo}, fuzz={self.fuzz})"


class Dielectric(Material):
    """Dielectric (glass-like) material that refracts or reflects."""

    def __init__(self, ref_idx: float = 1.5):
        """Create a dielectric material.

        Args:
            ref_idx: Index of refraction (1.0 = air, 1.5 = glass, 2.4 = diamond)
        """
        if not ref_idx > 0:
            raise ValueError(f"Refractive index must be positive, got {ref_idx}")
        self.ref_idx = ref_idx

    def scatter(self, ray_in: Ray, hit: HitRecord,
                rng: Optional[np.random.Generator] = None) -> Optional[ScatterResult]:
        attenuation = Color(1.0, 1.0, 1.0)
        direction = ray_in.direction
        d_dot_n = direction.dot(hit.normal)

        if d_dot_n > 0:
            # Leaving the medium
            outward_normal = -hit.normal
            ni_over_nt = self.ref_idx
            cosine = self.ref_idx * d_dot_n / direction.length()
        else:
            outward_normal = hit.normal
            ni_over_nt = 1.0 / self.ref_idx
            cosine = -d_dot_n / direction.length()

        refracted = refract(direction, outward_normal, ni_over_nt)
        if refracted is not None:
            rng = rng if rng is not None else default_rng()
            if rng.random() >= schlick(cosine, self.ref_idx):
                return ScatterResult(
                    scattered_ray=Ray(hit.point, refracted),
                    attenuation=attenuation
                )

        return ScatterResult(
            scattered_ray=Ray(hit.point, reflect(direction, hit.normal)),
            attenuation=attenuation
        )

    def __repr__(self) -> str:
        return f"Dielectric(ref_idx={self.ref_idx})"
