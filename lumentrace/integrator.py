"""
Recursive Monte Carlo light transport.

Radiance along a ray is the product of the attenuations picked up at each
bounce, times the sky color where the path finally escapes. Paths are cut
off with black after ``max_depth`` bounces.
"""

from __future__ import annotations
from typing import Optional

import numpy as np

from .vec3 import Color
from .ray import Ray
from .shapes import Hittable

SKY_HORIZON = Color(1.0, 1.0, 1.0)
SKY_ZENITH = Color(0.5, 0.7, 1.0)
BLACK = Color(0.0, 0.0, 0.0)


def sky_color(ray: Ray) -> Color:
    """Vertical white-to-blue gradient used as the background.

    Args:
        ray: The escaping ray; only its direction matters

    Returns:
        Sky color in this direction
    """
    unit_direction = ray.direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return SKY_HORIZON * (1.0 - t) + SKY_ZENITH * t


class PathIntegrator:
    """Estimates radiance by following one scattered ray per bounce."""

    def __init__(self, max_depth: int = 50, t_min: float = 0.001):
        """Create an integrator.

        Args:
            max_depth: Number of bounces after which a hit returns black
            t_min: Self-intersection offset for scene queries
        """
        self.max_depth = max_depth
        self.t_min = t_min

    def radiance(self, ray: Ray, scene: Hittable, depth: int = 0,
                 rng: Optional[np.random.Generator] = None) -> Color:
        """Compute the color carried back along a ray.

        Args:
            ray: The ray to trace
            scene: The scene to trace against
            depth: Bounces taken so far
            rng: Random generator of the calling worker

        Returns:
            Linear RGB radiance estimate
        """
        hit_record = scene.hit(ray, self.t_min, float('inf'))

        if hit_record is None:
            return sky_color(ray)

        if depth >= self.max_depth or hit_record.material is None:
            return BLACK

        scatter_result = hit_record.material.scatter(ray, hit_record, rng)
        if scatter_result is None:
            return BLACK

        return scatter_result.attenuation * self.radiance(
            scatter_result.scattered_ray, scene, depth + 1, rng
        )
