"""Tests for material system."""

import pytest
import math
import numpy as np

from lumentrace.vec3 import Vec3, Point3, Color
from lumentrace.ray import Ray
from lumentrace.shapes import HitRecord, Sphere
from lumentrace.materials import (
    Lambertian, Metal, Dielectric, ScatterResult, reflect, refract, schlick
)


def make_hit(point=Point3(0, 0, 0), normal=Vec3(0, 1, 0), material=None):
    return HitRecord(t=1.0, point=point, normal=normal, material=material)


class TestReflect:
    """Test the mirror reflection helper."""

    def test_reflection_law(self):
        n = Vec3(0, 0, 1)
        rng = np.random.default_rng(8)
        for _ in range(50):
            d = Vec3.from_array(rng.normal(size=3)).normalize()
            assert reflect(d, n).dot(n) == pytest.approx(-d.dot(n))

    def test_preserves_tangential_part(self):
        assert reflect(Vec3(1, -1, 0), Vec3(0, 1, 0)) == Vec3(1, 1, 0)


class TestRefract:
    """Test Snell's law helper."""

    def test_unit_index_does_not_bend(self):
        rng = np.random.default_rng(9)
        n = Vec3(0, 1, 0)
        for _ in range(50):
            d = Vec3.from_array(rng.normal(size=3))
            if d.dot(n) >= 0:
                d = -d
            assert refract(d, n, 1.0) == d.normalize()

    def test_bends_toward_normal_entering_glass(self):
        d = Vec3(1, -1, 0)
        refracted = refract(d, Vec3(0, 1, 0), 1.0 / 1.5)
        assert refracted is not None
        sin_in = abs(d.normalize().x)
        sin_out = abs(refracted.normalize().x)
        assert sin_out == pytest.approx(sin_in / 1.5)

    def test_total_internal_reflection(self):
        # Leaving glass at a grazing angle
        assert refract(Vec3(1, 0, -0.2), Vec3(0, 0, -1), 1.5) is None


class TestSchlick:
    """Test Schlick reflectance."""

    def test_normal_incidence(self):
        assert schlick(1.0, 1.5) == pytest.approx(0.04)

    def test_grazing_incidence(self):
        assert schlick(0.0, 1.5) == pytest.approx(1.0)

    def test_no_interface(self):
        assert schlick(1.0, 1.0) == 0.0


class TestLambertian:
    """Test Lambertian diffuse material."""

    def test_scatter_always_succeeds(self):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, -1, 0))
        rng = np.random.default_rng(1)
        for _ in range(100):
            assert mat.scatter(ray_in, make_hit(), rng) is not None

    def test_scattered_leaves_surface(self):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        normal = Vec3(0, 1, 0)
        rng = np.random.default_rng(2)
        for _ in range(100):
            result = mat.scatter(ray_in, make_hit(normal=normal), rng)
            assert result.scattered_ray.direction.dot(normal) > 0
            assert result.scattered_ray.origin == Point3(0, 0, 0)

    def test_direction_is_unit_ball_around_normal(self):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        normal = Vec3(0, 1, 0)
        rng = np.random.default_rng(3)
        for _ in range(100):
            result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit(normal=normal), rng)
            assert (result.scattered_ray.direction - normal).length() < 1.0

    def test_attenuation_matches_albedo(self):
        albedo = Color(0.8, 0.2, 0.3)
        result = Lambertian(albedo).scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit())
        assert result.attenuation == albedo

    def test_result_unpacks(self):
        result = Lambertian(Color(1, 1, 1)).scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit())
        scattered, attenuation = result
        assert isinstance(result, ScatterResult)
        assert scattered is result.scattered_ray
        assert attenuation is result.attenuation


class TestMetal:
    """Test Metal material."""

    def test_fuzz_is_clamped(self):
        assert Metal(Color(1, 1, 1), 3.0).fuzz == 1.0
        assert Metal(Color(1, 1, 1), -1.0).fuzz == 0.0
        assert Metal(Color(1, 1, 1), 0.3).fuzz == 0.3

    def test_normal_incidence_reflects_back(self):
        mat = Metal(Color(1, 1, 1), 0.0)
        normal = Vec3(0, 0, 1)
        result = mat.scatter(Ray(Point3(0, 0, 5), Vec3(0, 0, -1)), make_hit(normal=normal))
        assert result.scattered_ray.direction == normal

    def test_perfect_reflection(self):
        mat = Metal(Color(1, 1, 1), 0.0)
        ray_in = Ray(Point3(0, 1, 0), Vec3(1, -1, 0))
        result = mat.scatter(ray_in, make_hit(point=Point3(1, 0, 0)))
        assert result.scattered_ray.direction == Vec3(1, 1, 0).normalize()
        assert result.scattered_ray.origin == Point3(1, 0, 0)

    def test_mirror_direction_is_unit_length(self):
        mat = Metal(Color(1, 1, 1), 0.0)
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(3, -4, 0)), make_hit())
        assert result.scattered_ray.direction == Vec3(0.6, 0.8, 0)

    def test_fuzz_spread_ignores_ray_length(self):
        mat = Metal(Color(1, 1, 1), 1.0)

        def mean_spread(direction):
            rng = np.random.default_rng(10)
            ray_in = Ray(Point3(0, 1, 0), direction)
            offsets = []
            for _ in range(500):
                result = mat.scatter(ray_in, make_hit(), rng)
                if result:
                    offsets.append(abs(result.scattered_ray.direction.normalize().x))
            return sum(offsets) / len(offsets)

        # Same generator seed, so both lengths draw identical fuzz offsets
        assert mean_spread(Vec3(0, -10, 0)) == pytest.approx(mean_spread(Vec3(0, -1, 0)))
        assert mean_spread(Vec3(0, -1, 0)) > 0.2

    def test_rough_metal_adds_fuzz(self):
        mat = Metal(Color(1, 1, 1), 0.5)
        rng = np.random.default_rng(4)
        directions = []
        for _ in range(100):
            result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit(), rng)
            if result:
                directions.append(result.scattered_ray.direction.x)
        assert max(directions) - min(directions) > 0.1

    def test_absorbs_into_surface(self):
        mat = Metal(Color(1, 1, 1), 0.0)
        # A ray travelling along the normal reflects into the surface
        result = mat.scatter(Ray(Point3(0, -1, 0), Vec3(0, 1, 0)), make_hit())
        assert result is None

    def test_attenuation_matches_albedo(self):
        albedo = Color(0.9, 0.6, 0.2)
        result = Metal(albedo, 0.0).scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit())
        assert result.attenuation == albedo


class TestDielectric:
    """Test Dielectric material."""

    def test_rejects_non_positive_index(self):
        with pytest.raises(ValueError):
            Dielectric(0.0)
        with pytest.raises(ValueError):
            Dielectric(-1.5)

    def test_never_absorbs(self):
        mat = Dielectric(1.5)
        rng = np.random.default_rng(5)
        for _ in range(100):
            d = Vec3.from_array(rng.normal(size=3))
            result = mat.scatter(Ray(Point3(0, 0, 0), d), make_hit(), rng)
            assert result is not None
            assert result.attenuation == Color(1, 1, 1)

    def test_unit_index_passes_straight_through(self):
        mat = Dielectric(1.0)
        rng = np.random.default_rng(6)
        for _ in range(20):
            result = mat.scatter(Ray(Point3(0, 2, 0), Vec3(0, -2, 0)), make_hit(), rng)
            assert result.scattered_ray.direction == Vec3(0, -1, 0)

    def test_total_internal_reflection_always_reflects(self):
        mat = Dielectric(1.5)
        # Outward normal +z, ray inside the glass heading out at a grazing angle
        hit = make_hit(normal=Vec3(0, 0, 1))
        rng = np.random.default_rng(7)
        for _ in range(20):
            result = mat.scatter(Ray(Point3(0, 0, 0), Vec3(1, 0, 0.2)), hit, rng)
            assert result.scattered_ray.direction == Vec3(1, 0, -0.2)

    def test_mixes_reflection_and_refraction(self):
        mat = Dielectric(1.5)
        hit = make_hit(normal=Vec3(0, 1, 0))
        rng = np.random.default_rng(8)
        ups = 0
        downs = 0
        for _ in range(400):
            result = mat.scatter(Ray(Point3(-1, 1, 0), Vec3(1, -0.2, 0)), hit, rng)
            if result.scattered_ray.direction.y > 0:
                ups += 1
            else:
                downs += 1
        assert ups > 0
        assert downs > 0

    def test_hollow_shell_normal(self):
        # Exiting the inner (negative radius) sphere of a bubble
        glass = Dielectric(1.5)
        inner = Sphere(Point3(0, 0, 0), -0.45, glass)
        ray = Ray(Point3(0, 0, 5), Vec3(0, 0, -1))
        hit = inner.hit(ray, 0.001, math.inf)
        assert hit.normal == Vec3(0, 0, -1)
        result = glass.scatter(ray, hit, np.random.default_rng(9))
        assert result.scattered_ray.direction.is_finite()
