"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere, sphere behind the ray
- Tangent rays
- Ray starting inside sphere under both root policies
- Outward surface normals
"""

import pytest
import taichi as ti


def _run_hit_sphere(origin, direction, center, radius, policy=0):
    """Run hit_sphere in a kernel and return (hit, t)."""
    from raycaster.geometry.sphere import Sphere, hit_sphere, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(
        o: ti.math.vec3,
        d: ti.math.vec3,
        c: ti.math.vec3,
        r: ti.f32,
        root_policy: ti.i32,
    ):
        sphere = Sphere(center=c, radius=r)
        record = hit_sphere(o, ti.math.normalize(d), sphere, root_policy)
        hit[None] = record.hit
        t_val[None] = record.t

    test_kernel(vec3(*origin), vec3(*direction), vec3(*center), radius, policy)
    return hit[None], t_val[None]


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_make_sphere(self):
        """Test make_sphere convenience function."""
        from raycaster.geometry.sphere import make_sphere, vec3

        center_result = ti.field(dtype=ti.math.vec3, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 0.5)
            center_result[None] = sphere.center
            radius_result[None] = sphere.radius

        test_kernel()
        c = center_result[None]
        assert abs(c[0] - 1.0) < 1e-6
        assert abs(c[1] - 2.0) < 1e-6
        assert abs(c[2] - 3.0) < 1e-6
        assert abs(radius_result[None] - 0.5) < 1e-6

    def test_root_policy_values(self):
        """Test the root policy enum values used inside kernels."""
        from raycaster.geometry.sphere import SphereRootPolicy

        assert int(SphereRootPolicy.NEAREST) == 0
        assert int(SphereRootPolicy.FIRST_POSITIVE) == 1


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_hit_sphere_direct_hit(self):
        """Test ray hitting sphere head-on from outside."""
        hit, t = _run_hit_sphere((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 1
        # Front of the sphere is at z = -4
        assert abs(t - 4.0) < 1e-5

    def test_hit_sphere_offset_hit(self):
        """Test ray hitting sphere off-center reports the nearer root."""
        hit, t = _run_hit_sphere((0.0, 0.5, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 1
        # Chord half-length is sqrt(1 - 0.25)
        assert abs(t - (5.0 - 0.75**0.5)) < 1e-5

    def test_hit_sphere_miss(self):
        """Test ray passing beside the sphere."""
        hit, _ = _run_hit_sphere((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (5.0, 0.0, -5.0), 1.0)
        assert hit == 0

    def test_hit_sphere_behind_ray(self):
        """Test sphere entirely behind the ray origin is missed."""
        hit, _ = _run_hit_sphere((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, 5.0), 1.0)
        assert hit == 0

    def test_hit_sphere_tangent(self):
        """Test ray grazing the sphere counts as a hit."""
        hit, t = _run_hit_sphere((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (1.0, 0.0, -5.0), 1.0)
        assert hit == 1
        assert abs(t - 5.0) < 1e-4

    def test_hit_sphere_inside_nearest_reports_negative_root(self):
        """Test ray starting inside the sphere reports the root behind it."""
        from raycaster.geometry.sphere import SphereRootPolicy

        hit, t = _run_hit_sphere(
            (0.0, 0.0, 0.0),
            (0.0, 0.0, -1.0),
            (0.0, 0.0, 0.0),
            2.0,
            policy=int(SphereRootPolicy.NEAREST),
        )
        assert hit == 1
        assert abs(t + 2.0) < 1e-5

    def test_hit_sphere_inside_first_positive_reports_exit(self):
        """Test FIRST_POSITIVE reports the exit point for interior rays."""
        from raycaster.geometry.sphere import SphereRootPolicy

        hit, t = _run_hit_sphere(
            (0.0, 0.0, 0.0),
            (0.0, 0.0, -1.0),
            (0.0, 0.0, 0.0),
            2.0,
            policy=int(SphereRootPolicy.FIRST_POSITIVE),
        )
        assert hit == 1
        assert abs(t - 2.0) < 1e-5

    def test_first_positive_matches_nearest_from_outside(self):
        """Test both policies agree when the ray starts outside."""
        from raycaster.geometry.sphere import SphereRootPolicy

        _, t_nearest = _run_hit_sphere(
            (0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0,
            policy=int(SphereRootPolicy.NEAREST),
        )
        _, t_first = _run_hit_sphere(
            (0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0,
            policy=int(SphereRootPolicy.FIRST_POSITIVE),
        )
        assert t_nearest == pytest.approx(t_first)


class TestSphereNormal:
    """Tests for sphere surface normals."""

    @pytest.mark.parametrize(
        "point,expected",
        [
            ((0.0, 0.0, -4.0), (0.0, 0.0, 1.0)),
            ((1.0, 0.0, -5.0), (1.0, 0.0, 0.0)),
            ((0.0, -1.0, -5.0), (0.0, -1.0, 0.0)),
        ],
    )
    def test_normal_points_outward(self, point, expected):
        """Test normal is the unit vector from center to surface point."""
        from raycaster.geometry.sphere import Sphere, sphere_normal, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(p: ti.math.vec3):
            sphere = Sphere(center=vec3(0.0, 0.0, -5.0), radius=1.0)
            result[None] = sphere_normal(sphere, p)

        test_kernel(vec3(*point))
        n = result[None]
        for i in range(3):
            assert abs(n[i] - expected[i]) < 1e-6
