"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere
- Ray starting inside sphere
- Sphere behind the ray
- Rays leaving a sphere surface do not re-hit it at t = 0
"""

import taichi as ti


def _run_hit(origin, direction, center, radius):
    """Run hit_sphere in a kernel and return (hit, t, normal at hit)."""
    from tinyray.geometry.sphere import Sphere, hit_sphere, sphere_normal, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, c: vec3, r: ti.f32):
        sphere = Sphere(center=c, radius=r)
        record = hit_sphere(o, d, sphere)
        hit[None] = record.hit
        t_val[None] = record.t
        if record.hit == 1:
            normal[None] = sphere_normal(sphere, o + d * record.t)

    test_kernel(vec3(*origin), vec3(*direction), vec3(*center), radius)
    return hit[None], t_val[None], normal[None]


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_make_sphere(self):
        """Test make_sphere convenience function."""
        from tinyray.geometry.sphere import make_sphere, vec3

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


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_hit_sphere_direct_hit(self):
        """Test ray hitting sphere head-on from outside."""
        hit, t, n = _run_hit((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)

        assert hit == 1
        # Should hit at z=1 (front of sphere), so t=4
        assert abs(t - 4.0) < 1e-5
        # Normal should point outward: (0, 0, 1)
        assert abs(n[0]) < 1e-5
        assert abs(n[1]) < 1e-5
        assert abs(n[2] - 1.0) < 1e-5

    def test_hit_sphere_miss(self):
        """Test ray passing beside the sphere."""
        hit, _, _ = _run_hit((0.0, 2.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)
        assert hit == 0

    def test_hit_sphere_from_inside(self):
        """Test ray starting at the center hits the far side."""
        hit, t, n = _run_hit((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0), 2.0)

        assert hit == 1
        assert abs(t - 2.0) < 1e-5
        # Outward normal at the exit point
        assert abs(n[0] - 1.0) < 1e-5

    def test_sphere_behind_ray(self):
        """Test that a sphere behind the origin is not hit."""
        hit, _, _ = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, 5.0), 1.0)
        assert hit == 0

    def test_ray_leaving_surface_skips_zero_root(self):
        """Test a ray starting on the surface reports the far root, not t = 0."""
        hit, t, _ = _run_hit((0.0, 0.0, 1.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)

        assert hit == 1
        assert abs(t - 2.0) < 1e-5

    def test_ray_leaving_surface_outward_misses(self):
        """Test a ray starting on the surface and heading outward misses."""
        hit, _, _ = _run_hit((0.0, 0.0, 1.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 1.0)
        assert hit == 0

    def test_default_scene_ivory_sphere(self):
        """Test the ivory sphere of the default scene from straight in front."""
        hit, t, n = _run_hit((-3.0, 0.0, 0.0), (0.0, 0.0, -1.0), (-3.0, 0.0, -16.0), 2.0)

        assert hit == 1
        assert abs(t - 14.0) < 1e-5
        assert abs(n[2] - 1.0) < 1e-5
