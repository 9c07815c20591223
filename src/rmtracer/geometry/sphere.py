"""Sphere primitive with ray-sphere intersection, normal and flat color.

The intersection solves |origin + t * direction - center|^2 = radius^2 with
the textbook quadratic

    a = dot(d, d),  b = 2 * dot(d, oc),  c = dot(oc, oc) - r^2
    discriminant = b^2 - 4ac

A discriminant of exactly zero (a tangent ray) counts as a miss. Only the
nearer root is considered: if it falls outside [t_min, t_max) the sphere
reports no hit, even when the farther root would be in range.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rmtracer.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5,
    ...                 color=ti.math.vec3(1, 0, 0))
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti

from rmtracer.core.ray import Ray, dot, normalize, ray_at, vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point, radius and flat color.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float, validated when the
            sphere is added through the SceneManager).
        color: Flat RGB color, each channel in [0, 1].
    """

    center: vec3
    radius: ti.f32
    color: vec3


@ti.dataclass
class HitResult:
    """Result of testing one ray against one primitive.

    Attributes:
        hit: 1 if the ray hit inside the requested range, 0 otherwise.
        t: The ray parameter of the hit. Only valid if hit == 1.
        point: The hit position. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3


@ti.func
def make_miss() -> HitResult:
    """Create a HitResult indicating no intersection."""
    return HitResult(hit=0, t=0.0, point=vec3(0.0, 0.0, 0.0))


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: ti.f32, t_max: ti.f32) -> HitResult:
    """Test for ray-sphere intersection.

    Args:
        ray: The ray to test. Its direction is used as-is for the quadratic
            coefficient a.
        sphere: The sphere to test against.
        t_min: Smallest accepted t (inclusive).
        t_max: Largest accepted t (exclusive).

    Returns:
        A HitResult for the nearer root, or a miss.
    """
    oc = ray.origin - sphere.center

    a = dot(ray.direction, ray.direction)
    b = 2.0 * dot(ray.direction, oc)
    c = dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = b * b - 4.0 * a * c

    # Initialize result (Taichi requires outer-scope declaration)
    result = make_miss()

    if discriminant > 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t_far = (-b + sqrt_d) / (2.0 * a)
        t_near = (-b - sqrt_d) / (2.0 * a)
        t = ti.min(t_far, t_near)

        if t >= t_min and t < t_max:
            result = HitResult(hit=1, t=t, point=ray_at(ray, t))

    return result


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal at a point on the sphere surface."""
    return normalize(point - sphere.center)


@ti.func
def sphere_color(sphere: Sphere) -> vec3:
    """Flat color of the sphere, unaffected by lighting."""
    return sphere.color


@ti.func
def make_sphere(center: vec3, radius: ti.f32, color: vec3) -> Sphere:
    """Create a sphere from center, radius and color inside a kernel."""
    return Sphere(center=center, radius=radius, color=color)
