"""Closed set of primitive kinds and the hittable capability dispatch.

Every scene object is a tagged variant: a PrimitiveKind plus the parameter
payload of that kind. The three capabilities (intersect, normal, color) are
each a single Taichi function that branches on the kind, so adding a
primitive means adding one enum member and one branch per function.
"""

from enum import IntEnum

import taichi as ti

from rmtracer.core.ray import Ray, vec3
from rmtracer.geometry.sphere import (
    HitResult,
    Sphere,
    hit_sphere,
    make_miss,
    sphere_color,
    sphere_normal,
)


class PrimitiveKind(IntEnum):
    """Enumeration of supported primitive kinds."""

    SPHERE = 0


@ti.func
def intersect_primitive(
    kind: ti.i32, sphere: Sphere, ray: Ray, t_min: ti.f32, t_max: ti.f32
) -> HitResult:
    """Intersect a ray with a primitive of the given kind.

    Unknown kinds never hit.
    """
    result = make_miss()
    if kind == int(PrimitiveKind.SPHERE):
        result = hit_sphere(ray, sphere, t_min, t_max)
    return result


@ti.func
def primitive_normal(kind: ti.i32, sphere: Sphere, point: vec3) -> vec3:
    """Unit surface normal of a primitive at a point on its surface."""
    normal = vec3(0.0, 0.0, 0.0)
    if kind == int(PrimitiveKind.SPHERE):
        normal = sphere_normal(sphere, point)
    return normal


@ti.func
def primitive_color(kind: ti.i32, sphere: Sphere) -> vec3:
    """Flat color of a primitive."""
    color = vec3(0.0, 0.0, 0.0)
    if kind == int(PrimitiveKind.SPHERE):
        color = sphere_color(sphere)
    return color
