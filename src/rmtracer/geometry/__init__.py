"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with ray-sphere intersection, normal and color
    hittable: PrimitiveKind tag and the capability dispatch functions

All intersection routines are Taichi functions (@ti.func) and follow the
pattern:
    result = intersect_primitive(kind, payload, ray, t_min, t_max)
"""

from .hittable import PrimitiveKind, intersect_primitive, primitive_color, primitive_normal
from .sphere import HitResult, Sphere, hit_sphere, make_sphere, sphere_color, sphere_normal

__all__ = [
    "Sphere",
    "HitResult",
    "hit_sphere",
    "make_sphere",
    "sphere_normal",
    "sphere_color",
    "PrimitiveKind",
    "intersect_primitive",
    "primitive_normal",
    "primitive_color",
]
