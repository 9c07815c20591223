"""Scene storage, nearest-hit resolution and shading.

Primitives are stored as tagged variants in preallocated Taichi fields: one
kind tag per object slot plus per-kind parameter arrays indexed by the same
slot. Objects are tested in insertion order.

Nearest-hit resolution narrows the accepted range [t_min, t_max) every time
an object is hit, so anything behind the current closest surface is
rejected by the intersection test itself. The final color therefore only
depends on the nearest surface, never on insertion order.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rmtracer.scene.intersection import add_sphere, clear_scene, resolve
    >>> clear_scene()
    >>> add_sphere(vec3(0, 0, -1), 0.5, vec3(1, 0, 0))
    >>> # Use resolve within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from rmtracer.core.ray import Ray, dot, ivec3, vec3
from rmtracer.geometry.hittable import (
    PrimitiveKind,
    intersect_primitive,
    primitive_color,
    primitive_normal,
)
from rmtracer.geometry.sphere import Sphere


@ti.dataclass
class ResolveResult:
    """Outcome of resolving one ray against the whole scene.

    Attributes:
        hit: 1 if any object was hit, 0 if the background was used.
        t: Ray parameter of the nearest hit. Only valid if hit == 1.
        color: Integer RGB color, either the shaded nearest surface or the
            background gradient. Channels may exceed 255.
    """

    hit: ti.i32
    t: ti.f32
    color: ivec3


# Maximum number of primitives supported in the scene
MAX_OBJECTS = 1024

# Scale applied to the [0, 1] blend factor when shading. Face-on surfaces
# with a full channel therefore shade to 256.
SHADE_SCALE = 256.0

# Primitive storage: kind tag plus Structure of Arrays payloads
object_kinds = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
sphere_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all primitives from the scene.

    Resets the object count. Field data is overwritten when new primitives
    are added.
    """
    num_objects[None] = 0


def add_sphere(center: vec3, radius: float, color: vec3) -> int:
    """Append a sphere to the scene.

    No validation is done here; use SceneManager for checked construction.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        color: Flat RGB color in [0, 1].

    Returns:
        The slot index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of objects is exceeded.
    """
    idx = num_objects[None]
    if idx >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")
    object_kinds[idx] = int(PrimitiveKind.SPHERE)
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_colors[idx] = color
    num_objects[None] = idx + 1
    return idx


def get_object_count() -> int:
    """Get the number of objects in the scene."""
    return int(num_objects[None])


@ti.func
def _load_sphere(i: ti.i32) -> Sphere:
    return Sphere(center=sphere_centers[i], radius=sphere_radii[i], color=sphere_colors[i])


# =============================================================================
# Shading
# =============================================================================


@ti.func
def shade(direction: vec3, normal: vec3, color: vec3) -> ivec3:
    """Shade a hit with the view-dependent blend term.

    blend = 1 - (1 + d.n) / 2 is 1 for a surface facing the ray head-on and
    0 for one facing directly away. The result is truncated to integers.

    Args:
        direction: The ray direction.
        normal: Unit surface normal at the hit.
        color: Flat object color in [0, 1].

    Returns:
        The shaded integer color, unclamped.
    """
    blend = 1.0 - (1.0 + dot(direction, normal)) / 2.0
    return ti.cast(blend * SHADE_SCALE * color, ti.i32)


@ti.func
def background_color(direction: vec3) -> ivec3:
    """Radial gradient used when a ray hits nothing.

    Red and green fade from 255 at the view axis to 0 once the xy length of
    the direction reaches 1. Blue stays at 255.
    """
    s = ti.sqrt(direction.x * direction.x + direction.y * direction.y)
    lerp = ti.min(1.0, s)
    value = ti.cast(255.0 * (1.0 - lerp), ti.i32)
    return ivec3(value, value, 255)


# =============================================================================
# Nearest-hit Resolution
# =============================================================================


@ti.func
def resolve(ray: Ray) -> ResolveResult:
    """Resolve the nearest visible surface along a ray and shade it.

    Args:
        ray: The primary ray.

    Returns:
        A ResolveResult with the shaded nearest surface, or the background
        gradient if no object was hit.
    """
    t_min = 0.0
    t_max = tm.inf
    any_hit = 0
    color = background_color(ray.direction)

    n = num_objects[None]
    for i in range(n):
        kind = object_kinds[i]
        sphere = _load_sphere(i)
        rec = intersect_primitive(kind, sphere, ray, t_min, t_max)
        if rec.hit == 1:
            # Everything tested after this must be strictly closer
            t_max = rec.t
            any_hit = 1
            normal = primitive_normal(kind, sphere, rec.point)
            color = shade(ray.direction, normal, primitive_color(kind, sphere))

    nearest_t = 0.0
    if any_hit == 1:
        nearest_t = t_max

    return ResolveResult(hit=any_hit, t=nearest_t, color=color)
