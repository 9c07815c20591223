"""Ray data structure and vector utilities.

This module provides the Ray dataclass and the small set of vector
operations the intersection and shading code relies on. All functions are
Taichi functions and can only be called from inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 1.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 2.0)  # (0, 0, -1)
"""

import math
from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

from rmtracer.errors import ConfigurationError

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Integer RGB triple used for shaded and accumulated colors
ivec3 = tm.ivec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Expected to be
            unit length before intersection tests, since the quadratic uses
            dot(direction, direction) directly. This is not enforced.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def normalize(v: vec3) -> vec3:
    """Divide a vector by its magnitude.

    Zero-length input is not guarded and yields NaN components.
    """
    return v / length(v)


# =============================================================================
# Python-side Validation
# =============================================================================


def as_triple(value: Sequence[float], name: str) -> tuple[float, float, float]:
    """Convert a 3-element sequence to a float tuple, validating its shape.

    Args:
        value: Sequence of three numbers.
        name: Label used in the error message.

    Returns:
        The components as a tuple of floats.

    Raises:
        ConfigurationError: If value is not a sequence of three finite numbers.
    """
    try:
        components = tuple(float(v) for v in value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be 3 numbers, got {value!r}") from e
    if len(components) != 3:
        raise ConfigurationError(f"{name} must have 3 components, got {len(components)}")
    if not all(math.isfinite(v) for v in components):
        raise ConfigurationError(f"{name} must be finite, got {components}")
    return components
