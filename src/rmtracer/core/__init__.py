"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities
    integrator: Per-pixel multi-sample accumulation kernels
    renderer: Renderer facade with batching and progress callbacks

All compute-intensive operations use Taichi kernels. Pixels are evaluated
in parallel; jitter is drawn on the host from an explicit numpy Generator
so a seeded render is reproducible regardless of thread scheduling.
"""

from .ray import Ray, dot, ivec3, length, make_ray, normalize, ray_at, vec3

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from rmtracer.core.integrator or rmtracer.core.renderer.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "ivec3",
    "length",
    "dot",
    "normalize",
]
