"""Taichi-based sphere ray caster.

This package renders a still image by casting rays from a fixed viewpoint
through a virtual screen into a scene of flat-colored spheres, resolving the
nearest hit per ray and shading it with a view-dependent blend term. Pixels
are antialiased by averaging jittered samples.

Subpackages:
    core: Ray primitives, the accumulation kernels and the Renderer facade
    camera: Screen camera mapping pixels to primary rays
    geometry: Sphere primitive and the primitive-kind dispatch
    scene: Scene storage, nearest-hit resolution, construction and config
    preview: PPM/PNG export and Matplotlib preview

Taichi must be initialized (ti.init) before importing the subpackages,
since they allocate Taichi fields at import time.
"""

__version__ = "0.1.0"
