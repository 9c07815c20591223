"""Camera module for primary ray generation.

Components:
    screen: Fixed-viewpoint camera looking through a virtual screen

Ray generation maps a pixel (x, y) plus a sub-pixel jitter in [0, 1)^2 onto
the virtual screen and normalizes the offset from the lower-left corner:
    x in [0, width): left to right
    y in [0, height]: bottom to top
"""

from .screen import (
    ScreenCamera,
    get_camera_info,
    get_ray,
    get_sample_count,
    is_camera_ready,
    setup_camera,
)

__all__ = [
    "ScreenCamera",
    "setup_camera",
    "get_ray",
    "get_camera_info",
    "get_sample_count",
    "is_camera_ready",
]
