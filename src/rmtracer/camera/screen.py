"""Screen camera mapping a discrete pixel grid onto a virtual image plane.

The camera sits at a fixed position and looks through a rectangular virtual
screen whose lower-left corner is given relative to the camera. A pixel
(x, y) plus a sub-pixel jitter (jx, jy) maps to the ray direction

    offset = ((x + jx) / width * virtual_w, (y + jy) / height * virtual_h, 0)
    direction = normalize(offset + lower_left_corner)

The direction is not taken relative to the camera position; the corner is
already expressed as an offset from the eye.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rmtracer.camera.screen import ScreenCamera, setup_camera, get_ray
    >>>
    >>> camera = ScreenCamera(screen_size=(200, 200), virtual_size=(2.0, 2.0))
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(100, 100, 0.5, 0.5)  # Ray through the screen centre
"""

import math
from dataclasses import dataclass
from typing import Any

import taichi as ti

from rmtracer.core.ray import Ray, as_triple, make_ray, normalize, vec3
from rmtracer.errors import ConfigurationError

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class ScreenCamera:
    """Configuration for the fixed-viewpoint screen camera.

    Attributes:
        screen_size: Output resolution in pixels as (width, height).
        virtual_size: Size of the virtual screen in world units (width, height).
        camera_position: Ray origin shared by every primary ray.
        lower_left_corner: Lower-left corner of the virtual screen, as an
            offset from the camera. Defaults to (-w/2, -h/2, -1) where (w, h)
            is the virtual size.
        sample_count: Number of jittered samples averaged per pixel.

    Raises:
        ConfigurationError: If any size or the sample count is not positive,
            or a position or corner is not three finite numbers.
    """

    screen_size: tuple[int, int] = (200, 200)
    virtual_size: tuple[float, float] = (2.0, 2.0)
    camera_position: tuple[float, float, float] = (0.0, 0.0, 1.0)
    lower_left_corner: tuple[float, float, float] | None = None
    sample_count: int = 1

    def __post_init__(self) -> None:
        width, height = self.screen_size
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Screen size must be positive, got {width}x{height}")
        if not all(math.isfinite(v) and v > 0.0 for v in self.virtual_size):
            raise ConfigurationError(
                f"Virtual screen size must be positive, got {self.virtual_size}"
            )
        if self.sample_count <= 0:
            raise ConfigurationError(
                f"Sample count must be positive, got {self.sample_count}"
            )
        self.camera_position = as_triple(self.camera_position, "Camera position")
        if self.lower_left_corner is None:
            half_w, half_h = self.virtual_half_size
            self.lower_left_corner = (-half_w, -half_h, -1.0)
        else:
            self.lower_left_corner = as_triple(self.lower_left_corner, "Lower-left corner")

    @property
    def virtual_half_size(self) -> tuple[float, float]:
        """Half of the virtual screen size."""
        return self.virtual_size[0] / 2.0, self.virtual_size[1] / 2.0

    @property
    def width(self) -> int:
        return self.screen_size[0]

    @property
    def height(self) -> int:
        return self.screen_size[1]


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_screen_size = ti.Vector.field(2, dtype=ti.i32, shape=())
_virtual_size = ti.Vector.field(2, dtype=ti.f32, shape=())
_camera_position = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())
_sample_count = ti.field(dtype=ti.i32, shape=())

# Flag to track if the camera has been set up
_camera_initialized = ti.field(dtype=ti.i32, shape=())


# =============================================================================
# Camera Setup (Python-side)
# =============================================================================


def setup_camera(camera: ScreenCamera) -> None:
    """Copy a camera configuration into the GPU-accessible fields.

    Must be called before rendering and again whenever the camera changes.

    Args:
        camera: The validated camera configuration.

    Raises:
        ConfigurationError: If the camera was mutated into an invalid
            position or corner after construction. The camera is left
            not ready.
    """
    # Not ready until every field holds the new camera
    _camera_initialized[None] = 0

    position = as_triple(camera.camera_position, "Camera position")
    corner = as_triple(camera.lower_left_corner, "Lower-left corner")

    _screen_size[None] = [camera.screen_size[0], camera.screen_size[1]]
    _virtual_size[None] = [camera.virtual_size[0], camera.virtual_size[1]]
    _camera_position[None] = list(position)
    _lower_left_corner[None] = list(corner)
    _sample_count[None] = camera.sample_count
    _camera_initialized[None] = 1


def is_camera_ready() -> bool:
    """Check whether setup_camera() has been called."""
    return bool(_camera_initialized[None])


def get_sample_count() -> int:
    """Get the configured number of samples per pixel."""
    return int(_sample_count[None])


# =============================================================================
# Ray Generation (Taichi-side)
# =============================================================================


@ti.func
def get_ray(x: ti.i32, y: ti.i32, jitter_x: ti.f32, jitter_y: ti.f32) -> Ray:
    """Generate the primary ray for a pixel and sub-pixel jitter.

    Args:
        x: Pixel column, 0 = left.
        y: Scanline index, 0 = bottom. The renderer passes values from the
            screen height down to 0.
        jitter_x: Horizontal sub-pixel offset in [0, 1).
        jitter_y: Vertical sub-pixel offset in [0, 1).

    Returns:
        A Ray from the camera position through the jittered sample point.
    """
    screen = _screen_size[None]
    virtual = _virtual_size[None]

    sample_x = ti.cast(x, ti.f32) + jitter_x
    sample_y = ti.cast(y, ti.f32) + jitter_y

    offset = vec3(
        sample_x / ti.cast(screen[0], ti.f32) * virtual[0],
        sample_y / ti.cast(screen[1], ti.f32) * virtual[1],
        0.0,
    )
    direction = normalize(offset + _lower_left_corner[None])

    return make_ray(_camera_position[None], direction)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, Any]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with screen_size, virtual_size, position, lower_left and
        sample_count as plain Python tuples.
    """
    screen = _screen_size[None]
    virtual = _virtual_size[None]
    position = _camera_position[None]
    corner = _lower_left_corner[None]

    return {
        "screen_size": (int(screen[0]), int(screen[1])),
        "virtual_size": (float(virtual[0]), float(virtual[1])),
        "position": (float(position[0]), float(position[1]), float(position[2])),
        "lower_left": (float(corner[0]), float(corner[1]), float(corner[2])),
        "sample_count": int(_sample_count[None]),
    }
