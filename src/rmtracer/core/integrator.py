"""Per-pixel multi-sample accumulation.

For every pixel and every sample, a jittered primary ray is built by the
camera, resolved against the scene and the resulting integer color is added
to an integer accumulator. The final pixel is the accumulator divided by the
number of samples with integer division. Nothing is clamped, so channels
above 255 are passed on to the image sink unchanged.

Scanlines are produced top row first. By default the loop runs y from the
screen height down to 0 inclusive, which yields height + 1 rows. Passing
inclusive_scanlines=False renders exactly height rows, y = height - 1 down
to 0.

Jitter is drawn on the host from a numpy Generator, one (rows, width, 2)
array per sample pass, and passed to the kernel. A seeded render is
therefore reproducible even though pixels are evaluated in parallel.

Example:
    >>> import numpy as np
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rmtracer.core.integrator import (
    ...     get_image_numpy, render_samples, setup_render_target
    ... )
    >>> from rmtracer.scene.default_scene import create_default_scene
    >>> from rmtracer.camera.screen import setup_camera
    >>>
    >>> scene, camera, _ = create_default_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(camera.width, camera.height)
    >>> render_samples(camera.sample_count, np.random.default_rng(7))
    >>> image = get_image_numpy()  # (201, 200, 3) int32
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from rmtracer.camera.screen import get_ray, is_camera_ready
from rmtracer.core.ray import Ray, ivec3, vec3
from rmtracer.errors import ConfigurationError
from rmtracer.scene.intersection import resolve

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# One extra scanline for the inclusive loop
MAX_SCANLINES = MAX_IMAGE_HEIGHT + 1

# Active image size
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())
_scanlines = ti.field(dtype=ti.i32, shape=())
_top_y = ti.field(dtype=ti.i32, shape=())

# Integer color accumulator and averaged output, indexed [row, x] with row 0
# being the top scanline
_accumulator = ti.Vector.field(3, dtype=ti.i32, shape=(MAX_SCANLINES, MAX_IMAGE_WIDTH))
_image = ti.Vector.field(3, dtype=ti.i32, shape=(MAX_SCANLINES, MAX_IMAGE_WIDTH))

# Number of sample passes accumulated so far
_total_samples = ti.field(dtype=ti.i32, shape=())

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def scanline_count(height: int, inclusive_scanlines: bool = True) -> int:
    """Number of rows the renderer produces for a given screen height."""
    return height + 1 if inclusive_scanlines else height


def setup_render_target(width: int, height: int, inclusive_scanlines: bool = True) -> None:
    """Initialize the render target buffers.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Screen height in pixels (max MAX_IMAGE_HEIGHT).
        inclusive_scanlines: Render height + 1 rows (y = height .. 0) when
            True, exactly height rows (y = height - 1 .. 0) when False.

    Raises:
        ConfigurationError: If dimensions are not positive or exceed the
            maximum supported size.
    """
    if width <= 0 or height <= 0:
        raise ConfigurationError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ConfigurationError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _scanlines[None] = scanline_count(height, inclusive_scanlines)
    _top_y[None] = height if inclusive_scanlines else height - 1
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the accumulator and output buffers."""
    _accumulator.fill(0)
    _image.fill(0)
    _total_samples[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the output dimensions as (width, scanlines)."""
    return int(_image_width[None]), int(_scanlines[None])


def get_screen_height() -> int:
    """Get the configured screen height (the PPM header height)."""
    return int(_image_height[None])


def get_total_samples() -> int:
    """Get the number of samples accumulated per pixel so far."""
    return int(_total_samples[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def _check_ready() -> None:
    _check_render_target_initialized()
    if not is_camera_ready():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _accumulate_sample(
    jitter: ti.types.ndarray(dtype=ti.f32, ndim=3),
    width: ti.i32,
    rows: ti.i32,
    top_y: ti.i32,
):
    """Trace one jittered sample through every pixel and accumulate it.

    Args:
        jitter: Sub-pixel offsets of shape (rows, width, 2) in [0, 1).
        width: Image width in pixels.
        rows: Number of scanlines.
        top_y: Scanline coordinate of row 0.
    """
    for row, x in ti.ndrange(rows, width):
        y = top_y - row
        ray = get_ray(x, y, jitter[row, x, 0], jitter[row, x, 1])
        result = resolve(ray)
        _accumulator[row, x] += result.color


@ti.kernel
def _average_samples(width: ti.i32, rows: ti.i32, sample_count: ti.i32):
    """Divide the accumulator by the sample count into the output buffer."""
    for row, x in ti.ndrange(rows, width):
        _image[row, x] = _accumulator[row, x] // sample_count


@ti.kernel
def _render_single_pixel(
    x: ti.i32,
    y: ti.i32,
    jitter: ti.types.ndarray(dtype=ti.f32, ndim=2),
    sample_count: ti.i32,
) -> ivec3:
    """Render one pixel with the given per-sample jitters.

    Args:
        x: Pixel column.
        y: Scanline coordinate (0 = bottom).
        jitter: Sub-pixel offsets of shape (sample_count, 2).
        sample_count: Number of samples to average.

    Returns:
        The averaged integer color.
    """
    total = ivec3(0, 0, 0)
    ti.loop_config(serialize=True)
    for s in range(sample_count):
        ray = get_ray(x, y, jitter[s, 0], jitter[s, 1])
        result = resolve(ray)
        total += result.color
    return total // sample_count


# Probe fields for tracing a single ray from Python
_probe_hit = ti.field(dtype=ti.i32, shape=())
_probe_t = ti.field(dtype=ti.f32, shape=())
_probe_color = ti.Vector.field(3, dtype=ti.i32, shape=())


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3):
    result = resolve(Ray(origin=origin, direction=direction))
    _probe_hit[None] = result.hit
    _probe_t[None] = result.t
    _probe_color[None] = result.color


# =============================================================================
# Public Rendering API
# =============================================================================


def render_samples(num_samples: int, rng: np.random.Generator) -> None:
    """Accumulate sample passes over the whole image.

    Can be called repeatedly; get_image_numpy() averages over every pass
    accumulated since the last clear.

    Args:
        num_samples: Number of jittered samples to add per pixel.
        rng: Random stream the jitter is drawn from.

    Raises:
        RuntimeError: If the render target or camera has not been set up.
    """
    _check_ready()

    width, rows = get_image_dimensions()
    top_y = int(_top_y[None])

    for _ in range(num_samples):
        jitter = rng.random((rows, width, 2), dtype=np.float32)
        _accumulate_sample(jitter, width, rows, top_y)
        _total_samples[None] += 1


def get_image_numpy() -> npt.NDArray[np.int32]:
    """Get the averaged image as a NumPy array.

    Returns:
        Array of shape (scanlines, width, 3), dtype int32, top row first.
        Values are not clamped.

    Raises:
        RuntimeError: If the render target is not set up or no sample has
            been rendered yet.
    """
    _check_render_target_initialized()

    samples = get_total_samples()
    if samples == 0:
        raise RuntimeError("No samples rendered yet. Call render_samples() first.")

    width, rows = get_image_dimensions()
    _average_samples(width, rows, samples)

    full_image = _image.to_numpy()
    return full_image[:rows, :width, :].astype(np.int32)


def render_pixel(
    x: int,
    y: int,
    jitters: Sequence[tuple[float, float]],
) -> tuple[int, int, int]:
    """Render a single pixel with explicit jitters.

    This is a Python-callable function for testing. The averaging follows
    exactly the same rules as the full-image render.

    Args:
        x: Pixel column (0 = left).
        y: Scanline coordinate (0 = bottom).
        jitters: One (jx, jy) pair per sample, each in [0, 1).

    Returns:
        Tuple of (R, G, B) integer values.

    Raises:
        ConfigurationError: If no jitters are given.
        RuntimeError: If the camera has not been set up.
    """
    if len(jitters) == 0:
        raise ConfigurationError("At least one sample is required")
    if not is_camera_ready():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")

    jitter = np.asarray(jitters, dtype=np.float32).reshape(len(jitters), 2)
    color = _render_single_pixel(x, y, np.ascontiguousarray(jitter), len(jitters))
    return (int(color[0]), int(color[1]), int(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[bool, float, tuple[int, int, int]]:
    """Resolve one ray against the scene from Python.

    Args:
        origin: Ray origin.
        direction: Ray direction, used as given.

    Returns:
        Tuple of (hit, t, color). t is 0.0 when nothing was hit.
    """
    _trace_single_ray(tm.vec3(*origin), tm.vec3(*direction))
    color = _probe_color[None]
    return (
        bool(_probe_hit[None]),
        float(_probe_t[None]),
        (int(color[0]), int(color[1]), int(color[2])),
    )
