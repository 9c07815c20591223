"""Renderer facade over the integrator.

The Renderer owns the render target for one camera and the random stream
used for jitter. It supports:
- One-shot rendering of the camera's full sample count
- Batched rendering with progress callbacks
- A generator form for callers that want to interleave their own work

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rmtracer.core.renderer import Renderer
    >>> from rmtracer.scene.default_scene import create_default_scene
    >>>
    >>> scene, camera, seed = create_default_scene()
    >>> renderer = Renderer(camera, seed=seed)
    >>> image = renderer.render()
    >>> renderer.save("out.ppm")
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import numpy.typing as npt

from rmtracer.camera.screen import ScreenCamera, setup_camera
from rmtracer.core.integrator import (
    clear_render_target,
    get_image_numpy,
    get_total_samples,
    render_samples,
    scanline_count,
    setup_render_target,
)

# Type alias for progress callback
# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders the current scene through one camera.

    Attributes:
        camera: The camera configuration being rendered.
        inclusive_scanlines: Whether the extra y = 0 scanline is rendered.
        seed: Seed of the jitter stream, or None if it was random.
    """

    def __init__(
        self,
        camera: ScreenCamera,
        *,
        seed: int | None = None,
        inclusive_scanlines: bool = True,
    ) -> None:
        """Set up the camera and render target.

        Args:
            camera: Validated camera configuration.
            seed: Seed for the jitter stream. None draws fresh OS entropy.
            inclusive_scanlines: Render height + 1 rows when True.

        Raises:
            ConfigurationError: If the camera resolution exceeds the
                preallocated buffers.
        """
        self.camera = camera
        self.seed = seed
        self.inclusive_scanlines = inclusive_scanlines
        self._rng = np.random.default_rng(seed)
        setup_camera(camera)
        setup_render_target(camera.width, camera.height, inclusive_scanlines)

    @property
    def width(self) -> int:
        return self.camera.width

    @property
    def height(self) -> int:
        """Screen height, which is also the PPM header height."""
        return self.camera.height

    @property
    def scanlines(self) -> int:
        """Number of rows in the output image."""
        return scanline_count(self.camera.height, self.inclusive_scanlines)

    @property
    def sample_count(self) -> int:
        """Number of samples accumulated per pixel so far."""
        return get_total_samples()

    def reset(self, seed: int | None = None) -> None:
        """Clear the accumulator and restart the jitter stream.

        Args:
            seed: New seed; the original seed is reused when None.
        """
        if seed is not None:
            self.seed = seed
        self._rng = np.random.default_rng(self.seed)
        clear_render_target()

    def render(
        self,
        num_samples: int | None = None,
        batch_size: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> npt.NDArray[np.int32]:
        """Render and return the averaged image.

        Args:
            num_samples: Samples per pixel to add. Defaults to the camera's
                sample count.
            batch_size: Samples rendered between callbacks. Defaults to all
                of them in one batch.
            callback: Optional callback called after each batch with
                (current_total_samples, target_total_samples).

        Returns:
            Integer image of shape (scanlines, width, 3), top row first.
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)
        return self.get_image()

    def render_progressive(
        self,
        num_samples: int | None = None,
        batch_size: int | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render samples in batches, yielding progress after each batch.

        Yields:
            Tuple of (current_total_samples, target_total_samples).
        """
        if num_samples is None:
            num_samples = self.camera.sample_count
        if num_samples <= 0:
            return
        if batch_size is None or batch_size <= 0:
            batch_size = num_samples

        target_samples = self.sample_count + num_samples

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_samples(batch, self._rng)
            remaining -= batch
            yield (self.sample_count, target_samples)

    def get_image(self) -> npt.NDArray[np.int32]:
        """Get the averaged integer image, unclamped."""
        return get_image_numpy()

    def save(self, filepath: str | Path, *, clamp: bool = False) -> None:
        """Save the image, choosing the format from the file extension.

        ``.ppm`` files are written as plain-text P3 with the screen height in
        the header; anything else goes through Pillow.

        Args:
            filepath: Output path.
            clamp: Clamp channels to [0, 255] in PPM output. PNG output is
                always clamped.
        """
        from rmtracer.preview.export import save_png_from_array, write_ppm

        path = Path(filepath)
        image = self.get_image()
        if path.suffix.lower() == ".ppm":
            write_ppm(path, image, width=self.width, height=self.height, clamp=clamp)
        else:
            save_png_from_array(image, path)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"scanlines={self.scanlines}, samples={self.sample_count})"
        )
