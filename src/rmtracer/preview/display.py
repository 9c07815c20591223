"""Matplotlib-based preview of rendered images.

Example:
    >>> from rmtracer.preview.display import show_preview
    >>> image = renderer.render()
    >>> show_preview(image, title="Default scene")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from rmtracer.preview.export import image_to_uint8


def to_display_array(image: npt.NDArray[np.integer]) -> npt.NDArray[np.float32]:
    """Convert an integer image to float32 in [0, 1] for display.

    Channels above 255 (the shading overflow) saturate to 1.0.
    """
    return image_to_uint8(image).astype(np.float32) / 255.0


def show_preview(
    image: npt.NDArray[np.integer],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (6, 6),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Args:
        image: Integer image of shape (rows, width, 3), top row first.
        title: Figure title. Defaults to the image size.
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = to_display_array(image)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image, interpolation="nearest")
    ax.axis("off")

    if title is None:
        rows, cols = image.shape[:2]
        title = f"Render Preview - {cols}x{rows}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
