"""Image export for rendered images.

Supported formats:
    - PPM, plain-text "P3" variant (the primary output)
    - PNG (8-bit via Pillow)

The P3 layout is a header ``P3\\n<width> <height>\\n255\\n`` followed by one
``"R G B\\n"`` line per pixel in the order given, top scanline first. The
renderer does not clamp, so channel values above 255 are written as-is
unless clamping is requested here.

Example:
    >>> from rmtracer.preview.export import write_ppm
    >>> write_ppm("out.ppm", image, width=200, height=200)
"""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# Maximum channel value declared in the PPM header
PPM_MAX_VALUE = 255


def clamp_channels(image: npt.NDArray[np.integer]) -> npt.NDArray[np.int32]:
    """Clamp integer channels to [0, 255]."""
    return np.clip(image, 0, PPM_MAX_VALUE).astype(np.int32)


def format_ppm(
    image: npt.NDArray[np.integer],
    *,
    width: int | None = None,
    height: int | None = None,
    clamp: bool = False,
) -> str:
    """Format an image as plain-text P3 PPM.

    Args:
        image: Integer image of shape (rows, width, 3), top row first.
        width: Header width. Defaults to the image width.
        height: Header height. Defaults to the number of rows. The renderer
            passes the screen height, which is one less than the row count
            when the inclusive scanline loop is used.
        clamp: Clamp channels to [0, 255] before writing.

    Returns:
        The complete file contents.

    Raises:
        ValueError: If the image is not a (rows, width, 3) array.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (rows, width, 3), got {image.shape}")

    rows, cols = image.shape[:2]
    header_width = cols if width is None else width
    header_height = rows if height is None else height

    pixels = clamp_channels(image) if clamp else image.astype(np.int64)

    lines = [f"P3\n{header_width} {header_height}\n{PPM_MAX_VALUE}\n"]
    lines.extend(f"{r} {g} {b}\n" for r, g, b in pixels.reshape(-1, 3).tolist())
    return "".join(lines)


def write_ppm(
    target: str | Path | TextIO,
    image: npt.NDArray[np.integer],
    *,
    width: int | None = None,
    height: int | None = None,
    clamp: bool = False,
) -> None:
    """Write an image as plain-text P3 PPM.

    Args:
        target: Output path or an open text stream.
        image: Integer image of shape (rows, width, 3), top row first.
        width: Header width. Defaults to the image width.
        height: Header height. Defaults to the number of rows.
        clamp: Clamp channels to [0, 255] before writing.
    """
    contents = format_ppm(image, width=width, height=height, clamp=clamp)
    if isinstance(target, (str, Path)):
        Path(target).write_text(contents, encoding="ascii", newline="\n")
    else:
        target.write(contents)


def image_to_uint8(image: npt.NDArray[np.integer]) -> npt.NDArray[np.uint8]:
    """Clamp an integer image to [0, 255] and convert it to uint8."""
    return clamp_channels(image).astype(np.uint8)


def save_png_from_array(image: npt.NDArray[np.integer], filepath: str | Path) -> None:
    """Save an integer image as an 8-bit PNG.

    Channels are clamped to [0, 255]; every row of the array is written.

    Args:
        image: Integer image of shape (rows, width, 3), top row first.
        filepath: Output file path.
    """
    pil_image = PILImage.fromarray(image_to_uint8(image))
    pil_image.save(str(filepath))
