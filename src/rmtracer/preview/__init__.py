"""Preview module for output and visualization.

Components:
    export: Plain-text PPM (P3) writer and PNG export
    display: Matplotlib-based static preview

Example:
    >>> from rmtracer.preview import show_preview, write_ppm
    >>> image = renderer.render()
    >>> write_ppm("out.ppm", image, width=200, height=200)
    >>> show_preview(image)
"""

from rmtracer.preview.display import show_preview, to_display_array
from rmtracer.preview.export import (
    clamp_channels,
    format_ppm,
    image_to_uint8,
    save_png_from_array,
    write_ppm,
)

__all__ = [
    # Display functions
    "show_preview",
    "to_display_array",
    # Export functions
    "write_ppm",
    "format_ppm",
    "clamp_channels",
    "image_to_uint8",
    "save_png_from_array",
]
