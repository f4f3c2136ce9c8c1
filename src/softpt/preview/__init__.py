"""Preview module for tone mapping and image output.

Example:
    >>> from softpt.preview import radiance_to_uint8, save_png
    >>> save_png(radiance_to_uint8(radiance), "output.png")
"""

from softpt.preview.display import radiance_to_uint8, saturate
from softpt.preview.export import save_png, save_png_from_radiance

__all__ = [
    "saturate",
    "radiance_to_uint8",
    "save_png",
    "save_png_from_radiance",
]
