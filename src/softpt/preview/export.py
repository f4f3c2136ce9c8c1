"""Image export utilities for rendered images.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from softpt.core.renderer import ProgressiveRenderer
    >>> from softpt.preview.export import save_png
    >>>
    >>> renderer = ProgressiveRenderer(512, 512)
    >>> renderer.render(16)
    >>> save_png(renderer.get_image_uint8(), "output.png")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from softpt.preview.display import radiance_to_uint8


def save_png(image: npt.NDArray[np.uint8], filepath: str) -> None:
    """Save an 8-bit RGB image as a PNG file.

    Args:
        image: Image array of shape (H, W, 3) with dtype uint8, row 0 at
            the top.
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the array is not an (H, W, 3) uint8 image.
    """
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(
            f"Expected a uint8 image of shape (H, W, 3), got {image.dtype} {image.shape}"
        )

    pil_image = PILImage.fromarray(np.ascontiguousarray(image))
    pil_image.save(filepath)


def save_png_from_radiance(image: npt.NDArray[np.float32], filepath: str) -> None:
    """Tone map a linear radiance image and save it as a PNG file.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).
    """
    save_png(radiance_to_uint8(image), filepath)
