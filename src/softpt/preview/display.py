"""Tone mapping from linear radiance to displayable 8-bit pixels.

The mapping is a plain saturate: every channel is clamped to [0, 1] and
scaled to [0, 255] with truncation. There is no exposure control or gamma
curve, so a radiance of 1.0 or more is full white.

Example:
    >>> import numpy as np
    >>> from softpt.preview.display import radiance_to_uint8
    >>> radiance_to_uint8(np.array([[[0.5, 2.0, -1.0]]], dtype=np.float32))
    array([[[127, 255,   0]]], dtype=uint8)
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def saturate(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Clamp an image to [0, 1].

    Non-finite values (NaN, +Inf, -Inf) from degenerate geometry become 0
    before clamping, so they show as black.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Float32 image in [0, 1] range.
    """
    result = np.nan_to_num(image, nan=0.0, posinf=0.0, neginf=0.0)
    return np.clip(result, 0.0, 1.0).astype(np.float32)


def radiance_to_uint8(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.uint8]:
    """Convert linear radiance to 8-bit pixels.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    return (saturate(image) * np.float32(255.0)).astype(np.uint8)
