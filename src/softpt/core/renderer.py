"""Frame driver: turns the integrator into finished 8-bit images.

``render_image`` is the one-shot entry point: set up camera and render
target, trace ``samples_per_pixel`` paths per pixel, average them and tone
map to 8-bit RGB. ``ProgressiveRenderer`` keeps the render target alive
between calls so samples can be added in batches, e.g. for a preview that
refines over time.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softpt.core.renderer import RenderConfig, render_image
    >>> from softpt.scene.default_scene import build_scene
    >>>
    >>> pixels = render_image(
    ...     128, 128,
    ...     camera_position=(0.0, 0.5, -1.0),
    ...     camera_target=(0.0, 0.0, 0.0),
    ...     camera_up=(0.0, 1.0, 0.0),
    ...     samples_per_pixel=4,
    ...     scene=build_scene(),
    ... )
    >>> pixels.shape
    (128, 128, 3)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Generator
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from softpt.camera.look_at import LookAtCamera, setup_camera
from softpt.core.integrator import (
    MAX_BOUNCES,
    accumulate_samples,
    check_image_dimensions,
    clear_render_target,
    get_radiance_numpy,
    get_total_samples,
    setup_render_target,
)
from softpt.preview.display import radiance_to_uint8
from softpt.scene.manager import Scene, upload_scene

logger = logging.getLogger(__name__)

# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]

# Seeds are passed to the kernels as i32
_MAX_SEED = 2**31 - 1


@dataclass(frozen=True)
class RenderConfig:
    """Settings shared by every sample of a render.

    Attributes:
        max_bounces: Bounce budget per path. Bounce 0 is the primary ray.
        use_sky_color: Give escaped rays a vertical sky gradient instead of
            black.
        seed: Seed of the per-pixel random streams. Equal seeds give
            bit-identical images.
    """

    max_bounces: int = MAX_BOUNCES
    use_sky_color: bool = False
    seed: int = 0

    def __post_init__(self) -> None:
        if self.max_bounces < 0:
            raise ValueError(f"max_bounces must be non-negative, got {self.max_bounces}")
        if not 0 <= self.seed <= _MAX_SEED:
            raise ValueError(f"seed must be in [0, {_MAX_SEED}], got {self.seed}")


def render_image(
    width: int,
    height: int,
    camera_position: tuple[float, float, float],
    camera_target: tuple[float, float, float],
    camera_up: tuple[float, float, float],
    samples_per_pixel: int,
    config: RenderConfig | None = None,
    scene: Scene | None = None,
) -> npt.NDArray[np.uint8]:
    """Render one frame and return its pixels.

    Each pixel is the average of ``samples_per_pixel`` path samples,
    saturated to [0, 1] and scaled to [0, 255].

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        camera_position: Camera position in world space.
        camera_target: Point the camera looks at.
        camera_up: Approximate up direction.
        samples_per_pixel: Number of paths averaged per pixel (>= 1).
        config: Render settings; defaults to RenderConfig().
        scene: Scene to upload before rendering. If None, the scene
            currently uploaded to the scene fields is used.

    Returns:
        uint8 array of shape (height, width, 3), row 0 at the top.

    Raises:
        ValueError: If dimensions, sample count or camera are invalid.
        HemisphereSamplingError: If a sampled bounce direction broke the
            hemisphere postcondition.
    """
    if samples_per_pixel < 1:
        raise ValueError(f"samples_per_pixel must be at least 1, got {samples_per_pixel}")
    check_image_dimensions(width, height)
    camera = LookAtCamera(position=camera_position, target=camera_target, up=camera_up)
    config = config if config is not None else RenderConfig()

    # Nothing global is written until every argument has been accepted
    if scene is not None:
        upload_scene(scene)

    setup_camera(camera)
    setup_render_target(width, height)

    start_time = time.perf_counter()
    accumulate_samples(
        num_samples=samples_per_pixel,
        max_bounces=config.max_bounces,
        use_sky_color=config.use_sky_color,
        seed=config.seed,
    )
    elapsed = time.perf_counter() - start_time
    logger.info(
        f"Rendered {width}x{height} at {samples_per_pixel} spp in {elapsed:.3f}s"
    )

    return radiance_to_uint8(get_radiance_numpy())


class ProgressiveRenderer:
    """A renderer that accumulates samples over several calls.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        config: Settings used for every batch.
    """

    def __init__(self, width: int, height: int, config: RenderConfig | None = None) -> None:
        """Initialize the progressive renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            config: Render settings; defaults to RenderConfig().

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum.
        """
        self._width = width
        self._height = height
        self.config = config if config is not None else RenderConfig()
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return get_total_samples()

    def reset(self) -> None:
        """Discard accumulated samples, keeping the image dimensions."""
        clear_render_target()

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and reset the accumulator."""
        self._width = width
        self._height = height
        setup_render_target(width, height)

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Add samples in batches with an optional progress callback.

        Args:
            num_samples: Total number of samples to add.
            batch_size: Number of samples to render before each callback.
            callback: Optional callback called after each batch with
                (current_total_samples, target_total_samples).
        """
        for _ in self.render_progressive(num_samples, batch_size, callback):
            pass

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Add samples in batches, yielding progress after each batch.

        Args:
            num_samples: Total number of samples to add.
            batch_size: Number of samples to render before each yield.
            callback: Optional callback called before each yield.

        Yields:
            Tuple of (current_total_samples, target_total_samples).
        """
        if num_samples <= 0:
            return
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")

        target_samples = self.sample_count + num_samples

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            accumulate_samples(
                num_samples=batch,
                max_bounces=self.config.max_bounces,
                use_sky_color=self.config.use_sky_color,
                seed=self.config.seed,
            )
            remaining -= batch
            logger.debug(f"Accumulated {self.sample_count}/{target_samples} samples")

            if callback is not None:
                callback(self.sample_count, target_samples)
            yield (self.sample_count, target_samples)

    def get_radiance_numpy(self) -> npt.NDArray[np.float32]:
        """Get the sample-averaged radiance, shape (height, width, 3)."""
        return get_radiance_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the tone mapped 8-bit image, shape (height, width, 3)."""
        return radiance_to_uint8(get_radiance_numpy())

    def save_image(self, filepath: str) -> None:
        """Save the current image as a PNG file."""
        from softpt.preview.export import save_png

        save_png(self.get_image_uint8(), filepath)

    def __repr__(self) -> str:
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )
