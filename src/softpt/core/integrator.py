"""Path tracing integrator for Monte Carlo light transport.

The estimator is the depth-bounded recurrence

    L(ray, bounce) = 0                                   if bounce == max_bounces
    L(ray, bounce) = sky(ray) or 0                       if the ray misses
    L(ray, bounce) = emissive + albedo * L(next, bounce + 1) * dot(n, next.dir)

where ``next`` leaves the hit point along a direction drawn from the
hemisphere sampler. The cosine factor is applied explicitly on top of the
hemisphere mapping, so the estimate is not reweighted for the sampling
density.

Taichi functions cannot recurse, so the recurrence is unrolled front to back
with a running throughput (the product of ``albedo * cos`` so far).

Key features:
    - Nearest-hit scene traversal over spheres
    - Hard bounce cutoff (no Russian roulette)
    - Optional sky gradient for escaped rays
    - Per-pixel, per-sample random streams for reproducible output
    - Hemisphere postcondition check, reported as a fatal error

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softpt.core.integrator import accumulate_samples, setup_render_target
    >>> from softpt.camera.look_at import setup_camera
    >>> from softpt.scene.default_scene import create_default_scene
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(256, 256)
    >>> accumulate_samples(num_samples=4)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from softpt.camera.look_at import get_primary_ray
from softpt.core.sampler import init_rng_state, sample_hemisphere
from softpt.core.vector import EPSILON, dot, lerp, normalize
from softpt.materials.material import get_material
from softpt.scene.intersection import intersect_scene, sphere_centers

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Default bounce budget; bounce 0 is the primary ray
MAX_BOUNCES = 6

# Distance the continuation ray is pushed off the surface along the normal
RAY_EPSILON = EPSILON

# Escaped rays blend from black toward this tint by direction.y
SKY_COLOR = vec3(0.25, 0.55, 0.75)


class HemisphereSamplingError(RuntimeError):
    """A sampled bounce direction fell below the surface it left.

    This indicates a broken tangent frame, not a property of the scene, and
    is not meant to be recovered from.
    """


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Sum of sample radiance per pixel, indexed [column, row] with row 0 at the top
_radiance_sum = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))
_sample_count = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# Number of bounce directions that failed the hemisphere postcondition
_sampling_violations = ti.field(dtype=ti.i32, shape=())

# Single-ray probe results
_probe_radiance = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_bounces = ti.field(dtype=ti.i32, shape=())


def check_image_dimensions(width: int, height: int) -> None:
    """Raise ValueError if the dimensions do not fit the render target."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    check_image_dimensions(width, height)

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffers to zero."""
    _radiance_sum.fill(0.0)
    _sample_count.fill(0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def reset_sampling_violations() -> None:
    _sampling_violations[None] = 0


def check_sampling_invariant() -> None:
    """Raise if any bounce direction left on the wrong side of its surface.

    Raises:
        HemisphereSamplingError: If the last kernel launch recorded at least
            one violation.
    """
    violations = int(_sampling_violations[None])
    if violations > 0:
        raise HemisphereSamplingError(
            f"{violations} sampled bounce direction(s) fell below the surface hemisphere"
        )


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def sky_gradient(direction: vec3) -> vec3:
    """Background radiance for an escaped ray when the sky is enabled."""
    return lerp(vec3(0.0, 0.0, 0.0), SKY_COLOR, direction.y)


@ti.func
def trace_path_counted(
    origin: vec3,
    direction: vec3,
    max_bounces: ti.i32,
    use_sky_color: ti.i32,
    rng_state: ti.u32,
):
    """Trace one path and report how many surfaces it bounced off.

    Args:
        origin: Primary ray origin.
        direction: Primary ray direction (normalized).
        max_bounces: Bounce budget. The path is cut off after this many
            surface hits; 0 yields zero radiance.
        use_sky_color: Non-zero to return the sky gradient on a miss.
        rng_state: The random stream for this sample.

    Returns:
        A tuple (radiance, rng_state, bounces).
    """
    radiance = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    ray_origin = origin
    ray_direction = direction
    state = rng_state
    bounces = 0

    # Active flag for path continuation
    active = 1

    for _ in range(max_bounces):
        if active == 1:
            record = intersect_scene(ray_origin, ray_direction)

            if record.hit == 0:
                if use_sky_color != 0:
                    radiance += throughput * sky_gradient(ray_direction)
                active = 0
            else:
                bounces += 1
                material = get_material(record.material_id)
                normal = normalize(record.point - sphere_centers[record.sphere_index])

                new_direction, state = sample_hemisphere(normal, state)
                cos_theta = dot(normal, new_direction)
                if cos_theta < -EPSILON:
                    ti.atomic_add(_sampling_violations[None], 1)

                radiance += throughput * material.emissive
                throughput *= material.albedo * cos_theta

                ray_origin = record.point + normal * RAY_EPSILON
                ray_direction = new_direction

    return radiance, state, bounces


@ti.func
def trace_path(
    origin: vec3,
    direction: vec3,
    max_bounces: ti.i32,
    use_sky_color: ti.i32,
    rng_state: ti.u32,
):
    """Estimate the radiance arriving along a ray.

    Returns:
        A tuple (radiance, rng_state).
    """
    radiance, state, bounces = trace_path_counted(
        origin, direction, max_bounces, use_sky_color, rng_state
    )
    return radiance, state


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_samples(
    width: ti.i32,
    height: ti.i32,
    first_sample: ti.i32,
    num_samples: ti.i32,
    max_bounces: ti.i32,
    use_sky_color: ti.i32,
    seed: ti.i32,
):
    """Trace num_samples paths per pixel and add them to the radiance sum.

    Sample s of pixel (i, j) always uses the stream
    (seed, j * width + i, first_sample + s), so splitting a render into
    batches gives the same sums as rendering it at once.
    """
    for i, j in ti.ndrange(width, height):
        ray = get_primary_ray(i, j, width, height)
        pixel_index = j * width + i

        total = _radiance_sum[i, j]
        for s in range(num_samples):
            state = init_rng_state(seed, pixel_index, first_sample + s)
            radiance, state = trace_path(
                ray.origin, ray.direction, max_bounces, use_sky_color, state
            )
            total += radiance

        _radiance_sum[i, j] = total
        _sample_count[i, j] += num_samples


@ti.kernel
def _trace_probe(
    origin: vec3,
    direction: vec3,
    max_bounces: ti.i32,
    use_sky_color: ti.i32,
    seed: ti.i32,
    sample_index: ti.i32,
):
    state = init_rng_state(seed, 0, sample_index)
    radiance, state, bounces = trace_path_counted(
        origin, direction, max_bounces, use_sky_color, state
    )
    _probe_radiance[None] = radiance
    _probe_bounces[None] = bounces


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_bounces: int = MAX_BOUNCES,
    use_sky_color: bool = False,
    seed: int = 0,
    sample_index: int = 0,
) -> tuple[tuple[float, float, float], int]:
    """Trace a single path from Python against the uploaded scene.

    Useful for testing and debugging. For images use accumulate_samples().

    Args:
        origin: Ray origin.
        direction: Ray direction; normalized before tracing.
        max_bounces: Bounce budget.
        use_sky_color: Return the sky gradient for escaped rays.
        seed: Stream seed.
        sample_index: Stream index under that seed.

    Returns:
        A tuple ((R, G, B), bounces).

    Raises:
        ValueError: If max_bounces is negative or direction is zero.
        HemisphereSamplingError: If a sampled direction broke the
            hemisphere postcondition.
    """
    if max_bounces < 0:
        raise ValueError(f"max_bounces must be non-negative, got {max_bounces}")
    direction_np = np.array(direction, dtype=np.float32)
    norm = np.linalg.norm(direction_np)
    if norm == 0.0:
        raise ValueError("Ray direction must be non-zero")
    direction_np = direction_np / norm

    reset_sampling_violations()
    _trace_probe(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction_np[0], direction_np[1], direction_np[2]),
        max_bounces,
        int(use_sky_color),
        seed,
        sample_index,
    )
    check_sampling_invariant()

    color = _probe_radiance[None]
    return (float(color[0]), float(color[1]), float(color[2])), int(_probe_bounces[None])


def accumulate_samples(
    num_samples: int = 1,
    max_bounces: int = MAX_BOUNCES,
    use_sky_color: bool = False,
    seed: int = 0,
) -> None:
    """Trace num_samples more paths per pixel into the render target.

    Can be called repeatedly; stream indices continue from the current
    sample count.

    Args:
        num_samples: Number of samples to add per pixel.
        max_bounces: Bounce budget.
        use_sky_color: Return the sky gradient for escaped rays.
        seed: Render seed.

    Raises:
        RuntimeError: If render target has not been set up.
        HemisphereSamplingError: If a sampled direction broke the
            hemisphere postcondition.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    first_sample = get_total_samples()

    reset_sampling_violations()
    _render_samples(
        width, height, first_sample, num_samples, max_bounces, int(use_sky_color), seed
    )
    check_sampling_invariant()


def get_total_samples() -> int:
    """Get the number of samples accumulated per pixel.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    return int(_sample_count[0, 0])


def get_radiance_numpy() -> npt.NDArray[np.float32]:
    """Get the sample-averaged radiance as a NumPy array.

    Each pixel is its radiance sum times 1/n. Values are not clamped.
    Pixels without samples are zero.

    Returns:
        NumPy array of shape (height, width, 3), row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    sums = _radiance_sum.to_numpy()[:width, :height, :]
    counts = _sample_count.to_numpy()[:width, :height]

    image = np.zeros_like(sums, dtype=np.float32)
    sampled = counts > 0
    scale = np.float32(1.0) / counts[sampled].astype(np.float32)
    image[sampled] = sums[sampled] * scale[:, None]

    # Transpose from (width, height, 3) to (height, width, 3)
    return np.ascontiguousarray(np.transpose(image, (1, 0, 2)))
