"""Core rendering module.

Components:
    vector: vec3 helpers and the Ray structure
    sampler: Counter-based random streams and hemisphere sampling
    integrator: Depth-bounded path tracing and the render target
    renderer: One-shot and progressive frame rendering

The integrator estimates the radiance arriving along each camera ray by
following a single diffuse path per sample, bouncing at most a fixed
number of times, and accumulates the per-pixel sum across samples.
"""

from .sampler import (
    hash_u32,
    hemisphere_direction,
    init_rng_state,
    local_to_world,
    next_random,
    sample_hemisphere,
    tangent_frame,
)
from .vector import (
    EPSILON,
    Ray,
    cross,
    distance,
    dot,
    is_equivalent,
    length,
    length_squared,
    lerp,
    make_ray,
    normalize,
    ray_at,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from softpt.core.integrator or softpt.core.renderer when needed.

__all__ = [
    "EPSILON",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "dot",
    "cross",
    "length",
    "length_squared",
    "normalize",
    "distance",
    "is_equivalent",
    "lerp",
    "hash_u32",
    "init_rng_state",
    "next_random",
    "tangent_frame",
    "local_to_world",
    "hemisphere_direction",
    "sample_hemisphere",
]
