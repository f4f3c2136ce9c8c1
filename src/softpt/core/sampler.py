"""Random streams and hemisphere sampling for diffuse bounces.

Randomness is counter-based: every (seed, pixel, sample) triple hashes to its
own 32-bit state, and each draw advances that state with a xorshift step.
Nothing is shared between pixels, so a render is reproducible for a given
seed no matter how Taichi schedules the parallel loop.

The hemisphere mapping takes two uniform numbers ``r0, r1`` in [0, 1) to::

    x = sqrt(1 - r0^2) * cos(2 * pi * r1)
    y = r0
    z = sqrt(1 - r0^2) * sin(2 * pi * r1)

which is a direction on the hemisphere around the local +Y axis. The local
direction is then rotated into world space by the tangent frame built around
the surface normal (basis columns: tangent, normal, bitangent).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softpt.core.sampler import hemisphere_direction, vec3
    >>> # inside a kernel:
    >>> # d = hemisphere_direction(vec3(0.0, 1.0, 0.0), 0.5, 0.25)
"""

import taichi as ti
import taichi.math as tm

from softpt.core.vector import EPSILON, cross, is_equivalent, normalize, vec3

# 2^-24: maps the top 24 bits of a state to [0, 1) exactly in f32
_INV_2_POW_24 = 1.0 / 16777216.0


# =============================================================================
# Random Streams
# =============================================================================


@ti.func
def hash_u32(x: ti.u32) -> ti.u32:
    """Thomas Wang's 32-bit integer hash."""
    h = x
    h = (h ^ ti.u32(61)) ^ (h >> ti.u32(16))
    h = h * ti.u32(9)
    h = h ^ (h >> ti.u32(4))
    h = h * ti.u32(0x27D4EB2D)
    h = h ^ (h >> ti.u32(15))
    return h


@ti.func
def init_rng_state(seed: ti.i32, pixel_index: ti.i32, sample_index: ti.i32) -> ti.u32:
    """Derive the private random state for one pixel sample.

    Args:
        seed: The render seed.
        pixel_index: Linear pixel index (row * width + column).
        sample_index: Index of the sample within the pixel.

    Returns:
        A non-zero 32-bit state for next_random().
    """
    state = hash_u32(ti.cast(seed, ti.u32))
    state = hash_u32(state ^ ti.cast(pixel_index, ti.u32))
    state = hash_u32(state ^ ti.cast(sample_index, ti.u32))
    # xorshift has a fixed point at zero
    if state == ti.u32(0):
        state = ti.u32(1)
    return state


@ti.func
def next_random(state: ti.u32):
    """Draw a uniform float in [0, 1) and advance the stream.

    Args:
        state: The current stream state (non-zero).

    Returns:
        A tuple (value, new_state).
    """
    x = state
    x = x ^ (x << ti.u32(13))
    x = x ^ (x >> ti.u32(17))
    x = x ^ (x << ti.u32(5))
    value = ti.cast(x >> ti.u32(8), ti.f32) * _INV_2_POW_24
    return value, x


# =============================================================================
# Hemisphere Sampling
# =============================================================================


@ti.func
def tangent_frame(normal: vec3):
    """Build an orthonormal tangent frame around a unit normal.

    The seed vector is (-1, 0, 0). When the normal lies on that axis the
    seed is swapped for (0, 1, 0), so the cross product never collapses.

    Args:
        normal: The surface normal (unit length).

    Returns:
        A tuple (tangent, bitangent); together with the normal they form an
        orthonormal basis.
    """
    right = vec3(-1.0, 0.0, 0.0)
    seed = right
    if is_equivalent(normal, right, EPSILON) or is_equivalent(normal, -right, EPSILON):
        seed = vec3(0.0, 1.0, 0.0)
    bitangent = normalize(cross(normal, seed))
    tangent = normalize(cross(bitangent, normal))
    return tangent, bitangent


@ti.func
def local_to_world(local_dir: vec3, tangent: vec3, normal: vec3, bitangent: vec3) -> vec3:
    """Rotate a +Y-up local direction into the frame (tangent, normal, bitangent)."""
    return local_dir.x * tangent + local_dir.y * normal + local_dir.z * bitangent


@ti.func
def hemisphere_direction(normal: vec3, r0: ti.f32, r1: ti.f32) -> vec3:
    """Map two uniform numbers to a direction on the hemisphere above a normal.

    Args:
        normal: The surface normal (unit length).
        r0: Uniform sample in [0, 1); becomes the cosine to the normal.
        r1: Uniform sample in [0, 1); becomes the azimuth.

    Returns:
        A unit direction with dot(direction, normal) >= 0 up to rounding.
    """
    sqrt_factor = ti.sqrt(1.0 - r0 * r0)
    phi = 2.0 * tm.pi * r1
    local_dir = vec3(sqrt_factor * ti.cos(phi), r0, sqrt_factor * ti.sin(phi))

    tangent, bitangent = tangent_frame(normal)
    return local_to_world(local_dir, tangent, normal, bitangent)


@ti.func
def sample_hemisphere(normal: vec3, state: ti.u32):
    """Draw two numbers from the stream and sample a bounce direction.

    Returns:
        A tuple (direction, new_state).
    """
    r0, s = next_random(state)
    r1, s = next_random(s)
    return hemisphere_direction(normal, r0, r1), s
