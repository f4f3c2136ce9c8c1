"""Taichi-based Monte Carlo path tracer for scenes made of spheres.

This package renders a static scene of diffuse, possibly emissive spheres
into an 8-bit RGB image, with every compute-heavy step running in Taichi
kernels on the CPU or GPU.

Subpackages:
    core: Vector algebra, random sampling, the path integrator and the
        frame driver
    geometry: Sphere primitive and ray-sphere intersection
    materials: Albedo/emissive material storage
    scene: Scene description, upload and nearest-hit search
    camera: Look-at camera with primary ray generation
    preview: Tone mapping and PNG export
"""

__version__ = "0.1.0"
