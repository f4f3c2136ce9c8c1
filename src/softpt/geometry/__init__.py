"""Geometry module: the sphere primitive.

Ray-sphere intersection is a Taichi function (@ti.func) returning up to two
hit points ordered by distance along the ray:
    hits = intersect_sphere(ray_origin, ray_direction, sphere)
"""

from .sphere import Sphere, SphereHits, intersect_sphere, make_sphere

__all__ = [
    "Sphere",
    "SphereHits",
    "intersect_sphere",
    "make_sphere",
]
