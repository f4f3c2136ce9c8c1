"""Default scene: seven small spheres resting on a large ground sphere.

The ground is a sphere of radius 100 centred at (0, -100, 0), so its top
touches the plane y = 0. Each of the other spheres is placed by its centre
alone; its radius is the distance from that centre to the ground centre
minus 100, which makes it touch the ground at a single point.

Three of the spheres are emissive and light the scene:

- Green-tinted sphere at the origin, emitting (10, 10, 10)
- Yellow sphere at (-0.25, 0.5, 1.5), emitting (10, 5, 5)
- Cyan sphere at (-0.65, 0.05, -0.25), emitting (5, 5, 10)

The camera sits at (0, 0.5, -1) looking at the origin.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softpt.scene.default_scene import create_default_scene
    >>> from softpt.camera.look_at import setup_camera
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
"""

import numpy as np

from softpt.camera.look_at import LookAtCamera
from softpt.scene.manager import MaterialInfo, Scene, SceneManager, SphereInfo

# =============================================================================
# Default Scene Constants
# =============================================================================

GROUND_CENTER = (0.0, -100.0, 0.0)
GROUND_RADIUS = 100.0

# (albedo, emissive) per material, in material ID order
MATERIALS = (
    ((1.0, 1.0, 1.0), (0.0, 0.0, 0.0)),
    ((0.5, 1.0, 0.5), (10.0, 10.0, 10.0)),
    ((1.0, 0.5, 0.5), (0.0, 0.0, 0.0)),
    ((0.5, 0.5, 1.0), (0.0, 0.0, 0.0)),
    ((0.5, 1.0, 0.75), (0.0, 0.0, 0.0)),
    ((1.0, 1.0, 0.5), (10.0, 5.0, 5.0)),
    ((1.0, 1.0, 1.0), (0.0, 0.0, 0.0)),
    ((0.5, 1.0, 1.0), (5.0, 5.0, 10.0)),
)

# Centres of the spheres resting on the ground; sphere k uses material k + 1
SPHERE_CENTERS = (
    (0.0, 0.125, 0.0),
    (-0.5, 0.125, 0.0),
    (0.5, 0.25, 0.5),
    (0.25, 0.05, -0.25),
    (-0.25, 0.5, 1.5),
    (0.25, 0.1, 0.25),
    (-0.65, 0.05, -0.25),
)

DEFAULT_CAMERA = LookAtCamera(
    position=(0.0, 0.5, -1.0),
    target=(0.0, 0.0, 0.0),
    up=(0.0, 1.0, 0.0),
)


def resting_radius(center: tuple[float, float, float]) -> float:
    """Radius that makes a sphere at ``center`` touch the ground sphere.

    Computed in float32, the precision of the scene fields.
    """
    offset = np.array(center, dtype=np.float32) - np.array(GROUND_CENTER, dtype=np.float32)
    return float(np.linalg.norm(offset) - np.float32(GROUND_RADIUS))


def build_scene() -> Scene:
    """Build the default eight-sphere scene.

    Returns:
        A Scene with eight materials and eight spheres. Sphere 0 is the
        ground and uses material 0; sphere k uses material k.
    """
    materials = tuple(
        MaterialInfo(albedo=albedo, emissive=emissive, roughness=1.0)
        for albedo, emissive in MATERIALS
    )

    spheres = [SphereInfo(center=GROUND_CENTER, radius=GROUND_RADIUS, material_id=0)]
    for index, center in enumerate(SPHERE_CENTERS):
        spheres.append(
            SphereInfo(center=center, radius=resting_radius(center), material_id=index + 1)
        )

    return Scene(materials=materials, spheres=tuple(spheres))


def create_default_scene() -> tuple[SceneManager, LookAtCamera]:
    """Upload the default scene and return it with its camera.

    Returns:
        Tuple of (scene_manager, camera).
    """
    scene = SceneManager.from_scene(build_scene())
    camera = LookAtCamera(
        position=DEFAULT_CAMERA.position,
        target=DEFAULT_CAMERA.target,
        up=DEFAULT_CAMERA.up,
    )
    return scene, camera
