"""Built-in scenes.

The default scene is a red sphere in front of the camera with a smaller
blue sphere partly in front of it, both resting on a large green sphere
acting as the ground. It shows the background gradient, the view-dependent
shading and nearest-hit occlusion in one image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rmtracer.scene.default_scene import create_default_scene
    >>> from rmtracer.camera.screen import setup_camera
    >>>
    >>> scene, camera, seed = create_default_scene()
    >>> setup_camera(camera)
"""

from dataclasses import dataclass

from rmtracer.camera.screen import ScreenCamera
from rmtracer.scene.config import ObjectConfig, SceneConfig
from rmtracer.scene.manager import SceneManager


@dataclass
class DefaultSceneParams:
    """Parameters for the default scene.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Jittered samples per pixel.
        seed: Jitter seed, or None for a non-deterministic render.
        sphere_color: Color of the main sphere.
        ground_color: Color of the ground sphere.
        accent_color: Color of the small sphere in front of the main one.
    """

    width: int = 200
    height: int = 200
    samples_per_pixel: int = 16
    seed: int | None = None
    sphere_color: tuple[float, float, float] = (1.0, 0.0, 0.0)
    ground_color: tuple[float, float, float] = (0.2, 0.8, 0.2)
    accent_color: tuple[float, float, float] = (0.1, 0.2, 1.0)


def default_scene_config(params: DefaultSceneParams | None = None) -> SceneConfig:
    """Describe the default scene as a SceneConfig.

    Args:
        params: Optional overrides; defaults are used when None.

    Returns:
        A SceneConfig that can be rendered or written out as a scene file.
    """
    if params is None:
        params = DefaultSceneParams()

    return SceneConfig(
        width=params.width,
        height=params.height,
        virtual_width=2.0,
        virtual_height=2.0,
        samples_per_pixel=params.samples_per_pixel,
        camera_position=(0.0, 0.0, 1.0),
        seed=params.seed,
        objects=[
            ObjectConfig("sphere", (0.0, 0.0, -1.0), 0.5, params.sphere_color),
            ObjectConfig("sphere", (0.35, -0.2, -0.6), 0.15, params.accent_color),
            ObjectConfig("sphere", (0.0, -100.5, -1.0), 100.0, params.ground_color),
        ],
    )


def create_scene_from_config(config: SceneConfig) -> tuple[SceneManager, ScreenCamera]:
    """Build the scene and camera described by a configuration.

    Returns:
        Tuple of (scene, camera). The camera still has to be passed to
        setup_camera() before rendering.
    """
    camera = config.to_camera()
    scene = SceneManager.from_config(config)
    return scene, camera


def create_default_scene(
    params: DefaultSceneParams | None = None,
) -> tuple[SceneManager, ScreenCamera, int | None]:
    """Create the default scene.

    Args:
        params: Optional overrides; defaults are used when None.

    Returns:
        Tuple of (scene, camera, seed).
    """
    config = default_scene_config(params)
    scene, camera = create_scene_from_config(config)
    return scene, camera, config.seed
