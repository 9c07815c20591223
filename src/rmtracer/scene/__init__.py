"""Scene module for scene storage, construction and configuration.

Components:
    intersection: Primitive storage, nearest-hit resolution and shading
    manager: Validated scene construction (SceneManager)
    config: JSON scene files and the SceneConfig dataclass
    default_scene: Built-in scene factory

Scene data is organized for efficient device access:
    - One kind tag per object slot
    - Structure-of-Arrays payloads indexed by the same slot
"""

from .config import ObjectConfig, SceneConfig, load_scene_config
from .default_scene import (
    DefaultSceneParams,
    create_default_scene,
    create_scene_from_config,
    default_scene_config,
)
from .intersection import (
    MAX_OBJECTS,
    ResolveResult,
    add_sphere,
    background_color,
    clear_scene,
    get_object_count,
    resolve,
    shade,
)
from .manager import SceneManager, SphereInfo

__all__ = [
    # Intersection module
    "ResolveResult",
    "add_sphere",
    "clear_scene",
    "get_object_count",
    "resolve",
    "shade",
    "background_color",
    "MAX_OBJECTS",
    # Manager module
    "SceneManager",
    "SphereInfo",
    # Config module
    "SceneConfig",
    "ObjectConfig",
    "load_scene_config",
    # Default scene module
    "DefaultSceneParams",
    "create_default_scene",
    "create_scene_from_config",
    "default_scene_config",
]
