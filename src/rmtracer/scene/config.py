"""Scene configuration loading.

A scene file is a JSON object with the render settings and an ordered list
of objects:

    {
        "width": 200,
        "height": 200,
        "virtualWidth": 2.0,
        "virtualHeight": 2.0,
        "samplesPerPixel": 16,
        "cameraPosition": [0.0, 0.0, 1.0],
        "seed": 7,
        "objects": [
            {"type": "sphere", "center": [0, 0, -1], "radius": 0.5,
             "color": [1.0, 0.0, 0.0]}
        ]
    }

Every key is optional except ``objects``. ``lowerLeftCorner`` may be given
explicitly; it defaults to (-virtualWidth/2, -virtualHeight/2, -1).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rmtracer.camera.screen import ScreenCamera
from rmtracer.core.ray import as_triple
from rmtracer.errors import ConfigurationError

# Recognised top-level keys mapped to SceneConfig attribute names
_SCENE_KEYS = {
    "width": "width",
    "height": "height",
    "virtualWidth": "virtual_width",
    "virtualHeight": "virtual_height",
    "samplesPerPixel": "samples_per_pixel",
    "cameraPosition": "camera_position",
    "lowerLeftCorner": "lower_left_corner",
    "seed": "seed",
    "objects": "objects",
}

_OBJECT_KEYS = {"type", "center", "radius", "color"}

SUPPORTED_OBJECT_TYPES = ("sphere",)


def _as_int(value: Any, key: str) -> int:
    """Accept an integer or an integral float; reject bools and fractions."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{key} must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ConfigurationError(f"{key} must be an integer, got {value!r}")
    return int(value)


@dataclass
class ObjectConfig:
    """Configuration of a single scene object.

    Attributes:
        type: Primitive kind name. Only "sphere" is supported.
        center: Sphere center (x, y, z).
        radius: Sphere radius.
        color: Flat RGB color in [0, 1].
    """

    type: str
    center: tuple[float, float, float]
    radius: float
    color: tuple[float, float, float]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ObjectConfig:
        if not isinstance(data, dict):
            raise ConfigurationError(f"Scene object must be a mapping, got {type(data).__name__}")
        unknown = set(data) - _OBJECT_KEYS
        if unknown:
            raise ConfigurationError(f"Unknown scene object keys: {sorted(unknown)}")
        obj_type = data.get("type", "sphere")
        if obj_type not in SUPPORTED_OBJECT_TYPES:
            raise ConfigurationError(f"Unknown object type: {obj_type!r}")
        try:
            return cls(
                type=obj_type,
                center=tuple(float(v) for v in data["center"]),
                radius=float(data["radius"]),
                color=tuple(float(v) for v in data["color"]),
            )
        except KeyError as e:
            raise ConfigurationError(f"Scene object is missing required key {e}") from e
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Malformed scene object {data!r}: {e}") from e


@dataclass
class SceneConfig:
    """Render settings plus the ordered object list.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        virtual_width: Width of the virtual screen in world units.
        virtual_height: Height of the virtual screen in world units.
        samples_per_pixel: Jittered samples averaged per pixel.
        camera_position: Origin of every primary ray.
        lower_left_corner: Virtual screen corner relative to the camera, or
            None for the centred default.
        seed: Seed for the jitter generator, or None for a random seed.
        objects: Scene objects in insertion order.
    """

    width: int = 200
    height: int = 200
    virtual_width: float = 2.0
    virtual_height: float = 2.0
    samples_per_pixel: int = 16
    camera_position: tuple[float, float, float] = (0.0, 0.0, 1.0)
    lower_left_corner: tuple[float, float, float] | None = None
    seed: int | None = None
    objects: list[ObjectConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SceneConfig:
        """Parse a scene description using the camelCase file keys.

        Raises:
            ConfigurationError: If a key is unknown or a value is malformed.
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Scene configuration must be a JSON object")
        unknown = set(data) - set(_SCENE_KEYS)
        if unknown:
            raise ConfigurationError(f"Unknown scene configuration keys: {sorted(unknown)}")

        kwargs: dict[str, Any] = {}
        try:
            for key, value in data.items():
                attr = _SCENE_KEYS[key]
                if attr == "objects":
                    kwargs[attr] = [ObjectConfig.from_dict(obj) for obj in value]
                elif attr in ("width", "height", "samples_per_pixel"):
                    kwargs[attr] = _as_int(value, key)
                elif attr in ("virtual_width", "virtual_height"):
                    kwargs[attr] = float(value)
                elif attr == "camera_position":
                    kwargs[attr] = as_triple(value, key)
                elif attr == "lower_left_corner":
                    kwargs[attr] = None if value is None else as_triple(value, key)
                elif attr == "seed":
                    kwargs[attr] = None if value is None else _as_int(value, key)
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Malformed scene configuration: {e}") from e

        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the camelCase file format."""
        data: dict[str, Any] = {
            "width": self.width,
            "height": self.height,
            "virtualWidth": self.virtual_width,
            "virtualHeight": self.virtual_height,
            "samplesPerPixel": self.samples_per_pixel,
            "cameraPosition": list(self.camera_position),
            "seed": self.seed,
            "objects": [
                {
                    "type": obj.type,
                    "center": list(obj.center),
                    "radius": obj.radius,
                    "color": list(obj.color),
                }
                for obj in self.objects
            ],
        }
        if self.lower_left_corner is not None:
            data["lowerLeftCorner"] = list(self.lower_left_corner)
        return data

    def to_camera(self) -> ScreenCamera:
        """Build the validated camera described by this configuration.

        Raises:
            ConfigurationError: If sizes or the sample count are not positive.
        """
        return ScreenCamera(
            screen_size=(self.width, self.height),
            virtual_size=(self.virtual_width, self.virtual_height),
            camera_position=self.camera_position,
            lower_left_corner=self.lower_left_corner,
            sample_count=self.samples_per_pixel,
        )


def load_scene_config(path: str | Path) -> SceneConfig:
    """Load a scene configuration from a JSON file.

    Args:
        path: Path to the scene file.

    Returns:
        The parsed SceneConfig.

    Raises:
        ConfigurationError: If the file is not valid JSON or not a valid scene.
        OSError: If the file cannot be read.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Scene file {path} is not valid JSON: {e}") from e
    return SceneConfig.from_dict(data)
