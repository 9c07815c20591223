"""Validated scene construction on top of the raw primitive storage.

The SceneManager is the checked entry point for building a scene. It
rejects degenerate primitives before they reach the Taichi fields and keeps
a Python-side record of every object so scenes can be inspected and
serialized without reading back from the device.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rmtracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_sphere(center=(0, 0, -1), radius=0.5, color=(1.0, 0.0, 0.0))
    0
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import taichi.math as tm

from rmtracer.core.ray import as_triple
from rmtracer.errors import ConfigurationError
from rmtracer.geometry.hittable import PrimitiveKind
from rmtracer.scene.intersection import add_sphere, clear_scene, get_object_count

if TYPE_CHECKING:
    from rmtracer.scene.config import SceneConfig

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        object_index: The slot index in the primitive storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        color: The flat RGB color of the sphere.
    """

    object_index: int
    center: tuple[float, float, float]
    radius: float
    color: tuple[float, float, float]

    @property
    def kind(self) -> PrimitiveKind:
        return PrimitiveKind.SPHERE

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the scene-file object format."""
        return {
            "type": "sphere",
            "center": list(self.center),
            "radius": self.radius,
            "color": list(self.color),
        }


class SceneManager:
    """Owner of the scene's ordered object collection.

    Objects are added in order and tested in that order during rendering.
    Creating a SceneManager clears any previously stored primitives, so only
    one scene is live at a time.

    Attributes:
        objects: Python-side records of every object, in insertion order.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.objects: list[SphereInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        clear_scene()
        self.objects.clear()

    def clear(self) -> None:
        """Remove every object from the scene."""
        self._clear_all()

    def add_sphere(
        self,
        center: Sequence[float],
        radius: float,
        color: Sequence[float],
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere. Must be positive.
            color: Flat color as (R, G, B), each channel in [0, 1].

        Returns:
            The slot index of the added sphere.

        Raises:
            ConfigurationError: If the radius is not positive or the color or
                center is malformed.
            RuntimeError: If the maximum number of objects is exceeded.
        """
        center_t = as_triple(center, "Sphere center")
        color_t = as_triple(color, "Sphere color")

        if not math.isfinite(radius) or radius <= 0.0:
            raise ConfigurationError(f"Sphere radius must be positive, got {radius}")
        if any(c < 0.0 or c > 1.0 for c in color_t):
            raise ConfigurationError(f"Sphere color channels must be in [0, 1], got {color_t}")

        object_index = add_sphere(vec3(*center_t), float(radius), vec3(*color_t))

        self.objects.append(
            SphereInfo(
                object_index=object_index,
                center=center_t,
                radius=float(radius),
                color=color_t,
            )
        )
        return object_index

    def get_object_count(self) -> int:
        """Get the number of objects stored on the device."""
        return get_object_count()

    def get_object_info(self, object_index: int) -> SphereInfo | None:
        """Get information about an object by slot index, or None."""
        if 0 <= object_index < len(self.objects):
            return self.objects[object_index]
        return None

    def to_object_configs(self) -> list[dict[str, Any]]:
        """Serialize all objects to the scene-file object format."""
        return [info.to_dict() for info in self.objects]

    @classmethod
    def from_config(cls, config: SceneConfig) -> SceneManager:
        """Build a scene from a parsed configuration.

        Args:
            config: The scene configuration whose objects are added in order.

        Returns:
            A new SceneManager holding the configured objects.

        Raises:
            ConfigurationError: If any object is invalid.
        """
        scene = cls()
        for obj in config.objects:
            if obj.type != "sphere":
                raise ConfigurationError(f"Unknown object type: {obj.type!r}")
            scene.add_sphere(obj.center, obj.radius, obj.color)
        return scene

    def __len__(self) -> int:
        return len(self.objects)

    def __repr__(self) -> str:
        return f"SceneManager(objects={len(self.objects)})"
