"""Entity components, scriptable entities and a script registry."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Type

import numpy as np

from teddy_engine.camera import SceneCamera
from teddy_engine.render_api import Texture
from teddy_engine.transforms import quat_from_euler, quat_to_mat4, scale, translate


def _array(values: Sequence[float]) -> np.ndarray:
    return np.array(values, dtype=float)


def _new_id() -> int:
    return random.getrandbits(64)


@dataclass
class UUIDComponent:
    id: int = field(default_factory=_new_id)


@dataclass
class TagComponent:
    tag: str = ""


@dataclass(eq=False)
class TransformComponent:
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))

    def __post_init__(self) -> None:
        self.translation = _array(self.translation)
        self.rotation = _array(self.rotation)
        self.scale = _array(self.scale)

    def transform(self) -> np.ndarray:
        """Translation, then Euler rotation, then scale, as one matrix."""
        rotation = quat_to_mat4(quat_from_euler(self.rotation))
        return translate(self.translation) @ rotation @ scale(self.scale)


@dataclass(eq=False)
class SpriteRendererComponent:
    color: np.ndarray = field(default_factory=lambda: np.ones(4))
    texture: Optional[Texture] = None
    tiling_factor: float = 1.0

    def __post_init__(self) -> None:
        self.color = _array(self.color)


@dataclass(eq=False)
class CircleRendererComponent:
    color: np.ndarray = field(default_factory=lambda: np.ones(4))
    thickness: float = 1.0
    fade: float = 0.005

    def __post_init__(self) -> None:
        self.color = _array(self.color)


@dataclass(eq=False)
class CameraComponent:
    camera: SceneCamera = field(default_factory=SceneCamera)
    primary: bool = True
    fixed_aspect_ratio: bool = False


class BodyType(Enum):
    STATIC = 0
    DYNAMIC = 1
    KINEMATIC = 2


@dataclass(eq=False)
class Rigid2DBodyComponent:
    type: BodyType = BodyType.STATIC
    fixed_rotation: bool = False
    runtime_body: Any = None
    linear_velocity: np.ndarray = field(default_factory=lambda: np.zeros(2))
    force_value: np.ndarray = field(default_factory=lambda: np.zeros(2))
    apply_force: bool = False


@dataclass(eq=False)
class Box2DColliderComponent:
    offset: np.ndarray = field(default_factory=lambda: np.zeros(2))
    size: np.ndarray = field(default_factory=lambda: np.full(2, 0.5))
    density: float = 1.0
    friction: float = 0.5
    restitution: float = 0.0
    restitution_threshold: float = 0.5
    runtime_fixture: Any = None

    def __post_init__(self) -> None:
        self.offset = _array(self.offset)
        self.size = _array(self.size)


@dataclass(eq=False)
class Circle2DColliderComponent:
    offset: np.ndarray = field(default_factory=lambda: np.zeros(2))
    radius: float = 0.5
    density: float = 1.0
    friction: float = 0.5
    restitution: float = 0.0
    restitution_threshold: float = 0.5
    runtime_fixture: Any = None

    def __post_init__(self) -> None:
        self.offset = _array(self.offset)


class ScriptableEntity:
    """Base of native scripts attached to an entity.

    The scene sets ``entity`` before calling ``on_create``.
    """

    def __init__(self) -> None:
        self.entity: Any = None

    def get_component(self, component_type: type) -> Any:
        if self.entity is None:
            raise RuntimeError("script is not attached to an entity")
        return self.entity.get_component(component_type)

    def on_create(self) -> None:
        """Called once, before the first update."""

    def on_update(self, ts: float) -> None:
        """Called every runtime frame with the timestep."""

    def on_destroy(self) -> None:
        """Called when the script is torn down."""


def _script_name(script_class: type) -> str:
    return script_class.__qualname__


@dataclass(eq=False)
class ScriptComponent:
    """Binds a script class to an entity and holds its live instance."""

    script_class: str = ""
    instance: Optional[ScriptableEntity] = None
    instantiate_script: Optional[Callable[[], ScriptableEntity]] = None

    def bind(self, script_class: Type[ScriptableEntity]) -> None:
        self.script_class = _script_name(script_class)
        self.instantiate_script = script_class

    def destroy(self) -> None:
        self.instance = None


class ScriptRegistry:
    """Maps script class names to their classes so scripts can be recreated."""

    def __init__(self) -> None:
        self._factories: Dict[str, Callable[[], ScriptableEntity]] = {}

    def register(self, script_class: Type[ScriptableEntity]) -> Type[ScriptableEntity]:
        """Register ``script_class``; returns it, so this works as a decorator."""
        self._factories[_script_name(script_class)] = script_class
        return script_class

    def create_script(self, name: str) -> Optional[ScriptableEntity]:
        """New instance of the script registered as ``name``, or None."""
        factory = self._factories.get(name)
        return factory() if factory is not None else None