"""Scenes of entities built from components, and the entity handle."""

from __future__ import annotations

import copy as _copy
import itertools
from typing import Any, Dict, Iterator, Optional, Sequence, Type, TypeVar

import numpy as np

from teddy_engine.camera import EditorCamera, SceneCamera
from teddy_engine.components import (
    Box2DColliderComponent,
    CameraComponent,
    Circle2DColliderComponent,
    CircleRendererComponent,
    Rigid2DBodyComponent,
    ScriptComponent,
    SpriteRendererComponent,
    TagComponent,
    TransformComponent,
    UUIDComponent,
)
from teddy_engine.renderer2d import Renderer2D

C = TypeVar("C")

# Components carried over by copy() and duplicate_entity(); the id and the
# tag are recreated by create_entity() instead.
_COPIED_TYPES = (
    TransformComponent,
    SpriteRendererComponent,
    CircleRendererComponent,
    CameraComponent,
    ScriptComponent,
    Rigid2DBodyComponent,
    Box2DColliderComponent,
    Circle2DColliderComponent,
)


def _clone(component: Any) -> Any:
    """Copy a component by value; textures and script instances stay shared."""
    result = _copy.copy(component)
    for name, value in vars(result).items():
        if isinstance(value, np.ndarray):
            setattr(result, name, value.copy())
        elif isinstance(value, SceneCamera):
            setattr(result, name, _copy.deepcopy(value))
    return result


class Entity:
    """Lightweight handle to an entity living in a scene.

    A handle with no entity is falsy.
    """

    def __init__(self, handle: Optional[int] = None, scene: Optional["Scene"] = None) -> None:
        self._handle = handle
        self._scene = scene

    @property
    def handle(self) -> Optional[int]:
        return self._handle

    @property
    def scene(self) -> Optional["Scene"]:
        return self._scene

    def _components(self) -> Dict[type, Any]:
        if self._scene is None or self._handle not in self._scene._registry:
            raise RuntimeError("entity is not valid")
        return self._scene._registry[self._handle]

    def add_component(self, component: C) -> C:
        """Attach ``component``; raises ValueError if one of its type exists."""
        components = self._components()
        component_type = type(component)
        if component_type in components:
            raise ValueError(f"Entity already has component {component_type.__name__}!")
        components[component_type] = component
        self._scene._on_component_added(component)  # type: ignore[union-attr]
        return component

    def add_or_replace_component(self, component: C) -> C:
        """Attach ``component``, replacing any of the same type."""
        self._components()[type(component)] = component
        self._scene._on_component_added(component)  # type: ignore[union-attr]
        return component

    def get_component(self, component_type: Type[C]) -> C:
        try:
            return self._components()[component_type]
        except KeyError:
            raise KeyError(
                f"Entity does not have component {component_type.__name__}!"
            ) from None

    def has_component(self, component_type: type) -> bool:
        return component_type in self._components()

    def remove_component(self, component_type: type) -> None:
        components = self._components()
        if component_type not in components:
            raise KeyError(f"Entity does not have component {component_type.__name__}!")
        del components[component_type]

    def __bool__(self) -> bool:
        return self._handle is not None

    def __int__(self) -> int:
        if self._handle is None:
            raise ValueError("null entity has no handle")
        return self._handle

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return self._handle == other._handle and self._scene is other._scene

    def __hash__(self) -> int:
        return hash((self._handle, id(self._scene)))

    def __repr__(self) -> str:
        return f"Entity(handle={self._handle!r})"


class Scene:
    """A set of entities with components, rendered through a 2D renderer."""

    def __init__(self, name: str = "Untitled", renderer: Optional[Renderer2D] = None) -> None:
        self.name = name
        self._renderer = renderer
        self._registry: Dict[int, Dict[type, Any]] = {}
        self._handles = itertools.count()
        self.viewport_width = 0
        self.viewport_height = 0

    @property
    def renderer(self) -> Renderer2D:
        if self._renderer is None:
            self._renderer = Renderer2D()
        return self._renderer

    def __len__(self) -> int:
        return len(self._registry)

    # --- entities ------------------------------------------------------------

    def create_entity(
        self,
        name: str = "",
        translation: Sequence[float] = (0.0, 0.0, 0.0),
        uuid: Optional[int] = None,
    ) -> Entity:
        """Create an entity with an id, a transform and a tag.

        An empty name becomes ``"Entity"``; a missing uuid is generated.
        """
        handle = next(self._handles)
        self._registry[handle] = {}
        entity = Entity(handle, self)
        entity.add_component(UUIDComponent() if uuid is None else UUIDComponent(int(uuid)))
        entity.add_component(TransformComponent(translation=translation))
        entity.add_component(TagComponent(name if name else "Entity"))
        return entity

    def destroy_entity(self, entity: Entity) -> None:
        if entity.scene is not self or entity.handle not in self._registry:
            raise ValueError(f"{entity!r} does not belong to this scene")
        del self._registry[entity.handle]

    def entities(self) -> Iterator[Entity]:
        """All entities, in creation order."""
        for handle in list(self._registry):
            yield Entity(handle, self)

    def entities_with(self, *args: type) -> Iterator[Entity]:
        """Entities holding every one of the given component types."""
        for handle, components in list(self._registry.items()):
            if all(component_type in components for component_type in args):
                yield Entity(handle, self)

    def copy(self) -> "Scene":
        """Deep copy of the scene, keeping entity ids; shares the renderer."""
        new_scene = Scene(self.name, self._renderer)
        new_scene.viewport_width = self.viewport_width
        new_scene.viewport_height = self.viewport_height

        for components in self._registry.values():
            if UUIDComponent not in components:
                continue
            uuid = components[UUIDComponent].id
            tag = components[TagComponent].tag
            new_entity = new_scene.create_entity(tag, uuid=uuid)
            target = new_scene._registry[new_entity.handle]
            for component_type in _COPIED_TYPES:
                if component_type in components:
                    target[component_type] = _clone(components[component_type])
        return new_scene

    def duplicate_entity(self, entity: Entity) -> Entity:
        """Create a new entity with the same tag and copies of its components."""
        name = entity.get_component(TagComponent).tag
        new_entity = self.create_entity(name)
        for component_type in _COPIED_TYPES:
            if entity.has_component(component_type):
                new_entity.add_or_replace_component(
                    _clone(entity.get_component(component_type))
                )
        return new_entity

    # --- cameras and viewport ------------------------------------------------

    def on_viewport_resize(self, width: int, height: int) -> None:
        """Store the viewport size and resize cameras without a fixed aspect."""
        self.viewport_width = int(width)
        self.viewport_height = int(height)
        for entity in self.entities_with(CameraComponent):
            camera_component = entity.get_component(CameraComponent)
            if not camera_component.fixed_aspect_ratio:
                camera_component.camera.set_viewport_size(width, height)

    def primary_camera_entity(self) -> Entity:
        """First entity with a primary camera, or a null entity."""
        for entity in self.entities_with(CameraComponent):
            if entity.get_component(CameraComponent).primary:
                return entity
        return Entity()

    def _on_component_added(self, component: Any) -> None:
        if isinstance(component, CameraComponent):
            if self.viewport_width > 0 and self.viewport_height > 0:
                component.camera.set_viewport_size(self.viewport_width, self.viewport_height)

    # --- updates -------------------------------------------------------------

    def on_update_editor(self, ts: float, camera: EditorCamera) -> None:
        """Render the scene from the editor camera."""
        self.renderer.begin_scene(camera)
        self._draw_renderables()
        self.renderer.end_scene()

    def on_update_runtime(self, ts: float) -> None:
        """Run scripts, then render from the primary camera if there is one."""
        for entity in self.entities_with(ScriptComponent):
            script = entity.get_component(ScriptComponent)
            if script.instance is None:
                if script.instantiate_script is None:
                    raise RuntimeError(f"script on {entity!r} is not bound to a class")
                script.instance = script.instantiate_script()
                script.instance.entity = entity
                script.instance.on_create()
            script.instance.on_update(ts)

        main_camera = None
        camera_transform = None
        for entity in self.entities_with(TransformComponent, CameraComponent):
            camera_component = entity.get_component(CameraComponent)
            if camera_component.primary:
                main_camera = camera_component.camera
                camera_transform = entity.get_component(TransformComponent).transform()
                break

        if main_camera is None:
            return
        self.renderer.begin_scene(main_camera, camera_transform)
        self._draw_renderables()
        self.renderer.end_scene()

    def _draw_renderables(self) -> None:
        renderer = self.renderer
        for entity in self.entities_with(TransformComponent, SpriteRendererComponent):
            transform = entity.get_component(TransformComponent).transform()
            sprite = entity.get_component(SpriteRendererComponent)
            if sprite.texture is not None:
                renderer.draw_textured_quad(
                    transform, sprite.texture, sprite.tiling_factor, sprite.color, int(entity)
                )
            else:
                renderer.draw_sprite(transform, sprite.color, int(entity))

        for entity in self.entities_with(TransformComponent, CircleRendererComponent):
            transform = entity.get_component(TransformComponent).transform()
            circle = entity.get_component(CircleRendererComponent)
            renderer.draw_circle(
                transform, circle.color, circle.thickness, circle.fade, int(entity)
            )