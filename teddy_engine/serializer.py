"""Saving scenes to YAML text and loading them back."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence, Union

import numpy as np
import yaml

from teddy_engine.camera import ProjectionType
from teddy_engine.components import (
    BodyType,
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
from teddy_engine.render_api import Texture
from teddy_engine.scene import Entity, Scene

logger = logging.getLogger(__name__)

_BODY_TYPE_NAMES = {
    BodyType.STATIC: "Static",
    BodyType.DYNAMIC: "Dynamic",
    BodyType.KINEMATIC: "Kinematic",
}


def body_type_to_string(body_type: BodyType) -> str:
    """Name under which a rigid body type is written."""
    try:
        return _BODY_TYPE_NAMES[BodyType(body_type)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown body type: {body_type!r}") from None


def body_type_from_string(text: str) -> BodyType:
    """Rigid body type for a written name; raises ValueError if unknown."""
    for body_type, name in _BODY_TYPE_NAMES.items():
        if name == text:
            return body_type
    raise ValueError(f"Unknown body type: {text!r}")


class _Flow(list):
    """A sequence written on one line, as vectors are."""


class _Dumper(yaml.SafeDumper):
    pass


_Dumper.add_representer(
    _Flow,
    lambda dumper, value: dumper.represent_sequence(
        "tag:yaml.org,2002:seq", list(value), flow_style=True
    ),
)


def _flow(values: Sequence[float]) -> _Flow:
    return _Flow(float(v) for v in np.asarray(values, dtype=float).ravel())


def _require(node: Mapping[str, Any], key: str) -> Any:
    if not isinstance(node, Mapping) or key not in node:
        raise ValueError(f"missing key {key!r} in scene data")
    return node[key]


def _vector(node: Mapping[str, Any], key: str, size: int) -> np.ndarray:
    value = _require(node, key)
    if not isinstance(value, list) or len(value) != size:
        raise ValueError(f"{key!r} must be a sequence of {size} numbers")
    return np.array([float(v) for v in value], dtype=float)


def _float(node: Mapping[str, Any], key: str) -> float:
    return float(_require(node, key))


def _bool(node: Mapping[str, Any], key: str) -> bool:
    value = _require(node, key)
    if not isinstance(value, bool):
        raise ValueError(f"{key!r} must be a boolean")
    return value


def _entity_data(entity: Entity) -> Dict[str, Any]:
    out: Dict[str, Any] = {"EntityId": entity.get_component(UUIDComponent).id}

    if entity.has_component(TagComponent):
        out["TagComponent"] = {"Tag": entity.get_component(TagComponent).tag}

    if entity.has_component(TransformComponent):
        tc = entity.get_component(TransformComponent)
        out["TransformComponent"] = {
            "Translation": _flow(tc.translation),
            "Rotation": _flow(tc.rotation),
            "Scale": _flow(tc.scale),
        }

    if entity.has_component(CameraComponent):
        cc = entity.get_component(CameraComponent)
        camera = cc.camera
        out["CameraComponent"] = {
            "Camera": {
                "ProjectionType": camera.projection_type.value,
                "PerspectiveFOV": camera.perspective_vertical_fov,
                "PerspectiveNearClip": camera.perspective_near_clip,
                "PerspectiveFarClip": camera.perspective_far_clip,
                "OrthographicSize": camera.orthographic_size,
                "OrthographicNearClip": camera.orthographic_near_clip,
                "OrthographicFarClip": camera.orthographic_far_clip,
            },
            "Primary": bool(cc.primary),
            "FixedAspectRatio": bool(cc.fixed_aspect_ratio),
        }

    if entity.has_component(SpriteRendererComponent):
        src = entity.get_component(SpriteRendererComponent)
        out["SpriteRendererComponent"] = {
            "TintColor": _flow(src.color),
            "TextureFile": src.texture.path if src.texture is not None else 0,
            "TilingFactor": float(src.tiling_factor),
        }

    if entity.has_component(CircleRendererComponent):
        crc = entity.get_component(CircleRendererComponent)
        out["CircleRendererComponent"] = {
            "Color": _flow(crc.color),
            "Thickness": float(crc.thickness),
            "Fade": float(crc.fade),
        }

    if entity.has_component(ScriptComponent):
        out["CppScriptComponent"] = {
            "Class": entity.get_component(ScriptComponent).script_class
        }

    if entity.has_component(Rigid2DBodyComponent):
        rb = entity.get_component(Rigid2DBodyComponent)
        out["Rigid2DBodyComponent"] = {
            "BodyType": body_type_to_string(rb.type),
            "FixedRotation": bool(rb.fixed_rotation),
        }

    if entity.has_component(Box2DColliderComponent):
        bc = entity.get_component(Box2DColliderComponent)
        out["Box2DColliderComponent"] = {
            "Offset": _flow(bc.offset),
            "Size": _flow(bc.size),
            "Density": float(bc.density),
            "Friction": float(bc.friction),
            "Restitution": float(bc.restitution),
            "RestitutionThreshold": float(bc.restitution_threshold),
        }

    if entity.has_component(Circle2DColliderComponent):
        cc2 = entity.get_component(Circle2DColliderComponent)
        out["CircleCollider2DComponent"] = {
            "Offset": _flow(cc2.offset),
            "Radius": float(cc2.radius),
            "Density": float(cc2.density),
            "Friction": float(cc2.friction),
            "Restitution": float(cc2.restitution),
            "RestitutionThreshold": float(cc2.restitution_threshold),
        }

    return out


class SceneSerializer:
    """Writes a scene's entities to YAML and reads them back into a scene."""

    def __init__(self, scene: Scene) -> None:
        self.scene = scene

    def dumps(self) -> str:
        """The scene as YAML text."""
        data = {
            "Scene": "untitled",
            "Entities": [_entity_data(entity) for entity in self.scene.entities()],
        }
        return yaml.dump(data, Dumper=_Dumper, sort_keys=False, default_flow_style=False)

    def serialize(self, file_path: Union[str, Path]) -> None:
        Path(file_path).write_text(self.dumps(), encoding="utf-8")

    def loads(self, text: str) -> bool:
        """Add the entities described by ``text`` to the scene.

        Returns False if the text does not describe a scene.
        """
        data = yaml.safe_load(text)
        if not isinstance(data, Mapping) or not data.get("Scene"):
            return False
        logger.debug("Deserializing scene %r", data["Scene"])

        for node in data.get("Entities") or []:
            self._load_entity(node)
        return True

    def deserialize(self, file_path: Union[str, Path]) -> bool:
        return self.loads(Path(file_path).read_text(encoding="utf-8"))

    def _load_entity(self, node: Mapping[str, Any]) -> None:
        uuid = int(_require(node, "EntityId"))
        name = ""
        tag_node = node.get("TagComponent")
        if tag_node:
            name = str(_require(tag_node, "Tag"))
        logger.debug("Deserialized entity with ID = %d, name = %s", uuid, name)
        entity = self.scene.create_entity(name, uuid=uuid)

        transform_node = node.get("TransformComponent")
        if transform_node:
            tc = entity.get_component(TransformComponent)
            tc.translation = _vector(transform_node, "Translation", 3)
            tc.rotation = _vector(transform_node, "Rotation", 3)
            tc.scale = _vector(transform_node, "Scale", 3)

        camera_node = node.get("CameraComponent")
        if camera_node:
            cc = entity.add_component(CameraComponent())
            props = _require(camera_node, "Camera")
            camera = cc.camera
            camera.projection_type = ProjectionType(int(_require(props, "ProjectionType")))
            camera.perspective_vertical_fov = _float(props, "PerspectiveFOV")
            camera.perspective_near_clip = _float(props, "PerspectiveNearClip")
            camera.perspective_far_clip = _float(props, "PerspectiveFarClip")
            camera.orthographic_size = _float(props, "OrthographicSize")
            camera.orthographic_near_clip = _float(props, "OrthographicNearClip")
            camera.orthographic_far_clip = _float(props, "OrthographicFarClip")
            cc.primary = _bool(camera_node, "Primary")
            cc.fixed_aspect_ratio = _bool(camera_node, "FixedAspectRatio")

        sprite_node = node.get("SpriteRendererComponent")
        if sprite_node:
            src = entity.add_component(SpriteRendererComponent())
            src.color = _vector(sprite_node, "TintColor", 4)
            path = _require(sprite_node, "TextureFile")
            if path is not None and str(path) != "0":
                src.texture = Texture(path=str(path))
            src.tiling_factor = _float(sprite_node, "TilingFactor")

        circle_node = node.get("CircleRendererComponent")
        if circle_node:
            crc = entity.add_component(CircleRendererComponent())
            crc.color = _vector(circle_node, "Color", 4)
            crc.thickness = _float(circle_node, "Thickness")
            crc.fade = _float(circle_node, "Fade")

        body_node = node.get("Rigid2DBodyComponent")
        if body_node:
            rb = entity.add_component(Rigid2DBodyComponent())
            rb.type = body_type_from_string(str(_require(body_node, "BodyType")))
            rb.fixed_rotation = _bool(body_node, "FixedRotation")

        box_node = node.get("Box2DColliderComponent")
        if box_node:
            bc = entity.add_component(Box2DColliderComponent())
            bc.offset = _vector(box_node, "Offset", 2)
            bc.size = _vector(box_node, "Size", 2)
            bc.density = _float(box_node, "Density")
            bc.friction = _float(box_node, "Friction")
            bc.restitution = _float(box_node, "Restitution")
            bc.restitution_threshold = _float(box_node, "RestitutionThreshold")

        circle_collider_node = node.get("CircleCollider2DComponent")
        if circle_collider_node:
            cc2 = entity.add_component(Circle2DColliderComponent())
            cc2.offset = _vector(circle_collider_node, "Offset", 2)
            cc2.radius = _float(circle_collider_node, "Radius")
            cc2.density = _float(circle_collider_node, "Density")
            cc2.friction = _float(circle_collider_node, "Friction")
            cc2.restitution = _float(circle_collider_node, "Restitution")
            cc2.restitution_threshold = _float(circle_collider_node, "RestitutionThreshold")