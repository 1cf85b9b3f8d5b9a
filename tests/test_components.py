import math

import numpy as np
import pytest

from teddy_engine.camera import SceneCamera
from teddy_engine.components import (
    BodyType,
    Box2DColliderComponent,
    CameraComponent,
    Circle2DColliderComponent,
    CircleRendererComponent,
    Rigid2DBodyComponent,
    ScriptableEntity,
    ScriptComponent,
    ScriptRegistry,
    SpriteRendererComponent,
    TagComponent,
    TransformComponent,
    UUIDComponent,
)
from teddy_engine.transforms import decompose_transform


class _Mover(ScriptableEntity):
    def __init__(self):
        super().__init__()
        self.updates = []

    def on_update(self, ts):
        self.updates.append(ts)


class _FakeEntity:
    def __init__(self, components):
        self.components = components

    def get_component(self, component_type):
        return self.components[component_type]


def test_default_transform_is_identity():
    np.testing.assert_allclose(TransformComponent().transform(), np.identity(4))


def test_translation_in_last_column():
    tc = TransformComponent((1.0, 2.0, 3.0))
    np.testing.assert_allclose(tc.transform()[:3, 3], [1.0, 2.0, 3.0])


@pytest.mark.parametrize("rotation", [(0.0, 0.0, 0.3), (0.2, 0.0, 0.0), (0.0, 0.4, 0.0)])
def test_transform_decomposes_back(rotation):
    tc = TransformComponent((1.0, -2.0, 0.5), rotation, (2.0, 3.0, 4.0))
    translation, rot, scl = decompose_transform(tc.transform())
    np.testing.assert_allclose(translation, tc.translation, atol=1e-9)
    np.testing.assert_allclose(rot, rotation, atol=1e-9)
    np.testing.assert_allclose(scl, tc.scale, atol=1e-9)


def test_uuid_components_differ():
    assert UUIDComponent().id != UUIDComponent().id or UUIDComponent().id != UUIDComponent().id
    assert 0 <= UUIDComponent().id < 2**64


def test_tag_component():
    assert TagComponent("Player").tag == "Player"


def test_renderer_component_defaults():
    sprite = SpriteRendererComponent()
    np.testing.assert_array_equal(sprite.color, np.ones(4))
    assert sprite.texture is None
    assert sprite.tiling_factor == 1.0
    circle = CircleRendererComponent()
    assert circle.thickness == 1.0
    assert circle.fade == 0.005


def test_physics_component_defaults():
    rb = Rigid2DBodyComponent()
    assert rb.type is BodyType.STATIC
    assert rb.fixed_rotation is False
    box = Box2DColliderComponent()
    np.testing.assert_array_equal(box.size, [0.5, 0.5])
    assert box.friction == 0.5
    assert box.restitution_threshold == 0.5
    circle = Circle2DColliderComponent()
    assert circle.radius == 0.5
    assert circle.density == 1.0


def test_camera_component_defaults():
    cc = CameraComponent()
    assert isinstance(cc.camera, SceneCamera) and cc.primary is True
    assert cc.fixed_aspect_ratio is False


def test_script_component_bind_and_destroy():
    sc = ScriptComponent()
    sc.bind(_Mover)
    assert sc.script_class == _Mover.__qualname__
    sc.instance = sc.instantiate_script()
    sc.instance.on_update(0.5)
    assert sc.instance.updates == [0.5]
    sc.destroy()
    assert sc.instance is None


def test_script_registry_round_trip():
    registry = ScriptRegistry()
    assert registry.register(_Mover) is _Mover
    script = registry.create_script(_Mover.__qualname__)
    assert isinstance(script, _Mover)
    assert registry.create_script("Unknown") is None


def test_scriptable_entity_get_component():
    script = _Mover()
    with pytest.raises(RuntimeError):
        script.get_component(TagComponent)
    tag = TagComponent("Hero")
    script.entity = _FakeEntity({TagComponent: tag})
    assert script.get_component(TagComponent) is tag


def test_transform_rotation_z_matrix():
    tc = TransformComponent(rotation=(0.0, 0.0, math.pi / 2))
    np.testing.assert_allclose(tc.transform() @ [1.0, 0.0, 0.0, 1.0], [0.0, 1.0, 0.0, 1.0], atol=1e-12)