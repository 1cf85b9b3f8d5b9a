# teddy_engine

The core of a small 2D game engine in Python. It keeps all engine state on
the CPU: events, cameras, vertex batches, entities and their components. Scenes
can be saved to YAML and loaded back.

## Modules

- `teddy_engine.events`: `EventType`, the `EventCategory` flags and the event
  classes (`WindowResizeEvent`, `WindowCloseEvent`, `AppTickEvent`,
  `AppUpdateEvent`, `AppRenderEvent`, `KeyPressedEvent`, `KeyReleasedEvent`,
  `KeyTypedEvent`, `MouseMovedEvent`, `MouseScrolledEvent`,
  `MouseButtonPressedEvent`, `MouseButtonReleasedEvent`). `EventDispatcher`
  calls a handler when the event's type matches the class it is given. The
  handler's result is stored in the event's `handled` flag.
- `teddy_engine.instrumentor`: a profiler that writes Chrome trace-event JSON.
  `get_instrumentor()` returns the shared `Instrumentor`. The
  `begin_session(name, filepath="results.json")` and `end_session()` methods
  open and close the trace file. You can time spans with
  `InstrumentationTimer` (it also works as a context manager) or with the
  `profile_function` decorator.
- `teddy_engine.transforms`: 4×4 numpy matrix helpers. These are `translate`,
  `rotate`, `scale`, `ortho`, `perspective`, `quat_from_euler`, `quat_to_mat4`
  and `quat_rotate`. There is also `decompose_transform`, which splits a matrix
  into translation, Euler rotation and scale. It raises `ValueError` when the
  homogeneous weight is zero.
- `teddy_engine.buffer`: `ShaderDataType`, `shader_data_type_size`,
  `BufferElement` and `BufferLayout`. A layout gives each element its offset and
  computes the stride.
- `teddy_engine.camera`:
  - `Camera`.
  - `OrthographicCamera`, which has a position and a rotation in degrees.
  - `EditorCamera`, which orbits a focal point. It has pan, rotate and zoom, and
    zooms on mouse-scroll events.
  - `SceneCamera`, which has perspective or orthographic projection
    (`ProjectionType`).
- `teddy_engine.camera_controller`: `OrthographicCameraController` and
  `OrthographicCameraBounds`. The controller zooms on scroll events and takes a
  new aspect ratio on window-resize events.
- `teddy_engine.shaders`: `Shader` keeps its sources and stores uniform values.
  `ShaderLibrary` keeps shaders under unique names.
- `teddy_engine.render_api`:
  - `RendererAPI` is a headless backend. It records viewport, clear colour,
    line width and draw calls.
  - `RenderCommand` and `Renderer` sit on top of it.
  - The module also has `Texture`, `GraphicsAPI`, `FramebufferTextureFormat` and
    `FramebufferSpecification`.
- `teddy_engine.renderer2d`: `Renderer2D` batches quads, textured quads,
  circles, lines and rectangle outlines into vertex lists (`QuadVertex`,
  `CircleVertex`, `LineVertex`). It gives textures slots and tracks
  `Statistics` (draw calls and quad count).
- `teddy_engine.components`:
  - The components `UUIDComponent`, `TagComponent`, `TransformComponent`,
    `SpriteRendererComponent`, `CircleRendererComponent`, `CameraComponent`,
    `Rigid2DBodyComponent` (with `BodyType`), `Box2DColliderComponent` and
    `Circle2DColliderComponent`.
  - For scripts: `ScriptableEntity`, `ScriptComponent` and `ScriptRegistry`.
- `teddy_engine.scene`: `Scene` and `Entity`.
  - Entities are created with an id, a transform and a tag.
  - Scenes can be copied, and entities duplicated.
  - `on_viewport_resize` resizes the cameras that do not have a fixed aspect
    ratio.
  - `on_update_runtime` runs scripts and then draws from the primary camera.
  - `on_update_editor` draws from an `EditorCamera`.
- `teddy_engine.serializer`: `SceneSerializer` has `dumps`/`loads` for text and
  `serialize`/`deserialize` for files. The module also has
  `body_type_to_string` and `body_type_from_string`.

## Install

```
pip install .
```

## Example

```python
from teddy_engine.scene import Scene
from teddy_engine.components import SpriteRendererComponent
from teddy_engine.serializer import SceneSerializer

scene = Scene()
player = scene.create_entity("Player")
player.add_component(SpriteRendererComponent(color=(0.2, 0.8, 0.3, 1.0)))

SceneSerializer(scene).serialize("level.yaml")

loaded = Scene()
SceneSerializer(loaded).deserialize("level.yaml")
```

Send events through a dispatcher:

```python
from teddy_engine.events import EventDispatcher, MouseScrolledEvent

event = MouseScrolledEvent(0.0, 1.5)
EventDispatcher(event).dispatch(MouseScrolledEvent, lambda e: True)
assert event.handled
```

Profile a function:

```python
from teddy_engine.instrumentor import get_instrumentor, profile_function

@profile_function
def work():
    return sum(range(1000))

get_instrumentor().begin_session("demo", "trace.json")
work()
get_instrumentor().end_session()
```

## What it does not do

- **No window, input polling or GPU.** The rendering classes only keep state:
  vertex batches, bound shaders, uniforms and a list of recorded draw calls.
  Nothing is drawn on screen, and shaders are not compiled.
- **Textures are not decoded.** A `Texture` read from a scene file carries only
  its path. No image data is loaded.
- **No physics.** Rigid body and collider components are stored, copied and
  saved, but the package does not simulate them.
- **Script instances are not restored from files.** Script components are saved
  by class name. Loading a scene does not recreate them.
- **No command-line program.**

## Tests

```
pip install .[test]
pytest
```