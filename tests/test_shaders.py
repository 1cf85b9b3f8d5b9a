import numpy as np
import pytest

from teddy_engine.shaders import Shader, ShaderLibrary


def test_add_uses_shader_name():
    library = ShaderLibrary()
    shader = Shader("Flat", "vs", "fs")
    library.add(shader)
    assert library.exists("Flat")
    assert library.get("Flat") is shader


def test_add_under_explicit_name():
    library = ShaderLibrary()
    shader = Shader("Flat")
    library.add(shader, "Other")
    assert library.exists("Other")
    assert not library.exists("Flat")


def test_add_duplicate_raises():
    library = ShaderLibrary()
    library.add(Shader("Flat"))
    with pytest.raises(ValueError):
        library.add(Shader("Flat"))


def test_get_missing_raises():
    with pytest.raises(KeyError):
        ShaderLibrary().get("missing")


def test_load_from_file_names_by_stem(tmp_path):
    path = tmp_path / "QuadShader.glsl"
    path.write_text("#type vertex\nvoid main() {}\n", encoding="utf-8")
    library = ShaderLibrary()
    shader = library.load(path)
    assert shader.name == "QuadShader"
    assert shader.source == "#type vertex\nvoid main() {}\n"
    assert library.get("QuadShader") is shader


def test_load_with_name(tmp_path):
    path = tmp_path / "a.glsl"
    path.write_text("x", encoding="utf-8")
    library = ShaderLibrary()
    shader = library.load(path, "Custom")
    assert library.get("Custom") is shader
    assert "a" not in library


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ShaderLibrary().load(tmp_path / "none.glsl")


def test_uniforms_are_stored():
    shader = Shader("s")
    shader.set_int("i", 3)
    shader.set_float("f", 0.5)
    shader.set_int_array("arr", [0, 1, 2])
    shader.set_float3("v", (1, 2, 3))
    shader.set_mat4("m", np.identity(4))
    assert shader.uniforms["i"] == 3
    assert shader.uniforms["f"] == 0.5
    assert shader.uniforms["arr"] == (0, 1, 2)
    np.testing.assert_array_equal(shader.uniforms["v"], [1, 2, 3])
    np.testing.assert_array_equal(shader.uniforms["m"], np.identity(4))


def test_uniform_shape_checked():
    shader = Shader("s")
    with pytest.raises(ValueError):
        shader.set_float2("v", (1, 2, 3))
    with pytest.raises(ValueError):
        shader.set_mat4("m", np.identity(3))


def test_bind_unbind():
    shader = Shader("s")
    shader.bind()
    assert shader.bound is True
    shader.unbind()
    assert shader.bound is False