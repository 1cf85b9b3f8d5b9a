import json

import pytest

from teddy_engine.instrumentor import (
    InstrumentationTimer,
    Instrumentor,
    ProfileResult,
    get_instrumentor,
    profile_function,
)


def test_empty_session_is_valid_trace(tmp_path):
    path = tmp_path / "trace.json"
    inst = Instrumentor()
    inst.begin_session("empty", str(path))
    assert inst.session_name == "empty"
    inst.end_session()
    text = path.read_text()
    assert text.startswith('{"otherData": {},"traceEvents":[')
    assert json.loads(text)["traceEvents"] == []
    assert inst.session_name is None


def test_profiles_are_written_as_trace_events(tmp_path):
    path = tmp_path / "trace.json"
    inst = Instrumentor()
    inst.begin_session("s", str(path))
    inst.write_profile(ProfileResult("first", 100, 250, 7))
    inst.write_profile(ProfileResult("second", 300, 310, 8))
    inst.end_session()

    events = json.loads(path.read_text())["traceEvents"]
    assert [e["name"] for e in events] == ["first", "second"]
    first = events[0]
    assert first["cat"] == "function"
    assert first["ph"] == "X"
    assert first["pid"] == 0
    assert first["tid"] == 7
    assert first["ts"] == 100
    assert first["dur"] == 250 - 100


def test_double_quotes_in_names_become_single(tmp_path):
    path = tmp_path / "trace.json"
    inst = Instrumentor()
    inst.begin_session("s", str(path))
    inst.write_profile(ProfileResult('say "hi"', 0, 1, 0))
    inst.end_session()
    events = json.loads(path.read_text())["traceEvents"]
    assert events[0]["name"] == "say 'hi'"


def test_write_without_session_is_ignored(tmp_path):
    inst = Instrumentor()
    inst.write_profile(ProfileResult("lost", 0, 1, 0))
    path = tmp_path / "trace.json"
    inst.begin_session("s", str(path))
    inst.end_session()
    assert json.loads(path.read_text())["traceEvents"] == []


def test_second_begin_raises(tmp_path):
    inst = Instrumentor()
    inst.begin_session("a", str(tmp_path / "a.json"))
    try:
        with pytest.raises(RuntimeError):
            inst.begin_session("b", str(tmp_path / "b.json"))
    finally:
        inst.end_session()


def test_count_resets_between_sessions(tmp_path):
    inst = Instrumentor()
    for name in ("one.json", "two.json"):
        inst.begin_session(name, str(tmp_path / name))
        inst.write_profile(ProfileResult("x", 0, 5, 1))
        inst.end_session()
    for name in ("one.json", "two.json"):
        assert len(json.loads((tmp_path / name).read_text())["traceEvents"]) == 1


def test_timer_context_manager_writes_once(tmp_path):
    path = tmp_path / "trace.json"
    inst = Instrumentor()
    inst.begin_session("s", str(path))
    with InstrumentationTimer("block", inst) as timer:
        pass
    assert timer.stopped
    inst.end_session()

    events = json.loads(path.read_text())["traceEvents"]
    assert len(events) == 1
    assert events[0]["name"] == "block"
    assert events[0]["dur"] >= 0
    assert 0 <= events[0]["tid"] < 2**32


def test_explicit_stop_suppresses_exit_report(tmp_path):
    path = tmp_path / "trace.json"
    inst = Instrumentor()
    inst.begin_session("s", str(path))
    with InstrumentationTimer("manual", inst) as timer:
        timer.stop()
    inst.end_session()
    assert len(json.loads(path.read_text())["traceEvents"]) == 1


def test_profile_function_uses_global_instrumentor(tmp_path):
    @profile_function
    def add(a, b):
        return a + b

    path = tmp_path / "trace.json"
    inst = get_instrumentor()
    inst.begin_session("global", str(path))
    try:
        result = add(2, 3)
    finally:
        inst.end_session()

    assert result == 5
    events = json.loads(path.read_text())["traceEvents"]
    assert len(events) == 1
    assert events[0]["name"].endswith("add")
    assert add.__name__ == "add"