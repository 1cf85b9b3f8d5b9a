"""Lightweight profiler writing Chrome trace-event JSON."""

from __future__ import annotations

import functools
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, TextIO, TypeVar

_HEADER = '{"otherData": {},"traceEvents":['
_FOOTER = "]}"

F = TypeVar("F", bound=Callable)


@dataclass(frozen=True)
class ProfileResult:
    """One timed span, in microseconds."""

    name: str
    start: int
    end: int
    thread_id: int


class Instrumentor:
    """Writes profile results of one session at a time to a trace file."""

    def __init__(self) -> None:
        self._session_name: Optional[str] = None
        self._stream: Optional[TextIO] = None
        self._profile_count = 0
        self._lock = threading.Lock()

    @property
    def session_name(self) -> Optional[str]:
        return self._session_name

    def begin_session(self, name: str, filepath: str = "results.json") -> None:
        """Open ``filepath`` and start a session named ``name``."""
        with self._lock:
            if self._stream is not None:
                raise RuntimeError(f"session {self._session_name!r} is already active")
            self._stream = open(filepath, "w", encoding="utf-8")
            self._stream.write(_HEADER)
            self._stream.flush()
            self._session_name = name

    def end_session(self) -> None:
        """Close the trace file; does nothing when no session is active."""
        with self._lock:
            if self._stream is None:
                return
            self._stream.write(_FOOTER)
            self._stream.flush()
            self._stream.close()
            self._stream = None
            self._session_name = None
            self._profile_count = 0

    def write_profile(self, result: ProfileResult) -> None:
        """Append one trace event; ignored when no session is active."""
        with self._lock:
            if self._stream is None:
                return
            if self._profile_count > 0:
                self._stream.write(",")
            self._profile_count += 1

            name = result.name.replace('"', "'")
            self._stream.write(
                "{"
                '"cat":"function",'
                f'"dur":{result.end - result.start},'
                f'"name":"{name}",'
                '"ph":"X",'
                '"pid":0,'
                f'"tid":{result.thread_id},'
                f'"ts":{result.start}'
                "}"
            )
            self._stream.flush()


_INSTANCE = Instrumentor()


def get_instrumentor() -> Instrumentor:
    """Return the process-wide instrumentor."""
    return _INSTANCE


def _now_us() -> int:
    return time.perf_counter_ns() // 1000


class InstrumentationTimer:
    """Times a span and reports it when stopped or when its block exits."""

    def __init__(self, name: str, instrumentor: Optional[Instrumentor] = None) -> None:
        self.name = name
        self._instrumentor = instrumentor if instrumentor is not None else get_instrumentor()
        self._start = _now_us()
        self.stopped = False

    def stop(self) -> None:
        end = _now_us()
        thread_id = threading.get_ident() & 0xFFFFFFFF
        self._instrumentor.write_profile(
            ProfileResult(self.name, self._start, end, thread_id)
        )
        self.stopped = True

    def __enter__(self) -> "InstrumentationTimer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self.stopped:
            self.stop()


def profile_function(func: F) -> F:
    """Decorate ``func`` so each call is timed under its qualified name."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with InstrumentationTimer(func.__qualname__):
            return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]