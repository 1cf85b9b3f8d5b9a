"""Core of a small 2D game engine: events, profiling, cameras, 2D batching, scenes and YAML scene files."""

__version__ = "0.1.0"