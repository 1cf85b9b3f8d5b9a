[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "teddy_engine"
version = "0.1.0"
description = "Core of a small 2D game engine: events, profiling, cameras, batched 2D rendering state, an entity scene and YAML scene files."
requires-python = ">=3.10"
keywords = ["game engine", "ecs", "2d", "renderer", "scene", "camera", "profiler"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]
dependencies = [
    "numpy",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["teddy_engine"]

[tool.pytest.ini_options]
addopts = "-ra"
