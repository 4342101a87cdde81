[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "meshforge"
version = "0.1.0"
description = "Procedural mesh building, OBJ loading and OpenGL shader and vertex array helpers"
requires-python = ">=3.10"
keywords = ["mesh", "opengl", "icosphere", "uv-sphere", "obj", "vertex", "shader", "pyglet"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
]
dependencies = [
    "numpy",
    "pyglet",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
meshforge = "meshforge.app:main"

[tool.hatch.build.targets.wheel]
packages = ["meshforge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
