"""Mesh building, procedural shapes, OBJ loading and OpenGL shader and vertex array helpers."""

__version__ = "0.1.0"