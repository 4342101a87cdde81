"""Shader program wrapper: compiling parts, linking and setting uniforms.

The wrapper talks to OpenGL through a `gl` object with these methods:
create_program, delete_program, create_shader, shader_source, compile_shader,
get_shader_compile_status, get_shader_info_log, delete_shader, attach_shader,
detach_shader, link_program, get_program_link_status, get_program_info_log,
use_program, get_uniform_location, program_uniform_float, program_uniform_int
and program_uniform_matrix.
"""

from __future__ import annotations

import os
from enum import IntEnum
from pathlib import Path
from typing import Any

import numpy as np

from .log import get_logger, log_assert, log_error

_MATRIX_DIMS = (3, 4)
_VECTOR_SIZES = (2, 3, 4)


class ShaderPartType(IntEnum):
    """Shader stage (OpenGL enum values)."""

    VERTEX = 0x8B31
    FRAGMENT = 0x8B30
    UNKNOWN = 0


class ShaderError(RuntimeError):
    """A shader part failed to load or compile, or a program failed to link."""


class Shader:
    """An OpenGL shader program built from a vertex and a fragment stage."""

    def __init__(self, gl: Any) -> None:
        self._gl = gl
        self._vs = 0
        self._fs = 0
        self._uniform_locations: dict[str, int] = {}
        self._handle = gl.create_program()

    @property
    def handle(self) -> int:
        """The underlying program handle (0 once deleted)."""
        return self._handle

    def __enter__(self) -> Shader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.delete()

    def load_shader_part(self, source: str, part_type: ShaderPartType) -> None:
        """Compile one stage from source; raise ShaderError if it does not compile."""
        part_type = ShaderPartType(part_type)
        gl = self._gl
        handle = gl.create_shader(part_type)
        gl.shader_source(handle, source)
        gl.compile_shader(handle)

        if not gl.get_shader_compile_status(handle):
            info = gl.get_shader_info_log(handle)
            log_error("Failed to compile shader part:\n{}", info)
            gl.delete_shader(handle)
            raise ShaderError(f"Failed to compile shader part:\n{info}")

        if part_type is ShaderPartType.VERTEX:
            self._vs = handle
        elif part_type is ShaderPartType.FRAGMENT:
            self._fs = handle
        else:
            get_logger().warning("Not implemented")
            gl.delete_shader(handle)

    def load_shader_part_from_file(self, path: str | os.PathLike, part_type: ShaderPartType) -> None:
        """Compile one stage from the contents of a file."""
        try:
            source = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            get_logger().warning('Could not open file at "%s"', path)
            raise ShaderError(f'Could not open file at "{path}"') from exc
        self.load_shader_part(source, part_type)

    def link(self) -> None:
        """Link the loaded stages into the program; raise ShaderError on failure."""
        log_assert(self._vs != 0 and self._fs != 0, "Must attach both a vertex and fragment shader!")
        gl = self._gl

        gl.attach_shader(self._handle, self._vs)
        gl.attach_shader(self._handle, self._fs)
        gl.link_program(self._handle)

        # The stages are only needed to build the program.
        for part in (self._vs, self._fs):
            gl.detach_shader(self._handle, part)
            gl.delete_shader(part)
        self._vs = self._fs = 0

        if not gl.get_program_link_status(self._handle):
            info = gl.get_program_info_log(self._handle)
            if info:
                log_error("Shader failed to link:\n{}", info)
                raise ShaderError(f"Shader failed to link:\n{info}")
            log_error("Shader failed to link for an unknown reason!")
            raise ShaderError("Shader failed to link for an unknown reason!")

    def bind(self) -> None:
        """Make this program current."""
        self._gl.use_program(self._handle)

    def unbind(self) -> None:
        """Make no program current."""
        self._gl.use_program(0)

    def _resolve(self, location: int | str) -> int | None:
        if not isinstance(location, str):
            return int(location)
        found = self._uniform_locations.get(location)
        if found is None:
            found = self._gl.get_uniform_location(self._handle, location)
            self._uniform_locations[location] = found
        if found == -1:
            get_logger().warning('Ignoring uniform "%s"', location)
            return None
        return found

    @staticmethod
    def _components(arr: np.ndarray, count: int) -> int:
        if count < 1:
            raise ValueError("count must be at least 1")
        shape = arr.shape if count > 1 else (1, *arr.shape)
        if len(shape) == 1 and shape[0] == count:
            return 1
        if len(shape) == 2 and shape[0] == count and shape[1] in _VECTOR_SIZES:
            return shape[1]
        raise ValueError(f"cannot use a value of shape {arr.shape} as {count} uniform(s)")

    def set_uniform(self, location: int | str, value: Any, count: int = 1) -> None:
        """Set a scalar or vector uniform (float, int or bool) by location or by name."""
        loc = self._resolve(location)
        if loc is None:
            return
        arr = np.asarray(value)
        size = self._components(arr, count)
        kind = arr.dtype.kind
        gl = self._gl
        if kind == "b":
            log_assert(count == 1, "SetUniform for bools only supports setting single values at a time!")
            gl.program_uniform_int(self._handle, loc, size, 1, [int(v) for v in arr.ravel()])
        elif kind in "iu":
            gl.program_uniform_int(self._handle, loc, size, count, [int(v) for v in arr.ravel()])
        elif kind == "f":
            gl.program_uniform_float(self._handle, loc, size, count, [float(v) for v in arr.ravel()])
        else:
            raise TypeError(f"unsupported uniform value type {arr.dtype}")

    def set_uniform_matrix(self, location: int | str, value: Any, count: int = 1,
                           transposed: bool = False) -> None:
        """Set a 3x3 or 4x4 matrix uniform; matrices are sent in column-major order."""
        loc = self._resolve(location)
        if loc is None:
            return
        if count < 1:
            raise ValueError("count must be at least 1")
        arr = np.asarray(value, dtype=float)
        if count == 1 and arr.ndim == 2:
            arr = arr[np.newaxis]
        if (arr.ndim != 3 or arr.shape[0] != count or arr.shape[1] != arr.shape[2]
                or arr.shape[1] not in _MATRIX_DIMS):
            raise ValueError(f"cannot use a value of shape {np.shape(value)} as {count} matrix uniform(s)")
        values = arr.transpose(0, 2, 1).ravel().tolist()
        self._gl.program_uniform_matrix(self._handle, loc, arr.shape[1], count, bool(transposed), values)

    def delete(self) -> None:
        """Delete the program; further deletes do nothing."""
        if self._handle != 0:
            self._gl.delete_program(self._handle)
            self._handle = 0