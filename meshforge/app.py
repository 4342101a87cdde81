"""Interactive demo: draws a triangle, a generated mesh and an OBJ model."""

from __future__ import annotations

import argparse
import logging
import math
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

import numpy as np

from .log import get_logger, init_logging, log_error, uninitialize
from .mesh_builder import BakedMesh, MeshBuilder
from .obj_loader import load_from_file
from .shader import Shader, ShaderError, ShaderPartType
from .shapes import add_cube
from .spheres import add_ico_sphere
from .transforms import look_at, perspective, rotation, translation
from .vertex_array import VertexArrayObject
from .vertex_types import AttribUsage, AttributeType, BufferAttribute, VertexPosCol

GL_DEBUG_SOURCE_API = 0x8246
GL_DEBUG_SOURCE_WINDOW_SYSTEM = 0x8247
GL_DEBUG_SOURCE_SHADER_COMPILER = 0x8248
GL_DEBUG_SOURCE_THIRD_PARTY = 0x8249
GL_DEBUG_SOURCE_APPLICATION = 0x824A
GL_DEBUG_SOURCE_OTHER = 0x824B

GL_DEBUG_SEVERITY_HIGH = 0x9146
GL_DEBUG_SEVERITY_MEDIUM = 0x9147
GL_DEBUG_SEVERITY_LOW = 0x9148
GL_DEBUG_SEVERITY_NOTIFICATION = 0x826B

_ARRAY_BUFFER = 0x8892
_ELEMENT_ARRAY_BUFFER = 0x8893

_SOURCE_LABELS = {
    GL_DEBUG_SOURCE_API: "DEBUG",
    GL_DEBUG_SOURCE_WINDOW_SYSTEM: "WINDOW",
    GL_DEBUG_SOURCE_SHADER_COMPILER: "SHADER",
    GL_DEBUG_SOURCE_THIRD_PARTY: "THIRD PARTY",
    GL_DEBUG_SOURCE_APPLICATION: "APP",
    GL_DEBUG_SOURCE_OTHER: "OTHER",
}

WINDOW_SIZE = (800, 800)
WINDOW_TITLE = "meshforge"
MVP_UNIFORM = "u_ModelViewProjection"

_Z_AXIS = (0.0, 0.0, 1.0)
_X_AXIS = (1.0, 0.0, 0.0)


def source_label(source: int) -> str:
    """Short label for the part of OpenGL that sent a debug message."""
    return _SOURCE_LABELS.get(source, "OTHER")


def gl_debug_message(source: int, severity: int, message: str) -> int | None:
    """Log an OpenGL debug message at a level matching its severity.

    Returns the logging level used, or None when the message was dropped.
    """
    label = source_label(source)
    logger = get_logger()
    if severity == GL_DEBUG_SEVERITY_HIGH:
        log_error("[{}] {}", label, message)
        return logging.ERROR
    if severity == GL_DEBUG_SEVERITY_MEDIUM:
        logger.warning("[%s] %s", label, message)
        return logging.WARNING
    if severity in (GL_DEBUG_SEVERITY_LOW, GL_DEBUG_SEVERITY_NOTIFICATION):
        logger.info("[%s] %s", label, message)
        return logging.INFO
    return None


@dataclass
class RotationToggle:
    """Flips rotation on and off once per key press, ignoring a held key."""

    rotating: bool = True
    pressed: bool = False

    def update(self, pressed: bool) -> bool:
        """Feed the current key state; return whether rotation is on."""
        if pressed and not self.pressed:
            self.rotating = not self.rotating
        self.pressed = bool(pressed)
        return self.rotating


@dataclass
class _ShaderPart:
    kind: int
    source: str = ""
    compiled: Any = None
    log: str = ""


@dataclass(eq=False)
class _GpuBuffer:
    gl: PygletGL
    target: int
    handle: int
    element_count: int
    element_type: int = AttributeType.FLOAT

    def bind(self) -> None:
        self.gl.bind_buffer(self.target, self.handle)

    def delete(self) -> None:
        if self.handle:
            self.gl.delete_buffer(self.handle)
            self.handle = 0


class PygletGL:
    """The OpenGL calls used by Shader and VertexArrayObject, backed by pyglet."""

    _PART_KINDS = {ShaderPartType.VERTEX: "vertex", ShaderPartType.FRAGMENT: "fragment"}

    def __init__(self) -> None:
        from pyglet import gl
        from pyglet.graphics import shader as pyglet_shader

        self._gl = gl
        self._shader_module = pyglet_shader
        self._parts: dict[int, _ShaderPart] = {}
        self._next_part = 1
        self._debug_callback: Any = None

    # Programs and shader stages

    def create_program(self) -> int:
        return int(self._gl.glCreateProgram())

    def delete_program(self, program: int) -> None:
        self._gl.glDeleteProgram(program)

    def create_shader(self, part_type: int) -> int:
        key = self._next_part
        self._next_part += 1
        self._parts[key] = _ShaderPart(int(part_type))
        return key

    def shader_source(self, shader: int, source: str) -> None:
        self._parts[shader].source = source

    def compile_shader(self, shader: int) -> None:
        part = self._parts[shader]
        kind = self._PART_KINDS.get(ShaderPartType(part.kind))
        if kind is None:
            part.log = f"unsupported shader stage {part.kind:#x}"
            return
        try:
            part.compiled = self._shader_module.Shader(part.source, kind)
        except self._shader_module.ShaderException as exc:
            part.compiled = None
            part.log = str(exc)

    def get_shader_compile_status(self, shader: int) -> bool:
        return self._parts[shader].compiled is not None

    def get_shader_info_log(self, shader: int) -> str:
        return self._parts[shader].log

    def delete_shader(self, shader: int) -> None:
        part = self._parts.pop(shader, None)
        if part is not None and part.compiled is not None:
            part.compiled.delete()

    def attach_shader(self, program: int, shader: int) -> None:
        self._gl.glAttachShader(program, self._parts[shader].compiled.id)

    def detach_shader(self, program: int, shader: int) -> None:
        self._gl.glDetachShader(program, self._parts[shader].compiled.id)

    def link_program(self, program: int) -> None:
        self._gl.glLinkProgram(program)

    def get_program_link_status(self, program: int) -> bool:
        gl = self._gl
        status = gl.GLint(0)
        gl.glGetProgramiv(program, gl.GL_LINK_STATUS, status)
        return bool(status.value)

    def get_program_info_log(self, program: int) -> str:
        gl = self._gl
        length = gl.GLint(0)
        gl.glGetProgramiv(program, gl.GL_INFO_LOG_LENGTH, length)
        if length.value <= 0:
            return ""
        buffer = (gl.GLchar * length.value)()
        gl.glGetProgramInfoLog(program, length.value, None, buffer)
        return buffer.value.decode("utf-8", errors="replace")

    def use_program(self, program: int) -> None:
        self._gl.glUseProgram(program)

    def get_uniform_location(self, program: int, name: str) -> int:
        gl = self._gl
        raw = name.encode("utf-8") + b"\0"
        return int(gl.glGetUniformLocation(program, (gl.GLchar * len(raw)).from_buffer_copy(raw)))

    def program_uniform_float(self, program: int, location: int, size: int, count: int,
                              values: Sequence[float]) -> None:
        gl = self._gl
        setter = {
            1: gl.glProgramUniform1fv, 2: gl.glProgramUniform2fv,
            3: gl.glProgramUniform3fv, 4: gl.glProgramUniform4fv,
        }[size]
        setter(program, location, count, (gl.GLfloat * len(values))(*values))

    def program_uniform_int(self, program: int, location: int, size: int, count: int,
                            values: Sequence[int]) -> None:
        gl = self._gl
        setter = {
            1: gl.glProgramUniform1iv, 2: gl.glProgramUniform2iv,
            3: gl.glProgramUniform3iv, 4: gl.glProgramUniform4iv,
        }[size]
        setter(program, location, count, (gl.GLint * len(values))(*values))

    def program_uniform_matrix(self, program: int, location: int, dim: int, count: int,
                               transposed: bool, values: Sequence[float]) -> None:
        gl = self._gl
        setter = {3: gl.glProgramUniformMatrix3fv, 4: gl.glProgramUniformMatrix4fv}[dim]
        flag = gl.GL_TRUE if transposed else gl.GL_FALSE
        setter(program, location, count, flag, (gl.GLfloat * len(values))(*values))

    # Vertex arrays and buffers

    def create_vertex_array(self) -> int:
        handle = self._gl.GLuint(0)
        self._gl.glGenVertexArrays(1, handle)
        return int(handle.value)

    def delete_vertex_array(self, handle: int) -> None:
        self._gl.glDeleteVertexArrays(1, self._gl.GLuint(handle))

    def bind_vertex_array(self, handle: int) -> None:
        self._gl.glBindVertexArray(handle)

    def create_buffer(self, target: int, data: bytes) -> int:
        gl = self._gl
        handle = gl.GLuint(0)
        gl.glGenBuffers(1, handle)
        gl.glBindBuffer(target, handle.value)
        payload = (gl.GLubyte * len(data)).from_buffer_copy(data)
        gl.glBufferData(target, len(data), payload, gl.GL_STATIC_DRAW)
        gl.glBindBuffer(target, 0)
        return int(handle.value)

    def delete_buffer(self, handle: int) -> None:
        self._gl.glDeleteBuffers(1, self._gl.GLuint(handle))

    def bind_buffer(self, target: int, handle: int) -> None:
        self._gl.glBindBuffer(target, handle)

    def enable_vertex_array_attrib(self, vao: int, slot: int) -> None:
        self._gl.glEnableVertexAttribArray(slot)

    def vertex_attrib_pointer(self, slot: int, size: int, attrib_type: int, normalized: bool,
                              stride: int, offset: int) -> None:
        gl = self._gl
        flag = gl.GL_TRUE if normalized else gl.GL_FALSE
        gl.glVertexAttribPointer(slot, size, int(attrib_type), flag, stride, offset or None)

    def draw_arrays(self, mode: int, first: int, count: int) -> None:
        self._gl.glDrawArrays(int(mode), first, count)

    def draw_elements(self, mode: int, count: int, element_type: int) -> None:
        self._gl.glDrawElements(int(mode), count, int(element_type), None)

    # Frame state

    def setup_state(self, clear_color: Sequence[float]) -> None:
        gl = self._gl
        gl.glEnable(gl.GL_DEPTH_TEST)
        gl.glEnable(gl.GL_CULL_FACE)
        gl.glCullFace(gl.GL_BACK)
        gl.glClearColor(*clear_color)

    def viewport(self, width: int, height: int) -> None:
        self._gl.glViewport(0, 0, width, height)

    def clear(self) -> None:
        gl = self._gl
        gl.glClear(gl.GL_COLOR_BUFFER_BIT | gl.GL_DEPTH_BUFFER_BIT)

    def enable_debug_output(self) -> bool:
        """Route driver debug messages to gl_debug_message when the context allows it."""
        gl = self._gl
        proc_type = getattr(gl, "GLDEBUGPROC", None)
        register = getattr(gl, "glDebugMessageCallback", None)
        if proc_type is None or register is None:
            return False

        def on_message(source, _type, _id, severity, length, message, _user):
            text = message[:length].decode("utf-8", errors="replace") if length > 0 else ""
            gl_debug_message(source, severity, text)

        self._debug_callback = proc_type(on_message)
        gl.glEnable(gl.GL_DEBUG_OUTPUT)
        gl.glEnable(gl.GL_DEBUG_OUTPUT_SYNCHRONOUS)
        register(self._debug_callback, None)
        return True


def _buffer(gl: PygletGL, target: int, data: np.ndarray, count: int,
            element_type: int = AttributeType.FLOAT) -> _GpuBuffer:
    return _GpuBuffer(gl, target, gl.create_buffer(target, data.tobytes()), count, element_type)


def _upload(gl: PygletGL, baked: BakedMesh) -> VertexArrayObject:
    vao = VertexArrayObject(gl)
    vbo = _buffer(gl, _ARRAY_BUFFER, baked.vertex_data, len(baked.vertex_data))
    vao.add_vertex_buffer(vbo, baked.attributes)
    if len(baked.index_data):
        ibo = _buffer(gl, _ELEMENT_ARRAY_BUFFER, baked.index_data, len(baked.index_data),
                      AttributeType.UINT)
        vao.set_index_buffer(ibo)
    return vao


def _triangle(gl: PygletGL) -> VertexArrayObject:
    points = np.array([-0.5, -0.5, 0.5, 0.5, -0.5, 0.5, -0.5, 0.5, 0.5], dtype="<f4")
    colors = np.array([1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0], dtype="<f4")
    vao = VertexArrayObject(gl)
    vao.add_vertex_buffer(_buffer(gl, _ARRAY_BUFFER, points, 3), [
        BufferAttribute(0, 3, AttributeType.FLOAT, 0, 0, AttribUsage.POSITION),
    ])
    vao.add_vertex_buffer(_buffer(gl, _ARRAY_BUFFER, colors, 3), [
        BufferAttribute(1, 3, AttributeType.FLOAT, 0, 0, AttribUsage.COLOR),
    ])
    return vao


def _interleaved_quad(gl: PygletGL) -> VertexArrayObject:
    interleaved = np.array([
        0.5, -0.5, 0.5, 0.0, 0.0, 0.0,
        0.5, 0.5, 0.5, 0.3, 0.2, 0.5,
        -0.5, 0.5, 0.5, 1.0, 1.0, 0.0,
        -0.5, -0.5, 0.5, 1.0, 1.0, 1.0,
    ], dtype="<f4")
    indices = np.array([3, 0, 1, 3, 1, 2], dtype="<u2")
    stride = 4 * 6
    vao = VertexArrayObject(gl)
    vao.add_vertex_buffer(_buffer(gl, _ARRAY_BUFFER, interleaved, 4), [
        BufferAttribute(0, 3, AttributeType.FLOAT, stride, 0, AttribUsage.POSITION),
        BufferAttribute(1, 3, AttributeType.FLOAT, stride, 4 * 3, AttribUsage.COLOR),
    ])
    vao.set_index_buffer(_buffer(gl, _ELEMENT_ARRAY_BUFFER, indices, len(indices), AttributeType.USHORT))
    return vao


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="meshforge", description="Render a few sample meshes.")
    parser.add_argument("--shaders", default="shaders", help="directory holding the GLSL files")
    parser.add_argument("--model", default="Monkey.obj", help="OBJ model to draw")
    return parser.parse_args(argv)


def _create_window(pyglet: Any) -> Any:
    width, height = WINDOW_SIZE
    try:
        config = pyglet.gl.Config(major_version=4, minor_version=3, forward_compatible=True,
                                  double_buffer=True, depth_size=24, debug=True)
        return pyglet.window.Window(width, height, WINDOW_TITLE, resizable=True, config=config)
    except pyglet.window.NoSuchConfigException:
        return pyglet.window.Window(width, height, WINDOW_TITLE, resizable=True)


def main(argv: Sequence[str] | None = None) -> int:
    """Open the window and run the render loop until it is closed."""
    args = _parse_args(argv)
    init_logging()
    try:
        return _run(args)
    finally:
        uninitialize()


def _run(args: argparse.Namespace) -> int:
    import pyglet
    from pyglet.window import key

    logger = get_logger()
    try:
        window = _create_window(pyglet)
    except Exception as exc:  # window system failures come in many types
        log_error("Failed to create a window: {}", exc)
        return 1

    gl = PygletGL()
    gl.enable_debug_output()

    triangle = _triangle(gl)
    _interleaved_quad(gl)

    shader_dir = Path(args.shaders)
    shader = Shader(gl)
    try:
        shader.load_shader_part_from_file(shader_dir / "vertex_shader.glsl", ShaderPartType.VERTEX)
        shader.load_shader_part_from_file(shader_dir / "frag_shader.glsl", ShaderPartType.FRAGMENT)
        shader.link()
    except (ShaderError, AssertionError) as exc:
        log_error("Could not build the shader program: {}", exc)
        window.close()
        return 1

    gl.setup_state((0.2, 0.2, 0.2, 1.0))

    logger.info("Starting mesh build")
    mesh = MeshBuilder(VertexPosCol)
    add_ico_sphere(mesh, (1.0, 0.0, 0.0), 0.5, 3)
    add_cube(mesh, (0.0, 0.0, 0.0), 0.5)
    generated = _upload(gl, mesh.bake())

    try:
        model = _upload(gl, load_from_file(args.model))
    except (OSError, ValueError) as exc:
        log_error("Failed to load model {}: {}", args.model, exc)
        window.close()
        return 1

    keys = key.KeyStateHandler()
    window.push_handlers(keys)
    toggle = RotationToggle()
    view = look_at((0.0, 3.0, 3.0), (0.0, 0.0, 0.0))
    state = {"size": WINDOW_SIZE, "transform": np.eye(4)}
    start = time.perf_counter()

    @window.event
    def on_resize(width: int, height: int) -> bool:
        fb_width, fb_height = window.get_framebuffer_size()
        gl.viewport(fb_width, fb_height)
        state["size"] = (max(width, 1), max(height, 1))
        return True

    @window.event
    def on_draw() -> None:
        now = time.perf_counter() - start
        if toggle.update(bool(keys[key.W])):
            state["transform"] = rotation(now, _Z_AXIS)
        transform2 = rotation(-now, _Z_AXIS) @ translation((0.0, 0.0, math.sin(now)))
        transform3 = rotation(-now, _X_AXIS) @ translation((0.0, math.sin(now), 0.0))

        width, height = state["size"]
        view_projection = perspective(math.radians(60.0), width / height, 0.01, 1000.0) @ view

        gl.clear()
        shader.bind()
        for transform, vao in ((state["transform"], triangle), (transform2, generated), (transform3, model)):
            shader.set_uniform_matrix(MVP_UNIFORM, view_projection @ transform)
            vao.draw()
        VertexArrayObject.unbind(triangle)

    pyglet.clock.schedule_interval(lambda dt: None, 1.0 / 60.0)
    pyglet.app.run()
    return 0