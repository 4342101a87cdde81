# meshforge

meshforge builds triangle meshes in memory and prepares them for OpenGL.

It provides:

- **Vertex layouts** in `meshforge.vertex_types`:
  - `VertexPosCol`, `VertexPosNormCol`, `VertexPosNormTex` and `VertexPosNormTexCol`.
  - Each layout is a dataclass of float tuples.
  - Each layout has a `V_DECL` tuple of `BufferAttribute`s, plus `STRIDE` and `OFFSETS`.
  - `pack()` returns the vertex as little-endian interleaved float32 bytes.
  - The enums `AttribUsage`, `AttributeType` and `DrawMode` carry the OpenGL values.
- **`MeshBuilder`** in `meshforge.mesh_builder`. It collects vertices of one type, plus `uint32` indices.
  - `bake()` returns a `BakedMesh`. It holds the numpy vertex and index arrays, the attributes and the stride.
- **`VertexParamMap`** and `create_vertex` in `meshforge.vertex_map`. They set and read position, normal, texture and color on any vertex layout. Attributes that a layout lacks are skipped when set and read back as defaults.
- **Procedural shapes**:
  - `add_ico_sphere` and `add_uv_sphere` in `meshforge.spheres`.
  - `add_cube`, `add_cube_transform` and `add_plane` in `meshforge.shapes`.
- **Matrix helpers** in `meshforge.transforms`:
  - `translation`, `scaling`, `rotation`, `euler_to_matrix`, `look_at` and `perspective`.
  - All return 4×4 numpy arrays for column vectors (`M @ v`).
- **A Wavefront OBJ reader** in `meshforge.obj_loader`: `load_obj_vertices` and `load_from_file`.
- **Wrappers for OpenGL objects**:
  - `Shader` (with `ShaderPartType` and `ShaderError`) in `meshforge.shader`.
  - `VertexArrayObject` in `meshforge.vertex_array`.

  Both talk to OpenGL through a `gl` object passed to their constructor. `meshforge.app.PygletGL` is such an object, backed by pyglet.

## Installing

```
pip install .
```

To also install the test requirements:

```
pip install .[test]
```

## Building a mesh

```python
from meshforge.mesh_builder import MeshBuilder
from meshforge.vertex_types import VertexPosCol
from meshforge.spheres import add_ico_sphere
from meshforge.shapes import add_cube

mesh = MeshBuilder(VertexPosCol)
add_ico_sphere(mesh, (1.0, 0.0, 0.0), 0.5, 3)
add_cube(mesh, (0.0, 0.0, 0.0), 0.5, (0.0, 0.0, 45.0), (1.0, 0.0, 0.0, 1.0))

print(mesh.vertex_count(), mesh.index_count(), mesh.triangle_count())
baked = mesh.bake()
```

Radii and scale may be a single number or one value per axis.

A tessellation below zero raises `AssertionError`.

If the vertex type has no position attribute, the shape functions log a warning and add nothing.

`add_ico_sphere` duplicates vertices along the texture seam, so that triangles which wrap around it get continuous UVs.

## Loading an OBJ file

```python
from meshforge.obj_loader import load_obj_vertices, load_from_file

vertices = load_obj_vertices("model.obj")   # list of VertexPosNormTexCol
baked = load_from_file("model.obj")         # unindexed BakedMesh
```

The reader handles only the following:

- It reads `v` positions.
- It reads the first three vertices of each `f` line, so triangulate quads before exporting.
- It ignores lines starting with `#`, and all other commands.

Every face corner becomes its own vertex, with these values:

- normal `(0, 0, 1)`
- UV `(0, 0)`
- white color

A file that cannot be opened raises `OSError`. A malformed line or an out-of-range index raises `ValueError` naming the line.

## Shaders and vertex arrays

- `Shader.load_shader_part`, `load_shader_part_from_file` and `link` raise `ShaderError` on failure.
- `Shader.set_uniform` and `set_uniform_matrix` accept either a location or a uniform name:
  - Names are looked up once and cached.
  - Unknown names are logged and ignored.
- `VertexArrayObject.draw()` works in one of two ways:
  - With an index buffer set, it issues an indexed draw.
  - Without one, it draws every vertex in the first buffer added.
- Both classes are context managers that delete their OpenGL object on exit.

## Running the demo

```
meshforge [--shaders DIR] [--model FILE]
```

This opens an 800×800 window titled `meshforge`. It draws three objects:

- a triangle rotating about the z axis
- a generated ico-sphere and cube
- an OBJ model (`Monkey.obj` in the working directory by default)

The shaders are read from `DIR/vertex_shader.glsl` and `DIR/frag_shader.glsl`, where `DIR` defaults to `shaders`. The program must take a `u_ModelViewProjection` matrix uniform.

Press **W** to toggle the triangle's rotation.

The command exits with status 1 if any of these fail: opening the window, building the shader or loading the model.

## Logging

Messages go through the logger returned by `meshforge.log.get_logger()`.

- `init_logging(LoggerSettings(...))` sends output to the console, to a file (`logs.txt` by default), or to both.
- `uninitialize()` removes those handlers.
- `log_error` also logs the caller's stack trace.
- `log_assert` logs and raises `AssertionError` when its condition is false.

## What it does not do

- There are no shader files bundled with the package. The demo needs GLSL files supplied by you.
- There is no texture or image loading.
- There is no camera object. The demo builds its view and projection from `look_at` and `perspective`.
- The OBJ reader ignores normals, texture coordinates, materials and groups.