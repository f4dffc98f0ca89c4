# enginekit

Helpers for the scene layer of a real-time 3D renderer, written in plain
Python with `numpy` for the math.

## What is inside

- `enginekit.util`: `align_up` and `align_down` for power-of-two alignment,
  `kib_to_bytes` and `mib_to_bytes`, `hash_combine` (64-bit seed mixing) and
  `escape_str`, which escapes quotes, backslashes and control characters as
  C-style escape sequences.
- `enginekit.option`: `OptionFlag`, an optional scalar that marks "empty" with
  an in-band sentinel. `OptionKind` names the scalar kinds (`U8`, `U16`, `U32`,
  `USIZE`, `F32`, `F64`); an enum class with an `Invalid` member works as a
  kind too. `sentinel_for(kind)` returns the sentinel. `value()` raises
  `ValueError` when the option is empty.
- `enginekit.mathutil`: quaternions as `(x, y, z, w)` numpy arrays —
  `angle_axis`, `quat_mul`, `quat_normalize`, `quat_conjugate`, `quat_rotate`,
  `quat_to_mat4`, `compose_quat` (Euler angles in radians to an orientation)
  and `decompose_quat` (back to pitch, yaw, roll). `calc_frustum_planes`
  extracts six normalized planes from a 4x4 view-projection matrix, and
  `normalize_180` wraps degree angles into `[-180, 180)`.
- `enginekit.components`: the core components as dataclasses — `Transform`,
  `Camera`, `RenderingModel`, `DirectionalLight`, `Atmosphere`, `Clouds` — and
  the tags `PerspectiveCamera`, `OrthographicCamera`, `ActiveCamera`,
  `EditorCamera` and `Hidden`. Each data member carries a `MemberKind`.
  `ComponentRegistry` maps names to component types; `core_registry()`
  returns one holding all of the above. `ComponentWrapper` walks a component
  instance's members with `for_each()` (yielding `(index, name, kind, value)`)
  and assigns them with `set(name, value)`, converting and range-checking the
  value for the member's kind.
- `enginekit.json_writer`: `JsonWriter`, a streaming JSON writer that indents
  with two spaces. Use `begin_obj`/`end_obj`, `begin_array`/`end_array`,
  `key(name)` (or `writer[name]`), `string`, `value`, `vec` (writes
  `{"x": .., "y": ..}` for 1 to 4 components) and `array`; `getvalue()`
  returns the text. Closing more than was opened raises `ValueError`.
- `enginekit.virtual_dir`: `VirtualDir`, an in-memory set of `VirtualFile`s by
  path. `add_file` stores a copy of some bytes; `read_file` loads a file from
  disk and returns `None` (logging an error) when it cannot be read or is
  empty. Adding a path that already exists keeps the first file.
- `enginekit.profiler`: `ProfilerGraph` keeps a ring of per-frame
  `ProfilerTask` timings and draws a stacked bar graph with a legend into a
  `DrawList`, which records rectangles, text and polygons along with the active
  clip rectangle. `ProfilersWindow` holds a CPU and a GPU graph, tracks an
  average frame time and builds the window title in `update(now)`. `rgba_le`
  and the `COLORS` palette give colours in the byte order the graph uses.

## Installing

```
pip install .
```

## Example

```python
import math

from enginekit.components import ComponentWrapper, Transform, core_registry
from enginekit.json_writer import JsonWriter
from enginekit.mathutil import compose_quat, quat_rotate

orientation = compose_quat((math.radians(90.0), 0.0, 0.0))
print(quat_rotate(orientation, (0.0, 0.0, -1.0)))

wrapper = ComponentWrapper(Transform(position=(0.0, 1.0, 0.0)), core_registry())
writer = JsonWriter()
writer.begin_obj()
writer["name"].string(wrapper.path)
for _, name, _, value in wrapper.for_each():
    writer[name].vec(value)
writer.end_obj()
print(writer.getvalue())
```

## What it does not do

There is no scene object or entity store here: nothing creates entities,
attaches models, tracks dirty transforms or reads and writes whole scene
files. There is no renderer either — no GPU buffers, no binary packing of
GPU-side records and no camera or lighting setup for a frame. The profiler
records draw commands into a `DrawList` but puts nothing on a screen.

## Running the tests

```
pip install .[test]
pytest
```