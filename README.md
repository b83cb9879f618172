# kfstudio

The data model behind a 2D keyframe animation editor, written as a plain Python
library. It has no third-party dependencies.

## Modules

### `kfstudio.track`

- `TrackType`: `INVALID`, `FLOAT`, `INT`, `BOOL`, `COLOR`.
- `Frame`: a keyframe, holding a `frame` number and its `data`.
- `Track(name, track_type, frame_count)`: keyframes kept sorted by frame number.
  - `add_frame(index, data)` sets the value at a frame and inserts the key if it is missing. It converts the value to the track's type and returns `None` when the index is negative.
  - `get_frame`, `get_frame_by_index`, `find_frame` and `find_left_frame` look keys up. `remove_frame` and `delete_by_array_index` remove them. `reset`, `sort`, `has_frames` and `len(track)` are also available.
  - `interpolate_float`, `interpolate_int` and `interpolate_color` blend linearly between the keys on either side of a frame. When `loop` is true and the frame is outside the keyed range, they blend around the end of the animation, using `frame_count`. When `loop` is false, they hold the nearest end key.
  - `interpolate_bool` steps: it returns the value of the last key at or before the frame.
  - `serialize(target, indent)` returns the track as a tab-indented JSON object. A deleted track or an empty track returns `""`.
  - Editing or sampling a track whose `deleted` flag is set raises `TrackDeletedError`.
- `color_u32_to_float4` and `color_float4_to_u32` convert between a packed 32-bit colour (red in the low byte) and four floats in 0..1.

### `kfstudio.transform`

- `normalized_rotation(rotation)` wraps an angle in radians into [0, 2π). A non-finite angle raises `ValueError`.
- `Mat3` is a frozen 3x3 matrix stored column by column. It has `Mat3.identity()` and supports `*` for matrix multiplication.
- `TransformNode(name)` has `position`, `rotation` and `scale`. Setting `rotation` normalizes the value. `reset()` restores the defaults. `matrices()` returns a `TransformMatrices` holding `translation`, `rotation`, `scale` and their product `world`. `serialize_fields(indent)` renders the fields as JSON members.

### `kfstudio.actions`

- `Action` is the abstract base class. It defines `do()` and `undo()`, and `merge(other)`, which lets the current step absorb a newer one.
- `FieldChange(target, attribute, value, label)` sets one attribute on any object and remembers the previous value. A later change to the same attribute on the same object merges into it.
- `AddKeyframe(track, data, frame)` sets a key on a track. Undoing it restores the old value, or removes the key if it was new. A later edit of the same key merges only when the key existed before the first edit.

### `kfstudio.undo`

- `UndoManager(capacity=MAX_UNDO_STEPS, active=True)` is a bounded history. `MAX_UNDO_STEPS` is 200.
  - `record(action)` applies an action and stores it, or merges it into the current entry. Recording an action drops any entries that were undone. When the manager is not active, the action is applied but not stored.
  - `undo()` and `redo()` return `False` when there is nothing to do. `can_undo()` and `can_redo()` report this ahead of time. The oldest entry still held is the base of the history and is never undone.
  - `tail()` returns the current entry. `history()` lists the entries from oldest to newest. `select(action)` undoes or redoes until `action` is current. `len(manager)` and `undone` report the size of the history.

### `kfstudio.rectpack`

- `RectPacker(width, height, num_nodes=None, heuristic=Heuristic.BOTTOM_LEFT, allow_out_of_mem=False)` is a skyline packer for building texture atlases.
- `Heuristic.BEST_FIT` is also available as a heuristic.
- `pack(rects)` places `Rect` objects in place, tallest first. It sets `x`, `y` and `was_packed` on each one, and returns `True` if all of them fit. A rectangle that does not fit gets `x == y == MAXVAL`.

## Installation

```
pip install .
```

To install with the test dependencies:

```
pip install ".[test]"
```

## Example

```python
from kfstudio.track import Track, TrackType
from kfstudio.transform import TransformNode
from kfstudio.actions import AddKeyframe, FieldChange
from kfstudio.undo import UndoManager
from kfstudio.rectpack import Rect, RectPacker

track = Track("position.x", TrackType.FLOAT, frame_count=30)
history = UndoManager(capacity=200, active=True)

history.record(AddKeyframe(track, 0.0, 0))
history.record(AddKeyframe(track, 10.0, 10))
print(track.interpolate_float(5, loop=False))   # 5.0

history.undo()
print(len(track))                               # 1

node = TransformNode("Transform Node")
history.record(FieldChange(node, "rotation", 1.5, "Set rotation"))
print(node.matrices().world)

packer = RectPacker(256, 256)
rects = [Rect(w=64, h=32), Rect(w=128, h=128)]
print(packer.pack(rects), rects)
```

## What it does not do

This is a library only. It has no editor window, no command-line program, no
loading or drawing of images, and no saving or loading of whole animation
projects. `Track.serialize` and `TransformNode.serialize_fields` return JSON
fragments, and the caller puts them together into a document.

## Running the tests

```
pytest
```