import pytest

from kfstudio.actions import Action, AddKeyframe, FieldChange
from kfstudio.track import Track, TrackDeletedError, TrackType
from kfstudio.transform import TransformNode


def make_track(name="position.x"):
    return Track(name, TrackType.FLOAT, 10)


def test_action_is_abstract():
    with pytest.raises(TypeError):
        Action("nothing")


def test_field_change_do_and_undo_round_trip():
    node = TransformNode("node")
    change = FieldChange(node, "position", (3.0, 4.0), "Set Position")
    change.do()
    assert node.position == (3.0, 4.0)
    change.undo()
    assert node.position == (0.0, 0.0)


def test_field_change_label_is_string_form():
    node = TransformNode("node")
    change = FieldChange(node, "name", "renamed", "Rename Node")
    assert str(change) == "Rename Node"


def test_field_change_rotation_uses_node_property():
    node = TransformNode("node")
    change = FieldChange(node, "rotation", 1.5, "Set Rotation")
    change.do()
    assert node.rotation == pytest.approx(1.5)
    change.undo()
    assert node.rotation == 0.0


def test_field_change_missing_attribute_raises():
    node = TransformNode("node")
    with pytest.raises(AttributeError):
        FieldChange(node, "no_such_field", 1, "Bad")


def test_field_change_merge_same_target_and_attribute():
    node = TransformNode("node")
    first = FieldChange(node, "scale", (2.0, 2.0), "Set Scale")
    first.do()
    second = FieldChange(node, "scale", (5.0, 6.0), "Set Scale")
    assert first.merge(second) is True
    assert node.scale == (5.0, 6.0)
    first.undo()
    assert node.scale == (1.0, 1.0)


def test_field_change_does_not_merge_other_attribute_or_target():
    node = TransformNode("node")
    other_node = TransformNode("other")
    first = FieldChange(node, "scale", (2.0, 2.0), "Set Scale")
    assert first.merge(FieldChange(node, "position", (1.0, 1.0), "Set Position")) is False
    assert first.merge(FieldChange(other_node, "scale", (3.0, 3.0), "Set Scale")) is False
    assert node.scale == (1.0, 1.0)


def test_field_change_does_not_merge_keyframe():
    node = TransformNode("node")
    change = FieldChange(node, "scale", (2.0, 2.0), "Set Scale")
    assert change.merge(AddKeyframe(make_track(), 1.0, 0)) is False


def test_add_keyframe_new_frame_round_trip():
    track = make_track()
    action = AddKeyframe(track, 2.5, 4)
    assert action.existed is False
    action.do()
    assert track.get_frame(4).data == 2.5
    action.undo()
    assert track.get_frame(4) is None
    assert not track.has_frames()


def test_add_keyframe_existing_frame_restores_old_value():
    track = make_track()
    track.add_frame(3, 1.0)
    action = AddKeyframe(track, 7.0, 3)
    assert action.existed is True
    action.do()
    assert track.get_frame(3).data == 7.0
    action.undo()
    assert track.get_frame(3).data == 1.0
    assert len(track) == 1


def test_add_keyframe_merges_only_when_frame_existed():
    track = make_track()
    fresh = AddKeyframe(track, 1.0, 2)
    fresh.do()
    assert fresh.merge(AddKeyframe(track, 9.0, 2)) is False
    assert track.get_frame(2).data == 1.0

    existing = AddKeyframe(track, 3.0, 2)
    existing.do()
    assert existing.merge(AddKeyframe(track, 8.0, 2)) is True
    assert track.get_frame(2).data == 8.0
    existing.undo()
    assert track.get_frame(2).data == 1.0


def test_add_keyframe_does_not_merge_other_frame_or_track():
    track = make_track()
    track.add_frame(1, 1.0)
    action = AddKeyframe(track, 2.0, 1)
    assert action.merge(AddKeyframe(track, 3.0, 5)) is False
    assert action.merge(AddKeyframe(make_track("other"), 3.0, 1)) is False


def test_add_keyframe_on_deleted_track_raises():
    track = make_track()
    action = AddKeyframe(track, 1.0, 0)
    track.deleted = True
    with pytest.raises(TrackDeletedError):
        action.do()


def test_add_keyframe_label_names_track():
    track = make_track("rotation")
    assert "rotation" in AddKeyframe(track, 0.5, 0).label