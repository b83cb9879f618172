import math

import pytest

from kfstudio.transform import Mat3, TransformNode, normalized_rotation


def _approx_mat(mat):
    return pytest.approx(mat.values, abs=1e-9)


@pytest.mark.parametrize("angle", [0.0, 1.0, -1.0, 7.0, -20.0, 100.5, math.pi])
def test_normalized_rotation_in_range(angle):
    result = normalized_rotation(angle)
    assert 0.0 <= result < 2 * math.pi
    assert math.cos(result) == pytest.approx(math.cos(angle), abs=1e-9)
    assert math.sin(result) == pytest.approx(math.sin(angle), abs=1e-9)


def test_normalized_rotation_wraps_full_turn_to_zero():
    assert normalized_rotation(2 * math.pi) == pytest.approx(0.0)


def test_normalized_rotation_negative_quarter():
    assert normalized_rotation(-math.pi / 2) == pytest.approx(3 * math.pi / 2)


def test_normalized_rotation_keeps_values_in_range():
    assert normalized_rotation(1.25) == 1.25


@pytest.mark.parametrize("bad", [math.inf, -math.inf, math.nan])
def test_normalized_rotation_rejects_non_finite(bad):
    with pytest.raises(ValueError):
        normalized_rotation(bad)


def test_mat3_requires_nine_values():
    with pytest.raises(ValueError):
        Mat3((1.0, 2.0, 3.0))


def test_mat3_identity_is_neutral():
    m = Mat3((1, 2, 3, 4, 5, 6, 7, 8, 9))
    assert (Mat3.identity() * m).values == m.values
    assert (m * Mat3.identity()).values == m.values


def test_mat3_translations_compose_by_addition():
    a = Mat3((1, 0, 0, 0, 1, 0, 2, 3, 1))
    b = Mat3((1, 0, 0, 0, 1, 0, -5, 4, 1))
    assert (a * b).values == Mat3((1, 0, 0, 0, 1, 0, -3, 7, 1)).values


def test_mat3_multiplication_is_associative():
    a = Mat3((1, 2, 0, 0, 1, 3, 4, 0, 1))
    b = Mat3((2, 0, 1, 1, 1, 0, 0, 5, 1))
    c = Mat3((0, 1, 1, 3, 0, 2, 1, 1, 1))
    assert ((a * b) * c).values == pytest.approx((a * (b * c)).values)


def test_mat3_mul_rejects_other_types():
    with pytest.raises(TypeError):
        Mat3.identity() * 3


def test_node_defaults():
    node = TransformNode()
    assert node.name == "Transform Node"
    assert node.position == (0.0, 0.0)
    assert node.rotation == 0.0
    assert node.scale == (1.0, 1.0)


def test_node_reset_restores_defaults():
    node = TransformNode("root")
    node.position = (4.0, 5.0)
    node.rotation = 1.5
    node.scale = (2.0, 3.0)
    node.reset()
    assert node.position == (0.0, 0.0)
    assert node.rotation == 0.0
    assert node.scale == (1.0, 1.0)
    assert node.name == "root"


def test_setting_rotation_normalizes():
    node = TransformNode()
    node.rotation = -math.pi / 2
    assert node.rotation == pytest.approx(3 * math.pi / 2)
    assert node.normalize_rotation() == pytest.approx(3 * math.pi / 2)


def test_default_node_world_is_identity():
    mats = TransformNode().matrices()
    assert mats.world.values == _approx_mat(Mat3.identity())


def test_matrices_parts_and_product():
    node = TransformNode()
    node.position = (10.0, -4.0)
    node.rotation = 0.75
    node.scale = (2.0, 0.5)
    mats = node.matrices()
    assert mats.translation.values == (1, 0, 0, 0, 1, 0, 10.0, -4.0, 1)
    assert mats.scale.values == (2.0, 0, 0, 0, 0.5, 0, 0, 0, 1)
    c, s = math.cos(0.75), math.sin(0.75)
    assert mats.rotation.values == pytest.approx((c, -s, 0, s, c, 0, 0, 0, 1))
    assert mats.world.values == pytest.approx(
        (mats.translation * mats.rotation * mats.scale).values
    )


def test_world_translation_column_holds_position():
    node = TransformNode()
    node.position = (3.0, 7.0)
    node.rotation = 2.0
    node.scale = (1.5, 1.5)
    world = node.matrices().world.values
    assert world[6:] == pytest.approx((3.0, 7.0, 1.0))


def test_serialize_fields_format():
    node = TransformNode()
    node.position = (1.5, -2.0)
    node.scale = (2.0, 0.5)
    text = node.serialize_fields(1)
    assert text == (
        '\t\t"position": { "x": 1.5, "y": -2 }, \n'
        '\t\t"rotation": 0,\n'
        '\t\t"scale": { "x": 2, "y": 0.5 }, \n'
    )


def test_serialize_fields_indent_zero():
    text = TransformNode().serialize_fields(0)
    assert text.splitlines()[0] == '\t"position": { "x": 0, "y": 0 }, '
    assert len(text.splitlines()) == 3