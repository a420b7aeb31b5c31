import numpy as np
import pytest

from chaosviz.core.errors import InvalidConfigurationError
from chaosviz.core.trajectory.buffer import BoundingBox, TrajectoryBuffer
from chaosviz.core.vector import Vector3


def _pt(i: int) -> Vector3:
    return Vector3(float(i), float(-2 * i), float(i % 5))


def test_sliding_window_keeps_last_max_points():
    max_points = 7
    buf = TrajectoryBuffer(max_points)
    pushed = [_pt(i) for i in range(max_points + 13)]
    for p in pushed:
        buf.push(p)

    assert len(buf) == max_points
    assert buf.points() == pushed[-max_points:]
    assert buf.last() == pushed[-1]
    assert np.array_equal(buf.as_array(), np.array([p.as_tuple() for p in pushed[-max_points:]]))


def test_under_capacity_keeps_everything_in_order():
    buf = TrajectoryBuffer(10)
    pushed = [_pt(i) for i in range(4)]
    for p in pushed:
        buf.push(p)
    assert buf.points() == pushed
    assert list(buf) == pushed
    assert buf.as_array().shape == (4, 3)


def test_capacity_one():
    buf = TrajectoryBuffer(1)
    buf.push(_pt(1))
    buf.push(_pt(2))
    assert buf.points() == [_pt(2)]


def test_invalid_capacity_rejected():
    with pytest.raises(InvalidConfigurationError):
        TrajectoryBuffer(0)
    with pytest.raises(InvalidConfigurationError):
        TrajectoryBuffer(-3)


def test_empty_buffer_box_is_zero():
    buf = TrajectoryBuffer(5)
    box = buf.bounding_box()
    assert box.empty
    assert (box.x_min, box.x_max, box.y_min, box.y_max, box.z_min, box.z_max) == (0, 0, 0, 0, 0, 0)
    assert buf.last() is None
    assert buf.points() == []
    assert buf.as_array().shape == (0, 3)


def test_single_point_box_is_degenerate():
    buf = TrajectoryBuffer(5)
    p = Vector3(3.0, -1.0, 8.0)
    buf.push(p)
    box = buf.bounding_box()
    assert not box.empty
    assert box.min == p
    assert box.max == p
    assert box.contains(p)


def test_box_never_shrinks_and_contains_every_pushed_point():
    buf = TrajectoryBuffer(3)
    pushed = [Vector3(100.0, -50.0, 7.0)] + [_pt(i) for i in range(20)]
    previous = None
    for p in pushed:
        buf.push(p)
        box = buf.bounding_box()
        if previous is not None:
            assert box.x_min <= previous.x_min and box.x_max >= previous.x_max
            assert box.y_min <= previous.y_min and box.y_max >= previous.y_max
            assert box.z_min <= previous.z_min and box.z_max >= previous.z_max
        previous = box
    box = buf.bounding_box()
    for p in pushed:
        assert box.contains(p)
    # the outlier is long gone from the window but still frames the view
    assert pushed[0] not in buf.points()
    assert box.x_max == 100.0


def test_reset_clears_points_and_box():
    buf = TrajectoryBuffer(4)
    for i in range(6):
        buf.push(_pt(i))
    buf.reset()
    assert len(buf) == 0
    assert buf.bounding_box() == BoundingBox()

    p = Vector3(-1.0, 2.0, -3.0)
    buf.push(p)
    assert buf.bounding_box().min == p
    assert buf.bounding_box().max == p


def test_box_helpers():
    box = BoundingBox().expand(Vector3(-2.0, 0.0, 1.0)).expand(Vector3(4.0, 10.0, 3.0))
    assert box.center == Vector3(1.0, 5.0, 2.0)
    assert box.size == Vector3(6.0, 10.0, 2.0)
    assert not box.contains(Vector3(5.0, 0.0, 2.0))
    assert not BoundingBox().contains(Vector3())
