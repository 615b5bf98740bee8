import pytest

from tape_vision.utils.contour_utils import RotatedRect
from tape_vision.utils.target_pairing import (
    GoalTarget,
    order_targets,
    pair_tapes,
    pair_targets,
    sort_by_center_x,
)


def tape(center_x, angle=0.0, center_y=120.0):
    return RotatedRect(center_x=center_x, center_y=center_y, width=8.0, height=36.0, angle=angle)


def test_sort_ascending_by_center_x():
    tapes = [tape(200), tape(50), tape(120)]
    assert [t.center_x for t in sort_by_center_x(tapes)] == [50, 120, 200]


def test_sort_is_idempotent():
    tapes = sort_by_center_x([tape(30), tape(310), tape(90), tape(5)])
    assert sort_by_center_x(tapes) == tapes


def test_sort_is_stable_on_ties():
    first = tape(100, angle=10.0)
    second = tape(100, angle=350.0)
    third = tape(100, angle=180.0)
    ordered = sort_by_center_x([tape(150), first, second, third])
    assert ordered[:3] == [first, second, third]


def test_sort_handles_short_input():
    assert sort_by_center_x([]) == []
    assert sort_by_center_x([tape(10)]) == [tape(10)]


def test_pair_high_then_low_puts_second_on_left():
    first = tape(200, angle=350.0)
    second = tape(120, angle=10.0)
    target = pair_tapes(first, second)
    assert target == GoalTarget(left_tape=second, right_tape=first)


def test_pair_low_then_high_puts_first_on_left():
    first = tape(120, angle=10.0)
    second = tape(200, angle=350.0)
    target = pair_tapes(first, second)
    assert target == GoalTarget(left_tape=first, right_tape=second)


@pytest.mark.parametrize(
    "first_angle, second_angle",
    [(180.0, 10.0), (10.0, 10.0), (350.0, 350.0), (40.0, 350.0), (320.0, 10.0), (90.0, 270.0)],
)
def test_pair_other_angles_rejected(first_angle, second_angle):
    assert pair_tapes(tape(100, first_angle), tape(200, second_angle)) is None


def test_goal_target_geometry():
    target = GoalTarget(left_tape=tape(100, center_y=110), right_tape=tape(140, center_y=130))
    assert target.center_x == 120
    assert target.center_y == 120
    assert target.target_width == 40


def test_pair_targets_walks_in_pairs():
    tapes = [tape(50, 10.0), tape(90, 350.0), tape(150, 10.0), tape(190, 350.0)]
    targets = pair_targets(tapes)
    assert [(t.left_tape.center_x, t.right_tape.center_x) for t in targets] == [(50, 90), (150, 190)]


def test_pair_targets_ignores_trailing_tape():
    tapes = [tape(50, 10.0), tape(90, 350.0), tape(150, 10.0)]
    assert len(pair_targets(tapes)) == 1


def test_pair_targets_drops_strips_leaning_apart():
    # Ordered left to right, high then low would put the right strip on the left
    tapes = [tape(50, 350.0), tape(90, 10.0)]
    assert pair_targets(tapes) == []


def test_pair_targets_is_positional():
    # Pairing is positional: 0&1 do not match, 2&3 are never tried as 1&2
    tapes = [tape(20, 180.0), tape(50, 10.0), tape(90, 350.0), tape(130, 10.0)]
    assert pair_targets(tapes) == []


def test_order_targets_sorts_before_pairing():
    left = tape(100, angle=12.0)
    right = tape(180, angle=348.0)
    targets = order_targets([right, left])

    assert targets == [GoalTarget(left_tape=left, right_tape=right)]


def test_order_targets_left_tape_always_left():
    tapes = [tape(x, angle) for x, angle in [(300, 350.0), (10, 10.0), (260, 10.0), (60, 350.0), (150, 5.0)]]
    for target in order_targets(tapes):
        assert target.left_tape.center_x < target.right_tape.center_x


def test_empty_input():
    assert order_targets([]) == []
