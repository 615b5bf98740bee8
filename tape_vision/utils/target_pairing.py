"""
Target Pairing Module

This module orders fitted tape rectangles from left to right and pairs
neighbouring strips into goal targets using their tilt angles.
"""

from dataclasses import dataclass

from .contour_utils import RotatedRect

# A strip tilted one way reports an angle just below 360, the other way
# just above 0 (see RotatedRect)
WRAP_HIGH_ANGLE = 320.0
WRAP_LOW_ANGLE = 40.0


@dataclass(frozen=True)
class GoalTarget:
    """A matched pair of tape strips, left_tape.center_x < right_tape.center_x."""

    left_tape: RotatedRect
    right_tape: RotatedRect

    @property
    def center_x(self):
        return (self.left_tape.center_x + self.right_tape.center_x) / 2

    @property
    def center_y(self):
        return (self.left_tape.center_y + self.right_tape.center_y) / 2

    @property
    def target_width(self):
        """Horizontal distance between the strip centers in pixels."""
        return self.right_tape.center_x - self.left_tape.center_x


def sort_by_center_x(tapes):
    """
    Order tape rectangles from left to right.

    The sort is stable, so tapes with the same center_x keep their
    input order.

    Args:
        tapes: Iterable of RotatedRect

    Returns:
        New list sorted ascending by center_x
    """
    return sorted(tapes, key=lambda tape: tape.center_x)


def pair_tapes(first, second):
    """
    Decide whether two neighbouring strips form a goal target.

    Args:
        first: RotatedRect earlier in the ordering
        second: RotatedRect following it

    Returns:
        GoalTarget with left/right assigned from the tilt angles, or None
        when the angles do not match either tilt combination
    """
    if first.angle > WRAP_HIGH_ANGLE and second.angle < WRAP_LOW_ANGLE:
        return GoalTarget(left_tape=second, right_tape=first)
    if first.angle < WRAP_LOW_ANGLE and second.angle > WRAP_HIGH_ANGLE:
        return GoalTarget(left_tape=first, right_tape=second)
    return None


def pair_targets(tapes, logger=None):
    """
    Pair tapes two at a time (0 & 1, 2 & 3, ...) into goal targets.

    A trailing unpaired tape is ignored. Candidates whose assigned left tape
    is not left of the right tape are strips of two neighbouring targets
    leaning away from each other and are dropped.

    Args:
        tapes: Sequence of RotatedRect, normally sorted by center_x
        logger: Optional logger for rejected pairs

    Returns:
        List of GoalTarget
    """
    targets = []
    for index in range(0, len(tapes) - 1, 2):
        target = pair_tapes(tapes[index], tapes[index + 1])
        if target is None:
            if logger:
                logger.debug(
                    f"Tapes {index} and {index + 1} not paired: angles "
                    f"{tapes[index].angle:.1f} and {tapes[index + 1].angle:.1f}"
                )
            continue

        if target.target_width <= 0:
            if logger:
                logger.debug(f"Tapes {index} and {index + 1} lean apart, skipped")
            continue

        targets.append(target)

    return targets


def order_targets(tapes, logger=None):
    """Sort tapes by center_x and pair them into goal targets."""
    return pair_targets(sort_by_center_x(tapes), logger)
