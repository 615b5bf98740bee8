"""
Logging Helpers

Frame-rate independent helpers for the node's periodic console trace.
"""


class EveryNFrames:
    """Counts frames and fires on every n-th one (n, 2n, 3n, ...)."""

    def __init__(self, n):
        if n < 1:
            raise ValueError(f"n must be at least 1, got {n}")
        self.n = n
        self.count = 0

    def tick(self):
        """Count one frame; True when this frame should be logged."""
        self.count += 1
        if self.count < self.n:
            return False
        self.count = 0
        return True


def format_tape(tape):
    """One log line for a fitted tape."""
    return f"Tape x={tape.center_x:.1f}, y={tape.center_y:.1f}, angle={tape.angle:.1f}"
