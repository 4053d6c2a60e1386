"""
Per-Tick Exponential Easing

Two small building blocks used by the kinematic parts of the scene:

1. EasedArray - values that close a fixed fraction of the gap to a target
   every tick (exponential damping, never an instantaneous jump)
2. geometric_decay - in-place relaxation toward zero by a constant factor

Unlike wall-clock smoothing, these advance per tick, so a replay from the
same seed steps through exactly the same values.
"""

import math
import numpy as np


def lerp(a, b, t):
    """Linear interpolation a + (b - a) * t (scalars or arrays)."""
    return a + (b - a) * t


def ticks_to_settle(factor, epsilon):
    """Ticks until factor**n drops below epsilon (for 0 < factor < 1)."""
    if epsilon >= 1.0:
        return 0
    return int(math.ceil(math.log(epsilon) / math.log(factor)))


def geometric_decay(values, factor):
    """Scale values toward zero in place and return them."""
    values *= factor
    return values


class EasedArray:
    """A vector of eased values sharing one transition constant.

    Each update moves current toward target by (1 - transition) of the
    remaining gap:

        current = lerp(current, target, 1 - transition)

    With transition=0.92 the gap shrinks to 92% per tick.
    """

    def __init__(self, initial, target=None, transition=0.92):
        """Initialize eased values.

        Args:
            initial: Starting values (array-like)
            target: Starting targets, defaults to initial
            transition: Fraction of the gap retained each tick, in [0, 1)
        """
        if not 0.0 <= transition < 1.0:
            raise ValueError(f"transition must be in [0, 1), got {transition}")
        self.current = np.array(initial, dtype=np.float64)
        if target is None:
            target = self.current
        self.target = np.array(target, dtype=np.float64)
        self.transition = transition

    def set_target(self, new_target):
        """Set new targets to drift toward."""
        self.target = np.asarray(new_target, dtype=np.float64).copy()

    def update(self):
        """Advance one tick of easing. Returns current values."""
        self.current = lerp(self.current, self.target, 1.0 - self.transition)
        return self.current

    def get_value(self):
        return self.current
