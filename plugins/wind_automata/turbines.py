"""
Wind Turbine Kinematics

A row of turbines along the horizon whose rotor speed eases toward a
jittery wind target. Pressing the pointer swaps the calm target for a
gust; the rotors spin up over a few dozen ticks rather than snapping.

Turbines are stored back-to-front (ascending depth scale) so a renderer
can paint them in order.
"""

import math
import numpy as np

from .smoothing import EasedArray


class TurbineKinematics:

    def __init__(self, width, height, rng, count=8, default_wind_speed=0.02,
                 max_wind_speed=0.15, speed_transition=0.92,
                 idle_jitter=(0.8, 1.2), gust_jitter=(0.9, 1.1)):
        if rng is None:
            raise ValueError("TurbineKinematics requires a random generator")
        self.rng = rng
        self.count = count
        self.default_wind_speed = default_wind_speed
        self.max_wind_speed = max_wind_speed
        self.speed_transition = speed_transition
        self.idle_jitter = idle_jitter
        self.gust_jitter = gust_jitter
        self.reset(width, height)

    def reset(self, width, height):
        """Place the turbines across the middle 80% of the canvas."""
        rng = self.rng
        n = self.count
        width = max(1, int(width))
        height = max(1, int(height))

        base_y = height * 0.85
        spacing = width * 0.8 / max(1, n - 1)
        start_x = width * 0.1
        idx = np.arange(n)

        x = start_x + spacing * idx + rng.uniform(-20, 20, n)
        y = base_y + np.sin(idx * 0.5) * 15 + rng.uniform(-5, 5, n)
        scale = rng.uniform(0.7, 1.0, n)
        rotation = rng.uniform(0, 2 * math.pi, n)
        lo, hi = self.idle_jitter
        current = self.default_wind_speed * rng.uniform(lo, hi, n)
        target = self.default_wind_speed * rng.uniform(lo, hi, n)

        # Farthest (smallest) first
        order = np.argsort(scale, kind="stable")
        self.x = x[order]
        self.y = y[order]
        self.scale = scale[order]
        self.base_height = 220.0 * self.scale
        self.blade_length = 90.0 * self.scale
        self.rotation = rotation[order]
        self.speed = EasedArray(current[order], target[order],
                                transition=self.speed_transition)

    @property
    def current_speed(self):
        return self.speed.current

    @property
    def target_speed(self):
        return self.speed.target

    def update(self, interaction_active):
        """Re-roll the wind target, ease toward it and spin the rotors."""
        if interaction_active:
            base = self.max_wind_speed
            lo, hi = self.gust_jitter
        else:
            base = self.default_wind_speed
            lo, hi = self.idle_jitter
        self.speed.set_target(base * self.rng.uniform(lo, hi, self.count))
        self.rotation += self.speed.update()
        return self.rotation

    def set_params(self, default_wind_speed=None, max_wind_speed=None,
                   speed_transition=None, **_kw):
        if default_wind_speed is not None:
            self.default_wind_speed = float(default_wind_speed)
        if max_wind_speed is not None:
            self.max_wind_speed = float(max_wind_speed)
        if speed_transition is not None:
            self.speed_transition = float(speed_transition)
            self.speed.transition = self.speed_transition

    def get_params(self):
        return {
            "default_wind_speed": self.default_wind_speed,
            "max_wind_speed": self.max_wind_speed,
            "speed_transition": self.speed_transition,
        }
