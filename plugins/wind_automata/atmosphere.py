"""
Day cycle and the slow "evolution" drift.

time_of_day runs 0..24 at 0.001 hours per tick starting from noon. The
sun (or moon) rides an arc centred on the horizon. evolution is a noise
driven random walk kept inside [0.2, 0.8].
"""

import math


SKY_PHASES = (
    (6.0, "night"),
    (7.0, "dawn"),
    (17.0, "day"),
    (19.0, "dusk"),
    (24.0, "night"),
)


def sky_phase(time_of_day):
    for upper, phase in SKY_PHASES:
        if time_of_day < upper:
            return phase
    return "night"


class Atmosphere:

    def __init__(self, noise, start_hour=12.0, hours_per_tick=0.001,
                 evolution=0.3, evolution_step=0.02,
                 evolution_range=(0.2, 0.8)):
        if noise is None:
            raise ValueError("Atmosphere requires a noise function")
        self.noise = noise
        self.hours_per_tick = hours_per_tick
        self.evolution_step = evolution_step
        self.evolution_range = evolution_range
        self.time_of_day = start_hour
        self.evolution = evolution

    @property
    def sky_phase(self):
        return sky_phase(self.time_of_day)

    @property
    def is_day(self):
        return 6.0 <= self.time_of_day <= 18.0

    def update(self, tick):
        self.time_of_day = (self.time_of_day + self.hours_per_tick) % 24.0
        lo, hi = self.evolution_range
        drift = (self.noise(tick * 0.01) - 0.5) * self.evolution_step
        self.evolution = min(hi, max(lo, self.evolution + drift))

    def celestial_position(self, width, height):
        """(x, y, is_sun) of the sun or moon for the current hour."""
        angle = self.time_of_day / 24.0 * 2 * math.pi - math.pi / 2
        radius = height * 0.7
        x = width / 2 + math.cos(angle) * radius
        y = height * 0.85 + math.sin(angle) * radius
        return x, y, self.is_day
