"""
Wind particles and grass bend offsets.

While the pointer is held, gust streaks are spawned every third tick and
blown rightward; each one lives at most 80 ticks and fades as it goes.
The same component owns the 300 grass bend offsets, which sway with the
gust and relax geometrically back to rest once it stops.

Particles are kept as parallel numpy arrays (one slot per live particle)
rather than a list of objects.
"""

import numpy as np

from .smoothing import geometric_decay


PARTICLE_LIFE = 80
WHITE = (255, 255, 255)


class ParticleSystem:

    def __init__(self, rng, num_offsets=300, spawn_interval=3, spawn_count=2,
                 fade=0.97, bend_relax=0.9, color=WHITE):
        if rng is None:
            raise ValueError("ParticleSystem requires a random generator")
        self.rng = rng
        self.num_offsets = num_offsets
        self.spawn_interval = spawn_interval
        self.spawn_count = spawn_count
        self.fade = fade
        self.bend_relax = bend_relax
        self.color = np.array(color, dtype=np.uint8)
        self.reset()

    def reset(self):
        """Drop all particles and flatten the grass."""
        self.pos = np.zeros((0, 2), dtype=np.float64)
        self.vel = np.zeros((0, 2), dtype=np.float64)
        self.life = np.zeros(0, dtype=np.int32)
        self.size = np.zeros(0, dtype=np.float64)
        self.opacity = np.zeros(0, dtype=np.float64)
        self.colors = np.zeros((0, 3), dtype=np.uint8)
        self.bend_offsets = np.zeros(self.num_offsets, dtype=np.float64)

    def __len__(self):
        return len(self.life)

    def spawn(self, n, width, height):
        """Append n fresh particles in the middle band of the canvas."""
        rng = self.rng
        pos = np.column_stack([
            rng.uniform(0, width, n),
            rng.uniform(height * 0.3, height * 0.8, n),
        ])
        vel = np.column_stack([
            rng.uniform(3, 10, n),
            rng.uniform(-2, 2, n),
        ])
        self.pos = np.concatenate([self.pos, pos])
        self.vel = np.concatenate([self.vel, vel])
        self.life = np.concatenate(
            [self.life, np.full(n, PARTICLE_LIFE, dtype=np.int32)])
        self.size = np.concatenate([self.size, rng.uniform(2, 8, n)])
        self.opacity = np.concatenate([self.opacity, rng.uniform(150, 200, n)])
        self.colors = np.concatenate([self.colors, np.tile(self.color, (n, 1))])

    def _update_bend(self, interaction_active, tick):
        if interaction_active:
            idx = np.arange(self.num_offsets)
            self.bend_offsets[:] = (
                np.sin(tick * 0.1 + idx * 0.1) * 5
                + self.rng.uniform(-1, 1, self.num_offsets)
            )
        else:
            geometric_decay(self.bend_offsets, self.bend_relax)

    def update(self, interaction_active, width, height, tick):
        """Sway the grass, spawn on gust ticks, advect and retire particles."""
        self._update_bend(interaction_active, tick)

        if interaction_active and tick % self.spawn_interval == 0:
            self.spawn(self.spawn_count, width, height)

        if len(self.life):
            self.pos += self.vel
            self.life -= 1
            self.opacity *= self.fade

            alive = (self.life > 0) & (self.pos[:, 0] <= width)
            if not alive.all():
                self.pos = self.pos[alive]
                self.vel = self.vel[alive]
                self.life = self.life[alive]
                self.size = self.size[alive]
                self.opacity = self.opacity[alive]
                self.colors = self.colors[alive]
        return len(self.life)
