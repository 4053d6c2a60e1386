"""
Drifting Voronoi regions.

Sites wander under coherent noise and each grid cell is owned by its
nearest site. The boundaries between regions are what stir the automaton.
"""

import numpy as np


class VoronoiField:
    """A fixed set of moving sites plus the per-cell ownership map."""

    def __init__(self, width, height, rng, noise, num_sites=15,
                 drift=0.8, time_scale=1.0 / 120.0):
        if rng is None or noise is None:
            raise ValueError("VoronoiField requires a random generator "
                             "and a noise function")
        self.rng = rng
        self.noise = noise
        self.num_sites = num_sites
        self.drift = drift
        # Ticks -> noise time. 1/120 matches millis()/2000 at 60 fps.
        self.time_scale = time_scale
        self.reset(width, height)

    def reset(self, width, height):
        """Scatter a fresh set of sites uniformly over the canvas."""
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        self.sites = np.empty((self.num_sites, 2), dtype=np.float64)
        self.sites[:, 0] = self.rng.random(self.num_sites) * self.width
        self.sites[:, 1] = self.rng.random(self.num_sites) * self.height

    def update(self, tick):
        """Nudge every site by noise, then clamp it back onto the canvas."""
        t = tick * self.time_scale
        noise = self.noise
        for i in range(self.num_sites):
            self.sites[i, 0] += (noise(i * 1000 + t) - 0.5) * self.drift
            self.sites[i, 1] += (noise(i * 2000 + t) - 0.5) * self.drift
        np.clip(self.sites[:, 0], 0, self.width, out=self.sites[:, 0])
        np.clip(self.sites[:, 1], 0, self.height, out=self.sites[:, 1])
        return self.sites

    def ownership(self, cols, rows, cell_size):
        """Index of the nearest site for every cell, shape (cols, rows).

        Distance is measured from each site to the cell's pixel anchor
        (x * cell_size, y * cell_size). Ties go to the lowest site index.
        """
        X, Y = np.ogrid[:cols, :rows]
        px = (X * cell_size).astype(np.float64)
        py = (Y * cell_size).astype(np.float64)
        best = np.zeros((cols, rows), dtype=np.int16)
        best_dist = np.full((cols, rows), np.inf)
        # Strict < keeps the earliest site on equal distances
        for i, (sx, sy) in enumerate(self.sites):
            dist = (sx - px) ** 2 + (sy - py) ** 2
            closer = dist < best_dist
            best[closer] = i
            best_dist[closer] = dist[closer]
        return best
