"""
Boundary-Perturbed Cyclic Cellular Automaton

Cells hold one of N discrete "energy" states (0..N-1) on a toroidal grid.
Each step, a cell looks at how many of its 8 Moore neighbours already hold
the next state (state+1)%N:

  count >= threshold       advance one state
  count >= threshold_fast  advance two states
  count <= threshold_dead  fall back one state
  otherwise                hold

The rules are tested in that order and the first match wins, so with the
default thresholds (4, 6, 1) the two-state jump never fires. Passing
rule_order="fast_first" tests threshold_fast before threshold instead,
which changes the dynamics (cells with 6+ matching neighbours jump twice).

Before the rule is applied, cells sitting on a Voronoi region boundary are
stirred: every cell is "active" with some probability, and an active cell
re-randomises each of its up/left neighbours (x-1, y), (x, y-1),
(x-1, y-1) that belong to a different region. Those writes go straight into
the next grid and win over the rule result for that neighbour.

Parameters:
  threshold:       Neighbours in next state needed to advance (4)
  threshold_fast:  Neighbours needed for the double advance (6)
  threshold_dead:  At or below this, the cell decays (1)
  num_states:      Number of cyclic states (8)
"""

import numpy as np
from .engine_base import CAEngine


RULE_ORDERS = ("legacy", "fast_first")

# Up/left block offsets inspected by an active cell. (0, 0) is the cell
# itself and always shares its own region.
_BOUNDARY_OFFSETS = ((1, 0), (0, 1), (1, 1))


def grid_geometry(width, height, min_cell=6, divisions=120):
    """Derive (cell_size, cols, rows) for a canvas.

    cell_size = max(min_cell, floor(min(w, h) / divisions)). Non-positive
    canvas sizes still give a 1x1 grid.
    """
    w = max(0, int(width))
    h = max(0, int(height))
    cell_size = max(min_cell, min(w, h) // divisions)
    cols = max(1, w // cell_size)
    rows = max(1, h // cell_size)
    return cell_size, cols, rows


class BoundaryCCA(CAEngine):

    engine_name = "boundary_cca"
    engine_label = "Boundary Cyclic CA"

    def __init__(self, cols, rows, rng, num_states=8, threshold=4,
                 threshold_fast=6, threshold_dead=1, rule_order="legacy"):
        super().__init__(cols, rows, num_states, rng)
        if rule_order not in RULE_ORDERS:
            raise ValueError(f"Unknown rule order: {rule_order!r}. "
                             f"Expected one of {RULE_ORDERS}")
        self.threshold = threshold
        self.threshold_fast = threshold_fast
        self.threshold_dead = threshold_dead
        self.rule_order = rule_order

        self.seed()
        # Back buffer, swapped with self.grid after every step
        self.next_grid = np.zeros(self.shape, dtype=np.int16)

        # Pre-allocate padded buffer
        self._padded = np.zeros((self.cols + 2, self.rows + 2), dtype=np.int16)
        # Pre-allocate count buffer
        self._count = np.zeros(self.shape, dtype=np.int32)
        self._boundary = np.zeros(self.shape, dtype=bool)

    def count_next_state_neighbours(self):
        """Count Moore neighbours holding (state+1)%N, with wraparound."""
        g = self.grid
        c, r = self.cols, self.rows
        next_s = (g + 1) % self.num_states

        p = self._padded
        p[1:c + 1, 1:r + 1] = g
        # Left/right
        p[0, 1:r + 1] = g[-1, :]
        p[c + 1, 1:r + 1] = g[0, :]
        # Top/bottom
        p[1:c + 1, 0] = g[:, -1]
        p[1:c + 1, r + 1] = g[:, 0]
        # Corners
        p[0, 0] = g[-1, -1]
        p[0, r + 1] = g[-1, 0]
        p[c + 1, 0] = g[0, -1]
        p[c + 1, r + 1] = g[0, 0]

        self._count[:] = 0
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                neighbor = p[1 + dx:1 + dx + c, 1 + dy:1 + dy + r]
                self._count += (neighbor == next_s)
        return self._count

    def _apply_rule(self, count, out):
        g = self.grid
        ns = self.num_states
        out[:] = g

        if self.rule_order == "fast_first":
            fast = count >= self.threshold_fast
            advance = (count >= self.threshold) & ~fast
        else:
            advance = count >= self.threshold
            fast = (count >= self.threshold_fast) & ~advance
        decay = (count <= self.threshold_dead) & ~advance & ~fast

        out[advance] = ((g + 1) % ns)[advance]
        out[fast] = ((g + 2) % ns)[fast]
        out[decay] = ((g + ns - 1) % ns)[decay]
        return out

    def boundary_targets(self, ownership, activity_probability):
        """Mask of cells an active neighbour re-randomises this step."""
        active = self.rng.random(self.shape) < activity_probability
        return self._boundary_mask(ownership, active)

    def _boundary_mask(self, ownership, active):
        c, r = self.cols, self.rows
        targets = self._boundary
        targets[:] = False
        for m, q in _BOUNDARY_OFFSETS:
            if m >= c or q >= r:
                continue
            differs = ownership[m:, q:] != ownership[:c - m, :r - q]
            targets[:c - m, :r - q] |= active[m:, q:] & differs
        return targets

    def step(self, ownership=None, activity_probability=0.0):
        """Advance one generation.

        Args:
            ownership: (cols, rows) int array of owning region per cell, or
                None to skip boundary perturbation
            activity_probability: chance a cell stirs its boundary
                neighbours this step

        Returns:
            The new grid
        """
        count = self.count_next_state_neighbours()
        nxt = self._apply_rule(count, self.next_grid)

        if ownership is not None and activity_probability > 0:
            if ownership.shape != self.shape:
                raise ValueError(
                    f"Ownership shape {ownership.shape} does not match "
                    f"grid shape {self.shape}"
                )
            targets = self.boundary_targets(ownership, activity_probability)
            n = int(targets.sum())
            if n:
                nxt[targets] = self.rng.integers(
                    0, self.num_states, n, dtype=np.int16
                )

        # Synchronous update: swap buffers only after the whole grid is done
        self.grid, self.next_grid = nxt, self.grid
        self.generation += 1
        return self.grid

    def boundary_pct(self, ownership):
        """Percentage of cells with a differently-owned up/left neighbour.

        Reads only the ownership map, so it leaves the rng untouched.
        """
        active = np.ones(self.shape, dtype=bool)
        return float(self._boundary_mask(ownership, active).mean()) * 100

    def set_params(self, threshold=None, threshold_fast=None,
                   threshold_dead=None, num_states=None, rule_order=None,
                   **_kw):
        if threshold is not None:
            self.threshold = int(threshold)
        if threshold_fast is not None:
            self.threshold_fast = int(threshold_fast)
        if threshold_dead is not None:
            self.threshold_dead = int(threshold_dead)
        if rule_order is not None:
            if rule_order not in RULE_ORDERS:
                raise ValueError(f"Unknown rule order: {rule_order!r}")
            self.rule_order = rule_order
        if num_states is not None and num_states != self.num_states:
            old_ns = self.num_states
            self.num_states = int(num_states)
            # Remap grid states to new range
            self.grid = (self.grid * self.num_states // old_ns).astype(np.int16)

    def get_params(self):
        return {
            "threshold": self.threshold,
            "threshold_fast": self.threshold_fast,
            "threshold_dead": self.threshold_dead,
            "num_states": self.num_states,
            "rule_order": self.rule_order,
        }

    @classmethod
    def get_slider_defs(cls):
        return [
            {"key": "threshold", "label": "Advance", "section": "RULE",
             "min": 1, "max": 8, "default": 4, "fmt": ".0f", "step": 1},
            {"key": "threshold_fast", "label": "Jump", "section": "RULE",
             "min": 1, "max": 8, "default": 6, "fmt": ".0f", "step": 1},
            {"key": "threshold_dead", "label": "Decay", "section": "RULE",
             "min": 0, "max": 8, "default": 1, "fmt": ".0f", "step": 1},
            {"key": "num_states", "label": "States", "section": "RULE",
             "min": 3, "max": 24, "default": 8, "fmt": ".0f", "step": 1},
        ]
