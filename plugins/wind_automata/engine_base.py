"""
Abstract Base Class for Grid Automaton Engines

Engines hold an integer state grid of shape (cols, rows) addressed as
grid[x][y], and draw all of their randomness from an explicit numpy
Generator so a run can be replayed from its seed.
"""

from abc import ABC, abstractmethod
import numpy as np


class CAEngine(ABC):
    """Base class for discrete-state grid engines."""

    engine_name = ""   # e.g. "boundary_cca"
    engine_label = ""  # e.g. "Boundary Cyclic CA"

    def __init__(self, cols, rows, num_states, rng):
        if rng is None:
            raise ValueError("CAEngine requires a random generator")
        self.cols = max(1, int(cols))
        self.rows = max(1, int(rows))
        self.num_states = int(num_states)
        self.rng = rng
        self.grid = np.zeros((self.cols, self.rows), dtype=np.int16)
        self.generation = 0

    @property
    def shape(self):
        return (self.cols, self.rows)

    @abstractmethod
    def step(self, *args, **kwargs):
        """Advance one time step. Returns the grid."""

    @abstractmethod
    def set_params(self, **params):
        """Update engine parameters."""

    @abstractmethod
    def get_params(self):
        """Return dict of current parameter values."""

    def seed(self):
        """Fill the grid with independent uniform states."""
        self.grid = self.rng.integers(
            0, self.num_states, self.shape, dtype=np.int16
        )
        self.generation = 0

    @property
    def stats(self):
        """Return current grid statistics."""
        hist = np.bincount(self.grid.ravel(), minlength=self.num_states)
        return {
            "generation": self.generation,
            "mean": float(self.grid.mean()),
            "histogram": hist.tolist(),
        }

    @classmethod
    @abstractmethod
    def get_slider_defs(cls):
        """Return list of slider definitions for the control panel.

        Each entry is a dict:
            {"key": "threshold", "label": "Advance", "section": "RULE",
             "min": 1, "max": 8, "default": 4, "fmt": ".0f", "step": 1}
        """
