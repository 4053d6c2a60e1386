"""
WindSimulator - Headless simulation core

Owns the full scene state (automaton grid, Voronoi sites, turbines,
particles, atmosphere) with zero pygame dependency. The per-tick update is
exposed two ways:

    state = create_state(1280, 720, seed=7)
    state = step(state, Interaction(active=True))   # pure: returns a copy
    frame = take_snapshot(state)

or through WindSimulator, which keeps the state in place, tracks pointer
interaction and plugs into a host frame driver:

    sim = WindSimulator(1280, 720, preset="gusty", seed=7)
    frame = sim.advance()

The automaton and Voronoi sites only advance every third tick; turbines,
particles and the atmosphere advance every tick.
"""

import copy
from dataclasses import dataclass

import numpy as np

from .atmosphere import Atmosphere
from .boundary_cca import BoundaryCCA, grid_geometry
from .noise import CoherentNoise
from .particles import ParticleSystem
from .presets import resolve_preset
from .snapshot import take_snapshot
from .turbines import TurbineKinematics
from .voronoi import VoronoiField


SIM_INTERVAL = 3  # automaton/Voronoi cadence, in ticks


@dataclass(frozen=True)
class Interaction:
    """Pointer state supplied by the host."""
    active: bool = False
    x: float = 0.0
    y: float = 0.0


IDLE = Interaction()


class SimulationState:
    """Everything the scene needs to produce the next frame."""

    def __init__(self, width, height, rng, noise, params):
        if rng is None:
            raise ValueError("SimulationState requires a random generator")
        if noise is None:
            raise ValueError("SimulationState requires a noise function")
        self.rng = rng
        self.noise = noise
        self.params = dict(params)
        self.tick = 0
        self.interaction_active = False

        self.voronoi = VoronoiField(
            width, height, rng, noise,
            num_sites=self.params["num_sites"],
            drift=self.params["site_drift"],
        )
        self.turbines = TurbineKinematics(
            width, height, rng,
            count=self.params["num_turbines"],
            default_wind_speed=self.params["default_wind_speed"],
            max_wind_speed=self.params["max_wind_speed"],
            speed_transition=self.params["speed_transition"],
        )
        self.particles = ParticleSystem(rng)
        self.atmosphere = Atmosphere(noise)
        self.reinitialize(width, height)

    def reinitialize(self, width, height):
        """Rebuild every owned structure for a new canvas size.

        Nothing is carried over: the grid is reseeded, sites and turbines
        are re-placed, particles and bend offsets are dropped.
        """
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        self.cell_size, cols, rows = grid_geometry(width, height)

        p = self.params
        self.automaton = BoundaryCCA(
            cols, rows, self.rng,
            num_states=p["num_states"],
            threshold=p["threshold"],
            threshold_fast=p["threshold_fast"],
            threshold_dead=p["threshold_dead"],
            rule_order=p["rule_order"],
        )
        self.voronoi.reset(self.width, self.height)
        self.turbines.reset(self.width, self.height)
        self.particles.reset()
        self.ownership = self.voronoi.ownership(cols, rows, self.cell_size)

    @property
    def cols(self):
        return self.automaton.cols

    @property
    def rows(self):
        return self.automaton.rows

    def activity_probability(self, interaction_active):
        if interaction_active:
            return self.params["active_activity"]
        return self.params["idle_activity"]

    def copy(self):
        return copy.deepcopy(self)

    @property
    def stats(self):
        s = self.automaton.stats
        s.update({
            "tick": self.tick,
            "grid": f"{self.cols}x{self.rows}@{self.cell_size}px",
            "boundary_pct": self.automaton.boundary_pct(self.ownership),
            "particles": len(self.particles),
            "mean_rotor_speed": float(np.mean(self.turbines.current_speed)),
            "time_of_day": self.atmosphere.time_of_day,
        })
        return s


def create_state(width, height, seed=None, preset=None, rng=None, noise=None,
                 **overrides):
    """Build a SimulationState from a preset.

    rng and noise default to generators derived from seed. Passing the same
    seed twice gives two states that evolve identically.
    """
    params = resolve_preset(preset, **overrides)
    if rng is None or noise is None:
        seeds = np.random.SeedSequence(seed).spawn(2)
        if rng is None:
            rng = np.random.default_rng(seeds[0])
        if noise is None:
            noise = CoherentNoise(np.random.default_rng(seeds[1]))
    return SimulationState(width, height, rng, noise, params)


def step(state, interaction=IDLE, tick=None, inplace=False):
    """Advance the scene by one tick and return the new state.

    Args:
        state: SimulationState to advance
        interaction: Interaction for this tick
        tick: explicit tick number from the host; defaults to state.tick + 1
        inplace: mutate state instead of working on a copy

    Returns:
        The advanced SimulationState
    """
    if not inplace:
        state = state.copy()
    tick = state.tick + 1 if tick is None else int(tick)
    state.tick = tick
    active = bool(interaction.active)
    state.interaction_active = active

    if tick % SIM_INTERVAL == 0:
        state.voronoi.update(tick)
        state.ownership = state.voronoi.ownership(
            state.cols, state.rows, state.cell_size)
        state.automaton.step(state.ownership,
                             state.activity_probability(active))

    state.turbines.update(active)
    state.particles.update(active, state.width, state.height, tick)
    state.atmosphere.update(tick)
    return state


def resize(state, width, height, inplace=False):
    """Return the state rebuilt for a new canvas size."""
    if not inplace:
        state = state.copy()
    state.reinitialize(width, height)
    return state


class WindSimulator:
    """Stateful wrapper for hosts: interaction tracking and frame hookup."""

    def __init__(self, width, height, preset=None, seed=None, rng=None,
                 noise=None, **overrides):
        self.preset_key = preset
        self.state = create_state(width, height, seed=seed, preset=preset,
                                  rng=rng, noise=noise, **overrides)
        self.interaction = IDLE
        self.last_frame = take_snapshot(self.state)
        self._driver = None
        self._events = None
        self._handlers = {}

    # -- interaction -------------------------------------------------------

    def press(self, x=0.0, y=0.0):
        self.interaction = Interaction(True, x, y)

    def release(self, x=0.0, y=0.0):
        self.interaction = Interaction(False, x, y)

    def move(self, x, y):
        self.interaction = Interaction(self.interaction.active, x, y)

    # -- lifecycle ---------------------------------------------------------

    @property
    def disposed(self):
        return self.state is None

    def _require_state(self):
        if self.state is None:
            raise RuntimeError("WindSimulator used after detach()")
        return self.state

    def advance(self, tick=None):
        """Run one tick in place and return the new FrameSnapshot."""
        state = step(self._require_state(), self.interaction, tick=tick,
                     inplace=True)
        self.last_frame = take_snapshot(state)
        return self.last_frame

    def resize(self, width, height):
        resize(self._require_state(), width, height, inplace=True)
        self.last_frame = take_snapshot(self.state)
        return self.last_frame

    def attach(self, driver, events=None):
        """Register with a host frame driver and its input events."""
        self._require_state()
        if self._driver is not None:
            raise RuntimeError("WindSimulator is already attached")
        self._driver = driver
        driver.register(self._on_frame)
        if events is not None:
            self._events = events
            self._handlers = {
                "press": lambda x, y: self.press(x, y),
                "release": lambda x, y: self.release(x, y),
                "move": lambda x, y: self.move(x, y),
                "resize": lambda w, h: self.resize(w, h),
            }
            for kind, handler in self._handlers.items():
                events.subscribe(kind, handler)

    def detach(self):
        """Unhook from the host, then drop all simulation state."""
        if self._driver is not None:
            self._driver.unregister(self._on_frame)
            self._driver = None
        if self._events is not None:
            for kind, handler in self._handlers.items():
                self._events.unsubscribe(kind, handler)
            self._events = None
            self._handlers = {}
        self.state = None

    def _on_frame(self, frame_count):
        self.advance(tick=frame_count)

    @property
    def stats(self):
        return self._require_state().stats
