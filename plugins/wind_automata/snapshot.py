"""
Read-only frame snapshots handed to renderers.

Every array in a snapshot is a private copy with its write flag cleared,
so a renderer can hold on to a frame while the simulation keeps stepping.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np


def _frozen(arr):
    out = np.array(arr, copy=True)
    out.flags.writeable = False
    return out


@dataclass(frozen=True)
class GridSnapshot:
    cols: int
    rows: int
    cell_size: int
    num_states: int
    states: np.ndarray  # (cols, rows), states[x, y]


@dataclass(frozen=True)
class TurbineSnapshot:
    x: float
    y: float
    scale: float
    rotation: float
    base_height: float
    blade_length: float


@dataclass(frozen=True)
class ParticleSnapshot:
    x: float
    y: float
    vx: float
    vy: float
    size: float
    opacity: float
    color: Tuple[int, int, int]


@dataclass(frozen=True)
class AtmosphereSnapshot:
    time_of_day: float
    sky_phase: str
    celestial_x: float
    celestial_y: float
    is_sun: bool
    evolution: float


@dataclass(frozen=True)
class FrameSnapshot:
    tick: int
    width: int
    height: int
    interaction_active: bool
    grid: GridSnapshot
    ownership: np.ndarray
    sites: np.ndarray
    turbines: Tuple[TurbineSnapshot, ...]  # back-to-front
    particles: Tuple[ParticleSnapshot, ...]
    bend_offsets: np.ndarray
    atmosphere: AtmosphereSnapshot


def take_snapshot(state):
    """Build an immutable FrameSnapshot from a SimulationState."""
    automaton = state.automaton
    grid = GridSnapshot(
        cols=automaton.cols,
        rows=automaton.rows,
        cell_size=state.cell_size,
        num_states=automaton.num_states,
        states=_frozen(automaton.grid),
    )

    t = state.turbines
    turbines = tuple(
        TurbineSnapshot(
            x=float(t.x[i]), y=float(t.y[i]), scale=float(t.scale[i]),
            rotation=float(t.rotation[i]),
            base_height=float(t.base_height[i]),
            blade_length=float(t.blade_length[i]),
        )
        for i in range(t.count)
    )

    p = state.particles
    particles = tuple(
        ParticleSnapshot(
            x=float(p.pos[i, 0]), y=float(p.pos[i, 1]),
            vx=float(p.vel[i, 0]), vy=float(p.vel[i, 1]),
            size=float(p.size[i]), opacity=float(p.opacity[i]),
            color=tuple(int(c) for c in p.colors[i]),
        )
        for i in range(len(p))
    )

    a = state.atmosphere
    cx, cy, is_sun = a.celestial_position(state.width, state.height)
    atmosphere = AtmosphereSnapshot(
        time_of_day=a.time_of_day,
        sky_phase=a.sky_phase,
        celestial_x=cx,
        celestial_y=cy,
        is_sun=is_sun,
        evolution=a.evolution,
    )

    return FrameSnapshot(
        tick=state.tick,
        width=state.width,
        height=state.height,
        interaction_active=state.interaction_active,
        grid=grid,
        ownership=_frozen(state.ownership),
        sites=_frozen(state.voronoi.sites),
        turbines=turbines,
        particles=particles,
        bend_offsets=_frozen(p.bend_offsets),
        atmosphere=atmosphere,
    )
