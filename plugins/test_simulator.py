#!/usr/bin/env python3
"""
Tests for the simulation clock, snapshots and host wiring.

Verifies:
1. create_state geometry, presets and construction failures
2. step() is pure, seeded runs replay exactly, cadence is every 3rd tick
3. Resize rebuilds everything from scratch
4. Snapshots are read-only and ordered for rendering
5. WindSimulator attach/detach against FrameDriver and HostEvents
"""

import ast
import dataclasses
import os
import numpy as np

from wind_automata.atmosphere import Atmosphere, sky_phase
from wind_automata.host import FrameDriver, HostEvents
from wind_automata.noise import CoherentNoise
from wind_automata.particles import PARTICLE_LIFE
from wind_automata.presets import list_presets, resolve_preset
from wind_automata.simulator import (
    Interaction, SimulationState, WindSimulator, create_state, resize, step,
)
from wind_automata.snapshot import take_snapshot

GUST = Interaction(active=True, x=100, y=100)


def test_create_state_geometry():
    print("Testing create_state...")
    state = create_state(1000, 600, seed=1)
    assert (state.cell_size, state.cols, state.rows) == (6, 166, 100)
    assert state.automaton.grid.shape == (166, 100)
    assert state.ownership.shape == (166, 100)
    assert state.voronoi.sites.shape == (15, 2)
    assert state.turbines.count == 8
    assert len(state.particles) == 0
    assert state.tick == 0
    print("  ✓ create_state working correctly")


def test_degenerate_canvas():
    state = create_state(0, -10, seed=1)
    assert state.cols >= 1 and state.rows >= 1
    for _ in range(6):
        state = step(state, GUST, inplace=True)
    assert 0 <= state.automaton.grid.min() and state.automaton.grid.max() < 8


def test_missing_sources_fail_fast():
    params = resolve_preset()
    for rng, noise in ((None, CoherentNoise(1)),
                       (np.random.default_rng(1), None)):
        try:
            SimulationState(100, 100, rng, noise, params)
        except ValueError:
            continue
        raise AssertionError("Missing rng or noise should raise ValueError")


def test_unknown_preset():
    for kwargs in ({"preset": "hurricane"}, {"threshold_slow": 2}):
        try:
            create_state(100, 100, seed=1, **kwargs)
        except ValueError:
            continue
        raise AssertionError(f"{kwargs} should raise ValueError")


def test_presets():
    keys = [k for k, _, _ in list_presets()]
    assert keys[0] == "breeze" and len(keys) == 4
    params = resolve_preset("gusty", threshold=5)
    assert params["threshold"] == 5
    assert resolve_preset("gusty")["threshold"] == 4, "Overrides must not leak"
    state = create_state(300, 200, seed=2, preset="storm")
    assert state.automaton.rule_order == "fast_first"
    assert state.voronoi.num_sites == 24


def test_step_is_pure():
    print("Testing pure step...")
    s0 = create_state(300, 200, seed=1)
    grid0 = s0.automaton.grid.copy()
    rot0 = s0.turbines.rotation.copy()

    s1 = step(s0, GUST, tick=3)
    assert s1 is not s0
    assert s0.tick == 0 and s1.tick == 3
    assert np.array_equal(s0.automaton.grid, grid0), "Input state must not change"
    assert np.array_equal(s0.turbines.rotation, rot0)
    assert s0.automaton.generation == 0 and s1.automaton.generation == 1
    print("  ✓ step is pure")


def test_seeded_replay():
    print("Testing seeded replay...")
    a = create_state(400, 300, seed=21)
    b = create_state(400, 300, seed=21)
    for t in range(1, 31):
        inter = GUST if 5 <= t <= 20 else Interaction()
        a = step(a, inter, inplace=True)
        b = step(b, inter, inplace=True)
    assert np.array_equal(a.automaton.grid, b.automaton.grid)
    assert np.array_equal(a.voronoi.sites, b.voronoi.sites)
    assert np.array_equal(a.turbines.rotation, b.turbines.rotation)
    assert np.array_equal(a.particles.pos, b.particles.pos)
    assert np.array_equal(a.particles.bend_offsets, b.particles.bend_offsets)
    assert a.atmosphere.evolution == b.atmosphere.evolution

    c = create_state(400, 300, seed=22)
    assert not np.array_equal(a.automaton.grid, c.automaton.grid)
    print("  ✓ seeded replay is exact")


def test_reading_stats_keeps_replay():
    a = create_state(400, 300, seed=21)
    b = create_state(400, 300, seed=21)
    for _ in range(6):
        a.stats
        a = step(a, GUST, inplace=True)
        b = step(b, GUST, inplace=True)
    assert np.array_equal(a.automaton.grid, b.automaton.grid)
    assert np.array_equal(a.particles.pos, b.particles.pos)


def test_snapshot_tracks_last_interaction():
    state = create_state(320, 240, seed=3)
    assert not take_snapshot(state).interaction_active
    state = step(state, GUST, inplace=True)
    assert take_snapshot(state).interaction_active
    state = step(state, inplace=True)
    assert not take_snapshot(state).interaction_active


def test_automaton_cadence():
    print("Testing every-third-tick cadence...")
    state = create_state(300, 200, seed=4)
    sites0 = state.voronoi.sites.copy()
    rot = state.turbines.rotation.copy()

    state = step(state, inplace=True)
    state = step(state, inplace=True)
    assert state.automaton.generation == 0
    assert np.array_equal(state.voronoi.sites, sites0), "Sites move only on automaton ticks"
    assert not np.array_equal(state.turbines.rotation, rot), "Turbines move every tick"

    state = step(state, inplace=True)
    assert state.automaton.generation == 1
    assert not np.array_equal(state.voronoi.sites, sites0)

    for _ in range(6):
        state = step(state, inplace=True)
    assert state.tick == 9 and state.automaton.generation == 3
    print("  ✓ cadence working correctly")


def test_resize_reinitializes():
    print("Testing resize...")
    state = create_state(300, 200, seed=6)
    for _ in range(9):
        state = step(state, GUST, inplace=True)
    n_particles = len(state.particles)

    resized = resize(state, 1000, 600)
    assert (resized.cols, resized.rows, resized.cell_size) == (166, 100, 6)
    assert resized.ownership.shape == (166, 100)
    assert len(resized.particles) == 0
    assert not resized.particles.bend_offsets.any()
    assert resized.automaton.generation == 0
    assert (resized.turbines.x > 300).any(), "Turbines are re-placed for the new width"
    assert len(state.particles) == n_particles, "resize() must not touch its input"
    print("  ✓ resize working correctly")


def test_snapshot_is_read_only():
    print("Testing snapshots...")
    state = create_state(320, 240, seed=3)
    for _ in range(6):
        state = step(state, GUST, inplace=True)
    frame = take_snapshot(state)

    assert frame.tick == 6 and frame.interaction_active
    assert (frame.grid.cols, frame.grid.rows, frame.grid.cell_size) == (53, 40, 6)
    assert frame.grid.states.shape == (53, 40)
    assert len(frame.bend_offsets) == 300
    assert len(frame.turbines) == 8
    scales = [t.scale for t in frame.turbines]
    assert scales == sorted(scales), "Turbines must come back-to-front"
    assert len(frame.particles) == len(state.particles)
    for p in frame.particles:
        assert p.color == (255, 255, 255)

    for arr in (frame.grid.states, frame.bend_offsets, frame.ownership, frame.sites):
        try:
            arr[0] = 1
        except ValueError:
            continue
        raise AssertionError("Snapshot arrays must be read-only")

    try:
        frame.tick = 7
    except dataclasses.FrozenInstanceError:
        pass
    else:
        raise AssertionError("Snapshot must be frozen")

    grid_before = frame.grid.states.copy()
    for _ in range(6):
        step(state, inplace=True)
    assert np.array_equal(frame.grid.states, grid_before), "Snapshot must not alias state"
    print("  ✓ snapshots are read-only")


def test_atmosphere():
    print("Testing atmosphere...")
    state = create_state(200, 100, seed=8)
    for _ in range(1000):
        state = step(state, inplace=True)
    assert abs(state.atmosphere.time_of_day - 13.0) < 1e-6
    assert 0.2 <= state.atmosphere.evolution <= 0.8

    assert sky_phase(5.9) == "night"
    assert sky_phase(6.5) == "dawn"
    assert sky_phase(12.0) == "day"
    assert sky_phase(17.5) == "dusk"
    assert sky_phase(20.0) == "night"

    a = Atmosphere(CoherentNoise(1), start_hour=0.0)
    x, y, is_sun = a.celestial_position(1000, 600)
    assert abs(x - 500) < 1e-9 and abs(y - 90) < 1e-9 and not is_sun

    a = Atmosphere(CoherentNoise(1), start_hour=23.9995)
    a.update(1)
    assert a.time_of_day < 0.001, "time_of_day wraps at 24"
    print("  ✓ atmosphere working correctly")


def test_simulator_host_lifecycle():
    print("Testing WindSimulator host wiring...")
    sim = WindSimulator(320, 240, seed=5)
    driver = FrameDriver()
    events = HostEvents()
    sim.attach(driver, events)
    assert len(driver.callbacks) == 1
    assert events.subscriber_count() == 4

    events.emit("press", 10, 20)
    assert sim.interaction == Interaction(True, 10, 20)
    driver.run(6)
    assert sim.state.tick == 6 and sim.state.automaton.generation == 2
    assert sim.last_frame.tick == 6 and sim.last_frame.interaction_active

    events.emit("move", 30, 40)
    assert sim.interaction == Interaction(True, 30, 40)
    events.emit("release", 30, 40)
    assert not sim.interaction.active

    events.emit("resize", 500, 400)
    assert sim.state.width == 500 and sim.last_frame.width == 500

    try:
        sim.attach(FrameDriver())
    except RuntimeError:
        pass
    else:
        raise AssertionError("Double attach should raise RuntimeError")

    sim.detach()
    assert driver.callbacks == [], "Frame callback must be unregistered"
    assert events.subscriber_count() == 0, "Event handlers must be unsubscribed"
    assert sim.disposed
    driver.run_frame()  # no longer reaches the simulator
    events.emit("press", 1, 1)
    try:
        sim.advance()
    except RuntimeError:
        pass
    else:
        raise AssertionError("advance() after detach should raise RuntimeError")
    print("  ✓ host wiring working correctly")


def test_host_events_rejects_unknown_type():
    events = HostEvents()
    try:
        events.subscribe("scroll", lambda a, b: None)
    except ValueError:
        pass
    else:
        raise AssertionError("Unknown event type should raise ValueError")


def test_gust_produces_particles():
    sim = WindSimulator(1280, 720, seed=12)
    sim.press(640, 360)
    for _ in range(30):
        frame = sim.advance()
    assert len(frame.particles) > 0
    assert np.abs(frame.bend_offsets).max() > 0
    sim.release()
    for _ in range(PARTICLE_LIFE):
        frame = sim.advance()
    assert len(frame.particles) == 0, "No spawns while idle, so all retire"


def test_snap_cli():
    from wind_automata.__main__ import snap
    stats = snap("breeze", 320, 240, 9, seed=3, gust_every=4)
    assert stats["tick"] == 9
    assert stats["generation"] == 3
    assert sum(stats["histogram"]) == 53 * 40


def test_cli_module_ships_without_pygame():
    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    with open(os.path.join(root, "setup.py")) as f:
        tree = ast.parse(f.read())
    excluded = None
    for node in tree.body:
        if isinstance(node, ast.Assign) and node.targets[0].id == "_EXCLUDE_MODULES":
            excluded = ast.literal_eval(node.value)
    assert excluded == {"viewer"}, excluded

    main_path = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                             "wind_automata", "__main__.py")
    with open(main_path) as f:
        tree = ast.parse(f.read())
    for node in tree.body:
        if isinstance(node, ast.ImportFrom):
            assert node.module not in ("viewer", "pygame"), "Viewer must be imported lazily"
        elif isinstance(node, ast.Import):
            assert all(a.name != "pygame" for a in node.names)


if __name__ == "__main__":
    print("\n=== Testing Simulator ===\n")

    test_create_state_geometry()
    test_step_is_pure()
    test_seeded_replay()
    test_automaton_cadence()
    test_resize_reinitializes()
    test_snapshot_is_read_only()
    test_atmosphere()
    test_simulator_host_lifecycle()

    print("\n=== All tests passed ===\n")
