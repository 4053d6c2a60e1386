"""
Wind Automata Viewer - Entry Point

Usage:
    python -m wind_automata [preset] [--window WxH] [--seed N] [--snap STEPS]

Examples:
    python -m wind_automata
    python -m wind_automata gusty
    python -m wind_automata storm --window 1600x900 --seed 7
    python -m wind_automata --snap 600

Use --list to see all available presets. --snap runs headless (no pygame)
and prints scene statistics after the given number of ticks.
"""

import sys
from .presets import PRESET_ORDER, list_presets


def snap(preset, width, height, steps, seed=None, gust_every=0):
    """Headless mode: run N ticks, print stats, exit."""
    from .simulator import WindSimulator

    sim = WindSimulator(width, height, preset=preset, seed=seed)
    for i in range(1, steps + 1):
        # Optional periodic gusts so particles and bend offsets get exercised
        if gust_every and i % gust_every == 0:
            if sim.interaction.active:
                sim.release()
            else:
                sim.press(width / 2, height / 2)
        sim.advance()

    stats = sim.stats
    print(f"  Preset: {preset}  ({stats['grid']})")
    print(f"  Ticks: {stats['tick']}  Generations: {stats['generation']}")
    print(f"  Mean state: {stats['mean']:.3f}  Histogram: {stats['histogram']}")
    print(f"  Boundary cells: {stats['boundary_pct']:.1f}%")
    print(f"  Particles: {stats['particles']}  "
          f"Mean rotor speed: {stats['mean_rotor_speed']:.4f}")
    print(f"  Time of day: {stats['time_of_day']:.3f}")
    sim.detach()
    return stats


def main(argv=None):
    preset = "breeze"
    win_w, win_h = 1280, 720
    seed = None
    snap_steps = 0
    gust_every = 0

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--window" and i + 1 < len(args):
            parts = args[i + 1].split("x")
            win_w, win_h = int(parts[0]), int(parts[1])
            i += 2
        elif arg == "--seed" and i + 1 < len(args):
            seed = int(args[i + 1])
            i += 2
        elif arg == "--snap" and i + 1 < len(args):
            snap_steps = int(args[i + 1])
            i += 2
        elif arg == "--gust-every" and i + 1 < len(args):
            gust_every = int(args[i + 1])
            i += 2
        elif arg == "--list":
            print("\nAvailable presets:")
            for key, name, desc in list_presets():
                print(f"    {key:12s} {name:16s} {desc}")
            print()
            return
        elif arg in ("--help", "-h"):
            print(__doc__)
            return
        elif arg in PRESET_ORDER:
            preset = arg
            i += 1
        else:
            print(f"Unknown argument: {arg}")
            print(f"Use --list to see available presets")
            return

    if snap_steps > 0:
        print(f"Headless snap mode: {preset} @ {win_w}x{win_h}, {snap_steps} ticks")
        snap(preset, win_w, win_h, snap_steps, seed=seed, gust_every=gust_every)
        return

    from .viewer import Viewer

    print(f"Starting Wind Automata Viewer")
    print(f"  Preset: {preset}")
    print(f"  Window: {win_w}x{win_h}")
    print()

    viewer = Viewer(width=win_w, height=win_h, start_preset=preset, seed=seed)
    viewer.run()


if __name__ == "__main__":
    main()
