"""
Ocean Backdrop - Entry Point

Usage:
    python -m ocean_backdrop [preset] [--window WxH] [--readiness N] [--light]
                             [--seed N] [--speed F] [--snap N] [--verbose]

Examples:
    python -m ocean_backdrop
    python -m ocean_backdrop midnight --readiness 80
    python -m ocean_backdrop reef --window 1920x1080 --snap 600

Use --list to see all available presets.
"""

import logging
import os
import sys

from .presets import DEFAULT_PRESET, PRESET_ORDER, list_presets


def snap(preset, width, height, frames, readiness=0.0, dark=True, seed=None):
    """Headless mode: run N frames, save screenshot, exit."""
    from .headless import HeadlessHost
    from .scheduler import Scheduler

    screenshots_dir = os.path.join(
        os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
        "screenshots"
    )
    presets_to_snap = [preset] if preset != "all" else PRESET_ORDER

    for pkey in presets_to_snap:
        host = HeadlessHost(width, height, dark=dark)
        print(f"  {pkey}: running {frames} frames...", end="", flush=True)
        with Scheduler(host, pkey, seed=seed, readiness=readiness) as scheduler:
            host.run_frames(frames)
            drawn = scheduler.frames_drawn
        path = host.save_png(os.path.join(screenshots_dir, f"ocean_{pkey}.png"))
        host.save_png(os.path.join(screenshots_dir, "latest.png"))
        print(f" {drawn} drawn, saved: {path}")


def _parse_size(value):
    parts = value.lower().split("x")
    return int(parts[0]), int(parts[1])


def main():
    preset = DEFAULT_PRESET
    win_w, win_h = 1280, 720
    readiness = 0.0
    dark = True
    seed = None
    speed = 1.0
    snap_frames = 0
    verbose = False

    args = sys.argv[1:]
    i = 0
    try:
        while i < len(args):
            arg = args[i]
            if arg == "--window" and i + 1 < len(args):
                win_w, win_h = _parse_size(args[i + 1])
                i += 2
            elif arg == "--readiness" and i + 1 < len(args):
                readiness = float(args[i + 1])
                i += 2
            elif arg == "--seed" and i + 1 < len(args):
                seed = int(args[i + 1])
                i += 2
            elif arg == "--speed" and i + 1 < len(args):
                speed = float(args[i + 1])
                i += 2
            elif arg == "--snap" and i + 1 < len(args):
                snap_frames = int(args[i + 1])
                i += 2
            elif arg == "--light":
                dark = False
                i += 1
            elif arg == "--verbose":
                verbose = True
                i += 1
            elif arg == "--list":
                print("\nAvailable presets:\n")
                for key, name, desc in list_presets():
                    print(f"  {key:12s} {name:16s} {desc}")
                print()
                return
            elif arg in ("--help", "-h"):
                print(__doc__)
                return
            elif arg in PRESET_ORDER or arg == "all":
                preset = arg
                i += 1
            else:
                print(f"Unknown argument: {arg}")
                print("Use --help for usage")
                return
    except (ValueError, IndexError):
        print(f"Bad value for {args[i]}: {args[i + 1] if i + 1 < len(args) else ''}")
        return

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if snap_frames > 0:
        print(f"Headless snap mode: {preset} @ {win_w}x{win_h}, {snap_frames} frames")
        snap(preset, win_w, win_h, snap_frames, readiness=readiness, dark=dark, seed=seed)
        return

    if preset == "all":
        preset = DEFAULT_PRESET

    from .viewer import Viewer

    print("Starting Ocean Backdrop")
    print(f"  Preset: {preset}")
    print(f"  Window: {win_w}x{win_h}")
    print(f"  Readiness: {readiness:.0f}  Theme: {'dark' if dark else 'light'}")
    print()

    viewer = Viewer(
        width=win_w,
        height=win_h,
        preset=preset,
        readiness=readiness,
        dark=dark,
        seed=seed,
        speed=speed,
    )
    viewer.run()


if __name__ == "__main__":
    main()
