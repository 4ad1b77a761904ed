#!/usr/bin/env python3
"""
Compositor tests.

Verifies:
1. Fixed layer order (background, shafts, snow, far fish, kelp, near fish, sonar)
2. Fish inside each band are drawn in ascending depth
3. Eye glint follows the sine threshold
4. A real off-screen pygame surface renders without errors
"""

import numpy as np
import pytest

from ocean_backdrop.canvas import Canvas, quadratic_points
from ocean_backdrop.compositor import Compositor
from ocean_backdrop.fish import FishSchools, NEAR_DEPTH
from ocean_backdrop.palette import BACKGROUNDS, WHITE
from ocean_backdrop.signals import SignalBridge
from ocean_backdrop.simulator import OceanSimulator


def _body_sizes(canvas):
    """rx of every fish body ellipse (the first ellipse drawn per fish)."""
    ellipses = canvas.of("fill_ellipse")
    return [args[1] for args in ellipses[::2]]


def test_layer_order(recording_canvas):
    sim = OceanSimulator(1920, 1080, seed=1, snow=5, fish=4, kelp=3, shafts=2)
    sim.fish._depth[:] = [0.45, 0.8, 0.5, 0.9]
    sim.fish._far_order = sim.fish._band(near=False)
    sim.fish._near_order = sim.fish._band(near=True)
    sim.ping(10, 10)

    Compositor(caustics=False).render(recording_canvas, sim, SignalBridge(readiness=80))
    names = recording_canvas.names()

    assert names[:2] == ["clear", "fill_gradient"]
    first = {name: names.index(name) for name in set(names)}
    last = {name: len(names) - 1 - names[::-1].index(name) for name in set(names)}
    assert first["add_pixels"] < first["fill_circle"]                  # shafts before snow
    assert last["stroke_quadratic"] - first["stroke_quadratic"] == 2   # kelp drawn together
    # two far fish before the kelp, two near fish after it
    fish_ellipses = [i for i, n in enumerate(names) if n == "fill_ellipse"]
    assert sum(i < first["stroke_quadratic"] for i in fish_ellipses) == 4
    assert sum(i > last["stroke_quadratic"] for i in fish_ellipses) == 4
    assert first["stroke_circle"] > last["fill_ellipse"]
    assert names[-1] == "vignette"


def test_fish_drawn_in_depth_order_within_band(recording_canvas):
    rng = np.random.default_rng(42)
    fish = FishSchools(40, 800, 600, rng)
    # distinct sizes so each body can be traced back to its fish
    fish.size[:] = np.arange(1, 41, dtype=np.float64)
    for near in (False, True):
        recording_canvas.calls.clear()
        fish.draw(recording_canvas, t=10, scroll=0.0, near=near)
        drawn = [int(round(s)) - 1 for s in _body_sizes(recording_canvas)]
        depths = fish.depths[drawn]
        assert np.all(np.diff(depths) >= 0)
        if near:
            assert np.all(depths >= NEAR_DEPTH)
        else:
            assert np.all(depths < NEAR_DEPTH)


def test_eye_glint_threshold(recording_canvas):
    fish = FishSchools(1, 800, 600, np.random.default_rng(0))
    fish.phase[:] = 0.0
    band_near = bool(fish.depths[0] >= NEAR_DEPTH)

    # sin(t * 0.02) > 0.8 around t = 60..; sin(0) = 0 at t = 0
    fish.draw(recording_canvas, t=0, scroll=0.0, near=band_near)
    assert WHITE not in [args[2] for args in recording_canvas.of("fill_circle")]

    recording_canvas.calls.clear()
    fish.draw(recording_canvas, t=np.pi / 2 / 0.02, scroll=0.0, near=band_near)
    assert WHITE in [args[2] for args in recording_canvas.of("fill_circle")]


def test_background_follows_readiness_and_theme(recording_canvas):
    sim = OceanSimulator(800, 600, seed=2)
    comp = Compositor()
    for readiness, dark, key in ((80, True, "clear"), (30, True, "murky"),
                                 (80, False, "clear"), (30, False, "murky")):
        recording_canvas.calls.clear()
        comp.render(recording_canvas, sim, SignalBridge(readiness=readiness, dark=dark))
        stops = recording_canvas.of("fill_gradient")[0][0]
        theme = "dark" if dark else "light"
        assert stops[0][1] == BACKGROUNDS[theme][key]


def test_parallax_moves_near_snow_further(recording_canvas):
    sim = OceanSimulator(800, 600, seed=3, snow=2, fish=0, kelp=0, shafts=0)
    sim.snow._depth[:] = [0.2, 1.0]
    sim.snow.y[:] = 300.0
    sim.snow.draw(recording_canvas, 0, scroll=1000.0)
    far, near = [args[0][1] for args in recording_canvas.of("fill_circle")]
    assert far == pytest.approx(300.0 - 1000.0 * 0.2 * 0.2)
    assert near == pytest.approx(300.0 - 1000.0 * 0.2)
    assert near < far


def test_quadratic_points_endpoints():
    pts = quadratic_points((0, 0), (5, 10), (10, 0), segments=8)
    assert pts.shape == (9, 2)
    assert np.allclose(pts[0], (0, 0)) and np.allclose(pts[-1], (10, 0))
    assert pts[:, 1].max() == 5.0


def test_render_on_real_surface():
    sim = OceanSimulator(320, 240, seed=4)
    signals = SignalBridge(readiness=90, scroll=120)
    canvas = Canvas.offscreen(320, 240)
    sim.ping(160, 120, signals.scroll)
    comp = Compositor()
    for _ in range(5):
        sim.step(signals)
        comp.render(canvas, sim, signals)
    pixels = canvas.snapshot()
    assert pixels.shape == (240, 320, 3)
    assert pixels.dtype == np.uint8
    # the scene is not one flat colour
    assert pixels.reshape(-1, 3).std(axis=0).sum() > 0


def test_light_theme_is_bright():
    sim = OceanSimulator(200, 150, seed=5, snow=0, fish=0, kelp=0, shafts=0)
    canvas = Canvas.offscreen(200, 150)
    Compositor(caustics=False, vignette=False).render(canvas, sim, SignalBridge(dark=False))
    assert canvas.snapshot().mean() > 200
    Compositor(caustics=False, vignette=False).render(canvas, sim, SignalBridge(dark=True))
    assert canvas.snapshot().mean() < 30


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-v"]))
