#!/usr/bin/env python3
"""
Scheduler and host lifecycle tests.

Verifies:
1. A long run keeps populations fixed and entities inside their margins
2. Resize, pointer, readiness, scroll and theme events reach the scene
3. stop() releases every listener and the pending frame
4. A host without a drawing surface never starts
5. Fractional speed and pause
6. Degenerate viewports and oversized readiness never raise
7. stop() from inside a frame leaves nothing scheduled
"""

import numpy as np
import pytest

from conftest import RecordingCanvas
from ocean_backdrop.compositor import Compositor
from ocean_backdrop.fish import X_MARGIN, Y_MARGIN
from ocean_backdrop.headless import HeadlessHost
from ocean_backdrop.palette import BACKGROUNDS, GOLD
from ocean_backdrop.scheduler import Scheduler
from ocean_backdrop.signals import LISTENER_NAMES
from ocean_backdrop.snow import WRAP_TOP
from ocean_backdrop.sonar import AMBIENT_OPACITY, DECAY, GROWTH


@pytest.fixture
def host():
    return HeadlessHost(1920, 1080, canvas=RecordingCanvas(1920, 1080))


@pytest.fixture
def scheduler(host):
    sched = Scheduler(host, seed=99, readiness=80)
    assert sched.start()
    yield sched
    sched.stop()


def _run(host, frames):
    # drop recorded draw calls as we go
    for _ in range(frames):
        host.run_frames(1)
        host.canvas().calls.clear()


def test_start_registers_everything(host, scheduler):
    assert scheduler.running
    assert host.listener_count == len(LISTENER_NAMES)
    assert all(len(host.listeners[name]) == 1 for name in LISTENER_NAMES)
    assert len(host.pending) == 1
    assert scheduler.simulator.clarity.get_value() == 0.8


def test_long_run_and_resize(host, scheduler):
    sim = scheduler.simulator
    populations = {"snow": 300, "fish": 60, "kelp": 40, "shafts": 15}

    _run(host, 1000)
    assert sim.frame == 1000
    assert scheduler.frames_drawn == 1000
    for name, count in populations.items():
        assert sim.populations[name] == count
    assert sim.snow.x.min() >= 0 and sim.snow.x.max() <= 1920
    assert sim.snow.y.min() >= WRAP_TOP and sim.snow.y.max() <= 1080
    assert sim.fish.x.min() >= -X_MARGIN and sim.fish.x.max() <= 1920 + X_MARGIN
    assert sim.fish.y.min() >= -Y_MARGIN and sim.fish.y.max() <= 1080 + Y_MARGIN

    host.dispatch("resize", 800, 600)
    assert host.viewport() == (800, 600)
    assert host.canvas().size == (800, 600)
    assert (sim.width, sim.height) == (800, 600)

    _run(host, 1)
    for name, count in populations.items():
        assert sim.populations[name] == count
    assert sim.snow.x.max() <= 800 and sim.snow.y.max() <= 600
    assert sim.fish.x.max() <= 800 + X_MARGIN and sim.fish.y.max() <= 600 + Y_MARGIN


def test_resize_clamps_to_minimum(host, scheduler):
    host.dispatch("resize", 5, 3)
    assert host.viewport() == (16, 16)
    assert (scheduler.simulator.width, scheduler.simulator.height) == (16, 16)


def test_pointer_down_spawns_pulse(host, scheduler):
    sonar = scheduler.simulator.sonar
    host.dispatch("pointerdown", 100, 200)
    assert len(sonar) == 1
    pulse = sonar.pulses[0]
    assert (pulse.x, pulse.y) == (100, 200)
    assert pulse.radius == 0.0 and pulse.opacity == 1.0

    _run(host, 50)
    assert pulse in sonar.pulses
    assert pulse.radius == pytest.approx(50 * GROWTH)
    assert pulse.opacity == pytest.approx(1.0 - 50 * DECAY)


def test_ambient_pulse_on_interval(host, scheduler):
    sonar = scheduler.simulator.sonar
    _run(host, 199)
    assert len(sonar) == 0
    _run(host, 1)
    assert len(sonar) == 1
    assert sonar.pulses[0].opacity == pytest.approx(0.6)


def test_signal_events_reach_bridge(host, scheduler):
    signals = scheduler.signals
    host.dispatch("readiness-update", {"score": 30})
    host.dispatch("scroll", 420)
    host.dispatch("pointermove", 5, 6)
    host.dispatch("themechange", False)
    assert signals.readiness == 30.0
    assert signals.scroll == 420.0
    assert signals.pointer == (5.0, 6.0)
    assert signals.dark is False

    host.dispatch("readiness-update", {"score": "garbage"})
    assert signals.readiness == 0.0

    # the next frame uses the light, murky palette
    host.run_frames(1)
    stops = host.canvas().of("fill_gradient")[-1][0]
    assert stops[0][1] == BACKGROUNDS["light"]["murky"]


def test_stop_releases_everything(host, scheduler):
    _run(host, 3)
    callbacks = list(host.pending.values())
    scheduler.stop()

    assert not scheduler.running
    assert host.listener_count == 0
    assert host.pending == {}
    drawn, frame = scheduler.frames_drawn, scheduler.simulator.frame

    # a callback captured before stop() must do nothing
    for fn in callbacks:
        fn()
    assert host.run_frames(10) == 0
    host.dispatch("pointerdown", 1, 1)
    assert scheduler.frames_drawn == drawn
    assert scheduler.simulator.frame == frame
    assert len(scheduler.simulator.sonar) == 0
    assert host.pending == {}

    scheduler.stop()  # idempotent
    assert host.listener_count == 0


def test_missing_surface_never_starts():
    host = HeadlessHost(800, 600, surface=False)
    sched = Scheduler(host, seed=1)
    assert sched.start() is False
    assert host.listener_count == 0
    assert host.pending == {}
    assert sched.simulator is None
    sched.stop()


def test_fractional_speed_and_pause(host):
    with Scheduler(host, seed=3, speed=0.5) as sched:
        _run(host, 4)
        assert sched.simulator.frame == 2
        assert sched.frames_drawn == 4

        sched.paused = True
        _run(host, 3)
        assert sched.simulator.frame == 2
        assert sched.frames_drawn == 7
    assert host.listener_count == 0


def test_theme_read_from_host_on_start():
    host = HeadlessHost(640, 480, dark=False, canvas=RecordingCanvas(640, 480))
    with Scheduler(host, seed=4) as sched:
        assert sched.signals.dark is False


def test_headless_png(tmp_path):
    host = HeadlessHost(160, 120)
    with Scheduler(host, "midnight", seed=5, readiness=70) as sched:
        host.run_frames(3)
        assert sched.frames_drawn == 3
    path = host.save_png(str(tmp_path / "ocean.png"))
    from PIL import Image
    with Image.open(path) as img:
        assert img.size == (160, 120)
    pixels = np.asarray(host.canvas().snapshot())
    assert pixels.shape == (120, 160, 3)


def test_non_finite_resize_clamps(host, scheduler):
    host.dispatch("resize", float("inf"), 600)
    assert host.viewport() == (16, 600)
    host.dispatch("resize", 800, float("nan"))
    assert host.viewport() == (800, 16)
    host.dispatch("resize", None, "wide")
    assert (scheduler.simulator.width, scheduler.simulator.height) == (16, 16)
    _run(host, 1)
    assert scheduler.frames_drawn == 1


def test_start_clamps_degenerate_viewport():
    host = HeadlessHost(0, -5, canvas=RecordingCanvas(1, 1))
    with Scheduler(host, seed=6) as sched:
        assert sched.running
        assert host.viewport() == (16, 16)
        assert host.canvas().size == (16, 16)
        assert (sched.simulator.width, sched.simulator.height) == (16, 16)
        host.run_frames(2)
        assert sched.frames_drawn == 2


def test_oversized_readiness_is_absorbed(host, scheduler):
    host.dispatch("readiness-update", {"score": 10 ** 400})
    assert scheduler.signals.readiness == 0.0
    _run(host, 1)
    assert scheduler.frames_drawn == 1


class StopDuringRender(Compositor):
    """Tears the scheduler down from inside a frame."""

    def __init__(self):
        super().__init__()
        self.scheduler = None

    def render(self, canvas, sim, signals):
        super().render(canvas, sim, signals)
        self.scheduler.stop()


def test_stop_inside_frame_callback(host):
    compositor = StopDuringRender()
    sched = Scheduler(host, seed=7, compositor=compositor)
    compositor.scheduler = sched
    assert sched.start()

    assert host.run_frames(1) == 1
    assert not sched.running
    assert host.pending == {}
    assert host.listener_count == 0
    assert host.run_frames(5) == 0
    assert sched.simulator.frame == 1
    sched.stop()
    assert host.listener_count == 0


def test_ambient_ping_is_dim_gold(scheduler):
    sim = scheduler.simulator
    pulse = sim.ping(960, 540, scroll=100, ambient=True)
    assert pulse.opacity == pytest.approx(AMBIENT_OPACITY)
    assert pulse.color == GOLD
    assert pulse.y == pytest.approx(540 + 100 * 0.1)
    assert sim.ping(10, 10).opacity == 1.0


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-v"]))
