"""
OceanSimulator - headless simulation core

Owns every entity pool, the frame counter and the surface bounds, and
advances the whole scene by one tick at a time. No drawing and no event
handling happens here: the scheduler feeds in signals, the compositor
reads the pools back out.

Usage:
    from ocean_backdrop.simulator import OceanSimulator
    from ocean_backdrop.signals import SignalBridge
    sim = OceanSimulator(1920, 1080, seed=7)
    signals = SignalBridge(readiness=80)
    for _ in range(100):
        sim.step(signals)
"""

import math

import numpy as np

from .fish import FishSchools
from .kelp import KelpBed
from .palette import GOLD
from .presets import DEFAULT_PRESET, PRESETS, get_preset
from .shafts import LightShafts
from .smoothing import SmoothedParameter, TICK
from .snow import MarineSnow
from .sonar import AMBIENT_OPACITY, SonarField


MIN_WIDTH = 16
MIN_HEIGHT = 16

CLARITY_TAU = 0.5   # seconds for readiness changes to settle into clarity


def _dimension(value):
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number)


def clamp_viewport(width, height):
    """Clamp a viewport to a usable minimum; non-numbers and non-finite values count as zero."""
    return max(MIN_WIDTH, _dimension(width)), max(MIN_HEIGHT, _dimension(height))


class OceanSimulator:
    """Entity pools plus the per-tick step.

    Args:
        width, height: Initial surface size (clamped to 16x16 minimum)
        preset_key: Scene preset name; unknown names fall back to 'reef'
        seed: Seed for the numpy Generator (None = fresh entropy)
        overrides: Per-pool counts replacing the preset's (snow=..., fish=...)
    """

    def __init__(self, width, height, preset_key=DEFAULT_PRESET, seed=None, **overrides):
        self.width, self.height = clamp_viewport(width, height)
        self.rng = np.random.default_rng(seed)

        preset = get_preset(preset_key)
        if preset is None:
            preset_key = DEFAULT_PRESET
            preset = PRESETS[DEFAULT_PRESET]
        self.preset_key = preset_key
        self.config = {**preset, **{k: v for k, v in overrides.items() if v is not None}}

        w, h = self.width, self.height
        cfg = self.config
        self.shafts = LightShafts(cfg["shafts"], w, self.rng)
        self.kelp = KelpBed(cfg["kelp"], w, h, self.rng)
        self.snow = MarineSnow(cfg["snow"], w, h, self.rng)
        self.fish = FishSchools(cfg["fish"], w, h, self.rng, schools=cfg["schools"])
        self.sonar = SonarField()

        self.pulse_interval = max(1, int(cfg["pulse_interval"]))
        self.clarity = SmoothedParameter(0.0, time_constant=CLARITY_TAU)
        self.frame = 0

    @property
    def pools(self):
        """All pools, in no particular order."""
        return (self.shafts, self.snow, self.fish, self.kelp, self.sonar)

    @property
    def populations(self):
        return {pool.pool_name: len(pool) for pool in self.pools}

    def resize(self, width, height):
        """Update bounds only. Entities wrap into the new bounds on their next update."""
        self.width, self.height = clamp_viewport(width, height)

    def prime(self, signals):
        """Snap clarity to the current readiness (no easing on first frame)."""
        self.clarity.snap(signals.readiness / 100.0)

    def step(self, signals):
        """Advance the scene by one tick.

        Pool updates are independent of each other, so their order does not
        matter; the ambient pulse is spawned after sonar pruning so it shows
        at full strength on the frame it appears.
        """
        self.frame += 1
        t = self.frame
        self.clarity.set_target(signals.readiness / 100.0)
        self.clarity.update(TICK)

        for pool in self.pools:
            pool.update(t, self.width, self.height)

        if t % self.pulse_interval == 0:
            self.sonar.spawn_ambient(self.width, self.height, signals.scroll, self.rng)

    def ping(self, x, y, scroll=0.0, ambient=False):
        """Pulse centred under (x, y).

        Pointer-down pings are full-strength white; ambient ones are the
        dimmer gold rings the interval timer spawns.
        """
        if ambient:
            return self.sonar.spawn(x, y, scroll, opacity=AMBIENT_OPACITY, color=GOLD)
        return self.sonar.spawn(x, y, scroll)

    @property
    def stats(self):
        return {
            "frame": self.frame,
            "clarity": self.clarity.get_value(),
            "size": (self.width, self.height),
            **self.populations,
        }
