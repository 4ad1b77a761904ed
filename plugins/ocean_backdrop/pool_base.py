"""
Abstract Base Class for Entity Pools

Every layer of the scene (marine snow, fish, kelp, light shafts, sonar
pulses) implements this interface so the simulator can advance them and
the compositor can draw them without knowing their internals.

A pool is sized once at construction and keeps its population for its
whole life; only the sonar pool adds and removes entries.
"""

import math
from abc import ABC, abstractmethod

import numpy as np


TAU = 2.0 * math.pi


def random_depth(rng, n, lo):
    """n depths uniformly in [lo, 1]."""
    return lo + rng.random(n) * (1.0 - lo)


def random_phase(rng, n):
    return rng.random(n) * TAU


def parallax(scroll, coefficient):
    """Vertical shift for a layer: rendered_y = base_y - parallax(...)."""
    return scroll * coefficient


class EntityPool(ABC):
    """Base class for a fixed-population entity pool."""

    pool_name = ""  # e.g. "snow", "fish"

    def __init__(self, count=0):
        self.count = count

    def __len__(self):
        return self.count

    @abstractmethod
    def update(self, t, width, height):
        """Advance every entity by one tick.

        Args:
            t: Frame counter after increment (1 on the first tick)
            width: Current surface width
            height: Current surface height
        """

    @abstractmethod
    def draw(self, canvas, t, scroll, **style):
        """Paint the pool onto the canvas.

        Args:
            canvas: Target Canvas
            t: Current frame counter
            scroll: Scroll offset in pixels
            style: Pool-specific look (theme, tint)
        """

    @property
    def depths(self):
        """Per-entity depth in [0, 1]; empty for pools without depth."""
        return np.zeros(0)
