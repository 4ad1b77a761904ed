"""Shared fixtures: a canvas that records draw calls instead of rasterising."""

import os
from contextlib import contextmanager

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pytest

from ocean_backdrop.signals import SignalBridge
from ocean_backdrop.simulator import OceanSimulator


class RecordingCanvas:
    """Drop-in stand-in for Canvas that logs (method, args, kwargs)."""

    def __init__(self, width=1920, height=1080):
        self.width = width
        self.height = height
        self.calls = []

    @property
    def size(self):
        return self.width, self.height

    def resize(self, width, height):
        self.width, self.height = width, height

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))

    def clear(self, color=(0, 0, 0)):
        self._record("clear", color)

    def fill_gradient(self, stops):
        self._record("fill_gradient", stops)

    def fill_circle(self, center, radius, color, alpha=1.0):
        self._record("fill_circle", center, radius, color, alpha)

    def fill_ellipse(self, center, rx, ry, color, alpha=1.0):
        self._record("fill_ellipse", center, rx, ry, color, alpha)

    def fill_polygon(self, points, color, alpha=1.0):
        self._record("fill_polygon", points, color, alpha)

    def stroke_circle(self, center, radius, color, alpha=1.0, width=1):
        self._record("stroke_circle", center, radius, color, alpha, width)

    def stroke_quadratic(self, start, control, end, color, alpha=1.0, width=1.0):
        self._record("stroke_quadratic", start, control, end, color, alpha, width)

    @contextmanager
    def additive(self):
        self._record("additive")
        yield self

    def add_pixels(self, rgb):
        self._record("add_pixels", rgb.shape)

    def vignette(self, color, strength=0.4):
        self._record("vignette", color, strength)

    def names(self):
        return [name for name, _, _ in self.calls]

    def of(self, name):
        return [args for n, args, _ in self.calls if n == name]


@pytest.fixture
def recording_canvas():
    return RecordingCanvas()


@pytest.fixture
def sim():
    return OceanSimulator(1920, 1080, seed=1234)


@pytest.fixture
def signals():
    return SignalBridge(readiness=80)
