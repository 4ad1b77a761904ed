"""
HeadlessHost - off-screen host for snapshots and tests

Implements the scheduler's host interface without a window: events are
dispatched by hand and frames are pumped explicitly. Passing
``surface=False`` models a host whose drawing surface is unavailable.

Listener call signatures:
    resize(width, height)
    pointerdown(x, y) / pointermove(x, y)
    scroll(offset)
    readiness-update(payload)   payload like {"score": 72}
    themechange(dark)
"""

import itertools
import os

from PIL import Image

from .canvas import Canvas
from .signals import LISTENER_NAMES


class HeadlessHost:

    def __init__(self, width=1280, height=720, dark=True, surface=True, canvas=None):
        """
        Args:
            width, height: Viewport size reported to the scheduler
            dark: Theme flag reported by is_dark()
            surface: False to simulate a missing drawing surface
            canvas: Explicit canvas (e.g. a recording canvas in tests)
        """
        self.width = width
        self.height = height
        self.dark = dark
        if canvas is not None:
            self._canvas = canvas
        elif surface:
            self._canvas = Canvas.offscreen(max(1, int(width)), max(1, int(height)))
        else:
            self._canvas = None
        self.listeners = {name: [] for name in LISTENER_NAMES}
        self.pending = {}
        self._handles = itertools.count(1)

    # ── Host interface ───────────────────────────────────────────────────

    def viewport(self):
        return self.width, self.height

    def canvas(self):
        return self._canvas

    def resize_canvas(self, width, height):
        self.width, self.height = width, height
        canvas = self._canvas
        if canvas is None or canvas.size == (width, height):
            return
        if isinstance(canvas, Canvas):
            canvas.attach(Canvas.offscreen(width, height).surface)
        elif hasattr(canvas, "resize"):
            canvas.resize(width, height)

    def is_dark(self):
        return self.dark

    def add_listener(self, name, fn):
        self.listeners.setdefault(name, []).append(fn)

    def remove_listener(self, name, fn):
        self.listeners[name].remove(fn)

    def request_frame(self, fn):
        handle = next(self._handles)
        self.pending[handle] = fn
        return handle

    def cancel_frame(self, handle):
        self.pending.pop(handle, None)

    # ── Driving ──────────────────────────────────────────────────────────

    @property
    def listener_count(self):
        return sum(len(fns) for fns in self.listeners.values())

    def dispatch(self, name, *args):
        """Deliver an event to every listener registered under name."""
        for fn in list(self.listeners.get(name, ())):
            fn(*args)

    def run_frames(self, n=1):
        """Run up to n display refreshes; returns how many callbacks fired."""
        fired = 0
        for _ in range(n):
            if not self.pending:
                break
            callbacks = list(self.pending.values())
            self.pending.clear()
            for fn in callbacks:
                fn()
                fired += 1
        return fired

    def save_png(self, path):
        """Write the current canvas to a PNG file."""
        if self._canvas is None:
            raise RuntimeError("no drawing surface to save")
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        Image.fromarray(self._canvas.snapshot()).save(path)
        return path
