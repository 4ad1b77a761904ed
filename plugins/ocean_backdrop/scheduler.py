"""
Scheduler - render loop and resource lifecycle

Drives simulation + compositing once per display refresh and owns every
resource the backdrop acquires from its host: the surface size, the event
listeners and the pending frame request.

A host is any object providing:
    viewport() -> (width, height)
    canvas() -> Canvas or None
    resize_canvas(width, height)
    is_dark() -> bool
    add_listener(name, fn) / remove_listener(name, fn)
    request_frame(fn) -> handle / cancel_frame(handle)

The frame loop runs one tick per callback and re-requests a frame only
after the tick completes, guarded by a cancellation token owned by the
scheduler, so nothing fires after stop().
"""

import logging
from contextlib import ExitStack, contextmanager
from functools import partial

import pygame

from .compositor import Compositor
from .presets import DEFAULT_PRESET
from .signals import (
    POINTER_DOWN, POINTER_MOVE, READINESS_UPDATE, RESIZE, SCROLL, THEME_CHANGE,
    SignalBridge,
)
from .simulator import OceanSimulator, clamp_viewport


logger = logging.getLogger(__name__)


class CancelToken:
    """Set once; every frame callback checks it before doing anything."""

    __slots__ = ("cancelled",)

    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class Scheduler:
    """One backdrop instance bound to one host.

    Args:
        host: Host object (see module docstring)
        preset_key: Scene preset
        seed: RNG seed for reproducible scenes
        readiness: Initial readiness score
        speed: Simulation ticks per frame; fractional values accumulate
        overrides: Pool count overrides passed to the simulator
    """

    def __init__(self, host, preset_key=DEFAULT_PRESET, seed=None, readiness=0.0,
                 speed=1.0, compositor=None, **overrides):
        self.host = host
        self.preset_key = preset_key
        self.seed = seed
        self.overrides = overrides
        self.signals = SignalBridge(readiness=readiness)
        self.compositor = compositor or Compositor()
        self.simulator = None

        self.speed = speed
        self.speed_accumulator = 0.0
        self.paused = False
        self.frames_drawn = 0

        self._token = None
        self._frame_handle = None
        self._listeners = None

    @property
    def running(self):
        return self._token is not None and not self._token.cancelled

    # ── Lifecycle ────────────────────────────────────────────────────────

    def start(self):
        """Size the surface, build the scene, attach listeners, request a frame.

        Returns:
            True if the loop started, False if the host has no drawing surface
        """
        if self.running:
            return True
        if self.host.canvas() is None:
            logger.warning("no drawing surface available; ocean backdrop disabled")
            return False

        width, height = clamp_viewport(*self.host.viewport())
        self.host.resize_canvas(width, height)
        if self.simulator is None:
            self.simulator = OceanSimulator(width, height, self.preset_key,
                                            seed=self.seed, **self.overrides)
        else:
            self.simulator.resize(width, height)
        self.signals.on_theme(self.host.is_dark())
        self.simulator.prime(self.signals)

        self._listeners = ExitStack()
        for name, handler in (
            (RESIZE, self._on_resize),
            (POINTER_DOWN, self._on_pointer_down),
            (POINTER_MOVE, self._on_pointer_move),
            (SCROLL, self._on_scroll),
            (READINESS_UPDATE, self._on_readiness),
            (THEME_CHANGE, self._on_theme),
        ):
            self._listeners.enter_context(self._listening(name, handler))

        self._token = CancelToken()
        self._schedule(self._token)
        logger.debug("backdrop started at %dx%d (%s)", width, height, self.simulator.populations)
        return True

    def stop(self):
        """Cancel the pending frame and detach every listener. Idempotent."""
        token, self._token = self._token, None
        handle, self._frame_handle = self._frame_handle, None
        listeners, self._listeners = self._listeners, None
        try:
            if token is not None:
                token.cancel()
            if handle is not None:
                self.host.cancel_frame(handle)
        finally:
            if listeners is not None:
                listeners.close()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc):
        self.stop()

    @contextmanager
    def _listening(self, name, handler):
        self.host.add_listener(name, handler)
        try:
            yield
        finally:
            self.host.remove_listener(name, handler)

    # ── Frame loop ───────────────────────────────────────────────────────

    def _schedule(self, token):
        self._frame_handle = self.host.request_frame(partial(self._on_frame, token))

    def _on_frame(self, token):
        if token.cancelled:
            return
        self._frame_handle = None
        self.tick()
        if not token.cancelled:
            self._schedule(token)

    def tick(self):
        """Advance the simulation (speed-accumulated) and draw one frame."""
        if not self.paused:
            self.speed_accumulator += self.speed
            while self.speed_accumulator >= 1.0:
                self.simulator.step(self.signals)
                self.speed_accumulator -= 1.0

        canvas = self.host.canvas()
        if canvas is None:
            return
        try:
            self.compositor.render(canvas, self.simulator, self.signals)
        except pygame.error as exc:
            logger.warning("skipping frame %d: %s", self.simulator.frame, exc)
            return
        self.frames_drawn += 1

    # ── Listeners ────────────────────────────────────────────────────────

    def _on_resize(self, width, height):
        width, height = clamp_viewport(width, height)
        self.host.resize_canvas(width, height)
        self.simulator.resize(width, height)

    def _on_pointer_down(self, x, y):
        self.signals.on_pointer_move(x, y)
        self.simulator.ping(x, y, self.signals.scroll)

    def _on_pointer_move(self, x, y):
        self.signals.on_pointer_move(x, y)

    def _on_scroll(self, offset):
        self.signals.on_scroll(offset)

    def _on_readiness(self, payload):
        self.signals.on_readiness(payload)

    def _on_theme(self, dark):
        self.signals.on_theme(dark)
