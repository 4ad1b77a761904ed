"""
Signal Bridge

Absorbs high-frequency external inputs (scroll, pointer, readiness
updates, theme changes) into plain mutable fields that the next frame
reads. Handlers and the frame callback run on the same thread, so there is
no locking: whatever a handler writes is picked up on the next tick.

Malformed input never raises; it degrades to a default and is logged.
"""

import logging
import math


logger = logging.getLogger(__name__)

# Listener names shared by the scheduler and the hosts
RESIZE = "resize"
POINTER_DOWN = "pointerdown"
POINTER_MOVE = "pointermove"
SCROLL = "scroll"
READINESS_UPDATE = "readiness-update"
THEME_CHANGE = "themechange"

LISTENER_NAMES = (RESIZE, POINTER_DOWN, POINTER_MOVE, SCROLL, READINESS_UPDATE, THEME_CHANGE)

READINESS_MIN = 0.0
READINESS_MAX = 100.0


def _finite_float(value):
    """float(value) if it is a finite real number (or numeric string), else None."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def clamp_readiness(value):
    number = _finite_float(value)
    if number is None:
        return READINESS_MIN
    return min(READINESS_MAX, max(READINESS_MIN, number))


def parse_readiness(payload):
    """Readiness score from an update payload like {"score": 72}.

    Missing or invalid scores count as 0; valid ones are clamped to [0, 100].
    """
    try:
        raw = payload["score"]
    except (KeyError, TypeError, IndexError):
        logger.debug("readiness payload without a score: %r", payload)
        return READINESS_MIN
    if _finite_float(raw) is None:
        logger.debug("invalid readiness score: %r", raw)
    return clamp_readiness(raw)


class SignalBridge:
    """Frame-local view of the outside world."""

    def __init__(self, readiness=0.0, scroll=0.0, dark=True):
        self.readiness = clamp_readiness(readiness)
        self.scroll = max(0.0, _finite_float(scroll) or 0.0)
        self.pointer = (0.0, 0.0)
        self.dark = bool(dark)

    def on_readiness(self, payload):
        self.readiness = parse_readiness(payload)

    def on_scroll(self, offset):
        value = _finite_float(offset)
        if value is None:
            logger.debug("ignoring scroll offset %r", offset)
            return
        self.scroll = max(0.0, value)

    def on_pointer_move(self, x, y):
        self.pointer = (float(x), float(y))

    def on_theme(self, dark):
        self.dark = bool(dark)

    def __repr__(self):
        return (f"SignalBridge(readiness={self.readiness:.0f}, scroll={self.scroll:.0f}, "
                f"pointer={self.pointer}, dark={self.dark})")
