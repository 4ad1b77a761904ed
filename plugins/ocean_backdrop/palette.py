"""
Ocean Palette

Colour tables for the backdrop: background gradient stops per theme and
readiness band, fish and kelp colours, and the particle tint. Colours are
stored as hex strings (the way designers hand them over) and converted to
RGB tuples once at import.
"""

import numpy as np


CLEAR_THRESHOLD = 60  # readiness at or above this reads as "clear" water

GOLD = (181, 148, 78)
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


def hex_to_rgb(value):
    """'#0c2447' -> (12, 36, 71). Accepts 3- or 6-digit forms."""
    value = value.lstrip("#")
    if len(value) == 3:
        value = "".join(c * 2 for c in value)
    return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))


def mix(color_a, color_b, frac):
    """Linear blend of two RGB tuples, frac=0 -> a, frac=1 -> b."""
    frac = min(1.0, max(0.0, frac))
    return tuple(int(round(a + (b - a) * frac)) for a, b in zip(color_a, color_b))


# --- Background gradients ---
# Each theme has a murky and a clear top colour; mid and bottom are shared.

BACKGROUNDS = {
    "dark": {
        "clear": hex_to_rgb("#0c2447"),
        "murky": hex_to_rgb("#01040a"),
        "mid": hex_to_rgb("#010816"),
        "bottom": hex_to_rgb("#000000"),
    },
    "light": {
        "clear": hex_to_rgb("#e0f2fe"),
        "murky": hex_to_rgb("#f8fafc"),
        "mid": hex_to_rgb("#f1f5f9"),
        "bottom": hex_to_rgb("#e2e8f0"),
    },
}

MID_STOP = 0.6


def top_color(readiness, dark=True):
    """Top gradient colour for a readiness score in [0, 100]."""
    table = BACKGROUNDS["dark" if dark else "light"]
    return table["clear"] if readiness >= CLEAR_THRESHOLD else table["murky"]


def background_stops(readiness, dark=True):
    """Three-stop vertical gradient as [(position, (r, g, b)), ...]."""
    table = BACKGROUNDS["dark" if dark else "light"]
    return [
        (0.0, top_color(readiness, dark)),
        (MID_STOP, table["mid"]),
        (1.0, table["bottom"]),
    ]


def gradient_column(stops, height):
    """Interpolate gradient stops into a (height, 3) uint8 column.

    Linear between stops, like a canvas linear gradient.
    """
    height = max(1, int(height))
    positions = np.array([s[0] for s in stops], dtype=np.float32)
    colors = np.array([s[1] for s in stops], dtype=np.float32)
    t = np.linspace(0.0, 1.0, height, dtype=np.float32)
    column = np.empty((height, 3), dtype=np.float32)
    for c in range(3):
        column[:, c] = np.interp(t, positions, colors[:, c])
    return np.clip(column + 0.5, 0, 255).astype(np.uint8)


# --- Entity colours ---

TROPICAL = [hex_to_rgb(h) for h in ("#B5944E", "#D4AF37", "#7dd3fc", "#38bdf8", "#facc15")]
KELP = [hex_to_rgb(h) for h in ("#064e3b", "#065f46")]


def snow_tint(clarity, dark=True):
    """Particle colour and alpha multiplier for the current clarity [0, 1].

    Clear water lights the particles up; the light theme uses faint dark
    specks instead of white ones.
    """
    if dark:
        return WHITE, 0.3 + clarity * 0.5
    return BLACK, 0.1 + clarity * 0.2


def vignette_color(dark=True):
    return BLACK if dark else WHITE
