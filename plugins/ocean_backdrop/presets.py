"""
Ocean Scene Presets

Each preset fixes the population of every pool plus the ambient pulse
cadence. Populations are deliberately independent of the window size so
per-frame cost stays bounded however large the viewport gets.
"""

PRESETS = {
    "reef": {
        "name": "Reef",
        "description": "Default backdrop - balanced snow, schools and kelp",
        "snow": 300, "fish": 60, "schools": 6, "kelp": 40, "shafts": 15,
        "pulse_interval": 200,
    },
    "shallows": {
        "name": "Shallows",
        "description": "Bright water, many light shafts, few fish",
        "snow": 150, "fish": 24, "schools": 3, "kelp": 60, "shafts": 24,
        "pulse_interval": 300,
    },
    "midnight": {
        "name": "Midnight Zone",
        "description": "Dense marine snow, sparse kelp, no surface light",
        "snow": 600, "fish": 30, "schools": 4, "kelp": 12, "shafts": 0,
        "pulse_interval": 120,
    },
    "still": {
        "name": "Still Water",
        "description": "Low-cost backdrop for slow machines",
        "snow": 80, "fish": 12, "schools": 2, "kelp": 10, "shafts": 6,
        "pulse_interval": 400,
    },
}

PRESET_ORDER = ["reef", "shallows", "midnight", "still"]

DEFAULT_PRESET = "reef"


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def list_presets():
    """Return list of (key, name, description) for presets."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER if k in PRESETS]
