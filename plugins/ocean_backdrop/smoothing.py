"""
EMA-Smoothed Parameters

Externally pushed signals (the readiness score in particular) arrive as
step changes. SmoothedParameter eases the rendered value toward the latest
target so the water clears or clouds over gradually instead of snapping.

Smoothing is frame-rate independent via delta-time integration.
"""

import math


TICK = 1.0 / 60.0  # seconds per simulation tick


class SmoothedParameter:
    """EMA wrapper for a single numeric parameter.

    Time constant controls the "feel":
    - tau=0.5s: responsive but smooth
    - tau=2.0s: dreamy drift
    """

    def __init__(self, initial_value, time_constant=0.5):
        """Initialize smoothed parameter.

        Args:
            initial_value: Starting value (both current and target)
            time_constant: Time in seconds to reach ~63% of target (tau)
        """
        self.target = initial_value
        self.current = initial_value
        self.tau = time_constant

    def set_target(self, new_target):
        self.target = new_target

    def update(self, dt=TICK):
        """Advance EMA by delta-time (called each tick).

        alpha = 1 - exp(-dt / tau)
        current += alpha * (target - current)
        """
        if dt <= 0:
            return
        if self.tau <= 0:
            self.current = self.target
            return
        alpha = 1.0 - math.exp(-dt / self.tau)
        self.current += alpha * (self.target - self.current)

    def get_value(self):
        return self.current

    def snap(self, value):
        """Immediately set both target and current (no smoothing)."""
        self.target = value
        self.current = value
