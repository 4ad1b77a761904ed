"""
Kelp - stationary swaying plants rooted at the bottom edge

Plants never move; each one bends along a quadratic curve whose tip sways
sinusoidally. Nearer plants are taller and thicker. The bed is kept sorted
by depth once at construction because depth never changes.
"""

import numpy as np

from .palette import KELP
from .pool_base import EntityPool, parallax, random_depth, random_phase


# Negative: the bed sinks as the page scrolls down instead of lifting its
# roots into view.
PARALLAX = -0.1


class KelpBed(EntityPool):

    pool_name = "kelp"

    def __init__(self, count, width, height, rng):
        super().__init__(count)
        depth = random_depth(rng, count, 0.3)
        order = np.argsort(depth, kind="stable")

        self._depth = depth[order]
        self.x = (rng.random(count) * width)[order]
        self.height = (height * (0.2 + rng.random(count) * 0.4))[order] * self._depth
        self.sway_speed = (0.001 + rng.random(count) * 0.003)[order]
        self.sway_amount = (15 + rng.random(count) * 40)[order]
        self.sway_phase = random_phase(rng, count)[order]
        self.width = (6 + rng.random(count) * 12)[order] * self._depth
        self.color_index = rng.integers(0, len(KELP), count)[order]

    @property
    def depths(self):
        return self._depth

    def update(self, t, width, height):
        self.sway_phase += self.sway_speed

    def draw(self, canvas, t, scroll):
        floor = canvas.height
        offsets = parallax(scroll, self._depth * PARALLAX)
        sways = np.sin(self.sway_phase) * self.sway_amount
        for i in range(self.count):
            base_y = floor - offsets[i]
            x = self.x[i]
            sway = sways[i]
            canvas.stroke_quadratic(
                (x, base_y),
                (x + sway * 0.5, base_y - self.height[i] * 0.5),
                (x + sway, base_y - self.height[i]),
                KELP[self.color_index[i]],
                alpha=self._depth[i] * 0.7,
                width=self.width[i],
            )
