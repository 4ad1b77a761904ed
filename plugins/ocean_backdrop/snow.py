"""
Marine Snow - drifting particulate layer

Hundreds of tiny specks sink slowly, nearer ones faster, with a small
sinusoidal side-to-side wobble. Particles wrap to the top when they sink
past the bottom edge and wrap horizontally at the sides, so the field is
effectively toroidal and never needs reseeding.
"""

import numpy as np

from .pool_base import EntityPool, parallax, random_phase


WRAP_TOP = -20.0        # particles re-enter slightly above the top edge
JITTER_FREQ = 0.01      # radians per frame
JITTER_AMP = 0.2        # px per frame
PARALLAX = 0.2          # scroll coefficient per unit depth


class MarineSnow(EntityPool):

    pool_name = "snow"

    def __init__(self, count, width, height, rng):
        super().__init__(count)
        self.x = rng.random(count) * width
        self.y = rng.random(count) * height
        self.r = rng.random(count) * 1.5 + 0.5
        self.vx = (rng.random(count) - 0.5) * 0.1   # stored only; sideways motion is the jitter
        self.vy = rng.random(count) * 0.3 + 0.1
        self.opacity = rng.random(count) * 0.5 + 0.1
        self._depth = rng.random(count) * 0.8 + 0.2
        self.phase = random_phase(rng, count)

    @property
    def depths(self):
        return self._depth

    def update(self, t, width, height):
        self.y += self.vy * self._depth
        self.x += np.sin(t * JITTER_FREQ + self.phase) * JITTER_AMP

        self.y[self.y > height] = WRAP_TOP
        right = self.x > width
        left = self.x < 0
        self.x[right] = 0.0
        self.x[left] = width

    def draw(self, canvas, t, scroll, color=(255, 255, 255), intensity=0.5):
        """
        Args:
            color: Particle RGB (white in the dark theme, black in light)
            intensity: Alpha multiplier from readiness clarity
        """
        ys = self.y - parallax(scroll, self._depth * PARALLAX)
        alphas = self.opacity * intensity
        for x, y, r, a in zip(self.x, ys, self.r, alphas):
            canvas.fill_circle((x, y), r, color, a)
