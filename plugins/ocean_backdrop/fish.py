"""
Fish - schooling swimmers with depth-ordered drawing

Each fish swims horizontally in a fixed direction and wraps around with a
margin so it fully leaves the screen before reappearing. Schools are a
soft grouping: fish sharing a school id share a slow vertical sway, which
reads as cohesive movement without any steering logic. A second, faster
per-fish sway keeps individuals from moving in lockstep.

Depth drives size, speed, opacity, parallax and draw order. Fish are split
into a far band (depth < NEAR_DEPTH) drawn behind the kelp and a near band
drawn in front of it; within a band they are painted back to front.
"""

import numpy as np

from .canvas import quadratic_points
from .palette import TROPICAL, BLACK, WHITE, mix
from .pool_base import EntityPool, parallax, random_depth, random_phase


NEAR_DEPTH = 0.7        # split between the behind-kelp and in-front bands
X_MARGIN = 100.0
Y_MARGIN = 200.0
PARALLAX = 0.15

SCHOOL_FREQ = 0.01      # shared sway
SCHOOL_SPREAD = 10.0    # phase offset between schools
SCHOOL_AMP = 15.0
SOLO_FREQ = 0.04        # individual sway
SOLO_AMP = 5.0

TAIL_RATE = 0.15        # tail phase gained per px/frame of speed
TAIL_IDLE = 0.05
GLINT_FREQ = 0.02
GLINT_THRESHOLD = 0.8


class FishSchools(EntityPool):

    pool_name = "fish"

    def __init__(self, count, width, height, rng, schools=6):
        """
        Args:
            count: Number of fish
            width, height: Surface size used for initial placement
            rng: numpy Generator
            schools: Number of school ids to draw from
        """
        super().__init__(count)
        self.schools = schools
        self._depth = random_depth(rng, count, 0.4)
        direction = np.where(rng.random(count) > 0.5, 1.0, -1.0)
        self.x = rng.random(count) * width
        self.y = rng.random(count) * height
        self.vx = (0.8 + rng.random(count) * 1.5) * direction * self._depth
        self.vy = (rng.random(count) - 0.5) * 0.05
        self.size = (4 + rng.random(count) * 8) * self._depth
        self.color_index = rng.integers(0, len(TROPICAL), count)
        self.phase = random_phase(rng, count)
        self.school_id = rng.integers(0, max(1, schools), count)
        self.tail_phase = random_phase(rng, count)

        self._far_order = self._band(near=False)
        self._near_order = self._band(near=True)

    @property
    def depths(self):
        return self._depth

    def _band(self, near):
        mask = self._depth >= NEAR_DEPTH if near else self._depth < NEAR_DEPTH
        idx = np.flatnonzero(mask)
        return idx[np.argsort(self._depth[idx], kind="stable")]

    def band_order(self, near):
        """Indices of one depth band, farthest first."""
        return self._near_order if near else self._far_order

    def update(self, t, width, height):
        self.x += self.vx
        self.y += self.vy

        x, y = self.x, self.y
        x[x > width + X_MARGIN] = -X_MARGIN
        x[x < -X_MARGIN] = width + X_MARGIN
        y[y > height + Y_MARGIN] = -Y_MARGIN
        y[y < -Y_MARGIN] = height + Y_MARGIN

        self.tail_phase += np.abs(self.vx) * TAIL_RATE + TAIL_IDLE

    def sway(self, t):
        """Vertical offset per fish: school cohesion plus individual wobble."""
        school = np.sin(t * SCHOOL_FREQ + self.school_id * SCHOOL_SPREAD) * SCHOOL_AMP
        solo = np.sin(t * SOLO_FREQ + self.phase) * SOLO_AMP
        return school + solo

    def draw(self, canvas, t, scroll, near=False):
        """Draw one depth band (far or near), back to front."""
        ys = self.y + self.sway(t) - parallax(scroll, self._depth * PARALLAX)
        glints = np.sin(t * GLINT_FREQ + self.phase) > GLINT_THRESHOLD
        for i in self.band_order(near):
            self._draw_one(canvas, i, ys[i], bool(glints[i]))

    def _draw_one(self, canvas, i, y, glint):
        x = self.x[i]
        s = self.size[i]
        facing = 1.0 if self.vx[i] > 0 else -1.0
        alpha = self._depth[i] * 0.7
        color = TROPICAL[self.color_index[i]]

        def at(lx, ly):
            return (x + facing * lx, y + ly)

        bob = np.sin(self.tail_phase[i] * 0.5) * 1.5
        wag = np.sin(self.tail_phase[i]) * (s * 0.6)

        # Body: darker rim under a bright core, standing in for a radial gradient
        canvas.fill_ellipse(at(0, bob), s, s * 0.5, mix(color, BLACK, 0.3), alpha)
        canvas.fill_ellipse(at(s * 0.1, bob), s * 0.6, s * 0.3, color, alpha)

        upper = quadratic_points((-s * 0.7, bob), (-s * 1.1, bob + wag * 0.5),
                                 (-s * 1.6, bob + wag), segments=6)
        lower = quadratic_points((-s * 1.6, bob - wag), (-s * 1.1, bob - wag * 0.5),
                                 (-s * 0.7, bob), segments=6)
        notch = np.array([[-s * 1.4, bob]])
        tail = np.concatenate([upper, notch, lower])
        tail[:, 0] = x + facing * tail[:, 0]
        tail[:, 1] += y
        canvas.fill_polygon(tail, color, alpha)

        canvas.fill_circle(at(s * 0.5, bob - s * 0.1), s * 0.12, BLACK, alpha)
        if glint:
            canvas.fill_circle(at(s * 0.55, bob - s * 0.15), s * 0.05, WHITE, alpha)
