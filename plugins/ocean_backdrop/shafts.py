"""
Light Shafts - slanted god-rays from the surface

Shafts are rendered into a quarter-resolution buffer with numpy, softened
with a gaussian blur, and added onto the scene, the same
downsample-blur-upsample trick used for bloom. Each shaft is a slanted
band that leans 400 px to the left between the surface and the bottom and
fades out with depth.
"""

import numpy as np
from scipy.ndimage import gaussian_filter

from .palette import GOLD
from .pool_base import EntityPool, parallax, random_phase


SWAY_AMP = 100.0
LEAN = 400.0            # horizontal drift of the shaft from top to bottom
PARALLAX = 0.2
DOWNSAMPLE = 4
BLUR_SIGMA = 2.0        # in downsampled pixels


class LightShafts(EntityPool):

    pool_name = "shafts"

    def __init__(self, count, width, rng):
        super().__init__(count)
        self.x = rng.random(count) * width
        self.width = 150 + rng.random(count) * 400
        self.opacity = 0.02 + rng.random(count) * 0.08
        self.speed = 0.0005 + rng.random(count) * 0.001
        self.sway_phase = random_phase(rng, count)

    def update(self, t, width, height):
        self.sway_phase += self.speed

    def intensity(self, width, height, scroll):
        """Per-pixel shaft intensity on the downsampled grid, (h, w) float32."""
        sw = max(1, int(width) // DOWNSAMPLE)
        sh = max(1, int(height) // DOWNSAMPLE)
        field = np.zeros((sh, sw), dtype=np.float32)
        if self.count == 0:
            return field

        top = -parallax(scroll, PARALLAX)
        ys = (np.arange(sh, dtype=np.float32) + 0.5) * DOWNSAMPLE
        span = max(height - top, 1.0)
        frac = np.clip((ys - top) / span, 0.0, 1.0)        # 0 at the surface
        below_top = (ys >= top).astype(np.float32)
        xs = (np.arange(sw, dtype=np.float32) + 0.5) * DOWNSAMPLE

        left0 = self.x + np.sin(self.sway_phase) * SWAY_AMP
        for left, w, o in zip(left0, self.width, self.opacity):
            edge = left - LEAN * frac                       # (sh,)
            inside = (xs[None, :] >= edge[:, None]) & (xs[None, :] <= edge[:, None] + w)
            field += inside * (o * (1.0 - frac) * below_top)[:, None]
        return field

    def draw(self, canvas, t, scroll):
        field = self.intensity(canvas.width, canvas.height, scroll)
        field = gaussian_filter(field, BLUR_SIGMA)
        glow = field[:, :, None] * np.asarray(GOLD, dtype=np.float32)[None, None, :]
        canvas.add_pixels(glow)
