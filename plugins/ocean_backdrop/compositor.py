"""
Compositor - one fully layered frame per call

Draw order, back to front:
  1. background gradient + caustic glow band
  2. light shafts (additive)
  3. marine snow
  4. far fish (depth < 0.7)
  5. kelp
  6. near fish (depth >= 0.7)
  7. sonar rings
  8. vignette

Splitting the fish around the kelp is what lets far fish pass behind the
plants and near fish in front of them. Every layer is always drawn; there
are no early exits that could leave a half-painted surface.
"""

import math

from .palette import GOLD, background_stops, snow_tint, vignette_color


CAUSTIC_SPACING = 400
CAUSTIC_RX = 320
CAUSTIC_RY = 150
CAUSTIC_TOP = 50
CAUSTIC_PARALLAX = 0.05
VIGNETTE_STRENGTH = 0.4


class Compositor:

    def __init__(self, caustics=True, vignette=True):
        self.caustics = caustics
        self.vignette = vignette

    def render(self, canvas, sim, signals):
        t = sim.frame
        scroll = signals.scroll
        dark = signals.dark

        canvas.clear()
        canvas.fill_gradient(background_stops(signals.readiness, dark))
        if self.caustics:
            self._draw_caustics(canvas, t, scroll)

        sim.shafts.draw(canvas, t, scroll)

        color, intensity = snow_tint(sim.clarity.get_value(), dark)
        sim.snow.draw(canvas, t, scroll, color=color, intensity=intensity)

        sim.fish.draw(canvas, t, scroll, near=False)
        sim.kelp.draw(canvas, t, scroll)
        sim.fish.draw(canvas, t, scroll, near=True)

        sim.sonar.draw(canvas, t, scroll)

        if self.vignette:
            canvas.vignette(vignette_color(dark), VIGNETTE_STRENGTH)

    def _draw_caustics(self, canvas, t, scroll):
        """Slow shimmering band of gold light just under the surface."""
        alpha = 0.03 + math.sin(t * 0.005) * 0.01
        y = CAUSTIC_TOP - scroll * CAUSTIC_PARALLAX
        with canvas.additive():
            for x in range(-CAUSTIC_SPACING, canvas.width + CAUSTIC_SPACING, CAUSTIC_SPACING):
                ox = math.sin(t * 0.008 + x) * 50
                canvas.fill_ellipse((x + ox, y), CAUSTIC_RX, CAUSTIC_RY, GOLD, alpha)
