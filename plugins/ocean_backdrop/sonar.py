"""
Sonar - expanding, fading rings

The only pool with a finite lifecycle: pulses are spawned by pointer-down
events or by the ambient timer, grow by a fixed step and fade by a fixed
step every tick, and are dropped as soon as their opacity reaches zero.
"""

from .palette import GOLD, WHITE
from .pool_base import EntityPool, parallax


GROWTH = 3.5            # px per tick
DECAY = 0.012           # opacity per tick
PARALLAX = 0.1
RING_WIDTH = 2
INNER_RING = 0.8        # inner ring radius as a fraction of the outer
POINTER_OPACITY = 1.0
AMBIENT_OPACITY = 0.6


class SonarPulse:
    """One ring. Origin is in page space (already offset by scroll parallax)."""

    __slots__ = ("x", "y", "radius", "opacity", "color")

    def __init__(self, x, y, opacity=1.0, color=WHITE):
        self.x = x
        self.y = y
        self.radius = 0.0
        self.opacity = opacity
        self.color = color

    def __repr__(self):
        return (f"SonarPulse(x={self.x:.1f}, y={self.y:.1f}, "
                f"r={self.radius:.1f}, o={self.opacity:.3f})")


class SonarField(EntityPool):

    pool_name = "sonar"

    def __init__(self):
        super().__init__(0)
        self.pulses = []

    def __len__(self):
        return len(self.pulses)

    def __iter__(self):
        return iter(self.pulses)

    def spawn(self, x, y, scroll=0.0, opacity=POINTER_OPACITY, color=WHITE):
        """Add a pulse that renders at screen point (x, y) for the given scroll."""
        pulse = SonarPulse(x, y + parallax(scroll, PARALLAX), opacity, color)
        self.pulses.append(pulse)
        return pulse

    def spawn_ambient(self, width, height, scroll, rng):
        """Dimmer gold pulse at a random point on screen."""
        return self.spawn(rng.random() * width, rng.random() * height, scroll,
                          opacity=AMBIENT_OPACITY, color=GOLD)

    def update(self, t, width, height):
        for pulse in self.pulses:
            pulse.radius += GROWTH
            pulse.opacity -= DECAY
        self.pulses = [p for p in self.pulses if p.opacity > 0]

    def draw(self, canvas, t, scroll):
        shift = parallax(scroll, PARALLAX)
        for p in self.pulses:
            center = (p.x, p.y - shift)
            canvas.stroke_circle(center, p.radius, p.color, p.opacity, RING_WIDTH)
            canvas.stroke_circle(center, p.radius * INNER_RING, p.color,
                                 p.opacity * p.opacity * 0.5, RING_WIDTH)
