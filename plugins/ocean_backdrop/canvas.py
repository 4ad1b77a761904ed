"""
Drawing Surface for the Ocean Backdrop

Thin wrapper over a pygame Surface exposing the handful of primitives the
scene needs: clear, vertical gradient fill, alpha-blended circles, ellipses,
polygons and thick quadratic strokes, an additive layer for glows, and a
radial vignette overlay.

All colours are (r, g, b) tuples; opacity is passed separately as a float
in [0, 1] so that pools can modulate it per entity without rebuilding
colour tuples.
"""

from contextlib import contextmanager

import numpy as np
import pygame
import pygame.gfxdraw

from .palette import gradient_column


# gfxdraw takes signed 16-bit coordinates
_COORD_LIMIT = 32000


def quadratic_points(start, control, end, segments=12):
    """Sample a quadratic Bezier curve into a (segments + 1, 2) array."""
    t = np.linspace(0.0, 1.0, segments + 1)[:, None]
    p0 = np.asarray(start, dtype=np.float64)
    p1 = np.asarray(control, dtype=np.float64)
    p2 = np.asarray(end, dtype=np.float64)
    return (1 - t) ** 2 * p0 + 2 * (1 - t) * t * p1 + t ** 2 * p2


def _stroke_outline(points, width):
    """Offset a polyline by +/- width/2 along its normals into a closed outline."""
    tangents = np.gradient(points, axis=0)
    norms = np.hypot(tangents[:, 0], tangents[:, 1])
    norms[norms == 0] = 1.0
    normals = np.stack([-tangents[:, 1], tangents[:, 0]], axis=1) / norms[:, None]
    half = normals * (width / 2.0)
    return np.concatenate([points + half, (points - half)[::-1]])


def _alpha_byte(alpha):
    return int(round(min(1.0, max(0.0, alpha)) * 255))


class Canvas:
    """2D raster context over a pygame Surface."""

    def __init__(self, surface):
        self.surface = surface
        self._gradient_cache = {}
        self._vignette_cache = {}
        self._layer = None

    @classmethod
    def offscreen(cls, width, height):
        """Canvas backed by an off-screen surface (no display needed)."""
        return cls(pygame.Surface((int(width), int(height))))

    @property
    def width(self):
        return self.surface.get_width()

    @property
    def height(self):
        return self.surface.get_height()

    @property
    def size(self):
        return self.surface.get_size()

    def attach(self, surface):
        """Point the canvas at a new surface (after a window resize)."""
        self.surface = surface
        self._gradient_cache.clear()
        self._vignette_cache.clear()
        self._layer = None

    def _visible(self, x, y, extent):
        w, h = self.size
        return -extent <= x <= w + extent and -extent <= y <= h + extent

    # ── Fills ────────────────────────────────────────────────────────────

    def clear(self, color=(0, 0, 0)):
        self.surface.fill(color)

    def fill_gradient(self, stops):
        """Fill the whole surface with a vertical gradient.

        Args:
            stops: [(position, (r, g, b)), ...] with positions in [0, 1]
        """
        w, h = self.size
        key = (tuple((pos, tuple(col)) for pos, col in stops), w, h)
        cached = self._gradient_cache.get(key)
        if cached is None:
            if len(self._gradient_cache) > 8:
                self._gradient_cache.clear()
            column = gradient_column(stops, h)[None, :, :]  # (1, h, 3), x-major
            strip = pygame.surfarray.make_surface(column)
            cached = pygame.transform.scale(strip, (w, h))
            self._gradient_cache[key] = cached
        self.surface.blit(cached, (0, 0))

    def fill_circle(self, center, radius, color, alpha=1.0):
        a = _alpha_byte(alpha)
        x, y = center
        if a == 0 or not self._visible(x, y, radius + 1):
            return
        pygame.gfxdraw.filled_circle(
            self.surface, int(round(x)), int(round(y)),
            max(0, int(round(radius))), (*color, a))

    def fill_ellipse(self, center, rx, ry, color, alpha=1.0):
        a = _alpha_byte(alpha)
        x, y = center
        if a == 0 or not self._visible(x, y, max(rx, ry) + 1):
            return
        pygame.gfxdraw.filled_ellipse(
            self.surface, int(round(x)), int(round(y)),
            max(1, int(round(rx))), max(1, int(round(ry))), (*color, a))

    def fill_polygon(self, points, color, alpha=1.0):
        a = _alpha_byte(alpha)
        pts = np.asarray(points, dtype=np.float64)
        if a == 0 or len(pts) < 3:
            return
        w, h = self.size
        lo = pts.min(axis=0)
        hi = pts.max(axis=0)
        if hi[0] < 0 or hi[1] < 0 or lo[0] > w or lo[1] > h:
            return
        pts = np.clip(np.rint(pts), -_COORD_LIMIT, _COORD_LIMIT).astype(int)
        pygame.gfxdraw.filled_polygon(self.surface, [tuple(p) for p in pts], (*color, a))

    # ── Strokes ──────────────────────────────────────────────────────────

    def stroke_circle(self, center, radius, color, alpha=1.0, width=1):
        a = _alpha_byte(alpha)
        x, y = center
        if a == 0 or radius < 0 or not self._visible(x, y, radius + width):
            return
        if radius > _COORD_LIMIT:
            return
        cx, cy = int(round(x)), int(round(y))
        r = int(round(radius))
        for i in range(max(1, int(round(width)))):
            pygame.gfxdraw.aacircle(self.surface, cx, cy, r + i, (*color, a))

    def stroke_quadratic(self, start, control, end, color, alpha=1.0, width=1.0,
                         segments=16):
        """Thick quadratic curve with round caps.

        Drawn opaque into a scratch surface first and then blitted with the
        requested opacity, so overlapping caps don't double up.
        """
        a = _alpha_byte(alpha)
        if a == 0:
            return
        points = quadratic_points(start, control, end, segments)
        half = max(0.5, width / 2.0)
        lo = np.floor(points.min(axis=0) - half - 1)
        hi = np.ceil(points.max(axis=0) + half + 1)
        w, h = self.size
        if hi[0] < 0 or hi[1] < 0 or lo[0] > w or lo[1] > h:
            return
        lo = np.maximum(lo, [-half - 1, -half - 1])
        hi = np.minimum(hi, [w + half + 1, h + half + 1])
        size = (int(hi[0] - lo[0]) + 1, int(hi[1] - lo[1]) + 1)
        if size[0] <= 0 or size[1] <= 0:
            return

        scratch = pygame.Surface(size, pygame.SRCALPHA)
        local = points - lo
        outline = _stroke_outline(local, half * 2)
        pygame.draw.polygon(scratch, color, [tuple(p) for p in np.rint(outline).astype(int)])
        cap = max(1, int(round(half)))
        for px, py in (local[0], local[-1]):
            pygame.draw.circle(scratch, color, (int(round(px)), int(round(py))), cap)
        scratch.set_alpha(a)
        self.surface.blit(scratch, (int(lo[0]), int(lo[1])))

    # ── Compositing ──────────────────────────────────────────────────────

    @contextmanager
    def additive(self):
        """Redirect drawing into a black layer, then add it onto the surface.

        Translucent shapes drawn inside the block land premultiplied on the
        black layer, so RGB-add on exit behaves like a screen/glow blend.
        """
        target = self.surface
        if self._layer is None or self._layer.get_size() != target.get_size():
            self._layer = pygame.Surface(target.get_size())
        layer = self._layer
        layer.fill((0, 0, 0))
        self.surface = layer
        try:
            yield self
        finally:
            self.surface = target
        target.blit(layer, (0, 0), special_flags=pygame.BLEND_RGB_ADD)

    def add_pixels(self, rgb):
        """Add an (H, W, 3) float/uint8 image onto the surface.

        Images smaller than the surface are smooth-scaled up first, which
        lets callers render glows at reduced resolution.
        """
        img = np.clip(rgb, 0, 255).astype(np.uint8)
        glow = pygame.surfarray.make_surface(np.ascontiguousarray(img.swapaxes(0, 1)))
        if glow.get_size() != self.size:
            glow = pygame.transform.smoothscale(glow, self.size)
        self.surface.blit(glow, (0, 0), special_flags=pygame.BLEND_RGB_ADD)

    def vignette(self, color, strength=0.4):
        """Radial overlay: transparent centre, `strength` alpha at the corners."""
        w, h = self.size
        key = (w, h, tuple(color), strength)
        overlay = self._vignette_cache.get(key)
        if overlay is None:
            self._vignette_cache.clear()
            overlay = pygame.Surface((w, h), pygame.SRCALPHA)
            overlay.fill((*color, 0))
            cx, cy = w / 2.0, h / 2.0
            X, Y = np.ogrid[:w, :h]  # surfarray is x-major
            dist = np.sqrt((X - cx) ** 2 + (Y - cy) ** 2) / max(np.hypot(cx, cy), 1.0)
            alpha = pygame.surfarray.pixels_alpha(overlay)
            alpha[:] = (np.clip(dist, 0.0, 1.0) * strength * 255).astype(np.uint8)
            del alpha  # release the surface lock
            self._vignette_cache[key] = overlay
        self.surface.blit(overlay, (0, 0))

    def snapshot(self):
        """Current pixels as an (H, W, 3) uint8 array."""
        return pygame.surfarray.array3d(self.surface).swapaxes(0, 1).copy()
