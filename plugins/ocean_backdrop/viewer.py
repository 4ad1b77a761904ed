"""
Interactive Pygame Viewer for the Ocean Backdrop

Opens a resizable window, hosts one Scheduler in it and plays the part of
the surrounding page: window resizes, clicks, mouse-wheel scrolling over a
virtual page, theme flips and readiness broadcasts all reach the backdrop
as listener calls.

Controls:
  SPACE       Pause / Resume
  T           Toggle dark / light theme
  P           Ambient ping at the centre
  TAB         Toggle control panel
  H           Toggle HUD overlay
  S           Save screenshot
  Q / ESC     Quit
  Mouse L     Sonar ping (on canvas area)
  Wheel       Scroll the virtual page
"""

import os
import time

import pygame
from PIL import Image

from .canvas import Canvas
from .controls import ControlPanel
from .presets import DEFAULT_PRESET, get_preset
from .scheduler import Scheduler
from .signals import (
    LISTENER_NAMES, POINTER_DOWN, POINTER_MOVE, READINESS_UPDATE, RESIZE, SCROLL,
    THEME_CHANGE,
)


PANEL_WIDTH = 260
PAGE_HEIGHT = 6000      # virtual page the wheel scrolls through
SCROLL_STEP = 60

# Application-level broadcast carrying {"score": n}, like the site's
# readiness event. Anything may post it; the host forwards it as-is.
READINESS_EVENT = pygame.event.custom_type()


def post_readiness(score):
    pygame.event.post(pygame.event.Event(READINESS_EVENT, score=score))


class PygameHost:
    """Host interface backed by a pygame window.

    The backdrop draws into an off-screen canvas the size of the viewport;
    the viewer blits it into the window each frame next to the panel.
    """

    def __init__(self, width=1280, height=720, dark=True):
        self.width = width
        self.height = height
        self.dark = dark
        self.panel_width = 0
        self.scroll = 0.0
        self.window = None
        self._canvas = None
        self.listeners = {name: [] for name in LISTENER_NAMES}
        self._pending = None
        self._next_handle = 0

    def open(self, panel_width=0):
        pygame.init()
        self.panel_width = panel_width
        self.window = pygame.display.set_mode((self.width + panel_width, self.height),
                                              pygame.RESIZABLE)
        pygame.display.set_caption("Ocean Backdrop")
        self._canvas = Canvas.offscreen(self.width, self.height)

    def set_panel_width(self, panel_width):
        self.panel_width = panel_width
        self.window = pygame.display.set_mode((self.width + panel_width, self.height),
                                              pygame.RESIZABLE)

    # ── Host interface ───────────────────────────────────────────────────

    def viewport(self):
        return self.width, self.height

    def canvas(self):
        return self._canvas

    def resize_canvas(self, width, height):
        self.width, self.height = width, height
        if self._canvas is not None and self._canvas.size != (width, height):
            self._canvas.attach(pygame.Surface((width, height)))

    def is_dark(self):
        return self.dark

    def add_listener(self, name, fn):
        self.listeners.setdefault(name, []).append(fn)

    def remove_listener(self, name, fn):
        self.listeners[name].remove(fn)

    def request_frame(self, fn):
        self._next_handle += 1
        self._pending = (self._next_handle, fn)
        return self._next_handle

    def cancel_frame(self, handle):
        if self._pending is not None and self._pending[0] == handle:
            self._pending = None

    # ── Event plumbing ───────────────────────────────────────────────────

    def dispatch(self, name, *args):
        for fn in list(self.listeners.get(name, ())):
            fn(*args)

    def run_frame(self):
        """Fire the pending frame callback, if any (one per refresh)."""
        if self._pending is None:
            return
        _, fn = self._pending
        self._pending = None
        fn()

    def toggle_theme(self):
        self.dark = not self.dark
        self.dispatch(THEME_CHANGE, self.dark)

    def handle_event(self, event):
        """Translate a pygame event into backdrop listener calls."""
        if event.type == pygame.VIDEORESIZE:
            self.window = pygame.display.get_surface()
            self.dispatch(RESIZE, event.w - self.panel_width, event.h)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if event.pos[0] < self.width:
                self.dispatch(POINTER_DOWN, *event.pos)
        elif event.type == pygame.MOUSEMOTION:
            self.dispatch(POINTER_MOVE, *event.pos)
        elif event.type == pygame.MOUSEWHEEL:
            limit = max(0, PAGE_HEIGHT - self.height)
            self.scroll = min(limit, max(0.0, self.scroll - event.y * SCROLL_STEP))
            self.dispatch(SCROLL, self.scroll)
        elif event.type == READINESS_EVENT:
            self.dispatch(READINESS_UPDATE, dict(event.dict))


class Viewer:
    def __init__(self, width=1280, height=720, preset=DEFAULT_PRESET, readiness=0.0,
                 dark=True, seed=None, speed=1.0):
        self.preset_key = preset
        self.host = PygameHost(width, height, dark=dark)
        self.scheduler = Scheduler(self.host, preset, seed=seed, readiness=readiness,
                                   speed=speed)
        self.running = True
        self.show_hud = True
        self.panel_visible = True
        self.panel = None
        self.theme_row = None
        self.fps_history = []

    # ── Panel ────────────────────────────────────────────────────────────

    def _build_panel(self):
        self.panel = ControlPanel(self.host.width, 0, PANEL_WIDTH, self.host.height)
        self.panel.add_section("SIGNALS")
        self.panel.add_slider("Readiness", 0, 100, self.scheduler.signals.readiness,
                              fmt=".0f", step=1, on_change=post_readiness)
        self.panel.add_slider("Speed", 0.0, 3.0, self.scheduler.speed, fmt=".2f",
                              on_change=self._on_speed_change)
        self.panel.add_section("THEME")
        self.theme_row = self.panel.add_button_row(
            ["Dark", "Light"], selected=0 if self.host.dark else 1,
            on_select=self._on_theme_select)
        self.panel.add_section("SONAR")
        self.panel.add_button("Ping", on_click=self._ping_center)

    def _on_speed_change(self, val):
        self.scheduler.speed = val

    def _on_theme_select(self, idx, name):
        if (idx == 0) != self.host.dark:
            self.host.toggle_theme()

    def _ping_center(self):
        sim = self.scheduler.simulator
        if sim is None:
            return
        sim.ping(self.host.width / 2, self.host.height / 2,
                 self.scheduler.signals.scroll, ambient=True)

    def _toggle_panel(self):
        self.panel_visible = not self.panel_visible
        self.host.set_panel_width(PANEL_WIDTH if self.panel_visible else 0)

    # ── HUD / screenshots ────────────────────────────────────────────────

    def _draw_hud(self, screen, fps):
        if not self.show_hud:
            return
        sim = self.scheduler.simulator
        signals = self.scheduler.signals
        preset = get_preset(sim.preset_key)
        line = (f"{preset['name']}  |  Frame: {sim.frame:,}  |  "
                f"Readiness: {signals.readiness:.0f}  |  Scroll: {signals.scroll:.0f}  |  "
                f"Pulses: {len(sim.sonar)}  |  {sim.width}x{sim.height}  |  FPS: {fps:.0f}")
        if self.scheduler.paused:
            line = "[PAUSED]  " + line

        bar = pygame.Surface((self.host.width, 24), pygame.SRCALPHA)
        bar.fill((0, 0, 0, 140))
        screen.blit(bar, (0, 0))
        screen.blit(self.hud_font.render(line, True, (210, 220, 230)), (10, 6))

    def _save_screenshot(self):
        screenshots_dir = os.path.join(
            os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
            "screenshots"
        )
        os.makedirs(screenshots_dir, exist_ok=True)
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        path = os.path.join(screenshots_dir, f"ocean_{self.preset_key}_{timestamp}.png")
        img = Image.fromarray(self.host.canvas().snapshot())
        img.save(path)
        img.save(os.path.join(screenshots_dir, "latest.png"))
        print(f"Screenshot saved: {path}")

    # ── Main loop ────────────────────────────────────────────────────────

    def run(self):
        """Main viewer loop."""
        self.host.open(PANEL_WIDTH if self.panel_visible else 0)
        self.hud_font = pygame.font.SysFont("menlo", 13)
        self.panel_font = pygame.font.SysFont("menlo", 12)
        self._build_panel()

        clock = pygame.time.Clock()
        try:
            if not self.scheduler.start():
                return
            while self.running:
                frame_start = time.time()
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                        continue
                    if event.type == pygame.KEYDOWN:
                        self._handle_keydown(event)
                        continue
                    if self.panel_visible and self.panel.handle_event(event):
                        continue
                    self.host.handle_event(event)

                self.host.run_frame()

                screen = self.host.window
                screen.blit(self.host.canvas().surface, (0, 0))

                self.fps_history.append(time.time() - frame_start)
                if len(self.fps_history) > 30:
                    self.fps_history.pop(0)
                avg = sum(self.fps_history) / len(self.fps_history)
                self._draw_hud(screen, 1.0 / max(avg, 0.001))

                if self.panel_visible:
                    self.panel.x = self.host.width
                    self.panel.height = self.host.height
                    self.panel.draw(screen, self.panel_font)

                pygame.display.flip()
                clock.tick(60)
        finally:
            self.scheduler.stop()
            pygame.quit()

    def _handle_keydown(self, event):
        key = event.key
        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False
        elif key == pygame.K_SPACE:
            self.scheduler.paused = not self.scheduler.paused
        elif key == pygame.K_t:
            self.host.toggle_theme()
            self.theme_row.select(0 if self.host.dark else 1)
        elif key == pygame.K_p:
            self._ping_center()
        elif key == pygame.K_h:
            self.show_hud = not self.show_hud
        elif key == pygame.K_TAB:
            self._toggle_panel()
        elif key == pygame.K_s:
            self._save_screenshot()
