"""
Side Panel Widgets for the Ocean Viewer

Small pygame widgets for poking at the backdrop's inputs by hand: a
readiness slider, a speed slider, theme buttons and a ping button.
"""

import pygame


THEME = {
    "panel": (8, 20, 34),
    "divider": (22, 48, 70),
    "track": (28, 58, 84),
    "track_fill": (181, 148, 78),
    "handle": (200, 214, 226),
    "handle_active": (255, 255, 255),
    "text": (150, 178, 196),
    "text_bright": (226, 236, 244),
    "text_dim": (84, 112, 132),
    "button": (16, 38, 58),
    "button_hover": (26, 56, 82),
    "button_active": (120, 98, 52),
}


class Slider:
    """Horizontal slider with label and value readout."""

    height = 36

    def __init__(self, x, y, width, label, min_val, max_val, value,
                 fmt=".0f", step=None, on_change=None):
        self.x = x
        self.y = y
        self.width = width
        self.label = label
        self.min_val = min_val
        self.max_val = max_val
        self.value = value
        self.fmt = fmt
        self.step = step
        self.on_change = on_change
        self.dragging = False

        self.track_x = x + 8
        self.track_y = y + 22
        self.track_w = width - 16

    def _val_to_x(self, val):
        frac = (val - self.min_val) / (self.max_val - self.min_val)
        return self.track_x + frac * self.track_w

    def _x_to_val(self, px):
        frac = min(1.0, max(0.0, (px - self.track_x) / self.track_w))
        val = self.min_val + frac * (self.max_val - self.min_val)
        if self.step:
            val = round(val / self.step) * self.step
        return val

    def _drag_to(self, px):
        self.value = self._x_to_val(px)
        if self.on_change:
            self.on_change(self.value)

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            mx, my = event.pos
            on_track = (self.track_x - 4 <= mx <= self.track_x + self.track_w + 4
                        and abs(my - self.track_y) <= 12)
            if on_track:
                self.dragging = True
                self._drag_to(mx)
                return True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.dragging = False
        elif event.type == pygame.MOUSEMOTION and self.dragging:
            self._drag_to(event.pos[0])
            return True
        return False

    def draw(self, surface, font):
        surface.blit(font.render(self.label, True, THEME["text"]), (self.x + 8, self.y + 2))
        readout = font.render(f"{self.value:{self.fmt}}", True, THEME["text_bright"])
        surface.blit(readout, (self.x + self.width - readout.get_width() - 8, self.y + 2))

        track = pygame.Rect(self.track_x, self.track_y - 2, self.track_w, 4)
        pygame.draw.rect(surface, THEME["track"], track, border_radius=2)
        hx = self._val_to_x(self.value)
        filled = pygame.Rect(self.track_x, self.track_y - 2, hx - self.track_x, 4)
        pygame.draw.rect(surface, THEME["track_fill"], filled, border_radius=2)

        color = THEME["handle_active"] if self.dragging else THEME["handle"]
        pygame.draw.circle(surface, color, (int(hx), self.track_y), 7)


class Button:
    """Clickable button."""

    def __init__(self, x, y, width, height, label, on_click=None, active=False):
        self.rect = pygame.Rect(x, y, width, height)
        self.label = label
        self.on_click = on_click
        self.active = active
        self.hovered = False

    def handle_event(self, event):
        if event.type == pygame.MOUSEMOTION:
            self.hovered = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                if self.on_click:
                    self.on_click()
                return True
        return False

    def draw(self, surface, font):
        if self.active:
            color = THEME["button_active"]
        elif self.hovered:
            color = THEME["button_hover"]
        else:
            color = THEME["button"]
        pygame.draw.rect(surface, color, self.rect, border_radius=4)
        text = font.render(self.label, True, THEME["text_bright"])
        surface.blit(text, text.get_rect(center=self.rect.center))


class ButtonRow:
    """Row of mutually exclusive buttons (radio group)."""

    def __init__(self, x, y, width, labels, selected=0, on_select=None, btn_height=26):
        self.labels = labels
        self.selected = selected
        self.on_select = on_select
        gap = 4
        bw = (width - gap * (len(labels) - 1)) // max(1, len(labels))
        self.buttons = [Button(x + i * (bw + gap), y, bw, btn_height, label)
                        for i, label in enumerate(labels)]
        self.total_height = btn_height
        self.select(selected)

    def select(self, index):
        self.selected = index
        for i, btn in enumerate(self.buttons):
            btn.active = i == index

    def handle_event(self, event):
        for i, btn in enumerate(self.buttons):
            if btn.handle_event(event):
                self.select(i)
                if self.on_select:
                    self.on_select(i, self.labels[i])
                return True
        return False

    def draw(self, surface, font):
        for btn in self.buttons:
            btn.draw(surface, font)


class ControlPanel:
    """Vertical stack of widgets drawn onto its own surface."""

    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.widgets = []
        self.titles = []
        self._cursor_y = 8

    def add_section(self, title):
        self.titles.append((title, self._cursor_y))
        self._cursor_y += 24

    def add_slider(self, label, min_val, max_val, value, fmt=".0f", step=None,
                   on_change=None):
        slider = Slider(0, self._cursor_y, self.width, label, min_val, max_val,
                        value, fmt, step, on_change)
        self.widgets.append(slider)
        self._cursor_y += slider.height + 6
        return slider

    def add_button_row(self, labels, selected=0, on_select=None):
        row = ButtonRow(8, self._cursor_y, self.width - 16, labels, selected, on_select)
        self.widgets.append(row)
        self._cursor_y += row.total_height + 8
        return row

    def add_button(self, label, on_click=None):
        btn = Button(8, self._cursor_y, self.width - 16, 28, label, on_click)
        self.widgets.append(btn)
        self._cursor_y += 36
        return btn

    def contains(self, pos):
        return self.x <= pos[0] <= self.x + self.width and self.y <= pos[1] <= self.y + self.height

    def handle_event(self, event):
        """Route a mouse event to the widgets in panel-local coordinates."""
        if not hasattr(event, "pos"):
            return False
        if not self.contains(event.pos):
            if event.type == pygame.MOUSEBUTTONUP:
                for widget in self.widgets:
                    if isinstance(widget, Slider):
                        widget.dragging = False
            return False
        local = pygame.event.Event(event.type, {
            **{k: v for k, v in event.__dict__.items() if k != "pos"},
            "pos": (event.pos[0] - self.x, event.pos[1] - self.y),
        })
        return any(widget.handle_event(local) for widget in self.widgets)

    def draw(self, target, font):
        surface = pygame.Surface((self.width, self.height))
        surface.fill(THEME["panel"])
        pygame.draw.line(surface, THEME["divider"], (0, 0), (0, self.height))
        for title, y in self.titles:
            pygame.draw.line(surface, THEME["divider"], (8, y + 8), (self.width - 8, y + 8))
            surface.blit(font.render(title, True, THEME["text_dim"]), (8, y + 12))
        for widget in self.widgets:
            widget.draw(surface, font)
        target.blit(surface, (self.x, self.y))
