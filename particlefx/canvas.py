"""
Drawing surfaces for the particle engine.

A Canvas is addressed by an identifier through a small registry, knows its own
size and the size of the viewport it should fill, and exposes the handful of
primitives the particle variants draw with. PygameCanvas renders onto a pygame
Surface; tests plug in a recording subclass.
"""
import logging
import math

import pygame

import constants

logger = logging.getLogger(__name__)

_REGISTRY = {}


def hsl(hue, saturation, lightness):
    color = pygame.Color(0, 0, 0)
    color.hsla = (hue % 360, saturation, lightness, 100)
    return color


def register_canvas(canvas_id, canvas):
    _REGISTRY[canvas_id] = canvas
    return canvas


def unregister_canvas(canvas_id):
    return _REGISTRY.pop(canvas_id, None)


def get_canvas(canvas_id, registry=None):
    registry = _REGISTRY if registry is None else registry
    return registry.get(canvas_id)


class Canvas:
    def __init__(self, width=0, height=0):
        self.width = int(width)
        self.height = int(height)
        self._resize_listeners = []

    def viewport_size(self):
        return self.width, self.height

    def set_size(self, width, height):
        self.width = max(0, int(width))
        self.height = max(0, int(height))

    def on_resize(self, callback):
        """Subscribe to viewport resizes. Returns a callable that unsubscribes."""
        self._resize_listeners.append(callback)

        def unsubscribe():
            if callback in self._resize_listeners:
                self._resize_listeners.remove(callback)
        return unsubscribe

    def notify_resize(self):
        for callback in list(self._resize_listeners):
            callback()

    # --- primitives ---
    def clear(self):
        raise NotImplementedError

    def circle(self, center, radius, color, alpha=1.0, glow=0):
        raise NotImplementedError

    def radial_glow(self, center, radius, color, alpha=1.0):
        raise NotImplementedError

    def rotated_rect(self, center, size, angle, color, alpha=1.0, glow=0):
        raise NotImplementedError

    def text(self, glyph, pos, size, color, alpha=1.0, glow=0):
        raise NotImplementedError

    def flash(self, alpha, color=constants.WHITE):
        raise NotImplementedError


def _alpha_byte(alpha):
    return max(0, min(255, int(round(alpha * 255))))


class PygameCanvas(Canvas):
    """Canvas backed by a pygame Surface (the display surface when none is given)."""

    def __init__(self, surface=None, background=constants.BACKGROUND):
        self._surface = surface
        self.background = background
        self._fonts = {}
        width, height = self.surface.get_size()
        super().__init__(width, height)

    @property
    def surface(self):
        if self._surface is not None:
            return self._surface
        return pygame.display.get_surface()

    def viewport_size(self):
        if self._surface is None and pygame.display.get_surface() is not None:
            return pygame.display.get_window_size()
        return self.surface.get_size()

    def _layer(self, half_extent):
        side = max(1, int(math.ceil(half_extent * 2)) + 2)
        return pygame.Surface((side, side), pygame.SRCALPHA), side / 2

    def _blit_centered(self, layer, center):
        rect = layer.get_rect(center=(int(center.x), int(center.y)))
        self.surface.blit(layer, rect)

    def clear(self):
        self.surface.fill(self.background)

    def circle(self, center, radius, color, alpha=1.0, glow=0):
        if radius <= 0 or alpha <= 0:
            return
        color = pygame.Color(color)
        layer, mid = self._layer(radius + glow)
        if glow:
            # draw overwrites layer pixels, so halos go outermost first and get stronger inwards
            steps = 4
            for i in range(steps, 0, -1):
                halo = radius + glow * i / steps
                strength = 0.4 * (steps - i + 1) / steps
                pygame.draw.circle(layer, (color.r, color.g, color.b, _alpha_byte(alpha * strength)), (mid, mid), halo)
        pygame.draw.circle(layer, (color.r, color.g, color.b, _alpha_byte(alpha)), (mid, mid), radius)
        self._blit_centered(layer, center)

    def radial_glow(self, center, radius, color, alpha=1.0):
        if radius <= 0 or alpha <= 0:
            return
        color = pygame.Color(color)
        layer, mid = self._layer(radius)
        # each ring replaces the one under it, so the innermost ring carries the full alpha
        steps = max(2, int(radius))
        for i in range(steps, 0, -1):
            r = radius * i / steps
            falloff = 1.0 - (i - 1) / steps
            pygame.draw.circle(layer, (color.r, color.g, color.b, _alpha_byte(alpha * falloff)), (mid, mid), r)
        self._blit_centered(layer, center)

    def rotated_rect(self, center, size, angle, color, alpha=1.0, glow=0):
        w, h = size
        if w <= 0 or h <= 0 or alpha <= 0:
            return
        color = pygame.Color(color)
        pad = int(glow)
        rect_layer = pygame.Surface((int(math.ceil(w)) + pad * 2, int(math.ceil(h)) + pad * 2), pygame.SRCALPHA)
        if glow:
            rect_layer.fill((color.r, color.g, color.b, _alpha_byte(alpha * 0.2)))
        pygame.draw.rect(rect_layer, (color.r, color.g, color.b, _alpha_byte(alpha)),
                         pygame.Rect(pad, pad, int(math.ceil(w)), int(math.ceil(h))))
        # canvas rotation is clockwise in screen space, pygame's is counter-clockwise
        rotated = pygame.transform.rotate(rect_layer, -angle)
        self._blit_centered(rotated, center)

    def _font(self, size):
        size = max(1, int(size))
        font = self._fonts.get(size)
        if font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            font = pygame.font.SysFont("monospace", size)
            logger.debug("Loaded monospace font at %dpx", size)
            self._fonts[size] = font
        return font

    def text(self, glyph, pos, size, color, alpha=1.0, glow=0):
        if alpha <= 0:
            return
        font = self._font(size)
        rendered = font.render(glyph, True, pygame.Color(color))
        # pos is the baseline origin, as with canvas fillText
        x, y = int(pos.x), int(pos.y) - font.get_ascent()
        if glow:
            halo = rendered.copy()
            halo.set_alpha(_alpha_byte(alpha * 0.3))
            spread = max(1, int(glow) // 4)
            for dx, dy in ((-spread, 0), (spread, 0), (0, -spread), (0, spread)):
                self.surface.blit(halo, (x + dx, y + dy))
        rendered.set_alpha(_alpha_byte(alpha))
        self.surface.blit(rendered, (x, y))

    def flash(self, alpha, color=constants.WHITE):
        if alpha <= 0:
            return
        overlay = pygame.Surface(self.surface.get_size(), pygame.SRCALPHA)
        overlay.fill((*color[:3], _alpha_byte(alpha)))
        self.surface.blit(overlay, (0, 0))
