import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import numpy as np
import pytest

from particlefx.canvas import Canvas

CANVAS_ID = "test-canvas"


class RecordingCanvas(Canvas):
    """Canvas that remembers every primitive call instead of drawing."""

    def __init__(self, width=800, height=600):
        super().__init__(width, height)
        self.viewport = (width, height)
        self.calls = []

    def viewport_size(self):
        return self.viewport

    def clear(self):
        self.calls.append(("clear",))

    def circle(self, center, radius, color, alpha=1.0, glow=0):
        self.calls.append(("circle", (center.x, center.y), radius, color, alpha, glow))

    def radial_glow(self, center, radius, color, alpha=1.0):
        self.calls.append(("radial_glow", (center.x, center.y), radius, color, alpha))

    def rotated_rect(self, center, size, angle, color, alpha=1.0, glow=0):
        self.calls.append(("rotated_rect", (center.x, center.y), size, angle, color, alpha, glow))

    def text(self, glyph, pos, size, color, alpha=1.0, glow=0):
        self.calls.append(("text", glyph, (pos.x, pos.y), size, color, alpha, glow))

    def flash(self, alpha, color=(255, 255, 255)):
        self.calls.append(("flash", alpha))

    def names(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def canvas():
    return RecordingCanvas()


@pytest.fixture
def registry(canvas):
    return {CANVAS_ID: canvas}


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def make_engine(registry, rng):
    from particlefx.engine import ParticleEngine
    from particlefx.frames import FrameSignal

    def _make(variant="fall-gold", **kwargs):
        kwargs.setdefault("rng", rng)
        kwargs.setdefault("registry", registry)
        kwargs.setdefault("frames", FrameSignal())
        return ParticleEngine(CANVAS_ID, variant, **kwargs)
    return _make
