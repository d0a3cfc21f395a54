import asyncio
import logging

import numpy as np

from .Particle import DEFAULT_VARIANT, variant_class
from .canvas import get_canvas
from .frames import display_frames

logger = logging.getLogger(__name__)


class ParticleEngine:
    def __init__(self, canvas_id, variant=DEFAULT_VARIANT, rng=None, frames=None, registry=None, pool_size=None):
        """
        Bind to a canvas and fill a fixed pool with particles of one variant.

        :param canvas_id: identifier the canvas was registered under.
        :param variant: variant tag (or short alias), e.g. 'falling-confetti' / 'confetti'.
        :param rng: numpy Generator used for every random draw. Seeded from OS entropy when omitted.
        :param frames: FrameSignal that paces run(). Defaults to the shared display signal.
        :param registry: mapping of canvas ids to canvases, instead of the module registry.
        :param pool_size: overrides the variant's pool cardinality.

        A missing canvas or an unknown variant leaves a no-op engine: no particles,
        nothing scheduled, nothing raised.
        """
        self.canvas_id = canvas_id
        self.canvas = get_canvas(canvas_id, registry)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.frames = frames if frames is not None else display_frames
        self.particle_class = variant_class(variant)
        self.variant = self.particle_class.TAG if self.particle_class else None
        self.particles = []
        self.width = 0
        self.height = 0
        self.active = False
        self.frames_drawn = 0
        self.pool_size = 0
        self._task = None
        self._unsubscribe = None

        if self.canvas is None:
            logger.debug("No canvas registered as %r; particle engine disabled", canvas_id)
            return
        if self.particle_class is None:
            logger.warning("Unknown particle variant %r; particle engine disabled", variant)
            return

        self.pool_size = int(pool_size) if pool_size is not None else self.particle_class.POOL_SIZE
        self.resize()
        self._unsubscribe = self.canvas.on_resize(self.resize)
        self.init()
        self.active = True
        logger.info("Particle engine %r started on %r with %d particles (%dx%d)",
                    self.variant, canvas_id, len(self.particles), self.width, self.height)

    @property
    def enabled(self):
        return self.particle_class is not None and self.canvas is not None

    def resize(self):
        width, height = self.canvas.viewport_size()
        self.canvas.set_size(width, height)
        self.width, self.height = self.canvas.width, self.canvas.height

    def create_particle(self, from_top=False):
        return self.particle_class.spawn(self.width, self.height, self.rng, from_top=from_top)

    def init(self):
        """Refill every slot of the pool from scratch."""
        if not self.enabled:
            return
        self.particles = [self.create_particle() for _ in range(self.pool_size)]

    def update(self):
        if not self.enabled:
            return
        w, h = self.width, self.height
        from_top = self.particle_class.RESPAWN_FROM_TOP
        for i, p in enumerate(self.particles):
            if not p.update(w, h, self.rng):
                # recycle the slot in place; the pool never grows or shrinks
                self.particles[i] = self.create_particle(from_top=from_top)

    def draw(self):
        if not self.enabled:
            return
        self.canvas.clear()
        for p in self.particles:
            p.draw(self.canvas)
        self.frames_drawn += 1

    def step(self):
        """One frame: update every particle, then draw every particle."""
        if not self.active:
            return False
        self.update()
        self.draw()
        return True

    async def run(self):
        while self.active:
            await self.frames.wait()
            if not self.active:
                break
            self.step()

    def start(self):
        """Schedule run() on the running event loop. Returns the task, or None for a no-op engine."""
        if not self.active:
            return None
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    def stop(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self.active:
            logger.debug("Particle engine %r stopped after %d frames", self.variant, self.frames_drawn)
        self.active = False

    def __repr__(self):
        return f"<ParticleEngine variant={self.variant} particles={len(self.particles)} active={self.active}>"
