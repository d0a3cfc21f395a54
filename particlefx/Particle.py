"""
Particle variants.

Each behaviour is its own class carrying only the fields it needs. A variant
knows how to spawn itself inside a surface of a given size, how to advance one
frame, and how to draw itself onto a Canvas. ``update`` returns False when the
particle has expired and its pool slot should be recycled.
"""
import math

import constants
from .Vec2 import Vec2
from .canvas import hsl

TAU = math.pi * 2


class Particle:
    TAG = None
    ALIAS = None
    POOL_SIZE = constants.DEFAULT_POOL_SIZE
    # Recycled slots are refilled from above the top edge
    RESPAWN_FROM_TOP = False

    __slots__ = ("pos", "size", "opacity")

    def __init__(self, pos, size, opacity):
        self.pos = pos
        self.size = size
        self.opacity = opacity

    @classmethod
    def spawn(cls, width, height, rng, from_top=False):
        raise NotImplementedError

    def update(self, width, height, rng):
        return True

    def draw(self, canvas):
        pass

    def to_dict(self):
        data = {'variant': self.TAG, 'pos': (self.pos.x, self.pos.y)}
        for cls in type(self).__mro__:
            for name in getattr(cls, '__slots__', ()):
                if name != 'pos':
                    value = getattr(self, name)
                    data[name] = (value.x, value.y) if isinstance(value, Vec2) else value
        return data

    def __repr__(self):
        return f"{type(self).__name__}(pos=({self.pos.x:.2f}, {self.pos.y:.2f}), size={self.size:.2f}, opacity={self.opacity:.2f})"


class GoldParticle(Particle):
    TAG = "fall-gold"
    ALIAS = "gold"

    __slots__ = ("vel", "hue")

    def __init__(self, pos, vel, size, opacity, hue):
        super().__init__(pos, size, opacity)
        self.vel = vel
        self.hue = hue

    @classmethod
    def spawn(cls, width, height, rng, from_top=False):
        r = rng.random
        return cls(
            pos=Vec2(r() * width, r() * height),
            vel=Vec2((r() - 0.5) * 0.5, r() * 0.8 + 0.2),
            size=r() * 3 + 1,
            opacity=r() * 0.6 + 0.2,
            hue=45 + r() * 15,
        )

    def update(self, width, height, rng):
        self.pos += self.vel
        if self.pos.y > height:
            self.pos.y = constants.GOLD_WRAP_TOP
            self.pos.x = rng.random() * width
        if self.pos.x < 0:
            self.pos.x = width
        if self.pos.x > width:
            self.pos.x = 0
        return True

    def draw(self, canvas):
        canvas.circle(self.pos, self.size, hsl(self.hue, 80, 60), self.opacity, glow=10)


class FireParticle(Particle):
    TAG = "rising-fire"
    ALIAS = "fire"
    MAX_LIFE = 150
    SHRINK = 0.995

    __slots__ = ("vel", "hue", "life", "max_life")

    def __init__(self, pos, vel, size, hue, life, max_life=MAX_LIFE):
        super().__init__(pos, size, (life / max_life) * 0.8)
        self.vel = vel
        self.hue = hue
        self.life = life
        self.max_life = max_life

    @classmethod
    def spawn(cls, width, height, rng, from_top=False):
        r = rng.random
        return cls(
            pos=Vec2(r() * width, height + r() * 20),
            vel=Vec2((r() - 0.5) * 1.5, -(r() * 2 + 1)),
            size=r() * 4 + 1,
            hue=r() * 40 + 10,
            life=r() * 100 + 50,
        )

    def update(self, width, height, rng):
        self.pos += self.vel
        self.life -= 1
        self.opacity = (self.life / self.max_life) * 0.8
        self.size *= self.SHRINK
        return self.life > 0 and self.pos.y >= constants.FIRE_ESCAPE_TOP

    def draw(self, canvas):
        canvas.radial_glow(self.pos, self.size * 2, hsl(self.hue, 100, 70), self.opacity)


class DustParticle(Particle):
    TAG = "drifting-dust"
    ALIAS = "dust"

    __slots__ = ("vel", "wobble", "wobble_speed")

    def __init__(self, pos, vel, size, opacity, wobble, wobble_speed):
        super().__init__(pos, size, opacity)
        self.vel = vel
        self.wobble = wobble
        self.wobble_speed = wobble_speed

    @classmethod
    def spawn(cls, width, height, rng, from_top=False):
        r = rng.random
        return cls(
            pos=Vec2(r() * width, r() * height),
            vel=Vec2((r() - 0.5) * 0.8, (r() - 0.5) * 0.3),
            size=r() * 2 + 0.5,
            opacity=r() * 0.3 + 0.1,
            wobble=r() * TAU,
            wobble_speed=r() * 0.02 + 0.01,
        )

    def update(self, width, height, rng):
        self.wobble += self.wobble_speed
        self.pos.x += self.vel.x + math.sin(self.wobble) * 0.3
        self.pos.y += self.vel.y
        if self.pos.x < 0:
            self.pos.x = width
        if self.pos.x > width:
            self.pos.x = 0
        if self.pos.y < 0:
            self.pos.y = height
        if self.pos.y > height:
            self.pos.y = 0
        return True

    def draw(self, canvas):
        canvas.circle(self.pos, self.size, constants.DUST_COLOR, self.opacity)


class StarParticle(Particle):
    TAG = "twinkling-star"
    ALIAS = "stars"

    __slots__ = ("twinkle_phase", "twinkle_speed", "color")

    def __init__(self, pos, size, opacity, twinkle_phase, twinkle_speed, color):
        super().__init__(pos, size, opacity)
        self.twinkle_phase = twinkle_phase
        self.twinkle_speed = twinkle_speed
        self.color = color

    @classmethod
    def spawn(cls, width, height, rng, from_top=False):
        r = rng.random
        pos = Vec2(r() * width, r() * height)
        size = r() * 2.5 + 0.5
        twinkle_speed = r() * 0.03 + 0.01
        twinkle_phase = r() * TAU
        opacity = r() * 0.7 + 0.3
        white, blue, yellow = constants.STAR_COLORS
        if r() > 0.3:
            color = white
        else:
            color = blue if r() > 0.5 else yellow
        return cls(pos, size, opacity, twinkle_phase, twinkle_speed, color)

    @property
    def twinkle(self):
        return math.sin(self.twinkle_phase) * 0.5 + 0.5

    def update(self, width, height, rng):
        self.twinkle_phase += self.twinkle_speed
        return True

    def draw(self, canvas):
        t = self.twinkle
        canvas.circle(self.pos, self.size * t, self.color, self.opacity * t, glow=8)


def random_glyph(rng):
    return constants.HEBREW_GLYPHS[int(rng.integers(len(constants.HEBREW_GLYPHS)))]


class GlyphParticle(Particle):
    TAG = "falling-glyph"
    ALIAS = "matrix"
    POOL_SIZE = constants.GLYPH_POOL_SIZE
    RESPAWN_FROM_TOP = True

    __slots__ = ("speed", "glyph", "change_rate")

    def __init__(self, pos, speed, glyph, size, opacity, change_rate):
        super().__init__(pos, size, opacity)
        self.speed = speed
        self.glyph = glyph
        self.change_rate = change_rate

    @classmethod
    def spawn(cls, width, height, rng, from_top=False):
        r = rng.random
        x = r() * width
        y = -constants.GLYPH_MARGIN if from_top else r() * height
        return cls(
            pos=Vec2(x, y),
            speed=r() * 3 + 1,
            glyph=random_glyph(rng),
            size=r() * 14 + 10,
            opacity=r() * 0.5 + 0.1,
            change_rate=r() * 0.02,
        )

    def update(self, width, height, rng):
        self.pos.y += self.speed
        if rng.random() < self.change_rate:
            self.glyph = random_glyph(rng)
        return self.pos.y <= height + constants.GLYPH_MARGIN

    def draw(self, canvas):
        canvas.text(self.glyph, self.pos, self.size, constants.GLYPH_COLOR, self.opacity, glow=8)


class GoldFlakeParticle(Particle):
    TAG = "falling-gold-flake"
    ALIAS = "goldfall"
    RESPAWN_FROM_TOP = True

    __slots__ = ("vel", "rotation", "rot_speed")

    def __init__(self, pos, vel, size, opacity, rotation, rot_speed):
        super().__init__(pos, size, opacity)
        self.vel = vel
        self.rotation = rotation
        self.rot_speed = rot_speed

    @classmethod
    def spawn(cls, width, height, rng, from_top=False):
        r = rng.random
        x = r() * width
        y = -constants.FALL_MARGIN if from_top else r() * height
        size = r() * 4 + 2
        vy = r() * 1.5 + 0.5
        vx = (r() - 0.5) * 0.3
        return cls(
            pos=Vec2(x, y),
            vel=Vec2(vx, vy),
            size=size,
            opacity=r() * 0.7 + 0.3,
            rotation=r() * 360,
            rot_speed=(r() - 0.5) * 3,
        )

    def update(self, width, height, rng):
        self.pos += self.vel
        self.rotation += self.rot_speed
        return self.pos.y <= height + constants.FALL_MARGIN

    def draw(self, canvas):
        canvas.rotated_rect(self.pos, (self.size, self.size), self.rotation,
                            constants.FLAKE_COLOR, self.opacity, glow=5)


class ConfettiParticle(Particle):
    TAG = "falling-confetti"
    ALIAS = "confetti"
    POOL_SIZE = constants.CONFETTI_POOL_SIZE
    RESPAWN_FROM_TOP = True

    __slots__ = ("vel", "wobble", "wobble_speed", "rotation", "rot_speed", "color")

    def __init__(self, pos, vel, size, opacity, rotation, rot_speed, color, wobble, wobble_speed):
        super().__init__(pos, size, opacity)
        self.vel = vel
        self.rotation = rotation
        self.rot_speed = rot_speed
        self.color = color
        self.wobble = wobble
        self.wobble_speed = wobble_speed

    @classmethod
    def spawn(cls, width, height, rng, from_top=False):
        r = rng.random
        x = r() * width
        y = -constants.FALL_MARGIN if from_top else r() * height
        size = r() * 8 + 4
        vy = r() * 2 + 1
        vx = (r() - 0.5) * 2
        opacity = r() * 0.8 + 0.2
        rotation = r() * 360
        rot_speed = (r() - 0.5) * 8
        color = constants.CONFETTI_COLORS[int(rng.integers(len(constants.CONFETTI_COLORS)))]
        return cls(Vec2(x, y), Vec2(vx, vy), size, opacity, rotation, rot_speed, color,
                   wobble=r() * TAU, wobble_speed=r() * 0.1 + 0.05)

    def update(self, width, height, rng):
        self.wobble += self.wobble_speed
        self.pos.y += self.vel.y
        self.pos.x += self.vel.x + math.sin(self.wobble) * 0.5
        self.rotation += self.rot_speed
        return self.pos.y <= height + constants.FALL_MARGIN

    def draw(self, canvas):
        canvas.rotated_rect(self.pos, (self.size, self.size / 2), self.rotation,
                            self.color, self.opacity)


VARIANTS = {
    cls.TAG: cls
    for cls in (GoldParticle, FireParticle, DustParticle, StarParticle,
                GlyphParticle, GoldFlakeParticle, ConfettiParticle)
}
ALIASES = {cls.ALIAS: cls for cls in VARIANTS.values()}
DEFAULT_VARIANT = GoldParticle.TAG


def variant_class(tag):
    """Resolve a variant tag (or its short alias) to a Particle class; None when unknown."""
    if isinstance(tag, type) and issubclass(tag, Particle) and tag.TAG in VARIANTS:
        return tag
    if not isinstance(tag, str):
        return None
    key = tag.strip().lower()
    return VARIANTS.get(key) or ALIASES.get(key)
