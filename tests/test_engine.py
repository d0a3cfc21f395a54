import asyncio
import logging

import numpy as np
import pytest

import constants
from particlefx.Particle import ConfettiParticle, FireParticle, GlyphParticle, VARIANTS
from particlefx.engine import ParticleEngine
from particlefx.frames import FrameSignal

from conftest import CANVAS_ID


async def pump(signal, frames):
    """Fire `frames` frame signals, yielding to the event loop around each one."""
    for _ in range(frames):
        await asyncio.sleep(0)
        signal.fire()
        await asyncio.sleep(0)


def test_construction_sizes_canvas_to_viewport_and_fills_pool(make_engine, canvas):
    canvas.viewport = (1024, 768)
    engine = make_engine("fall-gold")
    assert (engine.width, engine.height) == (1024, 768)
    assert (canvas.width, canvas.height) == (1024, 768)
    assert len(engine.particles) == constants.DEFAULT_POOL_SIZE
    assert engine.active


@pytest.mark.parametrize("variant, expected", [
    ("fall-gold", 80), ("rising-fire", 80), ("drifting-dust", 80), ("twinkling-star", 80),
    ("falling-glyph", 60), ("falling-gold-flake", 80), ("falling-confetti", 150),
])
def test_pool_size_per_variant(make_engine, variant, expected):
    engine = make_engine(variant)
    assert len(engine.particles) == expected
    assert all(isinstance(p, VARIANTS[variant]) for p in engine.particles)


def test_default_variant_is_fall_gold(registry, rng):
    engine = ParticleEngine(CANVAS_ID, rng=rng, registry=registry, frames=FrameSignal())
    assert engine.variant == "fall-gold"


def test_aliases_resolve_to_variants(make_engine):
    assert make_engine("matrix").variant == "falling-glyph"
    assert make_engine("goldfall").variant == "falling-gold-flake"


def test_seeded_confetti_has_150_palette_colored_particles(registry):
    engine = ParticleEngine(CANVAS_ID, "falling-confetti", rng=np.random.default_rng(7),
                            registry=registry, frames=FrameSignal())
    assert len(engine.particles) == 150
    assert all(isinstance(p, ConfettiParticle) for p in engine.particles)
    assert {p.color for p in engine.particles} <= set(constants.CONFETTI_COLORS)


def test_same_seed_gives_same_pool(registry):
    a = ParticleEngine(CANVAS_ID, "falling-confetti", rng=np.random.default_rng(3), registry=registry)
    b = ParticleEngine(CANVAS_ID, "falling-confetti", rng=np.random.default_rng(3), registry=registry)
    assert [p.to_dict() for p in a.particles] == [p.to_dict() for p in b.particles]


def test_missing_canvas_gives_noop_engine(rng, caplog):
    with caplog.at_level(logging.DEBUG, logger="particlefx.engine"):
        engine = ParticleEngine("nowhere", "falling-confetti", rng=rng, registry={})
    assert engine.particles == []
    assert not engine.active
    assert engine.step() is False
    engine.update()
    engine.draw()
    engine.stop()
    assert "nowhere" in caplog.text


def test_missing_canvas_noop_engine_never_schedules(rng):
    async def scenario():
        engine = ParticleEngine("nowhere", rng=rng, registry={}, frames=FrameSignal())
        return engine.start()
    assert asyncio.run(scenario()) is None


def test_unknown_variant_gives_noop_engine(make_engine, canvas, caplog):
    with caplog.at_level(logging.WARNING, logger="particlefx.engine"):
        engine = make_engine("sparkles")
    assert engine.particles == []
    assert not engine.active
    assert engine.step() is False
    assert canvas.calls == []
    assert "sparkles" in caplog.text


def test_step_clears_then_draws_every_particle_in_pool_order(make_engine, canvas):
    engine = make_engine("drifting-dust")
    assert engine.step() is True
    assert canvas.calls[0] == ("clear",)
    circles = canvas.calls[1:]
    assert len(circles) == len(engine.particles)
    assert [c[1] for c in circles] == [(p.pos.x, p.pos.y) for p in engine.particles]
    assert all(c[3] == constants.DUST_COLOR for c in circles)
    assert all(c[4] == p.opacity for c, p in zip(circles, engine.particles))


def test_each_frame_starts_with_a_clear(make_engine, canvas):
    engine = make_engine("twinkling-star")
    for _ in range(3):
        engine.step()
    names = canvas.names()
    assert names.count("clear") == 3
    assert names[0] == "clear"
    assert names[len(engine.particles) + 1] == "clear"


@pytest.mark.parametrize("variant, primitive", [
    ("fall-gold", "circle"), ("rising-fire", "radial_glow"), ("twinkling-star", "circle"),
    ("falling-glyph", "text"), ("falling-gold-flake", "rotated_rect"), ("falling-confetti", "rotated_rect"),
])
def test_variant_draw_primitive(make_engine, canvas, variant, primitive):
    engine = make_engine(variant)
    engine.draw()
    assert set(canvas.names()[1:]) == {primitive}


def test_confetti_draws_half_height_rectangles(make_engine, canvas):
    engine = make_engine("falling-confetti")
    engine.draw()
    for call, p in zip(canvas.calls[1:], engine.particles):
        assert call[2] == (p.size, p.size / 2)
        assert call[4] == p.color


@pytest.mark.parametrize("variant", ["rising-fire", "falling-glyph", "falling-gold-flake", "falling-confetti"])
def test_recycling_keeps_pool_size(make_engine, canvas, variant):
    canvas.viewport = (200, 60)
    engine = make_engine(variant)
    size = len(engine.particles)
    first = list(engine.particles)
    for _ in range(400):
        engine.update()
        assert len(engine.particles) == size
    # short surface: every slot has been recycled at least once
    assert all(a is not b for a, b in zip(first, engine.particles))


def test_recycled_fallers_come_back_from_the_top(make_engine, canvas):
    canvas.viewport = (200, 100)
    engine = make_engine("falling-gold-flake")
    first = list(engine.particles)
    for _ in range(5):
        engine.update()
    for old, new in zip(first, engine.particles):
        if new is not old:
            # respawned at -FALL_MARGIN and moved at most a few frames
            assert new.pos.y < 100


def test_fire_pool_keeps_emitting(make_engine, canvas):
    engine = make_engine("rising-fire")
    for _ in range(500):
        engine.update()
    assert len(engine.particles) == 80
    assert all(isinstance(p, FireParticle) and p.life > 0 for p in engine.particles)


def test_stars_never_move_until_reinit(make_engine):
    engine = make_engine("twinkling-star")
    positions = [(p.pos.x, p.pos.y) for p in engine.particles]
    for _ in range(300):
        engine.update()
    assert [(p.pos.x, p.pos.y) for p in engine.particles] == positions
    engine.init()
    assert [(p.pos.x, p.pos.y) for p in engine.particles] != positions


def test_glyphs_with_zero_change_rate_never_change(make_engine, canvas):
    canvas.viewport = (300, 100_000)
    engine = make_engine("falling-glyph")
    for p in engine.particles:
        p.pos.y = 0
        p.change_rate = 0.0
    glyphs = [p.glyph for p in engine.particles]
    for _ in range(500):
        engine.update()
    assert all(isinstance(p, GlyphParticle) for p in engine.particles)
    assert [p.glyph for p in engine.particles] == glyphs


def test_resize_updates_dimensions_without_moving_particles(make_engine, canvas):
    engine = make_engine("drifting-dust")
    positions = [(p.pos.x, p.pos.y) for p in engine.particles]
    canvas.viewport = (100, 50)
    canvas.notify_resize()
    assert (engine.width, engine.height) == (100, 50)
    assert (canvas.width, canvas.height) == (100, 50)
    assert [(p.pos.x, p.pos.y) for p in engine.particles] == positions
    assert len(engine.particles) == 80


def test_zero_sized_viewport_is_harmless(make_engine, canvas):
    canvas.viewport = (0, 0)
    for variant in VARIANTS:
        engine = make_engine(variant)
        for _ in range(5):
            assert engine.step()
        engine.stop()


def test_run_steps_once_per_frame_signal(make_engine, canvas):
    async def scenario():
        frames = FrameSignal()
        engine = make_engine("fall-gold", frames=frames)
        engine.start()
        await pump(frames, 5)
        engine.stop()
        return engine

    engine = asyncio.run(scenario())
    assert engine.frames_drawn == 5
    assert canvas.names().count("clear") == 5


def test_nothing_happens_without_frame_signals(make_engine, canvas):
    async def scenario():
        engine = make_engine("fall-gold")
        engine.start()
        for _ in range(10):
            await asyncio.sleep(0)
        engine.stop()
        return engine

    engine = asyncio.run(scenario())
    assert engine.frames_drawn == 0
    assert canvas.calls == []


def test_stop_halts_updates_and_draws(make_engine, canvas):
    async def scenario():
        frames = FrameSignal()
        engine = make_engine("falling-confetti", frames=frames)
        task = engine.start()
        await pump(frames, 3)
        engine.stop()
        calls = len(canvas.calls)
        state = [p.to_dict() for p in engine.particles]
        await pump(frames, 10)
        assert task.cancelled() or task.done()
        return engine, calls, state

    engine, calls, state = asyncio.run(scenario())
    assert engine.frames_drawn == 3
    assert len(canvas.calls) == calls
    assert [p.to_dict() for p in engine.particles] == state
    assert engine.step() is False
    assert not engine.active


def test_stop_unsubscribes_from_resize(make_engine, canvas):
    engine = make_engine("fall-gold")
    engine.stop()
    canvas.viewport = (10, 10)
    canvas.notify_resize()
    assert (engine.width, engine.height) == (800, 600)


def test_stop_is_idempotent(make_engine):
    engine = make_engine("fall-gold")
    engine.stop()
    engine.stop()
    assert not engine.active


def test_two_engines_share_one_signal(registry, rng):
    async def scenario():
        frames = FrameSignal()
        a = ParticleEngine(CANVAS_ID, "fall-gold", rng=rng, registry=registry, frames=frames)
        b = ParticleEngine(CANVAS_ID, "twinkling-star", rng=rng, registry=registry, frames=frames)
        a.start()
        b.start()
        await pump(frames, 2)
        a.stop()
        await pump(frames, 2)
        b.stop()
        return a, b

    a, b = asyncio.run(scenario())
    assert a.frames_drawn == 2
    assert b.frames_drawn == 4
