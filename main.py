import argparse
import asyncio
import logging

import numpy as np
import pygame

from constants import BACKGROUND, CANVAS_ID, FPS, GOLD, HEIGHT, RED, WHITE, WIDTH
from escaperoom.config import PRESETS
from escaperoom.gate import PasswordGate
from escaperoom.stats import Session, victory_stats
from escaperoom.timer import GameTimer
from particlefx.Particle import DEFAULT_VARIANT, VARIANTS, variant_class
from particlefx.canvas import PygameCanvas, register_canvas, unregister_canvas
from particlefx.engine import ParticleEngine
from particlefx.frames import display_frames
from particlefx.lightning import Lightning

from multiprocessing import Process, Manager
import gui_controller as gui_ctrl

logger = logging.getLogger("escape-particles")

VARIANT_ORDER = list(VARIANTS)


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Escape room particle playground")
    ap.add_argument("--variant", default=DEFAULT_VARIANT,
                    help=f"particle variant, one of: {', '.join(VARIANT_ORDER)} (short aliases accepted)")
    ap.add_argument("--rooms", choices=sorted(PRESETS), default="bible", help="escape room set")
    ap.add_argument("--room", default="index", help="room whose password prompt is shown")
    ap.add_argument("--seed", type=int, default=None, help="seed for every random draw")
    ap.add_argument("--fps", type=int, default=FPS)
    ap.add_argument("--width", type=int, default=WIDTH)
    ap.add_argument("--height", type=int, default=HEIGHT)
    ap.add_argument("--no-gui", action="store_true", help="do not spawn the DearPyGui control panel")
    ap.add_argument("--lightning", action="store_true", help="random lightning flashes")
    ap.add_argument("--log-level", default="INFO")
    return ap.parse_args(argv)


def next_variant(current):
    i = VARIANT_ORDER.index(current) if current in VARIANT_ORDER else -1
    return VARIANT_ORDER[(i + 1) % len(VARIANT_ORDER)]


def make_engine(variant, rng, pool_size=None):
    engine = ParticleEngine(CANVAS_ID, variant, rng=rng, frames=display_frames, pool_size=pool_size)
    engine.start()
    return engine


def apply_panel_requests(shared, engine, rebuild):
    """
    Consume the one-shot variant and re-initialize requests the control panel
    left in `shared`, then publish the engine's current state back for display.
    `rebuild(variant)` returns the replacement engine. Returns the engine in use.
    """
    requested = shared.pop('variant_request', None)
    if requested and requested != engine.variant:
        engine.stop()
        engine = rebuild(requested)
    if shared.get('reinit', False):
        engine.pool_size = int(shared.pop('pool_size_request', None) or engine.pool_size)
        engine.init()
        shared['reinit'] = False
    shared['variant'] = engine.variant
    shared['pool_size'] = engine.pool_size
    shared['particle_count'] = len(engine.particles)
    return engine


def draw_hud(screen, font, timer, gate, typed, engine):
    timer_color = RED if timer.warning else WHITE
    timer_surf = font.render(timer.display(), True, timer_color)
    screen.blit(timer_surf, (screen.get_width() - timer_surf.get_width() - 10, 10))

    if gate.solved:
        room_line = f"{gate.room_id}: open -> {gate.next_room}"
    else:
        room_line = f"{gate.room_id}: {'*' * len(typed)}_"
    screen.blit(font.render(room_line, True, GOLD), (10, 10))
    screen.blit(font.render(f"Attempts: {gate.attempts}", True, WHITE), (10, 44))
    if gate.strong_hint_visible:
        screen.blit(font.render("Strong hint unlocked", True, GOLD), (10, 78))
    elif gate.hint_visible:
        screen.blit(font.render("Hint unlocked", True, GOLD), (10, 78))

    count_surf = font.render(f"{engine.variant}  Particles: {len(engine.particles)}", True, WHITE)
    screen.blit(count_surf, (10, screen.get_height() - 30))


async def run(args):
    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height), pygame.RESIZABLE)
    pygame.display.set_caption("Escape Room Particles")
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 32)

    rng = np.random.default_rng(args.seed)
    canvas = register_canvas(CANVAS_ID, PygameCanvas(background=BACKGROUND))

    config = PRESETS[args.rooms]
    session = Session(config)
    timer = GameTimer(config)
    gate = PasswordGate(config, args.room, session)
    typed = ""

    variant = variant_class(args.variant)
    variant = variant.TAG if variant else args.variant
    engine = make_engine(variant, rng)
    lightning = Lightning(rng)
    paused = False

    _shared = None
    _gui_proc = None
    if not args.no_gui:
        _mgr = Manager()
        _shared = _mgr.dict()
        _shared['variant'] = engine.variant
        _shared['pool_size'] = engine.pool_size
        _shared['lightning'] = args.lightning
        _shared['paused'] = False
        _shared['toggle_pause'] = False
        _shared['reinit'] = False
        _shared['__exit__'] = False
        _gui_proc = Process(target=gui_ctrl.run_gui, args=(_shared,), daemon=True)
        _gui_proc.start()

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type in (pygame.VIDEORESIZE, pygame.WINDOWSIZECHANGED):
                canvas.notify_resize()
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_TAB:
                    engine.stop()
                    engine = make_engine(next_variant(engine.variant), rng)
                elif event.key == pygame.K_RETURN:
                    if gate.check(typed) and session.finished:
                        logger.info("Escaped! %s", victory_stats(session))
                    typed = ""
                elif event.key == pygame.K_BACKSPACE:
                    typed = typed[:-1]
                elif event.unicode and event.unicode.isprintable():
                    typed += event.unicode

        # --- Handle control panel requests ---
        if _shared is not None:
            if _shared.get('__exit__', False):
                running = False
            if _shared.get('toggle_pause', False):
                paused = not paused
                _shared['toggle_pause'] = False
            engine = apply_panel_requests(_shared, engine, lambda variant: make_engine(variant, rng))
            args.lightning = bool(_shared.get('lightning', args.lightning))
            _shared['paused'] = paused
            _shared['timer'] = timer.display()

        # --- Frame: the engine task updates and draws when the signal fires ---
        if paused:
            await asyncio.sleep(0)
        else:
            display_frames.fire()
            # one yield lets the woken engine task run its update/draw before the HUD goes on top
            await asyncio.sleep(0)
            if args.lightning:
                canvas.flash(lightning.update(1.0 / args.fps) * 0.6)
            draw_hud(screen, font, timer, gate, typed, engine)

        if timer.expired:
            running = False
            logger.info("Time is up. %s", victory_stats(session))

        pygame.display.flip()
        clock.tick(args.fps)

    engine.stop()
    unregister_canvas(CANVAS_ID)

    # cleanup: signal GUI to exit and join
    if _gui_proc is not None:
        _shared['__exit__'] = True
        _gui_proc.join(timeout=1.0)

    pygame.quit()


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
