import time
import dearpygui.dearpygui as dpg

from particlefx.Particle import VARIANTS


def _make_callbacks(shared):
    def variant_cb(sender, app_data, user_data):
        if app_data in VARIANTS:
            shared['variant_request'] = app_data
    def pause_cb():
        shared['toggle_pause'] = True
    def reinit_cb():
        shared['reinit'] = True
    def lightning_cb(sender, app_data, user_data):
        shared['lightning'] = bool(app_data)
    def pool_size_cb(sender, app_data, user_data):
        try:
            shared['pool_size_request'] = max(1, int(app_data))
        except (TypeError, ValueError):
            pass
    def exit_cb():
        shared['__exit__'] = True
    return variant_cb, pause_cb, reinit_cb, lightning_cb, pool_size_cb, exit_cb


def status_line(shared):
    paused = "paused" if shared.get('paused', False) else "running"
    return (f"{shared.get('variant', '?')} | {paused} | "
            f"particles={shared.get('particle_count', 0)} | timer={shared.get('timer', '--:--')}")


def run_gui(shared):
    """
    Run DearPyGui in its own process. Writes requests into `shared` dict,
    which the pygame loop picks up once per frame.
    """
    dpg.create_context()

    variant_cb, pause_cb, reinit_cb, lightning_cb, pool_size_cb, exit_cb = _make_callbacks(shared)

    with dpg.window(label="Particle Controls", tag="controls_window", width=380, height=300):
        dpg.add_text("Particle variant")
        dpg.add_combo(list(VARIANTS), tag="variant_combo", default_value=shared.get('variant') or next(iter(VARIANTS)),
                      callback=variant_cb)
        dpg.add_text("Pool size (applies on re-initialize)")
        dpg.add_input_int(label="Pool", tag="pool_input", default_value=int(shared.get('pool_size', 80)),
                          min_value=1, min_clamped=True, callback=pool_size_cb)
        dpg.add_checkbox(label="Lightning", tag="lightning_check", default_value=bool(shared.get('lightning', False)),
                         callback=lightning_cb)
        dpg.add_separator()
        dpg.add_button(label="Pause / Toggle", callback=lambda s, a, u: pause_cb())
        dpg.add_button(label="Re-initialize", callback=lambda s, a, u: reinit_cb())
        dpg.add_button(label="Exit", callback=lambda s, a, u: exit_cb())
        dpg.add_spacer()
        dpg.add_text("Status:", tag="status_label")
        dpg.add_text("", tag="status_text")

    dpg.create_viewport(title='Particle Controls', width=400, height=340)
    dpg.set_primary_window("controls_window", True)
    dpg.setup_dearpygui()
    dpg.show_viewport()

    try:
        while not shared.get('__exit__', False) and dpg.is_dearpygui_running():
            dpg.set_value("status_text", status_line(shared))
            # keep the combo in sync when the variant is cycled from the game window
            current = shared.get('variant')
            if current and dpg.get_value("variant_combo") != current:
                dpg.set_value("variant_combo", current)
            dpg.render_dearpygui_frame()
            time.sleep(0.01)
    finally:
        dpg.destroy_context()


if __name__ == "__main__":
    from multiprocessing import Manager
    mgr = Manager()
    shared = mgr.dict()
    shared['variant'] = 'fall-gold'
    shared['pool_size'] = 80
    run_gui(shared)
