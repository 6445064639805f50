from __future__ import annotations

from nicegui import ui

from invoxis.application.profile.store import ProfileStore


def render_header(profile_store: ProfileStore) -> None:
    light_mode = profile_store.load_light_mode()
    dark = ui.dark_mode(not light_mode)

    with ui.header().classes("items-center justify-between px-6 py-3 bg-slate-900"):
        ui.label("Invoxis").classes("text-lg font-bold tracking-tight text-white")

        def toggle_theme() -> None:
            nonlocal light_mode
            light_mode = not light_mode
            dark.set_value(not light_mode)
            profile_store.save_light_mode(light_mode)
            theme_button.props(f"icon={'dark_mode' if light_mode else 'light_mode'}")

        theme_button = (
            ui.button(on_click=toggle_theme)
            .props(f"flat round color=white icon={'dark_mode' if light_mode else 'light_mode'}")
            .tooltip("Toggle theme")
        )
