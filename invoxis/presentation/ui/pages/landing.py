from __future__ import annotations

from typing import Callable

from nicegui import ui

from invoxis.application.profile.store import ProfileStore
from invoxis.styles import C_BTN_PRIM, C_CARD, C_INPUT, C_MUTED_TEXT, C_PAGE_TITLE


def render_landing(profile_store: ProfileStore, on_start: Callable[[], None]) -> None:
    saved_name = profile_store.load_display_name()

    with ui.card().classes(f"{C_CARD} max-w-xl mx-auto items-center text-center gap-4"):
        greeting = ui.label(f"Welcome back, {saved_name}!" if saved_name else "Welcome to Invoxis").classes(
            C_PAGE_TITLE
        )
        ui.label("Create professional invoices and download them as PDF.").classes(C_MUTED_TEXT)
        name_input = ui.input("Your name", value=saved_name, placeholder="How should we greet you?").classes(C_INPUT)

        def start() -> None:
            name = (name_input.value or "").strip()
            if name:
                profile_store.save_display_name(name)
                greeting.text = f"Welcome back, {name}!"
            on_start()

        ui.button("Create Invoice", on_click=start).props("unelevated color=primary").classes(C_BTN_PRIM)
