"""Run the Invoxis NiceGUI app."""

import logging

from nicegui import app, ui

from invoxis.composition_root import create_app_container
from invoxis.config import AppConfig
from invoxis.env import load_env
from invoxis.infrastructure.rendering.preview_surface import PreviewSurface
from invoxis.logging_setup import setup_logging
from invoxis.presentation.ui.layout import render_header
from invoxis.presentation.ui.pages.invoice_form import render_invoice_form
from invoxis.presentation.ui.pages.invoice_preview import render_invoice_preview
from invoxis.presentation.ui.pages.landing import render_landing
from invoxis.styles import C_CONTAINER
from invoxis.ui_theme import apply_global_ui_theme


logger = logging.getLogger(__name__)

load_env()
CONFIG = AppConfig.from_env()


@ui.page("/")
def index() -> None:
    apply_global_ui_theme()
    container = create_app_container(storage=app.storage.user, export_dir=CONFIG.export_dir)
    ui.context.client.on_disconnect(container.detach_profile_sync)
    surface = PreviewSurface()

    render_header(container.profile_store)

    with ui.column().classes(C_CONTAINER):
        with ui.column().classes("w-full gap-6") as landing:
            render_landing(container.profile_store, on_start=lambda: show_editor())

        with ui.column().classes("w-full gap-4") as editor:
            with ui.tabs().classes("w-full") as tabs:
                form_tab = ui.tab("Create Invoice")
                preview_tab = ui.tab("Preview")

            def on_tab_change(e) -> None:
                # the preview only counts as mounted while its tab is shown
                if e.value == preview_tab or e.value == "Preview":
                    surface.mount()
                else:
                    surface.unmount()

            with ui.tab_panels(tabs, value=form_tab, on_change=on_tab_change).classes("w-full bg-transparent"):
                with ui.tab_panel(form_tab).classes("gap-4"):
                    render_invoice_form(container, on_preview=lambda: tabs.set_value(preview_tab))
                with ui.tab_panel(preview_tab):
                    render_invoice_preview(container, surface)
        editor.set_visibility(False)

    def show_editor() -> None:
        landing.set_visibility(False)
        editor.set_visibility(True)


def run() -> None:
    setup_logging(CONFIG.log_dir, debug=CONFIG.debug)
    logger.info("Starting Invoxis on %s:%s", CONFIG.host, CONFIG.port)
    ui.run(
        title="Invoxis",
        host=CONFIG.host,
        port=CONFIG.port,
        storage_secret=CONFIG.storage_secret,
        favicon="🧾",
        reload=False,
    )


if __name__ in {"__main__", "__mp_main__"}:
    run()
