from __future__ import annotations

from nicegui import ui

from invoxis.application.errors import ExportError
from invoxis.application.invoice.engine import Change, InvoiceEngine
from invoxis.composition_root import AppContainer
from invoxis.infrastructure.rendering.preview_surface import PreviewSurface
from invoxis.presentation.viewmodels.invoice_viewmodel import build_invoice_preview_html
from invoxis.styles import C_BTN_PRIM, C_BTN_SEC, C_CARD


def render_invoice_preview(container: AppContainer, surface: PreviewSurface) -> None:
    engine = container.engine

    with ui.card().classes(C_CARD):
        with ui.row().classes("w-full justify-end gap-2") as actions:

            async def download_pdf() -> None:
                notification = ui.notification("Generating PDF...", spinner=True, timeout=None)
                try:
                    result = await container.exporter.export(surface)
                except ExportError as exc:
                    ui.notify(exc.user_message, color="red")
                    return
                finally:
                    notification.dismiss()
                ui.download.content(result.content, result.filename)
                ui.notify(f"Downloaded {result.filename}", color="green")

            ui.button("Download PDF", icon="download", on_click=download_pdf).props(
                "unelevated color=primary"
            ).classes(C_BTN_PRIM)
            ui.button("Print", icon="print", on_click=lambda: ui.run_javascript("window.print()")).props(
                "outline color=primary"
            ).classes(C_BTN_SEC)

        surface.bind_actions(actions.set_visibility)
        preview = ui.html(build_invoice_preview_html(engine.snapshot()), sanitize=False).classes("w-full")

    def _on_change(source: InvoiceEngine, _change: Change) -> None:
        preview.content = build_invoice_preview_html(source.snapshot())

    unsubscribe = engine.subscribe(_on_change)
    ui.context.client.on_disconnect(unsubscribe)
