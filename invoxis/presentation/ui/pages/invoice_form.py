from __future__ import annotations

import logging
from typing import Any, Callable

from nicegui import ui

from invoxis.application.invoice.engine import Change, InvoiceEngine
from invoxis.application.profile.store import ProfileStore
from invoxis.composition_root import AppContainer
from invoxis.domain.invoice_settings import DiscountType
from invoxis.domain.party import Country, Party
from invoxis.domain.totals import format_amount
from invoxis.presentation.viewmodels.invoice_viewmodel import (
    country_options,
    recent_recipient_options,
    totals_to_viewmodel,
)
from invoxis.styles import (
    C_BTN_PRIM,
    C_BTN_SEC,
    C_CARD,
    C_ERROR_TEXT,
    C_INPUT,
    C_MUTED_TEXT,
    C_SECTION_TITLE,
    C_TOTAL_ROW,
)


logger = logging.getLogger(__name__)

_TEXT_FIELDS = [
    ("name", "{label} Name*"),
    ("email", "Email*"),
    ("phone", "Phone*"),
]


class _PartyForm:
    """Inputs for one party; writes to the engine on blur and validates."""

    def __init__(
        self,
        title: str,
        name_label: str,
        read: Callable[[], Party],
        write: Callable[..., None],
        validate: Callable[[], bool],
        errors: Callable[[], dict[str, str]],
    ) -> None:
        self._read = read
        self._write = write
        self._validate = validate
        self._errors = errors
        self.inputs: dict[str, Any] = {}
        self.error_labels: dict[str, ui.label] = {}

        party = read()
        ui.label(title).classes(C_SECTION_TITLE)
        with ui.element("div").classes("grid grid-cols-1 md:grid-cols-2 gap-4 w-full"):
            for field, caption in _TEXT_FIELDS:
                with ui.column().classes("gap-0 w-full"):
                    self.inputs[field] = ui.input(
                        caption.format(label=name_label), value=getattr(party, field)
                    ).classes(C_INPUT)
                    self.error_labels[field] = ui.label("").classes(C_ERROR_TEXT)
            with ui.column().classes("gap-0 w-full"):
                self.inputs["country"] = ui.select(
                    country_options(),
                    label="Country*",
                    value=party.country.value,
                    on_change=lambda e: self._country_changed(e.value),
                ).classes(C_INPUT)
        with ui.column().classes("gap-0 w-full"):
            self.inputs["address"] = ui.textarea("Address*", value=party.address).props("autogrow").classes(C_INPUT)
            self.error_labels["address"] = ui.label("").classes(C_ERROR_TEXT)
        with ui.column().classes("gap-0 w-full") as self.pin_row:
            self.inputs["pin_code"] = ui.input("PIN Code*", value=party.pin_code).classes(C_INPUT)
            self.error_labels["pin_code"] = ui.label("").classes(C_ERROR_TEXT)
        self.pin_row.set_visibility(party.country == Country.INDIA)

        for field in ("name", "email", "phone", "address", "pin_code"):
            self.inputs[field].on("blur", lambda _e, f=field: self._commit(f))

    def _commit(self, field: str) -> None:
        self._write(**{field: self.inputs[field].value or ""})
        self._validate()
        self.show_errors()

    def _country_changed(self, value: str) -> None:
        if not value or value == self._read().country.value:
            return
        self._write(country=value)
        self.pin_row.set_visibility(value == Country.INDIA.value)
        self.inputs["pin_code"].value = self._read().pin_code
        self._validate()
        self.show_errors()

    def load(self) -> None:
        party = self._read()
        for field in ("name", "email", "phone", "address", "pin_code"):
            self.inputs[field].value = getattr(party, field)
        self.inputs["country"].value = party.country.value
        self.pin_row.set_visibility(party.country == Country.INDIA)

    def show_errors(self) -> None:
        errors = self._errors()
        for field, label in self.error_labels.items():
            label.text = errors.get(field, "")


def _render_logo(engine: InvoiceEngine) -> None:
    @ui.refreshable
    def logo_area() -> None:
        logo = engine.issuer.logo
        if logo:
            with ui.row().classes("items-center gap-3"):
                ui.image(logo).classes("w-32 h-16 object-contain")
                ui.button(icon="close", on_click=_remove).props("flat round dense color=negative").tooltip(
                    "Remove logo"
                )
            return

        async def _upload(e) -> None:
            content = await e.file.read()
            if not engine.set_logo(content, getattr(e.file, "content_type", None)):
                ui.notify("Please upload an image file (PNG, JPG).", color="orange")
                return
            logo_area.refresh()

        ui.upload(on_upload=_upload, auto_upload=True, label="Company Logo").props(
            "flat dense accept=image/*"
        ).classes("w-full")
        ui.label("PNG, JPG up to 2MB").classes(C_MUTED_TEXT)

    def _remove() -> None:
        engine.remove_logo()
        logo_area.refresh()

    logo_area()


def _render_recent_clients(profile_store: ProfileStore, engine: InvoiceEngine, on_loaded: Callable[[], None]) -> None:
    options = recent_recipient_options(profile_store.recent_recipients())
    if not options:
        return

    def _load(e) -> None:
        if not e.value:
            return
        party = profile_store.find_recent_recipient(e.value)
        if party is not None:
            engine.replace_recipient(party)
            on_loaded()
        select.value = None

    select = ui.select(options, label="Load recent client", on_change=_load, clearable=True).classes(C_INPUT)


def render_invoice_form(container: AppContainer, on_preview: Callable[[], None]) -> None:
    engine = container.engine

    with ui.card().classes(C_CARD):
        _render_logo(engine)
        company = _PartyForm(
            "Company Information",
            "Company",
            read=lambda: engine.issuer,
            write=engine.set_issuer,
            validate=engine.validate_issuer,
            errors=lambda: engine.errors.issuer,
        )

    with ui.card().classes(C_CARD):
        _render_recent_clients(container.profile_store, engine, lambda: (client.load(), client.show_errors()))
        client = _PartyForm(
            "Client Information",
            "Client",
            read=lambda: engine.recipient,
            write=engine.set_recipient,
            validate=engine.validate_recipient,
            errors=lambda: engine.errors.recipient,
        )

    amount_labels: dict[str, ui.label] = {}

    with ui.card().classes(C_CARD):
        with ui.row().classes("w-full items-center justify-between"):
            ui.label("Invoice Items").classes(C_SECTION_TITLE)
            ui.button("Add Item", icon="add", on_click=lambda: (engine.add_line_item(), items_list.refresh())).props(
                "outline color=primary"
            ).classes(C_BTN_SEC)

        @ui.refreshable
        def items_list() -> None:
            amount_labels.clear()
            general = engine.errors.general_items_error
            if general:
                ui.label(general).classes(C_ERROR_TEXT)
            items = engine.items
            if not items:
                ui.label("No items added yet. Click \"Add Item\" to start.").classes(C_MUTED_TEXT)
                return
            for index, item in enumerate(items):
                errors = engine.errors.for_item(index) if not general else {}
                with ui.row().classes("w-full items-start gap-3 border-b border-slate-100 py-2 md:flex-nowrap"):
                    with ui.column().classes("gap-0 flex-1 min-w-[200px]"):
                        desc = ui.input("Description*", value=item.description).classes(C_INPUT)
                        desc.on("blur", lambda _e, i=item.id, d=desc: engine.update_line_item(i, "description", d.value))
                        ui.label(errors.get("description", "")).classes(C_ERROR_TEXT)
                    for field, caption, minimum in (
                        ("quantity", "Qty", 0),
                        ("price", "Price", 0),
                        ("discount", "Discount", 0),
                    ):
                        with ui.column().classes("gap-0 w-24"):
                            ui.number(
                                caption,
                                value=float(getattr(item, field)),
                                min=minimum,
                                step=0.01 if field != "quantity" else 1,
                                on_change=lambda e, i=item.id, f=field: engine.update_line_item(i, f, e.value),
                            ).classes(C_INPUT)
                            ui.label(errors.get(field, "")).classes(C_ERROR_TEXT)
                    ui.checkbox(
                        "Taxable",
                        value=item.taxable,
                        on_change=lambda e, i=item.id: engine.update_line_item(i, "taxable", e.value),
                    )
                    amount_labels[item.id] = ui.label(format_amount(item.amount)).classes("w-24 text-right pt-4")
                    ui.button(
                        icon="delete",
                        on_click=lambda _e, i=item.id: (engine.remove_line_item(i), items_list.refresh()),
                    ).props("flat round dense color=negative")

        items_list()

    total_labels: dict[str, ui.label] = {}

    with ui.card().classes(C_CARD):
        ui.label("Invoice Summary").classes(C_SECTION_TITLE)

        @ui.refreshable
        def settings_panel() -> None:
            settings = engine.settings
            with ui.row().classes("w-full gap-4"):
                ui.number(
                    "Tax Rate (%)",
                    value=float(settings.tax_rate),
                    min=0,
                    max=100,
                    step=0.01,
                    on_change=lambda e: engine.update_settings("tax_rate", e.value),
                ).classes("w-40")
                ui.number(
                    "Additional Discount",
                    value=float(settings.discount),
                    min=0,
                    step=0.01,
                    on_change=lambda e: engine.update_settings("discount", e.value),
                ).classes("w-40")
                ui.select(
                    {DiscountType.FIXED.value: "Fixed", DiscountType.PERCENTAGE.value: "Percentage"},
                    value=settings.discount_type.value,
                    label="Discount Type",
                    on_change=lambda e: engine.update_settings("discount_type", e.value),
                ).classes("w-40")
                ui.input(
                    "Currency",
                    value=settings.currency,
                    on_change=lambda e: engine.update_settings("currency", e.value),
                ).classes("w-28")
            with ui.row().classes("w-full gap-4"):
                ui.input("Invoice Number", value=settings.invoice_number).props("readonly").classes("w-56")
                ui.input(
                    "Invoice Date",
                    value=settings.invoice_date.isoformat(),
                    on_change=lambda e: _set_date("invoice_date", e.value),
                ).props("type=date").classes("w-44")
                ui.input(
                    "Due Date",
                    value=settings.due_date.isoformat(),
                    on_change=lambda e: _set_date("due_date", e.value),
                ).props("type=date").classes("w-44")

        settings_panel()

        with ui.column().classes("w-full max-w-md ml-auto gap-1 mt-4"):
            for key, caption in (
                ("subtotal", "Subtotal"),
                ("tax", "Tax"),
                ("discount", "Discount"),
                ("total", "Total"),
            ):
                with ui.row().classes(C_TOTAL_ROW):
                    ui.label(caption).classes("font-semibold" if key == "total" else "")
                    total_labels[key] = ui.label("").classes("font-semibold" if key == "total" else "")

    def _set_date(field: str, value: str) -> None:
        try:
            engine.update_settings(field, value)
        except ValueError:
            ui.notify("Please enter a valid date.", color="orange")

    def show_totals() -> None:
        current = engine.settings
        view = totals_to_viewmodel(engine.totals, current.currency)
        for key, label in total_labels.items():
            label.text = view[key]
        for item in engine.items:
            label = amount_labels.get(item.id)
            if label is not None:
                label.text = format_amount(item.amount)

    def _on_change(_engine: InvoiceEngine, change: Change) -> None:
        if change in (Change.LINE_ITEMS, Change.SETTINGS):
            show_totals()

    unsubscribe = engine.subscribe(_on_change)
    ui.context.client.on_disconnect(unsubscribe)
    show_totals()

    def validate_and_preview() -> None:
        valid = engine.validate_all()
        company.show_errors()
        client.show_errors()
        items_list.refresh()
        if not valid:
            ui.notify("Please fix the highlighted errors before continuing.", color="red")
            return
        on_preview()

    def new_invoice() -> None:
        engine.reset()
        client.load()
        client.show_errors()
        items_list.refresh()
        settings_panel.refresh()
        ui.notify(f"Started invoice {engine.settings.invoice_number}", color="green")

    with ui.row().classes("w-full justify-end gap-2"):
        ui.button("New Invoice", on_click=new_invoice).props("flat color=primary").classes(C_BTN_SEC)
        ui.button("Validate & Preview", on_click=validate_and_preview).props("unelevated color=primary").classes(
            C_BTN_PRIM
        )
