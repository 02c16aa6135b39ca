"""
Invoice list, status badge and create/edit dialog.
"""

import reflex as rx

from erp_ui.components.fields import empty_state, error_callout, field_error, form_field
from erp_ui.components.layout import page_header, protected
from erp_ui.models.invoice import STATUS_OPTIONS
from erp_ui.state import FacturesState

_STATUS_COLORS = {"draft": "gray", "sent": "blue", "paid": "green"}


def status_badge(status: rx.Var, label: rx.Var) -> rx.Component:
    return rx.badge(
        label,
        color_scheme=rx.match(
            status,
            *[(value, color) for value, color in _STATUS_COLORS.items()],
            "gray",
        ),
    )


def _facture_row(facture: rx.Var) -> rx.Component:
    return rx.table.row(
        rx.table.cell(rx.text(facture["number"], weight="medium")),
        rx.table.cell(facture["client_name"]),
        rx.table.cell(status_badge(facture["status"], facture["status_label"])),
        rx.table.cell(facture["total_ttc_label"]),
        rx.table.cell(facture["due_date"]),
        rx.table.cell(
            rx.icon_button(
                rx.icon("pencil", size=16),
                variant="ghost",
                on_click=FacturesState.open_edit(facture["id"]),
            )
        ),
    )


def _select(label: str, name: str, items: rx.Component) -> rx.Component:
    return rx.box(
        rx.text(label, as_="label", size="2", weight="medium"),
        items,
        field_error(FacturesState.form_errors, name),
        class_name="form-field",
    )


def facture_dialog() -> rx.Component:
    values = FacturesState.form_values
    errors = FacturesState.form_errors
    return rx.dialog.root(
        rx.dialog.content(
            rx.dialog.title(FacturesState.form_title),
            error_callout(FacturesState.save_error),
            rx.form(
                rx.vstack(
                    form_field("Numéro", "number", values, errors, required=True),
                    _select(
                        "Client *",
                        "client_id",
                        rx.select.root(
                            rx.select.trigger(placeholder="Choisir un client", width="100%"),
                            rx.select.content(
                                rx.foreach(
                                    FacturesState.client_options,
                                    lambda client: rx.select.item(client["name"], value=client["id"]),
                                )
                            ),
                            value=values["client_id"].to(str),
                            on_change=lambda value: FacturesState.set_form_value("client_id", value),
                        ),
                    ),
                    _select(
                        "Statut",
                        "status",
                        rx.select.root(
                            rx.select.trigger(width="100%"),
                            rx.select.content(
                                *[rx.select.item(label, value=value) for value, label in STATUS_OPTIONS]
                            ),
                            value=values["status"].to(str),
                            on_change=lambda value: FacturesState.set_form_value("status", value),
                        ),
                    ),
                    form_field("Total HT", "total_ht", values, errors, placeholder="0.00", required=True),
                    form_field("Total TTC", "total_ttc", values, errors, placeholder="0.00", required=True),
                    form_field("Échéance", "due_date", values, errors, type_="date"),
                    rx.hstack(
                        rx.dialog.close(rx.button("Annuler", variant="soft", type="button")),
                        rx.button("Enregistrer", type="submit"),
                        justify="end",
                        width="100%",
                    ),
                    spacing="3",
                ),
                on_submit=FacturesState.save,
                reset_on_submit=False,
            ),
        ),
        open=FacturesState.form_open,
        on_open_change=FacturesState.set_form_open,
    )


def factures_page() -> rx.Component:
    return protected(
        page_header(
            "Factures",
            rx.button(rx.icon("plus", size=16), "Nouvelle facture", on_click=FacturesState.open_create),
        ),
        error_callout(FacturesState.error),
        rx.cond(
            FacturesState.factures.length() > 0,
            rx.box(
                rx.table.root(
                    rx.table.header(
                        rx.table.row(
                            *[
                                rx.table.column_header_cell(label)
                                for label in ("Numéro", "Client", "Statut", "Total TTC", "Échéance", "")
                            ]
                        )
                    ),
                    rx.table.body(rx.foreach(FacturesState.factures, _facture_row)),
                    width="100%",
                ),
                class_name="card",
            ),
            empty_state("file-text", "Aucune facture", "Créez votre première facture."),
        ),
        facture_dialog(),
    )
