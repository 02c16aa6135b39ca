"""
Client list and create/edit dialog.
"""

import reflex as rx

from erp_ui.components.fields import empty_state, error_callout, form_field, text_area_field
from erp_ui.components.layout import page_header, protected
from erp_ui.state import ClientsState


def _client_row(client: rx.Var) -> rx.Component:
    return rx.table.row(
        rx.table.cell(rx.text(client["name"], weight="medium")),
        rx.table.cell(client["email"]),
        rx.table.cell(client["phone"]),
        rx.table.cell(client["address"]),
        rx.table.cell(client["created_at"]),
        rx.table.cell(
            rx.icon_button(
                rx.icon("pencil", size=16),
                variant="ghost",
                on_click=ClientsState.open_edit(client["id"]),
            )
        ),
    )


def _client_table() -> rx.Component:
    return rx.table.root(
        rx.table.header(
            rx.table.row(
                *[
                    rx.table.column_header_cell(label)
                    for label in ("Nom", "Email", "Téléphone", "Adresse", "Créé le", "")
                ]
            )
        ),
        rx.table.body(rx.foreach(ClientsState.clients, _client_row)),
        width="100%",
    )


def client_dialog() -> rx.Component:
    """Dialog used both to create and to edit a client."""
    return rx.dialog.root(
        rx.dialog.content(
            rx.dialog.title(ClientsState.form_title),
            error_callout(ClientsState.save_error),
            rx.form(
                rx.vstack(
                    form_field("Nom", "name", ClientsState.form_values, ClientsState.form_errors, required=True),
                    form_field("Email", "email", ClientsState.form_values, ClientsState.form_errors, type_="email"),
                    form_field("Téléphone", "phone", ClientsState.form_values, ClientsState.form_errors),
                    text_area_field("Adresse", "address", ClientsState.form_values, ClientsState.form_errors),
                    rx.hstack(
                        rx.dialog.close(rx.button("Annuler", variant="soft", type="button")),
                        rx.button("Enregistrer", type="submit"),
                        justify="end",
                        width="100%",
                    ),
                    spacing="3",
                ),
                on_submit=ClientsState.save,
                reset_on_submit=False,
            ),
        ),
        open=ClientsState.form_open,
        on_open_change=ClientsState.set_form_open,
    )


def clients_page() -> rx.Component:
    return protected(
        page_header(
            "Clients",
            rx.button(rx.icon("plus", size=16), "Nouveau client", on_click=ClientsState.open_create),
        ),
        error_callout(ClientsState.error),
        rx.cond(
            ClientsState.clients.length() > 0,
            rx.box(_client_table(), class_name="card"),
            empty_state("users", "Aucun client", "Ajoutez votre premier client."),
        ),
        client_dialog(),
    )
