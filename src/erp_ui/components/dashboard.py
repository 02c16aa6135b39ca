"""
Dashboard: record counts and invoice totals.
"""

import reflex as rx

from erp_ui.components.fields import error_callout
from erp_ui.components.layout import page_header, protected
from erp_ui.state import DashboardState


def _stat_card(icon: str, label: str, value: rx.Var, href: str | None = None) -> rx.Component:
    card = rx.box(
        rx.hstack(rx.icon(icon, size=20), rx.text(label, class_name="muted"), align="center"),
        rx.heading(value, size="6", as_="p"),
        class_name="card stat-card",
    )
    return rx.link(card, href=href, underline="none") if href else card


def dashboard_page() -> rx.Component:
    return protected(
        page_header("Tableau de bord"),
        error_callout(DashboardState.error),
        rx.grid(
            _stat_card("users", "Clients", DashboardState.clients_count, "/clients"),
            _stat_card("file-text", "Factures", DashboardState.factures_count, "/factures"),
            _stat_card("package", "Produits", DashboardState.products_count, "/products"),
            _stat_card("file-pen", "Brouillons", DashboardState.draft_count),
            _stat_card("circle-check", "Encaissé", DashboardState.paid_total),
            _stat_card("clock", "En attente", DashboardState.outstanding_total),
            _stat_card("triangle-alert", "Stock faible", DashboardState.low_stock_count),
            columns="3",
            spacing="4",
            width="100%",
        ),
    )
