"""
Reflex application entry point for the ERP UI.

Registers the public and protected pages. Protected pages run
AuthState.check_access first, which applies the route guard against the
session store and redirects to the login page when nobody is signed in.
"""

import reflex as rx

from erp_ui import config
from erp_ui.components.auth_forms import login_page, signup_page
from erp_ui.components.clients import clients_page
from erp_ui.components.dashboard import dashboard_page
from erp_ui.components.factures import factures_page
from erp_ui.components.fields import loading_state
from erp_ui.components.product_form import product_form_page
from erp_ui.components.products import products_page
from erp_ui.lib import logs
from erp_ui.routing import LOGIN_PATH, SIGNUP_PATH
from erp_ui.state import (
    APP_TITLE,
    AuthState,
    ClientsState,
    DashboardState,
    FacturesState,
    ProductFormState,
    ProductsState,
)

LOG = logs.logger(__file__)

_FONT_URL = "https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&display=swap"


def not_found() -> rx.Component:
    return loading_state("Redirection...")


app = rx.App(
    theme=rx.theme(
        appearance="light",
        has_background=True,
        radius="large",
    ),
    stylesheets=[
        _FONT_URL,
        "/styles.css",
    ],
)

# Public pages
app.add_page(login_page, route=LOGIN_PATH, title=f"Connexion - {APP_TITLE}", on_load=AuthState.check_public)
app.add_page(signup_page, route=SIGNUP_PATH, title=f"Inscription - {APP_TITLE}", on_load=AuthState.check_public)

# Protected pages: guard first, then load data
app.add_page(
    dashboard_page,
    route="/",
    title=APP_TITLE,
    on_load=[AuthState.check_access, DashboardState.load],
)
app.add_page(
    clients_page,
    route="/clients",
    title=f"Clients - {APP_TITLE}",
    on_load=[AuthState.check_access, ClientsState.load],
)
app.add_page(
    factures_page,
    route="/factures",
    title=f"Factures - {APP_TITLE}",
    on_load=[AuthState.check_access, FacturesState.load],
)
app.add_page(
    products_page,
    route="/products",
    title=f"Produits - {APP_TITLE}",
    on_load=[AuthState.check_access, ProductsState.load],
)
app.add_page(
    product_form_page,
    route="/products/new",
    title=f"Nouveau produit - {APP_TITLE}",
    on_load=[AuthState.check_access, ProductFormState.load_new],
)
app.add_page(
    product_form_page,
    route="/products/[product_id]/edit",
    title=f"Modifier le produit - {APP_TITLE}",
    on_load=[AuthState.check_access, ProductFormState.load_edit],
)

# Unknown paths go home
app.add_page(not_found, route="404", on_load=AuthState.resolve_unknown)


def main() -> None:
    """Entrypoint used by `erp-ui` console script."""
    # Note: In production, use `reflex run` instead
    import subprocess
    import sys

    port = config.settings().port
    LOG.info("Starting reflex on port %s", port)
    subprocess.run([sys.executable, "-m", "reflex", "run", "--frontend-port", str(port)])


if __name__ == "__main__":
    main()
