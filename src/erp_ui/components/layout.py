"""
Page layout for the ERP UI.

Protected pages are wrapped by `protected()`: while the session is loading a
neutral placeholder is shown, and content only renders for a signed-in user.
The redirect itself is issued by AuthState.check_access on page load.
"""

import reflex as rx

from erp_ui.components.fields import error_callout, loading_state
from erp_ui.state import APP_SUBTITLE, APP_TITLE, AuthState

NAV_LINKS = (
    ("Tableau de bord", "/", "layout-dashboard"),
    ("Clients", "/clients", "users"),
    ("Factures", "/factures", "file-text"),
    ("Produits", "/products", "package"),
)


def _nav_link(label: str, href: str, icon: str) -> rx.Component:
    return rx.link(
        rx.hstack(rx.icon(icon, size=16), rx.text(label), spacing="2", align="center"),
        href=href,
        class_name="nav-link",
        underline="none",
    )


def navbar() -> rx.Component:
    """Build the top bar with navigation and the signed-in user."""
    return rx.box(
        rx.hstack(
            rx.box(
                rx.heading(APP_TITLE, size="5", as_="h1"),
                rx.text(APP_SUBTITLE, class_name="muted", size="1"),
                class_name="brand",
            ),
            rx.hstack(*[_nav_link(*link) for link in NAV_LINKS], spacing="4"),
            rx.spacer(),
            rx.hstack(
                rx.text(AuthState.user_email, size="2", class_name="muted"),
                rx.button(
                    rx.icon("log-out", size=16),
                    "Déconnexion",
                    variant="soft",
                    on_click=AuthState.sign_out,
                ),
                spacing="3",
                align="center",
            ),
            align="center",
            width="100%",
        ),
        class_name="navbar",
    )


def page_header(title: str | rx.Var, *actions: rx.Component) -> rx.Component:
    return rx.hstack(
        rx.heading(title, size="6", as_="h2"),
        rx.spacer(),
        *actions,
        align="center",
        class_name="page-header",
    )


def protected(*children: rx.Component) -> rx.Component:
    """
    Wrap page content for routes that require a session.

    Args:
        children: Page body.

    Returns:
        Placeholder while loading, the shell with content once signed in.
    """
    return rx.cond(
        AuthState.is_loading,
        rx.box(loading_state("Vérification de la session..."), class_name="app-shell"),
        rx.cond(
            AuthState.is_authenticated,
            rx.box(
                navbar(),
                rx.box(
                    error_callout(AuthState.backend_error),
                    *children,
                    class_name="app-container",
                ),
                class_name="app-shell",
            ),
            rx.box(loading_state("Redirection..."), class_name="app-shell"),
        ),
    )


def public(*children: rx.Component) -> rx.Component:
    """Centered layout of the login and signup pages."""
    return rx.center(
        rx.box(*children, class_name="card auth-card"),
        class_name="auth-shell",
        min_height="100vh",
    )
