"""
Login and signup forms.
"""

import reflex as rx

from erp_ui.components.layout import public
from erp_ui.routing import LOGIN_PATH, SIGNUP_PATH
from erp_ui.state import APP_TITLE, AuthState


def _auth_error() -> rx.Component:
    return rx.cond(
        AuthState.auth_error != "",
        rx.callout(AuthState.auth_error, icon="triangle_alert", color_scheme="red"),
    )


def _input(label: str, name: str, type_: str, placeholder: str = "") -> rx.Component:
    return rx.box(
        rx.text(label, as_="label", size="2", weight="medium"),
        rx.input(name=name, type=type_, placeholder=placeholder, required=True),
        class_name="form-field",
    )


def login_page() -> rx.Component:
    """Build the sign-in page."""
    return public(
        rx.heading(APP_TITLE, size="7", as_="h1"),
        rx.text("Connectez-vous à votre compte", class_name="muted"),
        rx.cond(
            AuthState.auth_notice != "",
            rx.callout(AuthState.auth_notice, icon="info", color_scheme="green"),
        ),
        _auth_error(),
        rx.form(
            rx.vstack(
                _input("Email", "email", "email", "vous@exemple.ch"),
                _input("Mot de passe", "password", "password"),
                rx.button("Se connecter", type="submit", width="100%"),
                spacing="3",
                width="100%",
            ),
            on_submit=AuthState.sign_in,
            reset_on_submit=False,
        ),
        rx.text(
            "Pas de compte ? ",
            rx.link("Créer un compte", href=SIGNUP_PATH),
            size="2",
        ),
    )


def signup_page() -> rx.Component:
    """Build the account creation page."""
    return public(
        rx.heading("Créer un compte", size="7", as_="h1"),
        _auth_error(),
        rx.form(
            rx.vstack(
                _input("Email", "email", "email", "vous@exemple.ch"),
                _input("Mot de passe", "password", "password"),
                _input("Confirmer le mot de passe", "confirm_password", "password"),
                rx.button("Créer le compte", type="submit", width="100%"),
                spacing="3",
                width="100%",
            ),
            on_submit=AuthState.sign_up,
            reset_on_submit=False,
        ),
        rx.text("Déjà inscrit ? ", rx.link("Se connecter", href=LOGIN_PATH), size="2"),
    )
