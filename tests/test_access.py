"""
Access check tests: what the Reflex handlers decide for each browser session.
"""

import pytest

from erp_ui import access, routing
from erp_ui.config import Settings
from erp_ui.context import bootstrap
from erp_ui.data.demo_records import DEMO_EMAIL, DEMO_PASSWORD
from erp_ui.models.common import Err, Ok
from erp_ui.services import DemoBackend, DemoDatabase


@pytest.fixture
def database() -> DemoDatabase:
    return DemoDatabase()


@pytest.fixture
def app(database: DemoDatabase):
    """Demo application whose sessions share one in-memory database."""
    context = bootstrap(Settings(service="demo"), lambda key: DemoBackend(database=database))
    yield context
    for key in ("token-a", "token-b"):
        context.sessions.discard(key)


def test_signed_out_page_load_redirects_with_next(app):
    visitor = app.sessions.get("token-a")

    assert access.page_redirect(visitor, "/products") == "/login?next=/products"
    assert access.page_redirect(visitor, "/") == "/login"


def test_signed_in_page_load_is_allowed(app):
    visitor = app.sessions.get("token-a")
    access.sign_in(visitor, DEMO_EMAIL, DEMO_PASSWORD, None)

    assert access.page_redirect(visitor, "/products") is None


def test_sign_in_does_not_leak_to_other_sessions(app):
    """Test that a sign-in in one browser leaves another one signed out."""
    first = app.sessions.get("token-a")
    second = app.sessions.get("token-b")

    assert isinstance(access.sign_in(first, DEMO_EMAIL, DEMO_PASSWORD, None), Ok)

    assert first.store.snapshot.authenticated
    assert not second.store.snapshot.authenticated
    assert access.page_redirect(second, "/clients") == "/login?next=/clients"
    assert first.backend is not second.backend


def test_next_round_trip(app):
    """Test the login page's `next` value brings the user back."""
    visitor = app.sessions.get("token-a")
    login = access.page_redirect(visitor, "/products/p-0001/edit")
    assert login == "/login?next=/products/p-0001/edit"
    next_value = login.split(f"{routing.NEXT_PARAM}=", 1)[1]

    assert access.public_redirect(visitor, next_value) is None
    result = access.sign_in(visitor, DEMO_EMAIL, DEMO_PASSWORD, next_value)

    assert result == Ok("/products/p-0001/edit")
    assert access.public_redirect(visitor, next_value) == "/products/p-0001/edit"


@pytest.mark.parametrize("next_value", [None, "", "https://evil.example", "//evil.example", "/login"])
def test_sign_in_ignores_unsafe_next(app, next_value):
    visitor = app.sessions.get("token-a")

    assert access.sign_in(visitor, DEMO_EMAIL, DEMO_PASSWORD, next_value) == Ok(routing.HOME_PATH)


def test_sign_in_requires_both_fields(app):
    visitor = app.sessions.get("token-a")

    result = access.sign_in(visitor, "  ", "secret", None)

    assert isinstance(result, Err)
    assert result.error.message == access.MISSING_CREDENTIALS
    assert not visitor.store.snapshot.authenticated


def test_sign_in_rejected_credentials(app):
    visitor = app.sessions.get("token-a")

    result = access.sign_in(visitor, DEMO_EMAIL, "wrong-password", "/clients")

    assert isinstance(result, Err)
    assert result.error.code == "invalid_credentials"


def test_sign_up_password_mismatch(app):
    visitor = app.sessions.get("token-a")

    result = access.sign_up(visitor, "new@example.com", "secret1", "secret2")

    assert isinstance(result, Err)
    assert result.error.message == access.PASSWORD_MISMATCH


def test_sign_up_signs_the_visitor_in(app):
    visitor = app.sessions.get("token-a")

    result = access.sign_up(visitor, "new@example.com", "secret1", "secret1")

    assert isinstance(result, Ok)
    assert visitor.store.snapshot.user.email == "new@example.com"


def test_mutations_refused_while_signed_out(app, database):
    """Test that a product cannot be deleted without a signed-in user."""
    visitor = app.sessions.get("token-a")
    before = len(database.tables["products"])

    assert access.require_user(visitor, "products.delete") is False
    assert len(database.tables["products"]) == before


def test_require_user_after_sign_out(app):
    visitor = app.sessions.get("token-a")
    access.sign_in(visitor, DEMO_EMAIL, DEMO_PASSWORD, None)
    assert access.require_user(visitor, "products.delete") is True

    visitor.store.sign_out()

    assert access.require_user(visitor, "products.delete") is False


def test_discard_closes_the_session(app):
    visitor = app.sessions.get("token-a")
    access.sign_in(visitor, DEMO_EMAIL, DEMO_PASSWORD, None)

    app.sessions.discard("token-a")

    assert "token-a" not in app.sessions
    assert visitor.backend._listeners == []
    fresh = app.sessions.get("token-a")
    assert fresh is not visitor
    assert not fresh.store.snapshot.authenticated


def test_rows_are_shared_between_sessions(app):
    """Test that both sessions read the same demo tables."""
    first = app.sessions.get("token-a")
    second = app.sessions.get("token-b")

    deleted = first.products.delete_product("p-0001")

    assert isinstance(deleted, Ok)
    assert isinstance(second.products.get_product("p-0001"), Err)
