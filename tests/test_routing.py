"""
Route guard and route table tests.
"""

import pytest

from erp_ui.models.session import AuthTokens, SessionSnapshot, User
from erp_ui.routing import (
    Allow,
    Placeholder,
    Redirect,
    guard,
    is_public,
    login_url,
    match_route,
    resolve,
    safe_next,
)

LOADING = SessionSnapshot()
SIGNED_OUT = SessionSnapshot(user=None, session=None, loading=False)
SIGNED_IN = SessionSnapshot(
    user=User(id="u-1", email="someone@example.com"),
    session=AuthTokens(access_token="token"),
    loading=False,
)


def test_guard_while_loading():
    """Test that nothing is decided while the session loads."""
    assert guard(LOADING, "/clients") == Placeholder()


def test_guard_without_user():
    """Test the redirect to the login page, keeping the requested path."""
    decision = guard(SIGNED_OUT, "/clients")

    assert isinstance(decision, Redirect)
    assert decision.to == "/login"
    assert decision.from_path == "/clients"
    assert decision.url == "/login?next=/clients"


def test_guard_with_user():
    """Test that a signed-in user is allowed through."""
    assert guard(SIGNED_IN, "/products/p-0001/edit") == Allow()


def test_guard_has_no_side_effects():
    """Test that repeated decisions are identical."""
    assert guard(SIGNED_OUT, "/factures") == guard(SIGNED_OUT, "/factures")


def test_login_url_for_home():
    """Test that the home path needs no return parameter."""
    assert login_url("/") == "/login"
    assert login_url(None) == "/login"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("/clients", "/clients"),
        ("/products/p-0001/edit", "/products/p-0001/edit"),
        ("/factures?status=paid", "/factures?status=paid"),
        (None, "/"),
        ("", "/"),
        ("https://evil.example.com", "/"),
        ("//evil.example.com", "/"),
        ("/\\evil.example.com", "/"),
        ("javascript:alert(1)", "/"),
        ("clients", "/"),
        ("/login", "/"),
        ("/signup", "/"),
    ],
)
def test_safe_next(value, expected):
    """Test that only local paths are accepted after sign-in."""
    assert safe_next(value) == expected


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/", "/"),
        ("/clients", "/clients"),
        ("/clients/", "/clients"),
        ("/products/new", "/products/new"),
        ("/products/p-0001/edit", "/products/[product_id]/edit"),
        ("/login", "/login"),
        ("/unknown", None),
        ("/products/p-0001", None),
    ],
)
def test_match_route(path, expected):
    """Test the route templates serving each path."""
    assert match_route(path) == expected


def test_unknown_paths_resolve_home():
    """Test that unknown paths are sent to the home page."""
    assert resolve("/nowhere") == "/"
    assert resolve("/clients") == "/clients"


def test_public_paths():
    assert is_public("/login")
    assert is_public("/signup")
    assert not is_public("/")
    assert not is_public("/clients")
