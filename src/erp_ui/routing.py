"""
Route table and access decisions.

`guard()` is a pure function of the session snapshot and the requested
path; the Reflex layer turns its decision into a redirect or a page.
"""

import re
from dataclasses import dataclass
from urllib.parse import quote, urlsplit

from erp_ui.models.session import SessionSnapshot

LOGIN_PATH = "/login"
SIGNUP_PATH = "/signup"
HOME_PATH = "/"
NEXT_PARAM = "next"

PUBLIC_PATHS = (LOGIN_PATH, SIGNUP_PATH)

# Route templates as registered with Reflex
PROTECTED_ROUTES = (
    HOME_PATH,
    "/clients",
    "/factures",
    "/products",
    "/products/new",
    "/products/[product_id]/edit",
)

_PARAM_PATTERN = re.compile(r"\[(\w+)\]")


@dataclass(frozen=True, slots=True)
class Placeholder:
    """The session is still loading; render a neutral placeholder."""


@dataclass(frozen=True, slots=True)
class Allow:
    """Render the requested view."""


@dataclass(frozen=True, slots=True)
class Redirect:
    """
    Navigate elsewhere.

    Attributes:
        to: Target path.
        from_path: The path originally requested, kept for the return trip.
    """

    to: str
    from_path: str | None = None

    @property
    def url(self) -> str:
        if self.from_path and self.from_path != HOME_PATH:
            return f"{self.to}?{NEXT_PARAM}={quote(self.from_path, safe='/')}"
        return self.to


Decision = Placeholder | Allow | Redirect


def guard(snapshot: SessionSnapshot, path: str) -> Decision:
    """
    Decide what a protected route shows.

    Args:
        snapshot: Current session state.
        path: The requested path.

    Returns:
        Placeholder while loading, Redirect to the login page without a user,
        otherwise Allow.
    """
    if snapshot.loading:
        return Placeholder()
    if snapshot.user is None:
        return Redirect(LOGIN_PATH, from_path=path)
    return Allow()


def login_url(path: str | None) -> str:
    return Redirect(LOGIN_PATH, from_path=path).url


def is_public(path: str) -> bool:
    return _strip(path) in PUBLIC_PATHS


def match_route(path: str) -> str | None:
    """
    Find the route template serving path.

    Returns:
        The template (e.g. "/products/[product_id]/edit") or None.
    """
    path = _strip(path)
    if path in PUBLIC_PATHS:
        return path
    segments = path.split("/")
    for template in PROTECTED_ROUTES:
        expected = template.split("/")
        if len(expected) != len(segments):
            continue
        if all(
            want == got or (bool(got) and _PARAM_PATTERN.fullmatch(want) is not None)
            for want, got in zip(expected, segments)
        ):
            return template
    return None


def resolve(path: str) -> str:
    """Return path itself when a route serves it, otherwise the home path."""
    return path if match_route(path) is not None else HOME_PATH


def safe_next(value: str | None) -> str:
    """
    Sanitize the post-login return path.

    Only local absolute paths are accepted; anything that could leave the
    site, or loop back to an auth page, yields the home path.
    """
    if not value:
        return HOME_PATH
    value = value.strip()
    if not value.startswith("/") or value.startswith("//") or "\\" in value:
        return HOME_PATH
    parts = urlsplit(value)
    if parts.scheme or parts.netloc:
        return HOME_PATH
    if is_public(parts.path):
        return HOME_PATH
    return value


def _strip(path: str) -> str:
    path = urlsplit(path or HOME_PATH).path or HOME_PATH
    if len(path) > 1:
        path = path.rstrip("/") or HOME_PATH
    return path
