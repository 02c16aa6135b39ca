"""
Access checks run by the Reflex event handlers.

Every function takes the VisitorContext of the browser session that sent
the event, so one visitor's session never decides for another. Handlers
that read or write rows call `require_user()` first: an on_load redirect
does not stop the handlers queued after it, and mutations can be sent
without any page load at all.
"""

from erp_ui import routing
from erp_ui.context import VisitorContext
from erp_ui.lib import logs
from erp_ui.models.common import Err, Ok, Result, ServiceError

LOG = logs.logger(__file__)

MISSING_CREDENTIALS = "Email et mot de passe requis"
PASSWORD_MISMATCH = "Les mots de passe ne correspondent pas"


def page_redirect(visitor: VisitorContext, path: str) -> str | None:
    """
    Apply the route guard to a protected page.

    Returns:
        The login URL (carrying `next`) when nobody is signed in, else None.
    """
    decision = routing.guard(visitor.store.snapshot, path)
    LOG.debug("Guard %s -> %s", path, decision)
    if isinstance(decision, routing.Redirect):
        return decision.url
    return None


def public_redirect(visitor: VisitorContext, next_value: str | None) -> str | None:
    """Where a signed-in visitor of the login or signup page goes instead."""
    if visitor.store.snapshot.authenticated:
        return routing.safe_next(next_value)
    return None


def require_user(visitor: VisitorContext, action: str) -> bool:
    """
    Check that the visitor is signed in before touching any rows.

    Args:
        visitor: Browser session sending the event.
        action: Event name for log output.
    """
    if visitor.store.snapshot.authenticated:
        return True
    LOG.warning("Refused %s for session %s: not signed in", action, visitor.key[:8])
    return False


def sign_in(
    visitor: VisitorContext, email: str, password: str, next_value: str | None
) -> Result:
    """
    Sign a visitor in.

    Returns:
        Ok(path to open next) or Err(ServiceError) with the message to show.
    """
    email = (email or "").strip()
    if not email or not password:
        return Err(ServiceError(MISSING_CREDENTIALS, "missing_credentials"))
    result = visitor.store.sign_in(email, password)
    if isinstance(result, Err):
        return result
    return Ok(routing.safe_next(next_value))


def sign_up(
    visitor: VisitorContext, email: str, password: str, confirm_password: str
) -> Result:
    """
    Create an account and sign it in when the backend allows it.

    Returns:
        Ok(session), Ok(None) when e-mail confirmation is pending, or Err.
    """
    if password != confirm_password:
        return Err(ServiceError(PASSWORD_MISMATCH, "password_mismatch"))
    return visitor.store.sign_up((email or "").strip(), password)
