"""
Backend factory for the ERP UI.

This module provides the create_backend() factory function that returns
the Backend of one browser session, based on configuration.

Available Implementations:
- demo: In-memory backend with demo account and rows (no Supabase required).
  Every session shares the same in-memory tables.
- supabase: Hosted Supabase project (requires SUPABASE_URL and SUPABASE_ANON_KEY).
  Every session gets its own client, so tokens never cross sessions.

When the Supabase credentials are missing, an UnconfiguredBackend is returned
so the UI still starts and reports the problem. Configure the kind via the
ERP_UI_SERVICE environment variable.
"""

from typing import Callable, Dict

from erp_ui.config import Settings
from erp_ui.lib import clients, logs
from erp_ui.services.backend import Backend, UnconfiguredBackend
from erp_ui.services.backend_demo import DemoBackend, DemoDatabase
from erp_ui.services.backend_impl import SupabaseBackend
from erp_ui.services.records import (
    ClientService,
    DashboardService,
    FactureService,
    ProductService,
    StockOperation,
)

LOG = logs.logger(__file__)

_DEMO_DATABASE: clients.Lazy[DemoDatabase] = clients.Lazy(DemoDatabase, "demo database")


def _demo_backend(settings: Settings, session_key: str) -> Backend:
    return DemoBackend(database=_DEMO_DATABASE.get())


def _supabase_backend(settings: Settings, session_key: str) -> Backend:
    if not settings.backend_configured:
        LOG.warning("Supabase backend unavailable, missing: %s", settings.missing)
        return UnconfiguredBackend(settings.missing)
    return SupabaseBackend(clients.supabase(session_key))


_BACKEND_REGISTRY: Dict[str, Callable[[Settings, str], Backend]] = {
    "demo": _demo_backend,
    "supabase": _supabase_backend,
}


def create_backend(
    settings: Settings,
    kind: str | None = None,
    session_key: str = clients.DEFAULT_SESSION_KEY,
) -> Backend:
    """
    Return the backend implementation for one browser session.

    Args:
        settings: Resolved application settings.
        kind: Override of settings.service.
        session_key: Reflex client token of the browser session.

    Raises:
        ValueError: If the kind is not registered.
    """
    resolved_kind = (kind or settings.service).lower()
    LOG.info("create_backend - kind:%s resolved_kind:%s", kind, resolved_kind)
    try:
        factory = _BACKEND_REGISTRY[resolved_kind]
    except KeyError as exc:
        msg = f"Unknown backend kind: {resolved_kind}"
        raise ValueError(msg) from exc
    return factory(settings, session_key)


__all__ = [
    "Backend",
    "ClientService",
    "DashboardService",
    "DemoBackend",
    "DemoDatabase",
    "FactureService",
    "ProductService",
    "StockOperation",
    "SupabaseBackend",
    "UnconfiguredBackend",
    "create_backend",
]
