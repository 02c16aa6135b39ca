"""
Application bootstrap.

Settings are built once per process. Everything tied to a user lives in a
`VisitorContext`: the backend (and with it the Supabase client holding that
user's tokens), the session store and the record services. A
`SessionRegistry` keeps one VisitorContext per browser session, keyed by the
Reflex client token, so a sign-in in one browser never authenticates
another. Reflex state classes reach their visitor through `current()`.
"""

import threading
from dataclasses import dataclass
from typing import Callable

from erp_ui import config
from erp_ui.lib import clients, logs
from erp_ui.services import (
    Backend,
    ClientService,
    DashboardService,
    FactureService,
    ProductService,
    create_backend,
)
from erp_ui.session import SessionStore

LOG = logs.logger(__file__)

BackendFactory = Callable[[str], Backend]


@dataclass(slots=True)
class VisitorContext:
    """Session store and record services of one browser session."""

    key: str
    backend: Backend
    store: SessionStore
    clients: ClientService
    factures: FactureService
    products: ProductService
    dashboard: DashboardService


def build_visitor(key: str, backend: Backend) -> VisitorContext:
    """Wire a session store and the record services around one backend."""
    return VisitorContext(
        key=key,
        backend=backend,
        store=SessionStore(backend),
        clients=ClientService(backend),
        factures=FactureService(backend),
        products=ProductService(backend),
        dashboard=DashboardService(backend),
    )


class SessionRegistry:
    """
    One VisitorContext per browser session, created on first use.

    Args:
        backend_factory: Builds the backend of a session from its key.
    """

    def __init__(self, backend_factory: BackendFactory) -> None:
        self._backend_factory = backend_factory
        self._lock = threading.Lock()
        self._visitors: dict[str, VisitorContext] = {}

    def get(self, key: str) -> VisitorContext:
        """
        Return the visitor of a session with its store initialized.

        Args:
            key: Reflex client token.
        """
        with self._lock:
            visitor = self._visitors.get(key)
            if visitor is None:
                LOG.info("New browser session %s", key[:8])
                visitor = build_visitor(key, self._backend_factory(key))
                self._visitors[key] = visitor
        visitor.store.init()
        return visitor

    def discard(self, key: str) -> None:
        """Close the store of a session and release its client."""
        with self._lock:
            visitor = self._visitors.pop(key, None)
        if visitor is None:
            return
        visitor.store.close()
        clients.release(key)
        LOG.info("Closed browser session %s", key[:8])

    def __contains__(self, key: str) -> bool:
        return key in self._visitors

    def __len__(self) -> int:
        return len(self._visitors)


@dataclass(slots=True)
class AppContext:
    """Process-wide settings and the per-session registry."""

    settings: config.Settings
    sessions: SessionRegistry


def bootstrap(
    settings: config.Settings | None = None,
    backend_factory: BackendFactory | None = None,
) -> AppContext:
    """
    Wire the application together.

    Args:
        settings: Settings to use, the environment's by default.
        backend_factory: Backend per session key, resolved from settings by
                         default.

    Returns:
        AppContext without any browser session yet.
    """
    settings = settings or config.settings()
    if backend_factory is None:

        def backend_factory(key: str) -> Backend:
            return create_backend(settings, session_key=key)

    LOG.info("Bootstrapping with service %s", settings.service)
    return AppContext(settings=settings, sessions=SessionRegistry(backend_factory))


_CONTEXT: clients.Lazy[AppContext] = clients.Lazy(bootstrap, "application context")


def application() -> AppContext:
    """Return the process-wide context."""
    return _CONTEXT.get()


def current(session_key: str) -> VisitorContext:
    """Return the visitor of a browser session with an initialized store."""
    return application().sessions.get(session_key)
