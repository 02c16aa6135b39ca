"""
Supabase client factory.

A Supabase client keeps the signed-in user's tokens and sends them with
every table request, so row-level security sees that user. Each browser
session therefore gets its own client, built on first use and reused until
the session is released. Handles are keyed by the Reflex client token.

Construction is guarded by a lock: concurrent first callers for the same
key still get exactly one client.
"""

import threading
from typing import Callable, Generic, TypeVar

from supabase import Client, ClientOptions, create_client

from erp_ui import config
from erp_ui.lib import logs

LOG = logs.logger(__file__)

T = TypeVar("T")

# Key used outside of a browser session (scripts, tests)
DEFAULT_SESSION_KEY = "default"


class Lazy(Generic[T]):
    """
    Construct-on-first-use holder for a shared handle.

    Attributes:
        name: Label used in log output.
    """

    def __init__(self, factory: Callable[[], T], name: str) -> None:
        self.name = name
        self._factory = factory
        self._lock = threading.Lock()
        self._instance: T | None = None

    def get(self) -> T:
        """Return the shared instance, creating it if necessary."""
        instance = self._instance
        if instance is not None:
            LOG.debug("Reusing %s", self.name)
            return instance
        with self._lock:
            if self._instance is None:
                LOG.info("Creating %s", self.name)
                self._instance = self._factory()
            return self._instance

    def reset(self) -> None:
        """Drop the shared instance so the next get() builds a new one."""
        with self._lock:
            self._instance = None


class LazyMap(Generic[T]):
    """
    Construct-on-first-use handles, one per key.

    Attributes:
        name: Label used in log output.
    """

    def __init__(self, factory: Callable[[str], T], name: str) -> None:
        self.name = name
        self._factory = factory
        self._lock = threading.Lock()
        self._instances: dict[str, T] = {}

    def get(self, key: str) -> T:
        """Return the handle for key, creating it if necessary."""
        with self._lock:
            instance = self._instances.get(key)
            if instance is None:
                LOG.info("Creating %s for session %s", self.name, key[:8])
                instance = self._factory(key)
                self._instances[key] = instance
            return instance

    def pop(self, key: str) -> T | None:
        """Forget the handle for key and return it, if there was one."""
        with self._lock:
            return self._instances.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._instances.clear()

    def __len__(self) -> int:
        return len(self._instances)


def _options() -> ClientOptions:
    return ClientOptions(
        auto_refresh_token=True,
        persist_session=True,
        headers={"X-Client-Info": config.CLIENT_INFO},
    )


def create_supabase(settings: config.Settings) -> Client:
    """
    Build a new Supabase client from settings.

    Raises:
        ValueError: If the URL or anon key is missing.
    """
    if not settings.backend_configured:
        raise ValueError(f"Missing backend configuration: {', '.join(settings.missing)}")
    return create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        options=_options(),
    )


_SUPABASE: LazyMap[Client] = LazyMap(
    lambda key: create_supabase(config.settings()), "Supabase client"
)


def supabase(session_key: str = DEFAULT_SESSION_KEY) -> Client:
    """
    Return the Supabase client of a browser session, creating one if necessary.

    Args:
        session_key: Reflex client token of the browser session.

    Returns:
        Configured Client with session persistence and token auto-refresh.
    """
    return _SUPABASE.get(session_key)


def release(session_key: str) -> None:
    """Forget the client of a browser session."""
    if _SUPABASE.pop(session_key) is not None:
        LOG.info("Released Supabase client for session %s", session_key[:8])


def reset() -> None:
    """Forget every client (used by tests and after reconfiguration)."""
    _SUPABASE.clear()
