"""
Abstract base class defining the backend service contract.

The ERP UI consumes a hosted backend for authentication and table storage.
Every operation returns a Result value: Ok on success, Err(ServiceError) on
failure. Failures are surfaced once and never retried.

Implementations:
- SupabaseBackend: the hosted Supabase project (auth + PostgREST tables)
- DemoBackend: in-memory tables and users for local development and tests
- UnconfiguredBackend: stands in when credentials are missing
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping

from erp_ui.models.common import Err, Result, ServiceError
from erp_ui.models.session import AuthSession

CLIENTS_TABLE = "clients"
FACTURES_TABLE = "factures"
PRODUCTS_TABLE = "products"

# Auth events emitted by the backend (subset of the Supabase event names)
SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
TOKEN_REFRESHED = "TOKEN_REFRESHED"

AuthListener = Callable[[str, AuthSession | None], None]
Unsubscribe = Callable[[], None]


class Backend(ABC):
    """
    Abstract base class for backend access.

    Subclasses provide the six capabilities the UI relies on: sign-in,
    sign-up, sign-out, auth-change subscription, current-session fetch and
    table reads/writes.
    """

    @abstractmethod
    def get_session(self) -> Result:
        """Return Ok(AuthSession | None) for the current session."""

    @abstractmethod
    def on_auth_state_change(self, listener: AuthListener) -> Unsubscribe:
        """
        Register a listener for auth events.

        Args:
            listener: Called with the event name and the new session
                      (None when signed out), in arrival order.

        Returns:
            Callable that removes the listener.
        """

    @abstractmethod
    def sign_in(self, email: str, password: str) -> Result:
        """Sign in with e-mail and password. Returns Ok(AuthSession | None)."""

    @abstractmethod
    def sign_up(self, email: str, password: str) -> Result:
        """
        Register a new account.

        Returns:
            Ok(AuthSession) when signed in immediately, Ok(None) when the
            account still needs e-mail confirmation.
        """

    @abstractmethod
    def sign_out(self) -> Result:
        """End the current session. Returns Ok(None)."""

    @abstractmethod
    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> Result:
        """
        Read rows from a table.

        Args:
            table: Table name.
            columns: PostgREST column list; may embed a related table,
                     e.g. "*, clients(name)".
            filters: Column -> value equality filters.
            order_by: Column to sort by, or None.
            descending: Sort direction.
            limit: Maximum number of rows.

        Returns:
            Ok(list of row dicts).
        """

    @abstractmethod
    def insert(self, table: str, row: Mapping[str, Any]) -> Result:
        """Insert a row. Returns Ok(inserted row)."""

    @abstractmethod
    def update(self, table: str, row_id: str, values: Mapping[str, Any]) -> Result:
        """Update the row with the given id. Returns Ok(updated row)."""

    @abstractmethod
    def delete(self, table: str, row_id: str) -> Result:
        """Delete the row with the given id. Returns Ok(row_id)."""

    @property
    def configured(self) -> bool:
        """Return True if the backend can serve requests."""
        return True


class UnconfiguredBackend(Backend):
    """
    Backend used when the Supabase credentials are missing.

    Every call fails with the same explanatory error, so views show what to
    fix instead of the application refusing to start.
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        self._error = ServiceError(
            message=(
                "Configuration Supabase manquante : "
                f"{', '.join(self.missing)}. Vérifiez les variables d'environnement."
            ),
            code="config_missing",
        )

    @property
    def configured(self) -> bool:
        return False

    def get_session(self) -> Result:
        return Err(self._error)

    def on_auth_state_change(self, listener: AuthListener) -> Unsubscribe:
        return lambda: None

    def sign_in(self, email: str, password: str) -> Result:
        return Err(self._error)

    def sign_up(self, email: str, password: str) -> Result:
        return Err(self._error)

    def sign_out(self) -> Result:
        return Err(self._error)

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> Result:
        return Err(self._error)

    def insert(self, table: str, row: Mapping[str, Any]) -> Result:
        return Err(self._error)

    def update(self, table: str, row_id: str, values: Mapping[str, Any]) -> Result:
        return Err(self._error)

    def delete(self, table: str, row_id: str) -> Result:
        return Err(self._error)
