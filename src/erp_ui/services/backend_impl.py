"""
Supabase-backed implementation of Backend.

Wraps the shared Supabase client: gotrue for authentication and PostgREST
for the `clients`, `factures` and `products` tables. Row-level security is
enforced by the project; this module only forwards requests.

Client library exceptions are converted into Err(ServiceError) at this
boundary and logged once. Nothing is retried.
"""

from typing import Any, Callable, Mapping

from supabase import Client

from erp_ui.lib import logs
from erp_ui.models.common import Err, Ok, Result, ServiceError
from erp_ui.models.session import AuthSession
from erp_ui.services.backend import AuthListener, Backend, Unsubscribe

LOG = logs.logger(__file__)


class SupabaseBackend(Backend):
    """
    Production backend using a Supabase project.

    Attributes:
        client: Shared Supabase client (see erp_ui.lib.clients).
    """

    def __init__(self, client: Client) -> None:
        self.client = client

    def get_session(self) -> Result:
        return self._call(
            "get_session",
            lambda: AuthSession.from_supabase(self.client.auth.get_session()),
        )

    def on_auth_state_change(self, listener: AuthListener) -> Unsubscribe:
        def _handler(event: Any, session: Any) -> None:
            listener(str(event), AuthSession.from_supabase(session))

        subscription = self.client.auth.on_auth_state_change(_handler)
        return subscription.unsubscribe

    def sign_in(self, email: str, password: str) -> Result:
        return self._call(
            "sign_in",
            lambda: AuthSession.from_supabase(
                self.client.auth.sign_in_with_password(
                    {"email": email, "password": password}
                ).session
            ),
        )

    def sign_up(self, email: str, password: str) -> Result:
        return self._call(
            "sign_up",
            lambda: AuthSession.from_supabase(
                self.client.auth.sign_up({"email": email, "password": password}).session
            ),
        )

    def sign_out(self) -> Result:
        return self._call("sign_out", lambda: self.client.auth.sign_out())

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> Result:
        def _run() -> list[dict]:
            query = self.client.table(table).select(columns)
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            if order_by:
                query = query.order(order_by, desc=descending)
            if limit is not None:
                query = query.limit(limit)
            return list(query.execute().data or [])

        return self._call(f"select {table}", _run)

    def insert(self, table: str, row: Mapping[str, Any]) -> Result:
        result = self._call(
            f"insert {table}",
            lambda: self.client.table(table).insert(dict(row)).execute().data,
        )
        return _first_row(result, table)

    def update(self, table: str, row_id: str, values: Mapping[str, Any]) -> Result:
        result = self._call(
            f"update {table}",
            lambda: self.client.table(table)
            .update(dict(values))
            .eq("id", row_id)
            .execute()
            .data,
        )
        return _first_row(result, table)

    def delete(self, table: str, row_id: str) -> Result:
        result = self._call(
            f"delete {table}",
            lambda: self.client.table(table).delete().eq("id", row_id).execute(),
        )
        return Ok(row_id) if isinstance(result, Ok) else result

    def _call(self, operation: str, func: Callable[[], Any]) -> Result:
        """Run a client call, turning exceptions into Err(ServiceError)."""
        try:
            value = func()
        except Exception as exc:
            LOG.error("%s failed: %s", operation, exc, exc_info=True)
            return Err(ServiceError.from_exception(exc))
        LOG.debug("%s succeeded", operation)
        return Ok(value)


def _first_row(result: Result, table: str) -> Result:
    """Reduce a list-of-rows result to its first row."""
    if isinstance(result, Err):
        return result
    rows = result.value or []
    if not rows:
        # Row-level security hides rows the user does not own
        return Err(ServiceError(f"Aucune ligne retournée par la table {table}", "not_found"))
    return Ok(rows[0])
