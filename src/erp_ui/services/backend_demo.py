"""
Demo implementation of Backend using in-memory tables and accounts.

This backend is useful for:
- Local development without a Supabase project
- Testing the session store, repositories and UI with realistic data
- Demonstrating the application without cloud dependencies

Tables and accounts live in a `DemoDatabase`, which every browser session
of the process shares. Each `DemoBackend` holds the auth session of one
browser session only. Auth events are delivered synchronously to listeners
in the order the operations happen, like the Supabase client does.
"""

import copy
import re
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping

from erp_ui.data.demo_records import (
    DEMO_CLIENTS,
    DEMO_EMAIL,
    DEMO_FACTURES,
    DEMO_PASSWORD,
    DEMO_PRODUCTS,
)
from erp_ui.lib import logs
from erp_ui.models.common import Err, Ok, Result, ServiceError
from erp_ui.models.session import AuthSession, AuthTokens, User
from erp_ui.services.backend import (
    CLIENTS_TABLE,
    FACTURES_TABLE,
    PRODUCTS_TABLE,
    SIGNED_IN,
    SIGNED_OUT,
    TOKEN_REFRESHED,
    AuthListener,
    Backend,
    Unsubscribe,
)

LOG = logs.logger(__file__)

# Matches embedded relations such as "clients(name, email)"
_EMBED_PATTERN = re.compile(r"(\w+)\(([^)]*)\)")

_MIN_PASSWORD_LENGTH = 6
_TOKEN_LIFETIME_SECONDS = 3600


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _sort_key(value: Any) -> tuple:
    # None sorts first ascending, like Postgres NULLS FIRST on DESC
    return (value is not None, value if value is not None else "")


class DemoDatabase:
    """
    Tables and accounts shared by the demo backends of a process.

    Args:
        tables: Initial rows per table, or None for the demo fixtures.
        users: E-mail -> password accounts, or None for the demo account.
        seed: When False and tables is None, start with empty tables.
    """

    def __init__(
        self,
        tables: Mapping[str, list[dict]] | None = None,
        users: Mapping[str, str] | None = None,
        seed: bool = True,
    ) -> None:
        if tables is None:
            tables = (
                {
                    CLIENTS_TABLE: DEMO_CLIENTS,
                    FACTURES_TABLE: DEMO_FACTURES,
                    PRODUCTS_TABLE: DEMO_PRODUCTS,
                }
                if seed
                else {}
            )
        self.tables: dict[str, list[dict]] = {
            name: copy.deepcopy(list(rows)) for name, rows in tables.items()
        }
        for name in (CLIENTS_TABLE, FACTURES_TABLE, PRODUCTS_TABLE):
            self.tables.setdefault(name, [])

        self.passwords: dict[str, str] = dict(
            users if users is not None else {DEMO_EMAIL: DEMO_PASSWORD}
        )
        self.user_ids: dict[str, str] = {
            email: str(uuid.uuid5(uuid.NAMESPACE_URL, email)) for email in self.passwords
        }
        self.lock = threading.RLock()

    def find(self, table: str, row_id: str | None) -> dict | None:
        for row in self.tables.get(table, []):
            if row.get("id") == row_id:
                return row
        return None


class DemoBackend(Backend):
    """
    In-memory backend for one browser session.

    Args:
        tables: Initial rows per table when no database is given.
        users: Accounts when no database is given.
        seed: When False and tables is None, start with empty tables.
        database: Shared tables and accounts; a private one is created
                  from the other arguments when None.
    """

    def __init__(
        self,
        tables: Mapping[str, list[dict]] | None = None,
        users: Mapping[str, str] | None = None,
        seed: bool = True,
        database: DemoDatabase | None = None,
    ) -> None:
        self.database = database or DemoDatabase(tables, users, seed)
        self._session: AuthSession | None = None
        self._listeners: list[AuthListener] = []
        self._lock = threading.RLock()

    # Auth

    def get_session(self) -> Result:
        return Ok(self._session)

    def on_auth_state_change(self, listener: AuthListener) -> Unsubscribe:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def sign_in(self, email: str, password: str) -> Result:
        email = (email or "").strip().lower()
        db = self.database
        with db.lock:
            accepted = bool(password) and db.passwords.get(email) == password
        if not accepted:
            LOG.info("Demo sign-in rejected for %s", email)
            return Err(ServiceError("Invalid login credentials", "invalid_credentials"))
        return Ok(self._start_session(email))

    def sign_up(self, email: str, password: str) -> Result:
        email = (email or "").strip().lower()
        db = self.database
        with db.lock:
            if not email or "@" not in email:
                return Err(ServiceError("Unable to validate email address", "email_address_invalid"))
            if email in db.passwords:
                return Err(ServiceError("User already registered", "user_already_exists"))
            if len(password or "") < _MIN_PASSWORD_LENGTH:
                return Err(
                    ServiceError(
                        f"Password should be at least {_MIN_PASSWORD_LENGTH} characters",
                        "weak_password",
                    )
                )
            db.passwords[email] = password
            db.user_ids[email] = str(uuid.uuid4())
        LOG.info("Demo account created for %s", email)
        return Ok(self._start_session(email))

    def sign_out(self) -> Result:
        with self._lock:
            self._session = None
            self._notify(SIGNED_OUT, None)
        return Ok(None)

    def refresh_session(self) -> Result:
        """Issue new tokens for the current session and emit TOKEN_REFRESHED."""
        with self._lock:
            if self._session is None:
                return Err(ServiceError("Auth session missing!", "session_not_found"))
            self._session = AuthSession(user=self._session.user, tokens=self._new_tokens())
            self._notify(TOKEN_REFRESHED, self._session)
            return Ok(self._session)

    def _start_session(self, email: str) -> AuthSession:
        with self._lock:
            self._session = AuthSession(
                user=User(id=self.database.user_ids[email], email=email),
                tokens=self._new_tokens(),
            )
            self._notify(SIGNED_IN, self._session)
            return self._session

    def _new_tokens(self) -> AuthTokens:
        return AuthTokens(
            access_token=f"demo-access-{uuid.uuid4().hex}",
            refresh_token=f"demo-refresh-{uuid.uuid4().hex}",
            expires_at=int(datetime.now(timezone.utc).timestamp()) + _TOKEN_LIFETIME_SECONDS,
        )

    def _notify(self, event: str, session: AuthSession | None) -> None:
        LOG.info("Demo auth event: %s", event)
        for listener in list(self._listeners):
            listener(event, session)

    # Tables

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> Result:
        db = self.database
        with db.lock:
            if table not in db.tables:
                return self._missing_table(table)
            rows = [
                row
                for row in db.tables[table]
                if all(row.get(column) == value for column, value in (filters or {}).items())
            ]
            if order_by:
                rows = sorted(
                    rows, key=lambda row: _sort_key(row.get(order_by)), reverse=descending
                )
            if limit is not None:
                rows = rows[:limit]
            return Ok([self._embed(copy.deepcopy(row), columns) for row in rows])

    def insert(self, table: str, row: Mapping[str, Any]) -> Result:
        db = self.database
        with db.lock:
            if table not in db.tables:
                return self._missing_table(table)
            now = _now()
            stored = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now}
            stored.update(row)
            db.tables[table].append(stored)
            return Ok(copy.deepcopy(stored))

    def update(self, table: str, row_id: str, values: Mapping[str, Any]) -> Result:
        db = self.database
        with db.lock:
            row = db.find(table, row_id)
            if row is None:
                return self._missing_row(table, row_id)
            row.update(values)
            return Ok(copy.deepcopy(row))

    def delete(self, table: str, row_id: str) -> Result:
        db = self.database
        with db.lock:
            row = db.find(table, row_id)
            if row is None:
                return self._missing_row(table, row_id)
            db.tables[table].remove(row)
            return Ok(row_id)

    def _embed(self, row: dict, columns: str) -> dict:
        """Attach related rows for "relation(cols)" entries in columns."""
        for relation, related_columns in _EMBED_PATTERN.findall(columns):
            # clients -> client_id
            foreign_key = f"{relation.rstrip('s')}_id"
            related = self.database.find(relation, row.get(foreign_key))
            if related is None:
                row[relation] = None
                continue
            wanted = [name.strip() for name in related_columns.split(",") if name.strip()]
            if not wanted or "*" in wanted:
                row[relation] = copy.deepcopy(related)
            else:
                row[relation] = {name: related.get(name) for name in wanted}
        return row

    def _missing_table(self, table: str) -> Result:
        return Err(
            ServiceError(f'relation "public.{table}" does not exist', "42P01")
        )

    def _missing_row(self, table: str, row_id: str) -> Result:
        return Err(
            ServiceError(f"Ligne {row_id} introuvable dans la table {table}", "not_found")
        )
