"""
Session store of one browser session.

Holds the current SessionSnapshot of a single backend (and so of a single
browser session) and keeps it in sync with the backend's
auth events. There is a single writer path (the auth-event handler and the
initial session fetch, both funnelled through `_replace`) and any number of
readers, who either read `snapshot` or register a listener.

Lifecycle:

    uninitialized --init()--> loading --fetch or event--> authenticated
                                                      \\-> unauthenticated

After the first result, every auth event (sign-in, token refresh, sign-out)
replaces the snapshot again. `loading` never returns to True.
"""

import threading
from typing import Callable

from erp_ui.lib import logs
from erp_ui.models.common import Err, Result, ServiceError
from erp_ui.models.session import AuthSession, SessionSnapshot
from erp_ui.services.backend import SIGNED_OUT, Backend, Unsubscribe

LOG = logs.logger(__file__)

SnapshotListener = Callable[[SessionSnapshot], None]


class SessionStore:
    """
    Observable holder of the authenticated session.

    Attributes:
        backend: Backend providing the session and auth events.
    """

    def __init__(self, backend: Backend) -> None:
        self.backend = backend
        self._lock = threading.RLock()
        self._snapshot = SessionSnapshot()
        self._listeners: list[SnapshotListener] = []
        self._unsubscribe: Unsubscribe | None = None
        self._initialized = False
        # Bumped on every replacement; lets a slow fetch detect newer events
        self._version = 0

    @property
    def snapshot(self) -> SessionSnapshot:
        """The current immutable snapshot."""
        return self._snapshot

    @property
    def initialized(self) -> bool:
        return self._initialized

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register a reader notified with every new snapshot, in order.

        Returns:
            Callable that removes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def init(self) -> SessionSnapshot:
        """
        Subscribe to auth events and fetch the current session once.

        Calling init() again is a no-op that returns the current snapshot.
        Whatever happens, loading is False when the first call returns.
        """
        with self._lock:
            if self._initialized:
                return self._snapshot
            self._initialized = True
            version = self._version

        LOG.info("Initializing session store")
        try:
            self._unsubscribe = self.backend.on_auth_state_change(self._on_auth_event)
        except Exception:
            LOG.error("Auth event subscription failed", exc_info=True)

        try:
            result = self.backend.get_session()
        except Exception as exc:
            LOG.error("Initial session fetch raised", exc_info=True)
            result = Err(ServiceError.from_exception(exc))

        auth_session: AuthSession | None = None
        if isinstance(result, Err):
            LOG.warning("Initial session fetch failed: %s", result.error)
        else:
            auth_session = result.value

        if not self._replace(
            SessionSnapshot.resolved(auth_session), "initial fetch", expected_version=version
        ):
            LOG.info("Initial fetch superseded by a newer auth event")
        return self._snapshot

    def close(self) -> None:
        """Stop listening to auth events."""
        with self._lock:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def sign_in(self, email: str, password: str) -> Result:
        """Sign in; the resulting auth event updates the snapshot."""
        LOG.info("Sign-in requested for %s", email)
        return self._log_failure("sign_in", self.backend.sign_in(email, password))

    def sign_up(self, email: str, password: str) -> Result:
        LOG.info("Sign-up requested for %s", email)
        return self._log_failure("sign_up", self.backend.sign_up(email, password))

    def sign_out(self) -> Result:
        LOG.info("Sign-out requested")
        return self._log_failure("sign_out", self.backend.sign_out())

    def _on_auth_event(self, event: str, auth_session: AuthSession | None) -> None:
        if event == SIGNED_OUT:
            auth_session = None
        LOG.info(
            "Auth event %s (user=%s)",
            event,
            auth_session.user.email if auth_session else None,
        )
        self._replace(SessionSnapshot.resolved(auth_session), event)

    def _replace(
        self,
        snapshot: SessionSnapshot,
        source: str,
        expected_version: int | None = None,
    ) -> bool:
        """
        Swap in a new snapshot and notify listeners.

        Args:
            snapshot: Replacement state.
            source: Label for log output.
            expected_version: When set, the swap only happens if no other
                              replacement occurred since that version.

        Returns:
            True if the snapshot was replaced.
        """
        with self._lock:
            if expected_version is not None and expected_version != self._version:
                return False
            self._version += 1
            self._snapshot = snapshot
            LOG.debug("Session replaced by %s: %s", source, snapshot)
            # Notified under the lock so listeners see snapshots in order
            for listener in list(self._listeners):
                try:
                    listener(snapshot)
                except Exception:
                    LOG.error("Session listener failed", exc_info=True)
            return True

    @staticmethod
    def _log_failure(operation: str, result: Result) -> Result:
        if isinstance(result, Err):
            LOG.warning("%s failed: %s", operation, result.error)
        return result
