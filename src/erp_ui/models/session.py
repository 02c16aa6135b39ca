"""
Authenticated session models.

A `SessionSnapshot` is immutable: the session store replaces it wholesale on
every auth event, so a reader never observes a half-applied update.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class User:
    """Authenticated identity."""

    id: str
    email: str | None = None


@dataclass(frozen=True, slots=True)
class AuthTokens:
    """Raw session token material issued by the backend."""

    access_token: str
    refresh_token: str | None = None
    expires_at: int | None = None


@dataclass(frozen=True, slots=True)
class AuthSession:
    """A signed-in user together with their tokens."""

    user: User
    tokens: AuthTokens

    @classmethod
    def from_supabase(cls, session: Any) -> "AuthSession | None":
        """
        Convert a Supabase (gotrue) session object.

        Args:
            session: The client library's Session, or None.

        Returns:
            AuthSession, or None when no user is attached.
        """
        if session is None or getattr(session, "user", None) is None:
            return None
        user = session.user
        return cls(
            user=User(id=str(user.id), email=getattr(user, "email", None)),
            tokens=AuthTokens(
                access_token=session.access_token,
                refresh_token=getattr(session, "refresh_token", None),
                expires_at=getattr(session, "expires_at", None),
            ),
        )


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """
    Current authentication state as seen by readers.

    Attributes:
        user: Signed-in identity, or None.
        session: Token material, or None.
        loading: True only until the initial session retrieval resolves.
    """

    user: User | None = None
    session: AuthTokens | None = None
    loading: bool = True

    @classmethod
    def resolved(cls, auth_session: AuthSession | None) -> "SessionSnapshot":
        """Build a settled snapshot; user and tokens are both set or both None."""
        if auth_session is None:
            return cls(user=None, session=None, loading=False)
        return cls(user=auth_session.user, session=auth_session.tokens, loading=False)

    @property
    def authenticated(self) -> bool:
        return not self.loading and self.user is not None
