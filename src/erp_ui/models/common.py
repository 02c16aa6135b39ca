"""
Result types shared by the validation schemas and the backend boundary.

Validation and service failures are returned as values instead of being
raised, so views can branch on the outcome without exception handling:

    result = validate_client(form_data)
    if isinstance(result, Ok):
        ...persist result.value...
    else:
        ...display result.error (field -> message)...

Both `Ok` and `Err` are frozen so a result can be shared between readers.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")

# Field name -> first human-readable violation for that field
FieldErrors = dict[str, str]


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed outcome carrying an error payload."""

    error: E

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]


@dataclass(frozen=True, slots=True)
class ServiceError:
    """
    Failure reported by the backend service.

    Attributes:
        message: Human-readable description suitable for display.
        code: Optional machine-readable code from the service.
    """

    message: str
    code: str | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ServiceError":
        """
        Build a ServiceError from a client library exception.

        The Supabase auth and PostgREST errors both expose `message` and
        `code`; anything else falls back to its string form.
        """
        message: Any = getattr(exc, "message", None) or str(exc) or type(exc).__name__
        code: Any = getattr(exc, "code", None)
        return cls(message=str(message), code=str(code) if code else None)

    def __str__(self) -> str:
        return self.message
