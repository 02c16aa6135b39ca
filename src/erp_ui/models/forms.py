"""
Base class for form validation schemas.

Each schema is a pydantic model describing one backend table row as it is
entered in a form. `FormSchema.validate_form()` turns raw form input into
either a normalized record or a mapping of field name to the first
violation message for that field. Validation never touches the network.

Normalization rules applied before field validation:
- blank strings in optional fields become None
- surrounding whitespace is stripped from every string
"""

from typing import Any, ClassVar, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from erp_ui.models.common import Err, FieldErrors, Ok, Result

# Fallback message key used when no specific error type is mapped
ANY_ERROR = "*"


def blank_to_none(value: Any) -> Any:
    """Return None for empty or whitespace-only strings, the value otherwise."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class FormSchema(BaseModel):
    """
    Pydantic model with result-returning validation and French messages.

    Subclasses declare:
        OPTIONAL_FIELDS: Fields whose blank values normalize to None.
        MESSAGES: Field -> pydantic error type -> message. The ANY_ERROR
                  key supplies the fallback for a field.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="ignore",
        use_enum_values=False,
    )

    OPTIONAL_FIELDS: ClassVar[tuple[str, ...]] = ()
    MESSAGES: ClassVar[dict[str, dict[str, str]]] = {}

    @model_validator(mode="before")
    @classmethod
    def _normalize_blanks(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        normalized = dict(data)
        for name in cls.OPTIONAL_FIELDS:
            if name in normalized:
                normalized[name] = blank_to_none(normalized[name])
        return normalized

    @classmethod
    def validate_form(cls, raw: Mapping[str, Any]) -> Result:
        """
        Validate raw form input.

        Args:
            raw: Field values as submitted by the form.

        Returns:
            Ok(record) with the normalized schema instance, or
            Err(FieldErrors) with one message per failing field.
        """
        try:
            record = cls.model_validate(dict(raw))
        except ValidationError as exc:
            return Err(cls._field_errors(exc))

        cross_errors = record.cross_check()
        if cross_errors:
            return Err(cross_errors)
        return Ok(record)

    def cross_check(self) -> FieldErrors:
        """Return violations involving several fields. None by default."""
        return {}

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-compatible row sent to the backend."""
        return self.model_dump(mode="json")

    @classmethod
    def _field_errors(cls, exc: ValidationError) -> FieldErrors:
        errors: FieldErrors = {}
        for error in exc.errors():
            loc = error.get("loc") or ()
            field = str(loc[0]) if loc else ANY_ERROR
            # Only the first violation per field is reported
            if field in errors:
                continue
            errors[field] = cls._message(field, error["type"], error["msg"])
        return errors

    @classmethod
    def _message(cls, field: str, error_type: str, default: str) -> str:
        messages = cls.MESSAGES.get(field, {})
        return messages.get(error_type) or messages.get(ANY_ERROR) or default
