"""
Client form schema matching the `clients` table.
"""

from typing import Any, Mapping

from pydantic import EmailStr, Field

from erp_ui.models.common import Result
from erp_ui.models.forms import ANY_ERROR, FormSchema

NAME_MAX_LENGTH = 100
PHONE_MAX_LENGTH = 20
ADDRESS_MAX_LENGTH = 200


class ClientForm(FormSchema):
    """Validated client record. Empty optional fields are None."""

    OPTIONAL_FIELDS = ("email", "phone", "address")
    MESSAGES = {
        "name": {
            "string_too_long": f"Le nom ne peut pas dépasser {NAME_MAX_LENGTH} caractères",
            ANY_ERROR: "Le nom est requis",
        },
        "email": {ANY_ERROR: "Email invalide"},
        "phone": {
            ANY_ERROR: f"Le téléphone ne peut pas dépasser {PHONE_MAX_LENGTH} caractères",
        },
        "address": {
            ANY_ERROR: f"L'adresse ne peut pas dépasser {ADDRESS_MAX_LENGTH} caractères",
        },
    }

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=PHONE_MAX_LENGTH)
    address: str | None = Field(None, max_length=ADDRESS_MAX_LENGTH)


def validate_client(raw: Mapping[str, Any]) -> Result:
    """Validate client form input. See FormSchema.validate_form()."""
    return ClientForm.validate_form(raw)
