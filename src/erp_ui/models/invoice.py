"""
Invoice ("facture") form schema matching the `factures` table.

Amounts come from free-text inputs, so both "12.50" and "12,50" are
accepted. The due date is an optional ISO date (YYYY-MM-DD).
"""

from datetime import date
from enum import Enum
from typing import Any, Mapping

from pydantic import Field, field_validator

from erp_ui.models.common import Result
from erp_ui.models.forms import ANY_ERROR, FormSchema, blank_to_none

NUMBER_MAX_LENGTH = 50


class InvoiceStatus(str, Enum):
    """Lifecycle of an invoice."""

    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS: dict[InvoiceStatus, str] = {
    InvoiceStatus.DRAFT: "Brouillon",
    InvoiceStatus.SENT: "Envoyée",
    InvoiceStatus.PAID: "Payée",
}

# (value, label) pairs for status selects
STATUS_OPTIONS: list[tuple[str, str]] = [
    (status.value, label) for status, label in STATUS_LABELS.items()
]


def parse_amount(value: Any) -> Any:
    """Accept decimal commas in amount strings; other values pass through."""
    if isinstance(value, str):
        value = value.strip().replace(" ", "").replace(",", ".")
    return value


class InvoiceForm(FormSchema):
    """Validated invoice record."""

    OPTIONAL_FIELDS = ("due_date",)
    MESSAGES = {
        "number": {
            "string_too_long": f"Le numéro ne peut pas dépasser {NUMBER_MAX_LENGTH} caractères",
            ANY_ERROR: "Le numéro de facture est requis",
        },
        "client_id": {ANY_ERROR: "Le client est requis"},
        "status": {ANY_ERROR: "Statut invalide"},
        "total_ht": {
            "greater_than_equal": "Le montant HT doit être positif",
            ANY_ERROR: "Le montant HT doit être un nombre valide",
        },
        "total_ttc": {
            "greater_than_equal": "Le montant TTC doit être positif",
            ANY_ERROR: "Le montant TTC doit être un nombre valide",
        },
        "due_date": {ANY_ERROR: "La date d'échéance est invalide"},
    }

    number: str = Field(..., min_length=1, max_length=NUMBER_MAX_LENGTH)
    client_id: str = Field(..., min_length=1)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    total_ht: float = Field(..., ge=0, allow_inf_nan=False)
    total_ttc: float = Field(..., ge=0, allow_inf_nan=False)
    due_date: date | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        # A blank select means "not chosen"
        return blank_to_none(value) or InvoiceStatus.DRAFT

    @field_validator("total_ht", "total_ttc", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> Any:
        return parse_amount(value)


def validate_invoice(raw: Mapping[str, Any]) -> Result:
    """Validate invoice form input. See FormSchema.validate_form()."""
    return InvoiceForm.validate_form(raw)
