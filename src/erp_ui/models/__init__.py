"""
Data models and validation schemas for the ERP UI.

This package provides:
- Result values (Ok, Err) and ServiceError
- The authenticated session snapshot
- Form schemas for clients, invoices and products

Validation never raises: each validate_*() returns Ok(record) or
Err(field -> message).
"""

from erp_ui.models.client import ClientForm, validate_client
from erp_ui.models.common import Err, FieldErrors, Ok, Result, ServiceError
from erp_ui.models.invoice import (
    STATUS_LABELS,
    STATUS_OPTIONS,
    InvoiceForm,
    InvoiceStatus,
    validate_invoice,
)
from erp_ui.models.product import (
    ProductFilters,
    ProductForm,
    ProductStats,
    calculate_margin,
    is_low_stock,
    is_out_of_stock,
    product_to_form,
    validate_product,
)
from erp_ui.models.session import AuthSession, AuthTokens, SessionSnapshot, User

__all__ = [
    "AuthSession",
    "AuthTokens",
    "ClientForm",
    "Err",
    "FieldErrors",
    "InvoiceForm",
    "InvoiceStatus",
    "Ok",
    "ProductFilters",
    "ProductForm",
    "ProductStats",
    "Result",
    "STATUS_LABELS",
    "STATUS_OPTIONS",
    "ServiceError",
    "SessionSnapshot",
    "User",
    "calculate_margin",
    "is_low_stock",
    "is_out_of_stock",
    "product_to_form",
    "validate_client",
    "validate_invoice",
    "validate_product",
]
