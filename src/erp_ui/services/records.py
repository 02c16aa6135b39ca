"""
Record services for the clients, factures and products tables.

Each service takes a Backend explicitly and accepts only validated form
schemas for writes, so normalization (blank -> None) has always happened
before anything is persisted. Every method returns a Result; backend
failures are returned as Err(ServiceError) and never retried.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from erp_ui.lib import logs
from erp_ui.models.client import ClientForm
from erp_ui.models.common import Err, Ok, Result, ServiceError
from erp_ui.models.invoice import InvoiceForm, InvoiceStatus
from erp_ui.models.product import ProductFilters, ProductForm, ProductStats, is_low_stock
from erp_ui.services.backend import (
    CLIENTS_TABLE,
    FACTURES_TABLE,
    PRODUCTS_TABLE,
    Backend,
)

LOG = logs.logger(__file__)

# Factures are listed with the name of their client
FACTURE_COLUMNS = "*, clients(name)"
SEARCH_LIMIT = 50


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class ClientService:
    """Reads and writes rows of the `clients` table."""

    def __init__(self, backend: Backend) -> None:
        self.backend = backend

    def list_clients(self) -> Result:
        """Return Ok(rows), newest first."""
        return self.backend.select(CLIENTS_TABLE)

    def get_client(self, client_id: str) -> Result:
        result = self.backend.select(CLIENTS_TABLE, filters={"id": client_id}, order_by=None, limit=1)
        return _single(result, CLIENTS_TABLE, client_id)

    def create_client(self, form: ClientForm) -> Result:
        LOG.info("Creating client %s", form.name)
        return self.backend.insert(CLIENTS_TABLE, form.to_payload())

    def update_client(self, client_id: str, form: ClientForm) -> Result:
        LOG.info("Updating client %s", client_id)
        values = form.to_payload()
        values["updated_at"] = _timestamp()
        return self.backend.update(CLIENTS_TABLE, client_id, values)


class FactureService:
    """Reads and writes rows of the `factures` table."""

    def __init__(self, backend: Backend) -> None:
        self.backend = backend

    def list_factures(self) -> Result:
        """Return Ok(rows) newest first, each with a `clients: {name}` entry."""
        return self.backend.select(FACTURES_TABLE, columns=FACTURE_COLUMNS)

    def create_facture(self, form: InvoiceForm) -> Result:
        LOG.info("Creating facture %s for client %s", form.number, form.client_id)
        return self.backend.insert(FACTURES_TABLE, form.to_payload())

    def update_facture(self, facture_id: str, form: InvoiceForm) -> Result:
        LOG.info("Updating facture %s", facture_id)
        values = form.to_payload()
        values["updated_at"] = _timestamp()
        return self.backend.update(FACTURES_TABLE, facture_id, values)


class StockOperation(str, Enum):
    """How update_stock() applies a quantity."""

    SET = "set"
    ADD = "add"
    SUBTRACT = "subtract"


class ProductService:
    """Reads and writes rows of the `products` table."""

    def __init__(self, backend: Backend) -> None:
        self.backend = backend

    def list_products(self, filters: ProductFilters | None = None) -> Result:
        """Return Ok(rows) newest first, restricted to rows matching filters."""
        result = self.backend.select(PRODUCTS_TABLE)
        if isinstance(result, Err) or filters is None:
            return result
        return Ok([row for row in result.value if filters.matches(row)])

    def get_product(self, product_id: str) -> Result:
        result = self.backend.select(PRODUCTS_TABLE, filters={"id": product_id}, order_by=None, limit=1)
        return _single(result, PRODUCTS_TABLE, product_id)

    def search_products(self, term: str) -> Result:
        """
        Full-text style search over names, codes, category and brand.

        Returns:
            Ok(rows) sorted by name, at most SEARCH_LIMIT; Ok([]) for a
            blank term.
        """
        needle = (term or "").strip().lower()
        if not needle:
            return Ok([])
        result = self.backend.select(PRODUCTS_TABLE, order_by="name", descending=False)
        if isinstance(result, Err):
            return result
        fields = ("name", "description", "reference", "sku", "category", "brand")
        matches = [
            row
            for row in result.value
            if any(needle in str(row.get(field) or "").lower() for field in fields)
        ]
        return Ok(matches[:SEARCH_LIMIT])

    def low_stock_products(self) -> Result:
        return self.list_products(ProductFilters(low_stock=True))

    def categories(self) -> Result:
        return self._distinct("category")

    def brands(self) -> Result:
        return self._distinct("brand")

    def stats(self) -> Result:
        result = self.backend.select(PRODUCTS_TABLE)
        if isinstance(result, Err):
            return result
        return Ok(ProductStats.from_rows(result.value))

    def create_product(self, form: ProductForm) -> Result:
        LOG.info("Creating product %s", form.name)
        return self.backend.insert(PRODUCTS_TABLE, form.to_payload())

    def update_product(self, product_id: str, form: ProductForm) -> Result:
        LOG.info("Updating product %s", product_id)
        values = form.to_payload()
        values["updated_at"] = _timestamp()
        return self.backend.update(PRODUCTS_TABLE, product_id, values)

    def delete_product(self, product_id: str) -> Result:
        LOG.info("Deleting product %s", product_id)
        return self.backend.delete(PRODUCTS_TABLE, product_id)

    def toggle_active(self, product_id: str, is_active: bool) -> Result:
        return self.backend.update(
            PRODUCTS_TABLE,
            product_id,
            {"is_active": is_active, "updated_at": _timestamp()},
        )

    def update_stock(
        self, product_id: str, quantity: int, operation: StockOperation | str
    ) -> Result:
        """
        Change the stock of a product.

        Args:
            product_id: Product to update.
            quantity: Non-negative amount.
            operation: SET replaces the stock, ADD adds to it, SUBTRACT
                       removes from it without going below zero.

        Raises:
            ValueError: If operation is not a StockOperation value.
        """
        operation = StockOperation(operation)
        if quantity < 0:
            return Err(ServiceError("La quantité doit être positive", "invalid_quantity"))

        current = self.get_product(product_id)
        if isinstance(current, Err):
            return current
        stock = int(current.value.get("stock_quantity") or 0)

        if operation is StockOperation.SET:
            new_stock = quantity
        elif operation is StockOperation.ADD:
            new_stock = stock + quantity
        else:
            new_stock = max(0, stock - quantity)

        LOG.info("Stock of %s: %s -> %s (%s)", product_id, stock, new_stock, operation.value)
        return self.backend.update(
            PRODUCTS_TABLE,
            product_id,
            {"stock_quantity": new_stock, "updated_at": _timestamp()},
        )

    def _distinct(self, column: str) -> Result:
        result = self.backend.select(PRODUCTS_TABLE, columns=column, order_by=None)
        if isinstance(result, Err):
            return result
        return Ok(sorted({row[column] for row in result.value if row.get(column)}))


@dataclass(slots=True)
class DashboardStats:
    """Figures shown on the dashboard."""

    clients_count: int = 0
    factures_count: int = 0
    draft_count: int = 0
    products_count: int = 0
    low_stock_count: int = 0
    # Sum of total_ttc for paid factures
    paid_total: float = 0.0
    # Sum of total_ttc for sent, unpaid factures
    outstanding_total: float = 0.0


class DashboardService:
    """Aggregates the three tables for the dashboard."""

    def __init__(self, backend: Backend) -> None:
        self.backend = backend

    def stats(self) -> Result:
        clients = self.backend.select(CLIENTS_TABLE, columns="id", order_by=None)
        factures = self.backend.select(
            FACTURES_TABLE, columns="id, status, total_ttc", order_by=None
        )
        products = self.backend.select(
            PRODUCTS_TABLE, columns="id, stock_quantity, min_stock_level", order_by=None
        )
        for result in (clients, factures, products):
            if isinstance(result, Err):
                return result

        stats = DashboardStats(
            clients_count=len(clients.value),
            factures_count=len(factures.value),
            products_count=len(products.value),
        )
        for facture in factures.value:
            total = float(facture.get("total_ttc") or 0)
            status = facture.get("status")
            if status == InvoiceStatus.PAID.value:
                stats.paid_total += total
            elif status == InvoiceStatus.SENT.value:
                stats.outstanding_total += total
            else:
                stats.draft_count += 1
        stats.low_stock_count = sum(
            1
            for product in products.value
            if is_low_stock(
                int(product.get("stock_quantity") or 0),
                int(product.get("min_stock_level") or 0),
            )
        )
        return Ok(stats)

    def check_connection(self) -> Result:
        """
        Check the backend with a single read of the products table.

        Returns:
            Ok(number of rows read) or the backend's Err.
        """
        result = self.backend.select(PRODUCTS_TABLE, columns="id", order_by=None, limit=5)
        if isinstance(result, Err):
            LOG.warning("Connection check failed: %s", result.error)
            return result
        LOG.info("Connection check succeeded (%s rows)", len(result.value))
        return Ok(len(result.value))


def _single(result: Result, table: str, row_id: str) -> Result:
    """Reduce a select result to exactly one row."""
    if isinstance(result, Err):
        return result
    rows: list[dict[str, Any]] = result.value
    if not rows:
        return Err(ServiceError(f"Ligne {row_id} introuvable dans la table {table}", "not_found"))
    return Ok(rows[0])
