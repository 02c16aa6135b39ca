"""
Product form schema, filters and stock helpers for the `products` table.

Form inputs arrive as strings; prices and weight are parsed as floats and
stock levels as integers. Three cross-field rules apply once every field is
individually valid:

- selling price >= cost price (reported on `selling_price`)
- max stock >= min stock (reported on `max_stock_level`)
- stock quantity <= max stock (reported on `stock_quantity`)
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from pydantic import Field, field_validator

from erp_ui.models.common import FieldErrors, Result
from erp_ui.models.forms import ANY_ERROR, FormSchema
from erp_ui.models.invoice import parse_amount

DIMENSIONS_PATTERN = r"^\d+(\.\d+)?x\d+(\.\d+)?x\d+(\.\d+)?$"
DEFAULT_MAX_STOCK_LEVEL = 1000


class ProductForm(FormSchema):
    """Validated product record."""

    OPTIONAL_FIELDS = (
        "description",
        "reference",
        "sku",
        "category",
        "brand",
        "weight",
        "dimensions",
    )
    MESSAGES = {
        "name": {
            "string_too_long": "Le nom ne peut pas dépasser 200 caractères",
            ANY_ERROR: "Le nom du produit est requis",
        },
        "description": {ANY_ERROR: "La description ne peut pas dépasser 1000 caractères"},
        "reference": {ANY_ERROR: "La référence ne peut pas dépasser 50 caractères"},
        "sku": {ANY_ERROR: "Le SKU ne peut pas dépasser 50 caractères"},
        "cost_price": {ANY_ERROR: "Le prix de coût doit être un nombre valide"},
        "selling_price": {ANY_ERROR: "Le prix de vente doit être un nombre valide"},
        "stock_quantity": {ANY_ERROR: "La quantité en stock doit être un entier positif"},
        "min_stock_level": {ANY_ERROR: "Le stock minimum doit être un entier positif"},
        "max_stock_level": {ANY_ERROR: "Le stock maximum doit être un entier positif"},
        "category": {ANY_ERROR: "La catégorie ne peut pas dépasser 100 caractères"},
        "brand": {ANY_ERROR: "La marque ne peut pas dépasser 100 caractères"},
        "weight": {ANY_ERROR: "Le poids doit être un nombre positif"},
        "dimensions": {
            "string_pattern_mismatch": 'Les dimensions doivent être au format "LxWxH" (ex: 10x5x3)',
            ANY_ERROR: "Les dimensions ne peuvent pas dépasser 50 caractères",
        },
        "is_active": {ANY_ERROR: "Le statut actif est invalide"},
    }

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=1000)
    reference: str | None = Field(None, max_length=50)
    sku: str | None = Field(None, max_length=50)
    cost_price: float = Field(..., ge=0, allow_inf_nan=False)
    selling_price: float = Field(..., ge=0, allow_inf_nan=False)
    stock_quantity: int = Field(..., ge=0)
    min_stock_level: int = Field(..., ge=0)
    max_stock_level: int = Field(..., ge=0)
    category: str | None = Field(None, max_length=100)
    brand: str | None = Field(None, max_length=100)
    weight: float | None = Field(None, ge=0, allow_inf_nan=False)
    dimensions: str | None = Field(None, max_length=50, pattern=DIMENSIONS_PATTERN)
    is_active: bool = True

    @field_validator("cost_price", "selling_price", "weight", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> Any:
        return parse_amount(value)

    def cross_check(self) -> FieldErrors:
        errors: FieldErrors = {}
        if self.selling_price < self.cost_price:
            errors["selling_price"] = (
                "Le prix de vente doit être supérieur ou égal au prix de coût"
            )
        if self.max_stock_level < self.min_stock_level:
            errors["max_stock_level"] = (
                "Le stock maximum doit être supérieur ou égal au stock minimum"
            )
        if self.stock_quantity > self.max_stock_level:
            errors["stock_quantity"] = (
                "La quantité en stock ne peut pas dépasser le stock maximum"
            )
        return errors


def validate_product(raw: Mapping[str, Any]) -> Result:
    """Validate product form input. See FormSchema.validate_form()."""
    return ProductForm.validate_form(raw)


def product_to_form(product: Mapping[str, Any]) -> dict[str, Any]:
    """
    Convert a stored product row back into form field values.

    Numbers become strings and missing values become empty strings so the
    result can be fed straight into the product form.
    """

    def text(key: str, default: str = "") -> str:
        value = product.get(key)
        return default if value is None else str(value)

    is_active = product.get("is_active")
    return {
        "name": text("name"),
        "description": text("description"),
        "reference": text("reference"),
        "sku": text("sku"),
        "cost_price": text("cost_price", "0"),
        "selling_price": text("selling_price", "0"),
        "stock_quantity": text("stock_quantity", "0"),
        "min_stock_level": text("min_stock_level", "0"),
        "max_stock_level": text("max_stock_level", str(DEFAULT_MAX_STOCK_LEVEL)),
        "category": text("category"),
        "brand": text("brand"),
        "weight": text("weight"),
        "dimensions": text("dimensions"),
        "is_active": True if is_active is None else bool(is_active),
    }


def calculate_margin(cost_price: float, selling_price: float) -> float:
    """Return the margin as a percentage of the cost price (0 when cost is 0)."""
    if cost_price == 0:
        return 0.0
    return (selling_price - cost_price) / cost_price * 100


def is_low_stock(current_stock: int, min_stock: int) -> bool:
    return current_stock <= min_stock


def is_out_of_stock(current_stock: int) -> bool:
    return current_stock == 0


@dataclass(slots=True)
class ProductFilters:
    """
    Search filters for the product list.

    Attributes:
        search: Case-insensitive text matched against name, description,
                reference and SKU.
        category: Exact category match.
        brand: Exact brand match.
        is_active: Keep only active (True) or inactive (False) products.
        min_price: Minimum selling price.
        max_price: Maximum selling price.
        low_stock: Keep only products at or below their minimum stock.
    """

    search: str | None = None
    category: str | None = None
    brand: str | None = None
    is_active: bool | None = None
    min_price: float | None = None
    max_price: float | None = None
    low_stock: bool = False

    @property
    def active_count(self) -> int:
        """Number of filters currently applied."""
        values = (
            self.search,
            self.category,
            self.brand,
            self.is_active,
            self.min_price,
            self.max_price,
        )
        return sum(1 for value in values if value not in (None, "")) + int(
            self.low_stock
        )

    def matches(self, product: Mapping[str, Any]) -> bool:
        if self.search and self.search.strip():
            needle = self.search.strip().lower()
            haystack = (
                product.get("name"),
                product.get("description"),
                product.get("reference"),
                product.get("sku"),
            )
            if not any(needle in str(value).lower() for value in haystack if value):
                return False
        if self.category and product.get("category") != self.category:
            return False
        if self.brand and product.get("brand") != self.brand:
            return False
        if self.is_active is not None and bool(product.get("is_active")) != self.is_active:
            return False
        price = float(product.get("selling_price") or 0)
        if self.min_price is not None and price < self.min_price:
            return False
        if self.max_price is not None and price > self.max_price:
            return False
        if self.low_stock and not is_low_stock(
            int(product.get("stock_quantity") or 0),
            int(product.get("min_stock_level") or 0),
        ):
            return False
        return True


@dataclass(slots=True)
class ProductStats:
    """Aggregates displayed above the product list."""

    total_products: int = 0
    active_products: int = 0
    inactive_products: int = 0
    low_stock_count: int = 0
    out_of_stock_count: int = 0
    categories_count: int = 0
    # Stock valued at cost price
    total_value: float = 0.0

    @classmethod
    def from_rows(cls, products: Iterable[Mapping[str, Any]]) -> "ProductStats":
        stats = cls()
        categories: set[str] = set()
        for product in products:
            stock = int(product.get("stock_quantity") or 0)
            stats.total_products += 1
            if product.get("is_active"):
                stats.active_products += 1
            else:
                stats.inactive_products += 1
            if is_low_stock(stock, int(product.get("min_stock_level") or 0)):
                stats.low_stock_count += 1
            if is_out_of_stock(stock):
                stats.out_of_stock_count += 1
            if product.get("category"):
                categories.add(product["category"])
            stats.total_value += float(product.get("cost_price") or 0) * stock
        stats.categories_count = len(categories)
        return stats
