"""
Reflex state management for the ERP UI application.

State classes only translate between the browser and the application
context: they look up the visitor of the sending browser session, run the
access checks, pass form input through the validation schemas and call the
record services. Rows are held as flat string dictionaries ready for display.
"""

from typing import Any

import reflex as rx

from erp_ui import access, context, routing
from erp_ui.lib import logs
from erp_ui.models.client import validate_client
from erp_ui.models.common import Err, Result
from erp_ui.models.invoice import STATUS_LABELS, InvoiceStatus, validate_invoice
from erp_ui.models.product import (
    ProductFilters,
    calculate_margin,
    is_low_stock,
    is_out_of_stock,
    product_to_form,
    validate_product,
)
from erp_ui.models.session import SessionSnapshot
from erp_ui.services import StockOperation
from erp_ui.utils import format_currency, format_date, to_date_input

LOG = logs.logger(__file__)

APP_TITLE = "ERP"
APP_SUBTITLE = "Clients, factures et produits"

# Select value meaning "no filter"
ALL = "all"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _error_message(result: Result) -> str:
    return str(result.error) if isinstance(result, Err) else ""


def _session_key(state: rx.State) -> str:
    return state.router.session.client_token


def _current_path(state: rx.State) -> str:
    return state.router.page.raw_path or routing.HOME_PATH


def _visitor(state: rx.State) -> context.VisitorContext:
    return context.current(_session_key(state))


def _require_user(state: rx.State, action: str) -> context.VisitorContext | None:
    """Return the signed-in visitor of the sending browser, or None."""
    visitor = _visitor(state)
    return visitor if access.require_user(visitor, action) else None


def _to_login(state: rx.State):
    return rx.redirect(routing.login_url(_current_path(state)))


class AuthState(rx.State):
    """
    Authentication state shared by every page.

    Mirrors the session store snapshot of the sending browser and applies
    the route guard on each page load and after each auth action.
    """

    user_email: str = ""
    is_loading: bool = True
    auth_error: str = ""
    auth_notice: str = ""
    backend_error: str = ""

    @rx.var
    def is_authenticated(self) -> bool:
        return not self.is_loading and self.user_email != ""

    def _sync(self, snapshot: SessionSnapshot) -> None:
        self.is_loading = snapshot.loading
        self.user_email = (
            (snapshot.user.email or snapshot.user.id) if snapshot.user else ""
        )

    @rx.event
    def check_access(self):
        """On-load handler of protected pages."""
        settings = context.application().settings
        visitor = _visitor(self)
        self._sync(visitor.store.snapshot)
        missing = settings.missing if settings.service != "demo" else []
        self.backend_error = (
            f"Configuration manquante : {', '.join(missing)}" if missing else ""
        )
        target = access.page_redirect(visitor, _current_path(self))
        if target is not None:
            return rx.redirect(target)

    @rx.event
    def check_public(self):
        """On-load handler of the login and signup pages."""
        self.auth_error = ""
        visitor = _visitor(self)
        self._sync(visitor.store.snapshot)
        target = access.public_redirect(visitor, self._next_value())
        if target is not None:
            return rx.redirect(target)

    @rx.event
    def resolve_unknown(self):
        """On-load handler of the 404 page: send the browser home."""
        return rx.redirect(routing.resolve(_current_path(self)))

    @rx.event
    def sign_in(self, form_data: dict):
        visitor = _visitor(self)
        result = access.sign_in(
            visitor,
            form_data.get("email") or "",
            form_data.get("password") or "",
            self._next_value(),
        )
        if isinstance(result, Err):
            self.auth_error = str(result.error)
            return
        self.auth_error = ""
        self._sync(visitor.store.snapshot)
        return rx.redirect(result.value)

    @rx.event
    def sign_up(self, form_data: dict):
        visitor = _visitor(self)
        result = access.sign_up(
            visitor,
            form_data.get("email") or "",
            form_data.get("password") or "",
            form_data.get("confirm_password") or "",
        )
        if isinstance(result, Err):
            self.auth_error = str(result.error)
            return
        self.auth_error = ""
        self._sync(visitor.store.snapshot)
        if result.value is None:
            # Account created but e-mail confirmation is pending
            self.auth_notice = "Compte créé. Vérifiez votre e-mail pour le confirmer."
            return rx.redirect(routing.LOGIN_PATH)
        return rx.redirect(routing.HOME_PATH)

    @rx.event
    def sign_out(self):
        visitor = _visitor(self)
        result = visitor.store.sign_out()
        if isinstance(result, Err):
            self.backend_error = str(result.error)
        self._sync(visitor.store.snapshot)
        context.application().sessions.discard(visitor.key)
        return rx.redirect(routing.LOGIN_PATH)

    def _next_value(self) -> str | None:
        return self.router.page.params.get(routing.NEXT_PARAM)


class DashboardState(rx.State):
    """Figures of the home page."""

    clients_count: int = 0
    factures_count: int = 0
    draft_count: int = 0
    products_count: int = 0
    low_stock_count: int = 0
    paid_total: str = format_currency(0)
    outstanding_total: str = format_currency(0)
    error: str = ""
    is_loading: bool = False

    @rx.event
    def load(self):
        visitor = _require_user(self, "dashboard.load")
        if visitor is None:
            return _to_login(self)
        self.is_loading = True
        result = visitor.dashboard.stats()
        self.is_loading = False
        if isinstance(result, Err):
            self.error = str(result.error)
            return
        stats = result.value
        self.error = ""
        self.clients_count = stats.clients_count
        self.factures_count = stats.factures_count
        self.draft_count = stats.draft_count
        self.products_count = stats.products_count
        self.low_stock_count = stats.low_stock_count
        self.paid_total = format_currency(stats.paid_total)
        self.outstanding_total = format_currency(stats.outstanding_total)


class ClientsState(rx.State):
    """Client list and create/edit dialog."""

    clients: list[dict[str, str]] = []
    error: str = ""
    form_open: bool = False
    editing_id: str = ""
    form_values: dict[str, str] = {}
    form_errors: dict[str, str] = {}
    save_error: str = ""

    @rx.var
    def form_title(self) -> str:
        return "Modifier le client" if self.editing_id else "Nouveau client"

    @rx.event
    def load(self):
        visitor = _require_user(self, "clients.load")
        if visitor is None:
            return _to_login(self)
        result = visitor.clients.list_clients()
        if isinstance(result, Err):
            self.error = str(result.error)
            self.clients = []
            return
        self.error = ""
        self.clients = [
            {
                "id": _text(row.get("id")),
                "name": _text(row.get("name")),
                "email": _text(row.get("email")),
                "phone": _text(row.get("phone")),
                "address": _text(row.get("address")),
                "created_at": format_date(row.get("created_at")),
            }
            for row in result.value
        ]

    @rx.event
    def open_create(self):
        self._open("", {"name": "", "email": "", "phone": "", "address": ""})

    @rx.event
    def open_edit(self, client_id: str):
        row = next((row for row in self.clients if row["id"] == client_id), None)
        if row is None:
            return
        self._open(client_id, {key: row[key] for key in ("name", "email", "phone", "address")})

    @rx.event
    def set_form_open(self, is_open: bool):
        self.form_open = is_open

    @rx.event
    def save(self, form_data: dict):
        visitor = _require_user(self, "clients.save")
        if visitor is None:
            return _to_login(self)
        validated = validate_client(form_data)
        if isinstance(validated, Err):
            self.form_values = {key: _text(value) for key, value in form_data.items()}
            self.form_errors = validated.error
            return
        self.form_errors = {}
        service = visitor.clients
        if self.editing_id:
            result = service.update_client(self.editing_id, validated.value)
        else:
            result = service.create_client(validated.value)
        if isinstance(result, Err):
            self.save_error = str(result.error)
            return
        self.form_open = False
        return ClientsState.load

    def _open(self, client_id: str, values: dict[str, str]) -> None:
        self.editing_id = client_id
        self.form_values = values
        self.form_errors = {}
        self.save_error = ""
        self.form_open = True


class FacturesState(rx.State):
    """Invoice list and create/edit dialog."""

    factures: list[dict[str, str]] = []
    client_options: list[dict[str, str]] = []
    error: str = ""
    form_open: bool = False
    editing_id: str = ""
    form_values: dict[str, str] = {}
    form_errors: dict[str, str] = {}
    save_error: str = ""

    @rx.var
    def form_title(self) -> str:
        return "Modifier la facture" if self.editing_id else "Nouvelle facture"

    @rx.event
    def load(self):
        visitor = _require_user(self, "factures.load")
        if visitor is None:
            return _to_login(self)
        result = visitor.factures.list_factures()
        if isinstance(result, Err):
            self.error = str(result.error)
            self.factures = []
            return
        self.error = ""
        self.factures = [self._display(row) for row in result.value]

        clients = visitor.clients.list_clients()
        if isinstance(clients, Err):
            LOG.warning("Client options unavailable: %s", clients.error)
            self.client_options = []
        else:
            self.client_options = [
                {"id": _text(row.get("id")), "name": _text(row.get("name"))}
                for row in sorted(clients.value, key=lambda row: _text(row.get("name")))
            ]

    @rx.event
    def open_create(self):
        self._open(
            "",
            {
                "number": "",
                "client_id": "",
                "status": InvoiceStatus.DRAFT.value,
                "total_ht": "",
                "total_ttc": "",
                "due_date": "",
            },
        )

    @rx.event
    def open_edit(self, facture_id: str):
        row = next((row for row in self.factures if row["id"] == facture_id), None)
        if row is None:
            return
        self._open(
            facture_id,
            {
                "number": row["number"],
                "client_id": row["client_id"],
                "status": row["status"],
                "total_ht": row["total_ht"],
                "total_ttc": row["total_ttc"],
                "due_date": row["due_date_input"],
            },
        )

    @rx.event
    def set_form_open(self, is_open: bool):
        self.form_open = is_open

    @rx.event
    def set_form_value(self, field: str, value: str):
        self.form_values = {**self.form_values, field: value}

    @rx.event
    def save(self, form_data: dict):
        visitor = _require_user(self, "factures.save")
        if visitor is None:
            return _to_login(self)
        # Selects are controlled by state, not submitted with the form
        data = {
            **form_data,
            "client_id": self.form_values.get("client_id", ""),
            "status": self.form_values.get("status", ""),
        }
        validated = validate_invoice(data)
        if isinstance(validated, Err):
            self.form_values = {key: _text(value) for key, value in data.items()}
            self.form_errors = validated.error
            return
        self.form_errors = {}
        service = visitor.factures
        if self.editing_id:
            result = service.update_facture(self.editing_id, validated.value)
        else:
            result = service.create_facture(validated.value)
        if isinstance(result, Err):
            self.save_error = str(result.error)
            return
        self.form_open = False
        return FacturesState.load

    def _open(self, facture_id: str, values: dict[str, str]) -> None:
        self.editing_id = facture_id
        self.form_values = values
        self.form_errors = {}
        self.save_error = ""
        self.form_open = True

    @staticmethod
    def _display(row: dict) -> dict[str, str]:
        status = _text(row.get("status")) or InvoiceStatus.DRAFT.value
        try:
            status_label = STATUS_LABELS[InvoiceStatus(status)]
        except ValueError:
            status_label = status
        client = row.get("clients") or {}
        return {
            "id": _text(row.get("id")),
            "number": _text(row.get("number")),
            "client_id": _text(row.get("client_id")),
            "client_name": _text(client.get("name")) or "—",
            "status": status,
            "status_label": status_label,
            "total_ht": _text(row.get("total_ht")),
            "total_ttc": _text(row.get("total_ttc")),
            "total_ttc_label": format_currency(row.get("total_ttc")),
            "due_date": format_date(row.get("due_date")),
            "due_date_input": to_date_input(row.get("due_date")),
        }


class ProductsState(rx.State):
    """Product list with filters, statistics and quick actions."""

    products: list[dict[str, str]] = []
    categories: list[str] = []
    brands: list[str] = []
    error: str = ""

    # Filters
    search: str = ""
    category: str = ALL
    brand: str = ALL
    status: str = ALL
    low_stock_only: bool = False

    # Statistics
    total_products: int = 0
    active_products: int = 0
    low_stock_count: int = 0
    out_of_stock_count: int = 0
    total_value: str = format_currency(0)

    @rx.var
    def active_filter_count(self) -> int:
        return self._filters().active_count

    @rx.var
    def is_empty(self) -> bool:
        return self.error == "" and len(self.products) == 0

    @rx.event
    def load(self):
        visitor = _require_user(self, "products.load")
        if visitor is None:
            return _to_login(self)
        service = visitor.products
        stats = service.stats()
        if isinstance(stats, Err):
            self.error = str(stats.error)
            self.products = []
            return
        self.total_products = stats.value.total_products
        self.active_products = stats.value.active_products
        self.low_stock_count = stats.value.low_stock_count
        self.out_of_stock_count = stats.value.out_of_stock_count
        self.total_value = format_currency(stats.value.total_value)

        categories = service.categories()
        brands = service.brands()
        self.categories = categories.value if not isinstance(categories, Err) else []
        self.brands = brands.value if not isinstance(brands, Err) else []
        self._refresh(visitor)

    @rx.event
    def set_search(self, value: str):
        self.search = value
        return self._reload("products.search")

    @rx.event
    def set_category(self, value: str):
        self.category = value
        return self._reload("products.category")

    @rx.event
    def set_brand(self, value: str):
        self.brand = value
        return self._reload("products.brand")

    @rx.event
    def set_status(self, value: str):
        self.status = value
        return self._reload("products.status")

    @rx.event
    def set_low_stock_only(self, value: bool):
        self.low_stock_only = value
        return self._reload("products.low_stock")

    @rx.event
    def clear_filters(self):
        self.search = ""
        self.category = ALL
        self.brand = ALL
        self.status = ALL
        self.low_stock_only = False
        return self._reload("products.clear_filters")

    @rx.event
    def toggle_active(self, product_id: str):
        visitor = _require_user(self, "products.toggle_active")
        if visitor is None:
            return _to_login(self)
        row = next((row for row in self.products if row["id"] == product_id), None)
        if row is None:
            return
        result = visitor.products.toggle_active(product_id, row["is_active"] != "true")
        self.error = _error_message(result)
        return ProductsState.load

    @rx.event
    def delete(self, product_id: str):
        visitor = _require_user(self, "products.delete")
        if visitor is None:
            return _to_login(self)
        result = visitor.products.delete_product(product_id)
        self.error = _error_message(result)
        return ProductsState.load

    @rx.event
    def adjust_stock(self, product_id: str, delta: int):
        visitor = _require_user(self, "products.adjust_stock")
        if visitor is None:
            return _to_login(self)
        operation = StockOperation.ADD if delta >= 0 else StockOperation.SUBTRACT
        result = visitor.products.update_stock(product_id, abs(delta), operation)
        self.error = _error_message(result)
        return ProductsState.load

    def _filters(self) -> ProductFilters:
        return ProductFilters(
            search=self.search or None,
            category=None if self.category == ALL else self.category,
            brand=None if self.brand == ALL else self.brand,
            is_active=None if self.status == ALL else self.status == "active",
            low_stock=self.low_stock_only,
        )

    def _reload(self, action: str):
        visitor = _require_user(self, action)
        if visitor is None:
            return _to_login(self)
        self._refresh(visitor)

    def _refresh(self, visitor: context.VisitorContext) -> None:
        result = visitor.products.list_products(self._filters())
        if isinstance(result, Err):
            self.error = str(result.error)
            self.products = []
            return
        self.error = ""
        self.products = [self._display(row) for row in result.value]

    @staticmethod
    def _display(row: dict) -> dict[str, str]:
        cost = float(row.get("cost_price") or 0)
        selling = float(row.get("selling_price") or 0)
        stock = int(row.get("stock_quantity") or 0)
        minimum = int(row.get("min_stock_level") or 0)
        if is_out_of_stock(stock):
            stock_state = "out"
        elif is_low_stock(stock, minimum):
            stock_state = "low"
        else:
            stock_state = "ok"
        return {
            "id": _text(row.get("id")),
            "name": _text(row.get("name")),
            "reference": _text(row.get("reference") or row.get("sku")) or "—",
            "category": _text(row.get("category")) or "—",
            "brand": _text(row.get("brand")) or "—",
            "cost_price": format_currency(cost),
            "selling_price": format_currency(selling),
            "margin": f"{calculate_margin(cost, selling):.1f} %",
            "stock": f"{stock} / {minimum}",
            "stock_state": stock_state,
            "is_active": "true" if row.get("is_active") else "false",
        }


class ProductFormState(rx.State):
    """Create and edit pages of a single product."""

    product_key: str = ""
    form_values: dict[str, str] = {}
    is_active: bool = True
    form_errors: dict[str, str] = {}
    save_error: str = ""
    not_found: bool = False

    @rx.var
    def is_edit(self) -> bool:
        return self.product_key != ""

    @rx.var
    def title(self) -> str:
        return "Modifier le produit" if self.product_key else "Nouveau produit"

    @rx.event
    def load_new(self):
        if _require_user(self, "product_form.load_new") is None:
            return _to_login(self)
        self._reset("", product_to_form({}))

    @rx.event
    def load_edit(self):
        visitor = _require_user(self, "product_form.load_edit")
        if visitor is None:
            return _to_login(self)
        product_id = self.router.page.params.get("product_id", "")
        result = visitor.products.get_product(product_id)
        if isinstance(result, Err):
            LOG.warning("Product %s unavailable: %s", product_id, result.error)
            self._reset(product_id, product_to_form({}))
            self.not_found = True
            self.save_error = str(result.error)
            return
        self._reset(product_id, product_to_form(result.value))

    @rx.event
    def set_is_active(self, value: bool):
        self.is_active = value

    @rx.event
    def save(self, form_data: dict):
        visitor = _require_user(self, "product_form.save")
        if visitor is None:
            return _to_login(self)
        data = {**form_data, "is_active": self.is_active}
        validated = validate_product(data)
        if isinstance(validated, Err):
            self.form_values = {
                key: _text(value) for key, value in form_data.items()
            }
            self.form_errors = validated.error
            return
        self.form_errors = {}
        service = visitor.products
        if self.product_key:
            result = service.update_product(self.product_key, validated.value)
        else:
            result = service.create_product(validated.value)
        if isinstance(result, Err):
            self.save_error = str(result.error)
            return
        return rx.redirect("/products")

    def _reset(self, product_key: str, values: dict[str, Any]) -> None:
        self.product_key = product_key
        self.is_active = bool(values.pop("is_active", True))
        self.form_values = {key: _text(value) for key, value in values.items()}
        self.form_errors = {}
        self.save_error = ""
        self.not_found = False
