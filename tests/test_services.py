"""
Record service tests against the in-memory demo backend.
"""

import pytest

from erp_ui.config import Settings
from erp_ui.context import bootstrap
from erp_ui.data.demo_records import DEMO_EMAIL, DEMO_PASSWORD
from erp_ui.models.client import validate_client
from erp_ui.models.common import Err, Ok
from erp_ui.models.invoice import validate_invoice
from erp_ui.models.product import ProductFilters, product_to_form, validate_product
from erp_ui.services import (
    ClientService,
    DashboardService,
    DemoBackend,
    DemoDatabase,
    FactureService,
    ProductService,
    StockOperation,
    UnconfiguredBackend,
)


def test_list_clients_newest_first(clients: ClientService):
    """Test that clients are listed by creation date, newest first."""
    result = clients.list_clients()

    assert isinstance(result, Ok)
    assert [row["id"] for row in result.value] == ["c-0003", "c-0002", "c-0001"]


def test_create_and_update_client(clients: ClientService):
    """Test that validated clients are persisted with normalized fields."""
    form = validate_client({"name": "Nouvelle SA", "email": "", "phone": "", "address": ""}).value

    created = clients.create_client(form)

    assert isinstance(created, Ok)
    row = created.value
    assert row["name"] == "Nouvelle SA"
    assert row["email"] is None
    assert row["id"]

    form = validate_client({"name": "Nouvelle SA", "phone": "+41 21 000 00 00"}).value
    updated = clients.update_client(row["id"], form)

    assert isinstance(updated, Ok)
    assert updated.value["phone"] == "+41 21 000 00 00"
    assert clients.get_client(row["id"]).value["phone"] == "+41 21 000 00 00"


def test_get_missing_client(clients: ClientService):
    """Test that a missing row is returned as an error, not raised."""
    result = clients.get_client("c-9999")

    assert isinstance(result, Err)
    assert result.error.code == "not_found"


def test_update_missing_client(clients: ClientService):
    form = validate_client({"name": "Ghost"}).value

    result = clients.update_client("c-9999", form)

    assert isinstance(result, Err)
    assert "c-9999" in result.error.message


def test_list_factures_with_client_name(factures: FactureService):
    """Test that factures embed the name of their client."""
    result = factures.list_factures()

    assert isinstance(result, Ok)
    by_id = {row["id"]: row for row in result.value}
    assert by_id["f-0001"]["clients"] == {"name": "Menuiserie Favre SA"}
    assert by_id["f-0003"]["clients"] == {"name": "Garage du Jura"}


def test_create_facture(factures: FactureService):
    """Test that a validated invoice is stored with a serialized status."""
    form = validate_invoice(
        {
            "number": "FAC-2025-004",
            "client_id": "c-0002",
            "total_ht": "200",
            "total_ttc": "216,20",
            "due_date": "",
        }
    ).value

    result = factures.create_facture(form)

    assert isinstance(result, Ok)
    assert result.value["status"] == "draft"
    assert result.value["total_ttc"] == 216.2
    assert result.value["due_date"] is None


def test_update_facture_status(factures: FactureService):
    form = validate_invoice(
        {
            "number": "FAC-2025-002",
            "client_id": "c-0002",
            "status": "paid",
            "total_ht": "420",
            "total_ttc": "454.02",
        }
    ).value

    result = factures.update_facture("f-0002", form)

    assert isinstance(result, Ok)
    assert result.value["status"] == "paid"


def test_list_products_with_filters(products: ProductService):
    """Test filtering the product list."""
    result = products.list_products(ProductFilters(is_active=True))

    assert isinstance(result, Ok)
    assert {row["id"] for row in result.value} == {"p-0001", "p-0002"}


def test_search_products(products: ProductService):
    """Test the search over names and codes, sorted by name."""
    result = products.search_products("vis")

    assert [row["id"] for row in result.value] == ["p-0002", "p-0001"]
    assert products.search_products("  ").value == []


def test_low_stock_products(products: ProductService):
    result = products.low_stock_products()

    assert {row["id"] for row in result.value} == {"p-0002", "p-0003"}


def test_categories_and_brands(products: ProductService):
    """Test the distinct values offered by the filters."""
    assert products.categories().value == ["Outillage", "Peinture", "Quincaillerie"]
    assert products.brands().value == ["Bossard", "Makita"]


def test_product_lifecycle(products: ProductService):
    """Test create, edit, toggle and delete of a product."""
    form = validate_product({**product_to_form({}), "name": "Scie", "cost_price": "20", "selling_price": "35"}).value
    created = products.create_product(form)
    assert isinstance(created, Ok)
    product_id = created.value["id"]

    form = validate_product({**product_to_form(created.value), "stock_quantity": "12"}).value
    assert products.update_product(product_id, form).value["stock_quantity"] == 12

    assert products.toggle_active(product_id, False).value["is_active"] is False

    assert products.delete_product(product_id) == Ok(product_id)
    assert isinstance(products.get_product(product_id), Err)


@pytest.mark.parametrize(
    "operation, quantity, expected",
    [
        (StockOperation.SET, 7, 7),
        (StockOperation.ADD, 6, 10),
        (StockOperation.SUBTRACT, 3, 1),
        (StockOperation.SUBTRACT, 10, 0),
        ("add", 1, 5),
    ],
)
def test_update_stock(products: ProductService, operation, quantity, expected):
    """Test the stock operations; subtraction never goes below zero."""
    result = products.update_stock("p-0002", quantity, operation)

    assert isinstance(result, Ok)
    assert result.value["stock_quantity"] == expected


def test_update_stock_rejects_negative_quantity(products: ProductService):
    result = products.update_stock("p-0002", -1, StockOperation.ADD)

    assert isinstance(result, Err)
    assert result.error.code == "invalid_quantity"


def test_product_stats(products: ProductService):
    stats = products.stats().value

    assert stats.total_products == 3
    assert stats.low_stock_count == 2


def test_dashboard_stats(dashboard: DashboardService):
    """Test the dashboard figures for the demo rows."""
    result = dashboard.stats()

    assert isinstance(result, Ok)
    stats = result.value
    assert stats.clients_count == 3
    assert stats.factures_count == 3
    assert stats.products_count == 3
    assert stats.draft_count == 1
    assert stats.low_stock_count == 2
    assert stats.paid_total == pytest.approx(1999.85)
    assert stats.outstanding_total == pytest.approx(454.02)


def test_check_connection(dashboard: DashboardService):
    assert dashboard.check_connection() == Ok(3)


def test_missing_table_is_an_error():
    """Test that backend errors are returned, not raised."""
    backend = DemoBackend(tables={}, seed=False)
    del backend.database.tables["products"]

    result = ProductService(backend).list_products()

    assert isinstance(result, Err)
    assert result.error.code == "42P01"


def test_unconfigured_backend_services():
    """Test that every service reports the configuration error."""
    backend = UnconfiguredBackend(["SUPABASE_URL"])

    for result in (
        ClientService(backend).list_clients(),
        FactureService(backend).list_factures(),
        ProductService(backend).stats(),
        DashboardService(backend).stats(),
    ):
        assert isinstance(result, Err)
        assert result.error.code == "config_missing"


def test_bootstrap_wires_one_backend_per_session():
    """Test that each browser session gets its own backend, threaded everywhere."""
    database = DemoDatabase()
    built = []

    def factory(key):
        built.append(key)
        return DemoBackend(database=database)

    app = bootstrap(Settings(service="demo"), factory)
    visitor = app.sessions.get("token-a")

    assert built == ["token-a"]
    assert visitor.store.backend is visitor.backend
    assert visitor.clients.backend is visitor.backend
    assert visitor.products.backend is visitor.backend
    assert visitor.store.initialized
    assert app.sessions.get("token-a") is visitor
    assert built == ["token-a"]


def test_update_facture_sets_updated_at(factures: FactureService):
    """Test that updating a facture stamps updated_at, like the other tables."""
    form = validate_invoice(
        {
            "number": "FAC-2025-002",
            "client_id": "c-0002",
            "status": "sent",
            "total_ht": "420",
            "total_ttc": "454.02",
        }
    ).value

    result = factures.update_facture("f-0002", form)

    assert isinstance(result, Ok)
    assert result.value["updated_at"]
    assert result.value["updated_at"] > "2025-02-11T11:00:00+00:00"


def test_demo_database_is_shared_between_sessions():
    """Test that rows written in one session are read by another."""
    database = DemoDatabase()
    first = DemoBackend(database=database)
    second = DemoBackend(database=database)
    form = validate_client({"name": "Atelier Rossier"}).value

    created = ClientService(first).create_client(form)

    assert isinstance(created, Ok)
    assert ClientService(second).get_client(created.value["id"]).value["name"] == "Atelier Rossier"


def test_demo_auth_is_per_session():
    """Test that signing in one demo backend leaves the others signed out."""
    database = DemoDatabase()
    first = DemoBackend(database=database)
    second = DemoBackend(database=database)

    assert isinstance(first.sign_in(DEMO_EMAIL, DEMO_PASSWORD), Ok)

    assert first.get_session().value is not None
    assert second.get_session() == Ok(None)
