"""
Pytest configuration and fixtures.
"""

import pytest

from erp_ui.data.demo_records import DEMO_EMAIL, DEMO_PASSWORD
from erp_ui.services import (
    ClientService,
    DashboardService,
    DemoBackend,
    FactureService,
    ProductService,
)
from erp_ui.session import SessionStore


@pytest.fixture
def backend() -> DemoBackend:
    """In-memory backend seeded with the demo rows, nobody signed in."""
    return DemoBackend()


@pytest.fixture
def signed_in_backend(backend: DemoBackend) -> DemoBackend:
    """Demo backend with the demo account signed in."""
    backend.sign_in(DEMO_EMAIL, DEMO_PASSWORD)
    return backend


@pytest.fixture
def store(backend: DemoBackend) -> SessionStore:
    """Session store over the demo backend, not yet initialized."""
    session_store = SessionStore(backend)
    yield session_store
    session_store.close()


@pytest.fixture
def clients(backend: DemoBackend) -> ClientService:
    return ClientService(backend)


@pytest.fixture
def factures(backend: DemoBackend) -> FactureService:
    return FactureService(backend)


@pytest.fixture
def products(backend: DemoBackend) -> ProductService:
    return ProductService(backend)


@pytest.fixture
def dashboard(backend: DemoBackend) -> DashboardService:
    return DashboardService(backend)
