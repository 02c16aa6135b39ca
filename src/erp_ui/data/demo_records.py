"""Demo account and table rows loaded by DemoBackend."""

DEMO_EMAIL = "demo@erp-ui.ch"
DEMO_PASSWORD = "demo1234"

DEMO_CLIENTS: list[dict] = [
    {
        "id": "c-0001",
        "name": "Menuiserie Favre SA",
        "email": "contact@favre-menuiserie.ch",
        "phone": "+41 21 555 10 20",
        "address": "Rue du Lac 12, 1003 Lausanne",
        "created_at": "2025-01-06T08:30:00+00:00",
        "updated_at": "2025-01-06T08:30:00+00:00",
    },
    {
        "id": "c-0002",
        "name": "Boulangerie Rochat",
        "email": "info@rochat-boulangerie.ch",
        "phone": None,
        "address": "Place du Marché 3, 1260 Nyon",
        "created_at": "2025-02-11T10:15:00+00:00",
        "updated_at": "2025-02-11T10:15:00+00:00",
    },
    {
        "id": "c-0003",
        "name": "Garage du Jura",
        "email": None,
        "phone": "+41 32 555 44 11",
        "address": None,
        "created_at": "2025-03-02T14:00:00+00:00",
        "updated_at": "2025-03-02T14:00:00+00:00",
    },
]

DEMO_FACTURES: list[dict] = [
    {
        "id": "f-0001",
        "number": "FAC-2025-001",
        "client_id": "c-0001",
        "status": "paid",
        "total_ht": 1850.0,
        "total_ttc": 1999.85,
        "due_date": "2025-02-05",
        "created_at": "2025-01-06T09:00:00+00:00",
    },
    {
        "id": "f-0002",
        "number": "FAC-2025-002",
        "client_id": "c-0002",
        "status": "sent",
        "total_ht": 420.0,
        "total_ttc": 454.02,
        "due_date": "2025-03-13",
        "created_at": "2025-02-11T11:00:00+00:00",
    },
    {
        "id": "f-0003",
        "number": "FAC-2025-003",
        "client_id": "c-0003",
        "status": "draft",
        "total_ht": 96.5,
        "total_ttc": 104.32,
        "due_date": None,
        "created_at": "2025-03-02T15:30:00+00:00",
    },
]

DEMO_PRODUCTS: list[dict] = [
    {
        "id": "p-0001",
        "name": "Vis inox 4x40",
        "description": "Boîte de 200 vis inox A2",
        "reference": "VIS-440",
        "sku": "SKU-0001",
        "cost_price": 8.5,
        "selling_price": 14.9,
        "stock_quantity": 120,
        "min_stock_level": 20,
        "max_stock_level": 500,
        "category": "Quincaillerie",
        "brand": "Bossard",
        "weight": 0.9,
        "dimensions": "12x8x5",
        "is_active": True,
        "created_at": "2025-01-02T08:00:00+00:00",
        "updated_at": "2025-01-02T08:00:00+00:00",
    },
    {
        "id": "p-0002",
        "name": "Perceuse-visseuse 18V",
        "description": None,
        "reference": "PV-18",
        "sku": "SKU-0002",
        "cost_price": 129.0,
        "selling_price": 189.0,
        "stock_quantity": 4,
        "min_stock_level": 5,
        "max_stock_level": 30,
        "category": "Outillage",
        "brand": "Makita",
        "weight": 1.6,
        "dimensions": None,
        "is_active": True,
        "created_at": "2025-01-15T08:00:00+00:00",
        "updated_at": "2025-01-15T08:00:00+00:00",
    },
    {
        "id": "p-0003",
        "name": "Lasure chêne 2.5L",
        "description": "Lasure extérieure teinte chêne clair",
        "reference": None,
        "sku": None,
        "cost_price": 24.0,
        "selling_price": 39.5,
        "stock_quantity": 0,
        "min_stock_level": 3,
        "max_stock_level": 40,
        "category": "Peinture",
        "brand": None,
        "weight": 2.8,
        "dimensions": None,
        "is_active": False,
        "created_at": "2025-02-20T08:00:00+00:00",
        "updated_at": "2025-02-20T08:00:00+00:00",
    },
]
