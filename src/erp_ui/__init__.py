"""
ERP UI: A Reflex front-end for clients, invoices and products.

This package provides an authenticated web interface over a Supabase
project (auth plus the `clients`, `factures` and `products` tables), with
an in-memory demo backend for local use.

Subpackages:
- components: Reflex UI components
- models: Result types, session snapshot and form validation schemas
- services: Backend boundary (Supabase, demo) and record services
- data: Static demo fixtures

Main entry points:
- app.main(): Start the development server
- app.app: The Reflex application instance
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
