"""
Static and demo data for the ERP UI.

This package contains fixture data used by DemoBackend for development,
testing, and demonstrations without a Supabase project.

Modules:
- demo_records: Demo account and pre-populated clients, factures, products
"""
