"""
Reflex UI components for the ERP application.

This package provides one module per view plus shared pieces:
- layout: navigation bar, protected and public page wrappers
- fields: form inputs with inline field errors, loading and empty states
- auth_forms: login and signup pages
- dashboard, clients, factures, products, product_form: record views

All components are plain functions returning rx.Component.
"""
