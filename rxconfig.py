"""Reflex configuration for the ERP UI application."""

import os

import reflex as rx

# Get port from environment
APP_PORT = int(os.getenv("ERP_UI_PORT", "8000"))

config = rx.Config(
    app_name="erp_ui",
    # Use the src directory structure
    app_module_import="erp_ui.app",
    frontend_port=APP_PORT,
)
