"""
Local library modules shared by the ERP UI.

Modules:
    logs: Logging utilities
    clients: Supabase client factory, one client per browser session

Only `logs` is imported here. `clients` depends on `erp_ui.config`, which
itself logs through this package, so it is imported by its full name where
needed (`from erp_ui.lib import clients`).
"""

from erp_ui.lib import logs

__all__ = ["logs"]
