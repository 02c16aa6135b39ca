"""
Environment configuration for the ERP UI.

Settings are read once per process. Missing backend credentials are logged
as warnings rather than raised, so the UI still starts and reports the
problem on screen instead of crashing.

Environment variables:
- SUPABASE_URL: Project URL (required)
- SUPABASE_ANON_KEY: Public anon API key (required)
- ERP_UI_SERVICE: Backend kind, "supabase" (default) or "demo"
- ERP_UI_PORT: HTTP port for the development server (default 8000)
- LOG_LEVEL: Logging level (default INFO)
"""

import functools
import os
from dataclasses import dataclass
from typing import Mapping

from erp_ui.lib import logs

LOG = logs.logger(__file__)

SUPABASE_URL_KEY = "SUPABASE_URL"
SUPABASE_ANON_KEY_KEY = "SUPABASE_ANON_KEY"
SERVICE_KEY = "ERP_UI_SERVICE"
PORT_KEY = "ERP_UI_PORT"

DEFAULT_SERVICE = "supabase"
DEFAULT_PORT = 8000

# Header sent with every backend request
CLIENT_INFO = "erp-ui"


@dataclass(frozen=True, slots=True)
class Settings:
    """
    Resolved application settings.

    Attributes:
        supabase_url: Backend project URL, empty when unset.
        supabase_anon_key: Public API key, empty when unset.
        service: Backend implementation kind.
        port: Development server port.
    """

    supabase_url: str = ""
    supabase_anon_key: str = ""
    service: str = DEFAULT_SERVICE
    port: int = DEFAULT_PORT

    @property
    def missing(self) -> list[str]:
        """Names of required variables that are not set."""
        missing = []
        if not self.supabase_url:
            missing.append(SUPABASE_URL_KEY)
        if not self.supabase_anon_key:
            missing.append(SUPABASE_ANON_KEY_KEY)
        return missing

    @property
    def backend_configured(self) -> bool:
        return not self.missing


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from environment variables and log the outcome.

    Args:
        environ: Variables to read, os.environ by default.

    Returns:
        Settings; never raises for missing or malformed backend values.
    """
    env = os.environ if environ is None else environ
    port_value = env.get(PORT_KEY, "") or str(DEFAULT_PORT)
    try:
        port = int(port_value)
    except ValueError:
        LOG.warning("%s is not a number: %s, using %s", PORT_KEY, port_value, DEFAULT_PORT)
        port = DEFAULT_PORT

    settings = Settings(
        supabase_url=env.get(SUPABASE_URL_KEY, "").strip(),
        supabase_anon_key=env.get(SUPABASE_ANON_KEY_KEY, "").strip(),
        service=(env.get(SERVICE_KEY, "") or DEFAULT_SERVICE).strip().lower(),
        port=port,
    )

    LOG.info("%s: %s", SUPABASE_URL_KEY, settings.supabase_url or "<unset>")
    LOG.info("%s: %s", SUPABASE_ANON_KEY_KEY, logs.mask(settings.supabase_anon_key))
    LOG.info("%s: %s", SERVICE_KEY, settings.service)

    if settings.missing:
        LOG.warning(
            "Missing backend configuration: %s. Set them in the environment; "
            "backend calls will fail until then.",
            ", ".join(settings.missing),
        )
    else:
        if "supabase.co" not in settings.supabase_url:
            LOG.warning("%s does not look like a Supabase project URL", SUPABASE_URL_KEY)
        if not settings.supabase_anon_key.startswith("eyJ"):
            LOG.warning("%s does not look like a JWT", SUPABASE_ANON_KEY_KEY)
    return settings


@functools.cache
def settings() -> Settings:
    """Return the process-wide settings, read on first use."""
    return load_settings()
