"""
Import tests run in a fresh interpreter, so module order is not hidden by
modules the test session already loaded.
"""

import os
import subprocess
import sys

import pytest


@pytest.mark.parametrize(
    "module",
    [
        "erp_ui.config",
        "erp_ui.lib",
        "erp_ui.lib.clients",
        "erp_ui.services",
        "erp_ui.session",
        "erp_ui.context",
        "erp_ui.access",
    ],
)
def test_module_imports_first(module):
    """Test that each module can be the first one a process imports."""
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(path for path in sys.path if path)

    completed = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        capture_output=True,
        text=True,
        env=env,
        timeout=60,
    )

    assert completed.returncode == 0, completed.stderr
