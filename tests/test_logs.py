"""
Log setup tests.
"""

from erp_ui.lib import logs


def test_logger_named_after_module_file():
    log = logs.logger("/srv/app/src/erp_ui/services/backend_impl.py")

    assert log.name == "backend_impl"


def test_logger_handler_attached_once():
    first = logs.logger("erp_ui_test_handlers")
    second = logs.logger("erp_ui_test_handlers")

    assert first is second
    assert len(second.handlers) == 1


def test_mask_keeps_only_a_prefix():
    secret = "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.payload.signature"

    masked = logs.mask(secret)

    assert masked == secret[:20] + "..."
    assert "signature" not in masked


def test_mask_unset():
    assert logs.mask("") == "<unset>"
    assert logs.mask(None) == "<unset>"
