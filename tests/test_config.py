"""
Settings, startup validation and logging setup.
"""

import logging
import logging.handlers

import pytest

from core.config import Environment, Settings, get_database_config, validate_required_settings
from core.logging import ColoredFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        if handler not in handlers:
            handler.close()
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


def test_database_config_holds_only_connection_details():
    assert get_database_config() == {
        "url": "https://fake.supabase.co",
        "service_role_key": "test-service-role-key"
    }


def test_missing_secrets_refuse_production_startup():
    settings = Settings()
    settings.environment = Environment.PRODUCTION
    settings.admin_password = None

    with pytest.raises(ValueError) as exc_info:
        validate_required_settings(settings)

    assert "ADMIN_PASSWORD" in str(exc_info.value)


def test_missing_secrets_only_warn_in_development(caplog):
    settings = Settings()
    settings.jwt_secret = None

    validate_required_settings(settings)

    assert "JWT_SECRET" in caplog.text


def test_colored_formatter_leaves_the_record_untouched():
    record = logging.LogRecord("cars", logging.ERROR, __file__, 1, "boom", None, None)

    output = ColoredFormatter("%(levelname)s %(message)s").format(record)

    assert output == "\033[31mERROR\033[0m boom"
    assert record.levelname == "ERROR"


def test_log_file_rotates_with_configured_limits(tmp_path, settings, monkeypatch, restore_root_logger):
    monkeypatch.setattr(settings, "log_max_bytes", 2048)
    monkeypatch.setattr(settings, "log_backup_count", 2)
    log_file = tmp_path / "logs" / "app.log"

    setup_logging(log_level="DEBUG", log_file=str(log_file))

    file_handlers = [
        handler for handler in restore_root_logger.handlers
        if isinstance(handler, logging.handlers.RotatingFileHandler)
    ]
    assert len(file_handlers) == 1
    assert (file_handlers[0].maxBytes, file_handlers[0].backupCount) == (2048, 2)
    assert log_file.exists()
    assert logging.getLogger("httpx").level == logging.WARNING
