import logging

import pytest

from plugin_sdk.core.config import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    for name in ("PLUGIN_SDK_ENVIRONMENT", "PLUGIN_SDK_LOG_LEVEL", "PLUGIN_SDK_LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def restore_root_logger(monkeypatch):
    root = logging.getLogger()
    handlers = list(root.handlers)
    # configure_logging marks the root logger; monkeypatch undoes the mark.
    monkeypatch.setattr(root, "_structured_configured", False, raising=False)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
