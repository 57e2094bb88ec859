"""Tests ensuring observability wiring is safe by default."""
from __future__ import annotations

import importlib


def test_app_import_succeeds_when_opik_is_disabled(monkeypatch) -> None:
    monkeypatch.setenv("OPIK_ENABLED", "false")
    monkeypatch.delenv("OPIK_API_KEY", raising=False)

    import braindump.core.config as core_config
    import braindump.observability.client as client_module
    import braindump.main as main_module

    importlib.reload(core_config)
    importlib.reload(client_module)
    reloaded_app = importlib.reload(main_module)

    assert hasattr(reloaded_app, "app")
    assert client_module.get_opik_client() is None


def test_enabled_without_api_key_stays_disabled(monkeypatch, caplog) -> None:
    from braindump.observability import client as client_module

    monkeypatch.setattr(client_module.settings, "opik_enabled", True)
    monkeypatch.setattr(client_module.settings, "opik_api_key", None)
    client_module.reset_opik_client()
    try:
        with caplog.at_level("WARNING"):
            assert client_module.init_opik() is None
        assert "OPIK_API_KEY is missing" in caplog.text
    finally:
        client_module.reset_opik_client()
