import logging

from flask import Flask

import idshield.flask_app as flask_module
from idshield.config import settings
from idshield.flask_app import configure_logging, create_app, main


def test_correlation_id_echoed(client):
    response = client.post(
        "/group-create",
        json={"name": "Admins"},
        headers={"Authorization": "Bearer tok1", "X-Correlation-Id": "abc-123"},
    )

    assert response.headers["X-Correlation-Id"] == "abc-123"


def test_no_correlation_id_when_absent(client):
    response = client.post("/group-create", json={"name": "Admins"}, headers={"Authorization": "Bearer tok1"})
    assert "X-Correlation-Id" not in response.headers


def test_app_config_exposed(flask_app, app_config):
    assert flask_app.config["APP_CONFIG"] is app_config
    assert flask_app.config["MAX_CONTENT_LENGTH"] == app_config.max_content_length


def test_logs_written_to_configured_file(client, app_config):
    client.post("/group-create", json={"name": "Admins"}, headers={"Authorization": "Bearer tok1"})

    for handler in logging.getLogger("idshield").handlers:
        handler.flush()
    content = open(app_config.log_file, encoding="utf-8").read()

    assert "[request]" in content
    assert "POST /group-create 200" in content
    assert "tok1" not in content


def test_logging_falls_back_to_stdout(app_config, tmp_path, capsys):
    app_config.log_file = str(tmp_path)  # a directory cannot be opened for writing

    configure_logging(app_config)

    handlers = [h for h in logging.getLogger("idshield").handlers if getattr(h, "_idshield", False)]
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.StreamHandler)
    assert not isinstance(handlers[0], logging.FileHandler)
    assert "logging to stdout" in capsys.readouterr().out


def test_configure_logging_replaces_previous_handler(app_config):
    configure_logging(app_config)
    configure_logging(app_config)

    tagged = [h for h in logging.getLogger("idshield").handlers if getattr(h, "_idshield", False)]
    assert len(tagged) == 1


def test_create_app_without_gateway_registers_routes(app_config, catalog):
    app = create_app(app_config, catalog=catalog)
    assert app.url_map.bind("localhost").match("/group-create", method="POST")[0] == "groups.create_group"


def test_main_returns_1_on_config_error(monkeypatch, capsys):
    for env_var in list(settings.ENV_VARS) + [settings.CONFIG_FILE_ENV]:
        monkeypatch.delenv(env_var, raising=False)

    assert main([]) == 1
    assert "Error loading config" in capsys.readouterr().err


def test_main_runs_app_on_requested_port(monkeypatch, app_config):
    monkeypatch.setattr(flask_module, "load_settings", lambda config_file=None: app_config)
    calls = {}

    def fake_run(self, host=None, port=None, **kwargs):
        calls["host"] = host
        calls["port"] = port

    monkeypatch.setattr(Flask, "run", fake_run)

    assert main(["--port", "9999"]) == 0
    assert calls == {"host": "0.0.0.0", "port": 9999}
