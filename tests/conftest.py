"""Pytest shared fixtures."""
import pathlib
import sys
from unittest.mock import MagicMock

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from idshield.config import AppConfig
from idshield.core.error_catalog import load_error_catalog
from idshield.core.keycloak import GroupService
from idshield.flask_app import create_app


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch, request):
    """
    Prevent unit tests from reaching a live Keycloak.

    Tests that exercise the HTTP client replace requests.get/post themselves.
    """
    if request.node.get_closest_marker("integration"):
        return

    def _unexpected(url, *args, **kwargs):
        raise RuntimeError(f"Unexpected network access in tests: {url}")

    monkeypatch.setattr(requests, "post", _unexpected)
    monkeypatch.setattr(requests, "get", _unexpected)


# ─────────────────────────────────────────────────────────────────────────────
# Configuration / collaborators
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def app_config(tmp_path):
    return AppConfig(
        app_server_port=8080,
        keycloak_url="http://keycloak:8080",
        keycloak_client_id="idshield",
        keycloak_client_secret="secret",
        provider_url="http://keycloak:8080/realms/demo",
        realm="demo",
        log_file=str(tmp_path / "log.txt"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def catalog():
    """Catalog shipped with the package."""
    return load_error_catalog()


ADMINS_GROUP = {
    "id": "g-1",
    "name": "Admins",
    "path": "/Admins",
    "attributes": None,
    "subGroups": [],
}


@pytest.fixture()
def mock_gateway():
    """GroupService double: create returns "g-1", get returns the Admins group."""
    gateway = MagicMock(spec=GroupService)
    gateway.create_group.return_value = "g-1"
    gateway.get_group.return_value = dict(ADMINS_GROUP)
    return gateway


# ─────────────────────────────────────────────────────────────────────────────
# Flask Test Client
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def flask_app(app_config, mock_gateway, catalog):
    app = create_app(app_config, gateway=mock_gateway, catalog=catalog)
    app.config.update(TESTING=True)
    return app


@pytest.fixture()
def client(flask_app):
    with flask_app.test_client() as client:
        yield client


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (requires running stack)"
    )
