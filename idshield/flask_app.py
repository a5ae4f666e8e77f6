"""Flask application factory and bootstrap.

This module provides the create_app() factory wiring configuration, logging,
the error catalog, the Keycloak gateway and the creation routes.
"""
from __future__ import annotations
import argparse
import logging
import sys
import time
from typing import Optional

from flask import Flask, g, request

from idshield.api import errors
from idshield.api.groups import create_blueprint
from idshield.config import AppConfig, load_settings
from idshield.core.error_catalog import ErrorCatalog, load_error_catalog
from idshield.core.keycloak import GroupService, KeycloakClient
from idshield.core.orchestrator import CreateGroupHandler

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger("idshield")
request_logger = logging.getLogger("idshield.request")


# ─────────────────────────────────────────────────────────────────────────────
# Application Factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app(
    cfg: Optional[AppConfig] = None,
    gateway: Optional[GroupService] = None,
    catalog: Optional[ErrorCatalog] = None,
) -> Flask:
    """Create and configure Flask application.

    Args:
        cfg: Settings (loaded from file/environment when omitted)
        gateway: Keycloak group service (built from cfg when omitted)
        catalog: Error catalog (loaded from cfg.error_types_file when omitted)
    """
    cfg = cfg or load_settings()
    configure_logging(cfg)

    app = Flask(__name__)
    app.config["APP_CONFIG"] = cfg
    app.config["MAX_CONTENT_LENGTH"] = cfg.max_content_length

    if catalog is None:
        catalog = load_error_catalog(cfg.error_types_file or None)
    if gateway is None:
        gateway = GroupService(KeycloakClient(cfg.keycloak_url, timeout=cfg.provider_timeout))
    app.extensions["idshield.catalog"] = catalog

    handler_logger = logging.getLogger("idshield.groupservice")
    capability_handler = CreateGroupHandler(
        gateway, cfg.realm, label="Capability", catalog=catalog, logger=handler_logger
    )
    group_handler = CreateGroupHandler(
        gateway, cfg.realm, label="group", catalog=catalog, logger=handler_logger
    )

    app.register_blueprint(create_blueprint(capability_handler, group_handler))
    errors.register_error_handlers(app)
    _register_middleware(app)

    logger.info(f"Routes registered: POST /capability-create, POST /group-create (realm={cfg.realm})")
    return app


def configure_logging(cfg: AppConfig) -> None:
    """Send idshield logs to cfg.log_file, or stdout when the file cannot be opened."""
    root = logging.getLogger("idshield")
    root.setLevel(getattr(logging, cfg.log_level.upper(), logging.INFO))

    for existing in list(root.handlers):
        if getattr(existing, "_idshield", False):
            root.removeHandler(existing)
            existing.close()

    try:
        handler: logging.Handler = logging.FileHandler(cfg.log_file, encoding="utf-8")
    except OSError as exc:
        handler = logging.StreamHandler(sys.stdout)
        print(f"[flask_app] Cannot open log file {cfg.log_file} ({exc}); logging to stdout")

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._idshield = True  # type: ignore[attr-defined]
    root.addHandler(handler)


def _register_middleware(app: Flask) -> None:
    """Register request logging and correlation ID handling."""

    @app.before_request
    def log_request_start() -> None:
        g.request_started = time.monotonic()
        request_logger.info(f"[request] {request.remote_addr} - {request.method} {request.path}")

    @app.after_request
    def log_request_end(response):
        started = g.get("request_started")
        duration_ms = (time.monotonic() - started) * 1000 if started else 0.0
        request_logger.info(
            f"[request] {request.remote_addr} - {request.method} {request.path} "
            f"{response.status_code} {duration_ms:.1f}ms"
        )

        correlation_id = request.headers.get("X-Correlation-Id")
        if correlation_id:
            response.headers["X-Correlation-Id"] = correlation_id
        return response


# ─────────────────────────────────────────────────────────────────────────────
# Command line entry point
# ─────────────────────────────────────────────────────────────────────────────
def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="idshield group/capability creation service")
    parser.add_argument("--config-file", help="JSON configuration file (overrides IDSHIELD_CONFIG_FILE)")
    parser.add_argument("--port", type=int, help="Port to listen on (overrides app_server_port)")
    args = parser.parse_args(argv)

    try:
        cfg = load_settings(args.config_file)
    except RuntimeError as exc:
        print(f"[flask_app] Error loading config: {exc}", file=sys.stderr)
        return 1

    if args.port:
        cfg.app_server_port = args.port

    app = create_app(cfg)
    app.run(host="0.0.0.0", port=cfg.app_server_port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
