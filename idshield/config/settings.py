"""Settings loader: defaults, JSON config file, environment, Docker secrets."""
from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Environment variable -> AppConfig field
ENV_VARS = {
    "APP_SERVER_PORT": "app_server_port",
    "KEYCLOAK_URL": "keycloak_url",
    "KEYCLOAK_CLIENT_ID": "keycloak_client_id",
    "KEYCLOAK_CLIENT_SECRET": "keycloak_client_secret",
    "PROVIDER_URL": "provider_url",
    "KEYCLOAK_REALM": "realm",
    "PROVIDER_TIMEOUT": "provider_timeout",
    "LOG_FILE": "log_file",
    "LOG_LEVEL": "log_level",
    "ERROR_TYPES_FILE": "error_types_file",
    "MAX_CONTENT_LENGTH": "max_content_length",
}

CONFIG_FILE_ENV = "IDSHIELD_CONFIG_FILE"


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info(f"Loaded {secret_name} from /run/secrets")
                return secret_value
        except OSError as e:
            logger.warning(f"Failed to read /run/secrets/{secret_name}: {e}")

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            return secret_value

    return None


@dataclass
class AppConfig:
    """Application configuration container."""
    # Server
    app_server_port: int = 8080
    max_content_length: int = 65536  # 64 KB

    # Keycloak
    keycloak_url: str = ""
    keycloak_client_id: str = ""
    keycloak_client_secret: str = ""
    provider_url: str = ""
    realm: str = ""
    provider_timeout: float = 10.0

    # Logging / errors
    log_file: str = "log.txt"
    log_level: str = "INFO"
    error_types_file: str = ""

    def __repr__(self) -> str:
        secret = "***" if self.keycloak_client_secret else "EMPTY"
        return (
            f"AppConfig(app_server_port={self.app_server_port}, keycloak_url={self.keycloak_url!r}, "
            f"realm={self.realm!r}, keycloak_client_id={self.keycloak_client_id!r}, "
            f"keycloak_client_secret={secret}, provider_url={self.provider_url!r})"
        )


def _read_config_file(path: Path) -> dict[str, Any]:
    """Read a JSON config file with the same keys as AppConfig fields."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RuntimeError(f"Cannot read config file {path}: {exc}") from exc
    except ValueError as exc:
        raise RuntimeError(f"Config file {path} is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise RuntimeError(f"Config file {path} must contain a JSON object")

    known = {f.name for f in fields(AppConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        logger.warning(f"Ignoring unknown config keys in {path}: {', '.join(unknown)}")
    return {key: value for key, value in raw.items() if key in known}


def _coerce(values: dict[str, Any]) -> dict[str, Any]:
    """Convert numeric settings, naming the key on failure."""
    converters = {"app_server_port": int, "max_content_length": int, "provider_timeout": float}
    coerced = dict(values)
    for key, convert in converters.items():
        if key not in coerced:
            continue
        try:
            coerced[key] = convert(coerced[key])
        except (TypeError, ValueError) as exc:
            raise RuntimeError(f"Setting {key} must be numeric, got {coerced[key]!r}") from exc
    for key in ("app_server_port", "max_content_length", "provider_timeout"):
        if key in coerced and coerced[key] <= 0:
            raise RuntimeError(f"Setting {key} must be positive, got {coerced[key]!r}")
    return coerced


def load_settings(config_file: Optional[str] = None) -> AppConfig:
    """Load application settings.

    Priority (lowest to highest):
    1. AppConfig defaults
    2. JSON config file (argument, or IDSHIELD_CONFIG_FILE)
    3. Environment variables (see ENV_VARS)
    4. /run/secrets/keycloak_client_secret for the client secret

    Raises:
        RuntimeError: On unreadable config, non-numeric values, or missing
            keycloak_url / realm
    """
    values: dict[str, Any] = {}

    config_file = config_file or os.environ.get(CONFIG_FILE_ENV)
    if config_file:
        values.update(_read_config_file(Path(config_file)))
        logger.info(f"Loaded configuration file {config_file}")

    for env_var, key in ENV_VARS.items():
        value = os.environ.get(env_var)
        if value:
            values[key] = value

    secret = _load_secret_from_file("keycloak_client_secret", "KEYCLOAK_CLIENT_SECRET")
    if secret:
        values["keycloak_client_secret"] = secret

    cfg = AppConfig(**_coerce(values))

    if not cfg.provider_url and cfg.keycloak_url and cfg.realm:
        cfg.provider_url = f"{cfg.keycloak_url.rstrip('/')}/realms/{cfg.realm}"

    missing = [name for name in ("keycloak_url", "realm") if not getattr(cfg, name)]
    if missing:
        raise RuntimeError(f"Missing required settings: {', '.join(missing)}")

    logger.info(f"Loaded configuration: {cfg!r}")
    return cfg
