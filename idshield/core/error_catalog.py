"""Error catalog: symbolic error codes mapped to message IDs and user-facing text."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .envelopes import ErrorMessage

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "errortypes.yaml"

logger = logging.getLogger(__name__)


class ErrorCatalog:
    """Lookup of ``code -> {msgid, message}``.

    Usage:
        catalog = load_error_catalog()
        catalog.describe("token_missing")  # {"msgid": 1001, "message": "..."}
    """

    def __init__(self, entries: Optional[Dict[str, Dict[str, Any]]] = None):
        self.entries = dict(entries or {})

    def __contains__(self, code: str) -> bool:
        return code in self.entries

    def describe(self, code: str) -> Optional[Dict[str, Any]]:
        return self.entries.get(code)

    def render(self, code: str, field: Optional[str] = None, vals=()) -> Optional[str]:
        """Format the message template with ``{field}`` and positional vals.

        A template referencing values that were not supplied is returned verbatim.
        """
        entry = self.entries.get(code)
        if not entry or not entry.get("message"):
            return None
        template = str(entry["message"])
        try:
            return template.format(*vals, field=field or "")
        except (IndexError, KeyError, ValueError):
            return template

    def enrich(self, message: ErrorMessage) -> ErrorMessage:
        """Fill msgid and message text on ``message`` when the code is catalogued."""
        entry = self.entries.get(message.code)
        if entry is None:
            logger.debug(f"No catalog entry for error code {message.code}")
            return message
        message.msgid = entry.get("msgid")
        message.message = self.render(message.code, message.field, message.vals)
        return message


def load_error_catalog(path: Union[str, Path, None] = None) -> ErrorCatalog:
    """Load the catalog from YAML.

    Raises:
        RuntimeError: If the file is missing or not a mapping of code to entry
    """
    path = Path(path) if path else DEFAULT_CATALOG_PATH
    if not path.exists():
        raise RuntimeError(f"Error types file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Error types file {path} is not valid YAML: {exc}") from exc

    if not isinstance(raw, dict):
        raise RuntimeError(f"Error types file {path} must map error codes to entries")

    entries = {}
    for code, entry in raw.items():
        if not isinstance(entry, dict):
            raise RuntimeError(f"Error type '{code}' must be a mapping with msgid/message")
        entries[str(code)] = entry

    logger.info(f"Loaded {len(entries)} error types from {path}")
    return ErrorCatalog(entries)
