"""Decoding and field validation for group/capability creation requests."""
from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union


class InvalidBody(Exception):
    """Request body is not JSON or does not fit the expected shape."""
    pass


@dataclass(frozen=True)
class CreateResourceRequest:
    """Decoded creation request. ``name`` is None when absent or null."""
    name: Optional[str]
    attributes: Optional[Dict[str, List[str]]] = None


@dataclass(frozen=True)
class FieldViolation:
    """A single field validation failure, e.g. ("name", "required", [...])."""
    field: str
    code: str
    context: List[str] = dataclasses.field(default_factory=list)


def decode_create_request(body: Union[bytes, str, None]) -> CreateResourceRequest:
    """Decode a JSON body into a CreateResourceRequest.

    Unknown keys are ignored; ``null`` counts as absent.

    Raises:
        InvalidBody: If the body is not a JSON object, ``name`` is not a
            string, or ``attributes`` is not a mapping of string to list of strings
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidBody(f"body is not UTF-8: {exc}") from exc

    try:
        payload = json.loads(body or "")
    except ValueError as exc:
        raise InvalidBody(f"body is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise InvalidBody("body must be a JSON object")

    name = payload.get("name")
    if name is not None and not isinstance(name, str):
        raise InvalidBody("name must be a string")

    attributes = payload.get("attributes")
    if attributes is not None:
        attributes = _decode_attributes(attributes)

    return CreateResourceRequest(name=name, attributes=attributes)


def _decode_attributes(raw: Any) -> Dict[str, List[str]]:
    if not isinstance(raw, dict):
        raise InvalidBody("attributes must be an object")

    decoded = {}
    for key, values in raw.items():
        if values is None:
            decoded[key] = []
            continue
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise InvalidBody(f"attributes.{key} must be a list of strings")
        decoded[key] = list(values)
    return decoded


def validate_create_request(req: CreateResourceRequest, label: str = "group") -> List[FieldViolation]:
    """Apply field rules; an empty list means the request is valid.

    Args:
        req: Decoded request
        label: Resource wording used in messages ("group", "Capability")

    Returns:
        Violations in field declaration order
    """
    violations = []

    if not req.name:
        violations.append(
            FieldViolation(
                field="name",
                code="required",
                context=[f"{label} name is required", req.name or ""],
            )
        )

    return violations
