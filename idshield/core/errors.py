"""Client-facing error taxonomy and provider error classification.

Keycloak does not return typed error codes on group creation, only status
lines such as ``409 Conflict: Top level group named 'x' already exists.``.
Classification is a priority-ordered list of rules matched literally against
that text; anything no rule recognises is ``UNKNOWN``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

UNAUTHORIZED_MESSAGE = "401 Unauthorized: HTTP 401 Unauthorized"
NAME_CONFLICT_TEMPLATE = "409 Conflict: Top level group named '{name}' already exists."


class ErrorKind(str, Enum):
    """Failure kinds; the value is the wire error code."""

    TOKEN_MISSING = "token_missing"
    INVALID_BODY = "invalid_json"
    VALIDATION_FAILED = "validation_failed"
    UNAUTHORIZED = "unauthorized"
    NAME_CONFLICT = "name_already_exist"
    PROVIDER_TIMEOUT = "provider_timeout"
    PROVIDER_FETCH_FAILED = "provider_fetch_failed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ClassificationRule:
    """Maps a provider message to a kind when ``predicate(message, name)`` holds."""
    name: str
    predicate: Callable[[str, str], bool]
    kind: ErrorKind


def _is_unauthorized(message: str, name: str) -> bool:
    return message == UNAUTHORIZED_MESSAGE


def _is_name_conflict(message: str, name: str) -> bool:
    return message == NAME_CONFLICT_TEMPLATE.format(name=name)


DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule("unauthorized", _is_unauthorized, ErrorKind.UNAUTHORIZED),
    ClassificationRule("name_conflict", _is_name_conflict, ErrorKind.NAME_CONFLICT),
)


class ErrorClassifier:
    """First matching rule wins; no match yields ErrorKind.UNKNOWN."""

    def __init__(self, rules: Optional[Sequence[ClassificationRule]] = None):
        self.rules = tuple(DEFAULT_RULES if rules is None else rules)

    def classify(self, message: str, name: str) -> ErrorKind:
        """Classify a raw provider message raised while creating ``name``."""
        for rule in self.rules:
            if rule.predicate(message, name):
                return rule.kind
        return ErrorKind.UNKNOWN