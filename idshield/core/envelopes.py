"""Success and error response envelopes."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .errors import ErrorKind
from .validators import FieldViolation

SUCCESS_STATUS = "success"
ERROR_STATUS = "error"


@dataclass(frozen=True)
class CreateResourceResponse:
    """Group as reported by the provider after creation."""
    id: str
    name: str
    path: Optional[str] = None
    attributes: Optional[Dict[str, List[str]]] = None

    @classmethod
    def from_provider(cls, group: dict) -> "CreateResourceResponse":
        """Build from a Keycloak group representation, copying fields as-is."""
        return cls(
            id=group["id"],
            name=group["name"],
            path=group.get("path"),
            attributes=group.get("attributes"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "attributes": self.attributes,
        }


@dataclass
class ErrorMessage:
    """One entry of ``messages`` in an error envelope."""
    code: str
    field: Optional[str] = None
    vals: List[str] = dataclasses.field(default_factory=list)
    msgid: Optional[int] = None
    message: Optional[str] = None

    @classmethod
    def from_violation(cls, violation: FieldViolation) -> "ErrorMessage":
        return cls(code=violation.code, field=violation.field, vals=list(violation.context))

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {"code": self.code}
        if self.field is not None:
            data["field"] = self.field
        if self.vals:
            data["vals"] = list(self.vals)
        if self.msgid is not None:
            data["msgid"] = self.msgid
        if self.message is not None:
            data["message"] = self.message
        return data


@dataclass
class Envelope:
    """Terminal result of a request: success with data, or error with messages.

    ``kind`` is None on success; the HTTP layer picks a status code from it.
    """
    status: str
    data: Optional[CreateResourceResponse] = None
    messages: List[ErrorMessage] = dataclasses.field(default_factory=list)
    kind: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS_STATUS

    def to_dict(self) -> dict:
        if self.ok:
            return {"status": SUCCESS_STATUS, "data": self.data.to_dict() if self.data else None}
        return {"status": ERROR_STATUS, "messages": [m.to_dict() for m in self.messages]}


def success_envelope(resource: CreateResourceResponse) -> Envelope:
    return Envelope(status=SUCCESS_STATUS, data=resource)


def error_envelope(kind: ErrorKind, messages: Optional[List[ErrorMessage]] = None) -> Envelope:
    """Error envelope for ``kind``; defaults to a single message carrying the kind's code."""
    if not messages:
        messages = [ErrorMessage(code=kind.value)]
    return Envelope(status=ERROR_STATUS, messages=list(messages), kind=kind)
