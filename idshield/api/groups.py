"""Group and capability creation endpoints.

    POST /capability-create ──┐
                              ├──> core.orchestrator.CreateGroupHandler ──> Keycloak
    POST /group-create ───────┘

The handler decides the error kind; this module only picks the HTTP status.
"""
from __future__ import annotations

import logging

from flask import Blueprint, Response, jsonify, request

from idshield.core.errors import ErrorKind
from idshield.core.orchestrator import CreateGroupHandler

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.TOKEN_MISSING: 401,
    ErrorKind.INVALID_BODY: 400,
    ErrorKind.VALIDATION_FAILED: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NAME_CONFLICT: 409,
    ErrorKind.PROVIDER_TIMEOUT: 504,
    ErrorKind.PROVIDER_FETCH_FAILED: 502,
    ErrorKind.UNKNOWN: 502,
}


def create_blueprint(capability_handler: CreateGroupHandler, group_handler: CreateGroupHandler) -> Blueprint:
    """Build the blueprint bound to the given handlers."""
    bp = Blueprint("groups", __name__)

    def _respond(handler: CreateGroupHandler) -> tuple[Response, int]:
        envelope = handler.handle(request.headers.get("Authorization"), request.get_data())
        status = 200 if envelope.ok else STATUS_BY_KIND.get(envelope.kind, 500)
        return jsonify(envelope.to_dict()), status

    @bp.route("/capability-create", methods=["POST"])
    def create_capability():
        """Create a capability (a Keycloak group) in the configured realm."""
        return _respond(capability_handler)

    @bp.route("/group-create", methods=["POST"])
    def create_group():
        """Create a Keycloak group in the configured realm."""
        return _respond(group_handler)

    return bp
