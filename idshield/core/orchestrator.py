"""Request pipeline for group/capability creation.

    Authorization header ──> tokens.extract_bearer_token
    request body ──────────> validators.decode_create_request / validate_create_request
                             keycloak.GroupService.create_group ──> errors.ErrorClassifier (on failure)
                             keycloak.GroupService.get_group
                             envelopes.success_envelope / error_envelope

Every failure ends the request with one error envelope; nothing is retried.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Union

from .envelopes import (
    CreateResourceResponse,
    Envelope,
    ErrorMessage,
    error_envelope,
    success_envelope,
)
from .error_catalog import ErrorCatalog
from .errors import ErrorClassifier, ErrorKind
from .keycloak import GroupService, KeycloakAPIError, KeycloakError, KeycloakTimeoutError
from .tokens import TokenMissing, extract_bearer_token, token_fingerprint
from .validators import InvalidBody, decode_create_request, validate_create_request


class Stage(str, Enum):
    START = "start"
    TOKEN_EXTRACTED = "token_extracted"
    BODY_DECODED = "body_decoded"
    VALIDATED = "validated"
    RESOURCE_CREATED = "resource_created"
    RESOURCE_FETCHED = "resource_fetched"
    RESPONDED = "responded"


class CreateGroupHandler:
    """Handles one creation request end to end.

    All collaborators are passed in; the handler keeps no per-request state,
    so one instance serves every request thread.

    Args:
        gateway: Keycloak group service
        realm: Realm in which groups are created
        label: Resource wording for messages and logs ("group", "Capability")
        classifier: Provider error classifier (default rules if omitted)
        catalog: Error catalog used to add msgid/message to error entries
        logger: Logger for activity and failure detail
    """

    def __init__(
        self,
        gateway: GroupService,
        realm: str,
        label: str = "group",
        classifier: Optional[ErrorClassifier] = None,
        catalog: Optional[ErrorCatalog] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.gateway = gateway
        self.realm = realm
        self.label = label
        self.classifier = classifier or ErrorClassifier()
        self.catalog = catalog or ErrorCatalog()
        self.logger = logger or logging.getLogger(__name__)

    def handle(self, authorization: Optional[str], body: Union[bytes, str, None]) -> Envelope:
        """Run the pipeline and return the terminal envelope."""
        envelope = self._run(authorization, body)
        self._advance(Stage.RESPONDED)
        for message in envelope.messages:
            self.catalog.enrich(message)
        return envelope

    def _run(self, authorization: Optional[str], body: Union[bytes, str, None]) -> Envelope:
        log = self.logger
        log.info(f"create {self.label} request received")
        self._advance(Stage.START)

        try:
            token = extract_bearer_token(authorization)
        except TokenMissing as exc:
            log.debug(f"Missing or incorrect Authorization header format | error={exc}")
            return error_envelope(ErrorKind.TOKEN_MISSING)
        self._advance(Stage.TOKEN_EXTRACTED)

        try:
            req = decode_create_request(body)
        except InvalidBody as exc:
            log.info(f"Error decoding {self.label} request body | error={exc}")
            return error_envelope(ErrorKind.INVALID_BODY)
        self._advance(Stage.BODY_DECODED)
        log.info(f"create {self.label} request parsed | name={req.name!r}")

        violations = validate_create_request(req, self.label)
        if violations:
            log.debug(f"Validation errors | violations={violations}")
            return error_envelope(
                ErrorKind.VALIDATION_FAILED,
                [ErrorMessage.from_violation(v) for v in violations],
            )
        self._advance(Stage.VALIDATED)

        token_hash = token_fingerprint(token)
        try:
            group_id = self.gateway.create_group(token, self.realm, req.name, req.attributes)
        except KeycloakTimeoutError as exc:
            log.warning(f"Timed out creating {self.label} | name={req.name!r} | error={exc}")
            return error_envelope(ErrorKind.PROVIDER_TIMEOUT)
        except KeycloakError as exc:
            raw = exc.message if isinstance(exc, KeycloakAPIError) else str(exc)
            kind = self.classifier.classify(raw, req.name)
            log.info(f"Error while creating {self.label} | name={req.name!r} | kind={kind.value}")
            log.debug(f"Provider error detail | error={raw!r} | token_hash={token_hash}")
            return error_envelope(kind)
        self._advance(Stage.RESOURCE_CREATED)

        try:
            group = self.gateway.get_group(token, self.realm, group_id)
            resource = CreateResourceResponse.from_provider(group)
        except KeycloakTimeoutError as exc:
            log.warning(f"Timed out reading created {self.label} | id={group_id} | error={exc}")
            return error_envelope(ErrorKind.PROVIDER_TIMEOUT)
        except (KeycloakError, AttributeError, KeyError, TypeError, ValueError) as exc:
            log.error(f"Could not read created {self.label} | id={group_id} | error={exc}")
            return error_envelope(ErrorKind.PROVIDER_FETCH_FAILED)
        self._advance(Stage.RESOURCE_FETCHED)

        log.info(f"Finished execution of create {self.label} | id={resource.id}")
        return success_envelope(resource)

    def _advance(self, stage: Stage) -> None:
        self.logger.debug(f"create {self.label} stage={stage.value}")
