"""Core Business Logic Module

The group creation pipeline, independent of Flask.

Module Structure:
    - keycloak/        : Keycloak Admin API client (group create/get)
    - tokens.py        : Bearer token extraction
    - validators.py    : Request decoding and field validation
    - errors.py        : Error taxonomy and provider error classification
    - envelopes.py     : Success/error response envelopes
    - error_catalog.py : YAML error catalog (msgid, message text)
    - orchestrator.py  : CreateGroupHandler, the per-request pipeline

Usage:
    from idshield.core.keycloak import GroupService, KeycloakClient
    from idshield.core.orchestrator import CreateGroupHandler

    handler = CreateGroupHandler(GroupService(KeycloakClient(url)), realm="demo")
    envelope = handler.handle("Bearer <token>", b'{"name": "Admins"}')
"""
