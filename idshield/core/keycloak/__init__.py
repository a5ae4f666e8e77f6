"""Keycloak Admin API client library.

Architecture:
- client.py: stateless HTTP client forwarding the caller's bearer token
- groups.py: group creation and lookup
- exceptions.py: typed exceptions for error handling

Usage:
    from idshield.core.keycloak import KeycloakClient, GroupService

    groups = GroupService(KeycloakClient("http://keycloak:8080"))
    group_id = groups.create_group(token, "demo", "Admins")
    group = groups.get_group(token, "demo", group_id)
"""
from .client import KeycloakClient, REQUEST_TIMEOUT, status_line
from .exceptions import KeycloakError, KeycloakAPIError, KeycloakTimeoutError
from .groups import GroupService

__all__ = [
    "KeycloakClient",
    "REQUEST_TIMEOUT",
    "status_line",
    "KeycloakError",
    "KeycloakAPIError",
    "KeycloakTimeoutError",
    "GroupService",
]
