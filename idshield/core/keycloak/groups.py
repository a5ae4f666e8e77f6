"""Keycloak group management operations."""
from __future__ import annotations
from typing import Optional, Dict, List
from urllib.parse import quote

from .client import KeycloakClient
from .exceptions import KeycloakAPIError


class GroupService:
    """Service for creating and reading Keycloak groups.

    Holds only the shared client; every call takes the caller's token and
    realm, so one instance serves concurrent requests.
    """

    def __init__(self, client: KeycloakClient):
        """Initialize group service.

        Args:
            client: Keycloak client (stateless)
        """
        self.client = client

    def create_group(
        self,
        token: str,
        realm: str,
        group_name: str,
        attributes: Optional[Dict[str, List[str]]] = None,
    ) -> str:
        """Create a top-level group and return the provider-assigned ID.

        Keycloak answers 201 with the new group's URL in the Location header;
        the ID is its last path segment.

        Args:
            token: Caller's bearer token
            realm: Realm name
            group_name: Group name
            attributes: Optional attributes dictionary

        Returns:
            Group ID

        Raises:
            KeycloakAPIError: On HTTP error or missing Location header
        """
        path = f"/admin/realms/{quote(realm, safe='')}/groups"
        payload = {"name": group_name}
        if attributes is not None:
            payload["attributes"] = attributes

        resp = self.client.post(path, token, json=payload)

        location = resp.headers.get("Location", "")
        group_id = location.rstrip("/").rsplit("/", 1)[-1] if location else ""
        if not group_id:
            raise KeycloakAPIError(resp.status_code, "group created without Location header", path)
        return group_id

    def get_group(self, token: str, realm: str, group_id: str) -> dict:
        """Retrieve a group representation by ID.

        Returns:
            Group representation (id, name, path, attributes, ...)
        """
        path = f"/admin/realms/{quote(realm, safe='')}/groups/{quote(group_id, safe='')}"
        resp = self.client.get(path, token)
        return resp.json()
