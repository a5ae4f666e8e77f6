"""Low-level HTTP client for Keycloak Admin API.

Unlike a service-account client, this one never holds a token: the caller's
bearer token is forwarded on every call, so a single instance is shared by
all request threads.

Each call runs on a small worker pool so the caller can stop waiting once
the call deadline passes, even while the provider is still sending.
"""
from __future__ import annotations
import concurrent.futures
import time
from typing import Optional, Dict, Any

import requests

from .exceptions import KeycloakAPIError, KeycloakError, KeycloakTimeoutError

REQUEST_TIMEOUT = 10
MAX_CONCURRENT_CALLS = 32

# Body is read in small chunks so the deadline is checked while it streams
_CHUNK_SIZE = 512

# JSON error fields Keycloak uses, in the order they are rendered
_ERROR_FIELDS = ("error", "message", "error_description", "errorMessage")


class KeycloakClient:
    """Stateless HTTP client for Keycloak Admin API.

    Usage:
        client = KeycloakClient("http://keycloak:8080")
        response = client.get("/admin/realms/demo/groups/<id>", token="eyJ...")
    """

    def __init__(self, base_url: str, timeout: float = REQUEST_TIMEOUT, max_workers: int = MAX_CONCURRENT_CALLS):
        """Initialize Keycloak client.

        Args:
            base_url: Keycloak base URL (e.g. http://keycloak:8080)
            timeout: Seconds allowed for each call, measured from call start
            max_workers: Provider calls that may be in flight at once
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="keycloak-call"
        )

    def get(self, path: str, token: str, params: Optional[Dict] = None) -> requests.Response:
        """Execute GET request on behalf of the token holder.

        Raises:
            KeycloakAPIError: On HTTP error
            KeycloakTimeoutError: When the call exceeds the timeout
            KeycloakError: On any other transport failure
        """
        return self._send("GET", path, token, params=params)

    def post(self, path: str, token: str, json: Optional[Dict[str, Any]] = None) -> requests.Response:
        """Execute POST request on behalf of the token holder.

        Raises:
            KeycloakAPIError: On HTTP error
            KeycloakTimeoutError: When the call exceeds the timeout
            KeycloakError: On any other transport failure
        """
        return self._send("POST", path, token, json=json)

    def _send(self, method: str, path: str, token: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        headers = {"Authorization": f"Bearer {token}"}
        deadline = time.monotonic() + self.timeout

        future = self._executor.submit(_exchange, method, url, headers, deadline, kwargs)
        try:
            resp = future.result(timeout=max(deadline - time.monotonic(), 0))
        except concurrent.futures.TimeoutError as exc:
            # The worker thread stops at its next deadline check
            future.cancel()
            raise KeycloakTimeoutError(path, self.timeout) from exc
        except requests.Timeout as exc:
            raise KeycloakTimeoutError(path, self.timeout) from exc
        except requests.RequestException as exc:
            raise KeycloakError(f"{method} {path} failed: {exc}") from exc

        self._handle_error(resp, path)
        return resp

    def _handle_error(self, resp: requests.Response, endpoint: str) -> None:
        """Centralized error handling for HTTP responses.

        Raises:
            KeycloakAPIError: If response status indicates error
        """
        if resp.status_code >= 400:
            raise KeycloakAPIError(resp.status_code, status_line(resp), endpoint)


def _exchange(method: str, url: str, headers: Dict[str, str], deadline: float, kwargs: Dict[str, Any]) -> requests.Response:
    """Send the request and read the whole body before ``deadline``.

    Runs on a client worker thread. Raises requests.Timeout once the
    deadline has passed, however slowly the provider is sending.
    """
    sender = requests.get if method == "GET" else requests.post
    remaining = max(deadline - time.monotonic(), 0.001)
    resp = sender(url, headers=headers, timeout=(remaining, remaining), stream=True, **kwargs)

    try:
        chunks = []
        for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
            if time.monotonic() > deadline:
                raise requests.Timeout(f"{method} {url}: deadline exceeded while reading body")
            chunks.append(chunk)
    finally:
        resp.close()

    resp._content = b"".join(chunks)
    return resp


def status_line(resp: requests.Response) -> str:
    """Render an error response as "<code> <reason>: <detail>".

    The detail joins whichever of Keycloak's JSON error fields are present.
    Without any, only "<code> <reason>" is returned.
    """
    head = f"{resp.status_code} {resp.reason}".strip()
    try:
        body = resp.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        return head

    detail = ": ".join(str(body[key]) for key in _ERROR_FIELDS if body.get(key))
    return f"{head}: {detail}" if detail else head
