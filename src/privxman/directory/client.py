"""Role-store client for the user directory.

The command handlers only depend on the ``DirectoryClient`` protocol. The
``RoleStoreClient`` below is the HTTP implementation used by the CLI.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union
from urllib.parse import quote

import httpx

from .errors import DirectoryAPIError, DirectoryConnectionError

logger = logging.getLogger(__name__)

API_PATH = "/role-store/api/v1"
MFA_ACTIONS = ("enable", "disable", "reset")


@dataclass
class ClientSettings:
    """Connection settings for a role-store endpoint."""

    base_url: str
    api_token: Optional[str] = None
    verify_ssl: bool = True
    timeout: float = 30.0


class DirectoryClient(Protocol):
    """Operations the user commands issue against the directory."""

    def search(self, keywords: str, source: str) -> List[Any]:
        ...

    def get(self, user_id: str) -> Any:
        ...

    def get_settings(self, user_id: str) -> Any:
        ...

    def update_settings(self, user_id: str, patch: Any) -> None:
        ...

    def list_roles(self, user_id: str) -> List[Any]:
        ...

    def grant_role(self, user_id: str, role_id: str) -> None:
        ...

    def revoke_role(self, user_id: str, role_id: str) -> None:
        ...

    def set_mfa(self, user_ids: Sequence[str], state: Union[str, Enum]) -> None:
        ...

    def search_external(self, keywords: str, sources: str) -> List[Any]:
        ...


def _error_message(response: httpx.Response) -> str:
    """Pull the most useful message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("error_message", "details", "error_code"):
            if body.get(key):
                return str(body[key])

    text = response.text.strip()
    return text or response.reason_phrase or "Unknown error"


def _items(body: Any) -> List[Any]:
    if isinstance(body, dict):
        return list(body.get("items") or [])
    if isinstance(body, list):
        return body
    return []


def _user_path(user_id: str, suffix: str = "") -> str:
    return f"/users/{quote(user_id, safe='')}{suffix}"


class RoleStoreClient:
    """HTTP client for the role-store user endpoints."""

    def __init__(
        self,
        settings: ClientSettings,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the role-store client.

        Args:
            settings: Endpoint, token and TLS settings for the connection
            transport: Optional httpx transport, used to plug in a mock transport
        """
        self.settings = settings

        headers = {"Accept": "application/json", "User-Agent": "privxman"}
        if settings.api_token:
            headers["Authorization"] = f"Bearer {settings.api_token}"

        self._http = httpx.Client(
            base_url=settings.base_url.rstrip("/") + API_PATH,
            headers=headers,
            verify=settings.verify_ssl,
            timeout=httpx.Timeout(settings.timeout),
            transport=transport,
        )

    def __enter__(self) -> "RoleStoreClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, body: Any = None) -> Any:
        logger.debug(f"{method} {API_PATH}{path}")
        try:
            if body is None:
                response = self._http.request(method, path)
            else:
                response = self._http.request(method, path, json=body)
        except httpx.HTTPError as e:
            raise DirectoryConnectionError(f"{method} {path} failed: {e}", cause=e) from e

        if response.is_error:
            message = _error_message(response)
            logger.debug(f"{method} {path} returned {response.status_code}: {message}")
            raise DirectoryAPIError(response.status_code, message)

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise DirectoryAPIError(
                response.status_code, f"{method} {path} returned a non-JSON body", cause=e
            ) from e

    def search(self, keywords: str, source: str) -> List[Any]:
        body = self._request("POST", "/users/search", {"keywords": keywords, "source": source})
        return _items(body)

    def get(self, user_id: str) -> Any:
        return self._request("GET", _user_path(user_id))

    def get_settings(self, user_id: str) -> Any:
        return self._request("GET", _user_path(user_id, "/settings"))

    def update_settings(self, user_id: str, patch: Any) -> None:
        self._request("PUT", _user_path(user_id, "/settings"), patch)

    def list_roles(self, user_id: str) -> List[Any]:
        return _items(self._request("GET", _user_path(user_id, "/roles")))

    def _put_roles(self, user_id: str, roles: List[Dict[str, Any]]) -> None:
        self._request("PUT", _user_path(user_id, "/roles"), roles)

    def grant_role(self, user_id: str, role_id: str) -> None:
        """Add an explicit role to the user's current role set."""
        roles = self.list_roles(user_id)
        if any(role.get("id") == role_id for role in roles):
            logger.info(f"User {user_id} already has role {role_id}")
            return

        roles.append({"id": role_id, "explicit": True})
        self._put_roles(user_id, roles)

    def revoke_role(self, user_id: str, role_id: str) -> None:
        """Drop a role from the user's current role set."""
        roles = self.list_roles(user_id)
        remaining = [role for role in roles if role.get("id") != role_id]
        if len(remaining) == len(roles):
            logger.info(f"User {user_id} does not have role {role_id}")
            return

        self._put_roles(user_id, remaining)

    def set_mfa(self, user_ids: Sequence[str], state: Union[str, Enum]) -> None:
        action = state.value if isinstance(state, Enum) else state
        if action not in MFA_ACTIONS:
            raise ValueError(f"Unsupported MFA action: {action}")

        self._request("POST", f"/users/mfa/{action}", list(user_ids))

    def search_external(self, keywords: str, sources: str) -> List[Any]:
        body = self._request(
            "POST", "/users/search/external", {"keywords": keywords, "source": sources}
        )
        return _items(body)
