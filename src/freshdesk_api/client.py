"""Freshdesk API Client - Typed async wrapper for the Freshdesk v2 REST API.

Authentication is HTTP basic auth with the API key as username and ``X`` as
the password. Every non-2xx response is mapped to a FreshdeskError subclass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, TYPE_CHECKING

import httpx

from .errors import (
    AuthenticationError,
    FreshdeskError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    RequestError,
    ServiceUnavailableError,
    ValidationError,
)

if TYPE_CHECKING:
    from .tickets import TicketsAPI
    from .contacts import ContactsAPI
    from .companies import CompaniesAPI
    from .agents import AgentsAPI
    from .groups import GroupsAPI
    from .canned_responses import CannedResponsesAPI

logger = logging.getLogger(__name__)

# (filename, content, content_type)
FileTuple = tuple[str, bytes | BinaryIO, str]


@dataclass
class FreshdeskConfig:
    """Freshdesk API configuration."""

    domain: str
    api_key: str
    timeout: float = 30.0

    @property
    def base_url(self) -> str:
        return f"https://{self.domain}.freshdesk.com/api/v2"

    def to_dict(self) -> dict[str, Any]:
        """Export config as dictionary."""
        return {
            "domain": self.domain,
            "api_key": (self.api_key[:4] + "...") if self.api_key else None,
            "timeout": self.timeout,
        }


def _normalize_booleans(value: Any) -> Any:
    """Turn "true"/"false" strings into booleans, recursively through dicts."""
    if isinstance(value, dict):
        return {k: _normalize_booleans(v) for k, v in value.items()}
    if value == "true":
        return True
    if value == "false":
        return False
    return value


def _form_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def _multipart_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Flatten a payload into multipart form fields.

    Lists become ``name[]`` repeated fields and dicts become ``name[key]``.
    """
    form: dict[str, Any] = {}
    for key, value in _normalize_booleans(fields).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            form[f"{key}[]"] = [_form_value(v) for v in value]
        elif isinstance(value, dict):
            for sub_key, sub_value in value.items():
                if sub_value is None:
                    continue
                form[f"{key}[{sub_key}]"] = _form_value(sub_value)
        else:
            form[key] = _form_value(value)
    return form


def _error_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def _failure_message(resp: httpx.Response, body: Any) -> str:
    if isinstance(body, dict):
        description = body.get("description") or body.get("message")
        if body.get("errors"):
            return f"API request failed: {description} - {body['errors']}"
        if description:
            return f"API request failed: {description}"
    text = getattr(resp, "text", "") or ""
    if text:
        return f"API request failed: {text}"
    return f"API request failed with status code {resp.status_code}"


def _retry_after(resp: httpx.Response) -> int | None:
    raw = resp.headers.get("Retry-After") if resp.headers is not None else None
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None


class FreshdeskClient:
    """Freshdesk API client with resource sub-APIs.

    Usage:
        config = FreshdeskConfig(domain="acme", api_key="...")
        async with FreshdeskClient(config) as fd:
            tickets = await fd.tickets.list(page=1, per_page=100)
            await fd.tickets.reply(42, {"body": "Thanks!"})
    """

    def __init__(self, config: FreshdeskConfig):
        self.config = config
        self._client: httpx.AsyncClient | None = None

        # Resource APIs (initialized on enter)
        self._tickets: TicketsAPI | None = None
        self._contacts: ContactsAPI | None = None
        self._companies: CompaniesAPI | None = None
        self._agents: AgentsAPI | None = None
        self._groups: GroupsAPI | None = None
        self._canned_responses: CannedResponsesAPI | None = None

    async def __aenter__(self) -> "FreshdeskClient":
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            auth=(self.config.api_key, "X"),
            headers={"Accept": "application/json"},
        )
        self._init_apis()
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()

    def _init_apis(self) -> None:
        from .tickets import TicketsAPI
        from .contacts import ContactsAPI
        from .companies import CompaniesAPI
        from .agents import AgentsAPI
        from .groups import GroupsAPI
        from .canned_responses import CannedResponsesAPI

        self._tickets = TicketsAPI(self)
        self._contacts = ContactsAPI(self)
        self._companies = CompaniesAPI(self)
        self._agents = AgentsAPI(self)
        self._groups = GroupsAPI(self)
        self._canned_responses = CannedResponsesAPI(self)

    # Resource API properties
    @property
    def tickets(self) -> "TicketsAPI":
        """Tickets and conversations API."""
        if not self._tickets:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._tickets

    @property
    def contacts(self) -> "ContactsAPI":
        """Contacts API."""
        if not self._contacts:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._contacts

    @property
    def companies(self) -> "CompaniesAPI":
        """Companies API."""
        if not self._companies:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._companies

    @property
    def agents(self) -> "AgentsAPI":
        """Agents API."""
        if not self._agents:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._agents

    @property
    def groups(self) -> "GroupsAPI":
        """Groups API."""
        if not self._groups:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._groups

    @property
    def canned_responses(self) -> "CannedResponsesAPI":
        """Canned response folders and responses API."""
        if not self._canned_responses:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._canned_responses

    # =========================================================================
    # Transport
    # =========================================================================

    def _handle_response(self, resp: httpx.Response) -> Any:
        """Return parsed JSON for 2xx, raise a typed FreshdeskError otherwise."""
        status = resp.status_code
        if 200 <= status < 300:
            if status == 204 or not resp.content:
                return {}
            try:
                return resp.json()
            except ValueError as exc:
                raise RequestError(f"Unparseable response body: {exc}", status) from exc

        body = _error_body(resp)
        logger.error("Freshdesk API %s response: %s", status, getattr(resp, "text", body))

        if status == 401:
            raise AuthenticationError("Authentication failed. Please check your API key.", status)
        if status == 403:
            raise PermissionDeniedError("You don't have permission to access this resource.", status)
        if status == 404:
            raise NotFoundError("The requested resource was not found.", status)
        if status == 429:
            raise RateLimitError(
                "Rate limit exceeded. Please try again later.", status, retry_after=_retry_after(resp),
            )

        message = _failure_message(resp, body)
        if status in (400, 409, 422):
            errors = body.get("errors") if isinstance(body, dict) else None
            raise ValidationError(message, status, errors=errors if isinstance(errors, list) else None)
        if status >= 500:
            raise ServiceUnavailableError(message, status)
        raise RequestError(message, status)

    async def _send(self, method: str, endpoint: str, **kwargs) -> Any:
        if self._client is None:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        try:
            resp = await getattr(self._client, method)(endpoint, **kwargs)
        except httpx.HTTPError as exc:
            raise RequestError(f"Request to {endpoint} failed: {exc}") from exc
        return self._handle_response(resp)

    async def _get(self, endpoint: str, **params) -> Any:
        """Make GET request. ``None`` params are dropped."""
        clean = {k: v for k, v in params.items() if v is not None}
        return await self._send("get", endpoint, params=clean)

    async def _post(self, endpoint: str, data: dict | None = None) -> Any:
        """Make POST request."""
        return await self._send("post", endpoint, json=data or {})

    async def _put(self, endpoint: str, data: dict | None = None) -> Any:
        """Make PUT request."""
        return await self._send("put", endpoint, json=data or {})

    async def _delete(self, endpoint: str) -> Any:
        """Make DELETE request."""
        return await self._send("delete", endpoint)

    async def _post_multipart(
        self,
        endpoint: str,
        fields: dict[str, Any],
        files: list[FileTuple] | None = None,
        *,
        method: str = "post",
        file_field: str = "attachments[]",
    ) -> Any:
        """Send a multipart form request (POST or PUT) with file parts."""
        if method not in ("post", "put"):
            raise ValueError(f"Unsupported method for multipart: {method}")
        parts = [(file_field, (name, content, ctype)) for name, content, ctype in files or []]
        return await self._send(method, endpoint, data=_multipart_fields(fields), files=parts or None)


__all__ = ["FreshdeskClient", "FreshdeskConfig", "FreshdeskError", "FileTuple"]
