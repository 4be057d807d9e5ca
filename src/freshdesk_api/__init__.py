"""Freshdesk API client module.

Usage:
    from freshdesk_api import FreshdeskClient, FreshdeskConfig

    async with FreshdeskClient(FreshdeskConfig(domain="acme", api_key="...")) as fd:
        tickets = await fd.tickets.list(updated_since="2024-01-01T00:00:00Z")
        contact = await fd.contacts.get(42)
"""

from .client import FreshdeskClient, FreshdeskConfig
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
from .tickets import TicketsAPI
from .contacts import ContactsAPI
from .companies import CompaniesAPI
from .agents import AgentsAPI
from .groups import GroupsAPI
from .canned_responses import CannedResponsesAPI

__all__ = [
    "FreshdeskClient",
    "FreshdeskConfig",
    "FreshdeskError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "ServiceUnavailableError",
    "RequestError",
    "TicketsAPI",
    "ContactsAPI",
    "CompaniesAPI",
    "AgentsAPI",
    "GroupsAPI",
    "CannedResponsesAPI",
]
