"""Freshdesk API service - access to the Freshdesk client in mirror context."""

from __future__ import annotations

from freshdesk_api import FreshdeskClient, FreshdeskConfig

from ..config import settings


class FreshdeskNotLinkedError(Exception):
    """Raised when no Freshdesk domain / API key is configured."""


async def get_freshdesk_client() -> FreshdeskClient:
    """Get a configured Freshdesk client, to be used as async context manager.

    Usage:
        async with await get_freshdesk_client() as fd:
            tickets = await fd.tickets.list()

    Raises:
        FreshdeskNotLinkedError: If the domain or API key is missing.
    """
    if not settings.freshdesk_configured:
        raise FreshdeskNotLinkedError(
            "No Freshdesk credentials configured. "
            "Set DESKMIRROR_FRESHDESK_DOMAIN and DESKMIRROR_FRESHDESK_API_KEY."
        )
    config = FreshdeskConfig(
        domain=settings.freshdesk_domain,
        api_key=settings.freshdesk_api_key,
        timeout=settings.request_timeout_seconds,
    )
    return FreshdeskClient(config)
