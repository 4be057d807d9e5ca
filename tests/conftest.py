"""Shared test fixtures for the Freshdesk API client tests."""

import pytest
from unittest.mock import AsyncMock, MagicMock
from typing import Any

# Sample IDs used across tests
SAMPLE_DOMAIN = "acme"
SAMPLE_API_KEY = "fd_test_key_abc123"
SAMPLE_TICKET_ID = 900
SAMPLE_CONTACT_ID = 42
SAMPLE_CONVERSATION_ID = 8001


# ============================================================================
# Mock Response Data
# ============================================================================

MOCK_TICKET = {
    "id": SAMPLE_TICKET_ID,
    "subject": "Printer on fire",
    "status": 2,
    "priority": 1,
    "requester_id": SAMPLE_CONTACT_ID,
    "tags": ["hardware"],
    "created_at": "2024-01-15T10:00:00Z",
    "updated_at": "2024-01-15T10:00:00Z",
}

MOCK_CONTACT = {
    "id": SAMPLE_CONTACT_ID,
    "name": "Jane Doe",
    "email": "jane@example.com",
    "created_at": "2024-01-15T10:00:00Z",
    "updated_at": "2024-01-15T10:00:00Z",
}

MOCK_CONVERSATION = {
    "id": SAMPLE_CONVERSATION_ID,
    "ticket_id": SAMPLE_TICKET_ID,
    "body": "<p>On it</p>",
    "private": True,
}


# ============================================================================
# Fixtures
# ============================================================================

def _response(data: Any = None, status_code: int = 200, headers: dict | None = None, text: str | None = None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = data if data is not None else {}
    response.content = b"" if data is None and text is None else b"{}"
    response.text = text if text is not None else ("" if data is None else str(data))
    response.headers = headers or {}
    return response


@pytest.fixture
def mock_config():
    """Create a FreshdeskConfig."""
    from freshdesk_api import FreshdeskConfig
    return FreshdeskConfig(domain=SAMPLE_DOMAIN, api_key=SAMPLE_API_KEY)


@pytest.fixture
def mock_http_client():
    """Create a mock httpx.AsyncClient."""
    client = AsyncMock()

    # Default successful response
    response = _response({})

    client.get = AsyncMock(return_value=response)
    client.post = AsyncMock(return_value=response)
    client.put = AsyncMock(return_value=response)
    client.delete = AsyncMock(return_value=response)

    return client


@pytest.fixture
def mock_fd_client(mock_config, mock_http_client):
    """Create a FreshdeskClient with initialized APIs and a mocked transport."""
    from freshdesk_api import FreshdeskClient

    client = FreshdeskClient(mock_config)
    client._client = mock_http_client
    client._init_apis()
    return client


@pytest.fixture
def mock_response():
    """Factory fixture to create mock HTTP responses."""
    def _create_response(data: Any = None, status_code: int = 200, headers: dict | None = None):
        return _response(data, status_code, headers)
    return _create_response


@pytest.fixture
def mock_error_response():
    """Factory fixture to create common error responses."""
    def _create_error(error_type: str):
        errors = {
            "validation": (400, {
                "description": "Validation failed",
                "errors": [{"field": "email", "message": "It should be a valid email address", "code": "invalid_value"}],
            }),
            "unauthorized": (401, {"code": "invalid_credentials", "message": "You have to be logged in"}),
            "forbidden": (403, {"code": "access_denied"}),
            "not_found": (404, None),
            "conflict": (409, {"description": "Duplicate value", "errors": [{"field": "email", "code": "duplicate_value"}]}),
            "rate_limit": (429, {"message": "Rate limit exceeded"}),
            "server_error": (500, {"message": "Internal server error"}),
            "bad_gateway": (502, None),
        }
        status_code, data = errors[error_type]
        headers = {"Retry-After": "30"} if error_type == "rate_limit" else {}
        text = "" if data is None else str(data)
        return _response(data, status_code, headers, text=text)
    return _create_error
