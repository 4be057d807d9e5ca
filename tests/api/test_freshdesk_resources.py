"""Tests for the Freshdesk resource APIs (endpoints and payloads)."""

import pytest
from unittest.mock import AsyncMock

from tests.conftest import (
    MOCK_CONTACT,
    MOCK_CONVERSATION,
    SAMPLE_CONTACT_ID,
    SAMPLE_CONVERSATION_ID,
    SAMPLE_TICKET_ID,
)


class TestTicketsAPI:
    """Test tickets and conversations endpoints."""

    @pytest.mark.asyncio
    async def test_list_drops_empty_params(self, mock_fd_client):
        await mock_fd_client.tickets.list(page=2, per_page=50)

        mock_fd_client._client.get.assert_called_once_with(
            "/tickets", params={"page": 2, "per_page": 50},
        )

    @pytest.mark.asyncio
    async def test_list_updated_since(self, mock_fd_client):
        await mock_fd_client.tickets.list(updated_since="2024-01-15T10:00:01Z")

        mock_fd_client._client.get.assert_called_once_with(
            "/tickets", params={"page": 1, "per_page": 100, "updated_since": "2024-01-15T10:00:01Z"},
        )

    @pytest.mark.asyncio
    async def test_create_json(self, mock_fd_client):
        await mock_fd_client.tickets.create({"subject": "Hi", "email": "jane@example.com"})

        mock_fd_client._client.post.assert_called_once_with(
            "/tickets", json={"subject": "Hi", "email": "jane@example.com"},
        )

    @pytest.mark.asyncio
    async def test_create_with_attachments_is_multipart(self, mock_fd_client):
        attachment = ("log.txt", b"stack trace", "text/plain")

        await mock_fd_client.tickets.create({"subject": "Hi", "tags": ["a"]}, [attachment])

        mock_fd_client._client.post.assert_called_once_with(
            "/tickets",
            data={"subject": "Hi", "tags[]": ["a"]},
            files=[("attachments[]", attachment)],
        )

    @pytest.mark.asyncio
    async def test_merge(self, mock_fd_client):
        await mock_fd_client.tickets.merge(SAMPLE_TICKET_ID, ["901", 902])

        mock_fd_client._client.put.assert_called_once_with(
            "/tickets/merge", json={"primary_id": SAMPLE_TICKET_ID, "ticket_ids": [901, 902]},
        )

    @pytest.mark.asyncio
    async def test_conversations(self, mock_fd_client, mock_response):
        mock_fd_client._client.get = AsyncMock(return_value=mock_response([MOCK_CONVERSATION]))

        result = await mock_fd_client.tickets.conversations(SAMPLE_TICKET_ID, page=3)

        assert result == [MOCK_CONVERSATION]
        mock_fd_client._client.get.assert_called_once_with(
            f"/tickets/{SAMPLE_TICKET_ID}/conversations", params={"page": 3, "per_page": 100},
        )

    @pytest.mark.asyncio
    async def test_note_and_reply_endpoints(self, mock_fd_client):
        await mock_fd_client.tickets.note(SAMPLE_TICKET_ID, {"body": "Internal", "private": True})
        await mock_fd_client.tickets.reply(SAMPLE_TICKET_ID, {"body": "Thanks"})

        calls = mock_fd_client._client.post.call_args_list
        assert calls[0].args == (f"/tickets/{SAMPLE_TICKET_ID}/notes",)
        assert calls[0].kwargs == {"json": {"body": "Internal", "private": True}}
        assert calls[1].args == (f"/tickets/{SAMPLE_TICKET_ID}/reply",)

    @pytest.mark.asyncio
    async def test_forward_defaults_original_attachments_off(self, mock_fd_client):
        await mock_fd_client.tickets.forward(SAMPLE_TICKET_ID, {"to_emails": ["boss@example.com"]})

        mock_fd_client._client.post.assert_called_once_with(
            f"/tickets/{SAMPLE_TICKET_ID}/forward",
            json={"to_emails": ["boss@example.com"], "include_original_attachments": False},
        )

    @pytest.mark.asyncio
    async def test_update_conversation_with_attachments_uses_put(self, mock_fd_client):
        attachment = ("a.png", b"\x89PNG", "image/png")

        await mock_fd_client.tickets.update_conversation(SAMPLE_CONVERSATION_ID, {"body": "Edited"}, [attachment])

        mock_fd_client._client.post.assert_not_called()
        mock_fd_client._client.put.assert_called_once_with(
            f"/conversations/{SAMPLE_CONVERSATION_ID}",
            data={"body": "Edited"},
            files=[("attachments[]", attachment)],
        )

    @pytest.mark.asyncio
    async def test_delete_conversation(self, mock_fd_client):
        await mock_fd_client.tickets.delete_conversation(SAMPLE_CONVERSATION_ID)

        mock_fd_client._client.delete.assert_called_once_with(f"/conversations/{SAMPLE_CONVERSATION_ID}")


class TestContactsAPI:
    """Test contacts endpoints."""

    @pytest.mark.asyncio
    async def test_get(self, mock_fd_client, mock_response):
        mock_fd_client._client.get = AsyncMock(return_value=mock_response(MOCK_CONTACT))

        assert await mock_fd_client.contacts.get(SAMPLE_CONTACT_ID) == MOCK_CONTACT

    @pytest.mark.asyncio
    async def test_create_with_avatar(self, mock_fd_client):
        avatar = ("me.png", b"\x89PNG", "image/png")

        await mock_fd_client.contacts.create({"name": "Jane"}, avatar)

        mock_fd_client._client.post.assert_called_once_with(
            "/contacts", data={"name": "Jane"}, files=[("avatar", avatar)],
        )

    @pytest.mark.asyncio
    async def test_merge_with_overrides(self, mock_fd_client):
        await mock_fd_client.contacts.merge(SAMPLE_CONTACT_ID, [43, "44"], {"phone": "+15550000"})

        mock_fd_client._client.post.assert_called_once_with(
            "/contacts/merge",
            json={
                "primary_contact_id": SAMPLE_CONTACT_ID,
                "secondary_contact_ids": [43, 44],
                "contact": {"phone": "+15550000"},
            },
        )

    @pytest.mark.asyncio
    async def test_merge_without_overrides(self, mock_fd_client):
        await mock_fd_client.contacts.merge(SAMPLE_CONTACT_ID, [43])

        sent = mock_fd_client._client.post.call_args.kwargs["json"]
        assert "contact" not in sent


class TestDirectoryAPIs:
    """Test companies, agents, groups and canned responses endpoints."""

    @pytest.mark.asyncio
    async def test_companies_list(self, mock_fd_client):
        await mock_fd_client.companies.list(updated_since="2024-01-01T00:00:00Z")

        mock_fd_client._client.get.assert_called_once_with(
            "/companies", params={"page": 1, "per_page": 100, "updated_since": "2024-01-01T00:00:00Z"},
        )

    @pytest.mark.asyncio
    async def test_agents_list(self, mock_fd_client):
        await mock_fd_client.agents.list(page=2)

        mock_fd_client._client.get.assert_called_once_with("/agents", params={"page": 2, "per_page": 100})

    @pytest.mark.asyncio
    async def test_groups_list_uses_admin_endpoint(self, mock_fd_client):
        await mock_fd_client.groups.list()

        mock_fd_client._client.get.assert_called_once_with("/admin/groups", params={"page": 1, "per_page": 100})

    @pytest.mark.asyncio
    async def test_canned_response_endpoints(self, mock_fd_client):
        await mock_fd_client.canned_responses.folders()
        await mock_fd_client.canned_responses.folder(1)
        await mock_fd_client.canned_responses.get(10)

        endpoints = [c.args[0] for c in mock_fd_client._client.get.call_args_list]
        assert endpoints == ["/canned_response_folders", "/canned_response_folders/1", "/canned_responses/10"]
