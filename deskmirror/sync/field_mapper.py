"""Field mapping from Freshdesk payloads to local model attributes.

Every mapped attribute is always written: a key missing from the payload
becomes ``None`` on the row (full replace, never merge).
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

# Freshdesk field name -> local model attribute
COMPANY_FIELD_MAP: dict[str, str] = {
    "name": "name",
    "description": "description",
    "note": "note",
    "health_score": "health_score",
    "account_tier": "account_tier",
    "renewal_date": "renewal_date",
    "industry": "industry",
    "org_company_id": "org_company_id",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

CONTACT_FIELD_MAP: dict[str, str] = {
    "name": "name",
    "email": "email",
    "unique_external_id": "unique_external_id",
    "active": "active",
    "address": "address",
    "description": "description",
    "job_title": "job_title",
    "language": "language",
    "mobile": "mobile",
    "phone": "phone",
    "twitter_id": "twitter_id",
    "preferred_source": "preferred_source",
    "time_zone": "time_zone",
    "visitor_id": "visitor_id",
    "org_contact_id": "org_contact_id",
    "view_all_tickets": "view_all_tickets",
    "other_emails": "other_emails",
    "other_companies": "other_companies",
    "other_phone_numbers": "other_phone_numbers",
    "tags": "tags",
    "company_id": "company_id",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

# Agent payloads keep the person details under "contact"
AGENT_FIELD_MAP: dict[str, str] = {
    "org_agent_id": "org_agent_id",
    "available": "available",
    "available_since": "available_since",
    "occasional": "occasional",
    "ticket_scope": "ticket_scope",
    "type": "agent_type",
    "deactivated": "deactivated",
    "signature": "signature",
    "focus_mode": "focus_mode",
    "last_active_at": "last_active_at",
    "scope": "scope",
    "role_ids": "roles",
    "skill_ids": "skills",
    "contribution_group_ids": "contribution_groups",
}

AGENT_CONTACT_FIELD_MAP: dict[str, str] = {
    "active": "active",
    "email": "email",
    "job_title": "job_title",
    "language": "language",
    "last_login_at": "last_login_at",
    "mobile": "mobile",
    "name": "name",
    "phone": "phone",
    "time_zone": "time_zone",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

GROUP_FIELD_MAP: dict[str, str] = {
    "name": "name",
    "description": "description",
    "escalate_to": "escalate_to",
    "unassigned_for": "unassigned_for",
    "type": "group_type",
    "business_calendar_id": "business_calendar_id",
    "allow_agents_to_change_availability": "allow_agents_to_change_availability",
    "agent_availability_status": "agent_availability_status",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

TICKET_FIELD_MAP: dict[str, str] = {
    "subject": "subject",
    "status": "status",
    "priority": "priority",
    "source": "source",
    "type": "ticket_type",
    "due_by": "due_by",
    "fr_due_by": "fr_due_by",
    "nr_due_by": "nr_due_by",
    "is_escalated": "is_escalated",
    "fr_escalated": "fr_escalated",
    "nr_escalated": "nr_escalated",
    "spam": "spam",
    "email_config_id": "email_config_id",
    "product_id": "product_id",
    "association_type": "association_type",
    "associated_tickets_count": "associated_tickets_count",
    "support_email": "support_email",
    "sentiment_score": "sentiment_score",
    "initial_sentiment_score": "initial_sentiment_score",
    "structured_description": "structured_description",
    "requester_id": "requester_id",
    "responder_id": "responder_id",
    "company_id": "company_id",
    "group_id": "group_id",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

CONVERSATION_FIELD_MAP: dict[str, str] = {
    "body": "body",
    "body_text": "body_text",
    "user_id": "user_id",
    "incoming": "incoming",
    "private": "private",
    "source": "source",
    "category": "category",
    "support_email": "support_email",
    "from_email": "from_email",
    "email_failure_count": "email_failure_count",
    "outgoing_failures": "outgoing_failures",
    "thread_id": "thread_id",
    "thread_message_id": "thread_message_id",
    "last_edited_at": "last_edited_at",
    "last_edited_user_id": "last_edited_user_id",
    "automation_id": "automation_id",
    "automation_type_id": "automation_type_id",
    "auto_response": "auto_response",
    "threading_type": "threading_type",
    "source_additional_info": "source_additional_info",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

CANNED_FOLDER_FIELD_MAP: dict[str, str] = {
    "name": "name",
    "responses_count": "responses_count",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

CANNED_RESPONSE_FIELD_MAP: dict[str, str] = {
    "title": "title",
    "content": "content",
    "content_html": "content_html",
    "visibility": "visibility",
    "group_ids": "group_ids",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

ATTACHMENT_FIELD_MAP: dict[str, str] = {
    "name": "name",
    "content_type": "content_type",
    "size": "size",
    "attachment_url": "attachment_url",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

# Local attributes holding timestamps (parsed from ISO-8601 strings)
DATETIME_FIELDS = frozenset({
    "created_at",
    "updated_at",
    "renewal_date",
    "due_by",
    "fr_due_by",
    "nr_due_by",
    "available_since",
    "last_active_at",
    "last_login_at",
    "last_edited_at",
})

# Local attributes stored as text even when the remote sends numbers
TEXT_FIELDS = frozenset({"mobile", "phone", "source_additional_info"})


def parse_datetime(value: Any) -> datetime | None:
    """Parse a Freshdesk timestamp (``2024-01-15T10:00:00Z``) into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return ensure_utc(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_remote_datetime(value: datetime) -> str:
    """Format a datetime the way Freshdesk query filters expect it."""
    return ensure_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


def _coerce(local_key: str, value: Any) -> Any:
    if local_key in DATETIME_FIELDS:
        return parse_datetime(value)
    if local_key in TEXT_FIELDS and value is not None and not isinstance(value, str):
        return custom_field_value(value)
    return value


def remote_to_local(payload: dict[str, Any], field_map: dict[str, str]) -> dict[str, Any]:
    """Convert a Freshdesk dict to local attribute values (full replace)."""
    return {local_key: _coerce(local_key, payload.get(remote_key)) for remote_key, local_key in field_map.items()}


def remote_agent_to_local(payload: dict[str, Any]) -> dict[str, Any]:
    result = remote_to_local(payload, AGENT_FIELD_MAP)
    result.update(remote_to_local(payload.get("contact") or {}, AGENT_CONTACT_FIELD_MAP))
    return result


def remote_group_to_local(payload: dict[str, Any]) -> dict[str, Any]:
    result = remote_to_local(payload, GROUP_FIELD_MAP)
    assignment = payload.get("automatic_agent_assignment")
    if isinstance(assignment, dict):
        result["automatic_agent_assignment"] = assignment.get("enabled")
    else:
        result["automatic_agent_assignment"] = assignment
    return result


def remote_ticket_to_local(payload: dict[str, Any]) -> dict[str, Any]:
    result = remote_to_local(payload, TICKET_FIELD_MAP)
    result["spam"] = bool(result["spam"])
    return result


def custom_field_value(value: Any) -> str | None:
    """Stringify a custom field value: text as-is, anything else as JSON."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def iter_custom_fields(payload: Any) -> list[tuple[str, str | None]]:
    """Normalize a ``custom_fields`` object to ``(field_name, text_value)`` pairs."""
    if not isinstance(payload, dict):
        return []
    return [(name, custom_field_value(value)) for name, value in payload.items() if isinstance(name, str) and name]


def iter_strings(payload: Any) -> list[str]:
    """Non-empty strings from a list payload, order kept, duplicates dropped."""
    if not isinstance(payload, list):
        return []
    seen: set[str] = set()
    out: list[str] = []
    for item in payload:
        if isinstance(item, str) and item and item not in seen:
            seen.add(item)
            out.append(item)
    return out
