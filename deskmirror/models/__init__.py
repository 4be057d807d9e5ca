"""Mirror models - re-exports all models and Base.metadata."""

from .base import (
    Base,
    ChildMixin,
    IdentityMixin,
    RemoteSyncMixin,
    RemoteTimestampMixin,
    SoftDeleteMixin,
)
from .company import Company, CompanyCustomField, CompanyDomain
from .contact import Avatar, Contact, ContactCustomField
from .agent import Agent
from .group import AgentGroupMapping, Group
from .ticket import TICKET_EMAIL_TYPES, Ticket, TicketCustomField, TicketEmail, TicketTag
from .conversation import (
    CONVERSATION_EMAIL_TYPES,
    Conversation,
    ConversationAttachment,
    ConversationDeliveryDetail,
    ConversationEmail,
)
from .canned_response import CannedResponse, CannedResponseAttachment, CannedResponseFolder

__all__ = [
    "Base",
    "ChildMixin",
    "IdentityMixin",
    "RemoteSyncMixin",
    "RemoteTimestampMixin",
    "SoftDeleteMixin",
    "Company",
    "CompanyDomain",
    "CompanyCustomField",
    "Contact",
    "ContactCustomField",
    "Avatar",
    "Agent",
    "Group",
    "AgentGroupMapping",
    "Ticket",
    "TicketCustomField",
    "TicketTag",
    "TicketEmail",
    "TICKET_EMAIL_TYPES",
    "Conversation",
    "ConversationAttachment",
    "ConversationEmail",
    "ConversationDeliveryDetail",
    "CONVERSATION_EMAIL_TYPES",
    "CannedResponseFolder",
    "CannedResponse",
    "CannedResponseAttachment",
]
