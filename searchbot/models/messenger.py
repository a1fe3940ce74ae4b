"""Incoming/outgoing Facebook Messenger models."""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class MessengerModel(BaseModel):
    """Base for webhook models: immutable, tolerant of unknown fields."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class MessengerUser(MessengerModel):
    """Sender or recipient reference."""
    id: str


class QuickReplyPayload(MessengerModel):
    """Payload echoed back when a user taps a quick reply button."""
    payload: str


class MessengerAttachment(MessengerModel):
    """Image, audio, sticker or other non-text content."""
    type: str | None = None
    payload: dict | None = None


class MessengerMessageIn(MessengerModel):
    """Incoming Facebook Messenger message.

    The platform sends either text or attachments, never both.
    """
    mid: str | None = None
    text: str | None = None
    attachments: list[MessengerAttachment] | None = None
    quick_reply: QuickReplyPayload | None = None
    is_echo: bool = False
    app_id: int | str | None = None
    metadata: str | None = None


class MessengerOptin(MessengerModel):
    """Opt-in from the "Send to Messenger" plugin."""
    ref: str | None = None


class MessagingEvent(MessengerModel):
    """A single entry of the ``messaging`` array."""
    sender: MessengerUser | None = None
    recipient: MessengerUser | None = None
    timestamp: int | None = None
    optin: MessengerOptin | None = None
    message: MessengerMessageIn | None = None
    delivery: dict | None = None
    postback: dict | None = None
    read: dict | None = None
    account_linking: dict | None = None


class MessengerEntry(MessengerModel):
    """Facebook webhook entry.

    Malformed items in ``messaging`` are dropped one by one so the rest of
    a batched delivery is still processed.
    """
    id: str | None = None
    time: int | None = None
    messaging: list[MessagingEvent] = Field(default_factory=list)

    @field_validator("messaging", mode="before")
    @classmethod
    def drop_malformed_events(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        events = []
        for raw_event in value:
            try:
                events.append(MessagingEvent.model_validate(raw_event))
            except ValidationError as e:
                logger.warning("Skipping malformed messaging event: %s", e)
        return events


class MessengerWebhookPayload(MessengerModel):
    """Facebook webhook payload."""
    object: str | None = None
    entry: list[MessengerEntry] = Field(default_factory=list)


# =============================================================================
# Outbound (Send API)
# =============================================================================


class SenderAction(str, Enum):
    """Content-less signals shown in the conversation."""

    TYPING_ON = "typing_on"
    TYPING_OFF = "typing_off"


class QuickReply(BaseModel):
    """Quick reply button definition."""
    content_type: str = "text"
    title: str
    payload: str


class OutboundMessage(BaseModel):
    """Message body for the Send API."""
    text: str
    quick_replies: list[QuickReply] | None = None


class OutboundPayload(BaseModel):
    """Send API request body: a message or a sender action, not both."""
    recipient: MessengerUser
    message: OutboundMessage | None = None
    sender_action: SenderAction | None = None

    def to_request_json(self) -> dict:
        """Serialize for the Send API, dropping unset parts."""
        return self.model_dump(mode="json", exclude_none=True)
