"""Send messages to Facebook Graph API service."""

import time
from typing import Any, List

import httpx
import logfire

from searchbot.config import get_settings
from searchbot.constants import FACEBOOK_GRAPH_API_VERSION, FACEBOOK_SEND_API_URL
from searchbot.logging_config import redact_tokens
from searchbot.models.messenger import (
    MessengerUser,
    OutboundMessage,
    OutboundPayload,
    QuickReply,
    SenderAction,
)


async def call_send_api(
    page_access_token: str,
    payload: OutboundPayload,
) -> dict[str, Any]:
    """
    POST a payload to the Send API.

    Args:
        page_access_token: Facebook Page access token
        payload: Message or sender action addressed to a recipient

    Returns:
        Decoded Send API response (``recipient_id``, ``message_id``)

    Raises:
        httpx.HTTPStatusError: On a non-2xx response
        httpx.RequestError: On transport failure
    """
    start_time = time.time()
    recipient_id = payload.recipient.id
    params = {"access_token": page_access_token}

    try:
        settings = get_settings()
        async with httpx.AsyncClient(timeout=settings.facebook_api_timeout_seconds) as client:
            response = await client.post(
                FACEBOOK_SEND_API_URL,
                params=params,
                json=payload.to_request_json(),
            )
            elapsed = time.time() - start_time

            if response.status_code == 200:
                response_data = response.json()
                message_id = response_data.get("message_id")
                if message_id:
                    logfire.info(
                        "Facebook message sent successfully",
                        recipient_id=response_data.get("recipient_id", recipient_id),
                        message_id=message_id,
                        response_time_ms=elapsed * 1000,
                    )
                else:
                    logfire.info(
                        "Successfully called Send API",
                        recipient_id=response_data.get("recipient_id", recipient_id),
                        sender_action=payload.sender_action,
                        response_time_ms=elapsed * 1000,
                    )
                return response_data

            logfire.error(
                "Facebook message send failed",
                recipient_id=recipient_id,
                status_code=response.status_code,
                params=redact_tokens(params),
                response_body=response.text[:500],  # Limit response body length
                response_time_ms=elapsed * 1000,
            )
            response.raise_for_status()
            return {}
    except httpx.HTTPStatusError as e:
        logfire.error(
            "Facebook API HTTP error",
            recipient_id=recipient_id,
            status_code=e.response.status_code,
            error_type=type(e).__name__,
            api_version=FACEBOOK_GRAPH_API_VERSION,
        )
        raise
    except httpx.RequestError as e:
        elapsed = time.time() - start_time
        logfire.error(
            "Facebook API request error",
            recipient_id=recipient_id,
            error=str(e),
            error_type=type(e).__name__,
            response_time_ms=elapsed * 1000,
        )
        raise


async def send_text_message(
    page_access_token: str,
    recipient_id: str,
    text: str,
) -> dict[str, Any]:
    """Send a plain text message."""
    logfire.info(
        "Sending Facebook message",
        recipient_id=recipient_id,
        message_length=len(text),
    )
    payload = OutboundPayload(
        recipient=MessengerUser(id=recipient_id),
        message=OutboundMessage(text=text),
    )
    return await call_send_api(page_access_token, payload)


async def send_quick_reply(
    page_access_token: str,
    recipient_id: str,
    text: str,
    quick_replies: List[QuickReply],
) -> dict[str, Any]:
    """Send a text message with quick reply buttons."""
    logfire.info(
        "Sending Facebook quick reply",
        recipient_id=recipient_id,
        message_length=len(text),
        quick_reply_count=len(quick_replies),
    )
    payload = OutboundPayload(
        recipient=MessengerUser(id=recipient_id),
        message=OutboundMessage(text=text, quick_replies=quick_replies or None),
    )
    return await call_send_api(page_access_token, payload)


async def send_sender_action(
    page_access_token: str,
    recipient_id: str,
    action: SenderAction,
) -> dict[str, Any]:
    """Toggle a sender action such as the typing indicator."""
    logfire.info(
        "Sending sender action",
        recipient_id=recipient_id,
        sender_action=action.value,
    )
    payload = OutboundPayload(
        recipient=MessengerUser(id=recipient_id),
        sender_action=action,
    )
    return await call_send_api(page_access_token, payload)
