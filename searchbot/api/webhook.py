"""Facebook webhook endpoints.

GET answers the subscription handshake. POST checks the request signature,
acknowledges the batch right away and routes each messaging event in a
background task, so downstream failures never turn into redeliveries.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Request, Response
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from searchbot.config import get_settings
from searchbot.constants import SIGNATURE_256_HEADER, SIGNATURE_HEADER
from searchbot.models.messenger import MessagingEvent, MessengerWebhookPayload
from searchbot.services.message_processor import (
    MessageProcessor,
    get_message_processor,
)
from searchbot.services.signature import (
    MissingSignatureError,
    SignatureVerificationError,
    verify_request_signature,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def verify_webhook(request: Request):
    """Facebook webhook verification endpoint."""
    settings = get_settings()

    mode = request.query_params.get("hub.mode")
    token = request.query_params.get("hub.verify_token")
    challenge = request.query_params.get("hub.challenge")

    if mode == "subscribe" and token == settings.messenger_validation_token:
        logger.info("Validating webhook")
        return PlainTextResponse(challenge)

    logger.error("Failed validation. Make sure the validation tokens match.")
    return Response(status_code=403)


@router.post("")
async def handle_webhook(request: Request, background_tasks: BackgroundTasks):
    """Handle incoming Facebook Messenger webhook events."""
    settings = get_settings()
    body = await request.body()

    signature = request.headers.get(SIGNATURE_HEADER) or request.headers.get(
        SIGNATURE_256_HEADER
    )
    try:
        verify_request_signature(
            body,
            signature,
            settings.messenger_app_secret,
            require_signature=settings.messenger_require_signature,
        )
    except MissingSignatureError:
        return Response(status_code=401)
    except SignatureVerificationError:
        return Response(status_code=403)

    try:
        data = await request.json()
    except ValueError:
        logger.warning("Webhook body is not valid JSON")
        return Response(status_code=400)

    if not isinstance(data, dict) or data.get("object") != "page":
        return {"status": "ignored"}

    try:
        payload = MessengerWebhookPayload.model_validate(data)
    except ValidationError as e:
        logger.warning("Unrecognized webhook payload shape: %s", e)
        return {"status": "ok"}

    # There may be multiple entries if batched
    for entry in payload.entry:
        for messaging_event in entry.messaging:
            background_tasks.add_task(process_event, messaging_event)

    # Always acknowledge page events, or Facebook redelivers them
    return {"status": "ok"}


async def process_event(
    event: MessagingEvent,
    *,
    processor: MessageProcessor | None = None,
) -> None:
    """Route one messaging event, logging instead of raising.

    Args:
        event: Messaging event from a webhook entry
        processor: Optional injected message processor (for testing)
    """
    try:
        _processor = processor or get_message_processor()
        await _processor.process_event(event)
    except Exception as e:
        logger.error("Error processing messaging event: %s", e, exc_info=True)
