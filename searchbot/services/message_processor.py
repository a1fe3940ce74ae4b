"""Message routing and reply shaping.

The webhook handler hands each messaging event to MessageProcessor, which:
- Dispatches by event kind (opt-in, message, delivery, postback, read, ...)
- Classifies messages into an intent (echo, quick reply, URL, query, attachment)
- Runs a search or a page fetch for the intent
- Shapes the result to platform limits and sends the reply

No failure escapes to the caller: upstream errors become fixed replies.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Awaitable, Callable

import logfire

from searchbot.constants import (
    AUTHENTICATION_SUCCESS_TEXT,
    EMPTY_PAGE_TEXT,
    HELP_TEXT,
    PAGE_FETCH_ERROR_TEXT,
    SEARCH_ERROR_TEXT,
    URL_PREFIXES,
    ZERO_RESULTS_TEXT,
)
from searchbot.models.messenger import MessagingEvent, MessengerMessageIn, SenderAction
from searchbot.services.html_sanitizer import truncate_message
from searchbot.services.messaging_protocol import MessagingService
from searchbot.services.page_fetcher import PageFetchError, fetch_page_text
from searchbot.services.search_client import (
    SearchClient,
    SearchError,
    build_quick_replies,
    format_search_results,
)

logger = logging.getLogger(__name__)

PageFetcher = Callable[[str], Awaitable[str]]


class MessageIntent(str, Enum):
    """What an incoming message asks the bot to do."""

    ECHO = "echo"
    QUICK_REPLY = "quick_reply"
    URL = "url"
    QUERY = "query"
    ATTACHMENT = "attachment"
    UNKNOWN = "unknown"


def is_url(text: str) -> bool:
    """True if ``text`` should be fetched rather than searched."""
    return text.startswith(URL_PREFIXES)


def classify_message(message: MessengerMessageIn) -> MessageIntent:
    """Pick exactly one intent, first match wins.

    Order: echo, quick reply, URL text, query text, attachments.
    """
    if message.is_echo:
        return MessageIntent.ECHO
    if message.quick_reply is not None:
        return MessageIntent.QUICK_REPLY
    if message.text:
        if is_url(message.text):
            return MessageIntent.URL
        return MessageIntent.QUERY
    if message.attachments:
        return MessageIntent.ATTACHMENT
    return MessageIntent.UNKNOWN


class MessageProcessor:
    """Route messaging events and send the shaped replies.

    Example:
        >>> processor = MessageProcessor(
        ...     messaging_service=get_messaging_service(token),
        ...     search_client=get_search_client(),
        ... )
        >>> await processor.process_event(event)

        # With test doubles:
        >>> processor = MessageProcessor(
        ...     messaging_service=MockMessagingService(),
        ...     search_client=mock_search_client,
        ...     page_fetcher=AsyncMock(return_value="Hello World"),
        ... )
    """

    def __init__(
        self,
        messaging_service: MessagingService,
        search_client: SearchClient,
        page_fetcher: PageFetcher | None = None,
    ):
        """Initialize the message processor.

        Args:
            messaging_service: Outbound sender for replies and typing indicators
            search_client: Client used for plain text queries
            page_fetcher: Coroutine function returning a URL's plain text.
                          Uses fetch_page_text() if not provided.
        """
        self._messaging = messaging_service
        self._search_client = search_client
        self._page_fetcher = page_fetcher or fetch_page_text

    async def process_event(self, event: MessagingEvent) -> None:
        """Dispatch one entry of a webhook ``messaging`` array."""
        if event.sender is None:
            logger.warning("Messaging event without sender, ignoring")
            return

        if event.optin is not None:
            await self.handle_authentication(event)
        elif event.message is not None:
            await self.handle_message(event.sender.id, event.message)
        elif event.delivery is not None:
            logger.info("Webhook received: deliveryConfirmation")
        elif event.postback is not None:
            logger.info("Webhook received: postback")
        elif event.read is not None:
            logger.info("Webhook received: messageRead")
        elif event.account_linking is not None:
            logger.info("Webhook received: accountLinking")
        else:
            logger.info("Webhook received unknown messagingEvent: %s", event)

    async def handle_authentication(self, event: MessagingEvent) -> None:
        """Acknowledge an opt-in from the "Send to Messenger" plugin."""
        logfire.info(
            "Received authentication",
            sender_id=event.sender.id,
            recipient_id=event.recipient.id if event.recipient else None,
            pass_through_param=event.optin.ref,
            timestamp=event.timestamp,
        )
        await self._messaging.send_text(event.sender.id, AUTHENTICATION_SUCCESS_TEXT)

    async def handle_message(self, sender_id: str, message: MessengerMessageIn) -> None:
        """Route a message to the branch for its intent."""
        intent = classify_message(message)
        logfire.info(
            "Received message",
            sender_id=sender_id,
            message_id=message.mid,
            intent=intent.value,
        )

        if intent is MessageIntent.ECHO:
            logfire.info(
                "Received echo",
                message_id=message.mid,
                app_id=message.app_id,
                metadata=message.metadata,
            )
        elif intent is MessageIntent.QUICK_REPLY:
            await self.relay_page(sender_id, message.quick_reply.payload)
        elif intent is MessageIntent.URL:
            await self.relay_page(sender_id, message.text)
        elif intent is MessageIntent.QUERY:
            await self.relay_search(sender_id, message.text)
        elif intent is MessageIntent.ATTACHMENT:
            await self._messaging.send_text(sender_id, HELP_TEXT)
        else:
            logger.info("Ignoring message without text or attachments: %s", message.mid)

    async def relay_search(self, sender_id: str, query: str) -> None:
        """Search ``query`` and reply with numbered results and link buttons."""
        await self._messaging.send_sender_action(sender_id, SenderAction.TYPING_ON)
        items = None
        try:
            items = await self._search_client.search(query)
        except SearchError as e:
            logger.error("Search failed for %s: %s", sender_id, e)
        finally:
            await self._messaging.send_sender_action(sender_id, SenderAction.TYPING_OFF)

        if items is None:
            await self._messaging.send_text(sender_id, SEARCH_ERROR_TEXT)
            return
        if not items:
            logfire.info("Searched with zero results", query=query)
            await self._messaging.send_text(sender_id, ZERO_RESULTS_TEXT)
            return

        reply = format_search_results(items)
        logfire.info("Searched", query=query, result_count=len(items))
        await self._messaging.send_quick_replies(
            sender_id,
            truncate_message(reply.text),
            build_quick_replies(reply.links),
        )

    async def relay_page(self, sender_id: str, url: str) -> None:
        """Fetch ``url`` and reply with its plain text."""
        try:
            text = await self._page_fetcher(url)
        except PageFetchError as e:
            logger.error("Page fetch failed for %s: %s", sender_id, e)
            await self._messaging.send_text(sender_id, PAGE_FETCH_ERROR_TEXT)
            return

        if not text:
            await self._messaging.send_text(sender_id, EMPTY_PAGE_TEXT)
            return
        await self._messaging.send_text(sender_id, truncate_message(text))


def get_message_processor(
    messaging_service: MessagingService | None = None,
    search_client: SearchClient | None = None,
    page_fetcher: PageFetcher | None = None,
) -> MessageProcessor:
    """Factory function to create a MessageProcessor from settings.

    Args:
        messaging_service: Optional messaging service instance
        search_client: Optional search client instance
        page_fetcher: Optional page fetch coroutine function

    Returns:
        Configured MessageProcessor instance
    """
    from searchbot.config import get_settings
    from searchbot.services.messaging_protocol import get_messaging_service
    from searchbot.services.search_client import get_search_client

    if messaging_service is None:
        messaging_service = get_messaging_service(
            get_settings().messenger_page_access_token
        )
    return MessageProcessor(
        messaging_service=messaging_service,
        search_client=search_client or get_search_client(),
        page_fetcher=page_fetcher,
    )
