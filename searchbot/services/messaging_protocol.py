"""Messaging abstraction protocols for decoupling from the Send API.

This module provides a Protocol-based abstraction for outbound messaging,
allowing the message router to:
- Stay ignorant of Graph API details
- Be tested against a recording mock instead of httpx mocks
- Treat every send as fire-and-forget (failures become ``False``)
"""

from typing import List, Protocol

import logfire

from searchbot.models.messenger import QuickReply, SenderAction


class MessagingService(Protocol):
    """Protocol for delivering replies to a Messenger user.

    Every method returns True on success and False on failure; none raise.
    """

    async def send_text(self, recipient_id: str, text: str) -> bool:
        """Send a plain text message."""
        ...

    async def send_quick_replies(
        self,
        recipient_id: str,
        text: str,
        quick_replies: List[QuickReply],
    ) -> bool:
        """Send a text message with quick reply buttons."""
        ...

    async def send_sender_action(
        self,
        recipient_id: str,
        action: SenderAction,
    ) -> bool:
        """Send a sender action such as typing on/off."""
        ...


class FacebookMessagingService:
    """Facebook Messenger implementation of MessagingService.

    Wraps the facebook_service functions and swallows their errors after
    logging, so callers never see Send API failures.

    Example:
        >>> service = FacebookMessagingService(page_access_token="...")
        >>> await service.send_text("user123", "Hello!")
        True
    """

    def __init__(self, page_access_token: str):
        """Initialize with Facebook Page access token.

        Args:
            page_access_token: Facebook Page access token for API calls
        """
        if not page_access_token:
            raise ValueError("page_access_token is required")
        self._token = page_access_token

    async def send_text(self, recipient_id: str, text: str) -> bool:
        from searchbot.services.facebook_service import send_text_message

        try:
            await send_text_message(
                page_access_token=self._token,
                recipient_id=recipient_id,
                text=text,
            )
            return True
        except Exception as e:
            self._log_failure("send_text", recipient_id, e)
            return False

    async def send_quick_replies(
        self,
        recipient_id: str,
        text: str,
        quick_replies: List[QuickReply],
    ) -> bool:
        from searchbot.services.facebook_service import send_quick_reply

        try:
            await send_quick_reply(
                page_access_token=self._token,
                recipient_id=recipient_id,
                text=text,
                quick_replies=quick_replies,
            )
            return True
        except Exception as e:
            self._log_failure("send_quick_replies", recipient_id, e)
            return False

    async def send_sender_action(
        self,
        recipient_id: str,
        action: SenderAction,
    ) -> bool:
        from searchbot.services.facebook_service import send_sender_action

        try:
            await send_sender_action(
                page_access_token=self._token,
                recipient_id=recipient_id,
                action=action,
            )
            return True
        except Exception as e:
            self._log_failure("send_sender_action", recipient_id, e)
            return False

    @staticmethod
    def _log_failure(operation: str, recipient_id: str, error: Exception) -> None:
        logfire.error(
            f"FacebookMessagingService.{operation} failed",
            recipient_id=recipient_id,
            error=str(error),
            error_type=type(error).__name__,
        )


class MockMessagingService:
    """Mock implementation for testing.

    Records every outbound call in order so tests can assert both content
    and sequencing (e.g. typing indicators around a search).

    Example:
        >>> service = MockMessagingService()
        >>> await service.send_text("user123", "Test message")
        True
        >>> service.calls
        [('text', 'user123', 'Test message')]
    """

    def __init__(self, should_fail_send: bool = False):
        """Initialize mock service.

        Args:
            should_fail_send: Whether send methods should return False
        """
        self._should_fail_send = should_fail_send
        self.calls: list[tuple] = []

    @property
    def sent_texts(self) -> list[str]:
        """Texts of every message sent, with or without quick replies."""
        return [call[2] for call in self.calls if call[0] in ("text", "quick_replies")]

    @property
    def sender_actions(self) -> list[SenderAction]:
        return [call[2] for call in self.calls if call[0] == "sender_action"]

    async def send_text(self, recipient_id: str, text: str) -> bool:
        self.calls.append(("text", recipient_id, text))
        return not self._should_fail_send

    async def send_quick_replies(
        self,
        recipient_id: str,
        text: str,
        quick_replies: List[QuickReply],
    ) -> bool:
        self.calls.append(("quick_replies", recipient_id, text, list(quick_replies)))
        return not self._should_fail_send

    async def send_sender_action(
        self,
        recipient_id: str,
        action: SenderAction,
    ) -> bool:
        self.calls.append(("sender_action", recipient_id, action))
        return not self._should_fail_send


def get_messaging_service(page_access_token: str) -> FacebookMessagingService:
    """Factory function to get a MessagingService implementation.

    Args:
        page_access_token: Facebook Page access token

    Returns:
        MessagingService implementation (currently Facebook)
    """
    return FacebookMessagingService(page_access_token=page_access_token)
