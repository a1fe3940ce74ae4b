"""Unit tests for webhook event processing (process_event).

The HTTP surface of the webhook is covered in tests/e2e.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from searchbot.api.webhook import process_event
from searchbot.services.message_processor import MessageProcessor


class TestProcessEvent:
    """Test process_event delegation and error containment."""

    @pytest.mark.asyncio
    async def test_delegates_to_processor(self, make_event):
        processor = AsyncMock(spec=MessageProcessor)
        event = make_event({"text": "python"})

        await process_event(event, processor=processor)

        processor.process_event.assert_awaited_once_with(event)

    @pytest.mark.asyncio
    async def test_processor_errors_are_logged_not_raised(self, make_event):
        processor = AsyncMock(spec=MessageProcessor)
        processor.process_event.side_effect = RuntimeError("unexpected")

        with patch("searchbot.api.webhook.logger") as mock_logger:
            await process_event(make_event({"text": "python"}), processor=processor)

        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["exc_info"] is True

    @pytest.mark.asyncio
    @patch("searchbot.api.webhook.get_message_processor")
    async def test_default_processor_from_factory(self, mock_factory, make_event):
        processor = MagicMock()
        processor.process_event = AsyncMock()
        mock_factory.return_value = processor

        await process_event(make_event({"text": "python"}))

        mock_factory.assert_called_once_with()
        processor.process_event.assert_awaited_once()

    @pytest.mark.asyncio
    @patch("searchbot.api.webhook.get_message_processor")
    async def test_factory_errors_are_contained(self, mock_factory, make_event):
        mock_factory.side_effect = ValueError("page_access_token is required")

        # Should not raise
        await process_event(make_event({"text": "python"}))
