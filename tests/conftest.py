"""Shared pytest fixtures and configuration.

Fixture Categories:
1. Settings & Infrastructure: mock_settings, mock_logfire, test_client, respx_mock
2. Mock Services: mock_messaging_service, mock_search_client, mock_page_fetcher
3. Payload Builders: make_event, make_webhook_payload, sign_body
4. Sample Data: sample_search_response, sample_search_items
"""

import hashlib
import hmac
import os
from contextlib import contextmanager
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest

try:
    import respx
except ImportError:
    respx = None

# Suppress warnings when logfire isn't configured during tests
os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

from searchbot.models.messenger import MessagingEvent
from searchbot.models.search_models import SearchResultItem
from searchbot.services.messaging_protocol import MockMessagingService
from searchbot.services.search_client import SearchClient

TEST_APP_SECRET = "test-app-secret"
TEST_SEARCH_URL = "https://search.example.com/search?q="


@pytest.fixture
def respx_mock():
    """Respx mock fixture for HTTP mocking."""
    if respx is None:
        pytest.skip("respx not available")
    with respx.mock:
        yield respx


# =============================================================================
# Settings & Infrastructure
# =============================================================================


@pytest.fixture
def settings_factory():
    """Build Settings with test defaults; keyword arguments override them."""
    from searchbot.config import Settings

    def _build(**overrides):
        values = dict(
            messenger_app_secret=TEST_APP_SECRET,
            messenger_validation_token="test-verify-token",
            messenger_page_access_token="test-page-token",
            server_url="https://bot.example.com",
            search_url=TEST_SEARCH_URL,
            messenger_require_signature=True,
            env="local",
            sentry_dsn=None,
            logfire_token=None,
        )
        values.update(overrides)
        return Settings(**values)

    return _build


@pytest.fixture
def mock_settings(monkeypatch, settings_factory):
    """Mock application settings."""
    settings = settings_factory()

    monkeypatch.setattr("searchbot.config.get_settings", lambda: settings)
    # Patch where get_settings is used so request handlers see the mock
    monkeypatch.setattr("searchbot.main.get_settings", lambda: settings)
    monkeypatch.setattr("searchbot.api.webhook.get_settings", lambda: settings)
    monkeypatch.setattr("searchbot.logging_config.get_settings", lambda: settings)
    monkeypatch.setattr("searchbot.services.search_client.get_settings", lambda: settings)
    monkeypatch.setattr("searchbot.services.page_fetcher.get_settings", lambda: settings)
    monkeypatch.setattr("searchbot.services.facebook_service.get_settings", lambda: settings)
    return settings


@pytest.fixture
def mock_logfire(monkeypatch):
    """
    Mock Logfire for testing without actual logging.

    Patches the module-level ``logfire`` name in every module that logs
    through it.
    """

    @contextmanager
    def mock_span(*args, **kwargs):
        yield {}

    mock_logfire_module = MagicMock()
    mock_logfire_module.info = Mock()
    mock_logfire_module.warning = Mock()
    mock_logfire_module.error = Mock()
    mock_logfire_module.span = mock_span
    mock_logfire_module.configure = Mock()
    mock_logfire_module.instrument_fastapi = Mock()
    mock_logfire_module.instrument_httpx = Mock()

    for module in (
        "searchbot.main",
        "searchbot.logging_config",
        "searchbot.middleware.correlation_id",
        "searchbot.services.facebook_service",
        "searchbot.services.html_sanitizer",
        "searchbot.services.message_processor",
        "searchbot.services.messaging_protocol",
        "searchbot.services.page_fetcher",
        "searchbot.services.search_client",
        "searchbot.services.signature",
    ):
        monkeypatch.setattr(f"{module}.logfire", mock_logfire_module)

    return mock_logfire_module


@pytest.fixture
def test_client(mock_settings, mock_logfire):
    """FastAPI TestClient for E2E tests."""
    from fastapi.testclient import TestClient

    from searchbot.main import app

    return TestClient(app)


# =============================================================================
# Mock Services
# =============================================================================


@pytest.fixture
def mock_messaging_service():
    """Recording messaging service; inspect ``.calls`` for order and content."""
    return MockMessagingService()


@pytest.fixture
def sample_search_items():
    """Two search results in API order."""
    return [
        SearchResultItem(title="A", snippet="B", link="L1"),
        SearchResultItem(title="C", snippet="D", link="L2"),
    ]


@pytest.fixture
def sample_search_response():
    """Search API JSON body matching sample_search_items."""
    return {
        "items": [
            {"title": "A", "snippet": "B", "link": "L1"},
            {"title": "C", "snippet": "D", "link": "L2"},
        ]
    }


@pytest.fixture
def mock_search_client(sample_search_items):
    """Mock SearchClient whose search() returns sample_search_items."""
    client = AsyncMock(spec=SearchClient)
    client.search = AsyncMock(return_value=sample_search_items)
    return client


@pytest.fixture
def mock_page_fetcher():
    """Page fetch coroutine returning fixed plain text."""
    return AsyncMock(return_value="Hello World")


# =============================================================================
# Payload Builders
# =============================================================================


@pytest.fixture
def make_event():
    """Build a MessagingEvent from a message dict or other event fields."""

    def _build(message: dict | None = None, sender_id: str = "user-456", **fields):
        data = {
            "sender": {"id": sender_id},
            "recipient": {"id": "page-123"},
            "timestamp": 1234567890,
            **fields,
        }
        if message is not None:
            data["message"] = message
        return MessagingEvent.model_validate(data)

    return _build


@pytest.fixture
def make_webhook_payload():
    """Wrap raw messaging event dicts in a page webhook payload."""

    def _build(*events: dict, object_type: str = "page"):
        return {
            "object": object_type,
            "entry": [
                {
                    "id": "page-123",
                    "time": 1234567890,
                    "messaging": list(events),
                }
            ],
        }

    return _build


@pytest.fixture
def sign_body():
    """Return an ``X-Hub-Signature`` value for a body."""

    def _sign(body: bytes, secret: str = TEST_APP_SECRET, method: str = "sha1"):
        digest = hmac.new(secret.encode(), body, getattr(hashlib, method)).hexdigest()
        return f"{method}={digest}"

    return _sign
