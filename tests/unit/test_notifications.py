"""Tests for Telegram contact notifications."""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.notifications.telegram import ContactNotifier, format_contact_message
from src.schemas.contact import ContactResponse


@pytest.fixture
def contact():
    return ContactResponse(
        id=uuid.uuid4(),
        full_name="Tom <b>Sawyer</b>",
        email="tom@example.com",
        mobile="+1 555 0100",
        city="St. Petersburg",
        created_at=datetime(2025, 3, 5, 14, 30, tzinfo=timezone.utc),
    )


class TestFormatContactMessage:
    def test_escapes_html(self, contact):
        text = format_contact_message(contact)
        assert "Tom &lt;b&gt;Sawyer&lt;/b&gt;" in text
        assert "tom@example.com" in text
        assert "2025-03-05 14:30" in text
        assert str(contact.id)[:8] in text


class TestContactNotifier:
    @pytest.mark.asyncio
    async def test_disabled_without_credentials(self, contact):
        notifier = ContactNotifier(bot_token="", chat_id="")
        assert notifier.enabled is False
        assert await notifier.send_contact_notification(contact) is False

    @pytest.mark.asyncio
    async def test_sends_message(self, contact):
        bot = MagicMock()
        bot.send_message = AsyncMock()
        notifier = ContactNotifier(bot_token="123:abc", chat_id="42")

        with patch("src.notifications.telegram.get_or_create_bot", return_value=bot):
            assert await notifier.send_contact_notification(contact) is True

        kwargs = bot.send_message.call_args.kwargs
        assert kwargs["chat_id"] == 42
        assert kwargs["parse_mode"] == "HTML"

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self, contact):
        bot = MagicMock()
        bot.send_message = AsyncMock(side_effect=RuntimeError("telegram down"))
        notifier = ContactNotifier(bot_token="123:abc", chat_id="42")

        with patch("src.notifications.telegram.get_or_create_bot", return_value=bot):
            assert await notifier.send_contact_notification(contact) is False
