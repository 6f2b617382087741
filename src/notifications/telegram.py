"""Telegram notification service — tells the site owner about new contacts."""

from __future__ import annotations

from html import escape
from typing import Optional

import structlog
from aiogram import Bot
from cachetools import TTLCache

from src.config import settings
from src.schemas.contact import ContactResponse

logger = structlog.get_logger()

CONTACT_TEMPLATE = """📬 <b>New contact request</b>

👤 <b>Name:</b> {full_name}
✉️ <b>Email:</b> {email}
📞 <b>Mobile:</b> {mobile}
🏙 <b>City:</b> {city}

<i>#{contact_id} · {created_at}</i>"""

# Cache bot instances for 5 minutes to avoid re-creating on each request
_bot_cache: TTLCache[str, Bot] = TTLCache(maxsize=10, ttl=300)


def get_or_create_bot(telegram_token: str) -> Bot:
    """Get or create a cached Bot instance for a token."""
    if telegram_token not in _bot_cache:
        _bot_cache[telegram_token] = Bot(token=telegram_token)
        logger.debug("bot_created", token_prefix=telegram_token[:10])
    return _bot_cache[telegram_token]


def format_contact_message(contact: ContactResponse) -> str:
    return CONTACT_TEMPLATE.format(
        full_name=escape(contact.full_name),
        email=escape(contact.email),
        mobile=escape(contact.mobile),
        city=escape(contact.city),
        contact_id=str(contact.id)[:8],
        created_at=contact.created_at.strftime("%Y-%m-%d %H:%M"),
    )


class ContactNotifier:
    """Sends formatted contact notifications via Telegram."""

    def __init__(self, bot_token: str, chat_id: str):
        self.bot_token = bot_token
        self.chat_id = chat_id

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    async def send_contact_notification(self, contact: ContactResponse) -> bool:
        """Send a notification about a new contact submission.

        Failures are logged and never propagate: the submission itself
        has already been stored.

        Returns:
            True if sent successfully
        """
        if not self.enabled:
            return False

        try:
            bot = get_or_create_bot(self.bot_token)
            await bot.send_message(
                chat_id=int(self.chat_id),
                text=format_contact_message(contact),
                parse_mode="HTML",
            )
            logger.info("contact_notification_sent", contact_id=str(contact.id))
            return True

        except Exception as e:
            logger.error(
                "contact_notification_failed",
                error=str(e),
                contact_id=str(contact.id),
            )
            return False


_notifier: Optional[ContactNotifier] = None


def get_notifier() -> ContactNotifier:
    """Notifier built from settings (lazy init)."""
    global _notifier
    if _notifier is None:
        _notifier = ContactNotifier(
            bot_token=settings.notify_telegram_bot_token,
            chat_id=settings.notify_telegram_chat_id,
        )
    return _notifier
