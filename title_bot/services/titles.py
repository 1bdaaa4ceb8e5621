from __future__ import annotations

import logging
from datetime import datetime

from ..errors import TitleBotError, TitleUpdateFailed, ValidationError
from ..models.chat import ChatConfig
from . import template
from .chats import ChatService
from .telegram import TelegramGateway

logger = logging.getLogger("title_bot.services.titles")

MAX_TITLE_LENGTH = 128


class TitleService:
    def __init__(self, *, chats: ChatService, gateway: TelegramGateway) -> None:
        self._chats = chats
        self._gateway = gateway

    def preview(self, config: ChatConfig, now: datetime) -> str:
        return template.render(config, now)

    async def apply(self, config: ChatConfig, now: datetime) -> str:
        title = template.render(config, now)
        if not 1 <= len(title) <= MAX_TITLE_LENGTH:
            raise ValidationError(f"rendered title must be 1-{MAX_TITLE_LENGTH} characters, got {len(title)}")
        logger.info("applying title chat_id=%s title=%r", config.chat_id, title)
        if not await self._gateway.set_chat_title(config.chat_id, title):
            raise TitleUpdateFailed(f"Telegram refused the new title for chat {config.chat_id}")
        config.last_title = title
        return title

    async def refresh_chat(self, chat_id: int, now: datetime) -> bool:
        async with self._chats.locked(chat_id):
            config = await self._chats.get(chat_id)
            if config is None or not config.enabled:
                return False
            if template.render(config, now) == config.last_title:
                return False
            await self.apply(config, now)
            await self._chats.save(config)
            return True

    async def refresh_all(self, now: datetime) -> int:
        updated = 0
        for chat_id in await self._chats.chat_ids():
            try:
                if await self.refresh_chat(chat_id, now):
                    updated += 1
            except TitleBotError as exc:
                logger.warning("title refresh failed chat_id=%s error=%s", chat_id, exc)
        logger.info("title refresh finished updated=%s", updated)
        return updated
