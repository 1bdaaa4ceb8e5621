from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from ..config import BotConfig
from ..models.chat import ChatConfig
from ..storage.base import ChatStore
from ..utils.locks import ChatLocks

logger = logging.getLogger("title_bot.services.chats")
audit_logger = logging.getLogger("title_bot.audit")


class ChatService:
    def __init__(self, config: BotConfig, store: ChatStore) -> None:
        self._store = store
        self._locks = ChatLocks()
        self._default_tz = config.timezone
        self._default_delimiter = config.delimiter

    def new_config(self, chat_id: int, title: str | None = None) -> ChatConfig:
        return ChatConfig(
            chat_id=chat_id,
            segments=[title] if title else [],
            delimiter=self._default_delimiter,
            timezone=self._default_tz,
            last_title=title or "",
        )

    async def get(self, chat_id: int) -> ChatConfig | None:
        return await self._store.get(chat_id)

    async def get_or_create(self, chat_id: int, title: str | None = None) -> ChatConfig:
        config = await self._store.get(chat_id)
        if config is None:
            config = self.new_config(chat_id, title)
            await self._store.put(config)
            logger.info("chat_created chat_id=%s", chat_id)
        return config

    async def save(self, config: ChatConfig) -> None:
        await self._store.put(config)
        audit_logger.info(
            '{"event":"CHAT_SAVED","chat_id":%s,"enabled":%s,"segments":%s}',
            config.chat_id,
            "true" if config.enabled else "false",
            len(config.segments),
        )

    async def chat_ids(self) -> list[int]:
        return await self._store.keys()

    @asynccontextmanager
    async def locked(self, chat_id: int) -> AsyncIterator[None]:
        async with self._locks.hold(chat_id):
            yield
