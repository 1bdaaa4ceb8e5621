from __future__ import annotations

import logging

from aiogram.enums import ChatMemberStatus
from aiogram.exceptions import TelegramAPIError, TelegramBadRequest
from aiogram.types import ReplyParameters

logger = logging.getLogger("title_bot.services.telegram")

ALLOWED_UPDATES = ["message"]
ADMIN_STATUSES = (ChatMemberStatus.CREATOR, ChatMemberStatus.ADMINISTRATOR)


class TelegramGateway:
    """The handful of Bot API calls the title bot makes."""

    def __init__(self, *, bot, username: str | None = None) -> None:
        self._bot = bot
        self._username = username

    @property
    def bot(self):
        return self._bot

    @property
    def username(self) -> str | None:
        return self._username

    async def resolve_username(self) -> str:
        me = await self._bot.get_me()
        if not me.username:
            raise RuntimeError("bot account has no username")
        if self._username and self._username.lower() != me.username.lower():
            raise RuntimeError(
                f"username mismatch: configured {self._username!r}, Telegram reports {me.username!r}"
            )
        self._username = me.username
        return me.username

    async def send_reply(self, chat_id: int, text: str, reply_to: int | None = None) -> bool:
        kwargs = {}
        if reply_to is not None:
            kwargs["reply_parameters"] = ReplyParameters(
                message_id=reply_to, allow_sending_without_reply=True
            )
        try:
            await self._bot.send_message(chat_id=chat_id, text=text, **kwargs)
        except TelegramAPIError as exc:
            logger.warning("send_message failed chat_id=%s error=%s", chat_id, exc)
            return False
        return True

    async def set_chat_title(self, chat_id: int, title: str) -> bool:
        try:
            await self._bot.set_chat_title(chat_id=chat_id, title=title)
        except TelegramBadRequest as exc:
            if "not modified" in str(exc).lower():
                logger.info("chat title not modified chat_id=%s", chat_id)
                return True
            logger.warning("set_chat_title rejected chat_id=%s error=%s", chat_id, exc)
            return False
        except TelegramAPIError as exc:
            logger.warning("set_chat_title failed chat_id=%s error=%s", chat_id, exc)
            return False
        return True

    async def is_admin(self, chat_id: int, user_id: int) -> bool:
        try:
            member = await self._bot.get_chat_member(chat_id=chat_id, user_id=user_id)
        except TelegramAPIError as exc:
            logger.warning("get_chat_member failed chat_id=%s user_id=%s error=%s", chat_id, user_id, exc)
            return False
        logger.info("member status chat_id=%s user_id=%s status=%s", chat_id, user_id, member.status)
        return member.status in ADMIN_STATUSES

    async def setup_webhook(self, url: str) -> None:
        await self._bot.delete_webhook()
        logger.info("previous webhook removed")
        await self._bot.set_webhook(url=url, allowed_updates=ALLOWED_UPDATES)
        logger.info("webhook set url=%s", url)

    async def drop_webhook(self) -> None:
        await self._bot.delete_webhook()
