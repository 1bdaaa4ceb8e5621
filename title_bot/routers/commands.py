from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.enums import ChatType
from aiogram.types import Message

from ..core.commands import CommandDispatcher, CommandRequest, parse_command
from ..services.telegram import TelegramGateway

logger = logging.getLogger("title_bot.routers.commands")

GROUP_CHAT_TYPES = (ChatType.GROUP, ChatType.SUPERGROUP)

router = Router()


def build_request(message: Message, username: str | None) -> CommandRequest | None:
    parsed = parse_command(message.text, username)
    if parsed is None:
        return None
    command, argument = parsed
    return CommandRequest(
        chat_id=message.chat.id,
        command=command,
        argument=argument,
        user_id=message.from_user.id if message.from_user else None,
        is_group=message.chat.type in GROUP_CHAT_TYPES,
        chat_title=message.chat.title,
        message_id=message.message_id,
    )


@router.message(F.text.startswith("/"))
async def handle_command(message: Message, commands: CommandDispatcher, telegram: TelegramGateway) -> None:
    request = build_request(message, telegram.username)
    if request is None:
        logger.debug("not addressed to us, ignoring text=%r", message.text)
        return
    reply = await commands.dispatch(request)
    if reply:
        await telegram.send_reply(request.chat_id, reply, reply_to=request.message_id)
