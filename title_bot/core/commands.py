"""Slash-command parsing and the command table.

Every handler receives the parsed :class:`CommandRequest` and the shared
:class:`CommandContext`, and returns the reply text (``None`` for no reply).
Handlers raise :class:`~title_bot.errors.TitleBotError` subclasses for
anything the user should hear about; :meth:`CommandDispatcher.dispatch` turns
those into localized replies.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import AsyncIterator, Awaitable, Callable, Dict

from .. import __version__
from ..errors import (
    EmptySegments,
    GroupOnly,
    InvalidTimezone,
    MissingArgument,
    PermissionDenied,
    StorageError,
    TitleUpdateFailed,
    UnknownCommand,
    ValidationError,
)
from ..locales import get_text
from ..models.chat import ChatConfig
from ..services import template
from ..services.chats import ChatService
from ..services.telegram import TelegramGateway
from ..services.titles import TitleService
from ..utils.datetime import now_utc

logger = logging.getLogger("title_bot.core.commands")
audit_logger = logging.getLogger("title_bot.audit")

SWITCH_VALUES = {
    "on": True,
    "true": True,
    "yes": True,
    "1": True,
    "off": False,
    "false": False,
    "no": False,
    "0": False,
}


@dataclass(slots=True)
class CommandRequest:
    chat_id: int
    command: str
    argument: str | None = None
    user_id: int | None = None
    is_group: bool = True
    chat_title: str | None = None
    message_id: int | None = None


@dataclass(slots=True)
class CommandContext:
    chats: ChatService
    titles: TitleService
    gateway: TelegramGateway
    language: str = "en"
    clock: Callable[[], datetime] = field(default=now_utc)

    def text(self, key: str, **kwargs: object) -> str:
        return get_text(self.language, key, **kwargs)


Handler = Callable[[CommandRequest, CommandContext], Awaitable["str | None"]]


def parse_command(text: str | None, username: str | None = None) -> tuple[str, str | None] | None:
    """Split ``/cmd[@bot] argument`` into the command name and its raw argument.

    Returns ``None`` when the text is not a command or is addressed to a
    different bot. The argument is everything after the first space, kept
    verbatim so delimiters made of spaces survive.
    """
    if not text:
        return None
    head, sep, rest = text.partition(" ")
    head = head.strip().lower()
    if not head.startswith("/") or len(head) < 2:
        return None
    name, _, target = head[1:].partition("@")
    if target and (not username or target != username.lower()):
        return None
    if not name:
        return None
    return name, (rest if sep else None)


class CommandDispatcher:
    def __init__(self, context: CommandContext) -> None:
        self._context = context
        self._handlers: Dict[str, Handler] = {}

    @property
    def commands(self) -> list[str]:
        return sorted(self._handlers)

    def register(self, name: str, handler: Handler) -> None:
        self._handlers[name.lower()] = handler

    def resolve(self, name: str) -> Handler:
        try:
            return self._handlers[name.lower()]
        except KeyError:
            raise UnknownCommand(name) from None

    async def dispatch(self, request: CommandRequest) -> str | None:
        ctx = self._context
        try:
            handler = self.resolve(request.command)
            logger.info("command matched command=%s chat_id=%s", request.command, request.chat_id)
            return await handler(request, ctx)
        except UnknownCommand:
            logger.info("no command matched command=%s, ignoring", request.command)
            return None
        except PermissionDenied:
            logger.info("permission denied command=%s chat_id=%s user_id=%s", request.command, request.chat_id, request.user_id)
            return None
        except GroupOnly:
            return ctx.text("group_only")
        except InvalidTimezone as exc:
            return ctx.text("invalid_timezone", name=exc.name)
        except MissingArgument as exc:
            return ctx.text("missing_argument", command=exc.command)
        except ValidationError as exc:
            return ctx.text("invalid_request", reason=str(exc))
        except EmptySegments:
            return ctx.text("empty_segments")
        except TitleUpdateFailed:
            return ctx.text("title_update_failed")
        except StorageError:
            logger.exception("storage failure command=%s chat_id=%s", request.command, request.chat_id)
            return ctx.text("storage_failed")
        except Exception:
            logger.exception("command failed command=%s chat_id=%s", request.command, request.chat_id)
            return ctx.text("internal_error")


def _require_argument(request: CommandRequest) -> str:
    if not request.argument:
        raise MissingArgument(request.command)
    return request.argument


async def _check_permission(
    config: ChatConfig, request: CommandRequest, ctx: CommandContext, *, force: bool = False
) -> None:
    if not (config.require_admin or force):
        return
    if request.user_id is None:
        raise PermissionDenied()
    if not await ctx.gateway.is_admin(request.chat_id, request.user_id):
        raise PermissionDenied()


@asynccontextmanager
async def _chat_record(
    request: CommandRequest, ctx: CommandContext, *, force_admin: bool = False
) -> AsyncIterator[ChatConfig]:
    if not request.is_group:
        raise GroupOnly()
    async with ctx.chats.locked(request.chat_id):
        config = await ctx.chats.get_or_create(request.chat_id, request.chat_title)
        await _check_permission(config, request, ctx, force=force_admin)
        yield config


async def _commit(config: ChatConfig, ctx: CommandContext, reply: str) -> str:
    if config.enabled:
        try:
            await ctx.titles.apply(config, ctx.clock())
        except (TitleUpdateFailed, ValidationError) as exc:
            logger.warning("title update failed, disabling chat_id=%s error=%s", config.chat_id, exc)
            config.enabled = False
            await ctx.chats.save(config)
            if isinstance(exc, TitleUpdateFailed):
                return ctx.text("title_update_failed")
            return ctx.text("invalid_title", reason=str(exc))
    await ctx.chats.save(config)
    return reply


def _template_reply(config: ChatConfig, ctx: CommandContext) -> str:
    return ctx.text("template_changed", template=template.join_template(config))


async def handle_start(request: CommandRequest, ctx: CommandContext) -> str:
    return ctx.text("start", version=__version__)


async def handle_echo(request: CommandRequest, ctx: CommandContext) -> str:
    return request.argument or ctx.text("echo_empty")


async def handle_status(request: CommandRequest, ctx: CommandContext) -> str:
    async with _chat_record(request, ctx) as config:
        return ctx.text(
            "status_template",
            title=request.chat_title or config.last_title,
            chat_id=config.chat_id,
            enabled=config.enabled,
            segments=config.segments,
            delimiter=config.delimiter,
            timezone=config.timezone,
            require_admin=config.require_admin,
        )


async def handle_enable(request: CommandRequest, ctx: CommandContext) -> str:
    async with _chat_record(request, ctx) as config:
        config.enabled = True
        reply = await _commit(
            config, ctx, ctx.text("enabled", template=template.join_template(config))
        )
        if config.enabled:
            audit_logger.info('{"event":"TITLES_ENABLED","chat_id":%s}', config.chat_id)
        return reply


async def handle_disable(request: CommandRequest, ctx: CommandContext) -> str:
    async with _chat_record(request, ctx) as config:
        config.enabled = False
        await ctx.chats.save(config)
        audit_logger.info('{"event":"TITLES_DISABLED","chat_id":%s}', config.chat_id)
        return ctx.text("disabled")


async def handle_set_template(request: CommandRequest, ctx: CommandContext) -> str:
    async with _chat_record(request, ctx) as config:
        text = _require_argument(request)
        config.segments = template.split_template(text, config.delimiter)
        return await _commit(config, ctx, _template_reply(config, ctx))


async def handle_set_delimiter(request: CommandRequest, ctx: CommandContext) -> str:
    async with _chat_record(request, ctx) as config:
        if request.argument is None:
            raise MissingArgument(request.command)
        config.delimiter = request.argument
        return await _commit(config, ctx, _template_reply(config, ctx))


async def handle_set_timezone(request: CommandRequest, ctx: CommandContext) -> str:
    async with _chat_record(request, ctx) as config:
        timezone = template.validate_timezone(_require_argument(request))
        config.timezone = timezone
        return await _commit(config, ctx, ctx.text("timezone_changed", timezone=timezone))


async def handle_push(request: CommandRequest, ctx: CommandContext) -> str:
    async with _chat_record(request, ctx) as config:
        segment = _require_argument(request)
        template.push(config, segment)
        return await _commit(config, ctx, _template_reply(config, ctx))


async def handle_push_front(request: CommandRequest, ctx: CommandContext) -> str:
    async with _chat_record(request, ctx) as config:
        segment = _require_argument(request)
        template.push_front(config, segment)
        return await _commit(config, ctx, _template_reply(config, ctx))


async def handle_pop(request: CommandRequest, ctx: CommandContext) -> str:
    async with _chat_record(request, ctx) as config:
        template.pop(config)
        return await _commit(config, ctx, _template_reply(config, ctx))


async def handle_pop_front(request: CommandRequest, ctx: CommandContext) -> str:
    async with _chat_record(request, ctx) as config:
        template.pop_front(config)
        return await _commit(config, ctx, _template_reply(config, ctx))


async def handle_preview(request: CommandRequest, ctx: CommandContext) -> str:
    async with _chat_record(request, ctx) as config:
        return ctx.text("preview", title=ctx.titles.preview(config, ctx.clock()))


async def handle_require_admin(request: CommandRequest, ctx: CommandContext) -> str:
    async with _chat_record(request, ctx, force_admin=True) as config:
        raw = _require_argument(request).strip().lower()
        if raw not in SWITCH_VALUES:
            return ctx.text("invalid_switch", command=request.command)
        config.require_admin = SWITCH_VALUES[raw]
        await ctx.chats.save(config)
        return ctx.text("require_admin_changed", value=config.require_admin)


COMMANDS: Dict[str, Handler] = {
    "start": handle_start,
    "echo": handle_echo,
    "status": handle_status,
    "enable": handle_enable,
    "disable": handle_disable,
    "set_template": handle_set_template,
    "set_delimiter": handle_set_delimiter,
    "set_timezone": handle_set_timezone,
    "push": handle_push,
    "push_front": handle_push_front,
    "pop": handle_pop,
    "pop_front": handle_pop_front,
    "preview": handle_preview,
    "require_admin": handle_require_admin,
}


def create_command_dispatcher(context: CommandContext) -> CommandDispatcher:
    dispatcher = CommandDispatcher(context)
    for name, handler in COMMANDS.items():
        dispatcher.register(name, handler)
    return dispatcher
