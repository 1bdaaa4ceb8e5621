from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

from aiogram import Bot
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application
from aiohttp import web

from ..config import Config
from ..jobs.scheduler import Scheduler
from ..logging_config import setup_logging
from ..services.chats import ChatService
from ..services.telegram import ALLOWED_UPDATES, TelegramGateway
from ..services.titles import TitleService
from ..storage.factory import create_store
from ..utils.datetime import now_utc
from .commands import CommandContext, create_command_dispatcher
from .dispatcher import create_dispatcher
from .middlewares.context import ContextMiddleware

logger = logging.getLogger("title_bot.core.application")


class Application:
    def __init__(self, *, config: Config) -> None:
        self._config = config
        setup_logging(config.bot.logs_dir)
        config.bot.data_dir.mkdir(parents=True, exist_ok=True)

        self._bot = Bot(token=config.bot.token)
        self._gateway = TelegramGateway(bot=self._bot, username=config.bot.username)
        self._chats = ChatService(config.bot, create_store(config.bot))
        self._titles = TitleService(chats=self._chats, gateway=self._gateway)
        self._commands = create_command_dispatcher(
            CommandContext(
                chats=self._chats,
                titles=self._titles,
                gateway=self._gateway,
                language=config.bot.language,
            )
        )
        self._scheduler = Scheduler(scheduler_config=config.scheduler, title_service=self._titles)
        self._dispatcher = create_dispatcher()
        self._dispatcher.message.middleware.register(
            ContextMiddleware(commands=self._commands, telegram=self._gateway)
        )

    async def run(self) -> None:
        username = await self._gateway.resolve_username()
        logger.info("running as @%s", username)
        await self._scheduler.start()
        try:
            if self._config.webhook.enabled:
                await self._run_webhook()
            else:
                await self._gateway.drop_webhook()
                await self._dispatcher.start_polling(self._bot, allowed_updates=ALLOWED_UPDATES)
        finally:
            with suppress(Exception):
                await self._scheduler.shutdown()
            await self._bot.session.close()

    async def _run_webhook(self) -> None:
        webhook = self._config.webhook
        app = web.Application()
        SimpleRequestHandler(dispatcher=self._dispatcher, bot=self._bot).register(app, path=webhook.path)
        setup_application(app, self._dispatcher, bot=self._bot)
        await self._gateway.setup_webhook(webhook.url)

        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, host=webhook.host, port=webhook.port)
        await site.start()
        logger.info("webhook server listening on %s:%s%s", webhook.host, webhook.port, webhook.path)
        try:
            await asyncio.Event().wait()
        finally:
            await runner.cleanup()

    async def refresh_once(self) -> int:
        try:
            return await self._titles.refresh_all(now_utc())
        finally:
            await self._bot.session.close()
