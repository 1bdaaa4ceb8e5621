from __future__ import annotations

from aiogram import Dispatcher

from ..routers import commands


def create_dispatcher() -> Dispatcher:
    dp = Dispatcher()
    dp.include_router(commands.router)
    return dp
