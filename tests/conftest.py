import sys
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from title_bot.config import BotConfig  # noqa: E402
from title_bot.core.commands import CommandContext, create_command_dispatcher  # noqa: E402
from title_bot.services.chats import ChatService  # noqa: E402
from title_bot.services.titles import TitleService  # noqa: E402
from title_bot.storage.base import MemoryChatStore  # noqa: E402


FIXED_NOW = datetime(2024, 10, 1, 12, 30, tzinfo=timezone.utc)
ADMIN_ID = 42


class FakeGateway(SimpleNamespace):
    def __init__(self, *, admins=(ADMIN_ID,), title_ok=True, username="title_bot"):
        super().__init__()
        self.username = username
        self.admins = set(admins)
        self.title_ok = title_ok
        self.titles: list[tuple[int, str]] = []
        self.replies: list[dict] = []

    async def set_chat_title(self, chat_id, title):
        self.titles.append((chat_id, title))
        return self.title_ok

    async def is_admin(self, chat_id, user_id):
        return user_id in self.admins

    async def send_reply(self, chat_id, text, reply_to=None):
        self.replies.append({"chat_id": chat_id, "text": text, "reply_to": reply_to})
        return True


@pytest.fixture
def bot_config(tmp_path):
    return BotConfig(token="test", data_dir=tmp_path / "data", logs_dir=tmp_path / "logs")


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def store():
    return MemoryChatStore()


@pytest.fixture
def services(bot_config, store, gateway):
    chats = ChatService(bot_config, store)
    titles = TitleService(chats=chats, gateway=gateway)
    context = CommandContext(
        chats=chats,
        titles=titles,
        gateway=gateway,
        language="en",
        clock=lambda: FIXED_NOW,
    )
    return SimpleNamespace(
        chats=chats,
        titles=titles,
        gateway=gateway,
        store=store,
        commands=create_command_dispatcher(context),
    )
