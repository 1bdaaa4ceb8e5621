import asyncio
from datetime import datetime, timezone
from types import SimpleNamespace

from aiogram.enums import ChatMemberStatus
from aiogram.exceptions import TelegramBadRequest, TelegramNetworkError
from aiogram.methods import SetChatTitle
from aiogram.types import Chat, Message, User

from title_bot.routers.commands import build_request, handle_command
from title_bot.services.telegram import TelegramGateway


class FakeBot(SimpleNamespace):
    def __init__(self, *, title_error=None, status=ChatMemberStatus.MEMBER):
        super().__init__()
        self.title_error = title_error
        self.status = status
        self.calls: list[tuple[str, dict]] = []

    async def set_chat_title(self, **kwargs):
        self.calls.append(("set_chat_title", kwargs))
        if self.title_error:
            raise self.title_error
        return True

    async def get_chat_member(self, **kwargs):
        self.calls.append(("get_chat_member", kwargs))
        return SimpleNamespace(status=self.status)

    async def send_message(self, **kwargs):
        self.calls.append(("send_message", kwargs))
        return kwargs

    async def get_me(self):
        return SimpleNamespace(username="Title_Bot")


def _bad_request(message):
    return TelegramBadRequest(method=SetChatTitle(chat_id=1, title="x"), message=message)


def test_set_chat_title_success():
    bot = FakeBot()
    gateway = TelegramGateway(bot=bot)
    assert asyncio.run(gateway.set_chat_title(1, "Team")) is True
    assert bot.calls == [("set_chat_title", {"chat_id": 1, "title": "Team"})]


def test_set_chat_title_not_modified_counts_as_success():
    gateway = TelegramGateway(bot=FakeBot(title_error=_bad_request("Bad Request: chat title is not modified")))
    assert asyncio.run(gateway.set_chat_title(1, "Team")) is True


def test_set_chat_title_failures():
    gateway = TelegramGateway(bot=FakeBot(title_error=_bad_request("Bad Request: not enough rights")))
    assert asyncio.run(gateway.set_chat_title(1, "Team")) is False
    network_error = TelegramNetworkError(method=SetChatTitle(chat_id=1, title="x"), message="timeout")
    gateway = TelegramGateway(bot=FakeBot(title_error=network_error))
    assert asyncio.run(gateway.set_chat_title(1, "Team")) is False


def test_is_admin():
    assert asyncio.run(TelegramGateway(bot=FakeBot(status=ChatMemberStatus.CREATOR)).is_admin(1, 2))
    assert asyncio.run(TelegramGateway(bot=FakeBot(status=ChatMemberStatus.ADMINISTRATOR)).is_admin(1, 2))
    assert not asyncio.run(TelegramGateway(bot=FakeBot(status=ChatMemberStatus.MEMBER)).is_admin(1, 2))


def test_resolve_username():
    gateway = TelegramGateway(bot=FakeBot(), username="title_bot")
    assert asyncio.run(gateway.resolve_username()) == "Title_Bot"
    assert gateway.username == "Title_Bot"


def test_send_reply_threads_to_message():
    bot = FakeBot()
    gateway = TelegramGateway(bot=bot)
    assert asyncio.run(gateway.send_reply(1, "hi", reply_to=10)) is True
    name, kwargs = bot.calls[0]
    assert name == "send_message"
    assert kwargs["text"] == "hi"
    assert kwargs["reply_parameters"].message_id == 10


def _message(text, chat_type="supergroup", title="Team"):
    return Message(
        message_id=10,
        date=datetime(2024, 10, 1, tzinfo=timezone.utc),
        chat=Chat(id=-100123, type=chat_type, title=title),
        from_user=User(id=42, is_bot=False, first_name="Ann"),
        text=text,
    )


def test_build_request_from_group_message():
    request = build_request(_message("/push@title_bot {H}:{M}"), "Title_Bot")
    assert request.command == "push"
    assert request.argument == "{H}:{M}"
    assert request.chat_id == -100123
    assert request.user_id == 42
    assert request.is_group is True
    assert request.chat_title == "Team"
    assert request.message_id == 10


def test_build_request_private_and_foreign():
    request = build_request(_message("/status", chat_type="private", title=None), "title_bot")
    assert request.is_group is False
    assert build_request(_message("/status@someone_else"), "title_bot") is None


class RecordingCommands:
    def __init__(self, reply):
        self.reply = reply
        self.requests = []

    async def dispatch(self, request):
        self.requests.append(request)
        return self.reply


class RecordingTelegram:
    username = "title_bot"

    def __init__(self):
        self.replies = []

    async def send_reply(self, chat_id, text, reply_to=None):
        self.replies.append((chat_id, text, reply_to))
        return True


def test_handle_command_replies_to_message():
    commands = RecordingCommands("done")
    telegram = RecordingTelegram()
    asyncio.run(handle_command(_message("/pop"), commands=commands, telegram=telegram))
    assert commands.requests[0].command == "pop"
    assert telegram.replies == [(-100123, "done", 10)]


def test_handle_command_silent_when_no_reply():
    commands = RecordingCommands(None)
    telegram = RecordingTelegram()
    asyncio.run(handle_command(_message("/pop"), commands=commands, telegram=telegram))
    asyncio.run(handle_command(_message("/pop@other_bot"), commands=commands, telegram=telegram))
    assert len(commands.requests) == 1
    assert telegram.replies == []
