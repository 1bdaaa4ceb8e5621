import asyncio
from datetime import datetime, timezone

import pytest

from title_bot.errors import TitleUpdateFailed, ValidationError
from title_bot.models.chat import ChatConfig


NOW = datetime(2024, 10, 1, 12, 30, tzinfo=timezone.utc)


def _put(services, **fields):
    asyncio.run(services.store.put(ChatConfig(**fields)))


def _get(services, chat_id):
    return asyncio.run(services.store.get(chat_id))


def test_apply_sets_last_title(services):
    config = ChatConfig(chat_id=1, segments=["{d}.{m}"], timezone="Asia/Tokyo")
    assert asyncio.run(services.titles.apply(config, NOW)) == "01.10"
    assert config.last_title == "01.10"
    assert services.gateway.titles == [(1, "01.10")]


def test_apply_rejects_bad_length(services):
    with pytest.raises(ValidationError):
        asyncio.run(services.titles.apply(ChatConfig(chat_id=1, segments=[]), NOW))
    with pytest.raises(ValidationError):
        asyncio.run(services.titles.apply(ChatConfig(chat_id=1, segments=["x" * 129]), NOW))
    assert services.gateway.titles == []


def test_apply_raises_when_telegram_refuses(services):
    services.gateway.title_ok = False
    config = ChatConfig(chat_id=1, segments=["Team"], last_title="Old")
    with pytest.raises(TitleUpdateFailed):
        asyncio.run(services.titles.apply(config, NOW))
    assert config.last_title == "Old"


def test_refresh_all_updates_enabled_chats_only(services):
    _put(services, chat_id=1, enabled=True, segments=["A", "{H}"])
    _put(services, chat_id=2, enabled=False, segments=["B", "{H}"])
    _put(services, chat_id=3, enabled=True, segments=["C"], last_title="C")

    updated = asyncio.run(services.titles.refresh_all(NOW))

    assert updated == 1
    assert services.gateway.titles == [(1, "A 12")]
    assert _get(services, 1).last_title == "A 12"
    assert _get(services, 2).last_title == ""


def test_refresh_all_continues_after_failure(services):
    _put(services, chat_id=1, enabled=True, segments=["x" * 200])
    _put(services, chat_id=2, enabled=True, segments=["ok"])

    updated = asyncio.run(services.titles.refresh_all(NOW))

    assert updated == 1
    assert services.gateway.titles == [(2, "ok")]


def test_refresh_all_skips_corrupt_record(services):
    _put(services, chat_id=1, enabled=True, segments=["A"])
    _put(services, chat_id=2, enabled=True, segments=["B"])
    services.store._items[1] = {"segments": ["A"]}

    updated = asyncio.run(services.titles.refresh_all(NOW))

    assert updated == 1
    assert services.gateway.titles == [(2, "B")]
