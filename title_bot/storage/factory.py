from __future__ import annotations

from ..config import BotConfig
from ..storage.base import ChatStore, JsonChatStore, MemoryChatStore, SQLiteChatStore


def create_store(config: BotConfig, name: str = "chats") -> ChatStore:
    if config.storage_backend == "sqlite":
        db_path = config.sqlite_path or config.data_dir / "bot.db"
        return SQLiteChatStore(db_path, name.replace("-", "_"))
    if config.storage_backend == "memory":
        return MemoryChatStore()
    return JsonChatStore(config.data_dir / f"{name}.json")
