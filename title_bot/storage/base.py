from __future__ import annotations

import asyncio
import json
import sqlite3
from pathlib import Path
from typing import Any, Dict, Protocol

from ..errors import StorageError
from ..models.chat import ChatConfig


class ChatStore(Protocol):
    async def get(self, chat_id: int) -> ChatConfig | None: ...

    async def put(self, config: ChatConfig) -> None: ...

    async def keys(self) -> list[int]: ...


def _load_record(data: Any) -> ChatConfig:
    try:
        return ChatConfig.from_dict(data)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise StorageError(f"malformed chat record: {exc!r}") from exc


class MemoryChatStore:
    def __init__(self) -> None:
        self._items: Dict[int, dict[str, Any]] = {}

    async def get(self, chat_id: int) -> ChatConfig | None:
        data = self._items.get(chat_id)
        if data is None:
            return None
        return _load_record(data)

    async def put(self, config: ChatConfig) -> None:
        self._items[config.chat_id] = config.to_dict()

    async def keys(self) -> list[int]:
        return list(self._items)


class JsonChatStore:
    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = asyncio.Lock()
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def _read(self) -> dict[str, dict[str, Any]]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"cannot read {self._path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise StorageError(f"cannot read {self._path}: expected an object, got {type(payload).__name__}")
        return payload

    def _write(self, payload: dict[str, dict[str, Any]]) -> None:
        tmp = self._path.with_suffix(".tmp")
        try:
            tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp.replace(self._path)
        except OSError as exc:
            raise StorageError(f"cannot write {self._path}: {exc}") from exc

    async def get(self, chat_id: int) -> ChatConfig | None:
        async with self._lock:
            data = self._read().get(str(chat_id))
        return _load_record(data) if data is not None else None

    async def put(self, config: ChatConfig) -> None:
        async with self._lock:
            payload = self._read()
            payload[str(config.chat_id)] = config.to_dict()
            self._write(payload)

    async def keys(self) -> list[int]:
        async with self._lock:
            payload = self._read()
        try:
            return [int(key) for key in payload]
        except ValueError as exc:
            raise StorageError(f"malformed chat id in {self._path}: {exc}") from exc


class SQLiteChatStore:
    def __init__(self, path: Path, table: str = "chats") -> None:
        self._path = path
        self._table = table
        self._lock = asyncio.Lock()
        path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    def _initialize(self) -> None:
        try:
            with sqlite3.connect(self._path) as conn:
                conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {self._table} (\n"
                    "    key INTEGER PRIMARY KEY,\n"
                    "    payload TEXT NOT NULL\n"
                    ")"
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"cannot initialise {self._path}: {exc}") from exc

    async def get(self, chat_id: int) -> ChatConfig | None:
        async with self._lock:
            row = await self._run(self._fetch_row, chat_id)
        if row is None:
            return None
        try:
            data = json.loads(row)
        except ValueError as exc:
            raise StorageError(f"malformed payload for chat {chat_id}: {exc}") from exc
        return _load_record(data)

    async def put(self, config: ChatConfig) -> None:
        payload = json.dumps(config.to_dict(), ensure_ascii=False)
        async with self._lock:
            await self._run(self._write_row, config.chat_id, payload)

    async def keys(self) -> list[int]:
        async with self._lock:
            return await self._run(self._fetch_keys)

    async def _run(self, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except sqlite3.Error as exc:
            raise StorageError(f"sqlite failure on {self._path}: {exc}") from exc

    def _fetch_row(self, chat_id: int) -> str | None:
        with sqlite3.connect(self._path) as conn:
            cursor = conn.execute(f"SELECT payload FROM {self._table} WHERE key = ?", (chat_id,))
            row = cursor.fetchone()
            return row[0] if row else None

    def _fetch_keys(self) -> list[int]:
        with sqlite3.connect(self._path) as conn:
            cursor = conn.execute(f"SELECT key FROM {self._table} ORDER BY key")
            return [int(row[0]) for row in cursor.fetchall()]

    def _write_row(self, chat_id: int, payload: str) -> None:
        with sqlite3.connect(self._path) as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO {self._table} (key, payload) VALUES (?, ?)", (chat_id, payload)
            )
            conn.commit()
