from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(slots=True)
class ChatConfig:
    chat_id: int
    enabled: bool = False
    segments: list[str] = field(default_factory=list)
    delimiter: str = " "
    timezone: str = "UTC"
    last_title: str = ""
    require_admin: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatConfig:
        return cls(
            chat_id=int(data["chat_id"]),
            enabled=bool(data.get("enabled", False)),
            segments=[str(item) for item in data.get("segments", [])],
            delimiter=str(data.get("delimiter", " ")),
            timezone=str(data.get("timezone", "UTC")),
            last_title=str(data.get("last_title", "")),
            require_admin=bool(data.get("require_admin", True)),
        )
