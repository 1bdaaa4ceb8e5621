from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


STORAGE_BACKENDS = ("json", "sqlite", "memory")
LANGUAGES = ("en", "zh")


class ConfigError(RuntimeError):
    """Raised when application configuration is invalid."""


@dataclass(slots=True)
class BotConfig:
    token: str
    data_dir: Path
    logs_dir: Path
    username: str | None = None
    timezone: str = "UTC"
    delimiter: str = " "
    language: str = "en"
    storage_backend: str = "json"
    sqlite_path: Path | None = None


@dataclass(slots=True)
class WebhookConfig:
    base_url: str | None = None
    path: str = "/updates"
    host: str = "0.0.0.0"
    port: int = 8080

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    @property
    def url(self) -> str:
        return f"{(self.base_url or '').rstrip('/')}{self.path}"


@dataclass(slots=True)
class SchedulerConfig:
    refresh_seconds: int = 60


@dataclass(slots=True)
class Config:
    bot: BotConfig
    webhook: WebhookConfig
    scheduler: SchedulerConfig


def _read_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        value = default
    else:
        try:
            value = int(raw)
        except ValueError as exc:
            raise ConfigError(f"{name} must be an integer") from exc
    if min_value is not None and value < min_value:
        raise ConfigError(f"{name} must be >= {min_value}")
    return value


def load_config() -> Config:
    token = os.environ.get("BOT_TOKEN", "").strip()
    if not token:
        raise ConfigError("BOT_TOKEN is not set")

    base_dir = Path(os.environ.get("BOT_BASE_DIR", Path.cwd()))
    data_dir = Path(os.environ.get("BOT_DATA_DIR", base_dir / "data"))
    logs_dir = Path(os.environ.get("BOT_LOG_DIR", base_dir / "logs"))

    username = os.environ.get("BOT_USERNAME", "").strip().lstrip("@") or None

    tz = os.environ.get("BOT_TIMEZONE", "UTC")
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ConfigError(f"BOT_TIMEZONE is not a known timezone: {tz}") from exc

    language = os.environ.get("BOT_LANGUAGE", "en").lower()
    if language not in LANGUAGES:
        raise ConfigError(f"BOT_LANGUAGE must be one of {', '.join(LANGUAGES)}")

    storage_backend = os.environ.get("BOT_STORAGE_BACKEND", "json").lower()
    if storage_backend not in STORAGE_BACKENDS:
        raise ConfigError(f"BOT_STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}")
    sqlite_path_env = os.environ.get("BOT_SQLITE_PATH")
    sqlite_path = Path(sqlite_path_env) if sqlite_path_env else None

    webhook_path = os.environ.get("BOT_WEBHOOK_PATH", "/updates")
    if not webhook_path.startswith("/"):
        webhook_path = f"/{webhook_path}"

    bot_config = BotConfig(
        token=token,
        data_dir=data_dir,
        logs_dir=logs_dir,
        username=username,
        timezone=tz,
        delimiter=os.environ.get("BOT_DELIMITER", " "),
        language=language,
        storage_backend=storage_backend,
        sqlite_path=sqlite_path,
    )
    webhook_config = WebhookConfig(
        base_url=os.environ.get("BOT_WEBHOOK_URL", "").strip() or None,
        path=webhook_path,
        host=os.environ.get("BOT_HOST", "0.0.0.0"),
        port=_read_int("BOT_PORT", 8080, min_value=1),
    )
    scheduler_config = SchedulerConfig(
        refresh_seconds=_read_int("BOT_REFRESH_SECONDS", 60, min_value=1),
    )
    return Config(bot=bot_config, webhook=webhook_config, scheduler=scheduler_config)
