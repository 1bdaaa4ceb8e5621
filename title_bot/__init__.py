"""Telegram bot that renames group chats from a time-aware title template."""

__version__ = "0.1.0"
