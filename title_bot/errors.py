from __future__ import annotations


class TitleBotError(Exception):
    """Base class for errors reported back to the chat."""


class ValidationError(TitleBotError):
    pass


class InvalidTimezone(ValidationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"unknown timezone: {name!r}")
        self.name = name


class MissingArgument(ValidationError):
    def __init__(self, command: str) -> None:
        super().__init__(f"/{command} requires an argument")
        self.command = command


class EmptySegments(TitleBotError):
    def __init__(self) -> None:
        super().__init__("title template has no segments")


class StorageError(TitleBotError):
    pass


class UnknownCommand(TitleBotError):
    def __init__(self, command: str) -> None:
        super().__init__(f"unknown command: {command!r}")
        self.command = command


class GroupOnly(TitleBotError):
    pass


class PermissionDenied(TitleBotError):
    pass


class TitleUpdateFailed(TitleBotError):
    pass
