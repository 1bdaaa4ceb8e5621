import logging

import pytest

from title_bot.logging_config import setup_logging


@pytest.fixture
def clean_loggers():
    names = ("title_bot", "title_bot.audit")
    saved = {name: list(logging.getLogger(name).handlers) for name in names}
    yield
    for name in names:
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            if handler not in saved[name]:
                handler.close()
        logger.handlers = saved[name]
    logging.getLogger("title_bot.audit").propagate = True


def _file_handlers(name):
    return [h for h in logging.getLogger(name).handlers if hasattr(h, "baseFilename")]


def test_setup_logging_writes_separate_files(tmp_path, clean_loggers):
    setup_logging(tmp_path)
    setup_logging(tmp_path)

    assert len(_file_handlers("title_bot")) == 2
    assert len(_file_handlers("title_bot.audit")) == 1

    logging.getLogger("title_bot.services").warning("title refresh failed")
    logging.getLogger("title_bot.audit").info('{"event":"CHAT_SAVED"}')
    for name in ("title_bot", "title_bot.audit"):
        for handler in _file_handlers(name):
            handler.flush()

    assert "title refresh failed" in (tmp_path / "error.log").read_text(encoding="utf-8")
    assert "title refresh failed" in (tmp_path / "app.log").read_text(encoding="utf-8")
    assert "CHAT_SAVED" in (tmp_path / "audit.log").read_text(encoding="utf-8")
    assert "CHAT_SAVED" not in (tmp_path / "app.log").read_text(encoding="utf-8")
