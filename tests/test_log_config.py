# tests/test_log_config.py
import io
import logging
import sys

import pytest

from mfsmt_core.log_config import setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    setup_logging(stream=sys.__stdout__)


def test_setup_logging_accepts_level_names():
    stream = io.StringIO()
    setup_logging("debug", stream=stream)
    logging.getLogger("mfsmt_core.test").debug("probe message")
    output = stream.getvalue()
    assert "[DEBUG] [mfsmt_core.test] probe message" in output
    assert logging.getLogger().level == logging.DEBUG


def test_setup_logging_replaces_previous_handler():
    setup_logging(logging.INFO, stream=io.StringIO())
    setup_logging(logging.WARNING, stream=io.StringIO())
    assert len(logging.getLogger().handlers) == 1


def test_setup_logging_rejects_unknown_level_names():
    with pytest.raises(ValueError, match="chatty"):
        setup_logging("chatty")
