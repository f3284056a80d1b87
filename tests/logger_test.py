import asyncio
import logging

import pytest

from mcping import Logger


def test_auto_range_time():
    assert Logger.auto_range_time(0) == "0 ns"
    assert Logger.auto_range_time(0.0123) == "12 ms"
    assert Logger.auto_range_time(2.5) == "2 s"


def test_messages_carry_caller(caplog):
    logger = Logger("test_messages_carry_caller")

    with caplog.at_level(logging.DEBUG, logger="test_messages_carry_caller"):
        logger.debug("hello", 1)
        logger.warning("careful")

    assert "[logger_test.test_messages_carry_caller] hello 1" in caplog.messages
    assert "[logger_test.test_messages_carry_caller] careful" in caplog.messages


def test_async_timer(caplog):
    logger = Logger("test_async_timer")

    async def answer(value):
        return value

    with caplog.at_level(logging.DEBUG, logger="test_async_timer"):
        assert asyncio.run(logger.async_timer(answer, 42)) == 42

    assert any("Function answer took" in m for m in caplog.messages)


def test_async_timer_needs_coroutine():
    with pytest.raises(TypeError):
        asyncio.run(Logger("test_async_timer_needs_coroutine").async_timer(print))


def test_error_joins_arguments(caplog):
    logger = Logger("test_error_joins_arguments")

    with caplog.at_level(logging.ERROR, logger="test_error_joins_arguments"):
        logger.error("failed", 3, "times")

    assert caplog.records[-1].levelno == logging.ERROR
    assert caplog.messages[-1] == "[logger_test.test_error_joins_arguments] failed 3 times"
