import io
import json

import pytest

from manifesto.logx import api
from manifesto.logx.config import Config, Format
from manifesto.logx.levels import Level
from manifesto.logx.logger import Logger


@pytest.fixture
def stream():
    previous = api.get_default_logger()
    out = io.StringIO()
    config = Config(level=Level.TRACE, format=Format.JSON, enable_timestamp=False, output=out)
    api.set_default_logger(Logger(config))
    yield out
    api.set_default_logger(previous)


def records(out):
    return [json.loads(line) for line in out.getvalue().splitlines()]


def test_default_logger_round_trip(stream):
    logger = Logger(Config(output=io.StringIO()))
    api.set_default_logger(logger)
    assert api.get_default_logger() is logger


def test_level_functions_write_expected_levels(stream):
    api.debug("d")
    api.info("i")
    api.warn("w")
    api.error("e")
    assert [r["level"] for r in records(stream)] == ["DEBUG", "INFO", "WARN", "ERROR"]
    assert [r["message"] for r in records(stream)] == ["d", "i", "w", "e"]


def test_formatted_message(stream):
    api.info("user %s logged in %d times", "ana", 2)
    assert records(stream)[0]["message"] == "user ana logged in 2 times"


def test_set_level_filters(stream):
    api.set_level(Level.ERROR)
    api.info("hidden")
    api.error("shown")
    assert [r["message"] for r in records(stream)] == ["shown"]
    assert api.get_default_logger().level == Level.ERROR


def test_set_output_redirects(stream):
    other = io.StringIO()
    api.set_output(other)
    api.info("elsewhere")
    assert stream.getvalue() == ""
    assert records(other)[0]["message"] == "elsewhere"


def test_structured_helpers(stream):
    api.with_fields({"a": 1}).with_field("b", 2).info("x")
    api.with_struct([1, 2, 3]).warn("y")
    api.with_error(KeyError("k")).error("z")
    first, second, third = records(stream)
    assert (first["a"], first["b"]) == (1, 2)
    assert second["data"] == [1, 2, 3]
    assert third["error"] == str(KeyError("k"))


def test_with_context_attaches_context(stream):
    ctx = {"request_id": "r1"}
    entry = api.with_context(ctx)
    assert entry.ctx is ctx
    assert entry.logger is api.get_default_logger()


def test_panic_logs_and_raises(stream):
    with pytest.raises(RuntimeError, match="broken 7"):
        api.panic("broken %d", 7)
    assert records(stream) == [{"level": "ERROR", "message": "broken 7"}]


def test_fatal_uses_exit_func(stream):
    codes = []
    api.get_default_logger().exit_func = codes.append
    api.fatal("end")
    assert codes == [1]
    assert records(stream)[0]["level"] == "FATAL"