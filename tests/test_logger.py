import io
import json

import pytest

from manifesto.logx.config import Config, Format
from manifesto.logx.levels import Level
from manifesto.logx.logger import Entry, Logger


def make_logger(fmt=Format.JSON, level=Level.TRACE, **kwargs):
    stream = io.StringIO()
    config = Config(
        level=level,
        format=fmt,
        enable_colors=False,
        enable_timestamp=False,
        output=stream,
        **kwargs,
    )
    return Logger(config), stream


def records(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_info_writes_json_record():
    logger, stream = make_logger()
    logger.info("hello")
    assert records(stream) == [{"level": "INFO", "message": "hello"}]


def test_messages_below_level_are_dropped():
    logger, stream = make_logger(level=Level.WARN)
    logger.debug("a")
    logger.info("b")
    logger.warn("c")
    logger.error("d")
    assert [r["message"] for r in records(stream)] == ["c", "d"]


def test_format_arguments_are_interpolated():
    logger, stream = make_logger()
    logger.warn("count %d of %s", 3, "x")
    assert records(stream)[0]["message"] == "count 3 of x"


def test_message_without_args_is_left_untouched():
    logger, stream = make_logger()
    logger.info("100% done")
    assert records(stream)[0]["message"] == "100% done"


def test_entry_fields_and_struct():
    logger, stream = make_logger()
    logger.with_field("a", 1).with_fields({"b": "two"}).with_struct({"k": [1, 2]}).info("m")
    record = records(stream)[0]
    assert record["a"] == 1
    assert record["b"] == "two"
    assert record["data"] == {"k": [1, 2]}


def test_with_error_sets_field_and_error():
    logger, stream = make_logger()
    entry = logger.with_error(ValueError("boom"))
    assert entry.fields == {"error": "boom"}
    entry.error("failed")
    record = records(stream)[0]
    assert record["error"] == "boom"
    assert record["level"] == "ERROR"


def test_with_error_none_adds_no_field():
    logger, _ = make_logger()
    entry = logger.with_error(None)
    assert entry.fields == {}
    assert entry.err is None


def test_entry_methods_chain_on_same_entry():
    logger, _ = make_logger()
    entry = Entry(logger)
    ctx = object()
    assert entry.with_field("x", 1) is entry
    assert entry.with_context(ctx) is entry
    assert entry.ctx is ctx
    assert logger.with_context(ctx).ctx is ctx


def test_fatal_logs_and_exits_with_one():
    codes = []
    stream = io.StringIO()
    config = Config(format=Format.JSON, enable_timestamp=False, output=stream)
    logger = Logger(config, exit_func=codes.append)
    logger.fatal("bye %s", "now")
    assert codes == [1]
    assert records(stream)[0] == {"level": "FATAL", "message": "bye now"}


def test_entry_fatal_exits():
    codes = []
    logger, _ = make_logger()
    logger.exit_func = codes.append
    logger.with_field("k", "v").fatal("x")
    assert codes == [1]


def test_default_exit_raises_system_exit():
    logger, _ = make_logger()
    with pytest.raises(SystemExit) as info:
        logger.fatal("stop")
    assert info.value.code == 1


def test_level_property_round_trip():
    logger, stream = make_logger()
    logger.level = Level.ERROR
    assert logger.level == Level.ERROR
    logger.warn("hidden")
    assert stream.getvalue() == ""


def test_output_can_be_replaced():
    logger, first = make_logger()
    second = io.StringIO()
    logger.output = second
    logger.info("moved")
    assert first.getvalue() == ""
    assert records(second)[0]["message"] == "moved"


def test_binary_output_receives_bytes():
    logger, _ = make_logger()
    sink = io.BytesIO()
    logger.output = sink
    logger.info("bytes")
    assert json.loads(sink.getvalue())["message"] == "bytes"


def test_caller_points_at_calling_file():
    logger, stream = make_logger(enable_caller=True)
    logger.with_field("k", 1).info("where")
    assert records(stream)[0]["caller"].startswith("test_logger.py:")


def test_cloudwatch_format_selected():
    logger, stream = make_logger(fmt=Format.CLOUDWATCH)
    logger.info("cw")
    record = records(stream)[0]
    assert record["msg"] == "cw"
    assert "message" not in record


def test_console_format_selected():
    logger, stream = make_logger(fmt=Format.CONSOLE)
    logger.info("plain")
    assert stream.getvalue() == "[INFO] plain\n"


def test_format_error_reported_on_stderr(capsys):
    logger, stream = make_logger()
    logger.with_struct(object()).info("bad")
    assert stream.getvalue() == ""
    assert "Error formatting log" in capsys.readouterr().err


def test_write_error_reported_on_stderr(capsys):
    logger, stream = make_logger()
    stream.close()
    logger.info("lost")
    assert "Error writing log" in capsys.readouterr().err