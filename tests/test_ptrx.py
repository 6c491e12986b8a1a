from datetime import timedelta

from manifesto import ptrx


def test_value_present():
    assert ptrx.value(7, 0) == 7
    assert ptrx.value("", "zero") == ""


def test_value_missing_returns_zero():
    assert ptrx.value(None, 0) == 0
    assert ptrx.value(None, "") == ""


def test_value_or_keeps_falsy_values():
    assert ptrx.value_or(False, True) is False
    assert ptrx.value_or(0, 5) == 0


def test_value_or_missing_returns_default():
    assert ptrx.value_or(None, True) is True
    assert ptrx.value_or(None, timedelta(seconds=3)) == timedelta(seconds=3)


def test_nil_checks():
    assert ptrx.is_nil(None) is True
    assert ptrx.is_nil(0) is False
    assert ptrx.is_not_nil("") is True
    assert ptrx.is_not_nil(None) is False


def test_values_or_sequence():
    assert ptrx.values_or([1, None, 3], 0) == [1, 0, 3]


def test_values_or_mapping():
    result = ptrx.values_or({"a": None, "b": "x"}, "d")
    assert result == {"a": "d", "b": "x"}


def test_values_or_leaves_input_untouched():
    source = [None, 2]
    ptrx.values_or(source, 9)
    assert source == [None, 2]


def test_values_or_empty():
    assert ptrx.values_or([], 1) == []
    assert ptrx.values_or({}, 1) == {}