from datetime import timedelta

import pytest

from lorhammer.duration import DurationError, parse_duration


def test_zero():
    assert parse_duration("0") == timedelta(0)


def test_one_minute():
    assert parse_duration("1m") == timedelta(minutes=1)


def test_one_millisecond():
    assert parse_duration("1ms") == timedelta(milliseconds=1)


@pytest.mark.parametrize("n", [1, 7, 42, 3600])
def test_seconds_round_trip(n):
    assert parse_duration(f"{n}s") == timedelta(seconds=n)


def test_combined_components_add_up():
    assert parse_duration("1h30m") == parse_duration("1h") + parse_duration("30m")


def test_fraction_matches_smaller_unit():
    assert parse_duration("1.5s") == parse_duration("1500ms")
    assert parse_duration(".5s") == parse_duration("500ms")


@pytest.mark.parametrize("unit", ["us", "\u00b5s", "\u03bcs"])
def test_microsecond_spellings(unit):
    assert parse_duration(f"1000{unit}") == parse_duration("1ms")


def test_sign():
    assert parse_duration("-2s") == -parse_duration("2s")
    assert parse_duration("+2s") == parse_duration("2s")


def test_sub_microsecond_dropped():
    assert parse_duration("999ns") == parse_duration("0")


@pytest.mark.parametrize(
    "text", ["", "a", "not good", "1", "1x", "{", "-", ".s", "1.2.3s"]
)
def test_invalid(text):
    with pytest.raises(DurationError):
        parse_duration(text)


def test_overflow():
    with pytest.raises(DurationError):
        parse_duration("9999999999999999999h")


def test_error_is_value_error():
    with pytest.raises(ValueError):
        parse_duration("bad")