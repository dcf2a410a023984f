"""Tests for the cell formatting helpers."""
from datetime import datetime, timedelta, timezone

import pytest

from lacework_cli.utils.formatting import (
    client_server_label,
    enabled_disabled,
    format_float,
    format_int,
    format_json_string,
    format_time,
    format_value,
    join_values,
    parse_time,
    yes_no,
)


@pytest.mark.parametrize("is_client,is_server,label", [
    (1, 1, "Server/Client"),
    (0, 0, ""),
    (1, 0, "Client"),
    (0, 1, "Server"),
])
def test_client_server_label(is_client, is_server, label):
    assert client_server_label(is_client, is_server) == label


def test_flag_labels():
    assert yes_no(1) == "Yes"
    assert yes_no(0) == "No"
    assert enabled_disabled(1) == "Enabled"
    assert enabled_disabled(0) == "Disabled"


def test_format_float_uses_three_decimals():
    assert format_float(1024) == "1024.000"
    assert format_float(0.12345) == "0.123"
    assert format_float(None) == "0.000"


def test_format_int():
    assert format_int(3) == "3"
    assert format_int(None) == "0"


def test_join_values():
    assert join_values([443, 80, 8080]) == "443, 80, 8080"
    assert join_values([]) == ""
    assert join_values(None) == ""


def test_format_time_drops_sub_seconds_and_converts_to_utc():
    value = datetime(2020, 4, 20, 12, 30, 5, 999999,
                     tzinfo=timezone(timedelta(hours=2)))
    assert format_time(value) == "2020-04-20T10:30:05Z"


def test_format_time_none():
    assert format_time(None) == ""


def test_parse_time_formats():
    expected = datetime(2020, 4, 20, 10, 0, tzinfo=timezone.utc)
    assert parse_time("2020-04-20T10:00:00Z") == expected
    assert parse_time("2020-04-20T10:00:00+00:00") == expected
    assert parse_time(int(expected.timestamp())) == expected
    assert parse_time(int(expected.timestamp()) * 1000) == expected


def test_parse_time_invalid_values():
    assert parse_time(None) is None
    assert parse_time("") is None
    assert parse_time("yesterday") is None


def test_format_json_string():
    assert format_json_string('{"a": 1}') == '{\n  "a": 1\n}'
    assert format_json_string("not json") == "not json"


def test_format_value():
    assert format_value(None) == ""
    assert format_value({"a": 1}) == '{"a": 1}'
    assert format_value(5) == "5"


def test_non_numeric_values_are_shown_as_given():
    assert format_int("n/a") == "n/a"
    assert format_float("n/a") == "n/a"
    assert format_int(float("inf")) == "inf"


@pytest.mark.parametrize("value", [10 ** 20, 10 ** 400, float("nan")])
def test_parse_time_out_of_range_epochs(value):
    assert parse_time(value) is None
