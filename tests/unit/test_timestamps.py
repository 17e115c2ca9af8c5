"""Tests for the epoch-seconds and free-form timestamp decoders."""

from datetime import datetime, timedelta, timezone

import pytest
from cfaccess import (
    FREE_FORM_FORMATS,
    EpochSecondsTimestamp,
    FreeFormTimestamp,
    MalformedTimestamp,
    TimestampError,
    UnrecognizedTimestampFormat,
)
from cfaccess.timestamps import decode_optional, encode


class TestEpochSeconds:
    def test_numeric_string(self):
        value = EpochSecondsTimestamp.decode("1600000000")
        assert value == datetime(2020, 9, 13, 12, 26, 40, tzinfo=timezone.utc)

    def test_json_number(self):
        assert EpochSecondsTimestamp.decode(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_fraction_is_truncated(self):
        value = EpochSecondsTimestamp.decode(1455210430.9)
        assert value.second == 10
        assert value.microsecond == 0

    def test_fractional_string(self):
        assert EpochSecondsTimestamp.decode("1455210430.5") == EpochSecondsTimestamp.decode(
            1455210430
        )

    @pytest.mark.parametrize(
        "raw",
        [
            "abc",
            "",
            True,
            None,
            [],
            {},
            float("nan"),
            float("inf"),
            "1e300",
            "1_600_000_000",
            " 1600000000",
            "1600000000\n",
            "nan",
            "Infinity",
        ],
    )
    def test_malformed(self, raw):
        with pytest.raises(MalformedTimestamp) as exc_info:
            EpochSecondsTimestamp.decode(raw)
        assert exc_info.value.value is raw or exc_info.value.value == raw

    def test_malformed_is_a_value_error(self):
        with pytest.raises(ValueError):
            EpochSecondsTimestamp.decode("yesterday")


class TestFreeForm:
    def test_rfc3339(self):
        value = FreeFormTimestamp.decode("2016-06-08T16:41:45Z")
        assert value == datetime(2016, 6, 8, 16, 41, 45, tzinfo=timezone.utc)

    def test_rfc3339_with_offset(self):
        value = FreeFormTimestamp.decode("2016-06-08T16:41:45+02:00")
        assert value.utcoffset() == timedelta(hours=2)

    def test_rfc3339_nano_truncated_to_microseconds(self):
        value = FreeFormTimestamp.decode("2016-06-08T16:41:45.123456789Z")
        assert value.microsecond == 123456
        assert value.tzinfo is not None

    def test_rfc3339_short_fraction(self):
        assert FreeFormTimestamp.decode("2016-06-08T16:41:45.5Z").microsecond == 500000

    def test_rfc3339_entry_takes_fraction(self):
        parse = dict(FREE_FORM_FORMATS)["RFC3339"]
        assert parse("2016-06-08T16:41:45.25+01:00").microsecond == 250000
        assert parse("2016-06-08T16:41:45Z").microsecond == 0

    def test_numeric_zone(self):
        value = FreeFormTimestamp.decode("2015-07-01 10:00:00 -0700")
        assert value.utcoffset() == timedelta(hours=-7)
        assert value.astimezone(timezone.utc).hour == 17

    def test_named_utc_zone(self):
        value = FreeFormTimestamp.decode("2015-07-01 10:00:00 UTC")
        assert value == datetime(2015, 7, 1, 10, tzinfo=timezone.utc)

    def test_named_zone_keeps_name_at_zero_offset(self):
        value = FreeFormTimestamp.decode("2015-07-01 10:00:00 PDT")
        assert value.utcoffset() == timedelta(0)
        assert value.tzname() == "PDT"

    def test_unrecognized_lists_formats_in_order(self):
        with pytest.raises(UnrecognizedTimestampFormat) as exc_info:
            FreeFormTimestamp.decode("not-a-time")
        err = exc_info.value
        assert err.value == "not-a-time"
        assert err.formats == tuple(name for name, _ in FREE_FORM_FORMATS)
        assert len(err.formats) == 4
        assert str(err).startswith("not-a-time was not in any of the expected date formats")
        assert isinstance(err, TimestampError)

    def test_invalid_calendar_date(self):
        with pytest.raises(UnrecognizedTimestampFormat):
            FreeFormTimestamp.decode("2016-13-08T16:41:45Z")

    def test_non_string(self):
        with pytest.raises(MalformedTimestamp):
            FreeFormTimestamp.decode(1600000000)

    def test_format_order(self):
        names = [name for name, _ in FREE_FORM_FORMATS]
        assert names == [
            "RFC3339",
            "RFC3339Nano",
            "%Y-%m-%d %H:%M:%S %z",
            "%Y-%m-%d %H:%M:%S %Z",
        ]


def test_decode_optional_maps_empty_to_none():
    assert decode_optional(FreeFormTimestamp, None) is None
    assert decode_optional(FreeFormTimestamp, "") is None
    assert decode_optional(EpochSecondsTimestamp, 0) is not None


def test_encode_uses_z_suffix():
    value = datetime(2016, 6, 8, 16, 41, 45, tzinfo=timezone.utc)
    assert encode(value) == "2016-06-08T16:41:45Z"
    assert encode(None) is None
