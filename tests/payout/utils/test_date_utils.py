"""Tests for block timestamp parsing."""

from datetime import datetime

from minapay.payout.utils.date_utils import parse_block_datetime, format_run_timestamp


class TestParseBlockDatetime:

    def test_epoch_millis(self):
        assert parse_block_datetime(1615939560000) == 1615939560000
        assert parse_block_datetime("1615939560000") == 1615939560000

    def test_iso_timestamp(self):
        assert parse_block_datetime("2021-03-17T00:06:00Z") == 1615939560000
        assert parse_block_datetime("2021-03-17T00:06:00") == 1615939560000

    def test_empty_or_invalid(self):
        assert parse_block_datetime(None) is None
        assert parse_block_datetime("") is None
        assert parse_block_datetime("yesterday") is None


def test_format_run_timestamp():
    assert format_run_timestamp(datetime(2024, 12, 31, 23, 59, 1)) == "20241231235901"
