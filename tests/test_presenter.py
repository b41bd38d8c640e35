"""Tests for list and detail presentation."""

import json

import pytest
from conftest import make_record

from pyprocs.models import ProcessAction
from pyprocs.presenter import (
    SEARCH_PLACEHOLDER,
    decode_item_value,
    describe_process,
    encode_item_value,
    filter_items,
    format_bytes,
    format_cpu,
    present,
    rank_processes,
)


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (0, "0 B"),
        (500, "500 B"),
        (1023, "1023 B"),
        (1024, "1 kB"),
        (1536, "1.5 kB"),
        (1_100_000, "1.05 MB"),
        (12 * 1024**2 + 300 * 1024, "12.3 MB"),
        (123 * 1024**2, "123 MB"),
        (5 * 1024**3, "5 GB"),
        (2 * 1024**4, "2 TB"),
        (1024 * 1024 - 1, "1 MB"),
        (1024**3 - 1, "1 GB"),
        (1023 * 1024, "1023 kB"),
    ],
)
def test_format_bytes(size, expected):
    """Test format_bytes uses binary magnitudes and three significant digits."""
    assert format_bytes(size) == expected


def test_format_bytes_negative_is_zero():
    assert format_bytes(-5) == "0 B"


def test_format_cpu_two_decimals():
    assert format_cpu(0.0) == "0.00%"
    assert format_cpu(12.5) == "12.50%"
    assert format_cpu(150.0) == "150.00%"


class TestRanking:
    """Tests for CPU ranking."""

    def test_orders_by_cpu_descending(self):
        """Test the busier process is listed first."""
        ranked = rank_processes([make_record(1, cpu_usage=10.0), make_record(2, cpu_usage=50.0)])
        assert [p.pid for p in ranked] == [2, 1]

    def test_ties_broken_by_pid(self):
        ranked = rank_processes(
            [
                make_record(30, cpu_usage=5.0),
                make_record(10, cpu_usage=5.0),
                make_record(20, cpu_usage=5.0),
                make_record(40, cpu_usage=7.0),
            ]
        )
        assert [p.pid for p in ranked] == [40, 10, 20, 30]


class TestPresent:
    """Tests for building list items."""

    def test_orders_items_by_cpu(self):
        items = present([make_record(1, cpu_usage=10.0), make_record(2, cpu_usage=50.0)])
        assert [decode_item_value(item.value)[0] for item in items] == [2, 1]

    def test_preserves_record_set(self):
        """Test every record appears exactly once."""
        records = [make_record(pid, cpu_usage=float(pid % 7)) for pid in range(1, 50)]
        items = present(records)

        pids = [decode_item_value(item.value)[0] for item in items]
        assert len(pids) == len(records)
        assert set(pids) == {p.pid for p in records}

    def test_item_fields(self):
        record = make_record(42, cpu_usage=3.14159, name="python3", memory=1_100_000)
        (item,) = present([record])

        assert item.title == "python3"
        assert item.subtitle == "pid: 42"
        assert json.loads(item.value) == {"pid": 42, "name": "python3"}
        assert item.actions == (
            ProcessAction.KILL,
            ProcessAction.COPY_EXE,
            ProcessAction.COPY_PID,
        )
        assert item.accessories == ("3.14%", "1.05 MB")

    def test_empty_snapshot(self):
        assert present([]) == []


def test_item_value_round_trip():
    value = encode_item_value(7, "bash [deleted]")
    assert decode_item_value(value) == (7, "bash [deleted]")


class TestFilterItems:
    """Tests for search bar filtering."""

    @pytest.fixture
    def items(self):
        return present(
            [
                make_record(101, cpu_usage=3.0, name="Firefox"),
                make_record(202, cpu_usage=2.0, name="bash"),
                make_record(1011, cpu_usage=1.0, name="sshd"),
            ]
        )

    def test_empty_query_keeps_all(self, items):
        assert filter_items(items, "") == items
        assert filter_items(items, "   ") == items

    def test_matches_name_case_insensitive(self, items):
        result = filter_items(items, "fire")
        assert [item.title for item in result] == ["Firefox"]

    def test_matches_pid(self, items):
        result = filter_items(items, "101")
        assert [item.title for item in result] == ["Firefox", "sshd"]

    def test_no_match(self, items):
        assert filter_items(items, "zsh") == []

    def test_placeholder_text(self):
        assert SEARCH_PLACEHOLDER == "Search by process name or pid"


class TestDescribeProcess:
    """Tests for the detail pane description."""

    def test_labels(self):
        record = make_record(
            42,
            cpu_usage=12.5,
            name="python3",
            memory=1_100_000,
            parent=7,
            group_id=1000,
        )
        detail = describe_process(record)

        assert detail.pid == 42
        assert dict(detail.labels) == {
            "Name": "python3",
            "PID": "42",
            "CPU Usage": "12.50%",
            "Memory Usage": "1.05 MB",
            "Parent": "7",
            "Group": "1000",
        }

    def test_unknown_parent_and_group(self):
        detail = describe_process(make_record(1, parent=None, group_id=None))
        labels = dict(detail.labels)
        assert labels["Parent"] == "Unknown"
        assert labels["Group"] == "Unknown"

    def test_zero_parent_is_not_unknown(self):
        detail = describe_process(make_record(1, parent=0, group_id=0))
        labels = dict(detail.labels)
        assert labels["Parent"] == "0"
        assert labels["Group"] == "0"

    def test_markdown_body(self):
        detail = describe_process(
            make_record(1, exe="/usr/bin/python3", virtual_memory=5 * 1024**3)
        )
        assert "/usr/bin/python3" in detail.markdown
        assert "5 GB" in detail.markdown
