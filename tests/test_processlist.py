from __future__ import annotations

import pytest

from fastmysqlsum.report.mysql.models import GroupAggregate, ProcessRecord
from fastmysqlsum.report.mysql.parser import parse_processlist
from fastmysqlsum.report.mysql.processlist import (
    ProcessListAggregator,
    render_groups,
    rounded_row,
)


def _as_tuples(groups):
    return [(g.key, g.count, g.working, g.sum_time, g.max_time) for g in groups]


def test_group_by_command_includes_sleep_time() -> None:
    records = [ProcessRecord(command="Sleep", time=5), ProcessRecord(command="Query", time=3)]
    groups = ProcessListAggregator().aggregate(records, "Command")
    assert _as_tuples(groups) == [
        ("Query", 1, 1, 3, 3),
        ("Sleep", 1, 0, 5, 5),
    ]


def test_group_by_user_excludes_sleep_time(processlist_text: str) -> None:
    records = parse_processlist(processlist_text.splitlines())
    groups = ProcessListAggregator().aggregate(records, "User")
    assert _as_tuples(groups) == [
        ("app", 2, 1, 3, 3),
        ("root", 1, 1, 0, 0),
    ]


def test_group_by_host_and_state(processlist_text: str) -> None:
    records = parse_processlist(processlist_text.splitlines())
    aggregator = ProcessListAggregator()
    assert [g.key for g in aggregator.aggregate(records, "Host")] == ["10.0.0.5", "10.0.0.6", "localhost"]
    assert [g.key for g in aggregator.aggregate(records, "State")] == ["", "executing", "starting"]


def test_group_key_is_truncated() -> None:
    records = [ProcessRecord(command="Query", user="u" * 40, time=1)]
    groups = ProcessListAggregator().aggregate(records, "User")
    assert groups[0].key == "u" * 30


def test_truncated_keys_share_a_group() -> None:
    records = [
        ProcessRecord(command="Query", user="x" * 30 + "a", time=1),
        ProcessRecord(command="Query", user="x" * 30 + "b", time=4),
    ]
    groups = ProcessListAggregator().aggregate(records, "User")
    assert _as_tuples(groups) == [("x" * 30, 2, 2, 5, 4)]


def test_unknown_group_by_field_is_rejected() -> None:
    with pytest.raises(ValueError):
        ProcessListAggregator().aggregate([], "Info")


def test_aggregate_all_uses_fixed_field_order(processlist_text: str) -> None:
    records = parse_processlist(processlist_text.splitlines())
    tables = ProcessListAggregator().aggregate_all(records)
    assert [field for field, _ in tables] == ["Command", "User", "Host", "db", "State"]
    assert [g.key for g in dict(tables)["db"]] == ["NULL", "shop"]


def test_aggregate_empty_input() -> None:
    assert ProcessListAggregator().aggregate([], "Command") == []


def test_rounded_row_fuzzy_rounds_each_value() -> None:
    group = GroupAggregate(key="Query", count=123, sleep=3, sum_time=4567, max_time=7)
    assert rounded_row(group) == ("Query", 125, 125, 4500, 7)


def test_render_groups_header() -> None:
    table = render_groups("Command", [GroupAggregate(key="Query", count=1, sum_time=3, max_time=3)])
    lines = table.splitlines()
    assert lines[0].split() == ["Command", "COUNT(*)", "Working", "SUM(Time)", "MAX(Time)"]
    assert lines[2].split() == ["Query", "1", "1", "3", "3"]


def test_aggregation_is_deterministic(processlist_text: str) -> None:
    records = parse_processlist(processlist_text.splitlines())
    first = [render_groups(f, g) for f, g in ProcessListAggregator().aggregate_all(records)]
    second = [render_groups(f, g) for f, g in ProcessListAggregator().aggregate_all(records)]
    assert first == second
