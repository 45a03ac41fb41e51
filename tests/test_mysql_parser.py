from __future__ import annotations

from fastmysqlsum.report.mysql.parser import (
    KeyValueTable,
    format_config,
    parse_processlist,
    split_columns,
)

VARIABLES_TEXT = """Variable_name\tValue
max_connections\t151
version\t8.0.36
version_comment\tMySQL Community Server - GPL
sql_mode\tSTRICT_TRANS_TABLES,NO_ENGINE_SUBSTITUTION
max_connections\t500
"""


def test_key_value_table_last_duplicate_wins() -> None:
    table = KeyValueTable.from_text(VARIABLES_TEXT)
    assert table.lookup("max_connections") == "500"
    assert table.lookup_int("max_connections") == 500


def test_key_value_table_keeps_values_with_spaces() -> None:
    table = KeyValueTable.from_text(VARIABLES_TEXT)
    assert table.lookup("version_comment") == "MySQL Community Server - GPL"


def test_key_value_table_missing_key_returns_default() -> None:
    variables = KeyValueTable.from_text(VARIABLES_TEXT)
    status = KeyValueTable.from_text("Uptime 100\n", default="0")
    assert variables.lookup("innodb_buffer_pool_size") == ""
    assert status.lookup("Questions") == "0"
    assert variables.lookup("innodb_buffer_pool_size", "n/a") == "n/a"
    assert variables.lookup_int("version_comment", 7) == 7


def test_key_value_table_matches_exact_key_only() -> None:
    table = KeyValueTable.from_text("Uptime 100\nUptime_since_flush_status 50\n")
    assert table.lookup("Upt") == ""
    assert table.lookup("Uptime") == "100"
    assert "Variable_name" not in KeyValueTable.from_text(VARIABLES_TEXT)


def test_key_value_table_reads_mysql_client_table_format() -> None:
    text = """+---------------+-------+
| Variable_name | Value |
+---------------+-------+
| Uptime        | 86400 |
| Threads_connected | 7 |
+---------------+-------+
"""
    table = KeyValueTable.from_text(text)
    assert table.keys() == ["Uptime", "Threads_connected"]
    assert table.lookup_int("Uptime") == 86400


def test_key_value_table_empty_input() -> None:
    table = KeyValueTable.from_text("")
    assert len(table) == 0
    assert not table


def test_split_columns() -> None:
    assert split_columns("a\tb") == ["a", "b"]
    assert split_columns("| a | b |") == ["a", "b"]


def test_parse_processlist_vertical_blocks(processlist_text: str) -> None:
    records = parse_processlist(processlist_text.splitlines())
    assert len(records) == 3
    first = records[0]
    assert first.command == "Sleep"
    assert first.user == "app"
    assert first.host == "10.0.0.5"
    assert first.db == "shop"
    assert first.state == ""
    assert first.time == 5
    assert records[1].info == "SELECT SLEEP(3)"
    assert records[2].db == "NULL"


def test_parse_processlist_non_numeric_time_counts_as_zero() -> None:
    lines = ["Command: Query", "Time: NULL", "Info: select 1"]
    records = parse_processlist(lines)
    assert records[0].time == 0


def test_parse_processlist_drops_block_without_info(processlist_text: str) -> None:
    lines = processlist_text.splitlines() + ["     Id: 4", "Command: Query", "   Time: 9"]
    assert len(parse_processlist(lines)) == 3


def test_format_config_pass_through() -> None:
    lines = [
        "# server config",
        "",
        "[mysqld]",
        "port = 3306",
        "datadir=/var/lib/mysql",
        "; legacy comment",
        "skip-name-resolve",
        "!includedir /etc/mysql/conf.d/",
    ]
    assert format_config(lines) == [
        "[mysqld]",
        "                port | 3306",
        "             datadir | /var/lib/mysql",
        "   skip-name-resolve |",
        "!includedir /etc/mysql/conf.d/",
    ]
