from __future__ import annotations

from fastmysqlsum.report.mysql.binlog import render_binlogs, summarize_binlogs
from fastmysqlsum.report.mysql.parser import format_config


def test_summarize_binlogs_counts_and_totals() -> None:
    lines = [
        "Log_name\tFile_size\tEncrypted",
        "mysql-bin.000001\t1073741824\tNo",
        "mysql-bin.000002\t536870912\tNo",
        "mysql-bin.000003\t0\tNo",
    ]
    summary = summarize_binlogs(lines)
    assert summary.count == 3
    assert summary.total_bytes == 1610612736
    assert summary.files[0] == ("mysql-bin.000001", 1073741824)


def test_summarize_binlogs_accepts_pipe_tables() -> None:
    lines = [
        "+------------------+-----------+",
        "| Log_name         | File_size |",
        "+------------------+-----------+",
        "| mysql-bin.000007 |      2048 |",
        "+------------------+-----------+",
    ]
    summary = summarize_binlogs(lines)
    assert summary.count == 1
    assert summary.total_bytes == 2048


def test_summarize_binlogs_skips_malformed_rows() -> None:
    summary = summarize_binlogs(["mysql-bin.000001 abc", "lonely", "", "mysql-bin.000002 10"])
    assert summary.count == 1
    assert summary.files == [("mysql-bin.000002", 10)]


def test_render_binlogs() -> None:
    summary = summarize_binlogs(["mysql-bin.000001 1073741824", "mysql-bin.000002 536870912", "mysql-bin.000003 0"])
    lines = render_binlogs(summary)
    assert lines == [
        "             Binlogs | 3",
        "          Zero-Sized | 1",
        "          Total Size | 1.5G",
        "               First | mysql-bin.000001",
        "                Last | mysql-bin.000003",
    ]


def test_render_binlogs_empty_listing() -> None:
    lines = render_binlogs(summarize_binlogs([]))
    assert lines == [
        "             Binlogs | 0",
        "          Zero-Sized | 0",
        "          Total Size | 0",
    ]


def test_format_config_drops_comments_and_keeps_sections() -> None:
    lines = [
        "[client]",
        "; old style comment",
        "socket=/tmp/mysql.sock",
        "",
        "[mysqld]",
        "# data",
        "innodb_buffer_pool_size = 8G",
        "skip-name-resolve",
        "!includedir /etc/mysql/conf.d/",
    ]
    assert format_config(lines) == [
        "[client]",
        "              socket | /tmp/mysql.sock",
        "[mysqld]",
        "innodb_buffer_pool_size | 8G",
        "   skip-name-resolve |",
        "!includedir /etc/mysql/conf.d/",
    ]
