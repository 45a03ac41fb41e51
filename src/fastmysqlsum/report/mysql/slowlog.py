"""
MySQL 慢查询日志阈值过滤

逐行单遍处理慢查询日志，只输出 Query_time 或 Rows_examined 达到阈值的记录
"""

import re
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

from loguru import logger

from ..common.formatters import fuzzy_round, name_value
from .models import SlowLogSummary, SlowQueryRecord

# 非数据行：启动横幅、端口/套接字横幅、列标题横幅、User@Host 行
BANNER_PATTERNS = (
    re.compile(r"/.*mysqld, Version:.+ started with:"),
    re.compile(r"Tcp port: \d+\s+Unix socket: "),
    re.compile(r"Time\s+Id\s+Command\s+Argument"),
    re.compile(r"User@Host:"),
)

# # Query_time: 790  Lock_time: 0  Rows_sent: 3400617  Rows_examined: 3400617
QUERY_TIME_PATTERN = re.compile(
    r"Query_time:\s*(\S+)\s+Lock_time:\s*(\S+)(.*?)Rows_examined:\s*(\S+)"
)
_ROWS_SENT_PATTERN = re.compile(r"Rows_sent:\s*(\d+)")


class FilterState(Enum):
    """过滤器状态：IDLE 表示当前记录未通过阈值，IN_RECORD 表示正在输出记录"""
    IDLE = "idle"
    IN_RECORD = "in_record"


def is_banner(line: str) -> bool:
    """判断是否为启动横幅等非数据行"""
    return any(pattern.search(line) for pattern in BANNER_PATTERNS)


def parse_query_header(line: str) -> Optional[Tuple[Optional[float], Optional[float], Optional[int]]]:
    """
    解析 Query_time 行

    Returns:
        Optional[tuple]: (query_time, lock_time, rows_examined)；不是 Query_time 行时返回 None，
        数值无法解析的字段为 None

    Examples:
        >>> parse_query_header("# Query_time: 5 Lock_time: 0 Rows_examined: 10")
        (5.0, 0.0, 10)
        >>> parse_query_header("SELECT 1;")
    """
    match = QUERY_TIME_PATTERN.search(line)
    if not match:
        return None

    def number(text: str, cast):
        try:
            return cast(text)
        except ValueError:
            return None

    rows = number(match.group(4), float)
    return (
        number(match.group(1), float),
        number(match.group(2), float),
        int(rows) if rows is not None else None,
    )


class SlowLogFilter:
    """
    慢查询日志阈值过滤器

    记录的 Query_time >= min_time 或 Rows_examined >= min_rows 时，
    该记录的 Query_time 行及其后的所有行原样输出，直到下一条 Query_time 行。
    两个阈值都未设置时不输出任何内容。

    Query_time 或 Rows_examined 无法解析为数值时，该项不参与判定，另一项仍可使记录通过。

    注意：输入开头若有不属于任何 Query_time 行的正文（例如截取日志尾部时），
    这些行沿用上一次的判定结果；在一次 filter() 调用内，初始判定为未通过。
    """

    def __init__(self, min_time: Optional[float] = None, min_rows: Optional[int] = None) -> None:
        self.min_time = min_time
        self.min_rows = min_rows
        self.state = FilterState.IDLE

    def passes(self, query_time: Optional[float], rows_examined: Optional[int]) -> bool:
        """判断单条记录是否达到阈值"""
        if self.min_time is not None and query_time is not None and query_time >= self.min_time:
            return True
        if self.min_rows is not None and rows_examined is not None and rows_examined >= self.min_rows:
            return True
        return False

    def filter(self, lines: Iterable[str]) -> Iterator[str]:
        """
        单遍过滤日志行

        Args:
            lines: 慢查询日志行（可以是文件对象）

        Yields:
            str: 通过阈值的记录行，保持原样
        """
        self.state = FilterState.IDLE

        for line in lines:
            if is_banner(line):
                continue

            header = parse_query_header(line)
            if header is not None:
                query_time, _, rows_examined = header
                if query_time is None or rows_examined is None:
                    logger.debug(f"Query_time 行存在无法解析的数值，该项不参与阈值判定: {line.rstrip()}")
                if self.passes(query_time, rows_examined):
                    self.state = FilterState.IN_RECORD
                    yield line
                else:
                    self.state = FilterState.IDLE
                continue

            if self.state is FilterState.IN_RECORD:
                yield line


def iter_records(lines: Iterable[str]) -> Iterator[SlowQueryRecord]:
    """
    将慢查询日志按 Query_time 行分组为记录

    Query_time 之前的注释行（# Time、# User@Host、# Thread_id 等）归入下一条记录；
    记录从 Query_time 行开始，到下一条记录的注释行或 Query_time 行为止。

    Args:
        lines: 慢查询日志行

    Yields:
        SlowQueryRecord: 慢查询记录
    """
    pending: List[str] = []
    current: Optional[SlowQueryRecord] = None
    has_sql = False

    for raw in lines:
        line = raw.rstrip("\n")
        if is_banner(line) and "User@Host:" not in line:
            continue

        header = parse_query_header(line)
        if header is not None:
            if current is not None:
                yield current
            query_time, lock_time, rows_examined = header
            sent = _ROWS_SENT_PATTERN.search(line)
            current = SlowQueryRecord(
                query_time=query_time,
                lock_time=lock_time,
                rows_sent=int(sent.group(1)) if sent else None,
                rows_examined=rows_examined,
                header_lines=pending,
                query_line=line,
            )
            pending = []
            has_sql = False
            continue

        is_comment = line.startswith("#")
        if current is None or (is_comment and has_sql):
            pending.append(line)
            continue

        current.body_lines.append(line)
        if not is_comment and line.strip():
            has_sql = True

    if current is not None:
        yield current
    if pending:
        logger.debug(f"慢查询日志末尾有 {len(pending)} 行不属于任何记录")


def summarize_records(records: Iterable[SlowQueryRecord]) -> SlowLogSummary:
    """统计抽取出的记录数、总/最大耗时与扫描行数"""
    summary = SlowLogSummary()
    for record in records:
        summary.count += 1
        query_time = record.query_time or 0.0
        rows = record.rows_examined or 0
        summary.total_query_time += query_time
        summary.max_query_time = max(summary.max_query_time, query_time)
        summary.total_rows_examined += rows
        summary.max_rows_examined = max(summary.max_rows_examined, rows)
    return summary


def render_summary(summary: SlowLogSummary) -> List[str]:
    """
    抽取结果的页脚，数值模糊取整后按 20/其余 输出

    Examples:
        >>> render_summary(SlowLogSummary(count=2, total_query_time=3.7, max_query_time=3.5,
        ...                               total_rows_examined=20500, max_rows_examined=20000))[0]
        '             Queries | 2'
    """
    return [
        name_value("Queries", summary.count),
        name_value("Total Query_time", f"{fuzzy_round(summary.total_query_time):.1f}s"),
        name_value("Max Query_time", f"{fuzzy_round(summary.max_query_time):.1f}s"),
        name_value("Total Rows_examined", fuzzy_round(summary.total_rows_examined)),
        name_value("Max Rows_examined", fuzzy_round(summary.max_rows_examined)),
    ]
