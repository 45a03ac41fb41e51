"""MySQL 服务器状态汇总报告生成器"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Callable, Dict, List, Optional, Tuple

from loguru import logger

from ..common.formatters import fuzzy_percent, fuzzy_round, name_value, section_banner, shorten
from .binlog import render_binlogs, summarize_binlogs
from .models import CaptureSnapshot
from .parser import KeyValueTable, format_config, parse_processlist
from .processlist import ProcessListAggregator, render_groups, rounded_row
from .schema import SchemaStatsAggregator, render_schema
from .status import StatusDeltaAnalyzer, join_samples, render_joined, render_status_rates, uptime_of


def secs_to_time(seconds: int) -> str:
    """
    秒数格式化为 天+时:分:秒

    Examples:
        >>> secs_to_time(90061)
        '1+01:01:01'
    """
    days, rest = divmod(max(int(seconds), 0), 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{days}+{hours:02d}:{minutes:02d}:{secs:02d}"


class SummaryReportGenerator:
    """
    汇总报告生成器

    原始文本在构造时一次性解析为两张独立的查找表（变量、状态），
    各小节按固定顺序生成并以标题行拼接。相同输入总是得到逐字节相同的输出。
    """

    def __init__(self, snapshot: CaptureSnapshot) -> None:
        self.snapshot = snapshot
        self.variables = KeyValueTable.from_lines(snapshot.variables)
        self.status1 = KeyValueTable.from_lines(snapshot.status1, default="0")
        self.status2 = KeyValueTable.from_lines(snapshot.status2, default="0")

    def _sections(self) -> List[Tuple[str, Callable[[], List[str]]]]:
        return [
            ("Report On Host", self._build_host_section),
            ("Processlist", self._build_processlist_section),
            (self._status_title(), self._build_status_section),
            ("Table cache", self._build_table_cache_section),
            ("Connections", self._build_connections_section),
            ("Binary Logging", self._build_binlog_section),
            ("Schema", self._build_schema_section),
            ("Configuration File", self._build_config_section),
        ]

    def build(self) -> str:
        """生成完整的文本报告"""
        parts: List[str] = []
        for title, builder in self._sections():
            logger.info(f"生成小节: {title}")
            parts.append(section_banner(title))
            parts.extend(builder())
        parts.append(section_banner("The End"))
        return "\n".join(parts) + "\n"

    # ------------------------------------------------------------------
    # 各小节
    # ------------------------------------------------------------------

    def _build_host_section(self) -> List[str]:
        version = self.variables.lookup("version")
        comment = self.variables.lookup("version_comment")
        lines = [
            name_value("Hostname", self.snapshot.hostname),
            name_value("Version", f"{version} {comment}".strip()),
        ]
        if self.status1:
            lines.append(name_value("Uptime", secs_to_time(uptime_of(self.status1))))
        for name, key in (("Port", "port"), ("Datadir", "datadir"), ("Socket", "socket")):
            value = self.variables.lookup(key)
            if value:
                lines.append(name_value(name, value))
        return lines

    def _build_processlist_section(self) -> List[str]:
        if not self.snapshot.processlist:
            return ["No processlist captured"]

        records = parse_processlist(self.snapshot.processlist)
        lines: List[str] = []
        for field, groups in ProcessListAggregator().aggregate_all(records):
            lines.append("")
            lines.append(render_groups(field, groups))
        lines.append("")
        return lines

    def _interval(self) -> Tuple[int, int]:
        t1 = uptime_of(self.status1)
        t2 = uptime_of(self.status2) if self.status2 else t1
        return t1, t2

    def _wait(self) -> Optional[int]:
        """两次采样的间隔秒数；没有第二次采样时为 None"""
        if not self.status2:
            return None
        t1, t2 = self._interval()
        return t2 - t1 if t2 > t1 else self.snapshot.interval

    def _status_title(self) -> str:
        wait = self._wait()
        if wait is None:
            return "Status Counters"
        return f"Status Counters (Wait {wait} Seconds)"

    def _build_status_section(self) -> List[str]:
        if not self.status1:
            return ["No status counters captured"]
        if not self.status2:
            return ["No second status sample captured"]

        t1, t2 = self._interval()
        rates = StatusDeltaAnalyzer().analyze(t1, t2, join_samples(self.status1, self.status2))
        return [render_status_rates(rates, self._wait())]

    def _build_table_cache_section(self) -> List[str]:
        if not self.variables:
            return ["No variables captured"]

        size = self.variables.lookup_int("table_open_cache") or self.variables.lookup_int("table_cache")
        open_tables = self.status1.lookup_int("Open_tables")
        return [
            name_value("Size", size),
            name_value("Usage", fuzzy_percent(open_tables, size)),
        ]

    def _build_connections_section(self) -> List[str]:
        if not self.variables:
            return ["No variables captured"]

        max_connections = self.variables.lookup_int("max_connections")
        max_used = self.status1.lookup_int("Max_used_connections")
        return [
            name_value("Max Used Connections", max_used),
            name_value("Max Connections", max_connections),
            name_value("Connections Usage", fuzzy_percent(max_used, max_connections)),
            name_value("Threads Connected", fuzzy_round(self.status1.lookup_int("Threads_connected"))),
            name_value("Threads Running", fuzzy_round(self.status1.lookup_int("Threads_running"))),
        ]

    def _build_binlog_section(self) -> List[str]:
        lines = [
            name_value("log_bin", self.variables.lookup("log_bin") or "OFF"),
            name_value("binlog_format", self.variables.lookup("binlog_format")),
        ]
        if not self.snapshot.binlogs:
            lines.append("No binary log listing captured")
            return lines
        lines.extend(render_binlogs(summarize_binlogs(self.snapshot.binlogs)))
        return lines

    def _build_schema_section(self) -> List[str]:
        if not self.snapshot.schema:
            return ["No schema dump captured"]

        stats = SchemaStatsAggregator().aggregate(self.snapshot.schema)
        lines: List[str] = []
        for title, table in render_schema(stats):
            lines.append("")
            lines.append(f"  {title}")
            lines.append(table)
        lines.append("")
        return lines

    def _build_config_section(self) -> List[str]:
        if not self.snapshot.config:
            return ["No configuration file captured"]
        return format_config(self.snapshot.config)

    # ------------------------------------------------------------------
    # 机器可读输出
    # ------------------------------------------------------------------

    def build_dict(self) -> Dict[str, Any]:
        """以字典形式输出与文本报告相同的内容"""
        snapshot = self.snapshot
        t1, t2 = self._interval()

        processlist: Dict[str, List[Dict[str, Any]]] = {}
        if snapshot.processlist:
            records = parse_processlist(snapshot.processlist)
            for field, groups in ProcessListAggregator().aggregate_all(records):
                processlist[field] = [
                    dict(zip(("key", "count", "working", "sum_time", "max_time"), rounded_row(group)))
                    for group in groups
                ]

        status: List[Dict[str, Any]] = []
        samples: List[str] = []
        if self.status1 and self.status2:
            pairs = join_samples(self.status1, self.status2)
            samples = render_joined(pairs)
            rates = StatusDeltaAnalyzer().analyze(t1, t2, pairs)
            status = [asdict(rate) for rate in rates]

        binlogs: Optional[Dict[str, Any]] = None
        if snapshot.binlogs:
            summary = summarize_binlogs(snapshot.binlogs)
            binlogs = {
                "count": summary.count,
                "total_bytes": summary.total_bytes,
                "total_size": shorten(summary.total_bytes),
            }

        schema = SchemaStatsAggregator().aggregate(snapshot.schema).to_dict() if snapshot.schema else None

        return {
            "hostname": snapshot.hostname,
            "version": self.variables.lookup("version"),
            "uptime": t1,
            "interval": self._wait(),
            "processlist": processlist,
            "status_counters": status,
            "status_samples": samples,
            "binlogs": binlogs,
            "schema": schema,
            "config": format_config(snapshot.config),
        }
