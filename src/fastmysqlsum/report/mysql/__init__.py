"""
MySQL 报告模块

提供慢查询日志过滤与服务器状态汇总报告的解析和生成功能
"""

from .generator import SummaryReportGenerator
from .parser import KeyValueTable, format_config, parse_processlist
from .processlist import ProcessListAggregator
from .schema import SchemaStatsAggregator
from .slowlog import SlowLogFilter, iter_records, render_summary, summarize_records
from .status import StatusDeltaAnalyzer, join_samples

__all__ = [
    "SummaryReportGenerator",
    "KeyValueTable",
    "format_config",
    "parse_processlist",
    "ProcessListAggregator",
    "SchemaStatsAggregator",
    "SlowLogFilter",
    "iter_records",
    "render_summary",
    "summarize_records",
    "StatusDeltaAnalyzer",
    "join_samples",
]
