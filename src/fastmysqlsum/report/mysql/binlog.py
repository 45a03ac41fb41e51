"""
二进制日志列表汇总（SHOW BINARY LOGS / SHOW MASTER LOGS）
"""

from typing import Iterable, List

from loguru import logger

from ..common.formatters import name_value, shorten
from .models import BinlogSummary
from .parser import split_columns


def summarize_binlogs(lines: Iterable[str]) -> BinlogSummary:
    """
    统计二进制日志文件数与总大小

    每行 Log_name File_size [Encrypted]；表头、分隔线与大小非数值的行被跳过。

    Examples:
        >>> summarize_binlogs(["Log_name File_size", "mysql-bin.000001 1024"]).total_bytes
        1024
    """
    summary = BinlogSummary()
    for line in lines:
        if not line.strip() or line.lstrip().startswith("+"):
            continue
        parts = split_columns(line)
        if len(parts) < 2 or parts[0] == "Log_name":
            continue
        try:
            size = int(parts[1])
        except ValueError:
            logger.debug(f"跳过无法解析的二进制日志行: {line.strip()}")
            continue
        summary.count += 1
        summary.total_bytes += size
        summary.files.append((parts[0], size))
    return summary


def render_binlogs(summary: BinlogSummary) -> List[str]:
    """以 20/其余 的名称-值形式输出"""
    lines = [
        name_value("Binlogs", summary.count),
        name_value("Zero-Sized", sum(1 for _, size in summary.files if size == 0)),
        name_value("Total Size", shorten(summary.total_bytes)),
    ]
    if summary.files:
        lines.append(name_value("First", summary.files[0][0]))
        lines.append(name_value("Last", summary.files[-1][0]))
    return lines
