"""
FastMySQLSum 报告生成API
统一对外接口：慢查询日志过滤、服务器状态汇总报告
"""
import json
import sys
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional

from loguru import logger

from ..meta.mysql.parser import CaptureError, load_capture
from .mysql.generator import SummaryReportGenerator
from .mysql.models import SlowLogSummary
from .mysql.slowlog import SlowLogFilter, iter_records, summarize_records


def _write_through(lines: Iterable[str], out: IO[str]) -> Iterator[str]:
    """写出每一行并继续向下游传递"""
    for line in lines:
        if not line.endswith("\n"):
            line += "\n"
        out.write(line)
        yield line


def filter_slow_log(lines: Iterable[str],
                    out: IO[str],
                    min_time: Optional[float] = None,
                    min_rows: Optional[int] = None) -> SlowLogSummary:
    """
    过滤慢查询日志并写出达到阈值的记录

    输出按行流式写出；写出的行同时按记录分组统计，供调用方输出页脚。

    Args:
        lines: 慢查询日志行（文件对象或字符串序列）
        out: 输出流
        min_time: Query_time 阈值（秒）
        min_rows: Rows_examined 阈值

    Returns:
        SlowLogSummary: 通过记录的数量、耗时与扫描行数统计
    """
    if min_time is None and min_rows is None:
        logger.warning("未指定 -T 或 -R 阈值，不会输出任何记录")

    log_filter = SlowLogFilter(min_time=min_time, min_rows=min_rows)
    summary = summarize_records(iter_records(_write_through(log_filter.filter(lines), out)))

    logger.info(f"慢查询过滤完成，通过记录数: {summary.count}")
    return summary


def generate_summary_report(import_dir: str,
                            output_file: Optional[str] = None,
                            as_json: bool = False,
                            hostname: Optional[str] = None,
                            quiet: bool = False) -> bool:
    """
    从采集目录生成服务器状态汇总报告

    Args:
        import_dir: 采集目录
        output_file: 输出文件路径；为空时写到标准输出
        as_json: 输出 JSON 而不是文本报告
        hostname: 自定义主机名
        quiet: 是否静默模式

    Returns:
        bool: 生成成功返回True，失败返回False
    """
    try:
        snapshot = load_capture(import_dir, hostname=hostname)
    except CaptureError as e:
        logger.error(f"读取采集目录失败: {e}")
        return False

    generator = SummaryReportGenerator(snapshot)
    if as_json:
        content = json.dumps(generator.build_dict(), indent=2, ensure_ascii=False) + "\n"
    else:
        content = generator.build()

    if not output_file:
        sys.stdout.write(content)
        return True

    try:
        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
    except OSError as e:
        logger.error(f"写入报告失败 {output_file}: {e}")
        return False

    if not quiet:
        print(f"  报告文件: {output_file}")
    logger.info(f"汇总报告已生成: {output_file}")
    return True


# 导出主要类和函数
__all__ = ["filter_slow_log", "generate_summary_report"]
