"""
报告格式化工具

提供模糊取整、百分比、字节单位以及定宽文本表格等格式化功能
"""

import math
from typing import Any, List, Optional, Sequence, Union

from .config import Config

Number = Union[int, float]


def _round_half_away(value: float) -> int:
    """四舍五入（.5 远离零），区别于内置 round 的银行家舍入"""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def fuzzy_increment(value: Number) -> Optional[int]:
    """
    返回模糊取整时选用的步长

    步长按量级分三档：5/10/25 × factor，factor 依次为 1, 10, 100, ...

    Args:
        value: 非负数值

    Returns:
        Optional[int]: 步长；value <= 10 时不取整，返回 None

    Examples:
        >>> fuzzy_increment(42)
        5
        >>> fuzzy_increment(180)
        25
        >>> fuzzy_increment(7)
    """
    if value <= 10:
        return None

    factor = 1
    while True:
        if value <= 50 * factor:
            return 5 * factor
        if value <= 100 * factor:
            return 10 * factor
        if value <= 250 * factor:
            return 25 * factor
        factor *= 10


def fuzzy_round(value: Number) -> Number:
    """
    按量级模糊取整，使相近的数值在多次报告中显示一致

    Args:
        value: 数值。负数（计数器回绕产生的差值）按绝对值取整后恢复符号

    Returns:
        Number: 取整后的值；|value| <= 10 时原样返回

    Examples:
        >>> fuzzy_round(7)
        7
        >>> fuzzy_round(42)
        40
        >>> fuzzy_round(864000)
        900000
    """
    if value < 0:
        rounded = fuzzy_round(-value)
        return -rounded if rounded else rounded

    increment = fuzzy_increment(value)
    if increment is None:
        return value
    return _round_half_away(value / increment) * increment


def fuzzy_percent(part: Number, total: Number) -> str:
    """
    计算模糊取整后的百分比

    Examples:
        >>> fuzzy_percent(0, 100)
        '0%'
        >>> fuzzy_percent(1, 0)
        '0%'
    """
    if total <= 0:
        return "0%"
    return f"{fuzzy_round(_round_half_away(100 * part / total))}%"


def shorten(bytes_value: Union[int, float, str], precision: int = 1) -> str:
    """
    将字节数缩写为带单位的短字符串（k/M/G/T）

    Examples:
        >>> shorten(1024)
        '1.0k'
        >>> shorten(1610612736)
        '1.5G'
        >>> shorten(512)
        '512'
    """
    if bytes_value is None or bytes_value == "":
        return ""

    try:
        num = float(bytes_value)
    except (ValueError, TypeError):
        return str(bytes_value)

    units = ["", "k", "M", "G", "T", "P"]
    unit_idx = 0
    while abs(num) >= 1024 and unit_idx < len(units) - 1:
        num /= 1024
        unit_idx += 1

    if unit_idx == 0:
        return str(int(num))
    return f"{num:.{precision}f}{units[unit_idx]}"


def format_cell(value: Any) -> str:
    """格式化表格单元：None 与 0 均显示为空"""
    if value is None:
        return ""
    if isinstance(value, float):
        value = int(value)
    if value == 0:
        return ""
    return str(value)


def truncate_text(text: str, max_length: int = Config.GROUP_KEY_WIDTH) -> str:
    """
    截断文本到指定长度（不加后缀，保证定宽列对齐）

    Args:
        text: 原始文本
        max_length: 最大长度

    Returns:
        str: 截断后的文本
    """
    if not text or len(text) <= max_length:
        return text or ""
    return text[:max_length]


def name_value(name: str, value: Any, width: int = Config.NAME_WIDTH) -> str:
    """按 20/其余 的比例输出一行 名称 | 值"""
    display = "" if value is None else str(value)
    return f"{name:>{width}} | {display}".rstrip()


def section_banner(title: str, width: int = Config.BANNER_WIDTH) -> str:
    """
    生成章节标题行

    Examples:
        >>> section_banner("Processlist", 20)
        '# Processlist ######'
    """
    return f"# {title} ".ljust(width, "#")


def render_grid(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    first_width: int = Config.GROUP_KEY_WIDTH,
    min_width: int = 8,
) -> str:
    """
    渲染定宽文本表格：首列左对齐，其余列右对齐

    Args:
        headers: 列名
        rows: 数据行，每行长度与 headers 一致
        first_width: 首列宽度
        min_width: 其余列的最小宽度

    Returns:
        str: 表格文本（无行时只有表头）
    """
    if not headers:
        return ""

    widths: List[int] = [max(first_width, len(headers[0]))]
    for idx, header in enumerate(headers[1:], start=1):
        cell_max = max((len(str(row[idx])) for row in rows), default=0)
        widths.append(max(min_width, len(header), cell_max))

    def fmt(cells: Sequence[Any]) -> str:
        first = str(cells[0]).ljust(widths[0])
        rest = [str(cell).rjust(width) for cell, width in zip(cells[1:], widths[1:])]
        return ("  " + " ".join([first] + rest)).rstrip()

    lines = [fmt(headers), "  " + " ".join("=" * width for width in widths)]
    lines.extend(fmt(row) for row in rows)
    return "\n".join(lines)
