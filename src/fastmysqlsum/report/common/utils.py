"""
工具函数 - 逐行规则扫描与按发现顺序计数
"""
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Pattern, Sequence, Tuple


@dataclass(frozen=True)
class ScanRule:
    """扫描规则：正则匹配成功后调用 apply(match, state)"""
    pattern: Pattern[str]
    apply: Callable[[re.Match, Any], None]
    stop: bool = False  # 命中后不再尝试后续规则


def scan_lines(lines: Iterable[str], rules: Sequence[ScanRule], state: Any) -> Any:
    """
    单遍扫描文本行，按规则分类并累加到 state

    每一行依次尝试所有规则（re.search），命中即调用对应回调；
    规则的 stop 为 True 时该行不再尝试后续规则。

    Args:
        lines: 文本行
        rules: 规则列表，顺序即优先级
        state: 由调用方定义的累加器对象

    Returns:
        Any: 传入的 state
    """
    for line in lines:
        for rule in rules:
            match = rule.pattern.search(line)
            if match is None:
                continue
            rule.apply(match, state)
            if rule.stop:
                break
    return state


class KeyedCounter:
    """
    二维计数表：行键 -> 列键 -> 计数

    行与列均按首次出现的顺序记录，渲染时对缺失组合补零。
    """

    def __init__(self) -> None:
        self._counts: Dict[str, Dict[str, int]] = {}
        self._columns: Dict[str, None] = {}

    def add_row(self, row: str) -> None:
        self._counts.setdefault(row, {})

    def add_column(self, column: str) -> None:
        self._columns.setdefault(column, None)

    def increment(self, row: str, column: str, amount: int = 1) -> None:
        self.add_row(row)
        self.add_column(column)
        row_counts = self._counts[row]
        row_counts[column] = row_counts.get(column, 0) + amount

    def get(self, row: str, column: str) -> int:
        return self._counts.get(row, {}).get(column, 0)

    @property
    def rows(self) -> List[str]:
        return list(self._counts)

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    def __bool__(self) -> bool:
        return bool(self._columns)

    def render_rows(self, rows: Optional[Iterable[str]] = None) -> List[Tuple[Any, ...]]:
        """
        按列的发现顺序输出各行计数，缺失组合补零

        Args:
            rows: 行键顺序；默认按行键字典序

        Returns:
            list[tuple]: (行键, 计数1, 计数2, ...)
        """
        row_order = sorted(self._counts) if rows is None else list(rows)
        columns = self.columns
        return [
            (row, *[self.get(row, column) for column in columns])
            for row in row_order
        ]

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {
            row: {column: self.get(row, column) for column in self.columns}
            for row in sorted(self._counts)
        }
