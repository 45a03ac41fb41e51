"""
状态计数器差值分析

对两次 SHOW GLOBAL STATUS 采样计算每天、每秒以及采样间隔内的每秒增量
"""

import re
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from loguru import logger

from ..common.config import Config
from ..common.formatters import format_cell, fuzzy_round, render_grid
from .models import StatusCounterSample, StatusRate
from .parser import KeyValueTable

Number = Union[int, float]
PairLike = Union[StatusCounterSample, Tuple[str, str, str]]

_COUNTER_PATTERN = re.compile(r"^\d+$")


def parse_counter(value: str) -> Optional[int]:
    """
    解析计数器值：非负整数且严格小于 64 位无符号最大值，否则返回 None

    Examples:
        >>> parse_counter("42")
        42
        >>> parse_counter("ON")
        >>> parse_counter("18446744073709551615")
    """
    text = str(value).strip()
    if not _COUNTER_PATTERN.match(text):
        return None
    number = int(text)
    if number >= Config.COUNTER_SENTINEL:
        return None
    return number


def join_samples(first: KeyValueTable, second: KeyValueTable) -> List[StatusCounterSample]:
    """
    按键把第二次采样并到第一次采样上，顺序沿用第一次采样

    第二次采样缺少的键，其值为空字符串（间隔列将留空）。
    """
    return [
        StatusCounterSample(name, value, second.lookup(name, ""))
        for name, value in first.items()
    ]


def render_joined(pairs: Iterable[StatusCounterSample]) -> List[str]:
    """以 name v1 v2 的形式输出合并结果"""
    return [f"{pair.name} {pair.value_1} {pair.value_2}".rstrip() for pair in pairs]


def uptime_of(table: KeyValueTable) -> int:
    """读取状态表中的 Uptime（秒），缺失时为 0"""
    return table.lookup_int("Uptime", 0)


class StatusDeltaAnalyzer:
    """状态计数器差值分析器"""

    def __init__(self, seconds_per_day: int = Config.SECONDS_PER_DAY) -> None:
        self.seconds_per_day = seconds_per_day

    def analyze(self, t1: Number, t2: Number, pairs: Iterable[PairLike]) -> List[StatusRate]:
        """
        计算每个计数器的速率

        Args:
            t1: 第一次采样时的 Uptime（秒）
            t2: 第二次采样时的 Uptime（秒），应不小于 t1
            pairs: (名称, 第一次值, 第二次值) 序列

        Returns:
            list[StatusRate]: 至少一列非零的行，顺序与输入一致
        """
        if t2 < t1:
            logger.warning(f"第二次采样的 Uptime 小于第一次 ({t2} < {t1})，间隔速率列留空")

        rates: List[StatusRate] = []
        for pair in pairs:
            name, value_1, value_2 = self._unpack(pair)

            v1 = parse_counter(value_1)
            if v1 is None:
                logger.debug(f"跳过非计数器状态: {name}={value_1!r}")
                continue
            if v1 <= 0:
                continue

            per_day = None
            if t1 >= self.seconds_per_day:
                per_day = self._truncate(fuzzy_round(v1 / (t1 / self.seconds_per_day)))

            per_second = None
            if t1 > 0:
                per_second = self._truncate(fuzzy_round(v1 / t1))

            now_per_second = None
            v2 = parse_counter(value_2)
            if t2 > t1 and v2 is not None:
                now_per_second = self._truncate(fuzzy_round((v2 - v1) / (t2 - t1)))

            if not any((per_day, per_second, now_per_second)):
                continue
            rates.append(StatusRate(name, per_day, per_second, now_per_second))

        return rates

    @staticmethod
    def _unpack(pair: PairLike) -> Tuple[str, str, str]:
        if isinstance(pair, StatusCounterSample):
            return pair.name, pair.value_1, pair.value_2
        name, value_1, value_2 = pair
        return str(name), str(value_1), str(value_2)

    @staticmethod
    def _truncate(value: Number) -> int:
        return int(value)


def render_status_rates(rates: Sequence[StatusRate], interval: Number) -> str:
    """渲染状态速率表，0 与空值均显示为空"""
    headers = ["Variable", "Per day", "Per second", f"{int(interval)} secs"]
    rows = [
        (rate.name, format_cell(rate.per_day), format_cell(rate.per_second), format_cell(rate.now_per_second))
        for rate in rates
    ]
    return render_grid(headers, rows, first_width=40, min_width=11)
