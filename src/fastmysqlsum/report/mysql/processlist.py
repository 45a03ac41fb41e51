"""
进程列表分组汇总

按 Command / User / Host / db / State 分组，统计会话数、非空闲会话数以及耗时
"""

from typing import Dict, Iterable, List, Sequence, Tuple

from loguru import logger

from ..common.config import Config
from ..common.formatters import fuzzy_round, render_grid, truncate_text
from .models import GroupAggregate, ProcessRecord

SLEEP_COMMAND = "Sleep"


class ProcessListAggregator:
    """进程列表分组汇总器"""

    def __init__(self, key_width: int = Config.GROUP_KEY_WIDTH) -> None:
        self.key_width = key_width

    def aggregate(self, records: Iterable[ProcessRecord], group_by: str) -> List[GroupAggregate]:
        """
        按指定属性分组

        Sleep 会话计入 count 但不计入 working；除按 Command 分组外，
        Sleep 会话的 Time 不计入 sum/max。

        Args:
            records: 会话记录
            group_by: Command、User、Host、db、State 之一

        Returns:
            list[GroupAggregate]: 按分组键字典序排列的结果
        """
        if group_by not in Config.GROUP_BY_FIELDS:
            raise ValueError(f"不支持的分组字段: {group_by}")

        groups: Dict[str, GroupAggregate] = {}
        for record in records:
            key = truncate_text(record.attribute(group_by), self.key_width)
            group = groups.get(key)
            if group is None:
                group = groups[key] = GroupAggregate(key=key)

            group.count += 1
            is_sleep = record.command == SLEEP_COMMAND
            if is_sleep:
                group.sleep += 1
            if group_by == "Command" or not is_sleep:
                group.sum_time += record.time
                group.max_time = max(group.max_time, record.time)

        return [groups[key] for key in sorted(groups)]

    def aggregate_all(self, records: Sequence[ProcessRecord]) -> List[Tuple[str, List[GroupAggregate]]]:
        """依次按固定的五个字段分组，得到五张独立的表"""
        logger.debug(f"汇总进程列表: {len(records)} 个会话")
        return [(field, self.aggregate(records, field)) for field in Config.GROUP_BY_FIELDS]


def rounded_row(group: GroupAggregate) -> Tuple[str, int, int, int, int]:
    """分组结果的显示行，四个数值分别模糊取整"""
    return (
        group.key,
        fuzzy_round(group.count),
        fuzzy_round(group.working),
        fuzzy_round(group.sum_time),
        fuzzy_round(group.max_time),
    )


def render_groups(group_by: str, groups: Sequence[GroupAggregate]) -> str:
    """渲染一张分组表"""
    headers = [group_by, "COUNT(*)", "Working", "SUM(Time)", "MAX(Time)"]
    return render_grid(headers, [rounded_row(group) for group in groups])
