"""
数据模型类 - MySQL 诊断文本解析与汇总结果
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..common.utils import KeyedCounter

# 一次采集的文本行，采集后不可修改
Sample = Tuple[str, ...]


def make_sample(text: Optional[str]) -> Sample:
    """将原始文本切分为 Sample"""
    if not text:
        return ()
    return tuple(text.splitlines())


@dataclass
class SlowQueryRecord:
    """慢查询日志中的一条记录"""
    query_time: Optional[float] = None
    lock_time: Optional[float] = None
    rows_sent: Optional[int] = None
    rows_examined: Optional[int] = None
    header_lines: List[str] = field(default_factory=list)  # # Time / # User@Host 等注释行
    query_line: str = ""                                   # Query_time 所在行
    body_lines: List[str] = field(default_factory=list)    # 原样保留的 SQL 文本

    @property
    def lines(self) -> List[str]:
        return [*self.header_lines, self.query_line, *self.body_lines]


@dataclass
class SlowLogSummary:
    """慢查询抽取结果统计"""
    count: int = 0
    total_query_time: float = 0.0
    max_query_time: float = 0.0
    total_rows_examined: int = 0
    max_rows_examined: int = 0


@dataclass(frozen=True)
class StatusCounterSample:
    """状态计数器两次采样：(名称, 第一次值, 第二次值)"""
    name: str
    value_1: str
    value_2: str


@dataclass
class StatusRate:
    """状态计数器速率行；None 表示该列为空"""
    name: str
    per_day: Optional[int] = None
    per_second: Optional[int] = None
    now_per_second: Optional[int] = None


@dataclass
class ProcessRecord:
    """进程列表中的一个会话"""
    command: str = ""
    user: str = ""
    host: str = ""
    db: str = ""
    state: str = ""
    time: int = 0
    info: str = ""

    def attribute(self, name: str) -> str:
        """按 SHOW PROCESSLIST 的列名取值"""
        return str(getattr(self, name.lower(), "") or "")


@dataclass
class GroupAggregate:
    """进程列表按某一属性分组后的累加结果"""
    key: str
    count: int = 0
    sleep: int = 0
    sum_time: int = 0
    max_time: int = 0

    @property
    def working(self) -> int:
        return self.count - self.sleep


@dataclass
class SchemaStats:
    """按数据库统计的 schema 对象"""
    databases: List[str] = field(default_factory=list)
    object_counts: KeyedCounter = field(default_factory=KeyedCounter)
    engine_counts: KeyedCounter = field(default_factory=KeyedCounter)
    index_kind_counts: KeyedCounter = field(default_factory=KeyedCounter)
    column_type_counts: KeyedCounter = field(default_factory=KeyedCounter)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "databases": list(self.databases),
            "objects": self.object_counts.to_dict(),
            "engines": self.engine_counts.to_dict(),
            "index_kinds": self.index_kind_counts.to_dict(),
            "column_types": self.column_type_counts.to_dict(),
        }


@dataclass
class BinlogSummary:
    """二进制日志列表汇总"""
    count: int = 0
    total_bytes: int = 0
    files: List[Tuple[str, int]] = field(default_factory=list)


@dataclass(frozen=True)
class CaptureSnapshot:
    """一次报告运行所使用的全部原始文本"""
    hostname: str = ""
    interval: int = 0
    variables: Sample = ()
    status1: Sample = ()
    status2: Sample = ()
    processlist: Sample = ()
    binlogs: Sample = ()
    schema: Sample = ()
    config: Sample = ()
