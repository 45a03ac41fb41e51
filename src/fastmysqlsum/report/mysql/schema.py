"""
Schema 统计

扫描 mysqldump --no-data 输出，按数据库统计表、视图、存储过程、函数、触发器、
外键、分区、存储引擎、索引类型与列类型
"""

import re
from typing import Iterable, List, Tuple

from loguru import logger

from ..common.formatters import render_grid
from ..common.utils import KeyedCounter, ScanRule, scan_lines
from .models import SchemaStats

# 对象类别：(内部键, 表头)，顺序即列顺序
OBJECT_CATEGORIES: Tuple[Tuple[str, str], ...] = (
    ("tables", "Tables"),
    ("views", "Views"),
    ("storedProcedures", "SPs"),
    ("functions", "Funcs"),
    ("triggers", "Trigs"),
    ("foreignKeys", "FKs"),
    ("partitions", "Partn"),
)

# 索引类型按优先级判定，先命中者为准
INDEX_KIND_PRECEDENCE: Tuple[Tuple[str, str], ...] = (
    ("SPATIAL", "SPATIAL"),
    ("FULLTEXT", "FULLTEXT"),
    ("USING RTREE", "RTREE"),
    ("USING HASH", "HASH"),
)
DEFAULT_INDEX_KIND = "BTREE"


def classify_index(line: str) -> str:
    """
    判定索引类型

    Examples:
        >>> classify_index("  FULLTEXT KEY `ft` (`body`)")
        'FULLTEXT'
        >>> classify_index("  KEY `idx` (`a`) USING HASH")
        'HASH'
        >>> classify_index("  PRIMARY KEY (`id`)")
        'BTREE'
    """
    for marker, kind in INDEX_KIND_PRECEDENCE:
        if marker in line:
            return kind
    return DEFAULT_INDEX_KIND


class _ScanState:
    """扫描过程中的累加器，current_db 为当前 USE 的数据库"""

    def __init__(self) -> None:
        self.current_db = ""
        self.stats = SchemaStats()
        for category, _ in OBJECT_CATEGORIES:
            self.stats.object_counts.add_column(category)

    def use(self, name: str) -> None:
        self.current_db = name
        self.register(name)

    def register(self, name: str) -> None:
        if name not in self.stats.databases:
            self.stats.databases.append(name)
            self.stats.object_counts.add_row(name)

    def count_object(self, category: str) -> None:
        self.register(self.current_db)
        self.stats.object_counts.increment(self.current_db, category)

    def count(self, counter: KeyedCounter, column: str) -> None:
        self.register(self.current_db)
        counter.increment(self.current_db, column)


def _object_rule(pattern: str, category: str) -> ScanRule:
    return ScanRule(re.compile(pattern), lambda match, state: state.count_object(category))


SCHEMA_RULES: Tuple[ScanRule, ...] = (
    ScanRule(re.compile(r"^USE `([^`]+)`;"), lambda m, s: s.use(m.group(1)), stop=True),
    _object_rule(r"^CREATE TABLE", "tables"),
    _object_rule(r"CREATE ALGORITHM=", "views"),
    _object_rule(r"CREATE\b.*\bPROCEDURE\b", "storedProcedures"),
    _object_rule(r"CREATE\b.*\bFUNCTION\b", "functions"),
    _object_rule(r"CREATE\b.*\bTRIGGER\b", "triggers"),
    _object_rule(r"FOREIGN KEY", "foreignKeys"),
    _object_rule(r"PARTITION BY", "partitions"),
    ScanRule(
        re.compile(r"^\) ENGINE=(\w+)"),
        lambda m, s: s.count(s.stats.engine_counts, m.group(1)),
    ),
    # CONSTRAINT ... FOREIGN KEY 行也会命中，外键同时计为一个 BTREE 索引
    ScanRule(
        re.compile(r"\bKEY\b"),
        lambda m, s: s.count(s.stats.index_kind_counts, classify_index(m.string)),
    ),
    ScanRule(
        re.compile(r"^\s*`[^`]+`\s+([^\s,(]+)"),
        lambda m, s: s.count(s.stats.column_type_counts, m.group(1)),
    ),
)


class SchemaStatsAggregator:
    """Schema 统计汇总器"""

    def aggregate(self, lines: Iterable[str]) -> SchemaStats:
        """
        单遍扫描 DDL 文本行

        USE `db`; 切换当前数据库；出现在任何 USE 之前的对象计入名称为空串的数据库。

        Args:
            lines: mysqldump 输出行

        Returns:
            SchemaStats: 各数据库的统计结果
        """
        state = scan_lines(lines, SCHEMA_RULES, _ScanState())
        logger.debug(f"Schema 扫描完成，数据库数: {len(state.stats.databases)}")
        return state.stats


def _render_counter(counter: KeyedCounter, databases: List[str], headers: List[str]) -> str:
    width = max([len("Database")] + [len(name) for name in databases])
    return render_grid(
        ["Database", *headers],
        counter.render_rows(databases),
        first_width=width,
        min_width=5,
    )


def render_schema(stats: SchemaStats) -> List[Tuple[str, str]]:
    """
    渲染四张统计表

    Returns:
        list[tuple]: (小节标题, 表格文本)；没有任何数据的表被省略
    """
    databases = sorted(stats.databases)
    if not databases:
        return []

    blocks = [
        ("Database Objects", _render_counter(
            stats.object_counts, databases, [header for _, header in OBJECT_CATEGORIES]
        )),
    ]
    for title, counter in (
        ("Database Engines", stats.engine_counts),
        ("Database Indexes", stats.index_kind_counts),
        ("Database Column Types", stats.column_type_counts),
    ):
        if counter:
            blocks.append((title, _render_counter(counter, databases, counter.columns)))
    return blocks
