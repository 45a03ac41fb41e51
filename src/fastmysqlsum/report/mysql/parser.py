"""
MySQL 诊断文本解析器

负责把 SHOW VARIABLES / SHOW STATUS、SHOW PROCESSLIST\\G 以及 my.cnf
等原始文本解析为结构化数据
"""

import re
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from loguru import logger

from ..common.formatters import name_value
from .models import ProcessRecord

_HEADER_NAMES = {"Variable_name", "Log_name"}
_VERTICAL_FIELD = re.compile(r"^\s*(\w+):\s?(.*)$")
_ROW_SEPARATOR = re.compile(r"^\*+\s*\d+\.\s*row\s*\*+$")
_CONFIG_SECTION = re.compile(r"^\s*\[([^\]]+)\]\s*$")


def split_columns(line: str) -> List[str]:
    """
    拆分一行两列（或多列）文本，兼容 mysql 客户端的 | 表格输出

    Examples:
        >>> split_columns("Uptime\\t86400")
        ['Uptime', '86400']
        >>> split_columns("| Uptime | 86400 |")
        ['Uptime', '86400']
    """
    stripped = line.strip()
    if stripped.startswith("|"):
        return [cell.strip() for cell in stripped.strip("|").split("|")]
    return stripped.split()


class KeyValueTable:
    """
    两列快照（变量或状态）的只读查找表

    精确匹配第一列；重复键以最后一次出现为准；缺失键返回默认值。
    变量表与状态表应分别构造，互不混用。
    """

    def __init__(self, items: Optional[Dict[str, str]] = None, default: str = "") -> None:
        self._items: Dict[str, str] = dict(items or {})
        self.default = default

    @classmethod
    def from_lines(cls, lines: Iterable[str], default: str = "") -> "KeyValueTable":
        items: Dict[str, str] = {}
        for line in lines:
            if not line.strip() or line.lstrip().startswith("+"):
                continue
            parts = split_columns(line)
            if not parts or parts[0] in _HEADER_NAMES:
                continue
            # 值中可能包含空格（如 sql_mode、版本注释），只按第一段空白切分
            if line.strip().startswith("|"):
                value = parts[1] if len(parts) > 1 else ""
            else:
                pieces = line.strip().split(None, 1)
                value = pieces[1].strip() if len(pieces) > 1 else ""
            items[parts[0]] = value
        return cls(items, default)

    @classmethod
    def from_text(cls, text: Optional[str], default: str = "") -> "KeyValueTable":
        return cls.from_lines((text or "").splitlines(), default)

    def lookup(self, key: str, default: Optional[str] = None) -> str:
        """按键精确查找，不存在时返回默认值"""
        if key in self._items:
            return self._items[key]
        return self.default if default is None else default

    def lookup_int(self, key: str, default: int = 0) -> int:
        """按键查找并转换为整数，无法转换时返回默认值"""
        value = self.lookup(key, "")
        try:
            return int(value)
        except ValueError:
            return default

    def keys(self) -> List[str]:
        return list(self._items)

    def items(self) -> List[Tuple[str, str]]:
        return list(self._items.items())

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)


def _strip_port(host: str) -> str:
    """去掉 Host 列中的客户端端口（host:port -> host）"""
    if host.count(":") == 1:
        return host.split(":", 1)[0]
    return host


def iter_processlist(lines: Iterable[str]) -> Iterator[ProcessRecord]:
    """
    解析 SHOW FULL PROCESSLIST\\G 的纵向输出

    每个字段一行（Field: value），遇到 Info: 行即结束当前记录；
    末尾缺少 Info: 的不完整记录被丢弃。

    Args:
        lines: 进程列表文本行

    Yields:
        ProcessRecord: 会话记录
    """
    fields: Dict[str, str] = {}
    for line in lines:
        if _ROW_SEPARATOR.match(line.strip()):
            continue
        match = _VERTICAL_FIELD.match(line)
        if not match:
            continue
        name, value = match.group(1), match.group(2).strip()
        fields[name] = value
        if name != "Info":
            continue

        time_text = fields.get("Time", "0")
        try:
            elapsed = int(time_text)
        except ValueError:
            logger.debug(f"进程列表 Time 非数值，按 0 处理: {time_text!r}")
            elapsed = 0

        yield ProcessRecord(
            command=fields.get("Command", ""),
            user=fields.get("User", ""),
            host=_strip_port(fields.get("Host", "")),
            db=fields.get("db", ""),
            state=fields.get("State", ""),
            time=elapsed,
            info=fields.get("Info", ""),
        )
        fields = {}

    if fields:
        logger.debug(f"进程列表末尾存在不完整记录，已忽略: {sorted(fields)}")


def parse_processlist(lines: Iterable[str]) -> List[ProcessRecord]:
    """解析进程列表，返回全部会话记录"""
    return list(iter_processlist(lines))


def format_config(lines: Iterable[str]) -> List[str]:
    """
    原样整理 my.cnf：去掉空行与注释，保留 [section]，键值按 20/其余 对齐

    Examples:
        >>> format_config(["[mysqld]", "# comment", "port = 3306", "skip-name-resolve"])
        ['[mysqld]', '                port | 3306', '   skip-name-resolve |']
    """
    output: List[str] = []
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith(("#", ";")):
            continue
        if _CONFIG_SECTION.match(line):
            output.append(line)
            continue
        if line.startswith("!"):
            # !include / !includedir 指令
            output.append(line)
            continue
        if "=" in line:
            key, value = line.split("=", 1)
            output.append(name_value(key.strip(), value.strip()))
        else:
            output.append(name_value(line, ""))
    return output
