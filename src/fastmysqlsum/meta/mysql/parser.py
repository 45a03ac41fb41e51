#!/usr/bin/env python3
"""
MySQL 采集目录解析器
读取采集目录中的原始文本文件，构造一次报告运行使用的 CaptureSnapshot
"""
import json
import re
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from loguru import logger

from ...report.common.config import Config
from ...report.mysql.models import CaptureSnapshot, make_sample


class CaptureError(ValueError):
    """采集目录不可用（目录不存在、file_status.json 无法解析等）"""


class MySQLCaptureParser:
    """MySQL 采集目录解析器"""

    def __init__(self, import_dir: str, hostname: Optional[str] = None):
        """
        初始化解析器

        Args:
            import_dir: 采集目录
            hostname: 自定义主机名（可选，默认从 file_status.json 或目录名提取）
        """
        self.import_dir = Path(import_dir)
        self.hostname = hostname

    def _extract_hostname_from_dir(self, dir_path: Path) -> str:
        """
        从目录名中提取主机名

        目录名格式: hostname_mysql_YYYYMMDD；无法解析时返回目录名本身
        """
        parts = dir_path.name.split('_')
        if len(parts) >= 3 and re.match(r'^\d{8}$', parts[-1]):
            return parts[0]

        logger.debug(f"无法从目录名解析主机名: {dir_path.name}")
        return dir_path.name

    def parse_file_status(self) -> Dict[str, Any]:
        """
        解析可选的 file_status.json

        Returns:
            dict: 文件内容；文件不存在时为空字典

        Raises:
            CaptureError: 文件存在但不是合法的 JSON 对象
        """
        status_file = self.import_dir / Config.FILE_STATUS_JSON
        if not status_file.exists():
            return {}

        try:
            with open(status_file, 'r', encoding='utf-8', errors='ignore') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise CaptureError(f"解析JSON文件失败 {status_file}: {e}") from e

        if not isinstance(data, dict):
            raise CaptureError(f"{status_file} 顶层必须是JSON对象")
        return data

    def _read_text(self, key: str) -> Tuple[str, bool]:
        path = self.import_dir / Config.CAPTURE_FILES[key]
        if not path.is_file():
            logger.warning(f"缺少采集文件: {path}")
            return "", False
        return path.read_text(encoding='utf-8', errors='ignore'), True

    def parse(self) -> CaptureSnapshot:
        """
        读取采集目录

        Returns:
            CaptureSnapshot: 原始文本快照；缺失的文件对应空 Sample

        Raises:
            CaptureError: 采集目录不存在或不是目录
        """
        if not self.import_dir.exists():
            raise CaptureError(f"输入目录不存在: {self.import_dir}")
        if not self.import_dir.is_dir():
            raise CaptureError(f"路径不是目录: {self.import_dir}")

        logger.info(f"开始读取采集目录: {self.import_dir}")
        file_status = self.parse_file_status()

        texts: Dict[str, Any] = {}
        found = 0
        for key in Config.CAPTURE_FILES:
            text, exists = self._read_text(key)
            texts[key] = make_sample(text)
            found += int(exists)

        if found == 0:
            raise CaptureError(f"采集目录中没有任何可用文件: {self.import_dir}")

        try:
            interval = int(file_status.get('interval', Config.DEFAULT_SAMPLE_INTERVAL))
        except (TypeError, ValueError):
            logger.warning(f"file_status.json 中 interval 非法，使用默认值 {Config.DEFAULT_SAMPLE_INTERVAL}")
            interval = Config.DEFAULT_SAMPLE_INTERVAL

        hostname = (
            self.hostname
            or file_status.get('hostname')
            or self._extract_hostname_from_dir(self.import_dir)
        )

        logger.info(f"成功读取 {found}/{len(Config.CAPTURE_FILES)} 个采集文件")
        return CaptureSnapshot(hostname=str(hostname), interval=interval, **texts)


def load_capture(import_dir: str, hostname: Optional[str] = None) -> CaptureSnapshot:
    """
    读取 MySQL 采集目录的公共接口

    Args:
        import_dir: 采集目录
        hostname: 自定义主机名

    Returns:
        CaptureSnapshot: 原始文本快照

    Raises:
        CaptureError: 采集目录不可用
    """
    return MySQLCaptureParser(import_dir=import_dir, hostname=hostname).parse()
