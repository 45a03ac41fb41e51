"""
配置类 - 报告路径、采集文件名、日志与数值常量
"""
import sys
from pathlib import Path
from typing import Optional, Tuple

from loguru import logger


class Config:
    """FastMySQLSum 配置类"""

    # 基础路径 - 仅作为降级使用
    PROJECT_ROOT = Path(__file__).parent.parent.parent.parent.parent
    DATA_PATH = PROJECT_ROOT / "data"
    DEFAULT_LOG_DIR = DATA_PATH / "log"

    # 采集目录中的固定文件名
    FILE_STATUS_JSON = "file_status.json"
    CAPTURE_FILES = {
        "variables": "variables.txt",
        "status1": "status1.txt",
        "status2": "status2.txt",
        "processlist": "processlist.txt",
        "binlogs": "binlogs.txt",
        "schema": "schema.sql",
        "config": "my.cnf",
    }

    # 两次状态采样之间的默认间隔（秒），file_status.json 中的 interval 优先
    DEFAULT_SAMPLE_INTERVAL = 10

    # 数值常量
    COUNTER_SENTINEL = 18446744073709551615  # 64位无符号整数最大值
    SECONDS_PER_DAY = 86400

    # 进程列表分组字段，顺序固定
    GROUP_BY_FIELDS: Tuple[str, ...] = ("Command", "User", "Host", "db", "State")
    GROUP_KEY_WIDTH = 30

    # 文本表格列宽
    NAME_WIDTH = 20
    BANNER_WIDTH = 72

    # 日志配置
    LOG_LEVEL = "INFO"
    LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"
    LOG_ROTATION = "10 MB"
    LOG_RETENTION = "7 days"

    @classmethod
    def get_log_file(cls, log_dir: Optional[Path] = None) -> Path:
        """获取日志文件路径"""
        if log_dir:
            return Path(log_dir) / "fastmysqlsum.log"
        return cls.DEFAULT_LOG_DIR / "fastmysqlsum.log"


def setup_logging(log_dir: Optional[str] = None, quiet: bool = False) -> None:
    """
    设置日志配置：控制台输出到 stderr，指定 log_dir 时同时写入滚动日志文件

    Args:
        log_dir: 日志目录（可选）
        quiet: 静默模式，控制台只输出 WARNING 及以上
    """
    logger.remove()  # 移除默认处理器
    logger.add(
        sys.stderr,
        format=Config.LOG_FORMAT,
        level="WARNING" if quiet else Config.LOG_LEVEL,
        colorize=True,
    )
    if not log_dir:
        return

    try:
        log_file = Config.get_log_file(Path(log_dir))
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=Config.LOG_FORMAT,
            level=Config.LOG_LEVEL,
            rotation=Config.LOG_ROTATION,
            retention=Config.LOG_RETENTION,
            encoding="utf-8",
        )
    except OSError as e:
        logger.warning(f"设置日志文件失败: {e}")
