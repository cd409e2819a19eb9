"""日志配置模块：提供彩色输出能力并统一缓存层的日志格式。

库本身只通过 ``logging.getLogger("sqlcache")`` 输出日志，不会在导入时修改全局配置；
宿主进程需要统一格式时显式调用 ``setup_logging()``。
"""

import json
import logging
import logging.config
import sys
from datetime import datetime
from typing import Optional

from .config import Settings, get_settings


class _TZFormatter(logging.Formatter):
    """按 ``Settings.timezone`` 渲染 asctime；未指定 datefmt 时输出带毫秒的 ISO 时间。"""

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        moment = datetime.fromtimestamp(record.created, get_settings().timezone_info)
        if datefmt:
            return moment.strftime(datefmt)
        return moment.isoformat(sep=" ", timespec="milliseconds")


class ColorFormatter(_TZFormatter):
    """按级别给整行日志着色；输出不是终端时自动退化为纯文本。"""

    RESET = "\033[0m"
    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[41m",
    }

    def __init__(
        self,
        fmt: str,
        datefmt: Optional[str] = None,
        style: str = "%",
        use_colors: Optional[bool] = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self.use_colors = sys.stderr.isatty() if use_colors is None else use_colors

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelname) if self.use_colors else None
        return f"{color}{line}{self.RESET}" if color else line


class JsonFormatter(_TZFormatter):
    """每条记录输出一行 JSON；``operation`` 来自 ``extra``，标明出错的缓存操作。"""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "operation": getattr(record, "operation", None),
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def build_logging_config(settings: Settings) -> dict:
    """根据配置生成 ``dictConfig`` 所需的字典，文件输出按需启用。"""
    json_enabled = bool(settings.log_json)
    formatter_name = "json" if json_enabled else "standard"

    handlers = {
        "default": {
            "level": settings.log_level,
            "class": "logging.StreamHandler",
            "formatter": formatter_name,
        },
    }
    if settings.log_to_file:
        handlers["file"] = {
            "level": settings.log_level,
            "class": "logging.handlers.TimedRotatingFileHandler",
            "formatter": formatter_name if json_enabled else "plain",
            "filename": str(settings.log_file_path),
            "when": "midnight",
            "backupCount": 14,
            "encoding": "utf-8",
            "delay": True,
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "()": "sqlcache.core.logger.ColorFormatter",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
            "plain": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
            "json": {
                "()": "sqlcache.core.logger.JsonFormatter",
            },
        },
        "handlers": handlers,
        "loggers": {
            "sqlcache": {
                "handlers": list(handlers),
                "level": settings.log_level,
                "propagate": False,
            },
        },
    }


def setup_logging(settings: Optional[Settings] = None) -> None:
    """初始化日志系统，确保缓存层所有模块使用统一的输出格式与级别。"""
    settings = settings or get_settings()
    if settings.log_to_file:
        settings.log_directory.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(settings))


logger = logging.getLogger("sqlcache")
