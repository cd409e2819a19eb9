"""时间工具方法：生成落库用的整数时间戳，并按配置时区还原为 ``datetime``。"""

from __future__ import annotations

import threading
import time
from datetime import datetime
from typing import Optional

from zoneinfo import ZoneInfo

from sqlcache.core.config import get_settings

_clock_lock = threading.Lock()
_last_ms = 0


def get_timezone() -> ZoneInfo:
    """返回配置指定的时区信息。"""
    return get_settings().timezone_info


def now_ms() -> int:
    """返回当前 unix 毫秒时间戳，进程内严格递增。

    同一毫秒内的多次写入会依次顺延 1ms，保证后写入的 ``updated_at`` 一定更大。
    """
    global _last_ms
    with _clock_lock:
        current = time.time_ns() // 1_000_000
        if current <= _last_ms:
            current = _last_ms + 1
        _last_ms = current
        return current


def to_local(value: Optional[int]) -> Optional[datetime]:
    """将毫秒时间戳转换为配置时区的 ``datetime``；0 或空值视为未设置。"""
    if not value:
        return None
    return datetime.fromtimestamp(value / 1000, get_timezone())
