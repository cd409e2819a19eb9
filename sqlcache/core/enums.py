"""枚举定义：约束缓存条目的类型取值。"""

from enum import IntEnum


class EntryType(IntEnum):
    """缓存条目类型，整数值与落库的 ``type`` 列保持一致。"""

    DIRECTORY = 0
    FILE = 1
    UNKNOWN = 2
