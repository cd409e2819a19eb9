"""异常处理模块：定义缓存层统一的异常类型。

调用方只需区分三类结果：
- ``EntryNotFoundError``：正常的缓存未命中，按 miss 处理即可；
- ``StorageFaultError``：底层存储故障（I/O、损坏、表结构不一致等），事务已回滚；
- ``InvalidRenameError``：调用参数本身不合法（例如把目录移动到自身子目录）。
"""

from __future__ import annotations

from typing import Optional

from sqlcache.core.enums import EntryType


class SqlCacheError(Exception):
    """缓存层异常基类。"""


class EntryNotFoundError(SqlCacheError, LookupError):
    """按 path + type 查询不到记录。"""

    def __init__(self, path: str, entry_type: EntryType) -> None:
        super().__init__(f"entry not found: path={path!r} type={EntryType(entry_type).name}")
        self.path = path
        self.entry_type = EntryType(entry_type)


class StorageFaultError(SqlCacheError):
    """存储引擎返回的非预期错误，原始异常保存在 ``__cause__`` 中。"""

    def __init__(self, msg: str, *, operation: Optional[str] = None) -> None:
        super().__init__(msg)
        self.operation = operation


class PathConflictError(StorageFaultError):
    """重命名目标路径已被其它类型的条目占用，无法完成“先删后移”。"""

    def __init__(self, old_path: str, new_path: str, *, operation: Optional[str] = None) -> None:
        super().__init__(
            f"destination {new_path!r} is occupied by an entry of another type (source {old_path!r})",
            operation=operation,
        )
        self.old_path = old_path
        self.new_path = new_path


class InvalidRenameError(SqlCacheError, ValueError):
    """目录不能重命名到自身的子路径或祖先路径。"""

    def __init__(self, old_path: str, new_path: str) -> None:
        super().__init__(f"cannot rename directory {old_path!r} to {new_path!r}")
        self.old_path = old_path
        self.new_path = new_path
