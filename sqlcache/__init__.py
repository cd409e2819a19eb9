"""sqlcache：远端存储文件系统客户端使用的路径元数据持久化缓存。"""

from sqlcache.core.enums import EntryType
from sqlcache.core.exceptions import (
    EntryNotFoundError,
    InvalidRenameError,
    PathConflictError,
    SqlCacheError,
    StorageFaultError,
)
from sqlcache.models import ItemEntry, MetaEntry
from sqlcache.services.cache import SqlCache, open_cache

__all__ = [
    "EntryType",
    "EntryNotFoundError",
    "InvalidRenameError",
    "ItemEntry",
    "MetaEntry",
    "PathConflictError",
    "SqlCache",
    "SqlCacheError",
    "StorageFaultError",
    "open_cache",
]
