"""模型包初始化，便于统一导入 ORM 实体并触发模型注册。"""

from sqlcache.models.item import ItemEntry
from sqlcache.models.meta import MetaEntry

__all__ = [
    "ItemEntry",
    "MetaEntry",
]
