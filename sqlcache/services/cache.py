"""缓存门面：持有数据库句柄，组合 ItemStore 与 MetaStore，并提供整体清空。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from sqlcache.core.config import Settings, get_settings
from sqlcache.core.logger import logger
from sqlcache.crud.item import item_crud
from sqlcache.crud.meta import meta_crud
from sqlcache.db.init_db import init_db
from sqlcache.db.session import CacheDatabase, open_database
from sqlcache.services.item_store import ItemStore
from sqlcache.services.meta_store import MetaStore


class SqlCache:
    """一个缓存文件对应一个 ``SqlCache``；两张表共享同一把读写锁。"""

    def __init__(self, db: CacheDatabase) -> None:
        self.db = db
        self.items = ItemStore(db)
        self.metas = MetaStore(db)

    def clean_all(self) -> None:
        """在同一事务内清空 item_list 与 meta_list，要么都清空，要么都不变。"""
        with self.db.writing("clean_all"):
            with self.db.transaction() as session:
                items = item_crud.delete_all(session)
                metas = meta_crud.delete_all(session)
        logger.info("cache cleaned items=%d metas=%d", items, metas)

    def close(self) -> None:
        with self.db.lock.write_locked():
            self.db.dispose()

    def __enter__(self) -> "SqlCache":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def open_cache(
    path: Union[str, Path, None] = None,
    *,
    settings: Optional[Settings] = None,
) -> SqlCache:
    """打开（必要时创建）缓存文件并建表。

    ``path`` 为空时使用 ``Settings.database_path``；传入 ``":memory:"`` 得到进程内临时缓存。
    """
    settings = settings or get_settings()
    target = settings.database_path if path is None else path
    db = open_database(target, echo=settings.database_echo, wal_mode=settings.wal_mode)
    init_db(db.engine)
    logger.info("sql cache opened at %s", target)
    return SqlCache(db)
