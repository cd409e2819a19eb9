"""元数据列表服务：缓存调用方序列化后的属性数据（info）。

``get`` 未命中时抛出 ``EntryNotFoundError``，这是正常的缓存 miss，调用方应与
``StorageFaultError`` 区分处理；其余语义与 ItemStore 一致。
"""

from __future__ import annotations

from typing import List, Optional

from sqlcache.core.enums import EntryType
from sqlcache.core.exceptions import EntryNotFoundError
from sqlcache.core.logger import logger
from sqlcache.crud.meta import meta_crud
from sqlcache.crud.rename import PathRenameEngine
from sqlcache.db.session import CacheDatabase
from sqlcache.models.meta import MetaEntry
from sqlcache.utils.path_utils import trim_path


class MetaStore:
    def __init__(self, db: CacheDatabase) -> None:
        self._db = db
        self._crud = meta_crud
        self._renamer = PathRenameEngine(meta_crud)

    def add(self, path: str, entry_type: EntryType, info: Optional[bytes] = None) -> None:
        """仅在路径不存在时写入；已存在时保留原有 info。"""
        path = trim_path(path)
        if not path:
            return
        with self._db.writing("meta_list.add"):
            with self._db.transaction() as session:
                self._crud.add_info(session, path=path, entry_type=entry_type, info=info)

    def upsert(self, path: str, entry_type: EntryType, info: Optional[bytes]) -> None:
        """插入或覆盖 info。冲突时不会修改已有条目的类型。"""
        path = trim_path(path)
        if not path:
            return
        with self._db.writing("meta_list.upsert"):
            with self._db.transaction() as session:
                self._crud.upsert_info(session, path=path, entry_type=entry_type, info=info)

    def delete(self, path: str, entry_type: EntryType) -> None:
        path = trim_path(path)
        if not path:
            return
        with self._db.writing("meta_list.delete"):
            with self._db.transaction() as session:
                self._crud.delete(session, path=path, entry_type=entry_type)

    def get(self, path: str, entry_type: EntryType) -> MetaEntry:
        path = trim_path(path)
        with self._db.reading("meta_list.get") as session:
            entry = self._crud.get(session, path=path, entry_type=entry_type) if path else None
        if entry is None:
            logger.debug("meta_list miss path=%s type=%s", path, EntryType(entry_type).name)
            raise EntryNotFoundError(path, entry_type)
        return entry

    def get_all(self) -> List[MetaEntry]:
        with self._db.reading("meta_list.get_all") as session:
            return self._crud.get_all(session)

    def rename(self, old_path: str, new_path: str, entry_type: EntryType) -> None:
        with self._db.writing("meta_list.rename"):
            self._renamer.rename_entry(self._db, old_path, new_path, entry_type)

    def rename_directory(self, old_path: str, new_path: str) -> None:
        with self._db.writing("meta_list.rename_directory"):
            self._renamer.rename_directory(self._db, old_path, new_path)
