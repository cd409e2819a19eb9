"""条目列表服务：记录远端路径的存在性与类型。

写操作（add/delete/rename/rename_directory）持有独占锁，读操作持有共享锁；
空路径（去掉首尾 '/' 后为空）一律静默忽略。
"""

from __future__ import annotations

from typing import List

from sqlcache.core.enums import EntryType
from sqlcache.core.exceptions import EntryNotFoundError
from sqlcache.crud.item import item_crud
from sqlcache.crud.rename import PathRenameEngine
from sqlcache.db.session import CacheDatabase
from sqlcache.models.item import ItemEntry
from sqlcache.utils.path_utils import trim_path


class ItemStore:
    def __init__(self, db: CacheDatabase) -> None:
        self._db = db
        self._crud = item_crud
        self._renamer = PathRenameEngine(item_crud)

    def add(self, path: str, entry_type: EntryType) -> None:
        """登记路径；已存在时视为成功（幂等）。"""
        path = trim_path(path)
        if not path:
            return
        with self._db.writing("item_list.add"):
            with self._db.transaction() as session:
                self._crud.add(session, path=path, entry_type=entry_type)

    def delete(self, path: str, entry_type: EntryType) -> None:
        path = trim_path(path)
        if not path:
            return
        with self._db.writing("item_list.delete"):
            with self._db.transaction() as session:
                self._crud.delete(session, path=path, entry_type=entry_type)

    def get(self, path: str, entry_type: EntryType) -> ItemEntry:
        path = trim_path(path)
        with self._db.reading("item_list.get") as session:
            entry = self._crud.get(session, path=path, entry_type=entry_type) if path else None
        if entry is None:
            raise EntryNotFoundError(path, entry_type)
        return entry

    def exists(self, path: str) -> bool:
        """路径是否已登记（不区分类型）。"""
        path = trim_path(path)
        if not path:
            return False
        with self._db.reading("item_list.exists") as session:
            return self._crud.get_by_path(session, path=path) is not None

    def get_all(self) -> List[ItemEntry]:
        with self._db.reading("item_list.get_all") as session:
            return self._crud.get_all(session)

    def rename(self, old_path: str, new_path: str) -> None:
        """重命名单个文件条目；目标已存在时由新条目覆盖。"""
        with self._db.writing("item_list.rename"):
            self._renamer.rename_entry(self._db, old_path, new_path, EntryType.FILE)

    def rename_directory(self, old_path: str, new_path: str) -> None:
        with self._db.writing("item_list.rename_directory"):
            self._renamer.rename_directory(self._db, old_path, new_path)
