"""路径重命名引擎：item_list 与 meta_list 共用的单条重命名与目录子树重命名。

调用方必须已经持有 ``CacheDatabase.writing()`` 的独占锁，这样回退流程中的
多个事务对并发读者是不可见的整体。
"""

from __future__ import annotations

from typing import Generic

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from sqlcache.core.enums import EntryType
from sqlcache.core.exceptions import InvalidRenameError, PathConflictError
from sqlcache.core.logger import logger
from sqlcache.crud.base import CRUDPathBase, ModelType
from sqlcache.db.session import CacheDatabase
from sqlcache.utils.path_utils import is_descendant, trim_path

UNIQUE_VIOLATION = "UNIQUE constraint failed"


def is_unique_violation(exc: SQLAlchemyError) -> bool:
    return isinstance(exc, IntegrityError) and UNIQUE_VIOLATION in str(exc.orig)


class PathRenameEngine(Generic[ModelType]):
    def __init__(self, crud: CRUDPathBase[ModelType]) -> None:
        self.crud = crud

    @property
    def table_name(self) -> str:
        return self.crud.model.__tablename__

    def rename_entry(
        self, db: CacheDatabase, old_path: str, new_path: str, entry_type: EntryType
    ) -> int:
        """重命名单个条目，返回移动的行数（源不存在时为 0，不视为错误）。

        目标路径已被占用时，在同一事务内先删除目标处同类型的条目再移动，
        即“后写者覆盖”。目标被其它类型占用时抛出 ``PathConflictError``。
        """
        old_path = trim_path(old_path)
        new_path = trim_path(new_path)
        if not old_path or not new_path or old_path == new_path:
            return 0

        try:
            with db.transaction() as session:
                return self.crud.move(
                    session, old_path=old_path, new_path=new_path, entry_type=entry_type
                )
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise

        logger.debug(
            "%s rename %s -> %s hits an existing entry, evicting destination",
            self.table_name,
            old_path,
            new_path,
        )
        try:
            with db.transaction() as session:
                self.crud.delete(session, path=new_path, entry_type=entry_type)
                return self.crud.move(
                    session, old_path=old_path, new_path=new_path, entry_type=entry_type
                )
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            operation = f"{self.table_name}.rename"
            logger.error(
                "%s failed: %s is held by an entry of another type", operation, new_path
            )
            raise PathConflictError(old_path, new_path, operation=operation) from exc

    def rename_directory(self, db: CacheDatabase, old_path: str, new_path: str) -> int:
        """在一个事务内重命名目录自身及其全部后代，返回移动的行数。

        执行顺序：确认源存在 -> 清空目标子树 -> 移动目录自身 -> 单条语句替换后代前缀；
        任一步失败则整体回滚，目录与后代都留在原路径。源目录及其后代都不存在时
        什么也不做并返回 0，目标不受影响。目标路径被非目录条目占用时抛出
        ``PathConflictError``。
        """
        old_path = trim_path(old_path)
        new_path = trim_path(new_path)
        if not old_path or not new_path or old_path == new_path:
            return 0
        if is_descendant(new_path, old_path) or is_descendant(old_path, new_path):
            raise InvalidRenameError(old_path, new_path)

        with db.transaction() as session:
            if not self.crud.has_subtree(session, dir_key=old_path):
                return 0
            occupant = self.crud.type_at(session, path=new_path)
            if occupant is not None and occupant != EntryType.DIRECTORY:
                operation = f"{self.table_name}.rename_directory"
                logger.error(
                    "%s failed: %s is held by an entry of another type", operation, new_path
                )
                raise PathConflictError(old_path, new_path, operation=operation)
            evicted = self.crud.delete_subtree(session, dir_key=new_path)
            moved = self.crud.move(
                session, old_path=old_path, new_path=new_path, entry_type=EntryType.DIRECTORY
            )
            moved += self.crud.move_descendants(session, old_dir=old_path, new_dir=new_path)

        logger.debug(
            "%s rename dir %s -> %s moved=%d evicted=%d",
            self.table_name,
            old_path,
            new_path,
            moved,
            evicted,
        )
        return moved
