"""CRUD 基类：为 item_list / meta_list 提供按路径的通用数据访问方法。

所有方法只接收已开启事务的 ``Session``，不自行提交；事务边界与加锁由
``CacheDatabase`` 与上层 store 负责。路径参数均为已去掉首尾 '/' 的缓存键。
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import Text, delete, func, literal, or_, select, update
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from sqlcache.core.enums import EntryType
from sqlcache.core.timezone import now_ms
from sqlcache.models.base import Base
from sqlcache.utils.path_utils import descendant_prefix

ModelType = TypeVar("ModelType", bound=Base)


class CRUDPathBase(Generic[ModelType]):
    """封装按路径（path + type）的增删查改，两张表共用同一套语句。"""

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get(self, db: Session, *, path: str, entry_type: EntryType) -> Optional[ModelType]:
        stmt = (
            select(self.model)
            .where(self.model.path == path)
            .where(self.model.type == int(entry_type))
        )
        return db.execute(stmt).scalars().first()

    def get_all(self, db: Session) -> List[ModelType]:
        return list(db.execute(select(self.model)).scalars().all())

    def add(self, db: Session, *, path: str, entry_type: EntryType, **values: Any) -> bool:
        """插入一行；主键冲突时什么也不做，返回是否真正插入。"""
        ts = now_ms()
        stmt = (
            sqlite_insert(self.model)
            .values(path=path, type=int(entry_type), created_at=ts, updated_at=ts, **values)
            .on_conflict_do_nothing(index_elements=[self.model.path])
        )
        return db.execute(stmt).rowcount > 0

    def upsert(
        self,
        db: Session,
        *,
        path: str,
        entry_type: EntryType,
        values: Dict[str, Any],
    ) -> None:
        """插入或按 path 冲突更新 ``values`` 中的列；type 与 created_at 保持首次写入的值。"""
        ts = now_ms()
        stmt = sqlite_insert(self.model).values(
            path=path, type=int(entry_type), created_at=ts, updated_at=ts, **values
        )
        set_ = {name: stmt.excluded[name] for name in values}
        set_["updated_at"] = stmt.excluded.updated_at
        db.execute(stmt.on_conflict_do_update(index_elements=[self.model.path], set_=set_))

    def type_at(self, db: Session, *, path: str) -> Optional[int]:
        """按物理主键查询 ``path`` 上条目的类型，不存在时返回 None。"""
        return db.execute(select(self.model.type).where(self.model.path == path)).scalar()

    def has_subtree(self, db: Session, *, dir_key: str) -> bool:
        """``dir_key`` 自身的目录条目或任意后代存在时返回 True。"""
        prefix = descendant_prefix(dir_key)
        stmt = (
            select(literal(1))
            .select_from(self.model)
            .where(
                or_(
                    (self.model.path == dir_key) & (self.model.type == int(EntryType.DIRECTORY)),
                    func.substr(self.model.path, 1, len(prefix)) == prefix,
                )
            )
            .limit(1)
        )
        return db.execute(stmt).first() is not None

    def delete(self, db: Session, *, path: str, entry_type: EntryType) -> int:
        stmt = (
            delete(self.model)
            .where(self.model.path == path)
            .where(self.model.type == int(entry_type))
            .execution_options(synchronize_session=False)
        )
        return db.execute(stmt).rowcount

    def delete_all(self, db: Session) -> int:
        stmt = delete(self.model).execution_options(synchronize_session=False)
        return db.execute(stmt).rowcount

    def delete_subtree(self, db: Session, *, dir_key: str) -> int:
        """删除 ``dir_key`` 本身（任意类型）及其全部后代。"""
        prefix = descendant_prefix(dir_key)
        stmt = (
            delete(self.model)
            .where(
                or_(
                    self.model.path == dir_key,
                    func.substr(self.model.path, 1, len(prefix)) == prefix,
                )
            )
            .execution_options(synchronize_session=False)
        )
        return db.execute(stmt).rowcount

    def move(self, db: Session, *, old_path: str, new_path: str, entry_type: EntryType) -> int:
        """把 (old_path, entry_type) 这一行的 path 改为 new_path，并刷新 updated_at。"""
        stmt = (
            update(self.model)
            .where(self.model.path == old_path)
            .where(self.model.type == int(entry_type))
            .values(path=new_path, updated_at=now_ms())
            .execution_options(synchronize_session=False)
        )
        return db.execute(stmt).rowcount

    def move_descendants(self, db: Session, *, old_dir: str, new_dir: str) -> int:
        """单条语句把所有 ``old_dir/`` 前缀替换为 ``new_dir/``。

        前缀比较使用 substr 而不是 LIKE：带分隔符比较避免误伤 ``old_dirX``，
        也不受文件名中 ``%``、``_`` 的影响。
        """
        old_prefix = descendant_prefix(old_dir)
        new_prefix = descendant_prefix(new_dir)
        stmt = (
            update(self.model)
            .where(func.substr(self.model.path, 1, len(old_prefix)) == old_prefix)
            .values(
                path=literal(new_prefix, Text) + func.substr(self.model.path, len(old_prefix) + 1),
                updated_at=now_ms(),
            )
            .execution_options(synchronize_session=False)
        )
        return db.execute(stmt).rowcount
