"""ItemEntry CRUD。"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from sqlcache.crud.base import CRUDPathBase
from sqlcache.models.item import ItemEntry


class CRUDItem(CRUDPathBase[ItemEntry]):
    def get_by_path(self, db: Session, *, path: str) -> ItemEntry | None:
        # 物理主键只有 path，不区分类型
        return db.execute(select(ItemEntry).where(ItemEntry.path == path)).scalars().first()


item_crud = CRUDItem(ItemEntry)
