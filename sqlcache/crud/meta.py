"""MetaEntry CRUD。"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from sqlcache.core.enums import EntryType
from sqlcache.crud.base import CRUDPathBase
from sqlcache.models.meta import MetaEntry


class CRUDMeta(CRUDPathBase[MetaEntry]):
    def add_info(
        self, db: Session, *, path: str, entry_type: EntryType, info: Optional[bytes]
    ) -> bool:
        return self.add(db, path=path, entry_type=entry_type, info=info)

    def upsert_info(
        self, db: Session, *, path: str, entry_type: EntryType, info: Optional[bytes]
    ) -> None:
        # 冲突时只覆盖 info（以及 updated_at），不修改首次写入的 type
        self.upsert(db, path=path, entry_type=entry_type, values={"info": info})


meta_crud = CRUDMeta(MetaEntry)
