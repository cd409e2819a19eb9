"""模型基类：统一声明式基类与条目通用字段。

本模块集中提供：
- Base：SQLAlchemy 声明式基类，带统一命名约定；
- TimestampMixin：``created_at``、``updated_at``（unix 毫秒整数，与原有表结构兼容）；
- PathEntryMixin：``path`` 主键与 ``type`` 列，ItemEntry/MetaEntry 共用。
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Integer, MetaData, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import expression

from sqlcache.core.enums import EntryType
from sqlcache.core.timezone import now_ms, to_local

convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "pk": "pk_%(table_name)s",
}

metadata_obj = MetaData(naming_convention=convention)


class Base(DeclarativeBase):
    """全局声明式基类，附带一致的命名约定。"""

    metadata = metadata_obj


class TimestampMixin:
    """通用时间戳字段：插入时写入 created_at，每次变更刷新 updated_at。"""

    created_at: Mapped[int] = mapped_column(
        BigInteger,
        default=now_ms,
        server_default=expression.text("0"),
        nullable=False,
    )
    updated_at: Mapped[int] = mapped_column(
        BigInteger,
        default=now_ms,
        onupdate=now_ms,
        server_default=expression.text("0"),
        nullable=False,
    )

    @property
    def created_time(self) -> Optional[datetime]:
        return to_local(self.created_at)

    @property
    def updated_time(self) -> Optional[datetime]:
        return to_local(self.updated_at)


class PathEntryMixin(TimestampMixin):
    # 不以 '/' 开头或结尾；示例："docs"、"docs/a.txt"；根目录不入库
    path: Mapped[str] = mapped_column(Text, primary_key=True)
    type: Mapped[int] = mapped_column(
        Integer,
        default=int(EntryType.DIRECTORY),
        server_default=expression.text("0"),
        nullable=False,
    )

    @property
    def kind(self) -> EntryType:
        try:
            return EntryType(self.type)
        except ValueError:
            return EntryType.UNKNOWN

    @property
    def is_dir(self) -> bool:
        return self.type == EntryType.DIRECTORY

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r}, type={self.kind.name})"
