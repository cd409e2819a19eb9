"""元数据列表模型：在条目基础上附带调用方序列化后的属性数据。

``info`` 对缓存层是不透明的字节串，其编码由文件系统客户端自行约定。
"""

from typing import Optional

from sqlalchemy import LargeBinary
from sqlalchemy.orm import Mapped, mapped_column

from sqlcache.models.base import Base, PathEntryMixin


class MetaEntry(PathEntryMixin, Base):
    __tablename__ = "meta_list"

    info: Mapped[Optional[bytes]] = mapped_column(LargeBinary, nullable=True)
