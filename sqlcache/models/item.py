"""条目列表模型：只记录路径是否存在及其类型，不携带任何载荷。"""

from sqlcache.models.base import Base, PathEntryMixin


class ItemEntry(PathEntryMixin, Base):
    __tablename__ = "item_list"
