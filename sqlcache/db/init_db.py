"""数据库初始化：创建 item_list 与 meta_list 两张表（已存在时跳过）。"""

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from sqlcache.core.exceptions import StorageFaultError
from sqlcache.core.logger import logger
from sqlcache.models import ItemEntry, MetaEntry
from sqlcache.models.base import Base


def init_db(engine: Engine) -> None:
    """建表；``checkfirst`` 保证对已有缓存文件重复初始化是安全的。"""
    try:
        Base.metadata.create_all(
            bind=engine,
            tables=[MetaEntry.__table__, ItemEntry.__table__],
            checkfirst=True,
        )
    except SQLAlchemyError as exc:
        logger.error("create cache tables error = %s", exc)
        raise StorageFaultError(f"create cache tables failed: {exc}", operation="init_db") from exc
    logger.debug("cache tables ready on %s", engine.url)
