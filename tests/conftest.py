"""测试夹具：为每个用例提供独立的 SQLite 缓存文件。"""

from typing import Generator

import pytest
from sqlalchemy.exc import OperationalError

from sqlcache import SqlCache, open_cache
from sqlcache.core.config import Settings


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(cache_dir=str(tmp_path / "cache"), log_dir=str(tmp_path / "log"))


@pytest.fixture()
def cache(settings: Settings) -> Generator[SqlCache, None, None]:
    """按配置打开缓存（落在 tmp_path 下），用例结束后释放连接。"""
    sql_cache = open_cache(settings=settings)
    try:
        yield sql_cache
    finally:
        sql_cache.close()


@pytest.fixture()
def disk_error():
    """构造一个模拟存储故障的函数，用于注入到 CRUD 方法中。"""

    def _raise(*args, **kwargs):
        raise OperationalError("UPDATE", {}, Exception("disk I/O error"))

    return _raise
