"""缓存门面：打开、重复初始化与整体清空。"""

import pytest
from sqlalchemy import inspect

from sqlcache import EntryType, SqlCache, StorageFaultError, open_cache
from sqlcache.core.config import Settings
from sqlcache.crud.meta import meta_crud


def _seed(cache: SqlCache) -> None:
    cache.items.add("docs", EntryType.DIRECTORY)
    cache.items.add("docs/a.txt", EntryType.FILE)
    cache.metas.upsert("docs/a.txt", EntryType.FILE, b"meta")


def test_open_cache_creates_database_file(settings: Settings):
    with open_cache(settings=settings) as cache:
        cache.items.add("docs", EntryType.DIRECTORY)
        tables = set(inspect(cache.db.engine).get_table_names())

    assert settings.database_path.exists()
    assert settings.database_path.name == "cloud_space_cache.db"
    assert {"item_list", "meta_list"} <= tables


def test_reopen_keeps_entries(settings: Settings):
    with open_cache(settings=settings) as cache:
        _seed(cache)

    # 对已存在的表再次初始化不会报错，数据仍在
    with open_cache(settings=settings) as cache:
        assert {entry.path for entry in cache.items.get_all()} == {"docs", "docs/a.txt"}
        assert cache.metas.get("docs/a.txt", EntryType.FILE).info == b"meta"


def test_memory_cache(settings: Settings):
    with open_cache(":memory:", settings=settings) as cache:
        _seed(cache)
        assert len(cache.items.get_all()) == 2
    assert not settings.database_path.exists()


def test_clean_all_empties_both_tables(cache: SqlCache):
    _seed(cache)

    cache.clean_all()

    assert cache.items.get_all() == []
    assert cache.metas.get_all() == []


def test_clean_all_is_atomic(cache: SqlCache, monkeypatch, disk_error):
    _seed(cache)
    monkeypatch.setattr(meta_crud, "delete_all", disk_error)

    with pytest.raises(StorageFaultError) as exc_info:
        cache.clean_all()

    assert exc_info.value.operation == "clean_all"
    assert isinstance(exc_info.value.__cause__, Exception)
    # item_list 的删除随事务一起回滚
    assert len(cache.items.get_all()) == 2
    assert len(cache.metas.get_all()) == 1
