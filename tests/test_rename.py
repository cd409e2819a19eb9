"""重命名：冲突时先删后移、目录子树整体迁移与事务原子性。"""

import pytest

from sqlcache import (
    EntryType,
    InvalidRenameError,
    PathConflictError,
    SqlCache,
    StorageFaultError,
)
from sqlcache.crud.item import item_crud
from sqlcache.crud.meta import meta_crud


def _paths(entries):
    return {entry.path for entry in entries}


def _seed_docs(cache: SqlCache) -> None:
    cache.items.add("docs", EntryType.DIRECTORY)
    cache.items.add("docs/a.txt", EntryType.FILE)
    cache.items.add("docs/sub", EntryType.DIRECTORY)
    cache.items.add("docs/sub/b.txt", EntryType.FILE)
    cache.items.add("docsarchive/c.txt", EntryType.FILE)


def test_rename_collision_replaces_destination(cache: SqlCache):
    cache.metas.upsert("A", EntryType.FILE, b"from-a")
    cache.metas.upsert("B", EntryType.FILE, b"from-b")
    source = cache.metas.get("A", EntryType.FILE)

    cache.metas.rename("A", "B", EntryType.FILE)

    entries = cache.metas.get_all()
    assert _paths(entries) == {"B"}
    moved = entries[0]
    assert moved.info == b"from-a"
    assert moved.kind is EntryType.FILE
    assert moved.created_at == source.created_at
    assert moved.updated_at > source.updated_at


def test_item_rename_collision(cache: SqlCache):
    cache.items.add("a.txt", EntryType.FILE)
    cache.items.add("b.txt", EntryType.FILE)

    cache.items.rename("a.txt", "b.txt")

    assert _paths(cache.items.get_all()) == {"b.txt"}


def test_rename_collision_with_other_type_is_surfaced(cache: SqlCache):
    cache.items.add("x", EntryType.FILE)
    cache.items.add("y", EntryType.DIRECTORY)

    with pytest.raises(PathConflictError) as exc_info:
        cache.items.rename("x", "y")

    assert isinstance(exc_info.value, StorageFaultError)
    # 回退事务整体回滚，两条记录都保持原样
    assert cache.items.get("x", EntryType.FILE)
    assert cache.items.get("y", EntryType.DIRECTORY)


def test_rename_same_or_empty_path_is_noop(cache: SqlCache):
    cache.items.add("a.txt", EntryType.FILE)

    cache.items.rename("a.txt", "/a.txt/")
    cache.items.rename("a.txt", "")
    cache.items.rename("", "a.txt")

    assert _paths(cache.items.get_all()) == {"a.txt"}


def test_rename_directory_moves_subtree(cache: SqlCache):
    _seed_docs(cache)

    cache.items.rename_directory("/docs", "reports/")

    assert _paths(cache.items.get_all()) == {
        "reports",
        "reports/a.txt",
        "reports/sub",
        "reports/sub/b.txt",
        "docsarchive/c.txt",
    }
    assert cache.items.get("reports", EntryType.DIRECTORY)
    assert cache.items.get("reports/sub/b.txt", EntryType.FILE)


def test_rename_directory_refreshes_timestamps(cache: SqlCache):
    _seed_docs(cache)
    before = {entry.path: entry.updated_at for entry in cache.items.get_all()}

    cache.items.rename_directory("docs", "reports")

    after = {entry.path: entry.updated_at for entry in cache.items.get_all()}
    assert after["reports"] > before["docs"]
    assert after["reports/sub/b.txt"] > before["docs/sub/b.txt"]
    assert after["docsarchive/c.txt"] == before["docsarchive/c.txt"]


def test_rename_directory_prefix_is_literal(cache: SqlCache):
    cache.metas.upsert("a_b", EntryType.DIRECTORY, b"dir")
    cache.metas.upsert("a_b/x.txt", EntryType.FILE, b"x")
    cache.metas.upsert("axb/y.txt", EntryType.FILE, b"y")
    cache.metas.upsert("a%b/z.txt", EntryType.FILE, b"z")

    cache.metas.rename_directory("a_b", "moved")

    assert _paths(cache.metas.get_all()) == {"moved", "moved/x.txt", "axb/y.txt", "a%b/z.txt"}
    assert cache.metas.get("moved/x.txt", EntryType.FILE).info == b"x"


def test_rename_directory_without_own_entry_moves_descendants(cache: SqlCache):
    cache.items.add("docs/a.txt", EntryType.FILE)

    cache.items.rename_directory("docs", "reports")

    assert _paths(cache.items.get_all()) == {"reports/a.txt"}


def test_rename_directory_onto_existing_directory(cache: SqlCache):
    _seed_docs(cache)
    cache.items.add("reports", EntryType.DIRECTORY)
    cache.items.add("reports/stale.txt", EntryType.FILE)
    cache.items.add("reportsold/keep.txt", EntryType.FILE)

    cache.items.rename_directory("docs", "reports")

    assert _paths(cache.items.get_all()) == {
        "reports",
        "reports/a.txt",
        "reports/sub",
        "reports/sub/b.txt",
        "docsarchive/c.txt",
        "reportsold/keep.txt",
    }


def test_rename_missing_directory_keeps_destination(cache: SqlCache):
    cache.items.add("docs", EntryType.DIRECTORY)
    cache.items.add("docs/a.txt", EntryType.FILE)
    cache.metas.upsert("docs", EntryType.DIRECTORY, b"dir")
    cache.metas.upsert("docs/a.txt", EntryType.FILE, b"a")

    # 源目录在两张表中都不存在：什么也不移动，目标保持原样
    cache.items.rename_directory("ghost", "docs")
    cache.metas.rename_directory("ghost", "docs")

    assert _paths(cache.items.get_all()) == {"docs", "docs/a.txt"}
    assert cache.metas.get("docs/a.txt", EntryType.FILE).info == b"a"


def test_rename_directory_onto_file_is_surfaced(cache: SqlCache):
    _seed_docs(cache)
    cache.items.add("reports", EntryType.FILE)
    before = _paths(cache.items.get_all())

    with pytest.raises(PathConflictError) as exc_info:
        cache.items.rename_directory("docs", "reports")

    assert exc_info.value.operation == "item_list.rename_directory"
    assert _paths(cache.items.get_all()) == before
    assert cache.items.get("reports", EntryType.FILE)
    assert cache.items.get("docs", EntryType.DIRECTORY)


def test_rename_directory_into_own_subtree_is_rejected(cache: SqlCache):
    _seed_docs(cache)

    with pytest.raises(InvalidRenameError):
        cache.items.rename_directory("docs", "docs/sub/inner")
    with pytest.raises(ValueError):
        cache.items.rename_directory("docs/sub", "docs")

    assert "docs/sub/b.txt" in _paths(cache.items.get_all())


def test_rename_directory_rolls_back_when_descendants_fail(cache: SqlCache, monkeypatch, disk_error):
    _seed_docs(cache)
    cache.items.add("reports", EntryType.DIRECTORY)
    before = _paths(cache.items.get_all())
    monkeypatch.setattr(item_crud, "move_descendants", disk_error)

    with pytest.raises(StorageFaultError) as exc_info:
        cache.items.rename_directory("docs", "reports")

    assert exc_info.value.operation == "item_list.rename_directory"
    # 目录自身的移动与目标清理都被回滚
    assert _paths(cache.items.get_all()) == before
    assert cache.items.get("docs", EntryType.DIRECTORY)


def test_rename_fallback_failure_is_surfaced(cache: SqlCache, monkeypatch, disk_error):
    cache.metas.upsert("A", EntryType.FILE, b"a")
    cache.metas.upsert("B", EntryType.FILE, b"b")
    monkeypatch.setattr(meta_crud, "delete", disk_error)

    with pytest.raises(StorageFaultError):
        cache.metas.rename("A", "B", EntryType.FILE)

    assert cache.metas.get("A", EntryType.FILE).info == b"a"
    assert cache.metas.get("B", EntryType.FILE).info == b"b"
