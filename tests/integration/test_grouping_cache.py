"""
Integration tests for the version-keyed grouped case cache
"""

import pytest

from guitar_repair_core.infra import GroupingCache
from guitar_repair_core.models import WorkItemRecord

pytestmark = pytest.mark.integration


def test_cached_until_store_changes(seeded_store):
    cache = GroupingCache()

    first = cache.get(seeded_store)
    second = cache.get(seeded_store)

    assert len(first) == 5
    assert second is first


def test_write_is_visible_to_next_read(seeded_store):
    cache = GroupingCache()
    before = cache.get(seeded_store)

    seeded_store.mutate(lambda rows: ([WorkItemRecord(id="new", raw_text="new case", price=1)] + rows, None))
    after = cache.get(seeded_store)

    assert len(after) == len(before) + 1
    assert after[0].id == "new"


def test_same_size_rewrite_is_not_stale(seeded_store):
    cache = GroupingCache()
    cache.get(seeded_store)

    rows = seeded_store.read_all()
    rows[0].price = 20000
    rows[1].price = 3000
    seeded_store.write_all(rows)

    assert cache.get(seeded_store)[0].total_price == 23000


def test_invalidate(seeded_store):
    cache = GroupingCache()
    first = cache.get(seeded_store)
    cache.invalidate()

    assert cache.version is None
    assert cache.get(seeded_store) is not first


def test_missing_store_groups_to_empty(store):
    assert GroupingCache().get(store) == []
