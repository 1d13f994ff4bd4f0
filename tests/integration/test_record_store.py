"""
Integration tests for the JSON-file record store
"""

import json

import pytest

from guitar_repair_core.engine.case_builder import CaseInput, add_case
from guitar_repair_core.errors import StoreCorruptedError, StoreNotFoundError
from guitar_repair_core.infra import RecordStore
from guitar_repair_core.models import WorkItemRecord, WorkLine

pytestmark = pytest.mark.integration


def test_missing_file_reads_empty(store):
    assert store.exists() is False
    assert store.read_all() == []


def test_missing_file_strict_read(store):
    with pytest.raises(StoreNotFoundError):
        store.read_all(missing_ok=False)


def test_round_trip_preserves_order_and_unknown_keys(seeded_store, sample_rows):
    raw = json.loads(seeded_store.path.read_text(encoding="utf-8"))

    assert [r.get("detailed_work") for r in raw] == [r["detailed_work"] for r in sample_rows]
    assert raw[2]["page"] == 12
    records = seeded_store.read_all()
    assert records[2].extra == {"page": 12}
    assert records[0].customer_name == "山田"


def test_written_as_readable_utf8(seeded_store):
    text = seeded_store.path.read_text(encoding="utf-8")
    assert "ナット交換" in text
    assert "\\u" not in text


def test_corrupted_json(store):
    store.path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreCorruptedError):
        store.read_all()


def test_non_list_json(store):
    store.path.write_text('{"rows": []}', encoding="utf-8")
    with pytest.raises(StoreCorruptedError):
        store.read_all()


def test_mutate_writes_result(store):
    result = store.mutate(lambda rows: (rows + [WorkItemRecord(id="a", price=1)], "done"))

    assert result == "done"
    assert [r.id for r in store.read_all()] == ["a"]


def test_failed_mutation_leaves_file_untouched(seeded_store):
    before = seeded_store.path.read_bytes()

    def boom(rows):
        raise RuntimeError("abort")

    with pytest.raises(RuntimeError):
        seeded_store.mutate(boom)
    assert seeded_store.path.read_bytes() == before


def test_mutate_refuses_to_overwrite_corrupted_store(store):
    store.path.write_text("[broken", encoding="utf-8")
    with pytest.raises(StoreCorruptedError):
        store.mutate(lambda rows: ([], None))
    assert store.path.read_text(encoding="utf-8") == "[broken"


def test_no_temp_files_left_behind(seeded_store):
    seeded_store.write_all(seeded_store.read_all())
    assert [p.name for p in seeded_store.path.parent.iterdir()] == [seeded_store.path.name]


def test_version_changes_on_every_write(store):
    v0 = store.version()
    store.write_all([])
    v1 = store.version()
    store.write_all([])
    v2 = store.version()

    assert len({v0, v1, v2}) == 3


def test_creates_parent_directory(tmp_path):
    store = RecordStore(tmp_path / "nested" / "dir" / "db.json")
    store.write_all([WorkItemRecord(id="x")])
    assert store.exists()


def test_unrelated_save_keeps_legacy_rows_verbatim(store):
    legacy = {
        "symptoms": "ネックの反り",
        "detailed_work": "アイロン矯正",
        "price": "1万5千円",
        "case_total_price": 12000.7,
        "raw_text": "2017.3.2\n伊藤 様\nネック反り",
        "page": 4,
    }
    store.path.write_text(json.dumps([legacy], ensure_ascii=False, indent=2), encoding="utf-8")
    case = CaseInput(
        date="2024.5.1",
        customer_name="山田",
        model="Fender Stratocaster",
        symptoms="ナットがビビる",
        work_items=[WorkLine("ナット交換", 10000)],
    )

    store.mutate(lambda rows: add_case(rows, case, case_id="new-1"))

    raw = json.loads(store.path.read_text(encoding="utf-8"))
    assert [r.get("id") for r in raw] == ["new-1", None]
    assert raw[1] == legacy
    assert json.dumps(raw[1], ensure_ascii=False) == json.dumps(legacy, ensure_ascii=False)
