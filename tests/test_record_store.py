"""Tests for the file-backed record store."""

from pathlib import Path

import pytest

from calorie_store.config import Settings
from calorie_store.containers import build_container
from calorie_store.domain.errors import (
    RecordNotFound,
    StorageUnavailable,
    ValidationError,
)
from calorie_store.domain.records import DailyRecord, UnreadableRecord
from calorie_store.domain.sessions import SessionContext
from calorie_store.services.records import RecordStore
from tests.conftest import TEST_ITERATIONS, InMemoryRecordRepository, make_record


def _daily_dir(store: RecordStore) -> Path:
    return store.repository.daily_dir


def test_ensure_ready_is_idempotent(settings: Settings) -> None:
    store = build_container(settings).record_store

    store.ensure_ready()
    store.ensure_ready()

    assert (settings.root / "daily").is_dir()


def test_ensure_ready_fails_when_root_is_a_file(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    store = build_container(
        Settings(data_path=blocker, kdf_iterations=TEST_ITERATIONS)
    ).record_store

    with pytest.raises(StorageUnavailable):
        store.ensure_ready()


def test_list_without_directory_is_storage_unavailable(settings: Settings) -> None:
    store = build_container(settings).record_store

    with pytest.raises(StorageUnavailable):
        store.list_records(None)


def test_save_writes_one_file_per_date(
    record_store: RecordStore, session: SessionContext
) -> None:
    record_id = record_store.save(make_record("2026-01-10"), session)

    assert record_id == "2026-01-10"
    assert sorted(path.name for path in _daily_dir(record_store).iterdir()) == [
        "2026-01-10.md"
    ]


def test_save_then_get_round_trips(
    record_store: RecordStore, session: SessionContext
) -> None:
    raw = make_record("2026-01-10", notes="leg day", tags=("gym",), weight=182)
    record_store.save(raw, session)

    stored = record_store.get("2026-01-10", session)

    assert isinstance(stored, DailyRecord)
    assert stored.notes == "leg day"
    assert stored.weight == 182


def test_save_is_an_upsert(record_store: RecordStore, session: SessionContext) -> None:
    record_store.save(make_record("2026-01-10", notes="first"), session)
    record_store.save(make_record("2026-01-10", notes="second"), session)

    records = record_store.list_records(session)

    assert len(records) == 1
    assert records[0].notes == "second"


def test_get_missing_raises_not_found(
    record_store: RecordStore, session: SessionContext
) -> None:
    with pytest.raises(RecordNotFound):
        record_store.get("2026-01-10", session)


def test_delete_is_idempotent(record_store: RecordStore, session: SessionContext) -> None:
    record_store.save(make_record("2026-01-10"), session)

    record_store.delete("2026-01-10")
    record_store.delete("2026-01-10")

    assert record_store.list_records(session) == []


def test_range_filter_is_inclusive_and_descending(
    record_store: RecordStore, session: SessionContext
) -> None:
    for day in range(9, 14):
        record_store.save(make_record(f"2026-01-{day:02d}"), session)

    records = record_store.list_records(session, "2026-01-10", "2026-01-12")

    assert [record.date for record in records] == [
        "2026-01-12",
        "2026-01-11",
        "2026-01-10",
    ]


def test_list_without_bounds_is_most_recent_first(
    record_store: RecordStore, session: SessionContext
) -> None:
    for date in ("2026-02-01", "2025-12-31", "2026-01-15"):
        record_store.save(make_record(date), session)

    dates = [record.date for record in record_store.list_records(session)]

    assert dates == ["2026-02-01", "2026-01-15", "2025-12-31"]


def test_corrupted_file_degrades_without_blocking_others(
    record_store: RecordStore, session: SessionContext
) -> None:
    record_store.save(make_record("2026-01-10"), session)
    record_store.save(make_record("2026-01-12"), session)
    (_daily_dir(record_store) / "2026-01-11.md").write_text(
        "---\ndate: '2026-01-11'\nencrypted: true\n---\ngarbage\n", encoding="utf-8"
    )

    records = record_store.list_records(session)

    assert [record.date for record in records] == [
        "2026-01-12",
        "2026-01-11",
        "2026-01-10",
    ]
    assert isinstance(records[1], UnreadableRecord)
    assert isinstance(records[0], DailyRecord)


def test_wrong_password_yields_unreadable_records(
    record_store: RecordStore, session: SessionContext
) -> None:
    record_store.save(make_record("2026-01-10"), session)

    records = record_store.list_records(SessionContext(password="wrong"))

    assert records == [
        UnreadableRecord(date="2026-01-10", reason="Unable to decrypt entry")
    ]


def test_invalid_record_never_reaches_disk(
    record_store: RecordStore, session: SessionContext
) -> None:
    raw = make_record("2026-01-10")
    raw["water"] = {"glasses": 51, "ounces": 0}

    with pytest.raises(ValidationError) as exc_info:
        record_store.save(raw, session)

    assert exc_info.value.fields == ["water.glasses"]
    assert list(_daily_dir(record_store).iterdir()) == []


def test_failed_write_leaves_no_partial_files(
    record_store: RecordStore, session: SessionContext, monkeypatch
) -> None:
    record_store.save(make_record("2026-01-10", notes="original"), session)

    def fail_replace(src, dst) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("calorie_store.adapters.files.os.replace", fail_replace)

    with pytest.raises(StorageUnavailable):
        record_store.save(make_record("2026-01-10", notes="update"), session)

    monkeypatch.undo()
    assert [path.name for path in _daily_dir(record_store).iterdir()] == [
        "2026-01-10.md"
    ]
    assert record_store.get("2026-01-10", session).notes == "original"


def test_get_rejects_malformed_dates(
    record_store: RecordStore, session: SessionContext
) -> None:
    with pytest.raises(ValidationError):
        record_store.get("../app-data", session)
    with pytest.raises(ValidationError):
        record_store.delete("2026-13-01")


def test_unexpected_files_are_ignored(
    record_store: RecordStore, session: SessionContext
) -> None:
    record_store.save(make_record("2026-01-10"), session)
    (_daily_dir(record_store) / "README.md").write_text("hello", encoding="utf-8")
    (_daily_dir(record_store) / "2026-01-11.txt").write_text("hello", encoding="utf-8")

    assert [record.date for record in record_store.list_records(session)] == [
        "2026-01-10"
    ]


def test_plaintext_mode_without_session(record_store: RecordStore) -> None:
    record_store.save(make_record("2026-01-10", notes="plain"), None)

    text = (_daily_dir(record_store) / "2026-01-10.md").read_text(encoding="utf-8")

    assert "encrypted: false" in text
    assert '"notes": "plain"' in text
    assert record_store.get("2026-01-10", None).notes == "plain"


def test_unreadable_file_degrades_in_memory(
    memory_store: RecordStore, session: SessionContext
) -> None:
    memory_store.save(make_record("2026-01-10"), session)
    memory_store.save(make_record("2026-01-11"), session)
    repository = memory_store.repository
    assert isinstance(repository, InMemoryRecordRepository)
    repository.unreadable.add("2026-01-11")

    records = memory_store.list_records(session)

    assert records[0] == UnreadableRecord(
        date="2026-01-11", reason="Unable to read entry file"
    )
    assert isinstance(records[1], DailyRecord)


def test_file_name_is_the_record_identity(
    record_store: RecordStore, session: SessionContext
) -> None:
    record_store.save(make_record("2026-01-11"), session)
    daily = _daily_dir(record_store)
    (daily / "2026-01-10.md").write_text(
        (daily / "2026-01-11.md").read_text(encoding="utf-8"), encoding="utf-8"
    )

    stored = record_store.get("2026-01-10", session)
    records = record_store.list_records(session)

    assert stored == UnreadableRecord(
        date="2026-01-10", reason="Record date does not match its file name"
    )
    assert [record.date for record in records] == ["2026-01-11", "2026-01-10"]
    assert isinstance(records[0], DailyRecord)


def test_empty_bounds_mean_no_bound(
    record_store: RecordStore, session: SessionContext
) -> None:
    for date in ("2026-01-09", "2026-01-12"):
        record_store.save(make_record(date), session)

    records = record_store.list_records(session, "", "")

    assert [record.date for record in records] == ["2026-01-12", "2026-01-09"]
