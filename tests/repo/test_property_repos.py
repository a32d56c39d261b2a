"""Tests for the property stores.

Every store is exercised through the same PropertyRepo contract; file and
SQL stores additionally get persistence checks across instances.
"""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from fintrack.api.schemas import PropertyCreate
from fintrack.config import Settings
from fintrack.models.property import RepriceSnapshot
from fintrack.repo.base import PropertyRepo
from fintrack.repo.factory import create_repo
from fintrack.repo.file import FileRepo
from fintrack.repo.memory import MemoryRepo
from fintrack.repo.sql import SqlRepo

SNAPSHOT_TIME = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


def _build(kind: str, tmp_path):
    if kind == "memory":
        return MemoryRepo()
    if kind == "file":
        return FileRepo(str(tmp_path / "store.json"))
    return SqlRepo(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")


@pytest.fixture(params=["memory", "file", "sql"])
async def repo(request, tmp_path):
    store = _build(request.param, tmp_path)
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def snapshot():
    return RepriceSnapshot(
        balance=Decimal("450000"),
        rate_pct=Decimal("3.25"),
        months=240,
        unit="years",
        locked_at=SNAPSHOT_TIME,
        start_date=date(2025, 4, 1),
        valid_until=date(2025, 6, 30),
    )


class TestPropertyRepoContract:
    async def test_satisfies_protocol(self, repo):
        assert isinstance(repo, PropertyRepo)

    async def test_empty(self, repo):
        assert await repo.list_properties() == []
        assert await repo.get_property("missing") is None
        assert await repo.get_snapshot("missing") is None

    async def test_save_and_get(self, repo, staged_property):
        await repo.save_property(staged_property)
        loaded = await repo.get_property("condo-1")

        assert loaded is not None
        assert loaded.name == "Riverside Condo"
        assert loaded.purchase_price == Decimal("1000000")
        assert loaded.interest_rate == Decimal("0.035")
        assert loaded.loan_start == date(2026, 7, 1)
        assert loaded.disbursement_schedule == staged_property.disbursement_schedule

    async def test_request_precision_round_trips_exactly(self, repo):
        prop = PropertyCreate(
            id="flat-9",
            name="Harbour Flat",
            purchase_price=Decimal("123456789012.34"),
            down_payment=Decimal("0.01"),
            loan_principal=Decimal("987654.32"),
            interest_rate=Decimal("12.345678"),
            current_value=Decimal("1234567.89"),
            monthly_payment=Decimal("9999999999.99"),
            purchase_date=date(2024, 5, 31),
        ).to_property("flat-9")

        await repo.save_property(prop)
        assert await repo.get_property("flat-9") == prop

    async def test_rate_schedule_round_trip(self, repo, repriced_property):
        await repo.save_property(repriced_property)
        loaded = await repo.get_property("house-2")
        assert loaded.rate_schedule == repriced_property.rate_schedule

    async def test_save_replaces(self, repo, completed_property):
        await repo.save_property(completed_property)
        await repo.save_property(
            completed_property.model_copy(update={"current_value": Decimal("600000")})
        )
        props = await repo.list_properties()
        assert len(props) == 1
        assert props[0].current_value == Decimal("600000")

    async def test_list(self, repo, staged_property, completed_property):
        await repo.save_property(staged_property)
        await repo.save_property(completed_property)
        ids = {p.id for p in await repo.list_properties()}
        assert ids == {"condo-1", "house-1"}

    async def test_delete(self, repo, staged_property, completed_property):
        await repo.save_property(staged_property)
        await repo.save_property(completed_property)
        await repo.delete_property("condo-1")
        assert await repo.get_property("condo-1") is None
        assert [p.id for p in await repo.list_properties()] == ["house-1"]

    async def test_delete_missing_is_noop(self, repo):
        await repo.delete_property("missing")
        await repo.delete_snapshot("missing")

    async def test_snapshot_round_trip(self, repo, completed_property, snapshot):
        await repo.save_property(completed_property)
        await repo.save_snapshot("house-1", snapshot)
        loaded = await repo.get_snapshot("house-1")
        assert loaded == snapshot
        assert loaded.tenor == 20

    async def test_snapshot_replaced(self, repo, completed_property, snapshot):
        await repo.save_property(completed_property)
        await repo.save_snapshot("house-1", snapshot)
        await repo.save_snapshot("house-1", snapshot.model_copy(update={"rate_pct": Decimal("2.9")}))
        loaded = await repo.get_snapshot("house-1")
        assert loaded.rate_pct == Decimal("2.9")

    async def test_delete_snapshot(self, repo, completed_property, snapshot):
        await repo.save_property(completed_property)
        await repo.save_snapshot("house-1", snapshot)
        await repo.delete_snapshot("house-1")
        assert await repo.get_snapshot("house-1") is None
        assert await repo.get_property("house-1") is not None

    async def test_delete_property_drops_snapshot(self, repo, completed_property, snapshot):
        await repo.save_property(completed_property)
        await repo.save_snapshot("house-1", snapshot)
        await repo.delete_property("house-1")
        assert await repo.get_snapshot("house-1") is None


class TestFileRepo:
    async def test_persists_across_instances(self, tmp_path, staged_property, snapshot):
        path = tmp_path / "nested" / "store.json"
        first = FileRepo(str(path))
        await first.initialize()
        await first.save_property(staged_property)
        await first.save_snapshot("condo-1", snapshot)

        assert path.exists()

        second = FileRepo(str(path))
        await second.initialize()
        assert await second.get_property("condo-1") == staged_property
        assert await second.get_snapshot("condo-1") == snapshot

    async def test_corrupt_file_starts_empty(self, tmp_path, caplog):
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")

        store = FileRepo(str(path))
        with caplog.at_level(logging.WARNING, logger="fintrack.repo.file"):
            await store.initialize()

        assert await store.list_properties() == []
        assert "Unreadable store" in caplog.text

    async def test_invalid_record_starts_empty(self, tmp_path, caplog):
        path = tmp_path / "store.json"
        path.write_text('{"properties": [{"id": "x"}]}', encoding="utf-8")

        store = FileRepo(str(path))
        with caplog.at_level(logging.WARNING, logger="fintrack.repo.file"):
            await store.initialize()

        assert await store.list_properties() == []
        assert "Unreadable store" in caplog.text


class TestSqlRepo:
    async def test_persists_across_engines(self, tmp_path, repriced_property, snapshot):
        url = f"sqlite+aiosqlite:///{tmp_path / 'fintrack.db'}"
        first = SqlRepo(url)
        await first.initialize()
        await first.save_property(repriced_property)
        await first.save_snapshot("house-2", snapshot)
        await first.close()

        second = SqlRepo(url)
        await second.initialize()
        try:
            loaded = await second.get_property("house-2")
            assert loaded.rate_schedule == repriced_property.rate_schedule
            assert loaded.purchase_date == date(2020, 1, 15)
            assert await second.get_snapshot("house-2") == snapshot
        finally:
            await second.close()


class TestCreateRepo:
    async def test_memory_default(self, monkeypatch):
        monkeypatch.delenv("DATA_STORE", raising=False)
        store = await create_repo(Settings(_env_file=None))
        assert isinstance(store, MemoryRepo)

    async def test_file(self, tmp_path):
        store = await create_repo(
            Settings(_env_file=None, data_store="file", data_file=str(tmp_path / "s.json"))
        )
        assert isinstance(store, FileRepo)

    async def test_sql(self, tmp_path):
        store = await create_repo(Settings(
            _env_file=None,
            data_store="sql",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 's.db'}",
        ))
        try:
            assert isinstance(store, SqlRepo)
            assert await store.list_properties() == []
        finally:
            await store.close()

    async def test_unknown_falls_back_to_memory(self, caplog):
        with caplog.at_level(logging.WARNING, logger="fintrack.repo.factory"):
            store = await create_repo(Settings(_env_file=None, data_store="redis"))
        assert isinstance(store, MemoryRepo)
        assert "Unknown data store" in caplog.text
