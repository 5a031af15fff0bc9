"""Tests for the SQL migration runner."""

import pytest

from shared.migrations import MigrationRunner
from shared.migrations.runner import VERSIONS_DIR

from .fakes import FakePool


@pytest.fixture
def versions(tmp_path):
    (tmp_path / "001_init.sql").write_text("CREATE TABLE a (id INT);", encoding="utf-8")
    (tmp_path / "002_more.sql").write_text("CREATE TABLE b (id INT);", encoding="utf-8")
    return tmp_path


async def test_pending_skips_applied(versions):
    pool = FakePool(fetch=[[{"version": "001_init"}]])
    pending = await MigrationRunner(pool, versions).pending()
    assert [p.stem for p in pending] == ["002_more"]


async def test_run_pending_applies_in_order(versions):
    pool = FakePool(fetch=[[]])

    applied = await MigrationRunner(pool, versions).run_pending()

    assert applied == ["001_init", "002_more"]
    executed = [sql for kind, sql, _ in pool.queries if kind == "execute"]
    assert "CREATE TABLE IF NOT EXISTS schema_migrations" in executed[0]
    assert executed[1] == "CREATE TABLE a (id INT);"
    assert executed[3] == "CREATE TABLE b (id INT);"


async def test_up_to_date(versions):
    pool = FakePool(fetch=[[{"version": "001_init"}, {"version": "002_more"}]])
    assert await MigrationRunner(pool, versions).run_pending() == []


def test_bundled_schema_creates_display_tables():
    sql = (VERSIONS_DIR / "001_queue_display.sql").read_text(encoding="utf-8")
    for table in ("queues", "queue_members", "display_channels", "rank_settings"):
        assert f"CREATE TABLE IF NOT EXISTS {table}" in sql
