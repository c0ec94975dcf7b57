"""
共享连接：懒加载、同一句柄、显式关闭
"""
import threading
from unittest.mock import MagicMock

import pytest
from sqlalchemy import text
from sqlalchemy.exc import ArgumentError, OperationalError

from library_data.config import Settings
from library_data import connection as connection_module
from library_data.connection import ConnectionFactory


@pytest.fixture
def sqlite_settings(tmp_path):
    return Settings(database_url_raw=f"sqlite:///{tmp_path / 'shared.db'}", env="test")


@pytest.fixture
def factory(sqlite_settings):
    provider = ConnectionFactory(sqlite_settings)
    yield provider
    provider.close()


def test_returns_same_handle(factory):
    first = factory.create_connection()
    second = factory.create_connection()

    assert first is second
    assert first.execute(text("SELECT 1")).scalar_one() == 1


def test_connection_has_foreign_keys_enabled(factory):
    conn = factory.create_connection()
    assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1


def test_close_releases_and_next_call_opens_new_handle(factory):
    first = factory.create_connection()
    factory.close()

    assert first.closed
    second = factory.create_connection()
    assert second is not first
    assert not second.closed


def test_close_without_open_is_noop(sqlite_settings):
    provider = ConnectionFactory(sqlite_settings)
    provider.close()
    provider.close()


def test_concurrent_first_calls_share_one_handle(factory):
    results = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        results.append(factory.create_connection())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 8
    assert all(conn is results[0] for conn in results)


def test_named_connection_read_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("CONNECTION_STRING_REPORTING", f"sqlite:///{tmp_path / 'reporting.db'}")
    provider = ConnectionFactory(Settings(env="test"), name="Reporting")
    try:
        conn = provider.create_connection()
        assert provider.name == "Reporting"
        assert conn.engine.url.database.endswith("reporting.db")
    finally:
        provider.close()


def test_unknown_connection_name_raises(monkeypatch):
    monkeypatch.delenv("CONNECTION_STRING_MISSING", raising=False)
    provider = ConnectionFactory(Settings(env="test"), name="Missing")

    with pytest.raises(RuntimeError, match="Missing"):
        provider.create_connection()


def test_malformed_url_raises_on_first_use():
    provider = ConnectionFactory(Settings(database_url_raw="not a database url", env="test"))

    with pytest.raises(ArgumentError):
        provider.create_connection()


def test_failed_connect_disposes_engine(monkeypatch, sqlite_settings):
    fake_engine = MagicMock()
    fake_engine.connect.side_effect = OperationalError("connect", {}, Exception("unreachable"))
    monkeypatch.setattr(connection_module, "create_engine", lambda url, **kw: fake_engine)
    provider = ConnectionFactory(sqlite_settings)

    with pytest.raises(OperationalError):
        provider.create_connection()

    fake_engine.dispose.assert_called_once()
    assert provider._engine is None
    assert provider._connection is None
