# =============================================================================
# tests/test_storage_select.py - Backend Selection Tests
# =============================================================================
# Covers DB_TYPE resolution and the fallback chain. The database backends are
# replaced with in-memory stand-ins so no server is needed.
#
# Run with: pytest tests/test_storage_select.py -v
# =============================================================================

import pytest

from app.config import Settings
from lib.storage import MemoryStorage, Storage, select
from lib.storage.select import create_storage, resolve_database_type


def make_settings(**overrides):
    values = {"DB_TYPE": "auto", "DATABASE_URL": None, "MYSQL_DATABASE": None}
    values.update(overrides)
    return Settings(**values)


class FakePostgres(MemoryStorage):
    """Reachable database stand-in."""

    name = "postgres"

    def __init__(self, url, connect_timeout=3, seed_default_categories=True):
        super().__init__(seed_default_categories=seed_default_categories)
        self.url = url


class FakeMySql(FakePostgres):
    name = "mysql"


class DownPostgres(FakePostgres):
    """Database stand-in whose schema setup fails."""

    def create_schema(self):
        raise ConnectionError("connection refused")


class DownMySql(FakeMySql):
    def check_availability(self):
        return False


@pytest.fixture
def backends(monkeypatch):
    """Swap the SQL backends for stand-ins; returns a setter for tests."""
    def use(postgres=FakePostgres, mysql=FakeMySql):
        monkeypatch.setattr(select, "PostgresStorage", postgres)
        monkeypatch.setattr(select, "MySqlStorage", mysql)

    use()
    return use


class TestResolveDatabaseType:
    """Tests for resolve_database_type()."""

    def test_explicit_type_wins(self):
        settings = make_settings(DB_TYPE="mysql", DATABASE_URL="postgres://db/shop")
        assert resolve_database_type(settings) == "mysql"

    def test_auto_prefers_postgres(self):
        settings = make_settings(DATABASE_URL="postgres://db/shop", MYSQL_DATABASE="shop")
        assert resolve_database_type(settings) == "postgres"

    def test_auto_then_mysql(self):
        assert resolve_database_type(make_settings(MYSQL_DATABASE="shop")) == "mysql"

    def test_auto_defaults_to_memory(self):
        assert resolve_database_type(make_settings()) == "memory"


class TestCreateStorage:
    """Tests for create_storage() and its fallbacks."""

    def test_memory(self, backends):
        storage = create_storage(make_settings(DB_TYPE="memory"))

        assert storage.name == "memory"
        assert len(storage.list_categories()) == 7

    def test_seeding_follows_settings(self, backends):
        storage = create_storage(make_settings(DB_TYPE="memory", SEED_DEFAULT_CATEGORIES=False))
        assert storage.list_categories() == []

    def test_postgres_uses_driver_url(self, backends):
        storage = create_storage(make_settings(DATABASE_URL="postgres://shop@db/shop"))

        assert storage.name == "postgres"
        assert storage.url == "postgresql+psycopg://shop@db/shop"
        assert len(storage.list_categories()) == 7

    def test_postgres_without_url_falls_back(self, backends):
        assert create_storage(make_settings(DB_TYPE="postgres")).name == "memory"

    def test_postgres_down_falls_back_to_memory(self, backends):
        backends(postgres=DownPostgres)
        storage = create_storage(make_settings(DATABASE_URL="postgres://db/shop"))
        assert storage.name == "memory"

    def test_mysql(self, backends):
        storage = create_storage(make_settings(MYSQL_DATABASE="shop"))

        assert storage.name == "mysql"
        assert storage.url.startswith("mysql+pymysql://")

    def test_mysql_down_falls_back_to_postgres(self, backends):
        backends(mysql=DownMySql)
        storage = create_storage(make_settings(DB_TYPE="mysql", DATABASE_URL="postgres://db/shop"))
        assert storage.name == "postgres"

    def test_mysql_down_falls_back_to_memory(self, backends):
        backends(mysql=DownMySql)
        storage = create_storage(make_settings(DB_TYPE="mysql", MYSQL_DATABASE="shop"))
        assert storage.name == "memory"

    def test_mysql_and_postgres_down(self, backends):
        backends(postgres=DownPostgres, mysql=DownMySql)
        storage = create_storage(make_settings(DB_TYPE="mysql", DATABASE_URL="postgres://db/shop"))
        assert storage.name == "memory"


class TestProcessWideStorage:
    """Tests for get_storage()/set_storage()/reset_storage()."""

    def test_set_then_get(self):
        storage = MemoryStorage()
        select.set_storage(storage)
        try:
            assert select.get_storage() is storage
        finally:
            select.reset_storage()

    def test_reset_closes(self):
        closed = []

        class Tracking(MemoryStorage):
            def close(self):
                closed.append(True)

        select.set_storage(Tracking())
        select.reset_storage()

        assert closed == [True]
        assert isinstance(select.get_storage(), Storage)
        select.reset_storage()
