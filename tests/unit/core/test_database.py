"""Unit tests for notekeeper.core.database."""

from sqlalchemy.pool import StaticPool

from notekeeper.core.database import create_engine, is_single_connection


class TestCreateEngine:
    """Tests for engine construction per store type."""

    async def test_memory_store_shares_one_connection(self):
        engine = create_engine("sqlite+aiosqlite:///:memory:")
        try:
            assert isinstance(engine.pool, StaticPool)
            assert is_single_connection(engine)
        finally:
            await engine.dispose()

    async def test_file_store_uses_pooled_connections(self, tmp_path):
        engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}")
        try:
            assert not is_single_connection(engine)
            assert engine.dialect.name == "sqlite"
        finally:
            await engine.dispose()

    async def test_echo_is_passed_through(self):
        engine = create_engine("sqlite+aiosqlite:///:memory:", echo=True)
        try:
            assert engine.echo is True
        finally:
            await engine.dispose()
