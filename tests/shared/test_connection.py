"""Tests for shared/connection.py."""

import asyncio
import json
import time

import pytest

from shared.connection import (
    ConnectionConfig,
    ConnectionConfigCache,
    ConnectionMonitor,
    ConnectionStatus,
    check_connection,
)

from fakes import FakeSupabase, backend_error


class TestCheckConnection:
    def test_connected(self):
        assert check_connection(FakeSupabase()).connected is True

    def test_failure_is_reported_not_raised(self):
        db = FakeSupabase()
        db.fail("trainers", error=backend_error("Failed to fetch"))
        result = check_connection(db)
        assert result.connected is False
        assert result.error == "Failed to fetch"


class TestConnectionConfig:
    def test_from_settings_truncates_key(self, settings):
        config = ConnectionConfig.from_settings(settings)
        assert config.url == "https://fake.supabase.co"
        assert config.key_prefix == settings.supabase_anon_key[:20]
        assert config.has_service_role is True


class TestConnectionConfigCache:
    def test_store_and_retrieve(self, tmp_path):
        cache = ConnectionConfigCache(tmp_path / "config.json")
        cache.store(ConnectionConfig(url="https://a.supabase.co", key_prefix="abc"))
        config = cache.retrieve()
        assert config.url == "https://a.supabase.co"

    def test_missing_file(self, tmp_path):
        assert ConnectionConfigCache(tmp_path / "none.json").retrieve() is None

    def test_expired_entry_is_discarded(self, tmp_path):
        path = tmp_path / "config.json"
        stale = ConnectionConfig(url="https://a.supabase.co", timestamp=time.time() - 25 * 3600)
        path.write_text(stale.model_dump_json())

        cache = ConnectionConfigCache(path, ttl_hours=24)
        assert cache.retrieve() is None
        assert not path.exists()

    def test_corrupt_entry(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        assert ConnectionConfigCache(path).retrieve() is None

    def test_round_trips_json(self, tmp_path):
        path = tmp_path / "config.json"
        ConnectionConfigCache(path).store(ConnectionConfig(url="https://b.supabase.co"))
        assert json.loads(path.read_text())["url"] == "https://b.supabase.co"


class TestConnectionMonitor:
    @pytest.mark.asyncio
    async def test_check_now_updates_status_and_cache(self, tmp_path):
        cache = ConnectionConfigCache(tmp_path / "config.json")
        monitor = ConnectionMonitor(
            FakeSupabase(),
            cache=cache,
            config=ConnectionConfig(url="https://a.supabase.co"),
        )
        assert monitor.status == ConnectionStatus.CHECKING

        result = await monitor.check_now()

        assert result.connected
        assert monitor.status == ConnectionStatus.CONNECTED
        assert cache.retrieve() is not None

    @pytest.mark.asyncio
    async def test_failed_probe_notifies_listeners(self, tmp_path):
        db = FakeSupabase()
        db.fail("trainers")
        cache = ConnectionConfigCache(tmp_path / "config.json")
        monitor = ConnectionMonitor(db, cache=cache, config=ConnectionConfig(url="https://a.supabase.co"))
        seen = []
        unsubscribe = monitor.subscribe(seen.append)

        await monitor.check_now()
        unsubscribe()
        await monitor.check_now()

        assert monitor.status == ConnectionStatus.ERROR
        assert len(seen) == 1
        assert cache.retrieve() is None

    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        monitor = ConnectionMonitor(FakeSupabase(), interval=60)
        monitor.start()
        assert monitor.running
        await monitor.stop()
        assert not monitor.running

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_stop_polling(self):
        monitor = ConnectionMonitor(FakeSupabase(), interval=0.01)
        seen = []

        def broken(result):
            raise RuntimeError("listener bug")

        monitor.subscribe(broken)
        monitor.subscribe(seen.append)
        monitor.start()
        await asyncio.sleep(0.1)

        assert monitor.running
        assert monitor.status == ConnectionStatus.CONNECTED
        assert len(seen) > 1
        await monitor.stop()
