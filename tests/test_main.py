"""Tests for the startup/seeding entry point."""

from unittest.mock import AsyncMock, patch

import pytest

import main
from accountservice.config import AppSettings, DatabaseSettings, SeedSettings
from accountservice.db import AccountStore, BucketInitError, WriteError

pytestmark = pytest.mark.asyncio


def _settings(path: str, count: int = 5, strict: bool = False) -> AppSettings:
    return AppSettings(
        log_level="DEBUG",
        db=DatabaseSettings(path=path, timeout=5.0, reader_pool_size=1),
        seed=SeedSettings(count=count, strict=strict),
    )


async def test_main_seeds_store(store_path):
    with patch.object(main, "get_settings", return_value=_settings(store_path, count=7)):
        assert await main.main() == 0

    async with AccountStore(store_path) as store:
        account = await store.query_account("10006")
    assert account.name == "Person_6"


async def test_main_open_failure_exits_with_error(tmp_path, caplog):
    path = str(tmp_path / "missing" / "accounts.db")
    with patch.object(main, "get_settings", return_value=_settings(path)):
        with caplog.at_level("CRITICAL"):
            assert await main.main() == 1
    assert "Cannot open account store" in caplog.text


async def test_main_bucket_init_failure(store_path):
    with patch.object(main, "get_settings", return_value=_settings(store_path)), patch.object(
        AccountStore, "initialize_bucket", AsyncMock(side_effect=BucketInitError("create bucket failed: boom"))
    ):
        assert await main.main() == 1


async def test_main_strict_seed_failure(store_path):
    with patch.object(main, "get_settings", return_value=_settings(store_path, strict=True)), patch.object(
        AccountStore, "put_account", AsyncMock(side_effect=WriteError("10000", "disk full"))
    ):
        assert await main.main() == 1


async def test_main_best_effort_seed_failure_still_succeeds(store_path, caplog):
    with patch.object(main, "get_settings", return_value=_settings(store_path, count=3)), patch.object(
        AccountStore, "put_account", AsyncMock(side_effect=WriteError("x", "disk full"))
    ):
        with caplog.at_level("WARNING"):
            assert await main.main() == 0
    assert "3 of 3 accounts failed to seed" in caplog.text
