"""
This file contains shared fixtures for the test suite.
"""

import os

import pytest
import pytest_asyncio

# Set env vars before any application modules are imported
os.environ.setdefault("TEST_MODE", "1")
os.environ.setdefault("PYTHONIOENCODING", "utf-8")

from accountservice.db import AccountStore


@pytest.fixture
def store_path(tmp_path):
    """Path of a fresh store file, unique per test."""
    return str(tmp_path / "accounts.db")


@pytest_asyncio.fixture
async def store(store_path):
    """An opened store without a bucket."""
    account_store = AccountStore(store_path, timeout=5.0, reader_pool_size=2)
    await account_store.open()
    yield account_store
    await account_store.close()


@pytest_asyncio.fixture
async def initialized_store(store):
    """An opened store with an empty account bucket."""
    await store.initialize_bucket()
    return store


@pytest_asyncio.fixture
async def seeded_store(initialized_store):
    """An opened store holding the 100 default fake accounts."""
    await initialized_store.seed_accounts(100)
    return initialized_store
