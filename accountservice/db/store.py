"""Account store backed by a single embedded SQLite file.

The file holds one bucket, ``AccountBucket``: a ``WITHOUT ROWID`` table that
maps a byte key to a byte value, ordered by key. Values are the JSON encoding
of :class:`~accountservice.db.models.Account`.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

import aiosqlite
from pydantic import ValidationError

from .connection import ReaderPool, connect, ensure_store_file
from .exceptions import (
    AccountDecodeError,
    AccountNotFoundError,
    BucketInitError,
    BucketMissingError,
    FatalOpenError,
    StoreError,
    StoreNotOpenError,
    WriteError,
)
from .models import Account, SeedResult

if TYPE_CHECKING:
    from accountservice.config import DatabaseSettings

ACCOUNT_BUCKET = "AccountBucket"
SEED_KEY_BASE = 10000

logger = logging.getLogger(__name__)


class AccountStore:
    """Transactional access to account records in one store file."""

    def __init__(self, path: str, *, timeout: float = 30.0, reader_pool_size: int = 4):
        self.path = path
        self.timeout = timeout
        self._writer: Optional[aiosqlite.Connection] = None
        self._readers = ReaderPool(path, reader_pool_size, timeout)
        self._write_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: "DatabaseSettings") -> "AccountStore":
        return cls(settings.path, timeout=settings.timeout, reader_pool_size=settings.reader_pool_size)

    async def __aenter__(self) -> "AccountStore":
        await self.open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def open(self) -> None:
        """Open the backing file. Raises FatalOpenError on any failure."""
        if self._writer is not None:
            raise StoreError(f"Account store at {self.path!r} is already open")
        try:
            ensure_store_file(self.path)
            writer = await connect(self.path, timeout=self.timeout)
        except (OSError, aiosqlite.Error) as exc:
            logger.error("Failed to open account store %s: %s", self.path, exc)
            raise FatalOpenError(self.path, str(exc)) from exc
        try:
            await self._readers.open()
        except (OSError, aiosqlite.Error) as exc:
            await writer.close()
            logger.error("Failed to open reader pool for %s: %s", self.path, exc)
            raise FatalOpenError(self.path, str(exc)) from exc
        self._writer = writer
        logger.info("Opened account store %s", self.path)

    async def close(self) -> None:
        """Release every connection. Calling it twice is harmless."""
        await self._readers.close()
        writer, self._writer = self._writer, None
        if writer is not None:
            await writer.close()
            logger.info("Closed account store %s", self.path)

    def check_health(self) -> bool:
        """Naive liveness check: the store handle has been opened."""
        return self._writer is not None

    @asynccontextmanager
    async def _update(self) -> AsyncIterator[aiosqlite.Connection]:
        """Read-write transaction on the single writer connection."""
        if self._writer is None:
            raise StoreNotOpenError(f"Account store at {self.path!r} is not open")
        conn = self._writer
        async with self._write_lock:
            await conn.execute("BEGIN IMMEDIATE;")
            try:
                yield conn
            except BaseException:
                try:
                    await conn.execute("ROLLBACK;")
                except aiosqlite.Error as exc:
                    logger.warning("Rollback failed on %s: %s", self.path, exc)
                raise
            await conn.execute("COMMIT;")

    @asynccontextmanager
    async def _view(self) -> AsyncIterator[aiosqlite.Connection]:
        """Read-only transaction on a pooled reader connection."""
        if self._writer is None:
            raise StoreNotOpenError(f"Account store at {self.path!r} is not open")
        async with self._readers.acquire() as conn:
            await conn.execute("BEGIN;")
            try:
                yield conn
            except BaseException:
                try:
                    await conn.execute("COMMIT;")
                except aiosqlite.Error as exc:
                    logger.warning("Failed to end read transaction on %s: %s", self.path, exc)
                raise
            await conn.execute("COMMIT;")

    @staticmethod
    def _encode_key(account_id: str) -> bytes:
        try:
            return account_id.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ValueError(f"account id {account_id!r} is not valid UTF-8 text") from exc

    @staticmethod
    async def _bucket_exists(conn: aiosqlite.Connection) -> bool:
        cursor = await conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?;",
            (ACCOUNT_BUCKET,),
        )
        row = await cursor.fetchone()
        await cursor.close()
        return row is not None

    async def initialize_bucket(self) -> None:
        """Drop and recreate the account bucket. Any existing records are lost."""
        try:
            async with self._update() as conn:
                await conn.execute(f'DROP TABLE IF EXISTS "{ACCOUNT_BUCKET}";')
                await conn.execute(
                    f'CREATE TABLE "{ACCOUNT_BUCKET}" ('
                    "key BLOB PRIMARY KEY, value BLOB NOT NULL"
                    ") WITHOUT ROWID;"
                )
        except aiosqlite.Error as exc:
            raise BucketInitError(f"create bucket failed: {exc}") from exc
        logger.info("Initialized bucket %s", ACCOUNT_BUCKET)

    async def query_account(self, account_id: str) -> Account:
        """Look up one account by id."""
        if not isinstance(account_id, str) or not account_id:
            raise ValueError("account_id must be a non-empty string")
        key = self._encode_key(account_id)
        try:
            async with self._view() as conn:
                if not await self._bucket_exists(conn):
                    raise BucketMissingError(f"Bucket {ACCOUNT_BUCKET} does not exist")
                cursor = await conn.execute(
                    f'SELECT value FROM "{ACCOUNT_BUCKET}" WHERE key = ?;',
                    (key,),
                )
                row = await cursor.fetchone()
                await cursor.close()
        except aiosqlite.Error as exc:
            raise StoreError(f"Read of account {account_id} failed: {exc}") from exc

        if row is None:
            raise AccountNotFoundError(account_id)
        try:
            return Account.from_bytes(row[0])
        except ValidationError as exc:
            raise AccountDecodeError(account_id, str(exc)) from exc

    async def put_account(self, account: Account) -> None:
        """Write one account under its id in its own transaction."""
        key = self._encode_key(account.id)
        value = account.to_bytes()
        try:
            async with self._update() as conn:
                if not await self._bucket_exists(conn):
                    raise BucketMissingError(f"Bucket {ACCOUNT_BUCKET} does not exist")
                await conn.execute(
                    f'INSERT OR REPLACE INTO "{ACCOUNT_BUCKET}" (key, value) VALUES (?, ?);',
                    (key, value),
                )
        except aiosqlite.Error as exc:
            raise WriteError(account.id, str(exc)) from exc

    async def seed_accounts(self, count: int, *, strict: bool = False) -> SeedResult:
        """
        Seed ``count`` make-believe accounts, one transaction per record.

        A failed write is logged and skipped unless ``strict`` is set, in which
        case it is raised and the records written so far are kept.
        """
        if count < 0:
            raise ValueError("count must not be negative")
        try:
            async with self._view() as conn:
                if not await self._bucket_exists(conn):
                    raise BucketMissingError(f"Bucket {ACCOUNT_BUCKET} does not exist")
        except aiosqlite.Error as exc:
            raise StoreError(f"Bucket check failed: {exc}") from exc

        result = SeedResult(requested=count)
        for i in range(count):
            key = str(SEED_KEY_BASE + i)
            try:
                await self.put_account(Account(id=key, name=f"Person_{i}"))
            except (WriteError, BucketMissingError) as exc:
                if strict:
                    raise
                logger.exception("Failed to seed account %s: %s", key, exc)
                result.failed.append(key)
                continue
            result.written += 1

        logger.info("Seeded %d fake accounts...", result.written)
        return result

    async def seed(self, count: int = 100, *, strict: bool = False) -> SeedResult:
        """Reset the bucket and fill it with ``count`` fake accounts."""
        await self.initialize_bucket()
        return await self.seed_accounts(count, strict=strict)
