"""SQLite connection helpers for the account store.

Opens the backing file with owner-only permissions, configures WAL so that
readers get a stable snapshot while a single writer commits, and keeps a small
pool of read-only connections that queries borrow from.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import aiosqlite

from .exceptions import StoreError

FILE_MODE = 0o600

logger = logging.getLogger(__name__)


def ensure_store_file(path: str) -> None:
    """Create the store file with mode 0600 if it does not exist yet."""
    fd = os.open(path, os.O_RDWR | os.O_CREAT, FILE_MODE)
    os.close(fd)


async def connect(path: str, *, timeout: float, read_only: bool = False) -> aiosqlite.Connection:
    """Open one connection in autocommit mode; transactions are issued explicitly."""
    conn = await aiosqlite.connect(path, timeout=timeout, isolation_level=None)
    try:
        if read_only:
            await conn.execute("PRAGMA query_only = ON;")
        else:
            await conn.execute("PRAGMA journal_mode = WAL;")
        # Touch the schema so a corrupt or foreign file fails here.
        cursor = await conn.execute("SELECT count(*) FROM sqlite_master;")
        await cursor.fetchone()
        await cursor.close()
    except BaseException:
        await conn.close()
        raise
    return conn


class ReaderPool:
    """Fixed-size pool of read-only connections."""

    def __init__(self, path: str, size: int, timeout: float):
        self.path = path
        self.size = size
        self.timeout = timeout
        self._queue: Optional[asyncio.Queue[aiosqlite.Connection]] = None
        self._connections: List[aiosqlite.Connection] = []

    @property
    def is_open(self) -> bool:
        return self._queue is not None

    async def open(self) -> None:
        queue: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=self.size)
        try:
            for i in range(self.size):
                conn = await connect(self.path, timeout=self.timeout, read_only=True)
                self._connections.append(conn)
                await queue.put(conn)
                logger.debug("Opened reader connection %d/%d", i + 1, self.size)
        except BaseException:
            await self.close()
            raise
        self._queue = queue
        logger.info("Reader pool initialized with size %d", self.size)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a reader connection.

        Usage:
            async with pool.acquire() as conn:
                await conn.execute(...)
        """
        if self._queue is None:
            raise StoreError("Reader pool is not open")
        queue = self._queue
        try:
            conn = await asyncio.wait_for(queue.get(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error("Timed out waiting for a reader connection")
            raise StoreError("Timed out waiting for a reader connection") from None

        start_time = time.monotonic()
        try:
            yield conn
        finally:
            logger.debug("Reader connection held for %.3f seconds", time.monotonic() - start_time)
            queue.put_nowait(conn)

    async def close(self) -> None:
        """Close every connection and reset the pool."""
        connections, self._connections = self._connections, []
        self._queue = None
        for conn in connections:
            try:
                await conn.close()
            except aiosqlite.Error as exc:  # pragma: no cover - cleanup best effort
                logger.warning("Error closing reader connection: %s", exc)
