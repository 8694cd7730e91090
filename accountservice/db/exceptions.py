"""Errors raised by the account store."""

from __future__ import annotations


class StoreError(Exception):
    """Base class for every error raised by the store layer."""


class FatalOpenError(StoreError):
    """The backing file could not be opened. The process cannot continue."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Cannot open account store at {path!r}: {reason}")


class StoreNotOpenError(StoreError):
    """A data operation was attempted on a store that is not open."""


class BucketInitError(StoreError):
    """Creating the account bucket failed. Safe to retry."""


class BucketMissingError(StoreError):
    """The account bucket does not exist yet."""


class AccountNotFoundError(StoreError):
    """No account is stored under the requested id."""

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"No account found for {account_id}")


class AccountDecodeError(StoreError):
    """Stored bytes for an id do not parse as an Account."""

    def __init__(self, account_id: str, reason: str):
        self.account_id = account_id
        super().__init__(f"Stored value for account {account_id} is not a valid account: {reason}")


class WriteError(StoreError):
    """A single write transaction failed."""

    def __init__(self, account_id: str, reason: str):
        self.account_id = account_id
        super().__init__(f"Failed to write account {account_id}: {reason}")
